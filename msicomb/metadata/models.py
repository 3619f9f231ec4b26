from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ..config import CUBE_FORMAT_VERSION


class CubeMetadata(BaseModel):
    """Provenance stored alongside a persisted image cube"""
    format_version: int = CUBE_FORMAT_VERSION
    cache_key: str
    shape: List[int]  # lines, pixels, mass channels
    pixel_pitch_um: float = Field(gt=0)
    first_pass_direction: Optional[str] = None
    centroided: bool = False
    time_offset_s: float = 0.0
    degenerate_lines: List[float] = []
    config: Dict[str, Any] = {}
    created: datetime = Field(default_factory=datetime.now)
