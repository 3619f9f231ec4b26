from .models import CubeMetadata

__all__ = ["CubeMetadata"]
