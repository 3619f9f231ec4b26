# msicomb/storage/cube_store.py

"""
Zarr persistence of reconstructed image cubes.

A cube is stored as a Zarr group with the arrays ``img`` (line x pixel x
mass channel), ``imgX``, ``imgY`` and ``imgZ`` and its provenance in the
group attributes. The provenance includes a key derived from the inputs so
that a stored cube can be reused instead of recomputed.
"""

import hashlib
import logging
from pathlib import Path
from typing import Optional, Tuple, Union

import numpy as np
import zarr

from ..config import CUBE_FORMAT_VERSION, ReconstructionConfig
from ..core.spectra import SpectrumSeries
from ..metadata.models import CubeMetadata
from ..processing.gridding import ImageCube

METADATA_ATTR = "msicomb"


def compute_cache_key(
    series: SpectrumSeries,
    waypoint_file: Union[str, Path],
    timing_file: Union[str, Path],
    config: ReconstructionConfig,
) -> str:
    """
    Derive a key identifying the inputs of a reconstruction.

    The key covers the contents of both path files, every array of the
    spectrum series and the configuration, so any change to them yields a
    different key.
    """
    digest = hashlib.sha256()
    digest.update(f"format={CUBE_FORMAT_VERSION}".encode())
    digest.update(Path(waypoint_file).read_bytes())
    digest.update(b"\0")
    digest.update(Path(timing_file).read_bytes())
    digest.update(b"\0")
    digest.update(np.ascontiguousarray(series.scan_times).tobytes())

    if series.is_centroided:
        for peaks in series.peaks:
            digest.update(np.ascontiguousarray(peaks.mz).tobytes())
            digest.update(np.ascontiguousarray(peaks.intensity).tobytes())
            digest.update(b"|")
    else:
        digest.update(np.ascontiguousarray(series.mz_axis).tobytes())
        digest.update(np.ascontiguousarray(series.intensities).tobytes())

    digest.update(repr(sorted(config.get_summary().items())).encode())
    return digest.hexdigest()


class CubeStore:
    """Read and write an image cube at a Zarr store path."""

    def __init__(self, output_path: Union[str, Path]):
        self.output_path = Path(output_path)

    def exists(self) -> bool:
        return self.output_path.exists()

    def save(self, cube: ImageCube, metadata: CubeMetadata) -> None:
        """
        Write the cube and its metadata, replacing any store at the path.

        Args:
            cube: Reconstructed image cube
            metadata: Provenance to record in the group attributes
        """
        zarr.save_group(
            str(self.output_path),
            img=cube.image,
            imgX=cube.x_axis,
            imgY=cube.y_axis,
            imgZ=cube.mz_axis,
        )
        root = zarr.open_group(str(self.output_path), mode="a")
        root.attrs[METADATA_ATTR] = metadata.model_dump(mode="json")

        logging.info(f"Saved image cube {cube.shape} to {self.output_path}")

    def read_metadata(self) -> Optional[CubeMetadata]:
        """Return the stored metadata, or None if the store has none."""
        root = zarr.open_group(str(self.output_path), mode="r")
        stored = root.attrs.get(METADATA_ATTR)
        if stored is None:
            return None
        return CubeMetadata.model_validate(stored)

    def load(self) -> Tuple[ImageCube, CubeMetadata]:
        """
        Load a stored cube.

        Raises:
            FileNotFoundError: If no store exists at the path
            ValueError: If the store has no cube metadata
        """
        if not self.exists():
            raise FileNotFoundError(f"No image cube at {self.output_path}")

        metadata = self.read_metadata()
        if metadata is None:
            raise ValueError(f"{self.output_path} is not an msicomb image cube")

        root = zarr.open_group(str(self.output_path), mode="r")
        cube = ImageCube(
            image=np.asarray(root["img"][...]),
            x_axis=np.asarray(root["imgX"][...]),
            y_axis=np.asarray(root["imgY"][...]),
            mz_axis=np.asarray(root["imgZ"][...]),
            pixel_pitch=metadata.pixel_pitch_um,
            degenerate_lines=list(metadata.degenerate_lines),
        )
        logging.info(f"Loaded image cube {cube.shape} from {self.output_path}")
        return cube, metadata
