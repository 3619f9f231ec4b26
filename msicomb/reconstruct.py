# msicomb/reconstruct.py
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

import numpy as np

from .config import ReconstructionConfig
from .core.spectra import SpectrumSeries
from .exceptions import CacheMismatchError
from .metadata.models import CubeMetadata
from .path.comb_path import load_comb_path
from .path.direction import (
    classify_scan_directions,
    detect_first_pass,
    select_first_pass,
)
from .path.positions import estimate_scan_positions
from .processing.gridding import ImageCube, ImageGridder
from .processing.rasterizer import rasterize_spectra
from .processing.report import ReconstructionReport
from .storage.cube_store import CubeStore, compute_cache_key


@dataclass
class ReconstructionResult:
    """Image cube of a run together with its diagnostics."""

    cube: ImageCube
    report: Dict[str, Any]
    from_cache: bool = False
    cube_path: Optional[Path] = None


def _log_reconstruction_summary(report: Dict[str, Any], total_time_sec: float):
    """Log a summary of the reconstruction"""

    logging.info("=" * 60)
    logging.info("RECONSTRUCTION SUMMARY")
    logging.info("=" * 60)

    scans = report["scans"]
    lines = report["lines"]
    image = report["image"]

    logging.info(f"Data type: {'centroided' if report['metadata']['centroided'] else 'profile'}")
    logging.info(
        f"Scans: {scans['total']:,} total, {scans['positioned']:,} positioned, "
        f"{scans['selected']:,} used ({scans['selected_fraction']:.1%})"
    )
    if scans["out_of_range"]:
        logging.info(f"Scans outside stage path: {scans['out_of_range']:,}")
    logging.info(
        f"Lines: {lines['imaged_lines']} imaged of {lines['path_lines']} on the path, "
        f"first pass {lines['first_pass_direction']}"
    )
    if lines["degenerate_lines"]:
        logging.info(f"Zero-filled lines: {lines['degenerate_lines']}")
    logging.info(f"Image cube shape: {image['shape']}")
    logging.info(f"Pixel pitch: {image['pixel_pitch_um']:.3f} um ({image['pitch_source']})")
    logging.info(f"Total reconstruction time: {total_time_sec:.1f} seconds")

    logging.info("=" * 60)


def build_image_cube(
    series: SpectrumSeries,
    waypoint_file: Union[str, Path],
    timing_file: Union[str, Path],
    config: ReconstructionConfig,
    report: ReconstructionReport,
) -> ImageCube:
    """
    Run the reconstruction pipeline on in-memory spectra.

    Args:
        series: Time-ordered spectra of the acquisition
        waypoint_file: Stage waypoint file (six tab-delimited columns)
        timing_file: Stage timing file (three tab-delimited columns, ms)
        config: Reconstruction settings
        report: Report that receives the run's statistics

    Returns:
        ImageCube built from the first pass over each line

    Raises:
        FormatError: If a path file has the wrong number of columns
        LengthMismatchError: If waypoints and timings differ in count
        ValueError: If no scan can be placed on the image
    """
    path = load_comb_path(waypoint_file, timing_file)

    spectra = rasterize_spectra(
        series,
        resolution=config.resolution,
        kernel_width=config.kernel_width,
        show_progress=config.show_progress,
    )

    positions = estimate_scan_positions(series.scan_times, path, config.time_offset_s)
    if positions.n_out_of_range:
        report.add_warning(
            f"{positions.n_out_of_range} scans fall outside the stage path and were ignored"
        )
    if positions.n_valid == 0 or len(positions.lines) == 0:
        raise ValueError(
            f"No scan falls within the stage path (path spans {path.start_time:.2f}-"
            f"{path.duration:.2f} s, clock offset {config.time_offset_s} s)"
        )

    directions = classify_scan_directions(positions.x, positions.y)
    first_pass, motion_agrees = detect_first_pass(directions, positions.x)
    if not motion_agrees:
        report.add_warning(
            f"Initial stage motion does not match first pass direction {first_pass.value}"
        )

    selected = select_first_pass(directions, first_pass, positions.valid)
    logging.info(f"Using {int(np.count_nonzero(selected))} of {series.n_scans} scans")

    gridder = ImageGridder(
        pixel_pitch=config.pixel_pitch_um,
        edge_guard=config.edge_guard_um,
        show_progress=config.show_progress,
    )
    cube = gridder.grid(
        positions.x[selected],
        positions.y[selected],
        spectra.intensities[selected],
        positions.lines,
        spectra.mz_axis,
    )
    for line in cube.degenerate_lines:
        report.add_warning(f"Line y={line:g} had too few scans and was zero-filled")

    report.add_stats(
        {
            "centroided": spectra.centroided,
            "n_scans": series.n_scans,
            "n_positioned": positions.n_valid,
            "n_out_of_range": positions.n_out_of_range,
            "n_left_to_right": int(np.count_nonzero(directions.left_to_right)),
            "n_right_to_left": int(np.count_nonzero(directions.right_to_left)),
            "n_selected": int(np.count_nonzero(selected)),
            "n_path_lines": len(path.lines),
            "n_lines": len(positions.lines),
            "first_pass_direction": first_pass.value,
            "direction_disagreement": not motion_agrees,
            "degenerate_lines": cube.degenerate_lines,
            "shape": list(cube.shape),
            "pixel_pitch_um": cube.pixel_pitch,
            "n_channels": len(cube.mz_axis),
        }
    )
    return cube


def reconstruct_image_cube(
    series: SpectrumSeries,
    waypoint_file: Union[str, Path],
    timing_file: Union[str, Path],
    cube_path: Optional[Union[str, Path]] = None,
    config: Optional[ReconstructionConfig] = None,
    report_path: Optional[Union[str, Path]] = None,
) -> ReconstructionResult:
    """
    Reconstruct the (line, pixel, m/z) image cube of a comb-path acquisition.

    When ``cube_path`` points to a cube previously built from the same inputs
    it is loaded instead of recomputed; otherwise the cube is computed and,
    if ``cube_path`` is given, saved there.

    Args:
        series: Time-ordered spectra of the acquisition
        waypoint_file: Stage waypoint file
        timing_file: Stage timing file
        cube_path: Optional Zarr store used as cache and output
        config: Reconstruction settings (defaults if None)
        report_path: Optional path for a JSON diagnostics report

    Returns:
        ReconstructionResult with the cube and its diagnostics report

    Raises:
        CacheMismatchError: If ``cube_path`` holds a cube built from other inputs
    """
    config = config or ReconstructionConfig()
    report = ReconstructionReport(config.get_summary())
    store = CubeStore(cube_path) if cube_path is not None else None

    cache_key = None
    if store is not None:
        cache_key = compute_cache_key(series, waypoint_file, timing_file, config)
        if store.exists():
            stored = store.read_metadata()
            if stored is None or stored.cache_key != cache_key:
                raise CacheMismatchError(
                    f"Destination {store.output_path} already holds a cube built from "
                    "different inputs; remove it or choose another path"
                )
            logging.info(f"Image cube found at {store.output_path}, skipping reconstruction")
            cube, metadata = store.load()
            report.add_stats(
                {
                    "from_cache": True,
                    "centroided": metadata.centroided,
                    "first_pass_direction": metadata.first_pass_direction,
                    "degenerate_lines": metadata.degenerate_lines,
                    "shape": list(cube.shape),
                    "pixel_pitch_um": cube.pixel_pitch,
                    "n_channels": len(cube.mz_axis),
                    "n_lines": len(cube.y_axis),
                }
            )
            return ReconstructionResult(
                cube=cube,
                report=report.generate_report(report_path),
                from_cache=True,
                cube_path=store.output_path,
            )

    logging.info(f"Making image cube from {series.n_scans} scans: {config.get_summary()}")
    start_time = time.time()
    cube = build_image_cube(series, waypoint_file, timing_file, config, report)
    total_time = time.time() - start_time

    result_report = report.generate_report(report_path)
    _log_reconstruction_summary(result_report, total_time)

    if store is not None:
        store.save(
            cube,
            CubeMetadata(
                cache_key=cache_key,
                shape=list(cube.shape),
                pixel_pitch_um=cube.pixel_pitch,
                first_pass_direction=result_report["lines"]["first_pass_direction"],
                centroided=bool(result_report["metadata"]["centroided"]),
                time_offset_s=config.time_offset_s,
                degenerate_lines=cube.degenerate_lines,
                config=config.get_summary(),
            ),
        )

    return ReconstructionResult(
        cube=cube,
        report=result_report,
        from_cache=False,
        cube_path=store.output_path if store is not None else None,
    )
