# tests/unit/storage/test_cube_store.py

"""
Tests for Zarr persistence of image cubes.
"""

import numpy as np
import pytest
import zarr

from msicomb.config import ReconstructionConfig
from msicomb.core.spectra import SpectrumSeries
from msicomb.metadata.models import CubeMetadata
from msicomb.processing.gridding import ImageCube
from msicomb.storage.cube_store import CubeStore, compute_cache_key


@pytest.fixture
def sample_cube():
    """Create a small image cube."""
    return ImageCube(
        image=np.arange(24, dtype=float).reshape(2, 4, 3),
        x_axis=np.array([0.0, 10.0, 20.0, 30.0]),
        y_axis=np.array([90.0, 100.0]),
        mz_axis=np.array([100.0, 200.0, 300.0]),
        pixel_pitch=10.0,
        degenerate_lines=[100.0],
    )


@pytest.fixture
def sample_metadata():
    return CubeMetadata(
        cache_key="abc123",
        shape=[2, 4, 3],
        pixel_pitch_um=10.0,
        first_pass_direction="left_to_right",
        degenerate_lines=[100.0],
    )


class TestCubeStore:
    """Test cases for CubeStore."""

    def test_save_and_load(self, tmp_path, sample_cube, sample_metadata):
        store = CubeStore(tmp_path / "cube.zarr")
        assert not store.exists()

        store.save(sample_cube, sample_metadata)
        cube, metadata = store.load()

        assert store.exists()
        np.testing.assert_array_equal(cube.image, sample_cube.image)
        np.testing.assert_array_equal(cube.x_axis, sample_cube.x_axis)
        np.testing.assert_array_equal(cube.y_axis, sample_cube.y_axis)
        np.testing.assert_array_equal(cube.mz_axis, sample_cube.mz_axis)
        assert cube.pixel_pitch == 10.0
        assert cube.degenerate_lines == [100.0]
        assert metadata.cache_key == "abc123"
        assert metadata.first_pass_direction == "left_to_right"

    def test_arrays_use_cube_names(self, tmp_path, sample_cube, sample_metadata):
        store = CubeStore(tmp_path / "cube.zarr")
        store.save(sample_cube, sample_metadata)

        root = zarr.open_group(str(store.output_path), mode="r")

        assert root["img"].shape == (2, 4, 3)
        assert root["imgX"].shape == (4,)
        assert root["imgY"].shape == (2,)
        assert root["imgZ"].shape == (3,)

    def test_load_missing_store(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="No image cube"):
            CubeStore(tmp_path / "missing.zarr").load()

    def test_store_without_metadata(self, tmp_path):
        path = tmp_path / "foreign.zarr"
        zarr.save_group(str(path), img=np.zeros((1, 1, 1)))

        store = CubeStore(path)

        assert store.read_metadata() is None
        with pytest.raises(ValueError, match="not an msicomb image cube"):
            store.load()


class TestCubeMetadata:
    """Test cases for CubeMetadata."""

    def test_defaults(self):
        metadata = CubeMetadata(cache_key="k", shape=[1, 2, 3], pixel_pitch_um=5.0)

        assert metadata.format_version == 1
        assert metadata.centroided is False
        assert metadata.degenerate_lines == []

    def test_rejects_non_positive_pitch(self):
        with pytest.raises(Exception):
            CubeMetadata(cache_key="k", shape=[1, 1, 1], pixel_pitch_um=0.0)


class TestComputeCacheKey:
    """Test cases for compute_cache_key."""

    def setup_method(self):
        self.series = SpectrumSeries.from_profile(
            [0.0, 0.1, 0.2], np.ones((3, 2)), [100.0, 200.0]
        )

    def test_stable_for_same_inputs(self, two_line_files):
        config = ReconstructionConfig()

        first = compute_cache_key(self.series, *two_line_files, config)
        second = compute_cache_key(self.series, *two_line_files, ReconstructionConfig())

        assert first == second
        assert len(first) == 64

    def test_changes_with_config(self, two_line_files):
        base = compute_cache_key(self.series, *two_line_files, ReconstructionConfig())
        shifted = compute_cache_key(
            self.series, *two_line_files, ReconstructionConfig(time_offset_s=0.5)
        )

        assert base != shifted

    def test_changes_with_spectra(self, two_line_files):
        other = SpectrumSeries.from_profile([0.0, 0.1, 0.2], np.zeros((3, 2)), [100.0, 200.0])

        assert compute_cache_key(
            self.series, *two_line_files, ReconstructionConfig()
        ) != compute_cache_key(other, *two_line_files, ReconstructionConfig())

    def test_changes_with_path_files(self, two_line_files):
        waypoint_file, timing_file = two_line_files
        before = compute_cache_key(self.series, waypoint_file, timing_file, ReconstructionConfig())

        timing_file.write_text("500\t500\t500\n500\t500\t500\n")

        after = compute_cache_key(self.series, waypoint_file, timing_file, ReconstructionConfig())
        assert before != after

    def test_centroided_series(self, two_line_files):
        series = SpectrumSeries.from_centroids([0.0, 0.1], [[100.0], [101.0]], [[1.0], [2.0]])
        other = SpectrumSeries.from_centroids([0.0, 0.1], [[100.0], [101.0]], [[1.0], [3.0]])

        assert compute_cache_key(
            series, *two_line_files, ReconstructionConfig()
        ) != compute_cache_key(other, *two_line_files, ReconstructionConfig())
