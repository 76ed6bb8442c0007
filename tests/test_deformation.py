"""
Tests for the deformation applicator.
"""

import pytest
import numpy as np
from terrain_sculpt.core.brushes import get_brush
from terrain_sculpt.core.deformation import (
    SculptMode,
    apply_deformation,
    build_brush_patch,
    footprint_start,
    next_rotation,
    signed_strength,
)
from terrain_sculpt.core.grid import GridGeometry
from terrain_sculpt.core.heightmap import Heightmap
from terrain_sculpt.core.matrix_ops import rotate_90, upsample_bilinear


class TestPipeline:
    """Test kernel resolution and placement."""

    def test_sculpt_mode_from_modifier(self):
        assert SculptMode.from_modifier(False) is SculptMode.RAISE
        assert SculptMode.from_modifier(True) is SculptMode.LOWER

    def test_signed_strength(self):
        assert signed_strength(SculptMode.RAISE, 0.5) == 1.0
        assert signed_strength(SculptMode.LOWER, 0.5) == -1.0
        assert signed_strength(SculptMode.RAISE, 0.5, strength_scale=1.0) == 0.5

    def test_next_rotation_wraps(self):
        assert [next_rotation(r) for r in range(4)] == [1, 2, 3, 0]

    def test_footprint_start(self):
        assert footprint_start((5, 5), (3, 3)) == (4, 4)
        assert footprint_start((2, 2), (1, 1)) == (2, 2)
        assert footprint_start((0, 0), (3, 3)) == (-1, -1)

    def test_patch_is_rotated_then_upsampled(self):
        patch = build_brush_patch("linearRamp", 1, (5, 5), 4)
        expected = upsample_bilinear(rotate_90(get_brush("linearRamp").kernel()), 4)

        np.testing.assert_array_equal(patch.heights, expected)
        assert patch.heights.shape == (13, 13)
        assert patch.footprint == (3, 3)
        assert patch.start_cell == (4, 4)
        assert patch.start_vertex == (16, 16)

    def test_unknown_brush_fails_fast(self):
        with pytest.raises(ValueError, match="Unknown brush"):
            build_brush_patch("nope", 0, (0, 0), 1)

    @pytest.mark.parametrize("rotation", [-1, 4, None])
    def test_invalid_rotation(self, rotation):
        with pytest.raises(ValueError):
            build_brush_patch("raise", rotation, (0, 0), 1)


class TestApplyDeformation:
    """Test applying brushes to the heightmap."""

    @pytest.fixture
    def geometry(self):
        return GridGeometry(world_size=100.0, divisions=4, resolution_multiplier=4)

    @pytest.fixture
    def heightmap(self, geometry):
        return geometry.new_heightmap()

    def test_flat_raise_single_cell(self):
        """A 1x1 raise at (2, 2) lifts exactly the four corners of that cell."""
        geometry = GridGeometry(world_size=100.0, divisions=4, resolution_multiplier=1)
        heightmap = geometry.new_heightmap()

        result = apply_deformation(
            heightmap, geometry, "raise", 0, (2, 2), SculptMode.RAISE, 1.0
        )

        expected = np.zeros((5, 5))
        for x, z in [(2, 2), (2, 3), (3, 2), (3, 3)]:
            expected[z, x] = 1.0
        np.testing.assert_array_equal(heightmap.heights, expected)
        assert result.applied
        assert result.vertices_changed == 4
        assert not result.clipped

    def test_repeated_application_accumulates(self, geometry, heightmap):
        apply_deformation(heightmap, geometry, "softHill", 0, (2, 2), SculptMode.RAISE, 0.5)
        single = heightmap.heights.copy()
        apply_deformation(heightmap, geometry, "softHill", 0, (2, 2), SculptMode.RAISE, 0.5)

        np.testing.assert_allclose(heightmap.heights, 2 * single)
        assert single.max() > 0

    def test_lower_negates_raise(self, geometry):
        raised = geometry.new_heightmap()
        lowered = geometry.new_heightmap()

        apply_deformation(raised, geometry, "ridge", 1, (1, 2), SculptMode.RAISE, 0.35)
        apply_deformation(lowered, geometry, "ridge", 1, (1, 2), SculptMode.LOWER, 0.35)

        np.testing.assert_array_equal(lowered.heights, -raised.heights)

    def test_corner_application_clips(self, geometry, heightmap):
        result = apply_deformation(
            heightmap, geometry, "softHill", 0, (0, 0), SculptMode.RAISE, 1.0
        )

        # Footprint starts one cell outside, so a 9x9 block of the 13x13 patch lands
        assert result.applied
        assert result.clipped
        assert result.vertices_changed == 81
        assert np.count_nonzero(heightmap.heights[9:, :]) == 0
        assert np.count_nonzero(heightmap.heights[:, 9:]) == 0

        patch = build_brush_patch("softHill", 0, (0, 0), 4).heights * 2.0
        np.testing.assert_allclose(heightmap.heights[:9, :9], patch[4:, 4:])

    def test_far_corner_application_clips(self, geometry, heightmap):
        result = apply_deformation(
            heightmap, geometry, "softHill", 0, (3, 3), SculptMode.RAISE, 1.0
        )
        # Starts at vertex 8; vertices 8..16 fit
        assert result.vertices_changed == 81
        assert np.count_nonzero(heightmap.heights[:8, :]) == 0

    def test_rotation_changes_placement_of_asymmetric_brush(self, geometry):
        unrotated = geometry.new_heightmap()
        rotated = geometry.new_heightmap()

        apply_deformation(unrotated, geometry, "linearRamp", 0, (2, 2), SculptMode.RAISE, 1.0)
        apply_deformation(rotated, geometry, "linearRamp", 1, (2, 2), SculptMode.RAISE, 1.0)

        np.testing.assert_allclose(rotated.heights[4:17, 4:17], rotate_90(unrotated.heights[4:17, 4:17]))

    def test_strength_scale_is_configurable(self):
        geometry = GridGeometry(world_size=10.0, divisions=4, resolution_multiplier=1)
        heightmap = geometry.new_heightmap()

        apply_deformation(
            heightmap, geometry, "raise", 0, (1, 1), SculptMode.RAISE, 1.0, strength_scale=1.0
        )
        assert heightmap.get(1, 1) == 0.5

    def test_stale_heightmap_is_skipped(self, geometry):
        stale = Heightmap(8)
        result = apply_deformation(stale, geometry, "softHill", 0, (1, 1), SculptMode.RAISE, 1.0)

        assert not result.applied
        assert stale.is_flat()

    def test_accepts_brush_spec(self, geometry, heightmap):
        result = apply_deformation(
            heightmap, geometry, get_brush("lower"), 0, (1, 1), SculptMode.RAISE, 1.0
        )
        assert result.applied
        assert heightmap.get(4, 4) == -1.0
