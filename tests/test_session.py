"""
Tests for sculpting sessions.
"""

import pytest
import numpy as np
from pydantic import ValidationError
from terrain_sculpt.config import SessionConfig
from terrain_sculpt.core.deformation import SculptMode
from terrain_sculpt.core.session import SculptSession


class TestSessionConfig:
    """Test boundary validation of session parameters."""

    def test_defaults(self):
        config = SessionConfig()
        assert config.divisions > 0
        assert 0 < config.strength <= 1

    @pytest.mark.parametrize("kwargs", [
        {"divisions": 0},
        {"divisions": -1},
        {"divisions": 101},
        {"resolution_multiplier": 0},
        {"strength": 0.0},
        {"strength": 1.5},
        {"strength": float("nan")},
        {"world_size": float("inf")},
        {"strength_scale": 0.0},
        {"resolution_multiplier": 17},
        {"resolution_multiplier": 1000000},
    ])
    def test_invalid_config(self, kwargs):
        with pytest.raises(ValidationError):
            SessionConfig(**kwargs)


class TestSculptSession:
    """Test interaction flow of a session."""

    @pytest.fixture
    def session(self):
        config = SessionConfig(divisions=8, resolution_multiplier=4, strength=0.5)
        return SculptSession(config, session_id="test")

    def test_initial_state(self, session):
        assert session.id == "test"
        assert session.heightmap.shape == (33, 33)
        assert session.heightmap.is_flat()
        assert session.brush is None
        assert session.rotation == 0
        assert not session.modified
        assert session.pending_divisions is None

    def test_click_without_brush_is_noop(self, session):
        result = session.click((3, 3))

        assert not result.applied
        assert session.heightmap.is_flat()
        assert not session.modified

    def test_click_applies_brush(self, session):
        session.select_brush("softHill")
        result = session.click((4, 4))

        assert result.applied
        assert session.modified
        assert session.heightmap.heights.max() > 0

    def test_alternate_click_lowers(self, session):
        session.select_brush("softHill")
        session.click((4, 4), alternate=True)
        assert session.heightmap.heights.min() < 0
        assert session.heightmap.heights.max() == 0

    def test_unknown_brush(self, session):
        with pytest.raises(ValueError):
            session.select_brush("volcano")

    def test_deselect(self, session):
        session.select_brush("ridge")
        assert session.select_brush(None) is None

    def test_click_outside_grid(self, session):
        session.select_brush("raise")
        with pytest.raises(ValueError):
            session.click((8, 0))

    @pytest.mark.parametrize("cell", [(-0.5, 2.9), (1.0, 2), (2, "3")])
    def test_click_non_integer_cell(self, session, cell):
        session.select_brush("raise")
        with pytest.raises(ValueError):
            session.click(cell)
        assert session.heightmap.is_flat()

    def test_click_numpy_integer_cell(self, session):
        session.select_brush("raise")
        assert session.click((np.int64(2), np.int32(3))).applied

    def test_rotation_persists_across_brushes(self, session):
        session.select_brush("ridge")
        session.rotate()
        session.rotate()
        session.select_brush("linearRamp")
        assert session.rotation == 2

        session.rotate()
        session.rotate()
        assert session.rotation == 0

    def test_set_strength(self, session):
        assert session.set_strength(0.05) == 0.05
        for bad in (0.0, -0.2, 1.01, float("inf")):
            with pytest.raises(ValueError):
                session.set_strength(bad)
        assert session.strength == 0.05

    def test_hover_returns_preview(self, session):
        assert session.hover((2, 2)) is None

        session.select_brush("softHill")
        preview = session.hover((2, 2), alternate=True)

        assert preview is not None
        assert preview.mode is SculptMode.LOWER
        assert session.preview() is not None

    def test_preview_follows_rotation_and_strength(self, session):
        session.select_brush("linearRamp")
        before = session.hover((4, 4))
        session.rotate()
        session.set_strength(1.0)
        after = session.preview()

        assert after.rotation == 1
        assert not np.allclose(before.heights, after.heights)

    def test_leave_clears_preview(self, session):
        session.select_brush("raise")
        session.hover((1, 1))
        session.leave()
        assert session.preview() is None

    def test_reset(self, session):
        session.select_brush("raise")
        session.click((1, 1))
        session.reset()

        assert session.heightmap.is_flat()
        assert not session.modified

    def test_resize_unmodified_is_immediate(self, session):
        outcome = session.request_resize(12)

        assert outcome.resized
        assert not outcome.confirmation_required
        assert session.divisions == 12
        assert session.heightmap.shape == (49, 49)

    def test_resize_same_size_is_noop(self, session):
        outcome = session.request_resize(8)
        assert not outcome.resized
        assert not outcome.confirmation_required

    def test_resize_modified_requires_confirmation(self, session):
        session.select_brush("softHill")
        session.click((4, 4))

        outcome = session.request_resize(5)
        assert outcome.confirmation_required
        assert session.pending_divisions == 5
        assert session.divisions == 8
        assert not session.heightmap.is_flat()

        outcome = session.confirm_resize()
        assert outcome.resized
        assert session.divisions == 5
        assert session.heightmap.shape == (21, 21)
        assert session.heightmap.is_flat()
        assert not session.modified
        assert session.pending_divisions is None

    def test_cancel_resize_keeps_terrain(self, session):
        session.select_brush("raise")
        session.click((0, 0))
        session.request_resize(20)
        session.cancel_resize()

        assert session.pending_divisions is None
        assert session.divisions == 8
        assert session.modified

    def test_resize_invalidates_hover(self, session):
        session.select_brush("raise")
        session.hover((7, 7))
        session.request_resize(4)

        assert session.hover_state is None
        assert session.preview() is None

    def test_confirm_without_pending(self, session):
        outcome = session.confirm_resize()
        assert not outcome.resized
        assert session.divisions == 8

    @pytest.mark.parametrize("divisions", [0, -4, 101])
    def test_resize_out_of_range(self, session, divisions):
        with pytest.raises(ValueError):
            session.request_resize(divisions)

    def test_mesh_vertices(self, session):
        session.select_brush("raise")
        session.click((0, 0))
        vertices = session.mesh_vertices()

        assert vertices.shape == (33 * 33, 3)
        assert vertices[:, 1].max() == pytest.approx(0.5)

    def test_summary(self, session):
        session.select_brush("ridge")
        session.hover((1, 2), alternate=True)
        summary = session.summary()

        assert summary["brush"] == "ridge"
        assert summary["hover"] == {"cell": [1, 2], "mode": "lower"}
        assert summary["render_segments"] == 32
