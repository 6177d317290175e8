"""Tests for xform.controls - interactive rotation/scale state."""

import pytest

from xform.vector import Vec3
from xform.controls import (
    ControlAction,
    ControlConfig,
    TransformControls,
    KEY_BINDINGS,
    actions_from_keys,
)
from xform.matrix import Mat4


class TestApply:
    def test_defaults(self):
        controls = TransformControls()
        assert controls.rotation == 0.0
        assert controls.scale == 1.0
        assert controls.transform() == Mat4.identity()

    def test_rotate(self):
        controls = TransformControls()
        assert controls.apply([ControlAction.ROTATE_CCW])
        assert controls.rotation == 0.5
        controls.apply([ControlAction.ROTATE_CW, ControlAction.ROTATE_CW])
        assert controls.rotation == -0.5

    def test_rotation_unbounded(self):
        controls = TransformControls(ControlConfig(initial_rotation=359.5))
        controls.apply([ControlAction.ROTATE_CCW, ControlAction.ROTATE_CCW])
        assert controls.rotation == 360.5

    def test_scale(self):
        controls = TransformControls()
        controls.apply([ControlAction.SCALE_UP])
        assert controls.scale == pytest.approx(1.01)
        controls.apply([ControlAction.SCALE_DOWN, ControlAction.SCALE_DOWN])
        assert controls.scale == pytest.approx(0.99)

    def test_scale_clamped_to_minimum(self):
        controls = TransformControls(ControlConfig(initial_scale=0.105))
        controls.apply([ControlAction.SCALE_DOWN])
        assert controls.scale == 0.1
        controls.apply([ControlAction.SCALE_DOWN])
        assert controls.scale == 0.1

    def test_reset(self):
        controls = TransformControls()
        controls.apply([ControlAction.ROTATE_CCW, ControlAction.SCALE_UP])
        controls.apply([ControlAction.RESET])
        assert controls.rotation == 0.0
        assert controls.scale == 1.0

    def test_no_actions_no_change(self):
        assert TransformControls().apply([]) is False

    def test_action_names_accepted(self):
        controls = TransformControls()
        controls.apply(["rotate_ccw"])
        assert controls.rotation == 0.5

    def test_unknown_action_name(self):
        with pytest.raises(ValueError):
            TransformControls().apply(["spin"])


class TestUpdate:
    def test_waits_for_interval(self):
        controls = TransformControls()
        assert controls.update(0.01, [ControlAction.ROTATE_CCW]) is False
        assert controls.rotation == 0.0
        assert controls.update(0.01, [ControlAction.ROTATE_CCW]) is True
        assert controls.rotation == 0.5

    def test_accumulator_restarts(self):
        controls = TransformControls()
        controls.update(0.02, [ControlAction.ROTATE_CCW])
        assert controls.update(0.01, [ControlAction.ROTATE_CCW]) is False
        assert controls.rotation == 0.5

    def test_large_dt_applies_once(self):
        controls = TransformControls()
        controls.update(1.0, [ControlAction.ROTATE_CCW])
        assert controls.rotation == 0.5


class TestTransform:
    def test_scale_then_rotate(self):
        controls = TransformControls(ControlConfig(initial_rotation=90.0, initial_scale=2.0))
        m = controls.transform()
        result = m.transform_direction(Vec3(1, 0, 0))
        assert (result.x, result.y, result.z) == pytest.approx((0.0, 2.0, 0.0), abs=1e-12)

    def test_z_not_scaled(self):
        controls = TransformControls(ControlConfig(initial_scale=3.0))
        assert controls.transform().transform_direction(Vec3(0, 0, 1)) == Vec3(0, 0, 1)

    def test_to_dict(self):
        d = TransformControls().to_dict()
        assert d["rotation"] == 0.0
        assert d["scale"] == 1.0
        assert len(d["transform"]["column_major"]) == 16


class TestKeyBindings:
    def test_arrows(self):
        assert KEY_BINDINGS["ArrowLeft"] == ControlAction.ROTATE_CCW
        assert KEY_BINDINGS["ArrowDown"] == ControlAction.ROTATE_CW

    def test_unknown_keys_dropped(self):
        assert actions_from_keys(["KeyQ", "Equal", "Escape"]) == [ControlAction.SCALE_UP]

    def test_one_action_per_key(self):
        assert actions_from_keys(["ArrowLeft", "ArrowUp"]) == [ControlAction.ROTATE_CCW, ControlAction.ROTATE_CCW]

    def test_two_rotate_keys_double_the_step(self):
        controls = TransformControls()
        controls.apply(actions_from_keys(["ArrowLeft", "ArrowUp"]))
        assert controls.rotation == 1.0

    def test_opposite_keys_cancel(self):
        controls = TransformControls()
        controls.apply(actions_from_keys(["ArrowLeft", "ArrowRight"]))
        assert controls.rotation == 0.0
