"""Tests for xform.pipeline - steps listed in application order."""

import pytest

from xform.vector import Vec3
from xform.matrix import Mat4
from xform.pipeline import TransformKind, TransformStep, build_transform


class TestTransformStep:
    @pytest.mark.parametrize("step, expected", [
        (TransformStep(TransformKind.IDENTITY), Mat4.identity()),
        (TransformStep(TransformKind.SCALE, x=2, y=3, z=4), Mat4.scale(2, 3, 4)),
        (TransformStep(TransformKind.ROTATION_X, angle=30), Mat4.rotation_x(30)),
        (TransformStep(TransformKind.ROTATION_Y, angle=30), Mat4.rotation_y(30)),
        (TransformStep(TransformKind.ROTATION_Z, angle=30), Mat4.rotation_z(30)),
        (TransformStep(TransformKind.TRANSLATION, x=1, y=2, z=3), Mat4.translation(1, 2, 3)),
    ])
    def test_to_matrix(self, step, expected):
        assert step.to_matrix() == expected

    def test_kind_from_string(self):
        assert TransformStep("rotation_z", angle=90).to_matrix() == Mat4.rotation_z(90)

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            TransformStep("shear").to_matrix()

    def test_to_dict(self):
        d = TransformStep(TransformKind.ROTATION_Y, angle=45).to_dict()
        assert d["kind"] == "rotation_y"
        assert d["angle"] == 45


class TestBuildTransform:
    def test_empty_is_identity(self):
        assert build_transform([]) == Mat4.identity()

    def test_application_order(self):
        steps = [
            TransformStep(TransformKind.SCALE, x=2, y=2, z=2),
            TransformStep(TransformKind.ROTATION_Z, angle=45),
            TransformStep(TransformKind.TRANSLATION, x=5),
        ]
        expected = Mat4.translation(5, 0, 0) @ Mat4.rotation_z(45) @ Mat4.scale(2, 2, 2)
        assert build_transform(steps).isclose(expected, tol=1e-12)

    def test_translate_then_rotate_differs_from_rotate_then_translate(self):
        translate = TransformStep(TransformKind.TRANSLATION, x=1)
        rotate = TransformStep(TransformKind.ROTATION_Z, angle=90)
        origin = Vec3(0, 0, 0)

        moved_then_turned = build_transform([translate, rotate]).transform_point(origin)
        turned_then_moved = build_transform([rotate, translate]).transform_point(origin)

        assert (moved_then_turned.x, moved_then_turned.y) == pytest.approx((0.0, 1.0), abs=1e-12)
        assert (turned_then_moved.x, turned_then_moved.y) == pytest.approx((1.0, 0.0), abs=1e-12)

    def test_accepts_generator(self):
        steps = (TransformStep(TransformKind.SCALE, x=s, y=s, z=s) for s in (2, 3))
        assert build_transform(steps) == Mat4.scale(6, 6, 6)
