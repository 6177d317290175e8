"""
Transform Pipelines - Composition Without the Ordering Trap

Writing `translation @ rotation @ scale` reads right to left: the scale
happens first. That is correct, and also easy to get backwards.

A pipeline lists steps in the order they HAPPEN to the vector:

    [scale(2, 2, 2), rotation_z(45), translation(5, 0, 0)]

and build_transform() turns it into

    translation @ rotation_z @ scale

so callers never have to reverse the list in their head.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from .matrix import Mat4, compose


class TransformKind(str, Enum):
    IDENTITY = "identity"
    SCALE = "scale"
    ROTATION_X = "rotation_x"
    ROTATION_Y = "rotation_y"
    ROTATION_Z = "rotation_z"
    TRANSLATION = "translation"


@dataclass
class TransformStep:
    """
    One named transform.

    - scale / translation read x, y, z
    - rotation_x / rotation_y / rotation_z read angle (degrees)
    - identity reads nothing
    """
    kind: TransformKind
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    angle: float = 0.0  # degrees

    def to_matrix(self) -> Mat4:
        kind = TransformKind(self.kind)
        if kind == TransformKind.IDENTITY:
            return Mat4.identity()
        if kind == TransformKind.SCALE:
            return Mat4.scale(self.x, self.y, self.z)
        if kind == TransformKind.ROTATION_X:
            return Mat4.rotation_x(self.angle)
        if kind == TransformKind.ROTATION_Y:
            return Mat4.rotation_y(self.angle)
        if kind == TransformKind.ROTATION_Z:
            return Mat4.rotation_z(self.angle)
        return Mat4.translation(self.x, self.y, self.z)

    def to_dict(self) -> dict:
        return {
            "kind": TransformKind(self.kind).value,
            "x": self.x,
            "y": self.y,
            "z": self.z,
            "angle": self.angle,
        }


def build_transform(steps: Iterable[TransformStep]) -> Mat4:
    """
    Compose steps given in application order.

    The first step is applied to the vector first, so it ends up as
    the RIGHTMOST factor of the product. An empty pipeline is the
    identity.
    """
    matrices = [step.to_matrix() for step in steps]
    return compose(*reversed(matrices))
