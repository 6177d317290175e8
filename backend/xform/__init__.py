"""
Vector and matrix transformation kernel.

This package provides:
- Vec3: immutable 3-component vector
- Mat4: immutable 4x4 homogeneous transform
- Transform pipelines listed in application order
- Interactive controls and a frame loop for streaming to a renderer
"""

from .vector import Vec3
from .matrix import Mat4, MatrixShapeError, HOMOGENEOUS_EPSILON, compose, transform_all
from .pipeline import TransformKind, TransformStep, build_transform
from .controls import ControlAction, ControlConfig, TransformControls, KEY_BINDINGS, actions_from_keys
from .frames import FrameConfig, FrameLoop, FrameStatus

__all__ = [
    "Vec3",
    "Mat4",
    "MatrixShapeError",
    "HOMOGENEOUS_EPSILON",
    "compose",
    "transform_all",
    "TransformKind",
    "TransformStep",
    "build_transform",
    "ControlAction",
    "ControlConfig",
    "TransformControls",
    "KEY_BINDINGS",
    "actions_from_keys",
    "FrameConfig",
    "FrameLoop",
    "FrameStatus",
]
