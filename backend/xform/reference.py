"""
Reference Checks - Do We Agree With NumPy?

Our Vec3/Mat4 code spells the math out by hand. This module computes
the same quantities a DIFFERENT way with numpy and reports whether the
two agree:

- dot / cross:       np.dot, np.cross
- rotation_y(angle): Rodrigues' formula  R = I + sin(t) K + (1 - cos(t)) K^2
                     with K the cross-product matrix of the +Y axis.
                     Shares no code with the per-entry construction.
- column-major:      numpy's Fortran-order flatten

A mismatch in any of these means a sign or layout convention drifted.
"""

from __future__ import annotations
import math
from dataclasses import dataclass
from typing import List
import numpy as np

from .vector import Vec3
from .matrix import Mat4


@dataclass
class Comparison:
    """One quantity computed both ways."""
    name: str
    ours: List[float]
    reference: List[float]
    match: bool

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "ours": self.ours,
            "reference": self.reference,
            "match": self.match,
        }


def _axis_rotation(axis: np.ndarray, angle_degrees: float) -> np.ndarray:
    """4x4 rotation about a unit axis via Rodrigues' formula."""
    t = math.radians(angle_degrees)
    kx, ky, kz = axis
    K = np.array([
        [0.0, -kz, ky],
        [kz, 0.0, -kx],
        [-ky, kx, 0.0],
    ])
    R = np.eye(4)
    R[:3, :3] = np.eye(3) + math.sin(t) * K + (1.0 - math.cos(t)) * (K @ K)
    return R


def _compare(name: str, ours, reference, tolerance: float) -> Comparison:
    ours_arr = np.asarray(ours, dtype=np.float64).reshape(-1)
    ref_arr = np.asarray(reference, dtype=np.float64).reshape(-1)
    match = bool(np.all(np.abs(ours_arr - ref_arr) < tolerance))
    return Comparison(
        name=name,
        ours=[float(v) for v in ours_arr],
        reference=[float(v) for v in ref_arr],
        match=match,
    )


def compare_with_numpy(
    a: Vec3,
    b: Vec3,
    angle: float = 45.0,
    tolerance: float = 1e-3,
) -> List[Comparison]:
    """
    Cross-check Vec3/Mat4 results against independent numpy computations.

    Args:
        a, b: Vectors for the dot and cross product checks
        angle: Rotation angle in degrees for the rotation_y check
        tolerance: Absolute tolerance per component

    Returns:
        One Comparison per checked quantity
    """
    comparisons = [
        _compare("dot", [a.dot(b)], [np.dot(a.to_array(), b.to_array())], tolerance),
        _compare("cross", a.cross(b).to_array(), np.cross(a.to_array(), b.to_array()), tolerance),
    ]

    rot = Mat4.rotation_y(angle)
    reference_rot = _axis_rotation(np.array([0.0, 1.0, 0.0]), angle)
    comparisons.append(_compare(f"rotation_y({angle:g})", rot.to_array(), reference_rot, tolerance))

    comparisons.append(_compare(
        "column_major",
        rot.to_column_major(),
        rot.to_array().flatten(order="F"),
        tolerance,
    ))

    return comparisons
