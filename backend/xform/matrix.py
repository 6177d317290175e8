"""
4x4 Transformation Matrices - Homogeneous Coordinates

KEY CONCEPTS:

1. HOMOGENEOUS COORDINATES
   A 3D point (x, y, z) is treated as the 4-vector (x, y, z, 1).
   The extra "w" component lets a single 4x4 matrix express a
   translation as well as the usual linear transforms:

       [ a  b  c  tx ]   [x]   [a*x + b*y + c*z + tx]
       [ d  e  f  ty ] * [y] = [d*x + e*y + f*z + ty]
       [ g  h  i  tz ]   [z]   [g*x + h*y + i*z + tz]
       [ 0  0  0  1  ]   [1]   [         1          ]

2. COMPOSITION ORDER
   Matrices act on column vectors, so in (A @ B) @ v the matrix B
   touches v FIRST and A touches it last. To scale and then rotate:

       rotation @ scale

   Composing in the wrong order still gives a perfectly plausible
   looking matrix. It is just a different transform.

3. POINTS vs DIRECTIONS
   - Points move with translation: use transform_point().
   - Directions do not (an arrow has no position): use
     transform_direction(), which only reads the upper-left 3x3 block.

4. RENDERER LAYOUT
   Storage here is [row][col]. Shader uniforms expect column-major,
   so to_column_major() emits flat[col*4 + row] = m[row, col].
   Getting this backwards silently transposes every transform.

Angles passed to the rotation factories are in DEGREES.
"""

from __future__ import annotations
import math
from typing import Iterable, List, Sequence, Tuple, Union
import numpy as np

from .vector import Vec3


# Below this |w| the homogeneous divide is skipped (w is taken as 1.0).
# For ordinary affine matrices the bottom row is (0, 0, 0, 1) and w is
# always exactly 1, so the guard never triggers for them.
HOMOGENEOUS_EPSILON = 1e-5

Entries = Union[Sequence[Sequence[float]], np.ndarray]


class MatrixShapeError(ValueError):
    """Raised when a matrix is built from a grid that is not 4x4."""


def _to_radians(angle_degrees: float) -> float:
    return angle_degrees * math.pi / 180.0


def _check_shape(entries: Entries) -> np.ndarray:
    """Validate a 4x4 grid before numpy gets a chance to reshape it."""
    if isinstance(entries, np.ndarray):
        if entries.shape != (4, 4):
            raise MatrixShapeError(f"Matrix must be 4x4, got shape {entries.shape}")
        return np.array(entries, dtype=np.float64)

    try:
        rows = [list(row) for row in entries]
    except TypeError:
        raise MatrixShapeError("Matrix must be 4x4, got a grid that is not rows of entries")
    if len(rows) != 4 or any(len(row) != 4 for row in rows):
        widths = [len(row) for row in rows]
        raise MatrixShapeError(f"Matrix must be 4x4, got {len(rows)} rows with widths {widths}")
    return np.array(rows, dtype=np.float64)


class Mat4:
    """
    An immutable 4x4 matrix.

    Mat4() is the all-zero matrix; Mat4(rows) copies an explicit grid.
    The named factories (identity, scale, rotation_x/y/z, translation)
    start from the identity and overwrite only their own entries.

    Entries are read with m[row, col]. There is no in-place setter:
    with_entry() returns a modified copy. Indices are expected to be
    in 0..3; anything else falls through to numpy's indexing rules
    (negative indices wrap, larger ones raise IndexError) and is not
    part of the contract.
    """
    __slots__ = ('_m',)

    def __init__(self, entries: Entries = None):
        if entries is None:
            m = np.zeros((4, 4), dtype=np.float64)
        else:
            m = _check_shape(entries)
        m.setflags(write=False)
        self._m = m

    @classmethod
    def _from_array(cls, m: np.ndarray) -> Mat4:
        """Wrap an array this module just built (already 4x4, not shared)."""
        mat = cls.__new__(cls)
        m.setflags(write=False)
        mat._m = m
        return mat

    # ------------------------------------------------------------
    # Named constructors
    # ------------------------------------------------------------

    @classmethod
    def identity(cls) -> Mat4:
        return cls._from_array(np.eye(4, dtype=np.float64))

    @classmethod
    def scale(cls, sx: float, sy: float, sz: float) -> Mat4:
        m = np.eye(4, dtype=np.float64)
        m[0, 0] = sx
        m[1, 1] = sy
        m[2, 2] = sz
        return cls._from_array(m)

    @classmethod
    def rotation_x(cls, angle_degrees: float) -> Mat4:
        """Rotation about +X. Positive angles turn +Y toward +Z."""
        rad = _to_radians(angle_degrees)
        c = math.cos(rad)
        s = math.sin(rad)

        m = np.eye(4, dtype=np.float64)
        m[1, 1] = c
        m[1, 2] = -s
        m[2, 1] = s
        m[2, 2] = c
        return cls._from_array(m)

    @classmethod
    def rotation_y(cls, angle_degrees: float) -> Mat4:
        """Rotation about +Y. Positive angles turn +X toward -Z."""
        rad = _to_radians(angle_degrees)
        c = math.cos(rad)
        s = math.sin(rad)

        m = np.eye(4, dtype=np.float64)
        m[0, 0] = c
        m[0, 2] = s
        m[2, 0] = -s
        m[2, 2] = c
        return cls._from_array(m)

    @classmethod
    def rotation_z(cls, angle_degrees: float) -> Mat4:
        """Rotation about +Z. Positive angles turn +X toward +Y (counter-clockwise)."""
        rad = _to_radians(angle_degrees)
        c = math.cos(rad)
        s = math.sin(rad)

        m = np.eye(4, dtype=np.float64)
        m[0, 0] = c
        m[0, 1] = -s
        m[1, 0] = s
        m[1, 1] = c
        return cls._from_array(m)

    @classmethod
    def translation(cls, x: float, y: float, z: float) -> Mat4:
        m = np.eye(4, dtype=np.float64)
        m[0, 3] = x
        m[1, 3] = y
        m[2, 3] = z
        return cls._from_array(m)

    # ------------------------------------------------------------
    # Element access
    # ------------------------------------------------------------

    def __getitem__(self, index: Tuple[int, int]) -> float:
        row, col = index
        return float(self._m[row, col])

    def with_entry(self, row: int, col: int, value: float) -> Mat4:
        """Copy of this matrix with a single entry replaced."""
        m = self._m.copy()
        m[row, col] = value
        return Mat4._from_array(m)

    # ------------------------------------------------------------
    # Composition
    # ------------------------------------------------------------

    def __matmul__(self, other: Mat4) -> Mat4:
        """
        Matrix product: result[i, j] = sum_k self[i, k] * other[k, j].

        NOT commutative. Applied to a vector, `other` acts first.
        """
        if isinstance(other, Mat4):
            return Mat4._from_array(self._m @ other._m)
        return NotImplemented

    # ------------------------------------------------------------
    # Application to vectors
    # ------------------------------------------------------------

    def transform_vector(self, v: Vec3) -> Vec3:
        """
        Full homogeneous transform of v treated as (x, y, z, 1).

        The result is divided by w = row 3 . (x, y, z, 1). If |w| is
        below HOMOGENEOUS_EPSILON the divide uses 1.0 instead; this is
        a substitution, not an error.
        """
        h = self._m @ np.array([*v, 1.0])
        w = h[3]
        if abs(w) < HOMOGENEOUS_EPSILON:
            w = 1.0
        return Vec3.from_array(h[:3] / w)

    def transform_point(self, p: Vec3) -> Vec3:
        """Transform a position. Translation applies (same as transform_vector)."""
        return self.transform_vector(p)

    def transform_direction(self, d: Vec3) -> Vec3:
        """
        Transform a direction with the upper-left 3x3 block only.

        The translation column is ignored and there is no homogeneous
        divide: an arrow rotated or scaled is still anchored nowhere.
        """
        return Vec3.from_array(self._m[:3, :3] @ np.array(list(d)))

    # ------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Mat4):
            return bool(np.array_equal(self._m, other._m))
        return NotImplemented

    __hash__ = None

    def isclose(self, other: Mat4, tol: float = 1e-9) -> bool:
        """Entry-wise comparison within an absolute tolerance."""
        return bool(np.allclose(self._m, other._m, rtol=0.0, atol=tol))

    # ------------------------------------------------------------
    # Export
    # ------------------------------------------------------------

    def to_rows(self) -> Tuple[Tuple[float, ...], ...]:
        return tuple(tuple(float(v) for v in row) for row in self._m)

    def to_array(self) -> np.ndarray:
        """Writable copy of the 4x4 grid."""
        return self._m.copy()

    def to_column_major(self) -> np.ndarray:
        """
        Flatten for a shader uniform: 16 float32 values, column-major.

        flat[col*4 + row] == m[row, col]
        """
        return np.ascontiguousarray(self._m.T, dtype=np.float32).reshape(-1)

    def to_uniform_bytes(self) -> bytes:
        """Raw bytes of to_column_major(), ready for a uniform buffer upload."""
        return self.to_column_major().tobytes()

    def to_dict(self) -> dict:
        """For JSON serialization."""
        return {
            "rows": [list(row) for row in self.to_rows()],
            "column_major": [float(v) for v in self.to_column_major()],
        }

    def __str__(self) -> str:
        lines = []
        for row in self._m:
            lines.append("[" + ", ".join(f"{v:8.3f}" for v in row) + "]")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"Mat4({[list(row) for row in self.to_rows()]})"


def compose(*matrices: Mat4) -> Mat4:
    """
    Multiply matrices left to right: compose(T, R, S) == T @ R @ S.

    The LAST matrix is the first one applied to a vector. With no
    arguments the identity is returned.
    """
    result = Mat4.identity()
    for m in matrices:
        result = result @ m
    return result


def transform_all(m: Mat4, vectors: Iterable[Vec3], mode: str = "point") -> List[Vec3]:
    """Apply m to many vectors; mode is 'vector', 'point' or 'direction'."""
    if mode == "direction":
        fn = m.transform_direction
    elif mode == "point":
        fn = m.transform_point
    elif mode == "vector":
        fn = m.transform_vector
    else:
        raise ValueError(f"Unknown transform mode: {mode}")
    return [fn(v) for v in vectors]
