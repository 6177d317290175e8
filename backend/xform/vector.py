"""
3D Vector Math - The Smallest Building Block

Every transform in this package eventually acts on a Vec3:
- Offset: how far and which way? (dx, dy, dz)
- Direction: which way is it pointing? (unit length, usually)
- Point: where is it? (x, y, z) relative to the origin

Key insight: a Vec3 is a VALUE. Adding two vectors, normalizing one,
or crossing two of them always builds a new vector and never touches
the operands. That is what lets matrices and vectors be passed around
freely without anyone worrying about who else is holding them.
"""

from __future__ import annotations
import numpy as np
from dataclasses import dataclass


@dataclass(frozen=True)
class Vec3:
    """
    A 3D vector. Frozen: assigning to x, y or z raises.

    Coordinate system is right-handed:
    - x: right
    - y: up
    - z: toward the viewer

    Components are expected to be finite. NaN and infinity are not
    rejected, but nothing here promises sensible results for them.
    """
    x: float
    y: float
    z: float

    # Component-wise arithmetic. Each operator builds a fresh Vec3.

    def __add__(self, other: Vec3) -> Vec3:
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vec3) -> Vec3:
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> Vec3:
        return Vec3(self.x * scalar, self.y * scalar, self.z * scalar)

    def __rmul__(self, scalar: float) -> Vec3:
        return self * scalar

    def __truediv__(self, scalar: float) -> Vec3:
        return Vec3(self.x / scalar, self.y / scalar, self.z / scalar)

    def __neg__(self) -> Vec3:
        return Vec3(-self.x, -self.y, -self.z)

    def dot(self, other: Vec3) -> float:
        """Dot product: measures how aligned two vectors are. Commutative."""
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vec3) -> Vec3:
        """
        Cross product: vector perpendicular to both inputs (right-hand rule).

        Anti-commutative: a.cross(b) == -(b.cross(a)).
        """
        return Vec3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x
        )

    def magnitude(self) -> float:
        """Length of the vector (Euclidean norm)."""
        return float(np.sqrt(self.x**2 + self.y**2 + self.z**2))

    def normalized(self) -> Vec3:
        """
        Unit vector (same direction, length = 1).

        The zero vector has no direction, so it normalizes to itself
        instead of dividing by zero. Only an exactly-zero length takes
        that path; tiny but non-zero vectors are still scaled up.
        """
        mag = self.magnitude()
        if mag == 0:
            return Vec3.zero()
        return self / mag

    def distance_to(self, other: Vec3) -> float:
        """Length of the offset between two positions."""
        return (self - other).magnitude()

    def to_array(self) -> np.ndarray:
        """Components as a float64 numpy array (a copy; the Vec3 stays frozen)."""
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    @classmethod
    def from_array(cls, arr: np.ndarray) -> "Vec3":
        """
        Build from the first three items of an array or sequence.

        Items are coerced to Python floats so numpy scalars (float32 from a
        vertex buffer, say) do not leak into the value.
        """
        return cls(float(arr[0]), float(arr[1]), float(arr[2]))

    @classmethod
    def zero(cls) -> "Vec3":
        """The zero vector: origin as a point, no offset as a direction."""
        return cls(0.0, 0.0, 0.0)

    def __iter__(self):
        yield self.x
        yield self.y
        yield self.z

    def to_dict(self) -> dict:
        """JSON shape used by the API: {"x": .., "y": .., "z": ..}."""
        return {"x": self.x, "y": self.y, "z": self.z}

    def __str__(self) -> str:
        # Two decimals per component, e.g. "(1.00, -0.50, 2.25)"
        return f"({self.x:.2f}, {self.y:.2f}, {self.z:.2f})"

    def __repr__(self) -> str:
        return f"Vec3({self.x:.2f}, {self.y:.2f}, {self.z:.2f})"
