"""
Console walkthrough of the vector and matrix operations.

Run with:  python -m xform.demo
"""

from __future__ import annotations
from typing import List

from .vector import Vec3
from .matrix import Mat4
from .reference import compare_with_numpy

BANNER = "=" * 46
DIVIDER = "\n" + "-" * 46 + "\n"


def vector_operations() -> str:
    v1 = Vec3(3, 4, 5)
    v2 = Vec3(1, 2, 3)
    normalized = v1.normalized()

    lines = [
        ">>> VECTOR OPERATIONS <<<",
        "",
        f"Vector 1: {v1}",
        f"Vector 2: {v2}",
        "",
        f"Addition (v1 + v2): {v1 + v2}",
        f"Subtraction (v1 - v2): {v1 - v2}",
        f"Dot Product (v1 . v2): {v1.dot(v2):.2f}",
        f"Cross Product (v1 x v2): {v1.cross(v2)}",
        f"Magnitude of v1: {v1.magnitude():.2f}",
        f"Magnitude of v2: {v2.magnitude():.2f}",
        f"Normalized v1: {normalized}",
        f"Magnitude of normalized v1: {normalized.magnitude():.2f}",
    ]
    return "\n".join(lines)


def matrix_operations() -> str:
    scale = Mat4.scale(2, 3, 4)
    rot_y = Mat4.rotation_y(30)

    sections = [
        ("Identity Matrix:", Mat4.identity()),
        ("Scaling Matrix (2, 3, 4):", scale),
        ("Rotation Matrix X (45 degrees):", Mat4.rotation_x(45)),
        ("Rotation Matrix Y (30 degrees):", rot_y),
        ("Rotation Matrix Z (60 degrees):", Mat4.rotation_z(60)),
        ("Translation Matrix (10, 20, 30):", Mat4.translation(10, 20, 30)),
        ("Combined Matrix (Scale @ RotationY):", scale @ rot_y),
    ]

    lines = [">>> MATRIX OPERATIONS <<<", ""]
    for title, matrix in sections:
        lines.append(title)
        lines.append(str(matrix))
        lines.append("")
    return "\n".join(lines).rstrip("\n")


def transformations() -> str:
    original = Vec3(1, 0, 0)
    scale = Mat4.scale(2, 2, 2)
    rotation = Mat4.rotation_y(90)

    # Scale first, then rotate: the rotation goes on the left
    combined = rotation @ scale

    point = Vec3(1, 1, 1)
    full = Mat4.translation(5, 0, 0) @ Mat4.rotation_z(45) @ Mat4.scale(2, 2, 2)

    lines = [
        ">>> VECTOR TRANSFORMATIONS <<<",
        "",
        f"Original Vector: {original}",
        "",
        "After Scaling (2, 2, 2):",
        f"  Result: {scale.transform_direction(original)}",
        "",
        "After Rotation Y (90 degrees):",
        f"  Result: {rotation.transform_direction(original)}",
        "  (Note: X-axis vector rotated 90 degrees around Y should point along -Z)",
        "",
        "After Combined Transformation (Scale then Rotate):",
        f"  Result: {combined.transform_direction(original)}",
        "",
        f"Transform Point {point} with Scale(2,2,2), RotZ(45), Translate(5,0,0):",
        f"  Result: {full.transform_point(point)}",
    ]
    return "\n".join(lines)


def numpy_comparison() -> str:
    lines = [">>> COMPARISON WITH NUMPY <<<", ""]
    for comparison in compare_with_numpy(Vec3(3, 4, 5), Vec3(1, 2, 3), angle=45.0):
        ours = ", ".join(f"{v:.3f}" for v in comparison.ours)
        reference = ", ".join(f"{v:.3f}" for v in comparison.reference)
        if len(comparison.ours) > 3:
            # Matrices are long; the match flag is the interesting part
            lines.append(f"{comparison.name}: Match: {comparison.match}")
            continue
        lines.append(f"{comparison.name}:")
        lines.append(f"  Ours:  ({ours})")
        lines.append(f"  NumPy: ({reference})")
        lines.append(f"  Match: {comparison.match}")
    return "\n".join(lines)


def render() -> str:
    """Full walkthrough as one block of text."""
    parts: List[str] = [
        BANNER,
        "    VECTOR AND MATRIX OPERATIONS DEMO",
        BANNER + "\n",
        vector_operations(),
        DIVIDER,
        matrix_operations(),
        DIVIDER,
        transformations(),
        DIVIDER,
        numpy_comparison(),
        DIVIDER,
        BANNER,
        "    DEMO COMPLETE",
        BANNER,
    ]
    return "\n".join(parts)


def main() -> None:
    print(render())


if __name__ == "__main__":
    main()
