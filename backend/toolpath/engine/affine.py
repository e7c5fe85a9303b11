"""2D affine transforms as 3x3 homogeneous matrices. No engine imports.

Points are column vectors, so ``m @ (x, y, 1)`` maps a point and ``b @ a``
applies ``a`` first. ``then(a, b)`` spells that order out.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray

Matrix = NDArray[np.float64]


def identity() -> Matrix:
    return np.identity(3, dtype=np.float64)


def from_coefficients(a: float, b: float, c: float, d: float, e: float, f: float) -> Matrix:
    """SVG ``matrix(a b c d e f)`` ordering."""
    return np.array([[a, c, e], [b, d, f], [0.0, 0.0, 1.0]], dtype=np.float64)


def translation(tx: float, ty: float) -> Matrix:
    return from_coefficients(1.0, 0.0, 0.0, 1.0, tx, ty)


def scaling(sx: float, sy: float) -> Matrix:
    return from_coefficients(sx, 0.0, 0.0, sy, 0.0, 0.0)


def rotation(degrees: float, cx: float = 0.0, cy: float = 0.0) -> Matrix:
    """Rotation about (cx, cy), positive angles clockwise in a Y-down frame."""
    rad = math.radians(degrees)
    cos_a, sin_a = math.cos(rad), math.sin(rad)
    rot = from_coefficients(cos_a, sin_a, -sin_a, cos_a, 0.0, 0.0)
    if cx == 0.0 and cy == 0.0:
        return rot
    return translation(cx, cy) @ rot @ translation(-cx, -cy)


def skew_x(degrees: float) -> Matrix:
    return from_coefficients(1.0, 0.0, math.tan(math.radians(degrees)), 1.0, 0.0, 0.0)


def skew_y(degrees: float) -> Matrix:
    return from_coefficients(1.0, math.tan(math.radians(degrees)), 0.0, 1.0, 0.0, 0.0)


def then(first: Matrix, second: Matrix) -> Matrix:
    """Transform applying ``first`` and then ``second``."""
    return second @ first


def apply(m: Matrix, x: float, y: float) -> tuple[float, float]:
    px = m[0, 0] * x + m[0, 1] * y + m[0, 2]
    py = m[1, 0] * x + m[1, 1] * y + m[1, 2]
    return (float(px), float(py))


def coefficients(m: Matrix) -> tuple[float, float, float, float, float, float]:
    """Inverse of from_coefficients: (a, b, c, d, e, f)."""
    return (
        float(m[0, 0]),
        float(m[1, 0]),
        float(m[0, 1]),
        float(m[1, 1]),
        float(m[0, 2]),
        float(m[1, 2]),
    )
