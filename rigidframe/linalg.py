import math
import numpy as np
from numpy import float64 as np_float64
from numba import njit
from numba.core.errors import NumbaPerformanceWarning
import warnings

from rigidframe.constants import EPS_NORM

warnings.filterwarnings("ignore", category=NumbaPerformanceWarning)


@njit(fastmath=True, inline='always', cache=True)
def det3(M):
    """Determinant of a 3 x 3 (faster than np.linalg.det for tiny mats)."""
    return (
        M[0, 0] * (M[1, 1] * M[2, 2] - M[1, 2] * M[2, 1])
        - M[0, 1] * (M[1, 0] * M[2, 2] - M[1, 2] * M[2, 0])
        + M[0, 2] * (M[1, 0] * M[2, 1] - M[1, 1] * M[2, 0])
    )


@njit(cache=True)
def mat3_mul(a, b):
    """a @ b for two 3 x 3."""
    out = np.empty((3, 3), dtype=np_float64)
    for i in range(3):
        for j in range(3):
            out[i, j] = a[i, 0] * b[0, j] + a[i, 1] * b[1, j] + a[i, 2] * b[2, j]
    return out


@njit(cache=True)
def mat3_mul_transpose_left(a, b):
    """aᵀ @ b for two 3 x 3."""
    out = np.empty((3, 3), dtype=np_float64)
    for i in range(3):
        for j in range(3):
            out[i, j] = a[0, i] * b[0, j] + a[1, i] * b[1, j] + a[2, i] * b[2, j]
    return out


@njit(cache=True)
def mat3_mul_transpose_right(a, b):
    """a @ bᵀ for two 3 x 3."""
    out = np.empty((3, 3), dtype=np_float64)
    for i in range(3):
        for j in range(3):
            out[i, j] = a[i, 0] * b[j, 0] + a[i, 1] * b[j, 1] + a[i, 2] * b[j, 2]
    return out


@njit(cache=True)
def mat3_vec(a, v):
    """a @ v for a 3 x 3 and a 3-vector."""
    out = np.empty(3, dtype=np_float64)
    out[0] = a[0, 0] * v[0] + a[0, 1] * v[1] + a[0, 2] * v[2]
    out[1] = a[1, 0] * v[0] + a[1, 1] * v[1] + a[1, 2] * v[2]
    out[2] = a[2, 0] * v[0] + a[2, 1] * v[1] + a[2, 2] * v[2]
    return out


@njit(cache=True)
def mat3_transpose_vec(a, v):
    """aᵀ @ v for a 3 x 3 and a 3-vector."""
    out = np.empty(3, dtype=np_float64)
    out[0] = a[0, 0] * v[0] + a[1, 0] * v[1] + a[2, 0] * v[2]
    out[1] = a[0, 1] * v[0] + a[1, 1] * v[1] + a[2, 1] * v[2]
    out[2] = a[0, 2] * v[0] + a[1, 2] * v[1] + a[2, 2] * v[2]
    return out


@njit(cache=True)
def orthonormalize(M):
    """
    Gram-Schmidt on the rows of a near-rotation 3 x 3.

    The first row keeps its direction, the second is made orthogonal to it,
    and the third is rebuilt as their cross product so that det = +1.
    A degenerate input (zero row) is returned unchanged.
    """
    x0, x1, x2 = M[0, 0], M[0, 1], M[0, 2]
    nx = math.sqrt(x0*x0 + x1*x1 + x2*x2)
    if nx < EPS_NORM:
        return M.copy()
    x0 /= nx
    x1 /= nx
    x2 /= nx

    y0, y1, y2 = M[1, 0], M[1, 1], M[1, 2]
    d = x0*y0 + x1*y1 + x2*y2
    y0 -= d * x0
    y1 -= d * x1
    y2 -= d * x2
    ny = math.sqrt(y0*y0 + y1*y1 + y2*y2)
    if ny < EPS_NORM:
        return M.copy()
    y0 /= ny
    y1 /= ny
    y2 /= ny

    out = np.empty((3, 3), dtype=np_float64)
    out[0, 0], out[0, 1], out[0, 2] = x0, x1, x2
    out[1, 0], out[1, 1], out[1, 2] = y0, y1, y2
    out[2, 0] = x1*y2 - x2*y1
    out[2, 1] = x2*y0 - x0*y2
    out[2, 2] = x0*y1 - x1*y0
    return out


@njit(cache=True)
def is_rotation_matrix(M, epsilon):
    """
    Check that a 3 x 3 is a proper rotation.

    The rows must be unit-length and pairwise orthogonal, and the determinant
    must be 1, all within `epsilon`.
    """
    for i in range(3):
        for j in range(i, 3):
            dot = M[i, 0] * M[j, 0] + M[i, 1] * M[j, 1] + M[i, 2] * M[j, 2]
            if i == j:
                dot -= 1.0
            if abs(dot) > epsilon:
                return False
    return abs(det3(M) - 1.0) <= epsilon


@njit(cache=True)
def is_matrix_2d(M, epsilon):
    """Check that a 3 x 3 only acts in the XY plane (a rotation about Z)."""
    if abs(M[2, 0]) > epsilon or abs(M[0, 2]) > epsilon:
        return False
    if abs(M[2, 1]) > epsilon or abs(M[1, 2]) > epsilon:
        return False
    return abs(M[2, 2] - 1.0) <= epsilon


@njit(cache=True)
def is_identity(M, epsilon):
    for i in range(3):
        for j in range(3):
            expected = 1.0 if i == j else 0.0
            if abs(M[i, j] - expected) > epsilon:
                return False
    return True
