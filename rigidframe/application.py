"""
Applying a transform to geometric primitives.

Every transform is seen here as x -> A x + t with A = R diag(s), where R is
the rotation, s the per-axis scale (ones for rigid and quaternion-based
transforms) and t the translation. Each primitive type has a (forward,
inverse) rule pair in a registry; `transform` and `inverse_transform` look the
rule up along the primitive's MRO, so subclasses inherit the rules of their
base type.
"""

import copy
import numpy as np
from numpy import float64 as np_float64
from numba import njit
from typing import Callable, Dict, Tuple

from rigidframe.constants import EPS_CHECK_2D
from rigidframe.exceptions import NotAMatrix2DException
from rigidframe.geometry import quaternion_multiply, quaternion_conjugate, normalize_quaternion
from rigidframe.linalg import mat3_mul, mat3_mul_transpose_left, is_matrix_2d
from rigidframe.primitives import Point3D, Vector3D, Vector4D, Point2D, Vector2D, Matrix3D
from rigidframe.quaternion import Quaternion
from rigidframe.rotation_matrix import RotationMatrix

from numba.core.errors import NumbaPerformanceWarning
import warnings
warnings.filterwarnings("ignore", category=NumbaPerformanceWarning)


Rule = Callable[[object, object, bool], None]
_RULES: Dict[type, Tuple[Rule, Rule]] = {}


# --------------------------------------------------------------------- kernels

@njit(cache=True)
def transform_point(R, s, t, p):
    """A p + t"""
    out = np.empty(3, dtype=np_float64)
    px, py, pz = s[0]*p[0], s[1]*p[1], s[2]*p[2]
    for i in range(3):
        out[i] = R[i, 0]*px + R[i, 1]*py + R[i, 2]*pz + t[i]
    return out


@njit(cache=True)
def inverse_transform_point(R, s, t, p):
    """A^-1 (p - t)"""
    out = np.empty(3, dtype=np_float64)
    dx, dy, dz = p[0] - t[0], p[1] - t[1], p[2] - t[2]
    for i in range(3):
        out[i] = (R[0, i]*dx + R[1, i]*dy + R[2, i]*dz) / s[i]
    return out


@njit(cache=True)
def transform_vector(R, s, v):
    """A v"""
    out = np.empty(3, dtype=np_float64)
    vx, vy, vz = s[0]*v[0], s[1]*v[1], s[2]*v[2]
    for i in range(3):
        out[i] = R[i, 0]*vx + R[i, 1]*vy + R[i, 2]*vz
    return out


@njit(cache=True)
def inverse_transform_vector(R, s, v):
    """A^-1 v"""
    out = np.empty(3, dtype=np_float64)
    for i in range(3):
        out[i] = (R[0, i]*v[0] + R[1, i]*v[1] + R[2, i]*v[2]) / s[i]
    return out


@njit(cache=True)
def transform_vector4(R, s, t, v):
    """(A v + w t, w) for v = (x, y, z, w)"""
    out = np.empty(4, dtype=np_float64)
    w = v[3]
    vx, vy, vz = s[0]*v[0], s[1]*v[1], s[2]*v[2]
    for i in range(3):
        out[i] = R[i, 0]*vx + R[i, 1]*vy + R[i, 2]*vz + w*t[i]
    out[3] = w
    return out


@njit(cache=True)
def inverse_transform_vector4(R, s, t, v):
    """(A^-1 (v - w t), w)"""
    out = np.empty(4, dtype=np_float64)
    w = v[3]
    dx, dy, dz = v[0] - w*t[0], v[1] - w*t[1], v[2] - w*t[2]
    for i in range(3):
        out[i] = (R[0, i]*dx + R[1, i]*dy + R[2, i]*dz) / s[i]
    out[3] = w
    return out


@njit(cache=True)
def transform_matrix3(R, s, M):
    """A M A^-1 = R S M S^-1 R^T"""
    inner = np.empty((3, 3), dtype=np_float64)
    for i in range(3):
        for j in range(3):
            inner[i, j] = s[i] * M[i, j] / s[j]
    out = mat3_mul(R, inner)
    return mat3_mul(out, R.T.copy())


@njit(cache=True)
def inverse_transform_matrix3(R, s, M):
    """A^-1 M A = S^-1 R^T M R S"""
    rotated = mat3_mul(mat3_mul_transpose_left(R, M), R)
    out = np.empty((3, 3), dtype=np_float64)
    for i in range(3):
        for j in range(3):
            out[i, j] = rotated[i, j] * s[j] / s[i]
    return out


@njit(cache=True)
def transform_point2(R, s, t, p):
    """XY block of A applied to (x, y), plus the XY translation."""
    x, y = s[0]*p[0], s[1]*p[1]
    out = np.empty(2, dtype=np_float64)
    out[0] = R[0, 0]*x + R[0, 1]*y + t[0]
    out[1] = R[1, 0]*x + R[1, 1]*y + t[1]
    return out


@njit(cache=True)
def inverse_transform_point2(R, s, t, p):
    dx, dy = p[0] - t[0], p[1] - t[1]
    out = np.empty(2, dtype=np_float64)
    out[0] = (R[0, 0]*dx + R[1, 0]*dy) / s[0]
    out[1] = (R[0, 1]*dx + R[1, 1]*dy) / s[1]
    return out


@njit(cache=True)
def transform_vector2(R, s, v):
    x, y = s[0]*v[0], s[1]*v[1]
    out = np.empty(2, dtype=np_float64)
    out[0] = R[0, 0]*x + R[0, 1]*y
    out[1] = R[1, 0]*x + R[1, 1]*y
    return out


@njit(cache=True)
def inverse_transform_vector2(R, s, v):
    out = np.empty(2, dtype=np_float64)
    out[0] = (R[0, 0]*v[0] + R[1, 0]*v[1]) / s[0]
    out[1] = (R[0, 1]*v[0] + R[1, 1]*v[1]) / s[1]
    return out


# ----------------------------------------------------------------------- rules

def _parts(transform):
    return transform.to_rotation_array(), transform.to_scale_array(), transform.translation


def _check_2d(rotation, check: bool) -> None:
    if check and not is_matrix_2d(rotation, EPS_CHECK_2D):
        raise NotAMatrix2DException(rotation)


def _point3d(transform, point, check):
    R, s, t = _parts(transform)
    point._data[:] = transform_point(R, s, t, point._data)


def _point3d_inverse(transform, point, check):
    R, s, t = _parts(transform)
    point._data[:] = inverse_transform_point(R, s, t, point._data)


def _vector3d(transform, vector, check):
    R, s, _ = _parts(transform)
    vector._data[:] = transform_vector(R, s, vector._data)


def _vector3d_inverse(transform, vector, check):
    R, s, _ = _parts(transform)
    vector._data[:] = inverse_transform_vector(R, s, vector._data)


def _vector4d(transform, vector, check):
    R, s, t = _parts(transform)
    vector._data[:] = transform_vector4(R, s, t, vector._data)


def _vector4d_inverse(transform, vector, check):
    R, s, t = _parts(transform)
    vector._data[:] = inverse_transform_vector4(R, s, t, vector._data)


def _matrix3d(transform, matrix, check):
    R, s, _ = _parts(transform)
    matrix._m[:] = transform_matrix3(R, s, matrix._m)


def _matrix3d_inverse(transform, matrix, check):
    R, s, _ = _parts(transform)
    matrix._m[:] = inverse_transform_matrix3(R, s, matrix._m)


def _quaternion(transform, quaternion, check):
    q = quaternion_multiply(transform.to_quaternion_array(), quaternion.to_quaternion_array())
    quaternion.set_unsafe(normalize_quaternion(q))


def _quaternion_inverse(transform, quaternion, check):
    q = quaternion_multiply(quaternion_conjugate(transform.to_quaternion_array()),
                            quaternion.to_quaternion_array())
    quaternion.set_unsafe(normalize_quaternion(q))


def _rotation_matrix(transform, rotation, check):
    rotation.set_unsafe(mat3_mul(transform.to_rotation_array(), rotation._m))


def _rotation_matrix_inverse(transform, rotation, check):
    rotation.set_unsafe(mat3_mul_transpose_left(transform.to_rotation_array(), rotation._m))


def _point2d(transform, point, check):
    R, s, t = _parts(transform)
    _check_2d(R, check)
    point._data[:] = transform_point2(R, s, t, point._data)


def _point2d_inverse(transform, point, check):
    R, s, t = _parts(transform)
    _check_2d(R, check)
    point._data[:] = inverse_transform_point2(R, s, t, point._data)


def _vector2d(transform, vector, check):
    R, s, _ = _parts(transform)
    _check_2d(R, check)
    vector._data[:] = transform_vector2(R, s, vector._data)


def _vector2d_inverse(transform, vector, check):
    R, s, _ = _parts(transform)
    _check_2d(R, check)
    vector._data[:] = inverse_transform_vector2(R, s, vector._data)


# -------------------------------------------------------------------- registry

def register_rule(primitive_type: type, forward: Rule, inverse: Rule) -> None:
    """
    Register how transforms act on `primitive_type`.

    Both callables receive (transform, target, check_if_transform_in_xy_plane)
    and update `target` in place. Writing into a `transformed=` output also
    needs `copy.copy` support and a `set(other)` method on the type.
    """
    _RULES[primitive_type] = (forward, inverse)


def _lookup(obj) -> Tuple[Rule, Rule]:
    for klass in type(obj).__mro__:
        rules = _RULES.get(klass)
        if rules is not None:
            return rules
    raise TypeError(f"Cannot apply a transform to an object of type {type(obj).__name__}")


def _apply(index: int, transform, original, transformed, check_if_transform_in_xy_plane: bool):
    rule = _lookup(original)[index]
    if transformed is None:
        rule(transform, original, check_if_transform_in_xy_plane)
        return original
    if _lookup(transformed) is not _lookup(original):
        raise TypeError(
            f"Cannot write a transformed {type(original).__name__} into a {type(transformed).__name__}")
    # `transformed` is only written once the rule has succeeded
    result = copy.copy(original)
    rule(transform, result, check_if_transform_in_xy_plane)
    transformed.set(result)
    return transformed


def transform(transform, original, transformed=None, check_if_transform_in_xy_plane: bool = True):
    """
    Apply `transform` to `original`.

    Args:
        transform: Any rigidframe transform.
        original: The primitive to transform. Modified in place unless
            `transformed` is given.
        transformed: Optional primitive of the same kind receiving the result.
            Left untouched when an exception is raised.
        check_if_transform_in_xy_plane: For 2D primitives only, raise when the
            rotation is not about Z.

    Returns:
        The transformed primitive (`original` or `transformed`).

    Raises:
        TypeError: if no rule is registered for the primitive type.
        NotAMatrix2DException: for 2D primitives, see `check_if_transform_in_xy_plane`.
    """
    return _apply(0, transform, original, transformed, check_if_transform_in_xy_plane)


def inverse_transform(transform, original, transformed=None, check_if_transform_in_xy_plane: bool = True):
    """Apply the inverse of `transform` to `original`, see `transform`."""
    return _apply(1, transform, original, transformed, check_if_transform_in_xy_plane)


register_rule(Point3D, _point3d, _point3d_inverse)
register_rule(Vector3D, _vector3d, _vector3d_inverse)
register_rule(Vector4D, _vector4d, _vector4d_inverse)
register_rule(Matrix3D, _matrix3d, _matrix3d_inverse)
register_rule(Quaternion, _quaternion, _quaternion_inverse)
register_rule(RotationMatrix, _rotation_matrix, _rotation_matrix_inverse)
register_rule(Point2D, _point2d, _point2d_inverse)
register_rule(Vector2D, _vector2d, _vector2d_inverse)
