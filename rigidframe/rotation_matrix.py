import logging

import numpy as np
from numpy import float64 as np_float64
from numpy import array_equal as np_array_equal
from typing import Tuple, Union, Iterable

from rigidframe.constants import EPS_CHECK_ROTATION, EPS_CHECK_2D
from rigidframe.exceptions import NotARotationMatrixException, NotAMatrix2DException
from rigidframe.geometry import (
    quaternion_to_rotation, normalize_quaternion, rotation_to_quaternion,
    axis_angle_to_rotation, rotation_to_axis_angle,
    rotation_vector_to_rotation, rotation_to_rotation_vector,
    yaw_pitch_roll_to_rotation, rotation_to_yaw_pitch_roll, is_gimbal_locked,
    yaw_matrix, pitch_matrix, roll_matrix,
)
from rigidframe.linalg import (
    det3, mat3_mul, mat3_mul_transpose_left, mat3_mul_transpose_right,
    mat3_vec, mat3_transpose_vec, orthonormalize, is_rotation_matrix, is_matrix_2d,
)
from rigidframe.utils import as_float_array

logger = logging.getLogger(__name__)


def _element(row: int, column: int):
    def getter(self) -> float:
        return float(self._m[row, column])
    return property(getter, doc=f"Coefficient at row {row}, column {column}.")


def _read_matrix(values, name: str) -> np.ndarray:
    if len(values) == 1:
        value = values[0]
        if isinstance(value, RotationMatrix):
            return value._m
        if hasattr(value, "to_rotation_array"):
            return value.to_rotation_array()
        return as_float_array(value, (3, 3), name)
    if len(values) == 9:
        return np.array(values, dtype=np_float64).reshape(3, 3)
    raise ValueError(f"{name} expects a 3x3 matrix or 9 coefficients, got {len(values)} values")


class RotationMatrix:
    """
    A 3x3 proper rotation matrix.

    The validated setters guarantee the matrix stays orthonormal with a
    determinant of +1 (within EPS_CHECK_ROTATION); the `*_unsafe` setters skip
    the check and are meant for inputs already known to be rotations.
    """
    __slots__ = ('_m',)

    def __init__(self, *values):
        self._m = np.eye(3, dtype=np_float64)
        if values:
            self.set(*values)

    @classmethod
    def from_unsafe(cls, matrix: np.ndarray) -> "RotationMatrix":
        """Wrap a 3x3 array without copying or checking it."""
        instance = object.__new__(cls)
        instance._m = matrix
        return instance

    @classmethod
    def identity(cls) -> "RotationMatrix":
        return cls.from_unsafe(np.eye(3, dtype=np_float64))

    @classmethod
    def from_yaw_pitch_roll(cls, yaw: float, pitch: float, roll: float) -> "RotationMatrix":
        return cls.from_unsafe(yaw_pitch_roll_to_rotation(yaw, pitch, roll))

    @classmethod
    def from_euler(cls, rot_x: float, rot_y: float, rot_z: float) -> "RotationMatrix":
        return cls.from_unsafe(yaw_pitch_roll_to_rotation(rot_z, rot_y, rot_x))

    @classmethod
    def from_axis_angle(cls, axis: Iterable, angle: float) -> "RotationMatrix":
        return cls.from_unsafe(axis_angle_to_rotation(as_float_array(axis, (3,), "axis"), angle))

    @classmethod
    def from_rotation_vector(cls, rotation_vector: Iterable) -> "RotationMatrix":
        return cls.from_unsafe(rotation_vector_to_rotation(as_float_array(rotation_vector, (3,), "rotation_vector")))

    @classmethod
    def from_quaternion(cls, quaternion: Iterable) -> "RotationMatrix":
        instance = cls.identity()
        instance.set_quaternion(quaternion)
        return instance

    # ------------------------------------------------------------------ setters

    def set(self, *values) -> None:
        """
        Set this rotation from another orientation, a 3x3 array-like or 9 coefficients.

        Raises:
            NotARotationMatrixException: if a raw matrix is not a proper rotation.
        """
        matrix = _read_matrix(values, "RotationMatrix")
        if not is_rotation_matrix(matrix, EPS_CHECK_ROTATION):
            raise NotARotationMatrixException(matrix)
        self._m[:] = matrix

    def set_unsafe(self, *values) -> None:
        """Same as `set` without the orthonormality check."""
        self._m[:] = _read_matrix(values, "RotationMatrix")

    def set_and_normalize(self, *values) -> None:
        """Set from a near-rotation and re-orthonormalize it."""
        self._m[:] = orthonormalize(_read_matrix(values, "RotationMatrix"))

    def set_and_invert(self, other) -> None:
        self.set(other)
        self.invert()

    def set_to_zero(self) -> None:
        """A zero rotation is the identity."""
        self._m[:] = np.eye(3)

    set_identity = set_to_zero

    def set_to_nan(self) -> None:
        self._m[:] = np.nan

    def contains_nan(self) -> bool:
        return bool(np.isnan(self._m).any())

    def set_quaternion(self, quaternion: Iterable) -> None:
        q = as_float_array(quaternion, (4,), "quaternion")
        self._m[:] = quaternion_to_rotation(normalize_quaternion(q))

    def set_axis_angle(self, axis: Iterable, angle: float) -> None:
        self._m[:] = axis_angle_to_rotation(as_float_array(axis, (3,), "axis"), angle)

    def set_rotation_vector(self, rotation_vector: Iterable) -> None:
        self._m[:] = rotation_vector_to_rotation(as_float_array(rotation_vector, (3,), "rotation_vector"))

    def set_yaw_pitch_roll(self, yaw: float, pitch: float, roll: float) -> None:
        self._m[:] = yaw_pitch_roll_to_rotation(yaw, pitch, roll)

    def set_euler(self, rot_x: float, rot_y: float, rot_z: float) -> None:
        """Euler angles about X, Y and Z; same convention as yaw-pitch-roll."""
        self._m[:] = yaw_pitch_roll_to_rotation(rot_z, rot_y, rot_x)

    def set_to_yaw_matrix(self, yaw: float) -> None:
        self._m[:] = yaw_matrix(yaw)

    def set_to_pitch_matrix(self, pitch: float) -> None:
        self._m[:] = pitch_matrix(pitch)

    def set_to_roll_matrix(self, roll: float) -> None:
        self._m[:] = roll_matrix(roll)

    def normalize(self) -> None:
        """Re-orthonormalize (Gram-Schmidt on the rows) to remove numerical drift."""
        if self.contains_nan():
            return
        normalized = orthonormalize(self._m)
        logger.debug("Normalized rotation matrix, max correction %.3e",
                     float(np.max(np.abs(normalized - self._m))))
        self._m[:] = normalized

    # ------------------------------------------------------------- operations

    def invert(self) -> None:
        """The inverse of a rotation is its transpose."""
        self._m[:] = self._m.T.copy()

    transpose = invert

    def multiply(self, other) -> None:
        """this = this * other"""
        self._m[:] = mat3_mul(self._m, _rotation_of(other))

    def multiply_transpose_this(self, other) -> None:
        """this = this^T * other"""
        self._m[:] = mat3_mul_transpose_left(self._m, _rotation_of(other))

    def multiply_transpose_other(self, other) -> None:
        """this = this * other^T"""
        self._m[:] = mat3_mul_transpose_right(self._m, _rotation_of(other))

    def pre_multiply(self, other) -> None:
        """this = other * this"""
        self._m[:] = mat3_mul(_rotation_of(other), self._m)

    def pre_multiply_transpose_this(self, other) -> None:
        """this = other * this^T"""
        self._m[:] = mat3_mul_transpose_right(_rotation_of(other), self._m)

    def pre_multiply_transpose_other(self, other) -> None:
        """this = other^T * this"""
        self._m[:] = mat3_mul_transpose_left(_rotation_of(other), self._m)

    def append_yaw_rotation(self, yaw: float) -> None:
        self._m[:] = mat3_mul(self._m, yaw_matrix(yaw))

    def append_pitch_rotation(self, pitch: float) -> None:
        self._m[:] = mat3_mul(self._m, pitch_matrix(pitch))

    def append_roll_rotation(self, roll: float) -> None:
        self._m[:] = mat3_mul(self._m, roll_matrix(roll))

    def prepend_yaw_rotation(self, yaw: float) -> None:
        self._m[:] = mat3_mul(yaw_matrix(yaw), self._m)

    def prepend_pitch_rotation(self, pitch: float) -> None:
        self._m[:] = mat3_mul(pitch_matrix(pitch), self._m)

    def prepend_roll_rotation(self, roll: float) -> None:
        self._m[:] = mat3_mul(roll_matrix(roll), self._m)

    def transform(self, vector: Iterable) -> np.ndarray:
        """Rotate a 3-vector, returns a new array."""
        return mat3_vec(self._m, as_float_array(vector, (3,), "vector"))

    def inverse_transform(self, vector: Iterable) -> np.ndarray:
        return mat3_transpose_vec(self._m, as_float_array(vector, (3,), "vector"))

    # ---------------------------------------------------------------- queries

    def determinant(self) -> float:
        return float(det3(self._m))

    def is_rotation_matrix(self, epsilon: float = EPS_CHECK_ROTATION) -> bool:
        return bool(is_rotation_matrix(self._m, epsilon))

    def is_matrix_2d(self, epsilon: float = EPS_CHECK_2D) -> bool:
        """True when this is a rotation about Z only."""
        return bool(is_matrix_2d(self._m, epsilon))

    def check_if_matrix_2d(self, epsilon: float = EPS_CHECK_2D) -> None:
        """
        Raises:
            NotAMatrix2DException: if this is not a rotation about Z.
        """
        if not self.is_matrix_2d(epsilon):
            raise NotAMatrix2DException(self._m)

    def get_yaw_pitch_roll(self) -> Tuple[float, float, float]:
        if is_gimbal_locked(self._m):
            logger.debug("Yaw-pitch-roll extraction in gimbal lock, roll reported as 0")
        yaw, pitch, roll = rotation_to_yaw_pitch_roll(self._m)
        return yaw, pitch, roll

    @property
    def yaw(self) -> float:
        return self.get_yaw_pitch_roll()[0]

    @property
    def pitch(self) -> float:
        return self.get_yaw_pitch_roll()[1]

    @property
    def roll(self) -> float:
        return self.get_yaw_pitch_roll()[2]

    def get_euler(self) -> np.ndarray:
        """Returns (rot_x, rot_y, rot_z)."""
        yaw, pitch, roll = self.get_yaw_pitch_roll()
        return np.array([roll, pitch, yaw], dtype=np_float64)

    def get_rotation_vector(self) -> np.ndarray:
        return rotation_to_rotation_vector(self._m)

    def get_axis_angle(self) -> Tuple[np.ndarray, float]:
        axis, angle = rotation_to_axis_angle(self._m)
        return axis, angle

    def to_rotation_array(self) -> np.ndarray:
        return self._m.copy()

    def to_quaternion_array(self) -> np.ndarray:
        return rotation_to_quaternion(self._m)

    def get(self, out: Union[None, np.ndarray] = None) -> np.ndarray:
        """Pack into `out` (3x3) or a new array."""
        if out is None:
            return self._m.copy()
        out[:3, :3] = self._m
        return out

    def get_element(self, row: int, column: int) -> float:
        if not (0 <= row < 3 and 0 <= column < 3):
            raise IndexError(f"RotationMatrix index out of range: ({row}, {column})")
        return float(self._m[row, column])

    m00 = _element(0, 0)
    m01 = _element(0, 1)
    m02 = _element(0, 2)
    m10 = _element(1, 0)
    m11 = _element(1, 1)
    m12 = _element(1, 2)
    m20 = _element(2, 0)
    m21 = _element(2, 1)
    m22 = _element(2, 2)

    def distance(self, other) -> float:
        """Angle of the rotation taking this one onto `other`, in [0, pi]."""
        _, angle = rotation_to_axis_angle(mat3_mul_transpose_left(self._m, _rotation_of(other)))
        return float(angle)

    def epsilon_equals(self, other, epsilon: float) -> bool:
        if not isinstance(other, RotationMatrix):
            return False
        return bool(np.all(np.abs(self._m - other._m) <= epsilon))

    def geometrically_equals(self, other, epsilon: float) -> bool:
        return self.distance(other) <= epsilon

    def copy(self) -> "RotationMatrix":
        return RotationMatrix.from_unsafe(self._m.copy())

    def __copy__(self) -> "RotationMatrix":
        return self.copy()

    def __eq__(self, other) -> bool:
        if not isinstance(other, RotationMatrix):
            return False
        return np_array_equal(self._m, other._m)

    def __ne__(self, other) -> bool:
        return not self.__eq__(other)

    __hash__ = None

    def __array__(self, dtype=None, copy=None):
        if dtype is None:
            return self._m.copy()
        return self._m.astype(dtype)

    def __repr__(self) -> str:
        return f"RotationMatrix({np.array2string(self._m, precision=6, separator=', ')})"


def _rotation_of(other) -> np.ndarray:
    """3x3 array of any orientation or array-like operand."""
    if isinstance(other, RotationMatrix):
        return other._m
    if hasattr(other, "to_rotation_array"):
        return other.to_rotation_array()
    return as_float_array(other, (3, 3), "rotation")
