import logging
import math

import numpy as np
from numpy import float64 as np_float64
from numpy import array_equal as np_array_equal
from typing import Tuple, Iterable

from rigidframe.constants import EPS_NORM
from rigidframe.geometry import (
    quaternion_norm, normalize_quaternion, quaternion_to_rotation,
    quaternion_multiply, quaternion_conjugate, quaternion_rotate, quaternion_inverse_rotate,
    quaternion_angle, quaternion_limit_to_pi,
    axis_angle_to_quaternion, quaternion_to_axis_angle,
    rotation_vector_to_quaternion, quaternion_to_rotation_vector,
    yaw_pitch_roll_to_quaternion, quaternion_to_yaw_pitch_roll,
)
from rigidframe.utils import as_float_array

logger = logging.getLogger(__name__)


def _quaternion_of(other) -> np.ndarray:
    if isinstance(other, Quaternion):
        return other._q
    if hasattr(other, "to_quaternion_array"):
        return other.to_quaternion_array()
    return as_float_array(other, (4,), "quaternion")


class Quaternion:
    """
    A unit quaternion (x, y, z, s) representing a 3D rotation.

    Validated setters normalize their input; a quaternion too small to be
    normalized becomes the identity. `set_unsafe` stores the components as given.
    """
    __slots__ = ('_q',)

    def __init__(self, *values):
        self._q = np.array([0.0, 0.0, 0.0, 1.0], dtype=np_float64)
        if values:
            self.set(*values)

    @classmethod
    def from_unsafe(cls, quaternion: np.ndarray) -> "Quaternion":
        instance = object.__new__(cls)
        instance._q = quaternion
        return instance

    @classmethod
    def identity(cls) -> "Quaternion":
        return cls.from_unsafe(np.array([0.0, 0.0, 0.0, 1.0], dtype=np_float64))

    @classmethod
    def from_yaw_pitch_roll(cls, yaw: float, pitch: float, roll: float) -> "Quaternion":
        return cls.from_unsafe(yaw_pitch_roll_to_quaternion(yaw, pitch, roll))

    @classmethod
    def from_axis_angle(cls, axis: Iterable, angle: float) -> "Quaternion":
        return cls.from_unsafe(axis_angle_to_quaternion(as_float_array(axis, (3,), "axis"), angle))

    @classmethod
    def from_rotation_vector(cls, rotation_vector: Iterable) -> "Quaternion":
        return cls.from_unsafe(rotation_vector_to_quaternion(as_float_array(rotation_vector, (3,), "rotation_vector")))

    @property
    def x(self) -> float:
        return float(self._q[0])

    @property
    def y(self) -> float:
        return float(self._q[1])

    @property
    def z(self) -> float:
        return float(self._q[2])

    @property
    def s(self) -> float:
        return float(self._q[3])

    def set(self, *values) -> None:
        """
        Set from another orientation, from a 4 element array-like, or from x, y, z, s.

        Raw components are normalized.
        """
        if len(values) == 4:
            q = np.array(values, dtype=np_float64)
        elif len(values) == 1:
            q = _quaternion_of(values[0])
        else:
            raise ValueError(f"Quaternion expects 1 or 4 values, got {len(values)}")
        self._q[:] = q
        self.normalize()

    def set_unsafe(self, *values) -> None:
        if len(values) == 4:
            self._q[:] = values
        else:
            self._q[:] = _quaternion_of(values[0])

    def set_to_zero(self) -> None:
        self._q[:] = (0.0, 0.0, 0.0, 1.0)

    set_identity = set_to_zero

    def set_to_nan(self) -> None:
        self._q[:] = np.nan

    def contains_nan(self) -> bool:
        return bool(np.isnan(self._q).any())

    def set_axis_angle(self, axis: Iterable, angle: float) -> None:
        self._q[:] = axis_angle_to_quaternion(as_float_array(axis, (3,), "axis"), angle)

    def set_rotation_vector(self, rotation_vector: Iterable) -> None:
        self._q[:] = rotation_vector_to_quaternion(as_float_array(rotation_vector, (3,), "rotation_vector"))

    def set_yaw_pitch_roll(self, yaw: float, pitch: float, roll: float) -> None:
        self._q[:] = yaw_pitch_roll_to_quaternion(yaw, pitch, roll)

    def set_euler(self, rot_x: float, rot_y: float, rot_z: float) -> None:
        self._q[:] = yaw_pitch_roll_to_quaternion(rot_z, rot_y, rot_x)

    def set_to_yaw_quaternion(self, yaw: float) -> None:
        half = 0.5 * yaw
        self._q[:] = (0.0, 0.0, math.sin(half), math.cos(half))

    def set_to_pitch_quaternion(self, pitch: float) -> None:
        half = 0.5 * pitch
        self._q[:] = (0.0, math.sin(half), 0.0, math.cos(half))

    def set_to_roll_quaternion(self, roll: float) -> None:
        half = 0.5 * roll
        self._q[:] = (math.sin(half), 0.0, 0.0, math.cos(half))

    def norm(self) -> float:
        return float(quaternion_norm(self._q))

    def normalize(self) -> None:
        if self.contains_nan():
            return
        if quaternion_norm(self._q) < EPS_NORM:
            logger.debug("Degenerate quaternion %s replaced by identity", self._q)
        self._q[:] = normalize_quaternion(self._q)

    def normalize_and_limit_to_pi(self) -> None:
        """Normalize and pick the sign whose angle lies in [0, pi]."""
        self.normalize()
        self._q[:] = quaternion_limit_to_pi(self._q)

    def conjugate(self) -> None:
        self._q[:3] = -self._q[:3]

    inverse = conjugate

    def negate(self) -> None:
        self._q[:] = -self._q

    def multiply(self, other) -> None:
        """this = this * other"""
        self._q[:] = quaternion_multiply(self._q, _quaternion_of(other))

    def multiply_conjugate_this(self, other) -> None:
        """this = conj(this) * other"""
        self._q[:] = quaternion_multiply(quaternion_conjugate(self._q), _quaternion_of(other))

    def multiply_conjugate_other(self, other) -> None:
        """this = this * conj(other)"""
        self._q[:] = quaternion_multiply(self._q, quaternion_conjugate(_quaternion_of(other)))

    def pre_multiply(self, other) -> None:
        """this = other * this"""
        self._q[:] = quaternion_multiply(_quaternion_of(other), self._q)

    def pre_multiply_conjugate_this(self, other) -> None:
        """this = other * conj(this)"""
        self._q[:] = quaternion_multiply(_quaternion_of(other), quaternion_conjugate(self._q))

    def pre_multiply_conjugate_other(self, other) -> None:
        """this = conj(other) * this"""
        self._q[:] = quaternion_multiply(quaternion_conjugate(_quaternion_of(other)), self._q)

    def transform(self, vector: Iterable) -> np.ndarray:
        """Rotate a 3-vector, returns a new array."""
        return quaternion_rotate(self._q, as_float_array(vector, (3,), "vector"))

    def inverse_transform(self, vector: Iterable) -> np.ndarray:
        return quaternion_inverse_rotate(self._q, as_float_array(vector, (3,), "vector"))

    def dot(self, other) -> float:
        return float(np.dot(self._q, _quaternion_of(other)))

    def get_angle(self) -> float:
        return float(quaternion_angle(self._q))

    angle = property(get_angle)

    def distance(self, other) -> float:
        """Angle in [0, pi] of the rotation taking this one onto `other`."""
        relative = quaternion_multiply(quaternion_conjugate(self._q), _quaternion_of(other))
        return float(quaternion_angle(quaternion_limit_to_pi(relative)))

    def get_yaw_pitch_roll(self) -> Tuple[float, float, float]:
        yaw, pitch, roll = quaternion_to_yaw_pitch_roll(self._q)
        return yaw, pitch, roll

    def get_euler(self) -> np.ndarray:
        yaw, pitch, roll = self.get_yaw_pitch_roll()
        return np.array([roll, pitch, yaw], dtype=np_float64)

    def get_rotation_vector(self) -> np.ndarray:
        return quaternion_to_rotation_vector(self._q)

    def get_axis_angle(self) -> Tuple[np.ndarray, float]:
        axis, angle = quaternion_to_axis_angle(self._q)
        return axis, angle

    def to_rotation_array(self) -> np.ndarray:
        return quaternion_to_rotation(normalize_quaternion(self._q))

    def to_quaternion_array(self) -> np.ndarray:
        return self._q.copy()

    def get(self, out=None) -> np.ndarray:
        if out is None:
            return self._q.copy()
        out[:4] = self._q
        return out

    def epsilon_equals(self, other, epsilon: float) -> bool:
        """Component-wise comparison, q and -q are not epsilon-equal."""
        if not isinstance(other, Quaternion):
            return False
        return bool(np.all(np.abs(self._q - other._q) <= epsilon))

    def geometrically_equals(self, other, epsilon: float) -> bool:
        return self.distance(other) <= epsilon

    def copy(self) -> "Quaternion":
        return Quaternion.from_unsafe(self._q.copy())

    def __copy__(self) -> "Quaternion":
        return self.copy()

    def __eq__(self, other) -> bool:
        if not isinstance(other, Quaternion):
            return False
        return np_array_equal(self._q, other._q)

    def __ne__(self, other) -> bool:
        return not self.__eq__(other)

    __hash__ = None

    def __array__(self, dtype=None, copy=None):
        if dtype is None:
            return self._q.copy()
        return self._q.astype(dtype)

    def __iter__(self):
        return iter(self._q.tolist())

    def __repr__(self) -> str:
        x, y, z, s = self._q
        return f"Quaternion(x={x:.6g}, y={y:.6g}, z={z:.6g}, s={s:.6g})"
