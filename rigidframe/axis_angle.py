import math

import numpy as np
from numpy import float64 as np_float64
from numpy import array_equal as np_array_equal
from typing import Iterable

from rigidframe.constants import EPS_NORM
from rigidframe.geometry import (
    axis_angle_to_rotation, axis_angle_to_quaternion,
    quaternion_to_axis_angle, quaternion_multiply, quaternion_conjugate,
    quaternion_angle, quaternion_limit_to_pi,
)
from rigidframe.utils import as_float_array


class AxisAngle:
    """
    A rotation of `angle` radians about a unit `axis`.

    Used to exchange rotations with callers; transforms never store one.
    """
    __slots__ = ('_axis', '_angle')

    def __init__(self, axis: Iterable = (1.0, 0.0, 0.0), angle: float = 0.0):
        self._axis = np.array([1.0, 0.0, 0.0], dtype=np_float64)
        self._angle = 0.0
        if hasattr(axis, "to_quaternion_array"):
            self.set(axis)
        else:
            self.set_axis_angle(axis, angle)

    @classmethod
    def from_unsafe(cls, axis: np.ndarray, angle: float) -> "AxisAngle":
        instance = object.__new__(cls)
        instance._axis = axis
        instance._angle = float(angle)
        return instance

    @property
    def axis(self) -> np.ndarray:
        return self._axis.copy()

    @property
    def angle(self) -> float:
        return self._angle

    def set(self, other) -> None:
        """Copy another AxisAngle or extract one from any orientation."""
        if isinstance(other, AxisAngle):
            self._axis[:] = other._axis
            self._angle = other._angle
            return
        axis, angle = quaternion_to_axis_angle(other.to_quaternion_array())
        self._axis[:] = axis
        self._angle = float(angle)

    def set_axis_angle(self, axis: Iterable, angle: float) -> None:
        self._axis[:] = as_float_array(axis, (3,), "axis")
        self._angle = float(angle)

    def set_rotation_vector(self, rotation_vector: Iterable) -> None:
        v = as_float_array(rotation_vector, (3,), "rotation_vector")
        angle = float(np.linalg.norm(v))
        if angle < EPS_NORM:
            self.set_to_zero()
            return
        self._axis[:] = v / angle
        self._angle = angle

    def set_to_zero(self) -> None:
        self._axis[:] = (1.0, 0.0, 0.0)
        self._angle = 0.0

    def set_to_nan(self) -> None:
        self._axis[:] = np.nan
        self._angle = math.nan

    def contains_nan(self) -> bool:
        return bool(np.isnan(self._axis).any()) or math.isnan(self._angle)

    def normalize_axis(self) -> None:
        n = float(np.linalg.norm(self._axis))
        if n < EPS_NORM:
            return
        self._axis /= n

    def negate(self) -> None:
        self._axis[:] = -self._axis
        self._angle = -self._angle

    def rotation_vector(self) -> np.ndarray:
        n = float(np.linalg.norm(self._axis))
        if n < EPS_NORM:
            return np.zeros(3, dtype=np_float64)
        return self._axis * (self._angle / n)

    def to_rotation_array(self) -> np.ndarray:
        return axis_angle_to_rotation(self._axis, self._angle)

    def to_quaternion_array(self) -> np.ndarray:
        return axis_angle_to_quaternion(self._axis, self._angle)

    def distance(self, other) -> float:
        relative = quaternion_multiply(quaternion_conjugate(self.to_quaternion_array()),
                                       other.to_quaternion_array())
        return float(quaternion_angle(quaternion_limit_to_pi(relative)))

    def epsilon_equals(self, other, epsilon: float) -> bool:
        if not isinstance(other, AxisAngle):
            return False
        if abs(self._angle - other._angle) > epsilon:
            return False
        return bool(np.all(np.abs(self._axis - other._axis) <= epsilon))

    def geometrically_equals(self, other, epsilon: float) -> bool:
        return self.distance(other) <= epsilon

    def copy(self) -> "AxisAngle":
        return AxisAngle.from_unsafe(self._axis.copy(), self._angle)

    def __copy__(self) -> "AxisAngle":
        return self.copy()

    def __eq__(self, other) -> bool:
        if not isinstance(other, AxisAngle):
            return False
        return self._angle == other._angle and np_array_equal(self._axis, other._axis)

    def __ne__(self, other) -> bool:
        return not self.__eq__(other)

    __hash__ = None

    def __repr__(self) -> str:
        x, y, z = self._axis
        return f"AxisAngle(axis=({x:.6g}, {y:.6g}, {z:.6g}), angle={self._angle:.6g})"
