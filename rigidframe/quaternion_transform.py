import numpy as np
from numpy import float64 as np_float64
from numba import njit
from typing import Union, Iterable, Tuple

from rigidframe.base_transform import BaseTransform, _check_transform
from rigidframe.geometry import (
    normalize_quaternion, rotation_to_quaternion,
    quaternion_multiply, quaternion_conjugate, quaternion_rotate, quaternion_inverse_rotate,
)
from rigidframe.linalg import mat3_vec
from rigidframe.quaternion import Quaternion
from rigidframe.rotation_matrix import RotationMatrix

from numba.core.errors import NumbaPerformanceWarning
import warnings
warnings.filterwarnings("ignore", category=NumbaPerformanceWarning)


# Same compositions as the matrix kernels of base_transform, in quaternion form.
# The receiver is (q, t), the argument (qo, to); each returns the new (q, t).

@njit(cache=True)
def compose_multiply(q, t, qo, to):
    return normalize_quaternion(quaternion_multiply(q, qo)), t + quaternion_rotate(q, to)


@njit(cache=True)
def compose_multiply_invert_this(q, t, qo, to):
    return (normalize_quaternion(quaternion_multiply(quaternion_conjugate(q), qo)),
            quaternion_inverse_rotate(q, to - t))


@njit(cache=True)
def compose_multiply_invert_other(q, t, qo, to):
    return (normalize_quaternion(quaternion_multiply(q, quaternion_conjugate(qo))),
            t - quaternion_rotate(q, quaternion_inverse_rotate(qo, to)))


@njit(cache=True)
def compose_pre_multiply(q, t, qo, to):
    return normalize_quaternion(quaternion_multiply(qo, q)), quaternion_rotate(qo, t) + to


@njit(cache=True)
def compose_pre_multiply_invert_this(q, t, qo, to):
    return (normalize_quaternion(quaternion_multiply(qo, quaternion_conjugate(q))),
            to - quaternion_rotate(qo, quaternion_inverse_rotate(q, t)))


@njit(cache=True)
def compose_pre_multiply_invert_other(q, t, qo, to):
    return (normalize_quaternion(quaternion_multiply(quaternion_conjugate(qo), q)),
            quaternion_inverse_rotate(qo, t - to))


class QuaternionTransform(BaseTransform):
    """
    A rigid-body transform stored as a unit quaternion q = (x, y, z, s) and a
    translation t. Equivalent to RigidTransform but composes with Hamilton
    products, and flattens to the 7 element (qx, qy, qz, qs, tx, ty, tz) form.
    """
    __slots__ = ('_quaternion',)

    def __init__(self, rotation=None, translation: Union[None, Iterable] = None):
        self._quaternion = Quaternion()
        self._translation = np.zeros(3, dtype=np_float64)
        if rotation is not None:
            self.set(rotation, translation)
        elif translation is not None:
            self.set_translation(translation)

    @classmethod
    def from_unsafe(cls, quaternion: np.ndarray, translation: np.ndarray) -> "QuaternionTransform":
        instance = object.__new__(cls)
        instance._quaternion = Quaternion.from_unsafe(quaternion)
        instance._translation = translation
        return instance

    @classmethod
    def identity(cls) -> "QuaternionTransform":
        return cls.from_unsafe(np.array([0.0, 0.0, 0.0, 1.0]), np.zeros(3, dtype=np_float64))

    # ----------------------------------------------------------- storage hooks

    def to_rotation_array(self) -> np.ndarray:
        return self._quaternion.to_rotation_array()

    def to_quaternion_array(self) -> np.ndarray:
        return self._quaternion.to_quaternion_array()

    def _set_rotation_array(self, rotation: np.ndarray) -> None:
        # a 3x3 that is not a rotation goes through the normalizing conversion
        self._quaternion.set_unsafe(rotation_to_quaternion(rotation))

    def _set_rotation_quaternion(self, quaternion: np.ndarray) -> None:
        self._quaternion.set_unsafe(quaternion)

    def _set_rotation(self, value) -> None:
        if not hasattr(value, "to_quaternion_array"):
            array = np.asarray(value, dtype=np_float64)
            if array.shape == (3, 3):
                value = RotationMatrix(array)
        self._quaternion.set(value)

    def _set_from_transform(self, other: BaseTransform) -> None:
        self._quaternion.set_unsafe(other.to_quaternion_array())
        self._translation[:] = other.translation

    def _compose_quaternion(self, kernel, other: BaseTransform) -> None:
        _check_transform(other)
        q, t = kernel(self._quaternion._q, self._translation, other.to_quaternion_array(), other.translation)
        self._quaternion.set_unsafe(q)
        self._translation[:] = t

    # ------------------------------------------------------------- composition

    def multiply(self, other: BaseTransform) -> None:
        """this = this * other"""
        self._compose_quaternion(compose_multiply, other)

    def multiply_invert_this(self, other: BaseTransform) -> None:
        """this = this^-1 * other"""
        self._compose_quaternion(compose_multiply_invert_this, other)

    def multiply_invert_other(self, other: BaseTransform) -> None:
        """this = this * other^-1"""
        self._compose_quaternion(compose_multiply_invert_other, other)

    def pre_multiply(self, other: BaseTransform) -> None:
        """this = other * this"""
        self._compose_quaternion(compose_pre_multiply, other)

    def pre_multiply_invert_this(self, other: BaseTransform) -> None:
        """this = other * this^-1"""
        self._compose_quaternion(compose_pre_multiply_invert_this, other)

    def pre_multiply_invert_other(self, other: BaseTransform) -> None:
        """this = other^-1 * this"""
        self._compose_quaternion(compose_pre_multiply_invert_other, other)

    def _append_rotation(self, elementary: np.ndarray) -> None:
        q = quaternion_multiply(self._quaternion._q, rotation_to_quaternion(elementary))
        self._quaternion.set_unsafe(normalize_quaternion(q))

    def _prepend_rotation(self, elementary: np.ndarray) -> None:
        q = quaternion_multiply(rotation_to_quaternion(elementary), self._quaternion._q)
        self._quaternion.set_unsafe(normalize_quaternion(q))
        self._translation[:] = mat3_vec(elementary, self._translation)

    def invert(self) -> None:
        """q = conj(q), t = -(conj(q) t)"""
        self._quaternion.conjugate()
        self._translation[:] = -quaternion_rotate(self._quaternion._q, self._translation)

    def invert_rotation(self) -> None:
        self._quaternion.conjugate()

    def set_and_invert(self, other: BaseTransform) -> None:
        self.set(other)
        self.invert()

    def normalize_rotation_part(self) -> None:
        self._quaternion.normalize()

    # ------------------------------------------------------------------ misc

    @property
    def quaternion(self) -> Quaternion:
        """A copy of the rotation part."""
        return self._quaternion.copy()

    def set_rotation_to_nan(self) -> None:
        self._quaternion.set_to_nan()

    def contains_nan(self) -> bool:
        return self._quaternion.contains_nan() or bool(np.isnan(self._translation).any())

    def get(self, out: Union[None, np.ndarray] = None) -> np.ndarray:
        """
        Pack into a 4x4 homogeneous matrix, its 16 element flat form, or the
        7 element (qx, qy, qz, qs, tx, ty, tz) form when `out` has shape (7,).
        """
        if out is not None and out.shape == (7,):
            out[:4] = self._quaternion._q
            out[4:] = self._translation
            return out
        return BaseTransform.get(self, out)

    def to_flat_array(self) -> np.ndarray:
        """(qx, qy, qz, qs, tx, ty, tz)"""
        return np.concatenate((self._quaternion._q, self._translation))

    def _rotation_epsilon_equals(self, other: "QuaternionTransform", epsilon: float) -> bool:
        return self._quaternion.epsilon_equals(other._quaternion, epsilon)

    def _state(self) -> Tuple[np.ndarray, ...]:
        return (self._quaternion._q, self._translation)

    def copy(self) -> "QuaternionTransform":
        return QuaternionTransform.from_unsafe(self._quaternion._q.copy(), self._translation.copy())
