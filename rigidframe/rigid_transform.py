import numpy as np
from numpy import float64 as np_float64
from typing import Union, Iterable

from rigidframe.base_transform import BaseTransform
from rigidframe.linalg import mat3_vec
from rigidframe.rotation_matrix import RotationMatrix
from rigidframe.utils import as_float_array


class RigidTransform(BaseTransform):
    """
    A rigid-body transform (an element of SE(3)): a rotation matrix R and a
    translation t, mapping x -> R x + t.

    Created as the identity and mutated in place. The rotation always passes
    the RotationMatrix checks unless an `*_unsafe` setter was used.
    """
    __slots__ = ('_rotation',)

    def __init__(self, rotation=None, translation: Union[None, Iterable] = None):
        self._rotation = RotationMatrix()
        self._translation = np.zeros(3, dtype=np_float64)
        if rotation is not None:
            self.set(rotation, translation)
        elif translation is not None:
            self.set_translation(translation)

    @classmethod
    def from_unsafe(cls, rotation: np.ndarray, translation: np.ndarray) -> "RigidTransform":
        """Wrap a 3x3 rotation and a translation without copying or checking them."""
        instance = object.__new__(cls)
        instance._rotation = RotationMatrix.from_unsafe(rotation)
        instance._translation = translation
        return instance

    @classmethod
    def identity(cls) -> "RigidTransform":
        return cls.from_unsafe(np.eye(3, dtype=np_float64), np.zeros(3, dtype=np_float64))

    @classmethod
    def from_matrix(cls, matrix: Iterable) -> "RigidTransform":
        """
        Build from a 4x4 homogeneous matrix.

        Raises:
            NotARotationMatrixException: if the upper-left block is not a rotation.
        """
        instance = cls.identity()
        instance.set(as_float_array(matrix, (4, 4), "matrix"))
        return instance

    # ----------------------------------------------------------- storage hooks

    def to_rotation_array(self) -> np.ndarray:
        return self._rotation.to_rotation_array()

    def to_quaternion_array(self) -> np.ndarray:
        return self._rotation.to_quaternion_array()

    def _set_rotation_array(self, rotation: np.ndarray) -> None:
        self._rotation.set_unsafe(rotation)

    def _set_rotation(self, value) -> None:
        self._rotation.set(value)

    # -------------------------------------------------------------- rigid only

    @property
    def rotation(self) -> RotationMatrix:
        """A copy of the rotation part."""
        return self._rotation.copy()

    def set_unsafe(self, m00: float, m01: float, m02: float, m03: float,
                   m10: float, m11: float, m12: float, m13: float,
                   m20: float, m21: float, m22: float, m23: float) -> None:
        """Set from the 12 top coefficients of the 4x4 form without checking the rotation."""
        self._rotation.set_unsafe(m00, m01, m02, m10, m11, m12, m20, m21, m22)
        self._translation[:] = (m03, m13, m23)

    def invert(self) -> None:
        """R = R^T, t = -R^T t"""
        self._rotation.invert()
        self._translation[:] = -mat3_vec(self._rotation._m, self._translation)

    def invert_rotation(self) -> None:
        """Invert the rotation part only; the translation is unchanged."""
        self._rotation.invert()

    def set_and_invert(self, other: BaseTransform) -> None:
        self.set(other)
        self.invert()

    def copy(self) -> "RigidTransform":
        return RigidTransform.from_unsafe(self._rotation._m.copy(), self._translation.copy())
