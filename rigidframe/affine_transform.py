import numpy as np
from numpy import float64 as np_float64
from typing import Union, Iterable, Tuple

from rigidframe.base_transform import BaseTransform
from rigidframe.rigid_transform import RigidTransform
from rigidframe.rotation_scale_matrix import RotationScaleMatrix
from rigidframe.utils import as_float_array


class AffineTransform(BaseTransform):
    """
    A rotation-scale matrix A = R diag(s) and a translation t, mapping x -> A x + t.

    Every scale component is strictly positive, so the transform is always
    invertible; it has no `invert()` but the invert-this / invert-other
    compositions and `inverse_transform` are available.

    Composing with another transform only composes the rotation parts: this
    transform keeps its own scale and the scale of the argument is discarded.
    """
    __slots__ = ('_rotation_scale',)

    def __init__(self, rotation=None, translation: Union[None, Iterable] = None, scale=None):
        self._rotation_scale = RotationScaleMatrix()
        self._translation = np.zeros(3, dtype=np_float64)
        if rotation is not None:
            BaseTransform.set(self, rotation, translation)
        elif translation is not None:
            self.set_translation(translation)
        if scale is not None:
            self.set_scale(scale)

    @classmethod
    def from_unsafe(cls, rotation: np.ndarray, scale: np.ndarray, translation: np.ndarray) -> "AffineTransform":
        instance = object.__new__(cls)
        instance._rotation_scale = RotationScaleMatrix.from_unsafe(rotation, scale)
        instance._translation = translation
        return instance

    @classmethod
    def identity(cls) -> "AffineTransform":
        return cls.from_unsafe(np.eye(3, dtype=np_float64), np.ones(3, dtype=np_float64),
                               np.zeros(3, dtype=np_float64))

    # ----------------------------------------------------------- storage hooks

    def to_rotation_array(self) -> np.ndarray:
        return self._rotation_scale.to_rotation_array()

    def to_quaternion_array(self) -> np.ndarray:
        return self._rotation_scale.to_quaternion_array()

    def to_scale_array(self) -> np.ndarray:
        return self._rotation_scale.to_scale_array()

    def _set_rotation_array(self, rotation: np.ndarray) -> None:
        self._rotation_scale.set_rotation_unsafe(rotation)

    def _set_rotation(self, value) -> None:
        self._rotation_scale.set_rotation(value)

    def _reset_scale(self) -> None:
        self._rotation_scale.reset_scale()

    def _set_rotation_part(self, value) -> None:
        """
        A RotationScaleMatrix or a raw 3x3 block sets rotation and scale
        together; any other orientation resets the scale.
        """
        self._rotation_scale.set(value)

    def _set_from_transform(self, other: BaseTransform) -> None:
        if isinstance(other, AffineTransform):
            self._rotation_scale.set(other._rotation_scale)
        else:
            self._rotation_scale.set_rotation_unsafe(other.to_rotation_array())
            self._rotation_scale.reset_scale()
        self._translation[:] = other.translation

    # ------------------------------------------------------------------ setters

    def set(self, value, *args) -> None:
        """
        Set this transform.

        Besides every form accepted by `BaseTransform.set`, takes
        `set(rotation, scale, translation)`. A raw 3x3 (or the upper-left block
        of a 4x4) is read as a rotation-scale block and decomposed.

        Raises:
            NotARotationScaleMatrixException: if a raw block is not a rotation
                times a positive scale, or a scale is not positive.
        """
        if len(args) == 2:
            scale, translation = args
            self._rotation_scale.set_rotation(value)
            self.set_scale(scale)
            self._translation[:] = as_float_array(translation, (3,), "translation")
            return
        BaseTransform.set(self, value, *args)

    def set_scale(self, x, y=None, z=None) -> None:
        """
        Raises:
            NotARotationScaleMatrixException: if any component is not > 0.
        """
        self._rotation_scale.set_scale(x, y, z)

    def reset_scale(self) -> None:
        self._rotation_scale.reset_scale()

    def get_scale(self) -> np.ndarray:
        return self._rotation_scale.get_scale()

    @property
    def scale(self) -> np.ndarray:
        return self._rotation_scale.scale

    @property
    def rotation_scale(self) -> RotationScaleMatrix:
        """A copy of the rotation-scale part."""
        return self._rotation_scale.copy()

    def get_rotation_scale(self, out: Union[None, RotationScaleMatrix] = None) -> RotationScaleMatrix:
        if out is None:
            return self._rotation_scale.copy()
        out.set(self._rotation_scale)
        return out

    def get_rigid_transform(self, out: Union[None, BaseTransform] = None) -> BaseTransform:
        """This transform without its scale, as a new RigidTransform or packed into `out`."""
        if out is None:
            out = RigidTransform()
        out.set(self.to_rotation_array(), self._translation)
        return out

    def normalize_rotation_part(self) -> None:
        self._rotation_scale.normalize_rotation_matrix()

    def set_to_nan(self) -> None:
        self._rotation_scale.set_to_nan()
        self._translation[:] = np.nan

    def contains_nan(self) -> bool:
        return self._rotation_scale.contains_nan() or bool(np.isnan(self._translation).any())

    def _rotation_epsilon_equals(self, other: "AffineTransform", epsilon: float) -> bool:
        return self._rotation_scale.epsilon_equals(other._rotation_scale, epsilon)

    def _state(self) -> Tuple[np.ndarray, ...]:
        return (self._rotation_scale._rotation._m, self._rotation_scale._scale, self._translation)

    def copy(self) -> "AffineTransform":
        return AffineTransform.from_unsafe(self._rotation_scale._rotation._m.copy(),
                                           self._rotation_scale._scale.copy(),
                                           self._translation.copy())
