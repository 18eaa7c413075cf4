import numpy as np
from numpy import float64 as np_float64
from numpy import array_equal as np_array_equal
from typing import Union, Iterable

from rigidframe.constants import EPS_CHECK_ROTATION
from rigidframe.exceptions import NotARotationScaleMatrixException
from rigidframe.linalg import det3, is_rotation_matrix
from rigidframe.rotation_matrix import RotationMatrix
from rigidframe.utils import as_float_array, read_only


def _read_scale(x, y=None, z=None) -> np.ndarray:
    if y is None and z is None:
        scale = np.asarray(x, dtype=np_float64)
        if scale.ndim == 0:
            return np.full(3, float(scale), dtype=np_float64)
        return as_float_array(scale, (3,), "scale").copy()
    if y is None or z is None:
        raise ValueError("scale needs one value, one 3-element sequence or three values")
    return np.array([x, y, z], dtype=np_float64)


class RotationScaleMatrix:
    """
    A rotation matrix R followed by a per-axis scale s, i.e. the 3x3 block R diag(s).

    The two parts are stored separately: the rotation keeps the RotationMatrix
    guarantees and every scale component is strictly positive. Setting one
    never alters the other.
    """
    __slots__ = ('_rotation', '_scale')

    def __init__(self, rotation=None, scale=None):
        self._rotation = RotationMatrix()
        self._scale = np.ones(3, dtype=np_float64)
        if rotation is not None:
            if scale is None:
                self.set(rotation)
            else:
                self.set_rotation(rotation)
        if scale is not None:
            self.set_scale(scale)

    @classmethod
    def from_unsafe(cls, rotation: np.ndarray, scale: np.ndarray) -> "RotationScaleMatrix":
        instance = object.__new__(cls)
        instance._rotation = RotationMatrix.from_unsafe(rotation)
        instance._scale = scale
        return instance

    def set(self, value) -> None:
        """
        Set from another RotationScaleMatrix, from any orientation (unit scale)
        or from a raw 3x3 rotation-scale block.

        A raw block is decomposed: the column norms give the scale and the
        remaining matrix must be a rotation.

        Raises:
            NotARotationScaleMatrixException: if the block has a non-positive
                determinant or does not factor into a rotation and a scale.
        """
        if isinstance(value, RotationScaleMatrix):
            self._rotation.set_unsafe(value._rotation)
            self._scale[:] = value._scale
            return
        if hasattr(value, "to_rotation_array"):
            self._rotation.set(value)
            self._scale[:] = 1.0
            return

        matrix = as_float_array(value, (3, 3), "RotationScaleMatrix")
        if det3(matrix) <= 0.0:
            raise NotARotationScaleMatrixException(matrix)
        scale = np.sqrt(np.sum(matrix * matrix, axis=0))
        rotation = matrix / scale
        if not is_rotation_matrix(rotation, EPS_CHECK_ROTATION):
            raise NotARotationScaleMatrixException(matrix)
        self.set_unsafe(rotation, scale)

    def set_unsafe(self, rotation, scale) -> None:
        self._rotation.set_unsafe(rotation)
        self._scale[:] = scale

    def set_identity(self) -> None:
        self._rotation.set_identity()
        self._scale[:] = 1.0

    set_to_zero = set_identity

    def set_to_nan(self) -> None:
        self._rotation.set_to_nan()
        self._scale[:] = np.nan

    def contains_nan(self) -> bool:
        return self._rotation.contains_nan() or bool(np.isnan(self._scale).any())

    # --------------------------------------------------------------- rotation

    def set_rotation(self, *values) -> None:
        """Set the rotation part only; the scale is left untouched."""
        self._rotation.set(*values)

    def set_rotation_unsafe(self, rotation) -> None:
        self._rotation.set_unsafe(rotation)

    def reset_rotation(self) -> None:
        self._rotation.set_identity()

    def normalize_rotation_matrix(self) -> None:
        self._rotation.normalize()

    def get_rotation(self, out: Union[None, RotationMatrix, np.ndarray] = None):
        """Copy the rotation part into `out` (RotationMatrix or 3x3 array) or a new RotationMatrix."""
        if out is None:
            return self._rotation.copy()
        if isinstance(out, RotationMatrix):
            out.set_unsafe(self._rotation)
            return out
        return self._rotation.get(out)

    @property
    def rotation(self) -> RotationMatrix:
        """A copy of the rotation part."""
        return self._rotation.copy()

    # ------------------------------------------------------------------ scale

    def set_scale(self, x, y=None, z=None) -> None:
        """
        Set the scale from one value (uniform), a 3-element sequence, or three values.

        Raises:
            NotARotationScaleMatrixException: if any component is not > 0.
        """
        scale = _read_scale(x, y, z)
        if not np.all(scale > 0.0):
            raise NotARotationScaleMatrixException(scale=scale)
        self._scale[:] = scale

    def reset_scale(self) -> None:
        self._scale[:] = 1.0

    @property
    def scale(self) -> np.ndarray:
        """The scale as a read-only view."""
        return read_only(self._scale)

    def get_scale(self) -> np.ndarray:
        return self._scale.copy()

    def to_scale_array(self) -> np.ndarray:
        return self._scale.copy()

    # --------------------------------------------------------------- queries

    def get(self, out: Union[None, np.ndarray] = None) -> np.ndarray:
        """The recomposed block R diag(s), into `out` when given."""
        matrix = self._rotation._m * self._scale
        if out is None:
            return matrix
        out[:3, :3] = matrix
        return out

    def get_element(self, row: int, column: int) -> float:
        if not (0 <= row < 3 and 0 <= column < 3):
            raise IndexError(f"RotationScaleMatrix index out of range: ({row}, {column})")
        return float(self._rotation._m[row, column] * self._scale[column])

    def determinant(self) -> float:
        return float(self._rotation.determinant() * np.prod(self._scale))

    def to_rotation_array(self) -> np.ndarray:
        return self._rotation.to_rotation_array()

    def to_quaternion_array(self) -> np.ndarray:
        return self._rotation.to_quaternion_array()

    def transform(self, vector: Iterable) -> np.ndarray:
        v = as_float_array(vector, (3,), "vector")
        return self._rotation.transform(v * self._scale)

    def inverse_transform(self, vector: Iterable) -> np.ndarray:
        return self._rotation.inverse_transform(vector) / self._scale

    def epsilon_equals(self, other, epsilon: float) -> bool:
        if not isinstance(other, RotationScaleMatrix):
            return False
        if not self._rotation.epsilon_equals(other._rotation, epsilon):
            return False
        return bool(np.all(np.abs(self._scale - other._scale) <= epsilon))

    def geometrically_equals(self, other, epsilon: float) -> bool:
        if not isinstance(other, RotationScaleMatrix):
            return False
        if not self._rotation.geometrically_equals(other._rotation, epsilon):
            return False
        return bool(np.all(np.abs(self._scale - other._scale) <= epsilon))

    def copy(self) -> "RotationScaleMatrix":
        return RotationScaleMatrix.from_unsafe(self._rotation._m.copy(), self._scale.copy())

    def __copy__(self) -> "RotationScaleMatrix":
        return self.copy()

    def __eq__(self, other) -> bool:
        if not isinstance(other, RotationScaleMatrix):
            return False
        return self._rotation == other._rotation and np_array_equal(self._scale, other._scale)

    def __ne__(self, other) -> bool:
        return not self.__eq__(other)

    __hash__ = None

    def __repr__(self) -> str:
        return (f"RotationScaleMatrix(rotation={np.array2string(self._rotation._m, precision=6, separator=', ')}, "
                f"scale={np.array2string(self._scale, precision=6, separator=', ')})")
