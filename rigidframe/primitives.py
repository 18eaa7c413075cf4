import numpy as np
from numpy import float64 as np_float64
from numpy import array_equal as np_array_equal
from typing import Union, Iterable

from rigidframe.utils import as_float_array


class _Tuple:
    """
    Fixed-size float64 tuple stored in a numpy array.

    Subclasses only declare `_size`; component properties are added per class.
    """
    __slots__ = ('_data',)
    _size: int = 0

    def __init__(self, *values):
        self._data = np.zeros(self._size, dtype=np_float64)
        if values:
            self.set(*values)

    @classmethod
    def from_unsafe(cls, data: np.ndarray):
        """Wrap `data` without copying or checking it."""
        instance = object.__new__(cls)
        instance._data = data
        return instance

    def set(self, *values) -> None:
        """
        Set the components from another tuple of the same kind, from one
        array-like, or from individual scalars.
        """
        if len(values) == 1:
            value = values[0]
            if isinstance(value, _Tuple):
                value = value._data
            self._data[:] = as_float_array(value, (self._size,), type(self).__name__)
        elif len(values) == self._size:
            self._data[:] = values
        else:
            raise ValueError(
                f"{type(self).__name__} expects 1 or {self._size} values, got {len(values)}")

    def set_to_zero(self) -> None:
        self._data[:] = 0.0

    def set_to_nan(self) -> None:
        self._data[:] = np.nan

    def contains_nan(self) -> bool:
        return bool(np.isnan(self._data).any())

    def to_array(self) -> np.ndarray:
        return self._data.copy()

    def to_list(self) -> list:
        return self._data.tolist()

    def copy(self):
        return type(self).from_unsafe(self._data.copy())

    def __copy__(self):
        return self.copy()

    def epsilon_equals(self, other, epsilon: float) -> bool:
        if not isinstance(other, type(self)):
            return False
        return bool(np.all(np.abs(self._data - other._data) <= epsilon))

    def __eq__(self, other) -> bool:
        if not isinstance(other, type(self)):
            return False
        return np_array_equal(self._data, other._data)

    def __ne__(self, other) -> bool:
        return not self.__eq__(other)

    __hash__ = None

    def __array__(self, dtype=None, copy=None):
        if dtype is None:
            return self._data.copy()
        return self._data.astype(dtype)

    def __iter__(self):
        return iter(self._data.tolist())

    def __len__(self) -> int:
        return self._size

    def __getitem__(self, index: int) -> float:
        return float(self._data[index])

    def __setitem__(self, index: int, value: float) -> None:
        self._data[index] = value

    def __repr__(self) -> str:
        values = ", ".join(f"{v:.6g}" for v in self._data)
        return f"{type(self).__name__}({values})"


def _component(index: int, doc: str):
    def getter(self) -> float:
        return float(self._data[index])

    def setter(self, value: float) -> None:
        self._data[index] = value

    return property(getter, setter, doc=doc)


class _Tuple3D(_Tuple):
    __slots__ = ()
    _size = 3

    x = _component(0, "x component")
    y = _component(1, "y component")
    z = _component(2, "z component")

    def norm(self) -> float:
        return float(np.linalg.norm(self._data))


class Point3D(_Tuple3D):
    """A position in 3D space. Affected by the translation of a transform."""
    __slots__ = ()

    def distance(self, other: "Point3D") -> float:
        return float(np.linalg.norm(self._data - np.asarray(other, dtype=np_float64)))


class Vector3D(_Tuple3D):
    """A direction or displacement in 3D space. Ignores the translation of a transform."""
    __slots__ = ()

    def dot(self, other: Union["Vector3D", Iterable]) -> float:
        return float(np.dot(self._data, np.asarray(other, dtype=np_float64)))

    def normalize(self) -> None:
        n = self.norm()
        if n > 0.0:
            self._data /= n


class Vector4D(_Tuple):
    """
    A homogeneous vector (x, y, z, s).

    The s component weights the translation: s = 1 behaves like a point and
    s = 0 like a vector. It is never changed by a transform.
    """
    __slots__ = ()
    _size = 4

    x = _component(0, "x component")
    y = _component(1, "y component")
    z = _component(2, "z component")
    s = _component(3, "homogeneous component")


class _Tuple2D(_Tuple):
    __slots__ = ()
    _size = 2

    x = _component(0, "x component")
    y = _component(1, "y component")

    def norm(self) -> float:
        return float(np.linalg.norm(self._data))


class Point2D(_Tuple2D):
    """A position in the XY plane."""
    __slots__ = ()


class Vector2D(_Tuple2D):
    """A direction in the XY plane."""
    __slots__ = ()


class Matrix3D:
    """
    A general 3x3 matrix (a tensor, an inertia, a covariance...).

    Transforming it applies the similarity A M A^-1 of the transform's
    rotation-scale part.
    """
    __slots__ = ('_m',)

    def __init__(self, matrix: Union[None, Iterable] = None):
        if matrix is None:
            self._m = np.zeros((3, 3), dtype=np_float64)
        else:
            self._m = np.empty((3, 3), dtype=np_float64)
            self.set(matrix)

    @classmethod
    def identity(cls) -> "Matrix3D":
        return cls.from_unsafe(np.eye(3, dtype=np_float64))

    @classmethod
    def from_unsafe(cls, matrix: np.ndarray) -> "Matrix3D":
        instance = object.__new__(cls)
        instance._m = matrix
        return instance

    def set(self, matrix) -> None:
        if isinstance(matrix, Matrix3D):
            matrix = matrix._m
        elif hasattr(matrix, "to_rotation_array"):
            matrix = matrix.to_rotation_array()
        self._m[:] = as_float_array(matrix, (3, 3), "Matrix3D")

    def set_to_zero(self) -> None:
        self._m[:] = 0.0

    def set_identity(self) -> None:
        self._m[:] = np.eye(3)

    def set_to_nan(self) -> None:
        self._m[:] = np.nan

    def contains_nan(self) -> bool:
        return bool(np.isnan(self._m).any())

    def get_element(self, row: int, column: int) -> float:
        if not (0 <= row < 3 and 0 <= column < 3):
            raise IndexError(f"Matrix3D index out of range: ({row}, {column})")
        return float(self._m[row, column])

    def to_array(self) -> np.ndarray:
        return self._m.copy()

    def copy(self) -> "Matrix3D":
        return Matrix3D.from_unsafe(self._m.copy())

    def __copy__(self) -> "Matrix3D":
        return self.copy()

    def epsilon_equals(self, other, epsilon: float) -> bool:
        if not isinstance(other, Matrix3D):
            return False
        return bool(np.all(np.abs(self._m - other._m) <= epsilon))

    def __eq__(self, other) -> bool:
        if not isinstance(other, Matrix3D):
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
        return f"Matrix3D({np.array2string(self._m, precision=6, separator=', ')})"
