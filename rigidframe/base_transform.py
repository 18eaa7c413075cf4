import numpy as np
from numpy import float64 as np_float64
from numpy import array_equal as np_array_equal
from numba import njit
from typing import Tuple, Union, Iterable, List

from rigidframe import application
from rigidframe.axis_angle import AxisAngle
from rigidframe.constants import EPS_CHECK_2D
from rigidframe.exceptions import NotAMatrix2DException
from rigidframe.geometry import (
    quaternion_to_rotation, rotation_to_axis_angle,
    rotation_to_rotation_vector, yaw_matrix, pitch_matrix, roll_matrix,
)
from rigidframe.linalg import (
    det3, mat3_mul, mat3_mul_transpose_left, mat3_mul_transpose_right,
    mat3_vec, mat3_transpose_vec, is_matrix_2d,
)
from rigidframe.quaternion import Quaternion
from rigidframe.rotation_matrix import RotationMatrix, _read_matrix
from rigidframe.utils import as_float_array, vector3

from numba.core.errors import NumbaPerformanceWarning
import warnings
warnings.filterwarnings("ignore", category=NumbaPerformanceWarning)


# Composition kernels. The receiver is (R, s, t), the argument (Ro, to); the
# argument's scale never takes part. Each returns the new (R, t).

@njit(cache=True)
def compose_multiply(R, s, t, Ro, to):
    """this = this * other"""
    return mat3_mul(R, Ro), t + mat3_vec(R, s * to)


@njit(cache=True)
def compose_multiply_invert_this(R, s, t, Ro, to):
    """this = this^-1 * other"""
    return mat3_mul_transpose_left(R, Ro), mat3_transpose_vec(R, to - t) / s


@njit(cache=True)
def compose_multiply_invert_other(R, s, t, Ro, to):
    """this = this * other^-1"""
    return mat3_mul_transpose_right(R, Ro), t - mat3_vec(R, s * mat3_transpose_vec(Ro, to))


@njit(cache=True)
def compose_pre_multiply(R, s, t, Ro, to):
    """this = other * this"""
    return mat3_mul(Ro, R), mat3_vec(Ro, t) + to


@njit(cache=True)
def compose_pre_multiply_invert_this(R, s, t, Ro, to):
    """this = other * this^-1"""
    return mat3_mul_transpose_right(Ro, R), to - mat3_vec(Ro, mat3_transpose_vec(R, t) / s)


@njit(cache=True)
def compose_pre_multiply_invert_other(R, s, t, Ro, to):
    """this = other^-1 * this"""
    return mat3_mul_transpose_left(Ro, R), mat3_transpose_vec(Ro, t - to)


def _element(row: int, column: int):
    def getter(self) -> float:
        return self.get_element(row, column)
    return property(getter, doc=f"Coefficient at row {row}, column {column} of the 4x4 form.")


class BaseTransform:
    """
    Behavior shared by RigidTransform, QuaternionTransform and AffineTransform.

    A transform maps x -> A x + t where A = R diag(s). Subclasses store the
    rotation their own way and implement the small storage interface below
    (`to_rotation_array`, `to_quaternion_array`, `to_scale_array`,
    `_set_rotation_array`, `_set_rotation_quaternion`); everything else is
    written against it.
    """
    __slots__ = ('_translation',)

    # ------------------------------------------------------------ storage hooks

    def to_rotation_array(self) -> np.ndarray:
        raise NotImplementedError

    def to_quaternion_array(self) -> np.ndarray:
        raise NotImplementedError

    def to_scale_array(self) -> np.ndarray:
        return np.ones(3, dtype=np_float64)

    def _set_rotation_array(self, rotation: np.ndarray) -> None:
        """Store a 3x3 already known to be a rotation."""
        raise NotImplementedError

    def _set_rotation_quaternion(self, quaternion: np.ndarray) -> None:
        """Store a unit quaternion."""
        self._set_rotation_array(quaternion_to_rotation(quaternion))

    def _set_rotation(self, value) -> None:
        """Validated rotation setter shared by every `set_rotation*` path."""
        raise NotImplementedError

    def _reset_scale(self) -> None:
        pass

    def _compose(self, kernel, other) -> None:
        R, t = kernel(self.to_rotation_array(), self.to_scale_array(), self._translation,
                      _rotation_of(other), _translation_of(other))
        self._set_rotation_array(R)
        self._translation[:] = t

    # ------------------------------------------------------------------ setters

    def set(self, value, translation: Union[None, Iterable] = None) -> None:
        """
        Set this transform.

        Accepted forms:
            - another transform of any kind (its scale only matters to an
              AffineTransform receiver); a given `translation` replaces its
              translation,
            - an orientation (RotationMatrix, Quaternion, AxisAngle, 3x3
              array-like), with `translation` or alone (zero translation),
            - a 4x4 homogeneous matrix or its 16 element row-major flat form,
            - the 7 element (qx, qy, qz, qs, tx, ty, tz) form.

        Raises:
            NotARotationMatrixException: if the rotation part is not a rotation.
            ValueError: if an array has none of the accepted shapes.
        """
        if isinstance(value, BaseTransform):
            if translation is None:
                self._set_from_transform(value)
            else:
                t = as_float_array(translation, (3,), "translation").copy()
                self._set_from_transform(value)
                self._translation[:] = t
            return
        if translation is not None:
            self._set_rotation_part(value)
            self._translation[:] = as_float_array(translation, (3,), "translation")
            return
        if hasattr(value, "to_rotation_array"):
            self._set_rotation_part(value)
            self._translation[:] = 0.0
            return
        array = np.asarray(value, dtype=np_float64)
        if array.shape == (16,):
            array = array.reshape(4, 4)
        if array.shape == (3, 3):
            self._set_rotation_part(array)
            self._translation[:] = 0.0
        elif array.shape == (4, 4):
            self._set_rotation_part(array[:3, :3])
            self._translation[:] = array[:3, 3]
        elif array.shape == (7,):
            self._set_rotation(Quaternion(array[:4]))
            self._reset_scale()
            self._translation[:] = array[4:]
        else:
            raise ValueError(
                f"Cannot set a transform from an array of shape {array.shape}; "
                "expected (4, 4), (16,) or (7,), or a rotation with a translation")

    def _set_from_transform(self, other: "BaseTransform") -> None:
        self._set_rotation_array(other.to_rotation_array())
        self._reset_scale()
        self._translation[:] = other.translation

    def _set_rotation_part(self, value) -> None:
        """Rotation part of `set`: the rotation is replaced and any scale reset."""
        self._set_rotation(value)
        self._reset_scale()

    def set_as_transpose(self, column_major: Iterable) -> None:
        """Set from a 16 element column-major flat 4x4."""
        array = as_float_array(column_major, (16,), "column_major")
        self.set(array.reshape(4, 4).T)

    def set_identity(self) -> None:
        self._set_rotation_array(np.eye(3, dtype=np_float64))
        self._reset_scale()
        self._translation[:] = 0.0

    set_to_zero = set_identity

    def set_to_nan(self) -> None:
        self.set_rotation_to_nan()
        self.set_translation_to_nan()

    def set_rotation_to_nan(self) -> None:
        self._set_rotation_array(np.full((3, 3), np.nan))

    def set_translation_to_nan(self) -> None:
        self._translation[:] = np.nan

    def contains_nan(self) -> bool:
        return bool(np.isnan(self.to_rotation_array()).any() or np.isnan(self._translation).any())

    def reset_rotation(self) -> None:
        self._set_rotation_array(np.eye(3, dtype=np_float64))

    set_rotation_to_zero = reset_rotation

    def reset_translation(self) -> None:
        self._translation[:] = 0.0

    set_translation_to_zero = reset_translation

    # ----------------------------------------------------------------- rotation

    def set_rotation(self, value) -> None:
        """
        Set the rotation part from any orientation or a 3x3 array-like.
        The translation (and an affine scale) are left untouched.

        Raises:
            NotARotationMatrixException: if a raw 3x3 is not a rotation.
        """
        self._set_rotation(value)

    def set_rotation_unsafe(self, *values) -> None:
        """
        Same as `set_rotation` without the orthonormality check. Takes an
        orientation, a 3x3 array-like or 9 coefficients.
        """
        self._set_rotation_array(_read_matrix(values, "rotation"))

    def set_rotation_quaternion(self, quaternion: Iterable) -> None:
        q = as_float_array(quaternion, (4,), "quaternion")
        self._set_rotation_quaternion(Quaternion(q).to_quaternion_array())

    def set_rotation_axis_angle(self, axis: Iterable, angle: float) -> None:
        self._set_rotation_quaternion(AxisAngle(axis, angle).to_quaternion_array())

    def set_rotation_vector(self, rotation_vector: Iterable) -> None:
        self._set_rotation_quaternion(Quaternion.from_rotation_vector(rotation_vector).to_quaternion_array())

    def set_rotation_yaw_pitch_roll(self, yaw: float, pitch: float, roll: float) -> None:
        self._set_rotation_quaternion(Quaternion.from_yaw_pitch_roll(yaw, pitch, roll).to_quaternion_array())

    def set_rotation_euler(self, rot_x: float, rot_y: float, rot_z: float) -> None:
        self.set_rotation_yaw_pitch_roll(rot_z, rot_y, rot_x)

    def set_rotation_yaw(self, yaw: float) -> None:
        self._set_rotation_array(yaw_matrix(yaw))

    def set_rotation_pitch(self, pitch: float) -> None:
        self._set_rotation_array(pitch_matrix(pitch))

    def set_rotation_roll(self, roll: float) -> None:
        self._set_rotation_array(roll_matrix(roll))

    def set_rotation_and_zero_translation(self, value) -> None:
        self.set_rotation(value)
        self.reset_translation()

    def set_rotation_quaternion_and_zero_translation(self, quaternion: Iterable) -> None:
        self.set_rotation_quaternion(quaternion)
        self.reset_translation()

    def set_rotation_axis_angle_and_zero_translation(self, axis: Iterable, angle: float) -> None:
        self.set_rotation_axis_angle(axis, angle)
        self.reset_translation()

    def set_rotation_vector_and_zero_translation(self, rotation_vector: Iterable) -> None:
        self.set_rotation_vector(rotation_vector)
        self.reset_translation()

    def set_rotation_yaw_pitch_roll_and_zero_translation(self, yaw: float, pitch: float, roll: float) -> None:
        self.set_rotation_yaw_pitch_roll(yaw, pitch, roll)
        self.reset_translation()

    def set_rotation_euler_and_zero_translation(self, rot_x: float, rot_y: float, rot_z: float) -> None:
        self.set_rotation_euler(rot_x, rot_y, rot_z)
        self.reset_translation()

    def set_rotation_yaw_and_zero_translation(self, yaw: float) -> None:
        self.set_rotation_yaw(yaw)
        self.reset_translation()

    def set_rotation_pitch_and_zero_translation(self, pitch: float) -> None:
        self.set_rotation_pitch(pitch)
        self.reset_translation()

    def set_rotation_roll_and_zero_translation(self, roll: float) -> None:
        self.set_rotation_roll(roll)
        self.reset_translation()

    def normalize_rotation_part(self) -> None:
        """Remove the numerical drift accumulated by long chains of compositions."""
        rotation = RotationMatrix.from_unsafe(self.to_rotation_array())
        rotation.normalize()
        self._set_rotation_array(rotation._m)

    def determinant_rotation_part(self) -> float:
        return float(det3(self.to_rotation_array()))

    def is_rotation_2d(self, epsilon: float = EPS_CHECK_2D) -> bool:
        return bool(is_matrix_2d(self.to_rotation_array(), epsilon))

    def check_if_rotation_2d(self, epsilon: float = EPS_CHECK_2D) -> None:
        """
        Raises:
            NotAMatrix2DException: if the rotation is not about Z only.
        """
        rotation = self.to_rotation_array()
        if not is_matrix_2d(rotation, epsilon):
            raise NotAMatrix2DException(rotation)

    # -------------------------------------------------------------- translation

    @property
    def translation(self) -> np.ndarray:
        """The translation vector (the live array)."""
        return self._translation

    @translation.setter
    def translation(self, value: Iterable) -> None:
        self._translation[:] = as_float_array(value, (3,), "translation")

    def set_translation(self, x, y=None, z=None) -> None:
        self._translation[:] = vector3(x, y, z, "translation")

    def set_translation_x(self, x: float) -> None:
        self._translation[0] = x

    def set_translation_y(self, y: float) -> None:
        self._translation[1] = y

    def set_translation_z(self, z: float) -> None:
        self._translation[2] = z

    @property
    def translation_x(self) -> float:
        return float(self._translation[0])

    @property
    def translation_y(self) -> float:
        return float(self._translation[1])

    @property
    def translation_z(self) -> float:
        return float(self._translation[2])

    def set_translation_and_identity_rotation(self, x, y=None, z=None) -> None:
        self.set_translation(x, y, z)
        self.reset_rotation()

    def get_translation(self, out: Union[None, np.ndarray] = None) -> np.ndarray:
        if out is None:
            return self._translation.copy()
        out[:3] = self._translation
        return out

    # ------------------------------------------------------------- composition

    def multiply(self, other: "BaseTransform") -> None:
        """this = this * other"""
        self._compose(compose_multiply, other)

    def multiply_invert_this(self, other: "BaseTransform") -> None:
        """this = this^-1 * other"""
        self._compose(compose_multiply_invert_this, other)

    def multiply_invert_other(self, other: "BaseTransform") -> None:
        """this = this * other^-1"""
        self._compose(compose_multiply_invert_other, other)

    def pre_multiply(self, other: "BaseTransform") -> None:
        """this = other * this"""
        self._compose(compose_pre_multiply, other)

    def pre_multiply_invert_this(self, other: "BaseTransform") -> None:
        """this = other * this^-1"""
        self._compose(compose_pre_multiply_invert_this, other)

    def pre_multiply_invert_other(self, other: "BaseTransform") -> None:
        """this = other^-1 * this"""
        self._compose(compose_pre_multiply_invert_other, other)

    def _append_rotation(self, elementary: np.ndarray) -> None:
        self._set_rotation_array(mat3_mul(self.to_rotation_array(), elementary))

    def _prepend_rotation(self, elementary: np.ndarray) -> None:
        self._set_rotation_array(mat3_mul(elementary, self.to_rotation_array()))
        self._translation[:] = mat3_vec(elementary, self._translation)

    def append_yaw_rotation(self, yaw: float) -> None:
        """Rotate about the local Z axis; the translation is unchanged."""
        self._append_rotation(yaw_matrix(yaw))

    def append_pitch_rotation(self, pitch: float) -> None:
        self._append_rotation(pitch_matrix(pitch))

    def append_roll_rotation(self, roll: float) -> None:
        self._append_rotation(roll_matrix(roll))

    def prepend_yaw_rotation(self, yaw: float) -> None:
        """Rotate about the world Z axis; the translation rotates as well."""
        self._prepend_rotation(yaw_matrix(yaw))

    def prepend_pitch_rotation(self, pitch: float) -> None:
        self._prepend_rotation(pitch_matrix(pitch))

    def prepend_roll_rotation(self, roll: float) -> None:
        self._prepend_rotation(roll_matrix(roll))

    def append_translation(self, x, y=None, z=None) -> None:
        """Translate along the local axes: t += A d."""
        d = vector3(x, y, z, "translation")
        self._translation += mat3_vec(self.to_rotation_array(), self.to_scale_array() * d)

    def prepend_translation(self, x, y=None, z=None) -> None:
        """Translate along the world axes: t += d."""
        self._translation += vector3(x, y, z, "translation")

    # -------------------------------------------------------------- application

    def transform(self, original, transformed=None, check_if_transform_in_xy_plane: bool = True):
        """
        Apply this transform to a primitive, an orientation or another transform.

        The primitive is modified in place unless `transformed` is given, in
        which case the result goes there. Returns the transformed object.
        """
        return application.transform(self, original, transformed, check_if_transform_in_xy_plane)

    def inverse_transform(self, original, transformed=None, check_if_transform_in_xy_plane: bool = True):
        """Apply the inverse of this transform, see `transform`."""
        return application.inverse_transform(self, original, transformed, check_if_transform_in_xy_plane)

    def transform_point(self, point: Iterable) -> np.ndarray:
        """A p + t for a raw 3-element point."""
        p = as_float_array(point, (3,), "point")
        return application.transform_point(self.to_rotation_array(), self.to_scale_array(), self._translation, p)

    def transform_vector(self, vector: Iterable) -> np.ndarray:
        """A v for a raw 3-element vector; the translation is ignored."""
        v = as_float_array(vector, (3,), "vector")
        return application.transform_vector(self.to_rotation_array(), self.to_scale_array(), v)

    def inverse_transform_point(self, point: Iterable) -> np.ndarray:
        p = as_float_array(point, (3,), "point")
        return application.inverse_transform_point(self.to_rotation_array(), self.to_scale_array(), self._translation, p)

    def inverse_transform_vector(self, vector: Iterable) -> np.ndarray:
        v = as_float_array(vector, (3,), "vector")
        return application.inverse_transform_vector(self.to_rotation_array(), self.to_scale_array(), v)

    # ----------------------------------------------------------------- getters

    def get_rotation(self, out=None):
        """
        Copy the rotation part.

        Args:
            out: A RotationMatrix, Quaternion or AxisAngle to pack into, a 3x3
                array (matrix), a 4 element array (quaternion) or a 3 element
                array (rotation vector). When omitted a new RotationMatrix is returned.

        Returns:
            `out`, or the new RotationMatrix.
        """
        if out is None:
            return RotationMatrix.from_unsafe(self.to_rotation_array())
        if isinstance(out, RotationMatrix):
            out.set_unsafe(self.to_rotation_array())
        elif isinstance(out, Quaternion):
            out.set_unsafe(self.to_quaternion_array())
        elif isinstance(out, AxisAngle):
            out.set(self)
        elif isinstance(out, np.ndarray) and out.shape == (3, 3):
            out[:] = self.to_rotation_array()
        elif isinstance(out, np.ndarray) and out.shape == (4,):
            out[:] = self.to_quaternion_array()
        elif isinstance(out, np.ndarray) and out.shape == (3,):
            out[:] = rotation_to_rotation_vector(self.to_rotation_array())
        else:
            raise TypeError(f"Cannot pack a rotation into {type(out).__name__}")
        return out

    def get_rotation_yaw_pitch_roll(self) -> Tuple[float, float, float]:
        return RotationMatrix.from_unsafe(self.to_rotation_array()).get_yaw_pitch_roll()

    def get_rotation_euler(self) -> np.ndarray:
        return RotationMatrix.from_unsafe(self.to_rotation_array()).get_euler()

    def get_rotation_vector(self) -> np.ndarray:
        return rotation_to_rotation_vector(self.to_rotation_array())

    def get_rotation_scale_array(self) -> np.ndarray:
        """The 3x3 block A = R diag(s)."""
        return self.to_rotation_array() * self.to_scale_array()

    def get(self, out: Union[None, np.ndarray] = None) -> np.ndarray:
        """
        Pack into a 4x4 homogeneous matrix (or a 16 element row-major flat array).

        Args:
            out: Optional destination of shape (4, 4) or (16,).
        """
        matrix = np.eye(4, dtype=np_float64)
        matrix[:3, :3] = self.get_rotation_scale_array()
        matrix[:3, 3] = self._translation
        if out is None:
            return matrix
        if out.shape == (16,):
            out[:] = matrix.ravel()
        else:
            out[:] = matrix
        return out

    def get_rotation_and_translation(self, rotation=None, translation: Union[None, np.ndarray] = None):
        """Returns (rotation, translation), packed into the given containers when provided."""
        return self.get_rotation(rotation), self.get_translation(translation)

    def to_matrix(self) -> np.ndarray:
        return self.get()

    def to_flat_array(self) -> np.ndarray:
        return self.get().ravel()

    def to_list(self) -> List[List[float]]:
        return self.get().tolist()

    def get_element(self, row: int, column: int) -> float:
        """
        Coefficient of the 4x4 form. Row 3 is [0, 0, 0, 1], column 3 the translation.

        Raises:
            IndexError: if `row` or `column` is outside [0, 3].
        """
        if not (0 <= row <= 3 and 0 <= column <= 3):
            raise IndexError(f"Transform index out of range: ({row}, {column})")
        if row == 3:
            return 1.0 if column == 3 else 0.0
        if column == 3:
            return float(self._translation[row])
        return float(self.to_rotation_array()[row, column] * self.to_scale_array()[column])

    m00 = _element(0, 0)
    m01 = _element(0, 1)
    m02 = _element(0, 2)
    m03 = _element(0, 3)
    m10 = _element(1, 0)
    m11 = _element(1, 1)
    m12 = _element(1, 2)
    m13 = _element(1, 3)
    m20 = _element(2, 0)
    m21 = _element(2, 1)
    m22 = _element(2, 2)
    m23 = _element(2, 3)
    m30 = _element(3, 0)
    m31 = _element(3, 1)
    m32 = _element(3, 2)
    m33 = _element(3, 3)

    # -------------------------------------------------------------- comparison

    def _rotation_epsilon_equals(self, other, epsilon: float) -> bool:
        return bool(np.all(np.abs(self.to_rotation_array() - other.to_rotation_array()) <= epsilon))

    def epsilon_equals(self, other, epsilon: float) -> bool:
        """Component-wise comparison of the rotation part and of the translation."""
        if not isinstance(other, type(self)):
            return False
        if not self._rotation_epsilon_equals(other, epsilon):
            return False
        return bool(np.all(np.abs(self._translation - other._translation) <= epsilon))

    def geometrically_equals(self, other: "BaseTransform", epsilon: float) -> bool:
        """
        True when the relative rotation is smaller than `epsilon` radians, the
        translations are less than `epsilon` apart and the scales match within `epsilon`.
        """
        _, angle = rotation_to_axis_angle(
            mat3_mul_transpose_left(self.to_rotation_array(), other.to_rotation_array()))
        if not angle <= epsilon:
            return False
        if not np.linalg.norm(self._translation - other.translation) <= epsilon:
            return False
        return bool(np.all(np.abs(self.to_scale_array() - other.to_scale_array()) <= epsilon))

    def _state(self) -> Tuple[np.ndarray, ...]:
        return (self.to_rotation_array(), self._translation)

    def __eq__(self, other) -> bool:
        if not isinstance(other, type(self)) or not isinstance(self, type(other)):
            return False
        return all(np_array_equal(a, b) for a, b in zip(self._state(), other._state()))

    def __ne__(self, other) -> bool:
        return not self.__eq__(other)

    __hash__ = None

    def copy(self):
        raise NotImplementedError

    def __copy__(self):
        return self.copy()

    def __deepcopy__(self, memo):
        return self.copy()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(\n{np.array2string(self.get(), precision=6, separator=', ')})"


def _check_transform(other) -> None:
    if not isinstance(other, BaseTransform):
        raise TypeError(f"Expected a transform, got {type(other).__name__}")


def _rotation_of(other) -> np.ndarray:
    _check_transform(other)
    return other.to_rotation_array()


def _translation_of(other) -> np.ndarray:
    return other.translation


def _transform_transform(transform, other, check):
    other.pre_multiply(transform)


def _transform_transform_inverse(transform, other, check):
    other.pre_multiply_invert_other(transform)


application.register_rule(BaseTransform, _transform_transform, _transform_transform_inverse)
