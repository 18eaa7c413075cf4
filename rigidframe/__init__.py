"""
rigidframe: rigid, quaternion-based and affine 3D transforms backed by numpy and numba,
with the rotation conversions they rely on (rotation matrix, unit quaternion,
axis-angle, yaw-pitch-roll, Euler angles and rotation vector).
"""

__version__ = version = "0.1.0"

# exposing the public API of the package
from rigidframe.exceptions import (
    RigidFrameError,
    NotARotationMatrixException,
    NotARotationScaleMatrixException,
    NotAMatrix2DException,
)
from rigidframe.primitives import (
    Point3D,
    Vector3D,
    Vector4D,
    Point2D,
    Vector2D,
    Matrix3D,
)
from rigidframe.rotation_matrix import RotationMatrix
from rigidframe.quaternion import Quaternion
from rigidframe.axis_angle import AxisAngle
from rigidframe.rotation_scale_matrix import RotationScaleMatrix
from rigidframe.base_transform import BaseTransform
from rigidframe.rigid_transform import RigidTransform
from rigidframe.quaternion_transform import QuaternionTransform
from rigidframe.affine_transform import AffineTransform
from rigidframe.application import transform, inverse_transform, register_rule
from rigidframe.protocols import Orientation3DReadOnly, RotationScaleReadOnly, TransformReadOnly

__all__ = [
    "RigidFrameError",
    "NotARotationMatrixException",
    "NotARotationScaleMatrixException",
    "NotAMatrix2DException",
    "Point3D",
    "Vector3D",
    "Vector4D",
    "Point2D",
    "Vector2D",
    "Matrix3D",
    "RotationMatrix",
    "Quaternion",
    "AxisAngle",
    "RotationScaleMatrix",
    "BaseTransform",
    "RigidTransform",
    "QuaternionTransform",
    "AffineTransform",
    "transform",
    "inverse_transform",
    "register_rule",
    "Orientation3DReadOnly",
    "RotationScaleReadOnly",
    "TransformReadOnly",
]
