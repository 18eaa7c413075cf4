# geometry.py
import math
from numpy import float64 as np_float64
from numpy import ndarray
import numpy as np
from typing import Tuple
from numba import njit

from rigidframe.constants import EPS_NORM, EPS_GIMBAL, EPS_ZERO_ROTATION
from rigidframe.linalg import is_identity

from numba.core.errors import NumbaPerformanceWarning
import warnings
warnings.filterwarnings("ignore", category=NumbaPerformanceWarning)

# Quaternions are always stored as [x, y, z, s], the scalar part last.


@njit(cache=True)
def identity_quaternion() -> ndarray:
    q = np.zeros(4, dtype=np_float64)
    q[3] = 1.0
    return q


@njit(cache=True)
def quaternion_norm(quaternion: ndarray) -> float:
    x, y, z, s = quaternion[0], quaternion[1], quaternion[2], quaternion[3]
    return math.sqrt(x*x + y*y + z*z + s*s)


@njit(cache=True)
def normalize_quaternion(quaternion: ndarray) -> ndarray:
    """
    Return a unit copy of `quaternion`.

    A quaternion whose norm is below EPS_NORM has no meaningful orientation and
    is replaced by the identity. NaN propagates.
    """
    n = quaternion_norm(quaternion)
    if n < EPS_NORM:
        return identity_quaternion()
    out = np.empty(4, dtype=np_float64)
    for i in range(4):
        out[i] = quaternion[i] / n
    return out


@njit(cache=True)
def quaternion_to_rotation(quaternion: ndarray) -> ndarray:
    """
    Convert a unit quaternion to a 3x3 rotation matrix.

    The expansion is bilinear in the quaternion components, so the input is
    expected to be normalized already (see `normalize_quaternion`).

    Parameters:
        quaternion (ndarray): A 4-element array [x, y, z, s].

    Returns:
        ndarray: A 3x3 rotation matrix corresponding to the input quaternion.
    """
    x, y, z, s = quaternion[0], quaternion[1], quaternion[2], quaternion[3]

    # precompute products
    xx = x*x
    yy = y*y
    zz = z*z
    xy = x*y
    xz = x*z
    yz = y*z
    sx = s*x
    sy = s*y
    sz = s*z

    R = np.empty((3, 3), dtype=np_float64)
    R[0, 0] = 1 - 2*(yy + zz)
    R[0, 1] = 2*(xy - sz)
    R[0, 2] = 2*(xz + sy)

    R[1, 0] = 2*(xy + sz)
    R[1, 1] = 1 - 2*(xx + zz)
    R[1, 2] = 2*(yz - sx)

    R[2, 0] = 2*(xz - sy)
    R[2, 1] = 2*(yz + sx)
    R[2, 2] = 1 - 2*(xx + yy)
    return R


@njit(cache=True)
def rotation_to_quaternion(rotation: ndarray) -> ndarray:
    """
    Converts a 3x3 rotation matrix to a normalized quaternion.

    The extraction branches on the largest of {trace, m00, m11, m22} to keep the
    square root away from zero. The result is normalized and its scalar part
    made non-negative.

    Parameters:
        rotation (ndarray): A 3x3 rotation matrix.

    Returns:
        ndarray: The quaternion [x, y, z, s].
    """
    m00, m01, m02 = rotation[0, 0], rotation[0, 1], rotation[0, 2]
    m10, m11, m12 = rotation[1, 0], rotation[1, 1], rotation[1, 2]
    m20, m21, m22 = rotation[2, 0], rotation[2, 1], rotation[2, 2]
    trace = m00 + m11 + m22

    q = np.empty(4, dtype=np_float64)
    if trace > m00 and trace > m11 and trace > m22:
        S = math.sqrt(trace + 1.0) * 2.0
        q[3] = 0.25 * S
        q[0] = (m21 - m12) / S
        q[1] = (m02 - m20) / S
        q[2] = (m10 - m01) / S
    elif m00 > m11 and m00 > m22:
        S = math.sqrt(1.0 + m00 - m11 - m22) * 2.0
        q[3] = (m21 - m12) / S
        q[0] = 0.25 * S
        q[1] = (m01 + m10) / S
        q[2] = (m02 + m20) / S
    elif m11 > m22:
        S = math.sqrt(1.0 + m11 - m00 - m22) * 2.0
        q[3] = (m02 - m20) / S
        q[0] = (m01 + m10) / S
        q[1] = 0.25 * S
        q[2] = (m12 + m21) / S
    else:
        S = math.sqrt(1.0 + m22 - m00 - m11) * 2.0
        q[3] = (m10 - m01) / S
        q[0] = (m02 + m20) / S
        q[1] = (m12 + m21) / S
        q[2] = 0.25 * S

    q = normalize_quaternion(q)
    if q[3] < 0.0:
        for i in range(4):
            q[i] = -q[i]
    return q


@njit(cache=True)
def axis_angle_to_rotation(axis: ndarray, angle: float) -> ndarray:
    """
    Rodrigues' formula. The axis is normalized first; a zero axis yields the identity.
    """
    ux, uy, uz = axis[0], axis[1], axis[2]
    n = math.sqrt(ux*ux + uy*uy + uz*uz)
    R = np.eye(3, dtype=np_float64)
    if n < EPS_NORM:
        return R
    ux /= n
    uy /= n
    uz /= n

    c = math.cos(angle)
    s = math.sin(angle)
    t = 1.0 - c

    R[0, 0] = t*ux*ux + c
    R[0, 1] = t*ux*uy - s*uz
    R[0, 2] = t*ux*uz + s*uy
    R[1, 0] = t*ux*uy + s*uz
    R[1, 1] = t*uy*uy + c
    R[1, 2] = t*uy*uz - s*ux
    R[2, 0] = t*ux*uz - s*uy
    R[2, 1] = t*uy*uz + s*ux
    R[2, 2] = t*uz*uz + c
    return R


@njit(cache=True)
def rotation_to_axis_angle(rotation: ndarray) -> Tuple[ndarray, float]:
    """
    Extract the unit axis and angle in [0, pi] of a rotation matrix.

    The angle comes from atan2(|v| / 2, (trace - 1) / 2) with
    v = (m21 - m12, m02 - m20, m10 - m01). A zero rotation gives the axis
    (1, 0, 0) and angle 0. At 180 degrees v vanishes and the axis is rebuilt
    from the largest diagonal term.

    Returns:
        Tuple[ndarray, float]: (axis, angle)
    """
    m00, m01, m02 = rotation[0, 0], rotation[0, 1], rotation[0, 2]
    m10, m11, m12 = rotation[1, 0], rotation[1, 1], rotation[1, 2]
    m20, m21, m22 = rotation[2, 0], rotation[2, 1], rotation[2, 2]
    axis = np.empty(3, dtype=np_float64)

    for i in range(3):
        for j in range(3):
            if math.isnan(rotation[i, j]):
                axis[:] = np.nan
                return axis, np.nan

    x = m21 - m12
    y = m02 - m20
    z = m10 - m01
    s = math.sqrt(x*x + y*y + z*z)

    if s > EPS_NORM:
        angle = math.atan2(0.5 * s, 0.5 * (m00 + m11 + m22 - 1.0))
        axis[0] = x / s
        axis[1] = y / s
        axis[2] = z / s
        return axis, angle

    if is_identity(rotation, EPS_ZERO_ROTATION):
        axis[0] = 1.0
        axis[1] = 0.0
        axis[2] = 0.0
        return axis, 0.0

    # 180 degrees
    xx = 0.5 * (m00 + 1.0)
    yy = 0.5 * (m11 + 1.0)
    zz = 0.5 * (m22 + 1.0)
    xy = 0.25 * (m01 + m10)
    xz = 0.25 * (m02 + m20)
    yz = 0.25 * (m12 + m21)
    if xx > yy and xx > zz:
        x = math.sqrt(xx)
        y = xy / x
        z = xz / x
    elif yy > zz:
        y = math.sqrt(yy)
        x = xy / y
        z = yz / y
    else:
        z = math.sqrt(zz)
        x = xz / z
        y = yz / z
    axis[0] = x
    axis[1] = y
    axis[2] = z
    return axis, math.pi


@njit(cache=True)
def rotation_vector_to_rotation(rotation_vector: ndarray) -> ndarray:
    """The rotation vector is axis * angle; its norm is the angle."""
    angle = math.sqrt(rotation_vector[0]**2 + rotation_vector[1]**2 + rotation_vector[2]**2)
    if angle < EPS_NORM:
        return np.eye(3, dtype=np_float64)
    return axis_angle_to_rotation(rotation_vector, angle)


@njit(cache=True)
def rotation_to_rotation_vector(rotation: ndarray) -> ndarray:
    axis, angle = rotation_to_axis_angle(rotation)
    return axis * angle


@njit(cache=True)
def yaw_matrix(yaw: float) -> ndarray:
    """Rotation of `yaw` radians about Z."""
    c = math.cos(yaw)
    s = math.sin(yaw)
    R = np.eye(3, dtype=np_float64)
    R[0, 0] = c
    R[0, 1] = -s
    R[1, 0] = s
    R[1, 1] = c
    return R


@njit(cache=True)
def pitch_matrix(pitch: float) -> ndarray:
    """Rotation of `pitch` radians about Y."""
    c = math.cos(pitch)
    s = math.sin(pitch)
    R = np.eye(3, dtype=np_float64)
    R[0, 0] = c
    R[0, 2] = s
    R[2, 0] = -s
    R[2, 2] = c
    return R


@njit(cache=True)
def roll_matrix(roll: float) -> ndarray:
    """Rotation of `roll` radians about X."""
    c = math.cos(roll)
    s = math.sin(roll)
    R = np.eye(3, dtype=np_float64)
    R[1, 1] = c
    R[1, 2] = -s
    R[2, 1] = s
    R[2, 2] = c
    return R


@njit(cache=True)
def yaw_pitch_roll_to_rotation(yaw: float, pitch: float, roll: float) -> ndarray:
    """
    Build R = Rz(yaw) @ Ry(pitch) @ Rx(roll).

    Parameters:
        yaw (float): Rotation about Z in radians.
        pitch (float): Rotation about Y in radians.
        roll (float): Rotation about X in radians.

    Returns:
        ndarray: The 3x3 rotation matrix.
    """
    cy, sy = math.cos(yaw), math.sin(yaw)
    cp, sp = math.cos(pitch), math.sin(pitch)
    cr, sr = math.cos(roll), math.sin(roll)

    R = np.empty((3, 3), dtype=np_float64)
    R[0, 0] = cy*cp
    R[0, 1] = cy*sp*sr - sy*cr
    R[0, 2] = cy*sp*cr + sy*sr

    R[1, 0] = sy*cp
    R[1, 1] = sy*sp*sr + cy*cr
    R[1, 2] = sy*sp*cr - cy*sr

    R[2, 0] = -sp
    R[2, 1] = cp*sr
    R[2, 2] = cp*cr
    return R


@njit(cache=True)
def rotation_to_yaw_pitch_roll(rotation: ndarray) -> Tuple[float, float, float]:
    """
    Extract (yaw, pitch, roll) such that R = Rz(yaw) @ Ry(pitch) @ Rx(roll).

    -m20 is clamped to [-1, 1] before the arcsine. In gimbal lock (cos(pitch)
    vanishes) only yaw + roll is observable: roll is reported as 0 and yaw is
    read from atan2(-m01, m11).

    Returns:
        Tuple[float, float, float]: (yaw, pitch, roll)
    """
    m20 = rotation[2, 0]
    sin_pitch = -m20
    if sin_pitch > 1.0:
        sin_pitch = 1.0
    elif sin_pitch < -1.0:
        sin_pitch = -1.0
    pitch = math.asin(sin_pitch)

    cos_pitch = math.sqrt(rotation[0, 0]**2 + rotation[1, 0]**2)
    if cos_pitch < EPS_GIMBAL:
        yaw = math.atan2(-rotation[0, 1], rotation[1, 1])
        return yaw, pitch, 0.0

    yaw = math.atan2(rotation[1, 0], rotation[0, 0])
    roll = math.atan2(rotation[2, 1], rotation[2, 2])
    return yaw, pitch, roll


@njit(cache=True)
def is_gimbal_locked(rotation: ndarray) -> bool:
    return math.sqrt(rotation[0, 0]**2 + rotation[1, 0]**2) < EPS_GIMBAL


@njit(cache=True)
def quaternion_multiply(a: ndarray, b: ndarray) -> ndarray:
    """Hamilton product a * b."""
    ax, ay, az, a_s = a[0], a[1], a[2], a[3]
    bx, by, bz, b_s = b[0], b[1], b[2], b[3]
    out = np.empty(4, dtype=np_float64)
    out[0] = a_s*bx + ax*b_s + ay*bz - az*by
    out[1] = a_s*by - ax*bz + ay*b_s + az*bx
    out[2] = a_s*bz + ax*by - ay*bx + az*b_s
    out[3] = a_s*b_s - ax*bx - ay*by - az*bz
    return out


@njit(cache=True)
def quaternion_conjugate(quaternion: ndarray) -> ndarray:
    out = np.empty(4, dtype=np_float64)
    out[0] = -quaternion[0]
    out[1] = -quaternion[1]
    out[2] = -quaternion[2]
    out[3] = quaternion[3]
    return out


@njit(cache=True)
def quaternion_rotate(quaternion: ndarray, vector: ndarray) -> ndarray:
    """
    Rotate a 3-vector by a unit quaternion: v' = v + 2s(u x v) + 2u x (u x v).
    """
    ux, uy, uz, s = quaternion[0], quaternion[1], quaternion[2], quaternion[3]
    vx, vy, vz = vector[0], vector[1], vector[2]

    # c = u x v
    cx = uy*vz - uz*vy
    cy = uz*vx - ux*vz
    cz = ux*vy - uy*vx

    # d = u x c
    dx = uy*cz - uz*cy
    dy = uz*cx - ux*cz
    dz = ux*cy - uy*cx

    out = np.empty(3, dtype=np_float64)
    out[0] = vx + 2.0*(s*cx + dx)
    out[1] = vy + 2.0*(s*cy + dy)
    out[2] = vz + 2.0*(s*cz + dz)
    return out


@njit(cache=True)
def quaternion_inverse_rotate(quaternion: ndarray, vector: ndarray) -> ndarray:
    return quaternion_rotate(quaternion_conjugate(quaternion), vector)


@njit(cache=True)
def quaternion_angle(quaternion: ndarray) -> float:
    """Rotation angle 2 * atan2(|xyz|, s); lies in [0, 2pi]."""
    n = math.sqrt(quaternion[0]**2 + quaternion[1]**2 + quaternion[2]**2)
    return 2.0 * math.atan2(n, quaternion[3])


@njit(cache=True)
def quaternion_limit_to_pi(quaternion: ndarray) -> ndarray:
    """Pick the sign of the quaternion whose angle is in [0, pi]."""
    if quaternion[3] < 0.0:
        return -quaternion
    return quaternion.copy()


@njit(cache=True)
def axis_angle_to_quaternion(axis: ndarray, angle: float) -> ndarray:
    ux, uy, uz = axis[0], axis[1], axis[2]
    n = math.sqrt(ux*ux + uy*uy + uz*uz)
    if n < EPS_NORM:
        return identity_quaternion()
    half = 0.5 * angle
    k = math.sin(half) / n
    q = np.empty(4, dtype=np_float64)
    q[0] = ux * k
    q[1] = uy * k
    q[2] = uz * k
    q[3] = math.cos(half)
    return q


@njit(cache=True)
def quaternion_to_axis_angle(quaternion: ndarray) -> Tuple[ndarray, float]:
    """A quaternion without vector part maps to axis (1, 0, 0) and angle 0."""
    q = normalize_quaternion(quaternion)
    axis = np.empty(3, dtype=np_float64)
    sin_half = math.sqrt(q[0]*q[0] + q[1]*q[1] + q[2]*q[2])
    if sin_half < EPS_NORM:
        axis[0] = 1.0
        axis[1] = 0.0
        axis[2] = 0.0
        return axis, 0.0
    angle = 2.0 * math.atan2(sin_half, q[3])
    axis[0] = q[0] / sin_half
    axis[1] = q[1] / sin_half
    axis[2] = q[2] / sin_half
    return axis, angle


@njit(cache=True)
def rotation_vector_to_quaternion(rotation_vector: ndarray) -> ndarray:
    angle = math.sqrt(rotation_vector[0]**2 + rotation_vector[1]**2 + rotation_vector[2]**2)
    if angle < EPS_NORM:
        return identity_quaternion()
    return axis_angle_to_quaternion(rotation_vector, angle)


@njit(cache=True)
def quaternion_to_rotation_vector(quaternion: ndarray) -> ndarray:
    axis, angle = quaternion_to_axis_angle(quaternion)
    return axis * angle


@njit(cache=True)
def yaw_pitch_roll_to_quaternion(yaw: float, pitch: float, roll: float) -> ndarray:
    """q = qz(yaw) * qy(pitch) * qx(roll)."""
    cy, sy = math.cos(0.5 * yaw), math.sin(0.5 * yaw)
    cp, sp = math.cos(0.5 * pitch), math.sin(0.5 * pitch)
    cr, sr = math.cos(0.5 * roll), math.sin(0.5 * roll)

    q = np.empty(4, dtype=np_float64)
    q[0] = cy*cp*sr - sy*sp*cr
    q[1] = cy*sp*cr + sy*cp*sr
    q[2] = sy*cp*cr - cy*sp*sr
    q[3] = cy*cp*cr + sy*sp*sr
    return q


@njit(cache=True)
def quaternion_to_yaw_pitch_roll(quaternion: ndarray) -> Tuple[float, float, float]:
    return rotation_to_yaw_pitch_roll(quaternion_to_rotation(normalize_quaternion(quaternion)))
