"""
Random generators and assertions shared by the test suite.

Every generator takes a numpy Generator so that tests stay reproducible:

    rng = np.random.default_rng(42)
    t = random_rigid_transform(rng)
"""

import math

import numpy as np
from numpy import float64 as np_float64
from numpy.testing import assert_allclose

from rigidframe.affine_transform import AffineTransform
from rigidframe.geometry import normalize_quaternion, quaternion_to_rotation, quaternion_limit_to_pi
from rigidframe.quaternion import Quaternion
from rigidframe.quaternion_transform import QuaternionTransform
from rigidframe.rigid_transform import RigidTransform
from rigidframe.rotation_matrix import RotationMatrix
from rigidframe.rotation_scale_matrix import RotationScaleMatrix


def random_quaternion_array(rng: np.random.Generator) -> np.ndarray:
    """Uniformly distributed unit quaternion [x, y, z, s] with s >= 0."""
    q = rng.normal(size=4)
    while np.linalg.norm(q) < 1.0e-6:
        q = rng.normal(size=4)
    return quaternion_limit_to_pi(normalize_quaternion(q))


def random_rotation_array(rng: np.random.Generator) -> np.ndarray:
    return quaternion_to_rotation(random_quaternion_array(rng))


def random_quaternion(rng: np.random.Generator) -> Quaternion:
    return Quaternion.from_unsafe(random_quaternion_array(rng))


def random_rotation_matrix(rng: np.random.Generator) -> RotationMatrix:
    return RotationMatrix.from_unsafe(random_rotation_array(rng))


def random_vector(rng: np.random.Generator, bound: float = 10.0) -> np.ndarray:
    return rng.uniform(-bound, bound, size=3)


def random_scale(rng: np.random.Generator, low: float = 0.1, high: float = 5.0) -> np.ndarray:
    return rng.uniform(low, high, size=3)


def random_yaw_pitch_roll(rng: np.random.Generator):
    """Angles away from gimbal lock so they round trip exactly."""
    yaw = rng.uniform(-math.pi, math.pi)
    pitch = rng.uniform(-0.49 * math.pi, 0.49 * math.pi)
    roll = rng.uniform(-math.pi, math.pi)
    return yaw, pitch, roll


def random_rotation_scale_matrix(rng: np.random.Generator) -> RotationScaleMatrix:
    return RotationScaleMatrix.from_unsafe(random_rotation_array(rng), random_scale(rng))


def random_rigid_transform(rng: np.random.Generator) -> RigidTransform:
    return RigidTransform.from_unsafe(random_rotation_array(rng), random_vector(rng))


def random_quaternion_transform(rng: np.random.Generator) -> QuaternionTransform:
    return QuaternionTransform.from_unsafe(random_quaternion_array(rng), random_vector(rng))


def random_affine_transform(rng: np.random.Generator) -> AffineTransform:
    return AffineTransform.from_unsafe(random_rotation_array(rng), random_scale(rng), random_vector(rng))


def assert_matrix_allclose(actual, expected, atol: float = 1.0e-10) -> None:
    """Compare anything exposing __array__ (or arrays) coefficient by coefficient."""
    assert_allclose(np.asarray(actual, dtype=np_float64), np.asarray(expected, dtype=np_float64), rtol=0.0, atol=atol)


def assert_transform_allclose(actual, expected, atol: float = 1.0e-10) -> None:
    """Compare two transforms through their 4x4 forms."""
    assert_allclose(actual.get(), expected.get(), rtol=0.0, atol=atol)


def assert_rotation_allclose(actual, expected, atol: float = 1.0e-10) -> None:
    """Compare two orientations of any kind through their rotation matrices."""
    assert_allclose(actual.to_rotation_array(), expected.to_rotation_array(), rtol=0.0, atol=atol)
