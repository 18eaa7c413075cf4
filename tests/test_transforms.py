import copy
import math
import pickle
import unittest

import numpy as np
from numpy.testing import assert_allclose

from rigidframe import (
    RigidTransform, QuaternionTransform, AffineTransform,
    RotationMatrix, Quaternion, AxisAngle, RotationScaleMatrix,
    NotARotationMatrixException, NotARotationScaleMatrixException, NotAMatrix2DException,
    TransformReadOnly,
)
from rigidframe.geometry import yaw_matrix, pitch_matrix, roll_matrix
from rigidframe.testing import (
    random_rigid_transform, random_quaternion_transform, random_affine_transform,
    random_rotation_array, random_rotation_matrix, random_quaternion_array, random_vector, random_scale,
    assert_transform_allclose, assert_matrix_allclose,
)

EPS = 1.0e-10

RIGID_FACTORIES = (random_rigid_transform, random_quaternion_transform)
ALL_FACTORIES = (random_rigid_transform, random_quaternion_transform, random_affine_transform)


def homogeneous(rotation: np.ndarray, translation=(0.0, 0.0, 0.0)) -> np.ndarray:
    matrix = np.eye(4)
    matrix[:3, :3] = rotation
    matrix[:3, 3] = translation
    return matrix


class TestCreation(unittest.TestCase):
    def test_default_is_identity(self):
        for cls in (RigidTransform, QuaternionTransform, AffineTransform):
            with self.subTest(cls=cls.__name__):
                t = cls()
                assert_allclose(t.get(), np.eye(4))
                self.assertEqual(t, cls.identity())

    def test_rotation_and_translation(self):
        R = RotationMatrix.from_yaw_pitch_roll(0.3, -0.2, 0.1)
        for cls in (RigidTransform, QuaternionTransform, AffineTransform):
            with self.subTest(cls=cls.__name__):
                t = cls(R, [1.0, 2.0, 3.0])
                assert_matrix_allclose(t.get(), homogeneous(R.to_rotation_array(), [1.0, 2.0, 3.0]))

    def test_translation_only(self):
        t = RigidTransform(translation=[1.0, 2.0, 3.0])
        assert_allclose(t.get(), homogeneous(np.eye(3), [1.0, 2.0, 3.0]))

    def test_affine_with_scale(self):
        R = RotationMatrix.from_axis_angle([0.0, 0.0, 1.0], 0.4)
        t = AffineTransform(R, [1.0, 0.0, 0.0], scale=[1.0, 2.0, 3.0])
        assert_matrix_allclose(t.get(), homogeneous(R.to_rotation_array() @ np.diag([1.0, 2.0, 3.0]), [1.0, 0.0, 0.0]))

    def test_from_matrix(self):
        rng = np.random.default_rng(1)
        expected = random_rigid_transform(rng)
        t = RigidTransform.from_matrix(expected.get())
        assert_transform_allclose(t, expected)

    def test_read_only_protocol(self):
        for cls in (RigidTransform, QuaternionTransform, AffineTransform):
            self.assertIsInstance(cls(), TransformReadOnly)


class TestSetters(unittest.TestCase):
    def setUp(self):
        self.rng = np.random.default_rng(2)

    def test_set_from_4x4_and_flat(self):
        for factory in ALL_FACTORIES:
            expected = factory(self.rng)
            cls = type(expected)
            with self.subTest(cls=cls.__name__):
                t = cls()
                t.set(expected.get())
                assert_transform_allclose(t, expected)
                t = cls()
                t.set(expected.get().ravel())
                assert_transform_allclose(t, expected)
                t = cls()
                t.set_as_transpose(expected.get().T.ravel())
                assert_transform_allclose(t, expected)

    def test_set_from_quaternion_and_translation(self):
        q = random_quaternion_array(self.rng)
        v = random_vector(self.rng)
        flat = np.concatenate((q, v))
        for cls in (RigidTransform, QuaternionTransform, AffineTransform):
            with self.subTest(cls=cls.__name__):
                t = cls()
                t.set(flat)
                assert_allclose(t.to_quaternion_array(), q, atol=EPS)
                assert_allclose(t.translation, v)
        qt = QuaternionTransform()
        qt.set(flat)
        assert_allclose(qt.to_flat_array(), flat, atol=EPS)

    def test_set_rejects_bad_shapes(self):
        for cls in (RigidTransform, QuaternionTransform, AffineTransform):
            with self.subTest(cls=cls.__name__):
                with self.assertRaises(ValueError):
                    cls().set(np.zeros(5))
                with self.assertRaises(ValueError):
                    cls().set(np.zeros((2, 2)))

    def test_set_rejects_non_rotation(self):
        bad = np.diag([2.0, 1.0, 1.0, 1.0])
        for cls in (RigidTransform, QuaternionTransform):
            with self.subTest(cls=cls.__name__):
                t = cls()
                with self.assertRaises(NotARotationMatrixException):
                    t.set(bad)
                with self.assertRaises(NotARotationMatrixException):
                    t.set_rotation(2.0 * np.eye(3))
        with self.assertRaises(NotARotationMatrixException):
            AffineTransform().set_rotation(2.0 * np.eye(3))

    def test_affine_set_decomposes_block(self):
        expected = random_affine_transform(self.rng)
        t = AffineTransform()
        t.set(expected.get())
        assert_allclose(t.get_scale(), expected.get_scale(), atol=EPS)
        assert_allclose(t.to_rotation_array(), expected.to_rotation_array(), atol=EPS)
        with self.assertRaises(NotARotationScaleMatrixException):
            t.set(np.diag([1.0, 1.0, -1.0, 1.0]))

    def test_affine_set_rotation_scale_translation(self):
        R = random_rotation_matrix(self.rng)
        s = random_scale(self.rng)
        v = random_vector(self.rng)
        t = AffineTransform()
        t.set(R, s, v)
        assert_matrix_allclose(t.get(), homogeneous(R.to_rotation_array() @ np.diag(s), v))
        with self.assertRaises(NotARotationScaleMatrixException):
            t.set(R, [1.0, 0.0, 1.0], v)

    def test_set_from_other_transform_kinds(self):
        rigid = random_rigid_transform(self.rng)
        affine = random_affine_transform(self.rng)

        q = QuaternionTransform()
        q.set(rigid)
        assert_transform_allclose(q, rigid)

        a = AffineTransform()
        a.set_scale(2.0)
        a.set(rigid)
        assert_allclose(a.get_scale(), np.ones(3))
        assert_transform_allclose(a, rigid)

        a.set(affine)
        self.assertEqual(a, affine)

        r = RigidTransform()
        r.set(affine)
        assert_allclose(r.to_rotation_array(), affine.to_rotation_array())
        assert_allclose(r.translation, affine.translation)

    def test_set_from_transform_with_translation(self):
        source = random_rigid_transform(self.rng)
        for cls in (RigidTransform, QuaternionTransform, AffineTransform):
            with self.subTest(cls=cls.__name__):
                t = cls()
                t.set(source, [1.0, 2.0, 3.0])
                assert_allclose(t.to_rotation_array(), source.to_rotation_array(), atol=EPS)
                assert_allclose(t.translation, [1.0, 2.0, 3.0])
                self.assertFalse(np.array_equal(source.translation, [1.0, 2.0, 3.0]))
                with self.assertRaises(ValueError):
                    t.set(source, [1.0, 2.0])

    def test_set_rotation_unsafe(self):
        scaled = 2.0 * np.eye(3)
        for cls in (RigidTransform, AffineTransform):
            with self.subTest(cls=cls.__name__):
                t = cls(translation=[1.0, 2.0, 3.0])
                t.set_rotation_unsafe(scaled)
                assert_allclose(t.to_rotation_array(), scaled)
                assert_allclose(t.translation, [1.0, 2.0, 3.0])
                t.set_rotation_unsafe(*yaw_matrix(0.3).ravel())
                assert_allclose(t.to_rotation_array(), yaw_matrix(0.3))
        t = QuaternionTransform(translation=[1.0, 2.0, 3.0])
        t.set_rotation_unsafe(RotationMatrix.from_yaw_pitch_roll(0.0, 0.4, 0.0))
        assert_allclose(t.to_rotation_array(), pitch_matrix(0.4), atol=EPS)
        assert_allclose(t.translation, [1.0, 2.0, 3.0])

    def test_rotation_and_translation_to_nan(self):
        for factory in ALL_FACTORIES:
            t = factory(self.rng)
            with self.subTest(cls=type(t).__name__):
                translation = t.translation.copy()
                t.set_rotation_to_nan()
                self.assertTrue(t.contains_nan())
                self.assertTrue(np.isnan(t.to_rotation_array()).all())
                assert_allclose(t.translation, translation)
                t = factory(self.rng)
                rotation = t.to_rotation_array()
                t.set_translation_to_nan()
                self.assertTrue(t.contains_nan())
                self.assertTrue(np.isnan(t.translation).all())
                assert_allclose(t.to_rotation_array(), rotation)

    def test_set_orientation_only_zeroes_translation(self):
        t = RigidTransform(translation=[1.0, 2.0, 3.0])
        t.set(Quaternion.from_yaw_pitch_roll(0.1, 0.2, 0.3))
        assert_allclose(t.translation, np.zeros(3))
        t.set(AxisAngle([0.0, 0.0, 1.0], 0.5), [4.0, 5.0, 6.0])
        assert_allclose(t.translation, [4.0, 5.0, 6.0])
        assert_allclose(t.to_rotation_array(), yaw_matrix(0.5), atol=EPS)

    def test_rotation_setters_keep_translation(self):
        for cls in (RigidTransform, QuaternionTransform, AffineTransform):
            with self.subTest(cls=cls.__name__):
                t = cls(translation=[1.0, 2.0, 3.0])
                t.set_rotation_yaw_pitch_roll(0.3, 0.2, 0.1)
                assert_allclose(t.get_rotation_yaw_pitch_roll(), (0.3, 0.2, 0.1), atol=1.0e-9)
                assert_allclose(t.translation, [1.0, 2.0, 3.0])
                t.set_rotation_euler(0.1, 0.2, 0.3)
                assert_allclose(t.get_rotation_euler(), (0.1, 0.2, 0.3), atol=1.0e-9)
                t.set_rotation_axis_angle([0.0, 1.0, 0.0], 0.7)
                assert_allclose(t.to_rotation_array(), pitch_matrix(0.7), atol=EPS)
                t.set_rotation_vector([0.7, 0.0, 0.0])
                assert_allclose(t.to_rotation_array(), roll_matrix(0.7), atol=EPS)
                assert_allclose(t.get_rotation_vector(), [0.7, 0.0, 0.0], atol=EPS)
                t.set_rotation_quaternion([0.0, 0.0, 2.0, 2.0])
                assert_allclose(t.to_rotation_array(), yaw_matrix(0.5 * math.pi), atol=EPS)
                t.set_rotation_yaw(0.2)
                assert_allclose(t.to_rotation_array(), yaw_matrix(0.2), atol=EPS)
                t.set_rotation_pitch(0.2)
                assert_allclose(t.to_rotation_array(), pitch_matrix(0.2), atol=EPS)
                t.set_rotation_roll(0.2)
                assert_allclose(t.to_rotation_array(), roll_matrix(0.2), atol=EPS)
                assert_allclose(t.translation, [1.0, 2.0, 3.0])

    def test_zero_translation_variants(self):
        t = RigidTransform(translation=[1.0, 2.0, 3.0])
        t.set_rotation_yaw_and_zero_translation(0.4)
        assert_allclose(t.get(), homogeneous(yaw_matrix(0.4)), atol=EPS)
        t.set_translation(1.0, 2.0, 3.0)
        t.set_rotation_axis_angle_and_zero_translation([1.0, 0.0, 0.0], 0.4)
        assert_allclose(t.get(), homogeneous(roll_matrix(0.4)), atol=EPS)
        t.set_translation(1.0, 2.0, 3.0)
        t.set_rotation_and_zero_translation(RotationMatrix.from_yaw_pitch_roll(0.0, 0.4, 0.0))
        assert_allclose(t.get(), homogeneous(pitch_matrix(0.4)), atol=EPS)

    def test_affine_rotation_setters_keep_scale(self):
        t = AffineTransform()
        t.set_scale(1.0, 2.0, 3.0)
        t.set_rotation_yaw(0.3)
        t.set_rotation(random_rotation_matrix(self.rng))
        assert_allclose(t.get_scale(), [1.0, 2.0, 3.0])
        t.reset_scale()
        assert_allclose(t.scale, np.ones(3))
        with self.assertRaises(NotARotationScaleMatrixException):
            t.set_scale(-1.0)

    def test_translation_accessors(self):
        t = QuaternionTransform()
        t.set_translation([1.0, 2.0, 3.0])
        t.set_translation_x(4.0)
        t.set_translation_y(5.0)
        t.set_translation_z(6.0)
        self.assertEqual((t.translation_x, t.translation_y, t.translation_z), (4.0, 5.0, 6.0))
        t.translation = [7.0, 8.0, 9.0]
        assert_allclose(t.get_translation(), [7.0, 8.0, 9.0])
        out = np.zeros(3)
        t.get_translation(out)
        assert_allclose(out, [7.0, 8.0, 9.0])
        t.set_rotation_yaw(0.3)
        t.set_translation_and_identity_rotation(1.0, 1.0, 1.0)
        assert_allclose(t.get(), homogeneous(np.eye(3), [1.0, 1.0, 1.0]))
        t.reset_translation()
        self.assertEqual(t, QuaternionTransform.identity())

    def test_identity_and_nan(self):
        for factory in ALL_FACTORIES:
            t = factory(self.rng)
            with self.subTest(cls=type(t).__name__):
                self.assertFalse(t.contains_nan())
                t.set_to_nan()
                self.assertTrue(t.contains_nan())
                t.set_identity()
                self.assertFalse(t.contains_nan())
                assert_allclose(t.get(), np.eye(4))


class TestComposition(unittest.TestCase):
    def setUp(self):
        self.rng = np.random.default_rng(3)

    def test_matches_homogeneous_products(self):
        for factory in RIGID_FACTORIES:
            for _ in range(10):
                a = factory(self.rng)
                b = factory(self.rng)
                A, B = a.get(), b.get()
                cases = [
                    ("multiply", A @ B),
                    ("multiply_invert_this", np.linalg.inv(A) @ B),
                    ("multiply_invert_other", A @ np.linalg.inv(B)),
                    ("pre_multiply", B @ A),
                    ("pre_multiply_invert_this", B @ np.linalg.inv(A)),
                    ("pre_multiply_invert_other", np.linalg.inv(B) @ A),
                ]
                for name, expected in cases:
                    with self.subTest(cls=type(a).__name__, operation=name):
                        c = a.copy()
                        getattr(c, name)(b)
                        assert_matrix_allclose(c.get(), expected, atol=1.0e-9)

    def test_group_law(self):
        for factory in RIGID_FACTORIES:
            for _ in range(20):
                a = factory(self.rng)
                b = factory(self.rng)
                c = a.copy()
                c.multiply(b)
                c.multiply_invert_other(b)
                assert_transform_allclose(c, a)
                c.pre_multiply(b)
                c.pre_multiply_invert_other(b)
                assert_transform_allclose(c, a)

    def test_group_law_uniform_scale(self):
        a = AffineTransform.from_unsafe(random_rotation_array(self.rng), np.full(3, 2.5), random_vector(self.rng))
        b = random_affine_transform(self.rng)
        c = a.copy()
        c.multiply(b)
        c.multiply_invert_other(b)
        assert_transform_allclose(c, a)

    def test_double_invert(self):
        for factory in RIGID_FACTORIES:
            a = factory(self.rng)
            with self.subTest(cls=type(a).__name__):
                c = a.copy()
                c.invert()
                assert_matrix_allclose(c.get(), np.linalg.inv(a.get()))
                c.invert()
                assert_transform_allclose(c, a)
                d = type(a)()
                d.set_and_invert(a)
                assert_matrix_allclose(d.get(), np.linalg.inv(a.get()))

    def test_invert_rotation(self):
        a = random_rigid_transform(self.rng)
        c = a.copy()
        c.invert_rotation()
        assert_allclose(c.to_rotation_array(), a.to_rotation_array().T, atol=EPS)
        assert_allclose(c.translation, a.translation)

    def test_affine_composition_keeps_own_scale(self):
        a = random_affine_transform(self.rng)
        b = random_affine_transform(self.rng)
        R, s, t = a.to_rotation_array(), a.get_scale(), a.translation.copy()
        Ro, to = b.to_rotation_array(), b.translation
        A = R @ np.diag(s)
        cases = [
            ("multiply", R @ Ro, t + A @ to),
            ("multiply_invert_this", R.T @ Ro, np.linalg.inv(A) @ (to - t)),
            ("pre_multiply", Ro @ R, Ro @ t + to),
            ("pre_multiply_invert_this", Ro @ R.T, to - Ro @ np.linalg.inv(A) @ t),
            ("pre_multiply_invert_other", Ro.T @ R, Ro.T @ (t - to)),
        ]
        for name, rotation, translation in cases:
            with self.subTest(operation=name):
                c = a.copy()
                getattr(c, name)(b)
                assert_allclose(c.to_rotation_array(), rotation, atol=EPS)
                assert_allclose(c.translation, translation, atol=1.0e-9)
                assert_allclose(c.get_scale(), s)

    def test_argument_scale_is_discarded(self):
        a = random_rigid_transform(self.rng)
        b = random_affine_transform(self.rng)
        expected = a.copy()
        expected.multiply(b.get_rigid_transform())
        a.multiply(b)
        assert_transform_allclose(a, expected)

    def test_mixed_kinds(self):
        rigid = random_rigid_transform(self.rng)
        quaternion = random_quaternion_transform(self.rng)
        expected = rigid.get() @ quaternion.get()
        c = rigid.copy()
        c.multiply(quaternion)
        assert_matrix_allclose(c.get(), expected, atol=1.0e-9)
        d = QuaternionTransform()
        d.set(rigid)
        d.multiply(quaternion)
        assert_matrix_allclose(d.get(), expected, atol=1.0e-9)

    def test_rejects_non_transforms(self):
        for cls in (RigidTransform, QuaternionTransform, AffineTransform):
            with self.subTest(cls=cls.__name__):
                with self.assertRaises(TypeError):
                    cls().multiply(RotationMatrix())
                with self.assertRaises(TypeError):
                    cls().pre_multiply(np.eye(4))

    def test_append_prepend_rotations(self):
        for factory in RIGID_FACTORIES:
            a = factory(self.rng)
            M = a.get()
            cases = [
                ("append_yaw_rotation", lambda angle: M @ homogeneous(yaw_matrix(angle))),
                ("append_pitch_rotation", lambda angle: M @ homogeneous(pitch_matrix(angle))),
                ("append_roll_rotation", lambda angle: M @ homogeneous(roll_matrix(angle))),
                ("prepend_yaw_rotation", lambda angle: homogeneous(yaw_matrix(angle)) @ M),
                ("prepend_pitch_rotation", lambda angle: homogeneous(pitch_matrix(angle)) @ M),
                ("prepend_roll_rotation", lambda angle: homogeneous(roll_matrix(angle)) @ M),
            ]
            for name, expected in cases:
                with self.subTest(cls=type(a).__name__, operation=name):
                    c = a.copy()
                    getattr(c, name)(0.35)
                    assert_matrix_allclose(c.get(), expected(0.35), atol=1.0e-9)

    def test_append_prepend_translation(self):
        for factory in ALL_FACTORIES:
            a = factory(self.rng)
            M = a.get()
            d = np.array([0.5, -1.0, 2.0])
            with self.subTest(cls=type(a).__name__):
                c = a.copy()
                c.append_translation(d)
                assert_matrix_allclose(c.get(), M @ homogeneous(np.eye(3), d), atol=1.0e-9)
                c = a.copy()
                c.prepend_translation(*d)
                assert_matrix_allclose(c.get(), homogeneous(np.eye(3), d) @ M, atol=1.0e-9)

    def test_normalize_rotation_part(self):
        t = RigidTransform()
        t.set_unsafe(*(homogeneous(random_rotation_array(self.rng) + 1.0e-6, [1.0, 2.0, 3.0])[:3].ravel()))
        self.assertFalse(t.rotation.is_rotation_matrix(1.0e-12))
        t.normalize_rotation_part()
        self.assertTrue(t.rotation.is_rotation_matrix(1.0e-12))
        assert_allclose(t.translation, [1.0, 2.0, 3.0])
        assert_allclose(t.determinant_rotation_part(), 1.0, atol=EPS)

    def test_rotation_2d(self):
        t = QuaternionTransform()
        t.set_rotation_yaw(1.2)
        self.assertTrue(t.is_rotation_2d())
        t.check_if_rotation_2d()
        t.append_roll_rotation(math.radians(30.0))
        self.assertFalse(t.is_rotation_2d())
        with self.assertRaises(NotAMatrix2DException):
            t.check_if_rotation_2d()


class TestGetters(unittest.TestCase):
    def setUp(self):
        self.rng = np.random.default_rng(4)

    def test_get_element(self):
        for factory in ALL_FACTORIES:
            t = factory(self.rng)
            M = t.get()
            with self.subTest(cls=type(t).__name__):
                for row in range(4):
                    for column in range(4):
                        self.assertAlmostEqual(t.get_element(row, column), M[row, column], places=12)
                self.assertEqual(t.m30, 0.0)
                self.assertEqual(t.m33, 1.0)
                self.assertEqual(t.m13, t.translation[1])
                for row, column in ((4, 0), (0, 4), (-1, 0), (0, -1)):
                    with self.assertRaises(IndexError):
                        t.get_element(row, column)

    def test_get_into_flat(self):
        t = random_rigid_transform(self.rng)
        out = np.zeros(16)
        t.get(out)
        assert_allclose(out, t.get().ravel())
        assert_allclose(t.to_flat_array(), t.get().ravel())
        self.assertEqual(len(random_quaternion_transform(self.rng).to_flat_array()), 7)
        self.assertEqual(t.to_list(), t.get().tolist())

    def test_quaternion_transform_packs_seven_elements(self):
        t = random_quaternion_transform(self.rng)
        out = np.zeros(7)
        result = t.get(out)
        self.assertIs(result, out)
        assert_allclose(out, t.to_flat_array())
        assert_allclose(out[:4], t.to_quaternion_array())
        assert_allclose(out[4:], t.translation)
        other = QuaternionTransform()
        other.set(out)
        assert_transform_allclose(other, t)
        flat = np.zeros(16)
        t.get(flat)
        assert_allclose(flat, t.get().ravel())

    def test_get_rotation_forms(self):
        t = random_quaternion_transform(self.rng)
        R = t.to_rotation_array()
        assert_allclose(t.get_rotation().to_rotation_array(), R)
        assert_allclose(t.get_rotation(RotationMatrix()).to_rotation_array(), R)
        assert_allclose(t.get_rotation(Quaternion()).to_rotation_array(), R, atol=EPS)
        assert_allclose(t.get_rotation(AxisAngle()).to_rotation_array(), R, atol=EPS)
        assert_allclose(t.get_rotation(np.zeros((3, 3))), R)
        assert_allclose(t.get_rotation(np.zeros(4)), t.to_quaternion_array())
        assert_allclose(t.get_rotation(np.zeros(3)), t.get_rotation_vector())
        with self.assertRaises(TypeError):
            t.get_rotation([0.0, 0.0, 0.0])
        rotation, translation = t.get_rotation_and_translation()
        assert_allclose(rotation.to_rotation_array(), R)
        assert_allclose(translation, t.translation)

    def test_affine_parts(self):
        t = random_affine_transform(self.rng)
        rs = t.get_rotation_scale()
        self.assertIsInstance(rs, RotationScaleMatrix)
        assert_allclose(rs.get(), t.get()[:3, :3])
        assert_allclose(t.get_rotation_scale_array(), t.get()[:3, :3])
        rigid = t.get_rigid_transform()
        self.assertIsInstance(rigid, RigidTransform)
        assert_allclose(rigid.to_rotation_array(), t.to_rotation_array())
        assert_allclose(rigid.translation, t.translation)

    def test_rotation_property_is_a_copy(self):
        t = RigidTransform()
        rotation = t.rotation
        rotation.set_to_yaw_matrix(0.5)
        self.assertEqual(t, RigidTransform.identity())
        q = QuaternionTransform()
        quaternion = q.quaternion
        quaternion.set_to_yaw_quaternion(0.5)
        self.assertEqual(q, QuaternionTransform.identity())


class TestComparison(unittest.TestCase):
    def setUp(self):
        self.rng = np.random.default_rng(5)

    def test_equality_and_copies(self):
        for factory in ALL_FACTORIES:
            a = factory(self.rng)
            with self.subTest(cls=type(a).__name__):
                for b in (a.copy(), copy.copy(a), copy.deepcopy(a), pickle.loads(pickle.dumps(a))):
                    self.assertEqual(a, b)
                    self.assertIsNot(a.translation, b.translation)
                b = a.copy()
                b.prepend_translation(1.0e-4, 0.0, 0.0)
                self.assertNotEqual(a, b)
                self.assertTrue(a.epsilon_equals(b, 1.0e-3))
                self.assertFalse(a.epsilon_equals(b, 1.0e-5))
                self.assertFalse(a == None)  # noqa: E711
                self.assertFalse(a == a.get())

    def test_different_kinds_never_equal(self):
        rigid = RigidTransform()
        quaternion = QuaternionTransform()
        affine = AffineTransform()
        self.assertNotEqual(rigid, quaternion)
        self.assertNotEqual(quaternion, rigid)
        self.assertNotEqual(rigid, affine)
        self.assertFalse(rigid.epsilon_equals(quaternion, 1.0))

    def test_geometrically_equals(self):
        a = random_quaternion_transform(self.rng)
        b = a.copy()
        b.append_yaw_rotation(1.0e-3)
        self.assertTrue(a.geometrically_equals(b, 2.0e-3))
        self.assertFalse(a.geometrically_equals(b, 1.0e-4))
        rigid = RigidTransform()
        rigid.set(a)
        self.assertTrue(rigid.geometrically_equals(a, 1.0e-7))

    def test_repr(self):
        self.assertTrue(repr(AffineTransform()).startswith("AffineTransform("))


if __name__ == "__main__":
    unittest.main()
