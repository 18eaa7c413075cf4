import copy
import unittest

import numpy as np
from numpy.testing import assert_allclose

from rigidframe import Point3D, Vector3D, Vector4D, Point2D, Vector2D, Matrix3D, RotationMatrix


class TestTuples(unittest.TestCase):
    def test_creation(self):
        self.assertEqual(Point3D().to_list(), [0.0, 0.0, 0.0])
        self.assertEqual(Point3D(1, 2, 3).to_list(), [1.0, 2.0, 3.0])
        self.assertEqual(Vector3D([1.0, 2.0, 3.0]).to_list(), [1.0, 2.0, 3.0])
        self.assertEqual(Vector4D(1.0, 2.0, 3.0, 0.0).s, 0.0)
        self.assertEqual(Point2D(np.array([1.0, 2.0])).to_list(), [1.0, 2.0])

    def test_wrong_sizes(self):
        with self.assertRaises(ValueError):
            Point3D(1.0, 2.0)
        with self.assertRaises(ValueError):
            Vector2D([1.0, 2.0, 3.0])
        with self.assertRaises(ValueError):
            Vector4D(np.zeros((2, 2)))

    def test_components(self):
        p = Point3D(1.0, 2.0, 3.0)
        p.x = 4.0
        p.z += 1.0
        self.assertEqual((p.x, p.y, p.z), (4.0, 2.0, 4.0))
        self.assertEqual(p[1], 2.0)
        p[1] = 7.0
        self.assertEqual(list(p), [4.0, 7.0, 4.0])
        self.assertEqual(len(p), 3)
        v = Vector4D(1.0, 2.0, 3.0, 4.0)
        v.s = 0.5
        self.assertEqual(v.to_list(), [1.0, 2.0, 3.0, 0.5])

    def test_set_from_same_kind(self):
        a = Vector3D(1.0, 2.0, 3.0)
        b = Vector3D()
        b.set(a)
        self.assertEqual(a, b)
        b.x = 0.0
        self.assertEqual(a.x, 1.0)

    def test_nan_and_zero(self):
        p = Point2D(1.0, 2.0)
        self.assertFalse(p.contains_nan())
        p.set_to_nan()
        self.assertTrue(p.contains_nan())
        p.set_to_zero()
        self.assertEqual(p, Point2D())

    def test_equality(self):
        self.assertEqual(Point3D(1.0, 2.0, 3.0), Point3D(1.0, 2.0, 3.0))
        self.assertNotEqual(Point3D(1.0, 2.0, 3.0), Vector3D(1.0, 2.0, 3.0))
        self.assertNotEqual(Point3D(1.0, 2.0, 3.0), Point3D(1.0, 2.0, 3.5))
        self.assertTrue(Point3D(1.0, 2.0, 3.0).epsilon_equals(Point3D(1.0, 2.0, 3.0 + 1.0e-9), 1.0e-8))
        self.assertFalse(Point3D(1.0, 2.0, 3.0).epsilon_equals(Point3D(1.0, 2.0, 3.1), 1.0e-8))

    def test_copies_are_independent(self):
        a = Point3D(1.0, 2.0, 3.0)
        for b in (a.copy(), copy.copy(a)):
            self.assertEqual(a, b)
            b.x = 10.0
            self.assertEqual(a.x, 1.0)
        arr = np.asarray(a)
        arr[0] = 5.0
        self.assertEqual(a.x, 1.0)
        self.assertEqual(repr(a), "Point3D(1, 2, 3)")

    def test_geometry_helpers(self):
        self.assertEqual(Point3D(1.0, 2.0, 2.0).distance(Point3D()), 3.0)
        v = Vector3D(3.0, 0.0, 4.0)
        self.assertEqual(v.norm(), 5.0)
        self.assertEqual(v.dot([1.0, 1.0, 1.0]), 7.0)
        v.normalize()
        assert_allclose(v.to_array(), [0.6, 0.0, 0.8])
        zero = Vector3D()
        zero.normalize()
        self.assertEqual(zero, Vector3D())
        self.assertEqual(Vector2D(3.0, 4.0).norm(), 5.0)


class TestMatrix3D(unittest.TestCase):
    def test_creation(self):
        assert_allclose(Matrix3D().to_array(), np.zeros((3, 3)))
        assert_allclose(Matrix3D.identity().to_array(), np.eye(3))
        M = np.arange(9.0).reshape(3, 3)
        m = Matrix3D(M)
        assert_allclose(m.to_array(), M)
        self.assertEqual(m.get_element(2, 1), 7.0)
        with self.assertRaises(IndexError):
            m.get_element(3, 0)
        with self.assertRaises(ValueError):
            Matrix3D(np.zeros(9))

    def test_set_from_rotation(self):
        R = RotationMatrix.from_yaw_pitch_roll(0.1, 0.2, 0.3)
        m = Matrix3D(R)
        assert_allclose(m.to_array(), R.to_rotation_array())

    def test_copy_equality_nan(self):
        m = Matrix3D(np.arange(9.0).reshape(3, 3))
        c = m.copy()
        self.assertEqual(m, c)
        c.set_identity()
        self.assertNotEqual(m, c)
        self.assertTrue(c.epsilon_equals(Matrix3D.identity(), 0.0))
        c.set_to_nan()
        self.assertTrue(c.contains_nan())
        c.set_to_zero()
        self.assertEqual(c, Matrix3D())


if __name__ == "__main__":
    unittest.main()
