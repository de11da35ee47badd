"""
test_transformation
===================

Tests the Transformation value type.

Test Cases
__________
"""

from unittest import TestCase

import numpy as np

from lgmath import Transformation, Rotation
from lgmath.se3 import vec2tran, tran_ad
from lgmath.so3 import vec2rot, is_rotation_matrix
from lgmath.common import near_equal_lie_alg


class TestTransformation(TestCase):

    def setUp(self):

        self.vectors = np.random.default_rng(31415).uniform(-1, 1, (10, 6))

    def test_init_identity(self):

        np.testing.assert_array_equal(Transformation().matrix, np.eye(4))

    def test_init_matrix(self):

        for vector in self.vectors:
            matrix = vec2tran(vector)

            with self.subTest(vector=vector):
                tran = Transformation(matrix)

                np.testing.assert_allclose(tran.matrix, matrix, atol=1e-15)
                self.assertIsNot(tran.matrix, matrix)

                np.testing.assert_allclose(Transformation(matrix.ravel()).matrix, matrix, atol=1e-15)

    def test_init_reprojection(self):

        with self.assertLogs('lgmath.se3.transformation', level='DEBUG'):
            tran = Transformation(np.ones((4, 4)))

        expected = np.eye(4)
        expected[:3, 3] = 1

        np.testing.assert_allclose(tran.matrix, expected, atol=1e-12)

    def test_init_rotation_translation(self):

        aaxis = np.array([0.3, -0.2, 0.5])
        r_ba_ina = np.array([1., 2, 3])

        tran = Transformation(vec2rot(aaxis), r_ba_ina)

        np.testing.assert_allclose(tran.C_ba, vec2rot(aaxis), atol=1e-15)
        np.testing.assert_allclose(tran.r_ab_inb, -vec2rot(aaxis) @ r_ba_ina, atol=1e-15)
        np.testing.assert_allclose(tran.r_ba_ina, r_ba_ina, atol=1e-12)

        tran = Transformation(Rotation(aaxis), r_ba_ina=r_ba_ina)

        np.testing.assert_allclose(tran.C_ba, vec2rot(aaxis), atol=1e-15)

        # the rotation is re-projected before the translation is formed
        tran = Transformation(np.ones((3, 3)), r_ba_ina)

        np.testing.assert_allclose(tran.C_ba, np.eye(3), atol=1e-12)
        np.testing.assert_allclose(tran.r_ab_inb, -r_ba_ina, atol=1e-12)

    def test_init_vector(self):

        for vector in self.vectors:
            with self.subTest(vector=vector):
                np.testing.assert_array_equal(Transformation(vector).matrix, vec2tran(vector))

                np.testing.assert_allclose(Transformation(vector, num_terms=15).matrix, Transformation(vector).matrix,
                                           atol=1e-6)

    def test_init_truncated_series(self):

        tran = Transformation([1, 2, 3, 0.9, -0.4, 0.3], num_terms=3)

        self.assertTrue(is_rotation_matrix(tran.C_ba, tol=1e-12))
        np.testing.assert_array_equal(tran.matrix[3], [0, 0, 0, 1])

        np.testing.assert_allclose(tran.matrix @ tran.inverse().matrix, np.eye(4), atol=1e-12)
        np.testing.assert_allclose(tran.inverse().matrix, np.linalg.inv(tran.matrix), atol=1e-12)

    def test_init_copy(self):

        tran = Transformation(self.vectors[0])

        tran2 = Transformation(tran)

        np.testing.assert_array_equal(tran2.matrix, tran.matrix)

        tran2 *= Transformation(self.vectors[1])

        np.testing.assert_array_equal(tran.matrix, vec2tran(self.vectors[0]))

    def test_init_bad_data(self):

        with self.assertRaises(ValueError):
            Transformation([1, 2, 3])

        with self.assertRaises(ValueError):
            Transformation(np.ones(5))

        with self.assertRaises(ValueError):
            Transformation(np.eye(3), r_ba_ina=[1, 2])

    def test_getters(self):

        tran = Transformation(self.vectors[0])

        c_ba = tran.C_ba
        c_ba[:] = 0

        np.testing.assert_array_equal(tran.matrix[:3, :3], vec2tran(self.vectors[0])[:3, :3])

        self.assertIsInstance(tran.rotation, Rotation)
        np.testing.assert_array_equal(tran.rotation.matrix, tran.matrix[:3, :3])

        np.testing.assert_array_equal(tran.r_ab_inb, tran.matrix[:3, 3])

        np.testing.assert_allclose(tran.C_ba @ tran.r_ba_ina, -tran.r_ab_inb, atol=1e-15)

    def test_vec(self):

        for vector in self.vectors:
            with self.subTest(vector=vector):
                self.assertTrue(near_equal_lie_alg(Transformation(vector).vec(), vector))

        vector = np.array([1, 0, 0, np.pi, 0, 0])

        self.assertTrue(near_equal_lie_alg(Transformation(vector).vec(), vector))

    def test_inverse(self):

        for vector in self.vectors:
            tran = Transformation(vector)

            with self.subTest(vector=vector):
                inverse = tran.inverse()

                np.testing.assert_allclose(inverse.matrix, np.linalg.inv(tran.matrix), atol=1e-12)
                np.testing.assert_allclose((tran * inverse).matrix, np.eye(4), atol=1e-12)
                np.testing.assert_allclose((inverse * tran).matrix, np.eye(4), atol=1e-12)

    def test_inverse_of_inverse(self):

        tran = Transformation(self.vectors[0])

        self.assertIs(tran.inverse().inverse().matrix, tran.matrix)

    def test_inverse_cache_invalidated(self):

        tran = Transformation(self.vectors[0])

        tran.inverse()

        self.assertFalse(tran._iupdate)

        tran *= Transformation(self.vectors[1])

        self.assertTrue(tran._iupdate)

        np.testing.assert_allclose(tran.inverse().matrix, np.linalg.inv(tran.matrix), atol=1e-12)

    def test_adjoint(self):

        tran = Transformation(self.vectors[0])

        np.testing.assert_array_equal(tran.adjoint(), tran_ad(tran.matrix))

        np.testing.assert_allclose(tran.inverse().adjoint(), np.linalg.inv(tran.adjoint()), atol=1e-12)

    def test_mul(self):

        for first, second in zip(self.vectors[:-1], self.vectors[1:]):
            with self.subTest(first=first, second=second):
                product = Transformation(first) * Transformation(second)

                self.assertIsInstance(product, Transformation)
                np.testing.assert_allclose(product.matrix, vec2tran(first) @ vec2tran(second), atol=1e-12)

    def test_imul(self):

        tran = Transformation(self.vectors[0])
        original = tran

        tran *= Transformation(self.vectors[1])

        self.assertIs(tran, original)
        np.testing.assert_allclose(tran.matrix, vec2tran(self.vectors[0]) @ vec2tran(self.vectors[1]), atol=1e-12)

    def test_div(self):

        first = Transformation(self.vectors[0])
        second = Transformation(self.vectors[1])

        expected = first.matrix @ np.linalg.inv(second.matrix)

        np.testing.assert_allclose((first / second).matrix, expected, atol=1e-12)
        np.testing.assert_allclose((first / second).matrix, (first * second.inverse()).matrix, atol=1e-15)

        first /= second

        np.testing.assert_allclose(first.matrix, expected, atol=1e-12)

    def test_associativity(self):

        first, second, third = (Transformation(vector) for vector in self.vectors[:3])

        np.testing.assert_allclose(((first * second) * third).matrix, (first * (second * third)).matrix, atol=1e-12)

    def test_transform_points(self):

        tran = Transformation(self.vectors[0])

        point = np.array([1., 2, 3, 1])

        np.testing.assert_allclose(tran * point, tran.matrix @ point)

        landmarks = np.random.default_rng(5).uniform(-5, 5, (4, 7))

        np.testing.assert_allclose(tran * landmarks, tran.matrix @ landmarks)

        np.testing.assert_allclose(tran * [1, 2, 3], (tran.matrix @ point)[:3], atol=1e-12)

        np.testing.assert_allclose(tran * landmarks[:3], (tran.matrix @ np.vstack([landmarks[:3], np.ones(7)]))[:3],
                                   atol=1e-12)

        # points at infinity are only rotated
        np.testing.assert_allclose(tran * np.array([1., 2, 3, 0]), np.append(tran.C_ba @ [1, 2, 3], 0), atol=1e-12)

    def test_transform_bad_points(self):

        tran = Transformation()

        with self.assertRaises(ValueError):
            _ = tran * np.ones(5)

        with self.assertRaises(ValueError):
            _ = tran * np.ones((2, 3))

    def test_bad_operands(self):

        tran = Transformation()

        with self.assertRaises(TypeError):
            _ = tran * 5

        with self.assertRaises(TypeError):
            _ = tran / 5

        with self.assertRaises(TypeError):
            tran *= Rotation()

        with self.assertRaises(TypeError):
            tran /= 'other'

    def test_reproject(self):

        tran = Transformation(self.vectors[0])

        with self.assertLogs('lgmath.se3.transformation', level='DEBUG'):
            tran.reproject(force=True)

        np.testing.assert_allclose(tran.matrix, vec2tran(self.vectors[0]), atol=1e-12)

    def test_reproject_keeps_inverse_of_inverse(self):

        tran = Transformation(self.vectors[0])

        inverse_inverse = tran.inverse().inverse()

        inverse_inverse.reproject(force=True)

        self.assertIsNot(inverse_inverse.matrix, tran.matrix)
        np.testing.assert_array_equal(tran.matrix, vec2tran(self.vectors[0]))

    def test_eq(self):

        self.assertTrue(Transformation() == Transformation())

        self.assertTrue(Transformation(self.vectors[0]) == Transformation(self.vectors[0]))

        self.assertFalse(Transformation(self.vectors[0]) == Transformation())

        self.assertFalse(Transformation() == 'identity')

    def test_copy(self):

        tran = Transformation(self.vectors[0])

        tran2 = tran.copy()

        tran2 *= Transformation(self.vectors[1])

        np.testing.assert_array_equal(tran.matrix, vec2tran(self.vectors[0]))

    def test_repr(self):

        self.assertTrue(repr(Transformation()).startswith('Transformation('))
