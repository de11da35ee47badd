"""
test_transformation_with_covariance
===================================

Tests the TransformationWithCovariance value type and its first order covariance propagation.

Test Cases
__________
"""

from unittest import TestCase

import numpy as np

from lgmath import Transformation, TransformationWithCovariance, CovarianceNotSetError
from lgmath.se3 import vec2tran, tran_ad


def random_covariance(seed: int) -> np.ndarray:
    """
    A random symmetric positive definite 6x6 matrix.
    """

    mat = np.random.default_rng(seed).normal(size=(6, 6))

    cov = mat @ mat.T + 6 * np.eye(6)

    return 0.5 * (cov + cov.T)


class TestTransformationWithCovariance(TestCase):

    def setUp(self):

        self.vectors = np.random.default_rng(27182).uniform(-1, 1, (3, 6))

        self.cov_1 = random_covariance(1)
        self.cov_2 = random_covariance(2)

        self.first = TransformationWithCovariance(self.vectors[0], covariance=self.cov_1)
        self.second = TransformationWithCovariance(self.vectors[1], covariance=self.cov_2)

    def test_covariance_not_set(self):

        tran = TransformationWithCovariance(self.vectors[0])

        self.assertFalse(tran.covariance_set)

        with self.assertRaises(CovarianceNotSetError):
            _ = tran.covariance

        with self.assertRaises(RuntimeError):
            _ = tran.covariance

    def test_zero_covariance(self):

        tran = TransformationWithCovariance(self.vectors[0])

        tran.set_zero_covariance()

        self.assertTrue(tran.covariance_set)
        np.testing.assert_array_equal(tran.covariance, np.zeros((6, 6)))

    def test_covariance_setter(self):

        tran = TransformationWithCovariance()

        tran.covariance = np.arange(36).reshape(6, 6)

        expected = 0.5 * (np.arange(36).reshape(6, 6) + np.arange(36).reshape(6, 6).T)

        np.testing.assert_array_equal(tran.covariance, expected)

        with self.assertRaises(ValueError):
            tran.covariance = np.eye(3)

        with self.assertRaises(ValueError):
            TransformationWithCovariance(covariance=np.eye(5))

    def test_covariance_returns_copy(self):

        covariance = self.first.covariance

        covariance[0, 1] += 100

        np.testing.assert_array_equal(self.first.covariance, self.cov_1)
        np.testing.assert_array_equal(self.first.covariance, self.first.covariance.T)

    def test_init(self):

        np.testing.assert_array_equal(self.first.matrix, vec2tran(self.vectors[0]))
        np.testing.assert_array_equal(self.first.covariance, self.cov_1)

        copied = TransformationWithCovariance(self.first)

        np.testing.assert_array_equal(copied.matrix, self.first.matrix)
        np.testing.assert_array_equal(copied.covariance, self.cov_1)
        self.assertIsNot(copied.covariance, self.first.covariance)

        overridden = TransformationWithCovariance(self.first, covariance=np.eye(6))

        np.testing.assert_array_equal(overridden.covariance, np.eye(6))

        from_plain = TransformationWithCovariance(Transformation(self.vectors[0]), covariance=self.cov_1)

        np.testing.assert_array_equal(from_plain.matrix, self.first.matrix)

        from_parts = TransformationWithCovariance(np.eye(3), [1, 2, 3], covariance=self.cov_1)

        np.testing.assert_allclose(from_parts.r_ab_inb, [-1, -2, -3])

    def test_mul(self):

        product = self.first * self.second

        self.assertIsInstance(product, TransformationWithCovariance)

        np.testing.assert_allclose(product.matrix, self.first.matrix @ self.second.matrix, atol=1e-12)

        ad_1 = tran_ad(self.first.matrix)

        np.testing.assert_allclose(product.covariance, self.cov_1 + ad_1 @ self.cov_2 @ ad_1.T, atol=1e-10)

        # the operands are left untouched
        np.testing.assert_array_equal(self.first.covariance, self.cov_1)

    def test_imul(self):

        tran = self.first.copy()
        original = tran

        tran *= self.second

        self.assertIs(tran, original)

        ad_1 = tran_ad(self.first.matrix)

        np.testing.assert_allclose(tran.covariance, self.cov_1 + ad_1 @ self.cov_2 @ ad_1.T, atol=1e-10)

    def test_mul_plain_right(self):

        product = self.first * Transformation(self.vectors[1])

        self.assertIsInstance(product, TransformationWithCovariance)

        np.testing.assert_allclose(product.matrix, self.first.matrix @ vec2tran(self.vectors[1]), atol=1e-12)
        np.testing.assert_allclose(product.covariance, self.cov_1, atol=1e-12)

    def test_mul_plain_left(self):

        plain = Transformation(self.vectors[0])

        product = plain * self.second

        self.assertIsInstance(product, TransformationWithCovariance)

        np.testing.assert_allclose(product.matrix, plain.matrix @ self.second.matrix, atol=1e-12)

        ad_1 = tran_ad(plain.matrix)

        np.testing.assert_allclose(product.covariance, ad_1 @ self.cov_2 @ ad_1.T, atol=1e-10)

        # the plain operand is still a plain transformation
        self.assertIs(type(plain), Transformation)

    def test_imul_plain_left(self):

        tran = Transformation(self.vectors[0])
        original = tran

        tran *= self.second

        self.assertIsInstance(tran, TransformationWithCovariance)

        np.testing.assert_allclose(tran.matrix, vec2tran(self.vectors[0]) @ self.second.matrix, atol=1e-12)

        ad_1 = tran_ad(vec2tran(self.vectors[0]))

        np.testing.assert_allclose(tran.covariance, ad_1 @ self.cov_2 @ ad_1.T, atol=1e-10)

        # the plain left operand is not modified
        self.assertIs(type(original), Transformation)
        np.testing.assert_array_equal(original.matrix, vec2tran(self.vectors[0]))

    def test_itruediv_plain_left(self):

        tran = Transformation(self.vectors[0])

        tran /= self.second

        self.assertIsInstance(tran, TransformationWithCovariance)

        composed = vec2tran(self.vectors[0]) @ np.linalg.inv(self.second.matrix)

        np.testing.assert_allclose(tran.matrix, composed, atol=1e-12)

        ad = tran_ad(composed)

        np.testing.assert_allclose(tran.covariance, ad @ self.cov_2 @ ad.T, atol=1e-9)

    def test_div(self):

        quotient = self.first / self.second

        self.assertIsInstance(quotient, TransformationWithCovariance)

        composed = self.first.matrix @ np.linalg.inv(self.second.matrix)

        np.testing.assert_allclose(quotient.matrix, composed, atol=1e-12)

        ad = tran_ad(composed)

        np.testing.assert_allclose(quotient.covariance, self.cov_1 + ad @ self.cov_2 @ ad.T, atol=1e-9)

    def test_div_matches_mul_by_inverse(self):

        quotient = self.first / self.second
        product = self.first * self.second.inverse()

        np.testing.assert_allclose(quotient.matrix, product.matrix, atol=1e-12)
        np.testing.assert_allclose(quotient.covariance, product.covariance, atol=1e-9)

    def test_itruediv(self):

        tran = self.first.copy()

        tran /= self.second

        np.testing.assert_allclose(tran.covariance, (self.first / self.second).covariance, atol=1e-12)

    def test_div_plain(self):

        plain = Transformation(self.vectors[1])

        quotient = self.first / plain

        self.assertIsInstance(quotient, TransformationWithCovariance)
        np.testing.assert_allclose(quotient.covariance, self.cov_1, atol=1e-12)

        quotient = Transformation(self.vectors[0]) / self.second

        self.assertIsInstance(quotient, TransformationWithCovariance)

        composed = vec2tran(self.vectors[0]) @ np.linalg.inv(self.second.matrix)

        np.testing.assert_allclose(quotient.matrix, composed, atol=1e-12)

        ad = tran_ad(composed)

        np.testing.assert_allclose(quotient.covariance, ad @ self.cov_2 @ ad.T, atol=1e-9)

    def test_missing_covariance_propagates(self):

        unset = TransformationWithCovariance(self.vectors[2])

        for result in [self.first * unset, unset * self.first, self.first / unset, unset / self.first,
                       unset.inverse(), Transformation(self.vectors[0]) * unset]:
            with self.subTest(result=result):
                self.assertIsInstance(result, TransformationWithCovariance)
                self.assertFalse(result.covariance_set)

    def test_inverse(self):

        inverse = self.first.inverse()

        self.assertIsInstance(inverse, TransformationWithCovariance)

        np.testing.assert_allclose(inverse.matrix, np.linalg.inv(self.first.matrix), atol=1e-12)

        ad_inv = np.linalg.inv(tran_ad(self.first.matrix))

        np.testing.assert_allclose(inverse.covariance, ad_inv @ self.cov_1 @ ad_inv.T, atol=1e-9)

        np.testing.assert_allclose(inverse.inverse().covariance, self.cov_1, atol=1e-9)
        self.assertIs(inverse.inverse().matrix, self.first.matrix)

    def test_exactly_symmetric(self):

        for result in [self.first * self.second, self.first / self.second, self.first.inverse(),
                       Transformation(self.vectors[2]) * self.second, Transformation(self.vectors[2]) / self.second]:
            with self.subTest(result=result):
                np.testing.assert_array_equal(result.covariance, result.covariance.T)

    def test_zero_covariance_composition(self):

        exact = TransformationWithCovariance(self.vectors[2])
        exact.set_zero_covariance()

        np.testing.assert_allclose((self.first * exact).covariance, self.cov_1, atol=1e-12)

        ad_exact = tran_ad(exact.matrix)

        np.testing.assert_allclose((exact * self.first).covariance, ad_exact @ self.cov_1 @ ad_exact.T, atol=1e-10)

    def test_transformation_property(self):

        mean = self.first.transformation

        self.assertIs(type(mean), Transformation)
        np.testing.assert_array_equal(mean.matrix, self.first.matrix)
        self.assertIsNot(mean.matrix, self.first.matrix)

    def test_copy(self):

        tran = self.first.copy()

        tran.set_zero_covariance()
        tran *= self.second

        np.testing.assert_array_equal(self.first.covariance, self.cov_1)
        np.testing.assert_array_equal(self.first.matrix, vec2tran(self.vectors[0]))

    def test_bad_operands(self):

        with self.assertRaises(TypeError):
            _ = self.first * 5

        with self.assertRaises(TypeError):
            _ = 5 / self.first

        tran = self.first.copy()

        with self.assertRaises(TypeError):
            tran *= 'other'

    def test_eq(self):

        self.assertTrue(self.first == TransformationWithCovariance(self.vectors[0], covariance=self.cov_1))

        self.assertFalse(self.first == TransformationWithCovariance(self.vectors[0], covariance=self.cov_2))

        self.assertFalse(self.first == TransformationWithCovariance(self.vectors[0]))

        self.assertFalse(self.first == Transformation(self.vectors[0]))

        self.assertTrue(TransformationWithCovariance(self.vectors[0]) == Transformation(self.vectors[0]))

        self.assertTrue(Transformation(self.vectors[0]) == TransformationWithCovariance(self.vectors[0]))

    def test_repr(self):

        self.assertIn('covariance=', repr(self.first))
        self.assertTrue(repr(self.first).startswith('TransformationWithCovariance('))
