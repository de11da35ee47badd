# Copyright 2021 United States Government as represented by the Administrator of the National Aeronautics and Space
# Administration.  No copyright is claimed in the United States under Title 17, U.S. Code. All Other Rights Reserved.


"""
Core operations on the rotation group SO(3) and its Lie algebra so(3).

All routines are implemented purely on numpy arrays (or array like objects) and are pure functions: they never modify
their inputs.  Rotation vectors are 3 element vectors :math:`\\boldsymbol{\\phi}=\\theta\\mathbf{a}` where
:math:`\\theta` is the rotation angle in radians and :math:`\\mathbf{a}` is the unit rotation axis.  Rotation matrices
:math:`\\mathbf{C}_{ba}` take coordinates in frame :math:`a` to coordinates in frame :math:`b`.
"""

import math

import numpy as np

from scipy.special import bernoulli

from lgmath._typing import ARRAY_LIKE, DOUBLE_ARRAY
from lgmath.common import _check_matrix_array_and_shape, _check_vector_array_and_size
from lgmath.constants import (SMALL_ANGLE_THRESHOLD, NEAR_PI_THRESHOLD, REPROJECTION_TOLERANCE,
                              RANK_DEFICIENCY_THRESHOLD)


__all__ = ['hat', 'vee', 'vec2rot', 'rot2vec', 'vec2jac', 'vec2jacinv', 'is_rotation_matrix', 'project_to_so3']


def hat(vector: ARRAY_LIKE) -> DOUBLE_ARRAY:
    r"""
    This function returns a numpy array with the skew symmetric cross product matrix for vector.

    The skew symmetric cross product matrix is defined such that:

    .. math::
        \mathbf{a}\times\mathbf{b}=\mathbf{a}^\wedge\mathbf{b} \\
        \mathbf{a}^\wedge = \left[\begin{array}{ccc} 0 & -a_3 & a_2 \\
        a_3 & 0 & -a_1 \\
        -a_2 & a_1 & 0 \end{array}\right]

    This function is vectorized, therefore you can input multiple vectors as a 3xn array where each column is an
    independent vector.  The resulting output will be nx3x3 where the first axis stores each matrix.

    :param vector: The vector(s) to compute a skew symmetric matrix for
    :return: The skew symmetric cross product matrix(ces) corresponding to the vector(s)
    :raises ValueError: If the first axis of the input does not have length 3
    """

    vector = np.asanyarray(vector, dtype=np.float64)

    if vector.ndim == 0 or vector.shape[0] != 3:
        raise ValueError('The length of the first axis must be 3')

    if vector.ndim > 1:
        vector = vector.reshape(3, -1)
        zeros = np.zeros(vector.shape[-1])

        return np.array([zeros, -vector[2], vector[1],
                         vector[2], zeros, -vector[0],
                         -vector[1], vector[0], zeros]).T.reshape(-1, 3, 3)

    return np.array([[0, -vector[2], vector[1]],
                     [vector[2], 0, -vector[0]],
                     [-vector[1], vector[0], 0]])


def vee(matrix: ARRAY_LIKE) -> DOUBLE_ARRAY:
    """
    The inverse of :func:`hat`: extracts the 3 element vector from a 3x3 skew symmetric matrix.

    Only the lower triangle is read, so the input is assumed to be skew symmetric.
    """

    matrix = _check_matrix_array_and_shape(matrix, 3, 3)

    return np.array([matrix[2, 1], matrix[0, 2], matrix[1, 0]])


def _series(generator: DOUBLE_ARRAY, coefficients: DOUBLE_ARRAY) -> DOUBLE_ARRAY:
    r"""
    Sums the matrix power series :math:`\sum_n c_n\mathbf{A}^n` for the supplied coefficients.
    """

    result = np.zeros_like(generator)
    power = np.eye(generator.shape[0])

    for coefficient in coefficients:
        result += coefficient * power
        power = power @ generator

    return result


def _exp_coefficients(num_terms: int, shift: int = 0) -> DOUBLE_ARRAY:
    """
    The coefficients 1/(n+shift)! for n in [0, num_terms).
    """

    return np.array([1 / math.factorial(n + shift) for n in range(num_terms)])


def _bernoulli_coefficients(num_terms: int) -> DOUBLE_ARRAY:
    """
    The coefficients B_n/n! for n in [0, num_terms) using the B_1 = -1/2 convention.
    """

    numbers = bernoulli(num_terms)[:num_terms]

    return np.array([b / math.factorial(n) for n, b in enumerate(numbers)])


def vec2rot(aaxis: ARRAY_LIKE, num_terms: int = 0) -> DOUBLE_ARRAY:
    r"""
    The exponential map from so(3) to SO(3): converts a rotation vector into a rotation matrix.

    When ``num_terms`` is 0 (the default) the closed form Rodrigues' formula is used:

    .. math::
        \theta = \left\|\boldsymbol{\phi}\right\| \\
        \mathbf{C} = \mathbf{I}_{3\times 3} + \frac{\text{sin}(\theta)}{\theta}\boldsymbol{\phi}^\wedge +
        \frac{1-\text{cos}(\theta)}{\theta^2}\boldsymbol{\phi}^\wedge\boldsymbol{\phi}^\wedge

    For angles below :data:`.SMALL_ANGLE_THRESHOLD` this falls back to the second order Taylor expansion
    :math:`\mathbf{I}+\boldsymbol{\phi}^\wedge+\frac{1}{2}\boldsymbol{\phi}^\wedge\boldsymbol{\phi}^\wedge` to avoid
    dividing by (nearly) zero.

    When ``num_terms`` is positive the matrix exponential series
    :math:`\sum_{n=0}^{N-1}\frac{1}{n!}\left(\boldsymbol{\phi}^\wedge\right)^n` is summed instead.  This is primarily
    useful for verifying the closed form.

    :param aaxis: The 3 element rotation vector
    :param num_terms: The number of terms of the exponential series to sum counting the identity as the first term (so
                      1 gives the identity), or 0 for the closed form
    :return: The 3x3 rotation matrix
    """

    aaxis = _check_vector_array_and_size(aaxis, 3)
    aaxis_hat = hat(aaxis)

    if num_terms > 0:
        return _series(aaxis_hat, _exp_coefficients(num_terms))

    angle = np.linalg.norm(aaxis)

    if angle < SMALL_ANGLE_THRESHOLD:
        return np.eye(3) + aaxis_hat + 0.5 * aaxis_hat @ aaxis_hat

    return (np.eye(3) + (np.sin(angle) / angle) * aaxis_hat +
            (2 * np.sin(0.5 * angle) ** 2 / angle ** 2) * aaxis_hat @ aaxis_hat)


def rot2vec(matrix: ARRAY_LIKE) -> DOUBLE_ARRAY:
    r"""
    The logarithmic map from SO(3) to so(3): converts a rotation matrix into a rotation vector.

    The rotation angle is computed from both the symmetric and skew symmetric parts of the matrix

    .. math::
        \text{cos}(\theta) = \frac{\text{tr}(\mathbf{C})-1}{2} \\
        \text{sin}(\theta) = \frac{1}{2}\left\|\left(\mathbf{C}-\mathbf{C}^T\right)^\vee\right\| \\
        \theta = \text{atan2}(\text{sin}(\theta), \text{cos}(\theta))

    which always lies in :math:`[0, \pi]` and agrees with the clamped arccosine for valid rotation matrices while
    remaining accurate at both ends of the range.  The rotation vector is then

    * :math:`\frac{1}{2}\left(\mathbf{C}-\mathbf{C}^T\right)^\vee` (the first order approximation, which is zero for
      the identity) when :math:`\theta` is below :data:`.SMALL_ANGLE_THRESHOLD`,
    * :math:`\frac{\theta}{2\text{sin}(\theta)}\left(\mathbf{C}-\mathbf{C}^T\right)^\vee` in general,
    * :math:`\theta\mathbf{a}` when :math:`\theta` is within :data:`.NEAR_PI_THRESHOLD` of :math:`\pi`, where the axis
      :math:`\mathbf{a}` is the normalized column of
      :math:`\frac{1}{2}\left(\mathbf{C}+\mathbf{C}^T\right)-\text{cos}(\theta)\mathbf{I}` with the largest diagonal
      element, signed to agree with the skew symmetric part.

    The input is assumed to be a valid rotation matrix.  Anything else produces a meaningless (but finite for most
    inputs) result.

    :param matrix: The 3x3 rotation matrix
    :return: The 3 element rotation vector with an angle in :math:`[0, \pi]`
    """

    matrix = _check_matrix_array_and_shape(matrix, 3, 3)

    skew_part = vee(matrix - matrix.T)

    cos_angle = 0.5 * (np.trace(matrix) - 1)
    sin_angle = 0.5 * np.linalg.norm(skew_part)

    angle = np.arctan2(sin_angle, cos_angle)

    if angle < SMALL_ANGLE_THRESHOLD:
        return 0.5 * skew_part

    if np.pi - angle < NEAR_PI_THRESHOLD:

        # (C + C^T)/2 - cos(theta) I = (1 - cos(theta)) a a^T
        symmetric_part = 0.5 * (matrix + matrix.T) - cos_angle * np.eye(3)

        column = symmetric_part[:, np.argmax(np.diag(symmetric_part))]

        axis = column / np.linalg.norm(column)

        if axis @ skew_part < 0:
            axis = -axis

        return angle * axis

    return (angle / (2 * sin_angle)) * skew_part


def vec2jac(aaxis: ARRAY_LIKE, num_terms: int = 0) -> DOUBLE_ARRAY:
    r"""
    Computes the left Jacobian of SO(3) for a rotation vector.

    When ``num_terms`` is 0 (the default) the closed form is used:

    .. math::
        \mathbf{J} = \frac{\text{sin}(\theta)}{\theta}\mathbf{I}_{3\times 3} +
        \left(1-\frac{\text{sin}(\theta)}{\theta}\right)\mathbf{a}\mathbf{a}^T +
        \frac{1-\text{cos}(\theta)}{\theta}\mathbf{a}^\wedge

    falling back to :math:`\mathbf{I}+\frac{1}{2}\boldsymbol{\phi}^\wedge` below :data:`.SMALL_ANGLE_THRESHOLD`.
    Otherwise the series :math:`\sum_{n=0}^{N-1}\frac{1}{(n+1)!}\left(\boldsymbol{\phi}^\wedge\right)^n` is summed.

    :param aaxis: The 3 element rotation vector
    :param num_terms: The number of series terms to sum counting the identity as the first term, or 0 for the closed
                      form
    :return: The 3x3 left Jacobian
    """

    aaxis = _check_vector_array_and_size(aaxis, 3)

    if num_terms > 0:
        return _series(hat(aaxis), _exp_coefficients(num_terms, shift=1))

    angle = np.linalg.norm(aaxis)

    if angle < SMALL_ANGLE_THRESHOLD:
        return np.eye(3) + 0.5 * hat(aaxis)

    axis = aaxis / angle
    sinc = np.sin(angle) / angle

    # 1 - cos(theta) written as 2 sin^2(theta/2) so it does not round to 0 for small angles
    return sinc * np.eye(3) + (1 - sinc) * np.outer(axis, axis) + (2 * np.sin(0.5 * angle) ** 2 / angle) * hat(axis)


def vec2jacinv(aaxis: ARRAY_LIKE, num_terms: int = 0) -> DOUBLE_ARRAY:
    r"""
    Computes the inverse of the left Jacobian of SO(3) for a rotation vector.

    When ``num_terms`` is 0 (the default) the closed form is used:

    .. math::
        \mathbf{J}^{-1} = \frac{\theta}{2}\text{cot}\left(\frac{\theta}{2}\right)\mathbf{I}_{3\times 3} +
        \left(1-\frac{\theta}{2}\text{cot}\left(\frac{\theta}{2}\right)\right)\mathbf{a}\mathbf{a}^T -
        \frac{\theta}{2}\mathbf{a}^\wedge

    falling back to :math:`\mathbf{I}-\frac{1}{2}\boldsymbol{\phi}^\wedge` below :data:`.SMALL_ANGLE_THRESHOLD`.
    Otherwise the series :math:`\sum_{n=0}^{N-1}\frac{B_n}{n!}\left(\boldsymbol{\phi}^\wedge\right)^n` is summed where
    :math:`B_n` are the Bernoulli numbers.

    The inverse Jacobian is singular for angles that are non-zero multiples of :math:`2\pi`.

    :param aaxis: The 3 element rotation vector
    :param num_terms: The number of series terms to sum counting the identity as the first term, or 0 for the closed
                      form
    :return: The 3x3 inverse left Jacobian
    """

    aaxis = _check_vector_array_and_size(aaxis, 3)

    if num_terms > 0:
        return _series(hat(aaxis), _bernoulli_coefficients(num_terms))

    angle = np.linalg.norm(aaxis)

    if angle < SMALL_ANGLE_THRESHOLD:
        return np.eye(3) - 0.5 * hat(aaxis)

    axis = aaxis / angle
    half_angle = 0.5 * angle
    half_cot = half_angle / np.tan(half_angle)

    return half_cot * np.eye(3) + (1 - half_cot) * np.outer(axis, axis) - half_angle * hat(axis)


def is_rotation_matrix(matrix: ARRAY_LIKE, tol: float = REPROJECTION_TOLERANCE) -> bool:
    r"""
    Checks whether a 3x3 matrix is (numerically) a member of SO(3).

    A matrix is accepted when every element of :math:`\mathbf{C}\mathbf{C}^T-\mathbf{I}` and the difference of its
    determinant from 1 are within ``tol``.

    :param matrix: The 3x3 matrix to check
    :param tol: The allowed deviation
    :return: ``True`` if the matrix is a valid rotation matrix
    """

    matrix = _check_matrix_array_and_shape(matrix, 3, 3)

    return bool(np.abs(matrix @ matrix.T - np.eye(3)).max() <= tol and abs(np.linalg.det(matrix) - 1) <= tol)


def project_to_so3(matrix: ARRAY_LIKE, rank_tol: float = RANK_DEFICIENCY_THRESHOLD) -> DOUBLE_ARRAY:
    r"""
    Maps a 3x3 matrix onto the nearest rotation matrix.

    For a matrix with singular value decomposition :math:`\mathbf{U}\mathbf{S}\mathbf{V}^T` the nearest rotation matrix
    (in the Frobenius sense) is

    .. math::
        \mathbf{C} = \mathbf{U}\text{diag}(1, 1, \text{det}(\mathbf{U}\mathbf{V}^T))\mathbf{V}^T

    When the matrix is rank deficient (the smallest singular value is less than ``rank_tol`` times the largest) the
    nearest rotation is not unique.  In this case the matrix is instead passed through the logarithmic and exponential
    maps (``vec2rot(rot2vec(matrix))``) which picks a single rotation deterministically.  For instance a matrix of all
    ones maps to the identity.

    :param matrix: The 3x3 matrix to project
    :param rank_tol: The relative singular value below which the matrix is considered rank deficient
    :return: The projected 3x3 rotation matrix
    """

    matrix = _check_matrix_array_and_shape(matrix, 3, 3)

    u_mat, singular_values, vt_mat = np.linalg.svd(matrix)

    if singular_values[-1] <= rank_tol * singular_values[0]:

        projected = vec2rot(rot2vec(matrix))

        if not np.isfinite(projected).all():
            return np.eye(3)

        return projected

    correction = np.diag([1, 1, np.sign(np.linalg.det(u_mat @ vt_mat))])

    return u_mat @ correction @ vt_mat
