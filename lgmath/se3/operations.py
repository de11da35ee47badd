# Copyright 2021 United States Government as represented by the Administrator of the National Aeronautics and Space
# Administration.  No copyright is claimed in the United States under Title 17, U.S. Code. All Other Rights Reserved.


"""
Core operations on the rigid transformation group SE(3) and its Lie algebra se(3).

SE(3) Lie algebra vectors are 6 element vectors :math:`\\boldsymbol{\\xi}=[\\boldsymbol{\\rho};\\boldsymbol{\\phi}]`
with the translational part first and the rotational part (a rotation vector) last.  Transformation matrices are
4x4 homogeneous matrices

.. math::
    \\mathbf{T}_{ba} = \\left[\\begin{array}{cc}\\mathbf{C}_{ba} & \\mathbf{r}_{b}^{ab} \\\\
    \\mathbf{0}^T & 1\\end{array}\\right]

All routines are built on top of the SO(3) operations in :mod:`lgmath.so3.operations` and are pure functions.  Any
routine that takes a Lie algebra vector accepts any array like with exactly 6 elements and raises a ``ValueError``
otherwise.
"""

import numpy as np

from lgmath._typing import ARRAY_LIKE, DOUBLE_ARRAY
from lgmath.common import _check_matrix_array_and_shape, _check_vector_array_and_size
from lgmath.constants import SERIES_EXPANSION_THRESHOLD
from lgmath.so3 import operations as so3
from lgmath.so3.operations import _series, _exp_coefficients, _bernoulli_coefficients


__all__ = ['hat', 'curlyhat', 'point2fs', 'point2sf', 'vec2tran', 'tran2vec', 'tran_ad', 'vec2q', 'vec2jac',
           'vec2jacinv']


def _split(vector: ARRAY_LIKE) -> tuple[DOUBLE_ARRAY, DOUBLE_ARRAY]:
    """
    Checks a 6 element Lie algebra vector and splits it into its translational and rotational parts.
    """

    vector = _check_vector_array_and_size(vector, 6)

    return vector[:3], vector[3:]


def hat(vector: ARRAY_LIKE) -> DOUBLE_ARRAY:
    r"""
    Forms the 4x4 se(3) matrix for a Lie algebra vector.

    .. math::
        \boldsymbol{\xi}^\wedge = \left[\begin{array}{cc}\boldsymbol{\phi}^\wedge & \boldsymbol{\rho} \\
        \mathbf{0}^T & 0\end{array}\right]

    :param vector: The 6 element Lie algebra vector
    :return: The 4x4 matrix
    """

    rho, aaxis = _split(vector)

    out = np.zeros((4, 4))
    out[:3, :3] = so3.hat(aaxis)
    out[:3, 3] = rho

    return out


def curlyhat(vector: ARRAY_LIKE) -> DOUBLE_ARRAY:
    r"""
    Forms the 6x6 adjoint of an se(3) element (the Lie algebra adjoint).

    .. math::
        \boldsymbol{\xi}^\curlywedge = \left[\begin{array}{cc}\boldsymbol{\phi}^\wedge & \boldsymbol{\rho}^\wedge \\
        \mathbf{0} & \boldsymbol{\phi}^\wedge\end{array}\right]

    :param vector: The 6 element Lie algebra vector
    :return: The 6x6 matrix
    """

    rho, aaxis = _split(vector)

    aaxis_hat = so3.hat(aaxis)

    out = np.zeros((6, 6))
    out[:3, :3] = aaxis_hat
    out[:3, 3:] = so3.hat(rho)
    out[3:, 3:] = aaxis_hat

    return out


def _check_point(point: ARRAY_LIKE) -> DOUBLE_ARRAY:
    """
    Interprets a 3 element Euclidean point or a 4 element homogeneous point as a homogeneous point.
    """

    point = np.array(point, dtype=np.float64).ravel()

    if point.size == 3:
        return np.append(point, 1.0)

    elif point.size == 4:
        return point

    raise ValueError(f'Points must have 3 or 4 elements.  Got {point.size}')


def point2fs(point: ARRAY_LIKE) -> DOUBLE_ARRAY:
    r"""
    Forms the 4x6 matrix :math:`\mathbf{p}^\odot` for a homogeneous point
    :math:`\mathbf{p}=[\boldsymbol{\varepsilon};\eta]` such that
    :math:`\boldsymbol{\xi}^\wedge\mathbf{p}=\mathbf{p}^\odot\boldsymbol{\xi}`.

    .. math::
        \mathbf{p}^\odot = \left[\begin{array}{cc}\eta\mathbf{I} & -\boldsymbol{\varepsilon}^\wedge \\
        \mathbf{0}^T & \mathbf{0}^T\end{array}\right]

    3 element points are treated as having :math:`\eta=1`.

    :param point: The 3 or 4 element point
    :return: The 4x6 matrix
    """

    point = _check_point(point)

    out = np.zeros((4, 6))
    out[:3, :3] = point[3] * np.eye(3)
    out[:3, 3:] = -so3.hat(point[:3])

    return out


def point2sf(point: ARRAY_LIKE) -> DOUBLE_ARRAY:
    r"""
    Forms the 6x4 matrix :math:`\mathbf{p}^\circledcirc` for a homogeneous point
    :math:`\mathbf{p}=[\boldsymbol{\varepsilon};\eta]` such that
    :math:`\mathbf{p}^T\boldsymbol{\xi}^\wedge=\boldsymbol{\xi}^T\mathbf{p}^\circledcirc`.

    .. math::
        \mathbf{p}^\circledcirc = \left[\begin{array}{cc}\mathbf{0} & \boldsymbol{\varepsilon} \\
        -\boldsymbol{\varepsilon}^\wedge & \mathbf{0}\end{array}\right]

    :param point: The 3 or 4 element point
    :return: The 6x4 matrix
    """

    point = _check_point(point)

    out = np.zeros((6, 4))
    out[:3, 3] = point[:3]
    out[3:, :3] = -so3.hat(point[:3])

    return out


def vec2tran(vector: ARRAY_LIKE, num_terms: int = 0) -> DOUBLE_ARRAY:
    r"""
    The exponential map from se(3) to SE(3): converts a Lie algebra vector into a transformation matrix.

    When ``num_terms`` is 0 (the default) the closed form is used

    .. math::
        \mathbf{T} = \left[\begin{array}{cc}\mathbf{C}(\boldsymbol{\phi}) & \mathbf{J}(\boldsymbol{\phi})
        \boldsymbol{\rho} \\ \mathbf{0}^T & 1\end{array}\right]

    where :math:`\mathbf{C}` is :func:`.so3.vec2rot` and :math:`\mathbf{J}` is the SO(3) left Jacobian
    (:func:`.so3.vec2jac`).  When ``num_terms`` is positive the series
    :math:`\sum_{n=0}^{N-1}\frac{1}{n!}\left(\boldsymbol{\xi}^\wedge\right)^n` is summed instead.

    :param vector: The 6 element Lie algebra vector
    :param num_terms: The number of exponential series terms to sum counting the identity as the first term (so 1
                      gives the identity), or 0 for the closed form
    :return: The 4x4 transformation matrix
    :raises ValueError: If the vector does not have exactly 6 elements
    """

    rho, aaxis = _split(vector)

    if num_terms > 0:
        out = _series(hat(vector), _exp_coefficients(num_terms))
        out[3] = [0, 0, 0, 1]
        return out

    out = np.eye(4)
    out[:3, :3] = so3.vec2rot(aaxis)
    out[:3, 3] = so3.vec2jac(aaxis) @ rho

    return out


def tran2vec(matrix: ARRAY_LIKE) -> DOUBLE_ARRAY:
    r"""
    The logarithmic map from SE(3) to se(3): converts a transformation matrix into a Lie algebra vector.

    .. math::
        \boldsymbol{\phi} = \log(\mathbf{C})^\vee \\
        \boldsymbol{\rho} = \mathbf{J}^{-1}(\boldsymbol{\phi})\mathbf{r}

    where :math:`\log(\mathbf{C})^\vee` is :func:`.so3.rot2vec`.

    :param matrix: The 4x4 transformation matrix
    :return: The 6 element Lie algebra vector
    """

    matrix = _check_matrix_array_and_shape(matrix, 4, 4)

    aaxis = so3.rot2vec(matrix[:3, :3])
    rho = so3.vec2jacinv(aaxis) @ matrix[:3, 3]

    return np.concatenate([rho, aaxis])


def tran_ad(matrix: ARRAY_LIKE) -> DOUBLE_ARRAY:
    r"""
    Computes the 6x6 adjoint of a transformation matrix.

    .. math::
        \text{Ad}(\mathbf{T}) = \left[\begin{array}{cc}\mathbf{C} & \mathbf{r}^\wedge\mathbf{C} \\
        \mathbf{0} & \mathbf{C}\end{array}\right]

    The adjoint is a group homomorphism so :math:`\text{Ad}(\mathbf{T}_1\mathbf{T}_2)=
    \text{Ad}(\mathbf{T}_1)\text{Ad}(\mathbf{T}_2)` and :math:`\text{Ad}(\mathbf{T}^{-1})=\text{Ad}(\mathbf{T})^{-1}`.

    :param matrix: The 4x4 transformation matrix
    :return: The 6x6 adjoint
    """

    matrix = _check_matrix_array_and_shape(matrix, 4, 4)

    rotation = matrix[:3, :3]

    out = np.zeros((6, 6))
    out[:3, :3] = rotation
    out[:3, 3:] = so3.hat(matrix[:3, 3]) @ rotation
    out[3:, 3:] = rotation

    return out


def _q_coefficients(angle: float) -> tuple[float, float, float]:
    """
    The three trigonometric coefficients of the translation coupling block.

    Below :data:`.SERIES_EXPANSION_THRESHOLD` their Taylor series are used since the closed forms cancel catastrophically.
    """

    if angle < SERIES_EXPANSION_THRESHOLD:
        angle_sq = angle * angle

        return (1 / 6 - angle_sq / 120 + angle_sq ** 2 / 5040,
                1 / 24 - angle_sq / 720 + angle_sq ** 2 / 40320,
                1 / 120 - angle_sq / 2520 + angle_sq ** 2 / 120960)

    sin_angle = np.sin(angle)
    cos_angle = np.cos(angle)

    return ((angle - sin_angle) / angle ** 3,
            (angle ** 2 + 2 * cos_angle - 2) / (2 * angle ** 4),
            (2 * angle - 3 * sin_angle + angle * cos_angle) / (2 * angle ** 5))


def vec2q(vector: ARRAY_LIKE) -> DOUBLE_ARRAY:
    r"""
    Computes the 3x3 translation coupling block :math:`\mathbf{Q}` of the SE(3) left Jacobian.

    .. math::
        \mathbf{Q} = \frac{1}{2}\boldsymbol{\rho}^\wedge +
        c_1\left(\boldsymbol{\phi}^\wedge\boldsymbol{\rho}^\wedge + \boldsymbol{\rho}^\wedge\boldsymbol{\phi}^\wedge +
        \boldsymbol{\phi}^\wedge\boldsymbol{\rho}^\wedge\boldsymbol{\phi}^\wedge\right) +
        c_2\left(\boldsymbol{\phi}^\wedge\boldsymbol{\phi}^\wedge\boldsymbol{\rho}^\wedge +
        \boldsymbol{\rho}^\wedge\boldsymbol{\phi}^\wedge\boldsymbol{\phi}^\wedge -
        3\boldsymbol{\phi}^\wedge\boldsymbol{\rho}^\wedge\boldsymbol{\phi}^\wedge\right) +
        c_3\left(\boldsymbol{\phi}^\wedge\boldsymbol{\rho}^\wedge\boldsymbol{\phi}^\wedge\boldsymbol{\phi}^\wedge +
        \boldsymbol{\phi}^\wedge\boldsymbol{\phi}^\wedge\boldsymbol{\rho}^\wedge\boldsymbol{\phi}^\wedge\right)

    with :math:`c_1=\frac{\theta-\text{sin}\theta}{\theta^3}`,
    :math:`c_2=\frac{\theta^2+2\text{cos}\theta-2}{2\theta^4}` and
    :math:`c_3=\frac{2\theta-3\text{sin}\theta+\theta\text{cos}\theta}{2\theta^5}`.  For small angles the
    coefficients are replaced by their Taylor series (limits 1/6, 1/24 and 1/120).

    :param vector: The 6 element Lie algebra vector
    :return: The 3x3 coupling block
    """

    rho, aaxis = _split(vector)

    rx = so3.hat(rho)
    px = so3.hat(aaxis)

    pxrx = px @ rx
    rxpx = rx @ px
    pxrxpx = pxrx @ px

    c1, c2, c3 = _q_coefficients(float(np.linalg.norm(aaxis)))

    return (0.5 * rx +
            c1 * (pxrx + rxpx + pxrxpx) +
            c2 * (px @ pxrx + rxpx @ px - 3 * pxrxpx) +
            c3 * (pxrxpx @ px + px @ pxrxpx))


def vec2jac(vector: ARRAY_LIKE, num_terms: int = 0) -> DOUBLE_ARRAY:
    r"""
    Computes the 6x6 left Jacobian of SE(3).

    .. math::
        \boldsymbol{\mathcal{J}} = \left[\begin{array}{cc}\mathbf{J} & \mathbf{Q} \\
        \mathbf{0} & \mathbf{J}\end{array}\right]

    where :math:`\mathbf{J}` is the SO(3) left Jacobian of the rotational part and :math:`\mathbf{Q}` is
    :func:`vec2q`.  When ``num_terms`` is positive the series
    :math:`\sum_{n=0}^{N-1}\frac{1}{(n+1)!}\left(\boldsymbol{\xi}^\curlywedge\right)^n` is summed instead.

    :param vector: The 6 element Lie algebra vector
    :param num_terms: The number of series terms to sum counting the identity as the first term, or 0 for the closed
                      form
    :return: The 6x6 left Jacobian
    """

    _, aaxis = _split(vector)

    if num_terms > 0:
        return _series(curlyhat(vector), _exp_coefficients(num_terms, shift=1))

    jac = so3.vec2jac(aaxis)

    out = np.zeros((6, 6))
    out[:3, :3] = jac
    out[:3, 3:] = vec2q(vector)
    out[3:, 3:] = jac

    return out


def vec2jacinv(vector: ARRAY_LIKE, num_terms: int = 0) -> DOUBLE_ARRAY:
    r"""
    Computes the inverse of the 6x6 left Jacobian of SE(3).

    .. math::
        \boldsymbol{\mathcal{J}}^{-1} = \left[\begin{array}{cc}\mathbf{J}^{-1} &
        -\mathbf{J}^{-1}\mathbf{Q}\mathbf{J}^{-1} \\ \mathbf{0} & \mathbf{J}^{-1}\end{array}\right]

    When ``num_terms`` is positive the series
    :math:`\sum_{n=0}^{N-1}\frac{B_n}{n!}\left(\boldsymbol{\xi}^\curlywedge\right)^n` is summed instead, where
    :math:`B_n` are the Bernoulli numbers.

    :param vector: The 6 element Lie algebra vector
    :param num_terms: The number of series terms to sum counting the identity as the first term, or 0 for the closed
                      form
    :return: The 6x6 inverse left Jacobian
    """

    _, aaxis = _split(vector)

    if num_terms > 0:
        return _series(curlyhat(vector), _bernoulli_coefficients(num_terms))

    jacinv = so3.vec2jacinv(aaxis)

    out = np.zeros((6, 6))
    out[:3, :3] = jacinv
    out[:3, 3:] = -jacinv @ vec2q(vector) @ jacinv
    out[3:, 3:] = jacinv

    return out
