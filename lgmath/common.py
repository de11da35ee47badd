# Copyright 2021 United States Government as represented by the Administrator of the National Aeronautics and Space
# Administration.  No copyright is claimed in the United States under Title 17, U.S. Code. All Other Rights Reserved.


"""
Common numeric utilities shared by the SO(3) and SE(3) routines.

This module contains the shape checking helpers used to interpret user input as well as the near equality predicates
for matrices and Lie algebra vectors.  It has no dependencies on the group modules at import time so it can be used by
all of them without creating circular imports.
"""

import numpy as np

from lgmath._typing import ARRAY_LIKE, DOUBLE_ARRAY
from lgmath.constants import NEAR_EQUAL_TOLERANCE


__all__ = ['near_equal', 'near_equal_angle_axis', 'near_equal_lie_alg']


def _check_vector_array_and_size(vector: ARRAY_LIKE, size: int) -> DOUBLE_ARRAY:
    """
    Interprets the input as a flat vector of exactly ``size`` elements.

    Row vectors, column vectors and flat sequences are all accepted as long as they contain exactly ``size`` elements.
    The result is always a new flat float64 array so the caller's data is never aliased.

    :param vector: The vector to interpret
    :param size: The required number of elements
    :return: The vector as a flat numpy array
    :raises ValueError: If the input does not contain exactly ``size`` elements
    """

    vector = np.array(vector, dtype=np.float64)

    if vector.size != size:
        raise ValueError(f'The vector must have exactly {size} elements.  Got {vector.size}')

    return vector.ravel()


def _check_matrix_array_and_shape(matrix: ARRAY_LIKE, rows: int, cols: int) -> DOUBLE_ARRAY:
    """
    Interprets the input as a ``rows`` by ``cols`` matrix, returning a new float64 array.

    :raises ValueError: If the input is not shaped ``rows`` by ``cols``
    """

    matrix = np.array(matrix, dtype=np.float64)

    if matrix.shape != (rows, cols):
        raise ValueError(f'The matrix must be {rows}x{cols}.  Got shape {matrix.shape}')

    return matrix


def near_equal(first: ARRAY_LIKE, second: ARRAY_LIKE, tol: float = NEAR_EQUAL_TOLERANCE) -> bool:
    """
    Checks whether two arrays are element-wise equal to within an absolute tolerance.

    Arrays of different shapes are never considered near equal (no broadcasting is performed).

    :param first: The first array
    :param second: The second array
    :param tol: The absolute tolerance on each element
    :return: ``True`` if every element of ``first`` is within ``tol`` of the corresponding element of ``second``
    """

    first = np.asanyarray(first, dtype=np.float64)
    second = np.asanyarray(second, dtype=np.float64)

    if first.shape != second.shape:
        return False

    return bool((np.abs(first - second) <= tol).all())


def _wrapped(aaxis: DOUBLE_ARRAY) -> DOUBLE_ARRAY:
    """
    Returns the equivalent rotation vector obtained by subtracting one full turn along the rotation axis.
    """

    angle = np.linalg.norm(aaxis)

    if angle == 0:
        return aaxis

    return aaxis - 2 * np.pi * aaxis / angle


def near_equal_angle_axis(first: ARRAY_LIKE, second: ARRAY_LIKE, tol: float = NEAR_EQUAL_TOLERANCE) -> bool:
    r"""
    Checks whether two rotation vectors represent the same rotation to within a tolerance.

    Rotation vectors are not unique: :math:`\boldsymbol{\phi}` and
    :math:`\boldsymbol{\phi}-2\pi\frac{\boldsymbol{\phi}}{\|\boldsymbol{\phi}\|}` represent the same rotation.  In
    particular :math:`(\pi, 0, 0)` and :math:`(-\pi, 0, 0)` are the same rotation.  This function therefore first
    compares the vectors directly and then compares each against the wrapped version of the other.

    :param first: The first 3 element rotation vector
    :param second: The second 3 element rotation vector
    :param tol: The absolute tolerance on each element
    :return: ``True`` if the vectors represent the same rotation
    """

    first = _check_vector_array_and_size(first, 3)
    second = _check_vector_array_and_size(second, 3)

    return (near_equal(first, second, tol) or
            near_equal(_wrapped(first), second, tol) or
            near_equal(first, _wrapped(second), tol))


def near_equal_lie_alg(first: ARRAY_LIKE, second: ARRAY_LIKE, tol: float = NEAR_EQUAL_TOLERANCE) -> bool:
    r"""
    Checks whether two Lie algebra vectors (SO(3) or SE(3)) represent the same group element to within a tolerance.

    3 element vectors are compared with :func:`near_equal_angle_axis`.  6 element vectors of the form
    :math:`\boldsymbol{\xi}=[\boldsymbol{\rho}; \boldsymbol{\phi}]` are near equal if they are element-wise near
    equal, or if their rotational parts represent the same rotation and the transformation matrices they map to are
    near equal (the translational part of an SE(3) vector changes when the rotational part is wrapped).

    :param first: The first Lie algebra vector
    :param second: The second Lie algebra vector
    :param tol: The absolute tolerance on each element
    :return: ``True`` if the vectors represent the same group element
    :raises ValueError: If the vectors are not both 3 or both 6 elements long
    """

    first = np.asanyarray(first, dtype=np.float64).ravel()
    second = np.asanyarray(second, dtype=np.float64).ravel()

    if first.size != second.size:
        raise ValueError('Both Lie algebra vectors must have the same number of elements')

    if first.size == 3:
        return near_equal_angle_axis(first, second, tol)

    elif first.size == 6:

        if near_equal(first, second, tol):
            return True

        # deferred to avoid a circular import since the se3 package uses this module
        from lgmath.se3.operations import vec2tran

        return near_equal_angle_axis(first[3:], second[3:], tol) and near_equal(vec2tran(first), vec2tran(second), tol)

    else:
        raise ValueError(f'Lie algebra vectors must have 3 or 6 elements.  Got {first.size}')
