# Copyright 2021 United States Government as represented by the Administrator of the National Aeronautics and Space
# Administration.  No copyright is claimed in the United States under Title 17, U.S. Code. All Other Rights Reserved.


"""
This module provides the :class:`.Transformation` class, the value type used to represent elements of SE(3).
"""

import copy
import logging

from typing import Self

import numpy as np

from lgmath.se3.operations import vec2tran, tran2vec, tran_ad
from lgmath.so3.operations import is_rotation_matrix, project_to_so3
from lgmath.so3.rotation import Rotation

from lgmath._typing import ARRAY_LIKE, DOUBLE_ARRAY, NONEARRAY
from lgmath.common import _check_matrix_array_and_shape, _check_vector_array_and_size


_LOGGER: logging.Logger = logging.getLogger(__name__)
"""
The logger to use to report status/errors/warning/results/etc
"""


class Transformation:
    """
    A class to represent and manipulate rigid body transformations (elements of SE(3)).

    A :class:`Transformation` owns the 4x4 homogeneous matrix

    .. math::
        \\mathbf{T}_{ba} = \\left[\\begin{array}{cc}\\mathbf{C}_{ba} & \\mathbf{r}_{b}^{ab} \\\\
        \\mathbf{0}^T & 1\\end{array}\\right]

    which maps homogeneous points expressed in frame :math:`a` into frame :math:`b`.  Here
    :math:`\\mathbf{r}_{b}^{ab}=-\\mathbf{C}_{ba}\\mathbf{r}_{a}^{ba}` is the translation from :math:`b` to :math:`a`
    expressed in frame :math:`b`.  It can be initialized from

    * nothing, giving the identity transformation,
    * a 4x4 matrix (anything with 16 elements),
    * a rotation (a 3x3 matrix or a :class:`.Rotation`) and the translation ``r_ba_ina`` from :math:`a` to
      :math:`b` expressed in frame :math:`a`,
    * a 6 element Lie algebra vector, which is passed through :func:`.vec2tran` (optionally using ``num_terms``
      terms of the exponential series),
    * another :class:`Transformation`, which is copied.

    In every case the rotation block is silently re-projected onto SO(3) if it is not numerically a rotation matrix
    and the bottom row is forced to ``[0, 0, 0, 1]``.

    The inverse is formed algebraically (:math:`\\mathbf{C}^T` and :math:`-\\mathbf{C}^T\\mathbf{r}`), never through a
    generic matrix inverse.  It is computed on first use and cached until the transformation is modified in place.

    Transformations compose with ``*`` (and ``*=``) and ``/`` (and ``/=``) composes with the inverse of the right
    operand::

        >>> from lgmath import Transformation
        >>> T_ba = Transformation([1, 0, 0, 0, 0, 0.5])
        >>> T_cb = Transformation([0, 2, 0, 0.1, 0, 0])
        >>> T_ca = T_cb*T_ba
        >>> T_cb_again = T_ca/T_ba

    Multiplying by a homogeneous 4 element point (or a 4xn array of them) transforms the point(s).  3 element points
    (or 3xn arrays) are treated as Euclidean points and the Euclidean result is returned.
    """

    def __init__(self, data: ARRAY_LIKE | Rotation | Self | None = None, r_ba_ina: ARRAY_LIKE | None = None,
                 num_terms: int = 0):
        """
        :param data: The transformation data to initialize the class with (or the rotation if ``r_ba_ina`` is given)
        :param r_ba_ina: The translation from frame a to frame b expressed in frame a.  When this is provided ``data``
                         is interpreted as the rotation :math:`\\mathbf{C}_{ba}`
        :param num_terms: The number of exponential series terms to use when ``data`` is a Lie algebra vector (0 for
                          the closed form).  The identity counts as the first term and the rotation block of the
                          result is re-projected onto SO(3)
        :raises ValueError: If the data cannot be interpreted as a transformation
        """

        self._matrix: DOUBLE_ARRAY = np.eye(4)
        self._inverse: NONEARRAY = None
        self._iupdate: bool = True

        if r_ba_ina is not None:
            rotation = Rotation(data).matrix

            self._matrix[:3, :3] = rotation
            self._matrix[:3, 3] = -rotation @ _check_vector_array_and_size(r_ba_ina, 3)
            return

        if data is None:
            return

        if isinstance(data, Transformation):
            self._matrix = data.matrix.copy()
            self._inverse = data._inverse
            self._iupdate = data._iupdate
            return

        numpy_data = np.asanyarray(data, dtype=np.float64)

        if numpy_data.size == 16:
            self._matrix = _check_matrix_array_and_shape(numpy_data.reshape(4, 4), 4, 4)
            self.reproject()

        elif numpy_data.size == 6:
            self._matrix = vec2tran(numpy_data, num_terms=num_terms)

            # a truncated series is not orthonormal in general
            if num_terms > 0:
                self.reproject()

        else:
            raise ValueError('The specified transformation data cannot be interpreted.  Expected a 4x4 matrix or a 6 '
                             f'element vector, got {numpy_data.size} elements')

    @classmethod
    def _from_trusted(cls, matrix: DOUBLE_ARRAY, inverse: NONEARRAY = None) -> 'Transformation':
        """
        Builds an instance around an already valid matrix without checking it, optionally seeding the inverse cache.
        """

        out = Transformation.__new__(Transformation)
        out._matrix = matrix
        out._inverse = inverse
        out._iupdate = inverse is None

        return out

    @property
    def matrix(self) -> DOUBLE_ARRAY:
        """
        The 4x4 homogeneous transformation matrix :math:`\\mathbf{T}_{ba}`.

        This property is read only.  Use the in place operators to modify the transformation.
        """

        return self._matrix

    @property
    def C_ba(self) -> DOUBLE_ARRAY:
        """
        A copy of the 3x3 rotation matrix :math:`\\mathbf{C}_{ba}`.
        """

        return self._matrix[:3, :3].copy()

    @property
    def rotation(self) -> Rotation:
        """
        The rotational part of the transformation as a :class:`.Rotation`.
        """

        return Rotation._from_trusted(self.C_ba)

    @property
    def r_ab_inb(self) -> DOUBLE_ARRAY:
        """
        The translation from frame b to frame a expressed in frame b (the last column of the matrix).
        """

        return self._matrix[:3, 3].copy()

    @property
    def r_ba_ina(self) -> DOUBLE_ARRAY:
        """
        The translation from frame a to frame b expressed in frame a, :math:`-\\mathbf{C}_{ba}^T\\mathbf{r}_b^{ab}`.
        """

        return -self._matrix[:3, :3].T @ self._matrix[:3, 3]

    def _inverse_matrix(self) -> DOUBLE_ARRAY:
        """
        Returns the (cached) inverse matrix, computing it if needed.
        """

        if self._iupdate:
            rotation_t = self._matrix[:3, :3].T

            self._inverse = np.eye(4)
            self._inverse[:3, :3] = rotation_t
            self._inverse[:3, 3] = -rotation_t @ self._matrix[:3, 3]

            self._iupdate = False

        assert self._inverse is not None, "the inverse is somehow None but _iupdate is set to false"
        return self._inverse

    def inverse(self) -> 'Transformation':
        """
        Returns the inverse transformation :math:`\\mathbf{T}_{ab}` as a new :class:`Transformation`.

        The returned transformation has this transformation's matrix as its own cached inverse so that the inverse of
        the inverse is exactly the original.

        :return: The inverse transformation
        """

        return Transformation._from_trusted(self._inverse_matrix(), self._matrix)

    def adjoint(self) -> DOUBLE_ARRAY:
        """
        Returns the 6x6 adjoint of this transformation (see :func:`.tran_ad`).
        """

        return tran_ad(self._matrix)

    def vec(self) -> DOUBLE_ARRAY:
        """
        Returns the 6 element Lie algebra vector for this transformation (see :func:`.tran2vec`).
        """

        return tran2vec(self._matrix)

    def reproject(self, force: bool = False):
        """
        Re-projects the rotation block onto SO(3) if it has drifted (or always if ``force`` is ``True``).

        The translation is left untouched and the bottom row is reset to ``[0, 0, 0, 1]``.

        :param force: Re-project even if the rotation block is still a valid rotation matrix
        """

        # the matrix may be shared with the inverse cache of another instance so never modify it in place
        matrix = self._matrix.copy()

        if force or not is_rotation_matrix(matrix[:3, :3]):
            _LOGGER.debug('Re-projecting the rotation block of a transformation onto SO(3)')
            matrix[:3, :3] = project_to_so3(matrix[:3, :3])

        matrix[3] = [0, 0, 0, 1]

        self._matrix = matrix
        self._iupdate = True

    def copy(self) -> Self:
        """
        Returns a deep copy of self.

        :return: A deep copy of self breaking all mutability
        """

        return copy.deepcopy(self)

    def _transform_points(self, points: ARRAY_LIKE) -> DOUBLE_ARRAY:
        """
        Applies the transformation to homogeneous (4 element) or Euclidean (3 element) point(s).
        """

        points = np.asanyarray(points, dtype=np.float64)

        if points.ndim == 0 or points.shape[0] not in (3, 4):
            raise ValueError('Only 3 or 4 element points (or 3xn and 4xn arrays of them) can be transformed')

        if points.shape[0] == 4:
            return self._matrix @ points

        if points.ndim == 1:
            return self._matrix[:3, :3] @ points + self._matrix[:3, 3]

        return self._matrix[:3, :3] @ points + self._matrix[:3, 3].reshape(3, 1)

    def __mul__(self, other):

        if isinstance(other, Transformation):
            out = self.copy()
            out *= other
            return out

        elif isinstance(other, (np.ndarray, list, tuple)):
            return self._transform_points(other)

        return NotImplemented

    def _defers_to(self, other) -> bool:
        """
        Whether an in place operation with ``other`` must be left to the reflected operator of ``other``.

        This is the case when ``other`` carries a covariance and this transformation does not, so that the result keeps
        the propagated covariance.
        """

        # deferred to avoid a circular import since the covariance module subclasses this class
        from lgmath.se3.transformation_with_covariance import TransformationWithCovariance

        return isinstance(other, TransformationWithCovariance) and not isinstance(self, TransformationWithCovariance)

    def __imul__(self, other):

        if not isinstance(other, Transformation) or self._defers_to(other):
            return NotImplemented

        self._matrix = self._matrix @ other.matrix
        self.reproject()

        return self

    def __truediv__(self, other):

        if not isinstance(other, Transformation):
            return NotImplemented

        out = self.copy()
        out /= other
        return out

    def __itruediv__(self, other):

        if not isinstance(other, Transformation) or self._defers_to(other):
            return NotImplemented

        self._matrix = self._matrix @ other._inverse_matrix()
        self.reproject()

        return self

    def __eq__(self, other) -> bool:

        if not isinstance(other, Transformation):
            return NotImplemented

        return bool((self._matrix == other.matrix).all())

    def __repr__(self) -> str:
        return '{0}({1!r})'.format(type(self).__name__, self._matrix)

    def __str__(self) -> str:
        return str(self._matrix)
