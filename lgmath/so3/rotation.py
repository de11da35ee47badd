# Copyright 2021 United States Government as represented by the Administrator of the National Aeronautics and Space
# Administration.  No copyright is claimed in the United States under Title 17, U.S. Code. All Other Rights Reserved.


"""
This module provides the :class:`.Rotation` class, the value type used to represent elements of SO(3).
"""

import copy
import logging

from typing import Self

import numpy as np

from lgmath.so3.operations import vec2rot, rot2vec, is_rotation_matrix, project_to_so3

from lgmath._typing import ARRAY_LIKE, DOUBLE_ARRAY, NONEARRAY
from lgmath.common import _check_matrix_array_and_shape


_LOGGER: logging.Logger = logging.getLogger(__name__)
"""
The logger to use to report status/errors/warning/results/etc
"""


class Rotation:
    """
    A class to represent and manipulate rotations (elements of SO(3)).

    A :class:`Rotation` owns a 3x3 rotation matrix :math:`\\mathbf{C}_{ba}` which takes coordinates expressed in frame
    :math:`a` into coordinates expressed in frame :math:`b`.  It can be initialized from

    * nothing, giving the identity rotation,
    * a 3x3 matrix (anything with 9 elements), which is re-projected onto SO(3) if it has drifted,
    * a rotation vector (anything with 3 elements), which is passed through :func:`.vec2rot` (optionally using
      ``num_terms`` terms of the exponential series),
    * another :class:`Rotation`, which is copied.

    Matrices that are not numerically orthonormal with determinant 1 are silently replaced by the nearest rotation
    matrix (see :func:`.project_to_so3`).  Upstream numerical drift is expected and should not abort a pipeline.

    The inverse (the transpose) is computed on first use and cached until the rotation is modified in place.

    Rotations compose with the ``*`` operator::

        >>> from lgmath import Rotation
        >>> from numpy import pi
        >>> C_ba = Rotation([pi/2, 0, 0])
        >>> C_cb = Rotation([0, pi/2, 0])
        >>> C_ca = C_cb*C_ba

    and ``/`` composes with the inverse of the right operand.  Multiplying by a 3 element vector (or a 3xn array of
    column vectors) rotates the vector(s).
    """

    def __init__(self, data: ARRAY_LIKE | Self | None = None, num_terms: int = 0):
        """
        :param data: The rotation data to initialize the class with
        :param num_terms: The number of exponential series terms to use when ``data`` is a rotation vector (0 for the
                          closed form).  The identity counts as the first term and the result is re-projected onto
                          SO(3)
        :raises ValueError: If the size of the input data is not 3 or 9
        """

        self._matrix: DOUBLE_ARRAY = np.eye(3)
        self._inverse: NONEARRAY = None
        self._iupdate: bool = True

        if data is None:
            return

        if isinstance(data, Rotation):
            self._matrix = data.matrix.copy()
            return

        numpy_data = np.asanyarray(data, dtype=np.float64)

        if numpy_data.size == 3:
            self._matrix = vec2rot(numpy_data, num_terms=num_terms)

            # a truncated series is not orthonormal in general
            if num_terms > 0:
                self.reproject()

        elif numpy_data.size == 9:
            self._matrix = _check_matrix_array_and_shape(numpy_data.reshape(3, 3), 3, 3)
            self.reproject()

        else:
            raise ValueError('The specified rotation data cannot be interpreted.')

    @classmethod
    def _from_trusted(cls, matrix: DOUBLE_ARRAY, inverse: NONEARRAY = None) -> Self:
        """
        Builds an instance around an already valid matrix without checking it, optionally seeding the inverse cache.
        """

        out = cls.__new__(cls)
        out._matrix = matrix
        out._inverse = inverse
        out._iupdate = inverse is None

        return out

    @property
    def matrix(self) -> DOUBLE_ARRAY:
        """
        The 3x3 rotation matrix :math:`\\mathbf{C}_{ba}`.

        This property is read only.  Use the in place operators to modify the rotation.
        """

        return self._matrix

    def inverse(self) -> Self:
        """
        Returns the inverse rotation as a new :class:`Rotation`.

        The inverse of a rotation matrix is its transpose, which is computed once and cached.  The returned rotation
        has this rotation's matrix as its own cached inverse.

        :return: The inverse rotation
        """

        if self._iupdate:
            self._inverse = self._matrix.T.copy()
            self._iupdate = False

        assert self._inverse is not None, "the inverse is somehow None but _iupdate is set to false"
        return self._from_trusted(self._inverse, self._matrix)

    def vec(self) -> DOUBLE_ARRAY:
        """
        Returns the rotation vector for this rotation (see :func:`.rot2vec`).
        """

        return rot2vec(self._matrix)

    def reproject(self, force: bool = False):
        """
        Re-projects the matrix onto SO(3) if it has drifted (or always if ``force`` is ``True``).

        :param force: Re-project even if the matrix is still a valid rotation matrix
        """

        if force or not is_rotation_matrix(self._matrix):
            _LOGGER.debug('Re-projecting rotation matrix onto SO(3)')
            self._matrix = project_to_so3(self._matrix)

        self._iupdate = True

    def copy(self) -> Self:
        """
        Returns a deep copy of self.

        :return: A deep copy of self breaking all mutability
        """

        return copy.deepcopy(self)

    def __mul__(self, other):

        if isinstance(other, Rotation):
            out = self.copy()
            out *= other
            return out

        elif isinstance(other, (np.ndarray, list, tuple)):
            vectors = np.asanyarray(other, dtype=np.float64)

            if vectors.ndim == 0 or vectors.shape[0] != 3:
                raise ValueError('Only 3 element vectors (or 3xn arrays of them) can be rotated')

            return self._matrix @ vectors

        return NotImplemented

    def __imul__(self, other):

        if not isinstance(other, Rotation):
            return NotImplemented

        self._matrix = self._matrix @ other.matrix
        self.reproject()

        return self

    def __truediv__(self, other):

        if not isinstance(other, Rotation):
            return NotImplemented

        out = self.copy()
        out /= other
        return out

    def __itruediv__(self, other):

        if not isinstance(other, Rotation):
            return NotImplemented

        self._matrix = self._matrix @ other.matrix.T
        self.reproject()

        return self

    def __eq__(self, other) -> bool:

        if not isinstance(other, Rotation):
            return NotImplemented

        return bool((self._matrix == other.matrix).all())

    def __repr__(self) -> str:
        return 'Rotation({0!r})'.format(self._matrix)

    def __str__(self) -> str:
        return str(self._matrix)
