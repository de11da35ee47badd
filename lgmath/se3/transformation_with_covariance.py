# Copyright 2021 United States Government as represented by the Administrator of the National Aeronautics and Space
# Administration.  No copyright is claimed in the United States under Title 17, U.S. Code. All Other Rights Reserved.


"""
This module provides the :class:`.TransformationWithCovariance` class, a :class:`.Transformation` that carries a 6x6
covariance and propagates it through composition and inversion.

Covariances are expressed in the tangent space of the transformation they are attached to using left perturbations,
:math:`\\mathbf{T}=\\text{exp}(\\delta\\boldsymbol{\\xi}^\\wedge)\\bar{\\mathbf{T}}` with
:math:`\\delta\\boldsymbol{\\xi}\\sim\\mathcal{N}(\\mathbf{0},\\boldsymbol{\\Sigma})`.  Under the assumption that the
noise on the operands is independent, first order propagation through the adjoint gives

================================  ===================================================================================
Operation                         Resulting covariance
================================  ===================================================================================
:math:`\\mathbf{T}_1\\mathbf{T}_2`  :math:`\\boldsymbol{\\Sigma}_1+\\text{Ad}(\\mathbf{T}_1)\\boldsymbol{\\Sigma}_2
                                  \\text{Ad}(\\mathbf{T}_1)^T`
:math:`\\mathbf{T}_1\\mathbf{T}_2^{-1}`  :math:`\\boldsymbol{\\Sigma}_1+\\text{Ad}(\\mathbf{T}_1\\mathbf{T}_2^{-1})
                                  \\boldsymbol{\\Sigma}_2\\text{Ad}(\\mathbf{T}_1\\mathbf{T}_2^{-1})^T`
:math:`\\mathbf{T}^{-1}`            :math:`\\text{Ad}(\\mathbf{T}^{-1})\\boldsymbol{\\Sigma}\\text{Ad}(\\mathbf{T}^{-1})^T`
================================  ===================================================================================

where a plain :class:`.Transformation` operand contributes no uncertainty.  Every resulting covariance is made exactly
symmetric by averaging it with its transpose.
"""

from typing import Self

import numpy as np

from lgmath.se3.transformation import Transformation
from lgmath.so3.rotation import Rotation

from lgmath._typing import ARRAY_LIKE, DOUBLE_ARRAY, NONEARRAY
from lgmath.common import _check_matrix_array_and_shape


class CovarianceNotSetError(RuntimeError):
    """
    Raised when the covariance of a :class:`.TransformationWithCovariance` is requested before one was set.
    """


def _symmetrize(covariance: DOUBLE_ARRAY) -> DOUBLE_ARRAY:
    return 0.5 * (covariance + covariance.T)


def _transport(adjoint: DOUBLE_ARRAY, covariance: NONEARRAY) -> NONEARRAY:
    """
    Maps a covariance through an adjoint, keeping an absent covariance absent.
    """

    if covariance is None:
        return None

    return adjoint @ covariance @ adjoint.T


class TransformationWithCovariance(Transformation):
    """
    A :class:`.Transformation` together with the 6x6 covariance of its left perturbation.

    The transformation part accepts every form the :class:`.Transformation` constructor does.  The covariance is
    optional.  A transformation without a covariance is different from one with a zero covariance: reading
    :attr:`covariance` before one was set raises a :class:`CovarianceNotSetError`, and composing with a transformation
    whose covariance is not set produces a result whose covariance is not set either.

    The operators behave exactly like those of :class:`.Transformation` for the mean while propagating the covariance
    according to the table in the module documentation.  Mixing with plain :class:`.Transformation` instances is
    allowed on either side of ``*`` and ``/`` and always produces a :class:`TransformationWithCovariance`.
    """

    def __init__(self, data: ARRAY_LIKE | Rotation | Transformation | None = None,
                 r_ba_ina: ARRAY_LIKE | None = None, covariance: ARRAY_LIKE | None = None, num_terms: int = 0):
        """
        :param data: The transformation data (see :class:`.Transformation`)
        :param r_ba_ina: The translation from frame a to frame b expressed in frame a (see :class:`.Transformation`)
        :param covariance: The 6x6 covariance.  If ``None`` and ``data`` is a :class:`TransformationWithCovariance`
                           its covariance is copied, otherwise the covariance is left unset
        :param num_terms: The number of exponential series terms to use when ``data`` is a Lie algebra vector
        :raises ValueError: If the data cannot be interpreted or the covariance is not 6x6
        """

        super().__init__(data, r_ba_ina, num_terms=num_terms)

        self._covariance: NONEARRAY = None

        if covariance is not None:
            self.covariance = covariance

        elif isinstance(data, TransformationWithCovariance) and data._covariance is not None:
            self._covariance = data._covariance.copy()

    @classmethod
    def _from_parts(cls, transformation: Transformation, covariance: NONEARRAY) -> Self:
        """
        Wraps a transformation (without copying its matrix) and an already propagated covariance.
        """

        out = cls.__new__(cls)
        out._matrix = transformation.matrix
        out._inverse = transformation._inverse
        out._iupdate = transformation._iupdate
        out._covariance = None if covariance is None else _symmetrize(covariance)

        return out

    @property
    def covariance(self) -> DOUBLE_ARRAY:
        """
        A copy of the 6x6 covariance of the left perturbation of this transformation.

        When set, the input is checked to be 6x6 and is symmetrized.

        :raises CovarianceNotSetError: If the covariance was never set
        """

        if self._covariance is None:
            raise CovarianceNotSetError('The covariance of this transformation has not been set')

        return self._covariance.copy()

    @covariance.setter
    def covariance(self, val: ARRAY_LIKE):

        self._covariance = _symmetrize(_check_matrix_array_and_shape(val, 6, 6))

    @property
    def covariance_set(self) -> bool:
        """
        Whether a covariance has been set for this transformation.
        """

        return self._covariance is not None

    def set_zero_covariance(self):
        """
        Sets the covariance to zero, stating that this transformation is known exactly.
        """

        self._covariance = np.zeros((6, 6))

    @property
    def transformation(self) -> Transformation:
        """
        A plain :class:`.Transformation` copy of the mean of this transformation.
        """

        return Transformation._from_trusted(self._matrix.copy(), self._inverse)

    def inverse(self) -> Self:
        """
        Returns the inverse transformation along with its propagated covariance
        :math:`\\text{Ad}(\\mathbf{T}^{-1})\\boldsymbol{\\Sigma}\\text{Ad}(\\mathbf{T}^{-1})^T`.

        :return: The inverse transformation with covariance
        """

        inverse = super().inverse()

        return self._from_parts(inverse, _transport(inverse.adjoint(), self._covariance))

    def __imul__(self, other):

        if isinstance(other, TransformationWithCovariance):

            if self._covariance is None or other._covariance is None:
                covariance = None
            else:
                covariance = self._covariance + _transport(self.adjoint(), other._covariance)

        elif isinstance(other, Transformation):
            covariance = self._covariance

        else:
            return NotImplemented

        super().__imul__(other)

        self._covariance = None if covariance is None else _symmetrize(covariance)

        return self

    def __rmul__(self, other):

        # a plain transformation on the left is exact, so only this covariance is carried across
        if not isinstance(other, Transformation):
            return NotImplemented

        composed = Transformation._from_trusted(other.matrix @ self._matrix)
        composed.reproject()

        return self._from_parts(composed, _transport(other.adjoint(), self._covariance))

    def __itruediv__(self, other):

        if not isinstance(other, Transformation):
            return NotImplemented

        super().__itruediv__(other)

        if isinstance(other, TransformationWithCovariance):

            if self._covariance is None or other._covariance is None:
                self._covariance = None
            else:
                # the adjoint of the already composed T_1 T_2^{-1}
                self._covariance = _symmetrize(self._covariance + _transport(self.adjoint(), other._covariance))

        return self

    def __rtruediv__(self, other):

        if not isinstance(other, Transformation):
            return NotImplemented

        composed = Transformation._from_trusted(other.matrix @ self._inverse_matrix())
        composed.reproject()

        return self._from_parts(composed, _transport(composed.adjoint(), self._covariance))

    def __eq__(self, other) -> bool:

        if not isinstance(other, Transformation):
            return NotImplemented

        if not super().__eq__(other):
            return False

        other_covariance = other._covariance if isinstance(other, TransformationWithCovariance) else None

        if self._covariance is None or other_covariance is None:
            return self._covariance is None and other_covariance is None

        return bool((self._covariance == other_covariance).all())

    def __repr__(self) -> str:
        return '{0}({1!r}, covariance={2!r})'.format(type(self).__name__, self._matrix, self._covariance)
