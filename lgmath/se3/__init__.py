# Copyright 2021 United States Government as represented by the Administrator of the National Aeronautics and Space
# Administration.  No copyright is claimed in the United States under Title 17, U.S. Code. All Other Rights Reserved.


"""
This package defines the operations on the rigid transformation group SE(3) (exponential and logarithmic maps, left
Jacobians, adjoint) along with the :class:`.Transformation` and :class:`.TransformationWithCovariance` value types.
"""

import lgmath.se3.operations
import lgmath.se3.transformation
import lgmath.se3.transformation_with_covariance

from lgmath.se3.operations import (hat, curlyhat, point2fs, point2sf, vec2tran, tran2vec, tran_ad, vec2q, vec2jac,
                                   vec2jacinv)
from lgmath.se3.transformation import Transformation
from lgmath.se3.transformation_with_covariance import TransformationWithCovariance, CovarianceNotSetError

__all__ = ['hat', 'curlyhat', 'point2fs', 'point2sf', 'vec2tran', 'tran2vec', 'tran_ad', 'vec2q', 'vec2jac',
           'vec2jacinv', 'Transformation', 'TransformationWithCovariance', 'CovarianceNotSetError']
