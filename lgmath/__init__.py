# Copyright 2021 United States Government as represented by the Administrator of the National Aeronautics and Space
# Administration.  No copyright is claimed in the United States under Title 17, U.S. Code. All Other Rights Reserved.


r"""
Lie group math for rotations and rigid body transformations.

This package provides exact and numerically stable conversions between the minimal (vector) and matrix
representations of the rotation group SO(3) and the rigid transformation group SE(3), along with the left Jacobians,
adjoints and covariance propagation needed for perturbation based estimation on these groups.

There are a few different representations used throughout the package and their format is described as follows:

.. _representation-table:

=======================  ===============================================================================================
Representation           Description
=======================  ===============================================================================================
rotation vector          A 3 element vector :math:`\boldsymbol{\phi}=\theta\mathbf{a}` where :math:`\theta` is the
                         rotation angle in radians and :math:`\mathbf{a}` is the unit rotation axis.  The zero vector
                         is the identity rotation.
rotation matrix          A :math:`3\times 3` orthonormal matrix :math:`\mathbf{C}_{ba}` with determinant 1 which takes
                         coordinates in frame :math:`a` to coordinates in frame :math:`b`.
se(3) vector             A 6 element vector :math:`\boldsymbol{\xi}=[\boldsymbol{\rho};\boldsymbol{\phi}]` with the
                         translational part first and the rotation vector last.
transformation matrix    A :math:`4\times 4` homogeneous matrix :math:`[\mathbf{C}_{ba}, \mathbf{r}_b^{ab};
                         \mathbf{0}^T, 1]` where :math:`\mathbf{r}_b^{ab}=-\mathbf{C}_{ba}\mathbf{r}_a^{ba}`.
covariance               A :math:`6\times 6` symmetric positive semi-definite matrix describing the left perturbation of
                         a transformation in its tangent space.
=======================  ===============================================================================================

The SO(3) routines live in :mod:`lgmath.so3` and the SE(3) routines in :mod:`lgmath.se3`.  Because both define
``hat``, ``vec2jac`` and ``vec2jacinv`` those are only available from their subpackages, while the unambiguous names
and the value types :class:`.Rotation`, :class:`.Transformation` and :class:`.TransformationWithCovariance` are
re-exported here.
"""

import lgmath.constants
import lgmath.common
import lgmath.so3
import lgmath.se3

from lgmath.common import near_equal, near_equal_angle_axis, near_equal_lie_alg
from lgmath.so3 import vec2rot, rot2vec, is_rotation_matrix, project_to_so3, Rotation
from lgmath.se3 import (vec2tran, tran2vec, tran_ad, vec2q, curlyhat, point2fs, point2sf, Transformation,
                        TransformationWithCovariance, CovarianceNotSetError)

__all__ = ['so3', 'se3', 'near_equal', 'near_equal_angle_axis', 'near_equal_lie_alg',
           'vec2rot', 'rot2vec', 'is_rotation_matrix', 'project_to_so3', 'Rotation',
           'vec2tran', 'tran2vec', 'tran_ad', 'vec2q', 'curlyhat', 'point2fs', 'point2sf',
           'Transformation', 'TransformationWithCovariance', 'CovarianceNotSetError']

__version__ = '1.0.0'
