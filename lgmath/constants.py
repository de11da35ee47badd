# Copyright 2021 United States Government as represented by the Administrator of the National Aeronautics and Space
# Administration.  No copyright is claimed in the United States under Title 17, U.S. Code. All Other Rights Reserved.


"""
This module collects the numeric constants that control the behaviour of the Lie group routines.

None of these are model parameters.  They only select which computational path is taken (closed form or series
expansion, generic or near-:math:`\\pi` branch) and how much numerical drift is tolerated before a matrix is
re-projected onto its group.  The comparison tolerances can be overridden per call through the ``tol`` and
``rank_tol`` keyword arguments of the routines that use them.  The branch thresholds are fixed.
"""


NEAR_EQUAL_TOLERANCE: float = 1e-6
"""
The default absolute tolerance used when comparing two matrices or two Lie algebra vectors for near equality.
"""

REPROJECTION_TOLERANCE: float = 1e-6
"""
The maximum deviation of :math:`\\mathbf{C}\\mathbf{C}^T` from identity (and of the determinant from 1) that a rotation
matrix may show before it is re-projected onto SO(3).
"""

SMALL_ANGLE_THRESHOLD: float = 1e-12
"""
Rotation angles (radians) below this use the Taylor expansion of the exponential map and the Jacobians instead of the
closed form trigonometric expressions, which would divide by (nearly) zero.
"""

SERIES_EXPANSION_THRESHOLD: float = 1e-2
"""
Rotation angles (radians) below this use the Taylor series of the coefficients of the SE(3) translation coupling block.

Those coefficients are differences of nearly equal numbers divided by high powers of the angle, so they lose all
precision long before the angle is small enough for :data:`SMALL_ANGLE_THRESHOLD` to apply.
"""

NEAR_PI_THRESHOLD: float = 1e-6
"""
Rotation angles within this distance of :math:`\\pi` extract the rotation axis from the symmetric part of the rotation
matrix instead of the skew symmetric part, which vanishes at :math:`\\pi`.
"""

RANK_DEFICIENCY_THRESHOLD: float = 1e-6
"""
The ratio of smallest to largest singular value below which a matrix is considered too degenerate to have a unique
nearest rotation matrix.
"""
