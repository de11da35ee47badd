# Copyright 2021 United States Government as represented by the Administrator of the National Aeronautics and Space
# Administration.  No copyright is claimed in the United States under Title 17, U.S. Code. All Other Rights Reserved.


"""
This package defines the operations on the rotation group SO(3) (exponential and logarithmic maps, left Jacobians,
projection onto the group) along with the :class:`.Rotation` value type.
"""

import lgmath.so3.operations
import lgmath.so3.rotation

from lgmath.so3.operations import (hat, vee, vec2rot, rot2vec, vec2jac, vec2jacinv, is_rotation_matrix,
                                   project_to_so3)
from lgmath.so3.rotation import Rotation

__all__ = ['hat', 'vee', 'vec2rot', 'rot2vec', 'vec2jac', 'vec2jacinv', 'is_rotation_matrix', 'project_to_so3',
           'Rotation']
