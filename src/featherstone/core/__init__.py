# Copyright (C) Istituto Italiano di Tecnologia (IIT). All rights reserved.

from .constants import JointType
from .errors import DegenerateJointError, SingularMatrixError
from .spatial_math import Matrix33, Twist3, Vector33, Wrench3
from .units import UnitSystem, UnitType
