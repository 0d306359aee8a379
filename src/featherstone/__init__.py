# Copyright (C) Istituto Italiano di Tecnologia (IIT). All rights reserved.
# This software may be modified and distributed under the terms of the
# GNU Lesser General Public License v2.1 or any later version.

from featherstone.core import (
    DegenerateJointError,
    JointType,
    Matrix33,
    SingularMatrixError,
    Twist3,
    UnitSystem,
    UnitType,
    Vector33,
    Wrench3,
)
from featherstone.dynamics import Articulated, Kinematics, Simulation, State
from featherstone.model import (
    Contact,
    JointBody,
    JointBodyInfo,
    MassProperties,
    Motor,
    Pose,
    Tree,
    World,
)
