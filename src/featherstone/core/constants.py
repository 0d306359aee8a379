# Copyright (C) Istituto Italiano di Tecnologia (IIT). All rights reserved.

from enum import Enum


class JointType(str, Enum):
    """The kinds of one degree of freedom joints"""

    # combined rotation and parallel translation
    SCREW = "screw"
    # pure rotation about an axis
    REVOLUTE = "revolute"
    # pure translation along an axis
    PRISMATIC = "prismatic"
