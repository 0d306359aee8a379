# Copyright (C) Istituto Italiano di Tecnologia (IIT). All rights reserved.

from .simulation import Simulation, State
from .kinematics import Kinematics
from .articulated import Articulated
