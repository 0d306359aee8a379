from .inertial import MassProperties, Motor, Pose
from .joint import JointBodyInfo
from .tree import JointBody, Tree
from .contact import Contact
from .world import World
