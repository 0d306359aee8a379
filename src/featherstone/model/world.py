import logging
from typing import Callable, List, TypeVar, Union

import numpy as np
import numpy.typing as npt
from prettytable import PrettyTable

from featherstone.core.constants import JointType
from featherstone.core.spatial_math import Wrench3, vector3
from featherstone.core.units import UnitSystem, UnitType
from featherstone.model.contact import Contact
from featherstone.model.inertial import MassProperties, Pose
from featherstone.model.tree import JointBody, Tree

R = TypeVar("R")


class World:
    """The mechanical system: a forest of joint bodies, the contacts and the gravity"""

    def __init__(self, units: UnitSystem, gravity: Union[npt.ArrayLike, None] = None):
        """
        Args:
            units (UnitSystem): the unit system of the world
            gravity (npt.ArrayLike, optional): the gravity vector.
                                               Defaults to -y times the earth gravity.
        """
        self.units = units
        self.gravity = (
            np.array([0.0, -units.earth_gravity(), 0.0])
            if gravity is None
            else vector3(gravity)
        )
        self.tree = Tree()
        self.contacts: List[Contact] = []

    @property
    def root_joints(self) -> List[JointBody]:
        return [self.tree[idx] for idx in self.tree.roots]

    def new_screw(
        self,
        local_position: Pose,
        local_axis: npt.ArrayLike,
        pitch: float,
        units: Union[UnitSystem, None] = None,
        name: str = None,
    ) -> JointBody:
        return self.tree.new_joint(
            self.units if units is None else units,
            JointType.SCREW,
            local_position,
            local_axis,
            pitch,
            name=name,
        )

    def new_revolute(
        self,
        local_position: Pose,
        local_axis: npt.ArrayLike,
        units: Union[UnitSystem, None] = None,
        name: str = None,
    ) -> JointBody:
        return self.tree.new_joint(
            self.units if units is None else units,
            JointType.REVOLUTE,
            local_position,
            local_axis,
            name=name,
        )

    def new_prismatic(
        self,
        local_position: Pose,
        local_axis: npt.ArrayLike,
        units: Union[UnitSystem, None] = None,
        name: str = None,
    ) -> JointBody:
        return self.tree.new_joint(
            self.units if units is None else units,
            JointType.PRISMATIC,
            local_position,
            local_axis,
            name=name,
        )

    def add_screw(
        self,
        parent: JointBody,
        local_position: Pose,
        local_axis: npt.ArrayLike,
        pitch: float,
        name: str = None,
    ) -> JointBody:
        return self.tree.add_joint(
            parent, JointType.SCREW, local_position, local_axis, pitch, name=name
        )

    def add_revolute(
        self, parent: JointBody, local_position: Pose, local_axis: npt.ArrayLike, name: str = None
    ) -> JointBody:
        return self.tree.add_joint(
            parent, JointType.REVOLUTE, local_position, local_axis, name=name
        )

    def add_prismatic(
        self, parent: JointBody, local_position: Pose, local_axis: npt.ArrayLike, name: str = None
    ) -> JointBody:
        return self.tree.add_joint(
            parent, JointType.PRISMATIC, local_position, local_axis, name=name
        )

    def new_contact(
        self,
        action: JointBody,
        local_position: npt.ArrayLike,
        local_direction: npt.ArrayLike,
        cor: float,
        reaction: Union[JointBody, None] = None,
    ) -> Contact:
        """registers a contact

        Args:
            action (JointBody): the body the contact point belongs to
            local_position (npt.ArrayLike): the contact point, in local coordinates
            local_direction (npt.ArrayLike): the contact normal, in local coordinates
            cor (float): the coefficient of restitution
            reaction (JointBody, optional): the other body. Defaults to the ground.

        Returns:
            Contact: the new contact
        """
        normal = Wrench3.at(local_direction, local_position)
        contact = Contact(action, normal, cor, reaction)
        self.contacts.append(contact)
        return contact

    def traverse(self, operation: Callable[[JointBody], None]) -> None:
        for root in self.root_joints:
            root.traverse(operation)

    def traverse_reduce(self, initial: R, operation: Callable[[R, JointBody], R]) -> R:
        result = initial
        for root in self.root_joints:
            result = root.traverse_reduce(result, operation)
        return result

    def get_all_joints(self, units: Union[UnitSystem, None] = None) -> List[JointBody]:
        """
        Args:
            units (UnitSystem, optional): the unit system all the joints are converted to.
                                          Defaults to the world units.

        Returns:
            List[JointBody]: all the joints, root by root, in pre-order. The contacts
                             follow the units of their action body.
        """
        units = self.units if units is None else units
        for root in self.root_joints:
            root.do_convert(units)
        for contact in self.contacts:
            contact.do_convert(contact.action.units)
        return list(self.tree)

    def do_convert(self, target: UnitSystem) -> None:
        """Converts the gravity, every tree and every contact to the target unit system"""
        self.gravity = self.gravity * UnitType.ACCELERATION.convert(self.units, target)
        for root in self.root_joints:
            root.do_convert(target)
        for contact in self.contacts:
            contact.do_convert(target)
        self.units = target

    @staticmethod
    def build_serial_chain(
        count: int,
        delta_distance: float,
        mass_properties: MassProperties,
        units: Union[UnitSystem, None] = None,
    ) -> "World":
        """builds a chain of revolute joints about z, each one translated by
        (delta_distance, 0, 0) from the previous one and carrying mass_properties

        Args:
            count (int): the number of joints
            delta_distance (float): the distance between two joints
            mass_properties (MassProperties): the mass properties of each body
            units (UnitSystem, optional): the world units. Defaults to the mass properties units.

        Returns:
            World: the world containing the chain
        """
        units = mass_properties.units if units is None else units
        world = World(units, np.array([0.0, -units.earth_gravity(), 0.0]))
        parent = None
        for _ in range(count):
            if parent is None:
                joint = world.new_revolute(Pose.origin(), [0, 0, 1])
            else:
                joint = parent.add_revolute(
                    Pose.translation(delta_distance, 0, 0), [0, 0, 1]
                )
            joint.add_mass_properties(mass_properties)
            parent = joint
        logging.debug(f"Built a serial chain of {count} joints")
        return world

    def to_simulation(self):
        from featherstone.dynamics.simulation import Simulation

        return Simulation.from_world(self)

    def print_table(self) -> PrettyTable:
        """logs the table of the joints

        Returns:
            PrettyTable: the table
        """
        table_joints = PrettyTable(["Idx", "Joint name", "Type", "Parent", "Units", "Mass"])
        table_joints.title = "Joints"
        for i, body in enumerate(self.tree):
            parent = "world" if body.is_root else body.parent.name
            table_joints.add_row(
                [i, body.name, body.type.value, parent, body.units.name, body.mass_properties.mass]
            )
        logging.debug(table_joints)
        return table_joints

    def __repr__(self) -> str:
        return (
            f"World: Units={self.units.name}, Gravity={self.gravity.tolist()},"
            f" RootJoints={len(self.tree.roots)}"
        )
