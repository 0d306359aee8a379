# Copyright (C) Istituto Italiano di Tecnologia (IIT). All rights reserved.

import dataclasses
import logging
from typing import List

import numpy as np
from prettytable import PrettyTable

from featherstone.core.units import UnitSystem
from featherstone.model.tree import JointBody


@dataclasses.dataclass
class Simulation:
    """The flattened topology of a world.

    Joints are numbered root by root in pre-order, so the index of a parent is
    always smaller than the indices of its children.
    """

    units: UnitSystem
    gravity: np.ndarray
    joints: List[JointBody]
    parents: List[int]
    children: List[List[int]]

    @property
    def dof(self) -> int:
        return len(self.joints)

    @staticmethod
    def from_world(world) -> "Simulation":
        """
        Args:
            world (World): the world to flatten. All its joints are converted to the world units.

        Returns:
            Simulation: the flattened topology
        """
        joints = world.get_all_joints(world.units)
        index = {body.idx: i for i, body in enumerate(joints)}
        parents = [-1 if body.is_root else index[body.parent_idx] for body in joints]
        children = [[index[c] for c in body.child_indices] for body in joints]

        table = PrettyTable(["Idx", "Joint name", "Parent", "Children"])
        table.title = "Simulation topology"
        for i, body in enumerate(joints):
            table.add_row([i, body.name, parents[i], children[i]])
        logging.debug(table)

        return Simulation(
            units=world.units,
            gravity=np.array(world.gravity, dtype=float),
            joints=joints,
            parents=parents,
            children=children,
        )

    def initial_state(self, t: float = 0.0) -> "State":
        """
        Args:
            t (float, optional): the initial time. Defaults to 0.

        Returns:
            State: the state at the initial conditions of the joints, with the motor forces
        """
        q = np.array([body.initial_conditions[0] for body in self.joints], dtype=float)
        qp = np.array([body.initial_conditions[1] for body in self.joints], dtype=float)
        state = State(self, t, q, qp, np.zeros(self.dof))
        state.update_forces()
        return state


@dataclasses.dataclass
class State:
    """The joint space state of a simulation"""

    simulation: Simulation
    t: float
    q: np.ndarray
    qp: np.ndarray
    tau: np.ndarray

    def __post_init__(self):
        n = self.simulation.dof
        for name in ("q", "qp", "tau"):
            value = np.asarray(getattr(self, name), dtype=float).reshape(-1)
            if value.shape != (n,):
                raise ValueError(f"{name} must have {n} elements, got {value.shape[0]}")
            setattr(self, name, value)

    def update_forces(self) -> np.ndarray:
        """evaluates the motor of every joint

        Returns:
            np.ndarray: the generalized forces
        """
        for i, body in enumerate(self.simulation.joints):
            self.tau[i] = body.motor(self.t, self.q[i], self.qp[i])
        return self.tau
