import dataclasses
import logging

import numpy as np
import pytest

from featherstone import (
    Articulated,
    Kinematics,
    MassProperties,
    Motor,
    Pose,
    Simulation,
    State,
    UnitSystem,
    World,
)


@dataclasses.dataclass
class Solved:
    world: World
    simulation: Simulation
    state: State
    kinematics: Kinematics
    articulated: Articulated


def solve(world: World) -> Solved:
    """flattens the world and runs kinematics and articulated propagation at the
    initial conditions"""
    simulation = world.to_simulation()
    state = simulation.initial_state()
    kinematics = Kinematics(simulation.dof).calculate(state)
    articulated = Articulated(simulation.dof).calculate(state, kinematics)
    return Solved(world, simulation, state, kinematics, articulated)


def two_link_world() -> World:
    world = World(UnitSystem.MKS)
    mass = MassProperties.sphere(UnitSystem.MKS, 1.0, 0.1, cg=[1.0, 0.0, 0.0])
    j0 = world.new_revolute(Pose.origin(), [0, 0, 1])
    j0.add_mass_properties(mass)
    j1 = j0.add_revolute(Pose.translation(1.0, 0, 0), [0, 0, 1])
    j1.add_mass_properties(mass)

    j0.initial_conditions = (0.3, 0.7)
    j1.initial_conditions = (-0.4, 1.1)
    j0.motor = Motor.const_forcing(2.0)
    j1.motor = Motor.spring(5.0) + Motor.damper(0.5)
    return world


def branched_world() -> World:
    """a root with three children of different kinds, all moving"""
    world = World(UnitSystem.MKS)
    root = world.new_revolute(Pose.origin(), [0, 0, 1], name="root")
    root.add_mass_properties(MassProperties.box(UnitSystem.MKS, 2.0, 0.4, 0.2, 0.2, cg=[0.2, 0, 0]))
    a = root.add_revolute(Pose.translation(0.5, 0, 0), [0, 0, 1], name="a")
    a.add_mass_properties(MassProperties.sphere(UnitSystem.MKS, 0.8, 0.1, cg=[0.3, 0, 0]))
    b = root.add_revolute(Pose.build([0, 0.4, 0.1], [0.1, 0.2, 0.3]), [1, 0, 0], name="b")
    b.add_mass_properties(MassProperties.box(UnitSystem.MKS, 1.2, 0.1, 0.3, 0.1, cg=[0, 0.15, 0]))
    c = root.add_prismatic(Pose.translation(0, 0, 0.3), [0, 1, 0], name="c")
    c.add_mass_properties(MassProperties.sphere(UnitSystem.MKS, 0.5, 0.05))

    for i, body in enumerate((root, a, b, c)):
        body.initial_conditions = (0.1 * (i + 1), 0.5 - 0.3 * i)
        body.motor = Motor.const_forcing(0.2 * i)
    return world


@pytest.fixture
def two_link() -> Solved:
    return solve(two_link_world())


@pytest.fixture
def branched() -> Solved:
    return solve(branched_world())


@pytest.fixture(scope="module", params=[UnitSystem.MKS, UnitSystem.IPS], ids=str)
def units(request) -> UnitSystem:
    logging.basicConfig(level=logging.DEBUG)
    np.random.seed(42)
    return request.param
