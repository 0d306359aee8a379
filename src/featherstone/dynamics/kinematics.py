# Copyright (C) Istituto Italiano di Tecnologia (IIT). All rights reserved.

from typing import List

from featherstone.core.spatial_math import Matrix33, Twist3, Vector33, Wrench3
from featherstone.dynamics.simulation import State
from featherstone.model.inertial import Pose


class Kinematics:
    """Per-joint kinematic quantities, all expressed in world coordinates about the origin.

    pose: the pose of the joint (and of the body it carries)
    s: the joint axis twist
    v: the body velocity twist
    k: the velocity dependent (bias) acceleration twist of the joint
    I: the spatial inertia of the body
    p: the velocity dependent momentum wrench of the body
    w: the applied (weight) wrench on the body
    """

    def __init__(self, count: int) -> None:
        self.count = count
        self.pose: List[Pose] = [Pose.origin()] * count
        self.s: List[Vector33] = [Vector33.zero()] * count
        self.v: List[Vector33] = [Vector33.zero()] * count
        self.k: List[Vector33] = [Vector33.zero()] * count
        self.I: List[Matrix33] = [Matrix33.zero()] * count
        self.p: List[Vector33] = [Vector33.zero()] * count
        self.w: List[Vector33] = [Vector33.zero()] * count

    def calculate(self, state: State) -> "Kinematics":
        simulation = state.simulation
        if simulation.dof != self.count:
            raise ValueError(
                f"The kinematics holds {self.count} joints, the simulation has {simulation.dof}"
            )
        gravity = simulation.gravity
        for i, joint in enumerate(simulation.joints):
            parent = simulation.parents[i]
            if parent >= 0:
                top_pose = self.pose[parent]
                top_v = self.v[parent]
            else:
                top_pose = Pose.origin()
                top_v = Vector33.zero()

            pose = top_pose.compose(joint.get_local_joint_step(state.q[i]))
            s = joint.get_joint_axis(pose)
            v_joint = s * state.qp[i]
            v = top_v + v_joint

            mass_properties = joint.mass_properties
            I = mass_properties.spatial_inertia(pose)
            cg = pose.transform_point(mass_properties.cg)

            self.pose[i] = pose
            self.s[i] = s
            self.v[i] = v
            self.k[i] = Twist3.cross(v, v_joint)
            self.I[i] = I
            self.p[i] = Wrench3.cross(v, I * v)
            self.w[i] = Wrench3.at(mass_properties.mass * gravity, cg)
        return self
