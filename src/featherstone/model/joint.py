import math
import warnings
from typing import Tuple, Union

import numpy as np
import numpy.typing as npt

from featherstone.core.constants import JointType
from featherstone.core.spatial_math import Twist3, Vector33, vector3
from featherstone.core.units import UnitSystem, UnitType
from featherstone.model.inertial import MassProperties, Motor, Pose, rotation_about


class JointBodyInfo:
    """A one degree of freedom joint together with the body it carries"""

    def __init__(
        self,
        units: UnitSystem,
        type: JointType,
        local_position: Pose,
        local_axis: npt.ArrayLike,
        pitch: float = 0.0,
        mass_properties: Union[MassProperties, None] = None,
    ) -> None:
        self.type = self._set_type(type)
        self.units = units
        self.local_position = local_position
        self.local_axis = self._set_axis(local_axis)
        self.pitch = self._set_pitch(pitch)
        self.mass_properties = (
            MassProperties.zero(units)
            if mass_properties is None
            else mass_properties.convert(units)
        )
        self.initial_conditions: Tuple[float, float] = (0.0, 0.0)
        self.motor = Motor.const_forcing(0.0)

    @staticmethod
    def _set_type(type: JointType) -> JointType:
        try:
            return JointType(type)
        except ValueError as e:
            raise ValueError(f"Unknown joint type {type!r}") from e

    def _set_axis(self, axis: npt.ArrayLike) -> np.ndarray:
        """
        Args:
            axis (npt.ArrayLike): axis

        Returns:
            np.ndarray: the unit axis. A zero axis is kept as is.
        """
        axis = vector3(axis)
        norm = np.linalg.norm(axis)
        return axis / norm if norm > 0 else axis

    def _set_pitch(self, pitch: float) -> float:
        """
        Args:
            pitch (float): pitch

        Returns:
            float: the pitch, forced by the joint type for revolute and prismatic joints
        """
        if self.type == JointType.REVOLUTE:
            return 0.0
        if self.type == JointType.PRISMATIC:
            return math.inf
        return float(pitch)

    def set_local_axis(self, axis: npt.ArrayLike) -> None:
        self.local_axis = self._set_axis(axis)

    def add_mass_properties(self, mass_properties: MassProperties) -> None:
        self.mass_properties = self.mass_properties + mass_properties.convert(
            self.units
        )

    def sub_mass_properties(self, mass_properties: MassProperties) -> None:
        self.mass_properties = self.mass_properties - mass_properties.convert(
            self.units
        )

    def zero_mass_properties(self) -> None:
        self.mass_properties = MassProperties.zero(self.units)

    def get_joint_axis(self, pose: Pose) -> Vector33:
        """
        Args:
            pose (Pose): the current pose of the joint, in world coordinates

        Returns:
            Vector33: the joint screw axis (twist) in world coordinates
        """
        axis = pose.rotate_vector(self.local_axis)
        if self.type == JointType.SCREW:
            return Twist3.at(axis, pose.position, self.pitch)
        elif self.type == JointType.REVOLUTE:
            return Twist3.at(axis, pose.position, 0.0)
        elif self.type == JointType.PRISMATIC:
            return Twist3.pure(axis)
        raise ValueError(f"Unknown joint type {self.type!r}")

    def get_local_joint_step(self, q: float) -> Pose:
        """
        Args:
            q (float): joint value

        Returns:
            Pose: the local pose of the joint moved by q
        """
        if self.type == JointType.SCREW:
            step_pos = self.local_axis * self.pitch * q
            step_ori = rotation_about(self.local_axis, q)
            return self.local_position.translate_rotate(step_pos, step_ori)
        elif self.type == JointType.REVOLUTE:
            return self.local_position.rotate(rotation_about(self.local_axis, q))
        elif self.type == JointType.PRISMATIC:
            return self.local_position.translate(self.local_axis * q)
        raise ValueError(f"Unknown joint type {self.type!r}")

    def to_converted(self, target: UnitSystem) -> "JointBodyInfo":
        """
        Args:
            target (UnitSystem): the target unit system

        Returns:
            JointBodyInfo: a detached copy of the joint information in target units
        """
        info = JointBodyInfo(
            self.units,
            self.type,
            self.local_position,
            self.local_axis,
            self.pitch,
            self.mass_properties,
        )
        info.initial_conditions = self.initial_conditions
        info.motor = self.motor
        info._convert_self(target)
        return info

    def _convert_self(self, target: UnitSystem) -> None:
        if self.units == target:
            return
        if not self.motor.trivial:
            warnings.warn(
                f"The motor {self.motor.description} is not rescaled when converting"
                f" from {self.units.name} to {target.name}"
            )
        f_len = UnitType.LENGTH.convert(self.units, target)
        # infinite pitch is the prismatic sentinel
        if math.isfinite(self.pitch):
            self.pitch *= f_len
        self.local_position = self.local_position.convert(self.units, target)
        self.mass_properties = self.mass_properties.convert(target)
        self.units = target

    def do_convert(self, target: UnitSystem) -> None:
        self._convert_self(target)

    def __repr__(self) -> str:
        if self.type == JointType.SCREW:
            return (
                f"Screw(Units={self.units.name}, LocalPosition={self.local_position},"
                f" LocalAxis={self.local_axis.tolist()}, Pitch={self.pitch})"
            )
        return (
            f"{self.type.value.capitalize()}(Units={self.units.name},"
            f" LocalPosition={self.local_position}, LocalAxis={self.local_axis.tolist()})"
        )
