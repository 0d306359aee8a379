import dataclasses
from typing import Callable, Union

import numpy as np
import numpy.typing as npt
from scipy.spatial.transform import Rotation

from featherstone.core.spatial_math import Matrix33, skew, vector3
from featherstone.core.units import UnitSystem, UnitType


@dataclasses.dataclass(frozen=True, eq=False)
class Pose:
    """Pose class: a position and an orientation (rotation matrix)"""

    position: np.ndarray
    orientation: np.ndarray

    def __post_init__(self):
        object.__setattr__(self, "position", vector3(self.position))
        orientation = np.asarray(self.orientation, dtype=float)
        if orientation.shape != (3, 3):
            raise ValueError(f"The orientation must be 3x3, got {orientation.shape}")
        object.__setattr__(self, "orientation", orientation)

    @staticmethod
    def origin() -> "Pose":
        return Pose(np.zeros(3), np.eye(3))

    @staticmethod
    def translation(x: float, y: float, z: float) -> "Pose":
        return Pose(np.array([x, y, z], dtype=float), np.eye(3))

    @staticmethod
    def about(axis: npt.ArrayLike, angle: float) -> "Pose":
        """
        Args:
            axis (npt.ArrayLike): rotation axis (unit vector)
            angle (float): rotation angle [rad]

        Returns:
            Pose: a pure rotation at the origin
        """
        return Pose(np.zeros(3), rotation_about(axis, angle))

    @staticmethod
    def build(xyz: npt.ArrayLike, rpy: npt.ArrayLike) -> "Pose":
        """
        Args:
            xyz (npt.ArrayLike): the position
            rpy (npt.ArrayLike): roll, pitch and yaw angles (R = Rz Ry Rx)

        Returns:
            Pose: the pose
        """
        R = Rotation.from_euler("xyz", vector3(rpy)).as_matrix()
        return Pose(xyz, R)

    def transform_point(self, point: npt.ArrayLike) -> np.ndarray:
        return self.position + self.orientation @ vector3(point)

    def rotate_vector(self, vector: npt.ArrayLike) -> np.ndarray:
        return self.orientation @ vector3(vector)

    def compose(self, local: "Pose") -> "Pose":
        """
        Args:
            local (Pose): a pose expressed in this pose's frame

        Returns:
            Pose: the local pose expressed in the frame this pose is expressed in
        """
        return Pose(
            self.transform_point(local.position), self.orientation @ local.orientation
        )

    def translate(self, step: npt.ArrayLike) -> "Pose":
        """Moves by a step given in local coordinates"""
        return Pose(self.transform_point(step), self.orientation)

    def rotate(self, rotation: npt.ArrayLike) -> "Pose":
        """Rotates by a rotation matrix given in local coordinates"""
        return Pose(self.position, self.orientation @ np.asarray(rotation, dtype=float))

    def translate_rotate(self, step: npt.ArrayLike, rotation: npt.ArrayLike) -> "Pose":
        return Pose(
            self.transform_point(step),
            self.orientation @ np.asarray(rotation, dtype=float),
        )

    def inverse(self) -> "Pose":
        R_T = self.orientation.T
        return Pose(-R_T @ self.position, R_T)

    def homogeneous(self) -> np.ndarray:
        """
        Returns:
            np.ndarray: the 4x4 homogeneous transform
        """
        H = np.eye(4)
        H[:3, :3] = self.orientation
        H[:3, 3] = self.position
        return H

    def convert(self, source: UnitSystem, target: UnitSystem) -> "Pose":
        return Pose(
            self.position * UnitType.LENGTH.convert(source, target), self.orientation
        )

    def allclose(self, other: "Pose", atol: float = 1e-9) -> bool:
        return bool(
            np.allclose(self.position, other.position, atol=atol)
            and np.allclose(self.orientation, other.orientation, atol=atol)
        )

    def __repr__(self) -> str:
        rpy = Rotation.from_matrix(self.orientation).as_euler("xyz")
        return f"Pose(xyz={self.position.tolist()}, rpy={rpy.tolist()})"


def rotation_about(axis: npt.ArrayLike, angle: float) -> np.ndarray:
    """
    Args:
        axis (npt.ArrayLike): unit rotation axis
        angle (float): rotation angle [rad]

    Returns:
        np.ndarray: the 3x3 rotation matrix
    """
    return Rotation.from_rotvec(vector3(axis) * angle).as_matrix()


@dataclasses.dataclass(frozen=True, eq=False)
class MassProperties:
    """Rigid body mass properties in a given unit system

    The center of gravity and the mass moment of inertia (about the center of
    gravity) are expressed in the local frame of the body.
    """

    units: UnitSystem
    mass: float
    cg: np.ndarray
    mmoi: np.ndarray

    def __post_init__(self):
        object.__setattr__(self, "mass", float(self.mass))
        object.__setattr__(self, "cg", vector3(self.cg))
        mmoi = np.asarray(self.mmoi, dtype=float)
        if mmoi.shape != (3, 3):
            raise ValueError(f"The mass moment of inertia must be 3x3, got {mmoi.shape}")
        object.__setattr__(self, "mmoi", mmoi)

    @staticmethod
    def zero(units: UnitSystem) -> "MassProperties":
        return MassProperties(units, 0.0, np.zeros(3), np.zeros((3, 3)))

    @staticmethod
    def build(
        units: UnitSystem,
        mass: float,
        cg: npt.ArrayLike,
        ixx: float,
        iyy: float,
        izz: float,
        ixy: float = 0.0,
        ixz: float = 0.0,
        iyz: float = 0.0,
    ) -> "MassProperties":
        mmoi = np.array([[ixx, ixy, ixz], [ixy, iyy, iyz], [ixz, iyz, izz]])
        return MassProperties(units, mass, cg, mmoi)

    @staticmethod
    def sphere(
        units: UnitSystem,
        mass: float,
        radius: float,
        cg: Union[npt.ArrayLike, None] = None,
    ) -> "MassProperties":
        """
        Args:
            units (UnitSystem): the unit system of mass, radius and cg
            mass (float): the mass
            radius (float): the sphere radius
            cg (npt.ArrayLike, optional): the sphere center. Defaults to the origin.

        Returns:
            MassProperties: a solid sphere
        """
        i = 2 / 5 * mass * radius**2
        return MassProperties(
            units, mass, np.zeros(3) if cg is None else cg, i * np.eye(3)
        )

    @staticmethod
    def box(
        units: UnitSystem,
        mass: float,
        x: float,
        y: float,
        z: float,
        cg: Union[npt.ArrayLike, None] = None,
    ) -> "MassProperties":
        mmoi = mass / 12 * np.diag([y**2 + z**2, x**2 + z**2, x**2 + y**2])
        return MassProperties(units, mass, np.zeros(3) if cg is None else cg, mmoi)

    def convert(self, target: UnitSystem) -> "MassProperties":
        """
        Args:
            target (UnitSystem): the new unit system

        Returns:
            MassProperties: the same mass properties expressed in target units
        """
        if target == self.units:
            return self
        return MassProperties(
            target,
            self.mass * UnitType.MASS.convert(self.units, target),
            self.cg * UnitType.LENGTH.convert(self.units, target),
            self.mmoi * UnitType.INERTIA.convert(self.units, target),
        )

    def _about_origin(self):
        """mass, first mass moment and inertia tensor about the local origin"""
        c = self.cg
        return (
            self.mass,
            self.mass * c,
            self.mmoi + self.mass * (c @ c * np.eye(3) - np.outer(c, c)),
        )

    @staticmethod
    def _from_origin(units, mass, moment, inertia) -> "MassProperties":
        cg = moment / mass if mass != 0 else np.zeros(3)
        mmoi = inertia - mass * (cg @ cg * np.eye(3) - np.outer(cg, cg))
        return MassProperties(units, mass, cg, mmoi)

    def __add__(self, other: "MassProperties") -> "MassProperties":
        if not isinstance(other, MassProperties):
            return NotImplemented
        m1, h1, I1 = self._about_origin()
        m2, h2, I2 = other.convert(self.units)._about_origin()
        return MassProperties._from_origin(self.units, m1 + m2, h1 + h2, I1 + I2)

    def __sub__(self, other: "MassProperties") -> "MassProperties":
        if not isinstance(other, MassProperties):
            return NotImplemented
        m1, h1, I1 = self._about_origin()
        m2, h2, I2 = other.convert(self.units)._about_origin()
        return MassProperties._from_origin(self.units, m1 - m2, h1 - h2, I1 - I2)

    def spatial_inertia(self, pose: Pose) -> Matrix33:
        """
        Args:
            pose (Pose): the pose of the body frame

        Returns:
            Matrix33: the spatial inertia about the origin of the frame the pose is
                      expressed in, mapping twists (v, w) to momenta (p, L)
        """
        m = self.mass
        c = pose.transform_point(self.cg)
        R = pose.orientation
        cx = skew(c)
        return Matrix33(
            m * np.eye(3),
            -m * cx,
            m * cx,
            R @ self.mmoi @ R.T - m * cx @ cx,
        )

    def allclose(self, other: "MassProperties", rtol: float = 1e-9) -> bool:
        return bool(
            self.units == other.units
            and np.isclose(self.mass, other.mass, rtol=rtol)
            and np.allclose(self.cg, other.cg, rtol=rtol, atol=1e-12)
            and np.allclose(self.mmoi, other.mmoi, rtol=rtol, atol=1e-12)
        )


@dataclasses.dataclass(frozen=True)
class Motor:
    """Actuation law of a joint: law(t, q, qp) -> generalized force"""

    law: Callable[[float, float, float], float]
    description: str = "custom"
    trivial: bool = False

    @staticmethod
    def const_forcing(value: float) -> "Motor":
        value = float(value)
        return Motor(
            lambda t, q, qp: value, f"const({value})", trivial=value == 0.0
        )

    @staticmethod
    def spring(stiffness: float, q0: float = 0.0) -> "Motor":
        return Motor(lambda t, q, qp: -stiffness * (q - q0), f"spring({stiffness}, {q0})")

    @staticmethod
    def damper(damping: float) -> "Motor":
        return Motor(lambda t, q, qp: -damping * qp, f"damper({damping})")

    def __call__(self, t: float, q: float, qp: float) -> float:
        return float(self.law(t, q, qp))

    def __add__(self, other: "Motor") -> "Motor":
        if not isinstance(other, Motor):
            return NotImplemented
        return Motor(
            lambda t, q, qp: self(t, q, qp) + other(t, q, qp),
            f"{self.description} + {other.description}",
            trivial=self.trivial and other.trivial,
        )
