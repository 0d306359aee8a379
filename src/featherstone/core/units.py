# Copyright (C) Istituto Italiano di Tecnologia (IIT). All rights reserved.

import enum


class UnitSystem(enum.Enum):
    """A system of units, described by its length [m] and mass [kg] scales.

    Time is always measured in seconds.
    """

    MKS = (1.0, 1.0)
    CGS = (0.01, 0.001)
    MMKS = (0.001, 1.0)
    IPS = (0.0254, 0.45359237)
    FPS = (0.3048, 0.45359237)

    @property
    def length(self) -> float:
        return self.value[0]

    @property
    def mass(self) -> float:
        return self.value[1]

    def earth_gravity(self) -> float:
        """
        Returns:
            float: the standard gravity acceleration expressed in this unit system
        """
        return STANDARD_GRAVITY * UnitType.ACCELERATION.convert(UnitSystem.MKS, self)


# [m/s^2]
STANDARD_GRAVITY = 9.80665


class UnitType(enum.Enum):
    """A physical quantity, described by its (length, mass, time) exponents"""

    NONE = (0, 0, 0)
    LENGTH = (1, 0, 0)
    MASS = (0, 1, 0)
    TIME = (0, 0, 1)
    FREQUENCY = (0, 0, -1)
    AREA = (2, 0, 0)
    VOLUME = (3, 0, 0)
    SPEED = (1, 0, -1)
    ACCELERATION = (1, 0, -2)
    FORCE = (1, 1, -2)
    TORQUE = (2, 1, -2)
    MASS_MOMENT = (1, 1, 0)
    INERTIA = (2, 1, 0)
    DENSITY = (-3, 1, 0)

    def convert(self, source: UnitSystem, target: UnitSystem) -> float:
        """
        Args:
            source (UnitSystem): the unit system a value is expressed in
            target (UnitSystem): the unit system to express the value in

        Returns:
            float: the factor that multiplies a value of this quantity in source units
                   to obtain the same value in target units
        """
        if source == target:
            return 1.0
        length_exp, mass_exp, _ = self.value
        return (source.length / target.length) ** length_exp * (
            source.mass / target.mass
        ) ** mass_exp
