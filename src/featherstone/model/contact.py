from typing import Union

from featherstone.core.spatial_math import Vector33, Wrench3
from featherstone.core.units import UnitSystem, UnitType
from featherstone.model.tree import JointBody


class Contact:
    """A contact normal between an action body and a reaction body, or the ground"""

    def __init__(
        self,
        action: JointBody,
        normal: Vector33,
        cor: float,
        reaction: Union[JointBody, None] = None,
    ) -> None:
        """
        Args:
            action (JointBody): the body the normal is attached to
            normal (Vector33): the contact normal, as a unit wrench in local coordinates
            cor (float): the coefficient of restitution
            reaction (JointBody, optional): the other body. None means the immovable ground.
        """
        if action is None:
            raise ValueError("The action body of a contact is required")
        self.action = action
        self.reaction = reaction
        self.units = action.units
        self._normal = normal
        self._cor = float(cor)
        self.impulse = 0.0

    @property
    def normal(self) -> Vector33:
        return self._normal

    @property
    def cor(self) -> float:
        return self._cor

    @property
    def is_with_ground(self) -> bool:
        return self.reaction is None

    def do_convert(self, target: UnitSystem) -> None:
        if self.units == target:
            return
        self._normal = Wrench3.convert(self._normal, self.units, target)
        # time is always in seconds
        self.impulse *= UnitType.FORCE.convert(self.units, target)
        self.units = target

    def __repr__(self) -> str:
        other = "ground" if self.is_with_ground else self.reaction.name
        return (
            f"Contact({self.action.name} -> {other}, normal={self._normal},"
            f" cor={self._cor}, impulse={self.impulse})"
        )
