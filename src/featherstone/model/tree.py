import dataclasses
from typing import Callable, Iterable, Iterator, List, TypeVar, Union

import numpy.typing as npt

from featherstone.core.constants import JointType
from featherstone.core.units import UnitSystem
from featherstone.model.inertial import MassProperties, Pose
from featherstone.model.joint import JointBodyInfo

R = TypeVar("R")


class JointBody(JointBodyInfo):
    """A node of the kinematic tree: a joint, the body it carries and its connectivity.

    The node lives in a Tree arena. It stores the index of its parent (None for a
    root) and owns the list of the indices of its children.
    """

    def __init__(
        self,
        tree: "Tree",
        idx: int,
        name: str,
        units: UnitSystem,
        type: JointType,
        local_position: Pose,
        local_axis: npt.ArrayLike,
        pitch: float = 0.0,
        mass_properties: Union[MassProperties, None] = None,
        parent_idx: Union[int, None] = None,
    ) -> None:
        super().__init__(units, type, local_position, local_axis, pitch, mass_properties)
        self.tree = tree
        self.idx = idx
        self.name = name
        self.parent_idx = parent_idx
        self.child_indices: List[int] = []

    @property
    def parent(self) -> Union["JointBody", None]:
        return None if self.parent_idx is None else self.tree[self.parent_idx]

    @property
    def children(self) -> List["JointBody"]:
        return [self.tree[idx] for idx in self.child_indices]

    @property
    def is_root(self) -> bool:
        return self.parent_idx is None

    @property
    def is_leaf(self) -> bool:
        return len(self.child_indices) == 0

    def add_screw(
        self, local_position: Pose, local_axis: npt.ArrayLike, pitch: float, name: str = None
    ) -> "JointBody":
        return self.tree.add_joint(
            self, JointType.SCREW, local_position, local_axis, pitch, name=name
        )

    def add_revolute(
        self, local_position: Pose, local_axis: npt.ArrayLike, name: str = None
    ) -> "JointBody":
        return self.tree.add_joint(
            self, JointType.REVOLUTE, local_position, local_axis, name=name
        )

    def add_prismatic(
        self, local_position: Pose, local_axis: npt.ArrayLike, name: str = None
    ) -> "JointBody":
        return self.tree.add_joint(
            self, JointType.PRISMATIC, local_position, local_axis, name=name
        )

    def attach_to(self, parent: Union["JointBody", None]) -> None:
        self.tree.attach(self, parent)

    def traverse(self, operation: Callable[["JointBody"], None]) -> None:
        """Applies operation to this node and to all its descendants, parents first"""
        for body in self.tree.walk(self.idx):
            operation(body)

    def traverse_reduce(self, initial: R, operation: Callable[[R, "JointBody"], R]) -> R:
        result = initial
        for body in self.tree.walk(self.idx):
            result = operation(result, body)
        return result

    def do_convert(self, target: UnitSystem) -> None:
        """Converts this node and every descendant to the target unit system"""
        for body in self.tree.walk(self.idx):
            body._convert_self(target)

    def __repr__(self) -> str:
        info = super().__repr__()
        return (
            f"{self.name}: {info} #parents={0 if self.is_root else 1},"
            f" #children={len(self.child_indices)}"
        )


@dataclasses.dataclass
class Tree(Iterable):
    """The arena of the joint bodies: a forest with ordered roots"""

    nodes: List[JointBody] = dataclasses.field(default_factory=list)
    roots: List[int] = dataclasses.field(default_factory=list)

    def new_joint(
        self,
        units: UnitSystem,
        type: JointType,
        local_position: Pose,
        local_axis: npt.ArrayLike,
        pitch: float = 0.0,
        mass_properties: Union[MassProperties, None] = None,
        name: str = None,
    ) -> JointBody:
        """creates a root joint

        Returns:
            JointBody: the new root
        """
        body = self._build(units, type, local_position, local_axis, pitch, mass_properties, name)
        self.roots.append(body.idx)
        return body

    def add_joint(
        self,
        parent: JointBody,
        type: JointType,
        local_position: Pose,
        local_axis: npt.ArrayLike,
        pitch: float = 0.0,
        mass_properties: Union[MassProperties, None] = None,
        name: str = None,
    ) -> JointBody:
        """creates a joint attached to parent, in the parent unit system

        Returns:
            JointBody: the new child
        """
        if parent is None:
            raise ValueError("The parent joint is required")
        if parent.tree is not self:
            raise ValueError(f"{parent.name} does not belong to this tree")
        body = self._build(
            parent.units, type, local_position, local_axis, pitch, mass_properties, name
        )
        body.parent_idx = parent.idx
        parent.child_indices.append(body.idx)
        return body

    def _build(self, units, type, local_position, local_axis, pitch, mass_properties, name):
        idx = len(self.nodes)
        body = JointBody(
            self,
            idx,
            f"joint{idx}" if name is None else name,
            units,
            type,
            local_position,
            local_axis,
            pitch,
            mass_properties,
        )
        self.nodes.append(body)
        return body

    def attach(self, body: JointBody, parent: Union[JointBody, None]) -> None:
        """moves body (and its subtree) under parent. A None parent makes body a root.
        The moved subtree is converted to the units of its new parent.

        Args:
            body (JointBody): the node to move
            parent (Union[JointBody, None]): the new parent
        """
        if parent is not None:
            if parent.tree is not self:
                raise ValueError(f"{parent.name} does not belong to this tree")
            if any(node is parent for node in self.walk(body.idx)):
                raise ValueError(
                    f"Cannot attach {body.name} to {parent.name}: it is one of its descendants"
                )
        if body.parent_idx is None:
            self.roots.remove(body.idx)
        else:
            self.nodes[body.parent_idx].child_indices.remove(body.idx)
        if parent is None:
            body.parent_idx = None
            self.roots.append(body.idx)
        else:
            body.parent_idx = parent.idx
            parent.child_indices.append(body.idx)
            # a subtree always shares the units of its parent
            body.do_convert(parent.units)

    def walk(self, start: int) -> Iterator[JointBody]:
        """pre-order walk of the subtree at start (node before its children)

        Args:
            start (int): the index of the subtree root

        Yields:
            Iterator[JointBody]: the nodes of the subtree
        """
        stack = [start]
        while stack:
            node = self.nodes[stack.pop()]
            yield node
            stack.extend(reversed(node.child_indices))

    def get_ordered_nodes_list(self) -> List[int]:
        """
        Returns:
            List[int]: the indices of all the nodes, root by root, in pre-order
        """
        return [node.idx for node in self]

    def get_idx_from_name(self, name: str) -> int:
        return self.get_node_from_name(name).idx

    def get_node_from_name(self, name: str) -> JointBody:
        for node in self.nodes:
            if node.name == name:
                return node
        raise ValueError(f"{name} is not in the tree")

    def print(self, root: int):
        """prints the tree

        Args:
            root (int): the index of the root of the printed subtree
        """
        import pptree

        pptree.print_tree(self.nodes[root], childattr="children", nameattr="name")

    def __iter__(self) -> Iterator[JointBody]:
        for root in self.roots:
            yield from self.walk(root)

    def __getitem__(self, key: int) -> JointBody:
        return self.nodes[key]

    def __len__(self) -> int:
        return len(self.nodes)
