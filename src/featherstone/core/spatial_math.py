# Copyright (C) Istituto Italiano di Tecnologia (IIT). All rights reserved.

"""Spatial (6D) algebra expressed with pairs of 3-vectors and 2x2 blocks of 3x3 matrices.

A spatial vector is stored as ``(linear, angular)``. The same storage is read
either as a twist (the line vector is the angular part) or as a wrench (the
line vector is the linear part). All the operations act on the blocks directly
and never build the 6-dimensional concatenation, except for ``to_array`` which
is there for inspection.
"""

import dataclasses
import numbers
from typing import Union

import numpy as np
import numpy.typing as npt

from featherstone.core.errors import SingularMatrixError
from featherstone.core.units import UnitSystem, UnitType

# relative threshold on s.(op).s below which a joint is degenerate
DEGENERACY_TOLERANCE = 1e-12
# condition number above which a 3x3 block is treated as singular
SINGULARITY_CONDITION = 1e13


def vector3(x: npt.ArrayLike) -> np.ndarray:
    """
    Args:
        x (npt.ArrayLike): anything with three components

    Returns:
        np.ndarray: a float 3-vector
    """
    v = np.asarray(x, dtype=float).reshape(-1)
    if v.shape != (3,):
        raise ValueError(f"Expected a 3-vector, got shape {np.shape(x)}")
    return v


def skew(v: npt.ArrayLike) -> np.ndarray:
    """
    Args:
        v (npt.ArrayLike): 3-vector

    Returns:
        np.ndarray: the 3x3 cross product matrix, skew(a) @ b == a x b
    """
    x, y, z = vector3(v)
    return np.array([[0.0, -z, y], [z, 0.0, -x], [-y, x, 0.0]])


def inv3(m: np.ndarray) -> np.ndarray:
    """Inverse of a 3x3 block, failing loudly when it is (nearly) singular"""
    if not np.all(np.isfinite(m)):
        raise SingularMatrixError("The 3x3 block has non finite entries")
    condition = np.linalg.cond(m)
    # written so that a nan condition number is rejected too
    if not condition < SINGULARITY_CONDITION:
        raise SingularMatrixError(
            f"The 3x3 block is singular (condition number {condition})"
        )
    return np.linalg.inv(m)


@dataclasses.dataclass(frozen=True, eq=False)
class Vector33:
    """A spatial vector as a (linear, angular) pair of 3-vectors"""

    # numpy scalars defer to the reflected operators
    __array_ufunc__ = None

    linear: np.ndarray
    angular: np.ndarray

    def __post_init__(self):
        object.__setattr__(self, "linear", vector3(self.linear))
        object.__setattr__(self, "angular", vector3(self.angular))

    @staticmethod
    def zero() -> "Vector33":
        return Vector33(np.zeros(3), np.zeros(3))

    @staticmethod
    def from_array(x: npt.ArrayLike) -> "Vector33":
        x = np.asarray(x, dtype=float).reshape(-1)
        if x.shape != (6,):
            raise ValueError(f"Expected a 6-vector, got shape {x.shape}")
        return Vector33(x[:3], x[3:])

    def to_array(self) -> np.ndarray:
        return np.concatenate([self.linear, self.angular])

    def dot(self, other: "Vector33") -> float:
        return float(self.linear @ other.linear + self.angular @ other.angular)

    def outer(self, other: "Vector33") -> "Matrix33":
        """
        Args:
            other (Vector33): the right vector

        Returns:
            Matrix33: self @ other^T
        """
        return Matrix33(
            np.outer(self.linear, other.linear),
            np.outer(self.linear, other.angular),
            np.outer(self.angular, other.linear),
            np.outer(self.angular, other.angular),
        )

    def is_zero(self, tol: float = 0.0) -> bool:
        return bool(
            np.all(np.abs(self.linear) <= tol) and np.all(np.abs(self.angular) <= tol)
        )

    def allclose(self, other: "Vector33", rtol=1e-9, atol=1e-12) -> bool:
        return bool(
            np.allclose(self.linear, other.linear, rtol=rtol, atol=atol)
            and np.allclose(self.angular, other.angular, rtol=rtol, atol=atol)
        )

    def __add__(self, other: "Vector33") -> "Vector33":
        if not isinstance(other, Vector33):
            return NotImplemented
        return Vector33(self.linear + other.linear, self.angular + other.angular)

    def __sub__(self, other: "Vector33") -> "Vector33":
        if not isinstance(other, Vector33):
            return NotImplemented
        return Vector33(self.linear - other.linear, self.angular - other.angular)

    def __neg__(self) -> "Vector33":
        return Vector33(-self.linear, -self.angular)

    def __mul__(self, factor: numbers.Real) -> "Vector33":
        if not isinstance(factor, numbers.Real):
            return NotImplemented
        return Vector33(self.linear * factor, self.angular * factor)

    __rmul__ = __mul__

    def __truediv__(self, divisor: numbers.Real) -> "Vector33":
        if not isinstance(divisor, numbers.Real):
            return NotImplemented
        return Vector33(self.linear / divisor, self.angular / divisor)

    def __repr__(self) -> str:
        return f"Vector33(linear={self.linear.tolist()}, angular={self.angular.tolist()})"


@dataclasses.dataclass(frozen=True, eq=False)
class Matrix33:
    """A 6x6 operator as 2x2 blocks of 3x3 matrices

    [a11 a12] [linear ]
    [a21 a22] [angular]
    """

    __array_ufunc__ = None

    a11: np.ndarray
    a12: np.ndarray
    a21: np.ndarray
    a22: np.ndarray

    def __post_init__(self):
        for field in ("a11", "a12", "a21", "a22"):
            block = np.asarray(getattr(self, field), dtype=float)
            if block.shape != (3, 3):
                raise ValueError(f"Block {field} must be 3x3, got {block.shape}")
            object.__setattr__(self, field, block)

    @staticmethod
    def zero() -> "Matrix33":
        z = np.zeros((3, 3))
        return Matrix33(z, z, z, z)

    @staticmethod
    def identity() -> "Matrix33":
        return Matrix33.diagonal(np.eye(3))

    @staticmethod
    def scalar(value: float) -> "Matrix33":
        return Matrix33.diagonal(value * np.eye(3))

    @staticmethod
    def diagonal(a: npt.ArrayLike, b: Union[npt.ArrayLike, None] = None) -> "Matrix33":
        """
        Args:
            a (npt.ArrayLike): the upper-left 3x3 block
            b (npt.ArrayLike, optional): the lower-right 3x3 block. Defaults to a.

        Returns:
            Matrix33: the block diagonal operator diag(a, b)
        """
        z = np.zeros((3, 3))
        return Matrix33(a, z, z, a if b is None else b)

    @staticmethod
    def from_array(x: npt.ArrayLike) -> "Matrix33":
        x = np.asarray(x, dtype=float)
        if x.shape != (6, 6):
            raise ValueError(f"Expected a 6x6 matrix, got shape {x.shape}")
        return Matrix33(x[:3, :3], x[:3, 3:], x[3:, :3], x[3:, 3:])

    def to_array(self) -> np.ndarray:
        return np.block([[self.a11, self.a12], [self.a21, self.a22]])

    @property
    def T(self) -> "Matrix33":
        return Matrix33(self.a11.T, self.a21.T, self.a12.T, self.a22.T)

    def transpose(self) -> "Matrix33":
        return self.T

    def allclose(self, other: "Matrix33", rtol=1e-9, atol=1e-12) -> bool:
        return all(
            np.allclose(getattr(self, f), getattr(other, f), rtol=rtol, atol=atol)
            for f in ("a11", "a12", "a21", "a22")
        )

    def block_mul(self, m3: npt.ArrayLike) -> "Matrix33":
        """
        Args:
            m3 (npt.ArrayLike): a 3x3 matrix

        Returns:
            Matrix33: diag(m3, m3) @ self
        """
        m3 = np.asarray(m3, dtype=float)
        return Matrix33(m3 @ self.a11, m3 @ self.a12, m3 @ self.a21, m3 @ self.a22)

    def inverse(self) -> "Matrix33":
        """Block inverse using the Schur complement of the first 3x3 block that is
        a usable pivot: a11, a22, then the off-diagonal a21 and a12 (eliminating
        on the operator with swapped block rows). When no block pivots, the
        inverse is computed on the full 6x6 operator.

        Raises:
            SingularMatrixError: when the 6x6 operator itself is singular

        Returns:
            Matrix33: the inverse operator
        """
        a11, a12, a21, a22 = self.a11, self.a12, self.a21, self.a22
        # (blocks handed to the elimination, order of its result in the inverse)
        pivots = (
            ((a11, a12, a21, a22), (0, 1, 2, 3)),
            ((a22, a21, a12, a11), (3, 2, 1, 0)),
            ((a21, a22, a11, a12), (1, 0, 3, 2)),
            ((a12, a11, a22, a21), (2, 3, 0, 1)),
        )
        for blocks, order in pivots:
            try:
                result = _schur_inverse(*blocks)
            except SingularMatrixError:
                continue
            return Matrix33(*(result[j] for j in order))

        full = self.to_array()
        condition = np.linalg.cond(full)
        if not condition < SINGULARITY_CONDITION:
            raise SingularMatrixError(
                f"The 6x6 operator is singular (condition number {condition})"
            )
        return Matrix33.from_array(np.linalg.inv(full))

    def solve(self, rhs: Vector33) -> Vector33:
        return self.inverse() * rhs

    def __add__(self, other) -> "Matrix33":
        if isinstance(other, numbers.Real):
            other = Matrix33.scalar(other)
        if not isinstance(other, Matrix33):
            return NotImplemented
        return Matrix33(
            self.a11 + other.a11,
            self.a12 + other.a12,
            self.a21 + other.a21,
            self.a22 + other.a22,
        )

    __radd__ = __add__

    def __sub__(self, other) -> "Matrix33":
        if isinstance(other, numbers.Real):
            other = Matrix33.scalar(other)
        if not isinstance(other, Matrix33):
            return NotImplemented
        return Matrix33(
            self.a11 - other.a11,
            self.a12 - other.a12,
            self.a21 - other.a21,
            self.a22 - other.a22,
        )

    def __rsub__(self, other) -> "Matrix33":
        if not isinstance(other, numbers.Real):
            return NotImplemented
        return Matrix33.scalar(other) - self

    def __neg__(self) -> "Matrix33":
        return Matrix33(-self.a11, -self.a12, -self.a21, -self.a22)

    def __mul__(self, other):
        if isinstance(other, numbers.Real):
            return Matrix33(
                self.a11 * other, self.a12 * other, self.a21 * other, self.a22 * other
            )
        if isinstance(other, Vector33):
            return Vector33(
                self.a11 @ other.linear + self.a12 @ other.angular,
                self.a21 @ other.linear + self.a22 @ other.angular,
            )
        if isinstance(other, Matrix33):
            return Matrix33(
                self.a11 @ other.a11 + self.a12 @ other.a21,
                self.a11 @ other.a12 + self.a12 @ other.a22,
                self.a21 @ other.a11 + self.a22 @ other.a21,
                self.a21 @ other.a12 + self.a22 @ other.a22,
            )
        return NotImplemented

    def __rmul__(self, other):
        if isinstance(other, numbers.Real):
            return self * other
        return NotImplemented

    def __truediv__(self, divisor: numbers.Real) -> "Matrix33":
        if not isinstance(divisor, numbers.Real):
            return NotImplemented
        return self * (1.0 / divisor)

    def __repr__(self) -> str:
        return f"Matrix33({self.to_array().tolist()})"


def _schur_inverse(a, b, c, d):
    """Inverse blocks of [a b; c d] eliminating with the pivot a"""
    a_inv = inv3(a)
    s_inv = inv3(d - c @ a_inv @ b)
    a_inv_b = a_inv @ b
    c_a_inv = c @ a_inv
    return (
        a_inv + a_inv_b @ s_inv @ c_a_inv,
        -a_inv_b @ s_inv,
        -s_inv @ c_a_inv,
        s_inv,
    )


class Twist3:
    """Twist reading of a Vector33: the angular part is the line vector,
    the linear part is the moment about the origin."""

    @staticmethod
    def at(value: npt.ArrayLike, position: npt.ArrayLike, pitch: float = 0.0) -> Vector33:
        """
        Args:
            value (npt.ArrayLike): the rotation axis (or angular velocity)
            position (npt.ArrayLike): a point on the axis
            pitch (float, optional): translation per unit rotation. Defaults to 0.

        Returns:
            Vector33: the twist (value*pitch + position x value, value)
        """
        value = vector3(value)
        return Vector33(value * pitch + np.cross(vector3(position), value), value)

    @staticmethod
    def pure(value: npt.ArrayLike) -> Vector33:
        return Vector33(vector3(value), np.zeros(3))

    @staticmethod
    def is_pure(twist: Vector33) -> bool:
        return bool(np.all(twist.angular == 0))

    @staticmethod
    def cross_op(twist: Vector33) -> Matrix33:
        wx = skew(twist.angular)
        return Matrix33(wx, skew(twist.linear), np.zeros((3, 3)), wx)

    @staticmethod
    def cross(this: Vector33, twist: Vector33) -> Vector33:
        """Motion cross product ``this x twist``"""
        return Vector33(
            np.cross(this.angular, twist.linear) + np.cross(this.linear, twist.angular),
            np.cross(this.angular, twist.angular),
        )

    @staticmethod
    def line_vector(twist: Vector33) -> np.ndarray:
        return twist.angular

    @staticmethod
    def moment_vector(twist: Vector33) -> np.ndarray:
        return twist.linear

    @staticmethod
    def magnitude(twist: Vector33) -> float:
        return float(np.linalg.norm(twist.angular))

    @staticmethod
    def direction(twist: Vector33) -> np.ndarray:
        return twist.angular / np.linalg.norm(twist.angular)

    @staticmethod
    def pitch(twist: Vector33) -> float:
        # h = (w . v) / |w|^2
        return float(twist.angular @ twist.linear / (twist.angular @ twist.angular))

    @staticmethod
    def position(twist: Vector33) -> np.ndarray:
        # r = (w x v) / |w|^2
        return np.cross(twist.angular, twist.linear) / (twist.angular @ twist.angular)

    @staticmethod
    def convert(
        twist: Vector33,
        source: UnitSystem,
        target: UnitSystem,
        quantity: UnitType = UnitType.NONE,
    ) -> Vector33:
        f_len = UnitType.LENGTH.convert(source, target)
        f_qty = quantity.convert(source, target)
        return Vector33(twist.linear * f_len * f_qty, twist.angular * f_qty)


class Wrench3:
    """Wrench reading of a Vector33: the linear part is the line vector,
    the angular part is the moment about the origin."""

    @staticmethod
    def at(value: npt.ArrayLike, position: npt.ArrayLike, pitch: float = 0.0) -> Vector33:
        """
        Args:
            value (npt.ArrayLike): the force (or line direction)
            position (npt.ArrayLike): a point on the line of action
            pitch (float, optional): moment per unit force. Defaults to 0.

        Returns:
            Vector33: the wrench (value, value*pitch + position x value)
        """
        value = vector3(value)
        return Vector33(value, value * pitch + np.cross(vector3(position), value))

    @staticmethod
    def pure(value: npt.ArrayLike) -> Vector33:
        return Vector33(np.zeros(3), vector3(value))

    @staticmethod
    def is_pure(wrench: Vector33) -> bool:
        return bool(np.all(wrench.linear == 0))

    @staticmethod
    def cross_op(wrench: Vector33) -> Matrix33:
        wx = skew(wrench.angular)
        return Matrix33(wx, np.zeros((3, 3)), skew(wrench.linear), wx)

    @staticmethod
    def cross(this: Vector33, wrench: Vector33) -> Vector33:
        """Force cross product of the twist ``this`` with ``wrench``"""
        return Vector33(
            np.cross(this.angular, wrench.linear),
            np.cross(this.linear, wrench.linear) + np.cross(this.angular, wrench.angular),
        )

    @staticmethod
    def line_vector(wrench: Vector33) -> np.ndarray:
        return wrench.linear

    @staticmethod
    def moment_vector(wrench: Vector33) -> np.ndarray:
        return wrench.angular

    @staticmethod
    def magnitude(wrench: Vector33) -> float:
        return float(np.linalg.norm(wrench.linear))

    @staticmethod
    def direction(wrench: Vector33) -> np.ndarray:
        return wrench.linear / np.linalg.norm(wrench.linear)

    @staticmethod
    def pitch(wrench: Vector33) -> float:
        # h = (F . tau) / |F|^2
        return float(wrench.linear @ wrench.angular / (wrench.linear @ wrench.linear))

    @staticmethod
    def position(wrench: Vector33) -> np.ndarray:
        # r = (F x tau) / |F|^2
        return np.cross(wrench.linear, wrench.angular) / (wrench.linear @ wrench.linear)

    @staticmethod
    def convert(
        wrench: Vector33,
        source: UnitSystem,
        target: UnitSystem,
        quantity: UnitType = UnitType.NONE,
    ) -> Vector33:
        f_len = UnitType.LENGTH.convert(source, target)
        f_qty = quantity.convert(source, target)
        return Vector33(wrench.linear * f_qty, wrench.angular * f_len * f_qty)
