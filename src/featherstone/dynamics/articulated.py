# Copyright (C) Istituto Italiano di Tecnologia (IIT). All rights reserved.

import logging
from typing import Sequence

import numpy as np
import numpy.typing as npt

from featherstone.core.errors import DegenerateJointError
from featherstone.core.spatial_math import DEGENERACY_TOLERANCE, Matrix33, Twist3, Vector33
from featherstone.dynamics.kinematics import Kinematics
from featherstone.dynamics.simulation import State


def _transmission_denominator(
    s: Vector33, Ls: Vector33, joint_idx: int, stage: str
) -> float:
    """
    Args:
        s (Vector33): the joint axis
        Ls (Vector33): an inertia-like operator applied to the joint axis

    Raises:
        DegenerateJointError: when s.Ls is zero or not finite

    Returns:
        float: s.Ls
    """
    den = s.dot(Ls)
    if not np.isfinite(den) or abs(den) <= DEGENERACY_TOLERANCE * _transmission_scale(s, Ls):
        raise DegenerateJointError(joint_idx, den, stage)
    return den


def _transmission_scale(s: Vector33, Ls: Vector33) -> float:
    """magnitude of s and Ls taken about a point of the joint axis, so that it does
    not depend on where the world origin is"""
    if Twist3.is_pure(s):
        # only the line vector of Ls contributes to s.Ls
        return float(np.linalg.norm(s.linear) * np.linalg.norm(Ls.linear))
    r = Twist3.position(s)
    s_r = Vector33(s.linear + np.cross(s.angular, r), s.angular)
    Ls_r = Vector33(Ls.linear, Ls.angular - np.cross(r, Ls.linear))
    return float(np.sqrt(s_r.dot(s_r) * Ls_r.dot(Ls_r)))


class Articulated:
    """Articulated-body propagation over a tree of one degree of freedom joints.

    The working arrays are sized once and fully overwritten by every successful call:

    I_A: the articulated spatial inertia of the subtree of each joint
    p_A: the articulated bias force of the subtree of each joint
    L_A: the inverse apparent inertia accumulated from the root down to each joint
    b_A: the bias acceleration of each joint
    """

    def __init__(self, count: int) -> None:
        """
        Args:
            count (int): the number of joints
        """
        self.count = count
        self.I_A = [Matrix33.zero()] * count
        self.p_A = [Vector33.zero()] * count
        self.L_A = [Matrix33.zero()] * count
        self.b_A = [Vector33.zero()] * count

    def calculate(self, state: State, kinematics: Kinematics) -> "Articulated":
        """
        Args:
            state (State): the state, for the topology and the generalized forces
            kinematics (Kinematics): the kinematic quantities of the state

        Returns:
            Articulated: self, with the working arrays filled
        """
        simulation = state.simulation
        return self.propagate(
            simulation.parents,
            simulation.children,
            kinematics.I,
            kinematics.p,
            kinematics.w,
            kinematics.s,
            kinematics.k,
            state.tau,
        )

    def propagate(
        self,
        parents: Sequence[int],
        children: Sequence[Sequence[int]],
        I: Sequence[Matrix33],
        p: Sequence[Vector33],
        w: Sequence[Vector33],
        s: Sequence[Vector33],
        k: Sequence[Vector33],
        tau: npt.ArrayLike,
    ) -> "Articulated":
        """Backward pass (leaves to root) for I_A, p_A then forward pass (root to leaves)
        for L_A, b_A.

        Args:
            parents (Sequence[int]): the parent of each joint, -1 (or None) for roots.
                                     A parent index is smaller than its child's.
            children (Sequence[Sequence[int]]): the children of each joint, all with
                                                larger indices than their parent
            I (Sequence[Matrix33]): the spatial inertia of each body
            p (Sequence[Vector33]): the velocity dependent momentum wrench of each body
            w (Sequence[Vector33]): the applied wrench on each body
            s (Sequence[Vector33]): the joint axis of each joint
            k (Sequence[Vector33]): the bias acceleration of each joint
            tau (npt.ArrayLike): the generalized force of each joint

        Raises:
            ValueError: for inputs of the wrong size or not topologically ordered
            DegenerateJointError: for a zero s.(op).s denominator
            SingularMatrixError: for a non invertible inertia or apparent inertia

        Returns:
            Articulated: self, with the working arrays filled
        """
        n = self.count
        tau = np.asarray(tau, dtype=float).reshape(-1)
        self._check_inputs(parents, children, I, p, w, s, k, tau)

        I_A = [None] * n
        p_A = [None] * n
        L_A = [None] * n
        b_A = [None] * n

        for i in reversed(range(n)):
            I_Ai = I[i]
            p_Ai = p[i] - w[i]
            for c in children[i]:
                A_c = I_A[c]
                s_c = s[c]
                L_c = A_c * s_c
                T_c = L_c / _transmission_denominator(s_c, L_c, c, "backward")
                RU_c = 1 - T_c.outer(s_c)
                I_Ai = I_Ai + RU_c * A_c
                p_Ai = p_Ai + T_c * float(tau[c]) + RU_c * (A_c * k[c] + p_A[c])
            I_A[i] = I_Ai
            p_A[i] = p_Ai

        for i in range(n):
            parent = parents[i]
            s_i = s[i]
            I_i = I[i]
            I_inv = I_i.inverse()
            if parent is not None and parent >= 0:
                L_p = L_A[parent]
                b_p = b_A[parent]
                Phi_inv = (1 + I_i * L_p).inverse()
            else:
                L_p = Matrix33.zero()
                b_p = Vector33.zero()
                Phi_inv = Matrix33.identity()

            PhiIs = Phi_inv * (I_i * s_i)
            den = _transmission_denominator(s_i, PhiIs, i, "forward")
            T_i = PhiIs / den
            sT = s_i.outer(T_i)
            L_A[i] = Phi_inv * (sT * I_inv + L_p)
            b_A[i] = (
                Phi_inv * (s_i * (float(tau[i]) / den) + (1 - sT) * (b_p + k[i]))
                - L_A[i] * p_A[i]
            )

        # committed only once both passes succeeded
        self.I_A[:] = I_A
        self.p_A[:] = p_A
        self.L_A[:] = L_A
        self.b_A[:] = b_A
        logging.debug(f"Articulated inertia propagated over {n} joints")
        return self

    def _check_inputs(self, parents, children, I, p, w, s, k, tau) -> None:
        n = self.count
        for name, values in (
            ("parents", parents),
            ("children", children),
            ("I", I),
            ("p", p),
            ("w", w),
            ("s", s),
            ("k", k),
            ("tau", tau),
        ):
            if len(values) != n:
                raise ValueError(f"{name} has {len(values)} elements, expected {n}")
        for i in range(n):
            parent = parents[i]
            if parent is not None and parent >= i:
                raise ValueError(
                    f"The parent {parent} of joint {i} must have a smaller index"
                )
            for c in children[i]:
                if not i < c < n:
                    raise ValueError(
                        f"The child {c} of joint {i} must have an index in ({i}, {n})"
                    )
