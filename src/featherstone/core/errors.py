# Copyright (C) Istituto Italiano di Tecnologia (IIT). All rights reserved.

import numpy as np


class SingularMatrixError(np.linalg.LinAlgError):
    """Raised when a 3x3 block or a 6x6 spatial operator cannot be inverted."""


class DegenerateJointError(np.linalg.LinAlgError):
    """Raised when the scalar s.(op).s of a joint is zero or not finite.

    This happens for a malformed joint axis (e.g. a zero vector) or for a
    spatial inertia that is not positive definite along the joint axis.
    """

    def __init__(self, joint_idx: int, denominator: float, stage: str) -> None:
        self.joint_idx = joint_idx
        self.denominator = denominator
        self.stage = stage
        super().__init__(
            f"Degenerate joint {joint_idx} in the {stage} pass: s.(op).s = {denominator}"
        )
