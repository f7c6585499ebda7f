"""Joint velocity regularization task implementation."""

from typing import Any, Optional, Sequence

import numpy as np
import pinocchio as pin

from .joint_tracking_task import JointTrackingTask
from .task import TaskData, TaskType


class JointVelocityRegularizationTask(JointTrackingTask):
    """L2-regularization on the robot velocity (a.k.a. velocity damping).

    The task asks for nu = 0. Registered with priority 1, it contributes

        (1/2) * nu^T * W * nu

    to the cost, favoring minimum-norm velocities in redundant or
    near-singular situations. With no other active tasks, the robot remains
    at rest.

    Example:
        >>> damping = JointVelocityRegularizationTask(model)
        >>> solver.add_task(damping, "regularization", 1, weight=[1e-4] * model.nv)
    """

    def __init__(self, model: pin.Model, variables: Optional[Sequence[str]] = None):
        super().__init__(model, kp=0.0, variables=variables)

    def evaluate(self, state: Any = None) -> TaskData:
        del state  # Does not depend on the configuration
        return TaskData(np.eye(self.nv), np.zeros(self.nv), TaskType.EQUALITY)
