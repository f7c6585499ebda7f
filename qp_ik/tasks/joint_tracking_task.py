"""Joint tracking (posture) task implementation."""

from typing import Any, Optional, Sequence

import numpy as np
import numpy.typing as npt
import pinocchio as pin

from ..configuration import Configuration
from ..exceptions import TargetNotSet, TaskDefinitionError
from .kinematic_task import KinematicTask, as_gain
from .task import TaskData, TaskType


class JointTrackingTask(KinematicTask):
    """Regulate joint positions towards a target posture.

    Often registered with priority 1 and a small weight, this task acts like a
    regularizer, biasing the solution toward a specific configuration:

        nu = nu* + kp * (q* - q)

    where the difference is taken on the configuration manifold.

    Attributes:
        target_q: Target configuration q*, of shape (nq,).

    Example:
        >>> posture_task = JointTrackingTask(model, kp=2.0)
        >>> posture_task.set_set_point(pin.neutral(model))
        >>> solver.add_task(posture_task, "posture", 1, weight=[1e-3] * model.nv)
    """

    target_q: Optional[np.ndarray]

    def __init__(
        self,
        model: pin.Model,
        kp: npt.ArrayLike = 1.0,
        variables: Optional[Sequence[str]] = None,
        configuration: Optional[Configuration] = None,
    ):
        super().__init__(model.nv, variables, configuration)
        self.model = model
        self.nq = model.nq
        self.nv = model.nv
        self.kp = as_gain(kp, self.nv, "gain", self.__class__.__name__)
        self.target_q = None
        self.target_velocity = np.zeros(self.nv)

    def set_set_point(
        self,
        target_q: npt.ArrayLike,
        target_velocity: Optional[npt.ArrayLike] = None,
    ) -> None:
        """Set the target posture.

        Args:
            target_q: Desired configuration of shape (nq,).
            target_velocity: Feedforward velocity of shape (nv,).
        """
        target_q = np.atleast_1d(np.asarray(target_q, dtype=float))
        if target_q.ndim != 1 or target_q.shape[0] != self.nq:
            raise TaskDefinitionError(
                f"Expected target posture to have shape ({self.nq},) but got "
                f"{target_q.shape}"
            )
        self.target_q = target_q.copy()
        if target_velocity is None:
            self.target_velocity = np.zeros(self.nv)
        else:
            target_velocity = np.atleast_1d(np.asarray(target_velocity, dtype=float))
            if target_velocity.shape != (self.nv,):
                raise TaskDefinitionError(
                    f"Expected target velocity to have shape ({self.nv},) but got "
                    f"{target_velocity.shape}"
                )
            self.target_velocity = target_velocity.copy()

    def set_set_point_from_configuration(self, configuration: Configuration) -> None:
        self.set_set_point(configuration.q)

    def compute_error(self, configuration: Configuration) -> np.ndarray:
        """Posture error q* - q of shape (nv,)."""
        if self.target_q is None:
            raise TargetNotSet(self.__class__.__name__)
        return pin.difference(configuration.model, configuration.q, self.target_q)

    def evaluate(self, state: Any = None) -> TaskData:
        configuration = self._resolve_configuration(state)
        b = self.target_velocity + self.kp * self.compute_error(configuration)
        return TaskData(np.eye(self.nv), b, TaskType.EQUALITY)
