"""Center-of-mass task implementation."""

from typing import Any, Optional, Sequence

import numpy as np
import numpy.typing as npt

from ..configuration import Configuration
from ..exceptions import TargetNotSet, TaskDefinitionError
from .kinematic_task import KinematicTask, as_gain
from .task import TaskData, TaskType


class CoMTask(KinematicTask):
    """Regulate the center-of-mass (CoM) of a robot.

    Useful for balance control and whole-body motion:

        J_com(q) * nu = v_com* + kp * (c* - c(q))

    Example:
        >>> com_task = CoMTask(kp=5.0)
        >>> com_task.set_set_point(np.array([0.0, 0.0, 0.5]))
    """

    k: int = 3
    target_com: Optional[np.ndarray]

    def __init__(
        self,
        kp: npt.ArrayLike = 1.0,
        variables: Optional[Sequence[str]] = None,
        configuration: Optional[Configuration] = None,
    ):
        super().__init__(self.k, variables, configuration)
        self.kp = as_gain(kp, self.k, "gain", self.__class__.__name__)
        self.target_com = None
        self.target_velocity = np.zeros(self.k)

    def set_set_point(
        self,
        position: npt.ArrayLike,
        velocity: Optional[npt.ArrayLike] = None,
    ) -> None:
        position = np.atleast_1d(np.asarray(position, dtype=float))
        if position.shape != (self.k,):
            raise TaskDefinitionError(f"Expected CoM of shape ({self.k},), got {position.shape}")
        self.target_com = position.copy()
        self.target_velocity = (
            np.zeros(self.k) if velocity is None else np.asarray(velocity, dtype=float).copy()
        )

    def evaluate(self, state: Any = None) -> TaskData:
        if self.target_com is None:
            raise TargetNotSet(self.__class__.__name__)
        configuration = self._resolve_configuration(state)
        error = self.target_com - configuration.get_com_position()
        return TaskData(
            configuration.get_com_jacobian(),
            self.target_velocity + self.kp * error,
            TaskType.EQUALITY,
        )
