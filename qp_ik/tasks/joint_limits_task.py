"""Joint position limits task."""

from typing import Any, List, Optional, Sequence

import numpy as np
import pinocchio as pin

from ..configuration import Configuration
from ..exceptions import TaskDefinitionError
from .kinematic_task import KinematicTask
from .task import TaskData, TaskType


class JointLimitsTask(KinematicTask):
    """Inequality constraint on joint positions in a robot model.

    This keeps the configuration within bounds after integration over dt:

        gain * (q_min - q) / dt <= nu <= gain * (q_max - q) / dt

    Only the degrees of freedom of joints whose configuration and tangent
    spaces coincide (revolute, prismatic) and that have finite limits are
    constrained.
    """

    supports_equality = False
    supports_inequality = True

    def __init__(
        self,
        model: pin.Model,
        dt: float,
        gain: float = 0.95,
        min_distance_from_limits: float = 0.0,
        variables: Optional[Sequence[str]] = None,
        configuration: Optional[Configuration] = None,
    ):
        """Initialize configuration limits.

        Args:
            model: Pinocchio model.
            dt: Integration timestep in [s].
            gain: Gain factor in (0, 1] that determines how fast each joint is
                allowed to move towards the joint limits at each timestep.
            min_distance_from_limits: Offset in meters (prismatic joints) or radians
                (revolute joints) to be added to the limits. Positive values decrease the
                range of motion, negative values increase it.
        """
        if not 0.0 < gain <= 1.0:
            raise TaskDefinitionError(
                f"{self.__class__.__name__} gain must be in the range (0, 1]"
            )
        if dt <= 0.0:
            raise TaskDefinitionError("Integration timestep must be > 0")

        self.gain = gain
        self.dt = dt
        self.nv = model.nv

        lower = model.lowerPositionLimit + min_distance_from_limits
        upper = model.upperPositionLimit - min_distance_from_limits

        q_index_list: List[int] = []
        v_index_list: List[int] = []
        for joint_id in range(1, model.njoints):
            joint = model.joints[joint_id]
            if joint.nq != joint.nv:
                continue
            for i in range(joint.nq):
                idx_q = joint.idx_q + i
                if np.isfinite(lower[idx_q]) and np.isfinite(upper[idx_q]):
                    q_index_list.append(idx_q)
                    v_index_list.append(joint.idx_v + i)

        if not q_index_list:
            raise TaskDefinitionError(
                f"{self.__class__.__name__} found no joint with finite limits"
            )

        self.q_indices = np.array(q_index_list)
        self.v_indices = np.array(v_index_list)
        self.lower = lower[self.q_indices]
        self.upper = upper[self.q_indices]
        self.projection_matrix = np.eye(model.nv)[self.v_indices]
        super().__init__(2 * len(self.q_indices), variables, configuration)

    def evaluate(self, state: Any = None) -> TaskData:
        configuration = self._resolve_configuration(state)
        q = configuration.q[self.q_indices]

        # Upper: nu <= gain * (q_max - q) / dt
        # Lower: -nu <= gain * (q - q_min) / dt
        A = np.vstack([self.projection_matrix, -self.projection_matrix])
        b = np.concatenate(
            [
                self.gain * (self.upper - q) / self.dt,
                self.gain * (q - self.lower) / self.dt,
            ]
        )
        return TaskData(A, b, TaskType.INEQUALITY)
