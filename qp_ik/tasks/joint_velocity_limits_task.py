"""Joint velocity limits task."""

from typing import Any, List, Mapping, Optional, Sequence

import numpy as np
import numpy.typing as npt
import pinocchio as pin

from ..exceptions import TaskDefinitionError
from .task import Task, TaskData, TaskType


class JointVelocityLimitsTask(Task):
    """Inequality constraint on joint velocities in a robot model.

    The limits are -v_max <= nu_i <= v_max for every limited degree of
    freedom. The task is inequality-only, hence it can only be registered
    with priority 0.

    Attributes:
        indices: Tangent indices corresponding to velocity-limited joints.
        limit: Maximum allowed velocity magnitude for velocity-limited joints.
        projection_matrix: Projection from tangent space to subspace with
            velocity-limited joints.
    """

    supports_equality = False
    supports_inequality = True

    indices: np.ndarray
    limit: np.ndarray
    projection_matrix: np.ndarray

    def __init__(
        self,
        model: pin.Model,
        velocities: Mapping[str, npt.ArrayLike],
        variables: Optional[Sequence[str]] = None,
    ):
        """Initialize velocity limits.

        Args:
            model: Pinocchio model.
            velocities: Dictionary mapping joint name to maximum allowed magnitude in
                [m]/[s] for prismatic joints and [rad]/[s] for revolute joints.
            variables: Variable groups spanned by the task.
        """
        limit_list: List[float] = []
        index_list: List[int] = []

        for joint_name, max_vel in velocities.items():
            if not model.existJointName(joint_name):
                raise TaskDefinitionError(
                    f"Joint '{joint_name}' not found in model. "
                    f"Available joints: {list(model.names)}"
                )

            joint_id = model.getJointId(joint_name)
            if joint_id == 0:
                raise TaskDefinitionError("Cannot set limits for universe joint")

            idx_v = model.joints[joint_id].idx_v
            nv_joint = model.joints[joint_id].nv

            max_vel = np.atleast_1d(np.asarray(max_vel, dtype=float))
            if max_vel.shape[0] == 1:
                max_vel = np.full(nv_joint, max_vel[0])
            elif max_vel.shape[0] != nv_joint:
                raise TaskDefinitionError(
                    f"Joint '{joint_name}' has {nv_joint} DOFs but velocity limit has "
                    f"shape {max_vel.shape}"
                )
            if np.any(max_vel < 0.0):
                raise TaskDefinitionError(f"Velocity limit of '{joint_name}' should be >= 0")

            for i in range(nv_joint):
                index_list.append(idx_v + i)
                limit_list.append(max_vel[i])

        if not index_list:
            raise TaskDefinitionError(
                f"{self.__class__.__name__} needs at least one velocity-limited joint"
            )

        self.indices = np.array(index_list)
        self.limit = np.array(limit_list)
        self.projection_matrix = np.eye(model.nv)[self.indices]
        super().__init__(2 * len(self.indices), variables)

    def evaluate(self, state: Any = None) -> TaskData:
        del state  # Constant limits
        A = np.vstack([self.projection_matrix, -self.projection_matrix])
        b = np.concatenate([self.limit, self.limit])
        return TaskData(A, b, TaskType.INEQUALITY)
