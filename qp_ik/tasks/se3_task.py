"""Frame pose tracking task."""

from typing import Any, Optional, Sequence

import numpy as np
import numpy.typing as npt
import pinocchio as pin

from ..configuration import Configuration
from ..exceptions import TargetNotSet, TaskDefinitionError
from .kinematic_task import KinematicTask, as_gain
from .task import TaskData, TaskType


class SE3Task(KinematicTask):
    """Track the position and orientation of a frame of interest on the robot.

    The task asks the frame velocity, in mixed representation, to be equal
    to a feedforward velocity plus a proportional correction of the pose
    error:

        J(q) * nu = v* + kp * e(q)

    where the linear part of e is the position error and the angular part is
    log(R* R^T), both expressed in the world frame.

    Attributes:
        frame_name: Name of the frame to regulate.
        transform_target_to_world: Desired pose of the frame, None until set.
        mixed_velocity: Feedforward velocity of the frame (6,).

    Example:
        >>> se3_task = SE3Task("end_effector", kp_linear=10.0, kp_angular=5.0)
        >>> se3_task.set_set_point(pin.SE3(np.eye(3), np.array([0.5, 0.2, 0.3])))
        >>> solver.add_task(se3_task, "ee", 0)
    """

    k: int = 6
    transform_target_to_world: Optional[pin.SE3]

    def __init__(
        self,
        frame_name: str,
        kp_linear: npt.ArrayLike = 1.0,
        kp_angular: npt.ArrayLike = 1.0,
        variables: Optional[Sequence[str]] = None,
        configuration: Optional[Configuration] = None,
    ):
        super().__init__(self.k, variables, configuration)
        self.frame_name = frame_name
        self.kp_linear = as_gain(kp_linear, 3, "linear gain", self.__class__.__name__)
        self.kp_angular = as_gain(kp_angular, 3, "angular gain", self.__class__.__name__)
        self.transform_target_to_world = None
        self.mixed_velocity = np.zeros(self.k)

    def set_set_point(
        self,
        transform_target_to_world: pin.SE3,
        mixed_velocity: Optional[npt.ArrayLike] = None,
    ) -> None:
        """Set the desired pose and, optionally, the feedforward velocity.

        Args:
            transform_target_to_world: Desired pose of the frame in the world.
            mixed_velocity: Desired frame velocity [linear; angular], in mixed
                representation.
        """
        self.transform_target_to_world = transform_target_to_world.copy()
        if mixed_velocity is None:
            self.mixed_velocity = np.zeros(self.k)
        else:
            mixed_velocity = np.asarray(mixed_velocity, dtype=float)
            if mixed_velocity.shape != (self.k,):
                raise TaskDefinitionError(
                    f"Expected velocity of shape ({self.k},), got {mixed_velocity.shape}"
                )
            self.mixed_velocity = mixed_velocity.copy()

    def set_set_point_from_configuration(self, configuration: Configuration) -> None:
        """Hold the current pose of the frame."""
        self.set_set_point(configuration.get_transform_frame_to_world(self.frame_name))

    def compute_error(self, configuration: Configuration) -> np.ndarray:
        """Pose error [p* - p; log(R* R^T)], shape (6,)."""
        if self.transform_target_to_world is None:
            raise TargetNotSet(self.__class__.__name__)

        current = configuration.get_transform_frame_to_world(self.frame_name)
        target = self.transform_target_to_world
        position_error = target.translation - current.translation
        orientation_error = pin.log3(target.rotation @ current.rotation.T)
        return np.concatenate([position_error, orientation_error])

    def evaluate(self, state: Any = None) -> TaskData:
        configuration = self._resolve_configuration(state)
        error = self.compute_error(configuration)
        gain = np.concatenate([self.kp_linear, self.kp_angular])
        A = configuration.get_frame_jacobian(self.frame_name)
        b = self.mixed_velocity + gain * error
        return TaskData(A, b, TaskType.EQUALITY)
