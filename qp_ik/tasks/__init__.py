"""Linear tasks for inverse kinematics."""

from .com_task import CoMTask
from .joint_limits_task import JointLimitsTask
from .joint_tracking_task import JointTrackingTask
from .joint_velocity_limits_task import JointVelocityLimitsTask
from .joint_velocity_regularization_task import JointVelocityRegularizationTask
from .kinematic_task import KinematicTask
from .se3_task import SE3Task
from .task import AffineTask, Task, TaskData, TaskType

__all__ = [
    "AffineTask",
    "CoMTask",
    "JointLimitsTask",
    "JointTrackingTask",
    "JointVelocityLimitsTask",
    "JointVelocityRegularizationTask",
    "KinematicTask",
    "SE3Task",
    "Task",
    "TaskData",
    "TaskType",
]
