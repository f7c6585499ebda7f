"""Exceptions specific to the IK solver."""

from typing import Sequence


class IKError(Exception):
    """Base class for IK solver exceptions."""


class ConfigurationError(IKError):
    """Exception raised when the solver configuration is invalid."""

    def __init__(self, message: str):
        super().__init__(message)


class InvalidSolverState(IKError):
    """Exception raised when an operation is called in the wrong lifecycle state."""

    def __init__(self, operation: str, state: str):
        super().__init__(f"Cannot call '{operation}' while the solver is {state}.")


class RegistrationError(IKError):
    """Base class for errors raised while registering tasks or weights."""


class DuplicateTaskName(RegistrationError):
    """Exception raised when a task name is already registered."""

    def __init__(self, task_name: str):
        super().__init__(f"A task named '{task_name}' is already registered.")


class UnsupportedPriority(RegistrationError):
    """Exception raised when a task priority is not supported."""

    def __init__(self, priority: object, supported: Sequence[int]):
        super().__init__(
            f"Priority {priority!r} is not supported. Supported priorities: {list(supported)}"
        )


class InequalityPriorityConflict(RegistrationError):
    """Exception raised when an inequality-only task is registered as a cost."""

    def __init__(self, task_name: str):
        super().__init__(
            f"Task '{task_name}' only supports inequality constraints and cannot be "
            "registered with priority 1."
        )


class MissingWeight(RegistrationError):
    """Exception raised when a soft task is registered without a weight."""

    def __init__(self, task_name: str):
        super().__init__(
            f"Task '{task_name}' has priority 1 and requires a weight or a weight provider."
        )


class UnknownTask(RegistrationError):
    """Exception raised when a task name is not registered."""

    def __init__(self, task_name: str, available: Sequence[str]):
        super().__init__(
            f"Task '{task_name}' is not registered. Available tasks: {list(available)}"
        )


class NotAWeightedTask(RegistrationError):
    """Exception raised when a weight is set on a hard task."""

    def __init__(self, task_name: str):
        super().__init__(
            f"Task '{task_name}' has priority 0 and is an exact constraint; it carries no weight."
        )


class InvalidWeight(RegistrationError):
    """Exception raised when a weight vector is malformed."""

    def __init__(self, message: str):
        super().__init__(message)


class FinalizationError(IKError):
    """Exception raised when the solver cannot be finalized."""

    def __init__(self, message: str):
        super().__init__(message)


class VariableDefinitionError(IKError):
    """Exception raised when a variable group is incorrectly defined."""

    def __init__(self, message: str):
        super().__init__(message)


class UnknownVariable(IKError):
    """Exception raised when a variable group is not in the handler."""

    def __init__(self, variable_name: str, available: Sequence[str]):
        super().__init__(
            f"Variable '{variable_name}' is not registered. "
            f"Available variables: {list(available)}"
        )


class TaskDefinitionError(IKError):
    """Exception raised when a task is incorrectly defined."""

    def __init__(self, message: str):
        super().__init__(message)


class EvaluationError(IKError):
    """Exception raised when a task cannot compute its linear data."""

    def __init__(self, message: str):
        super().__init__(message)


class TargetNotSet(EvaluationError):
    """Exception raised when a task target has not been set."""

    def __init__(self, task_name: str):
        super().__init__(f"Target not set for task: {task_name}")


class InvalidFrame(EvaluationError):
    """Exception raised when a frame name is not found in the robot model."""

    def __init__(self, frame_name: str, available: Sequence[str]):
        super().__init__(
            f"Frame '{frame_name}' does not exist in the model. "
            f"Available frame names: {list(available)}"
        )


class TaskEvaluationFailed(IKError):
    """Exception raised when a task fails during a control cycle."""

    def __init__(self, task_name: str, reason: str):
        super().__init__(f"Unable to evaluate task '{task_name}': {reason}")


class SolveFailed(IKError):
    """Exception raised when the QP backend fails to find a solution."""

    def __init__(self, solver_name: str, status: str = ""):
        detail = f" (status: {status})" if status else ""
        super().__init__(f"QP solver {solver_name} failed to find a solution{detail}.")
