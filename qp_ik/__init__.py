"""Task-priority differential inverse kinematics.

Hard tasks are enforced as constraints and soft tasks are combined in a
weighted least-squares cost; the resulting quadratic program is solved once
per control cycle. Uses Pinocchio for kinematics and OSQP (through
qpsolvers) for quadratic programming.
"""

from .config import SolverConfig
from .configuration import Configuration
from .constants import (
    DEFAULT_QP_SOLVER,
    DEFAULT_TOLERANCE,
    DEFAULT_VERBOSITY,
    HARD_PRIORITY,
    QP_EPS_ABS,
    QP_EPS_REL,
    SOFT_PRIORITY,
    SUPPORTED_PRIORITIES,
)
from .exceptions import (
    ConfigurationError,
    DuplicateTaskName,
    EvaluationError,
    FinalizationError,
    IKError,
    InequalityPriorityConflict,
    InvalidFrame,
    InvalidSolverState,
    InvalidWeight,
    MissingWeight,
    NotAWeightedTask,
    RegistrationError,
    SolveFailed,
    TargetNotSet,
    TaskDefinitionError,
    TaskEvaluationFailed,
    UnknownTask,
    UnknownVariable,
    UnsupportedPriority,
    VariableDefinitionError,
)
from .linear_task_solver import LinearTaskSolver
from .qp import QPBackend, QPProblem, QPSolution, QpsolversBackend
from .qp_inverse_kinematics import QPInverseKinematics, SolverStatus
from .state import IKState
from .tasks import (
    AffineTask,
    CoMTask,
    JointLimitsTask,
    JointTrackingTask,
    JointVelocityLimitsTask,
    JointVelocityRegularizationTask,
    KinematicTask,
    SE3Task,
    Task,
    TaskData,
    TaskType,
)
from .variables import VariableRange, VariablesHandler
from .weights import (
    ConstantWeightProvider,
    FunctionWeightProvider,
    SettableWeightProvider,
    WeightProvider,
)

__version__ = "0.1.0"

__all__ = [
    # Solver
    "IKState",
    "LinearTaskSolver",
    "QPInverseKinematics",
    "SolverConfig",
    "SolverStatus",
    # QP backends
    "QPBackend",
    "QPProblem",
    "QPSolution",
    "QpsolversBackend",
    # Variables
    "VariableRange",
    "VariablesHandler",
    # Configuration
    "Configuration",
    # Tasks
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
    # Weights
    "ConstantWeightProvider",
    "FunctionWeightProvider",
    "SettableWeightProvider",
    "WeightProvider",
    # Exceptions
    "ConfigurationError",
    "DuplicateTaskName",
    "EvaluationError",
    "FinalizationError",
    "IKError",
    "InequalityPriorityConflict",
    "InvalidFrame",
    "InvalidSolverState",
    "InvalidWeight",
    "MissingWeight",
    "NotAWeightedTask",
    "RegistrationError",
    "SolveFailed",
    "TargetNotSet",
    "TaskDefinitionError",
    "TaskEvaluationFailed",
    "UnknownTask",
    "UnknownVariable",
    "UnsupportedPriority",
    "VariableDefinitionError",
    # Constants
    "DEFAULT_QP_SOLVER",
    "DEFAULT_TOLERANCE",
    "DEFAULT_VERBOSITY",
    "HARD_PRIORITY",
    "QP_EPS_ABS",
    "QP_EPS_REL",
    "SOFT_PRIORITY",
    "SUPPORTED_PRIORITIES",
]
