"""Task-priority inverse kinematics formulated as a quadratic program.

Tasks registered with priority 0 are hard: equality tasks become equality
constraints and inequality tasks become inequality constraints of the QP.
Tasks registered with priority 1 are soft: each one contributes its weighted
squared residual to the cost,

    minimize:   sum_i (1/2) * || A_i x - b_i ||^2_{W_i}
    subject to: A_eq x = b_eq
                A_ineq x <= b_ineq

where x is the decision vector laid out by a VariablesHandler. The problem
is rebuilt and solved at every call to ``advance``.
"""

import enum
import logging
from typing import Any, Dict, List, Mapping, Optional, Union

import numpy as np

from . import constants as consts
from ._workspace import QPWorkspace, TaskRegistration
from .config import SolverConfig
from .exceptions import (
    DuplicateTaskName,
    FinalizationError,
    IKError,
    InequalityPriorityConflict,
    InvalidSolverState,
    InvalidWeight,
    MissingWeight,
    NotAWeightedTask,
    SolveFailed,
    TaskDefinitionError,
    TaskEvaluationFailed,
    UnknownTask,
    UnsupportedPriority,
    VariableDefinitionError,
)
from .linear_task_solver import LinearTaskSolver, Weight
from .qp import QPBackend, QpsolversBackend
from .state import IKState
from .tasks import Task, TaskType
from .variables import VariablesHandler
from .weights import ConstantWeightProvider, WeightProvider, as_weight

class SolverStatus(enum.Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    FINALIZED = "finalized"


class QPInverseKinematics(LinearTaskSolver):
    """Integration-based inverse kinematics with two priority levels.

    Example:
        >>> ik = QPInverseKinematics()
        >>> ik.initialize({"primary_variable_name": "robot_velocity"})
        >>> ik.add_task(se3_task, "end_effector", 0)
        >>> ik.add_task(posture_task, "posture", 1, weight=[1e-2] * model.nv)
        >>> ik.finalize({"robot_velocity": model.nv})
        >>> while running:
        ...     configuration.update(q)
        ...     if ik.advance(configuration):
        ...         q = configuration.integrate(ik.get_output().velocity, dt)

    Attributes:
        last_error: Error describing the last failed operation, None if the
            last operation succeeded.
    """

    last_error: Optional[IKError]

    def __init__(self, backend: Optional[QPBackend] = None):
        """Constructor.

        Args:
            backend: QP backend. If None, a QpsolversBackend is built at
                initialize from the configuration.
        """
        self._status = SolverStatus.UNINITIALIZED
        self._config: Optional[SolverConfig] = None
        self._backend = backend
        self._owns_backend = backend is None
        self._registrations: Dict[str, TaskRegistration] = {}
        self._variables: Optional[VariablesHandler] = None
        self._primary: slice = slice(0, 0)
        self._workspace: Optional[QPWorkspace] = None
        self._state = IKState()
        self.last_error = None

    # Bookkeeping

    def _succeed(self) -> bool:
        self.last_error = None
        return True

    def _fail(self, operation: str, error: IKError) -> bool:
        self.last_error = error
        logging.error(f"[QPInverseKinematics::{operation}] {error}")
        return False

    def _fail_cycle(self, error: IKError) -> bool:
        self.last_error = error
        self._state = self._state.invalidated()
        if self._config is not None and self._config.verbosity:
            logging.warning(f"[QPInverseKinematics::advance] {error}")
        return False

    @property
    def status(self) -> SolverStatus:
        return self._status

    @property
    def config(self) -> Optional[SolverConfig]:
        return self._config

    @property
    def variables(self) -> Optional[VariablesHandler]:
        """Frozen variables handler, None before finalize."""
        return self._variables

    # Setup

    def initialize(self, config: Mapping[str, Any]) -> bool:
        """Initialize the solver.

        Args:
            config: Mapping with the options of SolverConfig. The parameter
                ``primary_variable_name`` is mandatory.

        Returns:
            True in case of success, False otherwise.
        """
        if self._status is SolverStatus.FINALIZED:
            return self._fail("initialize", InvalidSolverState("initialize", "finalized"))

        try:
            parsed = SolverConfig.from_mapping(config)
            backend = self._backend
            if self._owns_backend:
                backend = QpsolversBackend(
                    parsed.qp_solver,
                    verbose=parsed.verbosity,
                    eps_abs=parsed.eps_abs,
                    eps_rel=parsed.eps_rel,
                )
        except IKError as e:
            return self._fail("initialize", e)

        self._config = parsed
        self._backend = backend
        self._status = SolverStatus.INITIALIZED
        return self._succeed()

    def _make_weight_provider(self, task_size: int, weight: Weight):
        """Return (provider, owned). Raw vectors become owned constant providers."""
        if isinstance(weight, WeightProvider):
            return weight, False
        provider = ConstantWeightProvider(weight)
        if provider.get_weight().shape[0] != task_size:
            raise InvalidWeight(
                f"Expected a weight of size {task_size}, got {provider.get_weight().shape[0]}"
            )
        return provider, True

    def add_task(
        self,
        task: Task,
        name: str,
        priority: int,
        weight: Optional[Weight] = None,
    ) -> bool:
        """Add a linear task to the solver.

        Args:
            task: Task to add. The solver keeps a weak reference: the caller
                must keep the task alive while the solver is used.
            name: Unique name associated to the task.
            priority: 0 for a hard task (constraint), 1 for a soft task (cost).
            weight: Weight vector or WeightProvider. Required for priority 1,
                ignored for priority 0.

        Returns:
            True if the task has been added to the solver.
        """
        if self._status is SolverStatus.FINALIZED:
            return self._fail("add_task", InvalidSolverState("add_task", "finalized"))
        if not isinstance(task, Task):
            return self._fail(
                "add_task", TaskDefinitionError(f"{task!r} is not a Task instance")
            )
        try:
            task_size = task.size
        except AttributeError as e:
            return self._fail(
                "add_task",
                TaskDefinitionError(f"{type(task).__name__} is not initialized: {e}"),
            )
        if name in self._registrations:
            return self._fail("add_task", DuplicateTaskName(name))
        if isinstance(priority, bool) or priority not in consts.SUPPORTED_PRIORITIES:
            return self._fail(
                "add_task", UnsupportedPriority(priority, consts.SUPPORTED_PRIORITIES)
            )

        provider, owned = None, False
        if priority == consts.SOFT_PRIORITY:
            if not task.supports_equality:
                return self._fail("add_task", InequalityPriorityConflict(name))
            if weight is None:
                return self._fail("add_task", MissingWeight(name))
            try:
                provider, owned = self._make_weight_provider(task_size, weight)
            except InvalidWeight as e:
                return self._fail("add_task", e)
        elif weight is not None:
            logging.warning(
                f"[QPInverseKinematics::add_task] Task '{name}' has priority 0, "
                "the weight is ignored."
            )

        try:
            registration = TaskRegistration(task, name, priority, provider, owned)
        except (AttributeError, TypeError) as e:
            return self._fail(
                "add_task", TaskDefinitionError(f"cannot register task '{name}': {e}")
            )
        self._registrations[name] = registration
        return self._succeed()

    def set_task_weight(self, name: str, weight: Weight) -> bool:
        """Set the weight or weight provider of an already registered task.

        The new weight is used from the next call to advance, no need to
        finalize again.
        """
        registration = self._registrations.get(name)
        if registration is None:
            return self._fail("set_task_weight", UnknownTask(name, self.get_task_names()))
        if registration.priority == consts.HARD_PRIORITY:
            return self._fail("set_task_weight", NotAWeightedTask(name))
        try:
            provider, owned = self._make_weight_provider(registration.size, weight)
        except InvalidWeight as e:
            return self._fail("set_task_weight", e)

        registration.set_weight_provider(provider, owned)
        return self._succeed()

    def get_task_weight_provider(self, name: str) -> Optional[WeightProvider]:
        """Weight provider of a task.

        Returns:
            None if the task does not exist, has priority 0 or its provider
            is no longer alive.
        """
        registration = self._registrations.get(name)
        if registration is None:
            return None
        return registration.weight_provider

    def get_task(self, name: str) -> Optional[Task]:
        """Task registered under ``name``, None if unknown or no longer alive."""
        registration = self._registrations.get(name)
        if registration is None:
            return None
        return registration.task

    def get_task_names(self) -> List[str]:
        """Names of the tasks, in registration order."""
        return list(self._registrations)

    def finalize(self, variables: Union[VariablesHandler, Mapping[str, int]]) -> bool:
        """Lock the variables layout and allocate the QP.

        You should call this method once, after adding ALL the tasks.

        Args:
            variables: VariablesHandler or ordered mapping of variable group
                name to size. It must contain the primary variable.

        Returns:
            True in case of success, False otherwise.
        """
        if self._status is not SolverStatus.INITIALIZED:
            return self._fail("finalize", InvalidSolverState("finalize", self._status.value))
        assert self._config is not None

        try:
            if isinstance(variables, VariablesHandler):
                handler = variables.copy()
            else:
                handler = VariablesHandler.from_mapping(variables)
        except (VariableDefinitionError, AttributeError) as e:
            return self._fail("finalize", FinalizationError(f"Invalid variables: {e}"))

        primary_name = self._config.primary_variable_name
        if primary_name not in handler:
            return self._fail(
                "finalize",
                FinalizationError(
                    f"The primary variable '{primary_name}' is not in the variables "
                    f"handler {handler.names}"
                ),
            )
        if not self._registrations:
            return self._fail("finalize", FinalizationError("No task has been added."))

        columns = {}
        num_equalities = 0
        num_inequalities = 0
        offsets = {}
        for name, registration in self._registrations.items():
            if registration.task is None:
                return self._fail(
                    "finalize", FinalizationError(f"Task '{name}' is no longer alive.")
                )
            names = registration.variables or [primary_name]
            if len(set(names)) != len(names):
                return self._fail(
                    "finalize",
                    FinalizationError(f"Task '{name}' spans a variable more than once."),
                )
            missing = [var for var in names if var not in handler]
            if missing:
                return self._fail(
                    "finalize",
                    FinalizationError(
                        f"Task '{name}' spans variables {missing} that are not in the "
                        f"variables handler {handler.names}"
                    ),
                )
            columns[name] = handler.columns(names)

            equality_offset = inequality_offset = None
            if registration.priority == consts.HARD_PRIORITY:
                if registration.supports_equality:
                    equality_offset = num_equalities
                    num_equalities += registration.size
                if registration.supports_inequality:
                    inequality_offset = num_inequalities
                    num_inequalities += registration.size
            offsets[name] = (equality_offset, inequality_offset)

        for name, registration in self._registrations.items():
            registration.columns = columns[name]
            registration.equality_offset, registration.inequality_offset = offsets[name]

        handler.freeze()
        self._variables = handler
        self._primary = handler.get_variable(primary_name).as_slice()
        self._workspace = QPWorkspace(handler.size, num_equalities, num_inequalities)
        self._state = IKState()
        self._status = SolverStatus.FINALIZED
        return self._succeed()

    # Control cycle

    def _evaluate(self, registration: TaskRegistration, state: Any):
        task = registration.task
        if task is None:
            raise TaskEvaluationFailed(registration.name, "the task is no longer alive")
        try:
            data = task.evaluate(state)
            return task.check_data(data, len(registration.columns))
        except Exception as e:
            raise TaskEvaluationFailed(registration.name, f"{type(e).__name__}: {e}") from e

    def _query_weight(self, registration: TaskRegistration) -> np.ndarray:
        provider = registration.weight_provider
        if provider is None:
            raise TaskEvaluationFailed(
                registration.name, "the weight provider is no longer alive"
            )
        try:
            weight = as_weight(provider.get_weight())
        except Exception as e:
            raise TaskEvaluationFailed(
                registration.name, f"invalid weight: {type(e).__name__}: {e}"
            ) from e
        if weight.shape[0] != registration.size:
            raise TaskEvaluationFailed(
                registration.name,
                f"expected a weight of size {registration.size}, got {weight.shape[0]}",
            )
        return weight

    def _assemble(self, state: Any) -> None:
        assert self._workspace is not None
        workspace = self._workspace
        workspace.reset()
        for registration in self._registrations.values():
            data = self._evaluate(registration, state)
            if registration.priority == consts.HARD_PRIORITY:
                if data.type is TaskType.EQUALITY:
                    workspace.set_equality(registration, data)
                else:
                    workspace.set_inequality(registration, data)
                continue

            if data.type is not TaskType.EQUALITY:
                raise TaskEvaluationFailed(
                    registration.name, "a priority 1 task must return equality data"
                )
            workspace.add_cost(registration, data, self._query_weight(registration))

    def advance(self, state: Any = None) -> bool:
        """Solve the inverse kinematics for the current control cycle.

        Args:
            state: State forwarded to every task ``evaluate``, e.g. a
                Configuration.

        Returns:
            True in case of success. On failure the output is flagged
            invalid and keeps the last valid solution.
        """
        if self._status is not SolverStatus.FINALIZED:
            self._state = self._state.invalidated()
            return self._fail("advance", InvalidSolverState("advance", self._status.value))
        assert self._workspace is not None and self._backend is not None

        try:
            self._assemble(state)
        except TaskEvaluationFailed as e:
            return self._fail_cycle(e)

        if self._workspace.has_singular_hessian():
            return self._fail_cycle(
                SolveFailed(self._backend.name, "singular Hessian on the equality null space")
            )

        try:
            solution = self._backend.solve(self._workspace.problem())
        except SolveFailed as e:
            return self._fail_cycle(e)
        except Exception as e:
            return self._fail_cycle(
                SolveFailed(self._backend.name, f"{type(e).__name__}: {e}")
            )

        if not solution.found or solution.x is None:
            return self._fail_cycle(SolveFailed(self._backend.name, solution.status))
        if solution.x.shape != (self._workspace.g.shape[0],):
            return self._fail_cycle(
                SolveFailed(self._backend.name, f"solution of shape {solution.x.shape}")
            )

        self._state = IKState.from_solution(solution.x, self._primary)
        return self._succeed()

    # Output

    def is_output_valid(self) -> bool:
        return self._state.valid

    def get_output(self) -> IKState:
        return self._state

    def get_raw_solution(self) -> Optional[np.ndarray]:
        """Entire decision vector of the last valid solve, None if none succeeded."""
        return self._state.raw_solution

    def __str__(self) -> str:
        lines = [f"QPInverseKinematics ({self._status.value})"]
        if self._config is not None:
            lines.append(f"  primary variable: {self._config.primary_variable_name}")
        if self._backend is not None:
            lines.append(f"  QP solver: {self._backend.name}")
        if self._variables is not None:
            lines.append(f"  variables: {self._variables!r}")
        for name, registration in self._registrations.items():
            task = registration.task
            task_name = task.__class__.__name__ if task is not None else "<expired>"
            lines.append(
                f"  - {name}: {task_name}, priority {registration.priority}, "
                f"size {registration.size}"
            )
        return "\n".join(lines)
