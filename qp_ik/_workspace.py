"""Internal data of QPInverseKinematics: task registrations and QP buffers."""

import weakref
from typing import List, Optional

import numpy as np
from scipy import linalg

from .qp import QPProblem
from .tasks.task import Task, TaskData
from .weights import WeightProvider


class TaskRegistration:
    """Entry of the solver task table.

    Tasks and caller-supplied weight providers are referenced weakly: the
    caller owns them. Providers built by the solver from a raw weight vector
    are owned by the registration.
    """

    def __init__(
        self,
        task: Task,
        name: str,
        priority: int,
        weight_provider: Optional[WeightProvider] = None,
        owns_provider: bool = False,
    ):
        self._task_ref = weakref.ref(task)
        self.name = name
        self.priority = priority
        self.size = task.size
        self.supports_equality = task.supports_equality
        self.supports_inequality = task.supports_inequality
        self.variables: Optional[List[str]] = task.variables
        self._provider_ref: Optional[weakref.ref] = None
        self._owned_provider: Optional[WeightProvider] = None
        if weight_provider is not None:
            self.set_weight_provider(weight_provider, owns_provider)

        # Set at finalize
        self.columns = np.zeros(0, dtype=int)
        self.equality_offset: Optional[int] = None
        self.inequality_offset: Optional[int] = None

    @property
    def task(self) -> Optional[Task]:
        return self._task_ref()

    @property
    def weight_provider(self) -> Optional[WeightProvider]:
        if self._provider_ref is None:
            return None
        return self._provider_ref()

    def set_weight_provider(self, weight_provider: WeightProvider, owns_provider: bool) -> None:
        self._owned_provider = weight_provider if owns_provider else None
        self._provider_ref = weakref.ref(weight_provider)


class QPWorkspace:
    """Buffers of the QP, shaped once at finalize and refilled every cycle."""

    def __init__(self, num_variables: int, num_equalities: int, num_inequalities: int):
        self.H = np.zeros((num_variables, num_variables))
        self.g = np.zeros(num_variables)
        self.A_eq = np.zeros((num_equalities, num_variables))
        self.b_eq = np.zeros(num_equalities)
        self.A_ineq = np.zeros((num_inequalities, num_variables))
        self.b_ineq = np.zeros(num_inequalities)

    def reset(self) -> None:
        for buffer in (self.H, self.g, self.A_eq, self.b_eq, self.A_ineq, self.b_ineq):
            buffer.fill(0.0)

    def set_equality(self, registration: TaskRegistration, data: TaskData) -> None:
        assert registration.equality_offset is not None
        rows = slice(registration.equality_offset, registration.equality_offset + registration.size)
        self.A_eq[rows, registration.columns] = data.A
        self.b_eq[rows] = data.b

    def set_inequality(self, registration: TaskRegistration, data: TaskData) -> None:
        assert registration.inequality_offset is not None
        rows = slice(
            registration.inequality_offset, registration.inequality_offset + registration.size
        )
        self.A_ineq[rows, registration.columns] = data.A
        self.b_ineq[rows] = data.b

    def add_cost(self, registration: TaskRegistration, data: TaskData, weight: np.ndarray) -> None:
        """Fold (1/2) * || A x - b ||^2_W into the cost.

        Adds A^T W A to the Hessian and -A^T W b to the gradient.
        """
        weighted_A_T = data.A.T * weight
        columns = registration.columns
        self.H[np.ix_(columns, columns)] += weighted_A_T @ data.A
        self.g[columns] -= weighted_A_T @ data.b

    def has_singular_hessian(self) -> bool:
        """True if the Hessian is singular on the null space of the equality rows.

        Directions left free by the equality constraints must be fixed by the
        cost; otherwise the minimizer is not unique.
        """
        num_variables = self.g.shape[0]
        if self.A_eq.shape[0] == 0:
            Z = np.eye(num_variables)
        else:
            Z = linalg.null_space(self.A_eq)
        if Z.shape[1] == 0:
            return False
        reduced = Z.T @ self.H @ Z
        return np.linalg.matrix_rank(reduced, hermitian=True) < Z.shape[1]

    def problem(self) -> QPProblem:
        return QPProblem(self.H, self.g, self.A_eq, self.b_eq, self.A_ineq, self.b_ineq)
