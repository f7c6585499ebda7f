"""Quadratic program data and solver backends.

The QP solved at every control cycle is:

    minimize:   (1/2) * x^T * H * x + g^T * x
    subject to: A_eq * x = b_eq
                A_ineq * x <= b_ineq
"""

import abc
from importlib import metadata
from typing import NamedTuple, Optional

import numpy as np
import qpsolvers
from qpsolvers.exceptions import QPError
from scipy import sparse

from . import constants as consts
from .exceptions import ConfigurationError, SolveFailed


class QPProblem(NamedTuple):
    """Assembled quadratic program. Constraint blocks may have zero rows."""

    H: np.ndarray
    g: np.ndarray
    A_eq: np.ndarray
    b_eq: np.ndarray
    A_ineq: np.ndarray
    b_ineq: np.ndarray

    @property
    def num_variables(self) -> int:
        return self.g.shape[0]


class QPSolution(NamedTuple):
    """Outcome of a backend solve."""

    x: Optional[np.ndarray]
    found: bool
    status: str = ""


class QPBackend(abc.ABC):
    """Generic solve interface consumed by the inverse kinematics.

    Subclasses must implement ``solve``. A backend should report failures
    through ``QPSolution.found`` and may raise SolveFailed.
    """

    name: str = "backend"
    verbose: bool = False

    @abc.abstractmethod
    def solve(self, problem: QPProblem) -> QPSolution:
        raise NotImplementedError


def osqp_polish_key() -> str:
    """Name of the OSQP solution-polishing setting.

    OSQP 1.0 renamed ``polish`` to ``polishing``.
    """
    major = int(metadata.version("osqp").split(".")[0])
    return "polishing" if major >= 1 else "polish"


class QpsolversBackend(QPBackend):
    """Backend solving the QP through qpsolvers (OSQP by default).

    Matrices are converted to scipy.sparse CSC format, which is what the
    sparse solvers such as OSQP expect.
    """

    def __init__(
        self,
        solver: str = consts.DEFAULT_QP_SOLVER,
        verbose: bool = False,
        eps_abs: float = consts.QP_EPS_ABS,
        eps_rel: float = consts.QP_EPS_REL,
        **settings,
    ):
        if solver not in qpsolvers.available_solvers:
            raise ConfigurationError(
                f"QP solver '{solver}' is not available. "
                f"Available solvers: {qpsolvers.available_solvers}"
            )
        self.name = solver
        self.verbose = verbose
        self.settings = dict(settings)
        if solver == "osqp":
            self.settings.setdefault("eps_abs", eps_abs)
            self.settings.setdefault("eps_rel", eps_rel)
            self.settings.setdefault(osqp_polish_key(), True)

    def solve(self, problem: QPProblem) -> QPSolution:
        P = sparse.csc_matrix(problem.H)
        G = h = A = b = None
        if problem.A_ineq.shape[0] > 0:
            G = sparse.csc_matrix(problem.A_ineq)
            h = problem.b_ineq
        if problem.A_eq.shape[0] > 0:
            A = sparse.csc_matrix(problem.A_eq)
            b = problem.b_eq

        qp = qpsolvers.Problem(P, problem.g, G, h, A, b)
        try:
            solution = qpsolvers.solve_problem(
                qp, solver=self.name, verbose=self.verbose, **self.settings
            )
        except QPError as e:
            raise SolveFailed(self.name, str(e)) from e

        if not solution.found or solution.x is None:
            return QPSolution(None, False, "not found")
        if not np.all(np.isfinite(solution.x)):
            return QPSolution(None, False, "non-finite solution")
        return QPSolution(np.asarray(solution.x, dtype=float), True, "solved")
