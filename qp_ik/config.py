"""Configuration of the inverse kinematics solver."""

from typing import Any, Mapping, NamedTuple

from . import constants as consts
from .exceptions import ConfigurationError


class SolverConfig(NamedTuple):
    """Options recognized by ``QPInverseKinematics.initialize``.

    Attributes:
        primary_variable_name: Name of the variable group representing the
            generalized robot velocity.
        verbosity: Report per-cycle failures and enable the backend output.
        qp_solver: Name of the qpsolvers backend.
        eps_abs: Absolute tolerance of the backend.
        eps_rel: Relative tolerance of the backend.
    """

    primary_variable_name: str
    verbosity: bool = consts.DEFAULT_VERBOSITY
    qp_solver: str = consts.DEFAULT_QP_SOLVER
    eps_abs: float = consts.QP_EPS_ABS
    eps_rel: float = consts.QP_EPS_REL

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> "SolverConfig":
        """Parse and validate a mapping of options.

        Raises:
            ConfigurationError: If the primary variable name is missing or an
                option has the wrong type.
        """
        if not isinstance(config, Mapping):
            raise ConfigurationError(
                f"Configuration must be a mapping, got {type(config).__name__}"
            )

        name = config.get(consts.PRIMARY_VARIABLE_KEY)
        for alias in consts.PRIMARY_VARIABLE_ALIASES:
            if name is None:
                name = config.get(alias)
        if name is None:
            raise ConfigurationError(
                f"Parameter '{consts.PRIMARY_VARIABLE_KEY}' is required."
            )
        if not isinstance(name, str) or not name:
            raise ConfigurationError(
                f"Parameter '{consts.PRIMARY_VARIABLE_KEY}' must be a non-empty string."
            )

        verbosity = config.get(consts.VERBOSITY_KEY, consts.DEFAULT_VERBOSITY)
        if not isinstance(verbosity, bool):
            raise ConfigurationError(
                f"Parameter '{consts.VERBOSITY_KEY}' must be a boolean, got {verbosity!r}."
            )

        qp_solver = config.get("qp_solver", consts.DEFAULT_QP_SOLVER)
        if not isinstance(qp_solver, str):
            raise ConfigurationError(f"Parameter 'qp_solver' must be a string, got {qp_solver!r}.")

        tolerances = {}
        for key, default in (("eps_abs", consts.QP_EPS_ABS), ("eps_rel", consts.QP_EPS_REL)):
            value = config.get(key, default)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
                raise ConfigurationError(
                    f"Parameter '{key}' must be a non-negative number, got {value!r}."
                )
            tolerances[key] = float(value)

        return cls(name, verbosity, qp_solver, **tolerances)
