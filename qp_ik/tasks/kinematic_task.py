"""Base class of the tasks computed from a robot Configuration."""

from typing import Any, Optional, Sequence

import numpy as np
import numpy.typing as npt

from ..configuration import Configuration
from ..exceptions import EvaluationError, TaskDefinitionError
from .task import Task


class KinematicTask(Task):
    """Task reading its data from a Configuration.

    The configuration is either passed to ``evaluate`` by the solver or bound
    once with ``set_configuration``; the former takes precedence.
    """

    def __init__(
        self,
        size: int,
        variables: Optional[Sequence[str]] = None,
        configuration: Optional[Configuration] = None,
    ):
        super().__init__(size, variables)
        self.configuration = configuration

    def set_configuration(self, configuration: Configuration) -> None:
        self.configuration = configuration

    def _resolve_configuration(self, state: Any) -> Configuration:
        if isinstance(state, Configuration):
            return state
        if state is None and self.configuration is not None:
            return self.configuration
        if state is None:
            raise EvaluationError(
                f"{self.__class__.__name__} has no configuration to read from"
            )
        raise EvaluationError(
            f"{self.__class__.__name__} expected a Configuration, got {type(state).__name__}"
        )


def as_gain(gain: npt.ArrayLike, size: int, name: str, owner: str) -> np.ndarray:
    """Validate a scalar or per-coordinate gain and broadcast it to ``size``."""
    gain = np.atleast_1d(np.asarray(gain, dtype=float))
    if gain.ndim != 1 or gain.shape[0] not in (1, size):
        raise TaskDefinitionError(
            f"{owner} {name} should be a vector of shape 1 (identical gain for all "
            f"coordinates) or ({size},) but got {gain.shape}"
        )
    if not np.all(gain >= 0.0):
        raise TaskDefinitionError(f"{owner} {name} should be >= 0")
    return np.broadcast_to(gain, (size,)).copy()
