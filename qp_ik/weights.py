"""Weight providers for soft (priority 1) tasks.

A weight provider decouples how important a task is at a given instant from
the computation of the task itself. The solver queries every provider once
per control cycle.
"""

import abc
from typing import Callable, Optional

import numpy as np
import numpy.typing as npt

from .exceptions import InvalidWeight


def as_weight(weight: npt.ArrayLike) -> np.ndarray:
    """Validate a weight vector and return it as a read-only float array.

    Raises:
        InvalidWeight: If the weight is not a non-empty 1-D vector of finite,
            non-negative values.
    """
    try:
        weight = np.array(weight, dtype=float, ndmin=1)
    except (TypeError, ValueError) as e:
        raise InvalidWeight(f"Weight must be a numeric vector: {e}") from e
    if weight.ndim != 1 or weight.size == 0:
        raise InvalidWeight(
            f"Weight must be a non-empty vector, got array of shape {weight.shape}"
        )
    if not np.all(np.isfinite(weight)):
        raise InvalidWeight("Weight must contain only finite values")
    if np.any(weight < 0.0):
        raise InvalidWeight("Weight should be >= 0")
    weight.setflags(write=False)
    return weight


class WeightProvider(abc.ABC):
    """Abstract base class for weight providers."""

    @abc.abstractmethod
    def get_weight(self) -> np.ndarray:
        """Current weight vector, one entry per task element."""
        raise NotImplementedError


class ConstantWeightProvider(WeightProvider):
    """Weight provider returning always the same vector."""

    def __init__(self, weight: npt.ArrayLike):
        self._weight = as_weight(weight)

    def get_weight(self) -> np.ndarray:
        return self._weight

    def __repr__(self) -> str:
        return f"ConstantWeightProvider({self._weight.tolist()})"


class SettableWeightProvider(WeightProvider):
    """Weight provider updated by the caller between control cycles.

    Example:
        >>> provider = SettableWeightProvider([1.0, 1.0, 1.0])
        >>> solver.add_task(task, "com", 1, provider)
        >>> provider.set_weight([10.0, 10.0, 1.0])  # used at the next advance
    """

    def __init__(self, weight: npt.ArrayLike):
        self._weight = as_weight(weight)

    def set_weight(self, weight: npt.ArrayLike) -> None:
        self._weight = as_weight(weight)

    def get_weight(self) -> np.ndarray:
        return self._weight


class FunctionWeightProvider(WeightProvider):
    """Weight provider computing the weight from a callable at every query.

    Useful for time-varying weights, e.g. ramping a task in or out during a
    contact switch.

    Attributes:
        function: Callable with no arguments returning the weight.
        last_weight: Last weight returned, None if never queried.
    """

    last_weight: Optional[np.ndarray]

    def __init__(self, function: Callable[[], npt.ArrayLike]):
        if not callable(function):
            raise InvalidWeight(f"{function!r} is not callable")
        self.function = function
        self.last_weight = None

    def get_weight(self) -> np.ndarray:
        self.last_weight = as_weight(self.function())
        return self.last_weight
