"""Interface of the solvers built on a set of linear tasks."""

import abc
from typing import Any, List, Mapping, Optional, Union

import numpy as np
import numpy.typing as npt

from .state import IKState
from .tasks import Task
from .variables import VariablesHandler
from .weights import WeightProvider

Weight = Union[WeightProvider, npt.ArrayLike]


class LinearTaskSolver(abc.ABC):
    """Solver combining prioritized linear tasks.

    The legal call sequence is initialize, add_task (any number of times),
    finalize, then advance once per control cycle. Every operation reports
    success with its return value; no exception crosses this interface.
    """

    @abc.abstractmethod
    def initialize(self, config: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    @abc.abstractmethod
    def add_task(self, task: Task, name: str, priority: int, weight: Optional[Weight] = None) -> bool:
        raise NotImplementedError

    @abc.abstractmethod
    def set_task_weight(self, name: str, weight: Weight) -> bool:
        raise NotImplementedError

    @abc.abstractmethod
    def get_task_weight_provider(self, name: str) -> Optional[WeightProvider]:
        raise NotImplementedError

    @abc.abstractmethod
    def get_task(self, name: str) -> Optional[Task]:
        raise NotImplementedError

    @abc.abstractmethod
    def get_task_names(self) -> List[str]:
        raise NotImplementedError

    @abc.abstractmethod
    def finalize(self, variables: Union[VariablesHandler, Mapping[str, int]]) -> bool:
        raise NotImplementedError

    @abc.abstractmethod
    def advance(self, state: Any = None) -> bool:
        raise NotImplementedError

    @abc.abstractmethod
    def is_output_valid(self) -> bool:
        raise NotImplementedError

    @abc.abstractmethod
    def get_output(self) -> IKState:
        raise NotImplementedError

    @abc.abstractmethod
    def get_raw_solution(self) -> Optional[np.ndarray]:
        raise NotImplementedError
