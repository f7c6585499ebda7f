"""All linear tasks derive from the Task base class."""

import abc
import enum
from typing import Any, List, NamedTuple, Optional, Sequence

import numpy as np
import numpy.typing as npt

from ..exceptions import EvaluationError, TaskDefinitionError


class TaskType(enum.Enum):
    """Kind of linear relation produced by a task."""

    EQUALITY = "equality"
    INEQUALITY = "inequality"


class TaskData(NamedTuple):
    """Linear data of a task.

    Equality tasks describe A * x = b, inequality tasks A * x <= b, where x
    stacks the variable groups the task is defined on.
    """

    A: np.ndarray
    b: np.ndarray
    type: TaskType


class Task(abc.ABC):
    """Abstract base class for linear tasks.

    Subclasses must set the capability flags and implement ``evaluate``,
    which takes the current state (typically a Configuration) and returns
    the task's TaskData.

    Attributes:
        size: Number of rows of the task (fixed at construction).
        variables: Names of the variable groups the task columns span, in
            order. None means the solver's primary variable.
        supports_equality: The task can produce equality rows.
        supports_inequality: The task can produce inequality rows.
    """

    supports_equality: bool = True
    supports_inequality: bool = False

    def __init__(self, size: int, variables: Optional[Sequence[str]] = None):
        if isinstance(size, bool) or int(size) != size or size <= 0:
            raise TaskDefinitionError(
                f"{self.__class__.__name__} size must be a positive integer, got {size!r}"
            )
        self._size = int(size)
        self.variables: Optional[List[str]] = (
            None if variables is None else list(variables)
        )
        if self.variables is not None and not self.variables:
            raise TaskDefinitionError(
                f"{self.__class__.__name__} must span at least one variable"
            )

    @property
    def size(self) -> int:
        """Number of rows of the task."""
        return self._size

    @property
    def supported_types(self) -> List[TaskType]:
        types = []
        if self.supports_equality:
            types.append(TaskType.EQUALITY)
        if self.supports_inequality:
            types.append(TaskType.INEQUALITY)
        return types

    @abc.abstractmethod
    def evaluate(self, state: Any = None) -> TaskData:
        """Compute the linear data of the task at the current state.

        Args:
            state: State provider, e.g. a Configuration. Tasks bound to their
                own provider may ignore it.

        Returns:
            TaskData (A, b, type).

        Raises:
            EvaluationError: If the data needed by the task is unavailable.
        """
        raise NotImplementedError

    def check_data(self, data: TaskData, num_columns: int) -> TaskData:
        """Shape-check the data returned by ``evaluate``."""
        if not isinstance(data, TaskData):
            raise EvaluationError(
                f"{self.__class__.__name__} returned {type(data).__name__}, expected TaskData"
            )
        if data.type not in self.supported_types:
            raise EvaluationError(
                f"{self.__class__.__name__} returned unsupported type {data.type.value}"
            )
        if data.A.shape != (self._size, num_columns) or data.b.shape != (self._size,):
            raise EvaluationError(
                f"{self.__class__.__name__} expected A of shape ({self._size}, "
                f"{num_columns}) and b of shape ({self._size},), got {data.A.shape} "
                f"and {data.b.shape}"
            )
        if not (np.all(np.isfinite(data.A)) and np.all(np.isfinite(data.b))):
            raise EvaluationError(f"{self.__class__.__name__} produced non-finite values")
        return data

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(size={self._size})"


class AffineTask(Task):
    """Task defined by a constant matrix and vector.

    The caller may update A and b between control cycles with ``set``.

    Example:
        >>> # x - 5 = 0 on a scalar variable
        >>> task = AffineTask([[1.0]], [5.0])
        >>> # x <= 2 as an inequality
        >>> bound = AffineTask([[1.0]], [2.0], task_type=TaskType.INEQUALITY)
    """

    def __init__(
        self,
        A: npt.ArrayLike,
        b: npt.ArrayLike,
        task_type: TaskType = TaskType.EQUALITY,
        variables: Optional[Sequence[str]] = None,
    ):
        A = np.array(A, dtype=float, ndmin=2)
        super().__init__(A.shape[0], variables)
        self.task_type = TaskType(task_type)
        self.supports_equality = self.task_type is TaskType.EQUALITY
        self.supports_inequality = self.task_type is TaskType.INEQUALITY
        self.A = A
        self.b = np.zeros(self.size)
        self.set(A, b)

    def set(self, A: npt.ArrayLike, b: npt.ArrayLike) -> None:
        A = np.array(A, dtype=float, ndmin=2)
        b = np.array(b, dtype=float, ndmin=1)
        if A.ndim != 2 or A.shape[0] != self.size:
            raise TaskDefinitionError(
                f"{self.__class__.__name__} matrix must have {self.size} rows, got "
                f"{A.shape}"
            )
        if b.shape != (self.size,):
            raise TaskDefinitionError(
                f"{self.__class__.__name__} vector must have shape ({self.size},), got "
                f"{b.shape}"
            )
        self.A = A
        self.b = b

    def evaluate(self, state: Any = None) -> TaskData:
        del state  # Constant task
        return TaskData(self.A, self.b, self.task_type)
