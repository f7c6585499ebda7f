"""Output of the inverse kinematics."""

from typing import NamedTuple, Optional

import numpy as np


class IKState(NamedTuple):
    """Immutable snapshot of the last solve.

    Attributes:
        velocity: Block of the solution associated to the primary variable
            (the generalized robot velocity). None if no solve succeeded yet.
        raw_solution: Entire decision vector. None if no solve succeeded yet.
        valid: False if the last cycle failed; the arrays then hold the last
            valid solution and must not be used as a command.
    """

    velocity: Optional[np.ndarray] = None
    raw_solution: Optional[np.ndarray] = None
    valid: bool = False

    @classmethod
    def from_solution(cls, solution: np.ndarray, primary: slice) -> "IKState":
        raw_solution = np.array(solution, dtype=float)
        raw_solution.setflags(write=False)
        velocity = raw_solution[primary]
        return cls(velocity, raw_solution, True)

    @property
    def has_solution(self) -> bool:
        return self.raw_solution is not None

    def invalidated(self) -> "IKState":
        """Same solution, flagged as invalid."""
        return self._replace(valid=False)
