"""Layout of the optimization variables.

The decision vector of the QP is the concatenation of named variable groups
(e.g. the robot generalized velocity). Each group occupies a contiguous,
non-overlapping range of the vector, in insertion order.
"""

from typing import Dict, Iterator, List, Mapping, NamedTuple

import numpy as np

from .exceptions import UnknownVariable, VariableDefinitionError


class VariableRange(NamedTuple):
    """Contiguous block of the decision vector associated to a variable group."""

    offset: int
    size: int

    @property
    def indices(self) -> np.ndarray:
        """Absolute indices of the block."""
        return np.arange(self.offset, self.offset + self.size)

    def as_slice(self) -> slice:
        return slice(self.offset, self.offset + self.size)


class VariablesHandler:
    """Ordered registry of variable groups.

    Example:
        >>> variables = VariablesHandler()
        >>> variables.add_variable("robot_velocity", 8)
        >>> variables.add_variable("slack", 2)
        >>> variables.get_variable("slack")
        VariableRange(offset=8, size=2)
    """

    def __init__(self):
        self._ranges: Dict[str, VariableRange] = {}
        self._size = 0
        self._frozen = False

    @classmethod
    def from_mapping(cls, variables: Mapping[str, int]) -> "VariablesHandler":
        """Create a handler from an ordered mapping of name to size."""
        handler = cls()
        for name, size in variables.items():
            handler.add_variable(name, size)
        return handler

    def add_variable(self, name: str, size: int) -> VariableRange:
        """Append a variable group at the end of the decision vector.

        Args:
            name: Unique name of the group.
            size: Number of scalar variables in the group (> 0).

        Returns:
            Range allocated to the group.
        """
        if self._frozen:
            raise VariableDefinitionError(
                f"Cannot add variable '{name}': the handler is frozen."
            )
        if not isinstance(name, str) or not name:
            raise VariableDefinitionError("Variable name must be a non-empty string.")
        if name in self._ranges:
            raise VariableDefinitionError(f"Variable '{name}' is already registered.")
        if isinstance(size, bool) or int(size) != size or size <= 0:
            raise VariableDefinitionError(
                f"Variable '{name}' must have a positive integer size, got {size!r}."
            )

        variable_range = VariableRange(self._size, int(size))
        self._ranges[name] = variable_range
        self._size += variable_range.size
        return variable_range

    def get_variable(self, name: str) -> VariableRange:
        try:
            return self._ranges[name]
        except KeyError:
            raise UnknownVariable(name, self.names) from None

    def columns(self, names: List[str]) -> np.ndarray:
        """Absolute column indices spanned by the given groups, in order."""
        if not names:
            return np.zeros(0, dtype=int)
        return np.concatenate([self.get_variable(name).indices for name in names])

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def copy(self) -> "VariablesHandler":
        """Unfrozen copy of the handler."""
        return VariablesHandler.from_mapping(
            {name: rng.size for name, rng in self._ranges.items()}
        )

    @property
    def names(self) -> List[str]:
        return list(self._ranges)

    @property
    def size(self) -> int:
        """Total size of the decision vector."""
        return self._size

    def __contains__(self, name: object) -> bool:
        return name in self._ranges

    def __iter__(self) -> Iterator[str]:
        return iter(self._ranges)

    def __len__(self) -> int:
        return len(self._ranges)

    def __repr__(self) -> str:
        groups = ", ".join(f"{name}: {rng.size}" for name, rng in self._ranges.items())
        return f"VariablesHandler({{{groups}}})"
