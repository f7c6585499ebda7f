import numpy as np
import pytest

from qp_ik import UnknownVariable, VariableDefinitionError, VariableRange, VariablesHandler


def test_ranges_are_contiguous_in_insertion_order():
    variables = VariablesHandler()
    variables.add_variable("robot_velocity", 8)
    variables.add_variable("slack", 2)
    variables.add_variable("force", 6)

    assert variables.names == ["robot_velocity", "slack", "force"]
    assert variables.get_variable("robot_velocity") == VariableRange(0, 8)
    assert variables.get_variable("slack") == VariableRange(8, 2)
    assert variables.get_variable("force") == VariableRange(10, 6)
    assert variables.size == 16
    assert len(variables) == 3
    assert "slack" in variables
    assert "torque" not in variables


def test_from_mapping_and_columns():
    variables = VariablesHandler.from_mapping({"a": 2, "b": 3})
    np.testing.assert_array_equal(variables.columns(["b"]), [2, 3, 4])
    np.testing.assert_array_equal(variables.columns(["b", "a"]), [2, 3, 4, 0, 1])
    assert variables.get_variable("b").as_slice() == slice(2, 5)


def test_unknown_variable():
    variables = VariablesHandler.from_mapping({"v": 1})
    with pytest.raises(UnknownVariable):
        variables.get_variable("w")


@pytest.mark.parametrize("size", [0, -1, 1.5, True])
def test_invalid_size(size):
    with pytest.raises(VariableDefinitionError):
        VariablesHandler().add_variable("v", size)


def test_duplicate_and_empty_names():
    variables = VariablesHandler.from_mapping({"v": 1})
    with pytest.raises(VariableDefinitionError):
        variables.add_variable("v", 2)
    with pytest.raises(VariableDefinitionError):
        variables.add_variable("", 2)


def test_frozen_handler_rejects_new_variables():
    variables = VariablesHandler.from_mapping({"v": 1})
    variables.freeze()
    assert variables.frozen
    with pytest.raises(VariableDefinitionError):
        variables.add_variable("w", 1)

    copy = variables.copy()
    assert not copy.frozen
    copy.add_variable("w", 1)
    assert copy.size == 2
    assert variables.size == 1
