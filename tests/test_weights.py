import numpy as np
import pytest

from qp_ik import (
    ConstantWeightProvider,
    FunctionWeightProvider,
    InvalidWeight,
    SettableWeightProvider,
)


def test_constant_weight_is_read_only():
    provider = ConstantWeightProvider([1.0, 2.0])
    weight = provider.get_weight()
    np.testing.assert_array_equal(weight, [1.0, 2.0])
    with pytest.raises(ValueError):
        weight[0] = 3.0


def test_scalar_weight_becomes_vector():
    np.testing.assert_array_equal(ConstantWeightProvider(3.0).get_weight(), [3.0])


@pytest.mark.parametrize(
    "weight",
    [[-1.0], [np.inf], [np.nan], [], [[1.0, 2.0]], "heavy"],
)
def test_invalid_weights(weight):
    with pytest.raises(InvalidWeight):
        ConstantWeightProvider(weight)


def test_settable_weight():
    provider = SettableWeightProvider([1.0])
    provider.set_weight([4.0])
    np.testing.assert_array_equal(provider.get_weight(), [4.0])
    with pytest.raises(InvalidWeight):
        provider.set_weight([-4.0])


def test_function_weight_is_queried_every_time():
    calls = []

    def ramp():
        calls.append(None)
        return [float(len(calls))]

    provider = FunctionWeightProvider(ramp)
    assert provider.last_weight is None
    np.testing.assert_array_equal(provider.get_weight(), [1.0])
    np.testing.assert_array_equal(provider.get_weight(), [2.0])
    np.testing.assert_array_equal(provider.last_weight, [2.0])


def test_function_weight_requires_callable():
    with pytest.raises(InvalidWeight):
        FunctionWeightProvider([1.0])
