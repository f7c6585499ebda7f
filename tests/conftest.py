import pytest

from .helpers import LinearSystemBackend, build_planar_arm


@pytest.fixture
def planar_arm():
    return build_planar_arm()


@pytest.fixture
def kkt_backend():
    return LinearSystemBackend()
