import pytest

from myo_rest_bridge.config import BridgeConfig

from .fakes import FakeDevice, FakeSession


@pytest.fixture
def config():
    return BridgeConfig(host="http://service.test")


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def device():
    return FakeDevice()
