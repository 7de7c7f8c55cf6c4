import pytest
import requests

from myo_rest_bridge.bootstrap import resolve_device_id
from myo_rest_bridge.errors import BootstrapError
from myo_rest_bridge.forwarder import EventForwarder

from .fakes import FakeResponse, FakeSession


def test_resolves_id_from_default_lookup(config, session, capsys):
    assert resolve_device_id(session, config) == "abc123"
    assert session.gets == ["http://service.test/myo/53e621c7af755b5a17000002"]
    assert "code=200" in capsys.readouterr().out


def test_event_posts_target_resolved_id(config, session, device):
    device_id = resolve_device_id(session, config)
    forwarder = EventForwarder(config, device_id, session=session)
    forwarder.on_pose(device, 1, "rest")
    forwarder.on_rssi(device, 2, -40)
    assert {p["url"] for p in session.posts} == {"http://service.test/myo/abc123/event"}


@pytest.mark.parametrize(
    "response",
    [
        FakeResponse(200, "not json"),
        FakeResponse(404, '{"error": "no such device"}'),
        FakeResponse(200, '{"_id": 12}'),
        FakeResponse(200, "[]"),
    ],
)
def test_unusable_response_is_fatal(config, response):
    with pytest.raises(BootstrapError):
        resolve_device_id(FakeSession(get_response=response), config)


def test_connection_error_is_fatal(config):
    session = FakeSession(get_response=requests.ConnectionError("refused"))
    with pytest.raises(BootstrapError, match="Could not reach"):
        resolve_device_id(session, config)
