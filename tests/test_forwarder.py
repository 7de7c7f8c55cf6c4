from dataclasses import replace

import pytest
import requests

from myo_rest_bridge.forwarder import FORM_CONTENT_TYPE, BackgroundSender, EventForwarder

from .fakes import FakeSession, parse_body

FIRMWARE_KEYS = {
    "firmwareVersion.firmwareVersionMajor",
    "firmwareVersion.firmwareVersionMinor",
    "firmwareVersion.firmwareVersionPatch",
    "firmwareVersion.firmwareVersionHardwareRev",
}


@pytest.fixture
def forwarder(config, session):
    return EventForwarder(config, "abc123", session=session)


def last_record(session):
    return parse_body(session.posts[-1]["data"])


def test_posts_to_event_url_with_form_content_type(forwarder, session, device):
    forwarder.on_arm_lost(device, 7)
    post = session.posts[-1]
    assert post["url"] == "http://service.test/myo/abc123/event"
    assert post["headers"] == {"Content-Type": FORM_CONTENT_TYPE}
    assert post["data"] == "eventType=onArmLost&timestamp=7&"


@pytest.mark.parametrize(
    "call, tag, extra",
    [
        (lambda f, d: f.on_pair(d, 1, (1, 5, 1970, 2)), "onPair", FIRMWARE_KEYS),
        (lambda f, d: f.on_connect(d, 1, (1, 5, 1970, 2)), "onConnect", FIRMWARE_KEYS),
        (
            lambda f, d: f.on_orientation_data(d, 1, 0.0, 0.0, 0.0, 1.0),
            "onOrientationData",
            {"rotation.x", "rotation.y", "rotation.z", "rotation.w"},
        ),
        (lambda f, d: f.on_pose(d, 1, "rest"), "onPose", {"pose"}),
        (lambda f, d: f.on_arm_recognized(d, 1, 0, 1), "onArmRecognized", {"arm", "xDirection"}),
        (lambda f, d: f.on_arm_lost(d, 1), "onArmLost", set()),
        (lambda f, d: f.on_disconnect(d, 1), "onDisconnect", set()),
        (lambda f, d: f.on_rssi(d, 1, -55), "onRssi", {"rssi"}),
    ],
)
def test_record_keys_per_event_kind(forwarder, session, device, call, tag, extra):
    call(forwarder, device)
    assert len(session.posts) == 1
    record = last_record(session)
    assert record["eventType"] == tag
    assert set(record) == {"eventType", "timestamp"} | extra


def test_fist_vibrates_once_and_updates_pose(forwarder, session, device):
    forwarder.on_pose(device, 3, "fist")
    assert device.vibrations == ["medium"]
    assert forwarder.display.current_pose == "fist"
    assert last_record(session)["pose"] == "fist"


def test_other_poses_do_not_vibrate(forwarder, device):
    forwarder.on_pose(device, 3, "waveOut")
    assert device.vibrations == []
    assert forwarder.display.current_pose == "waveOut"


def test_arm_recognized_left_toward_elbow(forwarder, session, device):
    forwarder.on_arm_recognized(device, 9, 0, 1)
    record = last_record(session)
    assert record["arm"] == "armLeft"
    assert record["xDirection"] == "xDirectionTowardElbow"
    assert forwarder.display.on_arm is True
    assert forwarder.display.which_arm == "armLeft"


def test_arm_lost_and_disconnect_clear_arm_flag(forwarder, device):
    forwarder.on_arm_recognized(device, 1, 1, 0)
    forwarder.on_arm_lost(device, 2)
    assert forwarder.display.on_arm is False
    forwarder.on_arm_recognized(device, 3, 1, 0)
    forwarder.on_disconnect(device, 4)
    assert forwarder.display.on_arm is False


def test_orientation_updates_gauges_and_forwards_raw_quaternion(forwarder, session, device):
    forwarder.on_orientation_data(device, 11, 0.0, 0.0, 0.0, 1.0)
    display = forwarder.display
    assert (display.roll_w, display.pitch_w, display.yaw_w) == (9, 9, 9)
    record = last_record(session)
    assert record["rotation.w"] == "1.0"
    assert record["rotation.x"] == "0.0"


def test_imu_samples_are_not_forwarded_by_default(forwarder, session, device):
    forwarder.on_accelerometer_data(device, 1, 0.1, 0.2, 0.98)
    forwarder.on_gyroscope_data(device, 1, 1.0, 2.0, 3.0)
    assert session.posts == []


def test_imu_samples_forwarded_when_enabled(config, session, device):
    forwarder = EventForwarder(replace(config, forward_imu=True), "abc123", session=session)
    forwarder.on_accelerometer_data(device, 1, 0.1, 0.2, 0.98)
    forwarder.on_gyroscope_data(device, 2, 1.0, 2.0, 3.0)
    accel, gyro = (parse_body(p["data"]) for p in session.posts)
    assert set(accel) == {"eventType", "timestamp", "accel.x", "accel.y", "accel.z"}
    assert accel["eventType"] == "onAccelerometerData"
    assert set(gyro) == {"eventType", "timestamp", "gyro.x", "gyro.y", "gyro.z"}
    assert gyro["eventType"] == "onGyroscopeData"


def test_legacy_rssi_tag(config, session, device):
    forwarder = EventForwarder(replace(config, legacy_rssi_tag=True), "abc123", session=session)
    forwarder.on_rssi(device, 1, -70)
    assert last_record(session) == {"eventType": "onGyroscopeData", "timestamp": "1", "rssi": "-70"}


def test_post_failures_are_swallowed(config, device):
    session = FakeSession(post_error=requests.ConnectionError("refused"))
    forwarder = EventForwarder(config, "abc123", session=session)
    forwarder.on_pose(device, 1, "fist")
    assert len(session.posts) == 1
    assert forwarder.display.current_pose == "fist"


class RecordingSender:
    def __init__(self):
        self.submitted = []

    def submit(self, url, body):
        self.submitted.append((url, body))


def test_sender_receives_encoded_requests(config, session, device):
    sender = RecordingSender()
    forwarder = EventForwarder(config, "abc123", session=session, sender=sender)
    forwarder.on_arm_lost(device, 5)
    assert session.posts == []
    assert sender.submitted == [
        ("http://service.test/myo/abc123/event", "eventType=onArmLost&timestamp=5&")
    ]


def test_background_sender_drops_oldest_when_full(session):
    sender = BackgroundSender(session, maxsize=2)  # not started, nothing drains
    sender.submit("u", "1")
    sender.submit("u", "2")
    sender.submit("u", "3")
    assert sender.dropped == 1
    assert [sender.queue.get_nowait()[1] for _ in range(2)] == ["2", "3"]


def test_background_sender_delivers(session):
    sender = BackgroundSender(session, maxsize=8).start()
    sender.submit("http://service.test/x", "a=1&")
    sender.submit("http://service.test/x", "a=2&")
    sender.stop(drain=True)
    assert [p["data"] for p in session.posts] == ["a=1&", "a=2&"]
