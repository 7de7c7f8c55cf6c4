"""
Myo hub adapter.

Owns everything that touches the myo-python binding: opening the hub, waiting
for an armband, and translating SDK events into forwarder calls. The SDK's
event type name is the tag; dispatch() looks it up in a table and ignores
anything it has no handler for.
"""

import logging
import time

from .config import BridgeConfig
from .errors import DeviceNotFoundError

log = logging.getLogger(__name__)

# SDK enum names -> names the service expects
POSE_NAMES = {
    "rest": "rest",
    "fist": "fist",
    "wave_in": "waveIn",
    "wave_out": "waveOut",
    "fingers_spread": "fingersSpread",
    "double_tap": "doubleTap",
}
ARM_CODES = {"left": 0, "right": 1}
X_DIRECTION_CODES = {"toward_wrist": 0, "toward_elbow": 1}
UNKNOWN_CODE = 2


def _name(value):
    return getattr(value, "name", str(value))


def pose_name(pose):
    return POSE_NAMES.get(_name(pose), "unknown")


def arm_code(arm):
    return ARM_CODES.get(_name(arm), UNKNOWN_CODE)


def x_direction_code(x_direction):
    return X_DIRECTION_CODES.get(_name(x_direction), UNKNOWN_CODE)


class MyoDevice:
    """Wraps an SDK device so the forwarder can vibrate it by strength name."""

    def __init__(self, device):
        self.device = device

    def vibrate(self, strength):
        import myo

        self.device.vibrate(myo.VibrationType[strength])

    def request_rssi(self):
        self.device.request_rssi()


# ── Dispatch ───────────────────────────────────────────────────────────────

def _paired(fwd, dev, event):
    fwd.on_pair(dev, event.timestamp, tuple(event.firmware_version))


def _connected(fwd, dev, event):
    fwd.on_connect(dev, event.timestamp, tuple(event.firmware_version))


def _disconnected(fwd, dev, event):
    fwd.on_disconnect(dev, event.timestamp)


def _arm_synced(fwd, dev, event):
    fwd.on_arm_recognized(dev, event.timestamp, arm_code(event.arm), x_direction_code(event.x_direction))


def _arm_unsynced(fwd, dev, event):
    fwd.on_arm_lost(dev, event.timestamp)


def _pose(fwd, dev, event):
    fwd.on_pose(dev, event.timestamp, pose_name(event.pose))


def _orientation(fwd, dev, event):
    # One SDK sample carries orientation, acceleration and gyro together
    q = event.orientation
    fwd.on_orientation_data(dev, event.timestamp, q.x, q.y, q.z, q.w)
    a = event.acceleration
    fwd.on_accelerometer_data(dev, event.timestamp, a.x, a.y, a.z)
    g = event.gyroscope
    fwd.on_gyroscope_data(dev, event.timestamp, g.x, g.y, g.z)


def _rssi(fwd, dev, event):
    fwd.on_rssi(dev, event.timestamp, event.rssi)


HANDLERS = {
    "paired": _paired,
    "connected": _connected,
    "disconnected": _disconnected,
    "arm_synced": _arm_synced,
    "arm_unsynced": _arm_unsynced,
    "pose": _pose,
    "orientation": _orientation,
    "rssi": _rssi,
}


def dispatch(forwarder, event):
    handler = HANDLERS.get(_name(event.type))
    if handler is None:
        return
    handler(forwarder, MyoDevice(event.device), event)


# ── Hub lifecycle ──────────────────────────────────────────────────────────

def open_hub(config: BridgeConfig):
    import myo

    if config.sdk_path:
        myo.init(sdk_path=config.sdk_path)
    else:
        myo.init()
    return myo.Hub(config.application_id)


def wait_for_myo(hub, handler, timeout=10.0, poll_ms=50):
    """Pump the hub until an armband pairs or connects. Returns a MyoDevice."""
    found = []

    def watch(event):
        if _name(event.type) in ("paired", "connected") and not found:
            found.append(MyoDevice(event.device))
        handler(event)

    deadline = time.monotonic() + timeout
    while not found:
        if time.monotonic() >= deadline:
            raise DeviceNotFoundError("Unable to find a Myo!")
        hub.run(watch, poll_ms)

    log.debug("Armband found after waiting")
    return found[0]
