"""
Event records and their form encoding.

Every device event becomes a flat dict keyed by attribute name. The dict is
encoded as key=value pairs in sorted key order, each pair followed by '&'
(the trailing separator is part of the wire format the service already
accepts). Values are not percent-escaped.
"""

from enum import Enum


class EventKind(Enum):
    PAIR = "onPair"
    CONNECT = "onConnect"
    ORIENTATION = "onOrientationData"
    POSE = "onPose"
    ARM_RECOGNIZED = "onArmRecognized"
    ARM_LOST = "onArmLost"
    DISCONNECT = "onDisconnect"
    ACCELEROMETER = "onAccelerometerData"
    GYROSCOPE = "onGyroscopeData"
    RSSI = "onRssi"


# Legacy clients tagged RSSI samples with the gyroscope label.
LEGACY_RSSI_TAG = EventKind.GYROSCOPE.value

ARMS = ("armLeft", "armRight", "armUnknown")
X_DIRECTIONS = ("xDirectionTowardWrist", "xDirectionTowardElbow", "xDirectionUnknown")

FIRMWARE_KEYS = (
    "firmwareVersion.firmwareVersionMajor",
    "firmwareVersion.firmwareVersionMinor",
    "firmwareVersion.firmwareVersionPatch",
    "firmwareVersion.firmwareVersionHardwareRev",
)


def _lookup(table, code):
    if isinstance(code, int) and 0 <= code < len(table):
        return table[code]
    return table[-1]


def arm_name(code):
    return _lookup(ARMS, code)


def x_direction_name(code):
    return _lookup(X_DIRECTIONS, code)


# ── Record builders ────────────────────────────────────────────────────────

def base_record(kind: EventKind, timestamp, tag=None) -> dict:
    return {"eventType": tag or kind.value, "timestamp": int(timestamp)}


def firmware_record(kind: EventKind, timestamp, firmware) -> dict:
    major, minor, patch, hardware_rev = firmware
    record = base_record(kind, timestamp)
    for key, value in zip(FIRMWARE_KEYS, (major, minor, patch, hardware_rev)):
        record[key] = int(value)
    return record


def orientation_record(timestamp, x, y, z, w) -> dict:
    record = base_record(EventKind.ORIENTATION, timestamp)
    record["rotation.x"] = float(x)
    record["rotation.y"] = float(y)
    record["rotation.z"] = float(z)
    record["rotation.w"] = float(w)
    return record


def pose_record(timestamp, pose: str) -> dict:
    record = base_record(EventKind.POSE, timestamp)
    record["pose"] = pose
    return record


def arm_recognized_record(timestamp, arm, x_direction) -> dict:
    record = base_record(EventKind.ARM_RECOGNIZED, timestamp)
    record["arm"] = arm_name(arm)
    record["xDirection"] = x_direction_name(x_direction)
    return record


def vector_record(kind: EventKind, prefix: str, timestamp, x, y, z) -> dict:
    record = base_record(kind, timestamp)
    record[f"{prefix}.x"] = float(x)
    record[f"{prefix}.y"] = float(y)
    record[f"{prefix}.z"] = float(z)
    return record


def rssi_record(timestamp, rssi, legacy_tag=False) -> dict:
    tag = LEGACY_RSSI_TAG if legacy_tag else None
    record = base_record(EventKind.RSSI, timestamp, tag=tag)
    record["rssi"] = int(rssi)
    return record


# ── Encoding ───────────────────────────────────────────────────────────────

def format_value(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return repr(value)
    return str(value)


def encode_form(record: dict) -> str:
    """Encode a record as 'k=v&k=v&'. No escaping is applied to values."""
    parts = []
    for key in sorted(record):
        parts.append(f"{key}={format_value(record[key])}&")
    return "".join(parts)
