"""
Bridge configuration.

Values are layered: built-in defaults, then an optional JSON file, then
environment variables, then command-line flags. The result is a plain
BridgeConfig that gets handed to the forwarder and the hub.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, fields, replace
from typing import Optional, get_args, get_type_hints

DEFAULT_HOST = "http://localhost:3000"
DEFAULT_DEVICE_ID = "53e621c7af755b5a17000002"
DEFAULT_APPLICATION_ID = "com.example.hello-myo"
DEFAULT_CONFIG_FILE = "bridge_config.json"

ENV_VARS = {
    "MYO_REST_HOST": "host",
    "MYO_REST_DEVICE_ID": "default_id",
    "MYO_SDK_PATH": "sdk_path",
}


@dataclass(frozen=True)
class BridgeConfig:
    host: str = DEFAULT_HOST
    default_id: str = DEFAULT_DEVICE_ID
    application_id: str = DEFAULT_APPLICATION_ID
    sdk_path: Optional[str] = None

    # Device search and polling
    find_timeout: float = 10.0
    poll_ms: int = 1000 // 20
    rssi_interval: Optional[float] = None

    # Forwarding behaviour
    forward_imu: bool = False
    legacy_rssi_tag: bool = False
    post_timeout: Optional[float] = None
    async_posts: bool = False
    queue_size: int = 64

    def device_url(self, device_id: str) -> str:
        return f"{self.host}/myo/{device_id}"

    def event_url(self, device_id: str) -> str:
        return f"{self.device_url(device_id)}/event"


# ── Loading ────────────────────────────────────────────────────────────────

def _field_names():
    return {f.name for f in fields(BridgeConfig)}


def _field_types():
    hints = get_type_hints(BridgeConfig)
    return {f.name: hints[f.name] for f in fields(BridgeConfig)}


def coerce_value(name, value, kind):
    """Check a file value against its field type. Numbers may be given as strings."""
    optional = type(None) in get_args(kind)
    if optional:
        kind = next(t for t in get_args(kind) if t is not type(None))
        if value is None:
            return None

    if kind is bool:
        if isinstance(value, bool):
            return value
    elif kind is str:
        if isinstance(value, str):
            return value
    elif kind in (int, float) and not isinstance(value, bool):
        try:
            return kind(value)
        except (TypeError, ValueError):
            pass
    raise ValueError(f"{name}: expected {kind.__name__}, got {value!r}")


def load_config_file(path: str) -> dict:
    """Read a JSON config file. Unknown keys are dropped, bad values rejected."""
    with open(path, "r") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object")
    types = _field_types()
    return {k: coerce_value(k, v, types[k]) for k, v in data.items() if k in types}


def config_from_env(environ=None) -> dict:
    environ = os.environ if environ is None else environ
    return {field: environ[var] for var, field in ENV_VARS.items() if environ.get(var)}


def config_from_args(args) -> dict:
    """Pick the flags that were actually given on the command line."""
    if args is None:
        return {}
    known = _field_names()
    return {
        k: v for k, v in vars(args).items()
        if k in known and v is not None and v is not False
    }


def load_config(path=None, environ=None, args=None) -> BridgeConfig:
    config = BridgeConfig()

    if path is None and os.path.exists(DEFAULT_CONFIG_FILE):
        path = DEFAULT_CONFIG_FILE
    if path is not None:
        try:
            config = replace(config, **load_config_file(path))
            print(f"Loaded config: {path}")
        except (OSError, ValueError) as e:
            print(f"Warning: Could not load config: {e}")

    config = replace(config, **config_from_env(environ))
    config = replace(config, **config_from_args(args))
    return config
