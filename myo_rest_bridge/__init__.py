"""
Myo REST Bridge
Forwards Myo armband events to a REST service and draws a live console gauge.
"""

from .config import BridgeConfig, load_config
from .errors import BootstrapError, BridgeError, DeviceNotFoundError
from .forwarder import EventForwarder

__version__ = "0.2.0"

__all__ = [
    "BridgeConfig",
    "load_config",
    "BridgeError",
    "BootstrapError",
    "DeviceNotFoundError",
    "EventForwarder",
]
