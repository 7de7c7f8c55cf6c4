class BridgeError(Exception):
    """Base class for failures that stop the bridge during setup."""


class DeviceNotFoundError(BridgeError):
    """No armband was located within the search timeout."""


class BootstrapError(BridgeError):
    """The service did not hand back a usable device id."""
