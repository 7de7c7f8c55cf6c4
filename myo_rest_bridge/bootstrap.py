"""Resolve the device id the service knows this armband by."""

import requests

from .config import BridgeConfig
from .errors import BootstrapError


def resolve_device_id(session, config: BridgeConfig) -> str:
    url = config.device_url(config.default_id)
    try:
        response = session.get(url, timeout=config.post_timeout)
    except requests.RequestException as e:
        raise BootstrapError(f"Could not reach {url}: {e}") from e

    print(f"Response : \n code={response.status_code}, body={response.text}")

    try:
        body = response.json()
    except ValueError as e:
        raise BootstrapError(f"Response from {url} is not JSON") from e

    device_id = body.get("_id") if isinstance(body, dict) else None
    if not isinstance(device_id, str) or not device_id:
        raise BootstrapError(f"Response from {url} has no '_id'")
    return device_id
