#!/usr/bin/env python3
"""
Myo REST Bridge
Forwards every armband event to the REST service as a form POST.

  Setup: GET {host}/myo/{id} to resolve the device id, then wait up to 10s
         for an armband.
  Main:  run the hub in 50ms slices (20Hz), redraw the console gauge.

Usage:
    python -m myo_rest_bridge --host http://localhost:3000
    python -m myo_rest_bridge --forward-imu --async-posts -v
"""

from __future__ import annotations

import argparse
import logging
import sys
import time as _time
from functools import partial

import requests

from .bootstrap import resolve_device_id
from .config import load_config
from .display import draw
from .forwarder import BackgroundSender, EventForwarder
from .hub import dispatch, open_hub, wait_for_myo


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Forward Myo armband events to a REST service")
    parser.add_argument("--config", help="JSON config file (default: ./bridge_config.json if present)")
    parser.add_argument("--host", help="Service base URL, e.g. http://localhost:3000")
    parser.add_argument("--device-id", dest="default_id", help="Device id used for the bootstrap lookup")
    parser.add_argument("--sdk-path", dest="sdk_path", help="Directory of the Myo SDK native library")
    parser.add_argument("--forward-imu", action="store_true", help="Also POST accelerometer and gyroscope samples")
    parser.add_argument(
        "--legacy-rssi-tag",
        action="store_true",
        help="Tag RSSI events as onGyroscopeData like older clients did",
    )
    parser.add_argument("--async-posts", action="store_true", help="Send POSTs from a background thread")
    parser.add_argument("--rssi-interval", type=float, help="Request an RSSI reading every N seconds")
    parser.add_argument("--post-timeout", type=float, help="Timeout in seconds for HTTP requests")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def run(config, session) -> None:
    device_id = resolve_device_id(session, config)

    sender = None
    if config.async_posts:
        sender = BackgroundSender(session, maxsize=config.queue_size, timeout=config.post_timeout).start()
    try:
        forwarder = EventForwarder(config, device_id, session=session, sender=sender)
        handler = partial(dispatch, forwarder)

        hub = open_hub(config)
        print("Attempting to find a Myo...")
        device = wait_for_myo(hub, handler, timeout=config.find_timeout, poll_ms=config.poll_ms)
        print("Connected to a Myo armband!\n")

        last_rssi = 0.0
        while True:
            if config.rssi_interval and _time.monotonic() - last_rssi >= config.rssi_interval:
                device.request_rssi()
                last_rssi = _time.monotonic()
            hub.run(handler, config.poll_ms)
            draw(forwarder.display)
    finally:
        if sender is not None:
            sender.stop(drain=False)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    print("=" * 60)
    print("MYO REST BRIDGE")
    print("=" * 60)

    try:
        config = load_config(path=args.config, args=args)
        print(f"Service:   {config.host}")
        print(f"Lookup id: {config.default_id}")
        print("-" * 60)
        with requests.Session() as session:
            run(config, session)
    except KeyboardInterrupt:
        print("\n\nStopped")
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        print("Press enter to continue.", end="", file=sys.stderr, flush=True)
        try:
            input()
        except (EOFError, KeyboardInterrupt):
            pass
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
