"""
Event Forwarder
Turns each armband event into one form-encoded POST against the REST service
and keeps the display state up to date.

POSTs are fire-and-forget: the response is never inspected and failures are
only logged at DEBUG. By default they block the polling thread; with
async_posts they are handed to a single background sender instead.
"""

import logging
import threading
from queue import Empty, Full, Queue

import requests

from . import events
from .config import BridgeConfig
from .display import DisplayState
from .events import EventKind
from .orientation import orientation_gauges

log = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


# ── HTTP delivery ──────────────────────────────────────────────────────────

def post_form(session, url, body, timeout=None):
    """POST an encoded body and drop the outcome."""
    try:
        session.post(
            url,
            data=body.encode("utf-8"),
            headers={"Content-Type": FORM_CONTENT_TYPE},
            timeout=timeout,
        )
    except requests.RequestException as e:
        log.debug("POST %s failed: %s", url, e)


class BackgroundSender:
    """Bounded queue drained by one daemon thread. Oldest request goes on overflow."""

    def __init__(self, session, maxsize=64, timeout=None):
        self.session = session
        self.timeout = timeout
        self.queue = Queue(maxsize=maxsize)
        self.dropped = 0
        self.stop_event = threading.Event()
        self.thread = threading.Thread(target=self._run, name="event-sender", daemon=True)

    def start(self):
        self.thread.start()
        return self

    def submit(self, url, body):
        while True:
            try:
                self.queue.put_nowait((url, body))
                return
            except Full:
                try:
                    self.queue.get_nowait()
                    self.queue.task_done()
                    self.dropped += 1
                    log.debug("Send queue full, dropped oldest event")
                except Empty:
                    pass

    def _run(self):
        while not self.stop_event.is_set():
            try:
                url, body = self.queue.get(timeout=0.1)
            except Empty:
                continue
            try:
                post_form(self.session, url, body, self.timeout)
            finally:
                self.queue.task_done()

    def stop(self, drain=True):
        if drain and self.thread.is_alive():
            self.queue.join()
        self.stop_event.set()
        if self.thread.is_alive():
            self.thread.join(timeout=1.0)


# ── Forwarder ──────────────────────────────────────────────────────────────

class EventForwarder:
    """One handler per event kind. Unknown kinds never reach here."""

    def __init__(self, config: BridgeConfig, device_id: str, session=None, sender=None):
        self.config = config
        self.device_id = device_id
        self.session = session or requests.Session()
        self.sender = sender
        self.display = DisplayState()

    @property
    def event_url(self):
        return self.config.event_url(self.device_id)

    def send(self, record: dict):
        body = events.encode_form(record)
        if self.sender is not None:
            self.sender.submit(self.event_url, body)
        else:
            post_form(self.session, self.event_url, body, self.config.post_timeout)

    # Connection lifecycle

    def on_pair(self, device, timestamp, firmware):
        self.send(events.firmware_record(EventKind.PAIR, timestamp, firmware))

    def on_connect(self, device, timestamp, firmware):
        self.send(events.firmware_record(EventKind.CONNECT, timestamp, firmware))

    def on_disconnect(self, device, timestamp):
        self.display.on_arm = False
        self.send(events.base_record(EventKind.DISCONNECT, timestamp))

    # Arm

    def on_arm_recognized(self, device, timestamp, arm, x_direction):
        record = events.arm_recognized_record(timestamp, arm, x_direction)
        self.display.on_arm = True
        self.display.which_arm = record["arm"]
        self.send(record)

    def on_arm_lost(self, device, timestamp):
        self.display.on_arm = False
        self.send(events.base_record(EventKind.ARM_LOST, timestamp))

    # Motion

    def on_orientation_data(self, device, timestamp, x, y, z, w):
        roll_w, pitch_w, yaw_w = orientation_gauges(x, y, z, w)
        self.display.roll_w = roll_w
        self.display.pitch_w = pitch_w
        self.display.yaw_w = yaw_w
        self.send(events.orientation_record(timestamp, x, y, z, w))

    def on_pose(self, device, timestamp, pose: str):
        self.display.current_pose = pose
        if pose == "fist":
            device.vibrate("medium")
        self.send(events.pose_record(timestamp, pose))

    def on_accelerometer_data(self, device, timestamp, x, y, z):
        record = events.vector_record(EventKind.ACCELEROMETER, "accel", timestamp, x, y, z)
        if self.config.forward_imu:
            self.send(record)

    def on_gyroscope_data(self, device, timestamp, x, y, z):
        record = events.vector_record(EventKind.GYROSCOPE, "gyro", timestamp, x, y, z)
        if self.config.forward_imu:
            self.send(record)

    def on_rssi(self, device, timestamp, rssi):
        self.send(events.rssi_record(timestamp, rssi, legacy_tag=self.config.legacy_rssi_tag))
