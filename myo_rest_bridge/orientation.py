"""Quaternion to Euler angles, and angles to the 0-18 display scale."""

import math

import numpy as np

GAUGE_STEPS = 18


def quaternion_to_euler(x, y, z, w):
    """Roll, pitch, yaw in radians from a unit quaternion."""
    roll = np.arctan2(2.0 * (w * x + y * z), 1.0 - 2.0 * (x * x + y * y))
    # Rounding can push the sine just past +-1
    pitch = np.arcsin(np.clip(2.0 * (w * y - z * x), -1.0, 1.0))
    yaw = np.arctan2(2.0 * (w * z + x * y), 1.0 - 2.0 * (y * y + z * z))
    return float(roll), float(pitch), float(yaw)


def full_turn_gauge(angle):
    """[-pi, pi] -> [0, 18]. Only exactly pi reaches 18."""
    return int(math.floor((angle + math.pi) / (math.pi * 2.0) * GAUGE_STEPS))


def half_turn_gauge(angle):
    """[-pi/2, pi/2] -> [0, 18]."""
    return int(math.floor((angle + math.pi / 2.0) / math.pi * GAUGE_STEPS))


def orientation_gauges(x, y, z, w):
    roll, pitch, yaw = quaternion_to_euler(x, y, z, w)
    return full_turn_gauge(roll), half_turn_gauge(pitch), full_turn_gauge(yaw)
