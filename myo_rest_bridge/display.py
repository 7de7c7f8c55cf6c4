"""
Console gauge.

    [*********         ][*********         ][*********         ][L][fist          ]

Three bars for roll, pitch and yaw, then the arm and pose once the armband
knows which arm it is on.
"""

import sys

from .events import ARMS
from .orientation import GAUGE_STEPS

POSE_FIELD_WIDTH = 14


class DisplayState:
    """Last orientation, arm and pose seen. Written by the forwarder only."""

    def __init__(self):
        self.roll_w = 0
        self.pitch_w = 0
        self.yaw_w = 0
        self.on_arm = False
        self.which_arm = ARMS[-1]
        self.current_pose = "unknown"


def _bar(level):
    level = max(0, min(GAUGE_STEPS, level))
    return "[" + "*" * level + " " * (GAUGE_STEPS - level) + "]"


def render(state: DisplayState) -> str:
    line = "\r" + _bar(state.roll_w) + _bar(state.pitch_w) + _bar(state.yaw_w)

    if state.on_arm:
        side = "L" if state.which_arm == "armLeft" else "R"
        pose = state.current_pose.ljust(POSE_FIELD_WIDTH)
        line += f"[{side}][{pose}]"
    else:
        line += "[?][" + " " * POSE_FIELD_WIDTH + "]"

    return line


def draw(state: DisplayState, stream=None):
    stream = stream or sys.stdout
    stream.write(render(state))
    stream.flush()
