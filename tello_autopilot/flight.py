"""
Flight driver for the Tello
Wraps djitellopy with stick-style movement commands that never raise
"""

import logging
import threading
from enum import Enum

logger = logging.getLogger(__name__)


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    FORWARD = "forward"
    BACKWARD = "backward"


class Rotation(str, Enum):
    CLOCKWISE = "clockwise"
    COUNTER_CLOCKWISE = "counterClockwise"


class FlipDirection(str, Enum):
    FRONT = "front"
    LEFT = "left"
    RIGHT = "right"
    BACK = "back"


# (stick axis, sign) for each direction
_STICKS = {
    Direction.LEFT: ("left_right", -1),
    Direction.RIGHT: ("left_right", 1),
    Direction.BACKWARD: ("for_back", -1),
    Direction.FORWARD: ("for_back", 1),
    Direction.DOWN: ("up_down", -1),
    Direction.UP: ("up_down", 1),
}

_FLIPS = {
    FlipDirection.FRONT: "flip_forward",
    FlipDirection.BACK: "flip_back",
    FlipDirection.LEFT: "flip_left",
    FlipDirection.RIGHT: "flip_right",
}

# undocumented SDK command accepted by Tello firmware for hand launches
THROW_TAKEOFF_COMMAND = "throwfly"
BOUNCE_DISTANCE = 20  # cm, smallest distance the SDK accepts


class FlightDriver:
    """Movement primitives on top of a connected djitellopy Tello.

    Directional moves set one RC stick and keep the others, the way a
    joystick would, so corrections issued in the same frame combine.
    ``hover`` centers every stick. All commands are fire-and-forget:
    failures are logged and reported as ``False``, never raised.
    """

    def __init__(self, tello):
        self.tello = tello
        self._stick_lock = threading.Lock()
        self.left_right_velocity = 0
        self.for_back_velocity = 0
        self.up_down_velocity = 0
        self.yaw_velocity = 0

    def _send_rc(self):
        self.tello.send_rc_control(
            self.left_right_velocity,
            self.for_back_velocity,
            self.up_down_velocity,
            self.yaw_velocity,
        )

    def _call(self, action, func, *args):
        try:
            func(*args)
            return True
        except Exception as e:
            logger.error("ERROR: action=%s err=%s", action, e)
            return False

    def connect(self):
        return self._call("connect", self.tello.connect)

    def take_off(self):
        return self._call("takeoff", self.tello.takeoff)

    def land(self):
        return self._call("land", self.tello.land)

    def hover(self):
        with self._stick_lock:
            self.left_right_velocity = 0
            self.for_back_velocity = 0
            self.up_down_velocity = 0
            self.yaw_velocity = 0
            return self._call("hover", self._send_rc)

    def move(self, direction, speed):
        direction = Direction(direction)
        axis, sign = _STICKS[direction]
        with self._stick_lock:
            setattr(self, f"{axis}_velocity", sign * int(speed))
            return self._call(f"move {direction.value}", self._send_rc)

    def rotate(self, rotation, speed):
        rotation = Rotation(rotation)
        sign = 1 if rotation is Rotation.CLOCKWISE else -1
        with self._stick_lock:
            self.yaw_velocity = sign * int(speed)
            return self._call(f"rotate {rotation.value}", self._send_rc)

    def cease_rotation(self):
        with self._stick_lock:
            self.yaw_velocity = 0
            return self._call("ceaseRotation", self._send_rc)

    def flip(self, direction):
        direction = FlipDirection(direction)
        return self._call(f"flip {direction.value}", getattr(self.tello, _FLIPS[direction]))

    def throw_take_off(self):
        return self._call("throwTakeOff", self.tello.send_command_without_return, THROW_TAKEOFF_COMMAND)

    def bounce(self):
        """Short hop up and back down"""
        if not self._call("bounce up", self.tello.move_up, BOUNCE_DISTANCE):
            return False
        return self._call("bounce down", self.tello.move_down, BOUNCE_DISTANCE)

    def end(self):
        return self._call("end", self.tello.end)
