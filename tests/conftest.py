import threading
import time

import pytest

from tello_autopilot.config import FRAME_SIZE
from tello_autopilot.flight import Direction
from tello_autopilot.shared_state import SessionState
from tello_autopilot.video import ShortReadError


class RecordingDriver:
    """Stands in for FlightDriver and records every command it gets"""

    def __init__(self):
        self._lock = threading.Lock()
        self.commands = []

    def _record(self, *command):
        with self._lock:
            self.commands.append(command)
        return True

    def history(self):
        with self._lock:
            return list(self.commands)

    def hover(self):
        return self._record("hover")

    def move(self, direction, speed):
        return self._record(Direction(direction).value, speed)

    def rotate(self, rotation, speed):
        return self._record("rotate", str(rotation.value), speed)

    def cease_rotation(self):
        return self._record("ceaseRotation")

    def take_off(self):
        return self._record("takeOff")

    def land(self):
        return self._record("land")

    def flip(self, direction):
        return self._record("flip", direction.value)

    def throw_take_off(self):
        return self._record("throwTakeOff")

    def bounce(self):
        return self._record("bounce")

    def end(self):
        return self._record("end")


class ScriptedDetector:
    def __init__(self, boxes=()):
        self.boxes = list(boxes)
        self.calls = 0

    def detect(self, image):
        self.calls += 1
        return list(self.boxes)


class ListFrameSource:
    """Hands out the given frames, then reports short reads"""

    def __init__(self, frames):
        self.frames = list(frames)
        self.exhausted = threading.Event()
        self.closed = False

    def read_frame(self):
        if not self.frames:
            self.exhausted.set()
            raise ShortReadError("no more frames")
        frame = self.frames.pop(0)
        if isinstance(frame, Exception):
            raise frame
        return frame

    def close(self):
        self.closed = True


class FakeTello:
    """Records djitellopy calls, optionally failing some of them"""

    BITRATE_AUTO = 0

    def __init__(self, fail=()):
        self.calls = []
        self.fail = set(fail)
        self.frame_read = None

    def _call(self, name, *args):
        self.calls.append((name,) + args)
        if name in self.fail:
            raise Exception(f"{name} failed")

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)
        return lambda *args: self._call(name, *args)

    def get_battery(self):
        self._call("get_battery")
        return 87

    def get_frame_read(self):
        self._call("get_frame_read")
        return self.frame_read


def wait_until(predicate, timeout=5.0, interval=0.005):
    deadline = time.time() + timeout
    while time.time() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


def blank_frame():
    return bytes(FRAME_SIZE)


@pytest.fixture
def state():
    return SessionState()


@pytest.fixture
def driver():
    return RecordingDriver()


@pytest.fixture
def fake_tello():
    return FakeTello()
