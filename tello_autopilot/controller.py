"""
DroneManager
Owns the session and exposes the commands the web surface calls
"""

import logging

from tello_autopilot.autopilot import AutopilotLoop
from tello_autopilot.config import PATROL_INTERVAL, SNAPSHOTS_DIR, SNAPSHOT_TIMEOUT
from tello_autopilot.flight import Direction, FlipDirection, Rotation
from tello_autopilot.patrol import PatrolController
from tello_autopilot.shared_state import SessionState
from tello_autopilot.snapshot import SnapshotSynchronizer
from tello_autopilot.streaming import StreamPublisher

logger = logging.getLogger(__name__)


class DroneManager:
    """Public API of the flight session.

    Manual moves use the session speed; patrol, tracking and snapshots go
    through their own components so the right locks are taken.
    """

    def __init__(self, driver, state=None, snapshot_folder=SNAPSHOTS_DIR,
                 patrol_interval=PATROL_INTERVAL, snapshot_timeout=SNAPSHOT_TIMEOUT):
        self.driver = driver
        self.state = state or SessionState()
        self.stream = StreamPublisher()
        self.patrol = PatrolController(self.state, driver, patrol_interval)
        self.snapshots = SnapshotSynchronizer(self.state, snapshot_folder, snapshot_timeout)
        self.autopilot = None
        self.source = None

    def start_autopilot(self, source, detector):
        """Start the video loop, called once the drone connected and streams"""
        self.source = source
        self.autopilot = AutopilotLoop(
            self.state, self.driver, self.patrol, detector, source, self.stream, self.snapshots,
        )
        self.autopilot.start()
        return self.autopilot

    @property
    def speed(self):
        return self.state.speed

    def set_speed(self, value):
        speed = self.state.set_speed(value)
        logger.info("⚡ Speed set to: %d", speed)
        return speed

    # basic flight
    def take_off(self):
        return self.driver.take_off()

    def land(self):
        return self.driver.land()

    def hover(self):
        return self.driver.hover()

    def move(self, direction):
        return self.driver.move(direction, self.state.speed)

    def up(self):
        return self.move(Direction.UP)

    def down(self):
        return self.move(Direction.DOWN)

    def left(self):
        return self.move(Direction.LEFT)

    def right(self):
        return self.move(Direction.RIGHT)

    def forward(self):
        return self.move(Direction.FORWARD)

    def backward(self):
        return self.move(Direction.BACKWARD)

    def clockwise(self):
        return self.driver.rotate(Rotation.CLOCKWISE, self.state.speed)

    def counter_clockwise(self):
        return self.driver.rotate(Rotation.COUNTER_CLOCKWISE, self.state.speed)

    def cease_rotation(self):
        return self.driver.cease_rotation()

    def flip(self, direction):
        return self.driver.flip(FlipDirection(direction))

    def throw_take_off(self):
        return self.driver.throw_take_off()

    def bounce(self):
        return self.driver.bounce()

    # autonomous modes
    def start_patrol(self):
        return self.patrol.start_patrol()

    def stop_patrol(self):
        return self.patrol.stop_patrol()

    def enable_tracking(self):
        self.state.tracking_enabled = True
        logger.info("🤖 Face tracking: ON")

    def disable_tracking(self):
        self.state.tracking_enabled = False
        logger.info("🤖 Face tracking: OFF")
        return self.driver.hover()

    def take_snapshot(self):
        return self.snapshots.request()

    def status(self):
        status = self.state.status()
        status["autopilot_running"] = bool(self.autopilot and self.autopilot.running)
        return status

    def shutdown(self):
        logger.info("🛑 Shutting down drone manager")
        self.stop_patrol()
        self.patrol.join(timeout=2)
        if self.autopilot is not None:
            self.autopilot.stop()
        if self.source is not None:
            try:
                self.source.close()
            except Exception as e:
                logger.error("Video source close error: %s", e)
        self.driver.end()
