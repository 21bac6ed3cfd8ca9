"""
Autonomous patrol
Flies a square pattern on a fixed tick until cancelled
"""

import logging
import threading
from enum import Enum

from tello_autopilot.config import PATROL_INTERVAL
from tello_autopilot.flight import Direction

logger = logging.getLogger(__name__)

# One leg per tick, the final None step only hovers before the cycle restarts
PATROL_STEPS = (Direction.FORWARD, Direction.RIGHT, Direction.BACKWARD, Direction.LEFT, None)


class PatrolCommand(Enum):
    START = "start"
    STOP = "stop"


class PatrolController:
    """Runs at most one patrol worker at a time.

    ``state.patrolling`` is what callers see; ``state.patrol_lock`` is what
    keeps two workers from flying at once. A worker started right after a
    stop waits on the lock until the previous worker has left.
    """

    def __init__(self, state, driver, interval=PATROL_INTERVAL):
        self.state = state
        self.driver = driver
        self.interval = interval
        self._worker = None

    def start_patrol(self):
        return self.submit(PatrolCommand.START)

    def stop_patrol(self):
        return self.submit(PatrolCommand.STOP)

    def submit(self, command):
        """Apply a START or STOP command, returns False when it was a no-op"""
        command = PatrolCommand(command)
        with self.state.lock:
            if command is PatrolCommand.START:
                if self.state.patrolling:
                    return False
                cancel = threading.Event()
                self.state.patrol_cancel = cancel
                self.state.patrolling = True
                self._worker = threading.Thread(target=self._run, args=(cancel,), daemon=True, name="Patrol")
                self._worker.start()
                logger.info("🚁 Patrol started")
                return True

            if not self.state.patrolling:
                return False
            self.state.patrol_cancel.set()
            self.state.patrolling = False
            logger.info("🛑 Patrol stop requested")
            return True

    def join(self, timeout=None):
        worker = self._worker
        if worker is not None:
            worker.join(timeout)

    def _run(self, cancel):
        with self.state.patrol_lock:
            if cancel.is_set():
                return
            try:
                step = 0
                # wait() doubles as the ticker and returns True once cancelled
                while not cancel.wait(self.interval):
                    self._tick(step)
                    step = (step + 1) % len(PATROL_STEPS)
                self.driver.hover()
            except Exception as e:
                logger.error("Patrol error: %s", e)
            finally:
                with self.state.lock:
                    if self.state.patrol_cancel is cancel:
                        self.state.patrolling = False
        logger.info("Patrol worker ended")

    def _tick(self, step):
        self.driver.hover()
        direction = PATROL_STEPS[step]
        if direction is not None:
            self.driver.move(direction, self.state.speed)
