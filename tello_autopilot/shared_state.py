"""
Shared state management for thread-safe communication
The session record read and written by the web, patrol and autopilot threads
"""

import threading

from tello_autopilot.config import DEFAULT_SPEED, MIN_SPEED, MAX_SPEED


def parse_speed(value, default=DEFAULT_SPEED):
    """Convert a raw speed value, falling back to the default when invalid"""
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def clamp_speed(speed):
    return max(MIN_SPEED, min(MAX_SPEED, speed))


class SessionState:
    """Single shared record for the flight session, guarded by one lock"""

    def __init__(self, speed=DEFAULT_SPEED):
        # One mutex for the whole record, re-entrant so compound operations
        # can call the accessors below while holding it
        self.lock = threading.RLock()
        # Notified whenever snapshot_pending is cleared
        self.changed = threading.Condition(self.lock)

        self._speed = clamp_speed(speed)
        self._patrolling = False
        self._tracking_enabled = False
        self._snapshot_pending = False
        # Snapshot request ids: latest asked for, being written, last written
        self._snapshot_requested = 0
        self._snapshot_writing = 0
        self._snapshot_written = 0

        # At most one patrol worker inside its tick section
        self.patrol_lock = threading.Lock()
        self.patrol_cancel = None

    @property
    def speed(self):
        with self.lock:
            return self._speed

    def set_speed(self, value):
        """Set the manual/patrol speed from raw input and return the stored value"""
        with self.lock:
            self._speed = clamp_speed(parse_speed(value))
            return self._speed

    @property
    def patrolling(self):
        with self.lock:
            return self._patrolling

    @patrolling.setter
    def patrolling(self, value):
        with self.lock:
            self._patrolling = bool(value)

    @property
    def tracking_enabled(self):
        with self.lock:
            return self._tracking_enabled

    @tracking_enabled.setter
    def tracking_enabled(self, value):
        with self.lock:
            self._tracking_enabled = bool(value)

    @property
    def snapshot_pending(self):
        with self.lock:
            return self._snapshot_pending

    @snapshot_pending.setter
    def snapshot_pending(self, value):
        with self.lock:
            self._snapshot_pending = bool(value)
            if not self._snapshot_pending:
                self.changed.notify_all()

    def request_snapshot(self):
        """Register a snapshot request and return its id"""
        with self.lock:
            self._snapshot_requested += 1
            self._snapshot_pending = True
            return self._snapshot_requested

    def claim_snapshot(self):
        """Take the pending request for writing, returns its id or None"""
        with self.lock:
            if not self._snapshot_pending:
                return None
            self._snapshot_pending = False
            self._snapshot_writing = self._snapshot_requested
            return self._snapshot_writing

    def finish_snapshot(self, request_id):
        with self.lock:
            self._snapshot_written = max(self._snapshot_written, request_id)
            if self._snapshot_writing == request_id:
                self._snapshot_writing = 0
            self.changed.notify_all()

    def snapshot_written(self, request_id):
        with self.lock:
            return self._snapshot_written >= request_id

    def snapshot_claimed(self, request_id):
        with self.lock:
            return self._snapshot_writing >= request_id

    def withdraw_snapshot(self, request_id):
        """Drop a request nobody claimed, unless a newer one replaced it"""
        with self.lock:
            if self._snapshot_requested == request_id and self._snapshot_writing < request_id:
                self._snapshot_pending = False

    def status(self):
        """Get a consistent copy of the session flags"""
        with self.lock:
            return {
                "speed": self._speed,
                "patrolling": self._patrolling,
                "tracking_enabled": self._tracking_enabled,
                "snapshot_pending": self._snapshot_pending,
            }
