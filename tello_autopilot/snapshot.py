"""
Snapshot management
A web request asks for a still, the autopilot loop writes it and signals back
"""

import logging
import os
from datetime import datetime

from tello_autopilot.config import SNAPSHOTS_DIR, SNAPSHOT_FILENAME, SNAPSHOT_FILE_MODE, SNAPSHOT_TIMEOUT

logger = logging.getLogger(__name__)


def snapshot_paths(folder, now=None):
    """Timestamped backup path and the fixed latest-snapshot path"""
    now = now or datetime.now().astimezone()
    timestamp = now.isoformat(timespec="seconds")
    return os.path.join(folder, f"{timestamp}.jpg"), os.path.join(folder, SNAPSHOT_FILENAME)


def write_image(path, data):
    with open(path, "wb") as f:
        f.write(data)
    os.chmod(path, SNAPSHOT_FILE_MODE)


class SnapshotSynchronizer:
    """Request/consume handshake around ``state.snapshot_pending``"""

    def __init__(self, state, folder=SNAPSHOTS_DIR, timeout=SNAPSHOT_TIMEOUT):
        self.state = state
        self.folder = folder
        self.timeout = timeout

    @property
    def pending(self):
        return self.state.snapshot_pending

    def request(self, timeout=None):
        """Ask for a snapshot and block until it is written or the timeout passes.

        Returns True when the loop wrote the image. A request the loop has
        not picked up by the timeout is withdrawn so a later frame does not
        write a stale snapshot; one already being written is waited for.
        """
        timeout = self.timeout if timeout is None else timeout
        with self.state.changed:
            request_id = self.state.request_snapshot()
            if self.state.changed.wait_for(lambda: self.state.snapshot_written(request_id), timeout):
                return True

            if self.state.snapshot_claimed(request_id):
                # consume() always finishes a claimed request, even on a failed write
                return self.state.changed.wait_for(lambda: self.state.snapshot_written(request_id))

            self.state.withdraw_snapshot(request_id)
            logger.warning("Snapshot request timed out after %.1fs", timeout)
            return False

    def consume(self, jpeg_bytes):
        """Write the frame if a snapshot is pending. Returns True if written."""
        request_id = self.state.claim_snapshot()
        if request_id is None:
            return False

        written = True
        try:
            for path in snapshot_paths(self.folder):
                try:
                    write_image(path, jpeg_bytes)
                except OSError as e:
                    logger.error("ERROR: snapshot write path=%s err=%s", path, e)
                    written = False
                else:
                    logger.info("📸 Snapshot saved: %s", path)
        finally:
            self.state.finish_snapshot(request_id)
        return written
