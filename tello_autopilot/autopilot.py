"""
Face tracking autopilot
Video thread that turns detected faces into flight corrections
"""

import logging
import math
import threading
import time

import cv2
import numpy as np

from tello_autopilot.config import (
    FRAME_X, FRAME_Y, JPEG_QUALITY, ERROR_SLEEP,
    TRACK_X_THRESHOLD, TRACK_Y_THRESHOLD, TRACK_AREA_MAX_PERCENT, TRACK_AREA_MIN_PERCENT,
    TRACK_X_SPEED, TRACK_Y_SPEED, TRACK_DEPTH_SPEED,
)
from tello_autopilot.detection import annotate, choose_target
from tello_autopilot.flight import Direction
from tello_autopilot.video import ShortReadError

logger = logging.getLogger(__name__)


def round_half_away(value):
    return math.copysign(math.floor(abs(value) + 0.5), value)


def compute_corrections(box, frame_width=FRAME_X, frame_height=FRAME_Y):
    """Bang-bang corrections for one face box.

    Each threshold that fires yields its own fixed-size (direction, speed)
    command; an empty list means the face is centered and sized right.
    """
    x, y, w, h = box
    face_center_x = x + w // 2
    face_center_y = y + h // 2
    diff_x = frame_width // 2 - face_center_x
    diff_y = frame_height // 2 - face_center_y
    area_percent = round_half_away(w * h / (frame_width * frame_height) * 100)

    corrections = []
    if diff_x < -TRACK_X_THRESHOLD:
        corrections.append((Direction.RIGHT, TRACK_X_SPEED))
    if diff_x > TRACK_X_THRESHOLD:
        corrections.append((Direction.LEFT, TRACK_X_SPEED))
    if diff_y < -TRACK_Y_THRESHOLD:
        corrections.append((Direction.DOWN, TRACK_Y_SPEED))
    if diff_y > TRACK_Y_THRESHOLD:
        corrections.append((Direction.UP, TRACK_Y_SPEED))
    if area_percent > TRACK_AREA_MAX_PERCENT:
        corrections.append((Direction.BACKWARD, TRACK_DEPTH_SPEED))
    if area_percent < TRACK_AREA_MIN_PERCENT:
        corrections.append((Direction.FORWARD, TRACK_DEPTH_SPEED))
    return corrections


def decode_frame(buf, width=FRAME_X, height=FRAME_Y):
    """Raw bgr24 bytes to a writable image, None if the buffer is unusable"""
    if not buf or len(buf) != width * height * 3:
        return None
    return np.frombuffer(buf, dtype=np.uint8).reshape((height, width, 3)).copy()


def encode_jpeg(image, quality=JPEG_QUALITY):
    ok, buffer = cv2.imencode(".jpg", image, [int(cv2.IMWRITE_JPEG_QUALITY), quality])
    if not ok:
        return None
    return buffer.tobytes()


class AutopilotLoop:
    """Reads frames for the whole session and, while tracking, flies toward faces"""

    def __init__(self, state, driver, patrol, detector, source, publisher, snapshots,
                 frame_width=FRAME_X, frame_height=FRAME_Y):
        self.state = state
        self.driver = driver
        self.patrol = patrol
        self.detector = detector
        self.source = source
        self.publisher = publisher
        self.snapshots = snapshots
        self.frame_width = frame_width
        self.frame_height = frame_height
        self._stop = threading.Event()
        self._thread = None

    def start(self):
        self._thread = threading.Thread(target=self.run, daemon=True, name="Autopilot")
        self._thread.start()
        return self._thread

    def stop(self, timeout=2):
        self._stop.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout)

    @property
    def running(self):
        return self._thread is not None and self._thread.is_alive()

    def run(self):
        logger.info("📹 Autopilot loop started")
        while not self._stop.is_set():
            try:
                buf = self.source.read_frame()
            except ShortReadError as e:
                logger.warning("Frame read error: %s", e)
                time.sleep(ERROR_SLEEP)
                continue
            except Exception as e:
                logger.error("Critical frame read error: %s", e)
                time.sleep(ERROR_SLEEP)
                continue

            try:
                self.process_frame(buf)
            except Exception as e:
                logger.exception("Autopilot iteration error: %s", e)
                time.sleep(ERROR_SLEEP)
        logger.info("📹 Autopilot loop ended")

    def process_frame(self, buf):
        """One loop iteration for an already read frame. Returns the published JPEG or None."""
        image = decode_frame(buf, self.frame_width, self.frame_height)
        if image is None:
            return None

        if not self.state.tracking_enabled:
            return None

        # tracking takes priority over patrol
        self.patrol.stop_patrol()

        boxes = self.detector.detect(image)
        logger.debug("found %d faces", len(boxes))

        target = choose_target(boxes)
        if target is None:
            self.driver.hover()
        else:
            annotate(image, target)
            corrections = compute_corrections(target, self.frame_width, self.frame_height)
            for direction, speed in corrections:
                self.driver.move(direction, speed)
            if not corrections:
                self.driver.hover()

        jpeg = encode_jpeg(image)
        if jpeg is None:
            logger.warning("JPEG encode failed")
            return None

        self.snapshots.consume(jpeg)
        self.publisher.publish(jpeg)
        return jpeg
