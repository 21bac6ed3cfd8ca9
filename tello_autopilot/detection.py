"""
Face detection for the tracking loop
OpenCV Haar cascade plus the target selection and annotation helpers
"""

import logging
import os

import cv2

from tello_autopilot.config import FACE_CASCADE_FILE

logger = logging.getLogger(__name__)

BOX_COLOR = (255, 0, 0)  # blue in BGR
BOX_THICKNESS = 3
LABEL_TEXT = "Human"


class DetectorLoadError(RuntimeError):
    """The cascade file could not be loaded"""


class FaceDetector:
    """Detects faces and returns (x, y, w, h) boxes in detector order"""

    def __init__(self, cascade_file=FACE_CASCADE_FILE):
        if not os.path.isabs(cascade_file) and not os.path.exists(cascade_file):
            cascade_file = os.path.join(cv2.data.haarcascades, cascade_file)

        self.classifier = cv2.CascadeClassifier()
        if not self.classifier.load(cascade_file):
            raise DetectorLoadError(f"failed to load cascade {cascade_file}")
        logger.info("Face cascade loaded: %s", cascade_file)

    def detect(self, image):
        gray = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
        rects = self.classifier.detectMultiScale(gray)
        return [tuple(int(v) for v in rect) for rect in rects]


def choose_target(boxes):
    """Pick the box to track: the first one the detector returned.

    Haar cascades return boxes in scan order, so this is not the largest
    or the most confident face.
    """
    if not boxes:
        return None
    return boxes[0]


def annotate(image, box, label=LABEL_TEXT):
    x, y, w, h = box
    cv2.rectangle(image, (x, y), (x + w, y + h), BOX_COLOR, BOX_THICKNESS)
    cv2.putText(image, label, (x + w, y - 5), cv2.FONT_HERSHEY_PLAIN, 1.2, BOX_COLOR, 2)
    return image
