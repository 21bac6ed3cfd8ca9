"""
System initialization functions
Handles logging, directories, the Tello connection and the autopilot startup
"""

import logging
import os
import sys
import time

from djitellopy import Tello

from tello_autopilot.config import SNAPSHOTS_DIR
from tello_autopilot.controller import DroneManager
from tello_autopilot.detection import FaceDetector
from tello_autopilot.flight import FlightDriver
from tello_autopilot.video import FfmpegFrameSource, TelloFrameSource

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(filename)s:%(lineno)d %(message)s"
LOG_DATE_FORMAT = "%Y/%m/%d %H:%M:%S"


def logging_settings(log_file, level=logging.INFO):
    """Send log records to the terminal and append them to log_file"""
    root = logging.getLogger()
    root.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT)

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="a", encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)


def create_directories(*directories):
    """Create necessary directories"""
    try:
        for directory in directories:
            if not os.path.exists(directory):
                os.makedirs(directory)
                logger.info("Created directory: %s", directory)
        return True
    except OSError as e:
        logger.error("Failed to create directories: %s", e)
        return False


def initialize_tello(tello):
    """Connect to the drone and start its video stream"""
    try:
        tello.connect()
        logger.info("Connected to your Drone, battery: %s%%", tello.get_battery())

        tello.streamoff()
        time.sleep(0.5)
        tello.streamon()
        tello.set_video_bitrate(Tello.BITRATE_AUTO)
        return True
    except Exception as e:
        logger.error("ERROR: Failed to connect to Tello: %s", e)
        return False


def initialize_video_source(tello, kind):
    if kind == "ffmpeg":
        return FfmpegFrameSource()
    return TelloFrameSource(tello.get_frame_read())


def initialize_drone_manager(config, tello=None):
    """Build the DroneManager and start the autopilot when the drone is reachable.

    Startup faults after the manager exists leave it running without the
    autopilot so manual commands and the web pages keep working.
    """
    tello = tello or Tello()
    manager = DroneManager(FlightDriver(tello))

    if not create_directories(SNAPSHOTS_DIR):
        return manager

    if not initialize_tello(tello):
        logger.error("Drone not ready, running without autopilot")
        return manager

    try:
        detector = FaceDetector()
    except Exception as e:
        logger.error("ERROR: face detector: %s", e)
        return manager

    try:
        source = initialize_video_source(tello, config.video_source)
    except Exception as e:
        logger.error("ERROR: video source %s: %s", config.video_source, e)
        return manager

    manager.start_autopilot(source, detector)
    logger.info("✅ All systems initialized successfully!")
    return manager
