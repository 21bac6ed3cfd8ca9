"""
Configuration settings for the Tello autopilot
Constants live here, deployment settings come from config.ini
"""

import configparser
import os
from dataclasses import dataclass

# Video frame settings (960x720 stream scaled down by 3)
FRAME_X = 960 // 3
FRAME_Y = 720 // 3
FRAME_CENTER_X = FRAME_X // 2
FRAME_CENTER_Y = FRAME_Y // 2
FRAME_AREA = FRAME_X * FRAME_Y
FRAME_SIZE = FRAME_AREA * 3
JPEG_QUALITY = 90

# Drone control settings
DEFAULT_SPEED = 10
MIN_SPEED = 10
MAX_SPEED = 100

# Patrol settings
PATROL_INTERVAL = 3.0  # seconds between patrol ticks

# Face tracking thresholds (pixels / percent of frame)
TRACK_X_THRESHOLD = 20
TRACK_Y_THRESHOLD = 30
TRACK_AREA_MAX_PERCENT = 7.0
TRACK_AREA_MIN_PERCENT = 0.9

# Face tracking correction magnitudes
TRACK_X_SPEED = 15
TRACK_Y_SPEED = 25
TRACK_DEPTH_SPEED = 10

# Snapshot settings
SNAPSHOT_TIMEOUT = 3.0
SNAPSHOTS_DIR = os.path.join("static", "img", "snapshots")
SNAPSHOT_FILENAME = "snapshot.jpg"
SNAPSHOT_FILE_MODE = 0o644

# Detection settings
FACE_CASCADE_FILE = "haarcascade_frontalface_default.xml"

# Thread timing
VIDEO_THREAD_SLEEP = 1 / 30
ERROR_SLEEP = 0.1

# Web settings
STATIC_DIR = "static"
CONFIG_FILE = "config.ini"

# Video source choices
VIDEO_SOURCES = ("djitellopy", "ffmpeg")


class ConfigError(Exception):
    """Raised when config.ini is missing or malformed"""


@dataclass
class AppConfig:
    log_file: str = "gotello.log"
    address: str = "0.0.0.0"
    port: int = 8080
    video_source: str = "djitellopy"


def load_config(path=CONFIG_FILE):
    """Read config.ini into an AppConfig"""
    parser = configparser.ConfigParser()
    try:
        read_ok = parser.read(path)
    except configparser.Error as e:
        raise ConfigError(f"Failed to parse {path}: {e}") from e
    if not read_ok:
        raise ConfigError(f"Failed to read file: {path}")

    defaults = AppConfig()
    try:
        config = AppConfig(
            log_file=parser.get("gotello", "log_file", fallback=defaults.log_file),
            address=parser.get("web", "address", fallback=defaults.address),
            port=parser.getint("web", "port", fallback=defaults.port),
            video_source=parser.get("video", "source", fallback=defaults.video_source),
        )
    except ValueError as e:
        raise ConfigError(f"Invalid value in {path}: {e}") from e

    if config.video_source not in VIDEO_SOURCES:
        raise ConfigError(f"Unknown video source {config.video_source!r}, expected one of {VIDEO_SOURCES}")
    return config
