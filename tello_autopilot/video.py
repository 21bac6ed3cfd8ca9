"""
Raw video frame sources
Every source hands out BGR frames of exactly FRAME_SIZE bytes
"""

import logging
import subprocess
import time

import cv2

from tello_autopilot.config import FRAME_X, FRAME_Y, FRAME_SIZE, VIDEO_THREAD_SLEEP

logger = logging.getLogger(__name__)

TELLO_VIDEO_URL = "udp://0.0.0.0:11111"


class ShortReadError(IOError):
    """A frame read returned fewer bytes than a full frame"""


class RawFrameSource:
    """Reads fixed-size bgr24 frames from a binary stream (pipe or file)"""

    def __init__(self, stream, frame_size=FRAME_SIZE):
        self.stream = stream
        self.frame_size = frame_size

    def read_frame(self):
        buf = bytearray()
        while len(buf) < self.frame_size:
            chunk = self.stream.read(self.frame_size - len(buf))
            if not chunk:
                raise ShortReadError(f"short frame read: got {len(buf)} of {self.frame_size} bytes")
            buf.extend(chunk)
        return bytes(buf)

    def close(self):
        self.stream.close()


class FfmpegFrameSource(RawFrameSource):
    """Decodes the Tello UDP stream with an ffmpeg subprocess into raw frames"""

    def __init__(self, url=TELLO_VIDEO_URL, width=FRAME_X, height=FRAME_Y):
        self.process = subprocess.Popen(
            [
                "ffmpeg", "-hwaccel", "auto", "-i", url,
                "-pix_fmt", "bgr24", "-s", f"{width}x{height}",
                "-f", "rawvideo", "pipe:1",
            ],
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
        )
        super().__init__(self.process.stdout, width * height * 3)

    def close(self):
        # Stop ffmpeg first, a reader blocked on the pipe holds its lock until EOF
        self.process.terminate()
        try:
            self.process.wait(timeout=2)
        except subprocess.TimeoutExpired:
            self.process.kill()
            self.process.wait()
        super().close()


class TelloFrameSource:
    """Reads frames from djitellopy's background decoder"""

    def __init__(self, frame_read, width=FRAME_X, height=FRAME_Y, interval=VIDEO_THREAD_SLEEP):
        self.frame_read = frame_read
        self.width = width
        self.height = height
        self.interval = interval
        self.frame_size = width * height * 3

    def read_frame(self):
        # djitellopy keeps only the latest frame, pace reads to the stream rate
        time.sleep(self.interval)
        if self.frame_read.stopped:
            raise ShortReadError("frame reader stopped")

        frame = self.frame_read.frame
        if frame is None:
            raise ShortReadError("no frame decoded yet")

        # djitellopy decodes to RGB
        frame = cv2.cvtColor(frame, cv2.COLOR_RGB2BGR)
        frame = cv2.resize(frame, (self.width, self.height))
        buf = frame.tobytes()
        if len(buf) != self.frame_size:
            raise ShortReadError(f"short frame read: got {len(buf)} of {self.frame_size} bytes")
        return buf

    def close(self):
        self.frame_read.stop()
