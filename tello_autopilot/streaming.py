"""
MJPEG stream publisher
Holds the latest JPEG and hands it to every connected viewer
"""

import threading

BOUNDARY = "frame"
MIMETYPE = f"multipart/x-mixed-replace; boundary={BOUNDARY}"


class StreamPublisher:

    def __init__(self):
        self._cond = threading.Condition()
        self._jpeg = None
        self._sequence = 0

    def publish(self, jpeg_bytes):
        with self._cond:
            self._jpeg = bytes(jpeg_bytes)
            self._sequence += 1
            self._cond.notify_all()

    def latest(self):
        with self._cond:
            return self._jpeg

    def wait_for_frame(self, last_sequence=0, timeout=None):
        """Block until a frame newer than last_sequence exists, returns (sequence, jpeg)"""
        with self._cond:
            self._cond.wait_for(lambda: self._sequence > last_sequence, timeout)
            return self._sequence, self._jpeg

    def frames(self, timeout=1.0):
        """Multipart chunks for a streaming HTTP response.

        When no new frame arrives within ``timeout`` the latest one is sent
        again, so a viewer that went away fails its write and the generator
        is closed instead of waiting forever.
        """
        sequence = 0
        while True:
            sequence, jpeg = self.wait_for_frame(sequence, timeout)
            if jpeg is None:
                continue
            yield (b"--" + BOUNDARY.encode() + b"\r\n"
                   b"Content-Type: image/jpeg\r\n"
                   b"Content-Length: " + str(len(jpeg)).encode() + b"\r\n\r\n" + jpeg + b"\r\n")
