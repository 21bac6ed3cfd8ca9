import threading

from tello_autopilot.streaming import StreamPublisher


def test_latest_frame():
    publisher = StreamPublisher()
    assert publisher.latest() is None
    publisher.publish(b"one")
    publisher.publish(b"two")
    assert publisher.latest() == b"two"


def test_frames_yields_multipart_chunks():
    publisher = StreamPublisher()
    publisher.publish(b"\xff\xd8jpeg")
    chunk = next(publisher.frames(timeout=0.1))
    assert chunk.startswith(b"--frame\r\nContent-Type: image/jpeg\r\n")
    assert chunk.endswith(b"\r\n\r\n\xff\xd8jpeg\r\n")


def test_viewer_waits_for_next_frame():
    publisher = StreamPublisher()
    frames = publisher.frames(timeout=0.05)
    timer = threading.Timer(0.1, publisher.publish, args=(b"late",))
    timer.start()
    chunk = next(frames)
    timer.join()
    assert b"late" in chunk


def test_idle_stream_resends_latest_frame():
    publisher = StreamPublisher()
    publisher.publish(b"still")
    frames = publisher.frames(timeout=0.05)
    first = next(frames)
    second = next(frames)
    assert second == first
    assert b"still" in second
