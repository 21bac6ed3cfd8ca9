import logging

import pytest

from conftest import FakeTello
from tello_autopilot import initialization
from tello_autopilot.config import AppConfig
from tello_autopilot.initialization import (
    create_directories, initialize_drone_manager, initialize_tello, logging_settings,
)


@pytest.fixture
def snapshots_dir(tmp_path, monkeypatch):
    folder = tmp_path / "snapshots"
    monkeypatch.setattr(initialization, "SNAPSHOTS_DIR", str(folder))
    return folder


def test_logging_settings_writes_file(tmp_path):
    log_file = tmp_path / "gotello.log"
    root = logging.getLogger()
    before = list(root.handlers)
    try:
        logging_settings(str(log_file))
        logging.getLogger("tello_autopilot.test").info("action=test value=1")
        for handler in root.handlers:
            handler.flush()
    finally:
        for handler in root.handlers[len(before):]:
            root.removeHandler(handler)
            handler.close()
    assert "action=test value=1" in log_file.read_text()
    assert "test_initialization.py" in log_file.read_text()


def test_create_directories(tmp_path):
    target = tmp_path / "a" / "b"
    assert create_directories(str(target))
    assert target.is_dir()


def test_initialize_tello_starts_stream(fake_tello):
    assert initialize_tello(fake_tello)
    names = [call[0] for call in fake_tello.calls]
    assert names == ["connect", "get_battery", "streamoff", "streamon", "set_video_bitrate"]


def test_initialize_tello_failure():
    assert initialize_tello(FakeTello(fail={"connect"})) is False


def test_degraded_manager_when_drone_unreachable(snapshots_dir):
    tello = FakeTello(fail={"connect"})
    drone = initialize_drone_manager(AppConfig(), tello=tello)
    assert drone.autopilot is None
    assert snapshots_dir.is_dir()
    # manual commands still reach the driver
    assert drone.hover() is True


def test_manager_without_detector(snapshots_dir, monkeypatch):
    def broken_detector():
        raise RuntimeError("no cascade")

    monkeypatch.setattr(initialization, "FaceDetector", broken_detector)
    drone = initialize_drone_manager(AppConfig(), tello=FakeTello())
    assert drone.autopilot is None


def test_manager_starts_autopilot(snapshots_dir, monkeypatch):
    started = {}

    class FakeSource:
        def __init__(self, frame_read):
            started["frame_read"] = frame_read

    monkeypatch.setattr(initialization, "TelloFrameSource", FakeSource)
    monkeypatch.setattr(initialization.DroneManager, "start_autopilot",
                        lambda self, source, detector: started.update(source=source, detector=detector))
    tello = FakeTello()
    tello.frame_read = object()
    initialize_drone_manager(AppConfig(), tello=tello)

    assert started["frame_read"] is tello.frame_read
    assert isinstance(started["source"], FakeSource)
    assert started["detector"] is not None
