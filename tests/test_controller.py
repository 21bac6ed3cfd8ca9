from conftest import ListFrameSource, ScriptedDetector, blank_frame, wait_until
from tello_autopilot.controller import DroneManager
from tello_autopilot.flight import FlipDirection


def make_manager(driver, tmp_path, **kwargs):
    kwargs.setdefault("patrol_interval", 0.01)
    return DroneManager(driver, snapshot_folder=str(tmp_path), **kwargs)


def test_manual_moves_use_session_speed(driver, tmp_path):
    drone = make_manager(driver, tmp_path)
    drone.set_speed("35")
    drone.forward()
    drone.left()
    drone.up()
    drone.clockwise()
    assert driver.history() == [("forward", 35), ("left", 35), ("up", 35), ("rotate", "clockwise", 35)]


def test_flip_and_basic_commands(driver, tmp_path):
    drone = make_manager(driver, tmp_path)
    drone.take_off()
    drone.flip("front")
    drone.flip(FlipDirection.BACK)
    drone.land()
    assert driver.history() == [("takeOff",), ("flip", "front"), ("flip", "back"), ("land",)]


def test_disable_tracking_always_hovers(driver, tmp_path):
    drone = make_manager(driver, tmp_path)
    drone.enable_tracking()
    drone.disable_tracking()
    drone.disable_tracking()
    drone.disable_tracking()
    assert not drone.state.tracking_enabled
    assert driver.history() == [("hover",)] * 3


def test_patrol_start_stop(driver, tmp_path):
    drone = make_manager(driver, tmp_path)
    assert drone.start_patrol()
    assert not drone.start_patrol()
    assert drone.status()["patrolling"]
    assert drone.stop_patrol()
    assert not drone.stop_patrol()
    drone.patrol.join(timeout=2)
    assert not drone.status()["patrolling"]


def test_snapshot_times_out_without_autopilot(driver, tmp_path):
    drone = make_manager(driver, tmp_path, snapshot_timeout=0.05)
    assert drone.take_snapshot() is False
    assert not drone.state.snapshot_pending


def test_tracking_preempts_patrol_through_autopilot(driver, tmp_path):
    drone = make_manager(driver, tmp_path)
    source = ListFrameSource([])
    drone.start_patrol()
    assert wait_until(lambda: len(driver.history()) >= 2)

    drone.enable_tracking()
    source.frames.append(blank_frame())
    drone.start_autopilot(source, ScriptedDetector([]))
    assert wait_until(source.exhausted.is_set)
    assert wait_until(lambda: not drone.state.patrolling)
    assert drone.status()["autopilot_running"]

    drone.shutdown()
    assert source.closed
    assert not drone.status()["autopilot_running"]
    assert driver.history()[-1] == ("end",)
