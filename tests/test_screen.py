from specmatrix.core.events import EventBus
from specmatrix.core.state import BRIGHTNESS_UNKNOWN, ScreenSnapshot
from specmatrix.services.screen import ScreenMonitor


def test_geometry_read_once_and_brightness_polled():
    geometry_calls = []

    def geometry():
        geometry_calls.append(1)
        return ScreenSnapshot(width=400, height=800, scale=2.0, native_scale=2.0, refresh_rate=120)

    levels = iter([0.3, 0.6])
    monitor = ScreenMonitor(0.5, EventBus(), read_geometry=geometry, read_brightness=lambda: next(levels))
    monitor.load_geometry()
    monitor.sampler.sample_once()
    monitor.sampler.sample_once()
    assert geometry_calls == [1]
    assert monitor.latest.brightness == 0.6
    assert monitor.latest.resolution == "800 × 1600"
    assert monitor.latest.refresh_rate == 120


def test_geometry_failure_uses_default():
    def geometry():
        raise RuntimeError("no display")

    monitor = ScreenMonitor(0.5, EventBus(), read_geometry=geometry, read_brightness=lambda: BRIGHTNESS_UNKNOWN)
    assert monitor.load_geometry() == ScreenSnapshot()
    monitor.sampler.sample_once()
    assert monitor.latest.brightness_percent is None


def test_brightness_failure_keeps_geometry():
    def brightness():
        raise OSError("permission denied")

    monitor = ScreenMonitor(
        0.5,
        EventBus(),
        read_geometry=lambda: ScreenSnapshot(width=10, height=20),
        read_brightness=brightness,
    )
    monitor.load_geometry()
    monitor.sampler.sample_once()
    assert monitor.latest.width == 10
    assert monitor.latest.brightness == BRIGHTNESS_UNKNOWN
