import json
import threading

import pytest

from specmatrix.config import load_settings
from specmatrix.core.app import build_context
from specmatrix.core.events import EventBus
from specmatrix.services.settings_store import SECTIONS, SettingsStore, VisibilityFlags


@pytest.fixture
def store(tmp_path):
    return SettingsStore(tmp_path / "config" / "preferences.json")


def test_defaults_are_all_visible(store):
    flags = store.load()
    assert flags == VisibilityFlags()
    assert all(flags.is_visible(section) for section in SECTIONS)


def test_round_trip(store):
    flags = VisibilityFlags(show_battery=False, show_camera=False)
    store.save(flags)
    assert store.load() == flags


def test_stored_under_fixed_key_with_camel_case(store):
    store.save(VisibilityFlags(show_gpu=False))
    data = json.loads(store.path.read_text())
    assert data["displaySettings"]["showGpu"] is False
    assert data["displaySettings"]["showBattery"] is True


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        "[]",
        '{"displaySettings": "AAEC"}',
        '{"displaySettings": {"showBattery": "maybe"}}',
        '{"displaySettings": {"showBattery": 3}}',
        "",
    ],
)
def test_corrupt_storage_yields_defaults(store, content):
    store.path.parent.mkdir(parents=True, exist_ok=True)
    store.path.write_text(content)
    assert store.load() == VisibilityFlags()


def test_partial_and_unknown_keys(store):
    store.path.parent.mkdir(parents=True, exist_ok=True)
    store.path.write_text(json.dumps({"displaySettings": {"showCpu": False, "showToaster": True}}))
    flags = store.load()
    assert flags.show_cpu is False
    assert flags.show_memory is True


def test_mutations_persist_immediately(store):
    store.set_flag("network", False)
    assert store.load().show_network is False
    store.toggle("network")
    assert store.load().show_network is True
    store.hide_all()
    assert not any(store.load().is_visible(section) for section in SECTIONS)
    store.show_all()
    assert store.load() == VisibilityFlags()


def test_mutation_emits_settings_changed(tmp_path):
    bus = EventBus()
    received = []
    bus.subscribe("settings.changed", received.append)
    store = SettingsStore(tmp_path / "preferences.json", bus)
    store.set_flag("camera", False)
    assert received == [VisibilityFlags(show_camera=False)]


def test_unknown_section_raises(store):
    with pytest.raises(KeyError):
        store.set_flag("toaster", True)


def test_flags_and_theme_share_the_file(store):
    store.save(VisibilityFlags(show_storage=False))
    assert store.save_theme("dark") == "Dark"
    assert store.load().show_storage is False
    assert store.load_theme() == "Dark"


def test_theme_defaults_and_validation(store):
    assert store.load_theme() == "System"
    with pytest.raises(ValueError):
        store.save_theme("neon")
    store.path.parent.mkdir(parents=True, exist_ok=True)
    store.path.write_text(json.dumps({"selectedTheme": "Sepia"}))
    assert store.load_theme() == "System"


def test_last_write_wins(tmp_path):
    path = tmp_path / "preferences.json"
    first, second = SettingsStore(path), SettingsStore(path)
    first.save(VisibilityFlags(show_battery=False))
    second.save(VisibilityFlags(show_battery=True, show_system=False))
    assert first.load() == VisibilityFlags(show_system=False)


def test_concurrent_updates_are_not_lost(store):
    barrier = threading.Barrier(len(SECTIONS))

    def hide(section):
        barrier.wait()
        store.set_flag(section, False)

    workers = [threading.Thread(target=hide, args=(section,)) for section in SECTIONS]
    for worker in workers:
        worker.start()
    for worker in workers:
        worker.join(10.0)
    assert store.load() == VisibilityFlags.all(False)


def test_toggle_with_unknown_section_leaves_file_untouched(store):
    store.save(VisibilityFlags(show_cpu=False))
    before = store.path.read_text()
    with pytest.raises(KeyError):
        store.toggle("weather")
    assert store.path.read_text() == before


def test_configured_theme_is_used_when_nothing_stored(tmp_path, monkeypatch):
    monkeypatch.setenv("SPECMATRIX_HOME", str(tmp_path))
    monkeypatch.setenv("SPECMATRIX_THEME", "dark")
    ctx = build_context(load_settings(env_path=tmp_path / "missing.env"), identifier="iPhone17,1")
    assert ctx.store.load_theme() == "Dark"
    ctx.store.save_theme("light")
    assert ctx.store.load_theme() == "Light"
