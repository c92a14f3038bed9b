import json

import pytest
from typer.testing import CliRunner

from specmatrix import cli
from specmatrix.core.state import BatterySnapshot, MemorySnapshot, NetworkSnapshot, ScreenSnapshot, StorageSnapshot
from specmatrix.services import probes

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("SPECMATRIX_HOME", str(tmp_path / "home"))
    monkeypatch.setenv("SPECMATRIX_MEASURE_SPEED", "false")
    monkeypatch.setattr(cli, "configure_logging", lambda *args, **kwargs: None)
    monkeypatch.setattr(probes, "read_battery", lambda: BatterySnapshot(0.75))
    monkeypatch.setattr(probes, "read_memory", lambda: MemorySnapshot(4096, 1024))
    monkeypatch.setattr(probes, "read_storage", lambda: StorageSnapshot(1000, 400, 600))
    monkeypatch.setattr(probes, "read_network", NetworkSnapshot)
    monkeypatch.setattr(probes, "read_screen_geometry", lambda: ScreenSnapshot(width=100, height=200))
    monkeypatch.setattr(probes, "read_brightness", lambda: 0.5)


def test_specs_known_and_unknown():
    result = runner.invoke(cli.app, ["specs", "iPhone16,4"])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["model"] == "iPhone 15 Pro Max"
    assert payload["generic"] is False

    result = runner.invoke(cli.app, ["specs", "definitely-not-a-phone"])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["model"] == "iPhone"
    assert payload["generic"] is True


def test_flag_commands_persist():
    result = runner.invoke(cli.app, ["hide", "battery"])
    assert result.exit_code == 0
    assert "battery   hidden" in result.stdout

    result = runner.invoke(cli.app, ["flags"])
    assert "battery   hidden" in result.stdout
    assert "camera    shown" in result.stdout

    runner.invoke(cli.app, ["toggle", "battery"])
    result = runner.invoke(cli.app, ["flags"])
    assert "battery   shown" in result.stdout

    result = runner.invoke(cli.app, ["hide-all"])
    assert "shown" not in result.stdout
    result = runner.invoke(cli.app, ["show-all"])
    assert "hidden" not in result.stdout


def test_unknown_section_is_rejected():
    result = runner.invoke(cli.app, ["show", "toaster"])
    assert result.exit_code != 0


def test_theme_command():
    assert runner.invoke(cli.app, ["theme"]).stdout.strip() == "System"
    assert runner.invoke(cli.app, ["theme", "light"]).stdout.strip() == "Light"
    assert runner.invoke(cli.app, ["theme"]).stdout.strip() == "Light"
    assert runner.invoke(cli.app, ["theme", "sepia"]).exit_code != 0


def test_snapshot_renders_requested_tabs():
    result = runner.invoke(cli.app, ["snapshot", "--tab", "specs", "--tab", "display", "--identifier", "iPhone17,3"])
    assert result.exit_code == 0, result.stdout
    assert "iPhone 16" in result.stdout
    assert "75% - Unknown" in result.stdout
    assert "Brightness      50%" in result.stdout
    assert "== Network ==" not in result.stdout


def test_snapshot_rejects_unknown_tab():
    result = runner.invoke(cli.app, ["snapshot", "--tab", "weather"])
    assert result.exit_code != 0


def test_settings_and_doctor_output_json():
    result = runner.invoke(cli.app, ["settings", "samplers"])
    assert result.exit_code == 0
    assert json.loads(result.stdout)["battery_interval_s"] == 1.0

    result = runner.invoke(cli.app, ["doctor"])
    assert result.exit_code == 0
    info = json.loads(result.stdout)
    assert info["dashboard_running"] is False
