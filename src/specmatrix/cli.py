"""Typer CLI for specmatrix."""

from __future__ import annotations

import json
import platform

import typer

from specmatrix.config import load_settings
from specmatrix.core.app import build_context
from specmatrix.core.catalog import IDENTIFIER_ENV, lookup, model_identifier
from specmatrix.logging import configure_logging
from specmatrix.main import main as launch
from specmatrix.services.settings_store import SECTIONS, SettingsStore, VisibilityFlags
from specmatrix.ui.report import TABS, render_report, render_tab
from specmatrix.utils.process import SingleInstance

app = typer.Typer(no_args_is_help=True)


def _store() -> SettingsStore:
    settings = load_settings()
    configure_logging(settings)
    return SettingsStore(settings.paths.preferences_file, default_theme=settings.ui.theme)


def _parse_tabs(tab: list[str] | None) -> tuple[str, ...]:
    if not tab:
        return TABS
    unknown = [name for name in tab if name not in TABS]
    if unknown:
        raise typer.BadParameter(f"unknown tab(s) {', '.join(unknown)}; choose from {', '.join(TABS)}")
    return tuple(tab)


def _echo_flags(flags: VisibilityFlags) -> None:
    for section in SECTIONS:
        state = "shown" if flags.is_visible(section) else "hidden"
        typer.echo(f"{section:<10}{state}")


@app.command()
def run(
    tab: list[str] | None = typer.Option(None, "--tab", "-t", help="Tabs to show (repeatable)."),
    identifier: str | None = typer.Option(None, help="Override the device identifier."),
) -> None:
    """Launch the live dashboard."""

    launch(_parse_tabs(tab), identifier)


@app.command()
def snapshot(
    tab: list[str] | None = typer.Option(None, "--tab", "-t", help="Tabs to show (repeatable)."),
    identifier: str | None = typer.Option(None, help="Override the device identifier."),
) -> None:
    """Sample every metric once and print the report."""

    settings = load_settings()
    configure_logging(settings, level="WARNING")
    ctx = build_context(settings, identifier)
    ctx.sample_all()
    typer.echo(render_report(ctx, ctx.store.load(), ctx.store.load_theme(), _parse_tabs(tab)), nl=False)


@app.command()
def specs(identifier: str | None = typer.Argument(None)) -> None:
    """Print the static spec sheet for the current or given identifier."""

    device = lookup(identifier if identifier is not None else model_identifier())
    payload = {
        "identifier": device.identifier,
        "model": device.model_name,
        "generic": device.is_generic,
        "chip": device.chip.name,
        "gpu": {"name": device.gpu.name, "cores": device.gpu.cores, "metal": device.gpu.metal_version},
        "screen": {"ppi": device.screen.ppi, "size": device.screen.physical_size},
        "camera": {
            "back": list(device.camera.back.resolution),
            "front": list(device.camera.front.resolution),
        },
    }
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


@app.command()
def doctor() -> None:
    """Print environment diagnostics."""

    settings = load_settings()
    configure_logging(settings)
    instance = SingleInstance(settings.paths.base_dir / "specmatrix.lock")
    running = not instance.acquire()
    if not running:
        instance.release()
    info = {
        "python": platform.python_version(),
        "platform": platform.platform(),
        "identifier": model_identifier(),
        "identifier_override": IDENTIFIER_ENV,
        "dashboard_running": running,
        "paths": {
            "home": str(settings.paths.base_dir),
            "logs": str(settings.paths.logs_dir),
            "preferences": str(settings.paths.preferences_file),
        },
    }
    typer.echo(json.dumps(info, indent=2))


@app.command()
def settings(key: str | None = typer.Argument(None)) -> None:
    """Display current settings or a specific section."""

    data = load_settings().model_dump()
    if key:
        data = data.get(key, {})
    typer.echo(json.dumps(data, indent=2, default=str))


@app.command()
def flags() -> None:
    """Show the dashboard visibility flags."""

    _echo_flags(_store().load())


def _set(section: str, visible: bool | None) -> None:
    store = _store()
    try:
        updated = store.toggle(section) if visible is None else store.set_flag(section, visible)
    except KeyError as exc:
        raise typer.BadParameter(str(exc.args[0]), param_hint="SECTION") from exc
    _echo_flags(updated)


@app.command()
def toggle(section: str) -> None:
    """Flip one section's visibility."""

    _set(section, None)


@app.command()
def show(section: str) -> None:
    """Show one section."""

    _set(section, True)


@app.command()
def hide(section: str) -> None:
    """Hide one section."""

    _set(section, False)


@app.command("show-all")
def show_all() -> None:
    _echo_flags(_store().show_all())


@app.command("hide-all")
def hide_all() -> None:
    _echo_flags(_store().hide_all())


@app.command()
def theme(name: str | None = typer.Argument(None, help="Light, Dark or System.")) -> None:
    """Print or change the theme preference."""

    store = _store()
    if name is None:
        typer.echo(store.load_theme())
        return
    try:
        typer.echo(store.save_theme(name))
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="NAME") from exc


@app.command()
def tab(name: str, identifier: str | None = typer.Option(None)) -> None:
    """Render a single tab once."""

    settings = load_settings()
    configure_logging(settings, level="WARNING")
    ctx = build_context(settings, identifier)
    ctx.sample_all()
    try:
        lines = render_tab(ctx, name, ctx.store.load(), ctx.store.load_theme())
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="NAME") from exc
    typer.echo("\n".join(lines))
