"""Plain text rendering of the dashboard tabs."""

from __future__ import annotations

import platform

from specmatrix.core.app import SpecMatrixContext
from specmatrix.core.catalog import Camera, DeviceSpec
from specmatrix.core.state import BatterySnapshot, MemorySnapshot, NetworkSnapshot, ScreenSnapshot, StorageSnapshot
from specmatrix.services import probes
from specmatrix.services.settings_store import SECTIONS, VisibilityFlags
from specmatrix.utils.formatting import format_bytes, format_percent, gauge

TABS = ("specs", "network", "display", "camera", "settings")

_SECTION_LABELS = {
    "battery": "Battery Information",
    "system": "System Information",
    "cpu": "CPU Information",
    "gpu": "GPU Information",
    "memory": "Memory Information",
    "storage": "Storage Information",
    "network": "Network Information",
    "display": "Display Information",
    "camera": "Camera Information",
}


def _card(title: str, lines: list[str]) -> list[str]:
    return [title, "-" * len(title), *lines, ""]


def _row(label: str, value: str, width: int = 16) -> str:
    return f"{label:<{width}}{value}"


def _hidden(name: str) -> list[str]:
    return [f"{name} Information Hidden", "Enable in Settings", ""]


def battery_card(battery: BatterySnapshot) -> list[str]:
    if not battery.is_known:
        return _card("Battery Status", [f"--% - {battery.state_description}"])
    return _card(
        "Battery Status",
        [
            f"{battery.percent}% - {battery.state_description} ({battery.severity})",
            gauge(battery.level),
        ],
    )


def system_card(device: DeviceSpec) -> list[str]:
    return _card(
        "System Information",
        [
            f"Model: {device.model_name}",
            f"OS Version: {platform.system()} {platform.release()}",
            f"Build: {platform.version() or 'Unknown'}",
        ],
    )


def cpu_card(device: DeviceSpec) -> list[str]:
    total, active = probes.cpu_counts()
    return _card("CPU Information", [line for line in device.chip.describe(total, active) if line])


def gpu_card(device: DeviceSpec) -> list[str]:
    gpu = device.gpu
    return _card(
        "GPU Information",
        [
            f"Graphics: {gpu.name}",
            f"GPU Cores: {gpu.cores}",
            f"Metal Support: {'Yes' if gpu.metal_supported else 'No'}",
            f"Metal Version: {gpu.metal_version}",
            "#" * gpu.cores + "-" * max(6 - gpu.cores, 0),
        ],
    )


def memory_card(memory: MemorySnapshot) -> list[str]:
    return _card(
        "Memory Information",
        [
            f"Total RAM: {format_bytes(memory.total_bytes)}",
            f"Used RAM: {format_bytes(memory.used_bytes)}",
            f"Usage: {format_percent(memory.usage_percentage)}" + (" (high)" if memory.is_high else ""),
            gauge(memory.usage_percentage / 100),
        ],
    )


def storage_card(storage: StorageSnapshot) -> list[str]:
    return _card(
        "Storage Information",
        [
            f"Total Storage: {format_bytes(storage.total_bytes)}",
            f"Used Storage: {format_bytes(storage.used_bytes)}",
            f"Available: {format_bytes(storage.free_bytes)}",
            f"Usage: {format_percent(storage.usage_percentage)} ({storage.level})",
            gauge(storage.usage_percentage / 100),
        ],
    )


def network_card(network: NetworkSnapshot) -> list[str]:
    lines = [
        _row("Status", network.status_description),
        _row("Type", network.kind_label),
        _row("Speed", network.speed_description),
    ]
    if network.interface:
        lines.append(_row("Interface", network.interface))
    if network.cellular is not None:
        lines.append(_row("Technology", network.cellular.display_technology))
    return _card("Network Status", lines)


def screen_card(screen: ScreenSnapshot, device: DeviceSpec) -> list[str]:
    brightness = screen.brightness_percent
    lines = [
        _row("Resolution", screen.resolution),
        _row("Scale Factor", f"{screen.scale:.1f}x"),
        _row("Native Scale", f"{screen.native_scale:.1f}x"),
        _row("Pixel Density", f"{device.screen.ppi} PPI"),
        _row("Physical Size", device.screen.physical_size),
        _row("Refresh Rate", f"{int(screen.refresh_rate)}Hz"),
        _row("Brightness", "Unknown" if brightness is None else f"{brightness}%"),
    ]
    if brightness is not None:
        lines.append(gauge(screen.brightness))
    return _card("Display Information", lines)


def camera_card(camera: Camera) -> list[str]:
    lines = [_row("Resolution:", camera.resolution[0])]
    lines.extend(_row("", extra) for extra in camera.resolution[1:])
    lines.append(_row("Aperture:", camera.aperture))
    if camera.features:
        lines.append("Features:")
        lines.extend(f"  [x] {feature}" for feature in camera.features)
    return _card(f"{camera.position} Camera", lines)


def settings_card(flags: VisibilityFlags, theme: str) -> list[str]:
    lines = [f"Appearance: {theme}"]
    lines.extend(
        f"  [{'x' if flags.is_visible(section) else ' '}] {_SECTION_LABELS[section]}" for section in SECTIONS
    )
    return _card("Settings", lines)


def render_tab(ctx: SpecMatrixContext, tab: str, flags: VisibilityFlags, theme: str = "System") -> list[str]:
    device = ctx.device
    if tab == "specs":
        lines = ["Device Specifications", device.model_name, ""]
        if flags.show_battery:
            lines += battery_card(ctx.battery.latest)
        if flags.show_system:
            lines += system_card(device)
        if flags.show_gpu:
            lines += gpu_card(device)
        if flags.show_cpu:
            lines += cpu_card(device)
        if flags.show_memory:
            lines += memory_card(ctx.memory.latest)
        if flags.show_storage:
            lines += storage_card(ctx.storage.latest)
        return lines
    if tab == "network":
        return ["Network Status", ""] + (network_card(ctx.network.latest) if flags.show_network else _hidden("Network"))
    if tab == "display":
        return ["Display Information", ""] + (
            screen_card(ctx.screen.latest, device) if flags.show_display else _hidden("Display")
        )
    if tab == "camera":
        if not flags.show_camera:
            return ["Camera System", ""] + _hidden("Camera")
        return ["Camera System", ""] + camera_card(device.camera.back) + camera_card(device.camera.front)
    if tab == "settings":
        return settings_card(flags, theme)
    raise ValueError(f"unknown tab {tab!r}; expected one of {', '.join(TABS)}")


def render_report(
    ctx: SpecMatrixContext,
    flags: VisibilityFlags,
    theme: str = "System",
    tabs: tuple[str, ...] = TABS,
) -> str:
    """Render ``tabs`` from the latest published snapshots."""
    out: list[str] = []
    for tab in tabs:
        out.append(f"== {tab.capitalize()} ==")
        out.extend(render_tab(ctx, tab, flags, theme))
    return "\n".join(out).rstrip() + "\n"
