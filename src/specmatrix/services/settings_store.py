"""Key-value persistence for dashboard visibility flags and theme."""

from __future__ import annotations

import json
import os
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import Any, Literal, get_args

import portalocker
from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from specmatrix.core.events import EventBus
from specmatrix.logging import get_logger

Theme = Literal["Light", "Dark", "System"]
THEMES: tuple[str, ...] = get_args(Theme)
DEFAULT_THEME: Theme = "System"

SECTIONS = (
    "battery",
    "system",
    "cpu",
    "gpu",
    "memory",
    "storage",
    "network",
    "display",
    "camera",
)


class VisibilityFlags(BaseModel):
    """One show/hide toggle per dashboard section. Stored with camelCase keys."""

    model_config = ConfigDict(
        frozen=True,
        strict=True,
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    show_battery: bool = True
    show_system: bool = True
    show_cpu: bool = True
    show_gpu: bool = True
    show_memory: bool = True
    show_storage: bool = True
    show_network: bool = True
    show_display: bool = True
    show_camera: bool = True

    def is_visible(self, section: str) -> bool:
        return getattr(self, _field_for(section))

    def with_section(self, section: str, visible: bool) -> VisibilityFlags:
        return self.model_copy(update={_field_for(section): visible})

    @classmethod
    def all(cls, visible: bool) -> VisibilityFlags:
        return cls(**{_field_for(section): visible for section in SECTIONS})


def _field_for(section: str) -> str:
    normalized = section.strip().lower()
    if normalized not in SECTIONS:
        raise KeyError(f"unknown section {section!r}; expected one of {', '.join(SECTIONS)}")
    return f"show_{normalized}"


class SettingsStore:
    """JSON file of key-value preferences; last write wins."""

    DISPLAY_KEY = "displaySettings"
    THEME_KEY = "selectedTheme"

    def __init__(
        self,
        path: Path,
        events: EventBus | None = None,
        lock_timeout_s: float = 5.0,
        default_theme: Theme = DEFAULT_THEME,
    ) -> None:
        self.path = path
        self.default_theme = default_theme
        self.lock_path = path.with_name(path.name + ".lock")
        self.events = events
        self.lock_timeout_s = lock_timeout_s
        self.logger = get_logger("settings-store")

    def load(self) -> VisibilityFlags:
        return self._flags_from(self._read_all().get(self.DISPLAY_KEY))

    def _flags_from(self, raw: Any) -> VisibilityFlags:
        if raw is None:
            return VisibilityFlags()
        if not isinstance(raw, dict):
            self.logger.warning("Stored {} is not a record; using defaults", self.DISPLAY_KEY)
            return VisibilityFlags()
        try:
            return VisibilityFlags.model_validate(raw)
        except ValidationError as exc:
            self.logger.warning("Stored {} is invalid ({} errors); using defaults", self.DISPLAY_KEY, exc.error_count())
            return VisibilityFlags()

    def save(self, flags: VisibilityFlags) -> None:
        self._modify_flags(lambda _current: flags)

    def set_flag(self, section: str, visible: bool) -> VisibilityFlags:
        return self._modify_flags(lambda current: current.with_section(section, visible))

    def toggle(self, section: str) -> VisibilityFlags:
        return self._modify_flags(lambda current: current.with_section(section, not current.is_visible(section)))

    def _modify_flags(self, change: Callable[[VisibilityFlags], VisibilityFlags]) -> VisibilityFlags:
        """Apply ``change`` to the stored flags while holding the file lock."""
        stored = self._update(
            self.DISPLAY_KEY, lambda raw: change(self._flags_from(raw)).model_dump(by_alias=True)
        )
        flags = VisibilityFlags.model_validate(stored)
        if self.events is not None:
            self.events.emit("settings.changed", flags)
        return flags

    def show_all(self) -> VisibilityFlags:
        flags = VisibilityFlags.all(True)
        self.save(flags)
        return flags

    def hide_all(self) -> VisibilityFlags:
        flags = VisibilityFlags.all(False)
        self.save(flags)
        return flags

    def load_theme(self) -> Theme:
        value = self._read_all().get(self.THEME_KEY)
        if value not in THEMES:
            if value is not None:
                self.logger.warning("Ignoring unknown theme {!r}", value)
            return self.default_theme
        return value

    def save_theme(self, theme: str) -> Theme:
        normalized = theme.strip().capitalize()
        if normalized not in THEMES:
            raise ValueError(f"unknown theme {theme!r}; expected one of {', '.join(THEMES)}")
        self._update(self.THEME_KEY, lambda _current: normalized)
        if self.events is not None:
            self.events.emit("theme.changed", normalized)
        return normalized

    def _read_all(self) -> dict[str, Any]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as exc:
            self.logger.warning("Cannot read {}: {}", self.path, exc)
            return {}
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            self.logger.warning("Corrupt preferences file {}: {}", self.path, exc)
            return {}
        if not isinstance(data, dict):
            self.logger.warning("Preferences file {} does not hold an object", self.path)
            return {}
        return data

    def _update(self, key: str, transform: Callable[[Any], Any]) -> Any:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with portalocker.Lock(str(self.lock_path), mode="a", timeout=self.lock_timeout_s):
            data = self._read_all()
            data[key] = value = transform(data.get(key))
            fd, tmp_name = tempfile.mkstemp(prefix=self.path.name, suffix=".tmp", dir=self.path.parent)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(data, handle, indent=2, sort_keys=True)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        self.logger.debug("Persisted {}", key)
        return value
