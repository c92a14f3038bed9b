"""Process-wide helpers."""

from __future__ import annotations

import os
from pathlib import Path

import portalocker


class SingleInstance:
    """Ensures only one live dashboard polls the hardware at a time."""

    def __init__(self, lockfile: Path) -> None:
        self.lockfile = lockfile
        self._lock: portalocker.Lock | None = None

    def acquire(self) -> bool:
        self.lockfile.parent.mkdir(parents=True, exist_ok=True)
        try:
            self._lock = portalocker.Lock(str(self.lockfile), mode="w", timeout=0, fail_when_locked=True)
            handle = self._lock.acquire()
        except portalocker.exceptions.LockException:
            self._lock = None
            return False
        handle.write(str(os.getpid()))
        handle.flush()
        return True

    def release(self) -> None:
        if self._lock:
            self._lock.release()
            self._lock = None

    def holder_pid(self) -> int | None:
        """PID recorded by the current (or last) holder, if readable."""
        try:
            return int(self.lockfile.read_text().strip())
        except (OSError, ValueError):
            return None

    def __enter__(self) -> SingleInstance:
        if not self.acquire():
            raise RuntimeError(f"another specmatrix dashboard is already running (pid {self.holder_pid()})")
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # type: ignore[override]
        self.release()
