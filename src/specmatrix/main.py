"""specmatrix live dashboard entrypoint."""

from __future__ import annotations

import sys
import threading

from specmatrix.config import SpecMatrixSettings, load_settings
from specmatrix.core.app import build_context
from specmatrix.logging import configure_logging, get_logger
from specmatrix.ui.report import TABS, render_report
from specmatrix.utils.process import SingleInstance

_CLEAR = "\x1b[2J\x1b[H"


def main(tabs: tuple[str, ...] = TABS, identifier: str | None = None, iterations: int | None = None) -> None:
    settings: SpecMatrixSettings = load_settings()
    configure_logging(settings)
    logger = get_logger("main")

    with SingleInstance(settings.paths.base_dir / "specmatrix.lock"):
        ctx = build_context(settings, identifier)
        redraw = threading.Event()
        # redraw early when a snapshot or the flags change
        for topic in ("snapshot.network", "snapshot.screen", "settings.changed"):
            ctx.events.subscribe(topic, lambda _payload: redraw.set())

        drawn = 0
        try:
            ctx.start()
            logger.info("specmatrix ready")
            while iterations is None or drawn < iterations:
                # flags may be edited from another process, so reload each frame
                flags = ctx.store.load()
                theme = ctx.store.load_theme()
                sys.stdout.write(_CLEAR + render_report(ctx, flags, theme, tabs))
                sys.stdout.flush()
                drawn += 1
                redraw.wait(settings.ui.refresh_s)
                redraw.clear()
        except KeyboardInterrupt:
            logger.info("Interrupted, shutting down")
        finally:
            ctx.stop()


if __name__ == "__main__":
    main()
