#!/usr/bin/env python3
"""
Notify if the terminal running this command is in the background.

Reads the notification message from stdin and takes a classification tag
(e.g. success or error) as the first argument.

Exit codes:
  0  terminal is in the background, notification sent
  1  terminal is not supported
  2  terminal is in the foreground
"""

import logging
import sys
from typing import List, Optional

from decision import Decision, decide
from errors import EnvironmentUnreadable
from focus_oracle import FocusOracle
from notify import notify
from probes import run_probe
from session_context import read_session_context
from settings import Settings, load_settings
from tmux_overlay import TmuxOverlay

logger = logging.getLogger("notify_if_background")

EXIT_CODES = {
    Decision.BACKGROUND: 0,
    Decision.UNSUPPORTED: 1,
    Decision.FOREGROUND: 2,
}


def configure_logging(settings: Settings) -> None:
    """Send diagnostics to NOTIFY_ERROR_LOG, never to stdout."""
    if settings.error_log == "stderr":
        handler = logging.StreamHandler(sys.stderr)
    else:
        try:
            handler = logging.FileHandler(settings.error_log, mode="a")
        except OSError as e:
            print(f"[notify-if-background] Cannot open {settings.error_log}: {e}", file=sys.stderr)
            handler = logging.StreamHandler(sys.stderr)

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
        handlers=[handler],
        force=True,
    )


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    message = sys.stdin.read()

    if not argv:
        print("Usage: notify-if-background <tag> < message", file=sys.stderr)
        return 1
    tag = argv[0]

    settings = load_settings()
    configure_logging(settings)

    try:
        ctx = read_session_context(runner=run_probe, timeout=settings.probe_timeout)
    except EnvironmentUnreadable as e:
        logger.error(str(e))
        return EXIT_CODES[Decision.UNSUPPORTED]

    oracle = FocusOracle(settings.resources_dir, run_probe, settings.probe_timeout)
    overlay = TmuxOverlay(run_probe, settings.probe_timeout)
    decision = decide(ctx, oracle, overlay)

    if decision is Decision.BACKGROUND:
        if not notify(tag, message, settings, ctx.terminal_program_id):
            logger.warning("Notification was not delivered")

    return EXIT_CODES[decision]


if __name__ == "__main__":
    sys.exit(main())
