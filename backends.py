"""
Maps a SessionContext to the strategy used to probe window focus.
"""

import logging
from enum import Enum
from typing import Optional

from session_context import SessionContext

logger = logging.getLogger(__name__)

ITERM2_PROGRAM = "iTerm.app"
APPLE_TERMINAL_PROGRAM = "Apple_Terminal"


class BackendKind(Enum):
    ITERM2 = "iterm2"
    # Set after the pre-3 canary fails; probes with the 3.x dictionary
    ITERM2_LEGACY_DIALECT = "iterm2-legacy-dialect"
    APPLE_TERMINAL = "apple-terminal"
    XDOTOOL = "xdotool"

    @property
    def probes_tty(self) -> bool:
        """Whether this backend targets the TTY rather than a window id."""
        return self is not BackendKind.XDOTOOL


def resolve(ctx: SessionContext) -> Optional[BackendKind]:
    """Pick the focus backend for this session, or None if unsupported.

    Host application identity wins over the xdotool fallback, which needs
    both a display and the tool and cannot tell tabs apart.
    """
    if ctx.terminal_program_id == ITERM2_PROGRAM:
        backend = BackendKind.ITERM2
    elif ctx.terminal_program_id == APPLE_TERMINAL_PROGRAM:
        backend = BackendKind.APPLE_TERMINAL
    elif ctx.display_server_present and ctx.window_probe_tool_available:
        backend = BackendKind.XDOTOOL
    else:
        logger.debug(f"No backend for TERM_PROGRAM={ctx.terminal_program_id!r}")
        return None

    logger.debug(f"Resolved backend {backend.value}")
    return backend


def target_for(backend: BackendKind, ctx: SessionContext) -> Optional[str]:
    """The TTY or window id the backend's probe compares against."""
    if backend.probes_tty:
        return ctx.own_tty
    return ctx.own_window_id
