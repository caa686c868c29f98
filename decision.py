"""
Combines backend resolution, window focus and pane focus into one answer.
"""

import logging
from enum import Enum

from backends import resolve, target_for
from focus_oracle import FocusOracle
from session_context import SessionContext
from tmux_overlay import TmuxOverlay

logger = logging.getLogger(__name__)


class Decision(Enum):
    UNSUPPORTED = "unsupported"
    FOREGROUND = "foreground"
    BACKGROUND = "background"


def decide(ctx: SessionContext, oracle: FocusOracle, overlay: TmuxOverlay) -> Decision:
    """Decide whether this session is in the foreground.

    No probe runs when the environment is unsupported. Each step runs at
    most once.
    """
    backend = resolve(ctx)
    if backend is None:
        logger.info("Decision: unsupported terminal")
        return Decision.UNSUPPORTED

    window_focused = oracle.is_window_focused(backend, target_for(backend, ctx))
    pane_focused = overlay.refine(window_focused, ctx)

    decision = Decision.FOREGROUND if pane_focused else Decision.BACKGROUND
    logger.info(f"Decision: {decision.value}")
    return decision
