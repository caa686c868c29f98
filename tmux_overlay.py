"""
Refines window focus into pane focus when running inside tmux.
"""

import logging
from typing import List, Optional

from errors import ProbeFailure
from probes import DEFAULT_TIMEOUT, ProbeResult, Runner, run_probe
from session_context import SessionContext

logger = logging.getLogger(__name__)


class TmuxOverlay:
    """Compares tmux's active pane with this session's pane."""

    def __init__(self, runner: Runner = run_probe, timeout: float = DEFAULT_TIMEOUT):
        self.runner = runner
        self.timeout = timeout

    def run_tmux(self, args: List[str]) -> ProbeResult:
        return self.runner(["tmux"] + args, self.timeout)

    def active_pane_id(self) -> Optional[str]:
        """Pane id of the active pane in the active window, if any.

        list-windows reports each window's active pane, so the line flagged
        with window_active=1 carries the globally active one.
        """
        result = self.run_tmux(["list-windows", "-F", "#{window_active} #{pane_id}"])
        for line in result.stdout.splitlines():
            parts = line.split()
            if len(parts) == 2 and parts[0] == "1":
                return parts[1]
        return None

    def refine(self, window_focused: bool, ctx: SessionContext) -> bool:
        """Pane-level focus, given whether the hosting window is focused."""
        if not window_focused:
            return False
        if not ctx.multiplexer_active:
            return True

        try:
            active = self.active_pane_id()
        except ProbeFailure as e:
            logger.warning(f"tmux pane query failed: {e}")
            return False

        if active is None:
            logger.debug("tmux reported no active pane")
            return False

        logger.debug(f"Active pane {active}, own pane {ctx.own_pane_id}")
        return active == ctx.own_pane_id
