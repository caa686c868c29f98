"""
Reads the facts about this terminal session that detection depends on.

This is the only place that looks at the process environment. Everything
downstream works from the immutable SessionContext it returns.
"""

import logging
import os
import shutil
from dataclasses import dataclass
from typing import Callable, Mapping, Optional

from errors import EnvironmentUnreadable, ProbeFailure
from probes import DEFAULT_TIMEOUT, Runner, run_probe

logger = logging.getLogger(__name__)

WINDOW_PROBE_TOOL = "xdotool"


@dataclass(frozen=True)
class SessionContext:
    """Environment facts captured once per invocation."""
    own_tty: str
    terminal_program_id: Optional[str] = None
    display_server_present: bool = False
    window_probe_tool_available: bool = False
    own_window_id: Optional[str] = None
    multiplexer_active: bool = False
    own_pane_id: Optional[str] = None

    def __post_init__(self):
        if self.own_window_id is not None and not (
            self.display_server_present and self.window_probe_tool_available
        ):
            raise ValueError("own_window_id requires a display and the window probe tool")
        if self.own_pane_id is not None and not self.multiplexer_active:
            raise ValueError("own_pane_id requires an active multiplexer")


def _local_tty(env: Mapping[str, str]) -> Optional[str]:
    """TTY of the first standard stream attached to a terminal."""
    # stdin usually carries the piped message, so it is checked last
    for fd in (2, 1, 0):
        try:
            return os.ttyname(fd)
        except OSError:
            continue
    return env.get("TTY") or None


def _tmux_client_env(name: str, runner: Runner, timeout: float, global_env: bool = False) -> Optional[str]:
    """Value of a variable in the tmux session (or global) environment.

    tmux prints NAME=value, or -NAME when the variable is unset.
    """
    args = ["tmux", "show-environment"] + (["-g"] if global_env else []) + [name]
    try:
        result = runner(args, timeout)
    except ProbeFailure as e:
        logger.debug(f"{' '.join(args[1:])} failed: {e.reason}")
        return None

    line = result.stdout.strip()
    prefix = f"{name}="
    if line.startswith(prefix):
        return line[len(prefix):] or None
    return None


def _tmux_client_tty(runner: Runner, timeout: float) -> Optional[str]:
    try:
        result = runner(["tmux", "display-message", "-p", "#{client_tty}"], timeout)
    except ProbeFailure as e:
        logger.warning(f"Could not read tmux client tty: {e.reason}")
        return None
    return result.stdout.strip() or None


def read_session_context(
    environ: Optional[Mapping[str, str]] = None,
    runner: Runner = run_probe,
    timeout: float = DEFAULT_TIMEOUT,
    which: Callable[[str], Optional[str]] = shutil.which,
) -> SessionContext:
    """Gather a SessionContext from the environment.

    Raises:
        EnvironmentUnreadable: If no controlling TTY can be found
    """
    env = os.environ if environ is None else environ

    multiplexer_active = bool(env.get("TMUX"))
    terminal_program = env.get("TERM_PROGRAM") or None
    window_id = env.get("WINDOWID") or None
    own_tty = None

    if multiplexer_active:
        # Inside tmux the OS window belongs to the client, not to this pane
        if terminal_program in (None, "tmux"):
            # update-environment does not copy TERM_PROGRAM into the session
            terminal_program = (
                _tmux_client_env("TERM_PROGRAM", runner, timeout)
                or _tmux_client_env("TERM_PROGRAM", runner, timeout, global_env=True)
            )
        window_id = _tmux_client_env("WINDOWID", runner, timeout) or window_id
        own_tty = _tmux_client_tty(runner, timeout)

    if own_tty is None:
        own_tty = _local_tty(env)
    if own_tty is None:
        raise EnvironmentUnreadable("No controlling TTY found for this session")

    display_present = bool(env.get("DISPLAY"))
    tool_available = which(WINDOW_PROBE_TOOL) is not None
    if not (display_present and tool_available):
        window_id = None

    ctx = SessionContext(
        own_tty=own_tty,
        terminal_program_id=terminal_program,
        display_server_present=display_present,
        window_probe_tool_available=tool_available,
        own_window_id=window_id,
        multiplexer_active=multiplexer_active,
        own_pane_id=(env.get("TMUX_PANE") or None) if multiplexer_active else None,
    )
    logger.debug(f"Session context: {ctx}")
    return ctx
