"""
Errors raised while deciding whether the terminal is in the background.
"""


class DecisionError(Exception):
    """Base exception for foreground/background detection."""

    pass


class EnvironmentUnreadable(DecisionError):
    """Raised when the controlling TTY of this session cannot be found."""

    pass


class ProbeFailure(DecisionError):
    """Raised when an external focus or pane query fails.

    Covers missing binaries, timeouts, non-zero exits and output that
    cannot be parsed. Callers fold it into "not focused".
    """

    def __init__(self, command: list, reason: str):
        self.command = list(command)
        self.reason = reason
        super().__init__(f"{' '.join(self.command)}: {reason}")
