"""
Runs the external commands used to probe window and pane focus.

Every caller takes a `runner` with the signature of `run_probe` so that
tests can swap in canned results.
"""

import subprocess
from dataclasses import dataclass
from typing import Callable, List

from errors import ProbeFailure

DEFAULT_TIMEOUT = 3.0


@dataclass(frozen=True)
class ProbeResult:
    """Output of one successful external command."""
    returncode: int
    stdout: str
    stderr: str


Runner = Callable[[List[str], float], ProbeResult]


def run_probe(args: List[str], timeout: float = DEFAULT_TIMEOUT) -> ProbeResult:
    """Run a command, returning its output or raising ProbeFailure."""
    try:
        result = subprocess.run(args, capture_output=True, text=True, timeout=timeout)
    except subprocess.TimeoutExpired as e:
        raise ProbeFailure(args, f"timed out after {timeout}s") from e
    except OSError as e:
        raise ProbeFailure(args, str(e)) from e

    if result.returncode != 0:
        reason = result.stderr.strip() or f"exit status {result.returncode}"
        raise ProbeFailure(args, reason)

    return ProbeResult(result.returncode, result.stdout, result.stderr)
