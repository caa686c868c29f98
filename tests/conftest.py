"""
Shared test fixtures for notify-if-background tests.
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from errors import ProbeFailure  # noqa: E402
from probes import ProbeResult  # noqa: E402
from session_context import SessionContext  # noqa: E402


class FakeRunner:
    """Stands in for run_probe, answering by command prefix.

    Responses map a tuple prefix of the command to either stdout text or
    an exception instance to raise. Every call is recorded.
    """

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls = []

    def __call__(self, args, timeout):
        self.calls.append(list(args))
        for prefix, response in self.responses.items():
            if tuple(args[:len(prefix)]) == prefix:
                if isinstance(response, Exception):
                    raise response
                return ProbeResult(0, response, "")
        raise ProbeFailure(args, "command not found")

    def called(self, *prefix):
        return [c for c in self.calls if tuple(c[:len(prefix)]) == prefix]


@pytest.fixture
def runner():
    """An empty fake runner; tests fill in responses."""
    return FakeRunner()


@pytest.fixture
def resources_dir(temp_dir):
    return temp_dir / "applescript"


@pytest.fixture
def temp_dir(tmp_path):
    yield tmp_path


@pytest.fixture
def make_context():
    """Factory for SessionContext values with sensible defaults."""
    def _make(**overrides):
        fields = {"own_tty": "/dev/ttys001"}
        fields.update(overrides)
        return SessionContext(**fields)
    return _make
