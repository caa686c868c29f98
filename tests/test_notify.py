"""
Tests for notify.py - the desktop notifier.
"""

import subprocess
from unittest.mock import MagicMock, patch

from notify import NOTIFIER_TIMEOUT, build_command, detect_terminal, notify
from settings import load_settings


def which_only(*names):
    return lambda name: f"/usr/bin/{name}" if name in names else None


def completed(returncode=0, stderr=""):
    return subprocess.CompletedProcess([], returncode, "", stderr)


class TestDetectTerminal:
    """Tests for bundle id lookup."""

    def test_known_terminal(self):
        assert detect_terminal("iTerm.app") == "com.googlecode.iterm2"

    def test_unknown_defaults_to_terminal_app(self):
        assert detect_terminal(None) == "com.apple.Terminal"


class TestBuildCommand:
    """Tests for per-platform notifier commands."""

    def test_terminal_notifier_with_activate(self):
        settings = load_settings({"NOTIFY_ACTIVATE_TERMINAL": "1", "NOTIFY_SUCCESS_ICON": "/i.png"})
        with patch("notify.shutil.which", which_only("terminal-notifier")):
            cmd = build_command("success", "done", settings, "iTerm.app", platform="darwin")

        assert cmd[:5] == ["terminal-notifier", "-title", "Command finished", "-message", "done"]
        assert cmd[-2:] == ["-activate", "com.googlecode.iterm2"]
        assert "-appIcon" in cmd

    def test_osascript_fallback_quotes(self):
        settings = load_settings({})
        with patch("notify.shutil.which", which_only()):
            cmd = build_command("error", 'say "hi"', settings, platform="darwin")

        assert cmd[:2] == ["osascript", "-e"]
        assert cmd[2] == 'display notification "say \\"hi\\"" with title "Command failed"'

    def test_notify_send(self):
        settings = load_settings({"NOTIFY_EXPIRE_TIME": "5000"})
        with patch("notify.shutil.which", which_only("notify-send")):
            cmd = build_command("success", "done", settings, platform="linux")

        assert cmd == [
            "notify-send", "--app-name=notify-if-background", "--expire-time=5000",
            "Command finished", "done",
        ]

    def test_linux_without_notify_send(self):
        with patch("notify.shutil.which", which_only()):
            assert build_command("success", "done", load_settings({}), platform="linux") is None


class TestNotify:
    """Tests for sending notifications."""

    def test_custom_notifier_gets_message_on_stdin(self):
        settings = load_settings({"NOTIFY_NOTIFIER": "my-notifier"})
        with patch("notify.subprocess.run", return_value=completed()) as mock_run:
            assert notify("error", "tests failed", settings) is True

        mock_run.assert_called_once()
        assert mock_run.call_args.args[0] == ["my-notifier", "error"]
        assert mock_run.call_args.kwargs["input"] == "tests failed"

    def test_plays_sound(self):
        settings = load_settings({"NOTIFY_SUCCESS_SOUND": "/sounds/done.wav"})
        with patch("notify.shutil.which", which_only("notify-send", "paplay")), \
             patch("notify.subprocess.run", return_value=completed()), \
             patch("notify.subprocess.Popen", MagicMock()) as mock_popen:
            assert notify("success", "done", settings, platform="linux") is True

        assert mock_popen.call_args.args[0] == ["paplay", "/sounds/done.wav"]

    def test_failed_notifier_returns_false(self):
        settings = load_settings({})
        with patch("notify.shutil.which", which_only("notify-send")), \
             patch("notify.subprocess.run", return_value=completed(1, "no bus")):
            assert notify("success", "done", settings, platform="linux") is False

    def test_missing_binary_returns_false(self):
        settings = load_settings({"NOTIFY_NOTIFIER": "/nope/notifier"})
        with patch("notify.subprocess.run", side_effect=FileNotFoundError):
            assert notify("success", "done", settings) is False

    def test_no_notifier_available(self):
        with patch("notify.shutil.which", which_only()):
            assert notify("success", "done", load_settings({}), platform="linux") is False

    def test_hung_notifier_times_out(self):
        """Test that a notifier which never exits is bounded and reported."""
        settings = load_settings({"NOTIFY_NOTIFIER": "slow-notifier"})
        with patch("notify.subprocess.run",
                   side_effect=subprocess.TimeoutExpired(["slow-notifier"], NOTIFIER_TIMEOUT)) as mock_run:
            assert notify("success", "done", settings) is False

        assert mock_run.call_args.kwargs["timeout"] == NOTIFIER_TIMEOUT
