"""
Desktop notifications for commands that finished in the background.
"""

import logging
import shutil
import subprocess
import sys
from typing import List, Optional

from settings import Settings

logger = logging.getLogger(__name__)

BUNDLE_IDS = {
    "iTerm.app": "com.googlecode.iterm2",
    "Apple_Terminal": "com.apple.Terminal",
    "WarpTerminal": "dev.warp.Warp-Stable",
    "kitty": "net.kovidgoyal.kitty",
}

NOTIFIER_TIMEOUT = 10.0  # seconds


def detect_terminal(term_program: Optional[str]) -> str:
    return BUNDLE_IDS.get(term_program or "", "com.apple.Terminal")


def _applescript_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def build_command(tag: str, message: str, settings: Settings,
                  term_program: Optional[str] = None,
                  platform: Optional[str] = None) -> Optional[List[str]]:
    """Notifier command line for this platform, or None if there is none."""
    platform = platform or sys.platform
    title = settings.title_for(tag)
    icon = settings.icon_for(tag)

    if platform == "darwin":
        if shutil.which("terminal-notifier"):
            cmd = ["terminal-notifier", "-title", title, "-message", message]
            if icon:
                cmd += ["-appIcon", icon]
            if settings.activate_terminal:
                cmd += ["-activate", detect_terminal(term_program)]
            return cmd
        script = f"display notification {_applescript_string(message)} with title {_applescript_string(title)}"
        return ["osascript", "-e", script]

    if platform.startswith("linux"):
        if not shutil.which("notify-send"):
            return None
        cmd = ["notify-send", f"--app-name={settings.app_name}"]
        if icon:
            cmd.append(f"--icon={icon}")
        if settings.expire_time:
            cmd.append(f"--expire-time={settings.expire_time}")
        return cmd + [title, message]

    return None


def play_sound(sound: str, platform: Optional[str] = None) -> None:
    """Play a sound file without waiting for it to finish."""
    platform = platform or sys.platform
    player = "afplay" if platform == "darwin" else "paplay"
    if not shutil.which(player):
        logger.warning(f"Cannot play sound, {player} not found")
        return

    subprocess.Popen(
        [player, sound],
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        start_new_session=True
    )


def notify(tag: str, message: str, settings: Settings,
           term_program: Optional[str] = None,
           platform: Optional[str] = None) -> bool:
    """Show a notification for a finished command. Returns True on success."""
    if settings.notifier:
        cmd = [settings.notifier, tag]
        stdin = message
    else:
        cmd = build_command(tag, message, settings, term_program, platform)
        stdin = None
        if cmd is None:
            logger.warning(f"No notifier available on {platform or sys.platform}")
            return False

    try:
        result = subprocess.run(cmd, input=stdin, capture_output=True, text=True, timeout=NOTIFIER_TIMEOUT)
    except subprocess.TimeoutExpired:
        logger.error(f"Notifier {cmd[0]} timed out after {NOTIFIER_TIMEOUT}s")
        return False
    except OSError as e:
        logger.error(f"Notifier {cmd[0]} could not be started: {e}")
        return False

    if result.returncode != 0:
        logger.error(f"Notifier {cmd[0]} exited with {result.returncode}: {result.stderr.strip()}")
        return False

    sound = settings.sound_for(tag)
    if sound and not settings.notifier:
        play_sound(sound, platform)

    return True
