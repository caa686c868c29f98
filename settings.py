"""
Settings for notify-if-background.

Values come from the environment, after loading .env and .env.local from
this directory. Every key is prefixed with NOTIFY_.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from probes import DEFAULT_TIMEOUT

SCRIPT_DIR = Path(__file__).parent

# Load environment variables
for env_file in [".env", ".env.local"]:
    load_dotenv(SCRIPT_DIR / env_file, override=True)

PREFIX = "NOTIFY_"
DEFAULT_RESOURCES_DIR = SCRIPT_DIR / "applescript"
DEFAULT_APP_NAME = "notify-if-background"
DEFAULT_TITLES = {
    "success": "Command finished",
    "error": "Command failed",
}
TRUTHY = {"1", "true", "yes", "on"}


def _parse_bool(value: Optional[str]) -> bool:
    return value is not None and value.strip().lower() in TRUTHY


def _parse_timeout(value: Optional[str]) -> float:
    if not value:
        return DEFAULT_TIMEOUT
    try:
        timeout = float(value)
    except ValueError:
        return DEFAULT_TIMEOUT
    return timeout if timeout > 0 else DEFAULT_TIMEOUT


@dataclass(frozen=True)
class Settings:
    """Snapshot of the NOTIFY_* configuration for one invocation."""
    resources_dir: Path = DEFAULT_RESOURCES_DIR
    probe_timeout: float = DEFAULT_TIMEOUT
    notifier: Optional[str] = None
    activate_terminal: bool = False
    app_name: str = DEFAULT_APP_NAME
    expire_time: Optional[str] = None
    error_log: str = "stderr"
    log_level: str = "WARNING"
    values: Mapping[str, str] = field(default_factory=dict, repr=False)

    def _tag_value(self, tag: str, suffix: str) -> Optional[str]:
        key = f"{PREFIX}{tag.upper()}_{suffix}"
        return self.values.get(key) or None

    def title_for(self, tag: str) -> str:
        """Notification title for a classification tag."""
        return self._tag_value(tag, "TITLE") or DEFAULT_TITLES.get(tag, tag)

    def sound_for(self, tag: str) -> Optional[str]:
        return self._tag_value(tag, "SOUND")

    def icon_for(self, tag: str) -> Optional[str]:
        return self._tag_value(tag, "ICON")


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from the environment (or the given mapping)."""
    env = os.environ if environ is None else environ
    values = {k: v for k, v in env.items() if k.startswith(PREFIX)}

    resources_dir = values.get(f"{PREFIX}RESOURCES_DIR")

    return Settings(
        resources_dir=Path(resources_dir).expanduser() if resources_dir else DEFAULT_RESOURCES_DIR,
        probe_timeout=_parse_timeout(values.get(f"{PREFIX}PROBE_TIMEOUT")),
        notifier=values.get(f"{PREFIX}NOTIFIER") or None,
        activate_terminal=_parse_bool(values.get(f"{PREFIX}ACTIVATE_TERMINAL")),
        app_name=values.get(f"{PREFIX}APP_NAME") or DEFAULT_APP_NAME,
        expire_time=values.get(f"{PREFIX}EXPIRE_TIME") or None,
        error_log=values.get(f"{PREFIX}ERROR_LOG") or "stderr",
        log_level=(values.get(f"{PREFIX}LOG_LEVEL") or "WARNING").upper(),
        values=values,
    )
