from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from relaunch.spec import MonitorPolicy

log = logging.getLogger("relaunch.config")

CONFIG_ENV_VAR = "RELAUNCH_CONFIG"


class PolicyConfig(BaseModel):
    """Policy defaults read from a JSON file; command line flags win."""

    model_config = ConfigDict(extra="forbid")

    restart_always: bool = False
    max_restarts: Optional[int] = Field(default=None, ge=0)
    restart_interval: Optional[int] = Field(default=None, ge=0)
    stdout: Optional[str] = None
    stderr: Optional[str] = None
    log: Optional[str] = None

    @classmethod
    def _resolve_path(cls, path: Path | None) -> Path | None:
        if path is not None:
            return Path(path).expanduser()
        raw = os.getenv(CONFIG_ENV_VAR, "").strip()
        if not raw:
            return None
        return Path(raw).expanduser()

    @classmethod
    def load(cls, path: Path | None = None) -> "PolicyConfig":
        """
        Load policy defaults safely.

        Never raises: a missing, unreadable, corrupt or invalid file is
        reported as a warning and the built-in defaults are used instead.
        """
        config_path = cls._resolve_path(path)
        if config_path is None:
            return cls()

        if not config_path.exists():
            log.warning("Config file %s does not exist; using defaults.", config_path)
            return cls()

        if not config_path.is_file():
            log.warning("Config path %s is not a file; using defaults.", config_path)
            return cls()

        try:
            raw_text = config_path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            log.warning("Failed to read config file %s: %s", config_path, exc)
            return cls()

        try:
            data: dict[str, Any] = json.loads(raw_text or "{}")
        except json.JSONDecodeError as exc:
            log.warning("Corrupt config JSON in %s (%s); using defaults.", config_path, exc)
            return cls()

        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            log.warning("Invalid config schema in %s (%s); using defaults.", config_path, exc)
            return cls()

    def to_policy(self, **overrides: Any) -> MonitorPolicy:
        values: dict[str, Any] = {
            "restart_always": self.restart_always,
            "max_restarts": self.max_restarts,
            "restart_interval": self.restart_interval,
            "stdout_path": Path(self.stdout).expanduser() if self.stdout else None,
            "stderr_path": Path(self.stderr).expanduser() if self.stderr else None,
            "log_path": Path(self.log).expanduser() if self.log else None,
        }
        for key, value in overrides.items():
            if value is not None:
                values[key] = value
        return MonitorPolicy(**values)
