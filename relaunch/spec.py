from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class LaunchSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    exe: str
    args: list[str] = Field(default_factory=list)

    def command(self) -> list[str]:
        return [self.exe, *self.args]


class MonitorPolicy(BaseModel):
    """Restart policy for one supervision run.

    ``restart_interval`` is accepted and carried through, but the supervisor
    does not reset any counter with it yet.
    """

    model_config = ConfigDict(frozen=True)

    restart_always: bool = False
    max_restarts: Optional[int] = Field(default=None, ge=0)
    restart_interval: Optional[int] = Field(default=None, ge=0)
    stdout_path: Optional[Path] = None
    stderr_path: Optional[Path] = None
    log_path: Optional[Path] = None


__all__ = ["LaunchSpec", "MonitorPolicy"]
