from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any

from relaunch.types import ExitStatus, Exited, Signaled


@dataclass
class SupervisionState:
    """Counters for one supervision run.

    ``start_count`` is bumped as soon as a child is spawned and before it is
    waited on; ``fail_count`` only ever follows a recorded exit, so
    ``start_count >= fail_count >= 0`` holds between any two calls. Only the
    most recent attempt is kept.
    """

    start_count: int = 0
    fail_count: int = 0
    last_status: ExitStatus | None = None
    pid: int | None = None
    started_at: float | None = None
    finished_at: float | None = None

    @property
    def last_exit_code(self) -> int | None:
        if isinstance(self.last_status, Exited):
            return self.last_status.code
        return None

    def record_start(self, pid: int) -> None:
        self.start_count += 1
        self.pid = pid
        self.started_at = time.time()
        self.finished_at = None

    def record_exit(self, status: ExitStatus) -> None:
        if not status.success:
            self.fail_count += 1
        self.last_status = status
        self.finished_at = time.time()

    def as_payload(self) -> dict[str, Any]:
        last = self.last_status
        return {
            "start_count": self.start_count,
            "fail_count": self.fail_count,
            "last_exit_code": self.last_exit_code,
            "last_signal": last.signal if isinstance(last, Signaled) else None,
            "pid": self.pid,
        }
