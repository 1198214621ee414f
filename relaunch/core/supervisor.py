from __future__ import annotations

import logging
import subprocess
from contextlib import ExitStack
from pathlib import Path
from typing import IO, Any, Callable

from relaunch.core.errors import LaunchFailed, RedirectFailed, StderrRedirectFailed, StdoutRedirectFailed
from relaunch.core.logging import format_fields
from relaunch.core.state import SupervisionState
from relaunch.spec import LaunchSpec, MonitorPolicy
from relaunch.types import (
    CleanExit,
    Exited,
    ExitStatus,
    RelaunchOutcome,
    RestartedThenClean,
    RestartLimitReached,
    Signaled,
    exit_status_from_returncode,
)

SpawnFn = Callable[..., Any]


class Supervisor:
    """Runs one target to completion under a restart policy.

    Strictly sequential: a new child is only spawned after the previous one
    has been waited on.
    """

    def __init__(
        self,
        launch: LaunchSpec,
        policy: MonitorPolicy,
        logger: Any | None = None,
        spawn: SpawnFn = subprocess.Popen,
    ) -> None:
        self.launch = launch
        self.policy = policy
        self.logger = logger or logging.getLogger("relaunch.supervisor")
        self.spawn = spawn
        self.state = SupervisionState()

    def run(self) -> RelaunchOutcome:
        if self.policy.restart_interval is not None:
            self.logger.warning("restart interval is not enforced; restart counter will not reset")
        while True:
            status = self._run_once()
            self.state.record_exit(status)
            if status.success and not self.policy.restart_always:
                break
            if not self._restart_permitted():
                self.logger.error("max restart count exceeded")
                break
        outcome = self.outcome()
        self.logger.info(self.summary(outcome))
        return outcome

    def summary(self, outcome: RelaunchOutcome) -> str:
        fields = format_fields(self.state.as_payload())
        return f"supervision finished: outcome={type(outcome).__name__} exit_code={outcome.exit_code} {fields}"

    def outcome(self) -> RelaunchOutcome:
        state = self.state
        if self.policy.restart_always:
            return RestartLimitReached(state.fail_count)
        if state.fail_count == 0:
            return CleanExit()
        if state.last_status == Exited(0):
            return RestartedThenClean(state.fail_count)
        return RestartLimitReached(state.fail_count)

    def _run_once(self) -> ExitStatus:
        exe = self.launch.exe
        with ExitStack() as stack:
            stdout = self._open_redirect(self.policy.stdout_path, StdoutRedirectFailed, stack)
            stderr = self._open_redirect(self.policy.stderr_path, StderrRedirectFailed, stack)
            try:
                process = self.spawn(self.launch.command(), stdout=stdout, stderr=stderr)
            except OSError as exc:
                raise LaunchFailed(exe, exc) from exc
            self.state.record_start(process.pid)
            self.logger.info(f"monitoring new child process {exe} with pid {process.pid}")
            status = exit_status_from_returncode(process.wait())
        self._log_exit(status)
        return status

    def _log_exit(self, status: ExitStatus) -> None:
        if isinstance(status, Signaled):
            self.logger.warning("exited due to signal")
        elif status.success:
            self.logger.info("exited normally.")
        else:
            self.logger.warning(f"exited with exit code {status.code}")

    def _restart_permitted(self) -> bool:
        max_restarts = self.policy.max_restarts
        if max_restarts is None:
            return True
        return max_restarts > self.state.start_count - 1

    @staticmethod
    def _open_redirect(path: Path | None, error_cls: type[RedirectFailed], stack: ExitStack) -> IO[bytes] | None:
        if path is None:
            return None
        try:
            return stack.enter_context(open(path, "ab"))
        except OSError as exc:
            raise error_cls(path, exc) from exc
