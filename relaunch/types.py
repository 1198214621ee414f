from __future__ import annotations

from dataclasses import dataclass
from typing import Union

CLEAN_EXIT_CODE = 0


@dataclass(frozen=True)
class Exited:
    code: int

    @property
    def success(self) -> bool:
        return self.code == 0


@dataclass(frozen=True)
class Signaled:
    signal: int | None = None

    @property
    def success(self) -> bool:
        return False


ExitStatus = Union[Exited, Signaled]


def exit_status_from_returncode(returncode: int) -> ExitStatus:
    # POSIX children killed by a signal report -signum and have no exit code.
    if returncode < 0:
        return Signaled(signal=-returncode)
    return Exited(code=returncode)


@dataclass(frozen=True)
class CleanExit:
    @property
    def exit_code(self) -> int:
        return CLEAN_EXIT_CODE


@dataclass(frozen=True)
class RestartedThenClean:
    count: int

    @property
    def exit_code(self) -> int:
        return CLEAN_EXIT_CODE


@dataclass(frozen=True)
class RestartLimitReached:
    count: int

    @property
    def exit_code(self) -> int:
        # Deliberately the failure count, not 0/1: callers read the exit code
        # as the number of failed attempts.
        return self.count


RelaunchOutcome = Union[CleanExit, RestartedThenClean, RestartLimitReached]
