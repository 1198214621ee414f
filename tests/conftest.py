from __future__ import annotations

from typing import Iterable

import pytest

from relaunch.core.logging import shutdown_logging


class DummyLogger:
    def __init__(self) -> None:
        self.events: list[tuple[str, str]] = []

    def _record(self, level: str, message: str) -> None:
        self.events.append((level, message))

    def info(self, message: str) -> None:
        self._record("info", message)

    def warning(self, message: str) -> None:
        self._record("warning", message)

    def error(self, message: str) -> None:
        self._record("error", message)

    @property
    def messages(self) -> list[str]:
        return [message for _, message in self.events]


class BrokenStream:
    def write(self, _data: str) -> None:
        raise OSError(28, "No space left on device")

    def flush(self) -> None:
        pass

    def close(self) -> None:
        pass


class FakeProcess:
    def __init__(self, pid: int, returncode: int) -> None:
        self.pid = pid
        self.returncode = returncode

    def wait(self) -> int:
        return self.returncode


class FakeSpawner:
    """Stands in for subprocess.Popen, replaying scripted return codes."""

    def __init__(self, returncodes: Iterable[int], repeat_last: bool = True) -> None:
        self.returncodes = list(returncodes)
        self.repeat_last = repeat_last
        self.calls: list[tuple[list[str], dict]] = []

    def __call__(self, command: list[str], **kwargs) -> FakeProcess:
        index = len(self.calls)
        self.calls.append((command, kwargs))
        if index < len(self.returncodes):
            code = self.returncodes[index]
        elif self.repeat_last:
            code = self.returncodes[-1]
        else:
            raise AssertionError("spawned more children than scripted")
        return FakeProcess(pid=1000 + index, returncode=code)


@pytest.fixture
def dummy_logger() -> DummyLogger:
    return DummyLogger()


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    shutdown_logging()
