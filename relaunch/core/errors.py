from __future__ import annotations

from pathlib import Path


class SupervisionError(RuntimeError):
    """Fatal error that stops a supervision run before the policy does."""

    def __init__(self, message: str, cause: OSError | None = None):
        super().__init__(message)
        self.cause = cause


class LaunchFailed(SupervisionError):
    def __init__(self, exe: str, cause: OSError):
        super().__init__(f"Error launching target {exe}: {cause}", cause)
        self.exe = exe


class RedirectFailed(SupervisionError):
    stream = ""

    def __init__(self, path: Path, cause: OSError):
        super().__init__(f"Error redirecting {self.stream} to file: {cause}", cause)
        self.path = path


class StdoutRedirectFailed(RedirectFailed):
    stream = "stdout"


class StderrRedirectFailed(RedirectFailed):
    stream = "stderr"


class UsageError(ValueError):
    """Invalid command line; reported before supervision starts."""
