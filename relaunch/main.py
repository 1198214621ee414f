from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence

from relaunch.core.config import PolicyConfig
from relaunch.core.errors import SupervisionError, UsageError
from relaunch.core.logging import configure_logging, shutdown_logging
from relaunch.core.supervisor import Supervisor
from relaunch.spec import LaunchSpec, MonitorPolicy

VERSION = "0.1.0"
USAGE_ERROR_EXIT_CODE = 1
IO_ERROR_EXIT_CODE = -1
HELP_HINT = "relaunch --help provides usage information"


class RelaunchArgumentParser(argparse.ArgumentParser):
    def error(self, message: str):  # type: ignore[override]
        raise UsageError(message)


def _numeric(flag: str):
    def parse(raw: str) -> int:
        try:
            value = int(raw)
        except ValueError:
            raise argparse.ArgumentTypeError(f"{flag} requires a numeric value!") from None
        if value < 0:
            raise argparse.ArgumentTypeError(f"{flag} cannot be negative!")
        return value

    return parse


def build_parser() -> argparse.ArgumentParser:
    parser = RelaunchArgumentParser(
        prog="relaunch",
        usage="relaunch [options] TARGET [-- TARGET_OPTIONS]",
        description="Launch TARGET and relaunch it when it exits, according to a restart policy.",
    )
    parser.add_argument("target", nargs="*", metavar="TARGET", help="Executable to supervise")
    parser.add_argument("-a", "--always-restart", action="store_true", help="Always restart target, even on clean exit")
    parser.add_argument(
        "-m", "--max-restarts", type=_numeric("-m/--max-restarts"), metavar="N",
        help="The maximum number of times to restart a process",
    )
    parser.add_argument(
        "-i", "--restart-interval", type=_numeric("-i/--restart-interval"), metavar="SECS",
        help="Reset restart counter after SECS seconds (not enforced yet)",
    )
    parser.add_argument("-o", "--stdout", type=Path, metavar="PATH", help="Redirect target stdout to PATH")
    parser.add_argument("-e", "--stderr", type=Path, metavar="PATH", help="Redirect target stderr to PATH")
    parser.add_argument("-l", "--log", type=Path, metavar="PATH", help="Path to relaunch output log")
    parser.add_argument("-c", "--config", type=Path, metavar="PATH", help="JSON file with policy defaults")
    parser.add_argument(
        "-V", "--version", action="version",
        version=f"relaunch {VERSION}\nLicensed under the MIT open source license.",
        help="Print version info and exit",
    )
    return parser


def split_passthrough(argv: Sequence[str]) -> tuple[list[str], list[str]]:
    """Split argv at the first literal ``--``; the rest belongs to the target."""
    args = list(argv)
    if "--" not in args:
        return args, []
    index = args.index("--")
    return args[:index], args[index + 1 :]


def parse_command_line(argv: Sequence[str]) -> tuple[LaunchSpec, MonitorPolicy]:
    own_args, passthru = split_passthrough(argv)
    parser = build_parser()
    options = parser.parse_args(own_args)
    if len(options.target) != 1:
        raise UsageError("TARGET must be specified and cannot include more than one command!")

    config = PolicyConfig.load(options.config)
    policy = config.to_policy(
        restart_always=True if options.always_restart else None,
        max_restarts=options.max_restarts,
        restart_interval=options.restart_interval,
        stdout_path=options.stdout.expanduser() if options.stdout else None,
        stderr_path=options.stderr.expanduser() if options.stderr else None,
        log_path=options.log.expanduser() if options.log else None,
    )
    return LaunchSpec(exe=options.target[0], args=passthru), policy


def main(argv: Sequence[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    try:
        launch, policy = parse_command_line(argv)
    except UsageError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        print(HELP_HINT, file=sys.stderr)
        return USAGE_ERROR_EXIT_CODE

    try:
        logger = configure_logging(policy.log_path)
    except OSError as exc:
        print(f"Error opening log file {policy.log_path}: {exc}", file=sys.stderr)
        return IO_ERROR_EXIT_CODE

    try:
        outcome = Supervisor(launch, policy, logger).run()
    except SupervisionError as exc:
        logger.error(str(exc))
        return IO_ERROR_EXIT_CODE
    finally:
        shutdown_logging()
    return outcome.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
