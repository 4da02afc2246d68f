"""The interactive loop: prompt, read a line, run each ``;``-separated command."""

from __future__ import annotations

import argparse
import os
import signal
import sys
from typing import IO

from .executor import Executor
from .jobs import reap_children
from .state import ShellState

_RED = "\x1b[1;31m"
_RESET = "\x1b[0m"


def split_commands(line: str) -> list[str]:
    """The commands of a line separated by ``;``; empty ones are dropped."""
    return [command for command in line.split(";") if command]


def prompt_text(state: ShellState, cwd: str) -> str:
    """``<user@host:dir>`` with the home directory shown as ``~``."""
    return (
        f"<\x1b[1;32m{state.user}@{state.host}\x1b[0m:"
        f"\x1b[1;34m{state.display_path(cwd)}\x1b[0m>"
    )


def run_shell(state: ShellState, stdin: IO[str], out: IO[str]) -> int:
    """Read and run commands until ``quit`` or end of input; return the exit status."""
    executor = Executor(state, out)
    while True:
        state.child_pid = -1
        for message in reap_children(executor.jobs):
            out.write(f"{_RED}\n{message}\n{_RESET}")
        try:
            cwd = os.getcwd()
        except OSError as exc:
            out.write(f"getcwd() error: {exc.strerror}\n")
            return 1
        out.write(prompt_text(state, cwd))
        out.flush()
        line = stdin.readline()
        if not line:
            out.write("\n")
            out.flush()
            return 0
        for command in split_commands(line):
            try:
                executor.execute(command)
            except SystemExit as exc:
                return exc.code if isinstance(exc.code, int) else 0
        out.flush()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="nashell", description="An interactive command shell.")
    parser.add_argument(
        "--home",
        default=None,
        help="directory shown as ~ and holding history.txt (default: the current directory)",
    )
    options = parser.parse_args(argv)
    state = ShellState(home=os.path.abspath(options.home or os.getcwd()))

    print("\x1b[1;35m\n *** Welcome to Shell ***\n\x1b[0m")
    try:
        state.history.load(state.history_file)
    except OSError as exc:
        print(f"history.txt: {exc.strerror}", file=sys.stderr)

    def forward_interrupt(signum, frame):
        if os.getpid() == state.shell_pid and state.child_pid != -1:
            try:
                os.kill(state.child_pid, signal.SIGINT)
            except OSError:
                pass

    previous = signal.signal(signal.SIGINT, forward_interrupt)
    try:
        return run_shell(state, sys.stdin, sys.stdout)
    finally:
        signal.signal(signal.SIGINT, previous)


if __name__ == "__main__":
    sys.exit(main())