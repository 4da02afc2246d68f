"""Parsing a command line and dispatching it to built-ins or external programs."""

from __future__ import annotations

import os
import re
import sys
import tempfile
import time
from contextlib import ExitStack
from typing import IO, Callable

from .builtins import (
    change_directory,
    current_directory,
    echo_words,
    set_variable,
    unset_variable,
)
from .jobs import (
    JobTable,
    bring_to_foreground,
    format_jobs,
    kill_all,
    kill_job,
    resume_background,
    run_external,
)
from .listing import ls
from .procinfo import format_process_info, nightswatch, process_info
from .redirection import parse_redirection, redirect_kind, run_redirected
from .state import ShellError, ShellState

_UP_ARROW = "\x1b[A"
_CRON_USAGE = "Enter command in the form `cronjob -c ls -t 3 -p 6`"
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _atoi(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def has_pipe(command: str) -> bool:
    return "|" in command


def split_pipeline(command: str) -> list[str]:
    """The stages of a pipeline; empty stages are dropped."""
    return [stage for stage in command.split("|") if stage]


def count_up_arrows(command: str) -> int:
    """How many up-arrow key sequences make up the whole command, or 0."""
    squeezed = "".join(char for char in command if char not in " \t\n")
    if not squeezed.startswith("\x1b") or len(squeezed) % 3:
        return 0
    count = len(squeezed) // 3
    return count if squeezed == _UP_ARROW * count else 0


def parse_cron(args: list[str]) -> tuple[list[str], int, int]:
    """``cronjob -c cmd... -t interval -p period`` to ``(cmd, interval, period)``."""
    if len(args) < 7:
        raise ShellError(_CRON_USAGE)
    start = interval = period = None
    for index, arg in enumerate(args):
        if arg == "-c":
            start = index + 1
        elif arg in ("-t", "-p"):
            if index + 1 >= len(args):
                raise ShellError(_CRON_USAGE)
            value = _atoi(args[index + 1])
            if arg == "-t":
                interval = value
            else:
                period = value
    if start is None or interval is None or period is None or interval <= 0:
        raise ShellError(_CRON_USAGE)
    command = args[start : start + len(args) - 6]
    if not command:
        raise ShellError(_CRON_USAGE)
    return command, interval, period


class Executor:
    """Runs single command lines against one shell session."""

    def __init__(self, state: ShellState, out: IO[str] | None = None) -> None:
        self.state = state
        self.out = out if out is not None else sys.stdout
        self.jobs = JobTable()
        self._early: dict[str, Callable[[list[str]], object]] = {
            "nightswatch": self._nightswatch,
            "kjob": lambda args: kill_job(self.jobs, args),
            "bg": lambda args: resume_background(self.jobs, args),
            "fg": self._foreground_job,
            "cronjob": self.schedule_cron,
        }
        self._late: dict[str, Callable[[list[str]], object]] = {
            "setenv": set_variable,
            "unsetenv": unset_variable,
            "quit": self._quit,
            "pwd": lambda args: self._write(current_directory()),
            "cd": lambda args: change_directory(args, self.state.home),
            "echo": lambda args: self._write(echo_words(args)),
            "ls": self._ls,
            "pinfo": self._pinfo,
            "history": self._history,
            "jobs": self._jobs,
            "overkill": lambda args: kill_all(self.jobs),
        }

    def _write(self, text: str) -> None:
        self.out.write(text + "\n")

    def execute(self, command: str) -> None:
        """Run one command, reporting its errors on the output stream.

        ``quit`` raises SystemExit after saving the history.
        """
        if not command.split():
            return
        up = count_up_arrows(command)
        if up:
            try:
                command = self.state.history.recall(up)
            except IndexError:
                return
            self._write(command)
        self.state.history.add(command)
        try:
            self._dispatch(command)
        except ShellError as exc:
            self._write(str(exc))

    def _dispatch(self, command: str) -> None:
        if has_pipe(command):
            self.run_pipeline(command)
            return
        if redirect_kind(command):
            redirection = parse_redirection(command)
            self.out.flush()
            run_redirected(redirection)
            return
        args = command.split()
        name = args[0]
        if name in self._early:
            self._early[name](args)
        elif args[-1] == "&":
            self._background(args[:-1])
        elif args[-1].endswith("&"):
            self._background(args[:-1] + [args[-1][:-1]])
        elif name in self._late:
            self._late[name](args)
        else:
            self._foreground(args)

    def _background(self, args: list[str]) -> None:
        self.out.flush()
        message = run_external(self.jobs, args, True)
        if message:
            self._write(message)

    def _foreground(self, args: list[str]) -> None:
        self.out.flush()
        self.state.current_job = " ".join(args)
        message = run_external(self.jobs, args, False)
        if message:
            self._write(message)

    def _foreground_job(self, args: list[str]) -> None:
        self.out.flush()
        message = bring_to_foreground(self.jobs, args)
        if message:
            self._write(message)

    def _nightswatch(self, args: list[str]) -> None:
        nightswatch(args, sys.stdin, self.out)

    def _ls(self, args: list[str]) -> None:
        for line in ls(args, self.state.home):
            self._write(line)

    def _pinfo(self, args: list[str]) -> None:
        pid = _atoi(args[1]) if len(args) > 1 else None
        self._write(format_process_info(process_info(pid, self.state.home)))

    def _history(self, args: list[str]) -> None:
        count = _atoi(args[1]) if len(args) > 1 else 10
        for entry in self.state.history.recent(count):
            self._write(entry)

    def _jobs(self, args: list[str]) -> None:
        for line in format_jobs(self.jobs):
            self._write(line)

    def _quit(self, args: list[str]) -> None:
        try:
            self.state.history.save(self.state.history_file)
        except OSError as exc:
            self._write(f"history.txt: {exc.strerror}")
        kill_all(self.jobs)
        self.out.write(f"\x1b[1;35m\n*** Goodbye, {self.state.user} ***\n\x1b[0m")
        self.out.write("\n*** Nash Out ~(˘▾˘~) ***\n\n")
        self.out.flush()
        raise SystemExit(0)

    def _output_fd(self) -> int | None:
        try:
            return self.out.fileno()
        except (OSError, AttributeError, ValueError):
            return None

    def _run_stage(self, stage: str, source_fd: int | None, sink_fd: int) -> None:
        pid = os.fork()
        if pid == 0:
            status = 0
            try:
                if source_fd is not None:
                    os.dup2(source_fd, 0)
                os.dup2(sink_fd, 1)
                with open(1, "w", closefd=False) as stage_out:
                    Executor(self.state, stage_out).execute(stage)
            except SystemExit as exc:
                status = exc.code if isinstance(exc.code, int) else 0
            except BaseException:
                status = 2
            finally:
                os._exit(status)
        try:
            os.waitpid(pid, 0)
        except ChildProcessError:
            pass

    def run_pipeline(self, command: str) -> None:
        """Run each stage in turn, feeding one stage's output to the next."""
        stages = split_pipeline(command)
        target = self._output_fd()
        self.out.flush()
        sys.stdout.flush()
        sys.stderr.flush()
        with ExitStack() as stack:
            previous = None
            for position, stage in enumerate(stages):
                last = position == len(stages) - 1
                sink = None
                if last and target is not None:
                    sink_fd = target
                else:
                    sink = stack.enter_context(tempfile.TemporaryFile())
                    sink_fd = sink.fileno()
                source_fd = previous.fileno() if previous is not None else None
                self._run_stage(stage, source_fd, sink_fd)
                if sink is not None:
                    sink.seek(0)
                previous = sink
            if target is None and previous is not None:
                self.out.write(previous.read().decode("utf-8", errors="replace"))

    def schedule_cron(self, args: list[str]) -> int:
        """Run a command every ``interval`` seconds for ``period`` seconds.

        The repetitions happen in a child process whose pid is returned.
        """
        command, interval, period = parse_cron(args)
        repeat = period // interval
        line = " ".join(command)
        self.out.flush()
        sys.stdout.flush()
        pid = os.fork()
        if pid == 0:
            try:
                for _ in range(repeat):
                    time.sleep(interval)
                    self.execute(line)
                    self.out.flush()
            except BaseException:
                pass
            finally:
                os._exit(0)
        return pid