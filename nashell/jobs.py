"""Background and stopped jobs: listing, signalling, foreground and background control."""

from __future__ import annotations

import os
import re
import signal
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

from .procinfo import read_line
from .state import ShellError

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _atoi(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


@dataclass
class Job:
    """A process the shell is keeping track of."""

    name: str
    pid: int


class JobTable:
    """Jobs in the order they were started; numbered from 1."""

    def __init__(self) -> None:
        self._jobs: list[Job] = []

    def add(self, name: str, pid: int) -> int:
        """Append a job and return its number."""
        self._jobs.append(Job(name, pid))
        return len(self._jobs)

    def get(self, number: int) -> Job:
        if not 1 <= number <= len(self._jobs):
            raise IndexError(f"no job {number}")
        return self._jobs[number - 1]

    def pop(self, number: int) -> Job:
        """Remove a job by number; later jobs move up one place."""
        self.get(number)
        return self._jobs.pop(number - 1)

    def remove_pid(self, pid: int) -> Job | None:
        """Remove and return the job with ``pid``, if there is one."""
        for job in self._jobs:
            if job.pid == pid:
                self._jobs.remove(job)
                return job
        return None

    def __len__(self) -> int:
        return len(self._jobs)

    def __iter__(self) -> Iterator[Job]:
        return iter(list(self._jobs))


def job_status(pid: int) -> str:
    """``Stopped`` for a stopped process, ``Running`` otherwise."""
    try:
        line = read_line(f"/proc/{pid}/status", 3)
    except OSError as exc:
        raise ShellError(f"Error: {exc.strerror}") from exc
    state = line.partition(":")[2].strip()
    return "Stopped" if state.startswith("T") else "Running"


def format_jobs(table: JobTable) -> list[str]:
    """``jobs``: one line per job, or the error for a job that cannot be read."""
    lines = []
    for number, job in enumerate(table, start=1):
        try:
            status = job_status(job.pid)
        except ShellError as exc:
            lines.append(str(exc))
        else:
            lines.append(f"[{number}] {status} {job.name} [{job.pid}]")
    return lines


def _send(pid: int, signum: int) -> None:
    try:
        os.kill(pid, signum)
    except (OSError, ValueError) as exc:
        raise ShellError(f"Error: {getattr(exc, 'strerror', None) or exc}") from exc


def kill_job(table: JobTable, args: list[str]) -> None:
    """``kjob <jobNumber> <signalNumber>``."""
    if len(args) != 3:
        raise ShellError(
            "Please provide correct number of arguments.\n"
            "Format is `kjob <jobNumber> <signalNumber>`"
        )
    try:
        job = table.get(_atoi(args[1]))
    except IndexError as exc:
        raise ShellError("Invalid Job ID\nRun `jobs` to see running jobs") from exc
    _send(job.pid, _atoi(args[2]))


def resume_background(table: JobTable, args: list[str]) -> None:
    """``bg <jobNumber>``: let a stopped job continue in the background."""
    if len(args) != 2:
        raise ShellError("Incorrect number of arguments.\nFormat is `bg <jobNumber>`.")
    try:
        job = table.get(_atoi(args[1]))
    except IndexError as exc:
        raise ShellError("Enter valid job number") from exc
    _send(job.pid, signal.SIGCONT)


@contextmanager
def _terminal_given_to(pgid: int) -> Iterator[None]:
    """Hand the controlling terminal to ``pgid`` while the block runs."""
    try:
        interactive = os.isatty(0)
    except OSError:
        interactive = False
    if not interactive:
        yield
        return
    old_ttin = signal.signal(signal.SIGTTIN, signal.SIG_IGN)
    old_ttou = signal.signal(signal.SIGTTOU, signal.SIG_IGN)
    try:
        try:
            os.tcsetpgrp(0, pgid)
        except OSError:
            pass
        yield
    finally:
        try:
            os.tcsetpgrp(0, os.getpgrp())
        except OSError:
            pass
        signal.signal(signal.SIGTTIN, old_ttin)
        signal.signal(signal.SIGTTOU, old_ttou)


def _wait_for(pid: int) -> int | None:
    """Wait until ``pid`` exits or stops; ``None`` if it was already reaped."""
    try:
        _, status = os.waitpid(pid, os.WUNTRACED)
    except ChildProcessError:
        return None
    return status


def _suspended(table: JobTable, name: str, pid: int, status: int | None) -> str | None:
    if status is not None and os.WIFSTOPPED(status):
        table.add(name, pid)
        return f"{name} with PID {pid} suspended"
    return None


def bring_to_foreground(table: JobTable, args: list[str]) -> str | None:
    """``fg <jobNumber>``: continue a job and wait for it.

    Returns the suspension notice if the job is stopped again.
    """
    if len(args) != 2:
        raise ShellError("Incorrect number of arguments.\nFormat is `fg <jobNumber>`.")
    try:
        job = table.pop(_atoi(args[1]))
    except IndexError as exc:
        raise ShellError("Enter valid job number.") from exc
    with _terminal_given_to(job.pid):
        try:
            os.kill(job.pid, signal.SIGCONT)
        except ProcessLookupError:
            return None
        status = _wait_for(job.pid)
    return _suspended(table, job.name, job.pid, status)


def kill_all(table: JobTable) -> None:
    """``overkill``: send SIGKILL to every job."""
    for job in table:
        try:
            os.kill(job.pid, signal.SIGKILL)
        except OSError:
            pass


def run_external(table: JobTable, args: list[str], background: bool) -> str | None:
    """Start a program in its own process group.

    In the background the job is recorded and ``[number] pid`` returned; in
    the foreground the shell waits, returning a notice if the program stops.
    """
    if not args:
        raise ShellError("Command not found")
    try:
        pid = os.posix_spawnp(args[0], args, os.environ, setpgroup=0)
    except OSError as exc:
        raise ShellError(f"Command not found: {exc.strerror}") from exc
    name = " ".join(args)
    if background:
        number = table.add(name, pid)
        return f"[{number}] {pid}"
    with _terminal_given_to(pid):
        status = _wait_for(pid)
    return _suspended(table, name, pid, status)


def reap_children(table: JobTable) -> list[str]:
    """Collect finished children and report those that were jobs."""
    messages = []
    while True:
        try:
            pid, status = os.waitpid(-1, os.WNOHANG)
        except ChildProcessError:
            break
        if pid == 0:
            break
        job = table.remove_pid(pid)
        if job is None:
            continue
        if os.WIFEXITED(status) and os.WEXITSTATUS(status) == 0:
            messages.append(f"{job.name} with PID {pid} exited normally")
        else:
            messages.append(f"{job.name} with PID {pid} failed to exit normally")
    return messages