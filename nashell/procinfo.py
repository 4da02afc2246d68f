"""Process details for ``pinfo`` and periodic kernel statistics for ``nightswatch``."""

from __future__ import annotations

import os
import re
import select
import time
from dataclasses import dataclass
from typing import IO

from .state import ShellError

INTERRUPTS_PATH = "/proc/interrupts"
MEMINFO_PATH = "/proc/meminfo"

_NIGHTSWATCH_USAGE = "Kindly give input as `nightswatch -n [seconds] [dirty/interrupt]"
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _atoi(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


@dataclass(frozen=True)
class ProcessInfo:
    """What ``pinfo`` reports about one process."""

    pid: int
    status: str
    virtual_memory: str
    executable: str | None


def read_line(path: str, n: int) -> str:
    """Line ``n`` (counting from 1) of a text file, or ``""`` if it is shorter.

    Raises OSError when the file cannot be read.
    """
    with open(path, encoding="utf-8", errors="replace") as handle:
        for number, line in enumerate(handle, start=1):
            if number == n:
                return line.rstrip("\n")
    return ""


def _status_fields(pid: int) -> dict[str, str]:
    fields = {}
    with open(f"/proc/{pid}/status", encoding="utf-8", errors="replace") as handle:
        for line in handle:
            key, separator, value = line.partition(":")
            if separator:
                fields[key] = value.strip()
    return fields


def _abbreviate(path: str, home: str) -> str:
    position = path.find(home) if home else -1
    if position >= 0:
        path = path[position + len(home):]
    return "~" + path


def process_info(pid: int | None, home: str) -> ProcessInfo:
    """Gather status, virtual memory size and executable of ``pid``.

    ``None`` means the shell itself.
    """
    if pid is None:
        pid = os.getpid()
    try:
        fields = _status_fields(pid)
    except OSError as exc:
        raise ShellError(f"Process with ID {pid} does not exist") from exc
    try:
        executable: str | None = _abbreviate(os.readlink(f"/proc/{pid}/exe"), home)
    except OSError:
        executable = None
    return ProcessInfo(
        pid=pid,
        status=fields.get("State", ""),
        virtual_memory=fields.get("VmSize", ""),
        executable=executable,
    )


def format_process_info(info: ProcessInfo) -> str:
    """The ``pinfo`` report as printed by the shell."""
    executable = info.executable if info.executable is not None else "No path for executable"
    return (
        f"pid -- {info.pid}\n"
        f"Process Status -- {info.status}\n"
        f"Virtual Memory -- {info.virtual_memory}\n"
        f"Executable path -- {executable}"
    )


def interrupt_line(path: str = INTERRUPTS_PATH) -> str:
    """The first CPU interrupt row, cut before its controller name."""
    try:
        line = read_line(path, 3)
    except OSError as exc:
        raise ShellError(f"Can't open {path} file") from exc
    return line.split("I", 1)[0]


def dirty_line(path: str = MEMINFO_PATH) -> str:
    """The line of the memory summary that reports dirty memory."""
    try:
        return read_line(path, 17)
    except OSError as exc:
        raise ShellError(f"Can't open {path} file") from exc


def parse_nightswatch_args(args: list[str]) -> tuple[int, str]:
    """``nightswatch -n seconds dirty|interrupt`` to ``(seconds, mode)``."""
    if len(args) != 4 or args[3] not in ("dirty", "interrupt"):
        raise ShellError(_NIGHTSWATCH_USAGE)
    return _atoi(args[2]), args[3]


def _sample(sampler, out: IO[str]) -> None:
    try:
        out.write(sampler() + "\n")
    except ShellError as exc:
        out.write(f"{exc}\n")
    out.flush()


def nightswatch(args: list[str], stdin: IO[str], out: IO[str]) -> None:
    """Print a statistic every few seconds until a line starting with ``q`` arrives."""
    interval, mode = parse_nightswatch_args(args)
    if mode == "interrupt":
        _sample(lambda: read_line_or_fail(INTERRUPTS_PATH, 1), out)
        sampler = interrupt_line
    else:
        sampler = dirty_line
    while True:
        ready, _, _ = select.select([stdin], [], [], 0)
        if ready and stdin.readline().startswith("q"):
            return
        _sample(sampler, out)
        time.sleep(interval)


def read_line_or_fail(path: str, n: int) -> str:
    """Like :func:`read_line`, reporting an unreadable file as a shell error."""
    try:
        return read_line(path, n)
    except OSError as exc:
        raise ShellError(f"Can't open {path} file") from exc