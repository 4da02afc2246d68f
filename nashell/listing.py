"""The ``ls`` built-in with ``-l`` and ``-a`` flags."""

from __future__ import annotations

import grp
import os
import pwd
import stat
import time

from .builtins import expand_home
from .state import ShellError

_BLUE = "\x1b[1;34m"
_GREEN = "\x1b[1;32m"
_RESET = "\x1b[0m"

_PERMISSION_BITS = (
    (stat.S_IRUSR, "r"),
    (stat.S_IWUSR, "w"),
    (stat.S_IXUSR, "x"),
    (stat.S_IRGRP, "r"),
    (stat.S_IWGRP, "w"),
    (stat.S_IXGRP, "x"),
    (stat.S_IROTH, "r"),
    (stat.S_IWOTH, "w"),
    (stat.S_IXOTH, "x"),
)


def is_hidden(name: str) -> bool:
    return name.startswith(".")


def parse_ls_args(args: list[str], home: str) -> list[tuple[str, bool, bool]]:
    """Turn ``ls`` arguments into ``(path, long_format, show_hidden)`` targets.

    Flags apply to the paths that follow them; with no path the current
    directory is listed with the final flags.
    """
    long_format = show_hidden = False
    targets = []
    for arg in args[1:]:
        if arg == "-l":
            long_format = True
        elif arg == "-a":
            show_hidden = True
        elif arg in ("-al", "-la"):
            long_format = show_hidden = True
        else:
            targets.append((expand_home(arg, home), long_format, show_hidden))
    return targets or [(".", long_format, show_hidden)]


def format_permissions(mode: int, is_dir: bool) -> str:
    """The ten-character ``drwxr-xr-x`` form of a file mode."""
    bits = "".join(char if mode & bit else "-" for bit, char in _PERMISSION_BITS)
    return ("d" if is_dir else "-") + bits


def _owner_name(uid: int) -> str:
    try:
        return pwd.getpwuid(uid).pw_name
    except KeyError:
        return str(uid)


def _group_name(gid: int) -> str:
    try:
        return grp.getgrgid(gid).gr_name
    except KeyError:
        return str(gid)


def long_entry(directory: str, name: str) -> str:
    """One line of a long listing for ``name`` inside ``directory``."""
    try:
        info = os.stat(directory + "/" + name)
    except OSError as exc:
        raise ShellError(f"Error: {exc.strerror}") from exc
    is_dir = stat.S_ISDIR(info.st_mode)
    perms = format_permissions(info.st_mode, is_dir)
    when = time.strftime("%b  %d %H:%M", time.localtime(info.st_mtime))
    if is_dir:
        shown = f"{_BLUE}{name}{_RESET}"
    elif perms[3] == "x":
        shown = f"{_GREEN}{name}{_RESET}"
    else:
        shown = name
    return (
        f"{perms}\t{info.st_nlink}\t{_owner_name(info.st_uid)}\t"
        f"{_group_name(info.st_gid)}\t{info.st_size}\t {when}\t{shown}"
    )


def list_directory(
    path: str, long_format: bool = False, show_hidden: bool = False
) -> list[str]:
    """Lines listing a directory, sorted by name, ``.`` and ``..`` included."""
    try:
        names = sorted([".", "..", *os.listdir(path)])
    except OSError as exc:
        raise ShellError(f"Error: {exc.strerror}") from exc
    shown = [name for name in names if show_hidden or not is_hidden(name)]
    if not long_format:
        return ["\t".join(shown)]
    lines = ["Long list: "]
    for name in shown:
        try:
            lines.append(long_entry(path, name))
        except ShellError as exc:
            lines.append(str(exc))
    return lines


def ls(args: list[str], home: str) -> list[str]:
    """Run ``ls``; a target that cannot be listed contributes its error line."""
    lines = []
    for path, long_format, show_hidden in parse_ls_args(args, home):
        try:
            lines.extend(list_directory(path, long_format, show_hidden))
        except ShellError as exc:
            lines.append(str(exc))
    return lines