"""Session-wide state shared by the shell's commands."""

from __future__ import annotations

import getpass
import os
import socket
from dataclasses import dataclass, field

from .history import History


class ShellError(Exception):
    """A command failed; the message is what the shell reports to the user."""


def _default_user() -> str:
    try:
        return os.getlogin()
    except OSError:
        try:
            return getpass.getuser()
        except (KeyError, OSError):
            return ""


@dataclass
class ShellState:
    """Identity of the session, its home directory and its command history."""

    home: str
    user: str = field(default_factory=_default_user)
    host: str = field(default_factory=socket.gethostname)
    shell_pid: int = field(default_factory=os.getpid)
    child_pid: int = -1
    current_job: str = ""
    history: History = field(default_factory=History)

    @property
    def history_file(self) -> str:
        """Where the history is kept between sessions."""
        return self.home + "/history.txt"

    def display_path(self, path: str) -> str:
        """Show ``path`` with the shell's home directory abbreviated to ``~``."""
        position = path.find(self.home) if self.home else -1
        if position < 0:
            return path
        return "~" + path[position + len(self.home):]