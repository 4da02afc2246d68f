"""Simple built-in commands: cd, echo, pwd, setenv and unsetenv."""

from __future__ import annotations

import os

from .state import ShellError


def expand_home(path: str, home: str) -> str:
    """Replace a leading ``~`` with the shell's home directory."""
    if path.startswith("~"):
        return home + path[1:]
    return path


def change_directory(args: list[str], home: str) -> None:
    """``cd [dir]``: go home without an argument, expanding ``~``."""
    target = expand_home(args[1], home) if len(args) > 1 else home
    try:
        os.chdir(target)
    except OSError as exc:
        raise ShellError(f"Error: {exc.strerror}") from exc


def echo_words(args: list[str]) -> str:
    """``echo``: the arguments with double quotes removed, space separated."""
    words = [
        piece
        for arg in args[1:]
        for piece in arg.split('"')
        if piece
    ]
    return " ".join(words)


def current_directory() -> str:
    """``pwd``: the working directory."""
    try:
        return os.getcwd()
    except OSError as exc:
        raise ShellError(f"getcwd() error: {exc.strerror}") from exc


def _check_name(name: str) -> None:
    if not name or "=" in name or "\0" in name:
        raise ShellError("Error: Invalid argument")


def set_variable(args: list[str]) -> None:
    """``setenv var [value]``: set a variable, to empty when no value is given."""
    if len(args) not in (2, 3):
        raise ShellError(
            "Incorrect number of arguments. Provide either 1 or 2 arguments.\n"
            "Syntax: `setenv var [value]`"
        )
    name = args[1]
    value = args[2] if len(args) == 3 else ""
    _check_name(name)
    try:
        os.environ[name] = value
    except ValueError as exc:
        raise ShellError("Error: Invalid argument") from exc


def unset_variable(args: list[str]) -> None:
    """``unsetenv var``: remove a variable from the environment."""
    if len(args) != 2:
        raise ShellError(
            "Incorrect number of arguments. Provide only 1 argument.\n"
            "Syntax: `unsetenv var`"
        )
    _check_name(args[1])
    os.environ.pop(args[1], None)