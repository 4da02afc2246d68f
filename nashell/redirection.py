"""Running a command with its input or output redirected to files."""

from __future__ import annotations

import os
import re
import subprocess
from contextlib import ExitStack
from dataclasses import dataclass, field

from .state import ShellError

_OPERATOR = re.compile(r"(>>|>|<)")


def redirect_kind(command: str) -> int:
    """0 for none, 1 for input, 2 for output, 3 for both."""
    kind = 0
    if "<" in command:
        kind |= 1
    if ">" in command:
        kind |= 2
    return kind


@dataclass
class Redirection:
    """A command with the files its standard streams go to."""

    args: list[str] = field(default_factory=list)
    input_file: str | None = None
    output_file: str | None = None
    append: bool = False


def parse_redirection(command: str) -> Redirection:
    """Split ``cmd args < in > out`` (or ``>> out``) into its parts.

    The input file must exist and not be a directory.
    """
    pieces = _OPERATOR.split(command)
    targets: dict[str, str | None] = {}
    append = False
    for operator, text in zip(pieces[1::2], pieces[2::2]):
        words = text.split()
        key = "<" if operator == "<" else ">"
        if key not in targets:
            targets[key] = words[0] if words else None
            if operator == ">>":
                append = True
    redirection = Redirection(args=pieces[0].split(), append=append)
    if "<" in targets:
        input_file = targets["<"]
        if input_file is None:
            raise ShellError("Specify file name for input")
        if not os.path.isfile(input_file):
            raise ShellError("File does not exist")
        redirection.input_file = input_file
    if ">" in targets:
        output_file = targets[">"]
        if output_file is None:
            raise ShellError("Enter output file")
        redirection.output_file = output_file
    return redirection


def run_redirected(redirection: Redirection) -> int:
    """Run the command with its streams redirected; return its exit status."""
    if not redirection.args:
        raise ShellError("Command not found")
    with ExitStack() as stack:
        stdin = None
        if redirection.input_file is not None:
            try:
                stdin = stack.enter_context(open(redirection.input_file, "rb"))
            except OSError as exc:
                raise ShellError(f"Input redirection: {exc.strerror}") from exc
        stdout = None
        if redirection.output_file is not None:
            flags = os.O_WRONLY | os.O_CREAT
            flags |= os.O_APPEND if redirection.append else os.O_TRUNC
            try:
                descriptor = os.open(redirection.output_file, flags, 0o644)
            except OSError as exc:
                raise ShellError(f"Output Redirection: {exc.strerror}") from exc
            stdout = stack.enter_context(os.fdopen(descriptor, "wb"))
        try:
            completed = subprocess.run(
                redirection.args, stdin=stdin, stdout=stdout, check=False
            )
        except OSError as exc:
            raise ShellError(f"Command not found: {exc.strerror}") from exc
    return completed.returncode