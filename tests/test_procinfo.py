import io
import os

import pytest

from nashell.procinfo import (
    ProcessInfo,
    dirty_line,
    format_process_info,
    interrupt_line,
    nightswatch,
    parse_nightswatch_args,
    process_info,
    read_line,
)
from nashell.state import ShellError


def test_read_line_returns_requested_line(tmp_path):
    path = tmp_path / "f.txt"
    path.write_text("a\nb\nc\n")
    assert read_line(str(path), 2) == "b"
    assert read_line(str(path), 3) == "c"


def test_read_line_past_end_is_empty(tmp_path):
    path = tmp_path / "f.txt"
    path.write_text("a\n")
    assert read_line(str(path), 5) == ""


def test_read_line_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_line(str(tmp_path / "missing"), 1)


def test_interrupt_line_cuts_at_controller_name(tmp_path):
    path = tmp_path / "interrupts"
    path.write_text("CPU0\nhead\n  0:   5   IO-APIC   timer\n")
    assert interrupt_line(str(path)) == "  0:   5   "


def test_interrupt_line_missing_file(tmp_path):
    with pytest.raises(ShellError, match="Can't open"):
        interrupt_line(str(tmp_path / "nope"))


def test_dirty_line_is_seventeenth_line(tmp_path):
    path = tmp_path / "meminfo"
    lines = [f"Field{i}: {i} kB" for i in range(1, 17)] + ["Dirty: 12 kB", "After: 1 kB"]
    path.write_text("\n".join(lines) + "\n")
    assert dirty_line(str(path)) == "Dirty: 12 kB"


def test_dirty_line_missing_file(tmp_path):
    with pytest.raises(ShellError, match="Can't open"):
        dirty_line(str(tmp_path / "nope"))


def test_parse_nightswatch_args():
    assert parse_nightswatch_args(["nightswatch", "-n", "5", "dirty"]) == (5, "dirty")
    assert parse_nightswatch_args(["nightswatch", "-n", "2", "interrupt"]) == (2, "interrupt")


@pytest.mark.parametrize(
    "args",
    [
        ["nightswatch", "-n", "5"],
        ["nightswatch", "-n", "5", "memory"],
        ["nightswatch", "-n", "5", "dirty", "extra"],
    ],
)
def test_parse_nightswatch_args_rejects(args):
    with pytest.raises(ShellError, match="nightswatch -n"):
        parse_nightswatch_args(args)


def test_nightswatch_quits_on_q_before_sampling():
    read_end, write_end = os.pipe()
    os.write(write_end, b"q\n")
    os.close(write_end)
    out = io.StringIO()
    with os.fdopen(read_end) as stdin:
        nightswatch(["nightswatch", "-n", "1", "dirty"], stdin, out)
    assert out.getvalue() == ""


def test_nightswatch_rejects_bad_mode():
    with pytest.raises(ShellError):
        nightswatch(["nightswatch", "-n", "1", "bogus"], io.StringIO(), io.StringIO())


def test_process_info_of_self_abbreviates_home():
    exe = os.readlink("/proc/self/exe")
    home = os.path.dirname(exe)
    info = process_info(os.getpid(), home)
    assert info.pid == os.getpid()
    assert info.status[:1] in ("R", "S")
    assert info.executable == "~/" + os.path.basename(exe)


def test_process_info_none_means_self():
    info = process_info(None, "")
    assert info.pid == os.getpid()


def test_process_info_outside_home_keeps_full_path():
    exe = os.readlink("/proc/self/exe")
    info = process_info(os.getpid(), "/no-such-home-dir")
    assert info.executable == "~" + exe


def test_process_info_missing_process():
    with pytest.raises(ShellError, match="Process with ID 99999999 does not exist"):
        process_info(99999999, "")


def test_format_process_info():
    info = ProcessInfo(42, "R (running)", "1000 kB", "~/bin/x")
    assert format_process_info(info) == (
        "pid -- 42\nProcess Status -- R (running)\n"
        "Virtual Memory -- 1000 kB\nExecutable path -- ~/bin/x"
    )


def test_format_process_info_without_executable():
    info = ProcessInfo(7, "S (sleeping)", "", None)
    assert format_process_info(info).endswith("Executable path -- No path for executable")