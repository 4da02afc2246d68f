import pytest

from nashell.redirection import (
    Redirection,
    parse_redirection,
    redirect_kind,
    run_redirected,
)
from nashell.state import ShellError


@pytest.mark.parametrize(
    "command, kind",
    [
        ("ls", 0),
        ("sort < a", 1),
        ("ls > b", 2),
        ("ls >> b", 2),
        ("sort < a > b", 3),
    ],
)
def test_redirect_kind(command, kind):
    assert redirect_kind(command) == kind


def test_parse_input_and_output(tmp_path):
    source = tmp_path / "in.txt"
    source.write_text("x\n")
    target = tmp_path / "out.txt"
    parsed = parse_redirection(f"sort -r < {source} > {target}\n")
    assert parsed == Redirection(["sort", "-r"], str(source), str(target), False)


def test_parse_output_before_input(tmp_path):
    source = tmp_path / "in.txt"
    source.write_text("x\n")
    target = tmp_path / "out.txt"
    parsed = parse_redirection(f"cat > {target} < {source}")
    assert parsed.args == ["cat"]
    assert parsed.input_file == str(source)
    assert parsed.output_file == str(target)


def test_parse_append(tmp_path):
    target = tmp_path / "log"
    parsed = parse_redirection(f"echo hi >> {target}")
    assert parsed.append is True
    assert parsed.output_file == str(target)
    assert parsed.input_file is None


def test_parse_missing_input_name():
    with pytest.raises(ShellError, match="Specify file name for input"):
        parse_redirection("sort <   ")


def test_parse_missing_input_file(tmp_path):
    with pytest.raises(ShellError, match="File does not exist"):
        parse_redirection(f"sort < {tmp_path / 'absent'}")


def test_parse_directory_as_input(tmp_path):
    with pytest.raises(ShellError, match="File does not exist"):
        parse_redirection(f"sort < {tmp_path}")


def test_parse_missing_output_name():
    with pytest.raises(ShellError, match="Enter output file"):
        parse_redirection("ls > ")


def test_run_truncates_output(tmp_path):
    target = tmp_path / "out.txt"
    target.write_text("old contents that are long\n")
    code = run_redirected(parse_redirection(f"echo hello > {target}"))
    assert code == 0
    assert target.read_text() == "hello\n"


def test_run_appends_output(tmp_path):
    target = tmp_path / "out.txt"
    run_redirected(parse_redirection(f"echo a >> {target}"))
    run_redirected(parse_redirection(f"echo b >> {target}"))
    assert target.read_text() == "a\nb\n"


def test_run_copies_input_to_output(tmp_path):
    source = tmp_path / "in.txt"
    source.write_text("line one\nline two\n")
    target = tmp_path / "out.txt"
    run_redirected(parse_redirection(f"cat < {source} > {target}"))
    assert target.read_text() == source.read_text()


def test_run_reports_exit_status(tmp_path):
    target = tmp_path / "out.txt"
    assert run_redirected(parse_redirection(f"false > {target}")) == 1


def test_run_unknown_command(tmp_path):
    with pytest.raises(ShellError, match="Command not found"):
        run_redirected(parse_redirection(f"no-such-command-here > {tmp_path / 'o'}"))


def test_run_without_command(tmp_path):
    with pytest.raises(ShellError, match="Command not found"):
        run_redirected(Redirection([], None, str(tmp_path / "o")))