import pytest

from nashell.history import History


def filled(capacity, commands):
    history = History(capacity)
    for command in commands:
        history.add(command)
    return history


def test_recent_returns_oldest_first():
    history = filled(5, ["ls", "pwd", "cd"])
    assert history.recent(10) == ["ls", "pwd", "cd"]
    assert history.recent(2) == ["pwd", "cd"]


def test_ring_keeps_only_capacity():
    history = filled(3, ["a", "b", "c", "d"])
    assert len(history) == 3
    assert history.total == 4
    assert history.recent(10) == ["b", "c", "d"]


def test_recall_counts_back_from_latest():
    history = filled(3, ["a", "b", "c", "d"])
    assert history.recall(1) == "d"
    assert history.recall(3) == "b"


@pytest.mark.parametrize("offset", [0, 4, -1])
def test_recall_out_of_range(offset):
    history = filled(3, ["a", "b", "c", "d"])
    with pytest.raises(IndexError):
        history.recall(offset)


def test_add_strips_trailing_newline():
    history = filled(4, ["echo hi\n"])
    assert history.recall(1) == "echo hi"


def test_save_then_load_round_trip(tmp_path):
    path = tmp_path / "history.txt"
    original = filled(3, ["a", "b", "c", "d", "e"])
    original.save(str(path))
    restored = History(3)
    restored.load(str(path))
    assert restored.total == original.total
    assert restored.recent(10) == original.recent(10)


def test_save_writes_count_first(tmp_path):
    path = tmp_path / "history.txt"
    filled(3, ["a", "b"]).save(str(path))
    lines = path.read_text().splitlines()
    assert lines[0] == "2"
    assert lines[1:] == ["a", "b"]


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        History().load(str(tmp_path / "absent.txt"))


def test_capacity_must_be_positive():
    with pytest.raises(ValueError):
        History(0)