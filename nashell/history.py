"""A fixed-size ring of the most recent commands, persisted to a text file."""

from __future__ import annotations

import re

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _leading_int(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


class History:
    """Remembers the last ``capacity`` commands and how many were ever entered."""

    def __init__(self, capacity: int = 20) -> None:
        if capacity < 1:
            raise ValueError("history capacity must be positive")
        self.capacity = capacity
        self.total = 0
        self._slots = [""] * capacity

    def __len__(self) -> int:
        return min(self.total, self.capacity)

    def add(self, command: str) -> None:
        """Record a command, overwriting the oldest once the ring is full."""
        self._slots[self.total % self.capacity] = command.rstrip("\n")
        self.total += 1

    def recent(self, n: int = 10) -> list[str]:
        """The last ``n`` commands, oldest first."""
        n = max(0, min(n, len(self)))
        return [
            self._slots[index % self.capacity]
            for index in range(self.total - n, self.total)
        ]

    def recall(self, offset: int) -> str:
        """The command ``offset`` steps back; 1 is the most recent."""
        if not 1 <= offset <= len(self):
            raise IndexError(f"no history entry {offset} back")
        return self._slots[(self.total - offset) % self.capacity]

    def load(self, path: str) -> None:
        """Replace the history with the contents of ``path``.

        Raises OSError when the file cannot be read.
        """
        with open(path, encoding="utf-8") as handle:
            lines = handle.read().splitlines()
        if not lines:
            return
        self._slots = [""] * self.capacity
        self.total = _leading_int(lines[0])
        for slot, line in enumerate(lines[1 : self.capacity + 1]):
            self._slots[slot] = line

    def save(self, path: str) -> None:
        """Write the count followed by the stored slots, one per line."""
        with open(path, "w", encoding="utf-8") as handle:
            handle.write(f"{self.total}\n")
            for entry in self._slots[: len(self)]:
                handle.write(entry + "\n")