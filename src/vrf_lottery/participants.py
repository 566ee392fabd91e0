from __future__ import annotations

from typing import Iterator, List, Tuple

from .errors import IndexOutOfRangeError


class ParticipantLedger:
    """Ordered, append-only entries for one round. Index is join order."""

    def __init__(self) -> None:
        self._entries: List[str] = []

    def append(self, identity: str) -> int:
        self._entries.append(identity)
        return len(self._entries) - 1

    def participant_at(self, index: int) -> str:
        if index < 0 or index >= len(self._entries):
            raise IndexOutOfRangeError(index, len(self._entries))
        return self._entries[index]

    def size(self) -> int:
        return len(self._entries)

    def snapshot(self) -> Tuple[str, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(tuple(self._entries))
