from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .grid import Coord
from .overlay import CellOverlay


@dataclass(frozen=True)
class HistoryEntry:
    """Inverse of one mutation: the target cell and its overlay fields just before the change."""
    coord: Coord
    action: str  # 'blacken', 'mark_path' or 'change_letter'
    current_letter: str
    blackened: bool
    path_mark_count: int

    @classmethod
    def capture(cls, coord: Coord, action: str, overlay: CellOverlay) -> 'HistoryEntry':
        return cls(coord, action, overlay.current_letter, overlay.blackened, overlay.path_mark_count)

    def saved_overlay(self) -> CellOverlay:
        return CellOverlay(
            current_letter=self.current_letter,
            blackened=self.blackened,
            path_mark_count=self.path_mark_count,
        )


class HistoryStack:
    """LIFO of HistoryEntry; append on mutation, pop on undo. There is no redo."""

    __slots__ = ('_entries',)

    def __init__(self) -> None:
        self._entries: List[HistoryEntry] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def push(self, entry: HistoryEntry) -> None:
        self._entries.append(entry)

    def pop(self) -> Optional[HistoryEntry]:
        """Removes and returns the newest entry, or None when empty."""
        if not self._entries:
            return None
        return self._entries.pop()
