from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Iterator, Tuple

from .grid import Blocked, Coord, Grid, Letter

BLOCKED_DISPLAY = ''


@dataclass
class CellOverlay:
    """Mutable player state of one letter cell."""
    current_letter: str
    blackened: bool = False
    path_mark_count: int = 0

    @property
    def path_marked(self) -> bool:
        return self.path_mark_count > 0

    def copy(self) -> 'CellOverlay':
        return replace(self)


@dataclass(frozen=True)
class BoardCellView:
    """Read-only copy of a cell's visible state, detached from the board."""
    row: int
    col: int
    is_interactive: bool
    is_blackened: bool
    is_marked_for_path: bool
    mark_count: int
    display_letter: str
    is_editable: bool = False

    @classmethod
    def for_blocked(cls, row: int, col: int) -> 'BoardCellView':
        return cls(row, col, False, False, False, 0, BLOCKED_DISPLAY)

    @classmethod
    def for_letter(cls, row: int, col: int, cell: Letter, overlay: CellOverlay) -> 'BoardCellView':
        return cls(
            row=row,
            col=col,
            is_interactive=True,
            is_blackened=overlay.blackened,
            is_marked_for_path=overlay.path_marked,
            mark_count=overlay.path_mark_count,
            display_letter=overlay.current_letter,
            is_editable=cell.editable,
        )


class OverlayStore:
    """Per-cell overlays keyed by coordinate; holds exactly one entry per Letter cell."""

    __slots__ = ('_overlays',)

    def __init__(self, grid: Grid) -> None:
        self._overlays: Dict[Coord, CellOverlay] = {
            coord: CellOverlay(current_letter=cell.char)
            for coord, cell in grid.enumerate_cells()
            if isinstance(cell, Letter)
        }

    def __contains__(self, coord: Coord) -> bool:
        return coord in self._overlays

    def __len__(self) -> int:
        return len(self._overlays)

    def __iter__(self) -> Iterator[Coord]:
        return iter(self._overlays)

    def get(self, coord: Coord) -> CellOverlay:
        """Live overlay for a letter cell. Internal to the engine; never hand this out."""
        return self._overlays[coord]

    def copy_of(self, coord: Coord) -> CellOverlay:
        return self._overlays[coord].copy()

    def restore(self, coord: Coord, saved: CellOverlay) -> None:
        """Overwrites the fields of the live overlay with those of `saved`."""
        live = self._overlays[coord]
        live.current_letter = saved.current_letter
        live.blackened = saved.blackened
        live.path_mark_count = saved.path_mark_count

    def items(self) -> Iterator[Tuple[Coord, CellOverlay]]:
        return iter(sorted(self._overlays.items()))

    def current_letters(self) -> Dict[Coord, str]:
        return {coord: ov.current_letter for coord, ov in self._overlays.items()}


def view_of(grid: Grid, store: OverlayStore, row: int, col: int) -> BoardCellView:
    cell = grid.at(row, col)
    if isinstance(cell, Blocked):
        return BoardCellView.for_blocked(row, col)
    return BoardCellView.for_letter(row, col, cell, store.get((row, col)))
