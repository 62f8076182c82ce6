from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Tuple, Union

Coord = Tuple[int, int]  # (row, col)


@dataclass(frozen=True)
class Letter:
    """An interactive cell. `char` is the letter parsed from the puzzle text."""
    char: str
    editable: bool = False


@dataclass(frozen=True)
class Blocked:
    """A structural, non-interactive cell. `char` is its source symbol."""
    char: str = '_'


CellKind = Union[Letter, Blocked]


@dataclass(frozen=True)
class Grid:
    """Immutable structural layout of a puzzle: dimensions plus one CellKind per cell."""
    width: int
    height: int
    cells: Tuple[CellKind, ...]  # row-major, length == width * height
    line_break: str = '\n'  # row separator of the source text: '\n' or '\r\n'
    trailing_break: bool = False  # source text ended with a line break

    def __post_init__(self) -> None:
        if self.line_break not in ('\n', '\r\n'):
            raise ValueError(f'unsupported line break {self.line_break!r}')
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f'grid dimensions must be positive, got {self.width}x{self.height}')
        if len(self.cells) != self.width * self.height:
            raise ValueError(
                f'expected {self.width * self.height} cells for {self.width}x{self.height}, got {len(self.cells)}'
            )

    def in_bounds(self, r: int, c: int) -> bool:
        return 0 <= r < self.height and 0 <= c < self.width

    def index(self, r: int, c: int) -> int:
        """Calculates the 1D index for a given row and column."""
        return r * self.width + c

    def index_to_coord(self, index: int) -> Coord:
        """Inverse of index()."""
        return index // self.width, index % self.width

    def at(self, r: int, c: int) -> CellKind:
        """Gets the cell kind at a given row and column. No wrap-around; caller checks bounds."""
        return self.cells[self.index(r, c)]

    def coords(self) -> Iterator[Coord]:
        """Iterates over all coordinates in reading order."""
        for r in range(self.height):
            for c in range(self.width):
                yield (r, c)

    def enumerate_cells(self) -> Iterator[Tuple[Coord, CellKind]]:
        for i, cell in enumerate(self.cells):
            yield self.index_to_coord(i), cell

    def letter_coords(self) -> Iterable[Coord]:
        """Coordinates of every Letter cell, in reading order."""
        return [coord for coord, cell in self.enumerate_cells() if isinstance(cell, Letter)]

    def rows(self) -> Iterator[Tuple[CellKind, ...]]:
        for r in range(self.height):
            start = r * self.width
            yield self.cells[start:start + self.width]
