from __future__ import annotations

import string
from dataclasses import dataclass
from typing import List, Mapping, Optional, Tuple

from .errors import MalformedPuzzleError
from .grid import Blocked, CellKind, Coord, Grid, Letter

_LINE_BREAKS = '\r\n'
_RESERVED = ',;'  # field and record separators of the verifier snapshot encoding


@dataclass(frozen=True)
class Alphabet:
    """Character-to-kind mapping for puzzle text.

    letters:  symbols that parse to a fixed Letter
    blocked:  filler symbols that parse to Blocked
    editable: blank symbols that parse to an editable Letter (authoring mode)
    """
    letters: str = string.ascii_uppercase
    blocked: str = '_'
    editable: str = ' -'

    def __post_init__(self) -> None:
        groups = {'letters': set(self.letters), 'blocked': set(self.blocked), 'editable': set(self.editable)}
        for name, chars in groups.items():
            bad = chars & set(_LINE_BREAKS)
            if bad:
                raise ValueError(f'{name} may not contain line-break characters')
            if name != 'blocked' and chars & set(_RESERVED):
                raise ValueError(f'{name} may not contain {_RESERVED!r}')
        names = list(groups)
        for i, a in enumerate(names):
            for b in names[i + 1:]:
                shared = groups[a] & groups[b]
                if shared:
                    raise ValueError(f'{a} and {b} share symbols: {"".join(sorted(shared))!r}')

    def kind_for(self, ch: str) -> Optional[CellKind]:
        """Returns the CellKind for a symbol, or None if the symbol is not in the alphabet."""
        if ch in self.letters:
            return Letter(ch)
        if ch in self.editable:
            return Letter(ch, editable=True)
        if ch in self.blocked:
            return Blocked(ch)
        return None

    def accepts_letter(self, ch: str) -> bool:
        """True if `ch` may be written into a letter cell."""
        return len(ch) == 1 and (ch in self.letters or ch in self.editable)


DEFAULT_ALPHABET = Alphabet()


def _split_rows(text: str) -> Tuple[List[str], str, bool]:
    """Returns (rows, line_break, trailing_break)."""
    if '\r\n' in text:
        if text.count('\n') != text.count('\r\n') or text.count('\r') != text.count('\r\n'):
            raise MalformedPuzzleError('rows mix line-break styles')
        sep = '\r\n'
    elif '\r' in text:
        raise MalformedPuzzleError('rows must be separated by line feeds')
    else:
        sep = '\n'
    rows = text.split(sep)
    trailing = len(rows) > 1 and rows[-1] == ''
    if trailing:
        rows.pop()
    for i, row in enumerate(rows):
        if row == '':
            raise MalformedPuzzleError(f'row {i} is empty')
    return rows, sep, trailing


def parse(text: str, alphabet: Alphabet = DEFAULT_ALPHABET) -> Grid:
    """Parses line-oriented puzzle text into a Grid.

    Every row must have the first row's length and every symbol must belong to
    `alphabet`. Raises MalformedPuzzleError otherwise; nothing partial is returned.
    """
    if not text:
        raise MalformedPuzzleError('puzzle text is empty')
    rows, line_break, trailing_break = _split_rows(text)
    width = len(rows[0])
    cells: List[CellKind] = []
    for r, row in enumerate(rows):
        if len(row) != width:
            raise MalformedPuzzleError(f'row {r} has length {len(row)}, expected {width}')
        for c, ch in enumerate(row):
            kind = alphabet.kind_for(ch)
            if kind is None:
                raise MalformedPuzzleError(f'unknown symbol {ch!r} at ({r}, {c})')
            cells.append(kind)
    return Grid(width=width, height=len(rows), cells=tuple(cells),
                line_break=line_break, trailing_break=trailing_break)


def grid_from_dimensions(width: int, height: int, row_major_letters: str,
                         alphabet: Alphabet = DEFAULT_ALPHABET) -> Grid:
    """Builds a grid with no Blocked cells from a flat, row-major string of letters."""
    if width <= 0 or height <= 0:
        raise MalformedPuzzleError(f'dimensions must be positive, got {width}x{height}')
    if len(row_major_letters) != width * height:
        raise MalformedPuzzleError(
            f'expected {width * height} letters for {width}x{height}, got {len(row_major_letters)}'
        )
    cells: List[CellKind] = []
    for i, ch in enumerate(row_major_letters):
        kind = alphabet.kind_for(ch)
        if not isinstance(kind, Letter):
            r, c = divmod(i, width)
            raise MalformedPuzzleError(f'symbol {ch!r} at ({r}, {c}) is not a letter')
        cells.append(kind)
    return Grid(width=width, height=height, cells=tuple(cells))


def to_text(grid: Grid, letters: Optional[Mapping[Coord, str]] = None) -> str:
    """Serializes a grid back to puzzle text in its original line-break style.

    `letters` overrides letter cells by coordinate.
    """
    lines: List[str] = []
    for r, row in enumerate(grid.rows()):
        out: List[str] = []
        for c, cell in enumerate(row):
            if letters is not None and isinstance(cell, Letter) and (r, c) in letters:
                out.append(letters[(r, c)])
            else:
                out.append(cell.char)
        lines.append(''.join(out))
    text = grid.line_break.join(lines)
    return text + grid.line_break if grid.trailing_break else text
