from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Iterator, List, Optional

from .config import EditPolicy, Settings
from .errors import (
    InvalidLetterError,
    NotEditableError,
    NotInteractiveError,
    OutOfRangeError,
    VerifierUnavailableError,
)
from .grid import Blocked, Coord, Grid
from .history import HistoryEntry, HistoryStack
from .overlay import BoardCellView, CellOverlay, OverlayStore, view_of
from .parser import DEFAULT_ALPHABET, Alphabet, grid_from_dimensions, parse, to_text
from .verifier import CellSnapshot, CommandVerifier, OverlaySnapshot, Verifier, find_verifier_exe

logger = logging.getLogger(__name__)


class BoardPhase(Enum):
    EDITING = 'editing'
    COMMITTED_SUCCESS = 'committed-success'
    COMMITTED_FAILURE = 'committed-failure'


class Board:
    """
    A puzzle being played: an immutable Grid plus the player's overlay and undo history.

    Every mutation validates its target first, records the cell's prior overlay,
    then applies the change; a failed call leaves the board untouched.
    """

    def __init__(
        self,
        grid: Grid,
        *,
        verifier: Optional[Verifier] = None,
        alphabet: Alphabet = DEFAULT_ALPHABET,
        edit_policy: EditPolicy = EditPolicy.EDITABLE_CELLS,
    ) -> None:
        self._grid = grid
        self._alphabet = alphabet
        self._overlays = OverlayStore(grid)
        self._history = HistoryStack()
        self._phase = BoardPhase.EDITING
        self.verifier = verifier
        self.edit_policy = edit_policy

    # ---- construction ----

    @classmethod
    def from_text(
        cls,
        text: str,
        *,
        verifier: Optional[Verifier] = None,
        alphabet: Optional[Alphabet] = None,
        edit_policy: Optional[EditPolicy] = None,
    ) -> 'Board':
        alphabet = alphabet or DEFAULT_ALPHABET
        grid = parse(text, alphabet)
        logger.debug('parsed %dx%d puzzle', grid.width, grid.height)
        return cls(grid, verifier=verifier, alphabet=alphabet,
                   edit_policy=edit_policy or EditPolicy.EDITABLE_CELLS)

    @classmethod
    def from_dimensions(
        cls,
        width: int,
        height: int,
        row_major_letters: str,
        *,
        verifier: Optional[Verifier] = None,
        alphabet: Optional[Alphabet] = None,
        edit_policy: Optional[EditPolicy] = None,
    ) -> 'Board':
        alphabet = alphabet or DEFAULT_ALPHABET
        grid = grid_from_dimensions(width, height, row_major_letters, alphabet)
        return cls(grid, verifier=verifier, alphabet=alphabet,
                   edit_policy=edit_policy or EditPolicy.EDITABLE_CELLS)

    @classmethod
    def from_settings(cls, text: str, settings: Settings, verifier: Optional[Verifier] = None) -> 'Board':
        """Builds a board using the alphabet and edit policy from `settings`.

        Without an explicit verifier, a CommandVerifier is attached when a judge
        executable resolves from `settings.verifier_exe` or PATH.
        """
        grid = parse(text, settings.alphabet)
        if verifier is None:
            exe = find_verifier_exe(settings.verifier_exe)
            if exe:
                verifier = CommandVerifier(exe, width=grid.width, height=grid.height,
                                           timeout=settings.verifier_timeout)
        return cls(grid, verifier=verifier, alphabet=settings.alphabet, edit_policy=settings.edit_policy)

    # ---- queries ----

    @property
    def grid(self) -> Grid:
        return self._grid

    @property
    def alphabet(self) -> Alphabet:
        return self._alphabet

    @property
    def width(self) -> int:
        return self._grid.width

    @property
    def height(self) -> int:
        return self._grid.height

    @property
    def phase(self) -> BoardPhase:
        return self._phase

    @property
    def can_undo(self) -> bool:
        return bool(self._history)

    @property
    def history_depth(self) -> int:
        return len(self._history)

    def in_bounds(self, row: int, col: int) -> bool:
        return self._grid.in_bounds(row, col)

    def coords(self) -> Iterator[Coord]:
        return self._grid.coords()

    def letter_coords(self) -> List[Coord]:
        return list(self._grid.letter_coords())

    def get(self, row: int, col: int) -> BoardCellView:
        self._check_bounds(row, col)
        return view_of(self._grid, self._overlays, row, col)

    def to_text(self) -> str:
        """Puzzle text with each letter cell showing its current letter."""
        return to_text(self._grid, self._overlays.current_letters())

    def snapshot(self) -> OverlaySnapshot:
        """Immutable record of every letter cell's overlay, in reading order."""
        return tuple(
            CellSnapshot(
                row=r,
                col=c,
                letter=ov.current_letter,
                blackened=ov.blackened,
                path_mark_count=ov.path_mark_count,
            )
            for (r, c), ov in self._overlays.items()
        )

    # ---- mutations ----

    def blacken(self, row: int, col: int) -> None:
        overlay = self._begin('blacken', row, col)
        overlay.blackened = not overlay.blackened
        logger.debug('blacken (%d, %d) -> %s', row, col, overlay.blackened)

    def mark_path(self, row: int, col: int) -> None:
        overlay = self._begin('mark_path', row, col)
        overlay.path_mark_count += 1
        logger.debug('mark_path (%d, %d) -> %d', row, col, overlay.path_mark_count)

    def change_letter(self, row: int, col: int, new_letter: str) -> None:
        self._check_target(row, col)
        cell = self._grid.at(row, col)
        if self.edit_policy is EditPolicy.LOCKED:
            raise NotEditableError('letter editing is disabled on this board')
        if self.edit_policy is EditPolicy.EDITABLE_CELLS and not cell.editable:
            raise NotEditableError(f'({row}, {col}) is not an editable cell')
        if not isinstance(new_letter, str) or not self._alphabet.accepts_letter(new_letter):
            raise InvalidLetterError(f'{new_letter!r} is not a letter of this puzzle')
        overlay = self._begin('change_letter', row, col)
        overlay.current_letter = new_letter
        logger.debug('change_letter (%d, %d) -> %r', row, col, new_letter)

    def undo(self) -> bool:
        """Reverts the most recent mutation. Returns False (and does nothing) when history is empty."""
        entry = self._history.pop()
        if entry is None:
            return False
        self._overlays.restore(entry.coord, entry.saved_overlay())
        self._phase = BoardPhase.EDITING
        logger.debug('undo %s at %s', entry.action, entry.coord)
        return True

    # ---- commit ----

    def commit_and_check_solution(self) -> Optional[Any]:
        """
        Hands an immutable snapshot of the overlay to the verifier and returns its verdict
        unchanged: None on success, otherwise the verifier's failure detail.
        The board stays editable afterwards.
        """
        if self.verifier is None:
            raise VerifierUnavailableError('no verifier configured for this board')
        snapshot = self.snapshot()
        verdict = self.verifier.verify(snapshot)
        if verdict is None:
            self._phase = BoardPhase.COMMITTED_SUCCESS
        else:
            self._phase = BoardPhase.COMMITTED_FAILURE
        logger.info('commit of %d cells: %s', len(snapshot), 'pass' if verdict is None else 'fail')
        return verdict

    # ---- internals ----

    def _check_bounds(self, row: int, col: int) -> None:
        if not self._grid.in_bounds(row, col):
            raise OutOfRangeError(row, col, self.width, self.height)

    def _check_target(self, row: int, col: int) -> None:
        self._check_bounds(row, col)
        if isinstance(self._grid.at(row, col), Blocked):
            raise NotInteractiveError(f'({row}, {col}) is a blocked cell')

    def _begin(self, action: str, row: int, col: int) -> CellOverlay:
        """Validates the target, records its prior state and returns the live overlay."""
        self._check_target(row, col)
        self._history.push(HistoryEntry.capture((row, col), action, self._overlays.copy_of((row, col))))
        overlay = self._overlays.get((row, col))
        self._phase = BoardPhase.EDITING
        return overlay

    def __repr__(self) -> str:
        return f'Board({self.width}x{self.height}, phase={self._phase.value}, history={len(self._history)})'
