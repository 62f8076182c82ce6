from __future__ import annotations


class LokError(Exception):
    """Base class for every error raised by the Lok engine."""


class MalformedPuzzleError(LokError, ValueError):
    """Puzzle text (or a dimensions/letters pair) could not be turned into a grid."""


class NotInteractiveError(LokError):
    """A mutation targeted a cell that does not accept player interaction."""


class OutOfRangeError(NotInteractiveError, IndexError):
    """Coordinates fall outside the grid.

    Also a NotInteractiveError: a cell that does not exist cannot be interacted with.
    """

    def __init__(self, row: int, col: int, width: int, height: int) -> None:
        super().__init__(f"({row}, {col}) is outside a {width}x{height} board")
        self.row = row
        self.col = col


class NotEditableError(NotInteractiveError):
    """change_letter was refused by the board's edit policy."""


class InvalidLetterError(LokError, ValueError):
    """A replacement letter is not a single symbol of the puzzle alphabet."""


class VerifierUnavailableError(LokError, RuntimeError):
    """A commit was requested on a board constructed without a verifier."""


class VerifierError(LokError, RuntimeError):
    """The external verifier did not produce a usable verdict."""
