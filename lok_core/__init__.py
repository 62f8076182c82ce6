"""
Lok core Python package.

Rule-state engine for the Lok word-path puzzle: a grid of letter cells the
player blackens and marks as a path, then commits to an external verifier.
Modules:
- grid.py: Grid, Letter, Blocked, Coord
- parser.py: Alphabet, parse, grid_from_dimensions, to_text
- overlay.py: CellOverlay, BoardCellView, OverlayStore
- history.py: HistoryEntry, HistoryStack
- verifier.py: Verifier protocol, CellSnapshot, CommandVerifier
- board.py: Board facade and commit protocol
- config.py: Settings from LOK_* environment variables, EditPolicy
- cli.py: move-script replay front end
"""
from .board import Board, BoardPhase
from .config import EditPolicy, Settings
from .errors import (
    InvalidLetterError,
    LokError,
    MalformedPuzzleError,
    NotEditableError,
    NotInteractiveError,
    OutOfRangeError,
    VerifierError,
    VerifierUnavailableError,
)
from .grid import Blocked, Coord, Grid, Letter
from .overlay import BoardCellView
from .parser import DEFAULT_ALPHABET, Alphabet, parse
from .verifier import CellSnapshot, CommandVerifier, Verifier

__all__ = [
    'Board', 'BoardPhase', 'EditPolicy', 'Settings',
    'LokError', 'MalformedPuzzleError', 'NotInteractiveError', 'OutOfRangeError',
    'NotEditableError', 'InvalidLetterError', 'VerifierError', 'VerifierUnavailableError',
    'Blocked', 'Coord', 'Grid', 'Letter', 'BoardCellView',
    'DEFAULT_ALPHABET', 'Alphabet', 'parse',
    'CellSnapshot', 'CommandVerifier', 'Verifier',
]
