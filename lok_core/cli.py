from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict, dataclass, replace
from typing import List, Optional, Sequence

from .board import Board
from .config import EditPolicy, Settings
from .errors import LokError
from .verifier import CommandVerifier

logger = logging.getLogger(__name__)

_ARITY = {'b': 2, 'm': 2, 'e': 3, 'u': 0}


@dataclass(frozen=True)
class Move:
    """One scripted player intent: b(lacken), m(ark path), e(dit letter) or u(ndo)."""
    op: str
    row: int = -1
    col: int = -1
    letter: str = ''


def parse_moves(script: str) -> List[Move]:
    """Parses a move script: commands separated by ';' or newlines, e.g. "b 0 0; m 1 1; e 2 3 Q; u"."""
    moves: List[Move] = []
    for n, raw in enumerate(script.replace('\n', ';').split(';')):
        text = raw.strip()
        if not text or text.startswith('#'):
            continue
        op, *args = text.split()
        op = op.lower()
        if op not in _ARITY:
            raise ValueError(f'command {n}: unknown move {op!r}')
        if len(args) != _ARITY[op]:
            raise ValueError(f'command {n}: {op!r} takes {_ARITY[op]} arguments, got {len(args)}')
        if op == 'u':
            moves.append(Move('u'))
            continue
        try:
            r, c = int(args[0]), int(args[1])
        except ValueError:
            raise ValueError(f'command {n}: row and column must be integers') from None
        moves.append(Move(op, r, c, args[2] if op == 'e' else ''))
    return moves


def apply_moves(board: Board, moves: Sequence[Move]) -> None:
    """Replays moves in order; engine errors propagate from the failing move."""
    for mv in moves:
        if mv.op == 'b':
            board.blacken(mv.row, mv.col)
        elif mv.op == 'm':
            board.mark_path(mv.row, mv.col)
        elif mv.op == 'e':
            board.change_letter(mv.row, mv.col, mv.letter)
        else:
            board.undo()


def _read(path: str) -> str:
    with open(path, 'r', encoding='utf-8', newline='') as fh:
        return fh.read()


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description='Replay moves on a Lok puzzle and check the result')
    parser.add_argument('puzzle', help='Puzzle text file')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--moves', default='', help='Move script, e.g. "b 0 0; m 1 1; u"')
    group.add_argument('--moves-file', default=None, help='File containing a move script')
    parser.add_argument('--verifier', default=None, help='Judge executable (overrides LOK_VERIFIER_EXE)')
    parser.add_argument('--edit-policy', choices=[p.value for p in EditPolicy], default=None,
                        help='Which cells may have their letter changed')
    parser.add_argument('--json', action='store_true', help='Print the committed snapshot as JSON')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    args = parser.parse_args(argv)

    try:
        settings = Settings.from_env()
    except ValueError as exc:
        print(f'error: {exc}', file=sys.stderr)
        return 2
    logging.basicConfig(level=logging.DEBUG if args.verbose else settings.log_level,
                        format='%(levelname)s %(name)s: %(message)s')

    try:
        text = _read(args.puzzle)
        script = _read(args.moves_file) if args.moves_file else args.moves
        moves = parse_moves(script)
        if args.edit_policy:
            settings = replace(settings, edit_policy=EditPolicy(args.edit_policy))
        board = Board.from_settings(text, settings)
        if args.verifier:
            board.verifier = CommandVerifier(args.verifier, width=board.width, height=board.height,
                                             timeout=settings.verifier_timeout)
        logger.debug('replaying %d moves on %r', len(moves), board)
        apply_moves(board, moves)
    except (OSError, ValueError, LokError) as exc:
        print(f'error: {exc}', file=sys.stderr)
        return 2

    print(board.to_text())
    if args.json:
        print(json.dumps([asdict(cell) for cell in board.snapshot()]))

    if board.verifier is None:
        print('No verifier available; set LOK_VERIFIER_EXE or pass --verifier.')
        return 0
    try:
        verdict = board.commit_and_check_solution()
    except LokError as exc:
        print(f'error: {exc}', file=sys.stderr)
        return 2
    if verdict is None:
        print('PASS')
        return 0
    print(f'FAIL: {verdict}')
    return 1


if __name__ == '__main__':
    sys.exit(main())
