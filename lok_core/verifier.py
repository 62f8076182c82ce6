from __future__ import annotations

import logging
import os
import shutil
import subprocess
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Protocol, Sequence, Tuple

from .errors import VerifierError

logger = logging.getLogger(__name__)

VERIFIER_EXE_NAMES = ('lok_verifier', 'lok_verifier.exe')


@dataclass(frozen=True)
class CellSnapshot:
    """Committed state of one letter cell as seen by a verifier."""
    row: int
    col: int
    letter: str
    blackened: bool
    path_mark_count: int


OverlaySnapshot = Tuple[CellSnapshot, ...]


class Verifier(Protocol):
    """Judges a committed overlay. Returns None on success, otherwise an opaque failure detail."""

    def verify(self, snapshot: OverlaySnapshot) -> Optional[Any]:
        ...


def find_verifier_exe(configured: Optional[str] = None) -> Optional[str]:
    """
    Resolve the judge executable.
    Order:
    1) `configured`, normally Settings.verifier_exe (must exist and be executable)
    2) PATH lookup (lok_verifier[.exe])
    """
    def _ok(path: str) -> bool:
        return os.path.isfile(path) and os.access(path, os.X_OK)

    if configured:
        if _ok(configured):
            logger.debug('verifier: using configured %s', configured)
            return configured
        logger.debug('verifier: configured path not executable: %s', configured)

    for name in VERIFIER_EXE_NAMES:
        found = shutil.which(name)
        if found and _ok(found):
            logger.debug('verifier: found in PATH: %s', found)
            return found
    logger.debug('verifier: no executable found')
    return None


def snapshot_to_arg(width: int, height: int, snapshot: Sequence[CellSnapshot]) -> str:
    """Encodes a snapshot as 'W,H;r,c,L,b,n;...' for the judge's --snapshot argument."""
    parts: List[str] = [f'{width},{height}']
    for cell in snapshot:
        parts.append(f'{cell.row},{cell.col},{cell.letter},{int(cell.blackened)},{cell.path_mark_count}')
    return ';'.join(parts)


def parse_verdict(line: str) -> Optional[str]:
    """
    Parses the judge's stdout: "ok" -> None, "fail <detail>" -> detail.
    Anything else raises VerifierError.
    """
    text = (line or '').strip()
    head, _, rest = text.partition(' ')
    if head == 'ok':
        return None
    if head == 'fail':
        return rest.strip()
    raise VerifierError(f'verifier returned malformed output: {text!r}')


def _run_default(exe: str, arg: str, timeout: Optional[float]) -> str:
    try:
        proc = subprocess.run([exe, '--snapshot', arg], capture_output=True, text=True,
                              check=False, timeout=timeout)
    except subprocess.TimeoutExpired as exc:
        raise VerifierError(f'verifier timed out after {timeout}s') from exc
    except OSError as exc:
        raise VerifierError(f'could not run verifier {exe!r}: {exc}') from exc
    if proc.returncode != 0:
        raise VerifierError(f'verifier exited with status {proc.returncode}: {(proc.stderr or "").strip()}')
    lines = (proc.stdout or '').strip().splitlines()
    return lines[0] if lines else ''


class CommandVerifier:
    """Verifier backed by an external judge executable."""

    def __init__(
        self,
        exe: str,
        *,
        width: int,
        height: int,
        timeout: Optional[float] = None,
        run_proc: Optional[Callable[[str, str, Optional[float]], str]] = None,
    ) -> None:
        self.exe = exe
        self.width = width
        self.height = height
        self.timeout = timeout
        self._run_proc = run_proc or _run_default

    def verify(self, snapshot: OverlaySnapshot) -> Optional[str]:
        arg = snapshot_to_arg(self.width, self.height, snapshot)
        logger.debug('verifier: running %s on %d cells', self.exe, len(snapshot))
        line = self._run_proc(self.exe, arg, self.timeout)
        return parse_verdict(line)
