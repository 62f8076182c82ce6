from __future__ import annotations

import logging
import os
import string
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional

from .parser import Alphabet

_TRUTHY = ('1', 'true', 'yes', 'on')


class EditPolicy(Enum):
    """Which letter cells change_letter may overwrite."""
    EDITABLE_CELLS = 'editable-cells'
    ANY_LETTER = 'any-letter'
    LOCKED = 'locked'

    @classmethod
    def parse(cls, value: str) -> 'EditPolicy':
        try:
            return cls(value.strip().lower())
        except ValueError:
            choices = ', '.join(p.value for p in cls)
            raise ValueError(f'unknown edit policy {value!r} (expected one of: {choices})') from None


@dataclass(frozen=True)
class Settings:
    """Engine configuration, normally read from LOK_* environment variables."""
    alphabet: Alphabet = Alphabet()
    edit_policy: EditPolicy = EditPolicy.EDITABLE_CELLS
    verifier_exe: Optional[str] = None
    verifier_timeout: Optional[float] = None
    log_level: int = logging.WARNING

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'Settings':
        env = os.environ if environ is None else environ

        alphabet = Alphabet(
            letters=env.get('LOK_LETTERS', string.ascii_uppercase),
            blocked=env.get('LOK_BLOCKED', '_'),
            editable=env.get('LOK_EDITABLE', ' -'),
        )

        policy_raw = env.get('LOK_EDIT_POLICY')
        edit_policy = EditPolicy.parse(policy_raw) if policy_raw else EditPolicy.EDITABLE_CELLS

        timeout: Optional[float] = None
        timeout_raw = env.get('LOK_VERIFIER_TIMEOUT')
        if timeout_raw:
            try:
                timeout = float(timeout_raw)
            except ValueError:
                raise ValueError(f'LOK_VERIFIER_TIMEOUT must be a number, got {timeout_raw!r}') from None
            if timeout <= 0:
                raise ValueError('LOK_VERIFIER_TIMEOUT must be positive')

        if env.get('LOK_DEBUG', '0').lower() in _TRUTHY:
            level = logging.DEBUG
        else:
            level = parse_log_level(env.get('LOK_LOG_LEVEL', 'WARNING'))

        return cls(
            alphabet=alphabet,
            edit_policy=edit_policy,
            verifier_exe=env.get('LOK_VERIFIER_EXE') or None,
            verifier_timeout=timeout,
            log_level=level,
        )


def parse_log_level(name: str) -> int:
    level = logging.getLevelName(name.strip().upper())
    if not isinstance(level, int):
        raise ValueError(f'LOK_LOG_LEVEL: unknown level {name!r}')
    return level
