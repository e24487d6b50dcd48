"""Environment-driven settings shared by the runtime and the editing engine."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

ENV_PREFIX = "VIM_MULTICURSOR_"

_TRUTHY = {"1", "true", "yes", "on"}


def env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def env_flag(name: str, default: bool) -> bool:
    raw = env(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


def env_int(name: str, default: int) -> int:
    raw = env(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True, slots=True)
class EngineSettings:
    """Behavioural switches for an editing session.

    ``case_sensitive``
        Patterns handed to the default locator match case-sensitively.
    ``whole_word``
        Seeding the cursor set from the word under the cursor only matches
        whole words (``\\bword\\b``), like ``*`` in Vim.
    ``exit_insert_moves_left``
        Leaving insert mode steps every cursor one column left.
    """

    case_sensitive: bool = True
    whole_word: bool = True
    exit_insert_moves_left: bool = True

    @classmethod
    def from_env(cls) -> "EngineSettings":
        return cls(
            case_sensitive=env_flag("CASE_SENSITIVE", True),
            whole_word=env_flag("WHOLE_WORD", True),
            exit_insert_moves_left=env_flag("EXIT_INSERT_MOVES_LEFT", True),
        )


__all__ = ["ENV_PREFIX", "EngineSettings", "env", "env_flag", "env_int"]
