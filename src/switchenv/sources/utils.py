"""
utility functions for enumerators.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

logger = logging.getLogger(__name__)

PYVENV_CFG = "pyvenv.cfg"

_PROMPT_LINE = re.compile(r"^prompt\s*=\s*(.*)$")


def list_subdirectories(path: Path) -> list[Path]:
    """
    list the immediate subdirectories of a path, hidden ones included.

    arguments:
        `path: Path`
            directory to list

    returns: `list[Path]`
        subdirectories sorted by name, empty if the path cannot be listed
    """
    try:
        return sorted(child for child in path.iterdir() if child.is_dir())
    except OSError:
        logger.debug("cannot list directories in %s", path)
        return []


def list_files(path: Path) -> list[Path]:
    """
    list the immediate non-directory entries of a path.

    arguments:
        `path: Path`
            directory to list

    returns: `list[Path]`
        entries sorted by name, empty if the path cannot be listed
    """
    try:
        return sorted(child for child in path.iterdir() if not child.is_dir())
    except OSError:
        logger.debug("cannot list files in %s", path)
        return []


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def read_prompt(env_path: Path) -> str | None:
    """
    read the prompt value from an environment's pyvenv.cfg.

    `python -m venv --prompt` writes the value quoted, so one pair of matching
    surrounding quotes is removed.

    arguments:
        `env_path: Path`
            path to the environment directory

    returns: `str | None`
        the prompt, or none if the marker is missing, unreadable, or has no
        prompt line
    """
    try:
        content = env_path.joinpath(PYVENV_CFG).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None

    for line in content.splitlines():
        if match := _PROMPT_LINE.match(line.strip()):
            prompt = _unquote(match.group(1).strip())
            return prompt or None

    return None


def has_venv_marker(env_path: Path) -> bool:
    """check whether a directory carries a pyvenv.cfg file."""
    return env_path.joinpath(PYVENV_CFG).is_file()
