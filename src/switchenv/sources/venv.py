"""
venvs root enumerator.
"""

from __future__ import annotations

from pathlib import Path

from ..models import EnvironmentDescriptor, Source
from .utils import list_subdirectories


def find_venv_root_envs(root: str | Path | None) -> list[EnvironmentDescriptor]:
    """
    enumerate the environments kept under a single venvs directory.

    arguments:
        `root: str | Path | None`
            the configured venvs root. unset means no environments.

    returns: `list[EnvironmentDescriptor]`
        one venv descriptor per immediate subdirectory, named relative to root
    """
    if not root:
        return []

    root_path = Path(root).expanduser()
    if not root_path.is_dir():
        return []

    return [
        EnvironmentDescriptor(
            name=str(path.relative_to(root_path)),
            path=path.absolute(),
            source=Source.VENV,
        )
        for path in list_subdirectories(root_path)
    ]
