"""
local environment enumerator.
"""

from __future__ import annotations

from pathlib import Path

from ..models import EnvironmentDescriptor, Source
from .utils import has_venv_marker, list_subdirectories, read_prompt


def find_local_envs(
    directory: str | Path | None,
    name_hint: str | None = None,
) -> list[EnvironmentDescriptor]:
    """
    find environments sitting directly inside a directory.

    only subdirectories with a pyvenv.cfg count. hidden directories such as
    `.venv` are included.

    arguments:
        `directory: str | Path | None`
            directory to search
        `name_hint: str | None`
            display name to use when the marker has no prompt

    returns: `list[EnvironmentDescriptor]`
        local descriptors
    """
    if directory is None:
        return []

    base = Path(directory).expanduser()
    if not base.is_dir():
        return []

    envs: list[EnvironmentDescriptor] = []
    for path in list_subdirectories(base):
        if not has_venv_marker(path):
            continue
        name = read_prompt(path) or name_hint or path.name
        envs.append(EnvironmentDescriptor(name=name, path=path.absolute(), source=Source.LOCAL))
    return envs
