"""
pyenv versions enumerator.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from packaging.version import InvalidVersion, Version

from ..models import EnvironmentDescriptor, Source
from .utils import list_files, list_subdirectories

logger = logging.getLogger(__name__)

_NO_VERSION = Version("0")


def _version_key(path: Path) -> tuple[int, Version, str]:
    """order pep 440 names by version, then everything else by name."""
    try:
        return (0, Version(path.name), path.name)
    except InvalidVersion:
        return (1, _NO_VERSION, path.name)


def find_pyenv_envs(environ: Mapping[str, str] | None = None) -> list[EnvironmentDescriptor]:
    """
    enumerate pyenv's installed versions and virtualenvs.

    directories under `$PYENV_ROOT/versions` come first. plain files at the
    same level follow, since pyenv can keep version entries as files.

    arguments:
        `environ: Mapping[str, str] | None`
            environment to read (default: os.environ)

    returns: `list[EnvironmentDescriptor]`
        pyenv descriptors
    """
    env = os.environ if environ is None else environ
    pyenv_root = env.get("PYENV_ROOT")
    if not pyenv_root:
        logger.debug("PYENV_ROOT not set, skipping pyenv versions")
        return []

    versions_path = Path(pyenv_root).expanduser().absolute().joinpath("versions")
    if not versions_path.is_dir():
        return []

    entries = sorted(list_subdirectories(versions_path), key=_version_key)
    entries += sorted(list_files(versions_path), key=_version_key)

    return [
        EnvironmentDescriptor(
            name=str(path.relative_to(versions_path)),
            path=path,
            source=Source.PYENV,
        )
        for path in entries
    ]
