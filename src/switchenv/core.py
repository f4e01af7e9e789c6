"""
candidate aggregation for switchenv.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING

from .models import EnvironmentDescriptor
from .sources import find_conda_envs, find_local_envs, find_pyenv_envs, find_venv_root_envs

if TYPE_CHECKING:
    from .config import Config

logger = logging.getLogger(__name__)


def dedupe(descriptors: Iterable[EnvironmentDescriptor]) -> list[EnvironmentDescriptor]:
    """
    drop descriptors whose path was already seen.

    the first descriptor for a path wins, keeping its name and source.

    arguments:
        `descriptors: Iterable[EnvironmentDescriptor]`
            descriptors in precedence order

    returns: `list[EnvironmentDescriptor]`
        descriptors with unique paths, in first-seen order
    """
    seen: set[Path] = set()
    unique: list[EnvironmentDescriptor] = []
    for descriptor in descriptors:
        if descriptor.path is None or descriptor.path in seen:
            continue
        seen.add(descriptor.path)
        unique.append(descriptor)
    return unique


def get_candidates(
    config: Config,
    project_root: str | Path | None = None,
    cwd: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> list[EnvironmentDescriptor]:
    """
    collect every environment the configured sources know about.

    sources are read in this order: the project root's local environments,
    the working directory's local environments, the venvs root, conda (base
    first), then pyenv. a source that is not set up contributes nothing.

    arguments:
        `config: Config`
            configuration holding the venvs root
        `project_root: str | Path | None`
            resolved project root, if any
        `cwd: str | Path | None`
            working directory (default: the process working directory)
        `environ: Mapping[str, str] | None`
            environment to read (default: os.environ)

    returns: `list[EnvironmentDescriptor]`
        deduplicated candidates in source order
    """
    env = os.environ if environ is None else environ
    working_dir = Path.cwd() if cwd is None else Path(cwd)

    collected: list[EnvironmentDescriptor] = []
    if project_root is not None:
        root = Path(project_root)
        collected.extend(find_local_envs(root, name_hint=root.name))
    collected.extend(find_local_envs(working_dir))
    collected.extend(find_venv_root_envs(config.venvs_path))
    collected.extend(find_conda_envs(env))
    collected.extend(find_pyenv_envs(env))

    candidates = dedupe(collected)
    logger.debug("found %d candidates (%d before dedupe)", len(candidates), len(collected))
    return candidates
