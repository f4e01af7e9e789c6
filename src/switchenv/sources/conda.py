"""
conda installation enumerator.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from ..models import EnvironmentDescriptor, Source
from .utils import list_subdirectories

logger = logging.getLogger(__name__)

CONDA_BASE_NAME = "base"


def conda_base_path(environ: Mapping[str, str] | None = None) -> Path | None:
    """
    derive the conda installation directory from `CONDA_EXE`.

    the executable lives at `<base>/bin/conda` (or `<base>/condabin/conda`),
    so the base is two levels up. a relative value is taken from the
    working directory.

    arguments:
        `environ: Mapping[str, str] | None`
            environment to read (default: os.environ)

    returns: `Path | None`
        the base directory, or none if conda is not installed
    """
    env = os.environ if environ is None else environ
    conda_exe = env.get("CONDA_EXE")
    if not conda_exe:
        return None
    return Path(conda_exe).expanduser().absolute().parent.parent


def find_conda_envs(environ: Mapping[str, str] | None = None) -> list[EnvironmentDescriptor]:
    """
    enumerate the conda base environment followed by its named envs.

    arguments:
        `environ: Mapping[str, str] | None`
            environment to read (default: os.environ)

    returns: `list[EnvironmentDescriptor]`
        conda descriptors, base first
    """
    base_path = conda_base_path(environ)
    if base_path is None:
        logger.debug("CONDA_EXE not set, skipping conda environments")
        return []

    if not base_path.is_dir():
        logger.debug("conda base %s does not exist", base_path)
        return []

    envs = [EnvironmentDescriptor(name=CONDA_BASE_NAME, path=base_path, source=Source.CONDA)]
    envs_path = base_path.joinpath("envs")
    envs.extend(
        EnvironmentDescriptor(
            name=str(path.relative_to(envs_path)),
            path=path,
            source=Source.CONDA,
        )
        for path in list_subdirectories(envs_path)
    )
    return envs
