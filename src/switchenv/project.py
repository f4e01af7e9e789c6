"""
project root lookup and project environment markers.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from functools import partial
from pathlib import Path
from typing import TYPE_CHECKING

from .config import DEFAULT_PROJECT_MARKERS, load_object
from .sources.utils import has_venv_marker, read_prompt

if TYPE_CHECKING:
    from .config import Config

logger = logging.getLogger(__name__)

ProjectRootProvider = Callable[[], "Path | str | None"]

VENV_MARKER = ".venv"


class ProjectRootUnavailableError(Exception):
    """raised when the configured project root provider cannot be loaded."""


def find_project_root(
    start_path: str | Path = ".",
    markers: list[str] | None = None,
    max_depth: int = 100,
) -> Path | None:
    """
    find the nearest project root by walking up the directory tree.

    arguments:
        `start_path: str | Path`
            the starting directory (default: current directory)
        `markers: list[str] | None`
            marker files/directories to look for. defaults to common python
            project markers.
        `max_depth: int`
            maximum number of parent directories to traverse (default: 100)

    returns: `Path | None`
        path to the project root if found, None otherwise
    """
    start = Path(start_path).expanduser().resolve()

    # if start is a file, begin from its parent directory
    if start.is_file():
        start = start.parent

    search_markers = markers if markers is not None else DEFAULT_PROJECT_MARKERS

    current = start
    depth = 0

    while current != current.parent and depth < max_depth:
        for marker in search_markers:
            if current.joinpath(marker).exists():
                return current

        current = current.parent
        depth += 1

    return None


def load_project_root_provider(config: Config) -> ProjectRootProvider:
    """
    load the project root function named by the configuration.

    the built-in `find_project_root` is bound to the configured markers.

    arguments:
        `config: Config`
            configuration naming the provider

    returns: `ProjectRootProvider`
        a function taking no arguments

    raises:
        `ProjectRootUnavailableError`
            if the provider cannot be imported or is not callable
    """
    reference = config.project_root_provider
    try:
        provider = load_object(reference)
    except (ImportError, AttributeError, ValueError) as e:
        raise ProjectRootUnavailableError(
            f"failed to load project root provider '{reference}': {e}"
        ) from e

    if not callable(provider):
        raise ProjectRootUnavailableError(f"project root provider '{reference}' is not callable")

    if provider is find_project_root:
        return partial(find_project_root, markers=config.project_markers)
    return provider


def read_venv_name(project_root: str | Path) -> str | None:
    """
    read the environment name stored for a project.

    `<project_root>/.venv` is either a text file whose first non-empty line is
    the name, or an in-project environment whose pyvenv.cfg prompt is the name.

    arguments:
        `project_root: str | Path`
            project directory

    returns: `str | None`
        the stored name, or none if there is no usable marker
    """
    marker = Path(project_root).joinpath(VENV_MARKER)

    if marker.is_dir():
        if not has_venv_marker(marker):
            return None
        return read_prompt(marker)

    if not marker.is_file():
        return None

    try:
        content = marker.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        logger.debug("cannot read %s", marker)
        return None

    for line in content.splitlines():
        if name := line.strip():
            return name

    return None
