"""
environment variable sets for activating an environment.

an activation always writes the same variables, so the process ends up either
virtualenv-like or conda-like and never halfway between.
"""

from __future__ import annotations

import os
import sys
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Final, final

from .models import Source

WRITTEN_VARIABLES: Final[tuple[str, ...]] = (
    "PATH",
    "VIRTUAL_ENV",
    "CONDA_PREFIX",
    "CONDA_DEFAULT_ENV",
    "CONDA_PROMPT_MODIFIER",
    "CONDA_SHLVL",
)


def bin_dir(env_path: Path) -> Path:
    """
    get the executables directory of an environment.

    arguments:
        `env_path: Path`
            path to the environment

    returns: `Path`
        `Scripts` on windows, `bin` everywhere else
    """
    if sys.platform == "win32":
        return env_path.joinpath("Scripts")
    return env_path.joinpath("bin")


@final
@dataclass(frozen=True)
class SearchPath:
    """
    an ordered, tokenized PATH value.

    attributes:
        `value: str`
            the raw PATH string
        `segments: tuple[str, ...]`
            non-empty segments in order
    """

    value: str
    segments: tuple[str, ...]

    @classmethod
    def parse(cls, value: str | None) -> SearchPath:
        """split a PATH string on the platform separator."""
        raw = value or ""
        return cls(raw, tuple(segment for segment in raw.split(os.pathsep) if segment))

    def index_of(self, target: str | None) -> int | None:
        """
        find the first segment that is the target or lies beneath it.

        comparison is by whole path components, so `/a` matches `/a` and
        `/a/bin` but not `/ab/bin`.

        arguments:
            `target: str | None`
                path to look for

        returns: `int | None`
            index of the segment, or none if the target is empty or absent
        """
        if not target:
            return None

        wanted = os.path.normpath(target)
        prefix = wanted.rstrip(os.sep) + os.sep
        for index, segment in enumerate(self.segments):
            normalised = os.path.normpath(segment)
            if normalised == wanted or normalised.startswith(prefix):
                return index
        return None

    def prepend(self, directory: Path) -> str:
        """build a PATH value with a directory in front of these segments."""
        if not self.value:
            return str(directory)
        return f"{directory}{os.pathsep}{self.value}"


def has_high_priority_in_path(search_path: SearchPath, first: str | None, second: str | None) -> bool:
    """
    check whether `first` shows up in PATH ahead of `second`.

    arguments:
        `search_path: SearchPath`
            PATH to search
        `first: str | None`
            value that should come first
        `second: str | None`
            value to compare against

    returns: `bool`
        true if first is found and second is either missing or later
    """
    first_index = search_path.index_of(first)
    if first_index is None:
        return False

    second_index = search_path.index_of(second)
    if second_index is None:
        return True

    return first_index < second_index


class EnvironmentKind(ABC):
    """
    the variable set one family of environments activates with.
    """

    @abstractmethod
    def variables(
        self,
        name: str,
        env_path: Path,
        original_path: SearchPath,
        conda_base: Path | None,
    ) -> dict[str, str]:
        """
        compute every variable to write for an activation.

        arguments:
            `name: str`
                display name of the environment being activated
            `env_path: Path`
                absolute path to the environment
            `original_path: SearchPath`
                PATH as it was when the process started
            `conda_base: Path | None`
                conda installation directory, if conda is installed

        returns: `dict[str, str]`
            values for every name in `WRITTEN_VARIABLES`
        """


@final
class VirtualEnvKind(EnvironmentKind):
    """virtualenv-style activation, resetting conda to its base environment."""

    def variables(
        self,
        name: str,
        env_path: Path,
        original_path: SearchPath,
        conda_base: Path | None,
    ) -> dict[str, str]:
        return {
            "VIRTUAL_ENV": str(env_path),
            "CONDA_PREFIX": str(conda_base) if conda_base is not None else "",
            "CONDA_DEFAULT_ENV": "base" if conda_base is not None else "",
            "CONDA_SHLVL": "0",
            "CONDA_PROMPT_MODIFIER": "",
            "PATH": original_path.prepend(bin_dir(env_path)),
        }


@final
class CondaKind(EnvironmentKind):
    """conda-style activation. VIRTUAL_ENV is emptied rather than unset."""

    def variables(
        self,
        name: str,
        env_path: Path,
        original_path: SearchPath,
        conda_base: Path | None,
    ) -> dict[str, str]:
        return {
            "CONDA_PREFIX": str(env_path),
            "CONDA_DEFAULT_ENV": name,
            "CONDA_PROMPT_MODIFIER": f"({name})",
            "CONDA_SHLVL": "1",
            "VIRTUAL_ENV": "",
            "PATH": original_path.prepend(bin_dir(env_path)),
        }


KINDS: Final[Mapping[Source, EnvironmentKind]] = {
    Source.VENV: VirtualEnvKind(),
    Source.PYENV: VirtualEnvKind(),
    Source.LOCAL: VirtualEnvKind(),
    Source.CONDA: CondaKind(),
}
