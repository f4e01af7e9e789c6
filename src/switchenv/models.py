"""
models for switchenv.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import final


class Source(Enum):
    """
    enumeration of the places an environment can be discovered from.

    attributes:
        `VENV: str`
            subdirectory of the configured venvs root
        `CONDA: str`
            conda base environment or one of its named envs
        `PYENV: str`
            entry of pyenv's versions directory
        `LOCAL: str`
            directory next to a project or the working directory holding a
            pyvenv.cfg marker
    """

    VENV = "venv"
    CONDA = "conda"
    PYENV = "pyenv"
    LOCAL = "local"


@final
@dataclass(frozen=True)
class EnvironmentDescriptor:
    """
    a discoverable python environment.

    two descriptors denote the same environment when their paths are equal,
    whatever their name or source.

    attributes:
        `name: str`
            display label
        `path: Path | None`
            absolute path to the environment directory
        `source: Source`
            where the environment was discovered
    """

    name: str
    path: Path | None
    source: Source

    def __post_init__(self) -> None:
        """coerce string paths, treating an empty string as no path."""
        if isinstance(self.path, str):
            object.__setattr__(self, "path", Path(self.path) if self.path else None)
        if isinstance(self.source, str):
            object.__setattr__(self, "source", Source(self.source))

    def format(self) -> str:
        """render the descriptor the way the picker shows it."""
        return f"{self.name} ({self.path}) [{self.source.value}]"

    def to_dict(self) -> dict[str, str | None]:
        """convert to a json-serialisable dictionary."""
        return {
            "name": self.name,
            "path": str(self.path) if self.path is not None else None,
            "source": self.source.value,
        }
