"""
configuration loading for switchenv.

this module handles loading of configuration from pyproject.toml,
.switchenv.toml, and environment variables.
"""

from __future__ import annotations

import importlib
import os
from collections.abc import Callable
from contextlib import suppress
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Final

if TYPE_CHECKING:
    from .models import EnvironmentDescriptor

PostSetHook = Callable[["EnvironmentDescriptor"], object]

DEFAULT_PROJECT_ROOT_PROVIDER: Final[str] = "switchenv.project:find_project_root"

DEFAULT_MATCH_CUTOFF: Final[float] = 0.6

# markers the default project root provider walks up to
DEFAULT_PROJECT_MARKERS: Final[list[str]] = [
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "pyproject.toml",
    "poetry.lock",
    "Pipfile",
    "pdm.lock",
    "uv.lock",
    "setup.py",
    "setup.cfg",
    "requirements.txt",
    "environment.yml",
]


def load_object(reference: str) -> Any:
    """
    import an object from a `module:attribute` reference.

    arguments:
        `reference: str`
            reference such as `package.module:function`. dotted attribute
            paths after the colon are followed.

    returns: `Any`
        the referenced object

    raises:
        `ImportError`
            if the module cannot be imported
        `AttributeError`
            if the attribute does not exist
        `ValueError`
            if the reference has no colon
    """
    module_name, sep, attribute = reference.partition(":")
    if not sep or not module_name or not attribute:
        raise ValueError(f"expected 'module:attribute', got '{reference}'")

    obj: Any = importlib.import_module(module_name)
    for part in attribute.split("."):
        obj = getattr(obj, part)
    return obj


@dataclass
class Config:
    """
    main configuration class for switchenv.

    attributes:
        `venvs_path: str | None`
            directory whose subdirectories are virtual environments
        `post_set_venv: PostSetHook | str | None`
            callable run after every activation, or a `module:attribute`
            reference to one
        `project_root_provider: str`
            `module:attribute` reference to the project root function
        `project_markers: list[str]`
            files and directories marking a project root for the default
            provider
        `match_cutoff: float`
            minimum similarity for fuzzy name matching
    """

    venvs_path: str | None = None
    post_set_venv: PostSetHook | str | None = None
    project_root_provider: str = DEFAULT_PROJECT_ROOT_PROVIDER
    project_markers: list[str] = field(default_factory=lambda: DEFAULT_PROJECT_MARKERS.copy())
    match_cutoff: float = DEFAULT_MATCH_CUTOFF

    def resolve_hook(self) -> PostSetHook | None:
        """
        get the post-activation hook as a callable.

        returns: `PostSetHook | None`
            the hook, or none if unset

        raises:
            `ImportError`, `AttributeError`, `ValueError`
                if a string reference cannot be loaded
            `TypeError`
                if the reference does not point at a callable
        """
        if self.post_set_venv is None:
            return None
        if not isinstance(self.post_set_venv, str):
            return self.post_set_venv

        hook = load_object(self.post_set_venv)
        if not callable(hook):
            raise TypeError(f"'{self.post_set_venv}' is not callable")
        return hook

    @classmethod
    def from_pyproject_toml(cls, project_root: str | Path) -> Config | None:
        """
        Load configuration from the [tool.switchenv] table of pyproject.toml.

        arguments:
            `project_root: str | Path`
                directory containing pyproject.toml

        returns: `Config | None`
            configuration object if found, none otherwise
        """
        pyproject = Path(project_root).joinpath("pyproject.toml")

        if not pyproject.exists():
            return None

        try:
            import tomllib

            with open(pyproject, "rb") as f:
                data = tomllib.load(f)

            tool_config = data.get("tool", {}).get("switchenv")  # pyright: ignore[reportAny]
            if not tool_config:
                return None
            return cls._from_dict(tool_config)  # pyright: ignore[reportAny]
        except Exception:
            return None

    @classmethod
    def from_switchenv_toml(cls, project_root: str | Path) -> Config | None:
        """
        Load configuration from .switchenv.toml.

        arguments:
            `project_root: str | Path`
                directory containing .switchenv.toml

        returns: `Config | None`
            configuration object if found, none otherwise
        """
        config_file = Path(project_root).joinpath(".switchenv.toml")

        if not config_file.exists():
            return None

        try:
            import tomllib

            with open(config_file, "rb") as f:
                data = tomllib.load(f)

            return cls._from_dict(data)
        except Exception:
            return None

    @classmethod
    def from_environment(cls) -> Config:
        """
        Load configuration from SWITCHENV_* environment variables.

        returns: `Config`
            configuration with values from environment
        """
        config = cls()

        if venvs_path := os.environ.get("SWITCHENV_VENVS_PATH"):
            config.venvs_path = venvs_path

        if hook := os.environ.get("SWITCHENV_POST_SET_VENV"):
            config.post_set_venv = hook

        if provider := os.environ.get("SWITCHENV_PROJECT_ROOT_PROVIDER"):
            config.project_root_provider = provider

        if cutoff := os.environ.get("SWITCHENV_MATCH_CUTOFF"):
            with suppress(ValueError):
                config.match_cutoff = float(cutoff)

        return config

    @classmethod
    def load(cls, project_root: str | Path = ".") -> Config:
        """
        Load configuration from all available sources.

        sources are loaded in order of priority (later overrides earlier):
        1. default values
        2. pyproject.toml
        3. .switchenv.toml
        4. environment variables

        arguments:
            `project_root: str | Path`
                directory to read configuration files from

        returns: `Config`
            merged configuration from all sources
        """
        project_path = Path(project_root).resolve()

        config = cls()

        if pyproject_config := cls.from_pyproject_toml(project_path):
            config = config.merge(pyproject_config)

        if switchenv_config := cls.from_switchenv_toml(project_path):
            config = config.merge(switchenv_config)

        config = config.merge(cls.from_environment())

        return config

    def merge(self, other: Config) -> Config:
        """
        merge another configuration into this one.

        values from 'other' take precedence when they differ from the
        defaults.

        arguments:
            `other: Config`
                configuration to merge

        returns: `Config`
            new merged configuration
        """
        return Config(
            venvs_path=other.venvs_path if other.venvs_path is not None else self.venvs_path,
            post_set_venv=other.post_set_venv
            if other.post_set_venv is not None
            else self.post_set_venv,
            project_root_provider=other.project_root_provider
            if other.project_root_provider != DEFAULT_PROJECT_ROOT_PROVIDER
            else self.project_root_provider,
            project_markers=other.project_markers
            if other.project_markers != DEFAULT_PROJECT_MARKERS
            else self.project_markers,
            match_cutoff=other.match_cutoff
            if other.match_cutoff != DEFAULT_MATCH_CUTOFF
            else self.match_cutoff,
        )

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> Config:
        """
        Create configuration from a dictionary.

        arguments:
            `data: dict[str, Any]`
                configuration dictionary

        returns: `Config`
            configuration object
        """
        config = cls()

        if "venvs_path" in data:
            config.venvs_path = str(data["venvs_path"])  # pyright: ignore[reportAny]
        if "post_set_venv" in data:
            config.post_set_venv = str(data["post_set_venv"])  # pyright: ignore[reportAny]
        if "project_root_provider" in data:
            config.project_root_provider = str(data["project_root_provider"])  # pyright: ignore[reportAny]
        if "project_markers" in data:
            config.project_markers = [str(m) for m in data["project_markers"]]  # pyright: ignore[reportAny]
        if "match_cutoff" in data:
            with suppress(TypeError, ValueError):
                config.match_cutoff = float(data["match_cutoff"])  # pyright: ignore[reportAny]

        return config
