"""
conftest for switchenv tests.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterator
from pathlib import Path
from unittest import mock

import pytest

# variables switchenv reads or writes, cleared around every test
MANAGED_VARIABLES = (
    "PATH",
    "VIRTUAL_ENV",
    "CONDA_PREFIX",
    "CONDA_DEFAULT_ENV",
    "CONDA_PROMPT_MODIFIER",
    "CONDA_SHLVL",
    "CONDA_EXE",
    "PYENV_ROOT",
    "SWITCHENV_VENVS_PATH",
    "SWITCHENV_POST_SET_VENV",
    "SWITCHENV_PROJECT_ROOT_PROVIDER",
    "SWITCHENV_MATCH_CUTOFF",
)

BASE_PATH = os.pathsep.join(["/usr/local/bin", "/usr/bin", "/bin"])


@pytest.fixture(autouse=True)
def clean_environ() -> Iterator[None]:
    """isolate os.environ so activations never leak out of a test."""
    with mock.patch.dict(os.environ, {}, clear=False):
        for name in MANAGED_VARIABLES:
            _ = os.environ.pop(name, None)
        os.environ["PATH"] = BASE_PATH
        yield


def _make_env(path: Path, prompt: str | None = None) -> Path:
    """create a directory that looks like a virtual environment."""
    path.mkdir(parents=True, exist_ok=True)
    lines = ["home = /usr/bin", "include-system-site-packages = false"]
    if prompt is not None:
        lines.append(f"prompt = {prompt}")
    (path / "pyvenv.cfg").write_text("\n".join(lines) + "\n")
    path.joinpath("bin").mkdir(exist_ok=True)
    return path


@pytest.fixture
def make_env() -> Callable[..., Path]:
    """factory for fake virtual environment directories."""
    return _make_env


@pytest.fixture
def venvs_root(tmp_path: Path) -> Path:
    """create a venvs directory holding 'alpha' and 'beta'."""
    root = tmp_path / "venvs"
    _ = _make_env(root / "alpha")
    _ = _make_env(root / "beta")
    return root


@pytest.fixture
def conda_install(tmp_path: Path) -> Path:
    """create a conda installation with named envs 'data' and 'web'."""
    base = tmp_path / "miniconda3"
    base.joinpath("bin").mkdir(parents=True)
    base.joinpath("bin", "conda").write_text("")
    base.joinpath("envs", "data").mkdir(parents=True)
    base.joinpath("envs", "web").mkdir(parents=True)
    return base


@pytest.fixture
def pyenv_root(tmp_path: Path) -> Path:
    """create a pyenv root with two versions and a version file."""
    root = tmp_path / "pyenv"
    versions = root / "versions"
    versions.joinpath("3.10.4").mkdir(parents=True)
    versions.joinpath("3.9.18").mkdir()
    versions.joinpath("tools").write_text("3.10.4\n")
    return root


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """create a project directory with a pyproject.toml."""
    root = tmp_path / "project"
    root.mkdir()
    (root / "pyproject.toml").write_text('[project]\nname = "demo"\n')
    return root
