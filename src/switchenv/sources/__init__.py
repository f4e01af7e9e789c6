"""
enumerators for the places python environments live.
"""

from __future__ import annotations

from .conda import conda_base_path, find_conda_envs
from .local import find_local_envs
from .pyenv import find_pyenv_envs
from .venv import find_venv_root_envs

__all__ = [
    "conda_base_path",
    "find_conda_envs",
    "find_local_envs",
    "find_pyenv_envs",
    "find_venv_root_envs",
]
