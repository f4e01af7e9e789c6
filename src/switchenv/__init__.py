"""
switchenv: discover and activate python environments for a running process.

switchenv finds environments in a venvs directory, a conda installation,
pyenv's versions, and next to the current project, picks one by name, and
rewrites PATH, VIRTUAL_ENV and the CONDA_* variables so child processes see
it.
"""

from __future__ import annotations

from .config import Config
from .core import dedupe, get_candidates
from .match import best_match
from .models import EnvironmentDescriptor, Source
from .project import ProjectRootUnavailableError, find_project_root, read_venv_name
from .switcher import EnvironmentSwitcher

__version__ = "0.1.0"
__all__ = [
    "Config",
    "EnvironmentDescriptor",
    "EnvironmentSwitcher",
    "ProjectRootUnavailableError",
    "Source",
    "best_match",
    "dedupe",
    "find_project_root",
    "get_candidates",
    "read_venv_name",
]
