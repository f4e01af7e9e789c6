"""
the coordinator owning the active environment.

an `EnvironmentSwitcher` captures PATH when it is created and keeps the
active environment slot. create one per process and route every lookup and
activation through it.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, MutableMapping
from dataclasses import replace
from pathlib import Path
from typing import final

from .activation import KINDS, SearchPath, has_high_priority_in_path
from .config import Config, PostSetHook
from .core import get_candidates
from .match import best_match
from .models import EnvironmentDescriptor, Source
from .project import load_project_root_provider, read_venv_name
from .sources import conda_base_path, find_local_envs

logger = logging.getLogger(__name__)

FormatItem = Callable[[EnvironmentDescriptor], str]
OnChoice = Callable[[EnvironmentDescriptor | None], None]
PresentSelection = Callable[[list[EnvironmentDescriptor], FormatItem, OnChoice], None]


@final
class EnvironmentSwitcher:
    """
    discovers, matches, and activates python environments for this process.

    attributes:
        `config: Config`
            configuration settings
        `environ: MutableMapping[str, str]`
            environment that is read and written (default: os.environ)
        `original_path: SearchPath`
            PATH as it was when the switcher was created
    """

    config: Config
    environ: MutableMapping[str, str]
    original_path: SearchPath
    _current: EnvironmentDescriptor | None
    _initialised: bool

    def __init__(
        self,
        config: Config | None = None,
        environ: MutableMapping[str, str] | None = None,
    ) -> None:
        """
        create the switcher and capture the starting PATH.

        arguments:
            `config: Config | None`
                configuration settings (default: Config.load())
            `environ: MutableMapping[str, str] | None`
                environment to operate on (default: os.environ)
        """
        self.config = config if config is not None else Config.load()
        self.environ = environ if environ is not None else os.environ
        self.original_path = SearchPath.parse(self.environ.get("PATH"))
        self._current = None
        self._initialised = False

    def init(self) -> EnvironmentDescriptor | None:
        """
        adopt the environment the process inherited, if any.

        runs once. when both VIRTUAL_ENV and a conda environment are set,
        whichever comes first in the captured PATH wins, and VIRTUAL_ENV wins
        when neither can be found there.

        returns: `EnvironmentDescriptor | None`
            the active environment afterwards
        """
        if self._initialised:
            return self._current
        self._initialised = True

        venv = self._inherited_venv()
        conda = self._inherited_conda()

        chosen = venv or conda
        if venv is not None and conda is not None:
            conda_marker = str(conda.path) if conda.path is not None else conda.name
            if has_high_priority_in_path(self.original_path, conda_marker, str(venv.path)):
                chosen = conda

        if chosen is not None:
            logger.debug("inherited %s environment at %s", chosen.source.value, chosen.path)
            self._current = chosen
        return self._current

    def _inherited_venv(self) -> EnvironmentDescriptor | None:
        venv_env = self.environ.get("VIRTUAL_ENV")
        if not venv_env:
            return None

        path = Path(venv_env)
        name = path.name
        if self.config.venvs_path:
            try:
                name = str(path.relative_to(Path(self.config.venvs_path).expanduser()))
            except ValueError:
                pass
        return EnvironmentDescriptor(name=name, path=path, source=Source.VENV)

    def _inherited_conda(self) -> EnvironmentDescriptor | None:
        conda_env = self.environ.get("CONDA_DEFAULT_ENV")
        conda_prefix = self.environ.get("CONDA_PREFIX")
        if not conda_env or not conda_prefix:
            return None
        return EnvironmentDescriptor(name=conda_env, path=Path(conda_prefix), source=Source.CONDA)

    def get_current(self) -> EnvironmentDescriptor | None:
        """get the environment activated last, or the inherited one."""
        return self._current

    def _project_root(self) -> Path | None:
        provider = load_project_root_provider(self.config)
        root = provider()
        return Path(root) if root else None

    def list_candidates(self, root: str | Path | None = None) -> list[EnvironmentDescriptor]:
        """
        list every environment that can be activated.

        arguments:
            `root: str | Path | None`
                venvs root to scan instead of the configured one

        returns: `list[EnvironmentDescriptor]`
            deduplicated candidates
        """
        config = self.config if root is None else replace(self.config, venvs_path=str(root))

        # a failing provider only drops the project source from the listing
        try:
            project_root = self._project_root()
        except Exception as e:
            logger.debug("no project root for candidate listing: %s", e)
            project_root = None

        return get_candidates(config, project_root=project_root, environ=self.environ)

    def activate(self, descriptor: EnvironmentDescriptor | None) -> EnvironmentDescriptor | None:
        """
        point the process environment at an environment.

        all variables are written before the active slot changes, and the
        post-activation hook runs last. the hook cannot undo or interrupt the
        activation.

        arguments:
            `descriptor: EnvironmentDescriptor | None`
                environment to activate

        returns: `EnvironmentDescriptor | None`
            the new active environment, or none if the descriptor had no
            usable path
        """
        env_path = descriptor.path if descriptor is not None else None
        if descriptor is None or env_path is None or not env_path.is_absolute():
            logger.warning("ignoring environment without an absolute path: %r", descriptor)
            return None

        state = descriptor if descriptor.name else replace(descriptor, name=env_path.name)

        kind = KINDS[state.source]
        variables = kind.variables(
            state.name, env_path, self.original_path, conda_base_path(self.environ)
        )
        self.environ.update(variables)

        self._current = state
        self._initialised = True
        logger.debug("activated %s environment %s", state.source.value, state.path)

        _ = self._run_hook(state)
        return state

    def _run_hook(self, state: EnvironmentDescriptor) -> Exception | None:
        """
        run the post-activation hook, containing any failure.

        returns: `Exception | None`
            the error raised while loading or running the hook, already
            logged
        """
        try:
            hook: PostSetHook | None = self.config.resolve_hook()
            if hook is not None:
                _ = hook(state)
        except Exception as e:
            logger.exception("post_set_venv hook failed for %s", state.path)
            return e
        return None

    def activate_by_name(self, query: str) -> EnvironmentDescriptor | None:
        """
        activate the candidate that best matches a name or path fragment.

        arguments:
            `query: str`
                environment name, path, or fragment of either

        returns: `EnvironmentDescriptor | None`
            the activated environment, or none if nothing matched
        """
        match = best_match(self.list_candidates(), query, cutoff=self.config.match_cutoff)
        if match is None:
            logger.debug("no environment matches '%s'", query)
            return None
        return self.activate(match)

    def auto_resolve(self) -> EnvironmentDescriptor | None:
        """
        activate the environment belonging to the current project.

        the project's `.venv` marker names the environment to look up. without
        a stored name, the first environment inside the project directory is
        used.

        returns: `EnvironmentDescriptor | None`
            the activated environment, or none if nothing applied

        raises:
            `ProjectRootUnavailableError`
                if the project root provider cannot be loaded
        """
        provider = load_project_root_provider(self.config)
        root = provider()
        if not root:
            logger.debug("no project root found")
            return None
        project_root = Path(root)

        if stored_name := read_venv_name(project_root):
            candidates = get_candidates(self.config, project_root=project_root, environ=self.environ)
            match = best_match(candidates, stored_name, cutoff=self.config.match_cutoff)
            if match is None:
                logger.debug("stored environment '%s' not found", stored_name)
                return None
            return self.activate(match)

        if local := find_local_envs(project_root):
            return self.activate(local[0])

        logger.debug("no environment in project %s", project_root)
        return None

    def pick(self, present_selection: PresentSelection) -> None:
        """
        let a selection collaborator choose the environment to activate.

        arguments:
            `present_selection: PresentSelection`
                called with the candidates, a formatter, and a callback that
                takes the choice or none on cancellation
        """

        def on_choice(choice: EnvironmentDescriptor | None) -> None:
            if choice is None:
                return
            _ = self.activate(choice)

        present_selection(self.list_candidates(), EnvironmentDescriptor.format, on_choice)
