"""
tests for the switchenv cli.
"""

from __future__ import annotations

import io
import json
import os
import shlex
from pathlib import Path

import pytest

from switchenv.cli import format_exports, main, prompt_selection
from switchenv.models import EnvironmentDescriptor, Source


@pytest.fixture
def workspace(tmp_path: Path, venvs_root: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """run the cli from an empty directory with a configured venvs root."""
    cwd = tmp_path / "work"
    cwd.mkdir()
    monkeypatch.chdir(cwd)
    monkeypatch.setenv("SWITCHENV_VENVS_PATH", str(venvs_root))
    return cwd


class TestCliBasic:
    """tests for basic cli functionality."""

    def test_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        """test that --help works."""
        with pytest.raises(SystemExit) as exc_info:
            _ = main(["--help"])
        assert exc_info.value.code == 0

        captured = capsys.readouterr()
        assert "switchenv" in captured.out
        assert "pick" in captured.out

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        """test that --version works."""
        with pytest.raises(SystemExit) as exc_info:
            _ = main(["--version"])
        assert exc_info.value.code == 0

        captured = capsys.readouterr()
        assert "0.1.0" in captured.out

    def test_no_command(self, capsys: pytest.CaptureFixture[str]) -> None:
        """test that running without a command prints help."""
        assert main([]) == 2
        assert "usage" in capsys.readouterr().out


class TestList:
    """tests for the list command."""

    def test_text(self, workspace: Path, venvs_root: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """test the human-readable listing."""
        assert main(["list"]) == 0

        out = capsys.readouterr().out
        assert f"  alpha ({venvs_root / 'alpha'}) [venv]" in out
        assert f"  beta ({venvs_root / 'beta'}) [venv]" in out

    def test_marks_current(
        self, workspace: Path, venvs_root: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """test that the inherited environment is marked."""
        os.environ["VIRTUAL_ENV"] = str(venvs_root / "beta")

        assert main(["list"]) == 0

        out = capsys.readouterr().out
        assert f"* beta ({venvs_root / 'beta'}) [venv]" in out

    def test_json(self, workspace: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """test json output."""
        assert main(["list", "--json"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert [item["name"] for item in data] == ["alpha", "beta"]
        assert all(item["source"] == "venv" for item in data)

    def test_root_override(
        self, workspace: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """test listing another venvs directory."""
        other = tmp_path / "other"
        other.joinpath("gamma").mkdir(parents=True)

        assert main(["list", "--root", str(other), "--json"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert [item["name"] for item in data] == ["gamma"]

    def test_empty(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """test output when there is nothing to list."""
        monkeypatch.chdir(tmp_path)

        assert main(["list"]) == 0
        assert "no environments found" in capsys.readouterr().out


class TestCurrent:
    """tests for the current command."""

    def test_none(self, workspace: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """test output with nothing active."""
        assert main(["current"]) == 0
        assert "no active environment" in capsys.readouterr().out

    def test_json(self, workspace: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """test json output for an inherited conda environment."""
        os.environ["CONDA_DEFAULT_ENV"] = "data"
        os.environ["CONDA_PREFIX"] = "/opt/conda/envs/data"

        assert main(["current", "--json"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data == {"name": "data", "path": str(Path("/opt/conda/envs/data")), "source": "conda"}

    def test_json_none(self, workspace: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """test json output with nothing active."""
        assert main(["current", "--json"]) == 0
        assert capsys.readouterr().out.strip() == "null"


class TestUse:
    """tests for the use command."""

    def test_prints_exports(
        self, workspace: Path, venvs_root: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """test that activation is printed as shell exports."""
        assert main(["use", "alpha"]) == 0

        out = capsys.readouterr().out
        assert f"export VIRTUAL_ENV={shlex.quote(str(venvs_root / 'alpha'))}" in out
        assert "export CONDA_SHLVL=0" in out
        assert "export CONDA_PREFIX=''" in out

    def test_no_match(self, workspace: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """test error output when nothing matches."""
        assert main(["use", "zzzzzzzz"]) == 1

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "no environment matches" in captured.err


class TestAuto:
    """tests for the auto command."""

    def test_project_environment(
        self,
        project: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """test resolving the project's own environment."""
        env = project / ".venv"
        env.mkdir()
        (env / "pyvenv.cfg").write_text("prompt = demo\n")
        monkeypatch.chdir(project)

        assert main(["auto"]) == 0
        assert f"export VIRTUAL_ENV={shlex.quote(str(env.resolve()))}" in capsys.readouterr().out

    def test_nothing_to_do(
        self, project: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """test that no environment produces no output."""
        monkeypatch.chdir(project)

        assert main(["auto"]) == 0
        assert capsys.readouterr().out == ""

    def test_provider_error(
        self, workspace: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """test that an unloadable provider is reported."""
        monkeypatch.setenv("SWITCHENV_PROJECT_ROOT_PROVIDER", "no_such_module_xyz:root")

        assert main(["auto"]) == 2
        assert "failed to load project root provider" in capsys.readouterr().err


class TestPick:
    """tests for the pick command."""

    def test_choice(
        self,
        workspace: Path,
        venvs_root: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """test picking by number."""
        monkeypatch.setattr("sys.stdin", io.StringIO("2\n"))

        assert main(["pick"]) == 0

        captured = capsys.readouterr()
        assert "[1] alpha" in captured.err
        assert f"export VIRTUAL_ENV={shlex.quote(str(venvs_root / 'beta'))}" in captured.out

    @pytest.mark.parametrize("answer", ["", "0", "9", "beta"])
    def test_cancel(
        self,
        answer: str,
        workspace: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """test that empty or invalid answers cancel silently."""
        monkeypatch.setattr("sys.stdin", io.StringIO(answer))

        assert main(["pick"]) == 0
        assert capsys.readouterr().out == ""


class TestHelpers:
    """tests for output helpers."""

    def test_format_exports(self) -> None:
        """test that every written variable is exported and quoted."""
        exports = format_exports({"PATH": "/env/bin:/usr/bin", "CONDA_PROMPT_MODIFIER": "(my env)"})

        lines = exports.splitlines()
        assert len(lines) == 6
        assert "export PATH=/env/bin:/usr/bin" in lines
        assert "export CONDA_PROMPT_MODIFIER='(my env)'" in lines
        assert "export VIRTUAL_ENV=''" in lines

    def test_prompt_selection_empty(self) -> None:
        """test that an empty list cancels without reading input."""
        chosen: list[EnvironmentDescriptor | None] = []
        err = io.StringIO()

        prompt_selection([], EnvironmentDescriptor.format, chosen.append, io.StringIO("1\n"), err)

        assert chosen == [None]
        assert "no environments found" in err.getvalue()

    def test_prompt_selection_choice(self) -> None:
        """test that the numbered entry is delivered."""
        items = [
            EnvironmentDescriptor("a", Path("/envs/a"), Source.VENV),
            EnvironmentDescriptor("b", Path("/envs/b"), Source.CONDA),
        ]
        chosen: list[EnvironmentDescriptor | None] = []

        prompt_selection(items, EnvironmentDescriptor.format, chosen.append, io.StringIO("2\n"), io.StringIO())

        assert chosen == [items[1]]
