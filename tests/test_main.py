"""Tests for the command line interface."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from unbuild.main import main, parse_args

RUN = "unbuild.build_tools.mix.subprocess.run"


@pytest.fixture(autouse=True)
def wide_console(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep Rich tables from wrapping long temporary paths."""
    monkeypatch.setenv("COLUMNS", "250")


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    """Point the CLI at a config file that does not exist (defaults)."""
    return tmp_path / "config.yaml"


@pytest.fixture
def cargo_project(tmp_path: Path) -> Path:
    """Create a built Cargo project."""
    root = tmp_path / "crate"
    (root / "target" / "debug").mkdir(parents=True)
    (root / "target" / "debug" / "crate").write_bytes(b"\0" * 2048)
    (root / "Cargo.toml").write_text('[package]\nname = "crate-demo"\n')
    return root


@pytest.fixture
def mix_project(tmp_path: Path) -> Path:
    """Create a built Mix project."""
    root = tmp_path / "app"
    (root / "_build").mkdir(parents=True)
    (root / "_build" / "beam").write_bytes(b"\0" * 10)
    (root / "mix.exs").write_text("")
    return root


class TestParseArgs:
    """Tests for argument parsing."""

    def test_clean_dry_run(self, tmp_path: Path) -> None:
        """The clean command accepts paths and --dry-run."""
        args = parse_args(["-t", "rust", "-t", "mix", "clean", "-n", str(tmp_path)])

        assert args.command == "clean"
        assert args.dry_run is True
        assert args.tools == ["rust", "mix"]
        assert args.paths == [tmp_path]

    def test_status_requires_path(self) -> None:
        """The status command needs at least one path."""
        with pytest.raises(SystemExit):
            parse_args(["status"])


class TestStatusCommand:
    """Tests for the status command."""

    def test_reports_tools(
        self,
        config_path: Path,
        cargo_project: Path,
        mix_project: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Detected projects are listed with name and freeable size."""
        with patch(RUN) as mock_run:
            code = main(["--config", str(config_path), "status", str(cargo_project), str(mix_project)])

        mock_run.assert_not_called()
        out = capsys.readouterr().out
        assert code == 0
        assert "Cargo" in out
        assert "crate-demo" in out
        assert "Mix" in out
        assert "2.0 kB" in out

    def test_not_a_directory(self, config_path: Path, tmp_path: Path) -> None:
        """Paths that are not directories fail the command."""
        code = main(["--config", str(config_path), "status", str(tmp_path / "missing")])

        assert code == 1

    def test_tool_filter(self, config_path: Path, cargo_project: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """--tool limits detection to the named ecosystems."""
        code = main(["--config", str(config_path), "--tool", "elixir", "status", str(cargo_project)])

        out = capsys.readouterr().out
        assert code == 0
        assert "Cargo" not in out
        assert "No build tools detected" in out


class TestCleanCommand:
    """Tests for the clean command."""

    def test_dry_run_changes_nothing(
        self,
        config_path: Path,
        cargo_project: Path,
        mix_project: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """A dry run prints intended actions and neither deletes nor spawns."""
        with patch(RUN) as mock_run:
            code = main(["--config", str(config_path), "clean", "--dry-run", str(cargo_project), str(mix_project)])

        mock_run.assert_not_called()
        out = capsys.readouterr().out
        assert code == 0
        assert f"{cargo_project}: rm -r {cargo_project / 'target'}" in out
        assert f"{mix_project}: mix clean --deps" in out
        assert (cargo_project / "target").exists()

    def test_removes_artifacts(self, config_path: Path, cargo_project: Path) -> None:
        """A real run deletes Cargo output even when mix is missing."""
        with patch(RUN, side_effect=FileNotFoundError("mix")):
            code = main(["--config", str(config_path), "clean", str(cargo_project)])

        assert code == 0
        assert not (cargo_project / "target").exists()

    def test_failure_does_not_stop_other_projects(
        self,
        config_path: Path,
        cargo_project: Path,
        mix_project: Path,
    ) -> None:
        """A failing mix clean is reported while Cargo cleanup still happens."""

        def fake_run(command: list[str], **kwargs: object) -> MagicMock:
            return MagicMock(returncode=0 if command == ["mix", "--version"] else 1)

        with patch(RUN, side_effect=fake_run):
            code = main(["--config", str(config_path), "clean", str(mix_project), str(cargo_project)])

        assert code == 1
        assert not (cargo_project / "target").exists()
        assert (mix_project / "_build").exists()


class TestConfigCommand:
    """Tests for the config command."""

    def test_init_creates_file(self, config_path: Path) -> None:
        """--init writes the default configuration."""
        code = main(["--config", str(config_path), "config", "--init"])

        assert code == 0
        assert config_path.exists()

    def test_init_refuses_to_overwrite(self, config_path: Path) -> None:
        """--init keeps an existing file."""
        config_path.write_text("probe_only: true\n")

        code = main(["--config", str(config_path), "config", "--init"])

        assert code == 1
        assert config_path.read_text() == "probe_only: true\n"

    def test_show(self, config_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """--show lists settings and available tools."""
        code = main(["--config", str(config_path), "config", "--show"])

        out = capsys.readouterr().out
        assert code == 0
        assert "cargo, mix" in out

    def test_invalid_config(self, config_path: Path) -> None:
        """A broken config file fails before any command runs."""
        config_path.write_text("tools: [\n")

        assert main(["--config", str(config_path), "config", "--show"]) == 1

    def test_malformed_section(self, config_path: Path) -> None:
        """A config section of the wrong type fails cleanly instead of crashing."""
        config_path.write_text("logging: debug\n")

        assert main(["--config", str(config_path), "config", "--show"]) == 1
