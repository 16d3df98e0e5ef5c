"""Tests for the build tool registry."""

from __future__ import annotations

from pathlib import Path

import pytest

from unbuild.build_tools.cargo import Cargo, CargoProbe
from unbuild.build_tools.mix import Mix, MixProbe
from unbuild.manager import BuildToolManager


@pytest.fixture
def manager() -> BuildToolManager:
    """Create a registry with the Cargo and Mix probes."""
    registry = BuildToolManager()
    registry.register(CargoProbe())
    registry.register(MixProbe())
    return registry


class TestRegister:
    """Tests for probe registration."""

    def test_starts_empty(self) -> None:
        """A new registry holds no probes."""
        assert len(BuildToolManager()) == 0

    def test_preserves_order(self) -> None:
        """Probes are kept in registration order."""
        registry = BuildToolManager()
        mix, cargo = MixProbe(), CargoProbe()

        registry.register(mix)
        registry.register(cargo)

        assert registry.probes == (mix, cargo)
        assert list(registry) == [mix, cargo]

    def test_keeps_duplicates(self) -> None:
        """Registering the same ecosystem twice keeps both probes."""
        registry = BuildToolManager()
        registry.register(CargoProbe())
        registry.register(CargoProbe())

        assert len(registry) == 2

    def test_registries_are_independent(self) -> None:
        """Separate registries do not share probes."""
        first = BuildToolManager()
        second = BuildToolManager()

        first.register(CargoProbe())

        assert len(first) == 1
        assert len(second) == 0


class TestProbe:
    """Tests for matching a directory against all probes."""

    def test_no_match(self, manager: BuildToolManager, tmp_path: Path) -> None:
        """A directory without markers yields no tools."""
        assert manager.probe(tmp_path) == []

    def test_single_match(self, manager: BuildToolManager, tmp_path: Path) -> None:
        """A Cargo project yields one Cargo tool."""
        (tmp_path / "Cargo.toml").write_text('[package]\nname = "x"\n')

        tools = manager.probe(tmp_path)

        assert len(tools) == 1
        assert isinstance(tools[0], Cargo)

    def test_mixed_project_reports_all_in_order(self, tmp_path: Path) -> None:
        """A directory with several ecosystems yields one tool each, in registration order."""
        (tmp_path / "Cargo.toml").write_text('[package]\nname = "native"\n')
        (tmp_path / "mix.exs").write_text("")

        registry = BuildToolManager()
        registry.register(MixProbe())
        registry.register(CargoProbe())

        tools = registry.probe(tmp_path)

        assert [type(t) for t in tools] == [Mix, Cargo]
        assert all(t.path == tmp_path for t in tools)

    def test_duplicate_probes_report_twice(self, tmp_path: Path) -> None:
        """Duplicate probes are not merged when matching."""
        (tmp_path / "Cargo.toml").write_text("")
        registry = BuildToolManager()
        registry.register(CargoProbe())
        registry.register(CargoProbe())

        assert len(registry.probe(tmp_path)) == 2


class TestSelect:
    """Tests for restricting the registry by tool name."""

    def test_select_by_alias(self, manager: BuildToolManager) -> None:
        """An alias selects its ecosystem only."""
        selected = manager.select(["elixir"])

        assert [p.name for p in selected] == ["mix"]

    def test_select_is_case_insensitive(self, manager: BuildToolManager) -> None:
        """Tool names are compared case-insensitively."""
        assert [p.name for p in manager.select(["RUST"])] == ["cargo"]

    def test_select_keeps_registration_order(self, manager: BuildToolManager) -> None:
        """Selected probes keep their original order, not the order of names."""
        selected = manager.select(["exs", "rs"])

        assert [p.name for p in selected] == ["cargo", "mix"]

    def test_select_unknown_name(self, manager: BuildToolManager) -> None:
        """Unknown names select nothing."""
        assert len(manager.select(["npm"])) == 0

    def test_select_leaves_original_untouched(self, manager: BuildToolManager) -> None:
        """Selection builds a new registry."""
        manager.select(["cargo"])

        assert len(manager) == 2
