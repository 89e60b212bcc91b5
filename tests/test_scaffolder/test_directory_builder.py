"""Tests for the project skeleton builder (pycrator.scaffolder.builder)."""

from __future__ import annotations

from pathlib import Path

import pytest

from pycrator.errors import ProjectExistsError, ScaffoldError
from pycrator.log import ActionLog
from pycrator.scaffolder.builder import DirectoryBuilder

pytestmark = pytest.mark.unit


class TestDirectoryBuilder:
    @pytest.mark.asyncio
    async def test_src_layout(self, config, log: ActionLog, tmp_path: Path):
        tree = await DirectoryBuilder(log).create(config, tmp_path)

        root = tmp_path.resolve() / "foo_bar"
        assert tree.root == root
        assert tree.package_dir == root / "src" / "foo_bar"
        assert tree.package_init.read_text(encoding="utf-8") == ""
        assert (root / "tests" / "__init__.py").is_file()
        assert "unittest.TestCase" in tree.sample_test.read_text(encoding="utf-8")
        assert not (root / "src" / "__init__.py").exists()

    @pytest.mark.asyncio
    async def test_direct_layout(self, make_config, log: ActionLog, tmp_path: Path):
        config = make_config(layout="direct", test_framework="pytest")
        tree = await DirectoryBuilder(log).create(config, tmp_path)

        assert tree.package_dir == tree.root / "foo_bar"
        assert tree.package_init.is_file()
        assert not (tree.root / "src").exists()
        assert "def test_sample():" in tree.sample_test.read_text(encoding="utf-8")

    @pytest.mark.asyncio
    async def test_logs_actions(self, config, log: ActionLog, tmp_path: Path):
        await DirectoryBuilder(log).create(config, tmp_path)
        messages = [entry.split(" - ", 1)[1] for entry in log.entries]
        assert messages == [
            "Creating project directory: foo_bar",
            "Using 'src' layout.",
            "Creating tests directory.",
            "Setting up unittest sample test.",
        ]

    @pytest.mark.asyncio
    async def test_existing_directory_is_not_touched(
        self, config, log: ActionLog, tmp_path: Path
    ):
        existing = tmp_path / "foo_bar"
        existing.mkdir()
        (existing / "keep.txt").write_text("mine", encoding="utf-8")

        with pytest.raises(ProjectExistsError):
            await DirectoryBuilder(log).create(config, tmp_path)

        assert sorted(p.name for p in existing.iterdir()) == ["keep.txt"]

    @pytest.mark.asyncio
    async def test_parent_is_a_file(self, config, log: ActionLog, tmp_path: Path):
        parent = tmp_path / "not_a_dir"
        parent.write_text("", encoding="utf-8")

        with pytest.raises(ScaffoldError, match="Failed to create directory foo_bar"):
            await DirectoryBuilder(log).create(config, parent)

    @pytest.mark.asyncio
    async def test_missing_parent(self, config, log: ActionLog, tmp_path: Path):
        with pytest.raises(ScaffoldError):
            await DirectoryBuilder(log).create(config, tmp_path / "missing")
