"""Development tool capabilities: pre-commit hooks and Sphinx documentation.

Both tools are installed into the project environment during the run, so they
are invoked through ``ToolRunner.run_in_env``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from .base import CommandResult, ToolRunner

DOCS_DIR = "docs"
INITIAL_RELEASE = "0.1.0"


class PreCommit:
    package = "pre-commit"

    def __init__(self, runner: ToolRunner) -> None:
        self.runner = runner

    async def install_hooks(self, root: Path) -> CommandResult:
        """Register the git hook for the project."""
        return await self.runner.run_in_env("pre-commit", "install", cwd=root)


class DocsGenerator(ABC):
    """Creates a documentation skeleton."""

    package: str

    def __init__(self, runner: ToolRunner) -> None:
        self.runner = runner

    @abstractmethod
    async def quickstart(
        self, root: Path, project: str, author: str, release: str = INITIAL_RELEASE
    ) -> CommandResult: ...


class Sphinx(DocsGenerator):
    package = "sphinx"

    async def quickstart(
        self, root: Path, project: str, author: str, release: str = INITIAL_RELEASE
    ) -> CommandResult:
        return await self.runner.run_in_env(
            "sphinx-quickstart",
            DOCS_DIR,
            "--quiet",
            f"--project={project}",
            f"--author={author}",
            f"--release={release}",
            cwd=root,
        )
