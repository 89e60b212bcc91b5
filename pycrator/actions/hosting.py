"""Repository hosting capability."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from .base import CommandResult, ToolRunner


class RepositoryHost(ABC):
    """Creates a hosted repository from a local project and pushes it."""

    binary: str

    def __init__(self, runner: ToolRunner) -> None:
        self.runner = runner

    def available(self) -> bool:
        return self.runner.exists(self.binary)

    @abstractmethod
    async def create_repository(self, root: Path, name: str) -> CommandResult: ...


class GitHubCLI(RepositoryHost):
    binary = "gh"

    async def create_repository(self, root: Path, name: str) -> CommandResult:
        """Create a public GitHub repository from *root* and push to it."""
        return await self.runner.run(
            self.binary, "repo", "create", name, "--public", "--source=.", "--push", cwd=root
        )
