"""Version control capability."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from .base import CommandResult, ToolRunner

INITIAL_COMMIT_MESSAGE = "Initial commit"


class VersionControl(ABC):
    """Repository operations needed to put a fresh project under version control."""

    binary: str

    def __init__(self, runner: ToolRunner) -> None:
        self.runner = runner

    @abstractmethod
    async def init(self, root: Path) -> CommandResult: ...

    @abstractmethod
    async def add_all(self, root: Path) -> CommandResult: ...

    @abstractmethod
    async def commit(self, root: Path, message: str = INITIAL_COMMIT_MESSAGE) -> CommandResult: ...

    @abstractmethod
    async def add_remote(self, root: Path, url: str, name: str = "origin") -> CommandResult: ...


class Git(VersionControl):
    binary = "git"

    async def init(self, root: Path) -> CommandResult:
        return await self.runner.run(self.binary, "init", cwd=root)

    async def add_all(self, root: Path) -> CommandResult:
        return await self.runner.run(self.binary, "add", ".", cwd=root)

    async def commit(self, root: Path, message: str = INITIAL_COMMIT_MESSAGE) -> CommandResult:
        return await self.runner.run(self.binary, "commit", "-m", message, cwd=root)

    async def add_remote(self, root: Path, url: str, name: str = "origin") -> CommandResult:
        return await self.runner.run(self.binary, "remote", "add", name, url, cwd=root)
