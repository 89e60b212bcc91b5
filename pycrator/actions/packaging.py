"""Package manager capability.

``Pip`` installs into whatever environment the runner has activated;
``Poetry`` records development tools in the project's ``pyproject.toml`` and
also creates that manifest for poetry-built projects.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Sequence

from pycrator.config import ProjectConfig

from .base import CommandResult, ToolRunner


class PackageManager(ABC):
    """Installs the project and its development tools."""

    name: str

    def __init__(self, runner: ToolRunner) -> None:
        self.runner = runner

    @abstractmethod
    async def upgrade_installer(self, root: Path) -> CommandResult | None:
        """Upgrade the installer itself; ``None`` when not applicable."""

    @abstractmethod
    async def install_project(self, root: Path) -> CommandResult: ...

    @abstractmethod
    async def install(self, root: Path, packages: Sequence[str]) -> CommandResult: ...


class Pip(PackageManager):
    name = "pip"

    async def upgrade_installer(self, root: Path) -> CommandResult:
        return await self.runner.run_in_env("pip", "install", "--upgrade", "pip", cwd=root)

    async def install_project(self, root: Path) -> CommandResult:
        """Install the project in editable mode."""
        return await self.runner.run_in_env("pip", "install", "-e", ".", cwd=root)

    async def install(self, root: Path, packages: Sequence[str]) -> CommandResult:
        return await self.runner.run_in_env("pip", "install", *packages, cwd=root)


class Poetry(PackageManager):
    name = "poetry"

    async def upgrade_installer(self, root: Path) -> None:
        return None

    async def install_project(self, root: Path) -> CommandResult:
        return await self.runner.run("poetry", "install", cwd=root)

    async def install(self, root: Path, packages: Sequence[str]) -> CommandResult:
        """Add *packages* to the ``dev`` dependency group."""
        return await self.runner.run("poetry", "add", "--group", "dev", *packages, cwd=root)

    async def init_project(self, root: Path, config: ProjectConfig) -> CommandResult:
        """Create ``pyproject.toml`` non-interactively from *config*."""
        return await self.runner.run(
            "poetry",
            "init",
            "--name",
            config.package_name,
            "--author",
            f"{config.author_name} <{config.author_email}>",
            "--description",
            config.description,
            "--python",
            f"^{config.python_version}",
            "--no-interaction",
            cwd=root,
        )
