"""Virtual environment capability.

``venv`` and ``virtualenv`` create a ``venv/`` directory inside the project;
poetry owns its environment, so its variant creates nothing and activates by
routing environment-scoped commands through ``poetry run``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from pycrator.config import EnvTool

from .base import CommandResult, ToolRunner

VENV_DIR = "venv"


class EnvironmentTool(ABC):
    """Creates and activates the project's isolated environment."""

    kind: EnvTool
    #: ``True`` when the tool manages its own environment location.
    owns_environment: bool = False

    def __init__(self, runner: ToolRunner) -> None:
        self.runner = runner

    @abstractmethod
    async def create(self, root: Path, python_version: str) -> CommandResult | None:
        """Create the environment; ``None`` when there is nothing to create."""

    def activate(self, root: Path) -> None:
        self.runner.activate(root / VENV_DIR)


class Venv(EnvironmentTool):
    kind = EnvTool.VENV

    async def create(self, root: Path, python_version: str) -> CommandResult:
        return await self.runner.run(f"python{python_version}", "-m", "venv", VENV_DIR, cwd=root)


class Virtualenv(EnvironmentTool):
    kind = EnvTool.VIRTUALENV

    async def create(self, root: Path, python_version: str) -> CommandResult:
        return await self.runner.run(
            "virtualenv", "-p", f"python{python_version}", VENV_DIR, cwd=root
        )


class PoetryEnvironment(EnvironmentTool):
    kind = EnvTool.POETRY
    owns_environment = True

    async def create(self, root: Path, python_version: str) -> None:
        return None

    def activate(self, root: Path) -> None:
        self.runner.activate_prefix("poetry", "run")


_ENVIRONMENT_TOOLS: dict[EnvTool, type[EnvironmentTool]] = {
    EnvTool.VENV: Venv,
    EnvTool.VIRTUALENV: Virtualenv,
    EnvTool.POETRY: PoetryEnvironment,
}


def environment_tool_for(kind: EnvTool, runner: ToolRunner) -> EnvironmentTool:
    return _ENVIRONMENT_TOOLS[kind](runner)
