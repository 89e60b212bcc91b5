"""External tool capabilities used by the pipeline.

Each capability wraps one kind of external tool behind a small interface and
returns ``CommandResult`` objects. ``Toolchain`` bundles the concrete variants
selected by a ``ProjectConfig``; tests build a ``Toolchain`` around a fake
``ToolRunner`` executor.
"""

from __future__ import annotations

from dataclasses import dataclass

from pycrator.actions.base import CommandResult, ToolRunner
from pycrator.actions.dependencies import check_dependencies, required_tools
from pycrator.actions.devtools import DocsGenerator, PreCommit, Sphinx
from pycrator.actions.environment import EnvironmentTool, environment_tool_for
from pycrator.actions.hosting import GitHubCLI, RepositoryHost
from pycrator.actions.packaging import PackageManager, Pip, Poetry
from pycrator.actions.vcs import Git, VersionControl
from pycrator.config import BuildSystem, EnvTool, ProjectConfig


@dataclass
class Toolchain:
    """Concrete tools for one run."""

    runner: ToolRunner
    vcs: VersionControl
    environment: EnvironmentTool
    installer: PackageManager
    docs_installer: PackageManager
    poetry: Poetry
    precommit: PreCommit
    docs: DocsGenerator
    host: RepositoryHost

    @classmethod
    def for_config(cls, config: ProjectConfig, runner: ToolRunner | None = None) -> "Toolchain":
        """Select tool variants for *config*.

        Dependencies are installed with the environment tool's manager
        (poetry or pip); Sphinx follows the build system.
        """
        runner = runner or ToolRunner()
        poetry = Poetry(runner)
        pip = Pip(runner)
        return cls(
            runner=runner,
            vcs=Git(runner),
            environment=environment_tool_for(config.env_tool, runner),
            installer=poetry if config.env_tool is EnvTool.POETRY else pip,
            docs_installer=poetry if config.build_system is BuildSystem.POETRY else pip,
            poetry=poetry,
            precommit=PreCommit(runner),
            docs=Sphinx(runner),
            host=GitHubCLI(runner),
        )


__all__ = [
    "CommandResult",
    "DocsGenerator",
    "EnvironmentTool",
    "Git",
    "GitHubCLI",
    "PackageManager",
    "Pip",
    "Poetry",
    "PreCommit",
    "RepositoryHost",
    "Sphinx",
    "ToolRunner",
    "Toolchain",
    "VersionControl",
    "check_dependencies",
    "environment_tool_for",
    "required_tools",
]
