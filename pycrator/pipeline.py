"""pycrator pipeline orchestrator.

Runs the scaffolding steps in a fixed order:

 1. PREFLIGHT   -- mandatory tools are installed (nothing written yet).
 2. SCAFFOLD    -- directory tree, manifest, README, .gitignore, LICENSE.
 3. GIT         -- ``git init``, stage everything, initial commit.
 4. REMOTE      -- register the ``origin`` remote.
 5. ENVIRONMENT -- create the virtual environment.
 6. ACTIVATE    -- use that environment for every later command.
 7. INSTALL     -- install the project and the selected dev tools.
 8. PRE-COMMIT  -- install pre-commit, write its config and lint configs.
 9. DOCS        -- Sphinx quickstart in ``docs/``.
10. CI          -- CI definition for the selected service.
11. REPOSITORY  -- create and push a GitHub repository.

Steps are independent toggles of the configuration; a step that does not apply
is recorded as skipped. The first failing external command stops the run with
a ``StepError``; nothing that was already created is rolled back.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Callable

from rich.panel import Panel

from pycrator.actions import CommandResult, Toolchain, check_dependencies
from pycrator.config import (
    BuildSystem,
    CIService,
    EnvTool,
    Formatter,
    Linter,
    ProjectConfig,
    TestFramework,
)
from pycrator.errors import PycratorError, StepError
from pycrator.log import ActionLog
from pycrator.scaffolder import ProjectGenerator, ProjectTree
from pycrator.utils import command_exists, format_duration, print_summary_table

_CI_LABELS: dict[CIService, str] = {
    CIService.GITHUB: "GitHub Actions",
    CIService.TRAVIS: "Travis CI",
    CIService.CIRCLECI: "CircleCI",
}


class StepStatus(str, Enum):
    DONE = "done"
    SKIPPED = "skipped"
    FAILED = "failed"


class Pipeline:
    """Scaffolds one project and runs its external setup steps.

    Attributes:
        config: Resolved project configuration.
        log: Action log shared by the run.
        tools: External tool capabilities.
        generator: Writes the generated files.
        state: Accumulates the status of every step and the project root.
    """

    _STEPS: tuple[tuple[str, str], ...] = (
        ("preflight", "step_preflight"),
        ("scaffold", "step_scaffold"),
        ("git", "step_git"),
        ("remote", "step_remote"),
        ("environment", "step_environment"),
        ("activate", "step_activate"),
        ("install", "step_install"),
        ("pre-commit", "step_precommit"),
        ("docs", "step_docs"),
        ("ci", "step_ci"),
        ("repository", "step_repository"),
    )

    def __init__(
        self,
        config: ProjectConfig,
        log: ActionLog,
        tools: Toolchain | None = None,
        generator: ProjectGenerator | None = None,
        exists: Callable[[str], bool] = command_exists,
    ) -> None:
        self.config = config
        self.log = log
        self.tools = tools or Toolchain.for_config(config)
        self.generator = generator or ProjectGenerator(config, log)
        self._exists = exists
        self.tree: ProjectTree | None = None
        self.state: dict[str, Any] = {
            "package_name": config.package_name,
            "started_at": datetime.now(timezone.utc).isoformat(),
            "steps": {},
            "success": False,
        }

    @property
    def root(self) -> Path:
        if self.tree is None:
            raise RuntimeError("project root is not created yet")
        return self.tree.root

    # ------------------------------------------------------------------
    # Driver
    # ------------------------------------------------------------------

    async def run(self, parent_dir: str | Path | None = None) -> dict[str, Any]:
        """Execute every step in order.

        Args:
            parent_dir: Directory in which the project directory is created.
                Defaults to the current working directory.

        Returns:
            The final state dictionary with a ``success`` flag.

        Raises:
            PycratorError: The first fatal error. Its step is recorded as
                failed in ``state`` before the error propagates.
        """
        start = time.monotonic()
        parent = Path(parent_dir) if parent_dir is not None else Path.cwd()

        for step_name, method_name in self._STEPS:
            method = getattr(self, method_name)
            try:
                if step_name == "scaffold":
                    status = await method(parent)
                else:
                    status = await method()
            except PycratorError:
                self.state["steps"][step_name] = StepStatus.FAILED.value
                self.state["duration"] = format_duration(time.monotonic() - start)
                raise
            self.state["steps"][step_name] = status.value

        self.state["success"] = True
        self.state["duration"] = format_duration(time.monotonic() - start)
        self.state["finished_at"] = datetime.now(timezone.utc).isoformat()
        self._print_final_summary()
        return self.state

    def _check(self, step: str, result: CommandResult | None) -> None:
        if result is not None and not result.success:
            raise StepError(step, result.describe(), result)

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    async def step_preflight(self) -> StepStatus:
        """Abort before any side effect when a mandatory tool is missing."""
        checked = check_dependencies(self.config, self._exists)
        self.log.info(f"All required tools found: {', '.join(checked)}.")
        return StepStatus.DONE

    async def step_scaffold(self, parent: Path) -> StepStatus:
        self.tree = await self.generator.scaffold(parent)
        if self.config.build_system is BuildSystem.POETRY:
            self.log.info("Initializing Poetry project.")
            result = await self.tools.poetry.init_project(self.root, self.config)
            self._check("scaffold", result)
        return StepStatus.DONE

    async def step_git(self) -> StepStatus:
        if not (self.config.init_git or self.config.create_repo):
            return StepStatus.SKIPPED
        self.log.info("Initializing Git repository.")
        vcs = self.tools.vcs
        self._check("git", await vcs.init(self.root))
        self._check("git", await vcs.add_all(self.root))
        self._check("git", await vcs.commit(self.root))
        self.log.info("Git repository initialized.")
        return StepStatus.DONE

    async def step_remote(self) -> StepStatus:
        if not self.config.remote_url:
            return StepStatus.SKIPPED
        self.log.info(f"Setting Git remote to {self.config.remote_url}")
        self._check("remote", await self.tools.vcs.add_remote(self.root, self.config.remote_url))
        return StepStatus.DONE

    async def step_environment(self) -> StepStatus:
        environment = self.tools.environment
        if environment.owns_environment:
            self.log.info("Poetry handles the virtual environment.")
            return StepStatus.SKIPPED
        self.log.info(
            f"Creating virtual environment using {self.config.env_tool.value} "
            f"with Python {self.config.python_version}."
        )
        result = await environment.create(self.root, self.config.python_version)
        self._check("environment", result)
        self.log.info("Virtual environment created.")
        return StepStatus.DONE

    async def step_activate(self) -> StepStatus:
        environment = self.tools.environment
        environment.activate(self.root)
        if environment.owns_environment:
            self.log.info("Poetry manages the virtual environment.")
            return StepStatus.SKIPPED
        self.log.info("Activating virtual environment.")
        return StepStatus.DONE

    async def step_install(self) -> StepStatus:
        installer = self.tools.installer
        if self.config.env_tool is EnvTool.POETRY:
            self.log.info("Installing dependencies with Poetry.")
            self._check("install", await installer.install_project(self.root))
        else:
            self.log.info("Installing dependencies with pip.")
            self._check("install", await installer.upgrade_installer(self.root))
            if self.config.build_system is BuildSystem.SETUPTOOLS:
                self._check("install", await installer.install_project(self.root))

        if self.config.formatter is not Formatter.NONE:
            self.log.info(f"Installing formatter: {self.config.formatter.value}.")
            self._check("install", await installer.install(self.root, [self.config.formatter.value]))
        if self.config.linter is not Linter.NONE:
            self.log.info(f"Installing linter: {self.config.linter.value}.")
            self._check("install", await installer.install(self.root, [self.config.linter.value]))
        if "pytest" in self.config.dev_tools:
            self.log.info("Installing pytest.")
            self._check("install", await installer.install(self.root, ["pytest"]))

        self.log.info("Dependencies installed.")
        return StepStatus.DONE

    async def step_precommit(self) -> StepStatus:
        if not self.config.uses_precommit:
            return StepStatus.SKIPPED
        self.log.info("Setting up pre-commit hooks.")
        precommit = self.tools.precommit
        self._check("pre-commit", await self.tools.installer.install(self.root, [precommit.package]))
        self._check("pre-commit", await precommit.install_hooks(self.root))
        await self.generator.write_precommit(self.root)
        # Hooks are registered again so they run against the final config.
        self._check("pre-commit", await precommit.install_hooks(self.root))
        self.log.info("Pre-commit hooks configured.")
        await self.generator.write_lint_configs(self.root)
        return StepStatus.DONE

    async def step_docs(self) -> StepStatus:
        if not self.config.setup_docs:
            return StepStatus.SKIPPED
        self.log.info("Setting up Sphinx documentation.")
        docs = self.tools.docs
        self._check("docs", await self.tools.docs_installer.install(self.root, [docs.package]))
        self._check(
            "docs",
            await docs.quickstart(self.root, self.config.package_name, self.config.author_name),
        )
        self.log.info("Sphinx documentation initialized.")
        return StepStatus.DONE

    async def step_ci(self) -> StepStatus:
        service = self.config.ci_service
        if service is CIService.NONE:
            self.log.info("No CI service selected. Skipping CI setup.")
            return StepStatus.SKIPPED
        self.log.info(f"Setting up {_CI_LABELS[service]} for CI.")
        path = await self.generator.write_ci(self.root)
        self.log.info(f"{service.value} CI setup completed ({path.relative_to(self.root)}).")
        return StepStatus.DONE

    async def step_repository(self) -> StepStatus:
        if not self.config.create_repo:
            return StepStatus.SKIPPED
        host = self.tools.host
        if not host.available():
            self.log.warning(
                f"GitHub CLI '{host.binary}' not found. Skipping repository creation."
            )
            return StepStatus.SKIPPED
        name = self.config.package_name
        self.log.info(f"Creating GitHub repository: {name}")
        self._check("repository", await host.create_repository(self.root, name))
        self.log.info(f"GitHub repository '{name}' created and remote set.")
        return StepStatus.DONE

    # ------------------------------------------------------------------
    # Summary
    # ------------------------------------------------------------------

    def next_steps(self) -> list[str]:
        """Instructions printed at the end of a successful run."""
        steps: list[tuple[str, str | None]] = [
            ("Navigate to the project directory:", f"cd {self.config.package_name}"),
        ]
        if self.config.init_git or self.config.create_repo:
            steps.append(
                (
                    "Set up the remote repository (if not already set):",
                    "git remote add origin <your-repo-url>",
                )
            )
        if self.config.env_tool is EnvTool.POETRY:
            steps.append(("Activate the virtual environment:", "poetry shell"))
        else:
            steps.append(("Activate the virtual environment:", "source venv/bin/activate"))
        if self.config.test_framework is TestFramework.PYTEST:
            steps.append(("Install pytest for testing:", "pip install pytest"))
        steps.append(("Start coding!", None))

        # Numbered consecutively whichever optional steps apply.
        lines: list[str] = []
        for number, (title, command) in enumerate(steps, start=1):
            lines.append(f"{number}. {title}")
            if command is not None:
                lines.append(f"   {command}")
        return lines

    def _print_final_summary(self) -> None:
        name = self.config.package_name
        self.log.info("======================================")
        self.log.success(f"Python package '{name}' has been created successfully!")
        self.log.info("To get started:")
        for line in self.next_steps():
            self.log.info(line)
        self.log.info("Happy coding!")
        self.log.info("======================================")

        console = self.log.console
        print_summary_table(
            {step: status for step, status in self.state["steps"].items()},
            title="Steps",
            target=console,
        )
        console.print(
            Panel(
                f"[bold green]PROJECT CREATED[/bold green]\n\n"
                f"Package  : {name}\n"
                f"Location : {self.root}\n"
                f"Duration : {self.state['duration']}\n"
                f"Log      : {self.log.path}",
                title="[bold]pycrator[/bold]",
                border_style="bold green",
            )
        )
