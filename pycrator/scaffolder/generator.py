"""Main scaffolding writer.

Takes a ``ProjectConfig`` and writes the generated project files: the skeleton
from ``DirectoryBuilder`` first, then the build manifest, README, ignore-file,
requirements and LICENSE. The lint, pre-commit and CI files are written later
by the pipeline through the ``write_*`` methods, at the step that needs them.
"""

from __future__ import annotations

import asyncio
from datetime import date
from pathlib import Path
from typing import Callable

from pycrator.config import BuildSystem, Formatter, ProjectConfig
from pycrator.errors import ScaffoldError
from pycrator.log import ActionLog
from pycrator.utils import write_text

from .artifacts import (
    render_ci,
    render_gitignore,
    render_lint_config,
    render_license,
    render_precommit,
    render_readme,
    render_requirements,
    render_setup_py,
)
from .builder import DirectoryBuilder, ProjectTree
from .license import LicenseFetcher
from .templates import TemplateRenderer

_FORMATTER_LABELS: dict[Formatter, str] = {
    Formatter.BLACK: "Black",
    Formatter.AUTOPEP8: "AutoPEP8",
}


class ProjectGenerator:
    """Writes every generated file of a project.

    Args:
        config: Resolved project configuration.
        log: Action log shared by the run.
        renderer: Template renderer; a default one is created when omitted.
        license_fetcher: Source of license templates.
        today: Returns the current date; the LICENSE year comes from it.
    """

    def __init__(
        self,
        config: ProjectConfig,
        log: ActionLog,
        renderer: TemplateRenderer | None = None,
        license_fetcher: LicenseFetcher | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.config = config
        self.log = log
        self.renderer = renderer or TemplateRenderer()
        self.license_fetcher = license_fetcher or LicenseFetcher()
        self.builder = DirectoryBuilder(log, self.renderer)
        self._today = today

    # -- Public API --------------------------------------------------------

    async def scaffold(self, parent_dir: str | Path) -> ProjectTree:
        """Create the project skeleton and its static files under *parent_dir*.

        Returns:
            The created ``ProjectTree``.

        Raises:
            ProjectExistsError: If the project directory already exists.
        """
        tree = await self.builder.create(self.config, parent_dir)
        root = tree.root

        if self.config.build_system is BuildSystem.SETUPTOOLS:
            await self.write_manifest(root)
        await self.write_readme(root)
        await self.write_gitignore(root)
        if self.config.build_system is BuildSystem.SETUPTOOLS:
            await self.write_requirements(root)
        else:
            self.log.info("Using Poetry for dependency management.")
        await self.write_license(root)
        return tree

    async def write_manifest(self, root: Path) -> Path:
        self.log.info("Creating setup.py using setuptools.")
        return await self._write(root, "setup.py", render_setup_py(self.config, self.renderer))

    async def write_readme(self, root: Path) -> Path:
        self.log.info("Creating README.md.")
        return await self._write(root, "README.md", render_readme(self.config, self.renderer))

    async def write_gitignore(self, root: Path) -> Path:
        self.log.info("Creating .gitignore.")
        return await self._write(root, ".gitignore", render_gitignore(self.renderer))

    async def write_requirements(self, root: Path) -> Path:
        self.log.info("Creating requirements.txt.")
        return await self._write(root, "requirements.txt", render_requirements())

    async def write_license(self, root: Path) -> Path | None:
        """Fetch and write the LICENSE file.

        Unsupported license types and download failures are logged as
        warnings and leave the project without a LICENSE file.
        """
        license_type = self.config.license
        if license_type is None:
            self.log.warning(
                f"Unsupported license type: {self.config.license_type}. "
                "Skipping LICENSE file."
            )
            return None

        self.log.info(f"Fetching license: {license_type.value}")
        fetched = await self.license_fetcher.fetch(license_type)
        if not fetched.success:
            self.log.warning(f"{fetched.error}. Skipping LICENSE file.")
            return None

        content = render_license(self.config, fetched.text, self._today().year)
        path = await self._write(root, "LICENSE", content)
        self.log.info("LICENSE file created.")
        return path

    async def write_lint_configs(self, root: Path) -> list[Path]:
        """Write the selected linter's config; formatters need no file."""
        written: list[Path] = []
        label = _FORMATTER_LABELS.get(self.config.formatter)
        if label is not None:
            self.log.info(f"Configuring {label} formatter.")

        rendered = render_lint_config(self.config, self.renderer)
        if rendered is not None:
            relative_path, content = rendered
            self.log.info(f"Configuring {self.config.linter.value} linter ({relative_path}).")
            written.append(await self._write(root, relative_path, content))
        return written

    async def write_precommit(self, root: Path) -> Path:
        return await self._write(
            root, ".pre-commit-config.yaml", render_precommit(self.config, self.renderer)
        )

    async def write_ci(self, root: Path) -> Path:
        """Write the CI definition for the configured service.

        Raises:
            ValueError: If the CI service is ``none``.
        """
        relative_path, content = render_ci(self.config, self.renderer)
        return await self._write(root, relative_path, content)

    # -- Internal helpers --------------------------------------------------

    @staticmethod
    async def _write(root: Path, relative_path: str, content: str) -> Path:
        try:
            return await asyncio.to_thread(write_text, root / relative_path, content)
        except OSError as exc:
            raise ScaffoldError(f"Failed to write {relative_path}: {exc}") from exc
