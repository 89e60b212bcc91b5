"""Project directory skeleton.

Creates the project root, the package-code directory for the chosen layout and
the ``tests/`` package with one sample test. The root must not exist yet: an
existing directory is never merged into or overwritten.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path

from pycrator.config import Layout, ProjectConfig
from pycrator.errors import ProjectExistsError, ScaffoldError
from pycrator.log import ActionLog

from .artifacts import render_sample_test
from .templates import TemplateRenderer

INIT_FILE = "__init__.py"
SAMPLE_TEST_FILE = "test_sample.py"


@dataclass(frozen=True)
class ProjectTree:
    """Paths created for a new project."""

    root: Path
    package_dir: Path
    tests_dir: Path

    @property
    def package_init(self) -> Path:
        return self.package_dir / INIT_FILE

    @property
    def sample_test(self) -> Path:
        return self.tests_dir / SAMPLE_TEST_FILE


class DirectoryBuilder:
    """Creates the on-disk skeleton for a ``ProjectConfig``."""

    def __init__(self, log: ActionLog, renderer: TemplateRenderer | None = None) -> None:
        self.log = log
        self.renderer = renderer

    async def create(self, config: ProjectConfig, parent_dir: str | Path) -> ProjectTree:
        """Create ``<parent_dir>/<package_name>`` and its skeleton.

        Raises:
            ProjectExistsError: If the project directory already exists.
            ScaffoldError: If any part of the skeleton cannot be written.
        """
        root = Path(parent_dir).resolve() / config.package_name

        self.log.info(f"Creating project directory: {config.package_name}")
        try:
            await asyncio.to_thread(root.mkdir, parents=False, exist_ok=False)
        except FileExistsError:
            raise ProjectExistsError(
                f"Failed to create directory {config.package_name}: {root} already exists"
            ) from None
        except OSError as exc:
            raise ScaffoldError(
                f"Failed to create directory {config.package_name}: {exc}"
            ) from exc

        if config.layout is Layout.SRC:
            self.log.info("Using 'src' layout.")
        else:
            self.log.info("Using direct layout.")
        package_dir = root / config.package_path
        tests_dir = root / "tests"
        try:
            await asyncio.to_thread(_make_package, package_dir, "")

            self.log.info("Creating tests directory.")
            await asyncio.to_thread(_make_package, tests_dir, "")

            self.log.info(f"Setting up {config.test_framework.value} sample test.")
            sample = render_sample_test(config, self.renderer)
            await asyncio.to_thread((tests_dir / SAMPLE_TEST_FILE).write_text, sample, "utf-8")
        except OSError as exc:
            raise ScaffoldError(f"Failed to create project skeleton: {exc}") from exc

        return ProjectTree(root=root, package_dir=package_dir, tests_dir=tests_dir)


def _make_package(directory: Path, init_body: str) -> None:
    """Create *directory* (and parents) with an ``__init__.py``."""
    directory.mkdir(parents=True, exist_ok=True)
    (directory / INIT_FILE).write_text(init_body, encoding="utf-8")
