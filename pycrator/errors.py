"""Exception hierarchy for pycrator.

Every fatal condition is raised as a ``PycratorError`` subclass and turned into
a logged message plus exit status 1 by ``pycrator.cli.main``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pycrator.actions.base import CommandResult


class PycratorError(Exception):
    """Base class for every error that aborts a run."""


class OptionError(PycratorError):
    """Raised when command-line options fail validation."""


class DependencyError(PycratorError):
    """Raised when a mandatory external tool is not installed."""

    def __init__(self, tool: str, message: str) -> None:
        self.tool = tool
        super().__init__(message)


class ProjectExistsError(PycratorError):
    """Raised when the target project directory already exists."""


class StepError(PycratorError):
    """Raised when an orchestrated external step fails."""

    def __init__(
        self,
        step: str,
        message: str,
        result: CommandResult | None = None,
    ) -> None:
        self.step = step
        self.result = result
        super().__init__(f"Step '{step}': {message}")


class ScaffoldError(PycratorError):
    """Raised when a project file or directory cannot be written."""
