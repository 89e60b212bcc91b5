"""Mandatory tool presence check.

Runs before anything is written: a missing mandatory tool aborts the run while
the filesystem is still untouched.
"""

from __future__ import annotations

from typing import Callable

from pycrator.config import ProjectConfig
from pycrator.errors import DependencyError

BASE_TOOLS: tuple[str, ...] = ("python3", "curl", "git")


def required_tools(config: ProjectConfig) -> list[tuple[str, str]]:
    """Return ``(tool, error message)`` pairs that *config* cannot run without."""
    required = [
        (tool, f"Error: '{tool}' is not installed. Please install it and retry.")
        for tool in BASE_TOOLS
    ]
    if config.uses_poetry:
        required.append(
            (
                "poetry",
                "Error: 'poetry' is not installed. Please install it or choose a "
                "different build system.",
            )
        )
    if config.create_repo:
        required.append(
            (
                "gh",
                "Error: GitHub CLI 'gh' is not installed. Please install it or skip "
                "--create-repo.",
            )
        )
    return required


def check_dependencies(config: ProjectConfig, exists: Callable[[str], bool]) -> list[str]:
    """Verify every required tool is installed.

    Returns:
        The names of the tools that were checked.

    Raises:
        DependencyError: For the first missing tool.
    """
    checked: list[str] = []
    for tool, message in required_tools(config):
        if not exists(tool):
            raise DependencyError(tool, message)
        checked.append(tool)
    return checked
