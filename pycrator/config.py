"""pycrator configuration.

A single, immutable ``ProjectConfig`` describes one invocation. It is built once
from the parsed command line (plus interactive prompts) and then passed to every
component; nothing reads ambient global state. Each option with a closed domain
is a ``str``-valued ``Enum`` so pydantic rejects anything outside it before the
filesystem is touched.
"""

from __future__ import annotations

import os
import re
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from pycrator.errors import OptionError

PACKAGE_NAME_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]+")
PYTHON_VERSION_PATTERN = re.compile(r"[0-9]+(\.[0-9]+)?")

DEFAULT_PROJECT_URL = "https://github.com/yourusername/{package_name}"

# CI matrices always carry these next to the configured version.
BASELINE_PYTHON_VERSIONS: tuple[str, ...] = ("3.8", "3.9", "3.10")

# Environment variables that pre-fill the interactive prompts.
PROMPT_ENV_VARS: dict[str, str] = {
    "author_name": "PYCRATOR_AUTHOR_NAME",
    "author_email": "PYCRATOR_AUTHOR_EMAIL",
    "description": "PYCRATOR_DESCRIPTION",
    "project_url": "PYCRATOR_PROJECT_URL",
}


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class BuildSystem(str, Enum):
    """Tool that owns packaging of the generated project."""

    SETUPTOOLS = "setuptools"
    POETRY = "poetry"


class Layout(str, Enum):
    """Where the package source lives relative to the project root."""

    SRC = "src"
    DIRECT = "direct"


class TestFramework(str, Enum):
    """Framework used by the generated sample test."""

    __test__ = False

    UNITTEST = "unittest"
    PYTEST = "pytest"


class CIService(str, Enum):
    """Hosted CI service to generate a pipeline definition for."""

    GITHUB = "github"
    TRAVIS = "travis"
    CIRCLECI = "circleci"
    NONE = "none"


class Formatter(str, Enum):
    BLACK = "black"
    AUTOPEP8 = "autopep8"
    NONE = "none"


class Linter(str, Enum):
    FLAKE8 = "flake8"
    PYLINT = "pylint"
    NONE = "none"


class EnvTool(str, Enum):
    """Mechanism used to create the project's isolated environment."""

    VENV = "venv"
    VIRTUALENV = "virtualenv"
    POETRY = "poetry"


class LicenseType(str, Enum):
    """License identifiers with a known upstream template."""

    MIT = "MIT"
    APACHE_2_0 = "Apache-2.0"
    GPL_3_0 = "GPL-3.0"
    BSD_3_CLAUSE = "BSD-3-Clause"

    @classmethod
    def lookup(cls, value: str) -> "LicenseType | None":
        """Return the member for *value*, or ``None`` when unsupported."""
        try:
            return cls(value)
        except ValueError:
            return None


def choices(enum_cls: type[Enum]) -> list[str]:
    """Return the string values of *enum_cls* in declaration order."""
    return [member.value for member in enum_cls]


# ---------------------------------------------------------------------------
# Configuration model
# ---------------------------------------------------------------------------


class ProjectConfig(BaseModel):
    """Resolved choices for one scaffolding run.

    Instances are frozen: once validated, the package name and every option
    stay fixed for the rest of the run.
    """

    model_config = ConfigDict(frozen=True)

    package_name: str = Field(..., description="Importable package name")
    build_system: BuildSystem = Field(default=BuildSystem.SETUPTOOLS)
    layout: Layout = Field(default=Layout.SRC)
    test_framework: TestFramework = Field(default=TestFramework.UNITTEST)
    ci_service: CIService = Field(default=CIService.GITHUB)
    formatter: Formatter = Field(default=Formatter.NONE)
    linter: Linter = Field(default=Linter.NONE)
    env_tool: EnvTool = Field(default=EnvTool.VENV)
    python_version: str = Field(default="3")
    license_type: str = Field(default=LicenseType.MIT.value)

    init_git: bool = Field(default=False)
    create_repo: bool = Field(default=False)
    setup_docs: bool = Field(default=False)
    remote_url: str | None = Field(default=None)

    author_name: str = Field(default="")
    author_email: str = Field(default="")
    description: str = Field(default="")
    project_url: str = Field(default="")

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @field_validator("package_name")
    @classmethod
    def _check_package_name(cls, value: str) -> str:
        if not PACKAGE_NAME_PATTERN.fullmatch(value):
            raise ValueError(
                f"Invalid package name: {value!r}. Package name must start with a "
                "letter or underscore and contain only letters, numbers, and "
                "underscores (at least two characters)."
            )
        return value

    @field_validator("python_version")
    @classmethod
    def _check_python_version(cls, value: str) -> str:
        if not PYTHON_VERSION_PATTERN.fullmatch(value):
            raise ValueError(f"Invalid Python version: {value!r}.")
        return value

    # ------------------------------------------------------------------
    # Derived values (read-only properties)
    # ------------------------------------------------------------------

    @property
    def packages_dir(self) -> str:
        """Directory that package discovery is rooted at."""
        return "src" if self.layout is Layout.SRC else "."

    @property
    def package_path(self) -> str:
        """Package-code directory relative to the project root."""
        if self.layout is Layout.SRC:
            return f"src/{self.package_name}"
        return self.package_name

    @property
    def install_command(self) -> str:
        if self.build_system is BuildSystem.POETRY:
            return "poetry install"
        return "pip install -e ."

    @property
    def test_command(self) -> str:
        if self.build_system is BuildSystem.POETRY:
            return "poetry run pytest"
        if self.test_framework is TestFramework.PYTEST:
            return "pytest"
        return "python -m unittest discover"

    @property
    def uses_precommit(self) -> bool:
        """Whether a formatter or linter was selected."""
        return self.formatter is not Formatter.NONE or self.linter is not Linter.NONE

    @property
    def uses_poetry(self) -> bool:
        return self.build_system is BuildSystem.POETRY or self.env_tool is EnvTool.POETRY

    @property
    def ci_versions(self) -> list[str]:
        """Python versions for CI matrices.

        The configured version comes first; the baseline versions are always
        appended, even when one of them repeats the configured version.
        """
        return [self.python_version, *BASELINE_PYTHON_VERSIONS]

    @property
    def dev_tools(self) -> list[str]:
        """Pip requirement names for the selected formatter, linter and pytest."""
        tools: list[str] = []
        if self.formatter is not Formatter.NONE:
            tools.append(self.formatter.value)
        if self.linter is not Linter.NONE:
            tools.append(self.linter.value)
        if self.test_framework is TestFramework.PYTEST:
            tools.append("pytest")
        return tools

    @property
    def license(self) -> LicenseType | None:
        """The supported license for ``license_type``, if any."""
        return LicenseType.lookup(self.license_type)

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def build(cls, **values: Any) -> "ProjectConfig":
        """Validate *values* and return a config, raising ``OptionError``.

        The first pydantic error is reported with the offending field and
        value so the CLI can print a single actionable line.
        """
        try:
            return cls(**values)
        except ValidationError as exc:
            raise OptionError(_describe_validation_error(exc)) from exc


def default_project_url(package_name: str) -> str:
    """Project URL used when the user leaves the prompt blank."""
    return DEFAULT_PROJECT_URL.format(package_name=package_name)


def prompt_defaults_from_env(environ: dict[str, str] | None = None) -> dict[str, str]:
    """Return prompt fields pre-filled from ``PYCRATOR_*`` environment variables.

    Only non-empty variables are returned; the caller prompts for the rest.
    """
    source = os.environ if environ is None else environ
    values: dict[str, str] = {}
    for field_name, variable in PROMPT_ENV_VARS.items():
        value = source.get(variable, "").strip()
        if value:
            values[field_name] = value
    return values


def _describe_validation_error(exc: ValidationError) -> str:
    error = exc.errors()[0]
    field = ".".join(str(part) for part in error.get("loc", ())) or "config"
    value = error.get("input")
    message = error.get("msg", "invalid value")
    if error.get("type") == "value_error":
        message = message.removeprefix("Value error, ")
        return message
    return f"Invalid value for {field}: {value!r} ({message})"
