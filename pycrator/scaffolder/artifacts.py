"""Pure renderers for every generated artifact.

Each ``render_*`` function takes the project configuration and returns the
complete body of one file. None of them touch the filesystem or the network,
and none depend on an earlier call, so every artifact can be produced and
checked on its own.

Enum-keyed choices (sample test, CI service, linter config, pre-commit hooks)
are resolved through the lookup tables below, one table per choice.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from pycrator.config import (
    CIService,
    Formatter,
    Linter,
    ProjectConfig,
    TestFramework,
)

from .templates import TemplateRenderer

LICENSE_YEAR_TOKEN = "[year]"
LICENSE_NAME_TOKEN = "[fullname]"

MATRIX_PYTHON_VERSION = "${{ matrix.python-version }}"

_SAMPLE_TEST_TEMPLATES: dict[TestFramework, str] = {
    TestFramework.PYTEST: "tests/test_sample_pytest.py.j2",
    TestFramework.UNITTEST: "tests/test_sample_unittest.py.j2",
}

# CI service -> (template, output path relative to the project root)
_CI_TEMPLATES: dict[CIService, tuple[str, str]] = {
    CIService.GITHUB: ("ci/github.yml.j2", ".github/workflows/python-package.yml"),
    CIService.TRAVIS: ("ci/travis.yml.j2", ".travis.yml"),
    CIService.CIRCLECI: ("ci/circleci.yml.j2", ".circleci/config.yml"),
}

# Linter -> (template, output path relative to the project root)
_LINT_CONFIGS: dict[Linter, tuple[str, str]] = {
    Linter.FLAKE8: ("lint/flake8.j2", ".flake8"),
    Linter.PYLINT: ("lint/pylintrc.j2", ".pylintrc"),
}

_FORMATTER_HOOKS: dict[Formatter, dict[str, Any]] = {
    Formatter.BLACK: {
        "repo": "https://github.com/psf/black",
        "rev": "23.3.0",
        "id": "black",
    },
    Formatter.AUTOPEP8: {
        "repo": "https://github.com/hhatto/autopep8",
        "rev": "v2.0.2",
        "id": "autopep8",
    },
}

_LINTER_HOOKS: dict[Linter, dict[str, Any]] = {
    Linter.FLAKE8: {
        "repo": "https://github.com/pycqa/flake8",
        "rev": "6.0.0",
        "id": "flake8",
    },
    Linter.PYLINT: {
        "repo": "https://github.com/pylint-dev/pylint",
        "rev": "v2.17.4",
        "id": "pylint",
    },
}


@lru_cache(maxsize=1)
def default_renderer() -> TemplateRenderer:
    """Return the renderer shared by calls that do not pass their own."""
    return TemplateRenderer()


def _renderer(renderer: TemplateRenderer | None) -> TemplateRenderer:
    return renderer if renderer is not None else default_renderer()


# ---------------------------------------------------------------------------
# Context building
# ---------------------------------------------------------------------------


def build_context(config: ProjectConfig) -> dict[str, Any]:
    """Build the Jinja2 template context from the project config."""
    return {
        "package_name": config.package_name,
        "packages_dir": config.packages_dir,
        "package_path": config.package_path,
        "author_name": config.author_name,
        "author_email": config.author_email,
        "description": config.description,
        "project_url": config.project_url,
        "license_type": config.license_type,
        "python_version": config.python_version,
        "build_system": config.build_system.value,
        "test_framework": config.test_framework.value,
        "formatter": config.formatter.value,
        "linter": config.linter.value,
        "install_command": config.install_command,
        "test_command": config.test_command,
        "ci_versions": config.ci_versions,
        "dev_tools": config.dev_tools,
        "matrix_python_version": MATRIX_PYTHON_VERSION,
    }


# ---------------------------------------------------------------------------
# Artifact renderers
# ---------------------------------------------------------------------------


def render_setup_py(
    config: ProjectConfig, renderer: TemplateRenderer | None = None
) -> str:
    """Render the setuptools ``setup.py`` manifest."""
    return _renderer(renderer).render("setup.py.j2", build_context(config))


def render_readme(
    config: ProjectConfig, renderer: TemplateRenderer | None = None
) -> str:
    return _renderer(renderer).render("README.md.j2", build_context(config))


def render_gitignore(renderer: TemplateRenderer | None = None) -> str:
    """Render the fixed ``.gitignore`` deny-list."""
    return _renderer(renderer).render("gitignore.j2", {})


def render_requirements() -> str:
    return ""


def render_sample_test(
    config: ProjectConfig, renderer: TemplateRenderer | None = None
) -> str:
    """Render ``tests/test_sample.py`` for the configured test framework."""
    template = _SAMPLE_TEST_TEMPLATES[config.test_framework]
    return _renderer(renderer).render(template, build_context(config))


def render_license(config: ProjectConfig, template_text: str, year: int) -> str:
    """Fill the ``[year]`` and ``[fullname]`` tokens of an upstream license."""
    return template_text.replace(LICENSE_YEAR_TOKEN, str(year)).replace(
        LICENSE_NAME_TOKEN, config.author_name
    )


def ci_output_path(service: CIService) -> str:
    """Return the CI definition path for *service*, relative to the project root.

    Raises:
        ValueError: If *service* is ``CIService.NONE``.
    """
    try:
        return _CI_TEMPLATES[service][1]
    except KeyError:
        raise ValueError(f"No CI definition for service {service.value!r}") from None


def render_ci(
    config: ProjectConfig, renderer: TemplateRenderer | None = None
) -> tuple[str, str]:
    """Render the CI definition for ``config.ci_service``.

    Returns:
        ``(relative_path, content)`` for the selected service.

    Raises:
        ValueError: If the CI service is ``none``.
    """
    relative_path = ci_output_path(config.ci_service)
    template = _CI_TEMPLATES[config.ci_service][0]
    return relative_path, _renderer(renderer).render(template, build_context(config))


def render_lint_config(
    config: ProjectConfig, renderer: TemplateRenderer | None = None
) -> tuple[str, str] | None:
    """Render the linter's config file, or ``None`` when no linter is selected."""
    entry = _LINT_CONFIGS.get(config.linter)
    if entry is None:
        return None
    template, relative_path = entry
    return relative_path, _renderer(renderer).render(template, {})


def render_flake8(renderer: TemplateRenderer | None = None) -> str:
    return _renderer(renderer).render(_LINT_CONFIGS[Linter.FLAKE8][0], {})


def render_pylintrc(renderer: TemplateRenderer | None = None) -> str:
    return _renderer(renderer).render(_LINT_CONFIGS[Linter.PYLINT][0], {})


def precommit_hooks(config: ProjectConfig) -> list[dict[str, Any]]:
    """Return the formatter and linter hook entries for *config*."""
    hooks: list[dict[str, Any]] = []
    formatter_hook = _FORMATTER_HOOKS.get(config.formatter)
    if formatter_hook is not None:
        language_version = (
            f"python{config.python_version}"
            if config.formatter is Formatter.BLACK
            else None
        )
        hooks.append({**formatter_hook, "language_version": language_version})
    linter_hook = _LINTER_HOOKS.get(config.linter)
    if linter_hook is not None:
        hooks.append({**linter_hook, "language_version": None})
    return hooks


def render_precommit(
    config: ProjectConfig, renderer: TemplateRenderer | None = None
) -> str:
    """Render ``.pre-commit-config.yaml``.

    Raises:
        ValueError: If neither a formatter nor a linter is selected.
    """
    if not config.uses_precommit:
        raise ValueError("pre-commit config needs a formatter or a linter")
    context = {**build_context(config), "hooks": precommit_hooks(config)}
    return _renderer(renderer).render("pre-commit-config.yaml.j2", context)
