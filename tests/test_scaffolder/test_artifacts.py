"""Tests for the pure artifact renderers (pycrator.scaffolder.artifacts).

Covers:
- setup.py for both layouts, including values that need quoting
- README, .gitignore, requirements and the sample tests
- LICENSE token substitution
- CI definitions for every service, parsed as YAML
- Lint configs and pre-commit hooks
- Identical options render identical files
"""

from __future__ import annotations

import ast

import pytest
import yaml

from pycrator.config import CIService
from pycrator.scaffolder.artifacts import (
    MATRIX_PYTHON_VERSION,
    build_context,
    ci_output_path,
    precommit_hooks,
    render_ci,
    render_flake8,
    render_gitignore,
    render_license,
    render_lint_config,
    render_precommit,
    render_pylintrc,
    render_readme,
    render_requirements,
    render_sample_test,
    render_setup_py,
)

pytestmark = pytest.mark.unit


def _setup_kwargs(source: str) -> dict[str, object]:
    """Return the literal keyword arguments of the ``setup(...)`` call."""
    tree = ast.parse(source)
    call = next(
        node
        for node in ast.walk(tree)
        if isinstance(node, ast.Call) and getattr(node.func, "id", None) == "setup"
    )
    values: dict[str, object] = {}
    for keyword in call.keywords:
        try:
            values[keyword.arg] = ast.literal_eval(keyword.value)
        except ValueError:
            values[keyword.arg] = ast.unparse(keyword.value)
    return values


# ---------------------------------------------------------------------------
# Context
# ---------------------------------------------------------------------------


class TestBuildContext:
    def test_context_values(self, make_config):
        context = build_context(make_config(build_system="poetry", formatter="black"))
        assert context["package_name"] == "foo_bar"
        assert context["build_system"] == "poetry"
        assert context["install_command"] == "poetry install"
        assert context["test_command"] == "poetry run pytest"
        assert context["dev_tools"] == ["black"]
        assert context["matrix_python_version"] == MATRIX_PYTHON_VERSION


# ---------------------------------------------------------------------------
# setup.py
# ---------------------------------------------------------------------------


class TestSetupPy:
    def test_src_layout(self, config):
        kwargs = _setup_kwargs(render_setup_py(config))
        assert kwargs["name"] == "foo_bar"
        assert kwargs["version"] == "0.1.0"
        assert kwargs["package_dir"] == {"": "src"}
        assert kwargs["packages"] == "find_packages('src')"
        assert kwargs["install_requires"] == []
        assert kwargs["author"] == "Ada Lovelace"
        assert kwargs["author_email"] == "ada@example.com"
        assert kwargs["description"] == "A sample package."
        assert kwargs["url"] == "https://github.com/ada/foo_bar"
        assert kwargs["python_requires"] == ">=3.0"
        assert "License :: OSI Approved :: MIT License" in kwargs["classifiers"]

    def test_direct_layout(self, make_config):
        kwargs = _setup_kwargs(render_setup_py(make_config(layout="direct")))
        assert kwargs["package_dir"] == {"": "."}

    def test_python_requires_uses_version(self, make_config):
        kwargs = _setup_kwargs(render_setup_py(make_config(python_version="3.9")))
        assert kwargs["python_requires"] == ">=3.9.0"

    def test_quotes_in_values_stay_valid_python(self, make_config):
        config = make_config(author_name="Patrick O'Brian", description='Says "hi"')
        kwargs = _setup_kwargs(render_setup_py(config))
        assert kwargs["author"] == "Patrick O'Brian"
        assert kwargs["description"] == 'Says "hi"'

    def test_license_classifier_follows_license_type(self, make_config):
        kwargs = _setup_kwargs(render_setup_py(make_config(license_type="Apache-2.0")))
        assert "License :: OSI Approved :: Apache-2.0 License" in kwargs["classifiers"]


# ---------------------------------------------------------------------------
# README / .gitignore / requirements / sample tests
# ---------------------------------------------------------------------------


class TestStaticArtifacts:
    def test_readme(self, config):
        readme = render_readme(config)
        assert readme.startswith("# foo_bar\n")
        assert "license-MIT-blue.svg" in readme
        assert "A sample package." in readme
        assert "pip install foo_bar" in readme
        assert "import foo_bar" in readme
        assert "licensed under the MIT License" in readme

    def test_gitignore(self):
        lines = render_gitignore().splitlines()
        for entry in ("__pycache__/", "venv/", ".poetry/", "*.egg-info/", "docs/_build/", "*.log"):
            assert entry in lines

    def test_requirements_empty(self):
        assert render_requirements() == ""

    def test_unittest_sample(self, config):
        sample = render_sample_test(config)
        ast.parse(sample)
        assert "class TestSample(unittest.TestCase):" in sample
        assert "unittest.main()" in sample

    def test_pytest_sample(self, make_config):
        sample = render_sample_test(make_config(test_framework="pytest"))
        ast.parse(sample)
        assert "def test_sample():" in sample
        assert "unittest" not in sample


# ---------------------------------------------------------------------------
# LICENSE
# ---------------------------------------------------------------------------


class TestLicense:
    def test_tokens_replaced(self, config):
        text = render_license(config, "Copyright (c) [year] [fullname]\n[year]", 2024)
        assert text == "Copyright (c) 2024 Ada Lovelace\n2024"

    def test_text_without_tokens_unchanged(self, config):
        assert render_license(config, "No tokens here.", 2024) == "No tokens here."


# ---------------------------------------------------------------------------
# CI
# ---------------------------------------------------------------------------


class TestCI:
    @pytest.mark.parametrize(
        ("service", "path"),
        [
            (CIService.GITHUB, ".github/workflows/python-package.yml"),
            (CIService.TRAVIS, ".travis.yml"),
            (CIService.CIRCLECI, ".circleci/config.yml"),
        ],
    )
    def test_output_paths(self, service: CIService, path: str):
        assert ci_output_path(service) == path

    def test_no_path_for_none(self):
        with pytest.raises(ValueError):
            ci_output_path(CIService.NONE)

    def test_render_none_raises(self, make_config):
        with pytest.raises(ValueError):
            render_ci(make_config(ci_service="none"))

    def test_github_workflow(self, config):
        path, content = render_ci(config)
        assert path == ".github/workflows/python-package.yml"
        workflow = yaml.safe_load(content)
        job = workflow["jobs"]["build"]
        assert job["runs-on"] == "ubuntu-latest"
        assert job["strategy"]["matrix"]["python-version"] == ["3", "3.8", "3.9", "3.10"]
        steps = job["steps"]
        assert steps[0]["uses"] == "actions/checkout@v2"
        assert steps[1]["with"]["python-version"] == MATRIX_PYTHON_VERSION
        runs = "\n".join(step.get("run", "") for step in steps)
        assert "pip install -e ." in runs
        assert "python -m unittest discover" in runs
        assert "Lint" not in content

    def test_github_workflow_with_tools(self, make_config):
        config = make_config(
            build_system="poetry", formatter="black", linter="flake8", test_framework="pytest"
        )
        _, content = render_ci(config)
        workflow = yaml.safe_load(content)
        runs = "\n".join(step.get("run", "") for step in workflow["jobs"]["build"]["steps"])
        assert "poetry install" in runs
        assert "pip install black flake8 pytest" in runs
        assert "flake8 ." in runs
        assert "poetry run pytest" in runs

    def test_travis(self, make_config):
        path, content = render_ci(make_config(ci_service="travis", python_version="3.9"))
        assert path == ".travis.yml"
        travis = yaml.safe_load(content)
        assert travis["language"] == "python"
        assert travis["python"] == ["3.9", "3.8", "3.9", "3.10"]
        assert travis["install"] == ["pip install -e ."]
        assert travis["script"] == ["python -m unittest discover"]

    def test_travis_with_linter(self, make_config):
        _, content = render_ci(make_config(ci_service="travis", linter="pylint"))
        travis = yaml.safe_load(content)
        assert travis["install"] == ["pip install -e .", "pip install pylint"]
        assert travis["script"] == ["pylint .", "python -m unittest discover"]

    def test_circleci(self, make_config):
        path, content = render_ci(make_config(ci_service="circleci", python_version="3.11"))
        assert path == ".circleci/config.yml"
        circle = yaml.safe_load(content)
        job = circle["jobs"]["build"]
        assert job["docker"] == [{"image": "cimg/python:3.11"}]
        commands = [step["run"]["command"] for step in job["steps"] if isinstance(step, dict)]
        assert "pip install -e ." in commands[0]
        assert commands[-1] == "python -m unittest discover"
        assert circle["workflows"]["build"]["jobs"] == ["build"]


# ---------------------------------------------------------------------------
# Lint and pre-commit
# ---------------------------------------------------------------------------


class TestLintAndPrecommit:
    def test_lint_config_paths(self, make_config):
        assert render_lint_config(make_config()) is None
        path, content = render_lint_config(make_config(linter="flake8"))
        assert path == ".flake8"
        assert content == render_flake8()
        path, content = render_lint_config(make_config(linter="pylint"))
        assert path == ".pylintrc"
        assert content == render_pylintrc()

    def test_flake8_settings(self):
        content = render_flake8()
        assert content.startswith("[flake8]")
        assert "max-line-length = 88" in content

    def test_hooks_black_gets_language_version(self, make_config):
        hooks = precommit_hooks(make_config(formatter="black", linter="flake8", python_version="3.9"))
        assert [hook["id"] for hook in hooks] == ["black", "flake8"]
        assert hooks[0]["language_version"] == "python3.9"
        assert hooks[1]["language_version"] is None

    def test_hooks_autopep8_has_no_language_version(self, make_config):
        hooks = precommit_hooks(make_config(formatter="autopep8"))
        assert hooks == [
            {
                "repo": "https://github.com/hhatto/autopep8",
                "rev": "v2.0.2",
                "id": "autopep8",
                "language_version": None,
            }
        ]

    def test_render_precommit(self, make_config):
        content = render_precommit(make_config(formatter="black", linter="pylint"))
        repos = yaml.safe_load(content)["repos"]
        assert repos[0]["repo"] == "https://github.com/pre-commit/pre-commit-hooks"
        assert [hook["id"] for hook in repos[0]["hooks"]] == [
            "trailing-whitespace",
            "end-of-file-fixer",
            "check-yaml",
            "check-added-large-files",
        ]
        assert repos[1]["hooks"] == [{"id": "black", "language_version": "python3"}]
        assert repos[2]["repo"] == "https://github.com/pylint-dev/pylint"
        assert repos[2]["hooks"] == [{"id": "pylint"}]

    def test_render_precommit_requires_a_tool(self, config):
        with pytest.raises(ValueError):
            render_precommit(config)


# ---------------------------------------------------------------------------
# Determinism
# ---------------------------------------------------------------------------


class TestDeterminism:
    OPTIONS = {
        "formatter": "black",
        "linter": "flake8",
        "test_framework": "pytest",
        "python_version": "3.11",
    }

    @pytest.mark.parametrize("ci_service", ["github", "travis", "circleci"])
    def test_same_options_render_identical_files(self, make_config, ci_service: str):
        first = make_config(ci_service=ci_service, **self.OPTIONS)
        second = make_config(ci_service=ci_service, **self.OPTIONS)

        assert render_setup_py(first) == render_setup_py(second)
        assert render_readme(first) == render_readme(second)
        assert render_sample_test(first) == render_sample_test(second)
        assert render_ci(first) == render_ci(second)
        assert render_precommit(first) == render_precommit(second)
        assert render_lint_config(first) == render_lint_config(second)
