"""Command line interface for pycrator.

Usage::

    pycrator my_package --git --license MIT --build-system poetry --tests pytest
    python -m pycrator my_package --layout direct --ci travis

Every option is validated before anything is written. A bad option value, a
malformed package name, ``--help`` or a missing mandatory tool end the run with
exit status 1.
"""

from __future__ import annotations

import argparse
import asyncio
import re
from pathlib import Path
from typing import Any, Callable, Sequence

from rich.prompt import Prompt

from pycrator import __version__
from pycrator.config import (
    PYTHON_VERSION_PATTERN,
    BuildSystem,
    CIService,
    EnvTool,
    Formatter,
    LicenseType,
    Layout,
    Linter,
    ProjectConfig,
    TestFramework,
    choices,
    default_project_url,
    prompt_defaults_from_env,
)
from pycrator.errors import OptionError, PycratorError
from pycrator.log import DEFAULT_LOG_FILE, ActionLog
from pycrator.pipeline import Pipeline

PromptFunc = Callable[[str], str]

_PROMPTS: tuple[tuple[str, str], ...] = (
    ("author_name", "Enter author name"),
    ("author_email", "Enter author email"),
    ("description", "Enter project description"),
    ("project_url", "Enter GitHub URL (optional)"),
)

_EXAMPLES = """\
Examples:
  pycrator my_package --git --create-repo --license MIT --build-system poetry \\
      --layout src --tests pytest --ci github --format black --lint flake8 \\
      --docs --env poetry --python 3.8
"""

_FLAG_TOKEN = re.compile(r"^--")


class HelpRequested(Exception):
    """Raised by ``--help`` after the usage text has been printed."""


class OptionParser(argparse.ArgumentParser):
    """Argument parser that raises ``OptionError`` instead of exiting."""

    def error(self, message: str) -> None:  # type: ignore[override]
        raise OptionError(message)


class _HelpAction(argparse.Action):
    """``-h``/``--help``: print help, then stop with ``HelpRequested`` (exit 1)."""

    def __init__(
        self,
        option_strings: Sequence[str],
        dest: str = argparse.SUPPRESS,
        default: Any = argparse.SUPPRESS,
        help: str | None = None,
    ) -> None:
        super().__init__(
            option_strings=option_strings, dest=dest, default=default, nargs=0, help=help
        )

    def __call__(
        self,
        parser: argparse.ArgumentParser,
        namespace: argparse.Namespace,
        values: Any,
        option_string: str | None = None,
    ) -> None:
        parser.print_help()
        raise HelpRequested()


def _flag_value(label: str) -> Callable[[str], str]:
    """Return an argparse ``type`` that refuses another flag as the value."""

    def convert(value: str) -> str:
        if not value or _FLAG_TOKEN.match(value):
            raise argparse.ArgumentTypeError(f"{label} requires an argument.")
        return value

    return convert


def _python_version(value: str) -> str:
    if not PYTHON_VERSION_PATTERN.fullmatch(value):
        raise argparse.ArgumentTypeError(f"Invalid Python version: {value}.")
    return value


def build_parser() -> OptionParser:
    parser = OptionParser(
        prog="pycrator",
        description="Create a new Python package with build, test, CI and tooling set up.",
        epilog=_EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument("package_name", help="Name of the package to create")

    parser.add_argument("--git", dest="init_git", action="store_true", help="Initialize a Git repository")
    parser.add_argument(
        "--remote",
        dest="remote_url",
        metavar="URL",
        type=_flag_value("--remote"),
        help="Set remote repository URL",
    )
    parser.add_argument(
        "--create-repo",
        action="store_true",
        help="Create a GitHub repository (requires GitHub CLI)",
    )
    parser.add_argument(
        "--license",
        dest="license_type",
        metavar="TYPE",
        type=_flag_value("--license"),
        default=LicenseType.MIT.value,
        help=f"Add a LICENSE file ({', '.join(choices(LicenseType))})",
    )
    parser.add_argument(
        "--build-system",
        choices=choices(BuildSystem),
        default=BuildSystem.SETUPTOOLS.value,
        help="Choose build system (default: setuptools)",
    )
    parser.add_argument(
        "--layout",
        choices=choices(Layout),
        default=Layout.SRC.value,
        help="Choose project layout (default: src)",
    )
    parser.add_argument(
        "--tests",
        dest="test_framework",
        choices=choices(TestFramework),
        default=TestFramework.UNITTEST.value,
        help="Choose testing framework (default: unittest)",
    )
    parser.add_argument(
        "--ci",
        dest="ci_service",
        choices=choices(CIService),
        default=CIService.GITHUB.value,
        help="Set up Continuous Integration (default: github)",
    )
    parser.add_argument(
        "--format",
        dest="formatter",
        choices=choices(Formatter),
        default=Formatter.NONE.value,
        help="Choose code formatter (default: none)",
    )
    parser.add_argument(
        "--lint",
        dest="linter",
        choices=choices(Linter),
        default=Linter.NONE.value,
        help="Choose linter (default: none)",
    )
    parser.add_argument("--docs", dest="setup_docs", action="store_true", help="Set up Sphinx documentation")
    parser.add_argument(
        "--env",
        dest="env_tool",
        choices=choices(EnvTool),
        default=EnvTool.VENV.value,
        help="Choose virtual environment tool (default: venv)",
    )
    parser.add_argument(
        "--python",
        dest="python_version",
        metavar="VERSION",
        type=_python_version,
        default="3",
        help="Python version for the virtual environment (default: 3)",
    )
    parser.add_argument(
        "--no-input",
        action="store_true",
        help="Do not prompt for author, email, description or URL",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--help", action=_HelpAction, help="Display this help message")
    return parser


def parse_options(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse *argv*, raising ``OptionError`` on any invalid option."""
    return build_parser().parse_args(argv)


def prompt_missing(
    package_name: str,
    prefilled: dict[str, str],
    prompt: PromptFunc | None,
) -> dict[str, str]:
    """Ask for every author/description/URL field not already in *prefilled*.

    With ``prompt=None`` nothing is asked and unset fields stay empty. A blank
    project URL falls back to the GitHub URL derived from *package_name*.
    """
    values = dict(prefilled)
    for field_name, question in _PROMPTS:
        if field_name not in values:
            values[field_name] = prompt(question).strip() if prompt is not None else ""
    if not values["project_url"]:
        values["project_url"] = default_project_url(package_name)
    return values


def _rich_prompt(question: str) -> str:
    return Prompt.ask(question, default="", show_default=False)


def resolve_config(
    args: argparse.Namespace,
    prompt: PromptFunc | None = _rich_prompt,
    environ: dict[str, str] | None = None,
) -> ProjectConfig:
    """Validate the parsed options and fill the prompted fields.

    The package name is validated before any prompt is shown.
    """
    options = {key: value for key, value in vars(args).items() if key != "no_input"}
    # Validate first so a bad package name never reaches the prompts.
    ProjectConfig.build(**options)
    answers = prompt_missing(
        args.package_name,
        prompt_defaults_from_env(environ),
        None if args.no_input else prompt,
    )
    return ProjectConfig.build(**options, **answers)


def main(
    argv: Sequence[str] | None = None,
    *,
    log: ActionLog | None = None,
    prompt: PromptFunc | None = _rich_prompt,
    pipeline_factory: Callable[[ProjectConfig, ActionLog], Pipeline] = Pipeline,
    parent_dir: str | Path | None = None,
) -> int:
    """CLI entry point for ``pycrator``. Returns the process exit status."""
    log = log or ActionLog(DEFAULT_LOG_FILE)
    log.start()

    try:
        args = parse_options(argv)
        config = resolve_config(args, prompt=prompt)
    except HelpRequested:
        return 1
    except OptionError as exc:
        log.error(f"Error: {exc}")
        log.console.print(build_parser().format_usage().rstrip(), highlight=False)
        return 1

    log.rule(f"Creating package {config.package_name}")
    pipeline = pipeline_factory(config, log)
    try:
        asyncio.run(pipeline.run(parent_dir))
    except PycratorError as exc:
        log.error(str(exc))
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
