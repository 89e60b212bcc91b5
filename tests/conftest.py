"""Shared pytest fixtures for the pycrator test suite.

Provides reusable fixtures for:
- An action log writing into a temporary directory with a captured console
- ProjectConfig factories
- A fake command executor that records commands instead of running them
- An httpx mock transport serving license templates
- A toolchain and pipeline wired to the fakes
"""

from __future__ import annotations

import io
from datetime import date, datetime
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest
from rich.console import Console

from pycrator.actions import Toolchain, ToolRunner
from pycrator.config import ProjectConfig
from pycrator.log import ActionLog
from pycrator.pipeline import Pipeline
from pycrator.scaffolder import LicenseFetcher, ProjectGenerator

FIXED_NOW = datetime(2024, 5, 17, 9, 30, 0)

MIT_TEMPLATE = (
    "MIT License\n\n"
    "Copyright (c) [year] [fullname]\n\n"
    "Permission is hereby granted, free of charge, to any person obtaining a copy\n"
)

APACHE_TEMPLATE = (
    "                                 Apache License\n"
    "                           Version 2.0, January 2004\n\n"
    "   Copyright [yyyy] [name of copyright owner]\n"
    "   Copyright (c) [year] [fullname]\n"
)


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


@pytest.fixture
def console_buffer() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def log(tmp_path: Path, console_buffer: io.StringIO) -> ActionLog:
    """Action log writing to ``tmp_path/run.log`` with a captured console."""
    action_log = ActionLog(
        tmp_path / "run.log",
        console=Console(file=console_buffer, width=120, color_system=None),
        clock=lambda: FIXED_NOW,
    )
    action_log.start()
    return action_log


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@pytest.fixture
def make_config() -> Callable[..., ProjectConfig]:
    """Factory for configs with author fields filled in."""

    def _make(**overrides: Any) -> ProjectConfig:
        values: dict[str, Any] = {
            "package_name": "foo_bar",
            "author_name": "Ada Lovelace",
            "author_email": "ada@example.com",
            "description": "A sample package.",
            "project_url": "https://github.com/ada/foo_bar",
        }
        values.update(overrides)
        return ProjectConfig(**values)

    return _make


@pytest.fixture
def config(make_config) -> ProjectConfig:
    return make_config()


# ---------------------------------------------------------------------------
# Fake external tools
# ---------------------------------------------------------------------------


class FakeExecutor:
    """Stands in for ``run_command`` and records every command.

    ``failures`` maps a command prefix (tuple of leading arguments) to the
    return code that command should produce.
    """

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self.failures: dict[tuple[str, ...], int] = {}

    async def __call__(self, cmd, cwd=None, timeout=None, env=None):
        self.calls.append({"cmd": list(cmd), "cwd": cwd, "env": dict(env or {})})
        for prefix, code in self.failures.items():
            if tuple(cmd[: len(prefix)]) == prefix:
                return (code, "", f"{cmd[0]} failed")
        return (0, "", "")

    @property
    def commands(self) -> list[list[str]]:
        return [call["cmd"] for call in self.calls]

    def ran(self, *prefix: str) -> bool:
        return any(tuple(cmd[: len(prefix)]) == prefix for cmd in self.commands)


@pytest.fixture
def executor() -> FakeExecutor:
    return FakeExecutor()


@pytest.fixture
def missing_tools() -> set[str]:
    """Binaries the fake runner reports as absent; add names in a test."""
    return set()


@pytest.fixture
def runner(executor: FakeExecutor, missing_tools: set[str]) -> ToolRunner:
    return ToolRunner(
        executor=executor,
        which=lambda name, path=None: name not in missing_tools,
    )


def _license_handler(request: httpx.Request) -> httpx.Response:
    path = request.url.path
    if path.endswith("/mit.txt"):
        return httpx.Response(200, text=MIT_TEMPLATE)
    if path.endswith("/apache-2.0.txt"):
        return httpx.Response(200, text=APACHE_TEMPLATE)
    if path.endswith(("/gpl-3.0.txt", "/bsd-3-clause.txt")):
        return httpx.Response(200, text="Copyright (C) [year] [fullname]\n")
    return httpx.Response(404, text="Not Found")


@pytest.fixture
def license_fetcher() -> LicenseFetcher:
    """License fetcher served by an in-memory transport."""
    return LicenseFetcher(transport=httpx.MockTransport(_license_handler))


@pytest.fixture
def make_pipeline(
    log: ActionLog,
    runner: ToolRunner,
    license_fetcher: LicenseFetcher,
    missing_tools: set[str],
):
    """Build a Pipeline around fake tools; binaries in ``missing_tools`` are absent."""

    def _make(config: ProjectConfig) -> Pipeline:
        generator = ProjectGenerator(
            config,
            log,
            license_fetcher=license_fetcher,
            today=lambda: date(2024, 5, 17),
        )
        tools = Toolchain.for_config(config, runner)
        return Pipeline(
            config,
            log,
            tools=tools,
            generator=generator,
            exists=lambda name: name not in missing_tools,
        )

    return _make
