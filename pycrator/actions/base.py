"""Command execution shared by every external tool wrapper.

``ToolRunner`` owns the process environment of the run. Activating a virtual
environment changes what every later command sees (``VIRTUAL_ENV`` and a
``PATH`` that starts with the environment's ``bin`` directory), which is how
"activate for the remainder of the run" is expressed without a shell.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Awaitable, Callable

from pydantic import BaseModel, Field

from pycrator.utils import command_exists, run_command

CommandExecutor = Callable[..., Awaitable[tuple[int, str, str]]]
ToolLookup = Callable[..., bool]


class CommandResult(BaseModel):
    """Structured outcome of one external command."""

    command: list[str] = Field(default_factory=list)
    returncode: int = Field(default=0)
    stdout: str = Field(default="")
    stderr: str = Field(default="")

    @property
    def success(self) -> bool:
        return self.returncode == 0

    @property
    def command_line(self) -> str:
        return " ".join(self.command)

    def describe(self) -> str:
        """One-line failure description including the tool's stderr."""
        detail = self.stderr or self.stdout
        message = f"{self.command_line} exited with status {self.returncode}"
        return f"{message}: {detail}" if detail else message


class ToolRunner:
    """Runs external commands with the run's current environment.

    Args:
        executor: Coroutine with the ``run_command`` signature; tests pass a
            fake to record commands instead of spawning processes.
        timeout: Per-command timeout in seconds, ``None`` for no limit.
        which: Tool lookup with the ``command_exists`` signature.
    """

    def __init__(
        self,
        executor: CommandExecutor = run_command,
        timeout: float | None = None,
        which: ToolLookup = command_exists,
    ) -> None:
        self._executor = executor
        self._which = which
        self.timeout = timeout
        self.env: dict[str, str] = {}
        self.env_prefix: list[str] = []
        self.history: list[CommandResult] = []

    # -- Environment activation --------------------------------------------

    def activate(self, venv_dir: Path) -> None:
        """Make *venv_dir* the active environment for later commands."""
        bin_dir = venv_dir / ("Scripts" if sys.platform == "win32" else "bin")
        self.env = {
            "VIRTUAL_ENV": str(venv_dir),
            "PATH": os.pathsep.join([str(bin_dir), os.environ.get("PATH", "")]),
        }
        self.env_prefix = []

    def activate_prefix(self, *prefix: str) -> None:
        """Run environment-scoped commands through *prefix* (``poetry run``)."""
        self.env = {}
        self.env_prefix = list(prefix)

    @property
    def search_path(self) -> str | None:
        return self.env.get("PATH")

    # -- Execution ---------------------------------------------------------

    def exists(self, name: str) -> bool:
        """Return ``True`` if *name* is on the active ``PATH``."""
        return self._which(name, path=self.search_path)

    async def run(self, *cmd: str, cwd: str | Path | None = None) -> CommandResult:
        """Run *cmd* and return its ``CommandResult``."""
        returncode, stdout, stderr = await self._executor(
            list(cmd), cwd=cwd, timeout=self.timeout, env=self.env or None
        )
        result = CommandResult(
            command=list(cmd), returncode=returncode, stdout=stdout, stderr=stderr
        )
        self.history.append(result)
        return result

    async def run_in_env(self, *cmd: str, cwd: str | Path | None = None) -> CommandResult:
        """Run a command installed inside the project environment."""
        return await self.run(*self.env_prefix, *cmd, cwd=cwd)
