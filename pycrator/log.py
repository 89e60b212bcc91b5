"""Append-only action log.

Every component reports what it does through one ``ActionLog``. Each message is
appended to a log file in the invocation directory as
``YYYY-MM-DD HH:MM:SS - message`` and echoed to the terminal through Rich, so
the file is a complete, ordered record of the run even when it aborts.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Callable

from rich.console import Console
from rich.markup import escape
from rich.rule import Rule

DEFAULT_LOG_FILE = "create_py_package.log"
LOG_HEADER = "=== Python Package Creation Log ==="
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

_LEVEL_STYLES: dict[str, str] = {
    "info": "",
    "success": "bold green",
    "warning": "bold yellow",
    "error": "bold red",
}


class ActionLog:
    """Timestamped, append-only log shared by the whole run.

    Args:
        path: Log file location. Relative paths are resolved against the
            current directory at construction time, so later directory
            changes never move the log.
        console: Rich console used for terminal echo.
        clock: Returns the current time; injectable for tests.
    """

    def __init__(
        self,
        path: str | Path = DEFAULT_LOG_FILE,
        console: Console | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.path = Path(path).resolve()
        self.console = console or Console()
        self._clock = clock
        self.entries: list[str] = []

    def start(self) -> None:
        """Write the log header, replacing a log left by an earlier run."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(f"{LOG_HEADER}\n", encoding="utf-8")

    # -- Levels ------------------------------------------------------------

    def info(self, message: str) -> None:
        self._emit("info", message)

    def success(self, message: str) -> None:
        self._emit("success", message)

    def warning(self, message: str) -> None:
        self._emit("warning", message)

    def error(self, message: str) -> None:
        self._emit("error", message)

    def rule(self, title: str) -> None:
        """Log *title* and print it as a full-width section rule."""
        line = self._append(title)
        self.console.print()
        self.console.print(Rule(f"[bold cyan]{escape(title)}[/bold cyan]", style="cyan"))
        self.entries.append(line)

    # -- Internals ---------------------------------------------------------

    def _emit(self, level: str, message: str) -> None:
        line = self._append(message)
        self.entries.append(line)
        style = _LEVEL_STYLES[level]
        if style:
            self.console.print(f"[{style}]{escape(line)}[/{style}]", highlight=False)
        else:
            self.console.print(line, markup=False, highlight=False)

    def _append(self, message: str) -> str:
        line = f"{self._clock().strftime(TIMESTAMP_FORMAT)} - {message}"
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(line + "\n")
        return line
