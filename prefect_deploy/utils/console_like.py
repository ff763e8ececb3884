from __future__ import annotations

from typing import Protocol

from rich.console import ConsoleRenderable


class ConsoleLike(Protocol):
    """Output surface used by deployment steps.

    The CLI passes its CLIConsole; tests pass a Mock.
    """

    def print(self, msg: ConsoleRenderable | str | None = None) -> None: ...

    def output(self, text: str) -> None: ...

    def info(self, msg: str) -> None: ...

    def warn(self, msg: str) -> None: ...

    def error(self, msg: str) -> None: ...

    def ok(self, msg: str) -> None: ...
