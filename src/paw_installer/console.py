"""IO sinks used to report advisory messages to the user."""

from __future__ import annotations

from typing import Protocol

from rich.console import Console


class IOInterface(Protocol):
    """Anything that can show a line of output to the user."""

    def write(self, message: str) -> None: ...


class ConsoleIO:
    """Write messages to the terminal through rich (markup enabled)."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(stderr=True)

    def write(self, message: str) -> None:
        self.console.print(message)


class BufferIO:
    """Collect messages in memory."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def write(self, message: str) -> None:
        self.messages.append(message)

    def getvalue(self) -> str:
        return "\n".join(self.messages)


class NullIO:
    """Discard every message."""

    def write(self, message: str) -> None:
        pass
