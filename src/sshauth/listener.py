"""Diagnostic listeners that receive authentication failure messages.

A listener is a write-only channel for human-readable text. Strategies write
to the listener of the authenticator that runs them before reporting a
failure, and stay silent on success.

Three implementations cover the common cases:

* :data:`NULL_LISTENER` -- discards everything. Installed when a caller passes
  ``None``, typically because it intends to try another credential next.
* :class:`ConsoleListener` -- writes through a Rich console. An authenticator
  starts out with :meth:`ConsoleListener.from_stderr` so that failures from
  callers that never configure a listener still show up somewhere.
* :class:`BufferListener` -- keeps messages in memory for later display.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import Optional

from rich.console import Console
from rich.markup import escape


class TaskListener(ABC):
    """Write-only sink for diagnostic messages."""

    @abstractmethod
    def write(self, message: str) -> None:
        """Record a single line of diagnostic text."""
        ...

    def error(self, message: str) -> None:
        """Record a message flagged as an error.

        The default implementation prefixes the text with ``ERROR:`` and
        forwards it to :meth:`write`.
        """
        self.write(f"ERROR: {message}")


class NullListener(TaskListener):
    """Listener that discards all messages."""

    def write(self, message: str) -> None:
        pass

    def error(self, message: str) -> None:
        pass

    def __repr__(self) -> str:
        return "NULL_LISTENER"


NULL_LISTENER: TaskListener = NullListener()


class ConsoleListener(TaskListener):
    """Listener that prints through a :class:`rich.console.Console`.

    Messages are printed without markup interpretation so that text such as
    ``[publickey]`` coming from a server is shown verbatim.

    Args:
        console: The console to print to.
    """

    def __init__(self, console: Console) -> None:
        self._console = console

    @classmethod
    def from_stderr(cls, no_color: bool = False) -> "ConsoleListener":
        """Create a listener bound to the process's standard error stream."""
        return cls(Console(stderr=True, no_color=no_color))

    @property
    def console(self) -> Console:
        return self._console

    def write(self, message: str) -> None:
        self._console.print(message, markup=False, highlight=False)

    def error(self, message: str) -> None:
        self._console.print(
            f"[bold red]ERROR:[/bold red] {escape(message)}", highlight=False
        )


class BufferListener(TaskListener):
    """Listener that collects messages in memory.

    Example::

        listener = BufferListener()
        if not authenticator.authenticate(listener):
            print(listener.text)
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._messages: list[str] = []

    def write(self, message: str) -> None:
        with self._lock:
            self._messages.append(message)

    @property
    def messages(self) -> list[str]:
        """A snapshot of the messages written so far, oldest first."""
        with self._lock:
            return list(self._messages)

    @property
    def text(self) -> str:
        return "\n".join(self.messages)

    def clear(self) -> None:
        with self._lock:
            self._messages.clear()


def listener_or_null(listener: Optional[TaskListener]) -> TaskListener:
    """Return *listener*, or :data:`NULL_LISTENER` when it is ``None``."""
    return NULL_LISTENER if listener is None else listener
