"""Tests for the diagnostic listeners."""

from __future__ import annotations

import threading
from io import StringIO

import pytest
from rich.console import Console

from sshauth.listener import (
    NULL_LISTENER,
    BufferListener,
    ConsoleListener,
    NullListener,
    TaskListener,
    listener_or_null,
)


def _console() -> tuple[Console, StringIO]:
    buf = StringIO()
    return Console(file=buf, no_color=True, width=200), buf


class TestTaskListener:
    def test_error_prefixes_and_forwards_to_write(self) -> None:
        written: list[str] = []

        class Collecting(TaskListener):
            def write(self, message: str) -> None:
                written.append(message)

        Collecting().error("bad key")
        assert written == ["ERROR: bad key"]

    def test_write_is_abstract(self) -> None:
        with pytest.raises(TypeError):
            TaskListener()  # type: ignore[abstract]


class TestNullListener:
    def test_discards_everything(self) -> None:
        NULL_LISTENER.write("x")
        NULL_LISTENER.error("y")

    def test_is_a_null_listener(self) -> None:
        assert isinstance(NULL_LISTENER, NullListener)

    def test_listener_or_null(self) -> None:
        buffer = BufferListener()
        assert listener_or_null(None) is NULL_LISTENER
        assert listener_or_null(buffer) is buffer


class TestConsoleListener:
    def test_write(self) -> None:
        console, buf = _console()
        ConsoleListener(console).write("hello")
        assert buf.getvalue() == "hello\n"

    def test_write_keeps_brackets_verbatim(self) -> None:
        console, buf = _console()
        ConsoleListener(console).write("allowed: [publickey]")
        assert "allowed: [publickey]" in buf.getvalue()

    def test_error(self) -> None:
        console, buf = _console()
        ConsoleListener(console).error("denied [password]")
        assert buf.getvalue() == "ERROR: denied [password]\n"

    def test_from_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        listener = ConsoleListener.from_stderr(no_color=True)
        listener.write("to stderr")
        captured = capsys.readouterr()
        assert "to stderr" in captured.err
        assert captured.out == ""

    def test_console_property(self) -> None:
        console, _ = _console()
        assert ConsoleListener(console).console is console


class TestBufferListener:
    def test_collects_in_order(self) -> None:
        listener = BufferListener()
        listener.write("one")
        listener.error("two")
        assert listener.messages == ["one", "ERROR: two"]
        assert listener.text == "one\nERROR: two"

    def test_messages_is_a_snapshot(self) -> None:
        listener = BufferListener()
        listener.write("one")
        snapshot = listener.messages
        listener.write("two")
        assert snapshot == ["one"]

    def test_clear(self) -> None:
        listener = BufferListener()
        listener.write("one")
        listener.clear()
        assert listener.messages == []
        assert listener.text == ""

    def test_concurrent_writes(self) -> None:
        listener = BufferListener()

        def worker(n: int) -> None:
            for i in range(100):
                listener.write(f"{n}-{i}")

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(listener.messages) == 400
