"""
Tests for the shared console.

Run: python3 -m pytest tests/test_console.py -v
"""

import pytest

from kubepreflight.utils.console import get_console, reset_console


@pytest.fixture(autouse=True)
def fresh_console():
    reset_console()
    yield
    reset_console()


class TestGetConsole:
    """Tests for get_console."""

    def test_stdout_singleton(self):
        assert get_console() is get_console()
        assert get_console().stderr is False

    def test_stderr_singleton(self):
        err = get_console(stderr=True)

        assert err is get_console(stderr=True)
        assert err is not get_console()
        assert err.stderr is True

    def test_stderr_console_writes_to_stderr(self, capsys):
        get_console(stderr=True).print("[error]Configuration error:[/error] bad value")

        captured = capsys.readouterr()
        assert "Configuration error: bad value" in captured.err
        assert captured.out == ""

    def test_reset(self):
        out, err = get_console(), get_console(stderr=True)

        reset_console()

        assert get_console() is not out
        assert get_console(stderr=True) is not err
