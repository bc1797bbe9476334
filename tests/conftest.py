"""Shared test fixtures for the clamwrap test suite."""

import io
import stat
import sys
import textwrap

import pytest

from clamwrap.models import ClamConfig


@pytest.fixture
def make_executable(tmp_path):
    """Factory writing a fake ClamAV executable backed by a Python script.

    *body* runs with ``sys`` and ``json`` imported; ``ARGS_FILE`` names a
    file the script may dump its argv into.
    """

    def _make(name: str, body: str) -> str:
        script = tmp_path / name
        args_file = tmp_path / f"{name}.args.json"
        script.write_text(
            f"#!{sys.executable}\n"
            "import json\n"
            "import sys\n"
            f"ARGS_FILE = {str(args_file)!r}\n"
            + textwrap.dedent(body)
        )
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return str(script)

    return _make


@pytest.fixture
def scan_target(tmp_path):
    """An existing file to scan."""
    target = tmp_path / "sample.txt"
    target.write_text("hello")
    return target


@pytest.fixture
def sinks():
    """In-memory stdout/stderr sinks for echoed output."""
    return io.StringIO(), io.StringIO()


@pytest.fixture
def base_config():
    """Config with the availability check disabled."""
    return ClamConfig(check=False)
