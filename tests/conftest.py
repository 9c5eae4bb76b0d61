import textwrap
from pathlib import Path

import pytest

from tap_junit.names import NameRegistry
from tap_junit.suite import SuiteBuilder


@pytest.fixture
def registry():
    return NameRegistry()


@pytest.fixture
def builder(registry):
    return SuiteBuilder(registry, name_mangle="none")


@pytest.fixture
def tap_script(tmp_path):
    """Write a python test script that prints the given TAP and exits with exit_code."""

    def write(name: str, tap: str, exit_code: int = 0, stderr: str = "", sleep: float = 0) -> Path:
        path = tmp_path / name
        path.write_text(
            textwrap.dedent(
                """\
                import sys
                import time
                sys.stdout.write({tap!r})
                sys.stdout.flush()
                sys.stderr.write({stderr!r})
                time.sleep({sleep!r})
                sys.exit({exit_code!r})
                """
            ).format(tap=tap, stderr=stderr, sleep=sleep, exit_code=exit_code)
        )
        return path

    return write
