from __future__ import annotations

import logging
import re
import shlex
import subprocess
import sys
import time
from pathlib import Path
from typing import List

logger = logging.getLogger(__name__)

# what a shell reports for a command it cannot execute
COMMAND_NOT_RUNNABLE = 127


class TestScript:
    """A test script and the label its suite is reported under."""

    __test__ = False

    def __init__(self, path: Path | str, label: str | None = None):
        self.path = Path(path)
        self.label: str = label if label is not None else str(path)

    @staticmethod
    def parse(arg: str) -> TestScript:
        """Parse a command line argument of the form ``path`` or ``path=label``."""
        path, sep, label = arg.partition("=")
        return TestScript(path, label if sep and label else None)

    def __repr__(self):
        return "TestScript({!r}, {!r})".format(str(self.path), self.label)


def script_command(path: Path, interpreter: str | None = None) -> List[str]:
    if interpreter is not None:
        return shlex.split(interpreter) + [str(path)]
    if path.suffix == ".py":
        return [sys.executable, str(path)]
    if path.suffix in (".t", ".pl"):
        return ["perl", str(path)]
    return [str(path.absolute())]


def staged_file_name(index: int, label: str) -> str:
    return "{:04d}-{}.tap".format(index, re.sub(r"[^A-Za-z0-9._-]", "_", label))


class TestRun:
    __test__ = False

    def __init__(
        self,
        script: TestScript,
        raw_tap_file: Path,
        merge: bool = False,
        kill_seconds: int | None = 600,
        interpreter: str | None = None,
    ):
        self.script = script
        self.raw_tap_file = raw_tap_file
        self.merge = merge
        self.kill_seconds = kill_seconds
        self.interpreter = interpreter
        # state for the run
        self.run_time: float = 0.0
        self.exit_code: int = 0
        self.was_killed: bool = False

    def run(self) -> int:
        command = script_command(self.script.path, self.interpreter)
        logger.info(f"Running {self.script.label}: {' '.join(command)}")
        start = time.monotonic()
        try:
            process = subprocess.Popen(
                command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT if self.merge else None,
            )
        except OSError as e:
            self.run_time = time.monotonic() - start
            self.exit_code = COMMAND_NOT_RUNNABLE
            logger.error(f"Could not run {self.script.label}: {e}")
            self.raw_tap_file.write_bytes("# {}\n".format(e).encode("utf-8", errors="replace"))
            return self.exit_code

        try:
            out, _ = process.communicate(timeout=self.kill_seconds)
        except subprocess.TimeoutExpired:
            process.kill()
            out, _ = process.communicate()
            self.was_killed = True
            logger.warning(f"Killed {self.script.label} after {self.kill_seconds} seconds")
        self.run_time = time.monotonic() - start
        self.exit_code = process.returncode
        self.raw_tap_file.write_bytes(out or b"")
        logger.info(
            f"Finished {self.script.label}: exit code {self.exit_code} after {self.run_time:.3f}s"
            + (" (killed)" if self.was_killed else "")
        )
        return self.exit_code
