from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path
from typing import Iterable, List, Tuple, Union

from tap_junit.errors import HarnessError
from tap_junit.names import NameRegistry
from tap_junit.report import ReportDocument
from tap_junit.run import TestRun, TestScript, staged_file_name
from tap_junit.suite import Suite, SuiteBuilder

logger = logging.getLogger(__name__)

DEFAULT_XML_FILE = Path("junit_output.xml")

ScriptArg = Union[TestScript, str, Path, Tuple[str, str]]


def as_script(test: ScriptArg) -> TestScript:
    if isinstance(test, TestScript):
        return test
    if isinstance(test, tuple):
        path, label = test
        return TestScript(path, label)
    return TestScript(test)


class JUnitHarness:
    """Runs TAP test scripts and collects their results into one JUnit XML report.

    One harness is one session: test case names are unique across every suite
    it produces, and the report is written once, after the last script.
    """

    def __init__(
        self,
        xml_file: Path | str | None = None,
        raw_tap_dir: Path | str | None = None,
        no_times: bool = False,
        name_mangle: str = "hudson",
        merge: bool | None = None,
        kill_seconds: int | None = 600,
        interpreter: str | None = None,
        clean_up: bool = True,
        pretty_print: bool = False,
    ):
        if xml_file is None:
            xml_file = DEFAULT_XML_FILE
            logger.warning(f'xml_file not supplied, defaulting to "{xml_file}"')
        if merge is None:
            merge = False
            logger.warning("merge not supplied, defaulting to False")
        self.xml_file = Path(xml_file)
        self.no_times = no_times
        self.merge = merge
        self.kill_seconds = kill_seconds
        self.interpreter = interpreter
        self.pretty_print = pretty_print
        self.registry = NameRegistry()
        self.builder = SuiteBuilder(self.registry, name_mangle)
        self.report = ReportDocument()
        self.raw_tap_dir: Path | None = Path(raw_tap_dir) if raw_tap_dir is not None else None
        # a directory handed to us belongs to somebody else and is never removed
        self._remove_raw_tap_dir = raw_tap_dir is None and clean_up

    def _staging_dir(self) -> Path:
        if self.raw_tap_dir is None:
            self.raw_tap_dir = Path(tempfile.mkdtemp(prefix="tap_junit_"))
        else:
            self.raw_tap_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"Raw TAP output goes to {self.raw_tap_dir}")
        return self.raw_tap_dir

    def parsetest(self, label: str, raw_tap: str, elapsed: float = 0.0, exit_code: int = 0) -> Suite:
        """Translate the captured output of one test script and add it to the report."""
        suite = self.builder.build(label, raw_tap, 0.0 if self.no_times else elapsed, exit_code)
        self.report.append(suite)
        return suite

    def read_raw_tap(self, path: Path) -> str:
        try:
            return path.read_bytes().decode("utf-8", errors="replace")
        except OSError as e:
            raise HarnessError(path, e.strerror or e) from e

    def runtests(self, tests: Iterable[ScriptArg]) -> ReportDocument:
        scripts = [as_script(test) for test in tests]
        staging_dir = self._staging_dir()
        try:
            runs: List[TestRun] = []
            for index, script in enumerate(scripts):
                run = TestRun(
                    script,
                    staging_dir / staged_file_name(index, script.label),
                    merge=self.merge,
                    kill_seconds=self.kill_seconds,
                    interpreter=self.interpreter,
                )
                run.run()
                runs.append(run)

            for run in runs:
                raw_tap = self.read_raw_tap(run.raw_tap_file)
                self.parsetest(run.script.label, raw_tap, run.run_time, run.exit_code)

            self.write()
        finally:
            if self._remove_raw_tap_dir:
                shutil.rmtree(staging_dir, ignore_errors=True)
        return self.report

    def write(self):
        self.report.write(self.xml_file, pretty_print=self.pretty_print)
