from __future__ import annotations

import argparse
import logging
import sys
from typing import List

from tap_junit.config import Config
from tap_junit.errors import TapJUnitError
from tap_junit.harness import JUnitHarness
from tap_junit.run import TestScript


def setup_logging(level: str = "INFO") -> logging.Logger:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(process)d - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )
    return logging.getLogger(__name__)


def build_parser(config: Config) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        "tap-junit",
        description="Run TAP test scripts and write their results as a JUnit XML report.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    config.build_arguments(parser)
    parser.add_argument("tests", nargs="+", metavar="TEST", help="Test script to run, optionally as path=label")
    return parser


def main(argv: List[str] | None = None) -> int:
    logger = None
    try:
        config = Config()
        args = build_parser(config).parse_args(argv)
        config.extract_args(args)

        logger = setup_logging(config.log_level)
        harness = JUnitHarness(
            xml_file=config.xml_file,
            raw_tap_dir=config.raw_tap_dir,
            no_times=config.no_times,
            name_mangle=config.name_mangle,
            merge=config.merge,
            kill_seconds=config.kill_seconds,
            interpreter=config.interpreter,
            clean_up=config.clean_up,
            pretty_print=config.pretty_print,
        )
        report = harness.runtests([TestScript.parse(test) for test in args.tests])
    except TapJUnitError as e:
        if logger is None:
            logger = setup_logging()
        logger.error(str(e))
        return 2

    failed = [suite.name for suite in report.suites if not suite.ok()]
    if failed:
        logger.info(f"{len(failed)} of {len(report.suites)} suite(s) failed: {', '.join(failed)}")
        return 1
    logger.info(f"All {len(report.suites)} suite(s) passed")
    return 0
