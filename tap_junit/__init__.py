"""
Run TAP producing test scripts and report their results as JUnit XML.

Typical usage:
    from tap_junit import JUnitHarness
    harness = JUnitHarness(xml_file="junit_output.xml", name_mangle="perl")
    harness.runtests(["t/basic.t", ("t/slow.t", "slow tests")])
"""

from .errors import ConfigError, HarnessError, TapJUnitError
from .harness import JUnitHarness
from .names import NameRegistry, mangle_name
from .report import ReportDocument
from .run import TestScript
from .sanitize import xmlsafe
from .suite import Failure, FailureKind, Suite, SuiteBuilder, TestCase

__version__ = "0.35.0"

__all__ = [
    "ConfigError",
    "Failure",
    "FailureKind",
    "HarnessError",
    "JUnitHarness",
    "NameRegistry",
    "ReportDocument",
    "Suite",
    "SuiteBuilder",
    "TapJUnitError",
    "TestCase",
    "TestScript",
    "mangle_name",
    "xmlsafe",
]
