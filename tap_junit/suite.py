from __future__ import annotations

import logging
from enum import Enum
from typing import List

from tap_junit.events import Comment, Directive, Other, Plan, TapEvent, Test, Unknown, parse_tap
from tap_junit.names import NameRegistry, mangle_name
from tap_junit.sanitize import xmlsafe

logger = logging.getLogger(__name__)

NO_PLAN_NAME = "Test died too soon, even before plan."
NO_PLAN_MESSAGE = "The test suite died before a plan was produced. You need to have a plan."
BAD_PLAN_NAME = "Number of runned tests does not match plan."
BAD_PLAN_MISSING_MESSAGE = "Some test were not executed, The test died prematurely."
BAD_PLAN_EXTRA_MESSAGE = "Extra tests tun."
BAD_EXIT_NAME = "Test returned failure"


class FailureKind(Enum):
    TEST = "ordinary-test-failure"
    NO_PLAN = "missing-plan"
    BAD_PLAN = "plan-mismatch"
    BAD_EXIT = "abnormal-exit"


class Failure:
    def __init__(self, kind: FailureKind, message: str, content: str):
        self.kind = kind
        self.message = message
        self.content = content


class TestCase:
    # not a pytest class, despite the name
    __test__ = False

    def __init__(self, name: str, classname: str, duration: float = 0.0, failure: Failure | None = None):
        self.name = name
        self.classname = classname
        self.duration: float = duration
        self.failure: Failure | None = failure


class Suite:
    def __init__(self, name: str):
        self.name = name
        self.planned_tests: int | None = None
        self.tests_run: int = 0
        self.failures: int = 0
        self.errors: int = 0
        self.duration: float = 0.0
        self.cases: List[TestCase] = []
        self.log: str = ""

    def ok(self) -> bool:
        return self.errors == 0 and self.failures == 0

    def case_names(self) -> List[str]:
        return [case.name for case in self.cases]


class SuiteBuilder:
    """Translates the TAP output of one test script into a Suite.

    TAP knows nothing about crashed scripts, missing plans or per test timing,
    so the builder reconstructs those from the event stream, the exit code and
    one wall clock measurement.
    """

    def __init__(self, registry: NameRegistry, name_mangle: str = "hudson"):
        self.registry = registry
        self.name_mangle = name_mangle

    def build(self, file_label: str, raw_tap: str, measured_duration: float = 0.0, exit_code: int = 0) -> Suite:
        # an empty stream still has to produce one (unknown) line
        if not raw_tap:
            raw_tap = "\n"

        suite = Suite(mangle_name(file_label, self.name_mangle))
        suite.duration = measured_duration
        self.add_events(suite, parse_tap(raw_tap))
        validate_plan(suite, self.registry, exit_code)
        distribute_duration(suite, measured_duration)
        logger.debug(
            f"Suite {suite.name}: planned={suite.planned_tests} run={suite.tests_run} "
            f"cases={len(suite.cases)} errors={suite.errors} failures={suite.failures}"
        )
        return suite

    def add_events(self, suite: Suite, events: List[TapEvent]):
        comment = ""
        for event in events:
            if isinstance(event, Plan):
                if suite.planned_tests is None:
                    suite.planned_tests = event.tests_planned
                else:
                    logger.warning(f"Suite {suite.name}: ignoring duplicate plan {event.raw!r}")
            elif isinstance(event, Comment):
                if event.text is not None:
                    comment += xmlsafe(event.text) + "\n"
            elif isinstance(event, Unknown):
                comment += xmlsafe(event.raw) + "\n"
            elif isinstance(event, Test):
                suite.tests_run += 1
                # JUnit can't express these -- pretend they do not exist
                if event.directive == Directive.NONE:
                    suite.cases.append(self._test_case(suite, event, comment))
                    comment = ""
            elif isinstance(event, Other):
                pass
            else:
                assert False, "Unhandled TAP event {!r}".format(event)
            suite.log += xmlsafe(event.raw) + "\n"

    def _test_case(self, suite: Suite, event: Test, comment: str) -> TestCase:
        case = TestCase(self.registry.resolve(event.description, suite.case_names()), suite.name)
        if not event.ok:
            case.failure = Failure(FailureKind.TEST, xmlsafe(event.raw), comment)
            suite.errors += 1
        return case


def _add_synthetic_case(suite: Suite, registry: NameRegistry, name: str, failure: Failure):
    case = TestCase(registry.resolve(name, suite.case_names()), suite.name, failure=failure)
    suite.cases.append(case)
    suite.errors += 1


def validate_plan(suite: Suite, registry: NameRegistry, exit_code: int = 0) -> Suite:
    """Add a failing case for a missing plan, a plan mismatch or a crashed script.

    Only the first problem found is reported. A script that fails a test and
    also exits abnormally is reported through the failed test alone.
    """
    if suite.planned_tests is None:
        suite.planned_tests = 0
        _add_synthetic_case(suite, registry, NO_PLAN_NAME, Failure(FailureKind.NO_PLAN, NO_PLAN_MESSAGE, "No plan"))
    elif suite.planned_tests != suite.tests_run:
        # TODO and SKIP tests count as run here, even though they have no case
        missing = suite.planned_tests - suite.tests_run
        suite.failures = abs(missing)
        message = BAD_PLAN_MISSING_MESSAGE if missing > 0 else BAD_PLAN_EXTRA_MESSAGE
        _add_synthetic_case(suite, registry, BAD_PLAN_NAME, Failure(FailureKind.BAD_PLAN, message, "Bad plan"))
    elif exit_code != 0 and suite.errors == 0:
        message = "Test died with return code {}".format(exit_code)
        _add_synthetic_case(suite, registry, BAD_EXIT_NAME, Failure(FailureKind.BAD_EXIT, message, message))
        # keep the plan in line with the extra case
        suite.planned_tests += 1
    return suite


def distribute_duration(suite: Suite, measured_duration: float) -> Suite:
    """Split the script's run time evenly over its cases.

    TAP carries no per test timing, so this is the best approximation there is.
    """
    if measured_duration and suite.cases:
        share = measured_duration / len(suite.cases)
        for case in suite.cases:
            case.duration = share
    return suite
