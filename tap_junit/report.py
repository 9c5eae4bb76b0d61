from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Dict, List, Optional

from tap_junit.errors import HarnessError
from tap_junit.suite import Suite, TestCase

logger = logging.getLogger(__name__)

XML_DECLARATION = "<?xml version='1.0' encoding='utf-8'?>\n"


class ReportTree:
    def __init__(self, name: str, text: Optional[str] = None):
        self.name = name
        self.children: List[ReportTree] = []
        self.attributes: Dict[str, str] = {}
        self.text: Optional[str] = text

    def append(self, element: ReportTree):
        self.children.append(element)

    def to_et_element(self) -> ET.Element:
        element = ET.Element(self.name)
        for k, v in self.attributes.items():
            element.set(str(k), str(v))
        if self.text is not None:
            element.text = self.text
        for child in self.children:
            element.append(child.to_et_element())
        return element

    def to_string(self, pretty_print: bool = False) -> str:
        root = self.to_et_element()
        if pretty_print:
            ET.indent(root, space="  ")
        return ET.tostring(root, encoding="unicode", short_empty_elements=True)


def case_tree(case: TestCase) -> ReportTree:
    out = ReportTree("testcase")
    out.attributes["name"] = case.name
    out.attributes["classname"] = case.classname
    out.attributes["time"] = str(float(case.duration))
    if case.failure is not None:
        failure = ReportTree("failure", text=case.failure.content)
        failure.attributes["type"] = case.failure.kind.value
        failure.attributes["message"] = case.failure.message
        out.append(failure)
    return out


def suite_tree(suite: Suite) -> ReportTree:
    out = ReportTree("testsuite")
    out.attributes["name"] = suite.name
    out.attributes["tests"] = str(suite.planned_tests if suite.planned_tests is not None else 0)
    out.attributes["failures"] = str(suite.failures)
    out.attributes["errors"] = str(suite.errors)
    out.attributes["time"] = str(float(suite.duration))
    for case in suite.cases:
        out.append(case_tree(case))
    out.append(ReportTree("system-out", text=suite.log))
    return out


class ReportDocument:
    """All suites of one harness session, in the order their files were processed."""

    def __init__(self):
        self.suites: List[Suite] = []

    def append(self, suite: Suite):
        self.suites.append(suite)

    def ok(self) -> bool:
        return all(suite.ok() for suite in self.suites)

    def to_tree(self) -> ReportTree:
        out = ReportTree("testsuites")
        for suite in self.suites:
            out.append(suite_tree(suite))
        return out

    def serialize(self, pretty_print: bool = False) -> bytes:
        xml_str = self.to_tree().to_string(pretty_print=pretty_print)
        # lone surrogates from undecodable test output must not reach the file
        return (XML_DECLARATION + xml_str).encode("utf-8", errors="replace")

    def write(self, path: Path, pretty_print: bool = False):
        data = self.serialize(pretty_print=pretty_print)
        try:
            with open(path, "wb") as f:
                f.write(data)
        except OSError as e:
            raise HarnessError(path, e.strerror or e) from e
        logger.info(f"Wrote JUnit report with {len(self.suites)} suite(s) to {path}")
