import xml.etree.ElementTree as ET

import pytest

from tap_junit.errors import HarnessError
from tap_junit.report import ReportDocument, ReportTree


def tap(*lines):
    return "".join(line + "\n" for line in lines)


@pytest.fixture
def report(builder):
    report = ReportDocument()
    report.append(builder.build("t/clean.t", tap("1..2", "ok 1 - a", "ok 2 - b"), measured_duration=1.0))
    report.append(builder.build("t/broken.t", tap("1..1", "# expected 2", "not ok 1 - c & <d>")))
    return report


def test_serialized_shape(report):
    data = report.serialize()
    assert data.startswith(b"<?xml version='1.0' encoding='utf-8'?>\n<testsuites>")
    root = ET.fromstring(data)
    assert root.tag == "testsuites"
    clean, broken = root.findall("testsuite")

    assert list(clean.attrib) == ["name", "tests", "failures", "errors", "time"]
    assert clean.attrib == {"name": "t/clean.t", "tests": "2", "failures": "0", "errors": "0", "time": "1.0"}
    assert [child.tag for child in clean] == ["testcase", "testcase", "system-out"]
    first = clean.find("testcase")
    assert list(first.attrib) == ["name", "classname", "time"]
    assert first.attrib == {"name": "a", "classname": "t/clean.t", "time": "0.5"}
    assert first.find("failure") is None
    assert clean.find("system-out").text == "1..2\nok 1 - a\nok 2 - b\n"

    assert broken.attrib["errors"] == "1"
    failure = broken.find("testcase/failure")
    assert list(failure.attrib) == ["type", "message"]
    assert failure.attrib["type"] == "ordinary-test-failure"
    assert failure.attrib["message"] == "not ok 1 - c & <d>"
    assert failure.text == "expected 2\n"


def test_pretty_print_is_still_the_same_document(report):
    pretty = ET.fromstring(report.serialize(pretty_print=True))
    assert [suite.attrib["name"] for suite in pretty] == ["t/clean.t", "t/broken.t"]
    assert pretty.find("testsuite/system-out").text == "1..2\nok 1 - a\nok 2 - b\n"


def test_invalid_code_points_are_replaced(builder):
    report = ReportDocument()
    report.append(builder.build("t", tap("1..1", "ok 1 - bad \udcff byte")))
    data = report.serialize()
    data.decode("utf-8")
    assert ET.fromstring(data).find("testsuite/testcase").attrib["name"] == "bad ? byte"


def test_empty_report():
    assert ET.fromstring(ReportDocument().serialize()).tag == "testsuites"


def test_ok(report, builder):
    assert not report.ok()
    clean = ReportDocument()
    clean.append(builder.build("t", tap("1..1", "ok 1")))
    assert clean.ok()


def test_write(report, tmp_path):
    path = tmp_path / "junit.xml"
    report.write(path)
    assert path.read_bytes() == report.serialize()


def test_write_failure_names_the_path(report, tmp_path):
    path = tmp_path / "missing" / "junit.xml"
    with pytest.raises(HarnessError) as e:
        report.write(path)
    assert str(path) in str(e.value)
    assert e.value.path == path


def test_report_tree_text_and_attributes():
    tree = ReportTree("failure", text="content")
    tree.attributes["type"] = "missing-plan"
    assert tree.to_string() == '<failure type="missing-plan">content</failure>'
    assert ReportTree("testcase").to_string() == "<testcase />"
