import dataclasses

from tap_junit.events import Comment, Directive, Other, Plan, Test, Unknown, parse_tap, split_lines


def test_event_types():
    events = parse_tap(
        "TAP version 13\n"
        "1..4\n"
        "# setting up\n"
        "ok 1 - first\n"
        "not ok 2 - second\n"
        "ok 3 # SKIP no database\n"
        "not ok 4 - later # TODO not implemented\n"
        "random noise\n"
        "Bail out! giving up\n"
    )
    assert [type(event) for event in events] == [Other, Plan, Comment, Test, Test, Test, Test, Unknown, Other]
    assert events[1].tests_planned == 4
    assert events[2].text == "setting up"
    assert events[3] == Test(ok=True, description="- first", directive=Directive.NONE, raw="ok 1 - first")
    assert events[4].ok is False
    assert events[5].directive == Directive.SKIP
    assert events[6].directive == Directive.TODO
    assert events[7].raw == "random noise"


def test_comment_without_marker_is_not_aggregated():
    (event,) = parse_tap("#tight\n")
    assert event == Comment(text=None, raw="#tight")


def test_rejected_version_is_unknown():
    (event,) = parse_tap("TAP version 12\n")
    assert event == Unknown(raw="TAP version 12")


def test_raw_text_is_kept_verbatim():
    events = parse_tap("ok 1 - with \x07 bell\r\n")
    assert events[0].raw == "ok 1 - with \x07 bell"


def test_split_lines_only_on_newline():
    assert split_lines("a\x0bb\x0cc\x1cd\n") == ["a\x0bb\x0cc\x1cd"]
    assert split_lines("a\nb") == ["a", "b"]
    assert split_lines("\n") == [""]
    assert split_lines("a\n\nb\n") == ["a", "", "b"]


def test_escaped_hash_stays_in_description():
    (event,) = parse_tap("ok 4 - a \\# b\n")
    assert event == Test(ok=True, description="- a # b", directive=Directive.NONE, raw="ok 4 - a \\# b")


def test_escaped_hash_before_directive():
    (event,) = parse_tap("not ok 5 - c \\# d # TODO later\n")
    assert event.description == "- c # d"
    assert event.directive == Directive.TODO


def test_test_event_is_not_collected():
    assert Test.__test__ is False
    assert [field.name for field in dataclasses.fields(Test)] == ["ok", "description", "directive", "raw"]

