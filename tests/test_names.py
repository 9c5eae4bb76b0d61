import pytest

from tap_junit.names import NameRegistry, mangle_name


def test_first_name_is_kept(registry):
    assert registry.resolve("adds numbers") == "adds numbers"


def test_leading_dash_is_stripped(registry):
    assert registry.resolve("- adds numbers") == "adds numbers"
    assert registry.resolve(" -- - spaced") == "spaced"


def test_duplicate_gets_suffix(registry):
    assert registry.resolve("same") == "same"
    assert registry.resolve("same") == "same (2)"
    assert registry.resolve("same") == "same (3)"


def test_counter_never_goes_back(registry):
    registry.resolve("same")
    registry.resolve("same")
    # once the counter moved, every later name carries it
    assert registry.resolve("other") == "other (2)"
    assert registry.next_auto_number == 2


def test_unnamed_cases(registry):
    assert registry.resolve("") == "Unnamed test case 1"
    assert registry.resolve(None) == "Unnamed test case 2"
    assert registry.resolve("-") == "Unnamed test case 3"


def test_seeded_from_existing_names_on_first_use(registry):
    assert registry.resolve("taken", existing=["taken"]) == "taken (2)"
    # later calls do not look at existing names any more
    assert registry.resolve("other", existing=["other (2)"]) == "other (2)"


def test_resolved_name_is_sanitized(registry):
    assert registry.resolve("bad\x01name") == "bad<01>name"


def test_names_are_compared_after_sanitizing(registry):
    assert registry.resolve("a\x01") == "a<01>"
    assert registry.resolve("a<01>") == "a<01> (2)"
    assert registry.resolve("a\x01") == "a<01> (3)"


def test_sanitized_names_are_unique_in_a_suite(builder):
    suite = builder.build("t", "1..2\nok 1 - a\x01\nok 2 - a<01>\n")
    assert suite.case_names() == ["a<01>", "a<01> (2)"]


def test_names_are_unique_over_many_calls():
    registry = NameRegistry()
    proposed = ["a", "b", "", "a", "- a", "a (2)", "", "b", "a (3)", "Unnamed test case 2"] * 5
    names = [registry.resolve(name) for name in proposed]
    assert len(names) == len(set(names))


@pytest.mark.parametrize(
    "mode,name,expected",
    [
        ("hudson", "t/api/basic.t", "t_api_basic_t"),
        ("hudson", "Keep, this 1", "Keep, this 1"),
        ("perl", "./t/api/basic.t", "t.api.basic_t"),
        ("perl", "t/basic.t", "t.basic_t"),
        ("none", "./t/api/basic.t", "./t/api/basic.t"),
    ],
)
def test_mangle_name(mode, name, expected):
    assert mangle_name(name, mode) == expected


def test_mangle_name_rejects_unknown_mode():
    with pytest.raises(ValueError):
        mangle_name("t/basic.t", "java")
