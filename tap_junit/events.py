from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Union

from tap.parser import Parser

_COMMENT = re.compile(r"^# (.*)")
# The parser ends a description at the first "#", even an escaped one, so
# escaped hashes are hidden from it and restored as plain "#" afterwards.
_ESCAPED_HASH = "\\#"
_HASH_PLACEHOLDER = "\ue000"


class Directive(Enum):
    NONE = "none"
    TODO = "TODO"
    SKIP = "SKIP"


@dataclass(frozen=True)
class Plan:
    tests_planned: int
    raw: str


@dataclass(frozen=True)
class Test:
    __test__ = False

    ok: bool
    description: str
    directive: Directive
    raw: str


@dataclass(frozen=True)
class Comment:
    # None when the line starts with "#" but not with the "# " marker
    text: Optional[str]
    raw: str


@dataclass(frozen=True)
class Unknown:
    raw: str


@dataclass(frozen=True)
class Other:
    """Bail out lines, version lines and anything else that is only logged."""

    raw: str


TapEvent = Union[Plan, Test, Comment, Unknown, Other]


def _directive(result) -> Directive:
    if result.todo:
        return Directive.TODO
    if result.skip:
        return Directive.SKIP
    return Directive.NONE


def to_event(line, raw: str) -> TapEvent:
    """Convert one line object of the ``tap`` parser into a TapEvent."""
    category = line.category
    if category == "plan":
        return Plan(tests_planned=line.expected_tests, raw=raw)
    if category == "test":
        return Test(
            ok=bool(line.ok),
            description=(line.description or "").replace(_HASH_PLACEHOLDER, "#"),
            directive=_directive(line),
            raw=raw,
        )
    if category == "diagnostic":
        match = _COMMENT.match(raw)
        return Comment(text=match.group(1) if match else None, raw=raw)
    if category == "unknown":
        return Unknown(raw=raw)
    return Other(raw=raw)


def split_lines(text: str) -> List[str]:
    # Only "\n" ends a TAP line. str.splitlines() would also break on the
    # control characters the sanitizer is supposed to make visible.
    lines = text.split("\n")
    if lines and lines[-1] == "" and len(lines) > 1:
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def parse_line(parser: Parser, raw: str) -> TapEvent:
    try:
        line = parser.parse_line(raw.replace(_ESCAPED_HASH, _HASH_PLACEHOLDER))
    except ValueError:
        # e.g. "TAP version 12", which the parser refuses outright
        return Unknown(raw=raw)
    return to_event(line, raw)


def parse_tap(text: str) -> List[TapEvent]:
    """Parse raw TAP output into a replayable list of events."""
    parser = Parser()
    return [parse_line(parser, line) for line in split_lines(text)]
