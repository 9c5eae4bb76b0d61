from __future__ import annotations

import logging
import re
from typing import Iterable, Set

from tap_junit.sanitize import xmlsafe

logger = logging.getLogger(__name__)

NAME_MANGLE_MODES = ("hudson", "perl", "none")

_LEADING_DASHES = re.compile(r"^[\s-]*")


def mangle_name(name: str, mode: str) -> str:
    """Turn a test file label into the suite name JUnit consumers see."""
    if mode == "hudson":
        # Older Hudson releases built result URLs from the suite name without
        # escaping it, so anything that is not plain text has to go.
        return re.sub(r"[^a-zA-Z0-9, ]", "_", name)
    if mode == "perl":
        # t/api/basic.t -> t.api.basic_t, resembling a Java class hierarchy
        name = re.sub(r"^[./]*", "", name)
        name = name.replace(".", "_")
        return name.replace("/", ".")
    if mode == "none":
        return name
    raise ValueError("Unknown name mangling mode {!r} -- use one of {}".format(mode, ", ".join(NAME_MANGLE_MODES)))


class NameRegistry:
    """Hands out test case names that are unique across a whole report.

    The auto number is shared by every suite of a session and never goes back,
    so a repeated description gets a strictly increasing ``(n)`` suffix.
    """

    def __init__(self):
        self.used_names: Set[str] = set()
        self.next_auto_number: int = 1
        self.initialized: bool = False

    def resolve(self, proposed: str | None, existing: Iterable[str] = ()) -> str:
        if not self.initialized:
            self.used_names.update(existing)
            self.initialized = True

        # Test::More style producers prefix descriptions with "- "
        name = xmlsafe(_LEADING_DASHES.sub("", proposed or ""))

        while True:
            number = self.next_auto_number
            if name:
                candidate = name + (" ({})".format(number) if number > 1 else "")
            else:
                candidate = "Unnamed test case {}".format(number)
            if candidate not in self.used_names:
                break
            self.next_auto_number += 1

        if candidate != name:
            logger.debug(f"Renamed test case {proposed!r} to {candidate!r}")
        # names are compared in the form they are written to the report
        self.used_names.add(candidate)
        return candidate
