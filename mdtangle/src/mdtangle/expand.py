"""Expansion of the root fragment into flat text."""

from __future__ import annotations

import logging

from mdtangle.fragments import split_lines
from mdtangle.graph import invocation_pattern
from mdtangle.table import MacroTable

logger = logging.getLogger(__name__)


def indent_lines(text: str, depth: int, unit: str = "    ") -> str:
    """Prefix every line of ``text`` with ``depth`` units; each line ends with ``\\n``."""
    prefix = unit * depth
    return "".join(f"{prefix}{line}\n" for line in split_lines(text))


def expand(
    table: MacroTable,
    root: str = "*",
    comment: str = "//",
    indent_width: int = 4,
    indent_unit: str = "    ",
) -> str:
    """Substitute invocations, starting from the root fragment, until none remain.

    An invocation indented by ``n`` whitespace characters inserts the invoked
    body indented by ``n // indent_width`` units; the remainder is dropped.
    The table must have passed ``build_graph`` and ``check_acyclic``, otherwise
    this may not terminate.
    """
    pattern = invocation_pattern(comment)
    output = table.lookup(root).body
    position = 0
    while True:
        match = pattern.search(output, position)
        if match is None:
            return output
        name = match.group("name")
        fragment = table.get(name)
        if fragment is None:
            raise AssertionError(f"fragment {name!r} vanished after graph check")
        depth = len(match.group("indent")) // indent_width
        logger.debug("Expanding macro %s", name)
        replacement = indent_lines(fragment.body, depth, indent_unit)
        output = output[: match.start()] + replacement + output[match.end():]
        position = match.start()
