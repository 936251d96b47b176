"""Extraction of fragment definitions from Markdown documents.

A fragment is defined by a fenced code block of the configured language whose
first line is a header comment::

    ```rust
    // <<greeting>>=
    println!("hello");
    ```

Code blocks without such a header are not fragments and are ignored.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterator

from markdown_it import MarkdownIt

from mdtangle.config import Config
from mdtangle.errors import MissingIdentifier

logger = logging.getLogger(__name__)

NAME_PATTERN = r"[^<>\n]+"


@lru_cache(maxsize=None)
def header_pattern(comment: str) -> re.Pattern[str]:
    return re.compile(
        rf"\A(?P<lead>[ \t]*{re.escape(comment)}[ \t]*)"
        rf"(?P<definition><<(?P<name>{NAME_PATTERN})>>=)"
        r"(?P<trail>[ \t]*)\r?\n"
    )


@dataclass(frozen=True)
class Fragment:
    """A named block of code, addressable by invocation markers."""

    name: str
    body: str
    ordinal: int = 0

    @classmethod
    def parse(cls, segment: str, comment: str = "//", ordinal: int = 0) -> Fragment:
        """Parse a code segment whose first line is a fragment header.

        The header markup is replaced by the bare name on the header line, so
        ``// <<main>>=`` becomes ``// main``. Later lines are left untouched even
        if they repeat the header text.
        """
        match = header_pattern(comment).match(segment)
        if match is None:
            raise MissingIdentifier(segment)
        name = match.group("name")
        if not name.strip():
            raise MissingIdentifier(segment)
        header_end = match.end("trail")
        header = segment[: match.start("definition")] + name + segment[match.end("definition"):header_end]
        return cls(name=name, body=header + segment[header_end:], ordinal=ordinal)

    def line_count(self) -> int:
        return len(split_lines(self.body))

    def __repr__(self) -> str:
        return f"Fragment(name={self.name!r}, ordinal={self.ordinal}, lines={self.line_count()})"


def split_lines(text: str) -> list[str]:
    """Split text on ``\\n``, dropping a final empty line and trailing ``\\r``."""
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


_markdown = MarkdownIt("commonmark")


def iter_code_segments(text: str, language: str) -> Iterator[str]:
    """Yield the content of every fenced code block tagged with ``language``."""
    for token in _markdown.parse(text):
        if token.type != "fence":
            continue
        info = token.info.split()
        if info and info[0] == language:
            yield token.content


def extract_fragments(text: str, config: Config) -> Iterator[Fragment]:
    """Yield the fragment definitions of a document, in document order."""
    ordinal = 0
    for segment in iter_code_segments(text, config.language):
        try:
            fragment = Fragment.parse(segment, config.comment, ordinal)
        except MissingIdentifier as e:
            logger.debug("Skipping code block: %s", e.message)
            continue
        ordinal += 1
        yield fragment
