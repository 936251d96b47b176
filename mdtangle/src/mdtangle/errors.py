"""Error kinds raised while tangling a document."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence


class ConfigError(ValueError):
    """Invalid configuration value or file."""


class TangleError(RuntimeError):
    """Base class for failures scoped to a single document."""

    def __init__(self, message: str, document: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.document = document

    def __str__(self) -> str:
        if self.document:
            return f"{self.document}: {self.message}"
        return self.message


class ParseError(TangleError):
    pass


class MissingIdentifier(ParseError):
    """A code segment does not start with a fragment header."""

    def __init__(self, segment: str) -> None:
        first_line = segment.split("\n", 1)[0]
        super().__init__(f"no fragment header in segment starting with {first_line!r}")
        self.segment = segment


class UndefinedFragment(TangleError):
    """A fragment invokes a name that is not defined in the document."""

    def __init__(self, fragment: str, name: str) -> None:
        super().__init__(f"fragment {fragment!r} invokes undefined fragment {name!r}")
        self.fragment = fragment
        self.name = name


class CyclicInclusion(TangleError):
    """The fragments of a document invoke each other in a cycle."""

    def __init__(self, cycle: Sequence[str]) -> None:
        self.cycle = list(cycle)
        path = " -> ".join(self.cycle + self.cycle[:1])
        super().__init__(f"cyclic inclusion: {path}")
        self.fragment = self.cycle[0]


class RootMissing(TangleError):
    """The document has no root fragment."""

    def __init__(self, name: str = "*") -> None:
        super().__init__(f"no root fragment <<{name}>> found")
        self.name = name


class DocumentIOError(TangleError):
    """Reading a document or writing its output failed."""

    def __init__(self, path: str, error: OSError) -> None:
        super().__init__(f"{error.strerror or error}", document=path)
        self.error = error


@dataclass(frozen=True)
class Redefinition:
    """Warning: a fragment name was defined again and the later body ignored."""

    name: str
    ordinal: int

    def __str__(self) -> str:
        return f"redefinition of fragment {self.name!r} ignored"
