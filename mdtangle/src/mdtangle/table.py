from __future__ import annotations

import logging
from typing import Iterable, Iterator, Optional

from mdtangle.errors import Redefinition
from mdtangle.fragments import Fragment

logger = logging.getLogger(__name__)


class MacroTable:
    """Fragments of one document by name. The first definition of a name wins."""

    def __init__(self, fragments: Iterable[Fragment] = ()) -> None:
        self._fragments: dict[str, Fragment] = {}
        self.warnings: list[Redefinition] = []
        for fragment in fragments:
            self.insert(fragment)

    def insert(self, fragment: Fragment) -> bool:
        """Store a fragment unless its name is taken. Returns whether it was stored."""
        if fragment.name in self._fragments:
            logger.warning("Redefinition found for macro %s", fragment.name)
            self.warnings.append(Redefinition(fragment.name, fragment.ordinal))
            return False
        self._fragments[fragment.name] = fragment
        return True

    def lookup(self, name: str) -> Fragment:
        """Return the fragment called ``name``; raises KeyError if undefined."""
        return self._fragments[name]

    def get(self, name: str) -> Optional[Fragment]:
        return self._fragments.get(name)

    def names(self) -> list[str]:
        return list(self._fragments)

    def fragments(self) -> list[Fragment]:
        return list(self._fragments.values())

    def __contains__(self, name: object) -> bool:
        return name in self._fragments

    def __iter__(self) -> Iterator[Fragment]:
        return iter(self._fragments.values())

    def __len__(self) -> int:
        return len(self._fragments)

    def __repr__(self) -> str:
        return f"MacroTable({self.names()!r})"
