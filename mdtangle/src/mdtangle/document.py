"""A parsed Markdown document and the tangle pipeline run over it."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

from mdtangle.config import Config
from mdtangle.errors import DocumentIOError, Redefinition, RootMissing, TangleError
from mdtangle.expand import expand
from mdtangle.fragments import Fragment, extract_fragments
from mdtangle.graph import build_graph, check_acyclic, iter_invocations
from mdtangle.table import MacroTable

logger = logging.getLogger(__name__)


class Document:
    """A parsed markdown document."""

    def __init__(self, table: MacroTable, path: Optional[str], config: Config) -> None:
        self.table = table
        self.path = path
        self.config = config

    @staticmethod
    def parse(
        content: str,
        path: Optional[str] = None,
        config: Optional[Config] = None,
    ) -> Document:
        """Parse markdown content directly."""
        config = config or Config()
        table = MacroTable(extract_fragments(content, config))
        return Document(table, path, config)

    @staticmethod
    def load(path: str, config: Optional[Config] = None) -> Document:
        """Load a document from a file."""
        try:
            content = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise DocumentIOError(str(path), e) from e
        except UnicodeDecodeError as e:
            raise DocumentIOError(str(path), OSError(str(e))) from e
        return Document.parse(content, str(path), config)

    @property
    def identity(self) -> str:
        return self.path or "<string>"

    @property
    def warnings(self) -> list[Redefinition]:
        return list(self.table.warnings)

    def fragments(self) -> list[Fragment]:
        return self.table.fragments()

    def names(self) -> list[str]:
        return self.table.names()

    def get(self, name: str) -> Optional[Fragment]:
        return self.table.get(name)

    def roots(self) -> list[str]:
        """Names of fragments that no other fragment invokes."""
        invoked = {
            invocation.name
            for fragment in self.table
            for invocation in iter_invocations(fragment.body, self.config.comment)
        }
        return [name for name in self.table.names() if name not in invoked]

    def tangle(self) -> str:
        """Expand the root fragment; raises a TangleError naming this document."""
        try:
            check_acyclic(build_graph(self.table, self.config.comment))
            if self.config.root not in self.table:
                raise RootMissing(self.config.root)
            return expand(
                self.table,
                root=self.config.root,
                comment=self.config.comment,
                indent_width=self.config.indent_width,
                indent_unit=self.config.indent_unit,
            )
        except TangleError as e:
            if e.document is None:
                e.document = self.identity
            raise

    def output_path(self) -> Optional[Path]:
        """File the tangled output is written to: the stem plus the language extension."""
        if self.path is None:
            return None
        source = Path(self.path)
        directory = Path(self.config.output_dir) if self.config.output_dir else source.parent
        return directory / (source.stem + self.config.extension)

    def __len__(self) -> int:
        return len(self.table)

    def __repr__(self) -> str:
        return f"Document(path={self.path!r}, fragments={len(self)})"


def tangle_text(content: str, config: Optional[Config] = None, **overrides: Any) -> str:
    """Tangle markdown content and return the expanded root fragment.

    >>> tangle_text("```python\\n# <<*>>=\\nprint('hi')\\n```\\n", language="python")
    "# *\\nprint('hi')\\n"
    """
    config = config or Config()
    if overrides:
        config = config.copy(**overrides)
    return Document.parse(content, config=config).tangle()
