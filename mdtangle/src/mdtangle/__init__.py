"""mdtangle - Literate Programming Tangler.

This package extracts named code fragments from the fenced code blocks of
Markdown documents and expands the root fragment ``<<*>>`` of each document
into a source file, substituting fragment invocations in place.

Example:
    >>> from mdtangle import Context, tangle_documents, execute_transaction
    >>> ctx = Context.from_current_dir()
    >>> report = tangle_documents(ctx)
    >>> if report.ok:
    ...     execute_transaction(report.transaction)
"""

from mdtangle.config import Config
from mdtangle.context import (
    Context,
    TangleReport,
    Transaction,
    WriteFile,
    execute_transaction,
    tangle_documents,
    tangle_files,
)
from mdtangle.document import Document, tangle_text
from mdtangle.errors import (
    ConfigError,
    CyclicInclusion,
    DocumentIOError,
    MissingIdentifier,
    ParseError,
    Redefinition,
    RootMissing,
    TangleError,
    UndefinedFragment,
)
from mdtangle.fragments import Fragment
from mdtangle.table import MacroTable

__all__ = [
    "Config",
    "Context",
    "Transaction",
    "TangleReport",
    "WriteFile",
    "Document",
    "Fragment",
    "MacroTable",
    "tangle_documents",
    "tangle_files",
    "tangle_text",
    "execute_transaction",
    "ConfigError",
    "TangleError",
    "ParseError",
    "MissingIdentifier",
    "UndefinedFragment",
    "CyclicInclusion",
    "RootMissing",
    "DocumentIOError",
    "Redefinition",
    "main",
]

__version__ = "0.1.0"


def main() -> int:
    """CLI entry point."""
    from mdtangle.cli import main as cli_main
    return cli_main()
