"""Document discovery and writing of tangled output."""

from __future__ import annotations

import difflib
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence

from mdtangle.config import Config
from mdtangle.document import Document
from mdtangle.errors import DocumentIOError, Redefinition, TangleError

logger = logging.getLogger(__name__)


class Context:
    """Context for mdtangle operations: a configuration and a base directory."""

    def __init__(
        self,
        config: Optional[Config] = None,
        base_dir: Optional[str] = None,
    ) -> None:
        self.base_dir = base_dir or os.getcwd()
        self.config = config or Config()

    @staticmethod
    def from_current_dir() -> Context:
        """Create context from current directory, reading its mdtangle.toml."""
        base_dir = os.getcwd()
        return Context(Config.from_dir(base_dir), base_dir)

    @staticmethod
    def default_for_dir(path: str) -> Context:
        """Create context with default config for a specific directory."""
        return Context(Config(), path)

    def source_files(self) -> list[str]:
        """Get source files matching the configuration patterns."""
        base = Path(self.base_dir)
        found = {
            str(path)
            for pattern in self.config.source_patterns
            for path in base.glob(pattern)
            if path.is_file()
        }
        return sorted(found)

    def resolve_path(self, path: str) -> str:
        """Resolve a relative path against the base directory."""
        return str(Path(self.base_dir) / path)

    def __repr__(self) -> str:
        return f"Context(base_dir={self.base_dir!r}, config={self.config!r})"


@dataclass(frozen=True)
class WriteFile:
    target: str
    content: str
    source: str

    def describe(self) -> str:
        return f"write {self.target} (from {self.source})"


class Transaction:
    """Pending file writes produced by tangling."""

    def __init__(self, actions: Sequence[WriteFile] = ()) -> None:
        self.actions: list[WriteFile] = list(actions)

    def add(self, action: WriteFile) -> None:
        self.actions.append(action)

    def is_empty(self) -> bool:
        return not self.actions

    def describe(self) -> list[str]:
        """Get descriptions of all actions."""
        return [action.describe() for action in self.actions]

    def diffs(self) -> list[str]:
        """Unified diffs of each pending write against the file on disk."""
        result = []
        for action in self.actions:
            target = Path(action.target)
            old = target.read_bytes().decode("utf-8", errors="replace") if target.is_file() else ""
            diff = "".join(
                difflib.unified_diff(
                    old.splitlines(keepends=True),
                    action.content.splitlines(keepends=True),
                    fromfile=f"a/{action.target}",
                    tofile=f"b/{action.target}",
                )
            )
            if diff:
                result.append(diff)
        return result

    def __len__(self) -> int:
        return len(self.actions)

    def __iter__(self):
        return iter(self.actions)

    def __repr__(self) -> str:
        return f"Transaction(actions={len(self.actions)})"


@dataclass
class TangleReport:
    """Outcome of tangling several documents."""

    transaction: Transaction = field(default_factory=Transaction)
    failures: list[tuple[str, TangleError]] = field(default_factory=list)
    warnings: list[tuple[str, Redefinition]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def _tangle_one(path: str, config: Config) -> tuple[WriteFile, list[Redefinition]]:
    logger.info("Tangling %s", path)
    document = Document.load(path, config)
    content = document.tangle()
    return WriteFile(str(document.output_path()), content, path), document.warnings


def tangle_files(ctx: Context, files: Sequence[str], jobs: int = 1) -> TangleReport:
    """Tangle the given documents; a failing document does not stop the others."""
    report = TangleReport()
    paths = [str(Path(ctx.base_dir) / f) for f in files]
    config = ctx.config
    if config.output_dir and not Path(config.output_dir).is_absolute():
        config = config.copy(output_dir=ctx.resolve_path(config.output_dir))

    def run(path: str):
        try:
            return _tangle_one(path, config)
        except TangleError as e:
            return e

    if jobs > 1 and len(paths) > 1:
        with ThreadPoolExecutor(max_workers=jobs) as pool:
            outcomes = list(pool.map(run, paths))
    else:
        outcomes = [run(path) for path in paths]

    for path, outcome in zip(paths, outcomes):
        if isinstance(outcome, TangleError):
            logger.error("%s", outcome)
            report.failures.append((path, outcome))
            continue
        action, warnings = outcome
        report.warnings.extend((path, warning) for warning in warnings)
        report.transaction.add(action)
    return report


def tangle_documents(ctx: Context, jobs: int = 1) -> TangleReport:
    """Tangle all documents in the context."""
    return tangle_files(ctx, ctx.source_files(), jobs=jobs)


def execute_transaction(
    transaction: Transaction,
    force: bool = False,
    report: Optional[TangleReport] = None,
) -> list[str]:
    """Write the pending files, skipping unchanged ones unless forced.

    A write that fails does not stop the remaining writes. Failures are added
    to ``report`` when one is given; otherwise the first failure is raised
    once every other action has been attempted.
    """
    written = []
    failures: list[tuple[str, TangleError]] = []
    for action in transaction:
        target = Path(action.target)
        data = action.content.encode("utf-8")
        try:
            if not force and target.is_file() and target.read_bytes() == data:
                logger.debug("%s is up to date", target)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as e:
            error = DocumentIOError(str(target), e)
            logger.error("%s", error)
            failures.append((action.source, error))
            continue
        logger.info("Writing output of %s to %s", action.source, target)
        written.append(str(target))
    if report is not None:
        report.failures.extend(failures)
    elif failures:
        raise failures[0][1]
    return written
