"""Configuration for mdtangle.

A configuration is read from ``mdtangle.toml`` in the project directory, either
as top-level keys or under a ``[tangle]`` table:

    language = "python"
    indent_width = 4
    source_patterns = ["docs/**/*.md"]
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any, Optional

from mdtangle.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "mdtangle.toml"

# language tag -> (file extension, single-line comment marker)
LANGUAGES: dict[str, tuple[str, str]] = {
    "rust": (".rs", "//"),
    "c": (".c", "//"),
    "cpp": (".cpp", "//"),
    "go": (".go", "//"),
    "java": (".java", "//"),
    "javascript": (".js", "//"),
    "typescript": (".ts", "//"),
    "kotlin": (".kt", "//"),
    "swift": (".swift", "//"),
    "zig": (".zig", "//"),
    "python": (".py", "#"),
    "ruby": (".rb", "#"),
    "bash": (".sh", "#"),
    "sh": (".sh", "#"),
    "toml": (".toml", "#"),
    "yaml": (".yaml", "#"),
    "lua": (".lua", "--"),
    "sql": (".sql", "--"),
    "haskell": (".hs", "--"),
}

_KEYS = {
    "language",
    "comment",
    "extension",
    "indent_width",
    "indent_unit",
    "root",
    "source_patterns",
    "output_dir",
}


class Config:
    """Configuration for tangling."""

    def __init__(
        self,
        language: str = "rust",
        comment: Optional[str] = None,
        extension: Optional[str] = None,
        indent_width: int = 4,
        indent_unit: Optional[str] = None,
        root: str = "*",
        source_patterns: Optional[list[str]] = None,
        output_dir: Optional[str] = None,
    ) -> None:
        self._comment: Optional[str] = None
        self._extension: Optional[str] = None
        self._indent_unit: Optional[str] = None
        self.language = language
        self.comment = comment
        self.extension = extension
        self.indent_width = indent_width
        self.indent_unit = indent_unit
        self.root = root
        self.source_patterns = source_patterns if source_patterns is not None else ["src/**/*.md"]
        self.output_dir = output_dir

    @property
    def language(self) -> str:
        """Fence info tag selecting the code blocks to scan."""
        return self._language

    @language.setter
    def language(self, value: str) -> None:
        if not isinstance(value, str) or not value.strip() or any(c.isspace() for c in value):
            raise ConfigError(f"invalid language tag: {value!r}")
        self._language = value

    @property
    def comment(self) -> str:
        """Single-line comment marker introducing headers and invocations."""
        if self._comment is not None:
            return self._comment
        return LANGUAGES.get(self._language, ("", "//"))[1]

    @comment.setter
    def comment(self, value: Optional[str]) -> None:
        if value is not None and (not isinstance(value, str) or not value.strip()):
            raise ConfigError(f"invalid comment marker: {value!r}")
        self._comment = value

    @property
    def extension(self) -> str:
        """File extension of tangled output, including the leading dot."""
        if self._extension is not None:
            return self._extension
        known = LANGUAGES.get(self._language)
        return known[0] if known else f".{self._language}"

    @extension.setter
    def extension(self, value: Optional[str]) -> None:
        if value is not None:
            if not isinstance(value, str) or not value or "/" in value:
                raise ConfigError(f"invalid extension: {value!r}")
            if not value.startswith("."):
                value = "." + value
        self._extension = value

    @property
    def indent_width(self) -> int:
        return self._indent_width

    @indent_width.setter
    def indent_width(self, value: int) -> None:
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ConfigError(f"indent_width must be a positive integer, got {value!r}")
        self._indent_width = value

    @property
    def indent_unit(self) -> str:
        """Text prepended once per indentation level."""
        if self._indent_unit is not None:
            return self._indent_unit
        return " " * self._indent_width

    @indent_unit.setter
    def indent_unit(self, value: Optional[str]) -> None:
        if value is not None and (not isinstance(value, str) or value.strip()):
            raise ConfigError(f"indent_unit must be whitespace, got {value!r}")
        self._indent_unit = value

    @property
    def root(self) -> str:
        return self._root

    @root.setter
    def root(self, value: str) -> None:
        if not isinstance(value, str) or not value or "<" in value or ">" in value:
            raise ConfigError(f"invalid root fragment name: {value!r}")
        self._root = value

    @property
    def source_patterns(self) -> list[str]:
        """Glob patterns, relative to the base directory, of documents to tangle."""
        return list(self._source_patterns)

    @source_patterns.setter
    def source_patterns(self, patterns: list[str]) -> None:
        if not isinstance(patterns, (list, tuple)) or not all(isinstance(p, str) and p for p in patterns):
            raise ConfigError(f"source_patterns must be a list of globs, got {patterns!r}")
        self._source_patterns = list(patterns)

    @property
    def output_dir(self) -> Optional[str]:
        return self._output_dir

    @output_dir.setter
    def output_dir(self, value: Optional[str]) -> None:
        if value is not None and not isinstance(value, str):
            raise ConfigError(f"output_dir must be a path, got {value!r}")
        self._output_dir = value

    @staticmethod
    def from_mapping(data: dict[str, Any]) -> Config:
        """Build a configuration from a parsed TOML mapping."""
        if isinstance(data.get("tangle"), dict):
            data = data["tangle"]
        unknown = set(data) - _KEYS
        if unknown:
            raise ConfigError(f"unknown configuration keys: {', '.join(sorted(unknown))}")
        return Config(**data)

    @staticmethod
    def from_file(path: str) -> Config:
        """Load configuration from a specific file."""
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except OSError as e:
            raise ConfigError(f"cannot read {path}: {e.strerror or e}") from e
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"invalid TOML in {path}: {e}") from e
        logger.debug("Loaded configuration from %s", path)
        return Config.from_mapping(data)

    @staticmethod
    def from_dir(path: str) -> Config:
        """Load configuration from a directory, falling back to defaults."""
        candidate = Path(path) / CONFIG_FILENAME
        if candidate.is_file():
            return Config.from_file(str(candidate))
        return Config()

    def copy(self, **overrides: Any) -> Config:
        values = {
            "language": self._language,
            "comment": self._comment,
            "extension": self._extension,
            "indent_width": self._indent_width,
            "indent_unit": self._indent_unit,
            "root": self._root,
            "source_patterns": self.source_patterns,
            "output_dir": self._output_dir,
        }
        unknown = set(overrides) - _KEYS
        if unknown:
            raise ConfigError(f"unknown configuration keys: {', '.join(sorted(unknown))}")
        values.update(overrides)
        return Config(**values)

    def __repr__(self) -> str:
        return (
            f"Config(language={self.language!r}, comment={self.comment!r}, "
            f"extension={self.extension!r}, indent_width={self.indent_width}, "
            f"root={self.root!r}, source_patterns={self.source_patterns!r})"
        )
