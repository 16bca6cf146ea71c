"""Exception hierarchy for snippet extraction."""

from __future__ import annotations


class SnippetExtractionError(RuntimeError):
    """Base class for every error raised by snippet extraction."""


class ConfigError(SnippetExtractionError):
    """Raised when the extraction configuration cannot be loaded."""


class ScanError(SnippetExtractionError):
    """A tag problem in a source file. Aborts the whole run."""

    def __init__(self, message: str, *, source_file: str, line: int, region: str | None = None):
        self.source_file = source_file
        self.line = line
        self.region = region
        super().__init__(f"{source_file}:{line}: {message}")


class UnterminatedRegionError(ScanError):
    """A start tag whose matching end tag never appears before EOF."""


class MalformedTagError(ScanError):
    """A nested start tag or a start tag without a name."""


class UnreadableFileError(SnippetExtractionError):
    """A candidate source file that could not be read. The file is skipped."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read {path}: {reason}")
