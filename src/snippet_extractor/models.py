"""Pydantic models shared across scanning, composition, and writing."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

DEFAULT_LANGUAGE_BUCKETS = {
    ".ts": "typescript",
    ".tsx": "typescript",
    ".js": "js",
    ".jsx": "js",
    ".xml": "xml",
}

DEFAULT_BUCKET = "other"


class _CamelModel(BaseModel):
    """Accept both ``camelCase`` and ``snake_case`` keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TagSet(_CamelModel):
    """The four delimiters marking snippet and prepend boundaries."""

    start: str = ":snippet-start:"
    end: str = ":snippet-end:"
    prepend_start: str = ":prepend-start:"
    prepend_end: str = ":prepend-end:"

    @model_validator(mode="after")
    def check_unambiguous(self) -> TagSet:
        tags = {
            "start": self.start,
            "end": self.end,
            "prependStart": self.prepend_start,
            "prependEnd": self.prepend_end,
        }
        for key, value in tags.items():
            if not value.strip():
                raise ValueError(f"snippet tag '{key}' must not be empty")

        # end and prependEnd may be the same marker (e.g. "// #endregion").
        items = list(tags.items())
        for i, (key_a, tag_a) in enumerate(items):
            for key_b, tag_b in items[i + 1 :]:
                if {key_a, key_b} == {"end", "prependEnd"} and tag_a == tag_b:
                    continue
                if tag_a in tag_b or tag_b in tag_a:
                    raise ValueError(f"snippet tags '{key_a}' and '{key_b}' overlap: {tag_a!r} / {tag_b!r}")
        return self


class RegionKind(str, Enum):
    SNIPPET = "snippet"
    PREPEND = "prepend"


class RawRegion(BaseModel):
    """A tag-delimited region exactly as found in a source file.

    ``start_line`` and ``end_line`` are 1-based and point at the tag lines,
    which are never part of ``raw_lines``.
    """

    model_config = ConfigDict(frozen=True)

    kind: RegionKind
    name: str
    source_file: str
    start_line: int
    end_line: int
    raw_lines: tuple[str, ...] = ()


class ComposedSnippet(BaseModel):
    """A snippet with its prepends resolved and indentation normalized."""

    name: str
    language: str
    source_file: str
    prepends: list[str] = Field(default_factory=list)
    missing_prepends: list[str] = Field(default_factory=list)
    lines: list[str] = Field(default_factory=list)

    @property
    def content(self) -> str:
        return "\n".join(self.lines)


class ExtractionConfig(_CamelModel):
    """Settings for one extraction run."""

    root_directory: Path
    snippet_output_directory: Path
    file_extensions: list[str] = Field(default_factory=lambda: [".ts"])
    exclude: list[str] = Field(default_factory=list)
    output_directory_structure: Literal["byLanguage", "flat"] = "byLanguage"
    snippet_tags: TagSet = Field(default_factory=TagSet)
    language_buckets: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_LANGUAGE_BUCKETS))
    default_bucket: str = DEFAULT_BUCKET
    duplicate_prepends: Literal["last", "first"] = "last"


class ExtractionReport(BaseModel):
    """Outcome of a completed extraction run."""

    files_scanned: int = 0
    snippets: list[ComposedSnippet] = Field(default_factory=list)
    written: list[Path] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
    orphan_prepends: list[str] = Field(default_factory=list)
