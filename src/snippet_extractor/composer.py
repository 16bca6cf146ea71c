"""Resolve prepend references and normalize indentation of scanned regions."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Literal

from snippet_extractor.errors import MalformedTagError
from snippet_extractor.logging import get_logger
from snippet_extractor.models import (
    DEFAULT_BUCKET,
    DEFAULT_LANGUAGE_BUCKETS,
    ComposedSnippet,
    RawRegion,
    RegionKind,
    TagSet,
)
from snippet_extractor.scanner import language_for, read_tag_name

logger = get_logger("composer")


def _indent_width(line: str) -> int:
    return len(line) - len(line.lstrip(" \t"))


def normalize_indentation(lines: Sequence[str]) -> list[str]:
    """Remove the indentation shared by every non-blank line.

    Blank lines, including those at the edges, become empty strings; a body
    with no text at all becomes empty. Relative indentation is preserved.
    """
    widths = [_indent_width(line) for line in lines if line.strip()]
    if not widths:
        return []

    width = min(widths)
    return [line[width:] if line.strip() else "" for line in lines]


def split_references(region: RawRegion, tags: TagSet) -> tuple[list[str], list[str]]:
    """Separate prepend reference lines from a snippet's raw body.

    Returns:
        A tuple of ``(referenced_names, body_lines)``, both in source order.
    """
    names: list[str] = []
    body: list[str] = []
    for offset, line in enumerate(region.raw_lines, start=1):
        if tags.prepend_start not in line:
            body.append(line)
            continue
        name = read_tag_name(line, tags.prepend_start)
        if not name:
            raise MalformedTagError(
                f"prepend reference in snippet '{region.name}' has no name",
                source_file=region.source_file,
                line=region.start_line + offset,
                region=region.name,
            )
        names.append(name)
    return names, body


def build_registry(
    regions: Iterable[RawRegion],
    policy: Literal["last", "first"] = "last",
) -> dict[str, list[str]]:
    """Collect every prepend region into a name -> normalized lines table."""
    registry: dict[str, list[str]] = {}
    origins: dict[str, str] = {}
    for region in regions:
        if region.kind is not RegionKind.PREPEND:
            continue
        location = f"{region.source_file}:{region.start_line}"
        if region.name in registry:
            kept = location if policy == "last" else origins[region.name]
            logger.warning(
                "duplicate prepend '%s' at %s (first seen at %s); keeping %s",
                region.name,
                location,
                origins[region.name],
                kept,
            )
            if policy == "first":
                continue
        registry[region.name] = normalize_indentation(region.raw_lines)
        origins[region.name] = location
    return registry


def compose(
    regions: Sequence[RawRegion],
    tags: TagSet,
    buckets: Mapping[str, str] = DEFAULT_LANGUAGE_BUCKETS,
    default_bucket: str = DEFAULT_BUCKET,
    duplicate_policy: Literal["last", "first"] = "last",
) -> list[ComposedSnippet]:
    """Compose every snippet region, prepends first, in source order.

    The registry is built from all prepend regions before any snippet is
    composed, so a snippet may reference a prepend defined in any file.
    Unknown references contribute nothing.
    """
    registry = build_registry(regions, policy=duplicate_policy)

    snippets: list[ComposedSnippet] = []
    for region in regions:
        if region.kind is not RegionKind.SNIPPET:
            continue

        references, body = split_references(region, tags)
        lines: list[str] = []
        resolved: list[str] = []
        missing: list[str] = []
        for ref in references:
            if ref not in registry:
                logger.info("snippet '%s' references unknown prepend '%s'", region.name, ref)
                missing.append(ref)
                continue
            lines.extend(registry[ref])
            resolved.append(ref)
        lines.extend(normalize_indentation(body))

        snippets.append(
            ComposedSnippet(
                name=region.name,
                language=language_for(region.source_file, buckets, default_bucket),
                source_file=region.source_file,
                prepends=resolved,
                missing_prepends=missing,
                lines=lines,
            )
        )
    return snippets


def find_orphans(regions: Sequence[RawRegion], tags: TagSet) -> list[str]:
    """Return prepend names that no snippet references, in first-seen order."""
    referenced: set[str] = set()
    for region in regions:
        if region.kind is RegionKind.SNIPPET:
            names, _ = split_references(region, tags)
            referenced.update(names)

    orphans: list[str] = []
    for region in regions:
        if region.kind is RegionKind.PREPEND and region.name not in referenced and region.name not in orphans:
            orphans.append(region.name)
    return orphans
