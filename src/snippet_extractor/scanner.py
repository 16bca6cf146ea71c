from __future__ import annotations

import re
from collections.abc import Mapping
from pathlib import Path

from snippet_extractor.errors import MalformedTagError, UnterminatedRegionError
from snippet_extractor.logging import get_logger
from snippet_extractor.models import DEFAULT_BUCKET, DEFAULT_LANGUAGE_BUCKETS, RawRegion, RegionKind, TagSet

logger = get_logger("scanner")

OUTSIDE = "outside"
IN_SNIPPET = "in-snippet"
IN_PREPEND = "in-prepend"

COMMENT_CLOSER_RE = re.compile(r"\s*(\*/|-->)$")


def language_for(
    file_path: str | Path,
    buckets: Mapping[str, str] = DEFAULT_LANGUAGE_BUCKETS,
    default: str = DEFAULT_BUCKET,
) -> str:
    suffix = Path(file_path).suffix.lower()
    return buckets.get(suffix, default)


def read_tag_name(line: str, tag: str) -> str:
    """Return the rest of ``line`` after ``tag``, minus a trailing comment closer.

    Surrounding whitespace is trimmed, inner whitespace is part of the name.
    """
    rest = line.split(tag, 1)[1].strip()
    return COMMENT_CLOSER_RE.sub("", rest).strip()


def split_lines(file_text: str) -> list[str]:
    """Split on ``\\n`` only, so form feeds and Unicode separators stay in the line."""
    lines = file_text.split("\n")
    if file_text.endswith("\n"):
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def _open_region(line: str, tag: str, kind: RegionKind, source_file: str, line_no: int) -> str:
    name = read_tag_name(line, tag)
    if not name:
        raise MalformedTagError(f"{kind.value} start tag has no name", source_file=source_file, line=line_no)
    if "/" in name or "\\" in name:
        raise MalformedTagError(
            f"{kind.value} name must not contain a path separator: {name!r}",
            source_file=source_file,
            line=line_no,
            region=name,
        )
    return name


def scan(file_text: str, tags: TagSet, source_file: str = "<string>") -> list[RawRegion]:
    """Find every snippet and prepend region in ``file_text`` in source order.

    Lines inside a snippet that carry ``tags.prepend_start`` are prepend
    references; they stay in the raw body for the composer to resolve.

    Raises:
        MalformedTagError: On a nested start tag, or a start tag or prepend
            reference with no name.
        UnterminatedRegionError: When EOF is reached inside a region.
    """
    regions: list[RawRegion] = []

    state = OUTSIDE
    name = ""
    start_line = 0
    buffer: list[str] = []

    for line_no, line in enumerate(split_lines(file_text), start=1):
        if state == OUTSIDE:
            if tags.prepend_start in line:
                name = _open_region(line, tags.prepend_start, RegionKind.PREPEND, source_file, line_no)
                state, start_line, buffer = IN_PREPEND, line_no, []
            elif tags.start in line:
                name = _open_region(line, tags.start, RegionKind.SNIPPET, source_file, line_no)
                state, start_line, buffer = IN_SNIPPET, line_no, []
            elif tags.end in line or tags.prepend_end in line:
                logger.warning("%s:%d: end tag outside of any region, ignored", source_file, line_no)
            continue

        if state == IN_SNIPPET:
            if tags.end in line:
                regions.append(
                    RawRegion(
                        kind=RegionKind.SNIPPET,
                        name=name,
                        source_file=source_file,
                        start_line=start_line,
                        end_line=line_no,
                        raw_lines=tuple(buffer),
                    )
                )
                state = OUTSIDE
                continue
            if tags.start in line:
                raise MalformedTagError(
                    f"snippet start tag inside snippet '{name}' (nesting is not supported)",
                    source_file=source_file,
                    line=line_no,
                    region=name,
                )
            if tags.prepend_start in line and not read_tag_name(line, tags.prepend_start):
                raise MalformedTagError(
                    f"prepend reference in snippet '{name}' has no name",
                    source_file=source_file,
                    line=line_no,
                    region=name,
                )
            buffer.append(line)
            continue

        # IN_PREPEND
        if tags.prepend_end in line:
            regions.append(
                RawRegion(
                    kind=RegionKind.PREPEND,
                    name=name,
                    source_file=source_file,
                    start_line=start_line,
                    end_line=line_no,
                    raw_lines=tuple(buffer),
                )
            )
            state = OUTSIDE
            continue
        if tags.start in line or tags.prepend_start in line:
            raise MalformedTagError(
                f"start tag inside prepend '{name}' (nesting is not supported)",
                source_file=source_file,
                line=line_no,
                region=name,
            )
        buffer.append(line)

    if state != OUTSIDE:
        kind = "snippet" if state == IN_SNIPPET else "prepend"
        raise UnterminatedRegionError(
            f"{kind} '{name}' started here is never closed",
            source_file=source_file,
            line=start_line,
            region=name,
        )

    logger.debug("%s: %d region(s)", source_file, len(regions))
    return regions
