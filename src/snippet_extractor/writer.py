"""Serialize composed snippets into ``export default "...";`` modules."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Literal

from snippet_extractor.models import ComposedSnippet

OUTPUT_SUFFIX = ".snippet.js"

MODULE_RE = re.compile(r'export default "(.*?)";$', re.DOTALL)


def render_module(content: str) -> str:
    """Wrap snippet content in a single default-export string literal."""
    escaped = content.replace('"', '\\"').replace("\n", "\\n")
    return f'export default "{escaped}";'


def parse_module(text: str) -> str:
    """Return the snippet content held by a rendered module.

    Text that is not a rendered module is returned unchanged.
    """
    match = MODULE_RE.search(text)
    if not match:
        return text
    return match.group(1).replace("\\n", "\n").replace('\\"', '"')


def output_path(
    snippet: ComposedSnippet,
    output_root: Path,
    structure: Literal["byLanguage", "flat"] = "byLanguage",
) -> Path:
    filename = f"{snippet.name}{OUTPUT_SUFFIX}"
    if structure == "flat":
        return output_root / filename
    return output_root / snippet.language / filename


def write_snippet(
    snippet: ComposedSnippet,
    output_root: Path,
    structure: Literal["byLanguage", "flat"] = "byLanguage",
) -> Path:
    """Write one snippet module to disk and return its path.

    Args:
        snippet: Composed snippet to serialize.
        output_root: Root directory where language folders are created.
        structure: ``byLanguage`` groups files per language bucket, ``flat``
            writes every file directly under ``output_root``.

    Returns:
        The path of the written ``.snippet.js`` file.
    """
    target = output_path(snippet, output_root, structure)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(render_module(snippet.content), encoding="utf-8")
    return target
