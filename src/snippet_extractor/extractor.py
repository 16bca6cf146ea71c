"""Run a full extraction: walk, scan, compose, and write snippets."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from snippet_extractor.composer import compose, find_orphans
from snippet_extractor.logging import get_logger
from snippet_extractor.models import ExtractionConfig, ExtractionReport, RawRegion
from snippet_extractor.scanner import scan
from snippet_extractor.walker import collect_source_files
from snippet_extractor.writer import output_path, write_snippet

logger = get_logger("extractor")


class SnippetExtractor:
    """Extract every tagged snippet under a root directory."""

    def __init__(self, config: ExtractionConfig):
        self.config = config

    def scan_tree(self, progress_callback: Callable[[str], None] | None = None) -> tuple[list[RawRegion], int, list[str]]:
        """Scan every candidate file and return regions in walk order.

        Any scanner error propagates, so nothing is composed or written for
        a tree holding a malformed or unterminated region.

        Returns:
            A tuple of ``(regions, files_scanned, skipped_paths)``.
        """
        config = self.config
        if progress_callback:
            progress_callback(f"walking {config.root_directory}")
        files, unreadable = collect_source_files(
            root=config.root_directory,
            extensions=config.file_extensions,
            exclude=config.exclude,
            skip_dirs=[config.snippet_output_directory],
        )

        regions: list[RawRegion] = []
        for source in files:
            regions.extend(scan(source.text, config.snippet_tags, source_file=source.relative_path))
        logger.debug("scanned %d file(s), found %d region(s)", len(files), len(regions))
        return regions, len(files), [error.path for error in unreadable]

    def extract_snippets(
        self,
        dry_run: bool = False,
        progress_callback: Callable[[str], None] | None = None,
    ) -> ExtractionReport:
        """Compose every snippet in the tree and write it to the output directory.

        Args:
            dry_run: Compose snippets and compute paths without writing files.
            progress_callback: Optional sink for short progress messages.

        Returns:
            A report of scanned files, composed snippets, and written paths.
        """
        config = self.config
        regions, files_scanned, skipped = self.scan_tree(progress_callback)

        if progress_callback:
            progress_callback(f"composing snippets from {len(regions)} region(s)")
        snippets = compose(
            regions,
            config.snippet_tags,
            buckets=config.language_buckets,
            default_bucket=config.default_bucket,
            duplicate_policy=config.duplicate_prepends,
        )
        orphans = find_orphans(regions, config.snippet_tags)
        for name in orphans:
            logger.debug("prepend '%s' is never referenced", name)

        targets: dict[Path, str] = {}
        for snippet in snippets:
            target = output_path(snippet, config.snippet_output_directory, config.output_directory_structure)
            if target in targets:
                logger.warning(
                    "snippet '%s' from %s overwrites the one from %s",
                    snippet.name,
                    snippet.source_file,
                    targets[target],
                )
            targets[target] = snippet.source_file

        written: list[Path] = []
        if not dry_run:
            if progress_callback:
                progress_callback(f"writing {len(snippets)} snippet(s)")
            for snippet in snippets:
                path = write_snippet(snippet, config.snippet_output_directory, config.output_directory_structure)
                if path not in written:
                    written.append(path)

        logger.info(
            "extracted %d snippet(s) from %d file(s) into %s",
            len(snippets),
            files_scanned,
            config.snippet_output_directory,
        )
        return ExtractionReport(
            files_scanned=files_scanned,
            snippets=snippets,
            written=written,
            skipped=skipped,
            orphan_prepends=orphans,
        )
