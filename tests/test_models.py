from __future__ import annotations

import pytest
from pydantic import ValidationError

from snippet_extractor.models import ComposedSnippet, ExtractionConfig, RawRegion, RegionKind, TagSet


def test_tag_set_given_defaults_when_created_then_documented_delimiters_are_used() -> None:
    # Given
    # No overrides.

    # When
    tags = TagSet()

    # Then
    assert tags.start == ":snippet-start:"
    assert tags.end == ":snippet-end:"
    assert tags.prepend_start == ":prepend-start:"
    assert tags.prepend_end == ":prepend-end:"


def test_tag_set_given_overlapping_tags_when_created_then_validation_fails() -> None:
    # Given
    overlapping = {"start": "@s", "prepend_start": "@s-prepend"}

    # When
    with pytest.raises(ValidationError, match="overlap"):
        TagSet(**overlapping)

    # Then
    # A start tag hidden inside another tag would be misdetected.


def test_tag_set_given_shared_end_marker_when_created_then_it_is_accepted() -> None:
    # Given
    payload = {
        "start": "// #region snippet:",
        "end": "// #endregion",
        "prependStart": "// #region prepend:",
        "prependEnd": "// #endregion",
    }

    # When
    tags = TagSet.model_validate(payload)

    # Then
    assert tags.end == tags.prepend_end


def test_raw_region_given_instance_when_mutated_then_frozen_model_rejects_it() -> None:
    # Given
    region = RawRegion(kind=RegionKind.SNIPPET, name="a", source_file="a.ts", start_line=1, end_line=3)

    # When
    with pytest.raises(ValidationError):
        region.name = "b"

    # Then
    assert region.name == "a"


def test_composed_snippet_given_lines_when_content_read_then_lines_join_with_newlines() -> None:
    # Given
    snippet = ComposedSnippet(name="a", language="js", source_file="a.js", lines=["one", "", "two"])

    # When
    content = snippet.content

    # Then
    assert content == "one\n\ntwo"


def test_extraction_config_given_camel_case_keys_when_validated_then_fields_are_populated(tmp_path) -> None:
    # Given
    payload = {"rootDirectory": str(tmp_path), "snippetOutputDirectory": str(tmp_path / "out")}

    # When
    config = ExtractionConfig.model_validate(payload)

    # Then
    assert config.root_directory == tmp_path
    assert config.file_extensions == [".ts"]
    assert config.output_directory_structure == "byLanguage"
    assert config.language_buckets[".xml"] == "xml"
