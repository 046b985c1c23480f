"""Unit tests for source document discovery."""

from __future__ import annotations

from pathlib import Path

import pytest

from localesync.errors import PipelineStageError
from localesync.io import discover_source_documents
from localesync.io.discovery import expand_file_patterns, scope_pattern


def _touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("<html></html>", encoding="utf-8")
    return path


def test_scope_glob_finds_nested_html_sorted(tmp_path: Path) -> None:
    """The default scope glob is recursive and only matches `.html` files."""

    _touch(tmp_path / "kor" / "esg" / "z.html")
    _touch(tmp_path / "kor" / "esg" / "deep" / "a.html")
    _touch(tmp_path / "kor" / "esg" / "notes.txt")
    _touch(tmp_path / "kor" / "about" / "b.html")

    found = discover_source_documents(tmp_path, "kor", "esg")

    assert found == [
        (tmp_path / "kor" / "esg" / "deep" / "a.html").resolve(),
        (tmp_path / "kor" / "esg" / "z.html").resolve(),
    ]


def test_explicit_file_patterns_replace_scope_and_deduplicate(tmp_path: Path) -> None:
    """`--files` entries are anchored at the root and overlapping matches collapse."""

    first = _touch(tmp_path / "kor" / "esg" / "a.html")
    _touch(tmp_path / "kor" / "esg" / "b.html")
    other = _touch(tmp_path / "kor" / "about" / "c.html")

    found = discover_source_documents(
        tmp_path,
        "kor",
        "esg",
        files=("kor/esg/a.html", "kor/esg/a*.html", str(other)),
    )

    assert found == sorted([first.resolve(), other.resolve()])


def test_directories_matching_patterns_are_ignored(tmp_path: Path) -> None:
    """Only regular files count as documents."""

    (tmp_path / "kor" / "esg" / "odd.html").mkdir(parents=True)

    with pytest.raises(PipelineStageError) as exc_info:
        discover_source_documents(tmp_path, "kor", "esg")
    assert exc_info.value.stage == "discover"


def test_no_matches_raises_discover_stage_error_with_hint(tmp_path: Path) -> None:
    """An empty match set fails the run before any translation work."""

    with pytest.raises(PipelineStageError) as exc_info:
        discover_source_documents(tmp_path, "kor", "esg")

    error = exc_info.value
    assert error.stage == "discover"
    assert "No source documents match" in error.detail
    assert error.hint is not None and "--scope" in error.hint


def test_pattern_helpers_anchor_relative_entries(tmp_path: Path) -> None:
    """Relative file entries join the root; absolute entries stay as given."""

    assert scope_pattern(tmp_path, "kor", "esg") == str(tmp_path / "kor" / "esg" / "**" / "*.html")
    assert expand_file_patterns(tmp_path, ["kor/a.html", "/abs/b.html"]) == [
        str(tmp_path / "kor/a.html"),
        "/abs/b.html",
    ]
