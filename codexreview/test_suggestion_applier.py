#!/usr/bin/env python3
"""Unit tests for SuggestionApplier."""

from unittest.mock import patch

import pytest

from codexreview.models import Suggestion
from codexreview.suggestion_applier import (
    REASON_FILE_NOT_FOUND,
    REASON_MISSING_FIELDS,
    REASON_NO_STRATEGY,
    REASON_ORIGINAL_NOT_FOUND,
    REASON_OVERLAP,
    FileSystem,
    LocalFileSystem,
    SuggestionApplier,
    splice_lines,
)


class MemoryFileSystem(FileSystem):
    """In-memory files keyed by path."""

    def __init__(self, files=None):
        self.files = dict(files or {})
        self.writes = []

    def exists(self, path):
        return path in self.files

    def read_text(self, path):
        return self.files[path]

    def write_text(self, path, content):
        self.writes.append(path)
        self.files[path] = content


def _suggestion(index=0, **data):
    return Suggestion.from_dict(data, index)


class TestApplySingle:
    def test_line_range_splice(self):
        fs = MemoryFileSystem({"f.txt": "a\nb\nc\nd"})
        applier = SuggestionApplier(fs)

        ok, reason = applier.apply(_suggestion(file="f.txt", line_start=2, line_end=3, suggested_code="X\nY\nZ"))

        assert ok is True
        assert reason == ""
        assert fs.files["f.txt"] == "a\nX\nY\nZ\nd"

    def test_line_range_with_shorter_replacement(self):
        fs = MemoryFileSystem({"f.txt": "a\nb\nc\nd"})
        SuggestionApplier(fs).apply(_suggestion(file="f.txt", line_start=1, line_end=3, suggested_code="Q"))
        assert fs.files["f.txt"] == "Q\nd"

    def test_line_range_takes_priority_over_original_code(self):
        fs = MemoryFileSystem({"f.txt": "a\nb\nc"})
        SuggestionApplier(fs).apply(_suggestion(
            file="f.txt", line_start=3, line_end=3, original_code="a", suggested_code="C",
        ))
        assert fs.files["f.txt"] == "a\nb\nC"

    def test_substring_replacement(self):
        fs = MemoryFileSystem({"app.js": "foo(bar)"})
        ok, _ = SuggestionApplier(fs).apply(_suggestion(file="app.js", original_code="bar", suggested_code="baz"))
        assert ok is True
        assert fs.files["app.js"] == "foo(baz)"

    def test_substring_replaces_first_occurrence_only(self):
        fs = MemoryFileSystem({"app.js": "x.y x.y"})
        SuggestionApplier(fs).apply(_suggestion(file="app.js", original_code="x.y", suggested_code="z"))
        assert fs.files["app.js"] == "z x.y"

    def test_substring_is_not_a_regex(self):
        fs = MemoryFileSystem({"a.py": "value = a.b"})
        ok, reason = SuggestionApplier(fs).apply(_suggestion(file="a.py", original_code="a*b", suggested_code="c"))
        assert ok is False
        assert reason == REASON_ORIGINAL_NOT_FOUND

    def test_original_code_missing_leaves_file_unchanged(self):
        fs = MemoryFileSystem({"app.js": "foo(bar)"})
        ok, reason = SuggestionApplier(fs).apply(_suggestion(file="app.js", original_code="qux", suggested_code="baz"))
        assert ok is False
        assert reason == REASON_ORIGINAL_NOT_FOUND
        assert fs.files["app.js"] == "foo(bar)"
        assert fs.writes == []

    def test_reapplying_substring_fails_cleanly(self):
        fs = MemoryFileSystem({"app.js": "foo(bar)"})
        applier = SuggestionApplier(fs)
        suggestion = _suggestion(file="app.js", original_code="bar", suggested_code="baz")

        assert applier.apply(suggestion) == (True, "")
        assert applier.apply(suggestion) == (False, REASON_ORIGINAL_NOT_FOUND)
        assert fs.files["app.js"] == "foo(baz)"

    @pytest.mark.parametrize("data", [
        {"suggested_code": "x", "original_code": "y"},
        {"file": "f.txt", "original_code": "y"},
        {"file": "f.txt", "suggested_code": "", "line_start": 1, "line_end": 1},
    ])
    def test_missing_fields(self, data):
        fs = MemoryFileSystem({"f.txt": "y"})
        ok, reason = SuggestionApplier(fs).apply(_suggestion(**data))
        assert ok is False
        assert reason == REASON_MISSING_FIELDS

    def test_file_not_found(self):
        ok, reason = SuggestionApplier(MemoryFileSystem()).apply(
            _suggestion(file="missing.py", original_code="a", suggested_code="b")
        )
        assert ok is False
        assert reason == REASON_FILE_NOT_FOUND

    def test_no_strategy(self):
        fs = MemoryFileSystem({"f.txt": "a"})
        ok, reason = SuggestionApplier(fs).apply(_suggestion(file="f.txt", line_start=2, suggested_code="b"))
        assert ok is False
        assert reason == REASON_NO_STRATEGY

    def test_inverted_range_is_not_a_line_range(self):
        fs = MemoryFileSystem({"f.txt": "a\nb"})
        ok, reason = SuggestionApplier(fs).apply(_suggestion(file="f.txt", line_start=2, line_end=1, suggested_code="b"))
        assert ok is False
        assert reason == REASON_NO_STRATEGY

    def test_io_error_is_reported_not_raised(self):
        fs = MemoryFileSystem({"f.txt": "a"})
        with patch.object(fs, "write_text", side_effect=PermissionError("read-only")):
            ok, reason = SuggestionApplier(fs).apply(_suggestion(file="f.txt", original_code="a", suggested_code="b"))
        assert ok is False
        assert "read-only" in reason


class TestApplyAll:
    def test_partitions_applied_and_failed_in_input_order(self):
        fs = MemoryFileSystem({"a.py": "one\ntwo", "b.py": "three"})
        suggestions = [
            _suggestion(0, id="s0", file="a.py", original_code="one", suggested_code="1"),
            _suggestion(1, id="s1", file="missing.py", original_code="x", suggested_code="y"),
            _suggestion(2, id="s2", file="b.py", original_code="three", suggested_code="3"),
        ]

        outcome = SuggestionApplier(fs).apply_all(suggestions)

        assert [s.id for s in outcome.applied] == ["s0", "s2"]
        assert [(s.id, reason) for s, reason in outcome.failed] == [("s1", REASON_FILE_NOT_FOUND)]
        assert outcome.commit_sha is None

    def test_same_file_line_ranges_applied_bottom_up(self):
        fs = MemoryFileSystem({"f.txt": "1\n2\n3\n4\n5\n6"})
        suggestions = [
            _suggestion(0, file="f.txt", line_start=1, line_end=1, suggested_code="A\nA2\nA3"),
            _suggestion(1, file="f.txt", line_start=5, line_end=6, suggested_code="E"),
        ]

        outcome = SuggestionApplier(fs).apply_all(suggestions)

        assert len(outcome.applied) == 2
        assert fs.files["f.txt"] == "A\nA2\nA3\n2\n3\n4\nE"

    def test_overlapping_range_fails(self):
        fs = MemoryFileSystem({"f.txt": "1\n2\n3\n4"})
        suggestions = [
            _suggestion(0, id="first", file="f.txt", line_start=1, line_end=2, suggested_code="X"),
            _suggestion(1, id="second", file="f.txt", line_start=2, line_end=3, suggested_code="Y"),
        ]

        outcome = SuggestionApplier(fs).apply_all(suggestions)

        assert [s.id for s in outcome.applied] == ["second"]
        assert [(s.id, reason) for s, reason in outcome.failed] == [("first", REASON_OVERLAP)]
        assert fs.files["f.txt"] == "1\nY\n4"

    def test_substring_edits_run_after_line_edits(self):
        fs = MemoryFileSystem({"f.txt": "alpha\nbeta\ngamma"})
        suggestions = [
            _suggestion(0, file="f.txt", original_code="alpha", suggested_code="ALPHA\nextra"),
            _suggestion(1, file="f.txt", line_start=3, line_end=3, suggested_code="GAMMA"),
        ]

        outcome = SuggestionApplier(fs).apply_all(suggestions)

        assert len(outcome.applied) == 2
        assert fs.files["f.txt"] == "ALPHA\nextra\nbeta\nGAMMA"


class TestLocalFileSystem:
    def test_round_trip_preserves_crlf(self, tmp_path):
        target = tmp_path / "win.txt"
        target.write_bytes(b"a\r\nb\r\nc")

        fs = LocalFileSystem(tmp_path)
        ok, _ = SuggestionApplier(fs).apply(_suggestion(file="win.txt", original_code="b", suggested_code="B"))

        assert ok is True
        assert target.read_bytes() == b"a\r\nB\r\nc"

    def test_relative_paths_resolve_against_root(self, tmp_path):
        (tmp_path / "src").mkdir()
        (tmp_path / "src" / "a.py").write_text("x = 1\n", encoding="utf-8")
        fs = LocalFileSystem(tmp_path)

        assert fs.exists("src/a.py")
        assert not fs.exists("src/b.py")
        assert not fs.exists("src")


def test_splice_past_end_appends():
    assert splice_lines("a\nb", 5, 6, "z") == "a\nb\nz"
