"""Tests for the edit engine: parsing, application, diagnosis, diff and persistence."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from fs_tools import editing
from fs_tools.editing import (
    EditOperation,
    apply_edits,
    diagnose,
    edit_file,
    generate_diff,
    parse_bool,
    parse_edits,
)
from fs_tools.exceptions import (
    InvalidPatternError,
    MalformedEditListError,
    MissingFieldError,
    NotARegularFileError,
    PathNotFoundError,
    TextNotFoundError,
    UnrecognizedEditFormatError,
)


def make_file(tmp_path: Path, content: str, name: str = "file.txt") -> Path:
    path = tmp_path / name
    # Bytes keep \r\n exactly as given
    path.write_bytes(content.encode("utf-8"))
    return path


def read_raw(path: Path) -> str:
    return path.read_bytes().decode("utf-8")


class TestParseBool:
    def test_real_booleans(self) -> None:
        assert parse_bool(True) is True
        assert parse_bool(False) is False

    def test_strings_are_case_insensitive(self) -> None:
        assert parse_bool("true") is True
        assert parse_bool("TRUE") is True
        assert parse_bool(" True ") is True
        assert parse_bool("false") is False

    def test_anything_else_is_false(self) -> None:
        assert parse_bool(None) is False
        assert parse_bool("yes") is False
        assert parse_bool("1") is False


class TestParseEdits:
    def test_json_array_preserves_order(self) -> None:
        raw = json.dumps(
            [
                {"oldText": "a", "newText": "b"},
                {"oldText": "c", "newText": "d", "useRegex": "true"},
            ]
        )
        ops = parse_edits(raw)
        assert ops == (
            EditOperation("a", "b", False),
            EditOperation("c", "d", True),
        )

    def test_single_object(self) -> None:
        ops = parse_edits('{"oldText": "x", "newText": "y"}')
        assert ops == (EditOperation("x", "y"),)

    def test_use_regex_accepts_boolean(self) -> None:
        ops = parse_edits('{"oldText": "x", "newText": "y", "useRegex": true}')
        assert ops[0].use_regex is True

    def test_leading_whitespace_before_json(self) -> None:
        ops = parse_edits('  \n [{"oldText": "x", "newText": "y"}]')
        assert ops == (EditOperation("x", "y"),)

    def test_shorthand_splits_on_first_separator(self) -> None:
        ops = parse_edits("old----new----more")
        assert ops == (EditOperation("old", "new----more"),)

    def test_shorthand_allows_empty_sides(self) -> None:
        assert parse_edits("----new") == (EditOperation("", "new"),)
        assert parse_edits("old----") == (EditOperation("old", ""),)

    def test_formats_are_equivalent(self) -> None:
        as_array = parse_edits('[{"oldText": "foo", "newText": "bar"}]')
        as_object = parse_edits('{"oldText": "foo", "newText": "bar"}')
        as_shorthand = parse_edits("foo----bar")
        assert as_array == as_object == as_shorthand

    def test_empty_array_is_no_edits(self) -> None:
        assert parse_edits("[]") == ()

    def test_invalid_json(self) -> None:
        raw = '[{"oldText": "a", '
        with pytest.raises(MalformedEditListError) as exc_info:
            parse_edits(raw)
        assert str(exc_info.value).startswith("Failed to parse edits:")
        assert exc_info.value.to_dict()["receivedEdits"] == raw

    def test_array_element_not_an_object(self) -> None:
        with pytest.raises(MalformedEditListError, match="edit #2 is not an object"):
            parse_edits('[{"oldText": "a", "newText": "b"}, 42]')

    def test_missing_new_text(self) -> None:
        with pytest.raises(MissingFieldError) as exc_info:
            parse_edits('[{"oldText": "a", "newText": "b"}, {"oldText": "c"}]')
        assert exc_info.value.index == 1
        assert "Each edit must contain 'oldText' and 'newText'" in str(exc_info.value)

    def test_missing_field_in_single_object(self) -> None:
        with pytest.raises(MissingFieldError):
            parse_edits('{"newText": "b"}')

    def test_non_string_fields(self) -> None:
        with pytest.raises(MalformedEditListError, match="must be strings"):
            parse_edits('{"oldText": 1, "newText": "b"}')

    def test_unrecognized_format(self) -> None:
        with pytest.raises(UnrecognizedEditFormatError) as exc_info:
            parse_edits("just some text")
        result = exc_info.value.to_dict()
        assert result["success"] is False
        assert result["error"].startswith("Unrecognized edit format")
        assert result["receivedEdits"] == "just some text"


class TestApplyLiteral:
    def test_replaces_first_occurrence_only(self) -> None:
        result = apply_edits("a a a", [EditOperation("a", "b")])
        assert result.final_content == "b a a"

    def test_edits_apply_in_order(self) -> None:
        ops = [EditOperation("a", "b"), EditOperation("b", "c")]
        result = apply_edits("a", ops)
        assert result.final_content == "c"
        assert result.applied_edits == ("a", "b")

    def test_crlf_file_matches_lf_search(self) -> None:
        op = EditOperation("one\ntwo", "1\n2")
        result = apply_edits("one\r\ntwo\r\nthree\r\n", [op])
        # The whole buffer comes back with \n line endings
        assert result.final_content == "1\n2\nthree\n"

    def test_crlf_search_matches_lf_file(self) -> None:
        result = apply_edits("one\ntwo\n", [EditOperation("one\r\ntwo", "x")])
        assert result.final_content == "x\n"

    def test_lone_cr_is_normalized(self) -> None:
        result = apply_edits("one\rtwo", [EditOperation("one\ntwo", "joined")])
        assert result.final_content == "joined"

    def test_mixed_line_endings(self) -> None:
        op = EditOperation("Windows\nLine\nEndings", "Normalized")
        result = apply_edits("Windows\r\nLine\rEndings\nMixed", [op])
        assert result.final_content == "Normalized\nMixed"

    def test_first_of_several_occurrences(self) -> None:
        op = EditOperation("User123", "Member")
        result = apply_edits("User123, User456, User789", [op])
        assert result.final_content == "Member, User456, User789"

    def test_empty_old_text_inserts_at_start(self) -> None:
        result = apply_edits("body", [EditOperation("", "head ")])
        assert result.final_content == "head body"

    def test_not_found_carries_partial_buffer(self) -> None:
        ops = [EditOperation("a", "b"), EditOperation("zzz", "q")]
        with pytest.raises(TextNotFoundError) as exc_info:
            apply_edits("a", ops)
        assert exc_info.value.index == 1
        assert exc_info.value.current_content == "b"
        assert exc_info.value.old_text == "zzz"

    def test_not_found_message_truncates_long_search(self) -> None:
        old_text = "x" * 60
        with pytest.raises(TextNotFoundError) as exc_info:
            apply_edits("abc", [EditOperation(old_text, "y")])
        assert str(exc_info.value) == (
            "Could not find text to replace: " + "x" * 47 + "..."
        )

    def test_not_found_message_keeps_short_search(self) -> None:
        with pytest.raises(TextNotFoundError) as exc_info:
            apply_edits("abc", [EditOperation("missing", "y")])
        assert str(exc_info.value) == "Could not find text to replace: missing"


class TestApplyRegex:
    def test_replaces_first_match_only(self) -> None:
        op = EditOperation(r"x(\d)", r"y\1", use_regex=True)
        assert apply_edits("x1 x2", [op]).final_content == "y1 x2"

    def test_named_group_template(self) -> None:
        op = EditOperation(r"(?P<word>\w+)!", r"\g<word>?", use_regex=True)
        assert apply_edits("hi! there!", [op]).final_content == "hi? there!"

    def test_dot_matches_newline(self) -> None:
        op = EditOperation("start.*end", "X", use_regex=True)
        assert apply_edits("start\nmiddle\nend tail", [op]).final_content == "X tail"

    def test_regex_does_not_normalize_line_endings(self) -> None:
        op = EditOperation("a\nb", "X", use_regex=True)
        with pytest.raises(TextNotFoundError):
            apply_edits("a\r\nb", [op])

    def test_regex_keeps_other_line_endings(self) -> None:
        op = EditOperation("two", "2", use_regex=True)
        assert apply_edits("one\r\ntwo\r\n", [op]).final_content == "one\r\n2\r\n"

    def test_invalid_pattern(self) -> None:
        op = EditOperation("(unclosed", "x", use_regex=True)
        with pytest.raises(InvalidPatternError) as exc_info:
            apply_edits("anything", [op])
        assert str(exc_info.value).startswith("Invalid regex pattern:")
        assert exc_info.value.pattern == "(unclosed"

    def test_bad_replacement_template(self) -> None:
        op = EditOperation("a", r"\2", use_regex=True)
        with pytest.raises(InvalidPatternError, match="bad replacement template"):
            apply_edits("abc", [op])

    def test_invalid_pattern_after_successful_edit(self) -> None:
        ops = [EditOperation("a", "b"), EditOperation("[", "x", use_regex=True)]
        with pytest.raises(InvalidPatternError):
            apply_edits("a", ops)

    def test_invalid_pattern_before_valid_edit(self) -> None:
        ops = [EditOperation("[", "x", use_regex=True), EditOperation("a", "b")]
        with pytest.raises(InvalidPatternError) as exc_info:
            apply_edits("a", ops)
        assert exc_info.value.pattern == "["

    def test_first_of_several_matches(self) -> None:
        op = EditOperation(r"User\d+", "Member", use_regex=True)
        result = apply_edits("User123, User456, User789", [op])
        assert result.final_content == "Member, User456, User789"


class TestDiagnose:
    def test_character_flags(self) -> None:
        report = diagnose("f.txt", "content", "content", "a b\tc\r\nd")
        assert report.old_text_length == 8
        assert report.contains_newline
        assert report.contains_carriage_return
        assert report.contains_space
        assert report.contains_tab

    def test_flags_false_for_plain_text(self) -> None:
        report = diagnose("f.txt", "content", "content", "plain")
        assert not report.contains_newline
        assert not report.contains_carriage_return
        assert not report.contains_space
        assert not report.contains_tab

    def test_preview_is_truncated(self) -> None:
        original = "x" * 1500
        report = diagnose("f.txt", original, original, "nope")
        assert report.preview == "x" * 1000 + "..."

    def test_short_preview_is_whole_file(self) -> None:
        report = diagnose("f.txt", "short", "short", "nope")
        assert report.preview == "short"

    def test_current_preview_only_when_buffer_changed(self) -> None:
        unchanged = diagnose("f.txt", "abc", "abc", "nope")
        assert unchanged.current_preview is None
        assert "currentPreview" not in unchanged.to_dict()

        changed = diagnose("f.txt", "abc", "xbc", "nope")
        assert changed.current_preview == "xbc"
        assert changed.to_dict()["currentPreview"] == "xbc"

    def test_xml_name_tag_suggestion(self) -> None:
        report = diagnose(
            "pom.xml", "<project><n>demo</n></project>", "", "<name>demo</name>"
        )
        assert report.suggestion is not None
        assert "<n>" in report.suggestion

    def test_no_suggestion_for_other_extensions(self) -> None:
        report = diagnose("notes.txt", "<n>demo</n>", "", "<name>demo</name>")
        assert report.suggestion is None

    def test_partial_match_shows_context(self) -> None:
        original = "prefix " + "abcdefghij" * 4 + " suffix"
        old_text = "abcdefghij" * 3 + "NOPE"
        report = diagnose("f.txt", original, original, old_text)
        assert report.partial_match is not None
        assert report.partial_match.startswith("Found similar text: prefix abcdefghij")
        assert report.partial_match.endswith("suffix")

    def test_partial_match_context_is_bounded(self) -> None:
        original = "L" * 100 + "abcdefghij" * 3 + "R" * 100
        old_text = "abcdefghij" * 3 + "!"
        report = diagnose("f.txt", original, original, old_text)
        assert report.partial_match == (
            "Found similar text: " + "L" * 20 + "abcdefghij" * 3 + "R" * 50
        )

    def test_no_partial_match_for_short_search(self) -> None:
        report = diagnose("f.txt", "abc", "abc", "abd")
        assert report.partial_match is None

    def test_to_dict_keys(self) -> None:
        result = diagnose("f.txt", "abc", "abc", "zz").to_dict()
        assert set(result) == {
            "filePreview",
            "oldTextLength",
            "containsNewline",
            "containsCarriageReturn",
            "containsSpace",
            "containsTab",
        }


class TestGenerateDiff:
    def test_no_changes(self) -> None:
        diff = generate_diff("p", "same\n", "same\n")
        assert diff == "--- p\t(original)\n+++ p\t(modified)\nNo changes\n"

    def test_whole_file_hunk(self) -> None:
        diff = generate_diff("p", "a\nb\n", "a\nc\n")
        assert diff == (
            "--- p\t(original)\n"
            "+++ p\t(modified)\n"
            "@@ -1,2 +1,2 @@\n"
            "-a\n"
            "-b\n"
            "+a\n"
            "+c\n"
        )

    def test_line_counts_differ(self) -> None:
        diff = generate_diff("p", "one\n", "one\ntwo\nthree\n")
        assert "@@ -1,1 +1,3 @@" in diff

    def test_empty_original_counts_as_one_line(self) -> None:
        diff = generate_diff("p", "", "x")
        assert diff.splitlines()[2:] == ["@@ -1,1 +1,1 @@", "-", "+x"]

    def test_crlf_lines_are_split(self) -> None:
        diff = generate_diff("p", "a\r\nb\r\n", "a\nb\nc\n")
        assert "@@ -1,2 +1,3 @@" in diff
        assert "\r" not in diff

    def test_line_endings_alone_are_no_changes(self) -> None:
        diff = generate_diff("p", "a\r\nb\r\n", "a\nb\n")
        assert diff == "--- p\t(original)\n+++ p\t(modified)\nNo changes\n"


class TestEditFile:
    def test_missing_file(self, tmp_path: Path) -> None:
        missing = tmp_path / "missing.txt"
        with pytest.raises(PathNotFoundError) as exc_info:
            edit_file(str(missing), "a----b")
        assert str(exc_info.value) == f"File does not exist: {missing}"

    def test_directory_is_rejected(self, tmp_path: Path) -> None:
        with pytest.raises(NotARegularFileError) as exc_info:
            edit_file(str(tmp_path), "a----b")
        assert str(exc_info.value).startswith("Path is not a regular file:")

    def test_writes_edited_content(self, tmp_path: Path) -> None:
        path = make_file(tmp_path, "hello world\n")
        outcome = edit_file(str(path), "world----there")
        assert outcome.written is True
        assert read_raw(path) == "hello there\n"
        assert "-hello world" in outcome.diff
        assert "+hello there" in outcome.diff

    def test_dry_run_does_not_write(self, tmp_path: Path) -> None:
        path = make_file(tmp_path, "hello world\n")
        outcome = edit_file(str(path), "world----there", dry_run=True)
        assert outcome.dry_run is True
        assert outcome.written is False
        assert read_raw(path) == "hello world\n"
        assert "+hello there" in outcome.diff

    def test_dry_run_is_repeatable(self, tmp_path: Path) -> None:
        path = make_file(tmp_path, "a\nb\n")
        first = edit_file(str(path), "b----c", dry_run=True)
        second = edit_file(str(path), "b----c", dry_run=True)
        assert first.diff == second.diff
        assert read_raw(path) == "a\nb\n"

    def test_dry_run_matches_real_run(self, tmp_path: Path) -> None:
        path = make_file(tmp_path, "a\nb\n")
        preview = edit_file(str(path), "b----c", dry_run=True)
        applied = edit_file(str(path), "b----c")
        assert preview.diff == applied.diff

    def test_unchanged_content_is_not_written(self, tmp_path: Path) -> None:
        path = make_file(tmp_path, "same\n")
        with patch(
            "fs_tools.editing.write_text", wraps=editing.write_text
        ) as write_spy:
            outcome = edit_file(str(path), "same----same")
        write_spy.assert_not_called()
        assert outcome.written is False
        assert outcome.diff.endswith("No changes\n")

    def test_single_write_for_many_edits(self, tmp_path: Path) -> None:
        path = make_file(tmp_path, "a b c\n")
        edits = json.dumps(
            [
                {"oldText": "a", "newText": "1"},
                {"oldText": "b", "newText": "2"},
                {"oldText": "c", "newText": "3"},
            ]
        )
        with patch(
            "fs_tools.editing.write_text", wraps=editing.write_text
        ) as write_spy:
            outcome = edit_file(str(path), edits)
        assert write_spy.call_count == 1
        assert outcome.applied_edits == ("a", "b", "c")
        assert read_raw(path) == "1 2 3\n"

    def test_failed_edit_leaves_file_untouched(self, tmp_path: Path) -> None:
        path = make_file(tmp_path, "alpha\nbeta\n")
        edits = json.dumps(
            [
                {"oldText": "alpha", "newText": "ALPHA"},
                {"oldText": "gamma", "newText": "GAMMA"},
            ]
        )
        with patch(
            "fs_tools.editing.write_text", wraps=editing.write_text
        ) as write_spy:
            with pytest.raises(TextNotFoundError) as exc_info:
                edit_file(str(path), edits)
        write_spy.assert_not_called()
        assert read_raw(path) == "alpha\nbeta\n"

        report = exc_info.value.report
        assert report is not None
        assert report.preview == "alpha\nbeta\n"
        assert report.current_preview == "ALPHA\nbeta\n"

    def test_invalid_pattern_leaves_file_untouched(self, tmp_path: Path) -> None:
        path = make_file(tmp_path, "abc\n")
        edits = json.dumps(
            [
                {"oldText": "a", "newText": "x"},
                {"oldText": "(", "newText": "y", "useRegex": "true"},
            ]
        )
        with pytest.raises(InvalidPatternError):
            edit_file(str(path), edits)
        assert read_raw(path) == "abc\n"

    def test_invalid_first_pattern_stops_later_edits(self, tmp_path: Path) -> None:
        path = make_file(tmp_path, "abc\n")
        edits = json.dumps(
            [
                {"oldText": "(", "newText": "y", "useRegex": "true"},
                {"oldText": "a", "newText": "x"},
            ]
        )
        with patch(
            "fs_tools.editing.write_text", wraps=editing.write_text
        ) as write_spy:
            with pytest.raises(InvalidPatternError):
                edit_file(str(path), edits)
        write_spy.assert_not_called()
        assert read_raw(path) == "abc\n"

    def test_line_ending_only_change_reports_no_changes(self, tmp_path: Path) -> None:
        path = make_file(tmp_path, "keep\r\nme\r\n")
        outcome = edit_file(str(path), "keep----keep", dry_run=True)
        assert outcome.diff.endswith("No changes\n")
        assert "@@" not in outcome.diff
        assert read_raw(path) == "keep\r\nme\r\n"

    def test_crlf_file_is_written_with_lf(self, tmp_path: Path) -> None:
        path = make_file(tmp_path, "one\r\ntwo\r\n")
        edit_file(str(path), "one\ntwo----uno\ndos")
        assert read_raw(path) == "uno\ndos\n"

    def test_regex_edit_keeps_crlf(self, tmp_path: Path) -> None:
        path = make_file(tmp_path, "one\r\ntwo\r\n")
        edits = json.dumps({"oldText": "t(w)o", "newText": r"T\1O", "useRegex": "true"})
        edit_file(str(path), edits)
        assert read_raw(path) == "one\r\nTwO\r\n"

    def test_empty_array_is_a_no_op(self, tmp_path: Path) -> None:
        path = make_file(tmp_path, "content\n")
        outcome = edit_file(str(path), "[]")
        assert outcome.applied_edits == ()
        assert outcome.written is False
        assert outcome.diff.endswith("No changes\n")

    def test_empty_file(self, tmp_path: Path) -> None:
        path = make_file(tmp_path, "")
        with pytest.raises(TextNotFoundError) as exc_info:
            edit_file(str(path), "abc----x")
        assert exc_info.value.report is not None
        assert exc_info.value.report.preview == ""

    def test_outcome_to_dict(self, tmp_path: Path) -> None:
        path = make_file(tmp_path, "x\n")
        result = edit_file(str(path), "x----y", dry_run=True).to_dict()
        assert result["success"] is True
        assert result["dryRun"] is True
        assert result["editsApplied"] == 1
        assert result["appliedEdits"] == ["x"]
        assert result["diff"].startswith(f"--- {path}\t(original)\n")

    def test_utf8_content_round_trips(self, tmp_path: Path) -> None:
        path = make_file(tmp_path, "café ☕\n")
        edit_file(str(path), "☕----🍵")
        assert read_raw(path) == "café 🍵\n"
