"""Tests for the transcript parser."""

import json
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from mcc_cli.core.errors import SessionLoadError
from mcc_cli.session.parser import (
    SUMMARY_PLACEHOLDER,
    extract_metadata,
    make_summary,
    parse_transcript,
)
from mcc_cli.session.models import SessionMessage


def user_record(content, **extra):
    record = {"type": "user", "message": {"role": "user", "content": content}}
    record.update(extra)
    return record


def write_lines(path: Path, lines) -> Path:
    path.write_text("".join(line + "\n" for line in lines), encoding="utf-8")
    return path


class TestParseTranscript:
    """Test parse_transcript."""

    def test_parses_messages_and_metadata(self, tmp_path):
        """Test a well-formed transcript yields messages and derived fields."""
        path = write_lines(
            tmp_path / "abc-123.jsonl",
            [
                json.dumps(user_record("Fix the login bug", gitBranch="main", cwd="/work/app")),
                json.dumps({"type": "assistant", "message": {"content": [{"type": "text", "text": "On it"}]}}),
            ],
        )

        session = parse_transcript(path, "/work/app")

        assert session.id == "abc-123"
        assert session.project_path == "/work/app"
        assert session.file_path == path
        assert session.message_count() == 2
        assert session.messages[0].type == "user"
        assert session.messages[1].type == "assistant"
        assert session.summary == "Fix the login bug"
        assert session.git_branch == "main"
        assert session.last_modified == int(path.stat().st_mtime)

    def test_one_malformed_line_among_ten_is_skipped(self, tmp_path):
        """Test a bad line is dropped without failing the session."""
        lines = [json.dumps({"type": "assistant", "n": i}) for i in range(9)]
        lines.insert(4, '{"type": "user", "message": {"content": "trunc')
        path = write_lines(tmp_path / "s.jsonl", lines)

        session = parse_transcript(path, "/p")

        assert session.message_count() == 9
        assert [m.get("n") for m in session.messages] == list(range(9))

    def test_records_without_string_type_are_skipped(self, tmp_path):
        """Test non-object lines and records lacking a type are skipped."""
        path = write_lines(
            tmp_path / "s.jsonl",
            [
                "[1, 2, 3]",
                "42",
                json.dumps({"message": "no type"}),
                json.dumps({"type": 7}),
                json.dumps({"type": "summary", "summary": "kept"}),
            ],
        )

        session = parse_transcript(path, "/p")

        assert session.message_count() == 1
        assert session.messages[0].type == "summary"

    def test_blank_lines_are_ignored(self, tmp_path):
        """Test blank lines do not produce messages."""
        path = tmp_path / "s.jsonl"
        path.write_text(
            "\n" + json.dumps(user_record("hi")) + "\n\n   \n", encoding="utf-8"
        )

        session = parse_transcript(path, "/p")

        assert session.message_count() == 1

    def test_unknown_fields_pass_through(self, tmp_path):
        """Test records are kept exactly as decoded."""
        record = {
            "type": "assistant",
            "uuid": "u-1",
            "nested": {"a": [1, 2.5, None, True], "b": {"c": "d"}},
            "nullable": None,
        }
        path = write_lines(tmp_path / "s.jsonl", [json.dumps(record)])

        session = parse_transcript(path, "/p")

        assert session.messages[0].to_dict() == record
        assert list(session.messages[0].to_dict()) == list(record)

    def test_no_user_text_uses_placeholder(self, tmp_path):
        """Test the summary placeholder when no user message has text."""
        path = write_lines(
            tmp_path / "s.jsonl",
            [
                json.dumps({"type": "assistant", "message": {"content": "hello"}}),
                json.dumps(user_record([{"type": "tool_result", "content": "ok"}])),
            ],
        )

        session = parse_transcript(path, "/p")

        assert session.summary == SUMMARY_PLACEHOLDER
        assert session.summary == "No messages"

    def test_empty_file(self, tmp_path):
        """Test an empty transcript parses to an empty session."""
        path = tmp_path / "empty.jsonl"
        path.write_text("", encoding="utf-8")

        session = parse_transcript(path, "/p")

        assert session.messages == []
        assert session.summary == "No messages"
        assert session.git_branch is None

    def test_summary_skips_tool_result_user_records(self, tmp_path):
        """Test user records with list content are not used for the summary."""
        path = write_lines(
            tmp_path / "s.jsonl",
            [
                json.dumps(user_record([{"type": "tool_result", "content": "x"}])),
                json.dumps(user_record("Real question")),
            ],
        )

        assert parse_transcript(path, "/p").summary == "Real question"

    @pytest.mark.parametrize("separator", ["\u2028", "\u2029", "\x85"])
    def test_unicode_line_separators_inside_strings(self, tmp_path, separator):
        """Test records holding raw Unicode separators stay one record."""
        content = f"first{separator}second"
        path = write_lines(
            tmp_path / "s.jsonl",
            [
                json.dumps(user_record(content, gitBranch="main"), ensure_ascii=False),
                json.dumps({"type": "assistant", "message": {"content": "ok"}}),
            ],
        )
        assert separator in path.read_text(encoding="utf-8")

        session = parse_transcript(path, "/p")

        assert session.message_count() == 2
        assert session.summary == content
        assert session.git_branch == "main"

    def test_crlf_line_endings(self, tmp_path):
        """Test Windows line endings are accepted."""
        path = tmp_path / "s.jsonl"
        records = [json.dumps(user_record("hi")), json.dumps({"type": "assistant"})]
        path.write_bytes("".join(r + "\r\n" for r in records).encode())

        session = parse_transcript(path, "/p")

        assert session.message_count() == 2
        assert session.summary == "hi"

    def test_missing_file_raises(self, tmp_path):
        """Test a missing file raises SessionLoadError with the path."""
        missing = tmp_path / "missing.jsonl"

        with pytest.raises(SessionLoadError) as exc_info:
            parse_transcript(missing, "/p")

        assert exc_info.value.path == missing
        assert isinstance(exc_info.value.cause, FileNotFoundError)

    def test_non_utf8_file_raises(self, tmp_path):
        """Test a file that is not text raises SessionLoadError."""
        path = tmp_path / "binary.jsonl"
        path.write_bytes(b"\xff\xfe\x00\x81garbage")

        with pytest.raises(SessionLoadError):
            parse_transcript(path, "/p")

    def test_modification_time_before_epoch_raises(self, tmp_path):
        """Test a pre-epoch modification time is rejected."""
        path = write_lines(tmp_path / "s.jsonl", [json.dumps(user_record("hi"))])

        with patch.object(Path, "stat", return_value=SimpleNamespace(st_mtime=-10.0)):
            with pytest.raises(SessionLoadError):
                parse_transcript(path, "/p")


class TestSummary:
    """Test summary truncation."""

    def test_long_content_is_truncated_with_ellipsis(self):
        """Test 75 characters become 60 plus an ellipsis."""
        content = "x" * 75

        summary = make_summary(content)

        assert summary == "x" * 60 + "..."
        assert summary.endswith("...")

    def test_short_content_is_kept(self):
        """Test 40 characters are kept as is."""
        content = "y" * 40

        assert make_summary(content) == content

    def test_exactly_sixty_characters_has_no_ellipsis(self):
        """Test the boundary length is not truncated."""
        assert make_summary("z" * 60) == "z" * 60

    def test_multibyte_content_counts_characters(self):
        """Test truncation counts characters, not bytes."""
        content = "é" * 50

        assert make_summary(content) == content

    def test_summary_from_parsed_file(self, tmp_path):
        """Test a 75 character first user message in a file."""
        path = write_lines(tmp_path / "s.jsonl", [json.dumps(user_record("a" * 75))])

        session = parse_transcript(path, "/p")

        assert len(session.summary) == 63
        assert session.summary.endswith("...")


class TestBranchExtraction:
    """Test git branch extraction.

    By default the metadata pass stops at the first user message with text,
    so a branch recorded later in the file is not picked up.
    """

    MESSAGES = [
        SessionMessage({"type": "system", "gitBranch": "main"}),
        SessionMessage({"type": "user", "gitBranch": "feature", "message": {"content": "hi"}}),
        SessionMessage({"type": "assistant", "gitBranch": "release"}),
    ]

    def test_default_stops_at_first_user_message(self):
        """Test observed behaviour: branches after the summary are ignored."""
        summary, branch = extract_metadata(self.MESSAGES)

        assert summary == "hi"
        assert branch == "feature"

    def test_full_scan_uses_last_branch(self):
        """Test stop_at_summary=False keeps the last branch in the file."""
        summary, branch = extract_metadata(self.MESSAGES, stop_at_summary=False)

        assert summary == "hi"
        assert branch == "release"

    def test_branch_before_user_message_is_captured(self):
        """Test branch values before the first user message are kept."""
        messages = [
            SessionMessage({"type": "assistant", "gitBranch": "dev"}),
            SessionMessage({"type": "user", "message": {"content": "hi"}}),
        ]

        assert extract_metadata(messages) == ("hi", "dev")

    def test_null_branch_does_not_override(self):
        """Test a null gitBranch keeps the earlier value."""
        messages = [
            SessionMessage({"type": "assistant", "gitBranch": "dev"}),
            SessionMessage({"type": "assistant", "gitBranch": None}),
        ]

        assert extract_metadata(messages) == ("No messages", "dev")

    def test_parse_transcript_full_scan_option(self, tmp_path):
        """Test the option is passed through by parse_transcript."""
        path = write_lines(
            tmp_path / "s.jsonl",
            [json.dumps(m.to_dict()) for m in self.MESSAGES],
        )

        assert parse_transcript(path, "/p").git_branch == "feature"
        assert parse_transcript(path, "/p", stop_at_summary=False).git_branch == "release"
