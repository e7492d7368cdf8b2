"""Tests for the export codec."""

import gzip
import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from mcc_cli.core.errors import ExportError
from mcc_cli.services.export_service import (
    default_filename,
    export_session,
    export_session_to,
    summary_slug,
    write_container,
)
from mcc_cli.session.models import ExportedSession, Session, SessionMessage


@pytest.fixture
def session():
    return Session(
        id="abc-123",
        project_path="/work/app",
        file_path=Path("/sessions/abc-123.jsonl"),
        messages=[
            SessionMessage({"type": "user", "cwd": "/work/app", "message": {"content": "Fix it"}}),
            SessionMessage({"type": "assistant", "message": {"content": "Fixed ✓"}}),
        ],
        last_modified=1_000,
        summary="Fix the Login Bug! Please, now and then more",
        git_branch="main",
    )


def read_gzip_json(path: Path):
    with gzip.open(path, "rt", encoding="utf-8") as f:
        return json.load(f)


class TestSummarySlug:
    """Test file-name slugs."""

    def test_slug(self):
        """Test truncation, filtering, hyphenation and lowercasing."""
        assert (
            summary_slug("Fix the Login Bug! Please, now and then more")
            == "fix-the-login-bug-please-now"
        )

    def test_truncates_before_filtering(self):
        """Test the 30 character window is taken from the raw summary."""
        assert summary_slug("!" * 30 + "abc") == ""

    def test_keeps_hyphens_and_digits(self):
        assert summary_slug("Bump v2-beta 10 times") == "bump-v2-beta-10-times"

    def test_placeholder_summary(self):
        assert summary_slug("No messages") == "no-messages"


class TestWriteContainer:
    """Test write_container."""

    def test_writes_gzip_json(self, tmp_path, session):
        """Test the container is gzip-compressed JSON with all fields."""
        exported = ExportedSession.from_session(session)
        output = tmp_path / "out.json.gz"

        result = write_container(exported, output)

        assert result == output
        data = read_gzip_json(output)
        assert data["version"] == "1.0.0"
        assert data["exported_by"] == exported.exported_by
        assert data["exported_at"] == exported.exported_at
        assert data["session"]["id"] == "abc-123"
        assert data["session"]["project_path"] == "/work/app"
        assert data["session"]["git_branch"] == "main"
        assert data["session"]["messages"] == [m.to_dict() for m in session.messages]

    def test_leaves_no_temporary_files(self, tmp_path, session):
        output = tmp_path / "out.json.gz"

        write_container(ExportedSession.from_session(session), output)

        assert [p.name for p in tmp_path.iterdir()] == ["out.json.gz"]

    def test_overwrites_existing_file(self, tmp_path, session):
        output = tmp_path / "out.json.gz"
        output.write_bytes(b"stale")

        write_container(ExportedSession.from_session(session), output)

        assert read_gzip_json(output)["session"]["id"] == "abc-123"

    def test_missing_directory_raises(self, tmp_path, session):
        with pytest.raises(ExportError):
            write_container(
                ExportedSession.from_session(session), tmp_path / "missing" / "out.json.gz"
            )


class TestExportSession:
    """Test export_session and export_session_to."""

    def test_default_filename(self, session):
        now = datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

        assert (
            default_filename(session, now=now)
            == "20250102-030405-fix-the-login-bug-please-now.json.gz"
        )

    def test_export_to_directory(self, tmp_path, session):
        output = export_session(session, tmp_path / "exports")

        assert output.parent == tmp_path / "exports"
        assert output.name.endswith("-fix-the-login-bug-please-now.json.gz")
        assert read_gzip_json(output)["session"]["summary"] == session.summary

    def test_export_defaults_to_mcc_exports(self, mcc_home, session):
        output = export_session(session)

        assert output.parent == mcc_home / ".mcc" / "exports"
        assert output.exists()

    def test_export_to_explicit_path(self, tmp_path, session):
        output = export_session_to(session, tmp_path / "mcc-export.json.gz")

        assert output == tmp_path / "mcc-export.json.gz"
        assert read_gzip_json(output)["session"]["id"] == "abc-123"

    def test_unwritable_directory_raises(self, tmp_path, session):
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")

        with pytest.raises(ExportError):
            export_session(session, blocker / "exports")
