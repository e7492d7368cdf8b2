"""Shared fixtures for MCC tests."""

import json
import os
from pathlib import Path

import pytest

from mcc_cli.core.config_paths import ConfigPaths
from mcc_cli.session.paths import encode_project_path


@pytest.fixture
def mcc_home(tmp_path: Path, monkeypatch) -> Path:
    """Point every ConfigPaths location into a temporary home directory."""
    monkeypatch.setattr(ConfigPaths, "CLAUDE_DIR", tmp_path / ".claude")
    monkeypatch.setattr(ConfigPaths, "REGISTRY_FILE", tmp_path / ".claude.json")
    monkeypatch.setattr(ConfigPaths, "BASE_DIR", tmp_path / ".mcc")
    return tmp_path


@pytest.fixture
def make_transcript():
    """Factory writing a transcript under ``projects_dir`` for ``project_path``."""

    def _make(
        projects_dir: Path,
        project_path: str,
        session_id: str,
        records=(),
        mtime=None,
        raw_lines=None,
    ) -> Path:
        session_dir = Path(projects_dir) / encode_project_path(project_path)
        session_dir.mkdir(parents=True, exist_ok=True)
        path = session_dir / f"{session_id}.jsonl"

        lines = [json.dumps(r) for r in records]
        if raw_lines is not None:
            lines = list(raw_lines)
        path.write_text("".join(line + "\n" for line in lines), encoding="utf-8")

        if mtime is not None:
            os.utime(path, (mtime, mtime))
        return path

    return _make
