"""Discovery of every Claude Code session on this machine."""

import logging
from pathlib import Path
from typing import List, Optional

from mcc_cli.core.config_paths import ConfigPaths
from mcc_cli.core.errors import ScanError, SessionLoadError
from .models import Session
from .parser import parse_transcript
from .paths import decode_project_dir

LOGGER = logging.getLogger(__name__)

TRANSCRIPT_SUFFIX = ".jsonl"


def _list_dir(path: Path) -> List[Path]:
    try:
        return sorted(path.iterdir())
    except OSError as e:
        raise ScanError(f"Failed to read directory {path}: {e}") from e


def find_all_sessions(projects_dir: Optional[Path] = None) -> List[Session]:
    """Find all Claude Code sessions, most recently modified first.

    Args:
        projects_dir: Root holding one directory per project
            (default: ~/.claude/projects)

    Returns:
        List of sessions sorted by last_modified descending. Empty if the root
        does not exist.

    Raises:
        ScanError: If the root or a project directory cannot be listed
    """
    if projects_dir is None:
        projects_dir = ConfigPaths.get_projects_dir()
    projects_dir = Path(projects_dir)

    if not projects_dir.exists():
        LOGGER.debug("Sessions root %s does not exist", projects_dir)
        return []

    sessions: List[Session] = []

    for project_dir in _list_dir(projects_dir):
        if not project_dir.is_dir():
            continue

        project_path = decode_project_dir(project_dir.name)

        for session_file in _list_dir(project_dir):
            if session_file.suffix != TRANSCRIPT_SUFFIX or not session_file.is_file():
                continue
            try:
                sessions.append(parse_transcript(session_file, project_path))
            except SessionLoadError as e:
                LOGGER.warning("Skipping session: %s", e)

    # Sort by last modified (most recent first)
    sessions.sort(key=lambda s: s.last_modified, reverse=True)

    LOGGER.debug("Found %d session(s) under %s", len(sessions), projects_dir)
    return sessions
