"""Transcript parser for Claude Code session files.

A transcript is an append-only JSONL file: one JSON object per line, each with
a ``type`` field. Lines that cannot be decoded (typically a partial line left
by a session that is still being written) are skipped rather than failing the
whole session.
"""

import json
import logging
from pathlib import Path
from typing import Any, List, Optional, Tuple, Union

from mcc_cli.core.errors import SessionLoadError
from .models import Session, SessionMessage

LOGGER = logging.getLogger(__name__)

# Maximum characters of the first user message kept as the summary
SUMMARY_LENGTH = 60
SUMMARY_PLACEHOLDER = "No messages"


def make_summary(content: str) -> str:
    """Truncate a user message into a one-line summary."""
    if len(content) > SUMMARY_LENGTH:
        return content[:SUMMARY_LENGTH] + "..."
    return content


def _user_text(message: SessionMessage) -> Optional[str]:
    """Return ``message.content`` for user records whose content is plain text."""
    if message.type != "user":
        return None
    body = message.get("message")
    if not isinstance(body, dict):
        return None
    content = body.get("content")
    return content if isinstance(content, str) else None


def extract_metadata(
    messages: List[SessionMessage], stop_at_summary: bool = True
) -> Tuple[str, Optional[str]]:
    """Derive (summary, git_branch) from messages in file order.

    Args:
        messages: Parsed messages
        stop_at_summary: Stop the pass at the first user message with text.
            Branch values recorded after that message are then ignored, which
            is how existing MCC exports were produced. Pass False to keep
            scanning so the last branch in the file wins.

    Returns:
        Tuple of (summary, git_branch)
    """
    git_branch = None
    summary = None

    for message in messages:
        branch = message.get("gitBranch")
        if isinstance(branch, str):
            git_branch = branch

        if summary is None:
            content = _user_text(message)
            if content is not None:
                summary = make_summary(content)
                if stop_at_summary:
                    break

    return summary if summary is not None else SUMMARY_PLACEHOLDER, git_branch


def _decode_line(line: str) -> Optional[SessionMessage]:
    try:
        data: Any = json.loads(line)
        return SessionMessage.from_dict(data)
    except ValueError:
        return None


def parse_transcript(
    file_path: Union[str, Path],
    project_path: str,
    *,
    stop_at_summary: bool = True,
) -> Session:
    """Load a session from a .jsonl file.

    Args:
        file_path: Transcript file
        project_path: Project the transcript belongs to
        stop_at_summary: See :func:`extract_metadata`

    Returns:
        Parsed Session

    Raises:
        SessionLoadError: If the file is missing, unreadable, not text, or has
            a modification time before the epoch
    """
    file_path = Path(file_path)

    try:
        # Only "\n" ends a record; JSON strings may carry raw U+2028/U+2029
        with open(file_path, "r", encoding="utf-8", newline="") as f:
            lines = [line.rstrip("\r") for line in f.read().split("\n")]
        stat = file_path.stat()
    except (OSError, UnicodeDecodeError) as e:
        raise SessionLoadError(file_path, e) from e

    if stat.st_mtime < 0:
        raise SessionLoadError(
            file_path, ValueError(f"modification time {stat.st_mtime} is before the epoch")
        )

    messages = []
    skipped = 0
    for line in lines:
        if not line.strip():
            continue
        message = _decode_line(line)
        if message is None:
            skipped += 1
            continue
        messages.append(message)

    if skipped:
        LOGGER.debug("Skipped %d malformed line(s) in %s", skipped, file_path)

    summary, git_branch = extract_metadata(messages, stop_at_summary=stop_at_summary)

    return Session(
        id=file_path.stem,
        project_path=project_path,
        file_path=file_path,
        messages=messages,
        last_modified=int(stat.st_mtime),
        summary=summary,
        git_branch=git_branch,
    )
