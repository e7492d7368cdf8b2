"""Data models for sessions and export containers."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional
import getpass
import os
import posixpath
import socket
import time

from mcc_cli.core.errors import ContainerFormatError

# Container format written by this version
FORMAT_VERSION = "1.0.0"

# Container formats this version can read
SUPPORTED_VERSIONS = frozenset({FORMAT_VERSION})

UNKNOWN_IDENTITY = "unknown"


@dataclass
class SessionMessage:
    """One record from a transcript file.

    The record is kept as decoded so fields the assistant adds in the
    future survive an export/import cycle untouched.
    """

    data: Dict[str, Any]

    @property
    def type(self) -> str:
        """Record discriminator ("user", "assistant", "summary", ...)."""
        return self.data["type"]

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return self.data

    @classmethod
    def from_dict(cls, data: Any) -> "SessionMessage":
        """Create from a decoded record.

        Raises:
            ValueError: If the record is not an object with a string "type"
        """
        if not isinstance(data, dict):
            raise ValueError("record is not a JSON object")
        if not isinstance(data.get("type"), str):
            raise ValueError("record has no string 'type' field")
        return cls(data=data)


@dataclass
class Session:
    """A transcript discovered on disk."""

    id: str
    project_path: str
    file_path: Path
    messages: List[SessionMessage] = field(default_factory=list)
    last_modified: int = 0
    summary: str = "No messages"
    git_branch: Optional[str] = None

    @property
    def project_name(self) -> str:
        """Last component of the project path."""
        return posixpath.basename(self.project_path.rstrip("/")) or self.project_path

    def message_count(self) -> int:
        return len(self.messages)

    def time_ago(self, now: Optional[float] = None) -> str:
        """Format the age of the session, e.g. "5m ago"."""
        if now is None:
            now = time.time()
        diff = max(0, int(now) - self.last_modified)

        if diff < 60:
            return f"{diff}s ago"
        elif diff < 3600:
            return f"{diff // 60}m ago"
        elif diff < 86400:
            return f"{diff // 3600}h ago"
        return f"{diff // 86400}d ago"

    def to_data(self) -> "SessionData":
        """Snapshot the session for export."""
        return SessionData(
            id=self.id,
            project_path=self.project_path,
            messages=[SessionMessage(data=dict(m.data)) for m in self.messages],
            summary=self.summary,
            git_branch=self.git_branch,
        )


@dataclass
class SessionData:
    """Session snapshot embedded in an export container."""

    id: str
    project_path: str
    messages: List[SessionMessage]
    summary: str
    git_branch: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "project_path": self.project_path,
            "messages": [m.to_dict() for m in self.messages],
            "summary": self.summary,
            "git_branch": self.git_branch,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "SessionData":
        """Create from dictionary.

        Raises:
            ContainerFormatError: If a field is missing or has the wrong type
        """
        if not isinstance(data, dict):
            raise ContainerFormatError("'session' is not an object")

        for key in ("id", "project_path", "summary"):
            if not isinstance(data.get(key), str):
                raise ContainerFormatError(f"'session.{key}' must be a string")

        # The id becomes a file name under the target project directory
        session_id = data["id"]
        if (
            not session_id
            or session_id in (".", "..")
            or "/" in session_id
            or "\\" in session_id
            or "\x00" in session_id
        ):
            raise ContainerFormatError(f"'session.id' is not a valid file name: {session_id!r}")

        git_branch = data.get("git_branch")
        if git_branch is not None and not isinstance(git_branch, str):
            raise ContainerFormatError("'session.git_branch' must be a string or null")

        raw_messages = data.get("messages")
        if not isinstance(raw_messages, list):
            raise ContainerFormatError("'session.messages' must be a list")

        messages = []
        for index, raw in enumerate(raw_messages):
            try:
                messages.append(SessionMessage.from_dict(raw))
            except ValueError as e:
                raise ContainerFormatError(f"message {index}: {e}") from e

        return cls(
            id=data["id"],
            project_path=data["project_path"],
            messages=messages,
            summary=data["summary"],
            git_branch=git_branch,
        )


def _current_user() -> str:
    for var in ("USER", "LOGNAME"):
        value = os.environ.get(var)
        if value:
            return value
    try:
        return getpass.getuser() or UNKNOWN_IDENTITY
    except (KeyError, OSError):
        return UNKNOWN_IDENTITY


def _current_host() -> str:
    try:
        return socket.gethostname() or UNKNOWN_IDENTITY
    except OSError:
        return UNKNOWN_IDENTITY


def exporter_identity() -> str:
    """Return "user@host" for the current environment."""
    return f"{_current_user()}@{_current_host()}"


@dataclass
class ExportedSession:
    """Portable, versioned export of a single session."""

    version: str
    exported_at: str
    exported_by: str
    session: SessionData

    @classmethod
    def from_session(
        cls, session: Session, now: Optional[datetime] = None
    ) -> "ExportedSession":
        """Build a container for ``session`` stamped with time and identity."""
        if now is None:
            now = datetime.now(timezone.utc)
        return cls(
            version=FORMAT_VERSION,
            exported_at=now.isoformat(),
            exported_by=exporter_identity(),
            session=session.to_data(),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "version": self.version,
            "exported_at": self.exported_at,
            "exported_by": self.exported_by,
            "session": self.session.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Any) -> "ExportedSession":
        """Create from dictionary.

        Only the structure is validated; the version tag is checked by
        ``import_service.read_container``.

        Raises:
            ContainerFormatError: If the container structure is invalid
        """
        if not isinstance(data, dict):
            raise ContainerFormatError("container is not a JSON object")

        for key in ("version", "exported_at", "exported_by"):
            if not isinstance(data.get(key), str):
                raise ContainerFormatError(f"'{key}' must be a string")

        if "session" not in data:
            raise ContainerFormatError("missing 'session'")

        return cls(
            version=data["version"],
            exported_at=data["exported_at"],
            exported_by=data["exported_by"],
            session=SessionData.from_dict(data["session"]),
        )
