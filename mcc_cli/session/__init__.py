"""Session discovery, parsing and matching."""

from .models import (
    SessionMessage,
    Session,
    SessionData,
    ExportedSession,
    FORMAT_VERSION,
    SUPPORTED_VERSIONS,
)
from .parser import parse_transcript
from .scanner import find_all_sessions
from .matcher import match_session, normalize_remote_url
from .paths import encode_project_path, decode_project_dir

__all__ = [
    "SessionMessage",
    "Session",
    "SessionData",
    "ExportedSession",
    "FORMAT_VERSION",
    "SUPPORTED_VERSIONS",
    "parse_transcript",
    "find_all_sessions",
    "match_session",
    "normalize_remote_url",
    "encode_project_path",
    "decode_project_dir",
]
