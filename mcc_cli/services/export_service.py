"""Export a session to a portable, compressed container file."""

import gzip
import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

from mcc_cli.core.config_paths import ConfigPaths
from mcc_cli.core.errors import ExportError
from mcc_cli.session.models import ExportedSession, Session

LOGGER = logging.getLogger(__name__)

CONTAINER_SUFFIX = ".json.gz"

# Raw summary characters considered for the file name
SLUG_SOURCE_LENGTH = 30


def summary_slug(summary: str) -> str:
    """Turn a session summary into a file-name fragment.

    The first 30 characters are taken before filtering, so the slug is often
    shorter than 30 characters.
    """
    head = summary[:SLUG_SOURCE_LENGTH]
    kept = "".join(c for c in head if c.isalnum() or c in " -")
    return kept.replace(" ", "-").lower()


def default_filename(session: Session, now: Optional[datetime] = None) -> str:
    """Return ``<timestamp>-<slug>.json.gz`` for ``session``."""
    if now is None:
        now = datetime.now(timezone.utc)
    return f"{now.strftime('%Y%m%d-%H%M%S')}-{summary_slug(session.summary)}{CONTAINER_SUFFIX}"


def write_container(exported: ExportedSession, output_path: Union[str, Path]) -> Path:
    """Write ``exported`` as gzip-compressed JSON.

    The data is written to a temporary file next to ``output_path`` and moved
    into place, so a reader never sees a partially written container.

    Raises:
        ExportError: If the file cannot be written
    """
    output_path = Path(output_path)
    payload = json.dumps(exported.to_dict(), indent=2, ensure_ascii=False).encode("utf-8")

    tmp_name = None
    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{output_path.name}.", suffix=".tmp", dir=output_path.parent
        )
        with os.fdopen(fd, "wb") as raw:
            with gzip.GzipFile(fileobj=raw, mode="wb", filename="") as gz:
                gz.write(payload)
        os.replace(tmp_name, output_path)
    except OSError as e:
        if tmp_name and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise ExportError(f"Failed to write {output_path}: {e}") from e

    LOGGER.info(
        "Exported session %s (%d messages) to %s",
        exported.session.id,
        len(exported.session.messages),
        output_path,
    )
    return output_path


def export_session_to(session: Session, output_path: Union[str, Path]) -> Path:
    """Export ``session`` to an explicit file path.

    Raises:
        ExportError: If the file cannot be written
    """
    exported = ExportedSession.from_session(session)
    return write_container(exported, output_path)


def export_session(session: Session, output_dir: Optional[Path] = None) -> Path:
    """Export a session into ``output_dir`` under a generated file name.

    Args:
        session: Session to export
        output_dir: Destination directory (default: ~/.mcc/exports)

    Returns:
        Path of the written container

    Raises:
        ExportError: If the directory or file cannot be written
    """
    if output_dir is None:
        output_dir = ConfigPaths.get_exports_dir()
    output_dir = Path(output_dir)

    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ExportError(f"Failed to create {output_dir}: {e}") from e

    return export_session_to(session, output_dir / default_filename(session))
