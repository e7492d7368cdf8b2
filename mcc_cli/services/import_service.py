"""Import an exported session so Claude Code can resume it.

Importing writes the session's messages as a transcript under the target
project's directory in ~/.claude/projects, relocating ``cwd`` fields that
pointed at the original project, and points the project's ``lastSessionId``
in ~/.claude.json at the imported session.
"""

import gzip
import json
import logging
import os
import tempfile
import zlib
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from mcc_cli.core.config_paths import ConfigPaths
from mcc_cli.core.errors import (
    ContainerError,
    ContainerFormatError,
    ContainerNotFoundError,
    ContainerVersionError,
    RegistryError,
)
from mcc_cli.session.models import ExportedSession, SessionMessage, SUPPORTED_VERSIONS
from mcc_cli.session.paths import encode_project_path, is_unambiguous

LOGGER = logging.getLogger(__name__)


def _atomic_write_text(path: Path, content: str) -> None:
    """Write ``content`` to ``path`` via a temporary file and rename."""
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


def read_container(container_path: Union[str, Path]) -> ExportedSession:
    """Decompress and parse a container file.

    Args:
        container_path: Path to a .json.gz container

    Returns:
        Parsed container

    Raises:
        ContainerNotFoundError: If the file does not exist
        ContainerFormatError: If it is not valid gzip-compressed container JSON
        ContainerVersionError: If its version is not supported
        ContainerError: If the file cannot be read
    """
    container_path = Path(container_path)
    if not container_path.is_file():
        raise ContainerNotFoundError(f"File not found: {container_path}")

    try:
        compressed = container_path.read_bytes()
    except OSError as e:
        raise ContainerError(f"Failed to open {container_path}: {e}") from e

    try:
        text = gzip.decompress(compressed).decode("utf-8")
    except (OSError, EOFError, zlib.error, UnicodeDecodeError) as e:
        raise ContainerFormatError(f"Failed to decompress {container_path}: {e}") from e

    try:
        data: Any = json.loads(text)
    except json.JSONDecodeError as e:
        raise ContainerFormatError(f"Failed to parse {container_path}: {e}") from e

    if isinstance(data, dict) and isinstance(data.get("version"), str):
        if data["version"] not in SUPPORTED_VERSIONS:
            raise ContainerVersionError(
                f"Unsupported container version {data['version']!r} in {container_path} "
                f"(supported: {', '.join(sorted(SUPPORTED_VERSIONS))})"
            )

    try:
        return ExportedSession.from_dict(data)
    except ContainerFormatError as e:
        raise ContainerFormatError(f"Invalid container {container_path}: {e}") from e


def preview_session(container_path: Union[str, Path]) -> ExportedSession:
    """Read a container without importing it."""
    return read_container(container_path)


def rewrite_message_paths(
    messages: List[SessionMessage], original_path: str, target_path: str
) -> List[Dict[str, Any]]:
    """Relocate ``cwd`` fields from ``original_path`` to ``target_path``.

    Only exact matches are rewritten; a ``cwd`` pointing anywhere else (a
    subdirectory, another project) is left as recorded.

    Returns:
        New message dictionaries; the input messages are not modified.
    """
    rewritten = []
    for message in messages:
        data = dict(message.to_dict())
        if data.get("cwd") == original_path:
            data["cwd"] = target_path
        rewritten.append(data)
    return rewritten


def update_project_registry(
    registry_path: Path, project_path: str, session_id: str
) -> bool:
    """Set ``lastSessionId`` for ``project_path`` in the Claude Code registry.

    Projects are only updated, never created: Claude Code adds the entry the
    first time it runs in a directory.

    Args:
        registry_path: Path to ~/.claude.json
        project_path: Registry key (absolute project path)
        session_id: Session to mark as most recent

    Returns:
        True if the registry was updated, False if the file or entry is absent

    Raises:
        RegistryError: If the registry cannot be read, parsed or written
    """
    registry_path = Path(registry_path)
    if not registry_path.exists():
        LOGGER.warning("Project registry %s not found, skipping registration", registry_path)
        return False

    try:
        config = json.loads(registry_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise RegistryError(f"Failed to read {registry_path}: {e}") from e

    if not isinstance(config, dict):
        raise RegistryError(f"{registry_path} is not a JSON object")

    projects = config.get("projects")
    project = projects.get(project_path) if isinstance(projects, dict) else None
    if not isinstance(project, dict):
        LOGGER.info("No registry entry for %s, skipping registration", project_path)
        return False

    project["lastSessionId"] = session_id

    try:
        _atomic_write_text(registry_path, json.dumps(config, indent=2, ensure_ascii=False))
    except OSError as e:
        raise RegistryError(f"Failed to write {registry_path}: {e}") from e

    LOGGER.debug("Set lastSessionId=%s for %s", session_id, project_path)
    return True


def import_session(
    container_path: Union[str, Path],
    target_project_path: Optional[str] = None,
    *,
    projects_dir: Optional[Path] = None,
    registry_path: Optional[Path] = None,
) -> Path:
    """Import a container into a project directory.

    Importing the same container into the same target twice overwrites the
    same transcript file.

    Args:
        container_path: Container to import
        target_project_path: Project to import into (default: current directory)
        projects_dir: Sessions root (default: ~/.claude/projects)
        registry_path: Project registry (default: ~/.claude.json)

    Returns:
        Path of the written transcript

    Raises:
        ContainerError: If the container cannot be read
        RegistryError: If the registry exists but cannot be updated
        OSError: If the transcript cannot be written
    """
    exported = read_container(container_path)

    project_path = target_project_path or os.getcwd()
    if projects_dir is None:
        projects_dir = ConfigPaths.get_projects_dir()
    if registry_path is None:
        registry_path = ConfigPaths.get_registry_file()

    if not is_unambiguous(project_path):
        LOGGER.warning(
            "Project path %s contains '-'; Claude Code listings will show it as %s",
            project_path,
            project_path.replace("-", "/"),
        )

    session_dir = Path(projects_dir) / encode_project_path(project_path)
    session_dir.mkdir(parents=True, exist_ok=True)
    session_file = session_dir / f"{exported.session.id}.jsonl"

    messages = rewrite_message_paths(
        exported.session.messages, exported.session.project_path, project_path
    )
    output = "".join(json.dumps(m, ensure_ascii=False) + "\n" for m in messages)
    _atomic_write_text(session_file, output)

    LOGGER.info(
        "Imported session %s from %s into %s",
        exported.session.id,
        exported.session.project_path,
        session_file,
    )

    update_project_registry(Path(registry_path), project_path, exported.session.id)

    return session_file
