"""Pick the session that belongs to a working directory.

The same project can live at different paths on different machines, so an
exact path match is tried first, then a match on the directory name confirmed
by the git remote, then the directory name alone. Every tier prefers the most
recently modified session.
"""

import logging
import posixpath
import re
from typing import Callable, Dict, Iterable, List, Optional

from .models import Session

LOGGER = logging.getLogger(__name__)

RemoteLookup = Callable[[str], Optional[str]]

# user@host:owner/repo (scp-like SSH shorthand)
_SCP_LIKE = re.compile(r"^[^@/]+@(?P<host>[^:/]+):(?P<path>.+)$")


def path_basename(path: str) -> str:
    """Return the last component of ``path``, ignoring trailing slashes."""
    return posixpath.basename(path.rstrip("/"))


def normalize_remote_url(url: str) -> str:
    """Reduce a git remote URL to ``host/owner/repo``.

    ``git@github.com:Owner/Repo.git``, ``https://github.com/owner/repo`` and
    ``http://github.com/owner/repo.git`` all normalize to
    ``github.com/owner/repo``.
    """
    normalized = url.strip().lower().rstrip("/")
    if normalized.endswith(".git"):
        normalized = normalized[: -len(".git")]

    if "://" in normalized:
        rest = normalized.split("://", 1)[1]
        host, _, path = rest.partition("/")
        # Drop credentials (user@ or user:token@)
        host = host.rsplit("@", 1)[-1]
        normalized = f"{host}/{path}" if path else host
    else:
        scp = _SCP_LIKE.match(normalized)
        if scp:
            normalized = f"{scp.group('host')}/{scp.group('path')}"

    return normalized.rstrip("/")


def _most_recent(sessions: Iterable[Session]) -> Optional[Session]:
    best = None
    for session in sessions:
        if best is None or session.last_modified > best.last_modified:
            best = session
    return best


def _default_lookup(path: str) -> Optional[str]:
    from mcc_cli.services.git_service import get_remote_url

    return get_remote_url(path)


def match_session(
    sessions: List[Session],
    target_path: str,
    remote_lookup: Optional[RemoteLookup] = None,
) -> Optional[Session]:
    """Return the best session for ``target_path``, or None.

    Args:
        sessions: Catalog from :func:`find_all_sessions`
        target_path: Directory to match (usually the current directory)
        remote_lookup: Callable returning the git remote URL of a path or None.
            Defaults to querying git. Each path is looked up at most once.

    Returns:
        Matching session or None
    """
    # 1. Exact path
    exact = _most_recent(s for s in sessions if s.project_path == target_path)
    if exact is not None:
        LOGGER.debug("Exact path match for %s: %s", target_path, exact.id)
        return exact

    name = path_basename(target_path)
    candidates = [s for s in sessions if path_basename(s.project_path) == name]
    if not candidates:
        LOGGER.debug("No session with project name %r", name)
        return None

    # 2. Same project name and same git remote
    lookup = remote_lookup or _default_lookup
    cache: Dict[str, Optional[str]] = {}

    def remote_of(path: str) -> Optional[str]:
        if path not in cache:
            url = lookup(path)
            cache[path] = normalize_remote_url(url) if url else None
        return cache[path]

    target_remote = remote_of(target_path)
    if target_remote:
        same_repo = _most_recent(
            s for s in candidates if remote_of(s.project_path) == target_remote
        )
        if same_repo is not None:
            LOGGER.debug("Remote match for %s (%s): %s", target_path, target_remote, same_repo.id)
            return same_repo

    # 3. Same project name
    fallback = _most_recent(candidates)
    LOGGER.debug("Project name match for %s: %s", target_path, fallback.id if fallback else None)
    return fallback
