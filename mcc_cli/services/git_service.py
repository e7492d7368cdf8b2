"""Git queries used to recognise the same repository at different paths."""

import logging
import os
import subprocess
from typing import Optional

LOGGER = logging.getLogger(__name__)

# Seconds to wait for git before treating the path as "not a repository"
GIT_TIMEOUT = 2


def get_remote_url(path: str, remote: str = "origin") -> Optional[str]:
    """Return the URL of ``remote`` for the repository at ``path``.

    Args:
        path: Directory to query
        remote: Remote name

    Returns:
        The remote URL, or None if the path does not exist, is not a git
        repository, has no such remote, or git is unavailable.
    """
    if not os.path.isdir(path):
        return None

    try:
        result = subprocess.run(
            ["git", "-C", path, "remote", "get-url", remote],
            capture_output=True,
            text=True,
            timeout=GIT_TIMEOUT,
        )
    except (
        subprocess.TimeoutExpired,
        FileNotFoundError,
        subprocess.SubprocessError,
    ):
        LOGGER.debug("git remote lookup failed for %s", path, exc_info=True)
        return None

    if result.returncode != 0:
        return None

    url = result.stdout.strip()
    return url or None
