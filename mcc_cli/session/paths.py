"""Project directory naming used by Claude Code.

A project's sessions live in ``~/.claude/projects/<name>`` where ``<name>`` is
the project's absolute path with every ``/`` replaced by ``-``. Decoding
replaces every ``-`` back, so a path whose segments contain ``-`` (for
example ``/home/me/my-app``) does not survive the round trip: it decodes as
``/home/me/my/app``. Callers can check :func:`is_unambiguous` before relying on
a decoded path.
"""

PATH_SEPARATOR = "/"
PATH_SUBSTITUTE = "-"


def encode_project_path(project_path: str) -> str:
    """Encode an absolute path into a project directory name."""
    return project_path.replace(PATH_SEPARATOR, PATH_SUBSTITUTE)


def decode_project_dir(dir_name: str) -> str:
    """Decode a project directory name back into a path."""
    return dir_name.replace(PATH_SUBSTITUTE, PATH_SEPARATOR)


def is_unambiguous(project_path: str) -> bool:
    """Return True if ``project_path`` survives an encode/decode round trip."""
    return PATH_SUBSTITUTE not in project_path
