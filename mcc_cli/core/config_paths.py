"""Centralized path management for MCC.

This module provides a single source of truth for every file and directory
the tool reads or writes: the assistant's own session store and project
registry, and MCC's private directory under ~/.mcc.
"""

import logging
from pathlib import Path

LOGGER = logging.getLogger(__name__)


class ConfigPaths:
    """Centralized path management.

    Claude Code owns ~/.claude/ and ~/.claude.json; MCC only reads sessions
    from the former and updates the lastSessionId pointer in the latter.
    MCC's own files (config, exports, downloads) live in ~/.mcc/.
    """

    # Claude Code data directory (per-project session transcripts)
    CLAUDE_DIR = Path.home() / ".claude"

    # Claude Code project registry
    REGISTRY_FILE = Path.home() / ".claude.json"

    # MCC base directory
    BASE_DIR = Path.home() / ".mcc"

    @classmethod
    def get_projects_dir(cls) -> Path:
        """Get the directory holding one subdirectory per project.

        The directory is not created; a missing directory means no sessions.

        Returns:
            Path to ~/.claude/projects/
        """
        return cls.CLAUDE_DIR / "projects"

    @classmethod
    def get_registry_file(cls) -> Path:
        """Get path to the Claude Code project registry.

        Returns:
            Path to ~/.claude.json
        """
        return cls.REGISTRY_FILE

    @classmethod
    def get_base_dir(cls) -> Path:
        """Get base MCC directory, creating if needed.

        Returns:
            Path to ~/.mcc/
        """
        cls.BASE_DIR.mkdir(parents=True, exist_ok=True)
        return cls.BASE_DIR

    @classmethod
    def get_config_file(cls) -> Path:
        """Get path to main configuration file.

        Returns:
            Path to config.json
        """
        cls.get_base_dir()  # Ensure directory exists
        return cls.BASE_DIR / "config.json"

    @classmethod
    def get_exports_dir(cls) -> Path:
        """Get path to the default exports directory.

        Returns:
            Path to exports/
        """
        exports_dir = cls.BASE_DIR / "exports"
        exports_dir.mkdir(parents=True, exist_ok=True)
        LOGGER.debug("Using exports directory %s", exports_dir)
        return exports_dir

    @classmethod
    def get_temp_dir(cls) -> Path:
        """Get path to the download scratch directory.

        Returns:
            Path to temp/
        """
        temp_dir = cls.BASE_DIR / "temp"
        temp_dir.mkdir(parents=True, exist_ok=True)
        return temp_dir
