"""Main application module for the MCC session browser."""

from pathlib import Path
from typing import Optional

from textual.app import App
from textual.binding import Binding

from .screens.session_browser import SessionBrowserScreen


def get_session_commands_provider():
    """Lazy load the session command provider.

    Returns:
        SessionCommandProvider class
    """
    from .commands import SessionCommandProvider

    return SessionCommandProvider


class MCCApp(App):
    """Terminal browser for Claude Code sessions."""

    BINDINGS = [
        Binding("q", "quit", "Quit", priority=True),
    ]

    COMMANDS = App.COMMANDS | {get_session_commands_provider}

    TITLE = "MCC - Multi-Claude Code"
    SUB_TITLE = "Share Claude Code sessions"

    def __init__(
        self,
        projects_dir: Optional[Path] = None,
        export_dir: Optional[Path] = None,
    ):
        """Initialize the application.

        Args:
            projects_dir: Sessions root (default: ~/.claude/projects)
            export_dir: Export destination (default: ~/.mcc/exports)
        """
        super().__init__()
        self.projects_dir = projects_dir
        self.export_dir = export_dir

    def on_mount(self) -> None:
        """Show the session browser."""
        self.push_screen(
            SessionBrowserScreen(
                projects_dir=self.projects_dir,
                export_dir=self.export_dir,
            )
        )
