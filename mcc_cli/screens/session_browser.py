"""Session browser screen listing every discovered session."""

import time
from pathlib import Path
from typing import List, Optional

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.screen import Screen
from textual.widgets import Header, Label, ListItem, ListView, Static

from ..core.errors import MCCError
from ..services.export_service import export_session
from ..session.models import Session
from ..session.scanner import find_all_sessions
from ..ui.status_footer import StatusFooter


def format_session_row(session: Session, now: Optional[float] = None) -> Text:
    """Render a session as three lines: project and age, summary, details."""
    text = Text()
    text.append(f"{session.project_name} ", style="bold yellow")
    text.append(f"({session.time_ago(now)})", style="grey62")
    text.append("\n  ")
    text.append(session.summary, style="white")
    text.append("\n  ")
    text.append(f"{session.message_count()} messages", style="grey42")
    text.append(" • ")
    text.append(session.git_branch or "no branch", style="green")
    return text


class SessionBrowserScreen(Screen):
    """Browse sessions and export the highlighted one."""

    CSS = """
    SessionBrowserScreen #sessions-title {
        height: 1;
        padding: 0 1;
        color: $text-primary;
        text-style: bold;
    }

    SessionBrowserScreen #session-list {
        height: 1fr;
        border: solid $primary;
    }

    SessionBrowserScreen ListItem {
        padding: 0 1;
    }
    """

    BINDINGS = [
        Binding("j", "cursor_down", "Down", show=False),
        Binding("k", "cursor_up", "Up", show=False),
        Binding("e", "export", "Export"),
        Binding("r", "reload", "Reload"),
    ]

    def __init__(
        self,
        projects_dir: Optional[Path] = None,
        export_dir: Optional[Path] = None,
    ):
        """Initialize the screen.

        Args:
            projects_dir: Sessions root (default: ~/.claude/projects)
            export_dir: Export destination (default: ~/.mcc/exports)
        """
        super().__init__()
        self.projects_dir = projects_dir
        self.export_dir = export_dir
        self.sessions: List[Session] = []

    def compose(self) -> ComposeResult:
        """Create child widgets for the browser."""
        yield Header()
        yield Static("Sessions (0)", id="sessions-title")
        yield ListView(id="session-list")
        yield StatusFooter(id="status-footer")

    async def on_mount(self) -> None:
        """Load sessions when the screen is shown."""
        await self.reload_sessions()
        self.query_one("#session-list", ListView).focus()

    @property
    def selected_session(self) -> Optional[Session]:
        """Session under the cursor, if any."""
        index = self.query_one("#session-list", ListView).index
        if index is None or not 0 <= index < len(self.sessions):
            return None
        return self.sessions[index]

    def show_status(self, message: str, error: bool = False) -> None:
        self.query_one("#status-footer", StatusFooter).show(message, error=error)

    async def reload_sessions(self) -> bool:
        """Rescan sessions and rebuild the list.

        Returns:
            True if the scan succeeded
        """
        try:
            sessions = find_all_sessions(self.projects_dir)
        except MCCError as e:
            self.show_status(f"Reload failed: {e}", error=True)
            return False

        list_view = self.query_one("#session-list", ListView)
        previous = list_view.index or 0

        self.sessions = sessions
        now = time.time()
        await list_view.clear()
        await list_view.extend(
            [ListItem(Label(format_session_row(s, now))) for s in sessions]
        )
        if sessions:
            list_view.index = min(previous, len(sessions) - 1)

        self.query_one("#sessions-title", Static).update(f"Sessions ({len(sessions)})")
        return True

    def action_cursor_down(self) -> None:
        self.query_one("#session-list", ListView).action_cursor_down()

    def action_cursor_up(self) -> None:
        self.query_one("#session-list", ListView).action_cursor_up()

    def action_export(self) -> None:
        """Export the highlighted session to the exports directory."""
        session = self.selected_session
        if session is None:
            self.show_status("No session selected", error=True)
            return

        try:
            output_path = export_session(session, self.export_dir)
        except MCCError as e:
            self.show_status(f"Export failed: {e}", error=True)
            return

        self.show_status(f"Exported to: {output_path}")

    async def action_reload(self) -> None:
        """Rescan sessions from disk."""
        if await self.reload_sessions():
            self.show_status("Sessions reloaded")
