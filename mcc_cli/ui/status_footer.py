"""Status footer showing the last action result and key shortcuts."""

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.reactive import reactive
from textual.widget import Widget
from textual.widgets import Label

# (key, description) pairs shown on the right of the footer
SHORTCUTS = (
    ("e", "Export"),
    ("r", "Reload"),
    ("q", "Quit"),
)


class StatusFooter(Widget):
    """Footer displaying a status message and key shortcuts."""

    DEFAULT_CSS = """
    StatusFooter {
        dock: bottom;
        height: 1;
        background: $footer-background;
        color: $footer-foreground;
        layout: horizontal;
    }

    StatusFooter > #status-message {
        width: 1fr;
        height: 1;
        padding: 0 1;
        color: $footer-description-foreground;
        background: $footer-description-background;
    }

    StatusFooter > #shortcuts {
        width: auto;
        height: 1;
        layout: horizontal;
    }

    StatusFooter .shortcut-key {
        color: $footer-key-foreground;
        background: $footer-key-background;
        text-style: bold;
        padding: 0 1;
    }

    StatusFooter .shortcut-desc {
        color: $footer-description-foreground;
        background: $footer-description-background;
        padding: 0 1 0 0;
    }
    """

    message = reactive("")
    """Result of the last action (empty when there is nothing to report)."""

    error = reactive(False)
    """Whether ``message`` reports a failure."""

    def compose(self) -> ComposeResult:
        """Create child widgets for the status footer."""
        yield Label("", id="status-message")

        with Horizontal(id="shortcuts"):
            for key, description in SHORTCUTS:
                yield Label(key, classes="shortcut-key")
                yield Label(description, classes="shortcut-desc")

    def on_mount(self) -> None:
        """Render the initial message when mounted."""
        self._update_message()

    def show(self, message: str, error: bool = False) -> None:
        """Display ``message``, highlighted in red when ``error`` is set."""
        self.error = error
        self.message = message

    def _update_message(self) -> None:
        label = self.query_one("#status-message", Label)
        text = Text()
        if self.message:
            text.append(self.message, style="bold red" if self.error else "bold")
        label.update(text)

    def _watch_message(self, new_message: str) -> None:
        if self.is_mounted:
            self._update_message()

    def _watch_error(self, new_error: bool) -> None:
        if self.is_mounted:
            self._update_message()
