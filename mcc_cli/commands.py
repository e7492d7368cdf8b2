"""Command palette provider for MCC.

Adds the browser's actions to the Textual command palette while keeping
Textual's default commands (quit, theme, show/hide keys, etc.).
"""

from textual.command import Provider, Hit, Hits


class SessionCommandProvider(Provider):
    """Command provider for session browser actions."""

    def _commands(self):
        return [
            (
                "Export Session",
                "Export the highlighted session to ~/.mcc/exports",
                self._run_export,
            ),
            (
                "Reload Sessions",
                "Rescan ~/.claude/projects for sessions",
                self._run_reload,
            ),
        ]

    async def discover(self) -> Hits:
        """Provide all commands when the palette first opens.

        Yields:
            All MCC commands for discoverability
        """
        for name, help_text, callback in self._commands():
            yield Hit(1, name, callback, help=help_text)

    async def search(self, query: str) -> Hits:
        """Search for MCC commands matching the query.

        Args:
            query: The search query from command palette

        Yields:
            Command hits matching the query, scored by relevance
        """
        matcher = self.matcher(query)

        for name, help_text, callback in self._commands():
            score = matcher.match(name)
            if score > 0:
                yield Hit(
                    score,
                    matcher.highlight(name),
                    callback,
                    help=help_text,
                )

    def _run_export(self) -> None:
        """Run the export action on the browser screen."""
        if hasattr(self.screen, "action_export"):
            self.screen.action_export()

    async def _run_reload(self) -> None:
        """Run the reload action on the browser screen."""
        if hasattr(self.screen, "action_reload"):
            await self.screen.action_reload()
