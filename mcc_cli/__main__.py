"""Main entry point for the MCC command line."""

import logging
import os
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

import click
from dotenv import load_dotenv

from . import __version__
from .core.errors import MCCError

DEFAULT_EXPORT_FILE = "mcc-export.json.gz"


def _debug_enabled() -> bool:
    ctx = click.get_current_context(silent=True)
    return bool(ctx and ctx.find_root().obj and ctx.find_root().obj.get("debug"))


def _fail(*lines: str) -> None:
    """Print an error (first line red) and exit with status 1."""
    click.echo(click.style(lines[0], fg="red"), err=True)
    for line in lines[1:]:
        click.echo(line, err=True)
    sys.exit(1)


@contextmanager
def _report_errors(action: str):
    """Turn MCC and filesystem errors into a one-line message and exit code 1."""
    try:
        yield
    except (MCCError, OSError) as e:
        if _debug_enabled():
            raise
        _fail(f"✗ {action} failed: {e}")


@click.group(invoke_without_command=True)
@click.option(
    '--debug',
    is_flag=True,
    help='Enable debug logging and show tracebacks'
)
@click.version_option(version=__version__, prog_name="mcc")
@click.pass_context
def main(ctx: click.Context, debug: bool) -> None:
    """MCC - Multi-Claude Code

    Hand a Claude Code session to a teammate:

    \b
      1. cd /my/project && mcc export
      2. Send mcc-export.json.gz via Slack/email
      3. Teammate drops it in their project folder
      4. cd /my/project && mcc import
      5. claude -> /resume

    Run without a command to browse all sessions.
    """
    load_dotenv()
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = {"debug": debug}

    if ctx.invoked_subcommand is None:
        ctx.invoke(browse)


@main.command()
def browse() -> None:
    """Browse all sessions in a terminal UI."""
    from .app import MCCApp

    try:
        MCCApp().run()
    except KeyboardInterrupt:
        click.echo("\nExiting...")


@main.command(name="list")
def list_sessions() -> None:
    """List all sessions, most recent first."""
    from .session.scanner import find_all_sessions

    with _report_errors("List"):
        sessions = find_all_sessions()

    if not sessions:
        click.echo("No Claude Code sessions found.")
        return

    for session in sessions:
        click.echo(
            click.style(session.project_path, fg="yellow", bold=True)
            + click.style(f" ({session.time_ago()})", dim=True)
        )
        click.echo(f"  {session.summary}")
        click.echo(
            f"  {session.message_count()} messages • "
            f"{session.git_branch or 'no branch'} • {session.id}"
        )


@main.command()
@click.option(
    '-o', '--output',
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help=f'Container file to write (default: ./{DEFAULT_EXPORT_FILE})'
)
@click.option(
    '--path', 'project_path',
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help='Project directory whose session to export (default: current directory)'
)
def export(output: Optional[Path], project_path: Optional[Path]) -> None:
    """Export the session for a project directory."""
    from .services.export_service import export_session_to
    from .session.matcher import match_session
    from .session.scanner import find_all_sessions

    target = str(project_path.absolute()) if project_path else os.getcwd()
    output = output or Path.cwd() / DEFAULT_EXPORT_FILE

    with _report_errors("Export"):
        session = match_session(find_all_sessions(), target)
        if session is None:
            _fail(
                "✗ No Claude Code session found for current directory",
                f"  Current: {target}",
                "\nMake sure you've used Claude Code in this directory first.",
            )
        export_session_to(session, output)

    click.echo(click.style(f"✓ Session exported to {output}", fg="green"))
    if session.project_path != target:
        click.echo(f"  Matched session recorded in {session.project_path}")
    click.echo("\nShare with teammate:")
    click.echo(f"  1. Send {output.name} via Slack/email")
    click.echo("  2. They drop it in their project folder")
    click.echo("  3. They run: mcc import")


@main.command(name="import")
@click.argument(
    'container',
    type=click.Path(dir_okay=False, path_type=Path),
    required=False,
)
@click.option(
    '--target',
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help='Project directory to import into (default: current directory)'
)
def import_command(container: Optional[Path], target: Optional[Path]) -> None:
    """Import a session container (default: ./mcc-export.json.gz)."""
    from .services.import_service import import_session

    container = container or Path.cwd() / DEFAULT_EXPORT_FILE
    target_path = str(target.absolute()) if target else os.getcwd()

    with _report_errors("Import"):
        session_file = import_session(container, target_path)

    click.echo(click.style("✓ Session imported!", fg="green"))
    click.echo(f"  File: {session_file}")
    click.echo("\nOpen Claude Code and run /resume to continue the session.")


@main.command()
@click.argument('container', type=click.Path(dir_okay=False, path_type=Path))
def preview(container: Path) -> None:
    """Show what a container holds without importing it."""
    from .services.import_service import preview_session

    with _report_errors("Preview"):
        exported = preview_session(container)

    click.echo("Session Preview:")
    click.echo(f"  Version: {exported.version}")
    click.echo(f"  Exported by: {exported.exported_by}")
    click.echo(f"  Exported at: {exported.exported_at}")
    click.echo(f"  Project: {exported.session.project_path}")
    click.echo(f"  Summary: {exported.session.summary}")
    click.echo(f"  Messages: {len(exported.session.messages)}")
    if exported.session.git_branch:
        click.echo(f"  Git branch: {exported.session.git_branch}")


@main.group()
def config() -> None:
    """Manage MCC settings."""


@config.command(name="set-bucket")
@click.argument('bucket')
def set_bucket(bucket: str) -> None:
    """Set the bucket used by share and fetch (e.g. gs://team-sessions)."""
    from .config.settings_manager import set_bucket_setting

    with _report_errors("Config"):
        set_bucket_setting(bucket)

    click.echo(click.style(f"✓ GCS bucket configured: {bucket}", fg="green"))
    click.echo("\nYou can now use:")
    click.echo("  mcc share <file>       # Upload to GCS")
    click.echo("  mcc fetch <gs://...>   # Download and import from GCS")


@main.command()
@click.argument('container', type=click.Path(dir_okay=False, path_type=Path))
def share(container: Path) -> None:
    """Upload a container to the configured bucket."""
    from .config.settings_manager import get_bucket_setting
    from .services.cloud_service import share_container

    bucket = get_bucket_setting()
    if not bucket:
        _fail("✗ GCS not configured. Run: mcc config set-bucket gs://your-bucket")

    with _report_errors("Upload"):
        remote_uri = share_container(container, bucket)

    click.echo(click.style("✓ Session uploaded!", fg="green"))
    click.echo(f"  GCS path: {remote_uri}")
    click.echo("\nShare with your team:")
    click.echo(f"  mcc fetch {remote_uri}")


@main.command()
@click.argument('remote_uri')
@click.argument(
    'target',
    type=click.Path(file_okay=False, path_type=Path),
    required=False,
)
def fetch(remote_uri: str, target: Optional[Path]) -> None:
    """Download a container from a bucket and import it."""
    from .services.cloud_service import fetch_container
    from .services.import_service import import_session

    target_path = str(target.absolute()) if target else os.getcwd()

    with _report_errors("Fetch"):
        local_path = fetch_container(remote_uri)
        session_file = import_session(local_path, target_path)

    click.echo(click.style("✓ Session fetched and imported!", fg="green"))
    click.echo(f"  File: {session_file}")
    click.echo("\nYou can now open Claude Code and use /resume to load this session.")


if __name__ == "__main__":
    main()
