"""
CLI entry point for Zone01 Profile.

PURPOSE: Command-line interface for signing in, reporting, exporting
charts and running the dashboard.
AI CONTEXT: Main entry points for package execution.

USAGE:
    python -m zone01_profile <command>

    # Or via CLI command (after install)
    zone01-profile login            # Sign in and store the session
    zone01-profile logout           # Forget the stored session
    zone01-profile report           # Print a text profile summary
    zone01-profile export --out DIR # Write both charts as SVG files
    zone01-profile dashboard        # Launch web dashboard
"""

from __future__ import annotations

import argparse
import asyncio
import getpass
import logging
import os
import sys
from collections.abc import Callable
from functools import lru_cache
from typing import TYPE_CHECKING

from .auth import SignInClient
from .charts import render_audit_ratio, render_xp_timeline
from .errors import DashboardError, ProfileLoadError
from .filesystem import RealFileSystem
from .orchestrator import LOAD_FAILURE_MESSAGE, ProfileLoader
from .presenters import DashboardPresenter
from .storage import SessionStore

if TYPE_CHECKING:
    from .filesystem import FileSystem
    from .models import AggregatedUserData
    from .session import SessionContext

# Constants
PROG_NAME = "zone01-profile"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000
XP_CHART_FILE = "xp_timeline.svg"
AUDIT_CHART_FILE = "audit_ratio.svg"

LoaderFactory = Callable[["SessionContext"], ProfileLoader]


@lru_cache(maxsize=1)
def _get_logger() -> logging.Logger:
    """Get module logger (cached for thread safety)."""
    logging.basicConfig(level=logging.INFO)
    return logging.getLogger(__name__)


def _log(message: str, *, emoji: str = "") -> None:
    """Log message with optional emoji prefix for CLI output.

    Args:
        message: The message to log.
        emoji: Optional emoji prefix for visual CLI feedback.
    """
    prefix = f"{emoji} " if emoji else ""
    _get_logger().info(f"{prefix}{message}")


def run_login(
    username: str | None = None,
    *,
    store: SessionStore | None = None,
    client: SignInClient | None = None,
    prompt: Callable[[str], str] = input,
    password_prompt: Callable[[str], str] = getpass.getpass,
) -> int:
    """
    Sign in interactively and store the session.

    Business context: Signing in once from the terminal lets the report,
    export and dashboard commands run without asking for credentials.

    Args:
        username: Login name or e-mail; prompted for when omitted.
        store: Optional SessionStore for testability.
        client: Optional SignInClient for testability.
        prompt: Function reading the username.
        password_prompt: Function reading the password without echo.

    Returns:
        0 when signed in and saved, 1 otherwise.

    Example:
        >>> # zone01-profile login --username alice
        >>> run_login("alice")
        Password:
        ✅ Signed in as alice
    """
    store = store or SessionStore()
    client = client or SignInClient()

    if not username:
        username = prompt("Username or e-mail: ")
    password = password_prompt("Password: ")

    try:
        session = asyncio.run(client.sign_in(username, password))
    except DashboardError as e:
        _log(str(e), emoji="❌")
        return 1

    if not store.save(session):
        _log(f"Could not write session file {store.session_file}", emoji="❌")
        return 1
    _log(f"Signed in as {username.strip()}", emoji="✅")
    return 0


def run_logout(store: SessionStore | None = None) -> int:
    """
    Remove the stored session.

    Returns:
        0 when no session remains, 1 when the file could not be removed.
    """
    store = store or SessionStore()
    if not store.clear():
        _log(f"Could not remove session file {store.session_file}", emoji="❌")
        return 1
    _log("Signed out", emoji="👋")
    return 0


def _load_profile(
    store: SessionStore, loader_factory: LoaderFactory
) -> AggregatedUserData | None:
    """
    Load the profile for the stored session.

    A failed load clears the stored session, so the next command asks the
    user to sign in again.

    Returns:
        AggregatedUserData, or None after logging why it is unavailable.
    """
    session = store.load()
    if not session.is_authenticated():
        _log(f"Not signed in. Run '{PROG_NAME} login' first.", emoji="🔒")
        return None
    try:
        return asyncio.run(loader_factory(session).load())
    except ProfileLoadError:
        store.clear()
        _log(LOAD_FAILURE_MESSAGE, emoji="❌")
        return None


def run_report(
    store: SessionStore | None = None,
    loader_factory: LoaderFactory | None = None,
) -> int:
    """
    Print a text profile summary to stdout.

    Args:
        store: Optional SessionStore for testability.
        loader_factory: Optional loader builder for testability.
            Default: ProfileLoader.for_session

    Returns:
        0 on success, 1 when not signed in or when the load failed.

    Example:
        >>> # zone01-profile report > progress.txt
        >>> run_report()
        Zone01 Profile: alice
        ...
    """
    data = _load_profile(store or SessionStore(), loader_factory or ProfileLoader.for_session)
    if data is None:
        return 1
    # Note: Using print() intentionally for stdout piping support
    print(DashboardPresenter(data).render_report())
    return 0


def run_export(
    out_dir: str,
    *,
    store: SessionStore | None = None,
    loader_factory: LoaderFactory | None = None,
    filesystem: FileSystem | None = None,
) -> int:
    """
    Write both charts as standalone SVG files.

    Empty charts are written as their placeholder markup so the files
    always exist after a successful load.

    Args:
        out_dir: Target directory; created when missing.
        store: Optional SessionStore for testability.
        loader_factory: Optional loader builder for testability.
        filesystem: Optional FileSystem for testability.

    Returns:
        0 when both files were written, 1 otherwise.

    Example:
        >>> run_export("charts")
        📊 Wrote charts/xp_timeline.svg
        📊 Wrote charts/audit_ratio.svg
    """
    fs = filesystem or RealFileSystem()
    data = _load_profile(store or SessionStore(), loader_factory or ProfileLoader.for_session)
    if data is None:
        return 1

    charts = {
        XP_CHART_FILE: render_xp_timeline(data.xp_timeline),
        AUDIT_CHART_FILE: render_audit_ratio(data.audit),
    }
    try:
        fs.makedirs(out_dir, exist_ok=True)
        for name, markup in charts.items():
            path = os.path.join(out_dir, name)
            fs.write_text(path, markup)
            _log(f"Wrote {path}", emoji="📊")
    except OSError as e:
        _log(f"Could not write charts to {out_dir}: {e}", emoji="❌")
        return 1
    return 0


def run_dashboard(host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> None:
    """
    Launch the web dashboard.

    Args:
        host: Network interface to bind to. Default '127.0.0.1'.
        port: TCP port for the HTTP server. Default 8000.

    Returns:
        None. Blocks until server shutdown (Ctrl+C).

    Example:
        >>> # zone01-profile dashboard --port 3000
        >>> run_dashboard(port=3000)
        🚀 Starting dashboard at http://127.0.0.1:3000
    """
    from .web import run_dashboard as start_web

    _log(f"Starting dashboard at http://{host}:{port}", emoji="🚀")
    _log("Press Ctrl+C to stop")
    start_web(host=host, port=port)


def main() -> int:
    """
    Parse arguments and dispatch to the requested command.

    Subcommands:
    - login [--username U]: Sign in and store the session
    - logout: Remove the stored session
    - report: Print a text profile summary
    - export --out DIR: Write both charts as SVG files
    - dashboard [--host HOST] [--port PORT]: Launch web dashboard

    Returns:
        Exit code: 0 for success, 1 for failure or a missing command.

    Raises:
        SystemExit: On --help, --version or argument parsing errors.

    Example:
        >>> # zone01-profile report
        >>> sys.exit(main())
    """
    from .__version__ import __version__

    parser = argparse.ArgumentParser(
        prog=PROG_NAME,
        description="Zone01 Profile - XP, level, audits and ranking from the Zone01 platform",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    login_parser = subparsers.add_parser("login", help="Sign in and store the session")
    login_parser.add_argument(
        "--username",
        default=None,
        help="Login name or e-mail (prompted when omitted)",
    )

    subparsers.add_parser("logout", help="Remove the stored session")

    subparsers.add_parser("report", help="Print profile summary to stdout")

    export_parser = subparsers.add_parser("export", help="Write charts as SVG files")
    export_parser.add_argument(
        "--out",
        default=".",
        help="Output directory (default: current directory)",
    )

    dashboard_parser = subparsers.add_parser("dashboard", help="Launch web dashboard")
    dashboard_parser.add_argument(
        "--host",
        default=DEFAULT_HOST,
        help=f"Bind address (default: {DEFAULT_HOST})",
    )
    dashboard_parser.add_argument(
        "--port",
        type=int,
        default=DEFAULT_PORT,
        help=f"Port number (default: {DEFAULT_PORT})",
    )

    args = parser.parse_args()

    if args.command == "login":
        return run_login(args.username)
    if args.command == "logout":
        return run_logout()
    if args.command == "report":
        return run_report()
    if args.command == "export":
        return run_export(args.out)
    if args.command == "dashboard":
        run_dashboard(host=args.host, port=args.port)
        return 0

    parser.print_help()
    return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
