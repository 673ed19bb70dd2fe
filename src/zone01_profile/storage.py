"""
Session persistence for the Zone01 Profile dashboard.

PURPOSE: Keep the bearer token and user id between CLI runs and web requests.
AI CONTEXT: The only file this package writes besides exported charts.

STORAGE STRUCTURE:
    ~/.zone01_profile/
    └── session.json   # {"token": "eyJ...", "user_id": 1234}

ERROR HANDLING STRATEGY:
- File not found: Not signed in
- JSON corruption or wrong shape: Log error, treat as not signed in
- Write failure: Log error, return False
- The event id is never persisted; it is resolved on every profile load

USAGE:
    store = SessionStore()
    session = store.load()
    if not session.is_authenticated():
        ...
"""

from __future__ import annotations

import json
import logging
import os
from typing import TYPE_CHECKING, Any

from .config import Config
from .filesystem import RealFileSystem
from .session import SessionContext

if TYPE_CHECKING:
    from .filesystem import FileSystem

__all__ = ["SessionStore"]

logger = logging.getLogger(__name__)


class SessionStore:
    """
    JSON file store for the opaque token/user-id pair.

    DESIGN PRINCIPLES:
    1. Fail-safe: Never crash the dashboard on I/O errors
    2. Private: Session file restricted to its owner (0o600)
    3. Testable: FileSystem can be injected for mocking
    """

    def __init__(
        self,
        session_dir: str | None = None,
        filesystem: FileSystem | None = None,
    ) -> None:
        """
        Initialize the store without touching the disk.

        Args:
            session_dir: Custom directory. Default: Config.get_session_dir()
            filesystem: FileSystem implementation. Default: RealFileSystem
        """
        self.session_dir = session_dir or Config.get_session_dir()
        self._fs: FileSystem = filesystem or RealFileSystem()
        self.session_file = os.path.join(self.session_dir, Config.SESSION_FILE)

    def _read_json(self, file_path: str, default: Any) -> Any:
        """
        Read JSON file with error handling.

        Args:
            file_path: Path to JSON file
            default: Value to return on any error

        Returns:
            Parsed JSON data or default value.
        """
        try:
            content = self._fs.read_text(file_path)
            return json.loads(content)
        except FileNotFoundError:
            return default
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in {file_path}: {e}")
            return default
        except OSError as e:
            logger.error(f"Error reading {file_path}: {e}")
            return default

    def _write_json(self, file_path: str, data: Any) -> bool:
        """
        Write JSON file with error handling and owner-only permissions.

        Returns:
            True on success, False on failure.
        """
        try:
            self._fs.makedirs(self.session_dir, exist_ok=True)
            # Restrict the file before the token lands in it.
            self._fs.write_text(file_path, "")
            self._fs.chmod(file_path, Config.SESSION_FILE_MODE)
            self._fs.write_text(file_path, json.dumps(data, indent=2))
            return True
        except OSError as e:
            logger.error(f"Error writing {file_path}: {e}")
            return False

    def load(self) -> SessionContext:
        """
        Load the stored session.

        Business context: Every web request and CLI command starts from the
        stored pair. A missing or unreadable file means the user must sign
        in again, mirroring a cleared browser storage.

        Returns:
            SessionContext with token and user id, or an empty context when
            nothing valid is stored. The event id is always None.

        Example:
            >>> store = SessionStore(session_dir="/tmp/s", filesystem=fs)
            >>> store.load().is_authenticated()
            False
        """
        data = self._read_json(self.session_file, {})
        if not isinstance(data, dict):
            logger.error(f"Unexpected session file shape in {self.session_file}")
            return SessionContext()

        token = data.get("token")
        user_id = data.get("user_id")
        if not isinstance(token, str) or not token:
            return SessionContext()
        if user_id is not None and not isinstance(user_id, int):
            try:
                user_id = int(user_id)
            except (TypeError, ValueError):
                logger.error(f"Ignoring invalid stored user id: {user_id!r}")
                user_id = None
        return SessionContext(token=token, user_id=user_id)

    def save(self, session: SessionContext) -> bool:
        """
        Persist the session's token and user id.

        Args:
            session: Context to persist. Its event id is not stored.

        Returns:
            True on success.
        """
        return self._write_json(
            self.session_file,
            {"token": session.get_token(), "user_id": session.get_user_id()},
        )

    def clear(self) -> bool:
        """
        Delete the stored session.

        Returns:
            True when the file is gone afterwards (including when it never
            existed), False when removal failed.
        """
        if not self._fs.exists(self.session_file):
            return True
        try:
            self._fs.remove(self.session_file)
        except OSError as e:
            logger.error(f"Error removing {self.session_file}: {e}")
            return False
        logger.info("Session cleared")
        return True
