"""
Configuration for the Zone01 Profile dashboard.

PURPOSE: Centralized configuration constants and runtime settings.
AI CONTEXT: All configurable values live here - modify this file to change behavior.

CONFIGURATION CATEGORIES:
- Platform: Domain and API endpoint paths
- Transport: Request timeout
- Session: On-disk session file location
- Metrics: Grade threshold and project kind
- Charts: SVG canvas geometry

ENVIRONMENT VARIABLES:
- ZONE01_DOMAIN: Platform base URL (default: https://platform.zone01.gr)
- ZONE01_REQUEST_TIMEOUT: Per-request timeout in seconds (default: 30)
- ZONE01_SESSION_DIR: Directory holding session.json (default: ~/.zone01_profile)

USAGE:
    from zone01_profile.config import Config
    endpoint = Config.graphql_endpoint()
    timeout = Config.get_request_timeout()
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import ClassVar

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Config:
    """
    Immutable configuration container for the profile dashboard.

    DESIGN: Frozen dataclass ensures configuration immutability at runtime.
    All values are class-level constants - no instance creation needed.

    SESSION STRUCTURE:
        ~/.zone01_profile/
        └── session.json   # {"token": "...", "user_id": 1234}
    """

    # =========================================================================
    # PLATFORM CONFIGURATION
    # =========================================================================
    DEFAULT_DOMAIN: ClassVar[str] = "https://platform.zone01.gr"
    SIGNIN_PATH: ClassVar[str] = "/api/auth/signin"
    GRAPHQL_PATH: ClassVar[str] = "/api/graphql-engine/v1/graphql"

    # =========================================================================
    # TRANSPORT CONFIGURATION
    # =========================================================================
    DEFAULT_REQUEST_TIMEOUT_SECONDS: ClassVar[float] = 30.0
    """
    Upper bound for a single HTTP exchange.
    A hung request would otherwise stall the whole profile load.
    """

    # =========================================================================
    # SESSION CONFIGURATION
    # =========================================================================
    DEFAULT_SESSION_DIR: ClassVar[str] = os.path.join("~", ".zone01_profile")
    SESSION_FILE: ClassVar[str] = "session.json"
    SESSION_FILE_MODE: ClassVar[int] = 0o600

    # =========================================================================
    # METRIC CONSTANTS
    # =========================================================================
    PASSING_GRADE: ClassVar[float] = 1.0
    """Minimum progress grade counted as a completed attempt."""

    PROJECT_KIND: ClassVar[str] = "project"

    # =========================================================================
    # CHART GEOMETRY
    # =========================================================================
    TIMELINE_WIDTH: ClassVar[int] = 900
    TIMELINE_HEIGHT: ClassVar[int] = 500
    TIMELINE_PADDING: ClassVar[int] = 80
    TIMELINE_GRID_FRACTIONS: ClassVar[tuple[float, ...]] = (0.0, 0.25, 0.5, 0.75, 1.0)

    DONUT_SIZE: ClassVar[int] = 450
    DONUT_CENTER_Y: ClassVar[int] = 180
    DONUT_RADIUS: ClassVar[int] = 100
    DONUT_HOLE_RADIUS: ClassVar[int] = 60

    LEVEL_RING_RADIUS: ClassVar[int] = 90

    # =========================================================================
    # ENVIRONMENT-BASED SETTINGS (runtime configurable)
    # =========================================================================
    _domain_override: ClassVar[str | None] = None
    _timeout_override: ClassVar[float | None] = None
    _session_dir_override: ClassVar[str | None] = None

    @classmethod
    def get_domain(cls) -> str:
        """
        Get the platform base URL used for sign-in and GraphQL requests.

        Uses a priority system: test override first, then the ZONE01_DOMAIN
        environment variable, then DEFAULT_DOMAIN. Trailing slashes are
        stripped so endpoint paths can be appended directly.

        Business context: Each Zone01 campus runs its own platform domain.
        Making it configurable lets the same dashboard serve other campuses
        without code changes.

        Returns:
            Base URL without trailing slash.

        Example:
            >>> Config.get_domain()
            'https://platform.zone01.gr'
        """
        if cls._domain_override is not None:
            return cls._domain_override.rstrip("/")
        return os.environ.get("ZONE01_DOMAIN", cls.DEFAULT_DOMAIN).rstrip("/")

    @classmethod
    def get_request_timeout(cls) -> float:
        """
        Get the per-request timeout in seconds.

        Reads ZONE01_REQUEST_TIMEOUT when set. Values that are not positive
        numbers are logged and ignored in favour of the default.

        Returns:
            Timeout in seconds as float.

        Example:
            >>> Config.get_request_timeout()
            30.0
        """
        if cls._timeout_override is not None:
            return cls._timeout_override
        raw = os.environ.get("ZONE01_REQUEST_TIMEOUT", "")
        if not raw:
            return cls.DEFAULT_REQUEST_TIMEOUT_SECONDS
        try:
            value = float(raw)
        except ValueError:
            logger.warning(f"Ignoring invalid ZONE01_REQUEST_TIMEOUT: {raw!r}")
            return cls.DEFAULT_REQUEST_TIMEOUT_SECONDS
        if value <= 0:
            logger.warning(f"Ignoring non-positive ZONE01_REQUEST_TIMEOUT: {raw!r}")
            return cls.DEFAULT_REQUEST_TIMEOUT_SECONDS
        return value

    @classmethod
    def get_session_dir(cls) -> str:
        """
        Get the directory that holds the persisted session file.

        Returns:
            Absolute directory path with '~' expanded.
        """
        if cls._session_dir_override is not None:
            return cls._session_dir_override
        raw = os.environ.get("ZONE01_SESSION_DIR", cls.DEFAULT_SESSION_DIR)
        return os.path.expanduser(raw)

    @classmethod
    def graphql_endpoint(cls) -> str:
        """Full URL of the GraphQL endpoint."""
        return f"{cls.get_domain()}{cls.GRAPHQL_PATH}"

    @classmethod
    def signin_endpoint(cls) -> str:
        """Full URL of the credential sign-in endpoint."""
        return f"{cls.get_domain()}{cls.SIGNIN_PATH}"

    @classmethod
    def set_test_overrides(
        cls,
        domain: str | None = None,
        request_timeout: float | None = None,
        session_dir: str | None = None,
    ) -> None:
        """
        Set test overrides for environment-based settings.

        Allows tests to control the domain, timeout and session directory
        without modifying environment variables. Must call
        reset_test_overrides() in test teardown to avoid affecting other tests.

        Args:
            domain: Override for the platform base URL. None to clear.
            request_timeout: Override for the request timeout. None to clear.
            session_dir: Override for the session directory. None to clear.

        Example:
            >>> Config.set_test_overrides(domain="http://test")
            >>> Config.graphql_endpoint()
            'http://test/api/graphql-engine/v1/graphql'
            >>> Config.reset_test_overrides()
        """
        cls._domain_override = domain
        cls._timeout_override = request_timeout
        cls._session_dir_override = session_dir

    @classmethod
    def reset_test_overrides(cls) -> None:
        """Reset all test overrides to use environment variables."""
        cls._domain_override = None
        cls._timeout_override = None
        cls._session_dir_override = None
