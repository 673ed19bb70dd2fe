"""Main test module for zone01-profile."""

import sys
from unittest.mock import patch

import zone01_profile


class TestVersion:
    """Test version information."""

    def test_version_format(self) -> None:
        """Verifies version follows semantic versioning format.

        Tests that version string has MAJOR.MINOR.PATCH structure
        with numeric components.

        Business context:
        The CLI prints this version with --version and the web app reports
        it in its OpenAPI metadata; both must agree on one scheme.

        Arrangement:
        None - tests package-level attribute.

        Action:
        Parse version string and validate components.

        Assertion Strategy:
        Validates 3 parts, all numeric.
        """
        parts = zone01_profile.__version__.split(".")
        assert len(parts) == 3
        assert all(part.isdigit() for part in parts)

    def test_metadata_exported(self) -> None:
        """Verifies package re-exports title and license metadata."""
        assert zone01_profile.__title__ == "zone01_profile"
        assert zone01_profile.__license__ == "MIT"
        assert "__version__" in zone01_profile.__all__


class TestModuleEntryPoint:
    """Tests for python -m zone01_profile."""

    def test_main_module_exits_with_cli_code(self) -> None:
        """Verifies __main__ passes the CLI's return code to sys.exit.

        Business context:
        Shell scripts rely on the exit code of 'python -m zone01_profile
        report' to detect a failed profile load.

        Arrangement:
        Patch cli.main to return 1 and sys.exit to capture the code.

        Action:
        Run the __main__ module with runpy.

        Assertion Strategy:
        sys.exit called exactly once with 1.
        """
        import runpy

        with (
            patch("zone01_profile.cli.main", return_value=1),
            patch.object(sys, "exit") as mock_exit,
        ):
            runpy.run_module("zone01_profile.__main__", run_name="__main__")

        mock_exit.assert_called_once_with(1)
