"""CLI utility functions for astra-build.

This module provides common utilities used by the CLI including:
- Startup banner and project version lookup
- Error handling and formatting
"""

import json
import sys
from pathlib import Path

from astra_build import __version__

DEFAULT_VERSION = "1.0.0"

ASCII_ART = r"""
               _
     /\       | |
    /  \   ___| |_ _ __ __ _
   / /\ \ / __| __| '__/ _` |
  / ____ \\__ \ |_| | | (_| |
 /_/    \_\___/\__|_|  \__,_|

"""


class VersionReader:
    """Determines the version shown in the startup banner."""

    @staticmethod
    def read_version(root: Path) -> str:
        """Read the project version.

        Uses the ``version`` field of package.json in the project root when
        present, else the installed astra-build version.

        Args:
            root: Project root directory

        Returns:
            Version string
        """
        package_json = root / "package.json"
        try:
            data = json.loads(package_json.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return __version__

        version = data.get("version") if isinstance(data, dict) else None
        return version or DEFAULT_VERSION


class BannerFormatter:
    """Prints the startup banner."""

    @staticmethod
    def format_banner(version: str) -> str:
        return f"{ASCII_ART}\nVersion: {version}\n"

    @staticmethod
    def print_banner(version: str) -> None:
        print(BannerFormatter.format_banner(version))


class ErrorFormatter:
    """Formats and displays error messages with ANSI color codes."""

    # ANSI color codes
    RED = "\033[1;31m"
    GREEN = "\033[1;32m"
    YELLOW = "\033[1;33m"
    RESET = "\033[0m"

    @staticmethod
    def print_error(title: str, message: str) -> None:
        """Print formatted error message.

        Args:
            title: Error title (e.g., "Java not found", "Build failed")
            message: Error message details
        """
        print()
        print(f"{ErrorFormatter.RED}✗ {title}{ErrorFormatter.RESET}")
        print()
        print(message)
        print()

    @staticmethod
    def print_success(message: str) -> None:
        print()
        print(f"{ErrorFormatter.GREEN}✓ {message}{ErrorFormatter.RESET}")

    @staticmethod
    def print_warning(message: str) -> None:
        print()
        print(f"{ErrorFormatter.YELLOW}✗ {message}{ErrorFormatter.RESET}")

    @staticmethod
    def handle_build_error(title: str, error: Exception) -> None:
        """Report a failed build stage and exit with status 1.

        Args:
            title: Error title
            error: The exception that aborted the build
        """
        ErrorFormatter.print_error(title, str(error))
        sys.exit(1)

    @staticmethod
    def handle_keyboard_interrupt() -> None:
        """Handle KeyboardInterrupt with standard formatting."""
        ErrorFormatter.print_warning("Build interrupted")
        sys.exit(130)  # Standard exit code for SIGINT

    @staticmethod
    def handle_unexpected_error(error: Exception, verbose: bool = False) -> None:
        """Handle unexpected errors with standard formatting.

        Args:
            error: The exception to handle
            verbose: Whether to print traceback
        """
        message = f"{type(error).__name__}: {error}"
        ErrorFormatter.print_error("Unexpected error", message)

        if verbose:
            import traceback

            print("Traceback:")
            print(traceback.format_exc())

        sys.exit(1)
