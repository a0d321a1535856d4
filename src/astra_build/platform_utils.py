"""Platform Detection Utilities.

This module detects the host platform for compiler and linker flag selection.

Platform names:
    - windows
    - linux
    - darwin
    - any other lowercase ``platform.system()`` value (treated as non-Windows)
"""

import platform
import sys

WINDOWS = "windows"


class PlatformDetector:
    """Detects the host platform the build runs on."""

    @staticmethod
    def detect_host_platform() -> str:
        """Detect the current platform.

        Returns:
            Lowercase platform name ('windows', 'linux', 'darwin', ...)
        """
        system = platform.system().lower()
        if not system:
            # platform.system() can be empty on exotic builds
            system = WINDOWS if sys.platform == "win32" else sys.platform
        return system

    @staticmethod
    def is_windows(platform_name: str) -> bool:
        return platform_name == WINDOWS

    @staticmethod
    def executable_suffix(platform_name: str) -> str:
        """Native executable extension for the platform ('.exe' on Windows, else '')."""
        return ".exe" if PlatformDetector.is_windows(platform_name) else ""
