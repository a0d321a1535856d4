"""Host tool version detection.

The data generator runs inside the vanilla server jar, so a recent enough Java
runtime must be on PATH. Java prints its version banner to stderr in a handful
of vendor-specific shapes, for example:

    java version "1.8.0_292"
    openjdk version "17.0.9" 2023-10-17
    openjdk version "21" 2023-09-19

JavaVersionParser turns such a banner into a major version number, and
ToolVersionProbe runs ``java -version`` to obtain one.
"""

import logging
import re
from typing import Pattern

from .process_runner import IOMode, ProcessExecutionError, ProcessRunner, ProcessSpec


class ToolNotFoundError(Exception):
    """Raised when the host tool cannot be launched or reports failure."""
    pass


class VersionParseError(Exception):
    """Raised when no version number can be found in the tool output."""
    pass


class JavaVersionParser:
    """Parses the major version out of ``java -version`` output."""

    # Matches `version "21.0.1"`, `openjdk version "17.0.9"` and the dotless
    # GA form `openjdk version "21"`. The earliest match in the output wins.
    PATTERN: Pattern[str] = re.compile(r'version "(\d+)(?:\.(\d+))?[".]')

    @classmethod
    def parse(cls, output: str) -> int:
        """Extract the major Java version.

        Versions in the legacy ``1.x`` scheme report ``x`` as the major.

        Args:
            output: Captured version banner

        Returns:
            Major version number

        Raises:
            VersionParseError: If no version pattern matches
        """
        match = cls.PATTERN.search(output)
        if not match:
            raise VersionParseError(f"Could not parse Java version from output: {output.strip()!r}")

        major = int(match.group(1))
        if major == 1 and match.group(2) is not None:
            major = int(match.group(2))
        return major


class ToolVersionProbe:
    """Runs the host tool's version query and parses the result."""

    def __init__(self, runner: ProcessRunner, command: str = "java"):
        self.runner = runner
        self.command = command

    def probe(self) -> int:
        """Query the installed tool's major version.

        Returns:
            Major version number

        Raises:
            ToolNotFoundError: If the tool cannot be launched or exits nonzero
            VersionParseError: If the output contains no version
        """
        spec = ProcessSpec(self.command, ("-version",), io_mode=IOMode.CAPTURE)
        try:
            outcome = self.runner.run(spec)
        except ProcessExecutionError as e:
            raise ToolNotFoundError(f"{self.command} not found in PATH") from e

        major = JavaVersionParser.parse(outcome.captured_text or "")
        logging.debug(f"Detected {self.command} major version {major}")
        return major
