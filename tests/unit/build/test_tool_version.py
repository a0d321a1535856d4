"""
Unit tests for Java version detection.

Covers the version banners printed by several Java vendors and the error
paths of ToolVersionProbe.
"""

from unittest.mock import Mock

import pytest

from astra_build.process_runner import (
    IOMode,
    ProcessExecutionError,
    ProcessOutcome,
    ProcessRunner,
)
from astra_build.tool_version import (
    JavaVersionParser,
    ToolNotFoundError,
    ToolVersionProbe,
    VersionParseError,
)

OPENJDK_21 = """openjdk version "21.0.2" 2024-01-16
OpenJDK Runtime Environment (build 21.0.2+13-58)
OpenJDK 64-Bit Server VM (build 21.0.2+13-58, mixed mode, sharing)
"""

ORACLE_17 = """java version "17.0.9" 2023-10-17 LTS
Java(TM) SE Runtime Environment (build 17.0.9+11-LTS-201)
Java HotSpot(TM) 64-Bit Server VM (build 17.0.9+11-LTS-201, mixed mode, sharing)
"""

TEMURIN_GA_21 = """openjdk version "21" 2023-09-19
OpenJDK Runtime Environment Temurin-21+35 (build 21+35)
OpenJDK 64-Bit Server VM Temurin-21+35 (build 21+35, mixed mode, sharing)
"""

LEGACY_8 = """java version "1.8.0_292"
Java(TM) SE Runtime Environment (build 1.8.0_292-b10)
Java HotSpot(TM) 64-Bit Server VM (build 25.292-b10, mixed mode)
"""

PICKED_UP_OPTIONS_22 = """Picked up JAVA_TOOL_OPTIONS: -Dfile.encoding=UTF-8
openjdk version "22.0.1" 2024-04-16
OpenJDK Runtime Environment Corretto-22.0.1.8.1 (build 22.0.1+8-FR)
"""


class TestJavaVersionParser:
    """Test JavaVersionParser.parse."""

    @pytest.mark.parametrize(
        "output,expected",
        [
            (OPENJDK_21, 21),
            (ORACLE_17, 17),
            (TEMURIN_GA_21, 21),
            (LEGACY_8, 8),
            (PICKED_UP_OPTIONS_22, 22),
        ],
    )
    def test_known_vendor_banners(self, output, expected):
        assert JavaVersionParser.parse(output) == expected

    def test_first_match_wins(self):
        output = 'openjdk version "17.0.1"\nsomething version "21.0.0"'
        assert JavaVersionParser.parse(output) == 17

    def test_earliest_banner_wins_across_formats(self):
        """A dotless version earlier in the output beats a dotted one later."""
        output = 'openjdk version "21" 2023-09-19\njava version "17.0.9"\n'
        assert JavaVersionParser.parse(output) == 21

    def test_legacy_dotless_one_is_not_remapped(self):
        assert JavaVersionParser.parse('java version "1"') == 1

    def test_unparseable_output(self):
        with pytest.raises(VersionParseError, match="Could not parse Java version"):
            JavaVersionParser.parse("Error: could not find java.dll\n")

    def test_empty_output(self):
        with pytest.raises(VersionParseError):
            JavaVersionParser.parse("")


class TestToolVersionProbe:
    """Test ToolVersionProbe against a mocked runner."""

    @pytest.fixture
    def runner(self):
        return Mock(spec=ProcessRunner)

    def test_probe_runs_version_query(self, runner):
        runner.run.return_value = ProcessOutcome(returncode=0, captured_text=OPENJDK_21)

        assert ToolVersionProbe(runner).probe() == 21

        spec = runner.run.call_args.args[0]
        assert spec.command == "java"
        assert spec.args == ("-version",)
        assert spec.io_mode is IOMode.CAPTURE

    def test_probe_custom_command(self, runner):
        runner.run.return_value = ProcessOutcome(returncode=0, captured_text=ORACLE_17)

        assert ToolVersionProbe(runner, command="/opt/jdk/bin/java").probe() == 17
        assert runner.run.call_args.args[0].command == "/opt/jdk/bin/java"

    def test_launch_failure_is_tool_not_found(self, runner):
        runner.run.side_effect = ProcessExecutionError(
            "java", ("-version",), launch_error=FileNotFoundError("java")
        )

        with pytest.raises(ToolNotFoundError, match="java not found in PATH"):
            ToolVersionProbe(runner).probe()

    def test_nonzero_exit_is_tool_not_found(self, runner):
        runner.run.side_effect = ProcessExecutionError("java", ("-version",), returncode=1)

        with pytest.raises(ToolNotFoundError):
            ToolVersionProbe(runner).probe()

    def test_garbage_output_is_parse_error(self, runner):
        runner.run.return_value = ProcessOutcome(returncode=0, captured_text="hello\n")

        with pytest.raises(VersionParseError):
            ToolVersionProbe(runner).probe()

    def test_missing_captured_text_is_parse_error(self, runner):
        runner.run.return_value = ProcessOutcome(returncode=0, captured_text=None)

        with pytest.raises(VersionParseError):
            ToolVersionProbe(runner).probe()
