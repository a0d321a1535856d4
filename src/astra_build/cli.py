"""
Command-line interface for astra-build.

This module provides the `astra-build` CLI tool that prepares the registry
data and compiles the Astra server.
"""

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from astra_build.cli_utils import BannerFormatter, ErrorFormatter, VersionReader
from astra_build.compile_args import UnsupportedPlatformError
from astra_build.config import LEGACY_SUBSYSTEM_FLAG, BuildConfig
from astra_build.converter import ConverterNotFoundError
from astra_build.pipeline import (
    MissingInputArtifactError,
    MissingPrerequisiteError,
    Pipeline,
    ToolVersionTooOldError,
)
from astra_build.process_runner import ProcessExecutionError
from astra_build.tool_version import ToolNotFoundError, VersionParseError


@dataclass
class BuildArgs:
    """Arguments for the build command."""

    project_dir: Path
    flags: List[str]
    verbose: bool = False


def setup_logging(verbose: bool = False) -> None:
    """Configure the root logger for CLI use."""
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )
    logger.addHandler(console_handler)


def build_command(args: BuildArgs) -> None:
    """Run the complete Astra build.

    Examples:
        astra-build              # Build and run the server
        astra-build --9x         # Link for the Windows 9x console subsystem
        astra-build --verbose    # Debug logging and tracebacks

    Exits with status 0 on success and 1 on any failure.
    """
    BannerFormatter.print_banner(VersionReader.read_version(args.project_dir))

    try:
        config = BuildConfig.from_environment(args.flags)
        pipeline = Pipeline(args.project_dir, config)
        pipeline.run()
        ErrorFormatter.print_success("Build successful!")
        sys.exit(0)

    except MissingPrerequisiteError as e:
        ErrorFormatter.handle_build_error("Error: Missing prerequisite", e)
    except (ToolNotFoundError, VersionParseError) as e:
        logging.debug(f"Java probe failed: {e}")
        ErrorFormatter.handle_build_error("Error: Java not found in PATH.", e)
    except ToolVersionTooOldError as e:
        ErrorFormatter.handle_build_error("Error: Unsupported Java version", e)
    except MissingInputArtifactError as e:
        ErrorFormatter.handle_build_error("Error: Missing server jar", e)
    except UnsupportedPlatformError as e:
        ErrorFormatter.handle_build_error("Error: Unsupported platform", e)
    except ConverterNotFoundError as e:
        ErrorFormatter.handle_build_error("Error: Registry conversion unavailable", e)
    except ProcessExecutionError as e:
        ErrorFormatter.handle_build_error("Build failed!", e)
    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e, args.verbose)


def main(argv: Optional[List[str]] = None) -> None:
    """astra-build - Build the Astra server from vanilla registry data."""
    parser = argparse.ArgumentParser(
        prog="astra-build",
        description="Dump vanilla registries, then compile and run the Astra server",
    )
    parser.add_argument(
        LEGACY_SUBSYSTEM_FLAG,
        dest="legacy_subsystem",
        action="store_true",
        help="Link for the Windows 9x console subsystem (Windows only)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show debug logging and tracebacks",
    )

    # Unrecognized arguments are ignored
    parsed_args, _unknown = parser.parse_known_args(argv)

    setup_logging(parsed_args.verbose)

    flags = [LEGACY_SUBSYSTEM_FLAG] if parsed_args.legacy_subsystem else []
    build_command(
        BuildArgs(
            project_dir=Path.cwd(),
            flags=flags,
            verbose=parsed_args.verbose,
        )
    )


if __name__ == "__main__":
    main()
