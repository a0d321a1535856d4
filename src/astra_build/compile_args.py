"""Compiler Argument Builder.

This module builds the single gcc invocation that compiles and links the
Astra server.

Design:
    - Pure: the same (platform, source listing, flags) always yields the same argv
    - Sources keep directory listing order, they are not sorted
    - Windows links against Winsock, pthreads and libm
    - The legacy Windows 9x console subsystem is only valid on Windows

Argument order:
    <sources> -O3 -Iinclude -o <output> <linker flags>
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Tuple

from .config import BuildConfig
from .platform_utils import PlatformDetector

WINDOWS_LINKER_FLAGS = "-lws2_32 -pthread -lm"
LEGACY_SUBSYSTEM_LINKER_FLAG = "-Wl,--subsystem,console:4"


class UnsupportedPlatformError(Exception):
    """Raised when a requested flag is not supported on the host platform."""
    pass


@dataclass(frozen=True)
class CompileArgs:
    """Arguments of the compile-and-link invocation."""

    source_files: Tuple[str, ...]
    optimization_flag: str
    include_flag: str
    output_path: str
    linker_flags: Tuple[str, ...]

    def to_argv(self) -> List[str]:
        """Compiler arguments in the order gcc receives them."""
        return [
            *self.source_files,
            self.optimization_flag,
            self.include_flag,
            "-o",
            self.output_path,
            *self.linker_flags,
        ]


def split_flags(*flag_strings: str) -> Tuple[str, ...]:
    """Join flag strings with spaces and split them again, dropping empty tokens.

    Example:
        >>> split_flags("-lws2_32 -pthread -lm", "", "-Wl,--subsystem,console:4")
        ('-lws2_32', '-pthread', '-lm', '-Wl,--subsystem,console:4')
    """
    return tuple(" ".join(flag_strings).split())


def list_sources(root: Path, config: BuildConfig) -> List[str]:
    """List the entries of the source directory in filesystem order.

    Args:
        root: Project root directory
        config: Build configuration naming the source directory

    Returns:
        Entry names as returned by os.listdir (unsorted)
    """
    return os.listdir(Path(root) / config.source_dir)


class CompileArgsBuilder:
    """Builds CompileArgs for the host platform.

    Example usage:
        builder = CompileArgsBuilder(config)
        args = builder.build("windows", ["main.c", "globals.c"], legacy_subsystem=True)
        subprocess.run(["gcc", *args.to_argv()])
    """

    def __init__(self, config: BuildConfig):
        self.config = config

    @staticmethod
    def validate(platform_name: str, legacy_subsystem: bool) -> None:
        """Reject flag combinations the host platform cannot build.

        Raises:
            UnsupportedPlatformError: If legacy_subsystem is requested off Windows
        """
        if legacy_subsystem and not PlatformDetector.is_windows(platform_name):
            raise UnsupportedPlatformError(
                "Compiling for Windows 9x is only supported on Windows."
            )

    def build(
        self,
        platform_name: str,
        source_listing: Iterable[str],
        legacy_subsystem: bool = False,
    ) -> CompileArgs:
        """Build the compiler arguments.

        Args:
            platform_name: Host platform from PlatformDetector
            source_listing: Entry names of the source directory, in listing order
            legacy_subsystem: Link for the Windows 9x console subsystem

        Returns:
            CompileArgs for the compile-and-link invocation

        Raises:
            UnsupportedPlatformError: If legacy_subsystem is requested off Windows
        """
        self.validate(platform_name, legacy_subsystem)

        linker = ""
        if PlatformDetector.is_windows(platform_name):
            linker = WINDOWS_LINKER_FLAGS
        if legacy_subsystem:
            linker += " " + LEGACY_SUBSYSTEM_LINKER_FLAG

        sources = tuple(
            os.path.join(self.config.source_dir, name)
            for name in source_listing
            if name.endswith(self.config.source_extension)
        )

        output = self.config.exe_basename + PlatformDetector.executable_suffix(platform_name)

        return CompileArgs(
            source_files=sources,
            optimization_flag=self.config.optimization,
            include_flag=f"-I{self.config.include_dir}",
            output_path=output,
            linker_flags=split_flags(linker),
        )
