"""Build configuration for the Astra pipeline.

All values are fixed for the duration of one pipeline run. The only external
inputs are the SERVER_JAR environment variable and the recognized CLI flags.
"""

import os
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Mapping, Optional

LEGACY_SUBSYSTEM_FLAG = "--9x"
RECOGNIZED_FLAGS = frozenset({LEGACY_SUBSYSTEM_FLAG})

SERVER_JAR_ENV = "SERVER_JAR"


@dataclass(frozen=True)
class BuildConfig:
    """Immutable settings for a single build."""

    required_java_major: int = 21
    server_jar: str = "server.jar"
    notchian_dir: str = "notchian"
    extra_flags: FrozenSet[str] = field(default_factory=frozenset)

    # Project layout
    registries_header: str = "include/registries.h"
    source_dir: str = "src"
    source_extension: str = ".c"
    include_dir: str = "include"

    # Toolchain
    java: str = "java"
    compiler: str = "gcc"
    optimization: str = "-O3"
    exe_basename: str = "astra"

    @property
    def legacy_subsystem(self) -> bool:
        """True if the Windows 9x console subsystem was requested."""
        return LEGACY_SUBSYSTEM_FLAG in self.extra_flags

    @classmethod
    def from_environment(
        cls,
        argv: Iterable[str] = (),
        environ: Optional[Mapping[str, str]] = None,
    ) -> "BuildConfig":
        """Build a configuration from command-line flags and the environment.

        Unrecognized arguments are ignored.

        Args:
            argv: Command-line arguments (without the program name)
            environ: Environment mapping (defaults to os.environ)

        Returns:
            BuildConfig for this run
        """
        if environ is None:
            environ = os.environ

        flags = frozenset(arg for arg in argv if arg in RECOGNIZED_FLAGS)
        server_jar = environ.get(SERVER_JAR_ENV) or cls.server_jar

        return cls(server_jar=server_jar, extra_flags=flags)
