"""
Build pipeline for the Astra server.

This module sequences the complete build, from checking prerequisites to
running the compiled server. The stages run strictly in order and every
failure aborts the whole run:

1. Check that include/registries.h exists
2. Check the Java runtime version
3. Ensure the notchian staging directory exists
4. Check that the server jar is in the staging directory
5. Dump the vanilla registries with the server's data generator
6. Convert the dumped registries (build_registries.py)
7. Build the gcc command line for the host platform
8. Compile the server
9. Run the server

The root is made absolute up front. The staging directory is passed to the
data generator as its working directory, and the compiler and the server
binary run from the project root. Only the registry conversion switches the
process working directory, to the root, and restores it afterwards.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from .compile_args import CompileArgs, CompileArgsBuilder, list_sources
from .config import BuildConfig
from .converter import RegistryConverter
from .platform_utils import PlatformDetector
from .process_runner import IOMode, ProcessRunner, ProcessSpec
from .staging import PathGate, StagingArea
from .tool_version import ToolVersionProbe

DATA_GENERATOR_MAIN_CLASS = "net.minecraft.data.Main"
SERVER_DOWNLOAD_URL = "https://www.minecraft.net/en-us/download/server"


class PipelineState(Enum):
    """Stages of a build, in the only order they can be reached."""

    START = "start"
    PREFLIGHT_CHECKED = "preflight_checked"
    TOOL_VERSION_CHECKED = "tool_version_checked"
    STAGED = "staged"
    ARTIFACT_CHECKED = "artifact_checked"
    DATA_GENERATED = "data_generated"
    UNSTAGED = "unstaged"
    DATA_CONVERTED = "data_converted"
    ARGS_BUILT = "args_built"
    COMPILED = "compiled"
    EXECUTED = "executed"
    DONE = "done"


class BuildPipelineError(Exception):
    """Base class for failed pipeline preconditions."""
    pass


class MissingPrerequisiteError(BuildPipelineError):
    """Raised when the generated registries header is missing."""
    pass


class ToolVersionTooOldError(BuildPipelineError):
    """Raised when the installed Java is older than required."""

    def __init__(self, found: int, required: int):
        self.found = found
        self.required = required
        super().__init__(
            f"Java {required} or newer required, but found Java {found}."
        )


class MissingInputArtifactError(BuildPipelineError):
    """Raised when the server jar is not in the staging directory."""
    pass


class Pipeline:
    """
    Runs the fixed Astra build sequence.

    Example usage:
        pipeline = Pipeline(Path.cwd(), BuildConfig.from_environment(sys.argv[1:]))
        pipeline.run()
        assert pipeline.state is PipelineState.DONE
    """

    def __init__(
        self,
        root: Path,
        config: BuildConfig,
        runner: Optional[ProcessRunner] = None,
        converter: Optional[Callable[[], None]] = None,
        platform_name: Optional[str] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            root: Project root directory
            config: Build configuration
            runner: Process runner (defaults to ProcessRunner())
            converter: Registry conversion step (defaults to RegistryConverter(root))
            platform_name: Host platform (defaults to PlatformDetector.detect_host_platform())
        """
        self.root = Path(root).resolve()
        self.config = config
        self.runner = runner if runner is not None else ProcessRunner()
        self.converter = converter if converter is not None else RegistryConverter(self.root)
        self.platform_name = platform_name or PlatformDetector.detect_host_platform()
        self.staging = StagingArea(self.root, config.notchian_dir)
        self.state = PipelineState.START

    def _advance(self, state: PipelineState) -> None:
        logging.debug(f"Pipeline state: {self.state.value} -> {state.value}")
        self.state = state

    def run(self) -> PipelineState:
        """
        Execute the complete build.

        Returns:
            The final state (always PipelineState.DONE)

        Raises:
            MissingPrerequisiteError: If include/registries.h is missing
            ToolNotFoundError: If Java cannot be run
            VersionParseError: If the Java version cannot be determined
            ToolVersionTooOldError: If Java is older than required
            MissingInputArtifactError: If the server jar is missing
            UnsupportedPlatformError: If --9x is requested off Windows
            ProcessExecutionError: If the data generator, gcc or the server fails
        """
        self.check_prerequisites()
        self.check_java()
        staging_dir = self.staging.ensure()
        self._advance(PipelineState.STAGED)

        self.check_server_jar()
        self.generate_data(staging_dir)
        # The staging directory was only ever passed as a cwd argument
        self._advance(PipelineState.UNSTAGED)

        self.convert_registries()
        compile_args = self.build_compile_args()
        output = self.compile(compile_args)
        self.execute(output)

        print("Build complete!")
        self._advance(PipelineState.DONE)
        return self.state

    def check_prerequisites(self) -> None:
        header = self.root / self.config.registries_header
        if not PathGate.exists(header):
            raise MissingPrerequisiteError(
                f"{self.config.registries_header} is missing.\n"
                "Please run the registry extraction step first."
            )
        self._advance(PipelineState.PREFLIGHT_CHECKED)

    def check_java(self) -> int:
        print("Checking Java installation...")
        version = ToolVersionProbe(self.runner, self.config.java).probe()
        if version < self.config.required_java_major:
            raise ToolVersionTooOldError(version, self.config.required_java_major)

        print(f"Java {version} found.")
        self._advance(PipelineState.TOOL_VERSION_CHECKED)
        return version

    def check_server_jar(self) -> Path:
        jar_path = self.staging.resolve(self.config.server_jar)
        if not PathGate.exists(jar_path):
            raise MissingInputArtifactError(
                f"No {self.config.server_jar} found.\n"
                f"Please download the server.jar from {SERVER_DOWNLOAD_URL}\n"
                f"and place it in the {self.config.notchian_dir} directory."
            )
        self._advance(PipelineState.ARTIFACT_CHECKED)
        return jar_path

    def generate_data(self, staging_dir: Path) -> None:
        """Dump all vanilla registries into the staging directory."""
        print("Dumping registries...")
        self.runner.run(
            ProcessSpec(
                self.config.java,
                (
                    f"-DbundlerMainClass={DATA_GENERATOR_MAIN_CLASS}",
                    "-jar",
                    self.config.server_jar,
                    "--all",
                ),
                cwd=staging_dir,
                io_mode=IOMode.INHERIT,
            )
        )
        self._advance(PipelineState.DATA_GENERATED)

    def convert_registries(self) -> None:
        print("Processing registries...")
        self.converter()
        self._advance(PipelineState.DATA_CONVERTED)

    def build_compile_args(self) -> CompileArgs:
        """Build the gcc arguments for the host platform.

        The platform/flag check runs before the source directory is read so an
        unsupported combination fails without touching anything else.
        """
        print("Compiling C source files...")
        builder = CompileArgsBuilder(self.config)
        builder.validate(self.platform_name, self.config.legacy_subsystem)

        compile_args = builder.build(
            self.platform_name,
            list_sources(self.root, self.config),
            self.config.legacy_subsystem,
        )
        logging.debug(f"Compiler arguments: {compile_args.to_argv()}")
        self._advance(PipelineState.ARGS_BUILT)
        return compile_args

    def compile(self, compile_args: CompileArgs) -> Path:
        self.runner.run(
            ProcessSpec(self.config.compiler, tuple(compile_args.to_argv()), cwd=self.root)
        )
        self._advance(PipelineState.COMPILED)
        return self.root / compile_args.output_path

    def execute(self, executable: Path) -> None:
        print(f"Running {executable.name}...")
        self.runner.run(ProcessSpec(str(executable), cwd=self.root))
        self._advance(PipelineState.EXECUTED)
