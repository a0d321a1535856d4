"""External Process Runner.

This module runs the external commands of the build pipeline: the Java version
query, the vanilla data generator, the C compiler and the freshly built server.

Design:
    - Exactly one process at a time, no retries and no timeout
    - Inherited I/O streams the child's output straight to the operator
    - Captured I/O collects stdout and stderr as text for later parsing
    - Exit code 0 is the only success; everything else is a ProcessExecutionError
    - On KeyboardInterrupt the child's whole process tree is terminated
"""

import logging
import subprocess
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import psutil


class IOMode(Enum):
    """How the child's standard streams are connected."""

    INHERIT = "inherit"
    CAPTURE = "capture"


@dataclass(frozen=True)
class ProcessSpec:
    """Description of a single external command invocation."""

    command: str
    args: Tuple[str, ...] = ()
    cwd: Optional[Path] = None
    io_mode: IOMode = IOMode.INHERIT

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", tuple(self.args))

    def argv(self) -> List[str]:
        """Full argument vector, command first."""
        return [self.command, *self.args]

    def display(self) -> str:
        return " ".join(self.argv())


@dataclass(frozen=True)
class ProcessOutcome:
    """Result of a successful process run."""

    returncode: int
    captured_text: Optional[str] = None


class ProcessExecutionError(Exception):
    """Raised when a process fails to launch or exits with a nonzero code."""

    def __init__(
        self,
        command: str,
        args: Sequence[str] = (),
        returncode: Optional[int] = None,
        output: Optional[str] = None,
        launch_error: Optional[OSError] = None,
    ):
        self.command = command
        self.args_list = list(args)
        self.returncode = returncode
        self.output = output
        self.launch_error = launch_error

        command_line = " ".join([command, *self.args_list])
        if launch_error is not None:
            message = f"Failed to launch {command}: {launch_error}"
        else:
            message = f"Command failed with code {returncode}: {command_line}"
        super().__init__(message)


def terminate_process_tree(pid: int, timeout: float = 3.0) -> int:
    """Terminate a process and all of its descendants.

    Children are terminated before their parents. Processes still alive after
    ``timeout`` seconds are killed.

    Args:
        pid: Root process ID
        timeout: Grace period for terminated processes to exit

    Returns:
        Number of processes signalled
    """
    try:
        root_proc = psutil.Process(pid)
    except psutil.NoSuchProcess:
        return 0

    try:
        children = root_proc.children(recursive=True)
    except psutil.NoSuchProcess:
        children = []

    processes = list(reversed(children)) + [root_proc]
    signalled: List[psutil.Process] = []
    for proc in processes:
        try:
            proc.terminate()
            signalled.append(proc)
            logging.debug(f"Terminated process {proc.pid}")
        except psutil.NoSuchProcess:
            pass  # Already dead
        except psutil.AccessDenied as e:
            logging.warning(f"Failed to terminate process {proc.pid}: {e}")

    _gone, alive = psutil.wait_procs(signalled, timeout=timeout)

    # Force kill any stragglers
    for proc in alive:
        try:
            proc.kill()
            logging.warning(f"Force killed stubborn process {proc.pid}")
        except psutil.NoSuchProcess:
            pass
        except psutil.AccessDenied as e:
            logging.warning(f"Failed to force kill process {proc.pid}: {e}")

    return len(signalled)


class ProcessRunner:
    """Runs external commands described by ProcessSpec.

    Example usage:
        runner = ProcessRunner()
        runner.run(ProcessSpec("gcc", ("src/main.c", "-o", "astra")))
    """

    def __init__(self, show_commands: bool = True):
        """Initialize process runner.

        Args:
            show_commands: Print "Running: ..." before inherited-I/O commands
        """
        self.show_commands = show_commands

    def run(self, spec: ProcessSpec) -> ProcessOutcome:
        """Run a command to completion.

        Args:
            spec: Command, arguments, working directory and I/O mode

        Returns:
            ProcessOutcome with exit code 0 and any captured output

        Raises:
            ProcessExecutionError: If the command cannot be launched or exits nonzero
        """
        capture = spec.io_mode is IOMode.CAPTURE

        if not capture and self.show_commands:
            print(f"Running: {spec.display()}")
        logging.debug(f"Launching {spec.argv()} (cwd={spec.cwd or Path.cwd()}, io={spec.io_mode.value})")

        popen_kwargs: Dict[str, Any] = {}
        if capture:
            popen_kwargs.update(
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                errors="replace",
            )

        try:
            process = subprocess.Popen(
                spec.argv(),
                cwd=str(spec.cwd) if spec.cwd is not None else None,
                **popen_kwargs,
            )
        except OSError as e:
            raise ProcessExecutionError(spec.command, spec.args, launch_error=e) from e

        try:
            stdout, stderr = process.communicate()
        except KeyboardInterrupt:
            logging.info(f"Interrupted, terminating {spec.command} (pid {process.pid})")
            terminate_process_tree(process.pid)
            raise

        captured_text = None
        if capture:
            captured_text = (stdout or "") + (stderr or "")

        logging.debug(f"{spec.command} exited with code {process.returncode}")

        if process.returncode != 0:
            raise ProcessExecutionError(
                spec.command,
                spec.args,
                returncode=process.returncode,
                output=captured_text,
            )

        return ProcessOutcome(returncode=process.returncode, captured_text=captured_text)
