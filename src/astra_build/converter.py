"""Registry conversion step.

After the data generator has dumped the vanilla registries into the staging
directory, ``build_registries.py`` in the project root turns them into
``include/registries.h``. It is loaded from the project root and its
``convert()`` function is called with no arguments while the process working
directory is the project root. Whatever it raises is propagated unchanged.
"""

import importlib.util
import logging
import os
from pathlib import Path
from types import ModuleType

CONVERTER_SCRIPT = "build_registries.py"


class ConverterNotFoundError(Exception):
    """Raised when the conversion script is missing or has no convert()."""
    pass


class RegistryConverter:
    """Loads and runs the project's registry conversion script."""

    def __init__(self, root: Path, script_name: str = CONVERTER_SCRIPT):
        self.root = Path(root)
        self.script_name = script_name

    @property
    def script_path(self) -> Path:
        return self.root / self.script_name

    def _load(self) -> ModuleType:
        script = self.script_path
        if not script.is_file():
            raise ConverterNotFoundError(f"Conversion script not found: {script}")

        spec = importlib.util.spec_from_file_location(script.stem, script)
        if spec is None or spec.loader is None:
            raise ConverterNotFoundError(f"Cannot load conversion script: {script}")

        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        return module

    def __call__(self) -> None:
        """Run the conversion from the project root.

        The working directory is the root for the duration of convert() and
        is restored afterwards, also when convert() raises.

        Raises:
            ConverterNotFoundError: If the script or its convert() is missing
        """
        module = self._load()
        convert = getattr(module, "convert", None)
        if not callable(convert):
            raise ConverterNotFoundError(f"{self.script_path} does not define convert()")

        logging.debug(f"Running {self.script_path}:convert() in {self.root}")
        previous = os.getcwd()
        os.chdir(self.root)
        try:
            convert()
        finally:
            os.chdir(previous)
