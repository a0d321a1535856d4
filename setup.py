"""
Setup file.
"""

import os
import re

from setuptools import find_packages, setup

URL = "https://github.com/astra-mc/astra-build"
KEYWORDS = "minecraft server registries gcc build pipeline"
HERE = os.path.dirname(os.path.abspath(__file__))


def read_version() -> str:
    with open(os.path.join(HERE, "src", "astra_build", "__init__.py"), encoding="utf-8") as f:
        match = re.search(r"^__version__ = [\"']([^\"']+)[\"']", f.read(), re.M)
    if match is None:
        raise RuntimeError("Unable to find __version__ in astra_build/__init__.py")
    return match.group(1)


if __name__ == "__main__":
    setup(
        name="astra-build",
        version=read_version(),
        description="Build pipeline for the Astra server",
        keywords=KEYWORDS,
        url=URL,
        python_requires=">=3.10",
        package_dir={"": "src"},
        packages=find_packages("src"),
        install_requires=["psutil"],
        extras_require={"test": ["pytest"]},
        entry_points={"console_scripts": ["astra-build = astra_build.cli:main"]},
    )
