"""
Integration tests for the complete astra-build run.

A fake ``java`` shell script on PATH stands in for the Java runtime and the
vanilla data generator; gcc compiles a tiny C program. Run with --full.
"""

import os
import shutil
import stat
import sys
from pathlib import Path

import pytest

from astra_build.cli import main

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(sys.platform == "win32", reason="fake java is a POSIX shell script"),
]

FAKE_JAVA = """#!/bin/sh
if [ "$1" = "-version" ]; then
    echo 'openjdk version "{major}.0.2" 2024-01-16' >&2
    echo 'OpenJDK Runtime Environment (build {major}.0.2+13-58)' >&2
    exit 0
fi
mkdir -p generated/reports
echo '{{"minecraft:block": {{}}}}' > generated/reports/registries.json
echo "$@" > generated/args.txt
exit 0
"""

CONVERTER = """from pathlib import Path


def convert():
    report = Path("notchian/generated/reports/registries.json")
    Path("converted.txt").write_text(report.read_text())
"""

MAIN_C = """#include <stdio.h>
#include "registries.h"

int main(void) {
    printf("astra %d\\n", REGISTRY_COUNT);
    return 0;
}
"""


def install_fake_java(bin_dir: Path, major: int) -> None:
    bin_dir.mkdir()
    java = bin_dir / "java"
    java.write_text(FAKE_JAVA.format(major=major))
    java.chmod(java.stat().st_mode | stat.S_IEXEC | stat.S_IXGRP | stat.S_IXOTH)


@pytest.fixture
def project(tmp_path, monkeypatch):
    """Project root with header, sources, converter and jar in place."""
    root = tmp_path / "astra"
    root.mkdir()
    (root / "include").mkdir()
    (root / "include" / "registries.h").write_text("#define REGISTRY_COUNT 1\n")
    (root / "src").mkdir()
    (root / "src" / "main.c").write_text(MAIN_C)
    (root / "build_registries.py").write_text(CONVERTER)
    (root / "notchian").mkdir()
    (root / "notchian" / "server.jar").write_bytes(b"PK")

    monkeypatch.chdir(root)
    monkeypatch.delenv("SERVER_JAR", raising=False)
    return root


def use_java(tmp_path, monkeypatch, major: int) -> None:
    install_fake_java(tmp_path / "bin", major)
    monkeypatch.setenv("PATH", str(tmp_path / "bin") + os.pathsep + os.environ.get("PATH", ""))


@pytest.fixture(autouse=True)
def no_logging_setup(monkeypatch):
    monkeypatch.setattr("astra_build.cli.setup_logging", lambda verbose=False: None)


@pytest.mark.skipif(shutil.which("gcc") is None, reason="gcc not installed")
def test_full_build(project, tmp_path, monkeypatch, capsys):
    use_java(tmp_path, monkeypatch, 21)

    with pytest.raises(SystemExit) as exc_info:
        main([])

    assert exc_info.value.code == 0
    assert (project / "astra").is_file()
    assert (project / "converted.txt").read_text().strip() == '{"minecraft:block": {}}'
    args = (project / "notchian" / "generated" / "args.txt").read_text().split()
    assert args == ["-DbundlerMainClass=net.minecraft.data.Main", "-jar", "server.jar", "--all"]

    out = capsys.readouterr().out
    assert "Java 21 found." in out
    assert "Build complete!" in out


def test_old_java_aborts_before_staging(project, tmp_path, monkeypatch, capsys):
    shutil.rmtree(project / "notchian")
    use_java(tmp_path, monkeypatch, 17)

    with pytest.raises(SystemExit) as exc_info:
        main([])

    assert exc_info.value.code == 1
    assert not (project / "notchian").exists()
    assert "Java 21 or newer required, but found Java 17." in capsys.readouterr().out


def test_missing_jar_aborts_before_data_generation(project, tmp_path, monkeypatch, capsys):
    (project / "notchian" / "server.jar").unlink()
    use_java(tmp_path, monkeypatch, 21)

    with pytest.raises(SystemExit) as exc_info:
        main([])

    assert exc_info.value.code == 1
    assert (project / "notchian").is_dir()
    assert not (project / "notchian" / "generated").exists()
    assert "No server.jar found." in capsys.readouterr().out


def test_missing_header_aborts_first(project, tmp_path, monkeypatch, capsys):
    (project / "include" / "registries.h").unlink()
    monkeypatch.setenv("PATH", str(tmp_path / "empty-bin"))

    with pytest.raises(SystemExit) as exc_info:
        main([])

    assert exc_info.value.code == 1
    assert "include/registries.h is missing." in capsys.readouterr().out
