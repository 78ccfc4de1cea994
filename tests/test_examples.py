# SPDX-License-Identifier: MIT
"""Test runner for example graphs.

Discovers every example in examples/ that has a graph.json and a
test.toml, generates its build files with ``python -m mkninja`` and, when
the required tools are installed, builds it through the generated
ninja.sh launcher.
"""

from __future__ import annotations

import shutil
import subprocess
import sys
import tomllib
from pathlib import Path
from typing import Any

import pytest

EXAMPLES_DIR = Path(__file__).parent.parent / "examples"


def discover_examples() -> list[Path]:
    """Discover all example directories that have a graph.json and test.toml."""
    examples = []
    if not EXAMPLES_DIR.exists():
        return examples

    for item in sorted(EXAMPLES_DIR.iterdir()):
        if (
            item.is_dir()
            and (item / "graph.json").exists()
            and (item / "test.toml").exists()
        ):
            examples.append(item)

    return examples


def load_test_config(example_dir: Path) -> dict[str, Any]:
    """Load test.toml configuration."""
    with open(example_dir / "test.toml", "rb") as f:
        return tomllib.load(f)


def missing_tool(config: dict[str, Any]) -> str | None:
    """Return the first required build tool that is not installed."""
    for tool in config.get("build", {}).get("requires", []):
        if shutil.which(tool) is None:
            return tool
    return None


def generate_example(example_dir: Path, tmp_path: Path, *args: str) -> Path:
    """Copy an example to tmp_path and generate its build files there.

    Extra args are passed to mkninja ahead of the graph file.
    """
    work_dir = tmp_path / example_dir.name
    shutil.copytree(example_dir, work_dir)

    result = subprocess.run(
        [sys.executable, "-m", "mkninja", *args, "graph.json"],
        cwd=work_dir,
        capture_output=True,
        text=True,
        timeout=60,
    )
    if result.returncode != 0:
        print(f"mkninja stdout:\n{result.stdout}")
        print(f"mkninja stderr:\n{result.stderr}")
        pytest.fail(f"mkninja failed with code {result.returncode}")

    return work_dir


def build_and_verify(work_dir: Path, build_dir: str, config: dict[str, Any]) -> None:
    """Run the launcher in build_dir from work_dir and check the results."""
    launcher = work_dir / build_dir / "ninja.sh"
    result = subprocess.run(
        [str(launcher)],
        cwd=work_dir,
        capture_output=True,
        text=True,
        timeout=120,
    )
    if result.returncode != 0:
        build_file = work_dir / build_dir / "build.ninja"
        print(f"Ninja stdout:\n{result.stdout}")
        print(f"Ninja stderr:\n{result.stderr}")
        print(f"build.ninja contents:\n{build_file.read_text()}")
        pytest.fail(f"ninja failed with code {result.returncode}")

    for output in config.get("test", {}).get("expected_outputs", []):
        if not (work_dir / output).exists():
            pytest.fail(f"Expected output not found: {output}")

    verify = config.get("verify", {})
    for file_config in verify.get("files", []):
        content = (work_dir / file_config["path"]).read_text()
        assert file_config["contains"] in content

    for cmd_config in verify.get("commands", []):
        result = subprocess.run(
            cmd_config["run"],
            shell=True,
            cwd=work_dir,
            capture_output=True,
            text=True,
            timeout=30,
        )
        assert result.returncode == 0, f"{cmd_config['run']} failed"
        expected = cmd_config.get("expect_output")
        if expected:
            assert expected in result.stdout


@pytest.mark.parametrize(
    "example_dir", discover_examples(), ids=lambda p: p.name
)
def test_example_generates(example_dir: Path, tmp_path: Path) -> None:
    """Generated files contain what the example expects."""
    config = load_test_config(example_dir)
    test_config = config.get("test", {})

    work_dir = generate_example(example_dir, tmp_path)

    build_file = (work_dir / "build.ninja").read_text()
    for expected in test_config.get("expect_in_build_file", []):
        assert expected in build_file, f"{expected!r} not in build.ninja"

    launcher = (work_dir / "ninja.sh").read_text()
    for expected in test_config.get("expect_in_launcher", []):
        assert expected in launcher, f"{expected!r} not in ninja.sh"


@pytest.mark.parametrize(
    "example_dir", discover_examples(), ids=lambda p: p.name
)
def test_example_builds(example_dir: Path, tmp_path: Path) -> None:
    """The example builds with ninja through the generated launcher."""
    config = load_test_config(example_dir)
    tool = missing_tool(config)
    if tool:
        pytest.skip(f"Required tool '{tool}' not found")

    work_dir = generate_example(example_dir, tmp_path)
    build_and_verify(work_dir, ".", config)


@pytest.mark.parametrize(
    "example_dir", discover_examples(), ids=lambda p: p.name
)
def test_example_builds_from_source_root(example_dir: Path, tmp_path: Path) -> None:
    """out/ninja.sh builds the example when started from the source root."""
    config = load_test_config(example_dir)
    tool = missing_tool(config)
    if tool:
        pytest.skip(f"Required tool '{tool}' not found")

    work_dir = generate_example(example_dir, tmp_path, "-B", "out")
    launcher = (work_dir / "out" / "ninja.sh").read_text()
    assert "exec ninja -f out/build.ninja" in launcher
    assert not (work_dir / "build.ninja").exists()

    build_and_verify(work_dir, "out", config)
