"""Local CI runner: lint, format check, type check, then tests with coverage."""

from __future__ import annotations

import argparse
import subprocess
import sys
from pathlib import Path


def _run(command: list[str], cwd: Path) -> None:
    print("+", " ".join(command), flush=True)
    subprocess.run(command, check=True, cwd=cwd)


def steps(python: str, install: bool = True, lint: bool = True) -> list[list[str]]:
    commands: list[list[str]] = []
    if install:
        commands.append([python, "-m", "pip", "install", "-e", ".[dev]"])
    if lint:
        commands.append([python, "-m", "ruff", "check", "src", "tests"])
        commands.append([python, "-m", "black", "--check", "src", "tests"])
        commands.append([python, "-m", "mypy", "src"])
    commands.append(
        [python, "-m", "pytest", "--cov=src/foodadmin", "--cov-report=term-missing"]
    )
    return commands


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="foodadmin-ci")
    parser.add_argument("--skip-install", action="store_true", help="Dependencies are already installed.")
    parser.add_argument("--tests-only", action="store_true", help="Skip ruff, black and mypy.")
    args = parser.parse_args(argv)

    cwd = Path.cwd()
    for command in steps(sys.executable, install=not args.skip_install, lint=not args.tests_only):
        _run(command, cwd)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
