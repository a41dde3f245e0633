"""
Run the Schieber engine test suite.

Usage (from project root):

    python tests.py

Installs ``.[dev,rl]`` first when pytest is missing, then runs ``python -m pytest``.
Tests that need torch are skipped inside the test modules when it is absent.
"""
from __future__ import annotations

import subprocess
import sys
from pathlib import Path


ROOT = Path(__file__).resolve().parent


def ensure_test_dependencies() -> None:
    """Install the dev and rl extras (pytest, numpy, torch) unless pytest is importable."""
    try:
        import pytest  # noqa: F401
        return
    except ImportError:
        pass

    print("Installing schieber-engine with test and RL extras (.[dev,rl]) ...")
    subprocess.check_call(
        [sys.executable, "-m", "pip", "install", "-e", ".[dev,rl]"],
        cwd=str(ROOT),
    )


def main() -> None:
    ensure_test_dependencies()
    print("Running test suite with pytest ...")
    result = subprocess.run([sys.executable, "-m", "pytest", *sys.argv[1:]], cwd=str(ROOT))
    sys.exit(result.returncode)


if __name__ == "__main__":
    main()
