#!/usr/bin/env python3
"""Run the formatters, linters and the test suite in one go.

Checks run in order (black, isort, ruff, pylint, pytest) and every check runs
even if an earlier one failed, so one invocation reports everything. Exits
non-zero when any check fails.
"""

from pathlib import Path
import subprocess
import sys

ROOT = Path(__file__).parent
PACKAGES = ["app", "core", "infrastructure", "main.py"]

CHECKS: list[tuple[str, list[str]]] = [
    ("black", [sys.executable, "-m", "black", ".", "--check"]),
    ("isort", [sys.executable, "-m", "isort", ".", "--check-only"]),
    ("ruff", [sys.executable, "-m", "ruff", "check", "."]),
    ("pylint", [sys.executable, "-m", "pylint", *PACKAGES]),
    ("pytest", [sys.executable, "-m", "pytest", "-q"]),
]


def run_check(name: str, cmd: list[str]) -> tuple[bool, str]:
    """Run one check from the repository root; return (passed, combined output)."""
    print(f"\n{'=' * 60}\n{name}: {' '.join(cmd[1:])}\n{'=' * 60}")
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=False, cwd=ROOT)
    except OSError as ex:
        print(f"could not run {name}: {ex}")
        return False, str(ex)

    output = (result.stdout + result.stderr).strip()
    passed = result.returncode == 0
    print("passed" if passed else "FAILED")
    if output:
        print(output)
    return passed, output


def main() -> None:
    results = [(name, *run_check(name, cmd)) for name, cmd in CHECKS]

    print(f"\n{'=' * 60}\nSummary\n{'=' * 60}")
    for name, passed, _ in results:
        print(f"{name:<8} {'ok' if passed else 'FAILED'}")

    all_passed = all(passed for _, passed, _ in results)
    print(f"\nOverall: {'all checks passed' if all_passed else 'some checks failed'}")
    sys.exit(0 if all_passed else 1)


if __name__ == "__main__":
    main()
