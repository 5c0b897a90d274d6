#!/usr/bin/env python3
# Copyright 2026 RedTopo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Run all CI checks locally: format, lint, type check, tests, grammar table and build.

Pass step names (case-insensitive prefixes) to run only those steps, e.g.
``tools/ci.py lint tests``.
"""

import pathlib
import subprocess
import sys
import time

from yachalk import chalk

# ###############
# Public Interface
# ###############

STEPS: list[tuple[str, list[str]]] = [
    ("Format check", ["uv", "run", "ruff", "format", "--check", "src/", "tests/"]),
    ("Lint", ["uv", "run", "ruff", "check", "src/", "tests/"]),
    ("Type check", ["uv", "run", "ty", "check", "src/"]),
    ("Tests", ["uv", "run", "pytest", "--cov=redtopo", "--cov-report=term-missing"]),
    ("Grammar table", ["uv", "run", "redtopo", "table", "--output", "dist/ll1_table.txt"]),
    ("Build", ["uv", "build"]),
]


def main(argv: list[str]) -> int:
    """Run the selected CI steps and report results."""
    selected = _select_steps(argv)
    if not selected:
        print(chalk.red(f"No CI step matches: {' '.join(argv)}"))
        return 2

    results: list[tuple[str, bool, float]] = []
    for name, cmd in selected:
        _banner(name)
        start = time.monotonic()
        proc = subprocess.run(cmd, cwd=_repo_root())
        results.append((name, proc.returncode == 0, time.monotonic() - start))

    _banner("  Summary")
    for name, passed, elapsed in results:
        paint = chalk.green if passed else chalk.red
        status = "PASS" if passed else "FAIL"
        print(paint(f"  {status}  {name} ({elapsed:.1f}s)"))

    print()
    return 0 if all(passed for _, passed, _ in results) else 1


# ################
# Implementation
# ################


def _select_steps(argv: list[str]) -> list[tuple[str, list[str]]]:
    if not argv:
        return STEPS
    prefixes = [arg.lower() for arg in argv]
    return [step for step in STEPS if any(step[0].lower().startswith(p) for p in prefixes)]


def _banner(title: str) -> None:
    sep = chalk.blue("=" * 60)
    print(f"\n{sep}")
    print(chalk.blue(title))
    print(sep)


def _repo_root() -> pathlib.Path:
    return pathlib.Path(__file__).parent.parent


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
