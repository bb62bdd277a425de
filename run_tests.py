#!/usr/bin/env python3
"""
Test runner script for the Habitica resync tests.

This script provides convenient commands to run different test suites.
"""

import subprocess
import sys
from pathlib import Path


def run_command(cmd: list[str]) -> int:
    """Run a command and return the exit code."""
    print(f"Running: {' '.join(cmd)}")
    result = subprocess.run(cmd, cwd=Path(__file__).parent)
    return result.returncode


COMMANDS = {
    "all": [],
    "unit": ["-m", "unit"],
    "integration": ["-m", "integration"],
    "tasks": ["-m", "tasks"],
    "events": ["-m", "events"],
    "sync": ["-m", "sync"],
    "async": ["-m", "asyncio"],
    "coverage": ["--cov=src", "--cov-report=html", "--cov-report=term-missing"],
    "tasks-unit": ["-m", "unit and tasks"],
    "sync-integration": ["-m", "integration and sync"],
}


def main():
    """Main test runner function."""
    if len(sys.argv) < 2:
        print("""
Usage: python run_tests.py <command>

Available commands:
  all               - Run all tests
  unit              - Run only unit tests
  integration       - Run only integration tests
  tasks             - Run task parsing, classification and client tests
  events            - Run event hub tests
  sync              - Run note sync tests
  async             - Run async tests
  coverage          - Run tests with coverage report
  tasks-unit        - Run task unit tests
  sync-integration  - Run note sync workflow tests

Examples:
  python run_tests.py unit
  python run_tests.py sync
  python run_tests.py coverage
        """)
        return 1

    command = sys.argv[1].lower()
    if command not in COMMANDS:
        print(f"Unknown command: {command}")
        return 1

    # Base pytest command
    return run_command([sys.executable, "-m", "pytest"] + COMMANDS[command])


if __name__ == "__main__":
    sys.exit(main())
