# File: tests/run_tests.py
#!/usr/bin/env python3
"""
Test runner for the trainset test suite.
"""

import unittest
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent

# Make the trainset and tests packages importable without installation
sys.path.insert(0, str(PROJECT_ROOT))


def run_all_tests(verbosity=2):
    """Run all test suites"""
    test_loader = unittest.TestLoader()
    test_suite = test_loader.discover(
        str(Path(__file__).parent),
        pattern='test_*.py',
        top_level_dir=str(PROJECT_ROOT)
    )

    test_runner = unittest.TextTestRunner(verbosity=verbosity)
    return test_runner.run(test_suite)


def run_specific_test(test_name):
    """Run a specific test module or test case, e.g. unit.test_commands.TestCompositeCommand"""
    test_loader = unittest.TestLoader()
    test_suite = test_loader.loadTestsFromName(f'tests.{test_name}')

    test_runner = unittest.TextTestRunner(verbosity=2)
    return test_runner.run(test_suite)


if __name__ == "__main__":
    if len(sys.argv) > 1:
        result = run_specific_test(sys.argv[1])
    else:
        result = run_all_tests()

    sys.exit(0 if result.wasSuccessful() else 1)
