#!/usr/bin/env python3
"""Run the unit tests: `python tests/run_tests.py [pattern]`."""
import unittest
import os
import sys

# Add project root to path so imports work properly
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

if __name__ == '__main__':
    pattern = sys.argv[1] if len(sys.argv) > 1 else 'test_*.py'
    test_suite = unittest.defaultTestLoader.discover(
        start_dir=os.path.dirname(__file__),
        pattern=pattern,
    )

    runner = unittest.TextTestRunner(verbosity=2)
    result = runner.run(test_suite)

    # Exit with non-zero code if tests failed
    sys.exit(not result.wasSuccessful())
