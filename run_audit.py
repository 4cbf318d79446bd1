#!/usr/bin/env python3
"""Audit runner script for the fairness audit toolkit.

Runs the ``fairness-audit`` command from a source checkout, for example
``python run_audit.py configs/example_audit.yml --json``.
"""

import sys

from fairness_audit_toolkit.cli import main

if __name__ == "__main__":
    sys.exit(main())
