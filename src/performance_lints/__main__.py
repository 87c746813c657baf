"""
Entry point for module execution (``python -m performance_lints``).

This module delegates execution to the CLI handler in ``performance_lints.cli.__main__``.
"""

import sys
from performance_lints.cli.__main__ import main

if __name__ == "__main__":
  sys.exit(main())
