"""
Command handlers invoked by ``performance_lints.cli.__main__``.
"""

from performance_lints.cli.handlers.check import handle_check

__all__ = ["handle_check"]
