"""
Maintenance tasks. Each module exposes a `run(...) -> int` returning the
process exit code; the scripts in scripts/ wire settings and connections
into them.
"""

from .runner import print_banner, run_database_task

__all__ = ["print_banner", "run_database_task"]
