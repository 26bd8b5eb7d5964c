"""Console output helpers for huectl."""

import sys
from datetime import datetime

_verbose = False


def set_verbose(enabled: bool) -> None:
    global _verbose
    _verbose = bool(enabled)


def timed_print(*args, **kwargs) -> None:
    """Print with timestamp prefix.

    Args:
        *args: Values to print
        **kwargs: Keyword arguments passed to print()
    """
    prefix = datetime.now().strftime("[%Y-%m-%d %H:%M:%S]")
    print(prefix, *args, **kwargs)


def debug_print(*args, **kwargs) -> None:
    """Like timed_print, but only in verbose mode and on stderr."""
    if _verbose:
        kwargs.setdefault('file', sys.stderr)
        timed_print(*args, **kwargs)
