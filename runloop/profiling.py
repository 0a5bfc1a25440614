"""Per-task timing, enabled through ``LoopConfig.profile``.

    export RUNLOOP_PROFILE=1
    runloop demo
"""

import sys
import time
from contextlib import contextmanager
from typing import Generator


@contextmanager
def profile(operation: str, *, enabled: bool) -> Generator[None, None, None]:
    """Report how long one task body took, as ``[PROFILE] <operation>: <ms>``.

    The line is written even when the body raises. With ``enabled`` unset
    the block runs untimed.
    """
    if not enabled:
        yield
        return

    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000
        # stderr keeps stdout clean for task output
        print(f"[PROFILE] {operation}: {elapsed_ms:.2f}ms", file=sys.stderr)
