"""Performance monitoring utilities."""

import time
from typing import Optional

from .logging import get_logger

logger = get_logger(__name__)


class PassTimer:
    """Context manager timing one capture pass.

    Passes slower than ``budget`` seconds are flagged in the debug log,
    since ticks arriving meanwhile are skipped.
    """

    def __init__(self, operation_name: str, budget: Optional[float] = None):
        self.operation_name = operation_name
        self.budget = budget
        self.start_time = 0.0
        self.duration = 0.0

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration = time.perf_counter() - self.start_time
        ms = self.duration * 1000
        if exc_type is not None:
            logger.debug(f"⏱️  {self.operation_name} failed after {ms:.0f}ms")
        elif self.budget is not None and self.duration > self.budget:
            logger.debug(
                f"⏱️  {self.operation_name} took {ms:.0f}ms, "
                f"over the {self.budget * 1000:.0f}ms interval"
            )
        else:
            logger.debug(f"⏱️  {self.operation_name} completed in {ms:.0f}ms")
