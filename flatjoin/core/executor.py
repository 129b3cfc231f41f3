"""
Parallel sort executor

Sorting the two sides of a join is the only parallel section: each side is
sorted on its own worker, and the join waits until both are done.
"""

import logging
import os
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional, Tuple

from flatjoin.core.config import LEFT, RIGHT
from flatjoin.core.errors import ConcurrentTaskError
from flatjoin.operators.sort import Sorter

logger = logging.getLogger(__name__)


def _discard(future: Future) -> None:
    """Delete the temporary file produced by a successful task"""
    if future.cancelled() or future.exception() is not None:
        return
    path = future.result()
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass
    logger.debug("Discarded sorted file %s", path)


def sort_pair(
    left: Sorter, right: Sorter, directory: Optional[str] = None
) -> Tuple[str, str]:
    """
    Sort both relations in parallel

    Args:
        left: Sorter for the left relation
        right: Sorter for the right relation
        directory: Directory for the sorted temporary files

    Returns:
        (left_sorted_path, right_sorted_path); the caller deletes both files

    Raises:
        ConcurrentTaskError: If either sort fails. The other side's result
            is deleted, and the original error is chained as ``__cause__``.
    """
    with ThreadPoolExecutor(max_workers=2, thread_name_prefix="flatjoin-sort") as pool:
        futures = {
            LEFT: pool.submit(left.sort_to_file, directory),
            RIGHT: pool.submit(right.sort_to_file, directory),
        }
    # Leaving the with block waits for both tasks

    for side, future in futures.items():
        error = future.exception()
        if error is not None:
            for other in futures.values():
                if other is not future:
                    _discard(other)
            raise ConcurrentTaskError(f"Sorting {side} relation failed: {error}", side) from error

    return futures[LEFT].result(), futures[RIGHT].result()
