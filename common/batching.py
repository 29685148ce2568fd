"""Fixed-size partitioning of the filtered file list into review batches."""

from typing import List, Sequence, TypeVar

BATCH_SIZE = 5

T = TypeVar("T")


def make_batches(files: Sequence[T], batch_size: int = BATCH_SIZE) -> List[List[T]]:
    """
    Split ``files`` into consecutive groups of ``batch_size``.

    Every batch but the last holds exactly ``batch_size`` items and input
    order is kept. The size never shrinks with the number of files.

    Raises:
        ValueError: if batch_size is less than 1
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be >= 1, got: {batch_size}")
    return [list(files[i:i + batch_size]) for i in range(0, len(files), batch_size)]
