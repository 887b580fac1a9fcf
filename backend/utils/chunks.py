from itertools import islice
from typing import Iterable, Iterator, TypeVar

T = TypeVar("T")


def chunks(haystack: Iterable[T], size: int) -> Iterator[list[T]]:
    """iterate through the items in blocks of at most `size`, keeping their order"""
    if size < 1:
        raise ValueError("Chunk size must be positive")
    iterator = iter(haystack)
    while block := list(islice(iterator, size)):
        yield block
