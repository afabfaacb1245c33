"""
Range Pager - enumerate an ordered, range-bounded remote collection.

The node serves "list X" queries as bounded range requests
``(start, end, limit, last_seen)``.  ``RangePager`` turns such an
endpoint into a forward-only lazy sequence:

- ``last_seen`` is ``None`` on the first request, then the order key of the
  last item of the previous page (an exclusive cursor);
- an empty page is the only terminator.  A short but non-empty page is
  not treated as the end, so a collection whose size is an exact multiple
  of ``page_size`` costs one extra (empty) request;
- once exhausted the pager stays exhausted and never calls the node again.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Generic, Iterator, Optional, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
B = TypeVar("B")
K = TypeVar("K")

# Open-ended time bounds, in UTC seconds.
MIN_TIMESTAMP = 0
MAX_TIMESTAMP = 2**31 - 1

DEFAULT_PAGE_SIZE = 30

FetchPage = Callable[[Optional[B], Optional[B], int, Optional[K]], Sequence[T]]


class RangePager(Generic[T, B, K]):
    """
    Cursor-driven enumeration over one remote range query.

    Args:
        fetch: ``fetch(start, end, limit, last_seen)`` issues one remote
            request and returns that page's items in node order
        order_key: Extracts the cursor value from an item
        start: Lower/first bound (``None`` for queries without a range)
        end: Upper/last bound (``None`` for queries without a range)
        page_size: Maximum items per request
    """

    def __init__(
        self,
        fetch: FetchPage,
        order_key: Callable[[T], K],
        start: Optional[B] = None,
        end: Optional[B] = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        if isinstance(page_size, bool) or not isinstance(page_size, int) or page_size < 1:
            raise ValueError(f"page_size must be a positive integer, got {page_size!r}")
        self._fetch = fetch
        self._order_key = order_key
        self.start = start
        self.end = end
        self.page_size = page_size
        self.last_seen: Optional[K] = None
        self.exhausted = False
        self.requests = 0

    def next_page(self) -> list[T]:
        """
        Fetch the next page.

        Returns an empty list once the range is exhausted; from then on no
        further remote calls are made.  Errors from ``fetch`` propagate and
        leave the pager in an unspecified state.
        """
        if self.exhausted:
            return []

        self.requests += 1
        page = list(self._fetch(self.start, self.end, self.page_size, self.last_seen))
        logger.debug(
            "page %d: %d items (last_seen=%r)", self.requests, len(page), self.last_seen
        )

        if not page:
            self.exhausted = True
            return []

        self.last_seen = self._order_key(page[-1])
        return page

    def pages(self) -> Iterator[list[T]]:
        """Yield non-empty pages until the range is exhausted."""
        while True:
            page = self.next_page()
            if not page:
                return
            yield page

    def __iter__(self) -> Iterator[T]:
        for page in self.pages():
            yield from page

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(start={self.start!r}, end={self.end!r}, "
            f"page_size={self.page_size}, last_seen={self.last_seen!r}, "
            f"exhausted={self.exhausted})"
        )


def list_items(field: str) -> Callable[[Any], list[Any]]:
    """Build an extractor for the item list of a range query result."""

    def extract(result: Any) -> list[Any]:
        if not result:
            return []
        return list(result.get(field) or [])

    return extract
