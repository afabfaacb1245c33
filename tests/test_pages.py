"""Tests for the cursor-based range pager."""

from __future__ import annotations

import math
from typing import Any, Optional

import pytest

from scriptorium.pneuma.pages import MAX_TIMESTAMP, MIN_TIMESTAMP, RangePager


class DescendingRange:
    """
    A remote collection ordered by descending key.

    Serves ``start <= key < end`` and, once a cursor is given, only keys
    strictly below it.  Records every request.
    """

    def __init__(self, keys: list[int]) -> None:
        self.items = [{"key": k, "value": f"item-{k}"} for k in sorted(keys, reverse=True)]
        self.requests: list[tuple[Any, Any, int, Optional[int]]] = []

    def fetch(self, start: Optional[int], end: Optional[int], limit: int, last_seen: Optional[int]) -> list[dict[str, Any]]:
        self.requests.append((start, end, limit, last_seen))
        lo = MIN_TIMESTAMP if start is None else start
        hi = MAX_TIMESTAMP if end is None else end
        selected = [
            item
            for item in self.items
            if lo <= item["key"] < hi and (last_seen is None or item["key"] < last_seen)
        ]
        return selected[:limit]


def _pager(remote: DescendingRange, page_size: int, start: Optional[int] = None, end: Optional[int] = None) -> RangePager:
    return RangePager(remote.fetch, lambda item: item["key"], start=start, end=end, page_size=page_size)


class TestWorkedExample:
    """Five items [5, 4, 3, 2, 1], page size 2."""

    def test_pages_and_cursors(self) -> None:
        remote = DescendingRange([1, 2, 3, 4, 5])
        pager = _pager(remote, page_size=2)

        assert [i["key"] for i in pager.next_page()] == [5, 4]
        assert pager.last_seen == 4
        assert [i["key"] for i in pager.next_page()] == [3, 2]
        assert pager.last_seen == 2
        assert [i["key"] for i in pager.next_page()] == [1]
        assert pager.last_seen == 1
        assert pager.next_page() == []
        assert pager.exhausted

        assert [r[3] for r in remote.requests] == [None, 4, 2, 1]

    def test_iteration_yields_every_item_once(self) -> None:
        remote = DescendingRange([1, 2, 3, 4, 5])
        assert [i["key"] for i in _pager(remote, page_size=2)] == [5, 4, 3, 2, 1]
        assert len(remote.requests) == 4


class TestCompleteness:
    """Every item is returned exactly once, in order, in ceil(N/P) non-empty fetches."""

    @pytest.mark.parametrize("total", [0, 1, 7, 12, 25])
    @pytest.mark.parametrize("page_size", [1, 3, 4, 12, 100])
    def test_enumerates_whole_range(self, total: int, page_size: int) -> None:
        keys = [10 * (n + 1) for n in range(total)]
        remote = DescendingRange(keys)
        pager = _pager(remote, page_size=page_size)

        seen = [item["key"] for item in pager]

        assert seen == sorted(keys, reverse=True)
        assert len(seen) == len(set(seen))
        # non-empty fetches plus the single terminating empty fetch
        assert len(remote.requests) == math.ceil(total / page_size) + 1
        assert pager.requests == len(remote.requests)

    def test_exact_multiple_needs_trailing_empty_fetch(self) -> None:
        remote = DescendingRange(list(range(1, 7)))
        pages = list(_pager(remote, page_size=3).pages())
        assert [len(p) for p in pages] == [3, 3]
        assert len(remote.requests) == 3

    def test_bounds_are_forwarded_on_every_request(self) -> None:
        remote = DescendingRange(list(range(1, 21)))
        pager = _pager(remote, page_size=4, start=5, end=15)

        assert [i["key"] for i in pager] == list(range(14, 4, -1))
        assert all(r[0] == 5 and r[1] == 15 and r[2] == 4 for r in remote.requests)


class TestTermination:
    """Emptiness, not under-fill, ends the enumeration."""

    def test_short_page_is_not_terminal(self) -> None:
        # A node that caps pages below the requested limit.
        remote = DescendingRange([1, 2, 3, 4, 5])

        def capped(start: Any, end: Any, limit: int, last_seen: Any) -> list[dict[str, Any]]:
            return remote.fetch(start, end, 1, last_seen)

        pager = RangePager(capped, lambda item: item["key"], page_size=3)
        assert [i["key"] for i in pager] == [5, 4, 3, 2, 1]
        assert pager.requests == 6

    def test_not_restartable(self) -> None:
        remote = DescendingRange([1, 2, 3])
        pager = _pager(remote, page_size=10)

        assert len(list(pager)) == 3
        requests_after_first_pass = len(remote.requests)

        assert list(pager) == []
        assert pager.next_page() == []
        assert len(remote.requests) == requests_after_first_pass

    def test_fresh_pager_re_enumerates(self) -> None:
        remote = DescendingRange([1, 2, 3])
        assert len(list(_pager(remote, page_size=2))) == 3
        assert len(list(_pager(remote, page_size=2))) == 3

    def test_pages_are_fetched_lazily(self) -> None:
        remote = DescendingRange(list(range(1, 11)))
        iterator = iter(_pager(remote, page_size=3))

        assert next(iterator)["key"] == 10
        assert len(remote.requests) == 1
        for _ in range(3):
            next(iterator)
        assert len(remote.requests) == 2


class TestFailures:
    def test_fetch_error_propagates_without_retry(self) -> None:
        calls: list[Any] = []

        def failing(start: Any, end: Any, limit: int, last_seen: Any) -> list[Any]:
            calls.append(last_seen)
            if last_seen is not None:
                raise ConnectionError("node unreachable")
            return [{"key": 9}, {"key": 8}]

        pager = RangePager(failing, lambda item: item["key"], page_size=2)
        iterator = iter(pager)
        assert next(iterator)["key"] == 9
        assert next(iterator)["key"] == 8
        with pytest.raises(ConnectionError, match="node unreachable"):
            next(iterator)
        assert calls == [None, 8]

    @pytest.mark.parametrize("bad", [0, -1, True, 2.5])
    def test_rejects_invalid_page_size(self, bad: Any) -> None:
        with pytest.raises(ValueError):
            RangePager(lambda *a: [], lambda item: item, page_size=bad)
