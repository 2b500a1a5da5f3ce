from __future__ import annotations

import asyncio
from dataclasses import dataclass

from ala_data.domain.services.pagination import (
    advance_cursor,
    boundary_overflow_risk,
    paginate_by_timestamp,
)


@dataclass(frozen=True)
class Row:
    id: int
    timestamp: int


class FakeTimestampSource:
    def __init__(self, rows: list[Row], *, page_size: int):
        self.rows = sorted(rows, key=lambda row: row.timestamp)
        self.page_size = page_size
        self.cursors: list[int] = []

    async def fetch(self, cursor: int) -> list[Row]:
        self.cursors.append(cursor)
        return [row for row in self.rows if row.timestamp >= cursor][: self.page_size]


def _distinct_rows(count: int, *, start: int = 1) -> list[Row]:
    return [Row(id=index, timestamp=start + index) for index in range(count)]


def _collect(source: FakeTimestampSource, *, start: int = 0) -> list[Row]:
    return asyncio.run(
        paginate_by_timestamp(
            source.fetch,
            start_timestamp=start,
            timestamp_of=lambda row: row.timestamp,
            page_size=source.page_size,
            entity="rows",
        )
    )


def test_empty_stream_makes_single_request():
    source = FakeTimestampSource([], page_size=1000)

    assert _collect(source) == []
    assert source.cursors == [0]


def test_partial_last_page_stops_without_extra_request():
    source = FakeTimestampSource(_distinct_rows(2500), page_size=1000)

    rows = _collect(source)

    assert len(rows) == 2500
    assert len(source.cursors) == 3
    assert source.cursors == [0, 1001, 2001]


def test_exact_multiple_of_page_size_needs_one_empty_request():
    source = FakeTimestampSource(_distinct_rows(2000), page_size=1000)

    rows = _collect(source)

    assert len(rows) == 2000
    assert len(source.cursors) == 3


def test_single_short_page():
    source = FakeTimestampSource(_distinct_rows(999), page_size=1000)

    assert len(_collect(source)) == 999
    assert len(source.cursors) == 1


def test_cursor_strictly_increases_and_rows_stay_ordered():
    source = FakeTimestampSource(_distinct_rows(35, start=100), page_size=10)

    rows = _collect(source, start=100)

    assert all(later > earlier for earlier, later in zip(source.cursors, source.cursors[1:]))
    timestamps = [row.timestamp for row in rows]
    assert timestamps == sorted(timestamps)
    assert [row.id for row in rows] == list(range(35))


def test_rows_before_start_are_not_returned():
    source = FakeTimestampSource(_distinct_rows(20, start=1), page_size=50)

    rows = _collect(source, start=11)

    assert [row.timestamp for row in rows] == list(range(11, 21))


def test_rows_sharing_boundary_timestamp_beyond_page_are_skipped():
    rows_in = [Row(1, 1), Row(2, 2), Row(3, 2), Row(4, 2), Row(5, 3)]
    source = FakeTimestampSource(rows_in, page_size=3)

    rows = _collect(source)

    assert [row.id for row in rows] == [1, 2, 3, 5]
    assert source.cursors == [0, 3]


def test_advance_cursor():
    page = _distinct_rows(3, start=10)

    assert advance_cursor(page, timestamp_of=lambda row: row.timestamp, page_size=3) == 13
    assert advance_cursor(page, timestamp_of=lambda row: row.timestamp, page_size=4) is None
    assert advance_cursor([], timestamp_of=lambda row: row.timestamp, page_size=3) is None


def test_boundary_overflow_risk_only_for_full_pages():
    shared = [Row(1, 5), Row(2, 7), Row(3, 7)]

    assert boundary_overflow_risk(shared, timestamp_of=lambda row: row.timestamp, page_size=3)
    assert not boundary_overflow_risk(shared, timestamp_of=lambda row: row.timestamp, page_size=4)
    assert not boundary_overflow_risk(
        _distinct_rows(3),
        timestamp_of=lambda row: row.timestamp,
        page_size=3,
    )
