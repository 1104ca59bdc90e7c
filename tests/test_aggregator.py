from datetime import date

import pytest

from quickdrop.schemas.dashboard import DailyOutcome
from quickdrop.schemas.transfer_event import TransferEvent
from quickdrop.services.aggregator import (
    build_overview,
    file_type_distribution,
    format_file_size,
    most_active_participant,
    outcomes_per_day,
    performance,
    success_rate,
    summarize,
    total_size,
    transfers_per_day,
)


def make_event(
    id: int = 1,
    sender: str = "A",
    receiver: str = "B",
    size: int | None = 0,
    file_type: str | None = "",
    timestamp: str = "2026-02-19T10:00:00Z",
    successful: bool = True,
) -> TransferEvent:
    return TransferEvent.model_validate({
        "id": id,
        "senderName": sender,
        "receiverName": receiver,
        "fileName": f"file-{id}",
        "fileSize": size,
        "fileType": file_type,
        "timestamp": timestamp,
        "successful": successful,
    })


# ── Summary stats ─────────────────────────────────────────────────────────────

def test_empty_batch():
    stats = summarize([])
    assert stats.total_transfers == 0
    assert stats.total_size == 0
    assert stats.success_rate == 0
    assert stats.most_active_device == "-"
    assert stats.most_active_count == 0


def test_success_rate_rounded_to_one_decimal():
    events = [make_event(successful=True), make_event(successful=False), make_event(successful=True)]
    assert success_rate(events) == 66.7


def test_total_size_treats_missing_as_zero():
    events = [make_event(size=100), make_event(size=None), make_event(size=200)]
    assert total_size(events) == 300


def test_most_active_tie_goes_to_first_seen():
    events = [
        make_event(sender="A", receiver="B"),
        make_event(sender="A", receiver="C"),
        make_event(sender="B", receiver="C"),
    ]
    assert most_active_participant(events) == ("A", 2)


def test_most_active_clear_winner():
    events = [
        make_event(sender="A", receiver="B"),
        make_event(sender="C", receiver="B"),
        make_event(sender="B", receiver="D"),
    ]
    assert most_active_participant(events) == ("B", 3)


# ── Groupings ─────────────────────────────────────────────────────────────────

def test_file_type_distribution_keeps_empty_bucket():
    events = [
        make_event(file_type="image/png"),
        make_event(file_type=None),
        make_event(file_type="image/png"),
        make_event(file_type=""),
    ]
    assert file_type_distribution(events) == {"image/png": 2, "": 2}


def test_same_date_shares_bucket():
    events = [
        make_event(timestamp="2026-02-19T00:05:00Z"),
        make_event(timestamp="2026-02-19T23:55:00Z"),
    ]
    assert transfers_per_day(events) == {"2026-02-19": 2}


def test_dates_sorted_ascending():
    events = [
        make_event(timestamp="2026-02-21T10:00:00Z"),
        make_event(timestamp="2026-02-19T10:00:00Z"),
        make_event(timestamp="2026-02-21T12:00:00Z"),
    ]
    assert list(transfers_per_day(events).items()) == [("2026-02-19", 1), ("2026-02-21", 2)]


def test_dates_bucketed_in_utc():
    events = [make_event(timestamp="2026-02-19T23:30:00-02:00")]
    assert transfers_per_day(events) == {"2026-02-20": 1}


def test_outcomes_per_day():
    events = [
        make_event(timestamp="2026-02-20T10:00:00Z", successful=False),
        make_event(timestamp="2026-02-19T10:00:00Z", successful=True),
        make_event(timestamp="2026-02-20T11:00:00Z", successful=True),
        make_event(timestamp="2026-02-20T12:00:00Z", successful=False),
    ]
    assert outcomes_per_day(events) == [
        DailyOutcome(date="2026-02-19", successful=1, failed=0),
        DailyOutcome(date="2026-02-20", successful=1, failed=2),
    ]


# ── Performance ──────────────────────────────────────────────────────────────

def test_performance():
    events = [
        make_event(size=100, timestamp="2026-02-19T10:00:00Z"),
        make_event(size=500, timestamp="2026-02-18T10:00:00Z"),
        make_event(size=300, timestamp="2026-02-19T23:00:00Z"),
    ]
    stats = performance(events, today=date(2026, 2, 19))
    assert stats.average_size == 300
    assert stats.largest_transfer == 500
    assert stats.today_count == 2


def test_performance_empty():
    stats = performance([], today=date(2026, 2, 19))
    assert stats.average_size == 0
    assert stats.largest_transfer == 0
    assert stats.today_count == 0


def test_build_overview_recomputes_everything():
    events = [make_event(id=1, size=10, file_type="text/plain"), make_event(id=2, size=20, successful=False)]
    overview = build_overview(events, today=date(2026, 2, 19))
    assert overview.summary.total_transfers == 2
    assert overview.summary.total_size == 30
    assert overview.summary.success_rate == 50.0
    assert overview.file_types == {"text/plain": 1, "": 1}
    assert overview.transfers_per_day == {"2026-02-19": 2}
    assert overview.performance.today_count == 2


# ── File size formatting ─────────────────────────────────────────────────────

@pytest.mark.parametrize(
    "size, expected",
    [
        (0, "0 B"),
        (None, "0 B"),
        (512, "512 B"),
        (1024, "1.00 KB"),
        (1536, "1.50 KB"),
        (1048576, "1.00 MB"),
        (1073741824, "1.00 GB"),
        (1099511627776, "1.00 TB"),
    ],
)
def test_format_file_size(size, expected):
    assert format_file_size(size) == expected
