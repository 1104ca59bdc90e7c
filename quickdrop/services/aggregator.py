"""Summary statistics and chart groupings over a batch of transfer events.

Everything here is a pure function of its input; callers recompute the
whole overview for every batch they fetch.
"""
from collections import Counter
from datetime import date, datetime, timezone
from typing import Sequence

from quickdrop.schemas.dashboard import (
    DailyOutcome,
    DashboardOverview,
    PerformanceStats,
    SummaryStats,
)
from quickdrop.schemas.transfer_event import TransferEvent

SIZE_UNITS = (
    (1024**4, "TB"),
    (1024**3, "GB"),
    (1024**2, "MB"),
    (1024, "KB"),
)


def event_date(event: TransferEvent) -> str:
    return event.timestamp.astimezone(timezone.utc).date().isoformat()


def total_size(events: Sequence[TransferEvent]) -> int:
    return sum(event.file_size or 0 for event in events)


def success_rate(events: Sequence[TransferEvent]) -> float:
    if not events:
        return 0.0
    successful = sum(1 for event in events if event.successful)
    return round(successful / len(events) * 100, 1)


def most_active_participant(events: Sequence[TransferEvent]) -> tuple[str, int]:
    """Name seen most often as sender or receiver, first to reach the max wins."""
    counts: Counter[str] = Counter()
    for event in events:
        counts[event.sender_name] += 1
        counts[event.receiver_name] += 1
    if not counts:
        return "-", 0
    return max(counts.items(), key=lambda item: item[1])


def summarize(events: Sequence[TransferEvent]) -> SummaryStats:
    device, count = most_active_participant(events)
    return SummaryStats(
        total_transfers=len(events),
        total_size=total_size(events),
        success_rate=success_rate(events),
        most_active_device=device,
        most_active_count=count,
    )


def file_type_distribution(events: Sequence[TransferEvent]) -> dict[str, int]:
    # Events without a type are kept under the "" key.
    return dict(Counter(event.file_type or "" for event in events))


def transfers_per_day(events: Sequence[TransferEvent]) -> dict[str, int]:
    counts = Counter(event_date(event) for event in events)
    return {day: counts[day] for day in sorted(counts)}


def outcomes_per_day(events: Sequence[TransferEvent]) -> list[DailyOutcome]:
    successful: Counter[str] = Counter()
    failed: Counter[str] = Counter()
    for event in events:
        day = event_date(event)
        if event.successful:
            successful[day] += 1
        else:
            failed[day] += 1
    days = sorted(set(successful) | set(failed))
    return [
        DailyOutcome(date=day, successful=successful[day], failed=failed[day])
        for day in days
    ]


def performance(
    events: Sequence[TransferEvent], today: date | None = None
) -> PerformanceStats:
    if today is None:
        today = datetime.now(timezone.utc).date()
    today_key = today.isoformat()
    return PerformanceStats(
        average_size=total_size(events) / (len(events) or 1),
        largest_transfer=max((event.file_size or 0 for event in events), default=0),
        today_count=sum(1 for event in events if event_date(event) == today_key),
    )


def build_overview(
    events: Sequence[TransferEvent], today: date | None = None
) -> DashboardOverview:
    return DashboardOverview(
        summary=summarize(events),
        file_types=file_type_distribution(events),
        transfers_per_day=transfers_per_day(events),
        outcomes_per_day=outcomes_per_day(events),
        performance=performance(events, today),
    )


def format_file_size(size: float | None) -> str:
    if not size:
        return "0 B"
    for threshold, unit in SIZE_UNITS:
        if size >= threshold:
            return f"{size / threshold:.2f} {unit}"
    return f"{size:g} B"
