"""Completion ratio and progress segments for a purchased package."""

import logging
from typing import Dict, Iterable, List

from backend.economics.core.settings import get_settings
from backend.economics.schemas.records import Session, SessionStatus
from backend.economics.schemas.results import CompletionResult, ProgressSegment

logger = logging.getLogger(__name__)

# Fixed drawing order; the unconsumed remainder always comes last.
SEGMENT_ORDER = (
    SessionStatus.COMPLETED,
    SessionStatus.SCHEDULED,
    SessionStatus.RESTING,
    SessionStatus.UNCOMPLETED,
    SessionStatus.CANCELLED,
)
REMAINDER = "remainder"


def bucket_minutes(sessions: Iterable[Session]) -> tuple[Dict[str, int], Dict[str, int]]:
    minutes = {status.value: 0 for status in SEGMENT_ORDER}
    counts = {status.value: 0 for status in SEGMENT_ORDER}
    for session in sessions:
        key = SessionStatus(session.status).value
        minutes[key] += max(session.duration_minutes or 0, 0)
        counts[key] += 1
    return minutes, counts


def consumed_from_buckets(minutes_by_status: Dict[str, int]) -> int:
    """Cancelled time was never delivered, so it is not consumed."""
    return sum(
        value for key, value in minutes_by_status.items() if key != SessionStatus.CANCELLED.value
    )


def consumed_minutes(sessions: Iterable[Session]) -> int:
    minutes, _ = bucket_minutes(sessions)
    return consumed_from_buckets(minutes)


def completion(sessions: Iterable[Session], target_minutes: int | None) -> CompletionResult:
    minutes, counts = bucket_minutes(sessions)
    consumed = consumed_from_buckets(minutes)
    target = target_minutes or 0
    colors = get_settings().status_colors

    if target <= 0:
        logger.debug("Completion requested against a package without duration")
        return CompletionResult(
            minutes_by_status=minutes,
            counts_by_status=counts,
            consumed_minutes=consumed,
            target_minutes=max(target, 0),
            ratio=0.0,
            raw_ratio=0.0,
            segments=[],
        )

    raw_ratio = consumed / target
    segments: List[ProgressSegment] = []
    for status in SEGMENT_ORDER:
        bucket = minutes[status.value]
        if bucket <= 0:
            continue
        segments.append(
            ProgressSegment(status=status.value, fraction=bucket / target, color=colors[status.value])
        )

    remainder = target - sum(minutes.values())
    if remainder > 0:
        segments.append(ProgressSegment(status=REMAINDER, fraction=remainder / target, color=colors[REMAINDER]))

    return CompletionResult(
        minutes_by_status=minutes,
        counts_by_status=counts,
        consumed_minutes=consumed,
        target_minutes=target,
        ratio=min(max(raw_ratio, 0.0), 1.0),
        raw_ratio=raw_ratio,
        segments=segments,
    )
