"""
Stage duration calculator.

Walks each record's status history once. The time between entering a state and
the next actual change of state is attributed to the state entered next;
repeated consecutive entries of the same state do not start a new transition.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Collection, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from app.schemas.records import StatusEntry, TrackedRecord
from app.services.analytics.rates import round_half_up
from app.services.analytics.time_buckets import days_between

logger = logging.getLogger("app_logger")


def is_chronological(history: Sequence[StatusEntry]) -> bool:
    return all(earlier.timestamp <= later.timestamp for earlier, later in zip(history, history[1:]))


def iter_transitions(history: Sequence[StatusEntry]) -> Iterator[Tuple[str, float]]:
    """Yield ``(entered_state, days_in_previous_state)`` for every change of state."""
    current_state = None
    entered_at = None
    for entry in history:
        if current_state is None:
            current_state, entered_at = entry.state, entry.timestamp
            continue
        if entry.state == current_state:
            continue
        yield entry.state, days_between(entered_at, entry.timestamp)
        current_state, entered_at = entry.state, entry.timestamp


def usable_histories(records: Iterable[TrackedRecord]) -> Iterator[Tuple[TrackedRecord, Sequence[StatusEntry]]]:
    """Records whose history can be walked; the rest are logged and left out."""
    for record in records:
        if not record.has_history:
            continue
        history = record.history
        if not is_chronological(history):
            logger.warning(f"[DURATIONS] Skipping record {record.id}: status history is not in chronological order")
            continue
        yield record, history


def durations_by_stage(records: Iterable[TrackedRecord], states: Sequence[str] = ()) -> Dict[str, Optional[float]]:
    """
    Average days spent before entering each state.

    The denominator for a state is the number of records with at least one
    transition into it. States with no observation map to ``None``; every state in
    ``states`` is present in the result, observed extras follow in name order.
    """
    total_days: Dict[str, float] = defaultdict(float)
    record_counts: Dict[str, int] = defaultdict(int)

    for _, history in usable_histories(records):
        entered = set()
        for state, days in iter_transitions(history):
            total_days[state] += days
            entered.add(state)
        for state in entered:
            record_counts[state] += 1

    ordered: List[str] = list(states) + sorted(s for s in record_counts if s not in states)
    return {
        state: round_half_up(total_days[state] / record_counts[state]) if record_counts.get(state) else None
        for state in ordered
    }


def days_to_first(
    history: Sequence[StatusEntry],
    target_states: Collection[str],
    from_states: Optional[Collection[str]] = None,
) -> Optional[float]:
    """
    Days from the first entry in ``from_states`` (or the first entry at all) to the
    first later entry whose state is in ``target_states``.
    """
    start = None
    for entry in history:
        if start is None:
            if from_states is None or entry.state in from_states:
                start = entry.timestamp
            continue
        if entry.state in target_states:
            return days_between(start, entry.timestamp)
    return None


def average_days_to_first(
    records: Iterable[TrackedRecord],
    target_states: Collection[str],
    from_states: Optional[Collection[str]] = None,
) -> Tuple[Optional[float], int]:
    """Mean of :func:`days_to_first` over the records where it is defined, and how many those were."""
    observations: List[float] = []
    for _, history in usable_histories(records):
        days = days_to_first(history, target_states, from_states)
        if days is not None:
            observations.append(days)
    if not observations:
        return None, 0
    return round_half_up(sum(observations) / len(observations)), len(observations)
