"""
Run-time and reminder fire-time calculations.

Pure functions only: no state, no I/O. Invalid input is signalled by
returning None rather than raising.
"""

from datetime import datetime, timedelta


def minutes_per_entrant(throughput_per_hour: float) -> float:
    """Real-valued spacing between consecutive entrants, never floored."""
    return 60 / throughput_per_hour


def compute_estimated_run_time(
    start_time: datetime | None,
    throughput_per_hour: float | None,
    ordinal_position: int | None,
) -> datetime | None:
    """
    Estimate when the entrant at a given run-order position goes.

    Args:
        start_time: Run time of the first entrant
        throughput_per_hour: Entrants processed per hour
        ordinal_position: 1-based position in the run order

    Returns:
        start_time plus (ordinal_position - 1) entrant spacings, or None if
        start_time is missing, the rate is not positive or the position is
        not positive, or if the result falls outside the datetime range.
        Fractional minutes are carried into seconds.
    """
    if start_time is None or throughput_per_hour is None or ordinal_position is None:
        return None
    # "not > 0" also rejects NaN
    if not throughput_per_hour > 0 or ordinal_position <= 0:
        return None

    minutes_until_run = (ordinal_position - 1) * minutes_per_entrant(throughput_per_hour)
    try:
        return start_time + timedelta(minutes=minutes_until_run)
    except (OverflowError, ValueError):
        # Outside the representable datetime range
        return None


def compute_fire_time(run_time: datetime | None, offset_minutes: int) -> datetime | None:
    """
    Fire time of a reminder offset_minutes before run_time.

    Negative offsets are accepted and place the fire time after the run.
    Returns None if run_time is None or the result is out of range.
    """
    if run_time is None:
        return None
    try:
        return run_time - timedelta(minutes=offset_minutes)
    except (OverflowError, ValueError):
        return None
