"""
Coarse bucketing of the time between sessions.

Raw durations are replaced by an index into a fixed, ascending table so that
the emitted label has low cardinality.
"""

from typing import Sequence

SECOND_IN_MILLIS = 1000
MINUTE_IN_MILLIS = 60 * SECOND_IN_MILLIS
HOUR_IN_MILLIS = 60 * MINUTE_IN_MILLIS
DAY_IN_MILLIS = 24 * HOUR_IN_MILLIS

INACTIVE_MILLIS_QUANTA = (
    5 * MINUTE_IN_MILLIS,
    15 * MINUTE_IN_MILLIS,
    30 * MINUTE_IN_MILLIS,
    1 * HOUR_IN_MILLIS,
    6 * HOUR_IN_MILLIS,
    12 * HOUR_IN_MILLIS,
    1 * DAY_IN_MILLIS,
    2 * DAY_IN_MILLIS,
    3 * DAY_IN_MILLIS,
    7 * DAY_IN_MILLIS,
    14 * DAY_IN_MILLIS,
    21 * DAY_IN_MILLIS,
    28 * DAY_IN_MILLIS,
    60 * DAY_IN_MILLIS,
    90 * DAY_IN_MILLIS,
    120 * DAY_IN_MILLIS,
    150 * DAY_IN_MILLIS,
    180 * DAY_IN_MILLIS,
    365 * DAY_IN_MILLIS,
)

QUANTA_LABEL_FORMAT = "session_quanta_{}"


def get_quanta_index(
    time_between_sessions: int,
    thresholds: Sequence[int] = INACTIVE_MILLIS_QUANTA,
) -> int:
    """
    Returns the smallest index whose threshold is >= the duration,
    or len(thresholds) when the duration exceeds every bucket.

    Args:
        time_between_sessions: Elapsed time in milliseconds (clamped to >= 0 by callers)
        thresholds: Ascending bucket upper bounds in milliseconds

    Returns:
        Index in [0, len(thresholds)]
    """
    quanta_index = 0

    while (quanta_index < len(thresholds)
           and thresholds[quanta_index] < time_between_sessions):
        quanta_index += 1

    return quanta_index


def quanta_label(time_between_sessions: int) -> str:
    """Label used for the time_between_sessions event parameter"""
    return QUANTA_LABEL_FORMAT.format(get_quanta_index(time_between_sessions))
