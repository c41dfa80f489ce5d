from datetime import datetime, timezone
from fractions import Fraction
from typing import Callable, List, Optional

from reward_distribution._constants import DecayParameters
from reward_distribution._model import AllocationWindow, DecayInterval, DecayRateLike
from reward_distribution._utility import split_into_daily_intervals
from reward_distribution._validation import validate_boost_time_decay_rate, validate_window


def _to_utc(value: datetime) -> datetime:
    # aware datetimes sharing a tzinfo subtract by wall clock, not elapsed time
    if value.utcoffset() is None:
        return value

    return value.astimezone(timezone.utc)


def _day_index(
    timestamp: datetime,
    start: datetime,
) -> int:
    if timestamp <= start:
        return 0

    return (timestamp - start) // DecayParameters.ONE_DAY


def _weight(
    timestamp: datetime,
    window: AllocationWindow,
    rate: Optional[Fraction],
) -> Fraction:
    timestamp = _to_utc(timestamp)

    if timestamp >= _to_utc(window["end"]):
        return Fraction(0)

    if rate is None:
        return Fraction(1)

    return rate ** _day_index(timestamp, _to_utc(window["start"]))


def time_decay_weight(
    timestamp: datetime,
    window: AllocationWindow,
    decay_rate: Optional[DecayRateLike] = None,
) -> Fraction:
    """
    Time decayed weight of a boost placed at `timestamp`.

    A boost on the first day of the window weighs 1, each following full day
    multiplies it by `decay_rate` once more. Timestamps before the window
    start count as day 0, timestamps at or after the window end weigh 0.
    Without a decay rate every timestamp inside the window weighs 1.
    """

    rate = validate_boost_time_decay_rate(decay_rate)
    validate_window(window)

    return _weight(timestamp, window, rate)


def make_boost_decay_function(
    window: AllocationWindow,
    decay_rate: Optional[DecayRateLike] = None,
) -> Callable[[datetime], Fraction]:
    rate = validate_boost_time_decay_rate(decay_rate)
    validate_window(window)

    def boost_decay(timestamp: datetime) -> Fraction:
        return _weight(timestamp, window, rate)

    return boost_decay


def decay_schedule(
    window: AllocationWindow,
    decay_rate: Optional[DecayRateLike] = None,
) -> List[DecayInterval]:
    boost_decay = make_boost_decay_function(window, decay_rate)

    return [
        {
            "day": day,
            "start": start,
            "end": end,
            "weight": boost_decay(start),
        }
        for day, (start, end) in enumerate(split_into_daily_intervals(window))
    ]
