from collections import defaultdict
from datetime import datetime
from fractions import Fraction
from typing import Callable, Dict, Iterable, List, Tuple, TypeVar

from pandas import date_range

from reward_distribution._model import AllocationWindow

T = TypeVar("T")
K = TypeVar("K")
N = TypeVar("N", int, Fraction)


def group_by(
    items: Iterable[T],
    *,
    key: Callable[[T], K],
) -> Dict[K, List[T]]:
    grouped: Dict[K, List[T]] = defaultdict(list)
    for item in items:
        grouped[key(item)].append(item)

    return dict(grouped)


def sum_by(
    items: Iterable[T],
    *,
    key: Callable[[T], K],
    value: Callable[[T], N],
) -> Dict[K, N]:
    """
    Sum `value(item)` per `key(item)`, keeping first-seen key order.
    """

    totals: Dict[K, N] = {}
    for item in items:
        item_key = key(item)
        item_value = value(item)

        previous_value = totals.get(item_key)
        if previous_value is not None:
            item_value = previous_value + item_value

        totals[item_key] = item_value

    return totals


def split_into_daily_intervals(
    window: AllocationWindow,
) -> List[Tuple[datetime, datetime]]:
    """
    Split a window into consecutive 24 hour intervals starting at `window["start"]`.

    The last interval is truncated at `window["end"]`. An empty or inverted
    window has no interval.
    """

    start, end = window["start"], window["end"]
    if end <= start:
        return []

    boundaries = [
        timestamp.to_pydatetime()
        for timestamp in date_range(start, end, freq="24h")
    ]

    if boundaries[-1] < end:
        boundaries.append(end)

    return list(zip(boundaries[:-1], boundaries[1:]))
