import math
from datetime import datetime
from decimal import Decimal
from fractions import Fraction
from typing import Any, Iterable, List, Mapping, Optional, Type

from reward_distribution._constants import DecayParameters
from reward_distribution._errors import InvalidBoostTimeDecayRate, InvalidDecayRate, InvalidPrizePoolDecayRate, InvalidWindow
from reward_distribution._model import AllocationWindow, BoostAllocation, DecayRate, DecayRateLike, LeaderboardEntry

LEADERBOARD_ENTRY_KEYS = ("competitor", "wallet", "rank", "owner")
BOOST_ALLOCATION_KEYS = ("backer_id", "backer_wallet", "competitor", "boost", "timestamp")


def to_decay_rate(
    value: DecayRateLike,
    error_type: Type[InvalidDecayRate],
) -> DecayRate:
    """
    Convert a caller supplied decay rate into an exact fraction.

    Floats go through their shortest decimal representation, so `0.1` becomes
    exactly `1/10` rather than the nearest binary double.

    Raises:
        error_type: if the value cannot be converted or lies outside
            `[MIN_DECAY_RATE, MAX_DECAY_RATE]`.
    """

    if isinstance(value, bool):
        raise error_type()

    if isinstance(value, float):
        if not math.isfinite(value):
            raise error_type()

        rate = Fraction(repr(value))
    elif isinstance(value, Decimal):
        if not value.is_finite():
            raise error_type()

        rate = Fraction(value)
    elif isinstance(value, (int, Fraction)):
        rate = Fraction(value)
    elif isinstance(value, str):
        try:
            rate = Fraction(value.strip())
        except (ValueError, ZeroDivisionError):
            raise error_type() from None
    else:
        raise error_type()

    if not (DecayParameters.MIN_DECAY_RATE <= rate <= DecayParameters.MAX_DECAY_RATE):
        raise error_type()

    return rate


def validate_prize_pool_decay_rate(
    value: Optional[DecayRateLike],
) -> DecayRate:
    if value is None:
        return DecayParameters.DEFAULT_PRIZE_POOL_DECAY_RATE

    return to_decay_rate(value, InvalidPrizePoolDecayRate)


def validate_boost_time_decay_rate(
    value: Optional[DecayRateLike],
) -> Optional[DecayRate]:
    if value is None:
        return DecayParameters.DEFAULT_BOOST_TIME_DECAY_RATE

    return to_decay_rate(value, InvalidBoostTimeDecayRate)


def validate_amount(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an integer amount, got `{type(value).__name__}`")
    if value < 0:
        raise ValueError(f"{name} must be >= 0")

    return value


def _require_keys(
    record: Any,
    keys: Iterable[str],
    name: str,
):
    if not isinstance(record, Mapping):
        raise TypeError(f"{name} must be a mapping, got `{type(record).__name__}`")

    missing = [key for key in keys if key not in record]
    if missing:
        raise ValueError(f"{name} is missing required keys: {', '.join(missing)}")


def _is_aware(value: datetime) -> bool:
    return value.tzinfo is not None and value.utcoffset() is not None


def validate_window(
    window: AllocationWindow,
) -> AllocationWindow:
    _require_keys(window, ("start", "end"), "window")

    start, end = window["start"], window["end"]
    if not isinstance(start, datetime) or not isinstance(end, datetime):
        raise TypeError("window start and end must be datetime instances")
    if _is_aware(start) != _is_aware(end):
        raise TypeError("window start and end must both be timezone-aware or both be naive")

    if end <= start:
        raise InvalidWindow()

    return window


def validate_leaderboard(
    leaderboard: List[LeaderboardEntry],
) -> List[LeaderboardEntry]:
    for index, entry in enumerate(leaderboard):
        name = f"leaderboard[{index}]"
        _require_keys(entry, LEADERBOARD_ENTRY_KEYS, name)

        rank = entry["rank"]
        if isinstance(rank, bool) or not isinstance(rank, int):
            raise TypeError(f"{name} rank must be an integer, got `{type(rank).__name__}`")
        if rank < 1:
            raise ValueError(f"{name} rank must be >= 1")

    return leaderboard


def validate_boost_allocations(
    boost_allocations: List[BoostAllocation],
    window: AllocationWindow,
) -> List[BoostAllocation]:
    window_aware = _is_aware(window["start"])

    for index, allocation in enumerate(boost_allocations):
        name = f"boost_allocations[{index}]"
        _require_keys(allocation, BOOST_ALLOCATION_KEYS, name)

        validate_amount(allocation["boost"], f"{name} boost")

        timestamp = allocation["timestamp"]
        if not isinstance(timestamp, datetime):
            raise TypeError(f"{name} timestamp must be a datetime, got `{type(timestamp).__name__}`")
        if _is_aware(timestamp) != window_aware:
            raise TypeError(f"{name} timestamp and window must both be timezone-aware or both be naive")

    return boost_allocations
