from fractions import Fraction
from typing import Dict, Iterator, List, Optional, Tuple

from reward_distribution._model import Amount, CompetitorId, DecayRateLike, LeaderboardEntry
from reward_distribution._utility import group_by, sum_by
from reward_distribution._validation import validate_amount, validate_leaderboard, validate_prize_pool_decay_rate


def compute_position_weights(
    size: int,
    decay_rate: Fraction,
) -> List[Fraction]:
    """
    Compute the exponential decay weight of each leaderboard position.

    Args:
        size: Number of leaderboard entries
        decay_rate: Multiplicative factor applied per position

    Returns:
        `decay_rate ** position` for every zero-based position
    """

    scale = decay_rate.denominator ** max(size - 1, 0)

    return [
        Fraction(weight, scale)
        for weight in compute_scaled_position_weights(size, decay_rate)
    ]


def compute_scaled_position_weights(
    size: int,
    decay_rate: Fraction,
) -> List[int]:
    """
    Integer position weights, `decay_rate ** position` multiplied by `denominator ** (size - 1)`.

    Every weight is exact, the ratio between two of them is the same as between their `Fraction` counterparts.
    """

    if size <= 0:
        return []

    numerator, denominator = decay_rate.numerator, decay_rate.denominator

    weight = denominator ** (size - 1)
    weights = [weight]
    for _ in range(size - 1):
        weight = weight // denominator * numerator
        weights.append(weight)

    return weights


def iter_tied_shares(
    entries: List[LeaderboardEntry],
    decay_rate: Fraction,
) -> Iterator[Tuple[List[LeaderboardEntry], int, int]]:
    """
    Yield every group of tied entries in rank order, with the share of one entry as a `(numerator, denominator)` pair.

    The pair is not reduced, callers scale it by the pool before reducing or flooring.
    """

    ordered = sorted(entries, key=lambda entry: entry["rank"])
    weights = compute_scaled_position_weights(len(ordered), decay_rate)
    total_weight = sum(weights)

    position = 0
    for tied_entries in group_by(ordered, key=lambda entry: entry["rank"]).values():
        size = len(tied_entries)

        group_weight = sum(weights[position:position + size])
        yield tied_entries, group_weight, size * total_weight

        position += size


def allocate(
    pool: Amount,
    entries: List[LeaderboardEntry],
    decay_rate: Optional[DecayRateLike] = None,
) -> List[Tuple[LeaderboardEntry, Fraction]]:
    """
    Compute the share of `pool` going to each leaderboard entry.

    Entries are ordered by rank. Entries sharing a rank split the combined
    weight of the positions they occupy, so equal ranks always get equal shares.

    Returns:
        `(entry, share)` pairs in rank order, shares summing to exactly 1
    """

    rate = validate_prize_pool_decay_rate(decay_rate)
    validate_amount(pool, "pool")
    validate_leaderboard(entries)

    shares: List[Tuple[LeaderboardEntry, Fraction]] = []
    for tied_entries, numerator, denominator in iter_tied_shares(entries, rate):
        share = Fraction(numerator, denominator)
        shares.extend((entry, share) for entry in tied_entries)

    return shares


def split_prize_pool(
    pool: Amount,
    entries: List[LeaderboardEntry],
    decay_rate: Optional[DecayRateLike] = None,
) -> Dict[CompetitorId, Fraction]:
    """
    Exact, unrounded sub-pool of every competitor.

    A competitor listed more than once receives the sum of its entries.
    """

    rate = validate_prize_pool_decay_rate(decay_rate)
    validate_amount(pool, "pool")
    validate_leaderboard(entries)

    sub_pools = (
        (entry, Fraction(pool * numerator, denominator))
        for tied_entries, numerator, denominator in iter_tied_shares(entries, rate)
        for entry in tied_entries
    )

    return sum_by(
        sub_pools,
        key=lambda pair: pair[0]["competitor"],
        value=lambda pair: pair[1],
    )
