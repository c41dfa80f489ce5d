import math
from fractions import Fraction
from typing import Dict, List, Optional, Tuple

from reward_distribution._model import Address, AllocationWindow, Amount, BackerId, BoostAllocation, CompetitorId, DecayRateLike, Leaderboard, UserReward
from reward_distribution._rank import split_prize_pool
from reward_distribution._time import make_boost_decay_function
from reward_distribution._utility import sum_by
from reward_distribution._validation import validate_amount, validate_boost_allocations, validate_boost_time_decay_rate, validate_leaderboard, validate_prize_pool_decay_rate, validate_window

BackerKey = Tuple[Address, BackerId]


def _backer_key(allocation: BoostAllocation) -> BackerKey:
    return allocation["backer_wallet"], allocation["backer_id"]


def calculate_rewards_for_users(
    pool: Amount,
    boost_allocations: List[BoostAllocation],
    leaderboard: Leaderboard,
    window: AllocationWindow,
    prize_pool_decay_rate: Optional[DecayRateLike] = None,
    boost_time_decay_rate: Optional[DecayRateLike] = None,
) -> List[UserReward]:
    """
    Pay `pool` to the backers of the leaderboard competitors.

    Each competitor gets a sub-pool sized by its rank. The sub-pool is shared
    between the competitor's backers, each backer receiving its time decayed
    boost over the total boost allocated to that competitor. Decay therefore
    shrinks a late backer's payout without raising the others', the decayed
    part is left undistributed.

    Boosts to competitors missing from the leaderboard are ignored. Amounts
    are summed per backer over every competitor before being rounded down once.
    """

    validate_window(window)
    prize_pool_rate = validate_prize_pool_decay_rate(prize_pool_decay_rate)
    boost_time_rate = validate_boost_time_decay_rate(boost_time_decay_rate)
    validate_amount(pool, "pool")
    validate_leaderboard(leaderboard)
    validate_boost_allocations(boost_allocations, window)

    if not leaderboard or not boost_allocations:
        return []

    sub_pool_per_competitor = split_prize_pool(pool, leaderboard, prize_pool_rate)

    surviving_allocations = [
        allocation
        for allocation in boost_allocations
        if allocation["competitor"] in sub_pool_per_competitor
    ]

    boost_decay = make_boost_decay_function(window, boost_time_rate)

    allocated_boost_per_competitor: Dict[CompetitorId, int] = sum_by(
        surviving_allocations,
        key=lambda allocation: allocation["competitor"],
        value=lambda allocation: allocation["boost"],
    )

    effective_boost_per_competitor_per_backer: Dict[Tuple[CompetitorId, BackerKey], Fraction] = sum_by(
        surviving_allocations,
        key=lambda allocation: (allocation["competitor"], _backer_key(allocation)),
        value=lambda allocation: allocation["boost"] * boost_decay(allocation["timestamp"]),
    )

    award_per_backer: Dict[BackerKey, Fraction] = {}
    for (competitor, backer), effective_boost in effective_boost_per_competitor_per_backer.items():
        allocated_boost = allocated_boost_per_competitor[competitor]
        if allocated_boost == 0:
            continue

        award = sub_pool_per_competitor[competitor] * effective_boost / allocated_boost
        award_per_backer[backer] = award_per_backer.get(backer, Fraction(0)) + award

    rewards: List[UserReward] = []
    for (wallet, backer_id), award in award_per_backer.items():
        amount = math.floor(award)
        if amount == 0:
            continue

        rewards.append({
            "address": wallet,
            "owner": backer_id,
            "amount": amount,
        })

    return rewards
