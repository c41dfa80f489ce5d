from typing import List, Optional

from reward_distribution._model import Amount, CompetitorReward, DecayRateLike, Leaderboard
from reward_distribution._rank import iter_tied_shares
from reward_distribution._validation import validate_amount, validate_leaderboard, validate_prize_pool_decay_rate


def calculate_rewards_for_competitors(
    pool: Amount,
    leaderboard: Leaderboard,
    prize_pool_decay_rate: Optional[DecayRateLike] = None,
) -> List[CompetitorReward]:
    """
    Pay `pool` to the leaderboard entries by rank.

    Every amount is rounded down, the dust left over is not redistributed.
    Entries whose amount rounds down to zero are left out.
    """

    rate = validate_prize_pool_decay_rate(prize_pool_decay_rate)
    validate_amount(pool, "pool")
    validate_leaderboard(leaderboard)

    if not leaderboard:
        return []

    rewards: List[CompetitorReward] = []
    for tied_entries, numerator, denominator in iter_tied_shares(leaderboard, rate):
        amount = pool * numerator // denominator

        # shares only shrink further down the leaderboard
        if amount == 0:
            break

        for entry in tied_entries:
            rewards.append({
                "address": entry["wallet"],
                "owner": entry["owner"],
                "competitor": entry["competitor"],
                "amount": amount,
            })

    return rewards
