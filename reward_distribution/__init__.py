import logging
from logging import Logger
from typing import Iterable, List, Optional, Union

from reward_distribution._competitor import calculate_rewards_for_competitors
from reward_distribution._config import default_parameters, load_parameters
from reward_distribution._constants import DecayParameters, EnvironmentVariables
from reward_distribution._errors import InvalidBoostTimeDecayRate, InvalidDecayRate, InvalidPrizePoolDecayRate, InvalidWindow
from reward_distribution._model import Address, AllocationWindow, Amount, BackerId, BoostAllocation, CompetitorId, CompetitorReward, DecayInterval, Distribution, DistributionParameters, Leaderboard, LeaderboardEntry, OwnerId, Reward, UserReward
from reward_distribution._rank import allocate, compute_position_weights, compute_scaled_position_weights, split_prize_pool
from reward_distribution._time import decay_schedule, make_boost_decay_function, time_decay_weight
from reward_distribution._user import calculate_rewards_for_users
from reward_distribution._utility import group_by, split_into_daily_intervals, sum_by
from reward_distribution._validation import validate_amount


def merge_rewards_by_address(
    rewards: Iterable[Union[UserReward, CompetitorReward, Reward]],
) -> List[Reward]:
    """
    Sum the amounts of every address, for wallets that are both a backer and a competitor.
    """

    return [
        {
            "address": address,
            "amount": amount,
        }
        for address, amount in sum_by(
            rewards,
            key=lambda reward: reward["address"],
            value=lambda reward: reward["amount"],
        ).items()
    ]


def distribute(
    user_pool: Amount,
    competitor_pool: Amount,
    boost_allocations: List[BoostAllocation],
    leaderboard: Leaderboard,
    window: AllocationWindow,
    *,
    parameters: Optional[DistributionParameters] = None,
    logger: Optional[Logger] = None,
) -> Distribution:
    if parameters is None:
        parameters = default_parameters()

    if logger is None:
        logger = logging.getLogger(__name__)

    validate_amount(user_pool, "user_pool")
    validate_amount(competitor_pool, "competitor_pool")

    user_rewards = calculate_rewards_for_users(
        user_pool,
        boost_allocations,
        leaderboard,
        window,
        prize_pool_decay_rate=parameters["prize_pool_decay_rate"],
        boost_time_decay_rate=parameters["boost_time_decay_rate"],
    )

    competitor_rewards = calculate_rewards_for_competitors(
        competitor_pool,
        leaderboard,
        prize_pool_decay_rate=parameters["prize_pool_decay_rate"],
    )

    rewards = merge_rewards_by_address([*user_rewards, *competitor_rewards])

    distributed = sum(reward["amount"] for reward in rewards)
    dust = user_pool + competitor_pool - distributed

    logger.debug(f"user pool: {user_pool}, paid to {len(user_rewards)} backers")
    logger.debug(f"competitor pool: {competitor_pool}, paid to {len(competitor_rewards)} competitors")
    logger.info(f"distributed {distributed} to {len(rewards)} addresses, {dust} left undistributed")

    return {
        "competitor_rewards": competitor_rewards,
        "user_rewards": user_rewards,
        "rewards": rewards,
        "dust": dust,
    }


__all__ = [
    "Address",
    "AllocationWindow",
    "Amount",
    "BackerId",
    "BoostAllocation",
    "CompetitorId",
    "CompetitorReward",
    "DecayInterval",
    "DecayParameters",
    "Distribution",
    "DistributionParameters",
    "EnvironmentVariables",
    "InvalidBoostTimeDecayRate",
    "InvalidDecayRate",
    "InvalidPrizePoolDecayRate",
    "InvalidWindow",
    "Leaderboard",
    "LeaderboardEntry",
    "OwnerId",
    "Reward",
    "UserReward",
    "allocate",
    "calculate_rewards_for_competitors",
    "calculate_rewards_for_users",
    "compute_position_weights",
    "compute_scaled_position_weights",
    "decay_schedule",
    "distribute",
    "group_by",
    "load_parameters",
    "make_boost_decay_function",
    "merge_rewards_by_address",
    "split_into_daily_intervals",
    "split_prize_pool",
    "sum_by",
    "time_decay_weight",
]
