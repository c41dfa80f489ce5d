from datetime import datetime as DateTime
from decimal import Decimal
from fractions import Fraction
from typing import List, NewType, Optional, TypedDict, Union

from typing_extensions import ReadOnly, TypeAlias

CompetitorId = NewType("CompetitorId", str)
OwnerId = NewType("OwnerId", str)
BackerId = NewType("BackerId", str)
Address = NewType("Address", str)

Amount: TypeAlias = int
DecayRate: TypeAlias = Fraction
DecayRateLike: TypeAlias = Union[Fraction, Decimal, int, float, str]


class LeaderboardEntry(TypedDict):
    competitor: ReadOnly[CompetitorId]
    wallet: Address
    rank: int
    owner: OwnerId


Leaderboard: TypeAlias = List[LeaderboardEntry]


class AllocationWindow(TypedDict):
    start: DateTime
    end: DateTime


class BoostAllocation(TypedDict):
    backer_id: BackerId
    backer_wallet: Address
    competitor: CompetitorId
    boost: Amount
    timestamp: DateTime


class CompetitorReward(TypedDict):
    address: Address
    owner: OwnerId
    competitor: CompetitorId
    amount: Amount


class UserReward(TypedDict):
    address: Address
    owner: BackerId
    amount: Amount


class Reward(TypedDict):
    address: Address
    amount: Amount


class DecayInterval(TypedDict):
    day: int
    start: DateTime
    end: DateTime
    weight: Fraction


class DistributionParameters(TypedDict):
    prize_pool_decay_rate: Optional[DecayRateLike]
    boost_time_decay_rate: Optional[DecayRateLike]


class Distribution(TypedDict):
    competitor_rewards: List[CompetitorReward]
    user_rewards: List[UserReward]
    rewards: List[Reward]
    dust: Amount
