from datetime import datetime, timezone
from typing import List

import pytest

from reward_distribution._errors import InvalidBoostTimeDecayRate, InvalidPrizePoolDecayRate, InvalidWindow
from reward_distribution._model import AllocationWindow, BoostAllocation, LeaderboardEntry
from reward_distribution._user import calculate_rewards_for_users

PRIZE_POOL = 1000 * 10**18


def utc(text: str) -> datetime:
    return datetime.fromisoformat(text).replace(tzinfo=timezone.utc)


def _entry(competitor: str, wallet: str, rank: int, owner: str) -> LeaderboardEntry:
    return {"competitor": competitor, "wallet": wallet, "rank": rank, "owner": owner}  # type: ignore


def _boost(backer: str, competitor: str, boost: int, timestamp: str) -> BoostAllocation:
    return {
        "backer_id": f"{backer.lower()}-id",  # type: ignore
        "backer_wallet": backer,  # type: ignore
        "competitor": competitor,  # type: ignore
        "boost": boost,
        "timestamp": utc(timestamp),
    }


LEADERBOARD: List[LeaderboardEntry] = [
    _entry("Competitor A", "0x1234567890123456789012345678901234567890", 1, "owner-a"),
    _entry("Competitor B", "0x2345678901234567890123456789012345678901", 2, "owner-b"),
    _entry("Competitor C", "0x3456789012345678901234567890123456789012", 3, "owner-c"),
]

WINDOW: AllocationWindow = {
    "start": utc("2024-01-01T00:00:00"),
    "end": utc("2024-01-05T00:00:00"),
}

BOOST_ALLOCATIONS: List[BoostAllocation] = [
    _boost("Alice", "Competitor A", 100, "2024-01-01T12:00:00"),
    _boost("Alice", "Competitor B", 50, "2024-01-02T18:00:00"),
    _boost("Alice", "Competitor C", 75, "2024-01-03T09:00:00"),
    _boost("Bob", "Competitor A", 80, "2024-01-01T15:00:00"),
    _boost("Bob", "Competitor A", 40, "2024-01-02T10:00:00"),
    _boost("Bob", "Competitor B", 120, "2024-01-01T20:00:00"),
    _boost("Bob", "Competitor C", 60, "2024-01-04T14:00:00"),
    _boost("Charlie", "Competitor B", 90, "2024-01-02T12:00:00"),
    _boost("Charlie", "Competitor C", 200, "2024-01-01T08:00:00"),
    _boost("Charlie", "Competitor C", 30, "2024-01-03T16:00:00"),
]

SINGLE_ENTRY = [_entry("A", "0x1234567890123456789012345678901234567890", 1, "owner-a")]
SINGLE_BOOST = [_boost("Alice", "A", 100, "2024-01-01T12:00:00")]


def _by_address(rewards):
    return {
        reward["address"]: reward
        for reward in rewards
    }


def test_calculate_rewards_for_users_with_decay():
    rewards = calculate_rewards_for_users(PRIZE_POOL, BOOST_ALLOCATIONS, LEADERBOARD, WINDOW, 0.5, 0.5)

    assert rewards == [
        {"address": "Alice", "owner": "alice-id", "amount": 294551339071887017092},
        {"address": "Bob", "owner": "bob-id", "amount": 394543812352031530113},
        {"address": "Charlie", "owner": "charlie-id", "amount": 130663856691253951527},
    ]

    total = sum(reward["amount"] for reward in rewards)
    assert 0 < total <= PRIZE_POOL


def test_calculate_rewards_for_users_without_rates():
    rewards = _by_address(calculate_rewards_for_users(PRIZE_POOL, BOOST_ALLOCATIONS, LEADERBOARD, WINDOW))

    assert rewards["Alice"]["amount"] == 344039522121713902535
    assert rewards["Bob"]["amount"] == 467039809505562930220
    assert rewards["Charlie"]["amount"] == 188920668372723167243

    total = sum(reward["amount"] for reward in rewards.values())
    assert PRIZE_POOL - 3 < total <= PRIZE_POOL


def test_calculate_rewards_for_users_empty_leaderboard():
    assert calculate_rewards_for_users(PRIZE_POOL, SINGLE_BOOST, [], WINDOW) == []


def test_calculate_rewards_for_users_empty_allocations():
    assert calculate_rewards_for_users(PRIZE_POOL, [], SINGLE_ENTRY, WINDOW) == []


def test_calculate_rewards_for_users_rejects_inverted_window():
    window: AllocationWindow = {
        "start": utc("2024-01-05T00:00:00"),
        "end": utc("2024-01-01T00:00:00"),
    }

    with pytest.raises(InvalidWindow, match="Invalid boost allocation window"):
        calculate_rewards_for_users(PRIZE_POOL, SINGLE_BOOST, SINGLE_ENTRY, window)


def test_calculate_rewards_for_users_rejects_empty_window():
    window: AllocationWindow = {
        "start": utc("2024-01-01T00:00:00"),
        "end": utc("2024-01-01T00:00:00"),
    }

    with pytest.raises(InvalidWindow):
        calculate_rewards_for_users(PRIZE_POOL, [], [], window)


@pytest.mark.parametrize("decay_rate", [0.05, 0.95])
def test_calculate_rewards_for_users_rejects_invalid_prize_pool_decay_rate(decay_rate):
    with pytest.raises(InvalidPrizePoolDecayRate, match="Invalid prize pool decay rate"):
        calculate_rewards_for_users(PRIZE_POOL, SINGLE_BOOST, SINGLE_ENTRY, WINDOW, decay_rate)


@pytest.mark.parametrize("decay_rate", [0.05, 0.95])
def test_calculate_rewards_for_users_rejects_invalid_boost_time_decay_rate(decay_rate):
    with pytest.raises(InvalidBoostTimeDecayRate, match="Invalid boost time decay rate"):
        calculate_rewards_for_users(PRIZE_POOL, SINGLE_BOOST, SINGLE_ENTRY, WINDOW, 0.5, decay_rate)


def test_calculate_rewards_for_users_ignores_disqualified_competitors():
    leaderboard = LEADERBOARD[:2]
    boost_allocations = [
        _boost("Alice", "Competitor A", 100, "2024-01-01T12:00:00"),
        _boost("Alice", "Competitor B", 50, "2024-01-02T12:00:00"),
        _boost("Bob", "Competitor A", 80, "2024-01-01T12:00:00"),
        _boost("Bob", "Disqualified Competitor", 120, "2024-01-02T12:00:00"),
        _boost("Charlie", "Removed Competitor", 200, "2024-01-01T12:00:00"),
        _boost("Charlie", "Another Disqualified", 150, "2024-01-02T12:00:00"),
    ]

    rewards = _by_address(calculate_rewards_for_users(PRIZE_POOL, boost_allocations, leaderboard, WINDOW, 0.5, 0.5))

    assert set(rewards.keys()) == {"Alice", "Bob"}
    assert rewards["Alice"]["amount"] > rewards["Bob"]["amount"] > 0
    assert sum(reward["amount"] for reward in rewards.values()) <= PRIZE_POOL


def test_calculate_rewards_for_users_disqualified_boosts_do_not_change_amounts():
    disqualified = [_boost("Dave", "Ghost", 10**6, "2024-01-01T01:00:00")]

    expected = calculate_rewards_for_users(PRIZE_POOL, BOOST_ALLOCATIONS, LEADERBOARD, WINDOW, 0.5, 0.5)
    result = calculate_rewards_for_users(PRIZE_POOL, BOOST_ALLOCATIONS + disqualified, LEADERBOARD, WINDOW, 0.5, 0.5)

    assert result == expected


def test_calculate_rewards_for_users_rounds_once_per_backer():
    leaderboard = [
        _entry("A", "wallet-a", 1, "owner-a"),
        _entry("B", "wallet-b", 2, "owner-b"),
    ]
    boost_allocations = [
        _boost("Alice", "A", 1, "2024-01-01T12:00:00"),
        _boost("Alice", "B", 1, "2024-01-01T12:00:00"),
    ]

    rewards = calculate_rewards_for_users(10, boost_allocations, leaderboard, WINDOW, 0.5)

    assert rewards == [{"address": "Alice", "owner": "alice-id", "amount": 10}]


def test_calculate_rewards_for_users_sums_repeated_allocations():
    split = [
        _boost("Alice", "A", 60, "2024-01-01T12:00:00"),
        _boost("Alice", "A", 40, "2024-01-01T13:00:00"),
        _boost("Bob", "A", 100, "2024-01-01T14:00:00"),
    ]

    rewards = _by_address(calculate_rewards_for_users(PRIZE_POOL, split, SINGLE_ENTRY, WINDOW))

    assert rewards["Alice"]["amount"] == rewards["Bob"]["amount"] == PRIZE_POOL // 2


def test_calculate_rewards_for_users_late_boost_earns_less():
    boost_allocations = [
        _boost("Alice", "A", 100, "2024-01-01T12:00:00"),
        _boost("Bob", "A", 100, "2024-01-02T12:00:00"),
    ]

    rewards = _by_address(calculate_rewards_for_users(PRIZE_POOL, boost_allocations, SINGLE_ENTRY, WINDOW, 0.5, 0.5))

    assert rewards["Alice"]["amount"] == PRIZE_POOL // 2
    assert rewards["Bob"]["amount"] == PRIZE_POOL // 4


def test_calculate_rewards_for_users_ignores_boosts_after_window_end():
    boost_allocations = [
        _boost("Alice", "A", 100, "2024-01-01T12:00:00"),
        _boost("Bob", "A", 100, "2024-01-05T00:00:00"),
    ]

    rewards = calculate_rewards_for_users(PRIZE_POOL, boost_allocations, SINGLE_ENTRY, WINDOW, 0.5, 0.5)

    assert [reward["address"] for reward in rewards] == ["Alice"]


def test_calculate_rewards_for_users_zero_boosts():
    boost_allocations = [_boost("Alice", "A", 0, "2024-01-01T12:00:00")]

    assert calculate_rewards_for_users(PRIZE_POOL, boost_allocations, SINGLE_ENTRY, WINDOW) == []


def test_calculate_rewards_for_users_tied_competitors_pay_backers_alike():
    leaderboard = [
        _entry("A", "wallet-a", 1, "owner-a"),
        _entry("B", "wallet-b", 1, "owner-b"),
        _entry("C", "wallet-c", 3, "owner-c"),
    ]
    boost_allocations = [
        _boost("Alice", "A", 10, "2024-01-01T12:00:00"),
        _boost("Bob", "B", 10, "2024-01-01T12:00:00"),
    ]

    rewards = _by_address(calculate_rewards_for_users(PRIZE_POOL, boost_allocations, leaderboard, WINDOW))

    assert rewards["Alice"]["amount"] == rewards["Bob"]["amount"] == 428571428571428571428


def test_calculate_rewards_for_users_rejects_negative_boost():
    boost_allocations = [_boost("Alice", "A", -1, "2024-01-01T12:00:00")]

    with pytest.raises(ValueError, match="boost must be >= 0"):
        calculate_rewards_for_users(PRIZE_POOL, boost_allocations, SINGLE_ENTRY, WINDOW)


def test_calculate_rewards_for_users_rejects_naive_timestamp_in_aware_window():
    boost_allocations = [_boost("Alice", "A", 1, "2024-01-01T12:00:00")]
    boost_allocations[0]["timestamp"] = datetime(2024, 1, 1, 12)

    with pytest.raises(TypeError, match="timezone-aware"):
        calculate_rewards_for_users(PRIZE_POOL, boost_allocations, SINGLE_ENTRY, WINDOW)
