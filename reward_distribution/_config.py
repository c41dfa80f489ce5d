import os
from typing import Mapping, Optional

from reward_distribution._constants import EnvironmentVariables
from reward_distribution._model import DistributionParameters
from reward_distribution._validation import validate_boost_time_decay_rate, validate_prize_pool_decay_rate


def default_parameters() -> DistributionParameters:
    return {
        "prize_pool_decay_rate": None,
        "boost_time_decay_rate": None,
    }


def _read(
    environ: Mapping[str, str],
    key: str,
) -> Optional[str]:
    value = environ.get(key)
    if value is None or not value.strip():
        return None

    return value


def load_parameters(
    environ: Optional[Mapping[str, str]] = None,
) -> DistributionParameters:
    """
    Read the decay rates from the environment.

    An unset or blank variable keeps the calculator default. Values are
    validated the same way as explicit arguments.
    """

    if environ is None:
        environ = os.environ

    prize_pool_decay_rate = _read(environ, EnvironmentVariables.PRIZE_POOL_DECAY_RATE)
    boost_time_decay_rate = _read(environ, EnvironmentVariables.BOOST_TIME_DECAY_RATE)

    return {
        "prize_pool_decay_rate": (
            validate_prize_pool_decay_rate(prize_pool_decay_rate)
            if prize_pool_decay_rate is not None
            else None
        ),
        "boost_time_decay_rate": (
            validate_boost_time_decay_rate(boost_time_decay_rate)
            if boost_time_decay_rate is not None
            else None
        ),
    }
