from datetime import timedelta
from fractions import Fraction


class DecayParameters:

    MIN_DECAY_RATE = Fraction(1, 10)
    MAX_DECAY_RATE = Fraction(9, 10)

    DEFAULT_PRIZE_POOL_DECAY_RATE = Fraction(1, 2)

    # None disables time decay, every boost inside the window counts in full
    DEFAULT_BOOST_TIME_DECAY_RATE = None

    ONE_DAY = timedelta(days=1)


class EnvironmentVariables:

    PRIZE_POOL_DECAY_RATE = "PRIZE_POOL_DECAY_RATE"
    BOOST_TIME_DECAY_RATE = "BOOST_TIME_DECAY_RATE"
