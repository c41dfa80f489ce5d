class InvalidWindow(ValueError):

    def __init__(self, message: str = "Invalid boost allocation window"):
        super().__init__(message)


class InvalidDecayRate(ValueError):
    pass


class InvalidPrizePoolDecayRate(InvalidDecayRate):

    def __init__(self, message: str = "Invalid prize pool decay rate"):
        super().__init__(message)


class InvalidBoostTimeDecayRate(InvalidDecayRate):

    def __init__(self, message: str = "Invalid boost time decay rate"):
        super().__init__(message)
