class RewardDispatchError(Exception):
    """Raised when the token reward transfer fails."""


class RewardNetworkError(RewardDispatchError):
    """Raised when the transfer service cannot be reached or times out."""
