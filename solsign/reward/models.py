from dataclasses import dataclass


@dataclass(frozen=True)
class RewardReceipt:
    """Confirmed token transfer to a verified wallet."""

    signature: str
    amount: float
    recipient: str
