from abc import ABC, abstractmethod

from solsign.reward.models import RewardReceipt


class BaseRewardDispatcher(ABC):
    """Contract for token reward transfer adapters."""

    @abstractmethod
    def dispatch(self, recipient: str, amount: float) -> RewardReceipt:
        """Transfer ``amount`` tokens to ``recipient`` exactly once per call.

        Implementations make a single attempt and never retry internally.

        Raises:
            RewardDispatchError: on any failure, including insufficient balance.
        """

    def close(self) -> None:
        """Release network resources held by the adapter."""
