"""Example reward dispatcher.

Use this module as a reference when implementing new transfer adapters.
Implement BaseRewardDispatcher and register the provider in RewardDispatcherFactory.
"""

import secrets

from solsign.logging.logger import Log
from solsign.reward.base import BaseRewardDispatcher
from solsign.reward.models import RewardReceipt


class ExampleRewardDispatcher(BaseRewardDispatcher):
    """Pretends to transfer tokens and returns a random signature.

    No network calls. Useful for local development and tests.
    """

    def dispatch(self, recipient: str, amount: float) -> RewardReceipt:
        signature = secrets.token_hex(32)
        Log.info(f"Example reward of {amount:g} to {recipient}: {signature}")
        return RewardReceipt(signature=signature, amount=amount, recipient=recipient)
