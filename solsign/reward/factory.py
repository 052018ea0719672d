from solsign.config.settings import Settings
from solsign.reward.base import BaseRewardDispatcher
from solsign.reward.example_dispatcher import ExampleRewardDispatcher
from solsign.reward.http_dispatcher import HttpRewardDispatcher


class RewardDispatcherFactory:
    """Creates the configured reward dispatcher."""

    PROVIDERS = ("example", "http")

    @classmethod
    def create(cls, settings: Settings) -> BaseRewardDispatcher:
        provider = settings.reward_provider.lower()
        if provider == "example":
            return ExampleRewardDispatcher()
        if provider == "http":
            return HttpRewardDispatcher(
                base_url=settings.reward_service_url,
                api_key=settings.reward_service_api_key,
                symbol=settings.reward_token_symbol,
                timeout_seconds=settings.reward_timeout_seconds,
            )
        raise ValueError(
            f"Unknown reward provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
        )
