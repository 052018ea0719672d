import httpx

from solsign.reward.base import BaseRewardDispatcher
from solsign.reward.exceptions import RewardDispatchError, RewardNetworkError
from solsign.reward.models import RewardReceipt


class HttpRewardDispatcher(BaseRewardDispatcher):
    """Requests token transfers from the treasury transfer service over HTTP."""

    def __init__(
        self,
        *,
        base_url: str,
        api_key: str,
        symbol: str,
        timeout_seconds: int,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not base_url:
            raise ValueError("reward_service_url is required for reward_provider=http")
        headers = {"Authorization": f"Bearer {api_key}"} if api_key else {}
        self._symbol = symbol
        self._client = httpx.Client(
            base_url=base_url,
            headers=headers,
            timeout=timeout_seconds,
            transport=transport,
        )

    def dispatch(self, recipient: str, amount: float) -> RewardReceipt:
        try:
            response = self._client.post(
                "/transfers",
                json={"recipient": recipient, "amount": amount, "symbol": self._symbol},
            )
        except (httpx.ConnectError, httpx.TimeoutException) as exc:
            raise RewardNetworkError(f"Transfer service network error: {exc}") from exc
        except httpx.HTTPError as exc:
            raise RewardDispatchError(f"Transfer service request failed: {exc}") from exc

        if response.status_code >= 400:
            raise RewardDispatchError(
                f"Transfer service returned {response.status_code}: {response.text[:200]}"
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise RewardDispatchError("Transfer service returned invalid JSON") from exc

        signature = payload.get("signature") if isinstance(payload, dict) else None
        if not signature:
            raise RewardDispatchError("Transfer service returned no transaction signature")
        return RewardReceipt(signature=str(signature), amount=amount, recipient=recipient)

    def close(self) -> None:
        self._client.close()
