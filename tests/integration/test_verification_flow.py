import threading
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from solsign.config.settings import Settings
from solsign.database.repositories.liveness_repository import LivenessRepository
from solsign.database.repositories.verification_repository import VerificationRepository
from solsign.mail.base import BaseMailer
from solsign.reward.example_dispatcher import ExampleRewardDispatcher
from solsign.verification.exceptions import AlreadyRewardedError
from solsign.verification.models import Phase, ProfileSubmission
from solsign.verification.service import VerificationService


def _service(test_settings: Settings) -> tuple[VerificationService, MagicMock]:
    dispatcher = MagicMock(wraps=ExampleRewardDispatcher())
    service = VerificationService(
        verification_repo=VerificationRepository(),
        liveness_repo=LivenessRepository(),
        mailer=MagicMock(spec=BaseMailer),
        reward_dispatcher=dispatcher,
        settings=test_settings,
    )
    return service, dispatcher


def _submit(service: VerificationService, wallet: str) -> str:
    service.submit(
        ProfileSubmission(
            username=f"u_{wallet[:12]}",
            email=f"{wallet[:12]}@example.com",
            wallet_address=wallet,
            consent_given=True,
        )
    )
    service.record_liveness(wallet, True, datetime.now(timezone.utc))
    record = VerificationRepository().find_by_wallet(wallet)
    assert record is not None and record.code is not None
    return record.code


@pytest.mark.integration
class TestVerificationFlow:
    def test_submit_liveness_verify(self, wallet: str, test_settings: Settings) -> None:
        service, dispatcher = _service(test_settings)

        code = _submit(service, wallet)
        outcome = service.verify_code(wallet, code)

        record = service.get_status(wallet)
        assert record.phase is Phase.REWARD_GRANTED
        assert record.reward_transaction_signature == outcome.transaction_signature
        dispatcher.dispatch.assert_called_once()

    def test_concurrent_verification_rewards_once(
        self, wallet: str, test_settings: Settings
    ) -> None:
        service, dispatcher = _service(test_settings)
        code = _submit(service, wallet)
        barrier = threading.Barrier(3)
        outcomes: list[object] = []
        lock = threading.Lock()

        def attempt() -> None:
            barrier.wait()
            try:
                result: object = service.verify_code(wallet, code)
            except AlreadyRewardedError as exc:
                result = exc
            with lock:
                outcomes.append(result)

        threads = [threading.Thread(target=attempt) for _ in range(3)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=10)

        granted = [o for o in outcomes if not isinstance(o, AlreadyRewardedError)]
        assert len(outcomes) == 3
        assert len(granted) == 1
        assert dispatcher.dispatch.call_count == 1
