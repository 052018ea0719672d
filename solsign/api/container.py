from dataclasses import dataclass, field

from solsign.api.rate_limit import FixedWindowRateLimiter
from solsign.config.settings import Settings
from solsign.database.repositories.liveness_repository import LivenessRepository
from solsign.database.repositories.transaction_repository import TransactionRepository
from solsign.database.repositories.verification_repository import VerificationRepository
from solsign.mail.factory import MailerFactory
from solsign.pdf.factory import PdfExtractorFactory
from solsign.reward.factory import RewardDispatcherFactory
from solsign.signing.exporter import DocumentExporter
from solsign.verification.service import VerificationService


def _default_api_limiter() -> FixedWindowRateLimiter:
    return FixedWindowRateLimiter(max_requests=100, window_seconds=900)


@dataclass
class Container:
    """Services shared by all requests of one application instance."""

    settings: Settings
    verification_service: VerificationService
    transaction_repo: TransactionRepository
    exporter: DocumentExporter
    verify_rate_limiter: FixedWindowRateLimiter
    api_rate_limiter: FixedWindowRateLimiter = field(default_factory=_default_api_limiter)

    def close(self) -> None:
        self.verification_service.close()


def build_container(settings: Settings) -> Container:
    """Build the service graph with all adapters selected from settings."""
    verification_service = VerificationService(
        verification_repo=VerificationRepository(),
        liveness_repo=LivenessRepository(),
        mailer=MailerFactory.create(settings),
        reward_dispatcher=RewardDispatcherFactory.create(settings),
        settings=settings,
    )
    return Container(
        settings=settings,
        verification_service=verification_service,
        transaction_repo=TransactionRepository(),
        exporter=DocumentExporter(settings, PdfExtractorFactory.create(settings)),
        verify_rate_limiter=FixedWindowRateLimiter(
            max_requests=settings.verify_rate_limit_max_requests,
            window_seconds=settings.verify_rate_limit_window_seconds,
        ),
        api_rate_limiter=FixedWindowRateLimiter(
            max_requests=settings.api_rate_limit_max_requests,
            window_seconds=settings.api_rate_limit_window_seconds,
        ),
    )
