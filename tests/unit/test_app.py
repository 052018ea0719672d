from unittest.mock import MagicMock, patch

from fastapi.testclient import TestClient

from solsign.api.app import create_app
from solsign.api.container import Container, build_container
from solsign.api.rate_limit import FixedWindowRateLimiter
from solsign.config.settings import Settings
from solsign.mail.log_mailer import LogMailer
from solsign.main import main
from solsign.pdf.pymupdf_adapter import PyMuPdfAdapter
from solsign.reward.example_dispatcher import ExampleRewardDispatcher


class TestBuildContainer:
    def test_wires_configured_adapters(self) -> None:
        settings = Settings(mail_provider="log", reward_provider="example", pdf_engine="pymupdf")

        container = build_container(settings)

        service = container.verification_service
        assert isinstance(service._mailer, LogMailer)
        assert isinstance(service._reward_dispatcher, ExampleRewardDispatcher)
        assert isinstance(container.exporter._inspector._extractor, PyMuPdfAdapter)
        assert container.settings is settings


class TestCreateApp:
    def test_lifespan_manages_database(self) -> None:
        with (
            patch("solsign.api.app.init_pool") as mock_init_pool,
            patch("solsign.api.app.init_schema") as mock_init_schema,
            patch("solsign.api.app.close_pool") as mock_close_pool,
        ):
            with TestClient(create_app(Settings())) as client:
                assert client.get("/api/health").status_code == 200
                mock_init_pool.assert_called_once()
                mock_init_schema.assert_called_once()
            mock_close_pool.assert_called_once()

    def test_lifespan_closes_owned_container(self) -> None:
        with (
            patch("solsign.api.app.init_pool"),
            patch("solsign.api.app.init_schema"),
            patch("solsign.api.app.close_pool"),
            patch.object(Container, "close") as mock_close,
        ):
            with TestClient(create_app(Settings())):
                mock_close.assert_not_called()
            mock_close.assert_called_once()

    def test_injected_container_skips_database(self) -> None:
        container = MagicMock()
        container.settings = Settings()
        with patch("solsign.api.app.init_pool") as mock_init_pool:
            with TestClient(create_app(container=container)):
                pass
        mock_init_pool.assert_not_called()
        container.close.assert_not_called()


class TestApiRateLimit:
    def _client(self, max_requests: int) -> TestClient:
        container = MagicMock()
        container.settings = Settings()
        container.api_rate_limiter = FixedWindowRateLimiter(
            max_requests=max_requests, window_seconds=900
        )
        return TestClient(create_app(container=container), raise_server_exceptions=False)

    def test_limits_every_route_per_client(self) -> None:
        client = self._client(max_requests=2)

        statuses = [client.get("/api/health").status_code for _ in range(2)]
        blocked = client.get("/api/transactions")

        assert statuses == [200, 200]
        assert blocked.status_code == 429
        assert blocked.json() == {
            "message": "Too many requests from this IP, please try again later."
        }

    def test_build_container_uses_configured_budget(self) -> None:
        settings = Settings(api_rate_limit_max_requests=1)

        limiter = build_container(settings).api_rate_limiter

        assert limiter.hit("10.0.0.1") is True
        assert limiter.hit("10.0.0.1") is False
        assert limiter.hit("10.0.0.2") is True


class TestMain:
    def test_serves_app(self) -> None:
        with (
            patch("solsign.main.uvicorn.run") as mock_run,
            patch("solsign.main.Log.configure") as mock_configure,
        ):
            main()

        mock_configure.assert_called_once()
        kwargs = mock_run.call_args.kwargs
        assert kwargs["host"] == "0.0.0.0"
        assert kwargs["port"] == 5000
