import pytest
from pydantic import ValidationError

from solsign.config.settings import Settings


class TestSettingsDefaults:
    def test_default_app_env(self) -> None:
        s = Settings()
        assert s.app_env == "dev"

    def test_default_db_port(self) -> None:
        s = Settings()
        assert s.db_port == 5432

    def test_default_pdf_engine(self) -> None:
        s = Settings()
        assert s.pdf_engine == "pdfplumber"

    def test_default_preview_scale(self) -> None:
        s = Settings()
        assert s.preview_scale == 1.2

    def test_default_upload_limit_is_15_mib(self) -> None:
        s = Settings()
        assert s.max_upload_bytes == 15 * 1024 * 1024

    def test_default_code_ttl(self) -> None:
        s = Settings()
        assert s.verification_code_ttl_minutes == 15

    def test_default_verify_rate_limit(self) -> None:
        s = Settings()
        assert s.verify_rate_limit_max_requests == 3
        assert s.verify_rate_limit_window_seconds == 900

    def test_default_api_rate_limit(self) -> None:
        s = Settings()
        assert s.api_rate_limit_max_requests == 100
        assert s.api_rate_limit_window_seconds == 900

    def test_default_reward(self) -> None:
        s = Settings()
        assert s.reward_amount == 8.0
        assert s.reward_token_symbol == "SSIGN"

    def test_default_providers(self) -> None:
        s = Settings()
        assert s.mail_provider == "log"
        assert s.reward_provider == "example"


class TestSettingsFromEnv:
    def test_loads_app_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_ENV", "production")
        s = Settings()
        assert s.app_env == "production"

    def test_loads_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        s = Settings()
        assert s.log_level == "DEBUG"

    def test_loads_db_host(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_HOST", "db.example.com")
        s = Settings()
        assert s.db_host == "db.example.com"

    def test_loads_db_port(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_PORT", "5433")
        s = Settings()
        assert s.db_port == 5433

    def test_loads_solana_network(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SOLANA_NETWORK", "mainnet-beta")
        s = Settings()
        assert s.solana_network == "mainnet-beta"

    def test_loads_debug_flag(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DEBUG", "true")
        s = Settings()
        assert s.debug is True


class TestExplorerUrl:
    def test_builds_cluster_url(self) -> None:
        s = Settings(solana_network="devnet")
        assert s.explorer_url("5abc") == "https://explorer.solana.com/tx/5abc?cluster=devnet"


class TestSettingsValidation:
    def test_invalid_db_port_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_PORT", "not_a_number")
        with pytest.raises(ValidationError):
            Settings()

    def test_invalid_preview_scale_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PREVIEW_SCALE", "abc")
        with pytest.raises(ValidationError):
            Settings()
