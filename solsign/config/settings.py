from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"
    debug: bool = False

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "solsign"
    db_username: str = "solsign"
    db_password: str = "secret"
    db_pool_min_size: int = 1
    db_pool_max_size: int = 10
    db_pool_timeout_seconds: float = 5.0

    pdf_engine: str = "pdfplumber"
    preview_scale: float = 1.2
    max_upload_bytes: int = 15 * 1024 * 1024

    verification_code_ttl_minutes: int = 15
    verify_rate_limit_max_requests: int = 3
    verify_rate_limit_window_seconds: int = 900
    api_rate_limit_max_requests: int = 100
    api_rate_limit_window_seconds: int = 900
    reward_claim_ttl_seconds: int = 300

    reward_amount: float = 8.0
    reward_token_symbol: str = "SSIGN"
    reward_provider: str = "example"
    reward_service_url: str = ""
    reward_service_api_key: str = ""
    reward_timeout_seconds: int = 30

    mail_provider: str = "log"
    mail_from: str = "noreply@solsign.app"
    smtp_host: str = "localhost"
    smtp_port: int = 587
    smtp_username: str = ""
    smtp_password: str = ""
    smtp_use_tls: bool = True

    solana_network: str = "devnet"
    explorer_base_url: str = "https://explorer.solana.com/tx"
    verification_base_url: str = "http://localhost:5173/verify"
    client_url: str = "http://localhost:5173"

    host: str = "0.0.0.0"
    port: int = 5000

    def explorer_url(self, signature: str) -> str:
        """Block explorer link for a transaction signature."""
        return f"{self.explorer_base_url}/{signature}?cluster={self.solana_network}"
