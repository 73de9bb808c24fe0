"""Application configuration loaded from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings

# Settings that must be non-empty before the service may start
REQUIRED_SETTINGS: tuple[str, ...] = (
    "mollie_api_key",
    "redirect_url",
    "smtp_host",
    "smtp_port",
    "smtp_user",
    "smtp_pass",
    "from_email",
    "oracle_dsn",
    "oracle_user",
    "oracle_password",
)


class ConfigError(Exception):
    """Raised at startup when required configuration is missing or invalid."""


class Settings(BaseSettings):
    """lotterypay application settings."""

    # App
    app_env: str = "development"
    app_host: str = "0.0.0.0"
    app_port: int = 3000
    log_level: str = "INFO"
    log_format: str = "text"  # "text" or "json"

    # Oracle Database
    oracle_dsn: str = "localhost:1521/FREEPDB1"
    oracle_user: str = "lotterypay"
    oracle_password: str = ""
    oracle_pool_min: int = 1
    oracle_pool_max: int = 5
    oracle_pool_increment: int = 1

    # Payment gateway (Mollie)
    mollie_api_key: str = ""
    mollie_api_base: str = "https://api.mollie.com/v2"
    payment_currency: str = "EUR"
    redirect_url: str = ""  # may contain "{ticket_id}"
    webhook_url: str = ""
    gateway_timeout_seconds: float = 15.0

    # SMTP
    smtp_host: str = ""
    smtp_port: int = 0
    smtp_secure: bool = False
    smtp_user: str = ""
    smtp_pass: str = ""
    from_email: str = ""
    from_name: str = "De Boss Loterij"

    # Lottery numbers
    lottery_min_number: int = 1
    lottery_max_number: int = 45
    lottery_numbers_per_set: int = 6

    # CORS
    cors_origins: str = "*"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"

    @property
    def is_testing(self) -> bool:
        return self.app_env == "testing"

    @property
    def cors_origin_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        if self.cors_origins == "*":
            return ["*"]
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def missing_required(self) -> list[str]:
        """Return env var names of required settings that are unset."""
        return [name.upper() for name in REQUIRED_SETTINGS if not getattr(self, name)]

    def require_complete(self) -> None:
        """Raise ``ConfigError`` listing every missing required setting."""
        missing = self.missing_required()
        if missing:
            raise ConfigError(
                "Missing required environment variable(s): " + ", ".join(missing)
            )
