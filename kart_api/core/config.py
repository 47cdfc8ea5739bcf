"""Application configuration."""

from os import getenv

from pydantic import BaseModel


def _normalize_database_url(url: str) -> str:
    # Hosted Postgres providers still hand out the legacy scheme.
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql://", 1)
    return url


class Settings(BaseModel):
    """Runtime settings for the application."""

    app_name: str = "Konaseema Kart API"
    app_env: str = getenv("APP_ENV", "dev")
    debug: bool = getenv("DEBUG", "0") == "1"
    log_level: str = getenv("LOG_LEVEL", "INFO")
    database_url: str = _normalize_database_url(getenv("DATABASE_URL", "sqlite:///./konaseema_kart.db"))
    cors_origins: list[str] = [
        origin.strip()
        for origin in getenv("CORS_ORIGINS", "http://localhost:5173,https://www.konaseemakart.in").split(",")
        if origin.strip()
    ]
    sms_provider: str = getenv("SMS_PROVIDER", "console")
    fast2sms_base_url: str = getenv("FAST2SMS_BASE_URL", "https://www.fast2sms.com/dev/bulkV2")
    fast2sms_authorization: str = getenv("FAST2SMS_AUTHORIZATION", "")
    sms_timeout_seconds: float = float(getenv("SMS_TIMEOUT_SECONDS", "10"))
    otp_ttl_seconds: int = int(getenv("OTP_TTL_SECONDS", "600"))
    jwt_secret_key: str = getenv("JWT_SECRET_KEY", "dev-only-change-me-to-a-long-random-secret")
    jwt_algorithm: str = getenv("JWT_ALGORITHM", "HS256")
    jwt_expire_minutes: int = int(getenv("JWT_EXPIRE_MINUTES", "60"))


settings: Settings = Settings()
