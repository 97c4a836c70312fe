"""Application configuration."""

from pydantic_settings import BaseSettings, SettingsConfigDict

from beacon.core.sos_policies import NEARBY_USER_RADII_M, SERVICE_RADII_M


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    app_name: str = "beacon"
    debug: bool = False

    # JWT (tokens are issued by the account service; we only verify them)
    jwt_secret: str = "change-me-in-production-use-openssl-rand-hex-32"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60 * 24 * 7  # 7 days

    # MongoDB
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db_name: str = "beacon"
    mongo_ensure_indexes: bool = True

    # Outbound mail: "log" writes to the logger, "http" posts to a transactional mail API
    mail_provider: str = "log"
    mail_api_url: str = "https://api.brevo.com/v3/smtp/email"
    mail_api_key: str = ""
    mail_from: str = "no-reply@beacon.local"
    mail_from_name: str = "Beacon SOS"
    mail_timeout_seconds: float = 20.0

    # Search radii in meters, tried in order
    nearby_user_radii_m: tuple[int, ...] = NEARBY_USER_RADII_M
    service_radii_m: tuple[int, ...] = SERVICE_RADII_M


settings = Settings()
