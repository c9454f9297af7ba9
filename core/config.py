from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SELLER_PRO_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    environment: Literal["development", "staging", "production"] = "development"
    log_level: str = "INFO"
    log_json: bool = False

    # Persistence is disabled unless a directory is configured
    storage_dir: Optional[str] = None
    seed_demo_data: bool = True

    app_base_url: str = "http://localhost:3000"

    # Referral program
    referral_bounty_points: int = 500
    referral_invite_ttl_days: int = 30

    # Brevo transactional email
    brevo_api_key: Optional[str] = None
    brevo_api_url: str = "https://api.brevo.com/v3/smtp/email"
    brevo_sender_email: str = "no-reply@trendies.co"
    brevo_sender_name: str = "Trendies"
    brevo_redeem_template_id: int = 47
    brevo_referral_template_id: int = 6
    brevo_timeout_seconds: float = 10.0


@lru_cache
def get_settings() -> Settings:
    return Settings()
