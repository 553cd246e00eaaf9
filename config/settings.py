from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
import os
from pathlib import Path


class Settings(BaseSettings):
    """Application settings - reads from environment variables"""

    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_key: str = ""
    db_schema: str = "public"

    # Platform fees
    commission_percentage: float = 5.0  # tournament_commission, platform-wide

    # Teams
    invitation_expiry_days: int = 7

    # Store access
    store_timeout_seconds: float = 10.0
    db_max_workers: int = 10

    # Environment
    env: str = "development"
    debug: bool = False

    @field_validator('commission_percentage')
    @classmethod
    def check_commission(cls, v):
        if v < 0 or v > 100:
            raise ValueError("commission_percentage must be between 0 and 100")
        return v

    @field_validator('invitation_expiry_days', 'db_max_workers')
    @classmethod
    def check_positive(cls, v):
        if v < 1:
            raise ValueError("must be at least 1")
        return v

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env" if Path(".env").exists() else None,
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,  # SUPABASE_URL == supabase_url
    )


# Create settings instance
settings = Settings()

if os.getenv("DEBUG", "").lower() == "true":
    print(f"Settings loaded:")
    print(f"  SUPABASE_URL: {'set' if settings.supabase_url else 'MISSING'}")
    print(f"  SUPABASE_KEY: {'set' if settings.supabase_key else 'MISSING'}")
    print(f"  COMMISSION: {settings.commission_percentage}%")
