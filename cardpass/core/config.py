from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Server (progress scan URLs and account links point here)
    base_url: str = "http://localhost:3000"

    # Apple Wallet
    apple_pass_type_id: str = "pass.com.loyaltyplatform.storecard"
    apple_team_id: str = ""

    # Google Wallet
    google_wallet_issuer_id: str = ""

    # Locale for system strings on passes ("en" or "ar")
    default_locale: str = "en"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
