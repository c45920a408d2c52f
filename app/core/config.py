# app/core/config.py
import os
from functools import lru_cache
from typing import List


def _as_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


class Settings:
    def __init__(self):
        self.database_url: str = os.getenv("DATABASE_URL", "sqlite:///./marketplace.db")

        # Auth
        self.secret_key: str = os.getenv("SECRET_KEY", "change-me")
        self.algorithm: str = "HS256"
        self.access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 24 * 60))

        self.log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
        self.seed_sample_products: bool = _as_bool(os.getenv("SEED_SAMPLE_PRODUCTS", "true"))

        # ImageKit
        self.imagekit_private_key: str = os.getenv("IMAGEKIT_PRIVATE_KEY", "")
        self.imagekit_public_key: str = os.getenv("IMAGEKIT_PUBLIC_KEY", "")
        self.imagekit_url_endpoint: str = os.getenv("IMAGEKIT_URL_ENDPOINT", "")

        self.cors_origins: List[str] = [
            o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()
        ]


@lru_cache
def get_settings() -> Settings:
    return Settings()
