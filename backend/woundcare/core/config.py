from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    APP_NAME: str = "WoundCare Clinical Records"
    VERSION: str = "1.0.0"
    SECRET_KEY: str = "change-me-in-production-use-strong-random-key"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_DAYS: int = 7
    REFRESH_TOKEN_EXPIRE_DAYS: int = 30
    BCRYPT_ROUNDS: int = 12

    DATABASE_URL: str = "sqlite:///./woundcare.db"

    # Auth cookies
    ACCESS_COOKIE_NAME: str = "auth-token"
    REFRESH_COOKIE_NAME: str = "refresh-token"
    COOKIE_SECURE: bool = False  # True behind HTTPS

    CORS_ORIGINS: List[str] = ["*"]

    # Image uploads (local filesystem, served under /uploads)
    UPLOAD_DIR: str = "./uploads"
    UPLOAD_URL_PREFIX: str = "/uploads"
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024
    ALLOWED_IMAGE_TYPES: List[str] = ["image/jpeg", "image/jpg", "image/png", "image/webp"]

    # Listing
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100

    SEED_DEMO_DATA: bool = True
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"


settings = Settings()
