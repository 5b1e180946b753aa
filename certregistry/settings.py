# certregistry/settings.py
import os
import tempfile
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    HOST: str = "127.0.0.1"
    PORT: int = 4000
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    DATABASE_URL: str = "sqlite:///./data.db"

    # "ipfs" talks to a node / cluster proxy, "pinata" to the pinning service
    CONTENT_STORE: str = "ipfs"
    CONTENT_STORE_TIMEOUT: int = 60
    IPFS_API_URL: str = "http://127.0.0.1:5001/api/v0"

    PINATA_BASE_URL: str = "https://api.pinata.cloud"
    PINATA_JWT: str | None = None
    PINATA_API_KEY: str | None = None
    PINATA_API_SECRET: str | None = None

    UPLOAD_DIR: str = os.path.join(tempfile.gettempdir(), "certregistry-uploads")
    UPLOAD_MAX_AGE_MINUTES: int = 60
    UPLOAD_SWEEP_MINUTES: int = 10
    SCHEDULER_ENABLED: bool = True

    class Config:
        env_file = ".env"

settings = Settings()
