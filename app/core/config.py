from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="TRACKER_", env_file=".env", extra="ignore")

    data_file: Path = BASE_DIR / "db.json"
    upload_dir: Path = BASE_DIR / "uploads"
    # deve coincidere con il mount statico in app/main.py
    upload_url_prefix: str = "/uploads"
    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]


settings = Settings()
