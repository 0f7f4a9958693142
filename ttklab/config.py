from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from pathlib import Path
from typing import List


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TTKLAB_",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Application
    app_name: str = "TTK Lab"
    debug: bool = False
    api_version: str = "v1"
    log_level: str = "INFO"

    # Weapon catalog
    catalog_path: Path = Path(__file__).parent / "data" / "weapons.json"

    # Evaluation defaults
    default_trials: int = 100
    default_kill_window: float = 1.0  # seconds
    default_max_shots: int = 50
    default_sample_count: int = 800

    # Target
    hp: float = 100.0
    target_radius: float = 0.17  # meters

    # Per-weapon results kept in memory (LRU)
    results_cache_size: int = 256

    # CORS; override with a JSON list in TTKLAB_CORS_ORIGINS
    cors_origins: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
    ]

    # Player skill slider range (aim jitter, degrees)
    min_skill_deg: float = 0.0
    max_skill_deg: float = 0.30


@lru_cache()
def get_settings() -> Settings:
    return Settings()
