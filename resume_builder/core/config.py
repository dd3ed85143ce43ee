"""Application settings."""

from functools import lru_cache
from pathlib import Path
from typing import List
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Resume builder configuration settings."""
    
    app_name: str = "Resume Builder API"
    version: str = "1.0.0"
    
    # Storage
    data_dir: Path = Path("data/resumes")
    preferences_file: Path = Path("data/preferences.yaml")
    
    # HTTP gateway client
    api_base_url: str = "http://localhost:8000"
    request_timeout: float = 30.0
    
    # Resume list search
    search_debounce_seconds: float = 0.3
    
    # CORS
    allowed_origins: List[str] = ["*"]
    
    log_level: str = "INFO"
    
    class Config:
        env_file = ".env"
        env_prefix = "RESUME_"
        case_sensitive = False
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """
    Get the cached settings instance.
    
    Returns:
        Settings: Settings loaded from environment and .env
    """
    return Settings()
