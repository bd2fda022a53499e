from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    # API Configuration
    debug: bool = False
    environment: str = "development"
    api_host: str = "0.0.0.0"
    api_port: int = 3001
    api_prefix: str = "/api"

    # CORS (the dashboard dev server)
    cors_allow_origins: List[str] = ["http://localhost:8080"]

    # Gemini Configuration (secret comes from environment)
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.5-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    # None disables the timeout entirely
    gemini_timeout_seconds: Optional[float] = None

    # API probe
    probe_timeout_seconds: Optional[float] = None
    probe_follow_redirects: bool = True

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = False
        frozen = True


# Global settings instance
settings = Settings()
