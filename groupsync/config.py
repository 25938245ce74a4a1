"""
Configuration management.
Simple .env based config for VPS deployment.
"""

from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SESSION_SECRET = "change-me-in-production-use-random-string"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    # Server
    host: str = "0.0.0.0"
    port: int = 8080
    
    # Security
    session_secret: str = DEFAULT_SESSION_SECRET
    session_cookie_secure: bool = False  # set True behind HTTPS
    
    # Database
    database_path: str = "./data/app.db"
    
    # Shopify
    shopify_api_version: str = "2024-01"
    
    # Propagation
    sync_poll_interval: float = 60.0  # seconds
    dispatch_max_concurrent: int = 5
    dispatch_deadline: Optional[float] = 600.0  # seconds, None disables
    
    # Logging
    log_level: str = "INFO"


def validate_settings(config: Settings) -> List[str]:
    """
    Check configuration once at startup.
    
    Returns:
        Human readable descriptions of configuration gaps (empty if none)
    """
    problems = []
    
    if config.session_secret == DEFAULT_SESSION_SECRET:
        problems.append("SESSION_SECRET is using the default value")
    
    if config.sync_poll_interval <= 0:
        problems.append("SYNC_POLL_INTERVAL must be positive")
    
    return problems


# Global settings instance
settings = Settings()
