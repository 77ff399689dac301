"""
Configuration management using environment variables
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import List
import logging


class Settings(BaseSettings):
    """Application settings from environment variables"""

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # API Info
    api_title: str = "Heimdall Safety Scan API"
    api_version: str = "1.0.0"
    api_description: str = "Backend API for the Heimdall visual safety monitoring system"

    # Vision service
    vision_backend: str = "rekognition"  # "rekognition" | "mock"
    aws_region: str = "us-east-1"
    min_confidence: float = 50.0  # lowered to 50% for better webcam detection
    required_equipment: str = "HEAD_COVER"

    # Mock backend
    mock_helmet_probability: float = 0.7
    mock_latency_s: float = 0.5

    # Audit log
    audit_log_path: str = "output/logs/audit.jsonl"  # empty string disables persistence
    fallback_log: str = "output/logs/fallback.json"
    audit_max_entries: int = 1000
    default_zone_id: str = "Zone-A"

    # CORS
    allowed_origins: str = "*"

    # File limits
    max_image_size_mb: int = 5

    # Security (token issued by the external identity provider)
    api_token: str = ""
    require_auth: bool = False

    # Logging
    log_level: str = "INFO"

    # Pydantic v2 settings config
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    @property
    def allowed_origins_list(self) -> List[str]:
        """Parse comma-separated origins into list"""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    @property
    def required_equipment_list(self) -> List[str]:
        return [eq.strip().upper() for eq in self.required_equipment.split(",") if eq.strip()]

    @property
    def max_image_size_bytes(self) -> int:
        """Convert MB to bytes"""
        return self.max_image_size_mb * 1024 * 1024


@lru_cache()
def get_settings() -> Settings:
    """Cached settings instance"""
    return Settings()


def configure_logging(level: str = "INFO") -> None:
    """Root logging setup, applied when the server starts."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
