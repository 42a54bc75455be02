"""
Centralized configuration management with validation.

All environment variables are loaded and validated here.
Program rules (caps, session timing, training max factor) live in YAML
and are read through services.program_framework.config.ConfigService.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import List, Optional
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    """Application settings with validation."""

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )

    # API Configuration
    API_HOST: str = Field(default="0.0.0.0")
    API_PORT: int = Field(default=8000)
    API_RELOAD: bool = Field(default=False)
    EXPOSE_API_DOCS: bool = Field(default=True)

    # Logging Configuration
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FORMAT: str = Field(default="json")  # json or text

    # Environment
    ENVIRONMENT: str = Field(default="development")
    DEBUG: bool = Field(default=False)

    # CORS - comma-separated list of allowed origins for production
    # e.g., "https://app.example.com,https://www.example.com"
    CORS_ORIGINS: Optional[str] = Field(default=None)

    def cors_origin_list(self) -> List[str]:
        if self.CORS_ORIGINS:
            return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]
        if self.ENVIRONMENT == "production":
            return []
        return ["http://localhost:3000", "http://127.0.0.1:3000"]


# Global settings instance
settings = Settings()
