"""
Application configuration.

This module defines the application settings using Pydantic models with
values read from environment variables (optionally via a .env file).
"""

from pathlib import Path

from pydantic import BaseModel, Field, validator
from typing import List
import os
from dotenv import load_dotenv

# Load .env from backend directory (works regardless of cwd when running uvicorn)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=_env_path)


def _env_list(name: str, default: str) -> List[str]:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


class Settings(BaseModel):
    """
    Application configuration settings.

    Can be configured via environment variables or .env file.
    Environment variable names are uppercase (e.g., MAX_RECOMMENDATIONS).

    Attributes:
        MAX_RECOMMENDATIONS: Maximum number of alternatives returned
        MIN_RECOMMENDATION_CONFIDENCE: Alternatives below this confidence are dropped
        DEFAULT_RISK_SENSITIVITY: Risk sensitivity used when no profile is sent
        MAX_CATALOG_SIZE: Largest catalog accepted per request
        MAX_INGREDIENTS: Largest ingredient list accepted per product
        CORS_ORIGINS: Frontend origins allowed by CORS
        LOG_LEVEL: Logging level (DEBUG/INFO/WARNING/ERROR)
    """

    # Recommendation Limits
    MAX_RECOMMENDATIONS: int = Field(
        default_factory=lambda: int(os.getenv("MAX_RECOMMENDATIONS", "5")),
        ge=1,
        le=20,
        description="Maximum number of alternative products to return"
    )

    MIN_RECOMMENDATION_CONFIDENCE: float = Field(
        default_factory=lambda: float(os.getenv("MIN_RECOMMENDATION_CONFIDENCE", "0.4")),
        ge=0.0,
        le=1.0,
        description="Minimum confidence for an alternative to be returned"
    )

    # Scoring Configuration
    DEFAULT_RISK_SENSITIVITY: int = Field(
        default_factory=lambda: int(os.getenv("DEFAULT_RISK_SENSITIVITY", "3")),
        ge=1,
        le=5,
        description="Risk sensitivity applied when the request has no user profile"
    )

    # Request Limits
    MAX_CATALOG_SIZE: int = Field(
        default_factory=lambda: int(os.getenv("MAX_CATALOG_SIZE", "500")),
        ge=1,
        le=10000,
        description="Maximum number of catalog products per request"
    )

    MAX_INGREDIENTS: int = Field(
        default_factory=lambda: int(os.getenv("MAX_INGREDIENTS", "100")),
        ge=1,
        le=1000,
        description="Maximum number of ingredients per product"
    )

    # CORS Configuration
    CORS_ORIGINS: List[str] = Field(
        default_factory=lambda: _env_list(
            "CORS_ORIGINS",
            "http://localhost:3000,http://localhost:5173,http://localhost:8080"
        ),
        description="Comma-separated list of allowed frontend origins"
    )

    # Logging Configuration
    LOG_LEVEL: str = Field(
        default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"),
        description="Logging level (DEBUG/INFO/WARNING/ERROR)"
    )

    @validator('LOG_LEVEL', always=True)
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                f"LOG_LEVEL must be one of: {', '.join(valid_levels)}"
            )
        return v_upper


# Create global settings instance
settings = Settings()


# Configure logging based on settings
def configure_logging():
    """Configure application logging based on settings."""
    import logging

    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    logger = logging.getLogger(__name__)
    logger.info(f"Logging configured at {settings.LOG_LEVEL} level")
    logger.info(
        f"Recommendations: max={settings.MAX_RECOMMENDATIONS}, "
        f"min_confidence={settings.MIN_RECOMMENDATION_CONFIDENCE}"
    )
    logger.info(f"Default risk sensitivity: {settings.DEFAULT_RISK_SENSITIVITY}")


# Initialize logging on import
configure_logging()
