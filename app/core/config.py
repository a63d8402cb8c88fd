"""
Application configuration
"""
from functools import lru_cache
from typing import List
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""

    # Application
    APP_NAME: str = "Hamara Shehar Civic API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = True
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # CORS (ignored in development, where every origin is allowed)
    CORS_ORIGINS: str = "https://hamarashehar.in,https://www.hamarashehar.in"

    # OpenCage geocoder
    OPENCAGE_API_KEY: str = ""
    OPENCAGE_URL: str = "https://api.opencagedata.com/geocode/v1/json"
    GEOCODING_TIMEOUT_SECONDS: float = 5.0
    GEOCODING_USER_AGENT: str = "HamaraSheharApp/1.0 (contact@hamarashehar.com)"

    # Rate limiting: 100 requests per 15 minutes per IP
    RATE_LIMIT_REQUESTS: int = 100
    RATE_LIMIT_WINDOW_SECONDS: int = 900

    # Issue store
    STORE_LATENCY_SECONDS: float = 0.0
    DEFAULT_SEARCH_RADIUS_KM: float = 5.0
    PLACEHOLDER_IMAGE_URL: str = "https://images.pexels.com/photos/1029243/pexels-photo-1029243.jpeg?auto=compress&cs=tinysrgb&w=600"
    ONE_VOTE_PER_USER: bool = False
    SEED_DEMO_DATA: bool = True

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def cors_origins_list(self) -> List[str]:
        if self.ENVIRONMENT == "development":
            return ["*"]
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Cached settings instance"""
    return Settings()


settings = get_settings()
