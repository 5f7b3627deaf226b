"""
Centralized application configuration
"""
import json
from typing import Dict, List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""

    # API Settings
    API_TITLE: str = "Atelier Checkout API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "Checkout, payment reconciliation and fulfillment"
    API_DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "postgresql://localhost:5432/atelier"
    DB_POOL_MIN: int = 1
    DB_POOL_MAX: int = 10

    # CORS - Can be string (comma-separated) or JSON array
    ALLOWED_ORIGINS: Optional[str] = "http://localhost:3000"

    # Identity verification (JWT shared secret)
    AUTH_SECRET: str = ""

    # Payment gateway
    RAZORPAY_KEY_ID: str = ""
    RAZORPAY_KEY_SECRET: str = ""
    RAZORPAY_API_URL: str = "https://api.razorpay.com/v1"
    GATEWAY_TIMEOUT_SECONDS: float = 10.0

    # Sub-units per major unit, JSON mapping, e.g. '{"INR": 100, "JPY": 1}'
    CURRENCY_SUBUNITS: str = '{"INR": 100, "USD": 100, "EUR": 100, "JPY": 1}'

    def get_allowed_origins(self) -> List[str]:
        """Parse ALLOWED_ORIGINS string into list"""
        if not self.ALLOWED_ORIGINS:
            return ["http://localhost:3000"]

        # Try JSON parse first (for array format)
        try:
            origins = json.loads(self.ALLOWED_ORIGINS)
            if isinstance(origins, list):
                return origins
        except (json.JSONDecodeError, ValueError):
            pass

        # Fall back to comma-separated string
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    def get_currency_subunits(self) -> Dict[str, int]:
        """Parse CURRENCY_SUBUNITS into an upper-cased currency -> factor map"""
        raw = json.loads(self.CURRENCY_SUBUNITS)
        return {code.upper(): int(factor) for code, factor in raw.items()}

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
