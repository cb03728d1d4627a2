from decimal import Decimal
from typing import Optional

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # API Settings
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Retail POS Billing"
    ENVIRONMENT: str = "development"

    # Logging
    LOG_LEVEL: Optional[str] = None
    LOG_FORMAT: Optional[str] = None

    # Billing
    BASE_CURRENCY: str = "INR"
    DEFAULT_GST_RATE: Decimal = Decimal("18")
    BUSINESS_STATE: Optional[str] = "27"
    CURRENCY_DECIMAL_PLACES: int = 2
    BUSINESS_TIMEZONE: str = "Asia/Kolkata"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"


settings = Settings()


class BillingConfig(BaseModel):
    """
    Explicit billing configuration passed to the billing service.

    Built once from Settings at startup; calculations read their defaults
    from here instead of from global state.
    """

    currency: str = "INR"
    default_gst_rate: Decimal = Decimal("18")
    business_state: Optional[str] = "27"
    currency_places: int = 2

    model_config = {"frozen": True}

    @classmethod
    def from_settings(cls, source: Optional[Settings] = None) -> "BillingConfig":
        source = source or settings
        return cls(
            currency=source.BASE_CURRENCY,
            default_gst_rate=source.DEFAULT_GST_RATE,
            business_state=source.BUSINESS_STATE,
            currency_places=source.CURRENCY_DECIMAL_PLACES,
        )
