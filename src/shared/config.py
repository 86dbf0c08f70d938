"""Marketplace settings: one explicit configuration object for every component.

Values come from environment variables prefixed with ``MARKETPLACE_``; nested
sections use ``__`` as a delimiter::

    MARKETPLACE_PAYOUT__CONVERSION_RATE=300
    MARKETPLACE_GEO__PROVIDER=openroute
    MARKETPLACE_GEO__API_KEY=...

Components receive the settings (or one of its sections) explicitly. The
module-level accessors exist for adapter factories and the HTTP layer.
"""

from pydantic import BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# ---------------------------------------------------------------------------
# Shipping
# ---------------------------------------------------------------------------
class RateTier(BaseModel):
    """A distance band: anything up to and including ``max_distance_km`` costs ``price``."""

    max_distance_km: float = Field(gt=0)
    price: float = Field(ge=0)


class ShippingTariff(BaseModel):
    same_city_price: float = Field(default=250.0, ge=0)
    tiers: list[RateTier] = Field(
        default_factory=lambda: [
            RateTier(max_distance_km=50.0, price=350.0),
            RateTier(max_distance_km=100.0, price=700.0),
        ]
    )
    beyond_price: float = Field(default=1200.0, ge=0)

    @field_validator("tiers")
    @classmethod
    def tiers_must_be_ascending(cls, tiers: list[RateTier]) -> list[RateTier]:
        bounds = [tier.max_distance_km for tier in tiers]
        if bounds != sorted(bounds) or len(set(bounds)) != len(bounds):
            raise ValueError("Rate tiers must have strictly ascending distance bounds")
        return tiers

    def price_for_distance(self, distance_km: float) -> float:
        for tier in self.tiers:
            if distance_km <= tier.max_distance_km:
                return tier.price
        return self.beyond_price


class ShippingSettings(BaseModel):
    tariff: ShippingTariff = Field(default_factory=ShippingTariff)
    currency: str = "LKR"
    lookup_timeout_seconds: float = Field(default=10.0, gt=0)


# ---------------------------------------------------------------------------
# External collaborators
# ---------------------------------------------------------------------------
class GeoSettings(BaseModel):
    provider: str = "fake"  # "fake" | "openroute"
    base_url: str = "https://api.openrouteservice.org"
    api_key: SecretStr = SecretStr("")
    profile: str = "driving-car"


class CarrierSettings(BaseModel):
    adapter: str = "fake"  # "fake" | "shipengine"
    base_url: str = "https://api.shipengine.com/v1"
    api_key: SecretStr = SecretStr("")
    carrier_id: str = "se-1488525"
    service_code: str = "usps_priority_mail"
    country_code: str = "LK"
    default_postal_code: str = "00000"
    default_phone: str = "0000000000"
    fallback_full_name: str = "Default Full Name"
    package_weight_kg: float = Field(default=1.0, gt=0)
    customs_contents: str = "merchandise"
    customs_non_delivery: str = "return_to_sender"
    timeout_seconds: float = Field(default=15.0, gt=0)


class PayoutSettings(BaseModel):
    gateway: str = "fake"  # "fake" | "paypal"
    conversion_rate: float = Field(default=300.0, gt=0)  # source units per settlement unit
    source_currency: str = "LKR"
    settlement_currency: str = "USD"
    link_ttl_minutes: int = Field(default=60, gt=0)
    paypal_base_url: str = "https://api-m.sandbox.paypal.com"
    paypal_client_id: str = ""
    paypal_client_secret: SecretStr = SecretStr("")
    timeout_seconds: float = Field(default=15.0, gt=0)
    max_conflict_retries: int = Field(default=3, ge=0)


class MailSettings(BaseModel):
    adapter: str = "fake"  # "fake" | "smtp"
    host: str = "smtp.office365.com"
    port: int = 587
    username: str = ""
    password: SecretStr = SecretStr("")
    sender: str = "payouts@harvest.example"
    use_tls: bool = True
    timeout_seconds: float = Field(default=15.0, gt=0)


# ---------------------------------------------------------------------------
# Root settings object
# ---------------------------------------------------------------------------
class MarketplaceSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="MARKETPLACE_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    shipping: ShippingSettings = Field(default_factory=ShippingSettings)
    geo: GeoSettings = Field(default_factory=GeoSettings)
    carrier: CarrierSettings = Field(default_factory=CarrierSettings)
    payout: PayoutSettings = Field(default_factory=PayoutSettings)
    mail: MailSettings = Field(default_factory=MailSettings)


_current_settings: MarketplaceSettings | None = None


def get_settings() -> MarketplaceSettings:
    """Return the active settings, loading them from the environment on first use."""
    global _current_settings
    if _current_settings is None:
        _current_settings = MarketplaceSettings()
    return _current_settings


def override_settings(settings: MarketplaceSettings) -> None:
    """Replace the active settings (useful for tests)."""
    global _current_settings
    _current_settings = settings


def reset_settings() -> None:
    """Drop cached settings so the next access re-reads the environment."""
    global _current_settings
    _current_settings = None
