from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Needed for guest flows and maintenance scripts

    # Mapbox (geocoding, directions)
    mapbox_access_token: Optional[str] = None

    # Viator partner API
    viator_api_key: Optional[str] = None
    viator_base_url: str = "https://api.viator.com/partner/v1"
    viator_affiliate_params: str = "pid=P00250046&mcid=42383&medium=link&campaign=wtm"

    # Image search
    pexels_api_key: Optional[str] = None
    unsplash_access_key: Optional[str] = None

    # Transactional email (Plunk)
    plunk_api_key: Optional[str] = None
    email_from_address: str = "hello@withme.travel"
    app_base_url: str = "https://withme.travel"

    # Outbound HTTP
    http_timeout_seconds: float = 10.0

    # Guest trips
    guest_cookie_name: str = "guest_token"
    guest_trip_days: int = 7

    # App
    app_name: str = "withme-api"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"
    rate_limit_enabled: bool = True

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",
        extra="ignore"
    )


settings = Settings()
