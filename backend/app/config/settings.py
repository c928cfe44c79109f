from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    shopify_store_domain: str
    shopify_admin_api_token: str
    shopify_admin_api_version: str = "2024-01"
    shopify_request_timeout: float = 30.0

    # OAuth app credentials. Only needed by /api/auth/callback.
    shopify_api_key: str = ""
    shopify_api_secret: str = ""

    environment: str = "development"
    log_level: str = "INFO"
    request_log_body_limit: int = 4000

    # Comma-separated list of origins allowed by CORS.
    allowed_origins: str = "http://localhost:3000,http://localhost:5173"

    # Analytics defaults
    best_selling_order_window: int = 250   # Orders scanned for sales figures
    low_stock_threshold: int = 5
    notification_hours: int = 24

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

    @property
    def is_configured(self) -> bool:
        return bool(self.shopify_store_domain and self.shopify_admin_api_token)


settings = Settings()
