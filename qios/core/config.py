from decimal import Decimal
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment (.env.production wins over .env when both exist)
load_dotenv(dotenv_path=".env.production")
load_dotenv()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(extra="ignore", case_sensitive=False)

    environment: str = "production"  # "development" unlocks /api/dev and skips auth
    database_url: str = "sqlite+aiosqlite:///./qios.db"
    sql_echo: bool = False
    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]

    default_store_id: Optional[str] = None
    app_url: str = "http://localhost:8000"

    # 🔐 Auth
    jwt_secret: str = "qios-dev-secret-change-me-at-least-32-chars"
    jwt_lifetime_seconds: int = 60 * 60 * 24
    jwt_audience: str = "fastapi-users:auth"

    # Business rules
    tax_rate: Decimal = Decimal("0.11")

    # AI analytics
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.0-flash"

    # Payment gateways (a gateway is available only when its key is set)
    midtrans_server_key: Optional[str] = None
    midtrans_client_key: Optional[str] = None
    midtrans_is_production: bool = False

    xendit_secret_key: Optional[str] = None
    xendit_public_key: Optional[str] = None
    xendit_base_url: str = "https://api.xendit.co"

    bca_api_key: Optional[str] = None
    bca_base_url: str = "https://api.bca.co.id"
    bca_merchant_id: Optional[str] = None

    mandiri_api_key: Optional[str] = None
    mandiri_base_url: str = "https://api.mandiri.co.id"
    mandiri_merchant_id: Optional[str] = None

    dana_api_key: Optional[str] = None
    dana_base_url: str = "https://api.dana.id"
    dana_merchant_id: Optional[str] = None

    ovo_api_key: Optional[str] = None
    ovo_base_url: str = "https://api.ovo.id"
    ovo_merchant_id: Optional[str] = None

    linkaja_api_key: Optional[str] = None
    linkaja_base_url: str = "https://api.linkaja.id"
    linkaja_merchant_id: Optional[str] = None

    gopay_api_key: Optional[str] = None
    gopay_base_url: str = "https://api.gopay.id"
    gopay_merchant_id: Optional[str] = None

    pln_api_key: Optional[str] = None
    pln_base_url: str = "https://api.pln.co.id"

    pdam_api_key: Optional[str] = None
    pdam_base_url: str = "https://api.pdam.co.id"

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
