from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from pathlib import Path


class Settings(BaseSettings):
    # Database
    database_url: str = Field(alias="DATABASE_URL")

    # Identity provider
    auth_issuer: str | None = Field(alias="AUTH_ISSUER", default=None)
    auth_audience: str | None = Field(alias="AUTH_AUDIENCE", default=None)
    auth_jwks_url: str | None = Field(alias="AUTH_JWKS_URL", default=None)
    auth_jwt_secret: str | None = Field(alias="AUTH_JWT_SECRET", default=None)  # HS256 for local setups
    auth_algorithms: str = Field(alias="AUTH_ALGORITHMS", default="RS256")
    jwks_cache_seconds: int = Field(alias="JWKS_CACHE_SECONDS", default=3600)

    # Server
    base_url: str = Field(alias="BASE_URL", default="http://localhost:8000")
    port: int = Field(alias="PORT", default=8000)
    cors_origins: str = Field(alias="CORS_ORIGINS", default="*")
    log_level: str = Field(alias="LOG_LEVEL", default="INFO")

    # Catalog
    default_page_size: int = Field(alias="DEFAULT_PAGE_SIZE", default=12)
    max_page_size: int = Field(alias="MAX_PAGE_SIZE", default=100)

    # Reporting
    low_stock_threshold: int = Field(alias="LOW_STOCK_THRESHOLD", default=5)

    # Moderation
    require_active_store_for_product_approval: bool = Field(
        alias="REQUIRE_ACTIVE_STORE_FOR_PRODUCT_APPROVAL", default=False
    )

    _env_path = (Path(__file__).resolve().parents[1] / ".env").as_posix()
    model_config = SettingsConfigDict(env_file=_env_path, env_file_encoding="utf-8", extra="ignore")

    @property
    def algorithms(self) -> list[str]:
        return [a.strip() for a in self.auth_algorithms.split(",") if a.strip()]

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


settings = Settings()  # type: ignore
