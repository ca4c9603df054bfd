from functools import lru_cache
from typing import List, Optional

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_INTERNAL_API_KEY = "your-internal-api-key-here"


class Settings(BaseSettings):
    """애플리케이션 설정"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "Pagelink Delivery"
    app_env: str = "development"
    debug: bool = True

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Database (미설정 시 데모 모드로 동작)
    database_url: Optional[str] = None
    database_echo: bool = False
    auto_migrate: bool = True  # 서버 시작 시 자동 마이그레이션 여부

    # Object Storage (S3/MinIO)
    s3_endpoint: Optional[str] = None
    s3_access_key: str = "minioadmin"
    s3_secret_key: str = "minioadmin"
    s3_bucket_assets: str = "assets"
    s3_region: str = "us-east-1"
    s3_use_ssl: bool = True

    # Internal API Key (운영자 API 보호용)
    internal_api_key: str = DEFAULT_INTERNAL_API_KEY

    # CORS
    cors_origins: List[str] = [
        "http://localhost:3000",
    ]

    # Routing
    # 여기에 포함되지 않는 호스트는 커스텀 도메인으로 취급
    main_domains: List[str] = [
        "localhost",
        "127.0.0.1",
        "pagelink.com",
        "www.pagelink.com",
        "pagelink.vercel.app",
    ]
    reserved_slugs: List[str] = [
        "api",
        "dashboard",
        "login",
        "signup",
        "create",
        "pricing",
        "templates",
        "settings",
        "p",
        "c",
        "e",
        "t",
        "help",
        "docs",
        "health",
    ]
    landing_page_limit: int = 10

    # Webhooks
    webhook_timeout_seconds: float = 10.0
    webhook_user_agent: str = "Pagelink-Webhooks/1.0"
    emit_document_viewed_webhooks: bool = True

    # Side effects
    side_effect_drain_timeout_seconds: float = 5.0

    @field_validator(
        "cors_origins", "main_domains", "reserved_slugs", mode="before"
    )
    @classmethod
    def parse_list(cls, v):
        if isinstance(v, str):
            import json

            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return [item.strip() for item in v.split(",") if item.strip()]
        return v

    @field_validator("main_domains", "reserved_slugs")
    @classmethod
    def lowercase_items(cls, v: List[str]) -> List[str]:
        return [item.lower() for item in v]

    @model_validator(mode="after")
    def validate_production_settings(self) -> "Settings":
        """프로덕션 환경에서 보안 설정 검증"""
        if not self.is_production:
            return self

        # Internal API Key 검증
        if self.internal_api_key == DEFAULT_INTERNAL_API_KEY:
            raise ValueError(
                "Production requires valid INTERNAL_API_KEY. "
                "Set it via environment variable."
            )

        if len(self.internal_api_key) < 32:
            raise ValueError(
                "INTERNAL_API_KEY must be at least 32 characters long "
                "for security."
            )

        # 프로덕션에서는 데모 모드 금지
        if not self.database_url:
            raise ValueError(
                "Production requires DATABASE_URL. "
                "Demo mode is only available outside production."
            )

        return self

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def is_demo_mode(self) -> bool:
        """백엔드 저장소가 설정되지 않은 경우"""
        return not self.database_url


@lru_cache
def get_settings() -> Settings:
    """설정 인스턴스를 반환 (캐싱됨)"""
    return Settings()


settings = get_settings()
