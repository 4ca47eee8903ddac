from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False
    )
    
    # Database
    database_url: str = "sqlite+aiosqlite:///./smartmatch.db"
    create_tables_on_startup: bool = False
    
    # Auth
    secret_key: str = "dev-secret-key-change-me"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7
    cookie_secure: bool = False  # True in production with HTTPS
    
    # Email
    email_mode: str = "dev"  # dev | prod
    sendgrid_api_key: Optional[str] = None
    email_from: str = "noreply@smartmatch.app"
    
    # Frontend / CORS
    frontend_url: str = "http://localhost:3000"
    allowed_origins: str = ""  # comma-separated
    
    # External AI service
    ai_service_url: Optional[str] = None
    ai_default_model: str = "gemma3:latest"
    ai_timeout_seconds: int = 60
    
    # App
    debug: bool = False
    
    def get_frontend_url(self) -> str:
        return self.frontend_url.rstrip("/")


settings = Settings()
