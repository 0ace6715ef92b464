from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./dsa_tracker.db"
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: str = "http://localhost:3000,http://127.0.0.1:3000"

    # Comma-separated; parsed once into an AdminPolicy at startup
    ADMIN_EMAILS: str = ""

    # Upstream platforms
    PLATFORM_REQUEST_TIMEOUT: float = 15.0
    CODECHEF_SCRAPING_ENABLED: bool = False

    # Plan limits, -1 means unlimited
    FREE_PLAN_MAX_PLATFORMS: int = 2
    PRO_PLAN_MAX_PLATFORMS: int = -1

    # Pydantic v2 settings configuration
    model_config = SettingsConfigDict(env_file=["../.env", ".env"], env_file_encoding="utf-8")

    @property
    def admin_emails(self) -> List[str]:
        return [e.strip().lower() for e in self.ADMIN_EMAILS.split(",") if e.strip()]

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

settings = Settings()
