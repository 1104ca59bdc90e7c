from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment or .env file."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_NAME: str = "QuickDrop Transfer Log"
    VERSION: str = "0.1.0"

    # Server configuration
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    DASHBOARD_PORT: int = 3001
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Database configuration
    DATABASE_URL: str = "sqlite+aiosqlite:///./quickdrop.db"
    RECENT_LOGS_LIMIT: int = 100

    # Dashboard configuration
    API_URL: str = "http://localhost:3000"
    POLL_INTERVAL: float = 5.0

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() != "production"


settings = Settings()
