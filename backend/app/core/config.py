from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database
    DATABASE_URL: str = "sqlite:///./jobboard.db"

    # Document collections
    CANDIDATES_COLLECTION: str = "candidates"
    COMPANIES_COLLECTION: str = "companies"
    SESSIONS_COLLECTION: str = "userSessions"
    ACCOUNTS_COLLECTION: str = "unifiedUserAccounts"

    # JWT Authentication
    SECRET_KEY: str = "your-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # Application
    APP_NAME: str = "JobBoard"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    BACKEND_CORS_ORIGINS: str = (
        "http://localhost:3000,"
        "http://127.0.0.1:3000"
    )


settings = Settings()
