import os
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Store relay database; any SQLAlchemy URL
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./codemaster.db")

    HOST: str = os.getenv("HOST", "127.0.0.1")
    PORT: int = int(os.getenv("PORT", "3001"))

    # Comma separated list, "*" for any origin
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "*")

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    model_config = SettingsConfigDict(env_file=".env")


settings = Settings()
