from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="MEMDASH_",
        extra="ignore"
    )

    DATA_DIR: Path = Field(Path("data"), description="Directory holding the local memory store")
    DB_NAME: str = Field("memdash.db", description="SQLite file name inside DATA_DIR")
    DEFAULT_USER_ID: str | None = Field(
        None,
        description="Identity used by the CLI when --user is not given"
    )
    POLL_INTERVAL_SECONDS: float = Field(
        2.0,
        description="How often the polling subscription checks the store for changes"
    )
    SEARCH_RESULT_LIMIT: int = Field(20, description="Maximum number of search results shown")
    ACTIVITY_DAYS: int = Field(14, description="Number of day buckets in the activity chart")
    LOG_LEVEL: str = Field("INFO", description="Root log level")

    @property
    def db_url(self) -> str:
        return f"sqlite:///{self.DATA_DIR / self.DB_NAME}"

# Singleton instance
settings = Settings()
