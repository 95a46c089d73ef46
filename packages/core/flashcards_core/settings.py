from pydantic_settings import BaseSettings, SettingsConfigDict

from flashcards_core.config import DEFAULT_ANSWER_COUNT, DEFAULT_SESSION_SIZE


class Settings(BaseSettings):
    """Settings loaded from ``FLASHCARDS_*`` environment variables."""

    # Database
    database_url: str = "sqlite+aiosqlite:///flashcards.db"
    database_echo: bool = False

    # Background deck writes
    write_workers: int = 4
    write_max_attempts: int = 3

    # Review sessions
    session_size: int = DEFAULT_SESSION_SIZE
    answer_count: int = DEFAULT_ANSWER_COUNT

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="FLASHCARDS_", env_file=".env", env_file_encoding="utf-8"
    )


settings = Settings()
