from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    history_limit: int = 5
    log_level: str = "INFO"
    log_dir: str | None = None
    quiz_max_tries: int = 180
    quiz_max_hand_tries: int = 140
    quiz_balance_window: int = 10

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


settings = Settings()
