from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./livesync.db"
    sql_echo: bool = False

    # Создание таблиц и заполнение демо-данными при старте
    create_tables: bool = True
    seed_on_startup: bool = True

    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]

    model_config = {"env_file": ".env", "extra": "ignore"}
