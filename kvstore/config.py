from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    poll_interval: float = 1.0
    json_indent: Optional[int] = None
    database_url: str = "sqlite:///./kvstore.db"
    log_level: str = "INFO"
    log_file: Optional[str] = None

    class Config:
        env_prefix = "KVSTORE_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"
