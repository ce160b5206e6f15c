"""Settings — process configuration read from the environment (and .env).

Invariants:
    - get_settings() returns one cached Settings per process
    - database_url always names an async driver (postgresql:// is rewritten
      to postgresql+asyncpg://)
    - reports_default_page_size never exceeds reports_max_page_size
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    database_url: str = "postgresql+asyncpg://payroll:payroll@db:5432/payroll"
    database_pool_size: int = Field(20, ge=1)
    database_max_overflow: int = Field(10, ge=0)

    reports_default_page_size: int = Field(10, ge=1)
    reports_max_page_size: int = Field(100, ge=1)

    cors_origins: list[str] = ["http://localhost:5173"]

    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"

    @field_validator("database_url", mode="before")
    @classmethod
    def use_async_driver(cls, value: str) -> str:
        if isinstance(value, str) and value.startswith("postgresql://"):
            return "postgresql+asyncpg://" + value.removeprefix("postgresql://")
        return value

    @model_validator(mode="after")
    def check_page_sizes(self) -> "Settings":
        if self.reports_default_page_size > self.reports_max_page_size:
            raise ValueError(
                "reports_default_page_size must not exceed reports_max_page_size",
            )
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()
