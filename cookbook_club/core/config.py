from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Storage backend
    storage: Literal["json", "sqlite"] = Field(default="json", alias="COOKBOOK_STORAGE")
    data_path: str | None = Field(default=None, alias="COOKBOOK_DATA_PATH")

    # Frontend URL allowed by CORS
    frontend_url: str | None = Field(default=None, alias="FRONTEND_URL")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @field_validator("data_path", "frontend_url", mode="before")
    @classmethod
    def empty_str_to_none(cls, v: str | None) -> str | None:
        """Convert empty strings to None for optional string fields."""
        if v == "":
            return None
        return v

    @field_validator("storage", mode="before")
    @classmethod
    def normalize_storage(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip().lower() or "json"
        return v

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()

DEFAULT_DATA_FILES = {
    "json": Path("data") / "state.json",
    "sqlite": Path("data") / "state.sqlite",
}


def resolve_data_file(data_path: str | None = None, storage: str = "json") -> Path:
    """Absolute data file path; relative paths resolve against the working directory."""
    if data_path:
        return Path(data_path).expanduser().resolve()
    return DEFAULT_DATA_FILES[storage].resolve()
