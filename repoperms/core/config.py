from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from repoperms.core.user.validator import DEFAULT_USERNAME_PATTERN


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    app_name: str = Field(default="repoperms", description="Application name")
    environment: Literal["development", "staging", "production"] = Field(
        default="development", description="Environment mode"
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING", description="Logging level"
    )
    log_format: Literal["json", "console"] = Field(
        default="console", description="Log output format", validate_default=True
    )

    repository_base_path: Path = Field(
        default=Path("./repositories"), description="Base path for Git repositories"
    )
    access_config_path: Path = Field(
        default=Path("./access.yml"),
        description="YAML file holding roles, groups and rules",
    )

    perms_filename: str = Field(
        default="perms", description="Per-repository role assignment file"
    )
    creator_filename: str = Field(
        default="creator", description="Per-repository owner marker file"
    )

    username_pattern: str = Field(
        default=DEFAULT_USERNAME_PATTERN,
        description="Pattern every assignable username must match",
    )

    lock_timeout_seconds: float = Field(
        default=10.0, description="Seconds to wait for a repository lock"
    )

    @field_validator("log_format", mode="before")
    @classmethod
    def validate_log_format(cls, v, info: ValidationInfo):
        if info.data.get("environment") == "production":
            return "json"
        return v

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
