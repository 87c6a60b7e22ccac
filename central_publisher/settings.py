"""Runtime configuration for the Central Publisher service."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from central_publisher.modules.deployment.domain.enums import PublishingType

DEFAULT_CENTRAL_BASE_URL = "https://central.sonatype.com/api/v1/publisher"
DEPLOYMENTS_FILE_NAME = "deployments.json"


class Settings(BaseSettings):
    """Configuration values mapped from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = Field("Central Publisher API")
    version: str = Field("0.3.0")

    # Publisher API
    central_base_url: str = Field(DEFAULT_CENTRAL_BASE_URL)
    central_username: Optional[str] = Field(None)
    central_password: Optional[str] = Field(None)
    central_publishing_type: PublishingType = Field(PublishingType.USER_MANAGED)
    central_additional_algorithms: List[str] = Field(default_factory=list)
    central_http_timeout: float = Field(300.0)

    # Local working area
    publish_work_dir: str = Field("build/central-publish")
    deployments_file: Optional[str] = Field(None)

    server_host: str = Field("127.0.0.1")
    server_port: int = Field(8085)
    log_level: str = Field("INFO")

    @property
    def work_dir(self) -> Path:
        return Path(self.publish_work_dir)

    @property
    def deployments_path(self) -> Path:
        if self.deployments_file:
            return Path(self.deployments_file)
        return self.work_dir / DEPLOYMENTS_FILE_NAME


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance for dependency injection."""
    return Settings()
