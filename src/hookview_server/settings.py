from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import List


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="HOOKVIEW_", extra="ignore")

    max_events: int = Field(default=50, ge=1, description="How many recent webhooks to keep in memory.")
    webhook_path: str = Field(default="/api/webhook", description="Path serving both ingest (POST) and query (GET).")
    service_name: str = Field(default="hookview", description="Display name.")
    log_level: str = Field(default="INFO", description="Log level for the server loggers.")

    enable_cors: bool = Field(default=False, description="Enable CORS middleware (viewer served from another origin).")
    cors_origins: str = Field(default="*", description="Comma-separated allowed origins for CORS.")

    def cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]
