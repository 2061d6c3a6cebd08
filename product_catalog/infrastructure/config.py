"""Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API
    api_version: str = "0.1.0"
    service_name: str = "product-catalog-api"
    debug: bool = False

    # Database
    database_url: str = "postgresql+asyncpg://catalog:catalog_dev_password@db:5432/catalog"
    database_auto_create: bool = False

    # Events
    event_transport: Literal["memory", "kafka"] = "memory"
    event_queue_name: str = "product-created"
    event_queue_maxsize: int = 1000

    kafka_bootstrap_servers: str = "kafka:9092"
    kafka_client_id: str = "product-catalog-api"
    kafka_group_id: str = "product-created-listener"

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


settings = Settings()
