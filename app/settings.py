# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""Application configuration management"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore")

    current_dir: Path = Path(__file__).parent.resolve()

    # Application
    app_name: str = "Processor Catalog"
    version: str = "0.1.0"
    summary: str = "Processor Catalog server"
    description: str = (
        "Processor Catalog stores the data processors (algorithms, operations and visualisations) "
        "published to the marketplace, together with their ordered parameters, output files and metric schema."
    )
    openapi_url: str = "/api/openapi.json"
    debug: bool = Field(default=False, alias="DEBUG")
    log_format: str = "%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s"
    environment: Literal["dev", "prod"] = "dev"

    # Server
    host: str = Field(default="localhost", alias="HOST")
    port: int = Field(default=9200, alias="PORT")

    # CORS
    cors_origins: str = Field(default="http://localhost:3000, http://localhost:9200", alias="CORS_ORIGINS")

    @property
    def cors_allowed_origins(self) -> list[str]:
        """Parsed list of allowed CORS origins."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # Database
    db_data_dir: Path = Field(default=current_dir.parent / ".data", alias="DB_DATA_DIR")
    db_filename: str = "processor_catalog.db"
    db_echo: bool = Field(default=False, alias="DB_ECHO")
    db_url_override: str | None = Field(default=None, alias="DATABASE_URL")

    @property
    def database_url(self) -> str:
        """Database connection URL, the SQLite file under `db_data_dir` unless DATABASE_URL is set"""
        return self.db_url_override or f"sqlite:///{self.db_data_dir / self.db_filename}"

    # Alembic
    alembic_config_path: str = str(current_dir / "alembic.ini")
    alembic_script_location: str = str(current_dir / "domain" / "alembic")


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings"""
    return Settings()
