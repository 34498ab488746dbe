# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""Engine, session and schema migration wiring of the catalog database."""

import logging
import sqlite3
from collections.abc import Generator
from functools import lru_cache
from pathlib import Path
from typing import Any

from alembic import command
from alembic.config import Config
from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from settings import get_settings

logger = logging.getLogger(__name__)


@event.listens_for(Engine, "connect")
def _enforce_sqlite_foreign_keys(dbapi_connection: Any, _: Any) -> None:
    """SQLite ignores foreign keys unless asked; parameters and output files depend on ON DELETE CASCADE."""
    if not isinstance(dbapi_connection, sqlite3.Connection):
        return
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_catalog_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine for the catalog database at `database_url`."""
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    return create_engine(url=database_url, echo=echo, connect_args=connect_args)


def ensure_data_dir() -> Path:
    data_dir = get_settings().db_data_dir
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir


@lru_cache
def get_engine() -> Engine:
    settings = get_settings()
    ensure_data_dir()
    logger.debug(f"Opening catalog database {settings.database_url}")
    return create_catalog_engine(settings.database_url, echo=settings.db_echo)


@lru_cache
def get_session_factory() -> sessionmaker[Session]:
    return sessionmaker(autoflush=False, bind=get_engine())


def get_session() -> Generator[Session]:
    """Request-scoped session; anything left uncommitted is rolled back on close."""
    with get_session_factory()() as session:
        yield session


def run_db_migrations(database_url: str | None = None) -> None:
    """
    Upgrade the catalog schema to the latest Alembic revision.

    Parameters:
        database_url: Database to upgrade, the configured catalog database when omitted.
    """
    settings = get_settings()
    if database_url is None:
        ensure_data_dir()
        database_url = settings.database_url

    alembic_cfg = Config(settings.alembic_config_path)
    alembic_cfg.set_main_option("script_location", settings.alembic_script_location)
    alembic_cfg.set_main_option("sqlalchemy.url", database_url)

    logger.info(f"Upgrading catalog schema of {database_url}")
    try:
        command.upgrade(alembic_cfg, "head")
    except Exception:
        logger.exception(f"Catalog schema upgrade of {database_url} failed")
        raise
    logger.info("Catalog schema is up to date")
