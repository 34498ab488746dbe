# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

import logging
from datetime import UTC, datetime
from typing import cast
from uuid import UUID

from sqlalchemy import CursorResult, delete, exists, select
from sqlalchemy.orm import Session

from domain.db.models import Base

logger = logging.getLogger(__name__)


class BaseRepository[ModelType: Base]:
    """
    Row-level persistence shared by the catalog repositories.
    Methods flush but never commit, the calling service owns the transaction.
    """

    def __init__(self, session: Session, model: type[ModelType]) -> None:
        self.session = session
        self.model = model

    def add(self, item: ModelType) -> ModelType:
        """Insert a new row together with its cascaded children, constraint violations surface here."""
        item.created_at = item.updated_at = datetime.now(UTC)
        self.session.add(item)
        self.session.flush()
        logger.debug(f"Inserted {item}")
        return item

    def update(self, item: ModelType) -> ModelType:
        """
        Write the pending changes of a tracked row and reload it.

        `updated_at` is always stamped, so the row itself is rewritten and a versioned row moves to its
        next version even when only its children changed. If the row was changed elsewhere since it was
        read, the flush raises `StaleDataError`.
        """
        item.updated_at = datetime.now(UTC)
        self.session.flush()
        self.session.refresh(item)
        logger.debug(f"Updated {item}")
        return item

    def get_by_id(self, object_id: UUID) -> ModelType | None:
        return self.session.get(self.model, object_id)

    def exists(self, object_id: UUID) -> bool:
        stmt = select(exists().where(self.model.id == object_id))
        return self.session.execute(stmt).scalar() or False

    def delete(self, object_id: UUID) -> bool:
        """Delete a row by id, rows referencing it follow their FK `ondelete` rule."""
        stmt = delete(self.model).where(self.model.id == object_id)
        result = cast("CursorResult", self.session.execute(stmt))
        logger.debug(f"Deleted {self.model.__name__} id={object_id} rows={result.rowcount}")
        return result.rowcount > 0
