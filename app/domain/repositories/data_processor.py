# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

import logging
from collections.abc import Sequence

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from domain.db.models import (
    DataProcessorDB,
    DataProcessorType,
    DataType,
    OutputFileDB,
    ProcessorParameterDB,
    VisibilityScope,
)
from domain.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class DataProcessorRepository(BaseRepository[DataProcessorDB]):
    """
    Repository responsible for low-level persistence of `DataProcessorDB` entities.
    Author, parameters and output files are loaded eagerly together with the processor.
    """

    def __init__(self, session: Session):
        """Initialize the repository."""
        super().__init__(session=session, model=DataProcessorDB)

    def get_by_slug(self, slug: str) -> DataProcessorDB | None:
        """Retrieve a processor by its unique slug."""
        stmt = select(DataProcessorDB).where(DataProcessorDB.slug == slug)
        return self.session.execute(stmt).unique().scalar_one_or_none()

    def list_with_pagination_by_filter(
        self,
        offset: int = 0,
        limit: int = 20,
        processor_type: DataProcessorType | None = None,
        input_data_type: DataType | None = None,
        visibility_scope: VisibilityScope | None = None,
    ) -> tuple[Sequence[DataProcessorDB], int]:
        """
        List processors matching all given filters with pagination.
        An `input_data_type` filter also matches processors accepting `DataType.ANY`.
        Returns:
            A tuple of (items, total_count)
        """
        items_query = self._apply_filters(
            select(DataProcessorDB), processor_type, input_data_type, visibility_scope
        )
        total_count_query = self._apply_filters(
            select(func.count()).select_from(DataProcessorDB), processor_type, input_data_type, visibility_scope
        )
        items_query = items_query.order_by(DataProcessorDB.created_at, DataProcessorDB.slug).offset(offset).limit(limit)
        items = self.session.execute(items_query).unique().scalars().all()
        return items, self.session.scalar(total_count_query) or 0

    def replace_children(
        self,
        processor: DataProcessorDB,
        parameters: list[ProcessorParameterDB],
        output_files: list[OutputFileDB] | None = None,
    ) -> None:
        """
        Replace the parameters (and optionally output files) of a processor.
        The old rows are deleted before the new ones are inserted so reused names and ids do not collide.
        """
        processor.parameters.clear()
        if output_files is not None:
            processor.output_files.clear()
        self.session.flush()
        processor.parameters.extend(parameters)
        if output_files is not None:
            processor.output_files.extend(output_files)
        logger.debug(f"Replaced children of {processor}: parameters={len(parameters)}")

    @staticmethod
    def _apply_filters(
        stmt: Select,
        processor_type: DataProcessorType | None,
        input_data_type: DataType | None,
        visibility_scope: VisibilityScope | None,
    ) -> Select:
        if processor_type is not None:
            stmt = stmt.where(DataProcessorDB.processor_type == processor_type)
        if input_data_type is not None:
            stmt = stmt.where(DataProcessorDB.input_data_type.in_([input_data_type, DataType.ANY]))
        if visibility_scope is not None:
            stmt = stmt.where(DataProcessorDB.visibility_scope == visibility_scope)
        return stmt
