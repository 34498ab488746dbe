# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from api.error_handler import extract_constraint_name
from domain.db.constraints import CheckConstraintName
from domain.db.models import DataProcessorDB, DataProcessorType, DataType, VisibilityScope
from domain.errors import (
    ConcurrentModificationError,
    PersistenceError,
    ResourceAlreadyExistsError,
    ResourceNotFoundError,
    ResourceType,
)
from domain.repositories.data_processor import DataProcessorRepository
from domain.repositories.subject import SubjectRepository
from domain.services.base import BaseService
from domain.services.schemas.base import Pagination
from domain.services.schemas.data_processor import (
    DataProcessor,
    DataProcessorCreateSchema,
    DataProcessorListSchema,
    DataProcessorParametersUpdateSchema,
)
from domain.services.schemas.mappers.data_processor import (
    apply_metric_schema_to_db,
    data_processor_db_to_schema,
    data_processor_schema_to_db,
    data_processors_db_to_list_items,
    parameters_schema_to_db,
)
from domain.services.schemas.searchable import SearchableType, to_data_processor_type

logger = logging.getLogger(__name__)

# primary keys of the child tables, as SQLite reports them in UNIQUE failures
_CHILD_ID_COLUMNS = {
    "processor_parameter.id": ResourceType.PROCESSOR_PARAMETER,
    "output_file.id": ResourceType.OUTPUT_FILE,
}


class DataProcessorService(BaseService):
    """
    Service layer orchestrating data processor catalog use cases.

    Responsibilities:
      - Enforce business rules (author must exist, parameter names unique).
      - Enforce invariants (
            unique slug via DB constraints,
            optimistic locking on the processor version).
      - Transaction boundaries (commit).
      - Raise domain-specific exceptions.
    """

    def __init__(
        self,
        session: Session,
        data_processor_repository: DataProcessorRepository | None = None,
        subject_repository: SubjectRepository | None = None,
    ):
        """
        Initialize the service with a SQLAlchemy session.
        """
        super().__init__(session=session)
        self.data_processor_repository = data_processor_repository or DataProcessorRepository(session=session)
        self.subject_repository = subject_repository or SubjectRepository(session=session)

    def list_processors(
        self,
        offset: int = 0,
        limit: int = 20,
        processor_type: DataProcessorType | None = None,
        searchable_type: SearchableType | None = None,
        input_data_type: DataType | None = None,
        visibility_scope: VisibilityScope | None = None,
    ) -> DataProcessorListSchema:
        """
        List data processors matching the given filters.

        Parameters:
            offset: Starting index (0-based)
            limit: Maximum number of items to return
            processor_type: Only processors of this kind.
            searchable_type: Marketplace type, converted to a processor kind.
                Types that are not processors (e.g. projects) produce an empty page.
            input_data_type: Only processors able to consume this data type.
            visibility_scope: Only processors with this visibility.
        """
        if searchable_type is not None:
            converted = to_data_processor_type(searchable_type)
            if converted is None or (processor_type is not None and processor_type != converted):
                logger.debug(f"Searchable type {searchable_type} matches no data processor type")
                return DataProcessorListSchema(
                    data_processors=[], pagination=Pagination.for_page([], total=0, offset=offset, limit=limit)
                )
            processor_type = converted

        db_processors, total = self.data_processor_repository.list_with_pagination_by_filter(
            offset=offset,
            limit=limit,
            processor_type=processor_type,
            input_data_type=input_data_type,
            visibility_scope=visibility_scope,
        )
        return data_processors_db_to_list_items(db_processors, total=total, offset=offset, limit=limit)

    def get_processor(self, processor_id: UUID) -> DataProcessor:
        """
        Retrieve a data processor by id.

        Raises:
            ResourceNotFoundError: If the processor does not exist.
        """
        return data_processor_db_to_schema(self._get_processor_db(processor_id))

    def get_processor_by_slug(self, slug: str) -> DataProcessor:
        """
        Retrieve a data processor by its slug.

        Raises:
            ResourceNotFoundError: If no processor has this slug.
        """
        processor = self.data_processor_repository.get_by_slug(slug)
        if not processor:
            logger.error(f"Data processor not found slug={slug}")
            raise ResourceNotFoundError(
                resource_type=ResourceType.DATA_PROCESSOR,
                resource_id=slug,
                message=f"{ResourceType.DATA_PROCESSOR.value} with slug '{slug}' not found.",
            )
        return data_processor_db_to_schema(processor)

    def create_processor(self, create_data: DataProcessorCreateSchema) -> DataProcessor:
        """
        Publish a new data processor, its parameters and output files to the catalog.
        Database constraints enforce uniqueness of the slug.

        Raises:
            PersistenceError: If the author does not exist or a constraint is violated.
            ResourceAlreadyExistsError: If the slug or id is already taken.
        """
        logger.debug(
            f"Data processor create requested: slug={create_data.slug} type={create_data.type} "
            f"parameters={[p.name for p in create_data.parameters]}"
        )
        if create_data.author_id is not None and not self.subject_repository.exists(create_data.author_id):
            logger.error(f"Author not found id={create_data.author_id} for data processor slug={create_data.slug}")
            raise PersistenceError(
                resource_type=ResourceType.SUBJECT,
                resource_id=str(create_data.author_id),
                message=f"Referenced author {create_data.author_id} does not exist.",
            )

        new_processor: DataProcessorDB = data_processor_schema_to_db(create_data)
        try:
            with self.db_transaction():
                self.data_processor_repository.add(new_processor)
        except IntegrityError as exc:
            logger.error("Data processor creation failed due to constraint violation: %s", exc)
            self._handle_integrity_error(exc, create_data.id, create_data.slug)

        self.session.refresh(new_processor)
        logger.info(
            f"Data processor created: id={new_processor.id} slug={new_processor.slug} "
            f"type={new_processor.processor_type} version={new_processor.version}"
        )
        return data_processor_db_to_schema(new_processor)

    def update_processor_parameters(
        self, processor_id: UUID, update_data: DataProcessorParametersUpdateSchema
    ) -> DataProcessor:
        """
        Replace the parameters and metric schema of a processor, keeping every other field.
        The update only succeeds if the stored version still equals `update_data.version`.

        Raises:
            ResourceNotFoundError: If the processor does not exist.
            ConcurrentModificationError: If the processor was modified since `update_data.version`.
        """
        processor = self._get_processor_db(processor_id)
        if processor.version != update_data.version:
            logger.warning(
                f"Stale update of data processor id={processor_id}: "
                f"expected version={update_data.version} stored version={processor.version}"
            )
            raise ConcurrentModificationError(
                resource_type=ResourceType.DATA_PROCESSOR,
                resource_id=str(processor_id),
                expected_version=update_data.version,
                actual_version=processor.version,
            )

        updated = data_processor_db_to_schema(processor).with_parameters(
            parameters=update_data.parameters, metric_schema=update_data.metric_schema
        )
        try:
            with self.db_transaction():
                self.data_processor_repository.replace_children(
                    processor, parameters=parameters_schema_to_db(updated.parameters)
                )
                apply_metric_schema_to_db(processor, updated.metric_schema)
                processor = self.data_processor_repository.update(processor)
        except StaleDataError as exc:
            logger.warning(f"Data processor id={processor_id} was modified concurrently: {exc}")
            raise ConcurrentModificationError(
                resource_type=ResourceType.DATA_PROCESSOR,
                resource_id=str(processor_id),
                expected_version=update_data.version,
            ) from exc
        except IntegrityError as exc:
            logger.error("Data processor update failed due to constraint violation: %s", exc)
            self._handle_integrity_error(exc, processor_id, updated.slug)

        logger.info(
            f"Data processor parameters updated: id={processor_id} version={processor.version} "
            f"parameters={[p.name for p in processor.parameters]}"
        )
        return data_processor_db_to_schema(processor)

    def delete_processor(self, processor_id: UUID) -> None:
        """
        Delete a data processor, its parameters and output files.

        Raises:
            ResourceNotFoundError: If the processor does not exist.
        """
        processor = self._get_processor_db(processor_id)
        with self.db_transaction():
            self.data_processor_repository.delete(processor.id)
        logger.info(f"Data processor deleted: id={processor_id}")

    def _get_processor_db(self, processor_id: UUID) -> DataProcessorDB:
        processor = self.data_processor_repository.get_by_id(processor_id)
        if not processor:
            logger.error(f"Data processor not found id={processor_id}")
            raise ResourceNotFoundError(resource_type=ResourceType.DATA_PROCESSOR, resource_id=str(processor_id))
        return processor

    @staticmethod
    def _handle_integrity_error(exc: IntegrityError, processor_id: UUID, slug: str) -> None:
        """
        Handle IntegrityError with context-aware messages for data processors.

        Args:
            exc: The IntegrityError from SQLAlchemy
            processor_id: ID of the processor being created/updated
            slug: Slug of the processor being created/updated
        """
        error_msg = str(exc.orig).lower()
        constraint_name = extract_constraint_name(error_msg)

        logger.warning(
            f"Data processor constraint violation: "
            f"id={processor_id}, "
            f"slug={slug}, "
            f"constraint={constraint_name or 'unknown'}, "
            f"error={error_msg}"
        )

        if "foreign key" in error_msg:
            raise PersistenceError(
                resource_type=ResourceType.DATA_PROCESSOR,
                resource_id=str(processor_id),
                message="Referenced author does not exist.",
            ) from exc

        if constraint_name == "data_processor.slug":
            raise ResourceAlreadyExistsError(
                resource_type=ResourceType.DATA_PROCESSOR,
                resource_value=slug,
                field="slug",
            ) from exc

        if constraint_name == "data_processor.id":
            raise ResourceAlreadyExistsError(
                resource_type=ResourceType.DATA_PROCESSOR,
                resource_value=str(processor_id),
                field="id",
            ) from exc

        if constraint_name in _CHILD_ID_COLUMNS:
            child_type = _CHILD_ID_COLUMNS[constraint_name]
            raise ResourceAlreadyExistsError(
                resource_type=child_type,
                field="id",
                message=f"{child_type.value} id is already used by another data processor.",
            ) from exc

        if constraint_name == "processor_parameter.data_processor_id, processor_parameter.name":
            raise PersistenceError(
                resource_type=ResourceType.PROCESSOR_PARAMETER,
                resource_id=str(processor_id),
                message="Parameter names must be unique within a data processor.",
            ) from exc

        if constraint_name == CheckConstraintName.DATA_PROCESSOR_DESCRIPTION_LENGTH:
            raise PersistenceError(
                resource_type=ResourceType.DATA_PROCESSOR,
                resource_id=str(processor_id),
                message="Description exceeds the maximum length.",
            ) from exc

        logger.error(f"Unmapped constraint violation for data processor (id={processor_id}): {error_msg}")
        raise PersistenceError(resource_type=ResourceType.DATA_PROCESSOR, resource_id=str(processor_id)) from exc
