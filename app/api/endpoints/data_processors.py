# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

import logging
from typing import Annotated
from uuid import UUID

from fastapi import Body, Query, Response, status

from api.routers import data_processors_router
from dependencies import DataProcessorServiceDep
from domain.db.models import DataProcessorType, DataType, VisibilityScope
from domain.services.schemas.data_processor import (
    DataProcessor,
    DataProcessorCreateSchema,
    DataProcessorListSchema,
    DataProcessorParametersUpdateSchema,
)
from domain.services.schemas.searchable import SearchableType

logger = logging.getLogger(__name__)


@data_processors_router.get(
    path="",
    tags=["Data Processors"],
    status_code=status.HTTP_200_OK,
    responses={
        status.HTTP_200_OK: {"description": "Successfully retrieved the data processors."},
        status.HTTP_400_BAD_REQUEST: {"description": "Invalid filter value."},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"description": "Unexpected error occurred."},
    },
)
def get_data_processors(
    data_processor_service: DataProcessorServiceDep,
    offset: Annotated[int, Query(ge=0, le=1000)] = 0,
    limit: Annotated[int, Query(ge=0, le=1000)] = 20,
    type: Annotated[DataProcessorType | None, Query()] = None,  # noqa: A002
    searchable_type: Annotated[SearchableType | None, Query()] = None,
    input_data_type: Annotated[DataType | None, Query()] = None,
    visibility_scope: Annotated[VisibilityScope | None, Query()] = None,
) -> DataProcessorListSchema:
    """
    Retrieve a page of data processors, optionally filtered by kind, marketplace type, input data type
    and visibility.
    """
    return data_processor_service.list_processors(
        offset=offset,
        limit=limit,
        processor_type=type,
        searchable_type=searchable_type,
        input_data_type=input_data_type,
        visibility_scope=visibility_scope,
    )


@data_processors_router.get(
    path="/slug/{slug}",
    tags=["Data Processors"],
    status_code=status.HTTP_200_OK,
    responses={
        status.HTTP_200_OK: {"description": "Successfully retrieved the data processor."},
        status.HTTP_404_NOT_FOUND: {"description": "Data processor not found."},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"description": "Unexpected error occurred."},
    },
)
def get_data_processor_by_slug(slug: str, data_processor_service: DataProcessorServiceDep) -> DataProcessor:
    """Retrieve a data processor by its slug."""
    return data_processor_service.get_processor_by_slug(slug=slug)


@data_processors_router.get(
    path="/{processor_id}",
    tags=["Data Processors"],
    status_code=status.HTTP_200_OK,
    responses={
        status.HTTP_200_OK: {"description": "Successfully retrieved the data processor."},
        status.HTTP_404_NOT_FOUND: {"description": "Data processor not found."},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"description": "Unexpected error occurred."},
    },
)
def get_data_processor(processor_id: UUID, data_processor_service: DataProcessorServiceDep) -> DataProcessor:
    """Retrieve a data processor by its id."""
    return data_processor_service.get_processor(processor_id=processor_id)


@data_processors_router.post(
    path="",
    tags=["Data Processors"],
    responses={
        status.HTTP_201_CREATED: {"description": "Successfully published a new data processor."},
        status.HTTP_400_BAD_REQUEST: {"description": "Invalid payload or missing author."},
        status.HTTP_409_CONFLICT: {"description": "Data processor with this slug already exists."},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"description": "Unexpected error occurred."},
    },
)
def create_data_processor(
    payload: Annotated[DataProcessorCreateSchema, Body()],
    data_processor_service: DataProcessorServiceDep,
) -> Response:
    """Publish a new data processor to the catalog."""
    processor = data_processor_service.create_processor(create_data=payload)
    logger.info("Successfully created '%s' data processor with id %s", processor.slug, processor.id)

    return Response(
        status_code=status.HTTP_201_CREATED,
        headers={"Location": f"/data-processors/{processor.id}"},
        content=processor.model_dump_json(),
        media_type="application/json",
    )


@data_processors_router.put(
    path="/{processor_id}/parameters",
    tags=["Data Processors"],
    status_code=status.HTTP_200_OK,
    responses={
        status.HTTP_200_OK: {"description": "Successfully replaced the parameters and metric schema."},
        status.HTTP_400_BAD_REQUEST: {"description": "Invalid payload."},
        status.HTTP_404_NOT_FOUND: {"description": "Data processor not found."},
        status.HTTP_409_CONFLICT: {"description": "Data processor was modified since the given version."},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"description": "Unexpected error occurred."},
    },
)
def update_data_processor_parameters(
    processor_id: UUID,
    payload: Annotated[DataProcessorParametersUpdateSchema, Body()],
    data_processor_service: DataProcessorServiceDep,
) -> DataProcessor:
    """Replace the parameters and metric schema of a data processor."""
    return data_processor_service.update_processor_parameters(processor_id=processor_id, update_data=payload)


@data_processors_router.delete(
    path="/{processor_id}",
    tags=["Data Processors"],
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        status.HTTP_204_NO_CONTENT: {"description": "Data processor and its children deleted."},
        status.HTTP_404_NOT_FOUND: {"description": "Data processor not found."},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"description": "Unexpected error occurred."},
    },
)
def delete_data_processor(processor_id: UUID, data_processor_service: DataProcessorServiceDep) -> Response:
    """Delete a data processor together with its parameters and output files."""
    data_processor_service.delete_processor(processor_id=processor_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
