# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError

from domain.db.models import (
    DataProcessorDB,
    DataProcessorType,
    DataType,
    MetricType,
    ParameterType,
    ProcessorParameterDB,
    VisibilityScope,
)
from domain.errors import (
    ConcurrentModificationError,
    PersistenceError,
    ResourceAlreadyExistsError,
    ResourceNotFoundError,
    ResourceType,
)
from domain.services.data_processor import DataProcessorService
from domain.services.schemas.data_processor import (
    Algorithm,
    DataProcessorCreateSchema,
    DataProcessorListSchema,
    DataProcessorParametersUpdateSchema,
    MetricSchema,
    Operation,
    ProcessorParameter,
)
from domain.services.schemas.searchable import SearchableType

PROCESSOR_ID = uuid4()
AUTHOR_ID = uuid4()


@pytest.fixture
def mock_session():
    return MagicMock()


@pytest.fixture
def mock_data_processor_repository():
    return MagicMock()


@pytest.fixture
def mock_subject_repository():
    return MagicMock()


@pytest.fixture
def mock_processor():
    processor = DataProcessorDB(
        id=PROCESSOR_ID,
        version=1,
        slug="image-resize",
        name="Image resize",
        command="resize",
        input_data_type=DataType.IMAGE,
        output_data_type=DataType.IMAGE,
        processor_type=DataProcessorType.OPERATION,
        visibility_scope=VisibilityScope.PUBLIC,
        description="Resizes images",
        metric_schema_type=MetricType.UNDEFINED,
        metric_schema_ground_truth="",
        metric_schema_prediction="",
        metric_schema_json_blob="",
    )
    processor.parameters = [
        ProcessorParameterDB(
            id=uuid4(), name="width", type=ParameterType.INTEGER, default_value="224", required=True, group=""
        )
    ]
    processor.output_files = []
    return processor


@pytest.fixture
def data_processor_service(mock_session, mock_data_processor_repository, mock_subject_repository):
    return DataProcessorService(
        session=mock_session,
        data_processor_repository=mock_data_processor_repository,
        subject_repository=mock_subject_repository,
    )


def _create_payload(**fields) -> DataProcessorCreateSchema:
    defaults = {
        "id": PROCESSOR_ID,
        "type": DataProcessorType.ALGORITHM,
        "slug": "resnet",
        "name": "ResNet",
        "command": "resnet",
        "input_data_type": DataType.IMAGE,
        "output_data_type": DataType.MODEL,
        "parameters": [ProcessorParameter(name="epochs", type=ParameterType.INTEGER, default_value="10")],
    }
    return DataProcessorCreateSchema(**{**defaults, **fields})


def _integrity_error(message: str) -> IntegrityError:
    error = IntegrityError("statement", "params", "orig")
    error.orig = Exception(message)
    return error


def test_create_processor(data_processor_service, mock_data_processor_repository, mock_subject_repository):
    mock_subject_repository.exists.return_value = True

    result = data_processor_service.create_processor(_create_payload(author_id=AUTHOR_ID))

    assert isinstance(result, Algorithm)
    assert result.slug == "resnet"
    assert [(p.name, p.order) for p in result.parameters] == [("epochs", 0)]
    mock_subject_repository.exists.assert_called_once_with(AUTHOR_ID)
    mock_data_processor_repository.add.assert_called_once()
    data_processor_service.session.commit.assert_called_once()


def test_create_processor_without_author_skips_lookup(data_processor_service, mock_subject_repository):
    data_processor_service.create_processor(_create_payload())

    mock_subject_repository.exists.assert_not_called()


def test_create_processor_author_not_found(
    data_processor_service, mock_data_processor_repository, mock_subject_repository
):
    mock_subject_repository.exists.return_value = False

    with pytest.raises(PersistenceError) as exc_info:
        data_processor_service.create_processor(_create_payload(author_id=AUTHOR_ID))

    assert exc_info.value.resource_type == ResourceType.SUBJECT
    assert exc_info.value.resource_id == str(AUTHOR_ID)
    mock_data_processor_repository.add.assert_not_called()
    data_processor_service.session.commit.assert_not_called()


@pytest.mark.parametrize(
    "orig_message,expected_error,expected_resource_type",
    [
        ("UNIQUE constraint failed: data_processor.slug", ResourceAlreadyExistsError, ResourceType.DATA_PROCESSOR),
        ("UNIQUE constraint failed: data_processor.id", ResourceAlreadyExistsError, ResourceType.DATA_PROCESSOR),
        ("FOREIGN KEY constraint failed", PersistenceError, ResourceType.DATA_PROCESSOR),
        (
            "UNIQUE constraint failed: processor_parameter.data_processor_id, processor_parameter.name",
            PersistenceError,
            ResourceType.PROCESSOR_PARAMETER,
        ),
        ("CHECK constraint failed: ck_data_processor_description_length", PersistenceError, ResourceType.DATA_PROCESSOR),
        (
            "UNIQUE constraint failed: processor_parameter.id",
            ResourceAlreadyExistsError,
            ResourceType.PROCESSOR_PARAMETER,
        ),
        ("UNIQUE constraint failed: output_file.id", ResourceAlreadyExistsError, ResourceType.OUTPUT_FILE),
        ("NOT NULL constraint failed: data_processor.command", PersistenceError, ResourceType.DATA_PROCESSOR),
    ],
)
def test_create_processor_constraint_violation(
    data_processor_service, orig_message, expected_error, expected_resource_type
):
    data_processor_service.session.commit.side_effect = _integrity_error(orig_message)

    with pytest.raises(expected_error) as exc_info:
        data_processor_service.create_processor(_create_payload())

    assert type(exc_info.value) is expected_error
    assert exc_info.value.resource_type == expected_resource_type
    data_processor_service.session.rollback.assert_called_once()


def test_create_processor_duplicate_slug_message(data_processor_service):
    data_processor_service.session.commit.side_effect = _integrity_error(
        "UNIQUE constraint failed: data_processor.slug"
    )

    with pytest.raises(ResourceAlreadyExistsError) as exc_info:
        data_processor_service.create_processor(_create_payload())

    assert exc_info.value.field == "slug"
    assert "dataprocessor with slug 'resnet' already exists" in str(exc_info.value).lower()


def test_get_processor(data_processor_service, mock_data_processor_repository, mock_processor):
    mock_data_processor_repository.get_by_id.return_value = mock_processor

    result = data_processor_service.get_processor(PROCESSOR_ID)

    assert isinstance(result, Operation)
    assert result.id == PROCESSOR_ID
    assert result.version == 1
    mock_data_processor_repository.get_by_id.assert_called_once_with(PROCESSOR_ID)


def test_get_processor_not_found(data_processor_service, mock_data_processor_repository):
    mock_data_processor_repository.get_by_id.return_value = None

    with pytest.raises(ResourceNotFoundError) as exc_info:
        data_processor_service.get_processor(PROCESSOR_ID)

    assert exc_info.value.resource_type == ResourceType.DATA_PROCESSOR
    assert exc_info.value.resource_id == str(PROCESSOR_ID)


def test_get_processor_by_slug_not_found(data_processor_service, mock_data_processor_repository):
    mock_data_processor_repository.get_by_slug.return_value = None

    with pytest.raises(ResourceNotFoundError) as exc_info:
        data_processor_service.get_processor_by_slug("missing")

    assert "slug 'missing' not found" in str(exc_info.value)


def test_list_processors_converts_searchable_type(data_processor_service, mock_data_processor_repository):
    mock_data_processor_repository.list_with_pagination_by_filter.return_value = ([], 0)

    result = data_processor_service.list_processors(searchable_type=SearchableType.ALGORITHM, limit=10)

    assert isinstance(result, DataProcessorListSchema)
    mock_data_processor_repository.list_with_pagination_by_filter.assert_called_once_with(
        offset=0,
        limit=10,
        processor_type=DataProcessorType.ALGORITHM,
        input_data_type=None,
        visibility_scope=None,
    )


@pytest.mark.parametrize(
    "searchable_type,processor_type",
    [
        (SearchableType.CODE_PROJECT, None),
        (SearchableType.DATA_PROJECT, None),
        (SearchableType.ALGORITHM, DataProcessorType.OPERATION),
    ],
)
def test_list_processors_unmatched_searchable_type(
    data_processor_service, mock_data_processor_repository, searchable_type, processor_type
):
    result = data_processor_service.list_processors(searchable_type=searchable_type, processor_type=processor_type)

    assert result.data_processors == []
    assert result.pagination.total == 0
    mock_data_processor_repository.list_with_pagination_by_filter.assert_not_called()


def test_update_processor_parameters(data_processor_service, mock_data_processor_repository, mock_processor):
    mock_data_processor_repository.get_by_id.return_value = mock_processor

    def _replace(processor, parameters):
        processor.parameters = parameters

    def _update(processor):
        processor.version += 1
        return processor

    mock_data_processor_repository.replace_children.side_effect = _replace
    mock_data_processor_repository.update.side_effect = _update
    metric_schema = MetricSchema(metric_type=MetricType.PRECISION, ground_truth="labels", prediction="predictions")

    result = data_processor_service.update_processor_parameters(
        PROCESSOR_ID,
        DataProcessorParametersUpdateSchema(
            version=1,
            parameters=[
                ProcessorParameter(name="height", type=ParameterType.INTEGER),
                ProcessorParameter(name="width", type=ParameterType.INTEGER),
            ],
            metric_schema=metric_schema,
        ),
    )

    assert isinstance(result, Operation)
    assert result.version == 2
    assert result.slug == "image-resize"
    assert [(p.name, p.order) for p in result.parameters] == [("height", 0), ("width", 1)]
    assert result.metric_schema == metric_schema
    assert mock_processor.metric_schema_type == MetricType.PRECISION
    data_processor_service.session.commit.assert_called_once()


def test_update_processor_parameters_version_mismatch(
    data_processor_service, mock_data_processor_repository, mock_processor
):
    mock_processor.version = 4
    mock_data_processor_repository.get_by_id.return_value = mock_processor

    with pytest.raises(ConcurrentModificationError) as exc_info:
        data_processor_service.update_processor_parameters(
            PROCESSOR_ID,
            DataProcessorParametersUpdateSchema(
                version=3, parameters=[], metric_schema=MetricSchema(metric_type=MetricType.RECALL)
            ),
        )

    assert exc_info.value.expected_version == 3
    assert exc_info.value.actual_version == 4
    mock_data_processor_repository.replace_children.assert_not_called()
    data_processor_service.session.commit.assert_not_called()


def test_update_processor_parameters_stale_flush(
    data_processor_service, mock_data_processor_repository, mock_processor
):
    mock_data_processor_repository.get_by_id.return_value = mock_processor
    mock_data_processor_repository.update.side_effect = StaleDataError("0 rows matched")

    with pytest.raises(ConcurrentModificationError) as exc_info:
        data_processor_service.update_processor_parameters(
            PROCESSOR_ID,
            DataProcessorParametersUpdateSchema(
                version=1, parameters=[], metric_schema=MetricSchema(metric_type=MetricType.RECALL)
            ),
        )

    assert isinstance(exc_info.value.__cause__, StaleDataError)
    data_processor_service.session.rollback.assert_called_once()
    data_processor_service.session.commit.assert_not_called()


def test_update_processor_parameters_not_found(data_processor_service, mock_data_processor_repository):
    mock_data_processor_repository.get_by_id.return_value = None

    with pytest.raises(ResourceNotFoundError):
        data_processor_service.update_processor_parameters(
            PROCESSOR_ID,
            DataProcessorParametersUpdateSchema(
                version=1, parameters=[], metric_schema=MetricSchema(metric_type=MetricType.RECALL)
            ),
        )


def test_delete_processor(data_processor_service, mock_data_processor_repository, mock_processor):
    mock_data_processor_repository.get_by_id.return_value = mock_processor

    data_processor_service.delete_processor(PROCESSOR_ID)

    mock_data_processor_repository.delete.assert_called_once_with(PROCESSOR_ID)
    data_processor_service.session.commit.assert_called_once()


def test_delete_processor_not_found(data_processor_service, mock_data_processor_repository):
    mock_data_processor_repository.get_by_id.return_value = None

    with pytest.raises(ResourceNotFoundError):
        data_processor_service.delete_processor(PROCESSOR_ID)

    mock_data_processor_repository.delete.assert_not_called()
