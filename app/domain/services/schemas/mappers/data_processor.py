# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

from collections.abc import Iterable

from domain.db.models import DataProcessorDB, OutputFileDB, ProcessorParameterDB, SubjectDB
from domain.services.schemas.base import Pagination
from domain.services.schemas.data_processor import (
    DataProcessor,
    DataProcessorAdapter,
    DataProcessorCreateSchema,
    DataProcessorListSchema,
    MetricSchema,
    OutputFile,
    ProcessorParameter,
    SubjectSchema,
)


def subject_db_to_schema(subject: SubjectDB | None) -> SubjectSchema | None:
    if subject is None:
        return None
    return SubjectSchema(id=subject.id, slug=subject.slug, name=subject.name)


def metric_schema_from_db(processor: DataProcessorDB) -> MetricSchema:
    """Rebuild the embedded metric schema from the `metric_schema_*` columns."""
    return MetricSchema(
        metric_type=processor.metric_schema_type,
        ground_truth=processor.metric_schema_ground_truth,
        prediction=processor.metric_schema_prediction,
        json_blob=processor.metric_schema_json_blob,
    )


def parameters_schema_to_db(parameters: Iterable[ProcessorParameter]) -> list[ProcessorParameterDB]:
    """Create unpersisted parameter rows; `order` is assigned from the list position on attach."""
    return [
        ProcessorParameterDB(
            id=parameter.id,
            name=parameter.name,
            type=parameter.type,
            default_value=parameter.default_value,
            required=parameter.required,
            group=parameter.group,
            description=parameter.description,
        )
        for parameter in parameters
    ]


def output_files_schema_to_db(output_files: Iterable[OutputFile]) -> list[OutputFileDB]:
    return [OutputFileDB(id=output_file.id, name=output_file.name, path=output_file.path) for output_file in output_files]


def data_processor_db_to_schema(processor: DataProcessorDB) -> DataProcessor:
    """
    Map a DataProcessorDB row to the matching DataProcessor variant.
    Pydantic picks Algorithm, Operation or Visualisation from the `type` discriminator.
    """
    return DataProcessorAdapter.validate_python(
        {
            "id": processor.id,
            "version": processor.version,
            "created_at": processor.created_at,
            "updated_at": processor.updated_at,
            "type": processor.processor_type,
            "slug": processor.slug,
            "name": processor.name,
            "command": processor.command,
            "input_data_type": processor.input_data_type,
            "output_data_type": processor.output_data_type,
            "visibility_scope": processor.visibility_scope,
            "description": processor.description,
            "code_project_id": processor.code_project_id,
            "author": subject_db_to_schema(processor.author),
            "parameters": [
                ProcessorParameter(
                    id=parameter.id,
                    name=parameter.name,
                    type=parameter.type,
                    order=parameter.order,
                    default_value=parameter.default_value,
                    required=parameter.required,
                    group=parameter.group,
                    description=parameter.description,
                )
                for parameter in processor.parameters
            ],
            "output_files": [
                OutputFile(id=output_file.id, name=output_file.name, path=output_file.path, order=output_file.order)
                for output_file in processor.output_files
            ],
            "metric_schema": metric_schema_from_db(processor),
        }
    )


def data_processor_schema_to_db(schema: DataProcessorCreateSchema) -> DataProcessorDB:
    """
    Create a new DataProcessorDB (unpersisted) from schema, the version is assigned on insert.
    """
    processor = DataProcessorDB(
        id=schema.id,
        slug=schema.slug,
        name=schema.name,
        command=schema.command,
        input_data_type=schema.input_data_type,
        output_data_type=schema.output_data_type,
        processor_type=schema.type,
        visibility_scope=schema.visibility_scope,
        description=schema.description,
        code_project_id=schema.code_project_id,
        author_id=schema.author_id,
    )
    processor.parameters = parameters_schema_to_db(schema.parameters)
    processor.output_files = output_files_schema_to_db(schema.output_files)
    apply_metric_schema_to_db(processor, schema.metric_schema)
    return processor


def apply_metric_schema_to_db(processor: DataProcessorDB, metric_schema: MetricSchema) -> None:
    processor.metric_schema_type = metric_schema.metric_type
    processor.metric_schema_ground_truth = metric_schema.ground_truth
    processor.metric_schema_prediction = metric_schema.prediction
    processor.metric_schema_json_blob = metric_schema.json_blob


def data_processors_db_to_list_items(
    processors: Iterable[DataProcessorDB], total: int, offset: int = 0, limit: int = 20
) -> DataProcessorListSchema:
    """
    Map an iterable of DataProcessorDB entities to DataProcessorListSchema with pagination metadata.

    Parameters:
        processors: Iterable of DataProcessorDB entities to map
        total: Total number of processors matching the query
        offset: Starting index of the returned items
        limit: Maximum number of items requested

    Returns:
        DataProcessorListSchema with mapped processors and pagination metadata
    """
    items = [data_processor_db_to_schema(processor) for processor in processors]
    return DataProcessorListSchema(
        data_processors=items, pagination=Pagination.for_page(items, total=total, offset=offset, limit=limit)
    )
