# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

from collections.abc import Sequence
from datetime import datetime
from typing import Annotated, Literal, Self
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from domain.db.models import (
    DESCRIPTION_MAX_LENGTH,
    DataProcessorType,
    DataType,
    MetricType,
    ParameterType,
    VisibilityScope,
)
from domain.services.schemas.base import BaseIDPayload, BaseIDSchema, PaginatedResponse

SLUG_PATTERN = r"^[a-z0-9]+(?:[-_][a-z0-9]+)*$"


def ensure_unique_parameter_names(parameters: Sequence["ProcessorParameter"]) -> None:
    """Raise ValueError naming every parameter name used more than once."""
    seen: set[str] = set()
    duplicates: list[str] = []
    for parameter in parameters:
        if parameter.name in seen and parameter.name not in duplicates:
            duplicates.append(parameter.name)
        seen.add(parameter.name)
    if duplicates:
        raise ValueError(f"Parameter names must be unique, duplicated: {', '.join(duplicates)}")


def ensure_unique_ids(items: Sequence[BaseIDPayload], label: str) -> None:
    """Raise ValueError when two entries of a payload list share an id."""
    ids = [item.id for item in items]
    duplicates = sorted({str(item_id) for item_id in ids if ids.count(item_id) > 1})
    if duplicates:
        raise ValueError(f"{label} ids must be unique, duplicated: {', '.join(duplicates)}")


class MetricSchema(BaseModel):
    """Metric evaluation configuration, stored inline with its processor."""

    model_config = ConfigDict(frozen=True)

    metric_type: MetricType
    ground_truth: str = ""
    prediction: str = ""
    json_blob: str = ""  # free-form serialized metric configuration


class ProcessorParameter(BaseIDPayload):
    """A positional parameter of a data processor."""

    name: str = Field(min_length=1, max_length=255)
    type: ParameterType
    order: int = Field(default=0, ge=0)
    default_value: str = ""
    required: bool = True
    group: str = ""
    description: str | None = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)


class OutputFile(BaseIDPayload):
    name: str = Field(min_length=1, max_length=255)
    path: str = ""
    order: int = Field(default=0, ge=0)


class SubjectSchema(BaseIDSchema):
    slug: str
    name: str


class BaseDataProcessor(BaseIDSchema):
    """
    Fields and behaviour shared by every data processor kind.

    Instances are immutable: `with_parameters` produces an updated copy of the same kind.
    """

    model_config = ConfigDict(frozen=True)

    version: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    slug: str = Field(min_length=1, max_length=255, pattern=SLUG_PATTERN)
    name: str = Field(min_length=1, max_length=255)
    command: str = Field(min_length=1)
    input_data_type: DataType
    output_data_type: DataType
    visibility_scope: VisibilityScope = VisibilityScope.PRIVATE
    description: str = Field(default="", max_length=DESCRIPTION_MAX_LENGTH)
    code_project_id: UUID | None = None
    author: SubjectSchema | None = None
    parameters: list[ProcessorParameter] = Field(default_factory=list)
    output_files: list[OutputFile] = Field(default_factory=list)
    metric_schema: MetricSchema = Field(default_factory=lambda: MetricSchema(metric_type=MetricType.UNDEFINED))

    @field_validator("parameters")
    @classmethod
    def check_parameter_names(cls, parameters: list[ProcessorParameter]) -> list[ProcessorParameter]:
        ensure_unique_parameter_names(parameters)
        return parameters

    def is_chainable(self) -> bool:
        """Operations and visualisations can be composed; algorithms end a chain."""
        return self.type != DataProcessorType.ALGORITHM  # type: ignore[attr-defined]

    def with_parameters(self, parameters: list[ProcessorParameter], metric_schema: MetricSchema) -> Self:
        """Return a processor of the same kind with new parameters and metric schema, all else unchanged."""
        return type(self)(**{**dict(self), "parameters": parameters, "metric_schema": metric_schema})


class Algorithm(BaseDataProcessor):
    type: Literal[DataProcessorType.ALGORITHM] = DataProcessorType.ALGORITHM  # type: ignore[valid-type]


class Operation(BaseDataProcessor):
    type: Literal[DataProcessorType.OPERATION] = DataProcessorType.OPERATION  # type: ignore[valid-type]


class Visualisation(BaseDataProcessor):
    type: Literal[DataProcessorType.VISUALISATION] = DataProcessorType.VISUALISATION  # type: ignore[valid-type]


DataProcessor = Annotated[Algorithm | Operation | Visualisation, Field(discriminator="type")]

DataProcessorAdapter: TypeAdapter[Algorithm | Operation | Visualisation] = TypeAdapter(DataProcessor)


class DataProcessorCreateSchema(BaseIDPayload):
    """Schema for publishing a new data processor to the catalog."""

    type: DataProcessorType
    slug: str = Field(min_length=1, max_length=255, pattern=SLUG_PATTERN)
    name: str = Field(min_length=1, max_length=255)
    command: str = Field(min_length=1)
    input_data_type: DataType
    output_data_type: DataType
    visibility_scope: VisibilityScope = VisibilityScope.PRIVATE
    description: str = Field(default="", max_length=DESCRIPTION_MAX_LENGTH)
    code_project_id: UUID | None = None
    author_id: UUID | None = None
    parameters: list[ProcessorParameter] = Field(default_factory=list)
    output_files: list[OutputFile] = Field(default_factory=list)
    metric_schema: MetricSchema = Field(default_factory=lambda: MetricSchema(metric_type=MetricType.UNDEFINED))

    @field_validator("parameters")
    @classmethod
    def check_parameter_names(cls, parameters: list[ProcessorParameter]) -> list[ProcessorParameter]:
        ensure_unique_parameter_names(parameters)
        ensure_unique_ids(parameters, "Parameter")
        return parameters

    @field_validator("output_files")
    @classmethod
    def check_output_file_ids(cls, output_files: list[OutputFile]) -> list[OutputFile]:
        ensure_unique_ids(output_files, "Output file")
        return output_files

    model_config = {
        "json_schema_extra": {
            "example": {
                "type": "OPERATION",
                "slug": "commons-image-resize",
                "name": "Image resize",
                "command": "resize",
                "input_data_type": "IMAGE",
                "output_data_type": "IMAGE",
                "visibility_scope": "PUBLIC",
                "description": "Resizes every image of the dataset",
                "parameters": [
                    {"name": "width", "type": "INTEGER", "default_value": "224"},
                    {"name": "height", "type": "INTEGER", "default_value": "224"},
                ],
                "output_files": [],
                "metric_schema": {"metric_type": "UNDEFINED"},
            }
        }
    }


class DataProcessorParametersUpdateSchema(BaseModel):
    """Schema for replacing the parameters and metric schema of an existing processor."""

    version: int = Field(ge=1, description="Version of the processor the update is based on")
    parameters: list[ProcessorParameter]
    metric_schema: MetricSchema

    @field_validator("parameters")
    @classmethod
    def check_parameter_names(cls, parameters: list[ProcessorParameter]) -> list[ProcessorParameter]:
        ensure_unique_parameter_names(parameters)
        ensure_unique_ids(parameters, "Parameter")
        return parameters


class DataProcessorListSchema(PaginatedResponse):
    data_processors: list[DataProcessor]
