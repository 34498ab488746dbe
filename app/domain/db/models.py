# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

from datetime import datetime
from enum import StrEnum
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from domain.db.constraints import CheckConstraintName, ForeignKeyName, UniqueConstraintName

DESCRIPTION_MAX_LENGTH = 1024


class DataProcessorType(StrEnum):
    """Kind of a data processor; algorithms terminate a processing chain."""

    ALGORITHM = "ALGORITHM"
    OPERATION = "OPERATION"
    VISUALISATION = "VISUALISATION"


class MetricType(StrEnum):
    RECALL = "RECALL"
    PRECISION = "PRECISION"
    F1_SCORE = "F1_SCORE"
    UNDEFINED = "UNDEFINED"


class DataType(StrEnum):
    """
    High level semantic shape of the data a processor consumes or produces.
    Some processors support images, others event streams, matrices or plain numbers.
    """

    ANY = "ANY"
    NONE = "NONE"
    HIERARCHICAL = "HIERARCHICAL"
    IMAGE = "IMAGE"
    TABULAR = "TABULAR"
    TIME_SERIES = "TIME_SERIES"
    VIDEO = "VIDEO"
    VOICE = "VOICE"
    MODEL = "MODEL"


class VisibilityScope(StrEnum):
    PRIVATE = "PRIVATE"
    INTERNAL = "INTERNAL"
    PUBLIC = "PUBLIC"


class ParameterType(StrEnum):
    BOOLEAN = "BOOLEAN"
    STRING = "STRING"
    INTEGER = "INTEGER"
    FLOAT = "FLOAT"
    COMPLEX = "COMPLEX"
    DICTIONARY = "DICTIONARY"
    LIST = "LIST"
    TUPLE = "TUPLE"
    UNDEFINED = "UNDEFINED"


class Base(DeclarativeBase):
    __abstract__ = True
    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.current_timestamp())
    updated_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.current_timestamp())


class SubjectDB(Base):
    __tablename__ = "subject"
    slug: Mapped[str] = mapped_column(nullable=False)
    name: Mapped[str] = mapped_column(nullable=False)
    __table_args__ = (UniqueConstraint("slug", name=UniqueConstraintName.SUBJECT_SLUG),)

    def __repr__(self) -> str:
        return f"<SubjectDB id={self.id} slug={self.slug}>"


class ProcessorParameterDB(Base):
    __tablename__ = "processor_parameter"
    data_processor_id: Mapped[UUID] = mapped_column(
        ForeignKey("data_processor.id", ondelete="CASCADE", name=ForeignKeyName.PARAMETER_DATA_PROCESSOR),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(nullable=False)
    type: Mapped[ParameterType] = mapped_column(nullable=False)
    order: Mapped[int] = mapped_column(nullable=False, default=0)
    default_value: Mapped[str] = mapped_column(Text, nullable=False, default="")
    required: Mapped[bool] = mapped_column(nullable=False, default=True)
    group: Mapped[str] = mapped_column(nullable=False, default="")
    description: Mapped[str | None] = mapped_column(String(DESCRIPTION_MAX_LENGTH), nullable=True)
    data_processor: Mapped["DataProcessorDB"] = relationship(back_populates="parameters")
    __table_args__ = (
        UniqueConstraint("data_processor_id", "name", name=UniqueConstraintName.PARAMETER_NAME_PER_PROCESSOR),
    )

    def __repr__(self) -> str:
        return f"<ProcessorParameterDB id={self.id} name={self.name} order={self.order}>"


class OutputFileDB(Base):
    __tablename__ = "output_file"
    data_processor_id: Mapped[UUID] = mapped_column(
        ForeignKey("data_processor.id", ondelete="CASCADE", name=ForeignKeyName.OUTPUT_FILE_DATA_PROCESSOR),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(nullable=False)
    path: Mapped[str] = mapped_column(Text, nullable=False, default="")
    order: Mapped[int] = mapped_column(nullable=False, default=0)
    data_processor: Mapped["DataProcessorDB"] = relationship(back_populates="output_files")

    def __repr__(self) -> str:
        return f"<OutputFileDB id={self.id} name={self.name} order={self.order}>"


class DataProcessorDB(Base):
    """
    A data processor published to the catalog.
    All processor kinds share this table and are told apart by `processor_type`.
    The metric schema is stored inline in the `metric_schema_*` columns.
    """

    __tablename__ = "data_processor"
    version: Mapped[int] = mapped_column(nullable=False)
    slug: Mapped[str] = mapped_column(nullable=False)
    name: Mapped[str] = mapped_column(nullable=False)
    command: Mapped[str] = mapped_column(nullable=False)
    input_data_type: Mapped[DataType] = mapped_column(nullable=False)
    output_data_type: Mapped[DataType] = mapped_column(nullable=False)
    processor_type: Mapped[DataProcessorType] = mapped_column(nullable=False, index=True)
    visibility_scope: Mapped[VisibilityScope] = mapped_column(nullable=False)
    description: Mapped[str] = mapped_column(String(DESCRIPTION_MAX_LENGTH), nullable=False, default="")
    code_project_id: Mapped[UUID | None] = mapped_column(nullable=True)
    author_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("subject.id", ondelete="SET NULL", name=ForeignKeyName.DATA_PROCESSOR_AUTHOR),
        nullable=True,
    )
    metric_schema_type: Mapped[MetricType] = mapped_column(nullable=False)
    metric_schema_ground_truth: Mapped[str] = mapped_column(Text, nullable=False, default="")
    metric_schema_prediction: Mapped[str] = mapped_column(Text, nullable=False, default="")
    metric_schema_json_blob: Mapped[str] = mapped_column(Text, nullable=False, default="")
    author: Mapped[SubjectDB | None] = relationship(lazy="joined")
    parameters: Mapped[list[ProcessorParameterDB]] = relationship(
        back_populates="data_processor",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
        order_by=ProcessorParameterDB.order,
        collection_class=ordering_list("order"),
    )
    output_files: Mapped[list[OutputFileDB]] = relationship(
        back_populates="data_processor",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
        order_by=OutputFileDB.order,
        collection_class=ordering_list("order"),
    )
    __table_args__ = (
        UniqueConstraint("slug", name=UniqueConstraintName.DATA_PROCESSOR_SLUG),
        CheckConstraint(
            f"length(description) <= {DESCRIPTION_MAX_LENGTH}",
            name=CheckConstraintName.DATA_PROCESSOR_DESCRIPTION_LENGTH,
        ),
    )
    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return f"<DataProcessorDB id={self.id} slug={self.slug} type={self.processor_type} version={self.version}>"
