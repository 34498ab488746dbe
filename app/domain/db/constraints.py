# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

from enum import StrEnum


class UniqueConstraintName(StrEnum):
    """Database unique constraint names."""

    DATA_PROCESSOR_SLUG = "uq_data_processor_slug"
    PARAMETER_NAME_PER_PROCESSOR = "uq_parameter_name_per_processor"
    SUBJECT_SLUG = "uq_subject_slug"


class CheckConstraintName(StrEnum):
    """Database check constraint names."""

    DATA_PROCESSOR_DESCRIPTION_LENGTH = "ck_data_processor_description_length"


class ForeignKeyName(StrEnum):
    """Database foreign key names."""

    DATA_PROCESSOR_AUTHOR = "dataprocessor_subject_author_id_fkey"
    PARAMETER_DATA_PROCESSOR = "processorparameter_dataprocessor_data_processor_id_fkey"
    OUTPUT_FILE_DATA_PROCESSOR = "outputfiles_dataprocessor_data_processor_id_fkey"
