# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

from enum import StrEnum

from domain.db.models import DataProcessorType


class SearchableType(StrEnum):
    """Kinds of entries the marketplace search indexes."""

    CODE_PROJECT = "CODE_PROJECT"
    DATA_PROJECT = "DATA_PROJECT"
    ALGORITHM = "ALGORITHM"
    OPERATION = "OPERATION"
    VISUALISATION = "VISUALISATION"


# Every SearchableType member must have an entry, None marks entries that are not processors.
SEARCHABLE_TO_PROCESSOR_TYPE: dict[SearchableType, DataProcessorType | None] = {
    SearchableType.CODE_PROJECT: None,
    SearchableType.DATA_PROJECT: None,
    SearchableType.ALGORITHM: DataProcessorType.ALGORITHM,
    SearchableType.OPERATION: DataProcessorType.OPERATION,
    SearchableType.VISUALISATION: DataProcessorType.VISUALISATION,
}


def to_data_processor_type(searchable_type: SearchableType) -> DataProcessorType | None:
    """
    Map a marketplace searchable type onto the matching data processor type.

    Returns None for searchable types that do not describe a data processor.
    """
    return SEARCHABLE_TO_PROCESSOR_TYPE.get(searchable_type)
