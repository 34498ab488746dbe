# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

from collections.abc import Sized
from typing import Self
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class BaseIDPayload(BaseModel):
    """Incoming payload; the client may choose the id, otherwise a fresh one is generated."""

    id: UUID = Field(default_factory=uuid4)


class BaseIDSchema(BaseModel):
    """Stored entity as returned to clients."""

    id: UUID


class Pagination(BaseModel):
    """Position of a returned page within the full result."""

    count: int  # items on this page, below `limit` on the last page
    total: int  # items matching the filters across all pages
    offset: int = 0  # index of the first item on this page (0-based)
    limit: int = 20  # requested page size

    @classmethod
    def for_page(cls, items: Sized, total: int, offset: int, limit: int) -> Self:
        return cls(count=len(items), total=total, offset=offset, limit=limit)


class PaginatedResponse(BaseModel):
    pagination: Pagination
