# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

from sqlalchemy import select
from sqlalchemy.orm import Session

from domain.db.models import SubjectDB
from domain.repositories.base import BaseRepository


class SubjectRepository(BaseRepository[SubjectDB]):
    """
    Repository resolving `SubjectDB` entities, the authors of data processors.
    """

    def __init__(self, session: Session):
        """Initialize the repository."""
        super().__init__(session=session, model=SubjectDB)

    def get_by_slug(self, slug: str) -> SubjectDB | None:
        """Retrieve a subject by its unique slug."""
        stmt = select(SubjectDB).where(SubjectDB.slug == slug)
        return self.session.execute(stmt).scalar_one_or_none()
