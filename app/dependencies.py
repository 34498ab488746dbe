# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from domain.db.engine import get_session
from domain.repositories.data_processor import DataProcessorRepository
from domain.repositories.subject import SubjectRepository
from domain.services import DataProcessorService

# --- DB session dependency ---
SessionDep = Annotated[Session, Depends(get_session)]


# --- Repository providers (simple direct construction) ---
def get_data_processor_repository(session: SessionDep) -> DataProcessorRepository:
    """Provides a DataProcessorRepository instance."""
    return DataProcessorRepository(session)


def get_subject_repository(session: SessionDep) -> SubjectRepository:
    """Provides a SubjectRepository instance."""
    return SubjectRepository(session)


# --- Service providers ---
def get_data_processor_service(
    session: SessionDep,
    data_processor_repository: Annotated[DataProcessorRepository, Depends(get_data_processor_repository)],
    subject_repository: Annotated[SubjectRepository, Depends(get_subject_repository)],
) -> DataProcessorService:
    """Dependency that provides a DataProcessorService instance."""
    return DataProcessorService(
        session=session,
        data_processor_repository=data_processor_repository,
        subject_repository=subject_repository,
    )


DataProcessorServiceDep = Annotated[DataProcessorService, Depends(get_data_processor_service)]
