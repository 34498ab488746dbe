# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class BaseService:
    """Holds the request session; every catalog use case writes through `db_transaction`."""

    def __init__(self, session: Session):
        self.session = session

    @contextmanager
    def db_transaction(self) -> Iterator[None]:
        """
        Commit everything done inside the block as one unit.

        On any error, including one raised by the commit itself, the whole unit is rolled back and
        the error propagates. The rollback expires loaded rows, so later reads see the stored state.
        """
        try:
            yield
            self.session.commit()
        except Exception as exc:
            logger.debug(f"Rolling back catalog transaction after {type(exc).__name__}")
            self.session.rollback()
            raise
