# storefront/repos/base.py
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.domain.errors import PersistenceError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class BaseRepo:
    def __init__(self, db: Session):
        self.db = db

    @property
    def dialect(self) -> str:
        return self.db.get_bind().dialect.name

    @contextmanager
    def atomic(self, action: str) -> Iterator[Session]:
        """Commit on success, rollback + PersistenceError on any storage error."""
        try:
            yield self.db
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception(f"Storage failure during '{action}'")
            raise PersistenceError(f"Storage failure during '{action}'") from e

    @contextmanager
    def reading(self, action: str) -> Iterator[Session]:
        try:
            yield self.db
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception(f"Storage failure during '{action}'")
            raise PersistenceError(f"Storage failure during '{action}'") from e
