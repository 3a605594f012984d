import logging

from sqlalchemy.exc import IntegrityError

from ..errors import ConflictError

logger = logging.getLogger(__name__)


class BaseService:
    """Services receive the session they work with instead of reaching for a global."""

    def __init__(self, session):
        self.session = session

    def commit(self, conflict_message=None):
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            logger.warning("Commit rejected by a database constraint: %s", exc.orig)
            raise ConflictError(conflict_message) from exc
