"""
Local Library: Shared Service Helpers
======================================

What:  Storage-error translation and identifier parsing shared by every
       entity service.
"""

import logging
import uuid
from contextlib import contextmanager
from typing import Any, Iterator

from sqlalchemy.exc import SQLAlchemyError

from locallibrary.exceptions import DatabaseError, NotFoundError
from locallibrary.schemas.forms import coerce_uuid

logger = logging.getLogger(__name__)


@contextmanager
def storage_errors(action: str, **context: Any) -> Iterator[None]:
    """
    Translate SQLAlchemy failures raised inside the block into DatabaseError.

    The original error type and the caller's context are logged and kept on
    the exception; the rendered message stays generic. Nothing is retried.

    Usage:
        with storage_errors("listing books"):
            result = await db.execute(select(Book))
    """
    try:
        yield
    except SQLAlchemyError as e:
        logger.error("Database error while %s: %s", action, str(e), exc_info=True)
        raise DatabaseError(
            context={"action": action, "error_type": type(e).__name__, **context},
        ) from e


def parse_identifier(raw_id: Any, resource: str) -> uuid.UUID:
    """
    Parse a path identifier.

    A malformed identifier cannot match any record, so it is reported as
    NotFoundError (404) rather than a request validation error.
    """
    record_id = coerce_uuid(raw_id)
    if record_id is None:
        raise NotFoundError(resource=resource, resource_id=str(raw_id))
    return record_id
