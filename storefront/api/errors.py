# storefront/api/errors.py
from fastapi import HTTPException

from storefront.domain.errors import NotFound, PersistenceError, ValidationError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

GENERIC_STORAGE_ERROR = "Internal storage error"


def to_http(e: Exception) -> HTTPException:
    """Domain exception -> HTTPException. Anything unknown is re-raised."""
    if isinstance(e, ValidationError):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, NotFound):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, PermissionError):
        return HTTPException(status_code=403, detail=str(e))
    if isinstance(e, PersistenceError):
        #details already logged by the repo, client gets nothing internal
        logger.error(f"Request failed on storage: {e}")
        return HTTPException(status_code=500, detail=GENERIC_STORAGE_ERROR)
    raise e
