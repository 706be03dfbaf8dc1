# routers/errors.py
"""
Map service errors onto HTTP responses.

Routers catch LeaseError, roll the session back and raise the HTTPException
built here. Anything else propagates and becomes a 500.
"""
import logging

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from services.exceptions import LeaseError, NotFoundError, OccupancyConflictError

logger = logging.getLogger(__name__)


def to_http_exception(exc: LeaseError) -> HTTPException:
     if isinstance(exc, NotFoundError):
          return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
     if isinstance(exc, OccupancyConflictError):
          return HTTPException(
               status_code=status.HTTP_400_BAD_REQUEST,
               detail={"message": str(exc), "scope": exc.scope, "conflicting_lease_id": exc.conflicting_lease_id},
          )
     return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


def reject(db: Session, exc: LeaseError) -> HTTPException:
     """Roll back the request's transaction and return the HTTP error to raise."""
     db.rollback()
     logger.info("Request rejected: %s: %s", type(exc).__name__, exc)
     return to_http_exception(exc)
