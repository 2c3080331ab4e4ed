#  Agent Dashboard - Error Kinds
#
#  Closed set of error kinds surfaced to callers, each carried by a typed
#  exception. app.py maps kinds to HTTP status codes so routes never
#  pattern-match on message strings.
#
#  Depends on: (none)
#  Used by:    db/connection.py, services/*, routes/*, app.py

import logging
from contextlib import contextmanager
from enum import Enum

logger = logging.getLogger("dashboard.errors")


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    UNAVAILABLE = "unavailable"
    INTERNAL = "internal"


class DashboardError(Exception):
    """Base exception for all dashboard errors that reach a caller."""

    kind: ErrorKind = ErrorKind.INTERNAL


class NotFoundError(DashboardError):
    """A single-entity lookup found no matching row."""

    kind = ErrorKind.NOT_FOUND


class InvalidInputError(DashboardError):
    """Caller supplied input the operation cannot accept."""

    kind = ErrorKind.VALIDATION


class UnavailableError(DashboardError):
    """A required collaborator cannot be reached."""

    kind = ErrorKind.UNAVAILABLE


class DatabaseUnavailableError(UnavailableError):
    """The database handle was never initialized (or failed to initialize)."""


class InternalError(DashboardError):
    """Anything else: unexpected exception, external model-call failure."""

    kind = ErrorKind.INTERNAL


@contextmanager
def internal_errors(message: str):
    """Re-raise unexpected exceptions as InternalError(message).

    DashboardErrors pass through unchanged so not-found and unavailable
    keep their own classification.
    """
    try:
        yield
    except DashboardError:
        raise
    except Exception as e:
        logger.error("%s: %s", message, e, exc_info=True)
        raise InternalError(message) from e
