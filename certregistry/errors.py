# certregistry/errors.py
import logging
from contextlib import contextmanager
from typing import Iterator, Optional

log = logging.getLogger("errors")


class RegistryError(Exception):
    """Base error; carries the HTTP status it maps to and the failing operation."""

    status_code = 500

    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.operation = operation


class ValidationError(RegistryError):
    status_code = 400


class NotFound(RegistryError):
    status_code = 404


class DuplicateContent(RegistryError):
    status_code = 409


class StorageFailure(RegistryError):
    status_code = 500


class ContentStoreError(StorageFailure):
    """The remote content store was unreachable or answered with an error."""


@contextmanager
def guard(operation: str, message: str) -> Iterator[None]:
    """
    Run a gateway operation. Registry errors are re-raised tagged with the
    operation name; anything else is logged and surfaced as StorageFailure
    with the given caller-facing message.
    """
    try:
        yield
    except RegistryError as exc:
        if exc.operation is None:
            exc.operation = operation
        raise
    except Exception as exc:
        log.exception("%s failed", operation)
        raise StorageFailure(message, operation=operation) from exc
