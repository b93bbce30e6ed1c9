from contextlib import contextmanager

from bson.errors import InvalidDocument
from pymongo.errors import DuplicateKeyError, PyMongoError


class StoreError(Exception):
    """Base class for failures surfaced by the entity store and reports."""


class ValidationError(StoreError):
    def __init__(self, message, field=None):
        super().__init__(message)
        self.field = field


class StorageError(StoreError):
    pass


@contextmanager
def driver_errors():
    try:
        yield
    except DuplicateKeyError as exc:
        key_value = (exc.details or {}).get("keyValue") or {}
        field = next(iter(key_value), None)
        raise ValidationError(f"Duplicate key: {exc}", field=field) from exc
    except (InvalidDocument, OverflowError) as exc:
        # values BSON cannot encode
        raise ValidationError(str(exc)) from exc
    except PyMongoError as exc:
        raise StorageError(str(exc)) from exc
