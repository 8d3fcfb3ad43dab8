# exceptions/
# ├── base.py                    # App-level errors (RepositoryError, NotFoundError, ...)
# ├── integrity_classifier.py    # SQL-level / DB-specific error classification
# └── mapper.py                  # db_error_handler: DB failures -> PersistenceError

from .base import (
    RepositoryError,
    NotFoundError,
    InvalidInputError,
    DuplicateError,
    InvalidFieldError,
    PersistenceError,
)

__all__ = [
    "RepositoryError",
    "NotFoundError",
    "InvalidInputError",
    "DuplicateError",
    "InvalidFieldError",
    "PersistenceError",
]
