"""
Base repository class providing common database operations.

Model-specific repositories inherit from `BaseRepository` to reuse the generic
CRUD logic and add their own queries. Repositories only `flush()`: the service
layer owns the transaction and decides when to commit or roll back.
"""
from wizeprompt.exceptions.base import (
    RepositoryError,
    DuplicateError,
    NotFoundError,
    InvalidFieldError,
    PersistenceError,
)

from wizeprompt.exceptions.mapper import db_error_handler
from wizeprompt.validators.model_validators import (
    find_unknown_model_kwargs,
    get_required_columns,
    find_unique_conflicts,
)

import time
from typing import TypeVar, Generic, Type, Any
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, func
import logging

from wizeprompt.database.base import Base

# Type variable for the model class
ModelType = TypeVar("ModelType", bound=Base)

logger = logging.getLogger(__name__)


class BaseRepository(Generic[ModelType]):
    """
    Generic base repository providing common CRUD operations.

    Type Parameters:
        ModelType: The SQLAlchemy model class this repository manages.
    """

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        """
        Args:
            model: The SQLAlchemy model class (e.g. `Conversation`, not an instance).
            db: The async database session, usually injected by FastAPI.
        """
        self.model = model
        self.db = db

    # =================================================================================================================
    # Create
    # =================================================================================================================

    async def create(self, **kwargs) -> ModelType:
        """
        Create an entity with validation + DB write. Logging:
        - DEBUG: start event with model name and provided keys (not values).
        - INFO: expected domain errors (invalid fields, missing required, duplicate).
        - INFO: success event with created id and duration_ms.
        """
        logger.debug(
            "repo.create.start",
            extra={
                "model": self.model.__name__,
                "operation": "create",
                "provided_keys": sorted(kwargs.keys()),
            },
        )

        unknown = find_unknown_model_kwargs(self.model, kwargs)
        if unknown:
            logger.info(
                "repo.create.invalid_fields",
                extra={"model": self.model.__name__, "invalid_fields": sorted(unknown)},
            )
            raise InvalidFieldError(f"Unknown field(s) for {self.model.__name__}: {', '.join(unknown)}", fields=unknown)

        # NOT NULL columns: missing or explicitly None are both rejected
        missing = [c for c in get_required_columns(self.model) if kwargs.get(c) is None]
        if missing:
            logger.info(
                "repo.create.missing_required",
                extra={"model": self.model.__name__, "missing_fields": sorted(missing)},
            )
            raise RepositoryError(f"Missing required field(s): {', '.join(missing)} for {self.model.__name__}", fields=missing)

        conflicts = await find_unique_conflicts(self.db, self.model, kwargs)
        if conflicts:
            logger.info(
                "repo.create.duplicate_precheck",
                extra={"model": self.model.__name__, "conflict_fields": sorted(conflicts)},
            )
            raise DuplicateError(
                f"{self.model.__name__} already exists for field(s): {', '.join(sorted(conflicts))}",
                fields=sorted(conflicts),
            )

        start = time.perf_counter()

        async with db_error_handler(self.db, self.model.__name__):
            entity = self.model(**kwargs)
            self.db.add(entity)
            await self.db.flush()
            await self.db.refresh(entity)

        logger.info(
            "repo.create.success",
            extra={
                "model": self.model.__name__,
                "operation": "create",
                "id": getattr(entity, "id", None),
                "duration_ms": int((time.perf_counter() - start) * 1000),
            },
        )
        return entity

    # =================================================================================================================
    # Read
    # =================================================================================================================

    async def get_by_id(self, entity_id: int) -> ModelType | None:
        """
        Get an entity by its primary key, or None.

        Raises:
            PersistenceError: If the query itself fails.
        """
        try:
            result = await self.db.execute(
                select(self.model).where(self.model.id == entity_id)
            )
            entity = result.scalar_one_or_none()
        except Exception as e:
            logger.error(
                "repo.get_by_id.failed",
                extra={"model": self.model.__name__, "id": entity_id, "error": str(e)},
            )
            raise PersistenceError(str(e)) from e

        logger.debug("repo.get_by_id", extra={"model": self.model.__name__, "id": entity_id, "found": entity is not None})
        return entity

    async def get_by_id_or_raise(self, entity_id: int, message: str | None = None) -> ModelType:
        """
        Get an entity by its primary key or raise NotFoundError (with `message` when given).
        """
        entity = await self.get_by_id(entity_id)
        if entity is None:
            raise NotFoundError(message or f"{self.model.__name__} with ID {entity_id} not found")
        return entity

    async def exists(self, entity_id: int) -> bool:
        try:
            result = await self.db.execute(select(self.model.id).where(self.model.id == entity_id))
            found = result.scalar() is not None
        except Exception as e:
            logger.error(
                "repo.exists.failed",
                extra={"model": self.model.__name__, "id": entity_id, "error": str(e)},
            )
            raise PersistenceError(str(e)) from e

        logger.debug("repo.exists", extra={"model": self.model.__name__, "id": entity_id, "exists": found})
        return found

    async def count(self, **filters: Any) -> int:
        """
        Count entities, optionally filtered by equality on model attributes
        (e.g. `count(user_id=1, active=True)`). Unknown or None filters are ignored.
        """
        try:
            query = select(func.count(self.model.id))
            for field, value in filters.items():
                if hasattr(self.model, field) and value is not None:
                    query = query.where(getattr(self.model, field) == value)

            result = await self.db.execute(query)
            return result.scalar() or 0
        except Exception as e:
            logger.error("repo.count.failed", extra={"model": self.model.__name__, "error": str(e)})
            raise PersistenceError(str(e)) from e

    # =================================================================================================================
    # Update / Delete
    # =================================================================================================================

    async def update(self, entity: ModelType, **kwargs) -> ModelType:
        """
        Apply attribute changes to a loaded entity and flush.

        Only mapped attributes are accepted. Columns with `onupdate` defaults are
        expired by the flush; re-query (or refresh) before reading them.
        """
        unknown = find_unknown_model_kwargs(self.model, kwargs)
        if unknown:
            raise InvalidFieldError(f"Unknown field(s) for {self.model.__name__}: {', '.join(unknown)}", fields=unknown)

        async with db_error_handler(self.db, self.model.__name__):
            for key, value in kwargs.items():
                setattr(entity, key, value)
            await self.db.flush()

        logger.debug(
            "repo.update.success",
            extra={"model": self.model.__name__, "id": getattr(entity, "id", None), "fields": sorted(kwargs.keys())},
        )
        return entity

    async def delete(self, entity_id: int) -> bool:
        """
        Delete an entity by its primary key.

        Returns:
            True if a row was deleted, False if none matched.
        """
        async with db_error_handler(self.db, self.model.__name__):
            result = await self.db.execute(delete(self.model).where(self.model.id == entity_id))

        deleted = result.rowcount > 0
        if deleted:
            logger.debug("repo.delete.success", extra={"model": self.model.__name__, "id": entity_id})
        else:
            logger.warning("repo.delete.not_found", extra={"model": self.model.__name__, "id": entity_id})
        return deleted
