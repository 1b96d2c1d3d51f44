"""Base repository with common CRUD operations.

Provides generic database operations that can be inherited by model-specific
repositories. Uses SQLAlchemy 2.0's async API with proper type hints.

Supports both Pydantic models and dictionaries for create/update operations.
Sessions are created with ``expire_on_commit=False`` and every value written
here is set on the instance before the flush, so objects are returned as-is
instead of being refreshed from the database.
"""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from moneybook.db.base import Base

# Generic type for SQLAlchemy models
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with common CRUD operations.

    Provides generic create, read, update, delete operations for any
    SQLAlchemy model. Repositories do NOT manage transactions - the
    caller is responsible for commit/rollback, usually through
    ``moneybook.db.session.transactional``.

    Type Parameters:
        ModelType: The SQLAlchemy model class

    Example:
        >>> class PocketRepository(BaseRepository[Pocket]):
        ...     pass
        >>>
        >>> repo = PocketRepository(Pocket, db)
        >>> pocket = await repo.get(pocket_id)
    """

    def __init__(self, model: type[ModelType], db: AsyncSession):
        """Initialize repository.

        Args:
            model: The SQLAlchemy model class
            db: Async database session
        """
        self.model = model
        self.db = db

    async def get(self, id: Any, *, for_update: bool = False) -> ModelType | None:
        """Get a single record by primary key.

        Args:
            id: Primary key value
            for_update: Lock the row until the current transaction ends

        Returns:
            Model instance if found, None otherwise
        """
        query = select(self.model).where(self.model.id == id)  # type: ignore[attr-defined]
        if for_update:
            query = query.with_for_update()
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def create(self, *, obj_in: BaseModel | dict[str, Any]) -> ModelType:
        """Create a new record.

        Args:
            obj_in: Pydantic model or dictionary of field names and values.

        Returns:
            Created model instance (flushed, not yet committed)

        Raises:
            TypeError: If dictionary contains invalid field names

        Example:
            >>> pocket = await repo.create(
            ...     obj_in={"money_book_id": book.id, "name": "Savings", "percentage": 30}
            ... )
        """
        if isinstance(obj_in, BaseModel):
            create_data = obj_in.model_dump(exclude_unset=True)
        else:
            create_data = obj_in

        db_obj = self.model(**create_data)
        self.db.add(db_obj)
        await self.db.flush()
        return db_obj

    async def update(
        self,
        *,
        db_obj: ModelType,
        obj_in: BaseModel | dict[str, Any],
    ) -> ModelType:
        """Update an existing record.

        Args:
            db_obj: Existing model instance to update
            obj_in: Pydantic model or dictionary of fields to update (can be partial).

        Returns:
            Updated model instance (flushed, not yet committed)

        Example:
            >>> pocket = await repo.get(pocket_id)
            >>> updated = await repo.update(db_obj=pocket, obj_in={"name": "Emergency"})
        """
        if isinstance(obj_in, BaseModel):
            update_data = obj_in.model_dump(exclude_unset=True)
        else:
            update_data = obj_in

        for field, value in update_data.items():
            setattr(db_obj, field, value)

        await self.db.flush()
        return db_obj

    async def delete(self, *, id: Any) -> ModelType:
        """Delete a record by primary key.

        Only use this for models without child rows; rows with dependents
        are removed with explicit statements in the model's repository.

        Args:
            id: Primary key value

        Returns:
            Deleted model instance (flushed, not yet committed)

        Raises:
            ValueError: If record not found
        """
        db_obj = await self.get(id)
        if not db_obj:
            raise ValueError(f"{self.model.__name__} with id {id} not found")

        await self.db.delete(db_obj)
        await self.db.flush()
        return db_obj
