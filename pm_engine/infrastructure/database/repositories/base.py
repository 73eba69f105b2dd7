"""
Base repository implementation providing generic operations.

Concrete repositories extend this class with the queries their domain
interface needs. Repositories flush so generated ids are available, but
never commit or roll back: the unit of work owns the transaction.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel, select

from pm_engine.domain.shared.exceptions import RepositoryError

EntityType = TypeVar("EntityType", bound=SQLModel)


class DatabaseError(RepositoryError):
    """Raised when a database operation fails."""

    pass


class BaseRepository(Generic[EntityType], ABC):
    """
    Base repository class providing generic operations.

    Concrete repositories provide the entity_class property.
    """

    def __init__(self, session: Session):
        """
        Initialize repository with database session.

        Args:
            session: SQLModel session owned by the unit of work
        """
        self.session = session

    @property
    @abstractmethod
    def entity_class(self) -> type[EntityType]:
        """Return the SQLModel entity class managed by this repository."""
        pass

    def add(self, entity: EntityType) -> EntityType:
        """
        Stage a new entity and flush it.

        Raises:
            DatabaseError: If database operation fails
        """
        try:
            self.session.add(entity)
            self.session.flush()
            self.session.refresh(entity)
            return entity
        except SQLAlchemyError as e:
            raise DatabaseError(f"Database error during add: {str(e)}") from e

    def save(self, entity: EntityType) -> EntityType:
        """
        Flush changes made to an already persisted entity.

        Raises:
            DatabaseError: If database operation fails
        """
        try:
            self.session.add(entity)
            self.session.flush()
            return entity
        except SQLAlchemyError as e:
            raise DatabaseError(f"Database error during save: {str(e)}") from e

    def get_by_id(self, entity_id: int) -> EntityType | None:
        """
        Get entity by ID.

        Returns:
            Entity if found, None otherwise

        Raises:
            DatabaseError: If database operation fails
        """
        try:
            statement = select(self.entity_class).where(
                self.entity_class.id == entity_id
            )
            return self.session.exec(statement).first()
        except SQLAlchemyError as e:
            raise DatabaseError(f"Database error during get_by_id: {str(e)}") from e

    def remove(self, entity: EntityType) -> None:
        """
        Delete an entity and flush.

        Raises:
            DatabaseError: If database operation fails
        """
        try:
            self.session.delete(entity)
            self.session.flush()
        except SQLAlchemyError as e:
            raise DatabaseError(f"Database error during delete: {str(e)}") from e
