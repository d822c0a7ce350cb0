"""
Repository pattern implementation.
Abstracts data access and provides a clean interface for domain services.
"""
from typing import Generic, TypeVar, Optional, Type
from django.db.models import QuerySet, Model

from core.exceptions import NotFoundError

T = TypeVar('T', bound=Model)


class BaseRepository(Generic[T]):
    """
    Base repository providing common data access.
    Subclasses set not_found_error to their resource-specific NotFoundError.
    """
    not_found_error: Type[NotFoundError] = NotFoundError

    def __init__(self, model: type[T]):
        self.model = model

    def _missing(self, id: int) -> NotFoundError:
        if self.not_found_error is NotFoundError:
            return NotFoundError(resource_type=self.model.__name__, resource_id=id)
        return self.not_found_error(id)

    def get_by_id(self, id: int, **filters) -> Optional[T]:
        """Get a single instance by ID"""
        return self.model.objects.filter(id=id, **filters).first()

    def get_or_raise(self, id: int, **filters) -> T:
        """Get a single instance by ID or raise the repository's NotFoundError"""
        instance = self.get_by_id(id, **filters)
        if instance is None:
            raise self._missing(id)
        return instance

    def lock(self, id: int, **filters) -> T:
        """Get a single instance with a row-level lock (caller must be in a transaction)"""
        instance = self.model.objects.select_for_update().filter(id=id, **filters).first()
        if instance is None:
            raise self._missing(id)
        return instance

    def get_all(self, **filters) -> QuerySet[T]:
        """Get all instances matching filters"""
        return self.model.objects.filter(**filters)

    def create(self, **kwargs) -> T:
        """Create a new instance"""
        return self.model.objects.create(**kwargs)

    def update_where(self, filters: dict, **changes) -> int:
        """
        Conditional update: write changes only to rows still matching filters.
        Returns the number of rows changed (0 means the condition no longer held).
        """
        return self.model.objects.filter(**filters).update(**changes)
