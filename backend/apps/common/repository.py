from typing import ContextManager, Generic, Iterable, List, Optional, Type, TypeVar

from django.db import models, transaction

from .pagination import Page, PageRequest, paginate

T = TypeVar("T", bound=models.Model)


class GenericRepository(Generic[T]):
    """Model-bound data access shared by every entity repository."""

    default_ordering = ("id",)

    def __init__(self, model: Type[T]):
        self.model = model

    def atomic(self) -> ContextManager:
        return transaction.atomic()

    def queryset(self):
        return self.model.objects.all()

    def find_by_id(self, pk) -> Optional[T]:
        return self.queryset().filter(pk=pk).first()

    def find_all(self, page_request: PageRequest) -> Page[T]:
        qs = self.queryset().order_by(*page_request.ordering(self.default_ordering))
        return paginate(qs, page_request)

    def find_all_by_ids(self, ids: Iterable[int]) -> List[T]:
        ids = list(ids)
        if not ids:
            return []
        return list(self.model.objects.filter(pk__in=ids))

    def get_one(self, pk) -> T:
        """Unfetched reference to the row with ``pk``; existence is checked on use."""
        return self.model(pk=pk)

    def create(self, **data) -> T:
        return self.model.objects.create(**data)

    def save(self, obj: T) -> T:
        obj.save()
        return obj

    def update(self, obj: T, **data) -> T:
        for k, v in data.items():
            setattr(obj, k, v)
        obj.save()
        return obj

    def delete_by_id(self, pk) -> None:
        obj = self.model.objects.filter(pk=pk).first()
        if obj is None:
            raise self.model.DoesNotExist(f"{self.model.__name__} {pk} does not exist")
        obj.delete()
