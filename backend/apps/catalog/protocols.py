from __future__ import annotations

from typing import TYPE_CHECKING, ContextManager, Iterable, List, Optional, Protocol, Sequence

if TYPE_CHECKING:
    from apps.catalog.models import Category, Product
    from apps.common.pagination import Page, PageRequest


class CategoryRepositoryProtocol(Protocol):
    def atomic(self) -> ContextManager: ...

    def find_all(self, page_request: "PageRequest") -> "Page[Category]": ...

    def find_by_id(self, pk: int) -> Optional["Category"]: ...

    def find_all_by_ids(self, ids: Iterable[int]) -> List["Category"]: ...

    def get_one(self, pk: int) -> "Category": ...

    def create(self, **data) -> "Category": ...

    def update(self, category: "Category", **data) -> "Category": ...

    def delete_by_id(self, pk: int) -> None: ...


class ProductRepositoryProtocol(Protocol):
    def atomic(self) -> ContextManager: ...

    def find(
        self,
        categories: Optional[Sequence["Category"]],
        name: str,
        page_request: "PageRequest",
    ) -> "Page[Product]": ...

    def find_products_with_categories(
        self, products: Sequence["Product"]
    ) -> List["Product"]: ...

    def find_by_id(self, pk: int) -> Optional["Product"]: ...

    def create(self, **data) -> "Product": ...

    def update(self, product: "Product", **data) -> "Product": ...

    def set_categories(
        self, product: "Product", categories: Iterable["Category"]
    ) -> None: ...

    def delete_by_id(self, pk: int) -> None: ...
