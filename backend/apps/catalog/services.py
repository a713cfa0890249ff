from __future__ import annotations

from typing import List, Optional

from django.core.exceptions import ObjectDoesNotExist
from django.db import IntegrityError

from apps.api.exceptions import DatabaseError, ResourceNotFoundError
from apps.common import get_logger
from apps.common.pagination import Page, PageRequest
from .commands import ProductWriteCommand
from .dtos import CategoryDTO, ProductDTO
from .mappers import CategoryMapper, ProductMapper
from .models import Category
from .protocols import CategoryRepositoryProtocol, ProductRepositoryProtocol

logger = get_logger(__name__).bind(component="catalog", layer="service")


class ProductService:
    def __init__(
        self,
        products: ProductRepositoryProtocol,
        categories: CategoryRepositoryProtocol,
    ):
        self.products = products
        self.categories = categories
        self.logger = logger.bind(service="ProductService")

    def find_all(
        self,
        category_id: Optional[int],
        name: str,
        page_request: PageRequest,
    ) -> Page[ProductDTO]:
        """Page of products, optionally restricted to one category.

        ``category_id=None`` means every category. Categories of the returned
        products are attached with one extra query for the whole page.
        """
        self.logger.debug(
            "Listing products",
            category_id=category_id,
            name=name,
            page=page_request.page,
            size=page_request.size,
        )
        categories = (
            None if category_id is None else [self.categories.get_one(category_id)]
        )
        with self.products.atomic():
            page = self.products.find(categories, name or "", page_request)
            self.products.find_products_with_categories(page.items)
            return page.map(ProductMapper.to_dto)

    def find_by_id(self, product_id: int) -> ProductDTO:
        self.logger.debug("Fetching product", product_id=product_id)
        with self.products.atomic():
            product = self.products.find_by_id(product_id)
            if product is None:
                self.logger.info("Product not found", product_id=product_id)
                raise ResourceNotFoundError(
                    "Entity not found", details={"id": str(product_id)}
                )
            return ProductMapper.to_dto(product)

    def insert(self, cmd: ProductWriteCommand) -> ProductDTO:
        self.logger.info("Creating product", name=cmd.name)
        with self.products.atomic():
            categories = self._resolve_categories(cmd.category_ids)
            try:
                product = self.products.create(**cmd.scalar_fields())
                self.products.set_categories(product, categories)
            except IntegrityError as exc:
                self.logger.warning("Product creation violated a constraint", error=str(exc))
                raise DatabaseError("Integrity violation") from exc
        self.logger.info("Product created", product_id=product.id)
        return ProductMapper.to_dto(product)

    def update(self, product_id: int, cmd: ProductWriteCommand) -> ProductDTO:
        """Replace every scalar field and the whole category set of a product."""
        self.logger.info("Updating product", product_id=product_id)
        with self.products.atomic():
            product = self.products.find_by_id(product_id)
            if product is None:
                self.logger.warning("Product update failed: not found", product_id=product_id)
                raise ResourceNotFoundError(
                    f"ID not found: {product_id}", details={"id": str(product_id)}
                )
            categories = self._resolve_categories(cmd.category_ids)
            try:
                self.products.update(product, **cmd.scalar_fields())
                self.products.set_categories(product, categories)
            except IntegrityError as exc:
                self.logger.warning(
                    "Product update violated a constraint",
                    product_id=product_id,
                    error=str(exc),
                )
                raise DatabaseError("Integrity violation") from exc
        self.logger.info("Product updated", product_id=product_id)
        return ProductMapper.to_dto(product)

    def delete(self, product_id: int) -> None:
        self.logger.info("Deleting product", product_id=product_id)
        try:
            with self.products.atomic():
                self.products.delete_by_id(product_id)
        except ObjectDoesNotExist as exc:
            self.logger.warning("Product deletion failed: not found", product_id=product_id)
            raise ResourceNotFoundError(
                f"ID not found: {product_id}", details={"id": str(product_id)}
            ) from exc
        except IntegrityError as exc:
            self.logger.warning(
                "Product deletion violated a constraint",
                product_id=product_id,
                error=str(exc),
            )
            raise DatabaseError("Integrity violation") from exc
        self.logger.info("Product deleted", product_id=product_id)

    def _resolve_categories(self, category_ids: List[int]) -> List[Category]:
        found = self.categories.find_all_by_ids(category_ids)
        missing = sorted(set(category_ids) - {c.id for c in found})
        if missing:
            self.logger.info("Unknown categories referenced", category_ids=missing)
            raise ResourceNotFoundError(
                "Category not found", details={"categoryIds": missing}
            )
        return found


class CategoryService:
    def __init__(self, categories: CategoryRepositoryProtocol):
        self.categories = categories
        self.logger = logger.bind(service="CategoryService")

    def find_all(self, page_request: PageRequest) -> Page[CategoryDTO]:
        self.logger.debug("Listing categories", page=page_request.page)
        with self.categories.atomic():
            return self.categories.find_all(page_request).map(CategoryMapper.to_dto)

    def find_by_id(self, category_id: int) -> CategoryDTO:
        self.logger.debug("Fetching category", category_id=category_id)
        with self.categories.atomic():
            category = self.categories.find_by_id(category_id)
        if category is None:
            self.logger.info("Category not found", category_id=category_id)
            raise ResourceNotFoundError(
                "Entity not found", details={"id": str(category_id)}
            )
        return CategoryMapper.to_dto(category)

    def insert(self, name: str) -> CategoryDTO:
        self.logger.info("Creating category", name=name)
        try:
            with self.categories.atomic():
                category = self.categories.create(name=name)
        except IntegrityError as exc:
            self.logger.warning("Category creation violated a constraint", name=name)
            raise DatabaseError("Integrity violation") from exc
        self.logger.info("Category created", category_id=category.id)
        return CategoryMapper.to_dto(category)

    def update(self, category_id: int, name: str) -> CategoryDTO:
        self.logger.info("Updating category", category_id=category_id)
        try:
            with self.categories.atomic():
                category = self.categories.find_by_id(category_id)
                if category is None:
                    self.logger.warning(
                        "Category update failed: not found", category_id=category_id
                    )
                    raise ResourceNotFoundError(
                        f"ID not found: {category_id}", details={"id": str(category_id)}
                    )
                self.categories.update(category, name=name)
        except IntegrityError as exc:
            self.logger.warning(
                "Category update violated a constraint", category_id=category_id
            )
            raise DatabaseError("Integrity violation") from exc
        self.logger.info("Category updated", category_id=category_id)
        return CategoryMapper.to_dto(category)

    def delete(self, category_id: int) -> None:
        self.logger.info("Deleting category", category_id=category_id)
        try:
            with self.categories.atomic():
                self.categories.delete_by_id(category_id)
        except ObjectDoesNotExist as exc:
            self.logger.warning(
                "Category deletion failed: not found", category_id=category_id
            )
            raise ResourceNotFoundError(
                f"ID not found: {category_id}", details={"id": str(category_id)}
            ) from exc
        except IntegrityError as exc:
            # ProtectedError: the category is still attached to products
            self.logger.warning(
                "Category deletion violated a constraint",
                category_id=category_id,
                error=str(exc),
            )
            raise DatabaseError("Integrity violation") from exc
        self.logger.info("Category deleted", category_id=category_id)
