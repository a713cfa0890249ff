from typing import Iterable, List, Optional, Sequence

from django.db.models import prefetch_related_objects

from apps.common.pagination import Page, PageRequest, paginate
from apps.common.repository import GenericRepository
from .models import Category, Product, ProductCategory


class CategoryRepository(GenericRepository[Category]):
    def __init__(self):
        super().__init__(Category)


class ProductRepository(GenericRepository[Product]):
    def __init__(self):
        super().__init__(Product)

    def find_by_id(self, pk) -> Optional[Product]:
        return self.model.objects.filter(pk=pk).prefetch_related("categories").first()

    def find(
        self,
        categories: Optional[Sequence[Category]],
        name: str,
        page_request: PageRequest,
    ) -> Page[Product]:
        """Page of products matching ``name`` and, when given, any of ``categories``.

        Categories are not loaded here; call ``find_products_with_categories``
        on the page items.
        """
        qs = self.model.objects.all()
        if categories:
            matching = ProductCategory.objects.filter(
                category_id__in=[c.pk for c in categories]
            ).values("product_id")
            qs = qs.filter(pk__in=matching)
        if name:
            qs = qs.filter(name__icontains=name)
        return paginate(qs.order_by(*page_request.ordering()), page_request)

    def find_products_with_categories(self, products: Sequence[Product]) -> List[Product]:
        products = list(products)
        prefetch_related_objects(products, "categories")
        return products

    def set_categories(self, product: Product, categories: Iterable[Category]) -> None:
        product.categories.clear()
        product.categories.add(*categories)
