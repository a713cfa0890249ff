from typing import Iterable, List

from .dtos import CategoryDTO, ProductDTO
from .models import Category, Product


class CategoryMapper:
    @staticmethod
    def to_dto(cat: Category) -> CategoryDTO:
        return CategoryDTO(id=cat.id, name=cat.name)

    @staticmethod
    def many_to_dto(categories: Iterable[Category]) -> List[CategoryDTO]:
        return [CategoryMapper.to_dto(c) for c in categories]


class ProductMapper:
    @staticmethod
    def to_dto(product: Product) -> ProductDTO:
        date = product.date
        return ProductDTO(
            id=product.id,
            name=product.name,
            description=product.description,
            price=str(product.price),
            img_url=product.img_url,
            date=date.isoformat() if date is not None else None,
            categories=sorted(
                CategoryMapper.many_to_dto(product.categories.all()),
                key=lambda c: c.id,
            ),
        )

    @staticmethod
    def many_to_dto(products: Iterable[Product]) -> List[ProductDTO]:
        return [ProductMapper.to_dto(p) for p in products]
