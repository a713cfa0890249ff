import unittest
from datetime import datetime, timezone
from decimal import Decimal

from apps.catalog.mappers import CategoryMapper, ProductMapper


class StubCategory:
    def __init__(self, category_id: int, name: str):
        self.id = category_id
        self.name = name


class StubCategoryManager:
    def __init__(self, categories=None):
        self._categories = list(categories or [])

    def all(self):
        return list(self._categories)


class StubProduct:
    def __init__(
        self,
        product_id: int,
        name: str,
        price,
        description: str = "",
        img_url: str = "",
        date=None,
        categories=None,
    ):
        self.id = product_id
        self.name = name
        self.price = price
        self.description = description
        self.img_url = img_url
        self.date = date
        self.categories = StubCategoryManager(categories)


class CategoryMapperTests(unittest.TestCase):
    def test_category_mapper_basic(self):
        dto = CategoryMapper.to_dto(StubCategory(1, "Books"))
        self.assertEqual(dto.id, 1)
        self.assertEqual(dto.name, "Books")

    def test_category_many(self):
        dtos = CategoryMapper.many_to_dto([StubCategory(1, "A"), StubCategory(2, "B")])
        self.assertEqual([d.name for d in dtos], ["A", "B"])


class ProductMapperTests(unittest.TestCase):
    def test_product_mapper_sorts_categories_by_id(self):
        product = StubProduct(
            7,
            "Smart TV",
            Decimal("2190.00"),
            description="55 inch",
            img_url="https://img.example.com/tv.png",
            categories=[StubCategory(3, "Computers"), StubCategory(2, "Electronics")],
        )
        dto = ProductMapper.to_dto(product)
        self.assertEqual(dto.id, 7)
        self.assertEqual(dto.price, "2190.00")
        self.assertEqual(dto.img_url, "https://img.example.com/tv.png")
        self.assertEqual([c.id for c in dto.categories], [2, 3])

    def test_product_date_rendered_as_iso_string(self):
        released = datetime(2020, 7, 13, 20, 50, 7, tzinfo=timezone.utc)
        dto = ProductMapper.to_dto(StubProduct(1, "Book", Decimal("9.90"), date=released))
        self.assertEqual(dto.date, "2020-07-13T20:50:07+00:00")

    def test_product_without_date_or_categories(self):
        dto = ProductMapper.to_dto(StubProduct(1, "Book", Decimal("9.90")))
        self.assertIsNone(dto.date)
        self.assertEqual(dto.categories, [])

    def test_product_many(self):
        dtos = ProductMapper.many_to_dto(
            [StubProduct(1, "A", Decimal("1")), StubProduct(2, "B", Decimal("2"))]
        )
        self.assertEqual([d.id for d in dtos], [1, 2])
