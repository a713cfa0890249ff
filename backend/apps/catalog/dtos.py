from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class CategoryDTO:
    id: int
    name: str


@dataclass
class ProductDTO:
    id: int
    name: str
    description: str
    price: str
    img_url: str
    date: Optional[str]
    categories: List[CategoryDTO] = field(default_factory=list)


"""DTO dataclasses only. Mapping logic lives in mappers.py."""
