from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional


@dataclass
class ProductWriteCommand:
    """Full replacement payload for a product, used by insert and update alike."""

    name: str
    price: Decimal
    description: str = ""
    img_url: str = ""
    date: Optional[datetime] = None
    category_ids: List[int] = field(default_factory=list)

    @staticmethod
    def _parse_categories(raw) -> List[int]:
        ids: List[int] = []
        for entry in raw or []:
            value = entry.get("id") if isinstance(entry, Mapping) else entry
            try:
                category_id = int(value)
            except (ValueError, TypeError):
                continue
            if category_id not in ids:
                ids.append(category_id)
        return ids

    @staticmethod
    def from_raw(payload: Dict[str, Any]) -> "ProductWriteCommand":
        data = dict(payload or {})
        # server assigned
        data.pop("id", None)
        return ProductWriteCommand(
            name=str(data.get("name", "")).strip(),
            price=Decimal(str(data.get("price", "0"))),
            description=str(data.get("description") or "").strip(),
            img_url=str(data.get("img_url") or "").strip(),
            date=data.get("date"),
            category_ids=ProductWriteCommand._parse_categories(data.get("categories")),
        )

    def scalar_fields(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "price": self.price,
            "description": self.description,
            "img_url": self.img_url,
            "date": self.date,
        }
