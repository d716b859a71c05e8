"""Product catalog models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .base import IRISModel, ModelCollection, as_float, as_int, as_list


@dataclass
class Product(IRISModel):
    id: int = 0
    user_id: int | None = None
    profile_id: int | None = None
    title: str = ""
    subtitle: str | None = None
    description: str | None = None
    short_description: str | None = None
    photo: str | None = None
    price: float | None = None
    retail_price: float | None = None
    quantity: int | None = None
    tags: list[Any] = field(default_factory=list)
    currency_code: str = "USD"
    is_active: bool = True
    created_at: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Product":
        tags = data.get("tags")
        if isinstance(tags, str):
            tags = [t.strip() for t in tags.split(",") if t.strip()]
        return cls(
            attributes=cls._copy(data),
            id=as_int(data.get("id"), 0),
            user_id=as_int(data.get("user_id")),
            profile_id=as_int(data.get("profile_id")),
            title=data.get("title") or "",
            subtitle=data.get("subtitle"),
            description=data.get("description"),
            short_description=data.get("short_description"),
            photo=data.get("photo"),
            price=as_float(data.get("price")),
            retail_price=as_float(data.get("retail_price")),
            quantity=as_int(data.get("quantity")),
            tags=as_list(tags),
            currency_code=data.get("currency_code") or "USD",
            is_active=bool(as_int(data.get("is_active"), 1)),
            created_at=data.get("created_at"),
        )

    @property
    def is_on_sale(self) -> bool:
        return (
            self.price is not None
            and self.retail_price is not None
            and self.price < self.retail_price
        )

    @property
    def in_stock(self) -> bool:
        return self.quantity is None or self.quantity > 0


class ProductCollection(ModelCollection[Product]):
    def active(self) -> "ProductCollection":
        return self.filter(lambda p: p.is_active)
