"""Base types for IRIS result models.

Models are dataclasses with named optional fields plus an ``attributes``
side-map that keeps a copy of the raw response, so fields the SDK does
not know about yet are still reachable through ``get_attribute``.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field, fields
from typing import Any, Callable, Generic, Iterator, TypeVar


def as_int(value: Any, default: int | None = None) -> int | None:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def as_float(value: Any, default: float | None = None) -> float | None:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def as_list(value: Any) -> list[Any]:
    return list(value) if isinstance(value, (list, tuple)) else []


def as_dict(value: Any) -> dict[str, Any]:
    return dict(value) if isinstance(value, dict) else {}


@dataclass
class IRISModel:
    """Base result model."""

    attributes: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @staticmethod
    def _copy(data: dict[str, Any] | None) -> dict[str, Any]:
        return copy.deepcopy(data) if isinstance(data, dict) else {}

    def get_attribute(self, key: str, default: Any = None) -> Any:
        """Raw response value, including keys without a typed field."""
        value = self.attributes.get(key)
        return default if value is None else value

    def to_dict(self) -> dict[str, Any]:
        """Raw attributes overlaid with the typed fields."""
        result = dict(self.attributes)
        for f in fields(self):
            if f.name != "attributes":
                result[f.name] = getattr(self, f.name)
        return result


T = TypeVar("T", bound=IRISModel)


class ModelCollection(Generic[T]):
    """List of models plus pagination metadata."""

    def __init__(self, items: list[T] | None = None, meta: dict[str, Any] | None = None):
        self.items: list[T] = list(items or [])
        self.meta: dict[str, Any] = meta or {}

    @classmethod
    def from_items(
        cls,
        raw_items: list[dict[str, Any]],
        factory: Callable[[dict[str, Any]], T],
        meta: dict[str, Any] | None = None,
    ):
        return cls([factory(item) for item in raw_items if isinstance(item, dict)], meta)

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index: int) -> T:
        return self.items[index]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({len(self.items)} items)"

    def first(self) -> T | None:
        return self.items[0] if self.items else None

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def total(self) -> int:
        return as_int(self.meta.get("total"), len(self.items))

    @property
    def current_page(self) -> int:
        return as_int(self.meta.get("current_page"), 1)

    @property
    def last_page(self) -> int:
        return as_int(self.meta.get("last_page"), 1)

    @property
    def has_more(self) -> bool:
        return self.current_page < self.last_page

    def filter(self, predicate: Callable[[T], bool]):
        return type(self)([item for item in self.items if predicate(item)], self.meta)

    def to_list(self) -> list[dict[str, Any]]:
        return [item.to_dict() for item in self.items]
