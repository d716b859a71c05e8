"""Products API - Catalog items sold or recommended by agents."""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

from ..models.products import Product, ProductCollection
from .payload import extract_list, extract_meta, extract_payload

if TYPE_CHECKING:
    from .client import IRISClient


class ProductsAPI:
    """Products API for IRIS.

    Usage:
        async with IRISClient.from_env() as iris:
            products = await iris.products.list()
            for product in products.active():
                print(product.title, product.price)

            await iris.products.create({"title": "Consulting hour", "price": 150})
    """

    BASE = "/api/v1/products"

    def __init__(self, client: "IRISClient"):
        self._client = client

    async def list(self, **params) -> ProductCollection:
        response = await self._client._get(self.BASE, **params)
        return ProductCollection.from_items(
            extract_list(response, "data.data", "data", "products"),
            Product.from_dict,
            extract_meta(response),
        )

    async def get(self, product_id: int) -> Product:
        response = await self._client._get(f"{self.BASE}/{product_id}")
        return Product.from_dict(extract_payload(response, "data.product", "product", "data"))

    async def create(self, data: dict[str, Any]) -> Product:
        """Create a product.

        Args:
            data: Product fields; owner, active flag, quantity and currency
                are filled in when missing

        Returns:
            Created Product
        """
        payload = {
            "user_id": self._client.config.require_user_id(),
            "is_active": 1,
            "quantity": 999,
            "currency_code": "USD",
            **data,
        }
        response = await self._client._post(self.BASE, payload)
        return Product.from_dict(extract_payload(response, "data.product", "product", "data"))

    async def update(self, product_id: int, data: dict[str, Any]) -> Product:
        response = await self._client._put(f"{self.BASE}/{product_id}", data)
        return Product.from_dict(extract_payload(response, "data.product", "product", "data"))

    async def delete(self, product_id: int) -> dict[str, Any]:
        return await self._client._delete(f"{self.BASE}/{product_id}")
