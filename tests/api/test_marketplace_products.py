"""Tests for the Marketplace and Products APIs."""

import pytest

from tests.conftest import SAMPLE_USER_ID, MOCK_PRODUCT

SKILLS = "/api/v1/marketplace/skills"


class TestMarketplace:
    """Skill discovery, installation and reviews."""

    @pytest.mark.asyncio
    async def test_search_uses_q(self, mock_iris_client, mock_http):
        mock_http.get.return_value = {"data": [{"slug": "gcal-sync"}]}

        skills = await mock_iris_client.marketplace.search("calendar", category="productivity")

        mock_http.get.assert_called_once_with(SKILLS, {"category": "productivity", "q": "calendar"})
        assert skills == [{"slug": "gcal-sync"}]

    @pytest.mark.asyncio
    async def test_search_without_query(self, mock_iris_client, mock_http):
        await mock_iris_client.marketplace.search()
        mock_http.get.assert_called_once_with(SKILLS, None)

    @pytest.mark.asyncio
    async def test_install_and_uninstall(self, mock_iris_client, mock_http):
        await mock_iris_client.marketplace.install("gcal-sync", {"calendar_id": "primary"})
        await mock_iris_client.marketplace.uninstall("gcal-sync")

        mock_http.post.assert_called_once_with(
            f"{SKILLS}/gcal-sync/install", {"config": {"calendar_id": "primary"}}
        )
        mock_http.delete.assert_called_once_with(f"{SKILLS}/gcal-sync/install", None)

    @pytest.mark.asyncio
    async def test_installed(self, mock_iris_client, mock_http):
        await mock_iris_client.marketplace.installed()
        mock_http.get.assert_called_once_with(f"{SKILLS}/my/installed", None)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("rating", [0, 6])
    async def test_review_rating_bounds(self, mock_iris_client, mock_http, rating):
        with pytest.raises(ValueError, match="between 1 and 5"):
            await mock_iris_client.marketplace.review("gcal-sync", rating)
        mock_http.post.assert_not_called()

    @pytest.mark.asyncio
    async def test_review(self, mock_iris_client, mock_http):
        await mock_iris_client.marketplace.review("gcal-sync", 5, "Great")
        mock_http.post.assert_called_once_with(
            f"{SKILLS}/gcal-sync/reviews", {"rating": 5, "review_text": "Great"}
        )


class TestProducts:
    """Product catalog."""

    @pytest.mark.asyncio
    async def test_create_applies_defaults(self, mock_iris_client, mock_http):
        mock_http.post.return_value = {"data": {"product": MOCK_PRODUCT}}

        product = await mock_iris_client.products.create({"title": "Consulting hour", "quantity": 5})

        mock_http.post.assert_called_once_with(
            "/api/v1/products",
            {
                "user_id": SAMPLE_USER_ID,
                "is_active": 1,
                "quantity": 5,
                "currency_code": "USD",
                "title": "Consulting hour",
            },
        )
        assert product.title == "Consulting hour"
        assert product.tags == ["consulting", "hourly"]
        assert product.is_on_sale

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [{"data": {"product": MOCK_PRODUCT}}, {"product": MOCK_PRODUCT}, {"data": MOCK_PRODUCT}, MOCK_PRODUCT],
    )
    async def test_get_unwraps_any_envelope(self, mock_iris_client, mock_http, body):
        mock_http.get.return_value = body
        product = await mock_iris_client.products.get(70)
        assert product.id == 70

    @pytest.mark.asyncio
    async def test_list(self, mock_iris_client, mock_http):
        mock_http.get.return_value = {"data": [MOCK_PRODUCT, {**MOCK_PRODUCT, "id": 71, "is_active": 0}]}
        products = await mock_iris_client.products.list()
        assert len(products) == 2
        assert [p.id for p in products.active()] == [70]
