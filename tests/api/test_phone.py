"""Tests for the Phone API."""

import pytest

from tests.conftest import SAMPLE_AGENT_ID, SAMPLE_USER_ID


class TestPhone:
    """Provider validation and endpoints."""

    @pytest.mark.asyncio
    async def test_list(self, mock_iris_client, mock_http):
        mock_http.get.return_value = {"data": [{"id": "ph_1"}]}

        numbers = await mock_iris_client.phone.list("twilio")

        mock_http.get.assert_called_once_with(
            "/api/v1/phone/list", {"user_id": SAMPLE_USER_ID, "provider": "twilio"}
        )
        assert numbers == [{"id": "ph_1"}]

    @pytest.mark.asyncio
    async def test_unknown_provider_rejected_before_io(self, mock_iris_client, mock_http):
        with pytest.raises(ValueError, match="Unsupported phone provider"):
            await mock_iris_client.phone.list("bandwidth")
        with pytest.raises(ValueError):
            await mock_iris_client.phone.buy("+15550001111", "bandwidth")
        mock_http.get.assert_not_called()
        mock_http.post.assert_not_called()

    @pytest.mark.asyncio
    async def test_buy(self, mock_iris_client, mock_http):
        mock_http.post.return_value = {"data": {"id": "ph_9"}}

        result = await mock_iris_client.phone.buy("+15550001111", "telnyx", friendly_name="Sales")

        mock_http.post.assert_called_once_with(
            "/api/v1/phone/buy",
            {
                "user_id": SAMPLE_USER_ID,
                "phone_number": "+15550001111",
                "provider": "telnyx",
                "friendly_name": "Sales",
            },
        )
        assert result == {"id": "ph_9"}

    @pytest.mark.asyncio
    async def test_delete_sends_query_params(self, mock_iris_client, mock_http):
        await mock_iris_client.phone.delete("ph_1", "vapi")
        mock_http.delete.assert_called_once_with(
            "/api/v1/phone/delete",
            {"user_id": SAMPLE_USER_ID, "phone_id": "ph_1", "provider": "vapi"},
        )

    @pytest.mark.asyncio
    async def test_assign_and_unassign(self, mock_iris_client, mock_http):
        await mock_iris_client.phone.assign("ph_1", SAMPLE_AGENT_ID)
        await mock_iris_client.phone.unassign("ph_1")

        first, second = mock_http.post.call_args_list
        assert first.args[0] == "/api/v1/phone/configure"
        assert first.args[1]["agent_id"] == SAMPLE_AGENT_ID
        assert second.args[1]["agent_id"] is None

    @pytest.mark.asyncio
    async def test_release(self, mock_iris_client, mock_http):
        await mock_iris_client.phone.release("ph_1", SAMPLE_AGENT_ID, "twilio")
        mock_http.post.assert_called_once_with(
            "/api/v1/phone/release",
            {"user_id": SAMPLE_USER_ID, "phone_id": "ph_1", "agent_id": SAMPLE_AGENT_ID, "provider": "twilio"},
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body,expected", [({"available": True}, True), ({"available": False}, False), ({}, False)])
    async def test_is_provider_available(self, mock_iris_client, mock_http, body, expected):
        mock_http.get.return_value = body
        assert await mock_iris_client.phone.is_provider_available("vapi") is expected
