"""Tests for the Payments (agent wallet) API."""

import pytest

from iris_sdk.models import Wallet
from tests.conftest import SAMPLE_AGENT_ID, MOCK_WALLET, MOCK_TRANSACTION

BASE = f"/api/v1/a2p/wallets/{SAMPLE_AGENT_ID}"


class TestWallet:
    """Wallet lifecycle."""

    @pytest.mark.asyncio
    async def test_create_wallet(self, mock_iris_client, mock_http):
        mock_http.post.return_value = {"data": {"wallet": MOCK_WALLET}}

        wallet = await mock_iris_client.payments.create_wallet(SAMPLE_AGENT_ID, daily_limit_cents=5000)

        mock_http.post.assert_called_once_with(
            "/api/v1/a2p/wallets", {"agent_id": SAMPLE_AGENT_ID, "daily_limit_cents": 5000}
        )
        assert wallet.balance_dollars == 125.5
        assert wallet.can_afford(12550)
        assert not wallet.can_afford(12551)

    @pytest.mark.asyncio
    async def test_fund_returns_wallet(self, mock_iris_client, mock_http):
        mock_http.post.return_value = {"data": MOCK_WALLET}

        result = await mock_iris_client.payments.fund_wallet(SAMPLE_AGENT_ID, 2000)

        mock_http.post.assert_called_once_with(
            f"{BASE}/fund", {"amount_cents": 2000, "source": "credits"}
        )
        assert isinstance(result, Wallet)

    @pytest.mark.asyncio
    async def test_fund_returns_checkout(self, mock_iris_client, mock_http):
        mock_http.post.return_value = {"data": {"checkout_url": "https://pay.example/abc"}}

        result = await mock_iris_client.payments.fund_wallet(SAMPLE_AGENT_ID, 2000, source="stripe")

        assert result == {"checkout_url": "https://pay.example/abc"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", [0, -5])
    async def test_non_positive_amounts_rejected(self, mock_iris_client, mock_http, amount):
        with pytest.raises(ValueError):
            await mock_iris_client.payments.fund_wallet(SAMPLE_AGENT_ID, amount)
        with pytest.raises(ValueError):
            await mock_iris_client.payments.pay_agent(SAMPLE_AGENT_ID, 12, amount)
        with pytest.raises(ValueError):
            await mock_iris_client.payments.pay(SAMPLE_AGENT_ID, {"amount_cents": amount})
        mock_http.post.assert_not_called()

    @pytest.mark.asyncio
    async def test_freeze(self, mock_iris_client, mock_http):
        mock_http.post.return_value = {"data": {**MOCK_WALLET, "status": "frozen"}}

        wallet = await mock_iris_client.payments.freeze(SAMPLE_AGENT_ID, "suspicious")

        mock_http.post.assert_called_once_with(f"{BASE}/freeze", {"reason": "suspicious"})
        assert wallet.is_frozen


class TestSpending:
    """Payments and policy checks."""

    @pytest.mark.asyncio
    async def test_pay_agent(self, mock_iris_client, mock_http):
        await mock_iris_client.payments.pay_agent(SAMPLE_AGENT_ID, 12, 150)
        mock_http.post.assert_called_once_with(
            f"{BASE}/pay-agent",
            {"recipient_agent_id": 12, "amount_cents": 150, "reason": "Agent service payment"},
        )

    @pytest.mark.asyncio
    async def test_purchase(self, mock_iris_client, mock_http):
        await mock_iris_client.payments.purchase(SAMPLE_AGENT_ID, 33)
        mock_http.post.assert_called_once_with(
            f"{BASE}/marketplace/purchase", {"listing_id": 33, "purchase_type": "use"}
        )

    @pytest.mark.asyncio
    async def test_policy(self, mock_iris_client, mock_http):
        mock_http.post.return_value = {"data": {"allowed": True}}

        await mock_iris_client.payments.update_policy(SAMPLE_AGENT_ID, {"max_per_day": 1000})
        result = await mock_iris_client.payments.check_policy(SAMPLE_AGENT_ID, 500)

        mock_http.put.assert_called_once_with(f"{BASE}/policy", {"max_per_day": 1000})
        mock_http.post.assert_called_once_with(
            f"{BASE}/policy/check", {"amount_cents": 500, "category": "general"}
        )
        assert result == {"allowed": True}


class TestTransactions:
    """Transaction history."""

    @pytest.mark.asyncio
    async def test_get_transactions(self, mock_iris_client, mock_http):
        mock_http.get.return_value = {
            "data": [MOCK_TRANSACTION, {**MOCK_TRANSACTION, "transaction_id": "txn_2", "type": "payment", "amount_cents": 500}]
        }

        transactions = await mock_iris_client.payments.get_transactions(SAMPLE_AGENT_ID, type="fund")

        mock_http.get.assert_called_once_with(f"{BASE}/transactions", {"type": "fund"})
        assert len(transactions.credits()) == 1
        assert len(transactions.debits()) == 1
        assert transactions.first().amount_dollars == 20.0
