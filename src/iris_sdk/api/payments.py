"""Payments API - Agent wallets, agent-to-agent payments and spend policy."""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

from ..models.payments import Transaction, TransactionCollection, Wallet
from .payload import extract_list, extract_meta, extract_payload

if TYPE_CHECKING:
    from .client import IRISClient


def _check_amount(amount_cents: int) -> int:
    if amount_cents <= 0:
        raise ValueError("amount_cents must be positive")
    return amount_cents


class PaymentsAPI:
    """Agent wallet API for IRIS.

    Every wallet belongs to one agent; amounts are integer cents.

    Usage:
        async with IRISClient.from_env() as iris:
            wallet = await iris.payments.create_wallet(11, daily_limit_cents=5000)
            await iris.payments.fund_wallet(11, 2000)

            # Pay another agent for a service
            await iris.payments.pay_agent(11, recipient_agent_id=12, amount_cents=150)

            history = await iris.payments.get_transactions(11)
            print(history.total_cents())
    """

    BASE = "/api/v1/a2p/wallets"

    def __init__(self, client: "IRISClient"):
        self._client = client

    def _wallet(self, response: dict[str, Any]) -> Wallet:
        return Wallet.from_dict(extract_payload(response, "data.wallet", "wallet", "data"))

    # Wallet lifecycle
    async def create_wallet(self, agent_id: int, **options) -> Wallet:
        """Create a wallet for an agent.

        Args:
            agent_id: Owning agent
            **options: currency, daily_limit_cents, monthly_limit_cents, ...
        """
        response = await self._client._post(self.BASE, {"agent_id": agent_id, **options})
        return self._wallet(response)

    async def get_wallet(self, agent_id: int) -> Wallet:
        return self._wallet(await self._client._get(f"{self.BASE}/{agent_id}"))

    async def get_balance(self, agent_id: int) -> dict[str, Any]:
        response = await self._client._get(f"{self.BASE}/{agent_id}/balance")
        return extract_payload(response, "data")

    async def fund_wallet(
        self, agent_id: int, amount_cents: int, source: str = "credits"
    ) -> Wallet | dict[str, Any]:
        """Add funds to a wallet.

        Returns:
            Wallet, or the raw response when it carries a ``checkout_url``
            the user must visit to finish paying
        """
        response = await self._client._post(
            f"{self.BASE}/{agent_id}/fund",
            {"amount_cents": _check_amount(amount_cents), "source": source},
        )
        payload = extract_payload(response, "data")
        if isinstance(payload, dict) and payload.get("checkout_url"):
            return payload
        return self._wallet(response)

    async def withdraw(self, agent_id: int, amount_cents: int) -> Wallet:
        response = await self._client._post(
            f"{self.BASE}/{agent_id}/withdraw", {"amount_cents": _check_amount(amount_cents)}
        )
        return self._wallet(response)

    async def freeze(self, agent_id: int, reason: str = "") -> Wallet:
        """Block all spending from a wallet."""
        response = await self._client._post(f"{self.BASE}/{agent_id}/freeze", {"reason": reason})
        return self._wallet(response)

    async def unfreeze(self, agent_id: int) -> Wallet:
        return self._wallet(await self._client._post(f"{self.BASE}/{agent_id}/unfreeze"))

    # Spending
    async def pay(self, agent_id: int, payment: dict[str, Any]) -> dict[str, Any]:
        """Pay an external recipient.

        Args:
            agent_id: Paying agent
            payment: amount_cents, recipient, description, category, ...
        """
        _check_amount(int(payment.get("amount_cents", 0)))
        response = await self._client._post(f"{self.BASE}/{agent_id}/pay", payment)
        return extract_payload(response, "data")

    async def pay_agent(
        self,
        agent_id: int,
        recipient_agent_id: int,
        amount_cents: int,
        reason: str = "Agent service payment",
    ) -> dict[str, Any]:
        response = await self._client._post(
            f"{self.BASE}/{agent_id}/pay-agent",
            {
                "recipient_agent_id": recipient_agent_id,
                "amount_cents": _check_amount(amount_cents),
                "reason": reason,
            },
        )
        return extract_payload(response, "data")

    async def purchase(
        self, agent_id: int, listing_id: int, purchase_type: str = "use"
    ) -> dict[str, Any]:
        """Buy a marketplace listing with the agent's wallet."""
        response = await self._client._post(
            f"{self.BASE}/{agent_id}/marketplace/purchase",
            {"listing_id": listing_id, "purchase_type": purchase_type},
        )
        return extract_payload(response, "data")

    async def browse_marketplace(self, agent_id: int, **filters) -> list[dict[str, Any]]:
        response = await self._client._get(f"{self.BASE}/{agent_id}/marketplace/browse", **filters)
        return extract_list(response, "data.data", "data", "listings")

    # History
    async def get_transactions(self, agent_id: int, **filters) -> TransactionCollection:
        response = await self._client._get(f"{self.BASE}/{agent_id}/transactions", **filters)
        return TransactionCollection.from_items(
            extract_list(response, "data.data", "data", "transactions"),
            Transaction.from_dict,
            extract_meta(response),
        )

    async def get_transaction(self, agent_id: int, transaction_id: str) -> Transaction:
        response = await self._client._get(
            f"{self.BASE}/{agent_id}/transactions/{transaction_id}"
        )
        return Transaction.from_dict(
            extract_payload(response, "data.transaction", "transaction", "data")
        )

    # Policy
    async def get_policy(self, agent_id: int) -> dict[str, Any]:
        response = await self._client._get(f"{self.BASE}/{agent_id}/policy")
        return extract_payload(response, "data.policy", "policy", "data")

    async def update_policy(self, agent_id: int, policy: dict[str, Any]) -> dict[str, Any]:
        response = await self._client._put(f"{self.BASE}/{agent_id}/policy", policy)
        return extract_payload(response, "data.policy", "policy", "data")

    async def check_policy(
        self, agent_id: int, amount_cents: int, category: str = "general"
    ) -> dict[str, Any]:
        """Ask whether a spend would be allowed, without spending."""
        response = await self._client._post(
            f"{self.BASE}/{agent_id}/policy/check",
            {"amount_cents": _check_amount(amount_cents), "category": category},
        )
        return extract_payload(response, "data")
