"""Agent wallet and transaction models (amounts in cents)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .base import IRISModel, ModelCollection, as_dict, as_int

CREDIT_TYPES = ("fund", "refund")


@dataclass
class Wallet(IRISModel):
    id: int = 0
    agent_id: int = 0
    user_id: int = 0
    balance_cents: int = 0
    currency: str = "credits"
    daily_limit_cents: int | None = None
    monthly_limit_cents: int | None = None
    per_transaction_limit_cents: int | None = None
    status: str = "active"
    frozen_reason: str | None = None
    total_funded_cents: int = 0
    total_spent_cents: int = 0
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Wallet":
        return cls(
            attributes=cls._copy(data),
            id=as_int(data.get("id"), 0),
            agent_id=as_int(data.get("agent_id"), 0),
            user_id=as_int(data.get("user_id"), 0),
            balance_cents=as_int(data.get("balance_cents"), 0),
            currency=data.get("currency") or "credits",
            daily_limit_cents=as_int(data.get("daily_limit_cents")),
            monthly_limit_cents=as_int(data.get("monthly_limit_cents")),
            per_transaction_limit_cents=as_int(data.get("per_transaction_limit_cents")),
            status=data.get("status") or "active",
            frozen_reason=data.get("frozen_reason"),
            total_funded_cents=as_int(data.get("total_funded_cents"), 0),
            total_spent_cents=as_int(data.get("total_spent_cents"), 0),
            metadata=as_dict(data.get("metadata")),
        )

    @property
    def balance_dollars(self) -> float:
        return self.balance_cents / 100

    @property
    def is_active(self) -> bool:
        return self.status == "active"

    @property
    def is_frozen(self) -> bool:
        return self.status == "frozen"

    def can_afford(self, amount_cents: int) -> bool:
        return self.is_active and self.balance_cents >= amount_cents


@dataclass
class Transaction(IRISModel):
    transaction_id: str = ""
    agent_id: int = 0
    wallet_id: int = 0
    type: str = ""
    amount_cents: int = 0
    balance_before_cents: int = 0
    balance_after_cents: int = 0
    counterparty_type: str | None = None
    counterparty_id: int | None = None
    status: str = ""
    failure_reason: str | None = None
    description: str | None = None
    created_at: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Transaction":
        return cls(
            attributes=cls._copy(data),
            transaction_id=str(data.get("transaction_id") or data.get("id") or ""),
            agent_id=as_int(data.get("agent_id"), 0),
            wallet_id=as_int(data.get("wallet_id"), 0),
            type=data.get("type") or "",
            amount_cents=as_int(data.get("amount_cents"), 0),
            balance_before_cents=as_int(data.get("balance_before_cents"), 0),
            balance_after_cents=as_int(data.get("balance_after_cents"), 0),
            counterparty_type=data.get("counterparty_type"),
            counterparty_id=as_int(data.get("counterparty_id")),
            status=data.get("status") or "",
            failure_reason=data.get("failure_reason"),
            description=data.get("description") or data.get("reason"),
            created_at=data.get("created_at"),
        )

    @property
    def amount_dollars(self) -> float:
        return self.amount_cents / 100

    @property
    def is_credit(self) -> bool:
        return self.type in CREDIT_TYPES

    @property
    def is_debit(self) -> bool:
        return not self.is_credit

    @property
    def is_completed(self) -> bool:
        return self.status == "completed"

    @property
    def is_pending(self) -> bool:
        return self.status == "pending"


class TransactionCollection(ModelCollection[Transaction]):
    def credits(self) -> "TransactionCollection":
        return self.filter(lambda t: t.is_credit)

    def debits(self) -> "TransactionCollection":
        return self.filter(lambda t: t.is_debit)

    def total_cents(self) -> int:
        """Net movement: credits minus debits."""
        return sum(t.amount_cents if t.is_credit else -t.amount_cents for t in self.items)
