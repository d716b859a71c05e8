"""IRIS API Client - Typed wrapper for the IRIS platform API.

Aggregates the domain APIs (chat, agents, leads, phone, rag, social,
marketplace, products, integrations, payments, bloqs, schedules, workflows,
automations, usage) behind a single async context manager sharing one config
and one HTTP transport.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, TYPE_CHECKING

import httpx

from ..config import IRISConfig, SDK_VERSION, _coerce_user_id
from ..errors import APIError, NetworkError
from .http import HTTPClient
from .payload import extract_payload

if TYPE_CHECKING:
    from ..auth.storage import CredentialStore
    from .chat import ChatAPI
    from .agents import AgentsAPI
    from .leads import LeadsAPI
    from .phone import PhoneAPI
    from .rag import RAGAPI
    from .social import SocialAPI
    from .marketplace import MarketplaceAPI
    from .products import ProductsAPI
    from .integrations import IntegrationsAPI
    from .payments import PaymentsAPI
    from .bloqs import BloqsAPI
    from .schedules import SchedulesAPI
    from .workflows import WorkflowsAPI
    from .automations import AutomationsAPI
    from .usage import UsageAPI


class IRISClient:
    """IRIS API client with domain-specific sub-APIs.

    Usage:
        async with IRISClient(IRISConfig(api_key="sk_...", user_id=42)) as iris:
            agents = await iris.agents.list()
            status = await iris.chat.execute({"query": "Hi", "agent_id": 11})

    Usage from environment / .env:
        async with IRISClient.from_env() as iris:
            leads = await iris.leads.list(search="acme")

    Acting as another user (mutates the shared config of this instance):
        async with IRISClient.from_env() as iris:
            await iris.as_user(456).bloqs.list()
    """

    VERSION = SDK_VERSION

    API_NAMES = (
        "chat", "agents", "leads", "phone", "rag", "social", "marketplace", "products",
        "integrations", "payments", "bloqs", "schedules", "workflows", "automations", "usage",
    )

    def __init__(
        self,
        config: IRISConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        **options: Any,
    ):
        """Initialize IRIS client.

        Args:
            config: IRISConfig with credentials and settings
            transport: Optional httpx transport (used by tests)
            **options: IRISConfig fields, used when no config is given
        """
        self.config = config if config is not None else IRISConfig(**options)
        self._transport = transport
        self._http: HTTPClient | None = None

        # Domain APIs (initialized on enter)
        self._chat: ChatAPI | None = None
        self._agents: AgentsAPI | None = None
        self._leads: LeadsAPI | None = None
        self._phone: PhoneAPI | None = None
        self._rag: RAGAPI | None = None
        self._social: SocialAPI | None = None
        self._marketplace: MarketplaceAPI | None = None
        self._products: ProductsAPI | None = None
        self._integrations: IntegrationsAPI | None = None
        self._payments: PaymentsAPI | None = None
        self._bloqs: BloqsAPI | None = None
        self._schedules: SchedulesAPI | None = None
        self._workflows: WorkflowsAPI | None = None
        self._automations: AutomationsAPI | None = None
        self._usage: UsageAPI | None = None

    @classmethod
    def from_env(cls, env_file: str | Path | None = None, **overrides: Any) -> "IRISClient":
        """Create client from IRIS_* environment variables (and .env)."""
        return cls(IRISConfig.from_env(env_file, **overrides))

    @classmethod
    def from_credential_store(
        cls,
        store: "CredentialStore | None" = None,
        **overrides: Any,
    ) -> "IRISClient":
        """Create client from credentials saved by 'iris config setup'."""
        return cls(IRISConfig.from_credential_store(store, **overrides))

    async def __aenter__(self) -> "IRISClient":
        self._http = HTTPClient(self.config, transport=self._transport)

        from .chat import ChatAPI
        from .agents import AgentsAPI
        from .leads import LeadsAPI
        from .phone import PhoneAPI
        from .rag import RAGAPI
        from .social import SocialAPI
        from .marketplace import MarketplaceAPI
        from .products import ProductsAPI
        from .integrations import IntegrationsAPI
        from .payments import PaymentsAPI
        from .bloqs import BloqsAPI
        from .schedules import SchedulesAPI
        from .workflows import WorkflowsAPI
        from .automations import AutomationsAPI
        from .usage import UsageAPI

        self._chat = ChatAPI(self)
        self._agents = AgentsAPI(self)
        self._leads = LeadsAPI(self)
        self._phone = PhoneAPI(self)
        self._rag = RAGAPI(self)
        self._social = SocialAPI(self)
        self._marketplace = MarketplaceAPI(self)
        self._products = ProductsAPI(self)
        self._integrations = IntegrationsAPI(self)
        self._payments = PaymentsAPI(self)
        self._bloqs = BloqsAPI(self)
        self._schedules = SchedulesAPI(self)
        self._workflows = WorkflowsAPI(self)
        self._automations = AutomationsAPI(self)
        self._usage = UsageAPI(self)

        return self

    async def __aexit__(self, *args):
        if self._http:
            await self._http.aclose()
        # Closed clients must not lazily open a new transport
        self._http = None
        for name in self.API_NAMES:
            setattr(self, f"_{name}", None)

    @property
    def http(self) -> HTTPClient:
        """Shared HTTP transport."""
        if not self._http:
            raise RuntimeError("Client not initialized. Use 'async with' context.")
        return self._http

    # Domain API properties
    @property
    def chat(self) -> "ChatAPI":
        """Chat workflows API."""
        if not self._chat:
            raise RuntimeError("Client not initialized. Use 'async with' context.")
        return self._chat

    @property
    def agents(self) -> "AgentsAPI":
        """AI agents API."""
        if not self._agents:
            raise RuntimeError("Client not initialized. Use 'async with' context.")
        return self._agents

    @property
    def leads(self) -> "LeadsAPI":
        """CRM leads API."""
        if not self._leads:
            raise RuntimeError("Client not initialized. Use 'async with' context.")
        return self._leads

    @property
    def phone(self) -> "PhoneAPI":
        """Phone number provisioning API."""
        if not self._phone:
            raise RuntimeError("Client not initialized. Use 'async with' context.")
        return self._phone

    @property
    def rag(self) -> "RAGAPI":
        """RAG / vector search API."""
        if not self._rag:
            raise RuntimeError("Client not initialized. Use 'async with' context.")
        return self._rag

    @property
    def social(self) -> "SocialAPI":
        """Social publishing API."""
        if not self._social:
            raise RuntimeError("Client not initialized. Use 'async with' context.")
        return self._social

    @property
    def marketplace(self) -> "MarketplaceAPI":
        """Skills marketplace API."""
        if not self._marketplace:
            raise RuntimeError("Client not initialized. Use 'async with' context.")
        return self._marketplace

    @property
    def products(self) -> "ProductsAPI":
        """Products API."""
        if not self._products:
            raise RuntimeError("Client not initialized. Use 'async with' context.")
        return self._products

    @property
    def integrations(self) -> "IntegrationsAPI":
        """Third-party integrations API."""
        if not self._integrations:
            raise RuntimeError("Client not initialized. Use 'async with' context.")
        return self._integrations

    @property
    def payments(self) -> "PaymentsAPI":
        """Agent wallets and payments API."""
        if not self._payments:
            raise RuntimeError("Client not initialized. Use 'async with' context.")
        return self._payments

    @property
    def bloqs(self) -> "BloqsAPI":
        """Bloqs (knowledge bases) and ingestion API."""
        if not self._bloqs:
            raise RuntimeError("Client not initialized. Use 'async with' context.")
        return self._bloqs

    @property
    def schedules(self) -> "SchedulesAPI":
        """Scheduled agent jobs API."""
        if not self._schedules:
            raise RuntimeError("Client not initialized. Use 'async with' context.")
        return self._schedules

    @property
    def workflows(self) -> "WorkflowsAPI":
        """Workflow runs and human tasks API."""
        if not self._workflows:
            raise RuntimeError("Client not initialized. Use 'async with' context.")
        return self._workflows

    @property
    def automations(self) -> "AutomationsAPI":
        """Goal-driven automations API."""
        if not self._automations:
            raise RuntimeError("Client not initialized. Use 'async with' context.")
        return self._automations

    @property
    def usage(self) -> "UsageAPI":
        """Usage, credits and billing API."""
        if not self._usage:
            raise RuntimeError("Client not initialized. Use 'async with' context.")
        return self._usage

    @property
    def last_request_id(self) -> str | None:
        """X-Request-Id of the most recent response, for support tickets."""
        return self._http.last_request_id if self._http else None

    def as_user(self, user_id: int | str) -> "IRISClient":
        """Act as another user for all subsequent calls on this client.

        Returns:
            self, for chaining
        """
        self.config.user_id = _coerce_user_id(user_id)
        return self

    # HTTP methods
    async def _get(self, endpoint: str, **params) -> dict[str, Any]:
        """Make GET request."""
        return await self.http.get(endpoint, params or None)

    async def _post(self, endpoint: str, data: dict | None = None) -> dict[str, Any]:
        """Make POST request."""
        return await self.http.post(endpoint, data)

    async def _put(self, endpoint: str, data: dict | None = None) -> dict[str, Any]:
        """Make PUT request."""
        return await self.http.put(endpoint, data)

    async def _patch(self, endpoint: str, data: dict | None = None) -> dict[str, Any]:
        """Make PATCH request."""
        return await self.http.patch(endpoint, data)

    async def _delete(self, endpoint: str, **params) -> dict[str, Any]:
        """Make DELETE request."""
        return await self.http.delete(endpoint, params or None)

    async def _upload(
        self,
        endpoint: str,
        file_path: str | Path,
        metadata: dict | None = None,
    ) -> dict[str, Any]:
        """Upload a file as multipart form data."""
        return await self.http.upload(endpoint, file_path, metadata)

    # Account
    async def test_connection(self) -> bool:
        """Check the API is reachable and the key is accepted."""
        try:
            response = await self._get("/v1/health")
        except (NetworkError, APIError):
            return False
        payload = extract_payload(response, "data")
        return isinstance(payload, dict) and payload.get("status") == "ok"

    async def account(self) -> dict[str, Any]:
        """Get the authenticated account."""
        response = await self._get("/v1/user")
        return extract_payload(response, "data", "user")
