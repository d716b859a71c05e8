"""Shared test fixtures for the IRIS SDK test suite."""

import pytest
from unittest.mock import AsyncMock, MagicMock
from typing import Any

# Sample IDs used across tests
SAMPLE_API_KEY = "sk_test_abcdef123456"
SAMPLE_USER_ID = 42
SAMPLE_AGENT_ID = 11
SAMPLE_BLOQ_ID = 40
SAMPLE_LEAD_ID = 501
SAMPLE_JOB_ID = 900
SAMPLE_WORKFLOW_ID = "wf_abc123"
SAMPLE_INTEGRATION_ID = 7
SAMPLE_REQUEST_ID = "req_789xyz"


# ============================================================================
# Mock Response Data
# ============================================================================

MOCK_AGENT = {
    "id": SAMPLE_AGENT_ID,
    "name": "Support Bot",
    "prompt": "You are a helpful support agent.",
    "type": "ai_bloq",
    "model": "gpt-4o-mini",
    "bloq_id": SAMPLE_BLOQ_ID,
    "settings": {
        "agentIntegrations": {"gmail": True, "slack": False, "google-calendar": True},
        "capabilities": ["web_search"],
    },
    "created_at": "2024-01-15T10:00:00Z",
}

MOCK_LEAD = {
    "id": SAMPLE_LEAD_ID,
    "name": "Ada Lovelace",
    "email": "ada@example.com",
    "phone": "+15551234567",
    "company": "Analytical Engines",
    "status": "new",
    "score": 86,
    "tags": ["vip", {"name": "conference"}],
    "bloq_id": SAMPLE_BLOQ_ID,
    "created_at": "2024-01-15T10:00:00Z",
}

MOCK_WORKFLOW_RUNNING = {
    "workflow_id": SAMPLE_WORKFLOW_ID,
    "status": "running",
    "progress": 40,
    "current_step": "Searching knowledge base",
}

MOCK_WORKFLOW_COMPLETED = {
    "workflow_id": SAMPLE_WORKFLOW_ID,
    "status": "completed",
    "progress": 100,
    "summary": "You have 3 new leads this week.",
    "response": "You have 3 new leads this week.",
}

MOCK_WORKFLOW_PAUSED = {
    "workflow_id": SAMPLE_WORKFLOW_ID,
    "status": "paused",
    "requires_approval": True,
    "summary": "About to send 3 emails. Approve?",
}

MOCK_WORKFLOW_FAILED = {
    "workflow_id": SAMPLE_WORKFLOW_ID,
    "status": "failed",
    "error": "boom",
}

MOCK_INGESTION_JOB = {
    "id": SAMPLE_JOB_ID,
    "bloq_id": SAMPLE_BLOQ_ID,
    "source_type": "google_drive",
    "source_path": "folder-1234567890-abcdefghijklmnop",
    "status": "processing",
    "total_files": 10,
    "processed_files": 4,
    "successful_files": 3,
    "failed_files": 1,
    "error_log": [{"file": "broken.pdf", "error": "unreadable"}],
    "created_at": "2024-01-15T10:00:00Z",
}

MOCK_WALLET = {
    "id": 3,
    "agent_id": SAMPLE_AGENT_ID,
    "user_id": SAMPLE_USER_ID,
    "balance_cents": 12550,
    "currency": "credits",
    "status": "active",
}

MOCK_TRANSACTION = {
    "transaction_id": "txn_001",
    "agent_id": SAMPLE_AGENT_ID,
    "wallet_id": 3,
    "type": "fund",
    "amount_cents": 2000,
    "status": "completed",
    "description": "Top-up",
    "created_at": "2024-01-15T10:00:00Z",
}

MOCK_INTEGRATION = {
    "id": SAMPLE_INTEGRATION_ID,
    "type": "gmail",
    "name": "Gmail",
    "status": "active",
    "capabilities": ["send_email", "read_email"],
}

MOCK_PRODUCT = {
    "id": 70,
    "title": "Consulting hour",
    "price": 150,
    "retail_price": 200,
    "quantity": 5,
    "tags": "consulting,hourly",
    "is_active": 1,
}

MOCK_SEARCH_RESULT = {
    "id": "vec_1",
    "content": "Refunds take 5 business days.",
    "score": 0.91,
    "metadata": {"title": "Refund policy", "source": "faq.md"},
}


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Keep the developer's IRIS_* variables and .env out of tests."""
    import os

    for name in list(os.environ):
        if name.startswith(("IRIS_", "FL_API_")):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def mock_config():
    """Create an IRISConfig that polls and retries without sleeping."""
    from iris_sdk.config import IRISConfig
    return IRISConfig(
        api_key=SAMPLE_API_KEY,
        user_id=SAMPLE_USER_ID,
        polling_interval=0,
        retry_backoff=0,
    )


@pytest.fixture
def mock_http():
    """Create a mock HTTPClient returning an empty success body."""
    http = MagicMock()
    http.get = AsyncMock(return_value={})
    http.post = AsyncMock(return_value={})
    http.put = AsyncMock(return_value={})
    http.patch = AsyncMock(return_value={})
    http.delete = AsyncMock(return_value={"success": True})
    http.upload = AsyncMock(return_value={})
    http.aclose = AsyncMock()
    http.last_request_id = None
    return http


@pytest.fixture
def mock_iris_client(mock_config, mock_http):
    """Create an IRISClient with initialized APIs over a mock transport."""
    from iris_sdk.api.client import IRISClient
    from iris_sdk.api.chat import ChatAPI
    from iris_sdk.api.agents import AgentsAPI
    from iris_sdk.api.leads import LeadsAPI
    from iris_sdk.api.phone import PhoneAPI
    from iris_sdk.api.rag import RAGAPI
    from iris_sdk.api.social import SocialAPI
    from iris_sdk.api.marketplace import MarketplaceAPI
    from iris_sdk.api.products import ProductsAPI
    from iris_sdk.api.integrations import IntegrationsAPI
    from iris_sdk.api.payments import PaymentsAPI
    from iris_sdk.api.bloqs import BloqsAPI
    from iris_sdk.api.schedules import SchedulesAPI
    from iris_sdk.api.workflows import WorkflowsAPI
    from iris_sdk.api.automations import AutomationsAPI
    from iris_sdk.api.usage import UsageAPI

    client = IRISClient(mock_config)
    client._http = mock_http
    client._chat = ChatAPI(client)
    client._agents = AgentsAPI(client)
    client._leads = LeadsAPI(client)
    client._phone = PhoneAPI(client)
    client._rag = RAGAPI(client)
    client._social = SocialAPI(client)
    client._marketplace = MarketplaceAPI(client)
    client._products = ProductsAPI(client)
    client._integrations = IntegrationsAPI(client)
    client._payments = PaymentsAPI(client)
    client._bloqs = BloqsAPI(client)
    client._schedules = SchedulesAPI(client)
    client._workflows = WorkflowsAPI(client)
    client._automations = AutomationsAPI(client)
    client._usage = UsageAPI(client)

    return client


@pytest.fixture
def json_response():
    """Factory fixture to create httpx responses for MockTransport handlers."""
    import httpx

    def _create(data: Any, status_code: int = 200, headers: dict[str, str] | None = None):
        return httpx.Response(status_code, json=data, headers=headers or {})
    return _create


# ============================================================================
# CLI Testing Fixtures
# ============================================================================

@pytest.fixture
def cli_runner():
    """Create a Typer CLI test runner."""
    from typer.testing import CliRunner
    return CliRunner()


@pytest.fixture
def credential_store(tmp_path, monkeypatch):
    """Point the CLI's CredentialStore at a temporary directory."""
    from iris_sdk.auth.storage import CredentialStore

    store = CredentialStore(tmp_path / ".iris")
    monkeypatch.setattr("iris_sdk.cli.CredentialStore", lambda: store)
    return store


@pytest.fixture
def cli_auth():
    """Credential flags accepted by every API-backed command."""
    return ["--api-key", SAMPLE_API_KEY, "--user-id", str(SAMPLE_USER_ID)]


@pytest.fixture
def mock_iris_context():
    """Context manager target for IRISClient(config) in CLI commands."""
    from iris_sdk.models import (
        AgentCollection,
        Agent,
        IngestionJob,
        IngestionJobCollection,
        IntegrationCollection,
        Integration,
        IntegrationTestResult,
        LeadCollection,
        Lead,
        SearchResultCollection,
        SearchResult,
        Transaction,
        TransactionCollection,
        Wallet,
        WorkflowStatus,
    )

    mock_client = MagicMock()
    mock_client.config = MagicMock()
    mock_client.config.user_id = SAMPLE_USER_ID

    mock_client.chat = MagicMock()
    mock_client.chat.execute = AsyncMock(
        return_value=WorkflowStatus.from_dict(MOCK_WORKFLOW_COMPLETED)
    )
    mock_client.chat.resume = AsyncMock(return_value={"success": True})
    mock_client.chat.get_status = AsyncMock(
        return_value=WorkflowStatus.from_dict(MOCK_WORKFLOW_RUNNING)
    )

    mock_client.bloqs = MagicMock()
    mock_client.bloqs.list_ingestion_jobs = AsyncMock(
        return_value=IngestionJobCollection(
            [IngestionJob.from_dict(MOCK_INGESTION_JOB)],
            {"current_page": 1, "last_page": 2, "total_pages": 2, "total": 21},
        )
    )
    mock_client.bloqs.get_ingestion_status = AsyncMock(
        return_value=IngestionJob.from_dict(MOCK_INGESTION_JOB)
    )
    mock_client.bloqs.cancel_ingestion_job = AsyncMock(return_value={"success": True})
    mock_client.bloqs.ingest_folder = AsyncMock(return_value={"job_id": SAMPLE_JOB_ID})

    mock_client.agents = MagicMock()
    mock_client.agents.list = AsyncMock(
        return_value=AgentCollection([Agent.from_dict(MOCK_AGENT)])
    )
    mock_client.agents.get = AsyncMock(return_value=Agent.from_dict(MOCK_AGENT))

    mock_client.leads = MagicMock()
    mock_client.leads.list = AsyncMock(
        return_value=LeadCollection([Lead.from_dict(MOCK_LEAD)], {"total": 1})
    )
    mock_client.leads.get = AsyncMock(return_value=Lead.from_dict(MOCK_LEAD))

    mock_client.phone = MagicMock()
    mock_client.phone.list = AsyncMock(
        return_value=[{"id": "ph_1", "number": "+15550001111", "name": "Main line", "agent_id": 11}]
    )
    mock_client.phone.providers = AsyncMock(
        return_value=[{"name": "vapi", "available": True}, {"name": "telnyx", "available": False}]
    )

    mock_client.rag = MagicMock()
    mock_client.rag.query = AsyncMock(
        return_value=SearchResultCollection([SearchResult.from_dict(MOCK_SEARCH_RESULT)])
    )

    mock_client.marketplace = MagicMock()
    mock_client.marketplace.search = AsyncMock(
        return_value=[{"slug": "gcal-sync", "name": "Calendar Sync", "category": "productivity"}]
    )
    mock_client.marketplace.install = AsyncMock(return_value={"installed": True})

    mock_client.integrations = MagicMock()
    mock_client.integrations.list = AsyncMock(
        return_value=IntegrationCollection([Integration.from_dict(MOCK_INTEGRATION)])
    )
    mock_client.integrations.test = AsyncMock(
        return_value=IntegrationTestResult.from_dict({"success": True, "latency_ms": 120})
    )

    mock_client.payments = MagicMock()
    mock_client.payments.get_wallet = AsyncMock(return_value=Wallet.from_dict(MOCK_WALLET))
    mock_client.payments.get_transactions = AsyncMock(
        return_value=TransactionCollection([Transaction.from_dict(MOCK_TRANSACTION)])
    )

    mock_client.test_connection = AsyncMock(return_value=True)

    return mock_client


@pytest.fixture
def mock_client_factory(mock_iris_context):
    """Create a factory that produces mock IRISClient context managers."""
    def _create():
        mock_instance = MagicMock()
        mock_instance.__aenter__ = AsyncMock(return_value=mock_iris_context)
        mock_instance.__aexit__ = AsyncMock(return_value=None)
        return mock_instance
    return _create
