"""IRIS API client module.

Usage:
    from iris_sdk.api import IRISClient

    async with IRISClient.from_env() as iris:
        # Chat workflows (start + poll until done)
        result = await iris.chat.execute({"query": "Hello", "agent_id": 11})

        # Agents
        agents = await iris.agents.list()

        # Leads
        leads = await iris.leads.list(search="acme")

        # Knowledge bases
        jobs = await iris.bloqs.list_ingestion_jobs(40)

        # And more...

Credentials saved by 'iris config setup':
    async with IRISClient.from_credential_store() as iris:
        ok = await iris.test_connection()
"""

from .client import IRISClient
from ..config import IRISConfig
from .http import HTTPClient
from .payload import extract_payload, extract_list, extract_meta
from .chat import ChatAPI
from .agents import AgentsAPI
from .leads import LeadsAPI, DeliverablesAPI
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

__all__ = [
    "IRISClient",
    "IRISConfig",
    "HTTPClient",
    "extract_payload",
    "extract_list",
    "extract_meta",
    "ChatAPI",
    "AgentsAPI",
    "LeadsAPI",
    "DeliverablesAPI",
    "PhoneAPI",
    "RAGAPI",
    "SocialAPI",
    "MarketplaceAPI",
    "ProductsAPI",
    "IntegrationsAPI",
    "PaymentsAPI",
    "BloqsAPI",
    "SchedulesAPI",
    "WorkflowsAPI",
    "AutomationsAPI",
    "UsageAPI",
]
