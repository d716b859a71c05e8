"""IRIS result models."""

from .base import IRISModel, ModelCollection
from .chat import WorkflowStatus
from .agents import Agent, AgentCollection, ChatResponse
from .leads import Lead, LeadCollection
from .rag import SearchResult, SearchResultCollection, IndexResult, Document
from .social import SocialPublishResult, SocialStatusResult
from .products import Product, ProductCollection
from .integrations import Integration, IntegrationCollection, IntegrationTestResult
from .payments import Wallet, Transaction, TransactionCollection
from .workflows import AutomationRun, HumanTask, WorkflowRun, WorkflowRunCollection
from .bloqs import (
    Bloq,
    BloqCollection,
    IngestionJob,
    IngestionJobCollection,
    ScheduledJob,
    ScheduledJobCollection,
)

__all__ = [
    "IRISModel",
    "ModelCollection",
    "WorkflowStatus",
    "Agent",
    "AgentCollection",
    "ChatResponse",
    "Lead",
    "LeadCollection",
    "SearchResult",
    "SearchResultCollection",
    "IndexResult",
    "Document",
    "SocialPublishResult",
    "SocialStatusResult",
    "Product",
    "ProductCollection",
    "Integration",
    "IntegrationCollection",
    "IntegrationTestResult",
    "Wallet",
    "Transaction",
    "TransactionCollection",
    "Bloq",
    "BloqCollection",
    "IngestionJob",
    "IngestionJobCollection",
    "ScheduledJob",
    "ScheduledJobCollection",
    "HumanTask",
    "WorkflowRun",
    "WorkflowRunCollection",
    "AutomationRun",
]
