"""Workflows API - Multi-step workflow runs with human-in-the-loop tasks."""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from typing import Any, Awaitable, Callable, TYPE_CHECKING, Union

from ..errors import PollingTimeoutError, WorkflowFailedError
from ..models.workflows import HumanTask, WorkflowRun, WorkflowRunCollection
from .payload import extract_list, extract_meta, extract_payload

if TYPE_CHECKING:
    from .client import IRISClient

logger = logging.getLogger(__name__)

RunCallback = Callable[[WorkflowRun], Union[None, Awaitable[None]]]


class WorkflowsAPI:
    """Workflow runs API for IRIS.

    A workflow run walks through saved steps server-side. Steps that need
    a person pause the run as ``awaiting_human`` with a pending task;
    approve(), reject() or provide_input() complete the task and continue.

    Usage:
        async with IRISClient.from_env() as iris:
            run = await iris.workflows.execute({"query": "Onboard Acme", "agent_id": 11})
            run = await iris.workflows.wait(run.id)

            if run.needs_human_input:
                print(run.pending_task.description)
                run = await iris.workflows.approve(run.id, "Looks good")
    """

    def __init__(self, client: "IRISClient"):
        self._client = client

    @property
    def _user_base(self) -> str:
        uid = self._client.config.require_user_id()
        return f"/api/v1/users/{uid}/bloqs"

    # Runs
    async def execute(self, params: dict[str, Any]) -> WorkflowRun:
        """Start a workflow run.

        Args:
            params: ``query`` (required) plus optional agent_id, workflow_id,
                bloq_id, conversation_history, require_approval, variables
                and metadata

        Returns:
            WorkflowRun as accepted by the server
        """
        if not params.get("query"):
            raise ValueError("query is required")
        base = self._user_base
        payload = {
            "agent_id": params.get("agent_id"),
            "workflow_id": params.get("workflow_id"),
            "query": params["query"],
            "bloq_id": params.get("bloq_id"),
            "conversation_history": params.get("conversation_history", []),
            "require_approval": params.get("require_approval", False),
            "variables": params.get("variables", {}),
            "metadata": params.get("metadata", {}),
        }
        response = await self._client._post(f"{base}/workflow-runs", payload)
        return WorkflowRun.from_dict(extract_payload(response, "data.run", "run", "data"))

    async def get_status(self, run_id: str) -> WorkflowRun:
        response = await self._client._get(f"{self._user_base}/workflow-runs/{run_id}")
        run = WorkflowRun.from_dict(extract_payload(response, "data.run", "run", "data"))
        if not run.id:
            run.id = str(run_id)
        return run

    async def runs(self, **params) -> WorkflowRunCollection:
        response = await self._client._get(f"{self._user_base}/workflow-runs", **params)
        return WorkflowRunCollection.from_items(
            extract_list(response, "data.data", "data", "runs"),
            WorkflowRun.from_dict,
            extract_meta(response),
        )

    async def get_logs(self, run_id: str) -> dict[str, Any]:
        return await self._client._get(f"{self._user_base}/workflow-runs/{run_id}/logs")

    async def continue_run(self, run_id: str, input: dict[str, Any] | None = None) -> WorkflowRun:
        """Resume a paused run, passing the human's input along."""
        response = await self._client._post(
            f"/api/v1/bloqs/workflow-runs/{run_id}/continue", {"input": input or {}}
        )
        run = WorkflowRun.from_dict(extract_payload(response, "data.run", "run", "data"))
        if not run.id:
            run.id = str(run_id)
        return run

    async def process_step(
        self, run_id: str, step_index: int, data: dict[str, Any] | None = None
    ) -> WorkflowRun:
        response = await self._client._post(
            f"/api/v1/bloqs/workflow-runs/{run_id}/process-step",
            {"step_index": step_index, "data": data or {}},
        )
        return WorkflowRun.from_dict(extract_payload(response, "data"))

    async def wait(self, run_id: str, on_progress: RunCallback | None = None) -> WorkflowRun:
        """Poll a run until it stops.

        Uses the client's ``polling_interval`` and ``max_polling_duration``.

        Returns:
            The run: completed, cancelled, or awaiting human input

        Raises:
            WorkflowFailedError: The run failed
            PollingTimeoutError: max_polling_duration elapsed
        """
        config = self._client.config
        started_at = time.monotonic()

        while True:
            run = await self.get_status(run_id)

            if on_progress is not None:
                result = on_progress(run)
                if inspect.isawaitable(result):
                    await result

            if run.is_failed:
                raise WorkflowFailedError(
                    f"Workflow run failed: {run.error or 'Unknown error'}",
                    workflow_id=str(run_id),
                    response_body=run,
                )

            if run.is_terminal or run.needs_human_input:
                return run

            elapsed = time.monotonic() - started_at
            if elapsed >= config.max_polling_duration:
                raise PollingTimeoutError(
                    f"Workflow run {run_id} timed out after {config.max_polling_duration:g} seconds",
                    workflow_id=str(run_id),
                    elapsed=elapsed,
                )

            await asyncio.sleep(config.polling_interval)

    # Human tasks
    async def get_task(self, task_id: str) -> HumanTask:
        response = await self._client._get(f"/api/v1/bloqs/workflow-human-tasks/{task_id}")
        return HumanTask.from_dict(extract_payload(response, "data.task", "task", "data"))

    async def complete_task(self, task_id: str, response: dict[str, Any]) -> bool:
        await self._client._post(f"/api/v1/bloqs/workflow-human-tasks/{task_id}/complete", response)
        return True

    async def provide_input(self, run_id: str, input: dict[str, Any]) -> WorkflowRun:
        """Answer the pending task of a run and continue it.

        Raises:
            ValueError: The run is not waiting for human input
        """
        run = await self.get_status(run_id)
        if not run.needs_human_input:
            raise ValueError(f"Workflow run {run_id} is not waiting for human input")
        await self.complete_task(run.pending_task.id, input)
        return await self.continue_run(run_id, input)

    async def approve(self, run_id: str, feedback: str | None = None) -> WorkflowRun:
        return await self.provide_input(run_id, {"approved": True, "feedback": feedback})

    async def reject(self, run_id: str, feedback: str | None = None) -> WorkflowRun:
        return await self.provide_input(run_id, {"approved": False, "feedback": feedback})

    # Definitions
    async def list(self, **params) -> dict[str, Any]:
        return await self._client._get(f"{self._user_base}/workflows", **params)

    async def update(self, workflow_id: int, data: dict[str, Any]) -> dict[str, Any]:
        return await self._client._put(f"{self._user_base}/workflows/{workflow_id}", data)

    async def generate(self, description: str, **options) -> dict[str, Any]:
        """Draft a workflow from a plain-language description."""
        response = await self._client._post(
            f"{self._user_base}/workflows/generate",
            {
                "description": description,
                "agent_id": options.get("agent_id"),
                "bloq_id": options.get("bloq_id"),
                "template_hints": options.get("template_hints", []),
            },
        )
        return extract_payload(response, "data.workflow", "workflow", "data")

    async def generate_webhook(self, workflow_id: int) -> dict[str, Any]:
        return await self._client._post(f"/api/v1/bloqs/workflow/{workflow_id}/webhook-url")

    # Templates
    async def templates(self, featured: bool = False, **filters) -> list[dict[str, Any]]:
        endpoint = "/api/v1/templates/featured" if featured else "/api/v1/templates"
        response = await self._client._get(endpoint, **filters)
        return extract_list(response, "data", "templates")

    async def import_template(self, slug: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        response = await self._client._post(
            f"/api/v1/templates/{slug}/import", {"variables": variables or {}}
        )
        return extract_payload(response, "data.workflow", "workflow", "data")

    # Callable workflows
    async def list_callable(self, public: bool = True, category: str | None = None) -> list[dict[str, Any]]:
        params: dict[str, Any] = {"public": public}
        if self._client.config.user_id is not None:
            params["user_id"] = self._client.config.user_id
        if category:
            params["category"] = category
        response = await self._client._get("/api/v1/workflows/callable", **params)
        return extract_list(response, "data", "workflows")

    async def execute_callable(
        self,
        callable_name: str,
        input: dict[str, Any] | None = None,
        context: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Run a published workflow by its callable name."""
        return await self._client._post(
            "/api/v1/workflows/execute-callable",
            {
                "callable_name": callable_name,
                "user_id": self._client.config.require_user_id(),
                "input": input or {},
                "context": context or {},
            },
        )
