"""Chat API - Start, poll and resume server-side chat workflows."""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from typing import Any, Awaitable, Callable, TYPE_CHECKING, Union

from ..errors import APIError, PollingTimeoutError, WorkflowFailedError
from ..models.chat import WorkflowStatus
from .payload import extract_payload

if TYPE_CHECKING:
    from .client import IRISClient

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[WorkflowStatus], Union[None, Awaitable[None]]]


def _option(options: dict[str, Any], *keys: str, default: Any = None) -> Any:
    """First present option among snake_case / camelCase spellings."""
    for key in keys:
        if options.get(key) is not None:
            return options[key]
    return default


class ChatAPI:
    """Chat workflows API for IRIS.

    A chat is a server-side workflow. ``start`` fires it and returns a
    workflow id immediately; ``execute`` fires it and polls until it
    completes, fails, pauses for approval or the polling deadline passes.

    Usage:
        async with IRISClient.from_env() as iris:
            # Fire and wait, with progress updates
            result = await iris.chat.execute(
                {"query": "Summarize my leads", "agent_id": 11},
                on_progress=lambda s: print(s.status, s.current_step),
            )
            print(result.summary)

            # Fire and poll later
            started = await iris.chat.start({"query": "Draft a post", "agent_id": 11})
            status = await iris.chat.get_status(started["workflow_id"])

            # Continue a workflow paused for approval
            await iris.chat.resume(status.workflow_id, {"approved": True})
    """

    def __init__(self, client: "IRISClient"):
        self._client = client

    @property
    def _user_id(self) -> int:
        return self._client.config.require_user_id()

    async def start(self, options: dict[str, Any]) -> dict[str, Any]:
        """Start a chat workflow without waiting for it.

        Args:
            options: ``query`` and ``agent_id`` (required), plus optional
                ``conversation_history``, ``bloq_id``, ``uploaded_files``,
                ``enable_rag`` and ``context_payload``. camelCase keys are
                accepted too.

        Returns:
            {"workflow_id": ..., ...}
        """
        user_id = self._user_id
        query = _option(options, "query")
        agent_id = _option(options, "agent_id", "agentId")
        if not query:
            raise ValueError("query is required")
        if agent_id is None:
            raise ValueError("agent_id is required")

        bloq_id = _option(options, "bloq_id", "bloqId")
        payload = {
            "query": query,
            "agentId": agent_id,
            "userId": user_id,
            "conversationHistory": _option(
                options,
                "conversation_history",
                "conversationHistory",
                default=[{"role": "user", "content": query}],
            ),
            "bloqId": str(bloq_id) if bloq_id is not None else None,
            "uploadedFiles": _option(options, "uploaded_files", "uploadedFiles", default=[]),
            "enableRAG": _option(options, "enable_rag", "enableRAG", default=True),
            "contextPayload": _option(
                options, "context_payload", "contextPayload", default={"source": "sdk"}
            ),
        }
        payload = {k: v for k, v in payload.items() if v is not None}

        response = await self._client._post("/api/chat/start", payload)
        # Some deployments put workflow_id on the envelope, others under "data"
        if "workflow_id" in response or "workflowId" in response:
            return response
        return extract_payload(response, "data")

    async def get_status(self, workflow_id: str) -> WorkflowStatus:
        """Get the current snapshot of a workflow.

        Args:
            workflow_id: ID returned by start()

        Returns:
            WorkflowStatus
        """
        response = await self._client._get(f"/api/workflows/{workflow_id}")
        # Flat snapshots may carry their own "data" (step results)
        if isinstance(response, dict) and "status" in response:
            data = response
        else:
            data = extract_payload(response, "data", "workflow")
        status = WorkflowStatus.from_dict(data)
        if status.workflow_id is None:
            status.workflow_id = str(workflow_id)
        return status

    async def execute(
        self,
        options: dict[str, Any],
        on_progress: ProgressCallback | None = None,
    ) -> WorkflowStatus:
        """Start a workflow and poll until it reaches a stopping point.

        Each poll fetches the status, hands it to ``on_progress``, then
        decides: completed returns, failed raises, paused-for-approval
        returns, and otherwise the deadline is checked before sleeping
        ``config.polling_interval`` seconds.

        Args:
            options: Same as start()
            on_progress: Called with every fetched snapshot; may be async

        Returns:
            Final WorkflowStatus (completed, or paused awaiting approval)

        Raises:
            WorkflowFailedError: Server reported the workflow failed
            PollingTimeoutError: config.max_polling_duration elapsed
        """
        started = await self.start(options)
        workflow_id = (
            started.get("workflow_id") or started.get("workflowId")
            if isinstance(started, dict)
            else None
        )
        if not workflow_id:
            raise APIError("Chat start response did not include a workflow_id", response_body=started)

        config = self._client.config
        started_at = time.monotonic()
        logger.debug("Polling chat workflow %s", workflow_id)

        while True:
            status = await self.get_status(workflow_id)

            if on_progress is not None:
                result = on_progress(status)
                if inspect.isawaitable(result):
                    await result

            if status.is_completed:
                return status

            if status.is_failed:
                raise WorkflowFailedError(
                    f"Chat workflow failed: {status.failure_reason}",
                    workflow_id=str(workflow_id),
                    response_body=status,
                )

            if status.needs_approval:
                logger.info("Workflow %s paused awaiting approval", workflow_id)
                return status

            elapsed = time.monotonic() - started_at
            if elapsed >= config.max_polling_duration:
                raise PollingTimeoutError(
                    f"Chat execution timed out after {config.max_polling_duration:g} seconds. "
                    f"Workflow ID: {workflow_id}",
                    workflow_id=str(workflow_id),
                    elapsed=elapsed,
                )

            await asyncio.sleep(config.polling_interval)

    async def resume(self, workflow_id: str, feedback: dict[str, Any]) -> dict[str, Any]:
        """Resume a workflow paused for human approval.

        Does not wait for the workflow; call get_status() or execute()
        again to keep watching it.

        Args:
            workflow_id: Paused workflow ID
            feedback: Approval payload, e.g. {"approved": True, "notes": "..."}

        Returns:
            Server acknowledgement
        """
        return await self._client._post(
            "/api/chat/resume",
            {"workflow_id": workflow_id, "feedback": feedback},
        )

    async def summarize(
        self,
        messages: list[dict[str, Any]],
        keep_recent: int = 4,
        threshold: int = 20,
    ) -> dict[str, Any]:
        """Compress a long conversation history into a summary."""
        return await self._client._post(
            "/api/chat/summarize",
            {"messages": messages, "keepRecent": keep_recent, "threshold": threshold},
        )

    async def history(self, **params) -> dict[str, Any]:
        """List past workflows for the current user."""
        return await self._client._get(f"/api/users/{self._user_id}/workflows", **params)

    async def stats(self) -> dict[str, Any]:
        """Workflow statistics for the current user."""
        return await self._client._get(f"/api/users/{self._user_id}/workflows/stats")
