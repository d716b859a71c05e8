"""Automations API - Goal-driven agent automations and their runs."""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from typing import Any, Awaitable, Callable, TYPE_CHECKING, Union

from ..errors import PollingTimeoutError
from ..models.workflows import AutomationRun
from .payload import extract_payload

if TYPE_CHECKING:
    from .client import IRISClient

logger = logging.getLogger(__name__)

AutomationCallback = Callable[[AutomationRun], Union[None, Awaitable[None]]]

AGENTIC_EXECUTION_MODE = "agentic_v6"
DEFAULT_AUTOMATION_TIMEOUT = 300.0
DEFAULT_AUTOMATION_POLL_INTERVAL = 2.0


def validate_automation(config: dict[str, Any]) -> dict[str, Any]:
    """Check an automation definition before sending it.

    Returns:
        {"valid": bool, "errors": [str, ...]}
    """
    errors = []
    for key in ("name", "agent_id", "goal"):
        if not config.get(key):
            errors.append(f"{key} is required")

    outcomes = config.get("outcomes")
    if not outcomes or not isinstance(outcomes, list):
        errors.append("outcomes array is required")
    else:
        for i, outcome in enumerate(outcomes):
            if not outcome.get("type"):
                errors.append(f"outcomes[{i}].type is required")
            if not outcome.get("description"):
                errors.append(f"outcomes[{i}].description is required")
            if outcome.get("type") == "email" and not (outcome.get("destination") or {}).get("to"):
                errors.append(f"outcomes[{i}].destination.to is required for email type")

    return {"valid": not errors, "errors": errors}


class AutomationsAPI:
    """Automations API for IRIS.

    An automation gives an agent a goal and the outcomes it must deliver
    (emails, documents, ...); each execution is a run polled to completion.

    Usage:
        async with IRISClient.from_env() as iris:
            automation = await iris.automations.create({
                "name": "Weekly digest",
                "agent_id": 11,
                "goal": "Summarize new leads",
                "outcomes": [{"type": "email", "description": "Digest",
                              "destination": {"to": "me@example.com"}}],
            })
            started = await iris.automations.execute(automation["id"])
            run = await iris.automations.wait_for_completion(started["run_id"])
            print(run.status, run.outcomes)
    """

    def __init__(self, client: "IRISClient"):
        self._client = client

    validate = staticmethod(validate_automation)

    async def create(self, params: dict[str, Any]) -> dict[str, Any]:
        """Create an automation.

        Raises:
            ValueError: The definition fails validate()
        """
        check = validate_automation(params)
        if not check["valid"]:
            raise ValueError("Invalid automation: " + "; ".join(check["errors"]))

        payload = {
            "user_id": self._client.config.require_user_id(),
            "name": params["name"],
            "description": params.get("description") or f"V6 Automation: {params['name']}",
            "execution_mode": AGENTIC_EXECUTION_MODE,
            "agent_id": params["agent_id"],
            "agent_config": {
                "goal": params["goal"],
                "outcomes": params["outcomes"],
                "successCriteria": params.get("success_criteria", []),
                "maxIterations": params.get("max_iterations", 10),
            },
        }
        response = await self._client._post("/api/v1/workflows/templates", payload)
        return extract_payload(response, "data")

    async def get(self, automation_id: int) -> dict[str, Any]:
        uid = self._client.config.require_user_id()
        response = await self._client._get(f"/api/v1/users/{uid}/workflows/{automation_id}")
        return extract_payload(response, "data")

    async def list(self, agent_id: int | None = None, page: int | None = None) -> dict[str, Any]:
        uid = self._client.config.require_user_id()
        return await self._client._get(
            f"/api/v1/users/{uid}/workflows",
            execution_mode=AGENTIC_EXECUTION_MODE,
            agent_id=agent_id,
            page=page,
        )

    async def update(self, automation_id: int, updates: dict[str, Any]) -> dict[str, Any]:
        response = await self._client._put(f"/api/v1/workflows/{automation_id}", updates)
        return extract_payload(response, "data")

    async def delete(self, automation_id: int) -> bool:
        await self._client._delete(f"/api/v1/workflows/{automation_id}")
        return True

    # Runs
    async def execute(self, automation_id: int, inputs: dict[str, Any] | None = None) -> dict[str, Any]:
        """Start a run. Returns {"run_id": ..., ...}."""
        response = await self._client._post(
            f"/api/v1/workflows/{automation_id}/execute/v6", {"inputs": inputs or {}}
        )
        return extract_payload(response, "data")

    async def status(self, run_id: str) -> AutomationRun:
        response = await self._client._get(f"/api/v1/workflows/runs/{run_id}")
        run = AutomationRun.from_dict(extract_payload(response, "data"))
        if not run.id:
            run.id = str(run_id)
        return run

    async def runs(
        self,
        automation_id: int | None = None,
        status: str | None = None,
        page: int | None = None,
        per_page: int | None = None,
    ) -> dict[str, Any]:
        return await self._client._get(
            "/api/v1/workflows/runs",
            workflow_id=automation_id,
            status=status,
            page=page,
            per_page=per_page,
        )

    async def cancel(self, run_id: str) -> bool:
        await self._client._post(f"/api/v1/workflows/runs/{run_id}/cancel")
        return True

    async def get_outcomes(self, run_id: str) -> list[dict[str, Any]]:
        return (await self.status(run_id)).outcomes

    async def wait_for_completion(
        self,
        run_id: str,
        on_progress: AutomationCallback | None = None,
        timeout: float = DEFAULT_AUTOMATION_TIMEOUT,
        poll_interval: float = DEFAULT_AUTOMATION_POLL_INTERVAL,
    ) -> AutomationRun:
        """Poll a run until it finishes.

        A failed run is returned rather than raised; check ``run.status``.

        Returns:
            The finished AutomationRun (completed, failed or cancelled)

        Raises:
            PollingTimeoutError: timeout elapsed
        """
        started_at = time.monotonic()

        while True:
            run = await self.status(run_id)

            if on_progress is not None:
                result = on_progress(run)
                if inspect.isawaitable(result):
                    await result

            if run.is_finished:
                logger.info("Automation run %s finished with status %s", run_id, run.status)
                return run

            elapsed = time.monotonic() - started_at
            if elapsed >= timeout:
                raise PollingTimeoutError(
                    f"Automation run timeout after {timeout:g} seconds. Current status: {run.status}",
                    workflow_id=str(run_id),
                    elapsed=elapsed,
                )

            await asyncio.sleep(poll_interval)
