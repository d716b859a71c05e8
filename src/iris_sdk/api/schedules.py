"""Schedules API - Recurring agent tasks."""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

from ..models.bloqs import ScheduledJob, ScheduledJobCollection
from .payload import extract_list, extract_meta, extract_payload

if TYPE_CHECKING:
    from .client import IRISClient


class SchedulesAPI:
    """Scheduled jobs API for IRIS.

    Usage:
        async with IRISClient.from_env() as iris:
            job = await iris.schedules.create({
                "agent_id": 11,
                "task_name": "Daily digest",
                "prompt": "Summarize yesterday's new leads",
                "frequency": "daily",
                "time": "08:00",
            })
            await iris.schedules.run(job.id)
            runs = await iris.schedules.executions(job.id)
    """

    def __init__(self, client: "IRISClient"):
        self._client = client

    @property
    def _base(self) -> str:
        uid = self._client.config.require_user_id()
        return f"/api/v1/users/{uid}/bloqs/scheduled-jobs"

    async def list(self, **params) -> ScheduledJobCollection:
        """List scheduled jobs.

        Args:
            **params: agent_id, status, page, per_page
        """
        response = await self._client._get(self._base, **params)
        return ScheduledJobCollection.from_items(
            extract_list(response, "data.data", "data", "jobs"),
            ScheduledJob.from_dict,
            extract_meta(response),
        )

    async def for_agent(self, agent_id: int) -> ScheduledJobCollection:
        return await self.list(agent_id=agent_id)

    async def get(self, job_id: int) -> ScheduledJob:
        response = await self._client._get(f"{self._base}/{job_id}")
        return ScheduledJob.from_dict(extract_payload(response, "data.job", "job", "data"))

    async def create(self, data: dict[str, Any]) -> ScheduledJob:
        response = await self._client._post(self._base, data)
        return ScheduledJob.from_dict(extract_payload(response, "data.job", "job", "data"))

    async def update(self, job_id: int, data: dict[str, Any]) -> ScheduledJob:
        response = await self._client._put(f"{self._base}/{job_id}", data)
        return ScheduledJob.from_dict(extract_payload(response, "data.job", "job", "data"))

    async def delete(self, job_id: int) -> dict[str, Any]:
        return await self._client._delete(f"{self._base}/{job_id}")

    async def run(self, job_id: int) -> dict[str, Any]:
        """Trigger a job now, outside its schedule."""
        response = await self._client._post(f"{self._base}/{job_id}/run")
        return extract_payload(response, "data")

    async def executions(self, job_id: int, **params) -> list[dict[str, Any]]:
        """Past runs of a job."""
        response = await self._client._get(f"{self._base}/{job_id}/executions", **params)
        return extract_list(response, "data.data", "data", "executions")
