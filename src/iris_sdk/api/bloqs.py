"""Bloqs API - Knowledge bases and bulk folder ingestion into them."""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from typing import Any, Awaitable, Callable, TYPE_CHECKING, Union

from ..errors import IRISError, PollingTimeoutError
from ..models.bloqs import Bloq, BloqCollection, IngestionJob, IngestionJobCollection
from .payload import extract_list, extract_meta, extract_payload

if TYPE_CHECKING:
    from .client import IRISClient

logger = logging.getLogger(__name__)

IngestionCallback = Callable[[IngestionJob], Union[None, Awaitable[None]]]

DEFAULT_INGESTION_POLL_INTERVAL = 2.0
DEFAULT_INGESTION_TIMEOUT = 3600.0


class BloqsAPI:
    """Bloqs API for IRIS.

    A bloq is a knowledge base agents retrieve from. Large sources (Google
    Drive folders, Dropbox, S3 prefixes) are loaded through ingestion jobs
    that run server-side.

    Usage:
        async with IRISClient.from_env() as iris:
            bloq = await iris.bloqs.create("Support docs")

            started = await iris.bloqs.ingest_folder(
                bloq.id, "google_drive", "folder-id-123", recursive=True
            )
            job = await iris.bloqs.wait_for_ingestion(
                started["job_id"],
                on_progress=lambda j: print(f"{j.progress}%"),
            )
            print(job.successful_files, "files indexed")
    """

    def __init__(self, client: "IRISClient"):
        self._client = client

    @property
    def _base(self) -> str:
        uid = self._client.config.require_user_id()
        return f"/api/v1/user/{uid}/bloqs"

    # Bloqs
    async def list(self, **params) -> BloqCollection:
        response = await self._client._get(self._base, **params)
        return BloqCollection.from_items(
            extract_list(response, "data.data", "data", "bloqs"),
            Bloq.from_dict,
            extract_meta(response),
        )

    async def get(self, bloq_id: int) -> Bloq:
        response = await self._client._get(f"{self._base}/{bloq_id}")
        return Bloq.from_dict(extract_payload(response, "data.bloq", "bloq", "data"))

    async def create(self, name: str, description: str | None = None, **options) -> Bloq:
        payload: dict[str, Any] = {"name": name, **options}
        if description is not None:
            payload["description"] = description
        response = await self._client._post(self._base, payload)
        return Bloq.from_dict(extract_payload(response, "data.bloq", "bloq", "data"))

    # Ingestion
    async def ingest_folder(
        self,
        bloq_id: int,
        source_type: str,
        source_path: str,
        **options,
    ) -> dict[str, Any]:
        """Start ingesting a remote folder into a bloq.

        Args:
            bloq_id: Target bloq
            source_type: google_drive, dropbox, s3, ...
            source_path: Folder ID or path at the source
            **options: recursive, file_types, max_files, ...

        Returns:
            {"job_id": ..., ...}
        """
        response = await self._client._post(
            f"/api/v1/bloqs/{bloq_id}/ingest-folder",
            {"source_type": source_type, "source_path": source_path, **options},
        )
        return extract_payload(response, "data")

    async def get_ingestion_status(self, job_id: int) -> IngestionJob:
        response = await self._client._get(f"/api/v1/ingestion-jobs/{job_id}/status")
        return IngestionJob.from_dict(extract_payload(response, "data.job", "job", "data"))

    async def list_ingestion_jobs(
        self,
        bloq_id: int,
        limit: int = 20,
        page: int = 1,
        status: str | None = None,
    ) -> IngestionJobCollection:
        """List ingestion jobs for a bloq, newest first.

        The server paginates with ``total_pages``; it is exposed as
        ``last_page`` in the collection meta.
        """
        params: dict[str, Any] = {"limit": limit, "page": page}
        if status:
            params["status"] = status
        response = await self._client._get(f"/api/v1/bloqs/{bloq_id}/ingestion-jobs", **params)
        pagination = extract_payload(response, "pagination", "data.pagination", default={})
        meta = dict(pagination) if isinstance(pagination, dict) else {}
        if "total_pages" in meta:
            meta.setdefault("last_page", meta["total_pages"])
        return IngestionJobCollection.from_items(
            extract_list(response, "jobs", "data.jobs", "data"),
            IngestionJob.from_dict,
            meta,
        )

    async def cancel_ingestion_job(self, job_id: int) -> dict[str, Any]:
        return await self._client._post(f"/api/v1/ingestion-jobs/{job_id}/cancel")

    async def retry_failed_files(self, job_id: int) -> dict[str, Any]:
        """Re-queue only the files that failed in a finished job."""
        return await self._client._post(f"/api/v1/ingestion-jobs/{job_id}/retry")

    async def wait_for_ingestion(
        self,
        job_id: int,
        on_progress: IngestionCallback | None = None,
        timeout: float | None = None,
        poll_interval: float = DEFAULT_INGESTION_POLL_INTERVAL,
    ) -> IngestionJob:
        """Poll an ingestion job until it finishes.

        Args:
            job_id: Job to watch
            on_progress: Called with every fetched snapshot; may be async
            timeout: Seconds before giving up (default one hour)
            poll_interval: Seconds between polls

        Returns:
            The finished IngestionJob (completed, partial or cancelled)

        Raises:
            IRISError: The job failed
            PollingTimeoutError: timeout elapsed
        """
        deadline = DEFAULT_INGESTION_TIMEOUT if timeout is None else timeout
        started_at = time.monotonic()

        while True:
            job = await self.get_ingestion_status(job_id)

            if on_progress is not None:
                result = on_progress(job)
                if inspect.isawaitable(result):
                    await result

            if job.is_failed:
                raise IRISError(f"Ingestion job failed: {job.failure_details()}", response_body=job)

            if job.is_finished:
                logger.info("Ingestion job %s finished with status %s", job_id, job.status)
                return job

            elapsed = time.monotonic() - started_at
            if elapsed >= deadline:
                raise PollingTimeoutError(
                    f"Ingestion job {job_id} timed out after {deadline:g} seconds",
                    workflow_id=str(job_id),
                    elapsed=elapsed,
                )

            await asyncio.sleep(poll_interval)
