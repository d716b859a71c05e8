"""Bloq (knowledge base), ingestion job and scheduled job models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .base import IRISModel, ModelCollection, as_float, as_int, as_list

FINISHED_INGESTION_STATUSES = ("completed", "partial", "failed", "cancelled")


@dataclass
class Bloq(IRISModel):
    id: int = 0
    name: str = ""
    description: str | None = None
    user_id: int | None = None
    created_at: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Bloq":
        return cls(
            attributes=cls._copy(data),
            id=as_int(data.get("id"), 0),
            name=data.get("name") or data.get("title") or "",
            description=data.get("description"),
            user_id=as_int(data.get("user_id")),
            created_at=data.get("created_at"),
        )


class BloqCollection(ModelCollection[Bloq]):
    pass


@dataclass
class IngestionJob(IRISModel):
    """Folder ingestion job feeding files into a bloq."""

    id: int = 0
    bloq_id: int | None = None
    source_type: str = ""
    source_path: str = ""
    status: str = ""
    total_files: int = 0
    processed_files: int = 0
    successful_files: int = 0
    failed_files: int = 0
    progress_percent: float | None = None
    error_log: list[dict[str, Any]] = field(default_factory=list)
    created_at: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "IngestionJob":
        return cls(
            attributes=cls._copy(data),
            id=as_int(data.get("id", data.get("job_id")), 0),
            bloq_id=as_int(data.get("bloq_id")),
            source_type=data.get("source_type") or "",
            source_path=data.get("source_path") or "",
            status=data.get("status") or "",
            total_files=as_int(data.get("total_files"), 0),
            processed_files=as_int(data.get("processed_files"), 0),
            successful_files=as_int(data.get("successful_files"), 0),
            failed_files=as_int(data.get("failed_files"), 0),
            progress_percent=as_float(data.get("progress_percent")),
            error_log=[e for e in as_list(data.get("error_log")) if isinstance(e, dict)],
            created_at=data.get("created_at"),
        )

    @property
    def progress(self) -> float:
        """Percent complete, computed from file counts when the server omits it."""
        if self.progress_percent is not None:
            return self.progress_percent
        if self.total_files == 0:
            return 0.0
        return round(self.processed_files / self.total_files * 100, 1)

    @property
    def is_finished(self) -> bool:
        return self.status in FINISHED_INGESTION_STATUSES

    @property
    def is_failed(self) -> bool:
        return self.status == "failed"

    def failure_details(self) -> str:
        return ", ".join(
            f"{entry.get('file', '?')}: {entry.get('error', 'unknown error')}" for entry in self.error_log
        )


class IngestionJobCollection(ModelCollection[IngestionJob]):
    pass


@dataclass
class ScheduledJob(IRISModel):
    """Recurring agent task."""

    id: int = 0
    agent_id: int | None = None
    task_name: str = ""
    prompt: str | None = None
    frequency: str | None = None
    time: str | None = None
    status: str | None = None
    next_run_at: str | None = None
    last_run_at: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScheduledJob":
        return cls(
            attributes=cls._copy(data),
            id=as_int(data.get("id"), 0),
            agent_id=as_int(data.get("agent_id")),
            task_name=data.get("task_name") or data.get("name") or "",
            prompt=data.get("prompt"),
            frequency=data.get("frequency"),
            time=data.get("time"),
            status=data.get("status"),
            next_run_at=data.get("next_run_at"),
            last_run_at=data.get("last_run_at"),
        )

    @property
    def is_active(self) -> bool:
        return self.status in ("scheduled", "active")


class ScheduledJobCollection(ModelCollection[ScheduledJob]):
    pass
