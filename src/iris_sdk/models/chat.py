"""Chat workflow status snapshots."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .base import IRISModel, as_float

RUNNING = "running"
PAUSED = "paused"
COMPLETED = "completed"
FAILED = "failed"


@dataclass
class WorkflowStatus(IRISModel):
    """Snapshot of a server-side chat workflow, as returned by polling."""

    workflow_id: str | None = None
    status: str = ""
    summary: str | None = None
    requires_approval: bool = False
    error: str | None = None
    response: Any = None
    progress: float | None = None
    current_step: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WorkflowStatus":
        workflow_id = data.get("workflow_id") or data.get("workflowId") or data.get("id")
        return cls(
            attributes=cls._copy(data),
            workflow_id=str(workflow_id) if workflow_id is not None else None,
            status=str(data.get("status") or "").lower(),
            summary=data.get("summary"),
            requires_approval=bool(data.get("requires_approval") or data.get("requiresApproval")),
            error=data.get("error"),
            response=data.get("response", data.get("result")),
            progress=as_float(data.get("progress")),
            current_step=data.get("current_step") or data.get("currentStep"),
        )

    @property
    def is_running(self) -> bool:
        return self.status == RUNNING

    @property
    def is_completed(self) -> bool:
        return self.status == COMPLETED

    @property
    def is_failed(self) -> bool:
        return self.status == FAILED

    @property
    def is_paused(self) -> bool:
        return self.status == PAUSED

    @property
    def needs_approval(self) -> bool:
        """Paused for human-in-the-loop review."""
        return self.is_paused and self.requires_approval

    @property
    def is_terminal(self) -> bool:
        """No further polling is useful for this snapshot."""
        return self.is_completed or self.is_failed or self.needs_approval

    @property
    def failure_reason(self) -> str:
        return self.error or self.summary or "Unknown error"
