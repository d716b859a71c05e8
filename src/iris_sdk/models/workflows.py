"""Workflow run, human task and automation run models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .base import IRISModel, ModelCollection, as_dict, as_int, as_list

AWAITING_HUMAN = "awaiting_human"
TERMINAL_RUN_STATUSES = ("completed", "failed", "cancelled")


@dataclass
class HumanTask(IRISModel):
    """Step of a workflow run that is waiting on a person."""

    id: str = ""
    description: str = ""
    step_name: str = ""
    step_index: int = 0
    step_params: dict[str, Any] = field(default_factory=dict)
    status: str = "pending"
    workflow_run_id: str | None = None
    input_schema: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HumanTask":
        run_id = data.get("workflow_run_id")
        return cls(
            attributes=cls._copy(data),
            id=str(data.get("id") or ""),
            description=data.get("description") or data.get("message") or "",
            step_name=data.get("step_name") or "",
            step_index=as_int(data.get("step_index"), 0),
            step_params=as_dict(data.get("step_params") or data.get("params")),
            status=data.get("status") or "pending",
            workflow_run_id=str(run_id) if run_id is not None else None,
            input_schema=as_dict(data.get("input_schema")),
        )

    @property
    def is_pending(self) -> bool:
        return self.status == "pending"


@dataclass
class WorkflowRun(IRISModel):
    """Snapshot of a multi-step workflow run."""

    id: str = ""
    status: str = "pending"
    progress: int = 0
    current_step: str | None = None
    step_records: list[dict[str, Any]] = field(default_factory=list)
    result: Any = None
    error: str | None = None
    workflow_id: int | None = None
    agent_id: int | None = None
    pending_task: HumanTask | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WorkflowRun":
        task = data.get("human_task") or data.get("pending_task")
        return cls(
            attributes=cls._copy(data),
            id=str(data.get("id") or data.get("run_id") or ""),
            status=data.get("status") or "pending",
            progress=as_int(data.get("progress"), 0),
            current_step=data.get("current_step"),
            step_records=[s for s in as_list(data.get("step_records")) if isinstance(s, dict)],
            result=data.get("result", data.get("results")),
            error=data.get("error"),
            workflow_id=as_int(data.get("workflow_id")),
            agent_id=as_int(data.get("agent_id")),
            pending_task=HumanTask.from_dict(task) if isinstance(task, dict) else None,
        )

    @property
    def is_running(self) -> bool:
        return self.status in ("pending", "running")

    @property
    def is_completed(self) -> bool:
        return self.status == "completed"

    @property
    def is_failed(self) -> bool:
        return self.status == "failed"

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_RUN_STATUSES

    @property
    def needs_human_input(self) -> bool:
        return self.status == AWAITING_HUMAN and self.pending_task is not None

    @property
    def completed_steps(self) -> int:
        return sum(1 for step in self.step_records if step.get("status") == "completed")


class WorkflowRunCollection(ModelCollection[WorkflowRun]):
    pass


@dataclass
class AutomationRun(IRISModel):
    """Run of a goal-driven automation."""

    id: str = ""
    status: str = ""
    progress: int = 0
    results: dict[str, Any] = field(default_factory=dict)
    error: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AutomationRun":
        return cls(
            attributes=cls._copy(data),
            id=str(data.get("id") or data.get("run_id") or ""),
            status=data.get("status") or "",
            progress=as_int(data.get("progress"), 0),
            results=as_dict(data.get("results")),
            error=data.get("error"),
        )

    @property
    def is_finished(self) -> bool:
        return self.status in TERMINAL_RUN_STATUSES

    @property
    def outcomes(self) -> list[dict[str, Any]]:
        """Outcomes the automation reports as delivered."""
        return [o for o in as_list(self.results.get("outcomes_delivered")) if isinstance(o, dict)]
