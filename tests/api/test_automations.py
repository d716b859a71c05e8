"""Tests for the Automations API."""

import pytest
from unittest.mock import AsyncMock

from iris_sdk.api.automations import validate_automation
from iris_sdk.errors import PollingTimeoutError
from tests.conftest import SAMPLE_AGENT_ID, SAMPLE_USER_ID

RUN_ID = "arun_12"

DIGEST = {
    "name": "Weekly digest",
    "agent_id": SAMPLE_AGENT_ID,
    "goal": "Summarize new leads",
    "outcomes": [
        {"type": "email", "description": "Digest email", "destination": {"to": "me@example.com"}},
    ],
}

RUN_DONE = {
    "id": RUN_ID,
    "status": "completed",
    "progress": 100,
    "results": {"outcomes_delivered": [{"type": "email", "status": "sent"}]},
}


class TestValidate:
    """Definition checks before any request."""

    def test_valid_definition(self):
        assert validate_automation(DIGEST) == {"valid": True, "errors": []}

    def test_reports_every_problem(self):
        result = validate_automation({
            "name": "x",
            "outcomes": [{"type": "email"}, {"description": "no type"}],
        })

        assert not result["valid"]
        assert result["errors"] == [
            "agent_id is required",
            "goal is required",
            "outcomes[0].description is required",
            "outcomes[0].destination.to is required for email type",
            "outcomes[1].type is required",
        ]

    def test_missing_outcomes(self):
        result = validate_automation({"name": "x", "agent_id": 1, "goal": "g"})
        assert result["errors"] == ["outcomes array is required"]


class TestAutomations:
    """Creating and managing automations."""

    @pytest.mark.asyncio
    async def test_create_payload(self, mock_iris_client, mock_http):
        mock_http.post.return_value = {"data": {"id": 31}}

        created = await mock_iris_client.automations.create({**DIGEST, "max_iterations": 4})

        endpoint, payload = mock_http.post.call_args.args
        assert endpoint == "/api/v1/workflows/templates"
        assert payload["user_id"] == SAMPLE_USER_ID
        assert payload["execution_mode"] == "agentic_v6"
        assert payload["description"] == "V6 Automation: Weekly digest"
        assert payload["agent_config"]["goal"] == "Summarize new leads"
        assert payload["agent_config"]["maxIterations"] == 4
        assert payload["agent_config"]["successCriteria"] == []
        assert created == {"id": 31}

    @pytest.mark.asyncio
    async def test_create_invalid_makes_no_request(self, mock_iris_client, mock_http):
        with pytest.raises(ValueError, match="goal is required"):
            await mock_iris_client.automations.create({**DIGEST, "goal": ""})
        mock_http.post.assert_not_called()

    @pytest.mark.asyncio
    async def test_list_filters_to_agentic(self, mock_iris_client, mock_http):
        await mock_iris_client.automations.list(agent_id=SAMPLE_AGENT_ID)

        mock_http.get.assert_called_once_with(
            f"/api/v1/users/{SAMPLE_USER_ID}/workflows",
            {"execution_mode": "agentic_v6", "agent_id": SAMPLE_AGENT_ID, "page": None},
        )

    @pytest.mark.asyncio
    async def test_execute_and_cancel(self, mock_iris_client, mock_http):
        mock_http.post.return_value = {"data": {"run_id": RUN_ID}}

        started = await mock_iris_client.automations.execute(31, {"week": 12})
        cancelled = await mock_iris_client.automations.cancel(RUN_ID)

        assert started == {"run_id": RUN_ID}
        assert cancelled is True
        assert mock_http.post.call_args_list[0].args == (
            "/api/v1/workflows/31/execute/v6", {"inputs": {"week": 12}}
        )
        assert mock_http.post.call_args_list[1].args == (f"/api/v1/workflows/runs/{RUN_ID}/cancel", None)

    @pytest.mark.asyncio
    async def test_outcomes(self, mock_iris_client, mock_http):
        mock_http.get.return_value = {"data": RUN_DONE}

        outcomes = await mock_iris_client.automations.get_outcomes(RUN_ID)

        assert outcomes == [{"type": "email", "status": "sent"}]


class TestWaitForCompletion:
    """Polling automation runs."""

    @pytest.mark.asyncio
    async def test_returns_finished_run(self, mock_iris_client, mock_http):
        mock_http.get.side_effect = [
            {"data": {"id": RUN_ID, "status": "running", "progress": 50}},
            {"data": RUN_DONE},
        ]
        seen = []

        run = await mock_iris_client.automations.wait_for_completion(
            RUN_ID, on_progress=lambda r: seen.append(r.progress), poll_interval=0
        )

        assert run.status == "completed"
        assert seen == [50, 100]
        mock_http.get.assert_called_with(f"/api/v1/workflows/runs/{RUN_ID}", None)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", ["failed", "cancelled"])
    async def test_failed_and_cancelled_are_returned(self, mock_iris_client, mock_http, status):
        mock_http.get.return_value = {"data": {"id": RUN_ID, "status": status}}
        callback = AsyncMock()

        run = await mock_iris_client.automations.wait_for_completion(RUN_ID, on_progress=callback)

        assert run.status == status
        callback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_timeout(self, mock_iris_client, mock_http):
        mock_http.get.return_value = {"data": {"id": RUN_ID, "status": "running"}}

        with pytest.raises(PollingTimeoutError, match="Current status: running"):
            await mock_iris_client.automations.wait_for_completion(RUN_ID, timeout=0, poll_interval=0)

        assert mock_http.get.call_count == 1
