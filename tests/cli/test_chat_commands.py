"""Tests for 'iris chat' and 'iris bloq' CLI commands."""

from unittest.mock import patch

from iris_sdk.cli import app
from iris_sdk.errors import WorkflowFailedError
from iris_sdk.models import IngestionJobCollection, WorkflowStatus
from tests.conftest import (
    SAMPLE_AGENT_ID,
    SAMPLE_BLOQ_ID,
    SAMPLE_JOB_ID,
    SAMPLE_WORKFLOW_ID,
    MOCK_WORKFLOW_PAUSED,
)


class TestChatSendCommand:
    """Tests for 'iris chat <agent_id> <message>'."""

    def test_default_command(self, cli_runner, cli_auth, credential_store, mock_iris_context, mock_client_factory):
        """Bare 'iris chat' runs send and prints the response."""
        with patch("iris_sdk.api.IRISClient") as MockClient:
            MockClient.return_value = mock_client_factory()

            result = cli_runner.invoke(app, ["chat", str(SAMPLE_AGENT_ID), "What's new?", *cli_auth])

            assert result.exit_code == 0, result.output
            assert "You have 3 new leads this week." in result.output
            options = mock_iris_context.chat.execute.call_args.args[0]
            assert options == {"query": "What's new?", "agent_id": SAMPLE_AGENT_ID, "bloq_id": None}

    def test_explicit_send_with_bloq_and_timeout(
        self, cli_runner, cli_auth, credential_store, mock_iris_context, mock_client_factory
    ):
        """--bloq is forwarded and --timeout becomes the polling budget."""
        with patch("iris_sdk.api.IRISClient") as MockClient:
            MockClient.return_value = mock_client_factory()

            result = cli_runner.invoke(app, [
                "chat", "send", str(SAMPLE_AGENT_ID), "hi",
                "--bloq", str(SAMPLE_BLOQ_ID), "--timeout", "5", "--no-progress", *cli_auth,
            ])

            assert result.exit_code == 0, result.output
            assert mock_iris_context.chat.execute.call_args.args[0]["bloq_id"] == SAMPLE_BLOQ_ID
            config = MockClient.call_args.args[0]
            assert config.max_polling_duration == 5.0

    def test_approval_required(self, cli_runner, cli_auth, credential_store, mock_iris_context, mock_client_factory):
        """Paused workflows print the resume hint instead of a response."""
        mock_iris_context.chat.execute.return_value = WorkflowStatus.from_dict(MOCK_WORKFLOW_PAUSED)
        with patch("iris_sdk.api.IRISClient") as MockClient:
            MockClient.return_value = mock_client_factory()

            result = cli_runner.invoke(app, ["chat", str(SAMPLE_AGENT_ID), "send the emails", *cli_auth])

            assert result.exit_code == 0, result.output
            assert "Approval required" in result.output
            assert f"iris chat resume {SAMPLE_WORKFLOW_ID}" in result.output

    def test_json_output(self, cli_runner, cli_auth, credential_store, mock_client_factory):
        """--json prints the workflow snapshot."""
        with patch("iris_sdk.api.IRISClient") as MockClient:
            MockClient.return_value = mock_client_factory()

            result = cli_runner.invoke(app, ["chat", str(SAMPLE_AGENT_ID), "hi", "--json", *cli_auth])

            assert result.exit_code == 0, result.output
            assert '"workflow_id"' in result.output
            assert '"completed"' in result.output

    def test_failed_workflow_exits_1(
        self, cli_runner, cli_auth, credential_store, mock_iris_context, mock_client_factory
    ):
        """Server-side failures are reported and exit non-zero."""
        mock_iris_context.chat.execute.side_effect = WorkflowFailedError(
            "Workflow failed: boom", workflow_id=SAMPLE_WORKFLOW_ID
        )
        with patch("iris_sdk.api.IRISClient") as MockClient:
            MockClient.return_value = mock_client_factory()

            result = cli_runner.invoke(app, ["chat", str(SAMPLE_AGENT_ID), "hi", *cli_auth])

            assert result.exit_code == 1
            assert "boom" in result.output

    def test_missing_api_key(self, cli_runner, credential_store):
        """Without any credentials the setup hint is shown."""
        result = cli_runner.invoke(app, ["chat", str(SAMPLE_AGENT_ID), "hi"])

        assert result.exit_code == 1
        assert "api_key is required" in result.output
        assert "iris config setup" in result.output


class TestChatResumeAndStatus:
    """Tests for 'iris chat resume' and 'iris chat status'."""

    def test_resume_plain_text(self, cli_runner, cli_auth, credential_store, mock_iris_context, mock_client_factory):
        """Plain text feedback is wrapped as an approval."""
        with patch("iris_sdk.api.IRISClient") as MockClient:
            MockClient.return_value = mock_client_factory()

            result = cli_runner.invoke(app, ["chat", "resume", SAMPLE_WORKFLOW_ID, "looks good", *cli_auth])

            assert result.exit_code == 0, result.output
            assert "resumed" in result.output
            mock_iris_context.chat.resume.assert_called_with(
                SAMPLE_WORKFLOW_ID, {"approved": True, "message": "looks good"}
            )

    def test_resume_json_feedback(self, cli_runner, cli_auth, credential_store, mock_iris_context, mock_client_factory):
        """JSON object feedback is sent unchanged."""
        with patch("iris_sdk.api.IRISClient") as MockClient:
            MockClient.return_value = mock_client_factory()

            result = cli_runner.invoke(
                app, ["chat", "resume", SAMPLE_WORKFLOW_ID, '{"approved": false}', *cli_auth]
            )

            assert result.exit_code == 0, result.output
            mock_iris_context.chat.resume.assert_called_with(SAMPLE_WORKFLOW_ID, {"approved": False})

    def test_status(self, cli_runner, cli_auth, credential_store, mock_iris_context, mock_client_factory):
        """Status shows the current step."""
        with patch("iris_sdk.api.IRISClient") as MockClient:
            MockClient.return_value = mock_client_factory()

            result = cli_runner.invoke(app, ["chat", "status", SAMPLE_WORKFLOW_ID, *cli_auth])

            assert result.exit_code == 0, result.output
            assert "Searching knowledge base" in result.output
            mock_iris_context.chat.get_status.assert_called_with(SAMPLE_WORKFLOW_ID)


class TestBloqCommands:
    """Tests for 'iris bloq' commands."""

    def test_ingestion_jobs_table(
        self, cli_runner, cli_auth, credential_store, mock_iris_context, mock_client_factory
    ):
        """Jobs are listed with a pagination footer."""
        with patch("iris_sdk.api.IRISClient") as MockClient:
            MockClient.return_value = mock_client_factory()

            result = cli_runner.invoke(app, ["bloq", "ingestion-jobs", str(SAMPLE_BLOQ_ID), *cli_auth])

            assert result.exit_code == 0, result.output
            assert "Ingestion Jobs" in result.output
            assert "Page 1 of 2" in result.output
            assert "Total: 21 job(s)" in result.output
            assert "--page 2" in result.output
            mock_iris_context.bloqs.list_ingestion_jobs.assert_called_with(
                SAMPLE_BLOQ_ID, limit=20, page=1, status=None
            )

    def test_ingestion_jobs_empty(
        self, cli_runner, cli_auth, credential_store, mock_iris_context, mock_client_factory
    ):
        """Empty state suggests how to start a job."""
        mock_iris_context.bloqs.list_ingestion_jobs.return_value = IngestionJobCollection([], {})
        with patch("iris_sdk.api.IRISClient") as MockClient:
            MockClient.return_value = mock_client_factory()

            result = cli_runner.invoke(app, [
                "bloq", "ingestion-jobs", str(SAMPLE_BLOQ_ID), "--status", "failed", *cli_auth,
            ])

            assert result.exit_code == 0, result.output
            assert f"No ingestion jobs found for bloq {SAMPLE_BLOQ_ID}" in result.output

    def test_ingestion_jobs_json(self, cli_runner, cli_auth, credential_store, mock_client_factory):
        """--json includes pagination."""
        with patch("iris_sdk.api.IRISClient") as MockClient:
            MockClient.return_value = mock_client_factory()

            result = cli_runner.invoke(app, [
                "bloq", "ingestion-jobs", str(SAMPLE_BLOQ_ID), "--json", *cli_auth,
            ])

            assert result.exit_code == 0, result.output
            assert '"pagination"' in result.output
            assert '"source_type": "google_drive"' in result.output

    def test_ingest(self, cli_runner, cli_auth, credential_store, mock_iris_context, mock_client_factory):
        """Ingest starts a job and prints how to track it."""
        with patch("iris_sdk.api.IRISClient") as MockClient:
            MockClient.return_value = mock_client_factory()

            result = cli_runner.invoke(app, [
                "bloq", "ingest", str(SAMPLE_BLOQ_ID), "google_drive", "folder-1", *cli_auth,
            ])

            assert result.exit_code == 0, result.output
            assert f"Ingestion job {SAMPLE_JOB_ID} started" in result.output
            mock_iris_context.bloqs.ingest_folder.assert_called_with(
                SAMPLE_BLOQ_ID, "google_drive", "folder-1", recursive=True
            )

    def test_ingestion_status(self, cli_runner, cli_auth, credential_store, mock_client_factory):
        """Status panel lists file errors."""
        with patch("iris_sdk.api.IRISClient") as MockClient:
            MockClient.return_value = mock_client_factory()

            result = cli_runner.invoke(app, ["bloq", "ingestion-status", str(SAMPLE_JOB_ID), *cli_auth])

            assert result.exit_code == 0, result.output
            assert f"Ingestion job {SAMPLE_JOB_ID}" in result.output
            assert "broken.pdf: unreadable" in result.output

    def test_cancel(self, cli_runner, cli_auth, credential_store, mock_iris_context, mock_client_factory):
        """Cancel calls the API."""
        with patch("iris_sdk.api.IRISClient") as MockClient:
            MockClient.return_value = mock_client_factory()

            result = cli_runner.invoke(app, ["bloq", "cancel-ingestion", str(SAMPLE_JOB_ID), *cli_auth])

            assert result.exit_code == 0, result.output
            assert "cancelled" in result.output
            mock_iris_context.bloqs.cancel_ingestion_job.assert_called_with(SAMPLE_JOB_ID)
