"""IRIS CLI - Main entry point."""

import asyncio
import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from typer.core import TyperGroup

from .auth.storage import CredentialStore, StoredCredentials
from .config import IRISConfig
from .errors import InvalidConfigurationError, IRISError


class _DefaultCommandGroup(TyperGroup):
    """Group that runs ``default_command`` when the first argument is not a subcommand."""

    default_command = "send"

    def parse_args(self, ctx, args):
        if args and args[0] not in self.commands and not args[0].startswith("-"):
            args.insert(0, self.default_command)
        return super().parse_args(ctx, args)


app = typer.Typer(
    name="iris",
    help="IRIS: AI agents, workflows and knowledge bases from the terminal",
    no_args_is_help=True,
)
console = Console()

# Sub-command groups
chat_app = typer.Typer(
    cls=_DefaultCommandGroup,
    help="Chat with an agent: iris chat <agent_id> <message>",
    no_args_is_help=True,
)
bloq_app = typer.Typer(help="Bloqs (knowledge bases) and ingestion jobs")
agents_app = typer.Typer(help="AI agent management")
leads_app = typer.Typer(help="CRM lead management")
phone_app = typer.Typer(help="Phone number management")
rag_app = typer.Typer(help="Knowledge base search")
marketplace_app = typer.Typer(help="Skills marketplace")
integrations_app = typer.Typer(help="Third-party integrations")
payments_app = typer.Typer(help="Agent wallets and payments")
config_app = typer.Typer(help="Stored credentials")

app.add_typer(chat_app, name="chat")
app.add_typer(bloq_app, name="bloq")
app.add_typer(agents_app, name="agents")
app.add_typer(leads_app, name="leads")
app.add_typer(phone_app, name="phone")
app.add_typer(rag_app, name="rag")
app.add_typer(marketplace_app, name="marketplace")
app.add_typer(integrations_app, name="integrations")
app.add_typer(payments_app, name="payments")
app.add_typer(config_app, name="config")

# Shared options
API_KEY_OPTION = typer.Option(None, "--api-key", help="API key (overrides env and stored credentials)")
USER_ID_OPTION = typer.Option(None, "--user-id", help="User ID (overrides env and stored credentials)")
JSON_OPTION = typer.Option(False, "--json", "-j", help="Output as JSON")
VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Debug logging and tracebacks")

# Environment variables that take precedence over stored credentials,
# per IRIS_ENV; must match what IRISConfig.from_env reads in that mode
_ENV_OVERRIDES = {
    "production": {
        "api_key": ("IRIS_API_KEY", "IRIS_PROD_API_KEY"),
        "user_id": ("IRIS_USER_ID",),
        "base_url": ("IRIS_API_URL",),
        "iris_url": ("IRIS_URL",),
        "webhook_secret": ("IRIS_WEBHOOK_SECRET",),
    },
    "local": {
        "api_key": ("IRIS_LOCAL_API_KEY", "IRIS_API_KEY"),
        "user_id": ("IRIS_USER_ID",),
        "base_url": ("IRIS_LOCAL_URL",),
        "iris_url": ("IRIS_LOCAL_URL",),
        "webhook_secret": ("IRIS_WEBHOOK_SECRET",),
    },
}

STATUS_STYLES = {
    "completed": ("green", "✓"),
    "processing": ("yellow", "⟳"),
    "running": ("yellow", "⟳"),
    "pending": ("dim", "○"),
    "partial": ("yellow", "◐"),
    "failed": ("red", "✗"),
    "cancelled": ("dim", "⊘"),
}


def _output_result(result: Any, json_output: bool = False) -> None:
    """Output result as JSON or formatted."""
    if hasattr(result, "to_list"):
        result = result.to_list()
    elif hasattr(result, "to_dict"):
        result = result.to_dict()
    if json_output:
        console.print_json(json.dumps(result, default=str))
    else:
        # Default to JSON for complex results
        console.print_json(json.dumps(result, default=str, indent=2))


def _setup_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s %(levelname)s %(message)s")


def _resolve_config(api_key: str | None, user_id: int | None, **settings: Any) -> IRISConfig:
    """Build config from flags, then environment / .env, then stored credentials."""
    load_dotenv(Path.cwd() / ".env", override=False)

    values = CredentialStore().to_config_kwargs()
    mode = "local" if os.environ.get("IRIS_ENV") == "local" else "production"
    for key, env_vars in _ENV_OVERRIDES[mode].items():
        if any(os.environ.get(var) for var in env_vars):
            values.pop(key, None)

    flags = {"api_key": api_key, "user_id": user_id, **settings}
    values.update({k: v for k, v in flags.items() if v is not None})
    return IRISConfig.from_env(**values)


def _fail(error: Exception, verbose: bool = False) -> None:
    """Print an error and exit 1. Call from inside an except block."""
    message = error.formatted_message() if isinstance(error, IRISError) else str(error)
    console.print(f"[red]Error: {message}[/red]")
    if isinstance(error, InvalidConfigurationError):
        console.print("[dim]Run 'iris config setup' to store your API key and user ID.[/dim]")
    if verbose:
        console.print_exception()
    raise typer.Exit(1)


def _run(factory, api_key: str | None, user_id: int | None, verbose: bool = False, **settings: Any):
    """Resolve config, run ``factory(config)`` to completion and map errors to exit codes."""
    _setup_logging(verbose)
    try:
        config = _resolve_config(api_key, user_id, **settings)
        return asyncio.run(factory(config))
    except (IRISError, ValueError, FileNotFoundError) as e:
        _fail(e, verbose)


def _format_status(status: str) -> str:
    style, icon = STATUS_STYLES.get(status, ("white", "•"))
    return f"[{style}]{icon} {status}[/{style}]"


def _relative_time(timestamp: str | None) -> str:
    if not timestamp:
        return "-"
    try:
        moment = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    except ValueError:
        return timestamp
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)

    seconds = (datetime.now(timezone.utc) - moment).total_seconds()
    if seconds < 60:
        return "Just now"
    if seconds < 3600:
        return f"{int(seconds // 60)}m ago"
    if seconds < 86400:
        return f"{int(seconds // 3600)}h ago"
    if seconds < 7 * 86400:
        return f"{int(seconds // 86400)}d ago"
    return moment.strftime("%b %d, %Y")


def _truncate(value: Any, width: int) -> str:
    text = str(value or "-")
    return text if len(text) <= width else text[: width - 1] + "…"


def _parse_feedback(feedback: str) -> dict[str, Any]:
    """JSON object feedback is sent as-is; plain text is wrapped."""
    try:
        parsed = json.loads(feedback)
    except json.JSONDecodeError:
        parsed = None
    if isinstance(parsed, dict):
        return parsed
    return {"approved": True, "message": feedback}


# ============================================================================
# Chat Commands
# ============================================================================


@chat_app.command("send")
def chat_send(
    agent_id: int = typer.Argument(..., help="Agent ID"),
    message: str = typer.Argument(..., help="Message to send"),
    bloq: int = typer.Option(None, "--bloq", "-b", help="Bloq (knowledge base) ID"),
    timeout: float = typer.Option(300.0, "--timeout", "-t", help="Seconds to wait for the workflow"),
    no_progress: bool = typer.Option(False, "--no-progress", help="Hide the progress line"),
    api_key: str = API_KEY_OPTION,
    user_id: int = USER_ID_OPTION,
    json_output: bool = JSON_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """Send a message and wait for the agent's answer (default command)."""
    from .api import IRISClient

    options = {"query": message, "agent_id": agent_id, "bloq_id": bloq}

    async def _chat(config):
        async with IRISClient(config) as iris:
            if no_progress or json_output:
                return await iris.chat.execute(options)

            with console.status("[cyan]Starting workflow...[/cyan]") as status_line:

                def _on_progress(status):
                    step = f" · {status.current_step}" if status.current_step else ""
                    pct = f" ({status.progress:g}%)" if status.progress is not None else ""
                    status_line.update(f"[cyan]{status.status or 'running'}{step}{pct}[/cyan]")

                return await iris.chat.execute(options, on_progress=_on_progress)

    result = _run(_chat, api_key, user_id, verbose, max_polling_duration=timeout)

    if json_output:
        _output_result(result, json_output=True)
    elif result.needs_approval:
        console.print(
            Panel(
                f"{result.summary or 'The agent is waiting for your approval.'}\n\n"
                f"[dim]Resume with:[/dim] iris chat resume {result.workflow_id} \"<feedback>\"",
                title="[yellow]Approval required[/yellow]",
                border_style="yellow",
            )
        )
    else:
        response = result.response if isinstance(result.response, str) else None
        console.print(
            Panel(
                response or result.summary or "(empty response)",
                title=f"[green]Agent {agent_id}[/green]",
                border_style="green",
            )
        )


@chat_app.command("resume")
def chat_resume(
    workflow_id: str = typer.Argument(..., help="Paused workflow ID"),
    feedback: str = typer.Argument(..., help="Feedback text, or a JSON object"),
    api_key: str = API_KEY_OPTION,
    user_id: int = USER_ID_OPTION,
    json_output: bool = JSON_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """Resume a workflow paused for approval."""
    from .api import IRISClient

    async def _resume(config):
        async with IRISClient(config) as iris:
            return await iris.chat.resume(workflow_id, _parse_feedback(feedback))

    result = _run(_resume, api_key, user_id, verbose)

    if json_output:
        _output_result(result, json_output=True)
    else:
        console.print(f"[green]Workflow {workflow_id} resumed.[/green]")
        console.print(f"[dim]Check progress with: iris chat status {workflow_id}[/dim]")


@chat_app.command("status")
def chat_status(
    workflow_id: str = typer.Argument(..., help="Workflow ID"),
    api_key: str = API_KEY_OPTION,
    user_id: int = USER_ID_OPTION,
    json_output: bool = JSON_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """Show the current state of a workflow."""
    from .api import IRISClient

    async def _status(config):
        async with IRISClient(config) as iris:
            return await iris.chat.get_status(workflow_id)

    status = _run(_status, api_key, user_id, verbose)

    if json_output:
        _output_result(status, json_output=True)
        return

    table = Table(title=f"Workflow {workflow_id}", show_header=False)
    table.add_column("Field", style="dim")
    table.add_column("Value")
    table.add_row("Status", _format_status(status.status))
    table.add_row("Step", status.current_step or "-")
    table.add_row("Progress", f"{status.progress:g}%" if status.progress is not None else "-")
    table.add_row("Needs approval", "yes" if status.needs_approval else "no")
    if status.summary:
        table.add_row("Summary", status.summary)
    if status.is_failed:
        table.add_row("Error", f"[red]{status.failure_reason}[/red]")
    console.print(table)


# ============================================================================
# Bloq Commands
# ============================================================================


@bloq_app.command("ingest")
def bloq_ingest(
    bloq_id: int = typer.Argument(..., help="Bloq ID"),
    source_type: str = typer.Argument(..., help="google_drive, dropbox, s3, ..."),
    source_path: str = typer.Argument(..., help="Folder ID or path at the source"),
    recursive: bool = typer.Option(True, "--recursive/--no-recursive", help="Include subfolders"),
    wait: bool = typer.Option(False, "--wait", "-w", help="Wait for the job to finish"),
    api_key: str = API_KEY_OPTION,
    user_id: int = USER_ID_OPTION,
    json_output: bool = JSON_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """Start ingesting a remote folder into a bloq."""
    from .api import IRISClient

    async def _ingest(config):
        async with IRISClient(config) as iris:
            started = await iris.bloqs.ingest_folder(
                bloq_id, source_type, source_path, recursive=recursive
            )
            if not wait:
                return started
            job_id = started.get("job_id") or started.get("id")
            with console.status("[cyan]Ingesting...[/cyan]") as status_line:
                job = await iris.bloqs.wait_for_ingestion(
                    job_id,
                    on_progress=lambda j: status_line.update(
                        f"[cyan]{j.status} {j.processed_files}/{j.total_files} files ({j.progress:g}%)[/cyan]"
                    ),
                )
            return job.to_dict()

    result = _run(_ingest, api_key, user_id, verbose)

    if json_output:
        _output_result(result, json_output=True)
    elif wait:
        console.print(
            f"[green]Ingestion finished: {result.get('successful_files', 0)} file(s) indexed, "
            f"{result.get('failed_files', 0)} failed.[/green]"
        )
    else:
        job_id = result.get("job_id") or result.get("id")
        console.print(f"[green]Ingestion job {job_id} started.[/green]")
        console.print(f"[dim]Track it with: iris bloq ingestion-status {job_id}[/dim]")


@bloq_app.command("ingestion-jobs")
def bloq_ingestion_jobs(
    bloq_id: int = typer.Argument(..., help="Bloq ID"),
    status: str = typer.Option(None, "--status", "-s", help="Filter by status"),
    limit: int = typer.Option(20, "--limit", "-l", help="Jobs per page"),
    page: int = typer.Option(1, "--page", "-p", help="Page number"),
    api_key: str = API_KEY_OPTION,
    user_id: int = USER_ID_OPTION,
    json_output: bool = JSON_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """List folder ingestion jobs for a bloq."""
    from .api import IRISClient

    async def _list(config):
        async with IRISClient(config) as iris:
            return await iris.bloqs.list_ingestion_jobs(bloq_id, limit=limit, page=page, status=status)

    jobs = _run(_list, api_key, user_id, verbose)

    if json_output:
        _output_result({"jobs": jobs.to_list(), "pagination": jobs.meta}, json_output=True)
        return

    if jobs.is_empty:
        console.print(f"[yellow]No ingestion jobs found for bloq {bloq_id}.[/yellow]")
        console.print(f"[dim]Start one with: iris bloq ingest {bloq_id} <source_type> <path>[/dim]")
        return

    table = Table(title="Ingestion Jobs")
    table.add_column("ID", style="dim")
    table.add_column("Source", style="cyan")
    table.add_column("Path")
    table.add_column("Status")
    table.add_column("Files", justify="right")
    table.add_column("Success", justify="right", style="green")
    table.add_column("Failed", justify="right", style="red")
    table.add_column("Progress", justify="right")
    table.add_column("Created", style="dim")

    for job in jobs:
        table.add_row(
            str(job.id),
            job.source_type or "-",
            _truncate(job.source_path, 25),
            _format_status(job.status),
            str(job.total_files),
            str(job.successful_files),
            str(job.failed_files),
            f"{job.progress:g}%",
            _relative_time(job.created_at),
        )

    console.print(table)
    console.print(
        f"Page {jobs.current_page} of {jobs.last_page} • Total: {jobs.total} job(s)"
    )
    if jobs.has_more:
        console.print(
            f"[dim]Next page: iris bloq ingestion-jobs {bloq_id} --page {jobs.current_page + 1}[/dim]"
        )
    console.print("[dim]Tip: use 'iris bloq ingestion-status <job_id>' for details.[/dim]")


@bloq_app.command("ingestion-status")
def bloq_ingestion_status(
    job_id: int = typer.Argument(..., help="Ingestion job ID"),
    api_key: str = API_KEY_OPTION,
    user_id: int = USER_ID_OPTION,
    json_output: bool = JSON_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """Show progress of one ingestion job."""
    from .api import IRISClient

    async def _status(config):
        async with IRISClient(config) as iris:
            return await iris.bloqs.get_ingestion_status(job_id)

    job = _run(_status, api_key, user_id, verbose)

    if json_output:
        _output_result(job, json_output=True)
        return

    console.print(
        Panel(
            f"Status: {_format_status(job.status)}\n"
            f"Source: {job.source_type or '-'} {job.source_path}\n"
            f"Files: {job.processed_files}/{job.total_files} processed, "
            f"[green]{job.successful_files} ok[/green], [red]{job.failed_files} failed[/red]\n"
            f"Progress: {job.progress:g}%",
            title=f"Ingestion job {job_id}",
            expand=False,
        )
    )
    if job.error_log:
        console.print(f"[red]Errors:[/red] {job.failure_details()}")


@bloq_app.command("cancel-ingestion")
def bloq_cancel_ingestion(
    job_id: int = typer.Argument(..., help="Ingestion job ID"),
    api_key: str = API_KEY_OPTION,
    user_id: int = USER_ID_OPTION,
    json_output: bool = JSON_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """Cancel a running ingestion job."""
    from .api import IRISClient

    async def _cancel(config):
        async with IRISClient(config) as iris:
            return await iris.bloqs.cancel_ingestion_job(job_id)

    result = _run(_cancel, api_key, user_id, verbose)

    if json_output:
        _output_result(result, json_output=True)
    else:
        console.print(f"[green]Ingestion job {job_id} cancelled.[/green]")


# ============================================================================
# Agents Commands
# ============================================================================


@agents_app.command("list")
def agents_list(
    search: str = typer.Option(None, "--search", "-s", help="Filter by name"),
    api_key: str = API_KEY_OPTION,
    user_id: int = USER_ID_OPTION,
    json_output: bool = JSON_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """List your agents."""
    from .api import IRISClient

    async def _list(config):
        async with IRISClient(config) as iris:
            return await iris.agents.list(search=search)

    agents = _run(_list, api_key, user_id, verbose)

    if json_output:
        _output_result(agents, json_output=True)
        return

    table = Table(title=f"Agents ({len(agents)})")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Model", style="white")
    table.add_column("Integrations", style="yellow")

    for agent in agents:
        integrations = ", ".join(agent.integrations[:3])
        if len(agent.integrations) > 3:
            integrations += "..."
        table.add_row(str(agent.id), agent.name, agent.model, integrations or "-")

    console.print(table)


@agents_app.command("get")
def agents_get(
    agent_id: int = typer.Argument(..., help="Agent ID"),
    api_key: str = API_KEY_OPTION,
    user_id: int = USER_ID_OPTION,
    json_output: bool = JSON_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """Get a single agent by ID."""
    from .api import IRISClient

    async def _get(config):
        async with IRISClient(config) as iris:
            return await iris.agents.get(agent_id)

    agent = _run(_get, api_key, user_id, verbose)
    _output_result(agent, json_output)


# ============================================================================
# Leads Commands
# ============================================================================


@leads_app.command("list")
def leads_list(
    search: str = typer.Option(None, "--search", "-s", help="Search name, email or company"),
    status: str = typer.Option(None, "--status", help="Filter by status"),
    api_key: str = API_KEY_OPTION,
    user_id: int = USER_ID_OPTION,
    json_output: bool = JSON_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """List leads."""
    from .api import IRISClient

    async def _list(config):
        async with IRISClient(config) as iris:
            return await iris.leads.list(search=search, status=status)

    leads = _run(_list, api_key, user_id, verbose)

    if json_output:
        _output_result(leads, json_output=True)
        return

    table = Table(title=f"Leads ({leads.total})")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Email", style="white")
    table.add_column("Company")
    table.add_column("Status", style="green")

    for lead in leads:
        table.add_row(
            str(lead.id),
            lead.name or "-",
            lead.email or "-",
            lead.company or "-",
            lead.status or "-",
        )

    console.print(table)


@leads_app.command("get")
def leads_get(
    lead_id: int = typer.Argument(..., help="Lead ID"),
    api_key: str = API_KEY_OPTION,
    user_id: int = USER_ID_OPTION,
    json_output: bool = JSON_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """Get a single lead by ID."""
    from .api import IRISClient

    async def _get(config):
        async with IRISClient(config) as iris:
            return await iris.leads.get(lead_id)

    lead = _run(_get, api_key, user_id, verbose)
    _output_result(lead, json_output)


# ============================================================================
# Phone Commands
# ============================================================================


@phone_app.command("list")
def phone_list(
    provider: str = typer.Option("vapi", "--provider", "-p", help="vapi, twilio or telnyx"),
    api_key: str = API_KEY_OPTION,
    user_id: int = USER_ID_OPTION,
    json_output: bool = JSON_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """List phone numbers owned through a provider."""
    from .api import IRISClient

    async def _list(config):
        async with IRISClient(config) as iris:
            return await iris.phone.list(provider)

    numbers = _run(_list, api_key, user_id, verbose)

    if json_output:
        _output_result(numbers, json_output=True)
        return

    table = Table(title=f"Phone numbers - {provider} ({len(numbers)})")
    table.add_column("ID", style="dim")
    table.add_column("Number", style="cyan")
    table.add_column("Name")
    table.add_column("Agent", style="green")

    for n in numbers:
        table.add_row(
            str(n.get("id", "")),
            n.get("number") or n.get("phone_number") or "-",
            n.get("name") or n.get("friendly_name") or "-",
            str(n.get("agent_id") or n.get("assistantId") or "-"),
        )

    console.print(table)


@phone_app.command("providers")
def phone_providers(
    api_key: str = API_KEY_OPTION,
    user_id: int = USER_ID_OPTION,
    json_output: bool = JSON_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """List phone providers configured for your account."""
    from .api import IRISClient

    async def _providers(config):
        async with IRISClient(config) as iris:
            return await iris.phone.providers()

    providers = _run(_providers, api_key, user_id, verbose)

    if json_output:
        _output_result(providers, json_output=True)
        return

    for p in providers:
        name = p.get("name") or p.get("provider") if isinstance(p, dict) else p
        available = p.get("available", p.get("configured", True)) if isinstance(p, dict) else True
        mark = "[green]✓[/green]" if available else "[red]✗[/red]"
        console.print(f"  {mark} {name}")


# ============================================================================
# RAG Commands
# ============================================================================


@rag_app.command("query")
def rag_query(
    text: str = typer.Argument(..., help="Question or search text"),
    top_k: int = typer.Option(5, "--top-k", "-k", help="Max results"),
    api_key: str = API_KEY_OPTION,
    user_id: int = USER_ID_OPTION,
    json_output: bool = JSON_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """Semantic search over your indexed content."""
    from .api import IRISClient

    async def _query(config):
        async with IRISClient(config) as iris:
            return await iris.rag.query(text, top_k=top_k)

    results = _run(_query, api_key, user_id, verbose)

    if json_output:
        _output_result(results, json_output=True)
        return

    if results.is_empty:
        console.print("[yellow]No matches.[/yellow]")
        return

    console.print(f"[dim]Found {len(results)} results for '{text}'[/dim]\n")
    for hit in results:
        style = "green" if hit.is_highly_relevant else "yellow" if hit.is_relevant else "dim"
        title = hit.title or hit.source or hit.id or ""
        console.print(f"  [{style}]{hit.score_percentage:g}%[/{style}] [cyan]{title}[/cyan]")
        console.print(f"    {_truncate(hit.content, 160)}")


# ============================================================================
# Marketplace Commands
# ============================================================================


@marketplace_app.command("search")
def marketplace_search(
    query: str = typer.Argument(None, help="Search text"),
    category: str = typer.Option(None, "--category", "-c", help="Category slug"),
    api_key: str = API_KEY_OPTION,
    user_id: int = USER_ID_OPTION,
    json_output: bool = JSON_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """Search the skills marketplace."""
    from .api import IRISClient

    async def _search(config):
        async with IRISClient(config) as iris:
            return await iris.marketplace.search(query, category=category)

    skills = _run(_search, api_key, user_id, verbose)

    if json_output:
        _output_result(skills, json_output=True)
        return

    table = Table(title=f"Skills ({len(skills)})")
    table.add_column("Slug", style="cyan")
    table.add_column("Name")
    table.add_column("Category", style="dim")
    table.add_column("Price", justify="right", style="green")
    table.add_column("Rating", justify="right", style="yellow")

    for s in skills:
        price = s.get("price")
        table.add_row(
            s.get("slug", "-"),
            s.get("name", "-"),
            s.get("category") or "-",
            "free" if not price else str(price),
            str(s.get("rating") or s.get("average_rating") or "-"),
        )

    console.print(table)


@marketplace_app.command("install")
def marketplace_install(
    slug: str = typer.Argument(..., help="Skill slug"),
    config_json: str = typer.Option(None, "--config", help="Skill config as a JSON object"),
    api_key: str = API_KEY_OPTION,
    user_id: int = USER_ID_OPTION,
    json_output: bool = JSON_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """Install a skill."""
    from .api import IRISClient

    try:
        skill_config = json.loads(config_json) if config_json else None
    except json.JSONDecodeError as e:
        console.print(f"[red]Error: --config is not valid JSON: {e}[/red]")
        raise typer.Exit(1)

    async def _install(config):
        async with IRISClient(config) as iris:
            return await iris.marketplace.install(slug, skill_config)

    result = _run(_install, api_key, user_id, verbose)

    if json_output:
        _output_result(result, json_output=True)
    else:
        console.print(f"[green]Installed {slug}.[/green]")


# ============================================================================
# Integrations Commands
# ============================================================================


@integrations_app.command("list")
def integrations_list(
    api_key: str = API_KEY_OPTION,
    user_id: int = USER_ID_OPTION,
    json_output: bool = JSON_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """List your integrations."""
    from .api import IRISClient

    async def _list(config):
        async with IRISClient(config) as iris:
            return await iris.integrations.list()

    integrations = _run(_list, api_key, user_id, verbose)

    if json_output:
        _output_result(integrations, json_output=True)
        return

    table = Table(title=f"Integrations ({len(integrations)})")
    table.add_column("ID", style="dim")
    table.add_column("Type", style="cyan")
    table.add_column("Name")
    table.add_column("Status")

    for i in integrations:
        style = "green" if i.is_connected else "red" if i.has_error else "yellow"
        table.add_row(str(i.id), i.type, i.name or "-", f"[{style}]{i.status}[/{style}]")

    console.print(table)


@integrations_app.command("test")
def integrations_test(
    integration_id: int = typer.Argument(..., help="Integration ID"),
    api_key: str = API_KEY_OPTION,
    user_id: int = USER_ID_OPTION,
    json_output: bool = JSON_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """Check an integration's stored credentials still work."""
    from .api import IRISClient

    async def _test(config):
        async with IRISClient(config) as iris:
            return await iris.integrations.test(integration_id)

    result = _run(_test, api_key, user_id, verbose)

    if json_output:
        _output_result(result, json_output=True)
        return

    if result.success:
        latency = f" ({result.latency_ms:g} ms)" if result.latency_ms is not None else ""
        console.print(f"[green]✓ Integration {integration_id} is working{latency}[/green]")
    else:
        console.print(
            f"[red]✗ Integration {integration_id} failed: "
            f"{result.error or result.message or 'unknown error'}[/red]"
        )
        raise typer.Exit(1)


# ============================================================================
# Payments Commands
# ============================================================================


@payments_app.command("balance")
def payments_balance(
    agent_id: int = typer.Argument(..., help="Agent that owns the wallet"),
    api_key: str = API_KEY_OPTION,
    user_id: int = USER_ID_OPTION,
    json_output: bool = JSON_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """Show an agent's wallet balance."""
    from .api import IRISClient

    async def _balance(config):
        async with IRISClient(config) as iris:
            return await iris.payments.get_wallet(agent_id)

    wallet = _run(_balance, api_key, user_id, verbose)

    if json_output:
        _output_result(wallet, json_output=True)
        return

    state = "[red]frozen[/red]" if wallet.is_frozen else f"[green]{wallet.status}[/green]"
    console.print(
        Panel(
            f"Balance: [bold]{wallet.balance_dollars:,.2f}[/bold] {wallet.currency}\n"
            f"Status: {state}",
            title=f"Wallet for agent {agent_id}",
            expand=False,
        )
    )


@payments_app.command("transactions")
def payments_transactions(
    agent_id: int = typer.Argument(..., help="Agent that owns the wallet"),
    limit: int = typer.Option(20, "--limit", "-l", help="Max transactions"),
    api_key: str = API_KEY_OPTION,
    user_id: int = USER_ID_OPTION,
    json_output: bool = JSON_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """List wallet transactions for an agent."""
    from .api import IRISClient

    async def _transactions(config):
        async with IRISClient(config) as iris:
            return await iris.payments.get_transactions(agent_id, per_page=limit)

    transactions = _run(_transactions, api_key, user_id, verbose)

    if json_output:
        _output_result(transactions, json_output=True)
        return

    table = Table(title=f"Transactions ({len(transactions)})")
    table.add_column("ID", style="dim")
    table.add_column("Type", style="cyan")
    table.add_column("Amount", justify="right")
    table.add_column("Status")
    table.add_column("Description")
    table.add_column("Created", style="dim")

    for t in transactions:
        sign, style = ("+", "green") if t.is_credit else ("-", "red")
        table.add_row(
            t.transaction_id or "-",
            t.type,
            f"[{style}]{sign}{t.amount_dollars:,.2f}[/{style}]",
            t.status or "-",
            _truncate(t.description, 40),
            _relative_time(t.created_at),
        )

    console.print(table)


# ============================================================================
# Config Commands
# ============================================================================


@config_app.command("setup")
def config_setup(
    api_key: str = typer.Option(None, "--api-key", help="API key"),
    user_id: int = typer.Option(None, "--user-id", help="User ID"),
    base_url: str = typer.Option(None, "--base-url", help="API base URL"),
    iris_url: str = typer.Option(None, "--iris-url", help="IRIS app URL"),
    webhook_secret: str = typer.Option(None, "--webhook-secret", help="Webhook signing secret"),
):
    """Store credentials in ~/.iris/credentials.json."""
    store = CredentialStore()
    current = store.load()

    if not api_key:
        api_key = typer.prompt("API key", hide_input=True, default=current.api_key or None)
    if user_id is None:
        user_id = typer.prompt("User ID", type=int, default=current.user_id)

    credentials = StoredCredentials(
        api_key=api_key,
        user_id=user_id,
        base_url=base_url or current.base_url,
        iris_url=iris_url or current.iris_url,
        webhook_secret=webhook_secret or current.webhook_secret,
    )
    store.save(credentials)

    console.print(
        Panel(
            f"[green]Credentials saved to {store.credentials_file}[/green]\n\n"
            "Check them with: iris test-connection",
            title="IRIS setup",
            expand=False,
        )
    )


@config_app.command("show")
def config_show(
    json_output: bool = JSON_OPTION,
):
    """Show stored credentials (secrets masked)."""
    store = CredentialStore()
    if not store.exists():
        console.print("[yellow]No credentials stored.[/yellow] Run 'iris config setup'.")
        raise typer.Exit(1)

    masked = store.masked()
    if json_output:
        _output_result(masked, json_output=True)
        return

    table = Table(title=f"Stored credentials ({store.credentials_file})", show_header=False)
    table.add_column("Key", style="dim")
    table.add_column("Value", style="cyan")
    for key, value in masked.items():
        table.add_row(key, "-" if value is None else str(value))
    console.print(table)

    if not store.has_minimum_credentials():
        console.print("[yellow]API key and user ID are both required.[/yellow]")


@config_app.command("clear")
def config_clear(
    yes: bool = typer.Option(False, "--yes", "-y", help="Don't ask for confirmation"),
):
    """Delete stored credentials."""
    store = CredentialStore()
    if not yes:
        typer.confirm("Delete stored credentials?", abort=True)

    if store.clear():
        console.print("[green]Stored credentials deleted.[/green]")
    else:
        console.print("[dim]No stored credentials to delete.[/dim]")


# ============================================================================
# Connection
# ============================================================================


@app.command("test-connection")
def test_connection(
    api_key: str = API_KEY_OPTION,
    user_id: int = USER_ID_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """Check the API is reachable and the key is accepted."""
    from .api import IRISClient

    async def _check(config):
        async with IRISClient(config) as iris:
            return await iris.test_connection(), config.base_url

    ok, base_url = _run(_check, api_key, user_id, verbose)

    if ok:
        console.print(f"[green]✓ Connected to {base_url}[/green]")
    else:
        console.print(f"[red]✗ Could not connect to {base_url}[/red]")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
