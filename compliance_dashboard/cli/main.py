"""CLI entry point for the compliance governance dashboard."""

import asyncio
from pathlib import Path
from typing import Optional
from uuid import UUID

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="govdash",
    help="Compliance Governance Dashboard CLI - rules, lineage and pipeline status",
    add_completion=False,
)

console = Console()


def run_async(coro):
    """Helper to run async code from sync CLI."""
    return asyncio.run(coro)


db_app = typer.Typer(help="Database management")
app.add_typer(db_app, name="db")

rules_app = typer.Typer(help="Governance rule catalog")
app.add_typer(rules_app, name="rules")

audit_app = typer.Typer(help="Audit trail and rule lineage")
app.add_typer(audit_app, name="audit")


@db_app.command("init")
def db_init():
    """Create the database schema and tables."""
    from compliance_dashboard.database import close_db, init_db

    async def _init():
        try:
            await init_db()
        finally:
            await close_db()

    run_async(_init())
    console.print("[green]✓ Database initialized[/green]")


@rules_app.command("list")
def list_rules(
    status: Optional[str] = typer.Option(None, "--status", "-s", help="draft, active or archived"),
    category: Optional[str] = typer.Option(None, "--category", "-c", help="Filter by category"),
    limit: int = typer.Option(50, "--limit", "-l", help="Maximum rules to show"),
):
    """List governance rules, newest first."""
    from compliance_dashboard.database import async_session_maker
    from compliance_dashboard.repositories import GovernanceRuleRepository

    async def _list():
        async with async_session_maker() as session:
            repo = GovernanceRuleRepository(session)
            rules, total = await repo.list_filtered(status=status, category=category, limit=limit)

            if not rules:
                console.print("[yellow]No governance rules found[/yellow]")
                return

            table = Table(title=f"Governance Rules ({len(rules)} of {total})")
            table.add_column("Rule ID", style="cyan")
            table.add_column("Title")
            table.add_column("Category", style="magenta")
            table.add_column("Priority", style="yellow")
            table.add_column("Status", style="green")
            table.add_column("ID", style="dim")

            for rule in rules:
                table.add_row(
                    rule.rule_id,
                    rule.title,
                    rule.category,
                    rule.priority,
                    rule.status,
                    str(rule.id),
                )

            console.print(table)

    run_async(_list())


@rules_app.command("import")
def import_rules(
    catalog: Path = typer.Argument(
        ...,
        help="Path to a YAML rule catalog",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    actor: int = typer.Option(..., "--actor", "-a", min=1, help="Numeric id of the importing user"),
):
    """Import rules from a YAML catalog. Rules whose rule_id exists are skipped."""
    from compliance_dashboard.database import async_session_maker
    from compliance_dashboard.services.errors import RuleCatalogError
    from compliance_dashboard.services.governance import GovernanceRuleService

    async def _import():
        async with async_session_maker() as session:
            service = GovernanceRuleService(session)
            try:
                result = await service.import_catalog_file(str(catalog), actor=actor)
            except RuleCatalogError as e:
                console.print(f"[red]✗ Invalid rule catalog: {e}[/red]")
                raise typer.Exit(1)
            await session.commit()
            return result

    result = run_async(_import())

    console.print(f"\n[green]✓ Imported {len(result.created)} rule(s)[/green]")
    for rule in result.created:
        console.print(f"  + {rule.rule_id}: {rule.title}")
    if result.skipped:
        console.print(f"[yellow]Skipped {len(result.skipped)} existing rule(s)[/yellow]")
        for rule_id in result.skipped:
            console.print(f"  = {rule_id}")


@audit_app.command("lineage")
def show_lineage(
    governance_rule_id: str = typer.Argument(..., help="UUID of the governance rule"),
):
    """Show the audit lineage of a rule, newest first."""
    from compliance_dashboard.database import async_session_maker
    from compliance_dashboard.services.lineage import LineageService

    try:
        rule_uuid = UUID(governance_rule_id)
    except ValueError:
        console.print(f"[red]Not a valid rule id: {governance_rule_id}[/red]")
        raise typer.Exit(1)

    async def _lineage():
        async with async_session_maker() as session:
            return await LineageService(session).get_lineage_by_rule(rule_uuid)

    lineage = run_async(_lineage())

    title = lineage.rule.rule_id if lineage.rule else f"{rule_uuid} (deleted or unknown)"
    console.print(f"\n[bold]Lineage for: {title}[/bold]")
    if not lineage.entries:
        console.print("[yellow]No audit entries[/yellow]")
        return

    table = Table()
    table.add_column("Timestamp", style="dim")
    table.add_column("Action", style="cyan")
    table.add_column("Actor", justify="right")
    table.add_column("Artifact")
    table.add_column("Suite")
    table.add_column("Run", justify="right")

    for item in lineage.entries:
        table.add_row(
            item.entry.timestamp.isoformat(),
            item.entry.action,
            str(item.entry.actor),
            item.code_artifact.class_name if item.code_artifact else "-",
            item.test_suite.framework if item.test_suite else "-",
            f"#{item.pipeline_run.run_number}" if item.pipeline_run else "-",
        )

    console.print(table)


@audit_app.command("summary")
def audit_summary():
    """Show counters over the whole audit trail."""
    from compliance_dashboard.database import async_session_maker
    from compliance_dashboard.services.lineage import LineageService

    async def _summary():
        async with async_session_maker() as session:
            return await LineageService(session).get_summary()

    summary = run_async(_summary())

    table = Table(title="Audit Trail")
    table.add_column("Metric", style="cyan")
    table.add_column("Count", style="green", justify="right")
    table.add_row("Total entries", str(summary.total_entries))
    table.add_row("Rules tracked", str(summary.rules_tracked))
    table.add_row("Code generations", str(summary.code_generations))
    table.add_row("Pipeline executions", str(summary.pipeline_executions))
    for action, count in sorted(summary.by_action.items()):
        table.add_row(f"  {action}", str(count))
    console.print(table)


@app.command()
def dashboard():
    """Show the dashboard counters and the most recent pipeline runs."""
    from compliance_dashboard.database import async_session_maker
    from compliance_dashboard.services.dashboard import DashboardService

    async def _dashboard():
        async with async_session_maker() as session:
            return await DashboardService(session).get_summary()

    summary = run_async(_dashboard())

    table = Table(title="Compliance Dashboard")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")
    table.add_row("Governance rules", str(summary.total_rules))
    table.add_row("Active rules", str(summary.active_rules))
    table.add_row("Code artifacts", str(summary.total_artifacts))
    table.add_row("Test suites", str(summary.total_test_suites))
    table.add_row("Pipeline runs", str(summary.total_runs))
    table.add_row("Passed runs", str(summary.passed_runs))
    table.add_row("Pass rate", f"{summary.pass_rate}%")
    console.print(table)

    if summary.recent_runs:
        runs = Table(title="Recent Pipeline Runs")
        runs.add_column("Run", justify="right")
        runs.add_column("Status")
        runs.add_column("Gate")
        runs.add_column("Started", style="dim")
        for run in summary.recent_runs:
            runs.add_row(
                f"#{run.run_number}",
                run.status,
                "[green]passed[/green]" if run.compliance_gate_passed else "[red]blocked[/red]",
                run.started_at.isoformat(),
            )
        console.print(runs)


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", "--host", "-h", help="Host to bind to"),
    port: int = typer.Option(8000, "--port", "-p", help="Port to bind to"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload"),
):
    """Start the API server."""
    import uvicorn

    console.print("[green]Starting Compliance Governance Dashboard API...[/green]")
    console.print(f"  Host: {host}")
    console.print(f"  Port: {port}")
    console.print(f"  Docs: http://localhost:{port}/api/v1/docs")

    uvicorn.run(
        "compliance_dashboard.api.main:app",
        host=host,
        port=port,
        reload=reload,
    )


if __name__ == "__main__":
    app()
