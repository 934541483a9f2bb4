"""
Talent-Triage Command Line Interface

Provides CLI commands for scoring resumes, configuring and running job
automation, and bulk status changes.
"""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from talent_triage.core.exceptions import TriageError

app = typer.Typer(
    name="talent-triage",
    help="Candidate matching and automated triage CLI",
    add_completion=False,
)
console = Console()

SCORE_COLORS = ((80, "green"), (60, "yellow"), (0, "red"))


def _score_color(score: int) -> str:
    for floor, color in SCORE_COLORS:
        if score >= floor:
            return color
    return "red"


def _read_text(path: Optional[Path], text: Optional[str], label: str) -> str:
    if path is not None:
        if not path.exists():
            console.print(f"[red]Error: {label} file does not exist: {path}[/red]")
            raise typer.Exit(1)
        return path.read_text(encoding="utf-8")
    if text is not None:
        return text
    console.print(f"[red]Error: provide a {label} file or --{label}-text[/red]")
    raise typer.Exit(1)


def _fail(error: Exception) -> None:
    console.print(f"[red]Error: {error}[/red]")
    raise typer.Exit(1)


def _get_service():
    from talent_triage.data.database import get_database_manager
    from talent_triage.services import get_triage_service

    if not get_database_manager().check_sync_connection():
        console.print("[red]Error: Could not connect to MongoDB. Run 'init-db' first.[/red]")
        raise typer.Exit(1)
    return get_triage_service()


@app.callback()
def main():
    """Configure logging before any command runs."""
    from talent_triage.utils.logger import setup_logging

    setup_logging()


@app.command()
def version():
    """Show application version."""
    from talent_triage import __app_name__, __version__

    console.print(f"[bold blue]{__app_name__}[/bold blue] version [green]{__version__}[/green]")


@app.command()
def info():
    """Show system information and configuration."""
    from talent_triage.utils.config import get_settings

    settings = get_settings()

    table = Table(title="Talent-Triage Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Environment", settings.environment)
    table.add_row("Debug Mode", str(settings.debug))
    table.add_row("Database Host", settings.database.host)
    table.add_row("Database Name", settings.database.name)
    table.add_row("Skill Vocabulary", settings.matching.skill_vocabulary_version)
    table.add_row(
        "Scoring Weights",
        ", ".join(f"{k}={v:.2f}" for k, v in settings.matching.weights().items()),
    )
    table.add_row(
        "Default Thresholds",
        f"reject <= {settings.automation.default_reject_threshold}, "
        f"shortlist >= {settings.automation.default_shortlist_threshold}",
    )
    table.add_row("Notifications", "on" if settings.notifications.enabled else "off")
    table.add_row("Log Level", settings.logging.level)

    console.print(table)


@app.command()
def init_db():
    """Create the indexes of every collection the engine uses."""
    from pymongo.errors import PyMongoError

    from talent_triage.data.database import get_database_manager

    console.print("[yellow]Initializing database...[/yellow]")

    db_manager = get_database_manager()
    console.print("  Checking database connection...")
    if not db_manager.check_sync_connection():
        console.print("[red]Error: Could not connect to MongoDB.[/red]")
        console.print("[dim]Make sure MongoDB is running and connection settings are correct.[/dim]")
        raise typer.Exit(1)
    console.print("  [green]✓[/green] Connected to MongoDB")

    try:
        collections = db_manager.ensure_indexes()
    except PyMongoError as e:
        _fail(e)
    finally:
        db_manager.close_all()
    for name in collections:
        console.print(f"  [green]✓[/green] {name}")

    console.print("\n[green]Database initialized successfully![/green]")


@app.command()
def score(
    resume: Optional[Path] = typer.Argument(None, help="Resume text file"),
    job_description: Optional[Path] = typer.Argument(None, help="Job description text file"),
    resume_text: Optional[str] = typer.Option(None, "--resume-text", help="Resume as inline text"),
    job_text: Optional[str] = typer.Option(None, "--job-text", help="Job description as inline text"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
):
    """Score a resume against a job description."""
    from talent_triage.core.matching import get_matching_engine
    from talent_triage.data.models import ScoreInput

    inputs = ScoreInput(
        resume_text=_read_text(resume, resume_text, "resume"),
        job_description_text=_read_text(job_description, job_text, "job"),
    )

    try:
        result = get_matching_engine().score_input(inputs)
    except TriageError as e:
        _fail(e)

    if as_json:
        console.print_json(json.dumps(result.to_api()))
        return

    table = Table(title="Match Result")
    table.add_column("Factor", style="cyan")
    table.add_column("Score", justify="right")
    for label, value in (
        ("Overall", result.overall_score),
        ("Skills", result.skills_match),
        ("Experience", result.experience_match),
        ("Education", result.education_match),
    ):
        color = _score_color(value)
        table.add_row(label, f"[{color}]{value}%[/{color}]")
    console.print(table)

    console.print(f"\n[green]Matched skills:[/green] {', '.join(result.matched_skills) or '-'}")
    console.print(f"[yellow]Missing skills:[/yellow] {', '.join(result.missing_skills) or '-'}")
    console.print("\n[bold]Recommendations:[/bold]")
    for recommendation in result.recommendations:
        console.print(f"  • {recommendation}")


@app.command()
def decide(
    overall_score: int = typer.Argument(..., help="Overall match score (0-100)"),
    auto_reject: bool = typer.Option(False, "--auto-reject", help="Enable auto-reject"),
    reject_threshold: Optional[int] = typer.Option(None, "--reject-threshold", help="Reject at or below"),
    auto_shortlist: bool = typer.Option(False, "--auto-shortlist", help="Enable auto-shortlist"),
    shortlist_threshold: Optional[int] = typer.Option(None, "--shortlist-threshold", help="Shortlist at or above"),
):
    """Show which automated action a score would trigger."""
    from pydantic import ValidationError

    from talent_triage.core.automation import decide as decide_action
    from talent_triage.data.models import AutomationConfig
    from talent_triage.utils.config import get_settings

    defaults = get_settings().automation
    try:
        config = AutomationConfig(
            job_id="cli",
            auto_reject_enabled=auto_reject,
            auto_reject_threshold=(
                defaults.default_reject_threshold if reject_threshold is None else reject_threshold
            ),
            auto_shortlist_enabled=auto_shortlist,
            auto_shortlist_threshold=(
                defaults.default_shortlist_threshold if shortlist_threshold is None else shortlist_threshold
            ),
        )
        action = decide_action(overall_score, config)
    except (ValidationError, TriageError) as e:
        _fail(e)

    console.print(f"Action: [bold]{action.value}[/bold]")
    if action.target_status is not None:
        console.print(f"Status: [cyan]{action.target_status.value}[/cyan]")


@app.command()
def configure_automation(
    job_id: str = typer.Argument(..., help="Job posting ID"),
    user: str = typer.Option(..., "--user", "-u", help="Recruiter user ID"),
    auto_reject: bool = typer.Option(False, "--auto-reject", help="Enable auto-reject"),
    reject_threshold: Optional[int] = typer.Option(None, "--reject-threshold", help="Reject at or below"),
    auto_shortlist: bool = typer.Option(False, "--auto-shortlist", help="Enable auto-shortlist"),
    shortlist_threshold: Optional[int] = typer.Option(None, "--shortlist-threshold", help="Shortlist at or above"),
):
    """Store a job's automation thresholds."""
    service = _get_service()
    try:
        config = service.configure_automation(
            job_id,
            user,
            auto_reject_enabled=auto_reject,
            auto_reject_threshold=reject_threshold,
            auto_shortlist_enabled=auto_shortlist,
            auto_shortlist_threshold=shortlist_threshold,
        )
    except TriageError as e:
        _fail(e)

    table = Table(title=f"Automation for job {job_id}")
    table.add_column("Rule", style="cyan")
    table.add_column("Enabled", justify="center")
    table.add_column("Threshold", justify="right")
    table.add_row("Auto-reject", "✓" if config.auto_reject_enabled else "-", f"<= {config.auto_reject_threshold}")
    table.add_row(
        "Auto-shortlist", "✓" if config.auto_shortlist_enabled else "-", f">= {config.auto_shortlist_threshold}"
    )
    console.print(table)


@app.command()
def batch(
    job_id: str = typer.Argument(..., help="Job posting ID"),
    action: str = typer.Argument(..., help="Target status (shortlisted, rejected, interview, ...)"),
    application_ids: list[str] = typer.Argument(..., help="Prefixed IDs: candidate-<id> or public-<id>"),
    user: str = typer.Option(..., "--user", "-u", help="Recruiter user ID"),
):
    """Move several applications of a job to one status."""
    from talent_triage.data.models import BatchRequest

    request = BatchRequest(application_ids=tuple(application_ids), action=action)
    service = _get_service()
    try:
        result = service.apply_request(job_id, request, user)
    except TriageError as e:
        _fail(e)

    color = "yellow" if result.partial_failure else "green"
    console.print(f"[{color}]{result.message}[/{color}]")
    for error in result.errors:
        console.print(
            f"[red]  {error.kind} applications failed ({', '.join(error.application_ids)}): "
            f"{error.message}[/red]"
        )
    if result.partial_failure:
        raise typer.Exit(2)


@app.command()
def triage(
    job_id: str = typer.Argument(..., help="Job posting ID"),
    user: str = typer.Option(..., "--user", "-u", help="Recruiter user ID"),
):
    """Score a job's new applications and apply its automation rules."""
    service = _get_service()
    try:
        report = service.run_automation(job_id, user)
    except TriageError as e:
        _fail(e)

    console.print(
        f"Scored [cyan]{report.scored}[/cyan] application(s), skipped [dim]{report.skipped}[/dim] without resume text"
    )
    if report.decisions:
        table = Table(title="Automation Decisions")
        table.add_column("Application", style="cyan")
        table.add_column("Action", justify="center")
        for application_id, action in report.decisions.items():
            table.add_row(application_id, action)
        console.print(table)

    console.print(f"[green]{report.changed_count} status change(s) applied[/green]")
    for result in report.results:
        for error in result.errors:
            console.print(f"[red]  {error.kind} applications failed: {error.message}[/red]")


@app.command()
def applications(
    job_id: str = typer.Argument(..., help="Job posting ID"),
    user: str = typer.Option(..., "--user", "-u", help="Recruiter user ID"),
):
    """List a job's applications of both kinds."""
    service = _get_service()
    try:
        listing = service.list_applications(job_id, user)
    except TriageError as e:
        _fail(e)

    if not listing.applications:
        console.print("[yellow]No applications found for this job.[/yellow]")
        raise typer.Exit(0)

    table = Table(title=f"{listing.total} application(s) for job {job_id}")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Status")
    table.add_column("AI Score", justify="right")
    table.add_column("Received")
    for summary in listing.applications:
        color = _score_color(summary.ai_score)
        table.add_row(
            summary.id,
            summary.candidate_name,
            summary.status,
            f"[{color}]{summary.ai_score}[/{color}]",
            summary.created_at.strftime("%Y-%m-%d"),
        )
    console.print(table)
    console.print(
        f"Candidates: {listing.candidate_count}  Public: {listing.public_count}  "
        + "  ".join(f"{status}: {count}" for status, count in sorted(listing.by_status.items()))
    )


@app.command()
def reject(
    job_id: str = typer.Argument(..., help="Job posting ID"),
    application_id: str = typer.Argument(..., help="Prefixed application ID"),
    reason: list[str] = typer.Option(..., "--reason", "-r", help="Rejection reason (repeatable)"),
    user: str = typer.Option(..., "--user", "-u", help="Recruiter user ID"),
    message: Optional[str] = typer.Option(None, "--message", "-m", help="Custom message to the applicant"),
    send_email: bool = typer.Option(False, "--send-email", help="Notify the applicant"),
):
    """Reject one application with reasons."""
    service = _get_service()
    try:
        service.reject_application(
            job_id,
            application_id,
            user,
            reasons=reason,
            custom_message=message,
            send_email=send_email,
        )
    except TriageError as e:
        _fail(e)

    console.print(f"[green]✓ Rejected {application_id}[/green]")


if __name__ == "__main__":
    app()
