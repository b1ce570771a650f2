"""tiermem CLI - replay memory scripts and explore memory interactively.

Memory lives in process, so every command builds a fresh memory system,
drives it through the action dispatcher and renders the outcome.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional

import typer
from pydantic import BaseModel
from rich.console import Console
from rich.logging import RichHandler
from rich.markdown import Markdown
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from tiermem.container import MemorySystem, build_memory_system
from tiermem.core.result import Result
from tiermem.core.types import ConsolidationReport, MemoryStats
from tiermem.core.utils import utc_now
from tiermem.usecases.actions import MemoryActionDispatcher, status_code_for

# Initialize Typer app and Rich console
app = typer.Typer(
    name="tiermem",
    help="tiermem - three-tier memory for conversational assistants",
    add_completion=False,
)
console = Console()

EXPORT_VERSION = "0.1.0"
EXIT_COMMANDS = ["exit", "quit", "bye", "q"]


def configure_logging(verbose: bool) -> None:
    """Route log records through Rich, DEBUG when verbose, WARNING otherwise."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


def load_script(path: Path) -> list[dict[str, Any]]:
    """Read a JSON action script.

    The file holds either a list of ``{"action", "params"}`` objects or an
    object with such a list under ``"actions"``.

    Raises:
        ValueError: If the file does not have that shape.
    """
    with open(path) as f:
        data = json.load(f)

    if isinstance(data, dict):
        data = data.get("actions")

    if not isinstance(data, list) or not all(isinstance(step, dict) for step in data):
        raise ValueError("Script must be a list of {action, params} objects")

    return data


def summarize(value: Any) -> str:
    """One-line description of a use-case result value."""
    if value is None:
        return "-"
    if isinstance(value, MemoryStats):
        return (
            f"{value.episodic.episodes} episodes, "
            f"{value.semantic.patterns} patterns, "
            f"{value.semantic.preferences} preferences"
        )
    if isinstance(value, BaseModel):
        identifier = getattr(value, "id", None)
        return identifier if identifier else type(value).__name__
    return str(value)


def print_stats(stats: MemoryStats) -> None:
    stats_table = Table(title="Memory Statistics", show_header=True, header_style="bold cyan")
    stats_table.add_column("Tier", style="cyan")
    stats_table.add_column("Collection", style="yellow")
    stats_table.add_column("Count", style="green", justify="right")

    stats_table.add_row(
        "Working", "Active session", "yes" if stats.working.has_active_session else "no"
    )
    stats_table.add_row("Episodic", "Episodes", str(stats.episodic.episodes))
    stats_table.add_row("Episodic", "Feedback", str(stats.episodic.feedback))
    stats_table.add_row("Episodic", "Task results", str(stats.episodic.task_results))
    stats_table.add_row("Episodic", "Emergent patterns", str(stats.episodic.emergent_patterns))
    stats_table.add_row("Semantic", "Facts", str(stats.semantic.facts))
    stats_table.add_row("Semantic", "Preferences", str(stats.semantic.preferences))
    stats_table.add_row("Semantic", "Validated patterns", str(stats.semantic.patterns))
    stats_table.add_row("Semantic", "Learned rules", str(stats.semantic.rules))

    console.print(stats_table)


def print_report(report: ConsolidationReport) -> None:
    report_table = Table(show_header=True, header_style="bold cyan")
    report_table.add_column("Metric", style="cyan")
    report_table.add_column("Value", style="green", justify="right")

    report_table.add_row("Session Consolidated", "yes" if report.session_consolidated else "no")
    report_table.add_row("Patterns Promoted", str(len(report.patterns_promoted)))
    report_table.add_row("Preferences Created", str(len(report.preferences_created)))
    report_table.add_row("Episodes Pruned", str(report.prune.episodes_pruned))
    report_table.add_row("Feedback Pruned", str(report.prune.feedback_pruned))
    report_table.add_row("Task Results Pruned", str(report.prune.task_results_pruned))
    report_table.add_row("Processing Time", f"{report.duration:.2f}s")

    console.print(report_table)


def consolidate_and_report(system: MemorySystem) -> Result[MemoryStats]:
    with console.status("[bold green]Consolidating memory..."):
        result = system.consolidate_memory.execute()

    if result.is_err():
        console.print(f"[red]Consolidation failed: {result.error.message}[/red]")
    elif system.consolidate_memory.last_report is not None:
        console.print("\n[bold green]Consolidation Complete![/bold green]\n")
        print_report(system.consolidate_memory.last_report)
    return result


def print_context(system: MemorySystem) -> None:
    context = system.query_service.get_full_context()
    if not context:
        console.print("[yellow]Memory is empty.[/yellow]")
        return
    console.print(Panel(Markdown(context), title="Full Context", border_style="cyan"))


def export_memory(system: MemorySystem, output: Path) -> None:
    """Write every tier, statistics and the profile to a JSON file."""
    profile = system.profiles.get()
    last_report = system.consolidate_memory.last_report
    export_data = {
        "timestamp": utc_now().isoformat(),
        "version": EXPORT_VERSION,
        "memory": system.query_service.query().model_dump(mode="json"),
        "stats": system.query_service.get_stats().model_dump(mode="json"),
        "profile": profile.model_dump(mode="json") if profile else None,
        "last_consolidation": last_report.model_dump(mode="json") if last_report else None,
    }

    with open(output, "w") as f:
        json.dump(export_data, f, indent=2, default=str)


@app.command()
def run(
    script: Path = typer.Argument(..., help="JSON file of actions to replay"),
    consolidate: bool = typer.Option(
        False, "--consolidate", "-c", help="Run consolidation after the script"
    ),
    context: bool = typer.Option(False, "--context", help="Print the full memory context"),
    export: Optional[Path] = typer.Option(
        None, "--export", "-o", help="Write the resulting memory to a JSON file"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """Replay a script of memory actions against a fresh memory system.

    Exits with status 1 when any action fails.
    """
    configure_logging(verbose)

    try:
        steps = load_script(script)
    except (OSError, ValueError) as e:
        console.print(f"[red]Error reading script: {e}[/red]")
        raise typer.Exit(1)

    system = build_memory_system()
    dispatcher = system.dispatcher()

    results_table = Table(title="Actions", show_header=True, header_style="bold cyan")
    results_table.add_column("#", style="dim", justify="right")
    results_table.add_column("Action", style="cyan")
    results_table.add_column("Status", justify="center")
    results_table.add_column("Result", style="yellow")

    failures = 0
    for index, step in enumerate(steps, 1):
        action = str(step.get("action", ""))
        result = dispatcher.dispatch(action, step.get("params") or {})
        if result.is_ok():
            results_table.add_row(str(index), action, "[green]ok[/green]", summarize(result.value))
        else:
            failures += 1
            results_table.add_row(
                str(index),
                action,
                f"[red]{status_code_for(result.error)}[/red]",
                result.error.message,
            )

    console.print(results_table)

    if consolidate:
        if consolidate_and_report(system).is_err():
            failures += 1

    console.print()
    print_stats(system.query_service.get_stats())

    if context:
        console.print()
        print_context(system)

    if export is not None:
        try:
            export_memory(system, export)
        except OSError as e:
            console.print(f"[red]Error writing export file: {e}[/red]")
            raise typer.Exit(1)
        console.print(f"\n[green]Exported memory to {export.absolute()}[/green]")

    if failures:
        console.print(f"\n[red]{failures} action(s) failed[/red]")
        raise typer.Exit(1)


@app.command()
def actions():
    """List the actions a script or the shell can use."""
    actions_table = Table(show_header=True, header_style="bold cyan")
    actions_table.add_column("Action", style="cyan")
    actions_table.add_column("Parameters", style="yellow")

    dispatcher = build_memory_system().dispatcher()
    for name in dispatcher.actions:
        params_model = dispatcher.params_model(name)
        fields = [
            (info.alias or field_name) + ("" if info.is_required() else "?")
            for field_name, info in params_model.model_fields.items()
        ]
        actions_table.add_row(name, ", ".join(fields) or "-")

    console.print(actions_table)


def _shell_step(system: MemorySystem, dispatcher: MemoryActionDispatcher, line: str) -> None:
    command, _, rest = line.partition(" ")

    if command == "stats":
        print_stats(system.query_service.get_stats())
        return
    if command == "context":
        print_context(system)
        return
    if command == "session":
        rendered = system.working.render_context()
        console.print(Markdown(rendered) if rendered else "[yellow]No active session.[/yellow]")
        return
    if command == "consolidate":
        consolidate_and_report(system)
        return
    if command == "reset":
        system.reset()
        console.print("[green]All memory has been cleared.[/green]")
        return

    try:
        params = json.loads(rest) if rest.strip() else {}
    except json.JSONDecodeError as e:
        console.print(f"[red]Invalid JSON params: {e}[/red]")
        return

    result = dispatcher.dispatch(command, params)
    if result.is_err():
        console.print(
            f"[red]{result.error.code} ({status_code_for(result.error)}): "
            f"{result.error.message}[/red]"
        )
        return

    value = result.value
    if isinstance(value, BaseModel):
        console.print_json(value.model_dump_json())
    else:
        console.print(summarize(value))


@app.command()
def shell(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """Start an interactive shell over an in-memory memory system."""
    configure_logging(verbose)

    console.print(Panel.fit(
        "[bold cyan]tiermem shell[/bold cyan]\n"
        "Type an action followed by JSON params, e.g.\n"
        '  recordEpisode {"type": "interaction", "description": "Hello", "tags": ["chat"]}\n'
        "Other commands: stats, context, session, consolidate, reset, exit.",
        border_style="cyan",
    ))

    system = build_memory_system()
    dispatcher = system.dispatcher()

    while True:
        try:
            line = Prompt.ask("\n[bold blue]tiermem[/bold blue]")
        except (KeyboardInterrupt, EOFError):
            console.print("\n[cyan]Goodbye![/cyan]")
            break

        line = line.strip()
        if not line:
            continue
        if line.lower() in EXIT_COMMANDS:
            console.print("[cyan]Goodbye![/cyan]")
            break

        _shell_step(system, dispatcher, line)


@app.callback()
def callback():
    """
    tiermem - three-tier memory for conversational assistants

    - Working memory: the active task session
    - Episodic memory: episodes, feedback and task results with retention
    - Semantic memory: facts, preferences, validated patterns and rules
    - Consolidation: promotion of recurring patterns and feedback
    """
    pass


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
