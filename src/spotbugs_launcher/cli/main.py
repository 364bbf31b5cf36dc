"""Main CLI entry point."""

import asyncio
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from spotbugs_launcher.config import DEFAULT_CONFIG_NAME, Project, load_project
from spotbugs_launcher.dispatch import HYBRID_WORKER_ENV, WORKER_API_ENV, FeatureFlags
from spotbugs_launcher.exceptions import SpotBugsError, VerificationFailedError
from spotbugs_launcher.models.result import AnalysisResult
from spotbugs_launcher.task import SpotBugsTask

app = typer.Typer(
    name="spotbugs-launcher",
    help="Configure and run SpotBugs analysis tasks",
)
console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load(config: Path, flags: FeatureFlags | None = None) -> Project:
    try:
        return load_project(config, flags)
    except SpotBugsError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(1)


@app.command()
def run(
    config: Path = typer.Option(
        Path(DEFAULT_CONFIG_NAME), "--config", "-c", help="Project file"
    ),
    tasks: list[str] = typer.Option(
        None, "--task", "-t", help="Task to run, repeatable (default: all tasks)"
    ),
    worker: bool = typer.Option(
        False, "--worker/--no-worker", envvar=WORKER_API_ENV, help="Run through a worker"
    ),
    hybrid: bool = typer.Option(
        False,
        "--hybrid/--no-hybrid",
        envvar=HYBRID_WORKER_ENV,
        help="Use the in-process worker instead of an isolated one",
    ),
    ignore_failures: bool = typer.Option(
        False, "--ignore-failures", help="Do not fail on bugs for any task"
    ),
    keep_going: bool = typer.Option(
        False, "--continue", help="Run remaining tasks after a failure"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show analyzer output"),
):
    """
    Run SpotBugs tasks from a project file.

    Example:
        spotbugs-launcher run --task spotbugsMain
    """
    _setup_logging(verbose)
    console.print(
        Panel.fit(
            "[bold blue]SpotBugs Launcher[/bold blue]\n"
            "Static analysis of compiled classes",
            border_style="blue",
        )
    )

    flags = FeatureFlags(enable_worker_api=worker, enable_hybrid_worker=hybrid)
    project = _load(config, flags)
    try:
        selected = project.select(tasks)
    except SpotBugsError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(1)

    if ignore_failures:
        for task in selected:
            task.settings.ignore_failures = True

    console.print(f"   Project: {project.extension.project_name}")
    console.print(f"   Strategy: {flags.runner_kind.value}")

    asyncio.run(_run_async(selected, keep_going))


async def _run_async(selected: list[SpotBugsTask], keep_going: bool):
    """Async implementation of run."""
    results: list[AnalysisResult] = []
    failed = False

    for index, task in enumerate(selected, start=1):
        console.print(f"\n[bold]{index}. {task.name}[/bold]")
        try:
            with console.status(f"[bold green]Analyzing {task.name}..."):
                result = await task.run()
        except VerificationFailedError as e:
            failed = True
            result = e.result
            console.print(f"   [red]✗ {e}[/red]")
            if task.config.show_stack_traces:
                console.print_exception()
            _print_output_tail(result)
        except SpotBugsError as e:
            # Configuration and launch errors are always fatal
            console.print(f"   [red]✗ {e}[/red]")
            raise typer.Exit(1)
        else:
            if result.skipped:
                console.print("   [yellow]- Skipped, no classes to analyze[/yellow]")
            elif result.ignored_failure:
                console.print("   [yellow]! Failures ignored[/yellow]")
            else:
                console.print("   [green]✓ No issues[/green]")
        results.append(result)

        if failed and not keep_going:
            break

    console.print()
    console.print(_results_table(results))

    if failed:
        raise typer.Exit(1)


def _print_output_tail(result: AnalysisResult, lines: int = 50) -> None:
    if not result.output:
        return
    console.print(f"\n[bold yellow]SpotBugs Output (last {lines} lines):[/bold yellow]")
    for line in result.output.split("\n")[-lines:]:
        console.print(f"   {line}", markup=False)


def _results_table(results: list[AnalysisResult]) -> Table:
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Task", style="cyan")
    table.add_column("Success")
    table.add_column("Exit Code", justify="right")
    table.add_column("Duration", justify="right")
    table.add_column("Reports", style="yellow")

    for result in results:
        table.add_row(
            result.task_name,
            "✓ Yes" if result.success else "✗ No",
            "-" if result.exit_code is None else str(result.exit_code),
            f"{result.duration_sec:.1f}s",
            "\n".join(str(path) for path in result.reports) or "N/A",
        )
    return table


@app.command(name="tasks")
def list_tasks(
    config: Path = typer.Option(
        Path(DEFAULT_CONFIG_NAME), "--config", "-c", help="Project file"
    ),
):
    """List the tasks configured in a project file."""
    project = _load(config)

    if not project.tasks:
        console.print("[yellow]No tasks configured[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Task", style="cyan")
    table.add_column("Classes", justify="right")
    table.add_column("Enabled Reports", style="yellow")

    for task in project.tasks.values():
        reports = sorted(report.name for report in task.enabled_reports())
        table.add_row(task.name, str(len(task.classes)), ", ".join(reports) or "none")

    console.print(table)


@app.command()
def version():
    """Show version information."""
    from spotbugs_launcher import __version__

    console.print(f"spotbugs-launcher version {__version__}")


if __name__ == "__main__":
    app()
