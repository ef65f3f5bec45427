"""Command-line interface for the Training Tracker tool."""

import logging
import uuid
from datetime import date
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box

from .config import config, Config
from .analysis import ExperimentRunner, find_plan, predefined_plans, summarize_results
from .analysis.summary import describe
from .db import close_db, get_db
from .journal import TrainingJournal
from .reports import ExportError, default_report_name, write_experiment_report, write_sessions_csv

console = Console()
logger = logging.getLogger(__name__)


def escape_markup(text: str) -> str:
    """Escape rich markup brackets in user-provided text."""
    return str(text).replace('[', r'\[').replace(']', r'\]')


def wait_for(runner: ExperimentRunner, future, message: str):
    """Join a runner future behind a status spinner, cancelling it on Ctrl-C."""
    try:
        with console.status(f"[black]{escape_markup(message)}[/black]"):
            return future.result()
    except KeyboardInterrupt:
        runner.cancel()
        raise


@click.group()
def cli():
    """Training plan experiments and workout log."""
    pass


@cli.command()
def plans():
    """List the available training plans."""
    table = Table(title="Training Plans", box=box.ROUNDED)
    table.add_column("Plan", style="bold")
    table.add_column("Stimulus", justify="right")
    table.add_column("Adaptation", justify="right")
    table.add_column("Fatigue", justify="right")
    table.add_column("Recovery", justify="right")
    table.add_column("Variation", justify="right")

    for plan in predefined_plans():
        table.add_row(
            plan.name,
            f"{plan.base_stimulus:.1f}",
            f"{plan.adaptation_rate:.2f}",
            f"{plan.fatigue_rate:.2f}",
            f"{plan.recovery_speed:.1f}",
            f"{plan.variation * 100:.0f}%",
        )

    console.print(table)


@cli.command()
@click.option("--weeks", default=config.DEFAULT_WEEKS, show_default=True,
              type=click.IntRange(Config.MIN_WEEKS, Config.MAX_WEEKS), help="Plan length in weeks")
@click.option("--sessions", default=config.DEFAULT_SESSIONS, show_default=True,
              type=click.IntRange(Config.MIN_SESSIONS, Config.MAX_SESSIONS), help="Workouts per week")
@click.option("--runs", default=config.DEFAULT_RUNS, show_default=True,
              type=click.IntRange(Config.MIN_RUNS, Config.MAX_RUNS), help="Simulated repetitions per plan")
@click.option("--plan", "plan_names", multiple=True, help="Plan to include (repeatable, defaults to all)")
@click.option("--export", help="Write the results to this CSV file or directory")
@click.option("--trajectory", is_flag=True, help="Show the weekly trajectory of the best plan")
def experiment(weeks, sessions, runs, plan_names, export, trajectory):
    """Compare training plans with a Monte-Carlo experiment."""
    console.print(Panel.fit(
        f"🧪 Training Experiment ({weeks} weeks, {sessions}/week, {runs} runs)", style="bold blue"
    ))

    try:
        if plan_names:
            selected = list({plan.name: plan for plan in map(find_plan, plan_names)}.values())
        else:
            selected = predefined_plans()
    except KeyError as e:
        console.print(f"[red]❌ {escape_markup(e.args[0])}[/red]")
        return

    with ExperimentRunner() as runner:
        try:
            results = wait_for(
                runner, runner.submit(selected, weeks, sessions, runs), "Running simulations..."
            )
        except Exception as e:
            logger.exception("Experiment failed")
            console.print(f"[red]❌ Could not run the experiment: {escape_markup(e)}[/red]")
            return

        summary = summarize_results(results)
        weekly = None
        if trajectory:
            best = find_plan(summary.best_overall.plan_name)
            try:
                df = wait_for(
                    runner, runner.submit_trajectory(best, weeks, sessions, runs),
                    f"Simulating trajectory of {best.name}...",
                )
                weekly = df.groupby(((df['day'] - 1) // 7 + 1).rename('week')).last()
            except Exception as e:
                logger.exception("Trajectory failed")
                console.print(f"[red]❌ Could not simulate the trajectory: {escape_markup(e)}[/red]")

    table = Table(title="Results", box=box.ROUNDED)
    table.add_column("Plan", style="bold")
    table.add_column("Avg form", justify="right", style="green")
    table.add_column("95% form", justify="right", style="cyan")
    table.add_column("Burnout", justify="right", style="red")
    table.add_column("Stability", justify="right", style="magenta")

    for result in results:
        table.add_row(
            result.plan_name,
            f"{result.average_fitness:.1f}",
            f"{result.fitness_percentile_95:.1f}",
            f"{result.burnout_probability * 100:.1f}%",
            f"{result.stability:.2f}",
        )

    console.print(table)

    console.print(Panel("\n".join(describe(summary)), title="📊 Summary", box=box.ROUNDED))
    console.print(f"[green]✅ Done. Plans simulated: {len(results)}.[/green]")

    if weekly is not None:
        traj_table = Table(title=f"Weekly Trajectory: {summary.best_overall.plan_name}", box=box.ROUNDED)
        traj_table.add_column("Week", justify="right")
        traj_table.add_column("Fitness", justify="right", style="green")
        traj_table.add_column("Fatigue", justify="right", style="yellow")
        traj_table.add_column("Score", justify="right", style="cyan")
        traj_table.add_column("Burnt out", justify="right", style="red")
        for week, row in weekly.iterrows():
            traj_table.add_row(
                str(week),
                f"{row['fitness']:.1f}",
                f"{row['fatigue']:.1f}",
                f"{row['score']:.1f}",
                f"{row['burnout_share'] * 100:.1f}%",
            )
        console.print(traj_table)

    if export:
        target = Path(export)
        if target.is_dir():
            target = target / default_report_name()
        try:
            write_experiment_report(target, results, summary)
            console.print(f"[green]✅ Results exported to {escape_markup(target)}[/green]")
        except ExportError as e:
            console.print(f"[red]❌ {escape_markup(e)}[/red]")


@cli.group()
def log():
    """Workout log commands."""
    pass


@log.command("add")
@click.option("--date", "session_date", type=click.DateTime(formats=["%Y-%m-%d"]),
              help="Session date (YYYY-MM-DD), defaults to today")
@click.option("--type", "workout_type", required=True, help="Workout type, e.g. Run or Strength")
@click.option("--duration", required=True, type=int, help="Duration in minutes")
@click.option("--intensity", required=True, type=click.IntRange(1, config.MAX_INTENSITY),
              help="Perceived intensity")
@click.option("--notes", default="", help="Free-text notes")
def log_add(session_date, workout_type, duration, intensity, notes):
    """Add a training session."""
    if not workout_type.strip():
        console.print("[red]❌ Workout type must not be empty.[/red]")
        return

    day = session_date.date() if session_date else date.today()
    try:
        session = TrainingJournal().add_session(day, workout_type, duration, intensity, notes)
    except Exception as e:
        console.print(f"[red]❌ Could not save the session: {escape_markup(e)}[/red]")
        return

    console.print(f"[green]✅ Logged {escape_markup(session.type)} on {session.date_formatted} "
                  f"({session.duration_minutes}min)[/green]")
    console.print(f"[black]ID: {session.id}[/black]")


@log.command("list")
def log_list():
    """List all training sessions, newest first."""
    try:
        sessions = TrainingJournal().get_sessions()
    except Exception as e:
        console.print(f"[red]❌ Database error: {escape_markup(e)}[/red]")
        return

    if not sessions:
        console.print("[yellow]No sessions logged yet.[/yellow]")
        return

    table = Table(title="Training Sessions", box=box.ROUNDED)
    table.add_column("Date", style="black")
    table.add_column("Type", style="yellow")
    table.add_column("Duration", style="green", justify="right")
    table.add_column("Intensity", style="magenta", justify="right")
    table.add_column("Notes")
    table.add_column("ID", style="dim")

    for s in sessions:
        table.add_row(
            s.date_formatted,
            escape_markup(s.type),
            f"{s.duration_minutes}min",
            str(s.intensity),
            escape_markup(s.notes[:40]),
            str(s.id),
        )

    console.print(table)


@log.command("remove")
@click.argument("session_id")
def log_remove(session_id):
    """Remove a training session by ID."""
    try:
        parsed = uuid.UUID(session_id)
    except ValueError:
        console.print(f"[red]❌ Not a valid session ID: {escape_markup(session_id)}[/red]")
        return

    try:
        removed = TrainingJournal().remove_session(parsed)
    except Exception as e:
        console.print(f"[red]❌ Could not remove the session: {escape_markup(e)}[/red]")
        return

    if removed:
        console.print("[green]✅ Session removed.[/green]")
    else:
        console.print("[yellow]⚠️  No session with that ID.[/yellow]")


@log.command("stats")
def log_stats():
    """Show workout log statistics."""
    try:
        stats = TrainingJournal().build_statistics()
    except Exception as e:
        console.print(f"[red]❌ Database error: {escape_markup(e)}[/red]")
        return

    favourite = escape_markup(stats.most_popular_workout) if stats.most_popular_workout else "-"
    console.print(Panel(
        f"""
[bold]Total Sessions:[/bold] {stats.total_sessions}
[bold]Total Time:[/bold] {stats.total_minutes} min
[bold]Average Duration:[/bold] {stats.average_duration_minutes:.1f} min
[bold]Average Intensity:[/bold] {stats.average_intensity:.1f}
[bold]Most Popular Workout:[/bold] {favourite}
[bold]Sessions Last 7 Days:[/bold] {stats.last_week_sessions}
        """,
        title="📊 Workout Log",
        box=box.ROUNDED,
    ))


@log.command("export")
@click.argument("path")
def log_export(path):
    """Export the workout log to a CSV file."""
    try:
        sessions = TrainingJournal().get_sessions()
        write_sessions_csv(path, sessions)
    except ExportError as e:
        console.print(f"[red]❌ {escape_markup(e)}[/red]")
        return
    except Exception as e:
        console.print(f"[red]❌ Database error: {escape_markup(e)}[/red]")
        return

    console.print(f"[green]✅ Exported {len(sessions)} sessions to {escape_markup(path)}[/green]")


@cli.command()
def reset():
    """Delete all logged sessions."""
    console.print(Panel.fit("⚠️  Reset Workout Log", style="bold yellow"))

    if not click.confirm("This will delete all data. Are you sure?"):
        console.print("[black]Operation cancelled.[/black]")
        return

    try:
        get_db().reset()
        console.print("[green]✅ Workout log reset successfully![/green]")
    except Exception as e:
        console.print(f"[red]❌ Error resetting workout log: {escape_markup(e)}[/red]")


def main():
    """Main entry point."""
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        config.validate()
        cli()
    except KeyboardInterrupt:
        console.print("\n[orange1]Operation cancelled by user.[/orange1]")
    except Exception as e:
        console.print(f"[red]❌ Unexpected error: {escape_markup(e)}[/red]")
    finally:
        close_db()


if __name__ == "__main__":
    main()
