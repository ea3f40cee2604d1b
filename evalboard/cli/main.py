"""Main CLI entry point for Evalboard."""

import json
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from evalboard import __version__
from evalboard.core.exceptions import EvalboardError, InvalidArgumentError
from evalboard.core.logging import (
    configure_logging_from_settings,
    correlation_context,
)
from evalboard.core.settings import EvalboardSettings, get_settings
from evalboard.loader import SessionLoader
from evalboard.reporting import SessionAnalyticsReporter, SessionReport

EXIT_SUCCESS = 0
EXIT_ERROR = 2


def _ranking_table(report: SessionReport) -> Table:
    table = Table(title="Evaluator Ranking", show_header=True, header_style="bold cyan")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Evaluator", style="green")
    table.add_column("Score", style="yellow", justify="right")
    for position, entry in enumerate(report.ranking, start=1):
        table.add_row(str(position), entry.evaluator_name, f"{entry.score:.1f}")
    return table


def _category_table(report: SessionReport) -> Table:
    table = Table(title="Categories", show_header=True, header_style="bold cyan")
    table.add_column("Category", style="green")
    table.add_column("Average", justify="right")
    table.add_column("Max", style="dim", justify="right")
    table.add_column("%", style="yellow", justify="right")
    table.add_column("Weight", style="dim", justify="right")
    for c in report.category_averages:
        table.add_row(
            c.name or c.category_id,
            f"{c.average:.1f}",
            f"{c.max_score:g}",
            f"{c.percentage:.1f}",
            f"{c.weight * 100:.0f}%",
        )
    return table


def _agreement_table(report: SessionReport) -> Table | None:
    agreement = report.agreement
    if agreement is None or not agreement.is_sufficient:
        return None

    overall = (agreement.overall_agreement or 0.0) * 100
    table = Table(
        title=f"Evaluator Agreement (overall {overall:.1f}%)",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Criterion", style="green")
    table.add_column("Agreement", justify="right")
    table.add_column("Level")
    table.add_column("Mean", justify="right")
    table.add_column("Std Dev", justify="right")
    table.add_column("n", style="dim", justify="right")
    styles = {"high": "green", "moderate": "yellow", "low": "red"}
    for record in agreement.criteria:
        level = record.level.value
        table.add_row(
            record.criterion_name,
            f"{record.agreement * 100:.1f}%",
            f"[{styles[level]}]{level}[/{styles[level]}]",
            f"{record.mean:.1f}",
            f"{record.stddev:.2f}",
            str(len(record.scores)),
        )
    return table


def _distribution_table(report: SessionReport, criterion_id: str) -> Table | None:
    for distribution in report.distributions:
        if distribution.criterion_id != criterion_id:
            continue
        s = distribution.stats
        table = Table(
            title=(
                f"{distribution.criterion_name}: mean {s.mean:.1f}, "
                f"median {s.median:.1f}, sd {s.stddev:.1f}"
            ),
            show_header=True,
            header_style="bold cyan",
        )
        table.add_column("Range", style="green")
        table.add_column("Count", justify="right")
        table.add_column("%", style="yellow", justify="right")
        for b in distribution.histogram:
            table.add_row(b.label, str(b.count), f"{b.percentage:.1f}")
        return table
    return None


def _timeline_table(report: SessionReport) -> Table | None:
    timeline = report.timeline
    if timeline is None:
        return None
    table = Table(
        title=(
            f"Comments over time ({timeline.total_comments} total, "
            f"{timeline.average_per_interval:.1f} per interval)"
        ),
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Interval", style="green")
    table.add_column("Comments", justify="right")
    peaks = set(timeline.peak_intervals) if timeline.total_comments else set()
    for label, count in zip(
        timeline.intervals.labels, timeline.intervals.counts, strict=True
    ):
        marker = " [bold red]peak[/bold red]" if label in peaks else ""
        table.add_row(label, f"{count}{marker}")
    return table


def _print_report(
    console: Console, report: SessionReport, criterion_id: str | None
) -> None:
    o = report.overview
    console.print(f"[bold]Session:[/bold] {report.session_name or report.session_id}")
    console.print(
        f"Evaluations: {o.completed_evaluations}/{o.total_evaluations} complete, "
        f"average score {o.average_score:.1f}"
    )
    if not report.has_data:
        console.print("[yellow]No evaluations have been submitted yet.[/yellow]")
        return

    console.print(_ranking_table(report))
    console.print(_category_table(report))

    agreement_table = _agreement_table(report)
    if agreement_table is None:
        console.print("[yellow]Agreement analysis needs at least 2 evaluators.[/yellow]")
    else:
        console.print(agreement_table)

    target = criterion_id or (
        report.distributions[0].criterion_id if report.distributions else None
    )
    distribution_table = _distribution_table(report, target) if target else None
    if distribution_table is None:
        console.print("[yellow]No scores for the selected criterion.[/yellow]")
    else:
        console.print(distribution_table)

    timeline_table = _timeline_table(report)
    if timeline_table is not None:
        console.print(timeline_table)
        if report.timeline and report.timeline.hotspots:
            spots = ", ".join(
                f"{h.time} ({h.count})" for h in report.timeline.hotspots
            )
            console.print(f"Hotspots: {spots}")


@click.group()
@click.option(
    "--config",
    "-c",
    "config_file",
    type=click.Path(exists=True, path_type=Path),
    help="Path to evalboard.config.yaml configuration file",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.version_option(version=__version__, prog_name="evalboard")
@click.pass_context
def cli(ctx: click.Context, config_file: Path | None, verbose: bool) -> None:
    """Evalboard - analytics for video evaluation sessions.

    Examples:

      # Analyse a session snapshot
      evalboard analyze session.yaml

      # Emit JSON for export
      evalboard analyze session.json --output=json
    """
    try:
        settings = get_settings(config_file=config_file)
    except ValueError as e:
        raise click.ClickException(f"Invalid configuration: {e}") from e

    configure_logging_from_settings(settings, level="DEBUG" if verbose else None)
    ctx.obj = settings


@cli.command(name="analyze")
@click.argument("session_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--video-duration",
    type=float,
    default=None,
    help="Video duration in seconds (default: from session, then config)",
)
@click.option(
    "--cluster-width",
    type=float,
    default=None,
    help="Hotspot window width in seconds",
)
@click.option("--top-n", type=int, default=None, help="Number of hotspots to show")
@click.option(
    "--criterion",
    "criterion_id",
    type=str,
    default=None,
    help="Criterion id for the score distribution (default: first criterion)",
)
@click.option(
    "--output",
    "-o",
    type=click.Choice(["console", "json"]),
    default="console",
    help="Output format",
)
@click.pass_obj
def analyze_command(
    settings: EvalboardSettings,
    session_file: Path,
    video_duration: float | None,
    cluster_width: float | None,
    top_n: int | None,
    criterion_id: str | None,
    output: str,
) -> None:
    """Compute analytics for a session snapshot.

    SESSION_FILE is a YAML or JSON file with the session template,
    evaluations, users and (optionally) the video duration.

    Exit Codes:

      0 - Report generated
      2 - Error occurred
    """
    console = Console()

    try:
        session = SessionLoader().load_file(session_file)
        reporter = SessionAnalyticsReporter(settings.analytics)
        with correlation_context(session.id):
            report = reporter.build_report(
                session,
                video_duration=video_duration,
                cluster_width=cluster_width,
                top_n=top_n,
            )
    except InvalidArgumentError as e:
        console.print(f"[red]Invalid argument:[/red] {e}")
        sys.exit(EXIT_ERROR)
    except EvalboardError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(EXIT_ERROR)

    if output == "json":
        click.echo(json.dumps(reporter.format_json_summary(report), indent=2))
    else:
        _print_report(console, report, criterion_id)
    sys.exit(EXIT_SUCCESS)


@cli.command(name="config")
@click.pass_obj
def config_command(settings: EvalboardSettings) -> None:
    """Show the effective configuration as JSON."""
    click.echo(json.dumps(settings.to_dict(), indent=2))


def main() -> None:
    """Entry point for the CLI."""
    cli(auto_envvar_prefix="EVALBOARD")


if __name__ == "__main__":
    main()
