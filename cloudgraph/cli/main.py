"""``cloudgraph`` command-line interface.

Commands:
    analyze  -- run the full analysis over local files and print the result.
    validate -- structural checks only; non-zero exit on errors.
"""

from __future__ import annotations

import json
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from cloudgraph import __version__
from cloudgraph.analysis.pipeline import analyze as run_analysis
from cloudgraph.config import load_config
from cloudgraph.ingest import decode_files, validate_files
from cloudgraph.models.analysis import AnalysisOptions, AnalysisResult, AnalysisStatus
from cloudgraph.models.documents import FileInput
from cloudgraph.models.risks import Severity
from cloudgraph.observability.logging import setup_logging
from cloudgraph.serialization import to_jsonable

_SEVERITY_STYLES = {
    Severity.CRITICAL: "bold red",
    Severity.HIGH: "red",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "green",
}

_FILES_ARGUMENT = click.argument(
    "files",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)


def _read_files(paths: tuple[Path, ...]) -> list[FileInput]:
    return [FileInput(name=p.name, content=p.read_text(encoding="utf-8")) for p in paths]


@click.group()
@click.version_option(__version__, prog_name="cloudgraph")
def cli() -> None:
    """Analyze compose files and cluster manifests."""


@cli.command()
@_FILES_ARGUMENT
@click.option(
    "-o",
    "--output",
    type=click.Choice(["json", "table", "summary"]),
    default="table",
    show_default=True,
    help="Output format.",
)
@click.option("-m", "--mermaid", is_flag=True, help="Also print the container-view Mermaid diagram.")
@click.option("--no-infer", is_flag=True, help="Skip dependency inference from environment variables.")
@click.option("-v", "--verbose", is_flag=True, help="Log pipeline progress to stderr.")
def analyze(files: tuple[Path, ...], output: str, mermaid: bool, no_infer: bool, verbose: bool) -> None:
    """Analyze configuration FILES."""
    config = load_config()
    setup_logging("debug" if verbose else config.log.level, json_output=False)

    options = AnalysisOptions(
        infer_dependencies=config.analysis.infer_dependencies and not no_infer,
        include_raw=config.analysis.include_raw,
    )
    response = run_analysis(decode_files(_read_files(files)), options)
    if response.status == AnalysisStatus.ERROR or response.result is None:
        raise click.ClickException(f"Analysis failed: {response.error}")

    result = response.result
    for error in result.errors or []:
        click.secho(f"warning: {error}", fg="yellow", err=True)

    if output == "json":
        click.echo(json.dumps(to_jsonable(result), indent=2))
    elif output == "table":
        _print_tables(result)
    else:
        _print_summary(result)

    if mermaid:
        click.echo("")
        click.secho("Mermaid Diagram:", fg="cyan", bold=True)
        click.echo(result.diagrams.container_view)


def _print_tables(result: AnalysisResult) -> None:
    console = Console()

    resources = Table(title="Resources")
    for column in ("Name", "Type", "Platform", "File"):
        resources.add_column(column)
    for resource in result.summary.resources:
        resources.add_row(resource.name, resource.kind, resource.platform, resource.source_file or "-")
    console.print(resources)

    labels = {node.id: node.label for node in result.graph.nodes}
    dependencies = Table(title="Dependencies")
    for column in ("From", "To", "Type", "Inferred"):
        dependencies.add_column(column)
    for edge in result.graph.edges:
        dependencies.add_row(
            labels.get(edge.source, edge.source),
            labels.get(edge.target, edge.target),
            edge.type,
            "Yes" if edge.is_inferred else "No",
        )
    console.print(dependencies)

    if not result.risks:
        console.print("[green]No risks detected[/green]")
        return
    console.print(f"[bold yellow]Risks Found: {len(result.risks)}[/bold yellow]")
    for risk in result.risks:
        style = _SEVERITY_STYLES.get(risk.severity, "white")
        console.print(f"  [{style}]{risk.severity}[/{style}] {risk.title}: {risk.description}")


def _print_summary(result: AnalysisResult) -> None:
    click.secho("Summary:", fg="cyan", bold=True)
    click.echo(f"  Total Resources: {result.summary.total_resources}")
    click.echo(f"  Dependencies: {result.graph.metadata.total_edges}")
    click.echo(f"  Risks: {len(result.risks)}")
    click.echo("  By Type:")
    for kind, count in result.summary.by_kind.items():
        click.echo(f"    {kind}: {count}")
    for recommendation in result.recommendations:
        click.echo(f"  [{recommendation.priority}] {recommendation.title}: {recommendation.description}")


@cli.command()
@_FILES_ARGUMENT
@click.option("--strict", is_flag=True, help="Treat warnings as failures.")
def validate(files: tuple[Path, ...], strict: bool) -> None:
    """Validate configuration FILES without running an analysis."""
    report = validate_files(_read_files(files))

    click.secho("Validation Results:", fg="cyan", bold=True)
    for issue in report.errors:
        where = f"{issue.file}:{issue.line}" if issue.line is not None else issue.file
        click.secho(f"  error   {where}: {issue.message}", fg="red")
    for issue in report.warnings:
        click.secho(f"  warning {issue.file}: {issue.message}", fg="yellow")

    failed = not report.valid or (strict and bool(report.warnings))
    if failed:
        click.secho("Validation failed.", fg="red", bold=True)
        raise SystemExit(1)
    click.secho(f"All {len(files)} file(s) valid.", fg="green")
