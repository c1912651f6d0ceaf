#!/usr/bin/env python3
"""
rdbops CLI
==========

Offline analysis of snapshot summary documents and the API server entry point.
"""
import json
import sys
from pathlib import Path
from typing import Any

import click
import yaml
from pydantic import ValidationError

from .analytics.health_scorer import health_status
from .analytics.models import AnomalyLevel, Report
from .analytics.ops_analyzer import analyze
from .core.config import settings
from .core.exceptions import BaseApplicationException
from .domain.entities.snapshot import AggregateSnapshotSummary, Entry
from .domain.services.summary_builder import SummaryBuilder


def _section(report: Report, section: str) -> dict[str, Any]:
    if section == "anomalies":
        return {
            level.value: [a.to_dict() for a in report.anomalies_by_level(level)]
            for level in AnomalyLevel
        } | {"total": len(report.anomalies), "health_score": report.health_score}
    if section == "recommendations":
        return {
            "recommendations": [r.to_dict() for r in report.recommendations],
            "total": len(report.recommendations),
        }
    if section == "health":
        return {
            "health_score": report.health_score,
            "health_status": health_status(report.health_score).value,
            "critical_issues": len(report.anomalies_by_level(AnomalyLevel.CRITICAL)),
            "warnings": len(report.anomalies_by_level(AnomalyLevel.WARNING)),
            "total_anomalies": len(report.anomalies),
            "recommendations": len(report.recommendations),
        }
    return report.to_dict()


def _emit(data: dict[str, Any], output_format: str) -> None:
    if output_format == "json":
        click.echo(json.dumps(data, indent=2, default=str))
    else:
        click.echo(yaml.safe_dump(data, default_flow_style=False, indent=2, sort_keys=False))


@click.group()
def cli():
    """Operational analysis of Redis snapshot summaries."""
    pass


@cli.command("analyze")
@click.argument("summary_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--format", "output_format", type=click.Choice(["json", "yaml"]), default="json", help="Output format")
@click.option(
    "--section",
    type=click.Choice(["all", "anomalies", "recommendations", "health"]),
    default="all",
    help="Part of the report to print",
)
def analyze_command(summary_file: Path, output_format: str, section: str):
    """Analyze a JSON snapshot summary document."""
    try:
        document = json.loads(summary_file.read_text(encoding="utf-8"))
        summary = AggregateSnapshotSummary.from_dict(document)
    except json.JSONDecodeError as e:
        click.echo(f"Error: {summary_file} is not valid JSON: {e}", err=True)
        sys.exit(1)
    except BaseApplicationException as e:
        click.echo(f"Error: {e.message}", err=True)
        for error in e.details.get("errors", []):
            click.echo(f"  {'.'.join(str(p) for p in error['loc'])}: {error['msg']}", err=True)
        sys.exit(1)

    report = analyze(summary, snapshot_name=summary_file.name)
    _emit(_section(report, section), output_format)


@cli.command("summarize")
@click.argument("entries_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--cluster", is_flag=True, help="Compute per-slot totals")
@click.option("--delimiters", default=":", show_default=True, help="Characters separating key segments")
@click.option("--max-depth", type=int, default=None, help="Deepest prefix level to group")
def summarize_command(entries_file: Path, cluster: bool, delimiters: str, max_depth: int | None):
    """Build a summary document from newline-delimited JSON entries."""
    builder = SummaryBuilder(cluster_mode=cluster, delimiters=delimiters, max_prefix_depth=max_depth)
    with entries_file.open(encoding="utf-8") as fh:
        for lineno, line in enumerate(fh, start=1):
            if not line.strip():
                continue
            try:
                builder.add(Entry.model_validate_json(line))
            except ValidationError as e:
                click.echo(f"Error: {entries_file}:{lineno}: {e}", err=True)
                sys.exit(1)

    click.echo(builder.build().to_document().model_dump_json(indent=2))


@cli.command("serve")
@click.option("--host", default=None, help="Bind address")
@click.option("--port", type=int, default=None, help="Bind port")
def serve_command(host: str | None, port: int | None):
    """Start the HTTP API."""
    import uvicorn

    from .api.main import create_app

    uvicorn.run(
        create_app(),
        host=host or settings.api_host,
        port=port or settings.api_port,
        log_level=settings.api_log_level,
    )


if __name__ == "__main__":
    cli()
