"""Regression gate command: fail the CI step when a benchmark got slower."""

import json
import sys

import click
from rich.console import Console
from rich.table import Table

from ..detector import Baseline, DetectionReport, Regression
from ..errors import RegressionsDetected
from ..results import ResultSet
from .utils import (
    build_detector,
    handle_generic_error,
    handle_keyboard_interrupt,
    resolve_commit,
    skip_missing_commit,
)

console = Console()


def _report_to_dict(report: DetectionReport) -> dict:
    return {
        "commit": report.commit,
        "status": report.status,
        "current_key": report.current.key if report.current is not None else None,
        "baseline_commit": report.baseline.commit if report.baseline is not None else None,
        "baseline_depth": report.baseline.depth if report.baseline is not None else None,
        "regressions": [
            {
                "benchmark": r.benchmark,
                "baseline_high": r.baseline_high,
                "current_low": r.current_low,
                "message": r.message,
            }
            for r in report.regressions
        ],
    }


def _print_comparison(current: ResultSet, baseline_run: Baseline, regressions: list[Regression]) -> None:
    """Rich table of every benchmark compared against the baseline."""
    baseline = baseline_run.results.by_name()
    regressed = {r.benchmark for r in regressions}

    table = Table(title=f"{current.commit[:12]} vs {baseline_run.commit[:12]}")
    table.add_column("Benchmark", style="cyan")
    table.add_column("Mode")
    table.add_column("Baseline CI", justify="right")
    table.add_column("Current CI", justify="right")
    table.add_column("Status")

    for name, result in current.by_name().items():
        previous = baseline.get(name)
        current_ci = "[{:g}, {:g}]".format(*result.primary_metric.score_confidence)
        if previous is None:
            table.add_row(name, result.mode, "-", current_ci, "[dim]new[/dim]")
            continue
        baseline_ci = "[{:g}, {:g}]".format(*previous.primary_metric.score_confidence)
        status = "[red]regressed[/red]" if name in regressed else "[green]ok[/green]"
        table.add_row(name, previous.mode, baseline_ci, current_ci, status)

    console.print(table)


@click.command()
@click.option(
    "--commit",
    "-c",
    help="Commit to check (default: $PERFCI_COMMIT, then $GITHUB_SHA)",
)
@click.option(
    "--max-depth",
    type=click.IntRange(min=1),
    default=None,
    help="Ancestry levels searched for a baseline (default: 10, or $PERFCI_MAX_DEPTH)",
)
@click.option("--json", "output_json", is_flag=True, help="Print the detection report as JSON")
def detect(commit: str | None, max_depth: int | None, output_json: bool) -> None:
    """Compare a commit's JMH results with its nearest benchmarked ancestor.

    Exits non-zero when any average-time benchmark's confidence interval lies
    entirely above the baseline's. Missing results or a missing baseline are
    reported and treated as success.
    """
    commit = resolve_commit(commit)
    if commit is None:
        skip_missing_commit("detect")
        return

    try:
        detector = build_detector(max_depth)
        report = detector.detect(commit)

        if output_json:
            click.echo(json.dumps(_report_to_dict(report), indent=2))
        elif report.current is None:
            click.echo(f"ℹ️  No JMH results stored for {commit}; nothing to compare")
        elif report.baseline is None:
            click.echo(
                f"ℹ️  No benchmarked ancestor of {commit} within {detector.max_depth} levels; "
                "nothing to compare against"
            )
        else:
            click.echo(
                f"🔎 Baseline: {report.baseline.commit} "
                f"({report.baseline.depth} level(s) back, {report.baseline.results.key})"
            )
            _print_comparison(report.current, report.baseline, report.regressions)

        if report.regressions:
            raise RegressionsDetected(report.regressions)

        if not output_json and report.baseline is not None:
            click.echo("✅ No performance regressions detected")

    except RegressionsDetected as e:
        click.echo(f"❌ {e}:", err=True)
        for regression in e.regressions:
            click.echo(f"   • {regression.message}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        handle_keyboard_interrupt("Regression detection")
    except Exception as e:
        handle_generic_error("Regression detection", e)
