"""Show the stored JMH results for a commit."""

import json

import click
from rich.console import Console
from rich.table import Table

from ..config import StorageConfig
from ..result_store import build_result_store
from .utils import (
    handle_generic_error,
    handle_keyboard_interrupt,
    resolve_commit,
    skip_missing_commit,
)

console = Console()


@click.command()
@click.option("--commit", "-c", help="Commit to show (default: $PERFCI_COMMIT, then $GITHUB_SHA)")
@click.option("--json", "output_json", is_flag=True, help="Print results as JSON")
def show(commit: str | None, output_json: bool) -> None:
    """Show the JMH results stored for a commit."""
    commit = resolve_commit(commit)
    if commit is None:
        skip_missing_commit("show")
        return

    try:
        store = build_result_store(StorageConfig())
        result_set = store.find_results(commit)

        if result_set is None:
            click.echo(f"ℹ️  No JMH results stored for {commit}")
            return

        if output_json:
            rows = [
                {
                    "benchmark": r.benchmark,
                    "mode": r.mode,
                    "threads": r.threads,
                    "forks": r.forks,
                    "score": r.primary_metric.score,
                    "scoreError": r.primary_metric.score_error,
                    "scoreConfidence": list(r.primary_metric.score_confidence),
                    "scoreUnit": r.primary_metric.score_unit,
                }
                for r in result_set.results
            ]
            click.echo(json.dumps({"commit": commit, "key": result_set.key, "results": rows}, indent=2))
            return

        click.echo(f"📊 {result_set.key}")
        table = Table()
        table.add_column("Benchmark", style="cyan")
        table.add_column("Mode")
        table.add_column("Score", justify="right")
        table.add_column("Error", justify="right")
        table.add_column("CI", justify="right")
        table.add_column("Unit")
        for r in result_set.results:
            metric = r.primary_metric
            table.add_row(
                r.benchmark,
                r.mode,
                f"{metric.score:.3f}",
                f"{metric.score_error:.3f}",
                "[{:.3f}, {:.3f}]".format(*metric.score_confidence),
                metric.score_unit or "",
            )
        console.print(table)

    except KeyboardInterrupt:
        handle_keyboard_interrupt("Show results")
    except Exception as e:
        handle_generic_error("Show results", e)
