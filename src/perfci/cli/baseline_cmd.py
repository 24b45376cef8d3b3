"""Print the nearest benchmarked ancestor of a commit."""

import click

from ..detector import find_baseline
from .utils import (
    build_detector,
    handle_generic_error,
    handle_keyboard_interrupt,
    resolve_commit,
    skip_missing_commit,
)


@click.command()
@click.option("--commit", "-c", help="Commit to start from (default: $PERFCI_COMMIT, then $GITHUB_SHA)")
@click.option(
    "--max-depth",
    type=click.IntRange(min=1),
    default=None,
    help="Ancestry levels to search (default: 10, or $PERFCI_MAX_DEPTH)",
)
def baseline(commit: str | None, max_depth: int | None) -> None:
    """Find the closest ancestor that has stored JMH results.

    The commit itself is not considered. Prints the baseline commit and its
    result key, or a notice when none is found within the search depth.
    """
    commit = resolve_commit(commit)
    if commit is None:
        skip_missing_commit("baseline")
        return

    try:
        detector = build_detector(max_depth)
        found = find_baseline(commit, detector.store, detector.ancestry, detector.max_depth)

        if found is None:
            click.echo(f"ℹ️  No benchmarked ancestor of {commit} within {detector.max_depth} levels")
            return

        click.echo(f"📍 Baseline: {found.commit}")
        click.echo(f"   Depth: {found.depth}")
        click.echo(f"   Results: {found.results.key} ({len(found.results)} benchmarks)")

    except KeyboardInterrupt:
        handle_keyboard_interrupt("Baseline search")
    except Exception as e:
        handle_generic_error("Baseline search", e)
