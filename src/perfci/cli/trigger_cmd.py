"""Enqueue a benchmark run for a commit."""

import click

from ..config import TaskQueueConfig
from ..trigger import BenchmarkJob, TaskTrigger
from .utils import (
    handle_generic_error,
    handle_keyboard_interrupt,
    resolve_commit,
    skip_missing_commit,
)


@click.command()
@click.option("--commit", "-c", help="Commit to benchmark (default: $PERFCI_COMMIT, then $GITHUB_SHA)")
@click.option(
    "--class",
    "classes",
    multiple=True,
    help="Benchmark include pattern; repeatable (default: $PERFCI_TASKS_CLASSES)",
)
@click.option("--branch", envvar="GITHUB_REF_NAME", help="Branch the commit belongs to")
@click.option("--pull-request", type=int, help="Pull request number, if any")
@click.option("--dry-run", is_flag=True, help="Print the task instead of creating it")
def trigger(
    commit: str | None,
    classes: tuple[str, ...],
    branch: str | None,
    pull_request: int | None,
    dry_run: bool,
) -> None:
    """Ask the benchmark runner to benchmark a commit via Cloud Tasks."""
    commit = resolve_commit(commit)
    if commit is None:
        skip_missing_commit("trigger")
        return

    try:
        config = TaskQueueConfig()
        job = BenchmarkJob(
            commit=commit,
            classes=list(classes or config.DEFAULT_CLASSES),
            branch=branch,
            pull_request=pull_request,
        )
        task_trigger = TaskTrigger(config)

        if dry_run:
            click.echo(f"🧪 Dry run, payload for {config.RUNNER_URL or '<runner url unset>'}:")
            click.echo(task_trigger.build_task(job)["http_request"]["body"].decode("utf-8"))
            return

        name = task_trigger.enqueue(job)
        click.echo(f"🚀 Enqueued benchmark run for {commit}")
        click.echo(f"   Task: {name}")

    except KeyboardInterrupt:
        handle_keyboard_interrupt("Trigger")
    except Exception as e:
        handle_generic_error("Trigger", e)
