"""Enqueue benchmark runs on the Cloud Tasks queue consumed by the runner."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any

from .config import TaskQueueConfig
from .errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass
class BenchmarkJob:
    """Request for the runner to benchmark one commit."""

    commit: str
    classes: list[str] = field(default_factory=list)
    branch: str | None = None
    pull_request: int | None = None

    def to_payload(self) -> dict[str, Any]:
        payload = {
            "commitHash": self.commit,
            "classes": list(self.classes),
            "branch": self.branch,
            "pullRequest": self.pull_request,
        }
        return {k: v for k, v in payload.items() if v is not None}


class TaskTrigger:
    """Creates HTTP tasks that POST a ``BenchmarkJob`` to the runner."""

    def __init__(self, config: TaskQueueConfig | None = None, client: Any = None) -> None:
        self.config = config or TaskQueueConfig()
        self._client = client

    def _get_client(self):
        if self._client is not None:
            return self._client
        from google.cloud import tasks_v2

        self._client = tasks_v2.CloudTasksClient()
        return self._client

    def _validate(self) -> None:
        missing = [
            name
            for name in ("PROJECT", "LOCATION", "QUEUE", "RUNNER_URL")
            if not getattr(self.config, name)
        ]
        if missing:
            raise ConfigurationError(
                "Task queue settings missing: " + ", ".join(f"PERFCI_TASKS_{m}" for m in missing)
            )

    def build_task(self, job: BenchmarkJob) -> dict[str, Any]:
        """Return the task in the dict form accepted by ``CloudTasksClient.create_task``."""
        http_request: dict[str, Any] = {
            "http_method": "POST",
            "url": self.config.RUNNER_URL,
            "headers": {"Content-Type": "application/json"},
            "body": json.dumps(job.to_payload()).encode("utf-8"),
        }
        if self.config.SERVICE_ACCOUNT_EMAIL:
            http_request["oidc_token"] = {
                "service_account_email": self.config.SERVICE_ACCOUNT_EMAIL,
            }
        return {"http_request": http_request}

    def enqueue(self, job: BenchmarkJob) -> str:
        """Create the task and return its fully-qualified name."""
        self._validate()
        client = self._get_client()
        parent = client.queue_path(self.config.PROJECT, self.config.LOCATION, self.config.QUEUE)
        task = self.build_task(job)

        logger.info("Enqueueing benchmark run for %s on %s", job.commit, parent)
        response = client.create_task(parent=parent, task=task)
        logger.info("Created task %s", response.name)
        return response.name
