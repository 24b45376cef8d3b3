"""Result store access for JMH result documents.

Each benchmarked commit has at most one object under
``<prefix><commit>`` (by default ``jmh-results/jmh-<commit>``).  Most
commits are never benchmarked, so an empty listing is the normal case.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from .errors import AmbiguousResultError, ConfigurationError
from .results import ResultSet, parse_results

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "jmh-results/jmh-"


class ResultStore(Protocol):
    """Lookup contract used by the regression detector."""

    def find_results(self, commit: str) -> ResultSet | None:
        """Return the stored results for *commit*, or None when it was never benchmarked."""


class S3ResultStore:
    """S3-backed result store.

    The boto3 client is created on first use and reused for the lifetime of
    the instance; pass ``client`` to supply one explicitly.
    """

    def __init__(
        self,
        bucket: str,
        prefix: str = DEFAULT_PREFIX,
        region_name: str | None = None,
        endpoint_url: str | None = None,
        client: Any = None,
    ) -> None:
        if not bucket:
            raise ConfigurationError("An S3 bucket is required to look up JMH results.")
        self.bucket = bucket
        self.prefix = prefix
        self.region_name = region_name
        self.endpoint_url = endpoint_url
        self._client = client

    def _get_client(self):
        if self._client is not None:
            return self._client
        import boto3

        self._client = boto3.client(
            "s3",
            region_name=self.region_name,
            endpoint_url=self.endpoint_url,
        )
        return self._client

    def _uri(self, key: str) -> str:
        return f"s3://{self.bucket}/{key}"

    def key_prefix(self, commit: str) -> str:
        return f"{self.prefix}{commit}"

    def find_results(self, commit: str) -> ResultSet | None:
        client = self._get_client()
        prefix = self.key_prefix(commit)
        listing = client.list_objects_v2(Bucket=self.bucket, Prefix=prefix)

        count = listing.get("KeyCount")
        keys = [obj["Key"] for obj in listing.get("Contents", [])]

        if count == 0:
            logger.debug("No results stored under %s", self._uri(prefix))
            return None
        if count != 1 or len(keys) != 1:
            raise AmbiguousResultError(commit, count, keys)

        key = keys[0]
        logger.info("Loading results for %s from %s", commit, self._uri(key))
        response = client.get_object(Bucket=self.bucket, Key=key)
        body = response["Body"].read()
        results = parse_results(body.decode("utf-8") if isinstance(body, bytes) else body)
        return ResultSet(commit=commit, key=key, results=tuple(results))


def build_result_store(config: Any = None) -> S3ResultStore:
    """Build the result store from a ``StorageConfig`` (environment-driven by default)."""
    if config is None:
        from .config import StorageConfig

        config = StorageConfig()
    return S3ResultStore(
        bucket=config.BUCKET,
        prefix=config.PREFIX,
        region_name=config.REGION,
        endpoint_url=config.ENDPOINT_URL,
    )
