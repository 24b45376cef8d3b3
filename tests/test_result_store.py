"""Tests for perfci.result_store module."""

import io
import json
from unittest.mock import MagicMock, patch

import pytest

from conftest import make_record

from perfci.config import StorageConfig
from perfci.errors import AmbiguousResultError, ConfigurationError, ResultFormatError
from perfci.result_store import S3ResultStore, build_result_store


def _listing(*keys: str, count: int | None = -1) -> dict:
    listing: dict = {}
    if keys:
        listing["Contents"] = [{"Key": key, "Size": 100} for key in keys]
    if count == -1:
        listing["KeyCount"] = len(keys)
    elif count is not None:
        listing["KeyCount"] = count
    return listing


def _client(listing: dict, body: bytes = b"[]") -> MagicMock:
    client = MagicMock()
    client.list_objects_v2.return_value = listing
    client.get_object.return_value = {"Body": io.BytesIO(body)}
    return client


class TestS3ResultStore:
    """Tests for S3ResultStore.find_results."""

    def test_no_objects_returns_none(self):
        client = _client(_listing())
        store = S3ResultStore("bucket", client=client)

        assert store.find_results("abc123") is None

        client.list_objects_v2.assert_called_once_with(
            Bucket="bucket", Prefix="jmh-results/jmh-abc123"
        )
        client.get_object.assert_not_called()

    def test_single_object_is_fetched_and_parsed(self):
        key = "jmh-results/jmh-abc123-2024-01-01.json"
        body = json.dumps(
            [make_record("Foo.bar", 100, 110), make_record("Foo.baz", 1, 2)]
        ).encode("utf-8")
        client = _client(_listing(key), body)
        store = S3ResultStore("bucket", client=client)

        result_set = store.find_results("abc123")

        assert result_set is not None
        assert result_set.commit == "abc123"
        assert result_set.key == key
        assert [r.benchmark for r in result_set.results] == ["Foo.bar", "Foo.baz"]
        client.get_object.assert_called_once_with(Bucket="bucket", Key=key)

    def test_multiple_objects_are_ambiguous(self):
        client = _client(_listing("jmh-results/jmh-abc-1", "jmh-results/jmh-abc-2"))
        store = S3ResultStore("bucket", client=client)

        with pytest.raises(AmbiguousResultError) as excinfo:
            store.find_results("abc")

        assert excinfo.value.count == 2
        assert excinfo.value.keys == ["jmh-results/jmh-abc-1", "jmh-results/jmh-abc-2"]
        client.get_object.assert_not_called()

    def test_missing_key_count_is_ambiguous(self):
        client = _client(_listing("jmh-results/jmh-abc-1", count=None))
        store = S3ResultStore("bucket", client=client)

        with pytest.raises(AmbiguousResultError, match="no count"):
            store.find_results("abc")

    def test_custom_prefix(self):
        client = _client(_listing())
        store = S3ResultStore("bucket", prefix="results/", client=client)

        store.find_results("abc")

        client.list_objects_v2.assert_called_once_with(Bucket="bucket", Prefix="results/abc")

    def test_no_caching_between_calls(self):
        client = _client(_listing())
        store = S3ResultStore("bucket", client=client)

        store.find_results("abc")
        store.find_results("abc")

        assert client.list_objects_v2.call_count == 2

    def test_malformed_body_raises(self):
        client = _client(_listing("jmh-results/jmh-abc"), b"not json")
        store = S3ResultStore("bucket", client=client)

        with pytest.raises(ResultFormatError):
            store.find_results("abc")

    def test_bucket_required(self):
        with pytest.raises(ConfigurationError):
            S3ResultStore("")

    @patch("boto3.client")
    def test_client_created_once_on_first_use(self, mock_boto_client):
        mock_boto_client.return_value = _client(_listing())
        store = S3ResultStore("bucket", region_name="eu-west-1", endpoint_url="http://localhost:9000")

        store.find_results("a")
        store.find_results("b")

        mock_boto_client.assert_called_once_with(
            "s3", region_name="eu-west-1", endpoint_url="http://localhost:9000"
        )


class TestBuildResultStore:
    """Tests for build_result_store."""

    def test_uses_environment(self, monkeypatch):
        monkeypatch.setenv("PERFCI_S3_BUCKET", "perf-bucket")
        monkeypatch.setenv("PERFCI_S3_PREFIX", "custom/jmh-")

        store = build_result_store()

        assert store.bucket == "perf-bucket"
        assert store.prefix == "custom/jmh-"

    def test_uses_explicit_config(self):
        config = StorageConfig(BUCKET="b", PREFIX="p/", REGION="us-east-1")

        store = build_result_store(config)

        assert (store.bucket, store.prefix, store.region_name) == ("b", "p/", "us-east-1")
