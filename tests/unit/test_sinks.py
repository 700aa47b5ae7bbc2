"""Unit tests for record sinks and the sink factory."""

from unittest.mock import Mock, patch

import pytest
from botocore.exceptions import ClientError

from git_fetch_history.exceptions import ConfigurationError, PublishError
from git_fetch_history.protocols.sink_protocol import SinkProtocol
from git_fetch_history.services.sink_factory import create_sink
from git_fetch_history.services.sinks import LocalDirectorySink, S3Sink


class TestS3Sink:
    def setup_method(self):
        self.mock_client = Mock()
        self.sink = S3Sink(bucket="git-fetch-history", region="eu-west-1", client=self.mock_client)

    def test_put_object_parameters(self):
        self.sink.put("repo/main/abc.json", b'{"a":1}', "application/json")

        kwargs = self.mock_client.put_object.call_args.kwargs
        assert kwargs["Bucket"] == "git-fetch-history"
        assert kwargs["Key"] == "repo/main/abc.json"
        assert kwargs["ACL"] == "private"
        assert kwargs["Body"].read() == b'{"a":1}'
        assert kwargs["ContentLength"] == 7
        assert kwargs["ContentType"] == "application/json"
        assert kwargs["ContentDisposition"] == "attachment"
        assert kwargs["ServerSideEncryption"] == "AES256"

    def test_client_error_becomes_publish_error(self):
        self.mock_client.put_object.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "Access Denied"}}, "PutObject"
        )

        with pytest.raises(PublishError, match="s3://git-fetch-history/k.json"):
            self.sink.put("k.json", b"{}", "application/json")

    @patch("git_fetch_history.services.sinks.boto3")
    def test_client_created_lazily_for_region(self, mock_boto3):
        sink = S3Sink(bucket="b", region="eu-west-1")

        sink.put("k.json", b"{}", "application/json")

        mock_boto3.session.Session.assert_called_once_with(region_name="eu-west-1")
        mock_boto3.session.Session.return_value.client.assert_called_once_with("s3")


class TestLocalDirectorySink:
    def test_writes_file_under_key(self, tmp_path):
        sink = LocalDirectorySink(str(tmp_path))

        sink.put("repo/main/abc.json", b"{}", "application/json")

        assert (tmp_path / "repo" / "main" / "abc.json").read_bytes() == b"{}"

    def test_overwrites_existing_record(self, tmp_path):
        sink = LocalDirectorySink(str(tmp_path))

        sink.put("repo/main/abc.json", b"old", "application/json")
        sink.put("repo/main/abc.json", b"new", "application/json")

        assert (tmp_path / "repo" / "main" / "abc.json").read_bytes() == b"new"

    def test_write_failure_becomes_publish_error(self, tmp_path):
        blocker = tmp_path / "repo"
        blocker.write_text("not a directory")
        sink = LocalDirectorySink(str(tmp_path))

        with pytest.raises(PublishError):
            sink.put("repo/main/abc.json", b"{}", "application/json")


class TestSinkFactory:
    def test_s3_backend(self):
        sink = create_sink("s3", bucket="b", region="r")

        assert isinstance(sink, S3Sink)
        assert isinstance(sink, SinkProtocol)
        assert sink.bucket == "b"

    def test_local_backend(self, tmp_path):
        sink = create_sink("local", local_path=str(tmp_path))

        assert isinstance(sink, LocalDirectorySink)

    def test_unknown_backend(self):
        with pytest.raises(ConfigurationError):
            create_sink("ftp")
