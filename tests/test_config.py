"""Tests for opensearch_sigv4.config.

Focused on auth-mode validation and AWS endpoint detection.
"""

import pytest

from opensearch_sigv4.config import ClientConfig, endpoint_hostname, is_aws_endpoint
from opensearch_sigv4.exceptions import ConfigurationError


class TestIsAwsEndpoint:
    """Unit tests for the AWS endpoint detection helper."""

    def test_opensearch_service_endpoint(self):
        assert is_aws_endpoint("https://search-people-abc123.us-east-1.es.amazonaws.com")

    def test_serverless_endpoint(self):
        assert is_aws_endpoint("https://abc123.us-west-2.aoss.amazonaws.com")

    def test_endpoint_without_scheme(self):
        assert is_aws_endpoint("search-people-abc123.eu-west-1.es.amazonaws.com")

    def test_localhost_is_not_aws(self):
        assert not is_aws_endpoint("http://localhost:9200")

    def test_self_hosted_is_not_aws(self):
        assert not is_aws_endpoint("https://search.example.com:9200")


class TestEndpointHostname:
    @pytest.mark.parametrize(
        "endpoint, expected",
        [
            ("https://search.example.com", "search.example.com"),
            ("http://localhost:9200", "localhost"),
            ("search.example.com:9200", "search.example.com"),
            ("search.example.com", "search.example.com"),
        ],
    )
    def test_hostname(self, endpoint, expected):
        assert endpoint_hostname(endpoint) == expected


class TestClientConfig:
    def test_defaults_to_unsigned(self):
        config = ClientConfig()
        assert config.auth == "none"
        assert config.region is None
        assert dict(config.options) == {}

    def test_unknown_auth_mode(self):
        with pytest.raises(ConfigurationError, match="Unknown auth mode 'iam'"):
            ClientConfig(auth="iam")

    def test_options_are_read_only(self):
        config = ClientConfig(options={"timeout": 30})
        with pytest.raises(TypeError):
            config.options["timeout"] = 60

    def test_options_are_copied(self):
        options = {"timeout": 30}
        config = ClientConfig(options=options)
        options["timeout"] = 60
        assert config.options["timeout"] == 30

    def test_is_frozen(self):
        with pytest.raises(AttributeError):
            ClientConfig().auth = "sigv4"

    @pytest.mark.parametrize(
        "auth, endpoint, expected",
        [
            ("none", "https://search-x.us-east-1.es.amazonaws.com", False),
            ("sigv4", "http://localhost:9200", True),
            ("auto", "https://search-x.us-east-1.es.amazonaws.com", True),
            ("auto", "http://localhost:9200", False),
        ],
    )
    def test_signing_enabled(self, auth, endpoint, expected):
        assert ClientConfig(auth=auth).signing_enabled(endpoint) is expected
