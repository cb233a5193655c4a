"""Tests for the build server client."""

from unittest.mock import MagicMock, patch
from urllib.parse import parse_qs

import pytest
import requests

from errors import TransportError
from build_server import BuildServer
from buildreq.variants import DistributionBuildRequest, PackageBuildRequest
from common.http_client import safe_post
from config import Settings

REPO = "http://dd-svn.d2.com/svn/software/packages/houdini_submission"


def dist_request():
    return DistributionBuildRequest.new("houdini_submission", "5.4.0", "^", REPO, "svn", "cent6")


class TestRoutes:
    """URL construction for both pipelines."""

    def test_defaults(self):
        """Test defaults."""
        server = BuildServer()
        assert server.base_url == "http://automaton.d2.com:5000"

    def test_distribution_route(self):
        """Test distribution route."""
        server = BuildServer("automaton", 5000, "d2.com")
        assert server.distribution_route() == (
            "http://automaton.d2.com:5000/job/Plans/job/BuildDistributionPipeline/build"
        )

    def test_package_route(self):
        """Test package route."""
        server = BuildServer("automaton", 5000, "d2.com")
        assert server.package_route("houdini_submission", "5.4.0") == (
            "http://automaton.d2.com:5000/job/Packages/job/houdini_submission/job/5.4.0/build"
        )

    def test_package_route_quotes_segments(self):
        """Test package route quotes segments."""
        server = BuildServer("h", 80, "example.com")
        assert server.package_route("a/b", "1 0").endswith("/job/a%2Fb/job/1%200/build")

    def test_route_for_dispatches_on_request_type(self):
        """Test route for dispatches on request type."""
        server = BuildServer()
        assert server.route_for(dist_request()) == server.distribution_route()
        assert server.route_for(PackageBuildRequest.new("p", "1.0")) == server.package_route("p", "1.0")

    def test_route_for_rejects_other_types(self):
        """Test route for rejects other types."""
        with pytest.raises(TypeError):
            BuildServer().route_for("nope")

    def test_from_settings(self):
        """Test from settings."""
        settings = Settings(host="ci", domain="example.org", port=8080, scheme="https", password="pw", timeout=5)
        server = BuildServer.from_settings(settings)
        assert server.base_url == "https://ci.example.org:8080"
        assert server.auth == ("automaton", "pw")
        assert server.timeout == 5


class TestEncodeBody:
    """Form encoding of the parameter list."""

    def test_body_is_percent_encoded_json_field(self):
        """Test body is percent encoded json field."""
        body = BuildServer.encode_body(dist_request().to_build_params())
        assert body.startswith("json=%7B%22parameter%22")
        assert "{" not in body and '"' not in body

    def test_body_decodes_back_to_the_json(self):
        """Test body decodes back to the json."""
        params = dist_request().to_build_params()
        decoded = parse_qs(BuildServer.encode_body(params))
        assert decoded == {"json": [params.to_json_string()]}


class TestRequestBuild:
    """The build-trigger POST."""

    def test_dry_run_never_posts(self):
        """Test dry run never posts."""
        with patch("build_server.safe_post") as mock_post:
            assert BuildServer().request_build(dist_request(), dry_run=True) is None
        mock_post.assert_not_called()

    def test_posts_form_body_to_route(self):
        """Test posts form body to route."""
        response = MagicMock(status_code=201)
        server = BuildServer(timeout=7)
        with patch("build_server.safe_post", return_value=response) as mock_post:
            assert server.request_build(dist_request()) is response
        args, kwargs = mock_post.call_args
        assert args[0] == server.distribution_route()
        assert kwargs["data"].startswith("json=%7B%22parameter%22")
        assert kwargs["headers"] == {"Content-Type": "application/x-www-form-urlencoded"}
        assert kwargs["timeout"] == 7
        assert kwargs["auth"] is None

    def test_sends_basic_auth_when_password_set(self):
        """Test sends basic auth when password set."""
        server = BuildServer(username="automaton", password="secret")
        with patch("build_server.safe_post", return_value=MagicMock(status_code=200)) as mock_post:
            server.request_build(PackageBuildRequest.new("p", "1.0"))
        assert mock_post.call_args.kwargs["auth"] == ("automaton", "secret")

    def test_error_status_raises(self):
        """Test error status raises."""
        response = MagicMock(status_code=404, reason="Not Found")
        with patch("build_server.safe_post", return_value=response):
            with pytest.raises(TransportError) as excinfo:
                BuildServer().request_build(PackageBuildRequest.new("p", "1.0"))
        assert excinfo.value.status_code == 404
        assert "404 Not Found" in str(excinfo.value)


class TestSafePost:
    """requests failures become TransportError."""

    def test_connection_error(self):
        """Test connection error."""
        with patch("common.http_client.requests.post", side_effect=requests.ConnectionError("refused")):
            with pytest.raises(TransportError, match="connection error"):
                safe_post("http://h:1/x", context="build-server")

    def test_timeout(self):
        """Test timeout."""
        with patch("common.http_client.requests.post", side_effect=requests.Timeout()):
            with pytest.raises(TransportError, match="timed out"):
                safe_post("http://h:1/x", context="build-server", timeout=2)

    def test_passes_through_response(self):
        """Test passes through response."""
        response = MagicMock(status_code=500, ok=False)
        with patch("common.http_client.requests.post", return_value=response) as mock_post:
            assert safe_post("http://h:1/x", context="c", data="json=x") is response
        mock_post.assert_called_once_with("http://h:1/x", data="json=x", timeout=30)
