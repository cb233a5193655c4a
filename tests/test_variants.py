"""Tests for the distribution and package build request variants."""

import json

import pytest

from errors import UrlParseError
from buildreq.models import Platform, Url, VcsSystem
from buildreq.variants import (
    DistributionBuildRequest,
    PackageBuildRequest,
    RequestShape,
    build_requests,
)

REPO = "http://dd-svn.d2.com/svn/software/packages/houdini_submission"


class TestDistributionBuildRequest:
    """Construction and parameter emission for the full request."""

    def test_can_build_req(self):
        """Test can build req."""
        req = DistributionBuildRequest.new("houdini_submission", "5.4.0", "^", REPO, "svn", "cent6")
        assert req == DistributionBuildRequest(
            project="houdini_submission",
            version="5.4.0",
            flavor="^",
            repo=Url(REPO),
            vcs=VcsSystem.SVN,
            platform=Platform.CENT6,
        )
        assert req.shape is RequestShape.DISTRIBUTION

    def test_rejects_malformed_repo(self):
        """Test rejects malformed repo."""
        with pytest.raises(UrlParseError):
            DistributionBuildRequest.new("p", "1.0", "^", "not a url", "git", "cent7")

    def test_is_immutable(self):
        """Test is immutable."""
        req = DistributionBuildRequest.new("p", "1.0", "^", REPO, VcsSystem.GIT, Platform.CENT7)
        with pytest.raises(AttributeError):
            req.flavor = "maya"

    def test_can_serialize_to_json(self):
        """Test can serialize to json."""
        req = DistributionBuildRequest.new("houdini_submission", "5.4.0", "^", REPO, "svn", "cent6")
        assert req.to_build_params().to_json_string() == (
            '{"parameter":[{"name":"project","value":"houdini_submission"},'
            '{"name":"version","value":"5.4.0"},'
            '{"name":"flavor","value":"^"},'
            '{"name":"repo","value":"http://dd-svn.d2.com/svn/software/packages/houdini_submission"},'
            '{"name":"scmType","value":"svn"},'
            '{"name":"platform","value":"cent6_64"},'
            '{"name":"upstream_workspace","value":""}]}'
        )

    def test_param_order_and_empty_placeholder(self):
        """Test param order and empty placeholder."""
        req = DistributionBuildRequest.new("p", "2.0", "maya", "ssh://git@host/p.git", "git", "CENT7")
        params = req.to_build_params()
        assert params.names() == [
            "project", "version", "flavor", "repo", "scmType", "platform", "upstream_workspace",
        ]
        assert params.as_dict()["upstream_workspace"] == ""
        assert params.as_dict()["platform"] == "cent7_64"


class TestPackageBuildRequest:
    """The simplified two-field request."""

    def test_can_build_req(self):
        """Test can build req."""
        req = PackageBuildRequest.new("houdini_submission", "5.4.0")
        assert req == PackageBuildRequest(project="houdini_submission", tag="5.4.0")
        assert req.shape is RequestShape.PACKAGE

    def test_can_serialize_to_json(self):
        """Test can serialize to json."""
        params = PackageBuildRequest.new("houdini_submission", "5.4.0").to_build_params()
        assert json.loads(params.to_json_string()) == {
            "parameter": [
                {"name": "project", "value": "houdini_submission"},
                {"name": "tag", "value": "5.4.0"},
            ]
        }


class TestBuildRequests:
    """Per-flavor expansion for one platform."""

    def test_one_request_per_flavor_in_order(self):
        """Test one request per flavor in order."""
        reqs = build_requests("p", "1.0", REPO, VcsSystem.SVN, Platform.CENT6, ["^", "maya", "houdini"])
        assert [r.flavor for r in reqs] == ["^", "maya", "houdini"]
        assert {r.platform for r in reqs} == {Platform.CENT6}
        assert all(r.repo == Url(REPO) for r in reqs)

    def test_fails_atomically_on_bad_repo(self):
        """Test fails atomically on bad repo."""
        with pytest.raises(UrlParseError):
            build_requests("p", "1.0", "nope", VcsSystem.SVN, Platform.CENT6, ["^", "maya"])

    def test_empty_flavors_yield_no_requests(self):
        """Test empty flavors yield no requests."""
        assert build_requests("p", "1.0", REPO, "svn", "cent6", []) == []
