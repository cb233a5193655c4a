"""The two build request variants the build server understands.

``DistributionBuildRequest`` names everything explicitly and targets the
generic distribution pipeline. ``PackageBuildRequest`` names only project and
tag and lets the per-package pipeline discover flavors and platforms itself.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence, Union

from constants import Constants
from buildreq.models import (
    Platform,
    PlatformKind,
    UnknownPlatform,
    UnknownVcs,
    Url,
    VcsKind,
    VcsSystem,
)
from buildreq.params import ParameterList

logger = logging.getLogger(__name__)


class RequestShape(Enum):
    """Which pipeline a request is routed to."""

    DISTRIBUTION = "distribution"
    PACKAGE = "package"


@dataclass(frozen=True)
class DistributionBuildRequest:
    """A fully specified build of one flavor of a package on one platform.

    Attributes:
        project: Name of the package.
        version: Version of the package; must be an existing tag in the VCS.
        flavor: Flavor to build. "^" is vanilla.
        repo: URL of the package's repository.
        vcs: The version control system the package lives in.
        platform: The OS to build for.
    """

    project: str
    version: str
    flavor: str
    repo: Url
    vcs: VcsKind
    platform: PlatformKind

    shape = RequestShape.DISTRIBUTION

    @classmethod
    def new(
        cls,
        project: str,
        version: str,
        flavor: str,
        repo: Union[str, Url],
        vcs: Union[str, VcsSystem, UnknownVcs],
        platform: Union[str, Platform, UnknownPlatform],
    ) -> "DistributionBuildRequest":
        """Validate and build a request.

        Raises:
            UrlParseError: If ``repo`` is not an absolute URL.
        """
        return cls(
            project=str(project),
            version=str(version),
            flavor=str(flavor),
            repo=Url.parse(repo),
            vcs=VcsSystem.parse(vcs),
            platform=Platform.parse(platform),
        )

    def to_build_params(self) -> ParameterList:
        """Parameters in the exact order the distribution pipeline expects."""
        params = ParameterList()
        params.add("project", self.project)
        params.add("version", self.version)
        params.add("flavor", self.flavor)
        params.add("repo", self.repo)
        params.add("scmType", self.vcs)
        params.add("platform", self.platform)
        # always empty; the job definition declares it
        params.add(Constants.UPSTREAM_WORKSPACE, "")
        return params


@dataclass(frozen=True)
class PackageBuildRequest:
    """Build every flavor/platform of a tagged package, as discovered server side."""

    project: str
    tag: str

    shape = RequestShape.PACKAGE

    @classmethod
    def new(cls, project: str, tag: str) -> "PackageBuildRequest":
        logger.debug("PackageBuildRequest.new(%r, %r)", project, tag)
        return cls(project=str(project), tag=str(tag))

    def to_build_params(self) -> ParameterList:
        params = ParameterList(capacity=2)
        params.add("project", self.project)
        params.add("tag", self.tag)
        return params


BuildRequest = Union[DistributionBuildRequest, PackageBuildRequest]


def build_requests(
    name: str,
    version: str,
    repo: Union[str, Url],
    vcs: Union[str, VcsSystem, UnknownVcs],
    platform: Union[str, Platform, UnknownPlatform],
    flavors: Sequence[str],
) -> List[DistributionBuildRequest]:
    """One DistributionBuildRequest per flavor, everything else held fixed.

    All or nothing: the first failure propagates and no list is returned.
    """
    repo_url = Url.parse(repo)
    return [
        DistributionBuildRequest.new(name, version, flavor, repo_url, vcs, platform)
        for flavor in flavors
    ]
