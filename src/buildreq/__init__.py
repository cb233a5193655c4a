"""Typed build request model: value types, build parameters and request variants."""

from buildreq.models import (
    Platform,
    SourceStatus,
    UnknownPlatform,
    UnknownVcs,
    Url,
    VcsSystem,
    parse_platforms,
)
from buildreq.params import BuildParamValue, BuildParameter, ParamKind, ParameterList
from buildreq.variants import (
    DistributionBuildRequest,
    PackageBuildRequest,
    RequestShape,
    build_requests,
)

__all__ = [
    "BuildParamValue",
    "BuildParameter",
    "DistributionBuildRequest",
    "PackageBuildRequest",
    "ParamKind",
    "ParameterList",
    "Platform",
    "RequestShape",
    "SourceStatus",
    "UnknownPlatform",
    "UnknownVcs",
    "Url",
    "VcsSystem",
    "build_requests",
    "parse_platforms",
]
