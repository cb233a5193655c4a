"""Turn optional, possibly conflicting CLI input into concrete build requests.

Resolution runs in a fixed order:

1. flavor reconciliation (``--flavors`` / ``--flavours`` / ``--all-flavors``)
2. identity: name and tag, from the CLI or the manifest
3. source: repository URL and VCS kind, from the local checkout or the index
4. platforms, falling back to the configured default
5. request shape: per-package when nothing was overridden, else distribution
6. expansion: one request per (platform, flavor), platforms outer

Either everything resolves or a ``RemoteBuildError`` is raised; there is no
partial result. Collaborators are injected so the resolver never touches the
filesystem, a VCS, or the network on its own.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Sequence, Tuple

from constants import Constants
from errors import ConversionError, EmptyResultError, UsageError
from common.logging_utils import extra_context, is_debug_enabled
from buildreq.models import (
    Platform,
    SourceStatus,
    Url,
    VcsKind,
    VcsSystem,
    parse_platforms,
    unknown_platforms,
)
from buildreq.variants import (
    BuildRequest,
    PackageBuildRequest,
    RequestShape,
    build_requests,
)
from sources import index_service, manifest, vcs as vcs_probe

logger = logging.getLogger(__name__)


@dataclass
class BuildOptions:
    """User input for one invocation. Everything is optional."""

    name: Optional[str] = None
    tag: Optional[str] = None
    flavors: Optional[str] = None
    flavours: Optional[str] = None
    platforms: Optional[str] = None
    all_flavors: bool = False
    local: bool = False
    project_path: Optional[str] = None
    vcs_url: Optional[str] = None
    vcs: Optional[str] = None
    dry_run: bool = False
    verbose: bool = False
    prompt: bool = False

    @classmethod
    def from_args(cls, args: Any) -> "BuildOptions":
        """Create options from a parsed argparse namespace."""
        return cls(
            name=getattr(args, "NAME", None),
            tag=getattr(args, "TAG", None),
            flavors=getattr(args, "FLAVORS", None),
            flavours=getattr(args, "FLAVOURS", None),
            platforms=getattr(args, "PLATFORMS", None),
            all_flavors=bool(getattr(args, "ALL_FLAVORS", False)),
            local=bool(getattr(args, "LOCAL", False)),
            project_path=getattr(args, "PROJECT_PATH", None),
            vcs_url=getattr(args, "VCS_URL", None),
            vcs=getattr(args, "VCS", None),
            dry_run=bool(getattr(args, "DRY_RUN", False)),
            verbose=bool(getattr(args, "VERBOSE", False)),
            prompt=bool(getattr(args, "PROMPT", False)),
        )

    @property
    def overrides_defaults(self) -> bool:
        """True when the user asked for specific flavors or platforms."""
        return any(
            value is not None for value in (self.flavors, self.flavours, self.platforms)
        ) or self.all_flavors


@dataclass(frozen=True)
class ResolvedContext:
    """Fully reconciled inputs; no field is left undecided."""

    name: str
    tag: str
    flavors: Tuple[str, ...]
    platforms: Tuple[Platform, ...]
    repo: Url
    vcs: VcsKind
    shape: RequestShape


@dataclass(frozen=True)
class BuildPlan:
    """A resolved context and the requests to dispatch, in order."""

    context: ResolvedContext
    requests: List[BuildRequest] = field(default_factory=list)

    @property
    def shape(self) -> RequestShape:
        return self.context.shape


def split_flavors(text: str) -> List[str]:
    """Split a comma separated flavor list, trimming and dropping empties."""
    return [part.strip() for part in str(text).split(",") if part.strip()]


def reconcile_flavors(
    flavors: Optional[str],
    flavours: Optional[str],
    all_flavors: bool = False,
) -> Optional[List[str]]:
    """Decide the flavor list from the two spellings and ``all_flavors``.

    Returns:
        The flavor list, or None when it must come from the package source.

    Raises:
        UsageError: If both spellings are given or the given list is empty.
    """
    if flavors is not None and flavours is not None:
        raise UsageError("--flavors and --flavours are mutually exclusive; supply only one")
    supplied = flavors if flavors is not None else flavours
    if all_flavors:
        if supplied is not None:
            logger.warning("--all-flavors given; ignoring explicit flavors '%s'", supplied)
        return None
    if supplied is None:
        return [Constants.VANILLA_FLAVOR]
    parsed = split_flavors(supplied)
    if not parsed:
        raise UsageError(f"no flavors found in '{supplied}'")
    return parsed


def resolve_platforms(platforms: Optional[str], default: str = Constants.DEFAULT_PLATFORM) -> List[Platform]:
    """Parse ``platforms`` (or ``default``), dropping unknown names.

    Raises:
        EmptyResultError: If no known platform remains.
    """
    text = platforms if platforms is not None else default
    dropped = unknown_platforms(text)
    if dropped:
        logger.warning("Ignoring unknown platform(s): %s", ", ".join(dropped))
    parsed = parse_platforms(text)
    if not parsed:
        raise EmptyResultError(f"No valid platforms in '{text}'")
    return parsed


def expand_requests(context: ResolvedContext) -> List[BuildRequest]:
    """Concrete requests for ``context``; platforms outer loop, flavors inner."""
    if context.shape is RequestShape.PACKAGE:
        return [PackageBuildRequest.new(context.name, context.tag)]
    out: List[BuildRequest] = []
    for platform in context.platforms:
        out.extend(
            build_requests(
                context.name,
                context.tag,
                context.repo,
                context.vcs,
                platform,
                context.flavors,
            )
        )
    return out


class Resolver:
    """Resolves BuildOptions into a BuildPlan using injectable collaborators."""

    def __init__(
        self,
        *,
        default_platform: str = Constants.DEFAULT_PLATFORM,
        read_manifest: Callable[[str], manifest.Minifest] = manifest.read_manifest,
        identify_vcs: Callable[[str], VcsKind] = vcs_probe.identify_vcs,
        get_server_urls: Callable[[VcsKind, str], Sequence[Url]] = vcs_probe.get_server_urls,
        lookup_tags: Callable[[str, str], Sequence[index_service.PackageTag]] = index_service.lookup_tags,
        getcwd: Callable[[], str] = os.getcwd,
    ):
        self.default_platform = default_platform
        self._read_manifest = read_manifest
        self._identify_vcs = identify_vcs
        self._get_server_urls = get_server_urls
        self._lookup_tags = lookup_tags
        self._getcwd = getcwd

    def plan(self, options: BuildOptions) -> BuildPlan:
        """Resolve ``options`` and expand them into requests."""
        context = self.resolve(options)
        requests = expand_requests(context)
        if is_debug_enabled(logger):
            logger.debug(
                "Resolved build plan",
                extra=extra_context(
                    event="decision",
                    component="resolver",
                    action="plan",
                    outcome=context.shape.value,
                    count=len(requests),
                )
            )
        return BuildPlan(context, requests)

    def resolve(self, options: BuildOptions) -> ResolvedContext:
        """Run resolution steps 1-5 for ``options``."""
        flavors = reconcile_flavors(options.flavors, options.flavours, options.all_flavors)
        logger.debug("flavors selected: %s", flavors if flavors is not None else "(deferred)")

        if options.local:
            name, tag, repo, vcs, flavors = self._resolve_local(options, flavors)
        else:
            name, tag, repo, vcs, flavors = self._resolve_index(options, flavors)

        platforms = resolve_platforms(options.platforms, self.default_platform)
        shape = RequestShape.DISTRIBUTION if options.overrides_defaults else RequestShape.PACKAGE
        logger.debug("request shape: %s", shape.value)

        return ResolvedContext(
            name=name,
            tag=tag,
            flavors=tuple(flavors),
            platforms=tuple(platforms),
            repo=repo,
            vcs=vcs,
            shape=shape,
        )

    def _resolve_local(self, options: BuildOptions, flavors: Optional[List[str]]):
        project_path = options.project_path or self._getcwd()
        logger.debug("project_path: %s", project_path)

        minifest = None
        if options.name is not None and options.tag is not None:
            name, tag = options.name, options.tag
        else:
            minifest = self._read_manifest(project_path)
            name = options.name if options.name is not None else minifest.name
            tag = options.tag if options.tag is not None else minifest.version
        logger.debug("name: %s version: %s", name, tag)

        vcs = VcsSystem.parse(options.vcs) if options.vcs else self._identify_vcs(project_path)
        logger.debug("VCS system %s", vcs)

        if options.vcs_url:
            repo = Url.parse(options.vcs_url)
            if not vcs.is_valid:
                raise EmptyResultError(
                    f"Unable to identify the VCS for {project_path}; pass --vcs with --vcs-url"
                )
        else:
            if not vcs.is_valid:
                raise EmptyResultError(f"No svn or git checkout found at {project_path}")
            urls = list(self._get_server_urls(vcs, project_path))
            if not urls:
                raise EmptyResultError(f"Unable to get {vcs} server url from {project_path}")
            repo = Url.parse(urls[0])
        logger.debug("vcs_project_url: %s", repo)

        if flavors is None:
            if minifest is None:
                minifest = self._read_manifest(project_path)
            flavors = list(minifest.flavours) or [Constants.VANILLA_FLAVOR]
            logger.debug("flavors from manifest: %s", flavors)
        return name, tag, repo, vcs, flavors

    def _resolve_index(self, options: BuildOptions, flavors: Optional[List[str]]):
        if not options.name:
            raise UsageError("Missing name. Must be supplied")
        if not options.tag:
            raise UsageError("Missing tag. Must be supplied")
        name, tag = options.name, options.tag

        tags = list(self._lookup_tags(name, tag))
        logger.debug("PackageTags: %s", tags)
        if not tags:
            raise EmptyResultError(f"No Records exist for {name}-{tag}")

        record = tags[0]
        if record.status is not SourceStatus.ACTIVE:
            logger.warning("Source for %s-%s has status '%s'", name, tag, record.status)
        repo = record.link_url()
        vcs = record.uses
        if not vcs.is_valid:
            raise ConversionError(f"Unrecognized VCS '{vcs.name}' in index record for {name}-{tag}")

        if flavors is None:
            flavors = record.flavors()
            if not flavors:
                raise EmptyResultError(f"No flavors listed for {name}-{tag}")
            logger.debug("flavors from index: %s", flavors)
        return name, tag, repo, vcs, flavors
