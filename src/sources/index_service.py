"""Client for the package index's tag lookup.

``packalaka tags --json NAME TAG`` prints a JSON list of tag records::

    [{"link": "ssh://git@host/pkg.git#tag=3.5.0",
      "name": "3.5.0",
      "uses": "git",
      "status": "active",
      "versions": ["3.5.0_vray4.0_for_maya2018", "3.5.0"]}]
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from constants import Constants
from errors import SerializationError
from common.logging_utils import extra_context, is_debug_enabled
from common.shell import run_command
from buildreq.models import SourceStatus, Url, VcsKind, VcsSystem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PackageTag:
    """One tag record returned by the index service."""

    link: str
    name: str
    uses: VcsKind
    status: SourceStatus
    versions: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PackageTag":
        """Build a PackageTag from decoded JSON.

        Raises:
            SerializationError: If a required field is missing or mistyped.
        """
        if not isinstance(data, dict):
            raise SerializationError(f"tag record must be an object, got {type(data).__name__}")
        try:
            link = data["link"]
            name = data["name"]
        except KeyError as exc:
            raise SerializationError(f"tag record is missing field {exc}") from exc
        versions = data.get("versions") or []
        if not isinstance(versions, list):
            raise SerializationError("tag record field 'versions' must be a list")
        return cls(
            link=str(link),
            name=str(name),
            uses=VcsSystem.parse(data.get("uses", "")),
            status=SourceStatus.parse(data.get("status")),
            versions=[str(v) for v in versions],
        )

    def flavors(self) -> List[str]:
        """Flavor candidates, one per version string, in order.

        ``<name>_<flavor>`` yields ``<flavor>``; a version equal to the
        record name yields the vanilla flavor.
        """
        splitter = f"{self.name}_"
        flavors = []
        for version in self.versions:
            flavor = version.split(splitter)[-1]
            flavors.append(Constants.VANILLA_FLAVOR if flavor == self.name else flavor)
        return flavors

    def link_url(self) -> Url:
        """The record's link as a URL.

        Raises:
            UrlParseError: If the link is malformed.
        """
        return Url.parse(self.link)


def parse_tags(text: str) -> List[PackageTag]:
    """Decode the index service's JSON output.

    Raises:
        SerializationError: On invalid JSON or malformed records.
    """
    try:
        data = json.loads(text) if text.strip() else []
    except json.JSONDecodeError as exc:
        raise SerializationError(f"invalid JSON from index service: {exc}") from exc
    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list):
        raise SerializationError("index service returned neither a list nor an object")
    return [PackageTag.from_dict(item) for item in data]


def lookup_tags(
    name: str,
    tag: str,
    *,
    command: Optional[Sequence[str]] = None,
) -> List[PackageTag]:
    """Query the index service for the records of ``name`` at ``tag``.

    Raises:
        CommandError: If the lookup command fails.
        SerializationError: If its output cannot be decoded.
    """
    argv = list(command or Constants.INDEX_COMMAND) + [name, tag]
    logger.debug("looking up tags: %s", " ".join(argv))
    records = parse_tags(run_command(argv))
    if is_debug_enabled(logger):
        logger.debug(
            "Index lookup finished",
            extra=extra_context(
                event="index_lookup",
                component="index_service",
                action="lookup_tags",
                target=f"{name}-{tag}",
                count=len(records),
            )
        )
    return records
