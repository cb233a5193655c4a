"""Value types for build requests: VCS kinds, platforms, source status and URLs."""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Union
from urllib.parse import urlsplit, urlunsplit

from errors import UrlParseError

_SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.\-]*$")
# Schemes whose URLs must name a host and get a "/" path when none is given.
_SPECIAL_SCHEMES = {"http", "https", "ftp", "ws", "wss"}


class VcsSystem(Enum):
    """Source control systems a package may live in."""

    SVN = "svn"
    GIT = "git"
    MERCURIAL = "mercurial"
    PERFORCE = "perforce"

    def __str__(self) -> str:
        return self.value

    @property
    def is_valid(self) -> bool:
        return True

    @classmethod
    def parse(cls, value: Union[str, "VcsSystem", "UnknownVcs"]) -> "VcsKind":
        """Case-insensitively map ``value`` to a VcsSystem.

        Unrecognized input yields ``UnknownVcs`` carrying the original string.
        """
        if isinstance(value, (VcsSystem, UnknownVcs)):
            return value
        member = _VCS_NAMES.get(str(value).strip().lower())
        return member if member is not None else UnknownVcs(str(value))


@dataclass(frozen=True)
class UnknownVcs:
    """A VCS we do not recognize.

    ``name`` holds the unrecognized input: the VCS string given, or the probed
    checkout path when marker detection finds nothing.
    """

    name: str

    is_valid = False

    def __str__(self) -> str:
        return f"unknown({self.name})"


_VCS_NAMES: Dict[str, VcsSystem] = {
    "svn": VcsSystem.SVN,
    "git": VcsSystem.GIT,
    "gitlab": VcsSystem.GIT,
    "mercurial": VcsSystem.MERCURIAL,
    "perforce": VcsSystem.PERFORCE,
}

VcsKind = Union[VcsSystem, UnknownVcs]


class Platform(Enum):
    """Target operating systems for a build. Values are the wire names."""

    CENT6 = "cent6_64"
    CENT7 = "cent7_64"

    def __str__(self) -> str:
        return self.value

    @property
    def is_valid(self) -> bool:
        return True

    @classmethod
    def parse(cls, value: Union[str, "Platform", "UnknownPlatform"]) -> "PlatformKind":
        """Case-insensitively map ``value`` (``cent7``, ``CENT7``, ``cent7_64``...) to a Platform.

        Unrecognized input yields ``UnknownPlatform`` with the original casing.
        """
        if isinstance(value, (Platform, UnknownPlatform)):
            return value
        member = _PLATFORM_NAMES.get(str(value).strip().lower())
        return member if member is not None else UnknownPlatform(str(value))


@dataclass(frozen=True)
class UnknownPlatform:
    """A platform name we do not recognize."""

    name: str

    is_valid = False

    def __str__(self) -> str:
        return f"unknown({self.name})"


_PLATFORM_NAMES: Dict[str, Platform] = {
    "cent6": Platform.CENT6,
    "cent6_64": Platform.CENT6,
    "cent7": Platform.CENT7,
    "cent7_64": Platform.CENT7,
}

PlatformKind = Union[Platform, UnknownPlatform]


def parse_platforms(platforms: str) -> List[Platform]:
    """Parse a comma separated platform list, dropping unknown entries.

    >>> parse_platforms("cent7,bogus,cent6")
    [<Platform.CENT7: 'cent7_64'>, <Platform.CENT6: 'cent6_64'>]
    """
    parsed = (Platform.parse(item.strip()) for item in str(platforms).split(","))
    return [p for p in parsed if isinstance(p, Platform)]


def unknown_platforms(platforms: str) -> List[str]:
    """Return the entries of ``platforms`` that ``parse_platforms`` would drop."""
    return [
        item.strip()
        for item in str(platforms).split(",")
        if item.strip() and isinstance(Platform.parse(item.strip()), UnknownPlatform)
    ]


class SourceStatus(Enum):
    """Lifecycle status of a package source in the index service."""

    ACTIVE = "active"
    RETIRED = "retired"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value

    @property
    def is_valid(self) -> bool:
        return self is not SourceStatus.UNKNOWN

    @classmethod
    def parse(cls, value: Union[str, "SourceStatus", None]) -> "SourceStatus":
        if isinstance(value, SourceStatus):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class Url:
    """An absolute URL, validated at construction."""

    value: str

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: Union[str, "Url"]) -> "Url":
        """Parse ``value`` as an absolute URL.

        Raises:
            UrlParseError: If there is no scheme, the host or port is invalid,
                or the string contains whitespace.
        """
        if isinstance(value, Url):
            return value
        text = str(value).strip()
        if not text:
            raise UrlParseError(text, "empty string")
        if any(ch.isspace() for ch in text):
            raise UrlParseError(text, "invalid whitespace")
        try:
            parts = urlsplit(text)
            _ = parts.port  # raises ValueError on a non-numeric or out of range port
        except ValueError as exc:
            raise UrlParseError(text, str(exc)) from exc
        if not parts.scheme or not _SCHEME_RE.match(parts.scheme) or ":" not in text:
            raise UrlParseError(text)
        if parts.scheme in _SPECIAL_SCHEMES:
            if not parts.hostname:
                raise UrlParseError(text, "empty host")
            if not parts.path:
                parts = parts._replace(path="/")
        return cls(urlunsplit(parts))
