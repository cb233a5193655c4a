"""Error types raised while resolving and submitting remote build requests.

Every failure is raised as a ``RemoteBuildError`` subclass and propagated to
the entry point, which maps ``kind`` to an exit code.
"""
from __future__ import annotations


class RemoteBuildError(Exception):
    """Base class for all pkg-build-remote failures."""

    kind = "error"


class UsageError(RemoteBuildError, ValueError):
    """Contradictory or missing command line input."""

    kind = "usage"


class ConversionError(RemoteBuildError):
    """A value could not be converted into the form we need."""

    kind = "conversion"


class CommandError(ConversionError):
    """An external command (svn, git, index lookup) failed."""

    def __init__(self, command, message: str):
        self.command = list(command)
        super().__init__(f"{' '.join(self.command)}: {message}")


class UrlParseError(RemoteBuildError, ValueError):
    """A string could not be parsed as an absolute URL."""

    kind = "parse"

    def __init__(self, value: str, reason: str = "relative URL without a base"):
        self.value = value
        super().__init__(f"unable to parse url '{value}': {reason}")


class ManifestError(RemoteBuildError):
    """The package manifest is missing or malformed."""

    kind = "parse"


class EmptyResultError(RemoteBuildError):
    """A lookup returned nothing usable."""

    kind = "empty_result"


class TransportError(RemoteBuildError):
    """The build server could not be reached or rejected the request."""

    kind = "transport"

    def __init__(self, message: str, status_code=None):
        self.status_code = status_code
        super().__init__(message)


class SerializationError(RemoteBuildError):
    """JSON could not be produced or consumed."""

    kind = "serialization"
