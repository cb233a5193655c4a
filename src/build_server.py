"""Connection to the build server and the build-trigger POST.

The server's pipeline does not accept a JSON body. It wants an
``application/x-www-form-urlencoded`` body with a single ``json`` field
holding the percent-encoded parameter list.
"""
from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import quote

import requests

from constants import Constants
from errors import TransportError
from common.http_client import safe_post
from common.logging_utils import safe_url
from buildreq.params import ParameterList
from buildreq.variants import BuildRequest, DistributionBuildRequest, PackageBuildRequest

logger = logging.getLogger(__name__)


class BuildServer:
    """Holds what is needed to reach the build server and request builds from it."""

    def __init__(
        self,
        host: str = Constants.BUILD_SERVER,
        port: int = Constants.BUILD_SERVER_PORT,
        domain: str = Constants.BUILD_DOMAIN,
        *,
        scheme: str = Constants.BUILD_SCHEME,
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        """Initialize the connection target.

        Args:
            host: Name of the host, without the domain.
            port: Port number.
            domain: Domain name.
            scheme: URL scheme, http by default.
            username: Basic auth user; only sent when a password is set too.
            password: Basic auth password.
            timeout: Seconds to wait for the server.
        """
        self.host = host
        self.port = int(port)
        self.domain = domain
        self.scheme = scheme
        self.username = username
        self.password = password
        self.timeout = Constants.REQUEST_TIMEOUT if timeout is None else timeout

    @classmethod
    def from_settings(cls, settings) -> "BuildServer":
        return cls(
            settings.host,
            settings.port,
            settings.domain,
            scheme=settings.scheme,
            username=settings.username,
            password=settings.password,
            timeout=settings.timeout,
        )

    @property
    def base_url(self) -> str:
        host = f"{self.host}.{self.domain}" if self.domain else self.host
        return f"{self.scheme}://{host}:{self.port}"

    def distribution_route(self) -> str:
        """Route of the generic build-distribution pipeline job."""
        return f"{self.base_url}/{Constants.BUILD_ROUTE}"

    def package_route(self, project: str, tag: str) -> str:
        """Route of the per-package, per-tag pipeline job.

        The server must already have scanned the tag. Preferred over the
        distribution route when rebuilding whole tags.
        """
        route = Constants.BUILD_PACKAGE_ROUTE.format(quote(project, safe=""), quote(tag, safe=""))
        logger.debug("package_route() route: %s", route)
        return f"{self.base_url}/{route}"

    def route_for(self, request: BuildRequest) -> str:
        if isinstance(request, PackageBuildRequest):
            return self.package_route(request.project, request.tag)
        if isinstance(request, DistributionBuildRequest):
            return self.distribution_route()
        raise TypeError(f"unsupported build request type: {type(request).__name__}")

    @staticmethod
    def encode_body(params: ParameterList) -> str:
        """``json=<percent-encoded JSON>``, ready to POST as a form body."""
        return f"{Constants.FORM_FIELD}={quote(params.to_json_string(), safe='')}"

    @property
    def auth(self):
        if self.username and self.password:
            return (self.username, self.password)
        return None

    def request_build(self, request: BuildRequest, *, dry_run: bool = False) -> Optional[requests.Response]:
        """POST ``request`` to its route.

        Returns:
            The server's response, or None on a dry run.

        Raises:
            TransportError: On network failure or an HTTP status >= 400.
        """
        route = self.route_for(request)
        body = self.encode_body(request.to_build_params())
        logger.debug("Request to %s: %s", safe_url(route), body)
        if dry_run:
            logger.info("Dry run: not posting to %s", safe_url(route))
            return None

        res = safe_post(
            route,
            context="build-server",
            data=body,
            timeout=self.timeout,
            headers={"Content-Type": Constants.FORM_CONTENT_TYPE},
            auth=self.auth,
        )
        if res.status_code >= 400:
            raise TransportError(
                f"build server rejected request to {safe_url(route)}: "
                f"{res.status_code} {getattr(res, 'reason', '') or ''}".rstrip(),
                status_code=res.status_code,
            )
        return res
