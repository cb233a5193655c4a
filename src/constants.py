"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    RESOLUTION_ERROR = 1
    USAGE_ERROR = 2
    CONNECTION_ERROR = 3


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    PROG = "pkg-build-remote"

    # Build server defaults (see config.Settings for overrides)
    BUILD_SERVER = "automaton"
    BUILD_DOMAIN = "d2.com"
    BUILD_SERVER_PORT = 5000
    BUILD_SCHEME = "http"
    BUILD_USERNAME = "automaton"
    BUILD_ROUTE = "job/Plans/job/BuildDistributionPipeline/build"
    # template params: package, tag
    BUILD_PACKAGE_ROUTE = "job/Packages/job/{}/job/{}/build"
    FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
    FORM_FIELD = "json"

    PARAM_CNT = 7
    VANILLA_FLAVOR = "^"
    DEFAULT_PLATFORM = "cent7"
    UPSTREAM_WORKSPACE = "upstream_workspace"

    # Index service lookup; NAME and TAG are appended
    INDEX_COMMAND = ["packalaka", "tags", "--json", "--skip-pre"]

    MANIFEST_NAMES = ("manifest.yaml", "pk.yaml")
    MANIFEST_MAX_DEPTH = 2
    SVN_MARKER = ".svn"
    GIT_MARKER = ".git"

    CONFIG_FILE_LOCAL = "pkg-build-remote.yml"
    CONFIG_FILE_USER = "~/.config/pkg-build-remote/config.yml"
    CONFIG_SECTION = "build_server"
    ENV_PREFIX = "PKG_BUILD_REMOTE_"
    ENV_LOG_LEVEL = "PKG_BUILD_REMOTE_LOG_LEVEL"

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    COMMAND_TIMEOUT = 60  # Timeout in seconds for svn/git/index shell-outs
