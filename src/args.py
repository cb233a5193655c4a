"""Argument parsing functionality for pkg-build-remote."""

import argparse
from constants import Constants

DESCRIPTION = """Trigger package builds on the build server.

Provide the package name and tag and we do the rest. You may optionally set
specific flavors or platforms as well.

If you supply neither flavors nor platforms, the per-package pipeline is used,
which works out which flavors and platforms to build on its own. If you
specify flavors or platforms explicitly, the build distribution pipeline is
used instead, once per platform and flavor.
"""


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog=Constants.PROG,
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=True,
    )

    parser.add_argument("-n", "--name",
                        dest="NAME",
                        help="Name of the package. Required unless --local reads it from the manifest.",
                        action="store", type=str)
    parser.add_argument("-t", "--tag",
                        dest="TAG",
                        help="Tag (version) to build. Required unless --local reads it from the manifest.",
                        action="store", type=str)

    flavor_group = parser.add_mutually_exclusive_group()
    flavor_group.add_argument("-f", "--flavours",
                              dest="FLAVOURS",
                              help="Comma separated list of flavours to build. Defaults to vanilla (^).",
                              action="store", type=str)
    flavor_group.add_argument("--flavors",
                              dest="FLAVORS",
                              help="American spelling of --flavours.",
                              action="store", type=str)
    parser.add_argument("--all-flavors", "--all-flavours",
                        dest="ALL_FLAVORS",
                        help="Build every flavor known for the tag (index service or manifest).",
                        action="store_true")
    parser.add_argument("-p", "--platforms",
                        dest="PLATFORMS",
                        help=f"Comma separated, case insensitive list of platforms (default: {Constants.DEFAULT_PLATFORM}).",
                        action="store", type=str)

    parser.add_argument("-l", "--local",
                        dest="LOCAL",
                        help="Resolve the package from a local checkout instead of the package index.",
                        action="store_true")
    parser.add_argument("--project-path",
                        dest="PROJECT_PATH",
                        help="Path to the local checkout (default: current directory). Implies nothing without --local.",
                        action="store", type=str)
    parser.add_argument("--vcs-url",
                        dest="VCS_URL",
                        help="Repository URL to use instead of asking the local checkout.",
                        action="store", type=str)
    parser.add_argument("--vcs",
                        dest="VCS",
                        help="Version control system of the local checkout, if detection is not wanted.",
                        action="store", type=str.lower,
                        choices=["svn", "git"])

    parser.add_argument("-d", "--dry-run",
                        dest="DRY_RUN",
                        help="Report what would be requested without contacting the build server.",
                        action="store_true")
    parser.add_argument("-v", "--verbose",
                        dest="VERBOSE",
                        help="Show the request summary and the full server response.",
                        action="store_true")
    parser.add_argument("-a", "--ask", "--prompt",
                        dest="PROMPT",
                        help="Review the request and confirm before it is submitted.",
                        action="store_true")

    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to a YAML configuration file",
                        action="store", type=str)
    parser.add_argument("--host",
                        dest="BUILD_HOST",
                        help=f"Build server host name, without domain (default: {Constants.BUILD_SERVER})",
                        action="store", type=str)
    parser.add_argument("--port",
                        dest="BUILD_PORT",
                        help=f"Build server port (default: {Constants.BUILD_SERVER_PORT})",
                        action="store", type=int)
    parser.add_argument("--domain",
                        dest="BUILD_DOMAIN",
                        help=f"Build server domain (default: {Constants.BUILD_DOMAIN})",
                        action="store", type=str)
    parser.add_argument("--default-platform",
                        dest="DEFAULT_PLATFORM",
                        help="Platform used when --platforms is not given",
                        action="store", type=str)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level (default: $PKG_BUILD_REMOTE_LOG_LEVEL or INFO)",
                        action="store",
                        type=str.upper,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'])
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)

    return parser.parse_args(argv)
