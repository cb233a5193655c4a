"""pkg-build-remote - trigger remote package builds on the build server.

    Returns:
        int: Exit code
"""
import logging
import sys
from functools import partial

from constants import ExitCodes
from errors import RemoteBuildError, TransportError, UsageError
from common.logging_utils import add_file_handler, configure_logging, extra_context, is_debug_enabled
from args import parse_args
from config import load_settings
from build_server import BuildServer
from dispatch import submit_plan
from resolver import BuildOptions, Resolver
from sources.index_service import lookup_tags

logger = logging.getLogger(__name__)


def exit_code_for(exc: RemoteBuildError) -> ExitCodes:
    """Map an error to the process exit code."""
    if isinstance(exc, UsageError):
        return ExitCodes.USAGE_ERROR
    if isinstance(exc, TransportError):
        return ExitCodes.CONNECTION_ERROR
    return ExitCodes.RESOLUTION_ERROR


def run(argv=None, *, resolver=None, build_server=None, ask=input, console=None) -> int:
    """Parse ``argv``, resolve the build, and submit it.

    Collaborators can be injected for testing. Returns the exit code; never
    calls ``sys.exit`` itself.
    """
    args = parse_args(argv)
    configure_logging(args.LOG_LEVEL)
    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action="main")
        )

    try:
        if args.LOG_FILE:
            try:
                add_file_handler(args.LOG_FILE)
            except OSError as exc:
                raise UsageError(f"Unable to open log file {args.LOG_FILE}: {exc}") from exc
            logger.info("Logging to file: %s", args.LOG_FILE)
        settings = load_settings(args)
        options = BuildOptions.from_args(args)
        resolver = resolver or Resolver(
            default_platform=settings.default_platform,
            lookup_tags=partial(lookup_tags, command=settings.index_command),
        )
        plan = resolver.plan(options)
        build_server = build_server or BuildServer.from_settings(settings)
        submitted = submit_plan(
            plan,
            build_server,
            dry_run=options.dry_run,
            verbose=options.verbose,
            prompt=options.prompt,
            ask=ask,
            console=console,
        )
    except RemoteBuildError as exc:
        code = exit_code_for(exc)
        logger.error("%s", exc)
        if is_debug_enabled(logger):
            logger.debug(
                "CLI finished",
                extra=extra_context(
                    event="function_exit",
                    component="cli",
                    action="main",
                    outcome=exc.kind,
                    exit_code=code.value,
                )
            )
        return code.value

    if not submitted:
        logger.debug("nothing submitted")
    return ExitCodes.SUCCESS.value


def main():
    """Main function of the program."""
    sys.exit(run())


if __name__ == "__main__":
    main()
