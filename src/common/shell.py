"""Thin wrapper around subprocess for the svn/git/index shell-outs."""
from __future__ import annotations

import logging
import subprocess
from typing import List, Optional, Sequence

from constants import Constants
from errors import CommandError
from common.logging_utils import extra_context, is_debug_enabled, Timer

logger = logging.getLogger(__name__)


def run_command(
    command: Sequence[str],
    *,
    cwd: Optional[str] = None,
    timeout: Optional[float] = None,
) -> str:
    """Run ``command`` and return its stdout.

    Raises:
        CommandError: If the executable is missing, times out, or exits non-zero.
    """
    argv: List[str] = [str(part) for part in command]
    timeout = Constants.COMMAND_TIMEOUT if timeout is None else timeout
    with Timer() as t:
        try:
            result = subprocess.run(
                argv,
                cwd=cwd,
                capture_output=True,
                text=True,
                timeout=timeout,
                check=False,
            )
        except FileNotFoundError as exc:
            raise CommandError(argv, f"command not found ({exc.filename or argv[0]})") from exc
        except subprocess.TimeoutExpired as exc:
            raise CommandError(argv, f"timed out after {timeout} seconds") from exc
        except OSError as exc:
            raise CommandError(argv, str(exc)) from exc

    if is_debug_enabled(logger):
        logger.debug(
            "Command finished",
            extra=extra_context(
                event="shell",
                component="shell",
                action=argv[0],
                outcome="success" if result.returncode == 0 else "failure",
                returncode=result.returncode,
                duration_ms=t.duration_ms(),
                cwd=cwd,
            )
        )
    if result.returncode != 0:
        detail = (result.stderr or result.stdout or "").strip() or f"exit status {result.returncode}"
        raise CommandError(argv, detail)
    return result.stdout
