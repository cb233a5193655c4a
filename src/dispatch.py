"""Confirm and submit a resolved build plan."""
from __future__ import annotations

import logging
from typing import Callable, List, Optional

from rich.console import Console

from common.logging_utils import extra_context, is_debug_enabled, safe_url
from report import render_response, render_summary

logger = logging.getLogger(__name__)

PROMPT_TEXT = "Do you wish to submit a build request? (y/n) "
_YES = ("y", "yes")


def confirm(ask: Callable[[str], str] = input, prompt: str = PROMPT_TEXT) -> bool:
    """Ask the user; only "y" or "yes" (any case) counts as consent."""
    try:
        answer = ask(prompt)
    except EOFError:
        answer = ""
    return answer.strip().lower() in _YES


def submit_plan(
    plan,
    build_server,
    *,
    dry_run: bool = False,
    verbose: bool = False,
    prompt: bool = False,
    ask: Callable[[str], str] = input,
    console: Optional[Console] = None,
) -> bool:
    """Show, confirm, and dispatch every request of ``plan`` in order.

    Returns:
        False if the user declined at the prompt, True otherwise.

    Raises:
        TransportError: On the first failed request; later requests are not sent.
    """
    console = console or Console()
    if dry_run or verbose or prompt:
        render_summary(plan, build_server, console)

    if prompt and not confirm(ask):
        console.print("User cancelled build request.")
        logger.info("User cancelled build request")
        return False

    responses: List = []
    for index, request in enumerate(plan.requests, start=1):
        logger.debug("%s", request)
        response = build_server.request_build(request, dry_run=dry_run)
        if is_debug_enabled(logger):
            logger.debug(
                "Dispatched build request",
                extra=extra_context(
                    event="dispatch",
                    component="dispatch",
                    action=request.shape.value,
                    target=safe_url(build_server.route_for(request)),
                    outcome="dry_run" if response is None else "sent",
                    attempt=index,
                    count=len(plan.requests),
                )
            )
        if response is not None:
            responses.append(response)
            render_response(response, verbose=verbose, console=console)

    if dry_run:
        logger.info("Dry run: %d request(s) not submitted", len(plan.requests))
    else:
        logger.info("Submitted %d build request(s)", len(responses))
    return True
