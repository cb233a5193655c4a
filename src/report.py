"""Console rendering for build plans and server responses."""
from __future__ import annotations

from typing import Optional

from rich import box
from rich.console import Console
from rich.table import Table

from common.logging_utils import safe_url
from buildreq.variants import RequestShape


def _table(title: str) -> Table:
    table = Table(title=title, box=box.SIMPLE_HEAD, show_header=False, title_style="bold yellow")
    table.add_column("field", style="bold yellow", no_wrap=True)
    table.add_column("value", style="bold white")
    return table


def summary_table(plan, build_server) -> Table:
    """Route, project, tag and, for distribution builds, flavors, repo and platforms."""
    ctx = plan.context
    if ctx.shape is RequestShape.PACKAGE:
        table = _table("Remote Package Build Request Information")
        table.add_row("Route", safe_url(build_server.package_route(ctx.name, ctx.tag)))
        table.add_row("Project", ctx.name)
        table.add_row("VCS Tag", ctx.tag)
        return table

    table = _table("Remote Build Request Information")
    table.add_row("Route", safe_url(build_server.distribution_route()))
    table.add_row("Project", ctx.name)
    table.add_row("VCS Tag", ctx.tag)
    table.add_row("Flavors", " , ".join(ctx.flavors))
    table.add_row("VCS Repo", str(ctx.repo))
    table.add_row("Platforms", " , ".join(str(p) for p in ctx.platforms))
    table.add_row("Requests", str(len(plan.requests)))
    return table


def render_summary(plan, build_server, console: Optional[Console] = None) -> None:
    console = console or Console()
    console.print()
    console.print(summary_table(plan, build_server))
    console.print()


def render_response(response, verbose: bool = False, console: Optional[Console] = None) -> None:
    """Status of a build POST; headers and body too when ``verbose``."""
    console = console or Console()
    table = _table("Response")
    if verbose:
        for key, value in response.headers.items():
            table.add_row(str(key), str(value))
    table.add_row("Return Status", f"{response.status_code} {getattr(response, 'reason', '') or ''}".rstrip())
    console.print()
    console.print(table)
    console.print()
    if verbose and response.text:
        console.print(response.text, markup=False, highlight=False)
