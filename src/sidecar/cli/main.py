from __future__ import annotations

import asyncio
import logging
from typing import Annotated

import typer

from sidecar.config import LaunchOptions
from sidecar.core import (
    DeviceRegistry,
    DiscoveryLoop,
    LifecycleTether,
    ReconciliationEngine,
    make_resolver,
    normalize_service_type,
)
from sidecar.sink import EventSink
from sidecar.utils.logging import setup_logging

from .common import parse_parent_pid_or_exit, print_usage

logger = logging.getLogger(__name__)

app = typer.Typer(
    help="Report mDNS devices for a service type to a parent process",
    add_completion=False,
    context_settings={
        "token_normalize_func": str.lower,
        # Lets a negative pid such as -5 through as a positional value
        "ignore_unknown_options": True,
    },
)


def _version_callback(value: bool) -> None:
    if value:
        from importlib.metadata import version as get_version

        typer.echo(f"sidecar version {get_version('mdns-sidecar')}")
        raise typer.Exit()


def build_loop(options: LaunchOptions, sink: EventSink) -> DiscoveryLoop:
    registry = DeviceRegistry()
    return DiscoveryLoop(
        service_type=options.service_type,
        resolver=make_resolver(ipv6=options.ipv6),
        engine=ReconciliationEngine(registry, sink),
        tether=LifecycleTether(options.parent_pid, sink),
    )


@app.command()
def run(
    parent_pid: Annotated[
        str | None,
        typer.Argument(help="Parent process id; 0 disables auto-termination"),
    ] = None,
    service_type: Annotated[
        str | None,
        typer.Argument(help="Service type to browse, e.g. _haptics._udp.local."),
    ] = None,
    debug: Annotated[
        bool, typer.Option("--debug", help="Emit DEBUG events")
    ] = False,
    ipv6: Annotated[
        bool, typer.Option("--ipv6", help="Browse over IPv6 too")
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
) -> None:
    """Discover devices until the parent process exits."""
    if parent_pid is None or not (service_type or "").strip():
        print_usage()
        raise typer.Exit()

    sink = EventSink(debug=debug)
    setup_logging("DEBUG" if debug else None)
    sink.debug("Logging with debug mode.")
    sink.debug(f"Using MdnsID: {service_type}")

    options = LaunchOptions(
        parent_pid=parse_parent_pid_or_exit(parent_pid, sink),
        service_type=normalize_service_type(service_type),
        debug=debug,
        ipv6=ipv6,
    )
    if not options.tethered:
        sink.debug("Parent process ID is zero; will not close program automatically.")
    loop = build_loop(options, sink)

    try:
        asyncio.run(loop.run())
    except KeyboardInterrupt:
        logger.debug("Interrupted after %d cycles", loop.cycles)
