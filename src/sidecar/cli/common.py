from __future__ import annotations

import typer

from sidecar.sink import EventSink

USAGE = "Usage: <ParentProcessId> <MdnsID> [--debug]"


def print_usage() -> None:
    typer.echo(f"DBUG:{USAGE}")
    typer.echo("WARN:Exiting: Not enough arguments.")


def parse_parent_pid_or_exit(value: str, sink: EventSink) -> int:
    try:
        return int(value.strip())
    except ValueError as exc:
        sink.error("Invalid parent process ID.")
        raise typer.Exit(1) from exc
