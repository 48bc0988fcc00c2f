"""CLI for the archival access server (run services, inspect access and metadata)."""

import json
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger

from archival_access.config import Settings, load_settings
from archival_access.core.metadata.resolver import get_root_id, resolve_metadata
from archival_access.errors import ConfigurationError, UnavailableError
from archival_access.logging_config import configure_logging
from archival_access.models.item import IdentityContext
from archival_access.scheduler import CronScheduler
from archival_access.services.descriptor import RunAs
from archival_access.services.registry import load_descriptors
from archival_access.services.runtime import Runtime, build_context, serve
from archival_access.tree_store import FileTreeStore

app = typer.Typer(help="Archival access: access decisions, finding-aid metadata and services.")

_state = {"verbose": False}


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    _state["verbose"] = verbose
    configure_logging(verbose=verbose)


def _load_settings() -> Settings:
    """Load settings from the environment, exiting on configuration errors."""
    try:
        settings = load_settings()
    except ConfigurationError as e:
        logger.error("Configuration error: {}", e)
        raise typer.Exit(1) from e
    if not _state["verbose"]:
        configure_logging(level=settings.log_level)
    return settings


@app.command()
def services(
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """List the configured services and their execution modes."""
    settings = _load_settings()
    try:
        descriptors = load_descriptors(settings.services)
    except ConfigurationError as e:
        logger.error("Configuration error: {}", e)
        raise typer.Exit(1) from e

    if output_json:
        data = {
            "services": [
                {
                    "name": d.name,
                    "run_as": d.run_as.value,
                    "implements": sorted(c.value for c in d.implements),
                    "cron": d.cron,
                    "task_type": d.task_type,
                }
                for d in descriptors
            ],
            "count": len(descriptors),
        }
        typer.echo(json.dumps(data, indent=2))
        return

    typer.echo(f"{len(descriptors)} services:\n")
    for d in descriptors:
        extra = ""
        if d.cron:
            extra = f"  cron={d.cron}"
        elif d.task_type:
            extra = f"  task_type={d.task_type}"
        implements = ", ".join(sorted(c.value for c in d.implements))
        typer.echo(f"  {d.name} [{d.run_as.value}] {implements}{extra}")


@app.command()
def run() -> None:
    """Activate all configured services and keep serving tasks and schedules."""
    settings = _load_settings()
    try:
        descriptors = load_descriptors(settings.services)
        context = build_context(settings)
        runtime = Runtime(context, scheduler=CronScheduler(context.clock))
        serve(runtime, descriptors)
    except ConfigurationError as e:
        logger.error("Configuration error: {}", e)
        raise typer.Exit(1) from e
    except UnavailableError as e:
        logger.error("{}", e)
        raise typer.Exit(1) from e
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")


@app.command()
def metadata(
    target: str = typer.Argument(..., help="Composite identifier, e.g. ARCH01234.1.1"),
    tree_dir: Annotated[
        Path | None,
        typer.Option("--tree-dir", "-t", help="Directory with finding-aid JSON files"),
    ] = None,
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Resolve descriptive metadata for an archival unit, root first."""
    if tree_dir is None:
        tree_dir = _load_settings().data_path

    try:
        tree = FileTreeStore(tree_dir).get_tree(get_root_id(target))
    except UnavailableError as e:
        logger.error("{}", e)
        raise typer.Exit(1) from e
    if tree is None:
        typer.echo(f"No finding aid for '{get_root_id(target)}' in {tree_dir}.")
        raise typer.Exit(1)

    records = resolve_metadata(target, tree)

    if output_json:
        typer.echo(json.dumps({"records": [r.to_dict() for r in records]}, indent=2))
        return

    for depth, record in enumerate(records):
        indent = "  " * depth
        unit_id = "" if record.unit_id_is_surrogate else f" ({record.unit_id})"
        typer.echo(f"{indent}- {record.title}{unit_id}")
        if record.formats:
            typer.echo(f"{indent}  formats: {', '.join(sorted(record.formats))}")
        if record.dates:
            typer.echo(f"{indent}  dates: {'; '.join(record.dates)}")


@app.command()
def access(
    item_id: str = typer.Argument(..., help="Item identifier"),
    ip: str = typer.Option("", "--ip", help="Requester IP address"),
    identity: Annotated[
        list[str] | None,
        typer.Option("--identity", "-i", help="Credential token (repeatable)"),
    ] = None,
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Evaluate the configured access policy for an item."""
    settings = _load_settings()
    try:
        descriptors = load_descriptors(settings.services)
        runtime = Runtime(build_context(settings))
        runtime.activate(d for d in descriptors if d.run_as is RunAs.REQUEST_SERVER)
        item = runtime.context.item_store.get_item(item_id)
    except ConfigurationError as e:
        logger.error("Configuration error: {}", e)
        raise typer.Exit(1) from e
    except UnavailableError as e:
        logger.error("{}", e)
        raise typer.Exit(1) from e

    if item is None:
        typer.echo(f"Item '{item_id}' not found.")
        raise typer.Exit(1)

    ctx = IdentityContext(requester_ip=ip, identities=tuple(identity or ()))
    decision = runtime.hooks.has_access(item, ctx)

    if output_json:
        data = {"item_id": item.id, "state": decision.state.value, "max_size": decision.max_size}
        typer.echo(json.dumps(data, indent=2))
    elif decision.max_size is not None:
        typer.echo(f"{item.id}: {decision.state.value} (max size {decision.max_size})")
    else:
        typer.echo(f"{item.id}: {decision.state.value}")
