#!/usr/bin/env python
"""
CLI management commands for the Tap2Go content platform.
"""

import asyncio
import json
from collections.abc import Callable
from dataclasses import dataclass

import click

from tap2go.content.cache.invalidation import InvalidationTarget
from tap2go.content.container import ContentContainer
from tap2go.content.logging import setup_logging
from tap2go.content.settings import Settings


@dataclass
class CLIDependencies:
    """Bundle of injectable dependencies used by CLI commands."""

    settings_factory: Callable[[], Settings]
    container_factory: Callable[[Settings], ContentContainer]


def _get_cli_dependencies() -> CLIDependencies:
    """Return the default dependency bundle for CLI commands."""
    return CLIDependencies(settings_factory=Settings, container_factory=ContentContainer)


@click.group()
def cli() -> None:
    """Tap2Go content platform CLI."""
    pass


@cli.command()
def health() -> None:
    """Check content store and distributed cache reachability."""
    deps = _get_cli_dependencies()
    config = deps.settings_factory()
    setup_logging(config.observability.log_level.value, config.observability.log_format)

    async def _health() -> dict[str, bool]:
        async with deps.container_factory(config) as container:
            return await container.health()

    status = asyncio.run(_health())
    click.echo(json.dumps(status, indent=2))
    if not status["content_store"]:
        raise SystemExit(1)


@cli.command()
@click.argument("target", type=click.Choice([target.value for target in InvalidationTarget]))
@click.option("--id", "entity_id", default=None, help="Restaurant external id to target")
def invalidate(target: str, entity_id: str | None) -> None:
    """Invalidate cached content for TARGET."""
    deps = _get_cli_dependencies()
    config = deps.settings_factory()
    setup_logging(config.observability.log_level.value, config.observability.log_format)

    async def _invalidate() -> None:
        async with deps.container_factory(config) as container:
            await container.invalidator.invalidate(InvalidationTarget(target), entity_id)

    asyncio.run(_invalidate())
    suffix = f" ({entity_id})" if entity_id else ""
    click.echo(f"Invalidated {target}{suffix}")


if __name__ == "__main__":
    cli()
