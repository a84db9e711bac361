"""Main entry point for the filecache command-line application.

Sets up the Typer CLI application, wires the cache service from configuration
(Composition Root) and defines the commands operating on it.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import typer
from typing_extensions import Annotated

from filecache.domain.errors import FileCacheError
from filecache.domain.models.common import require_non_blank
from filecache.infrastructure.cache.file_cache_service import FileCacheService
from filecache.infrastructure.cli.display import ConsoleDisplay
from filecache.infrastructure.config.settings import (
    get_cache_root,
    get_config,
    get_default_ttl,
    get_instance_name,
    load_configuration,
)
from filecache.infrastructure.monitoring.event_log import log_cache_event
from filecache.infrastructure.monitoring.logger_setup import resolve_log_level, setup_logging

logger = logging.getLogger(__name__)

EXIT_MISS = 1
EXIT_FAILURE = 1
EXIT_USAGE = 2

app = typer.Typer(
    name="filecache",
    help="Local file cache with per-item TTL, stored as JSON documents.",
    add_completion=False,
)


def create_dependencies(root: Optional[Path], instance: Optional[str], verbose: bool) -> Dict[str, Any]:
    """Creates and wires up the dependencies for one CLI invocation."""
    load_configuration()

    configured_level = get_config('logging.level')
    if verbose:
        log_level, level_source = logging.DEBUG, "--verbose"
    else:
        log_level = resolve_log_level(configured_level)
        level_source = "config" if configured_level else "default"
    setup_logging(
        log_level=log_level,
        log_format=get_config('logging.format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s'),
        log_file=get_config('logging.file'),
        source=level_source,
    )

    dependencies: Dict[str, Any] = {'ui': ConsoleDisplay()}
    dependencies['cache_service'] = FileCacheService(
        root_path=root or get_cache_root(),
        instance_name=instance or get_instance_name(),
        listener=log_cache_event,
    )
    return dependencies


def _deps(ctx: typer.Context) -> Dict[str, Any]:
    return ctx.obj


def _fail(ctx: typer.Context, message: str, code: int) -> None:
    _deps(ctx)['ui'].display_error(message)
    raise typer.Exit(code=code)


def _check_identifiers(ctx: typer.Context, namespace: str, name: str) -> None:
    try:
        require_non_blank(namespace, "namespace")
        require_non_blank(name, "name")
    except ValueError as e:
        _fail(ctx, str(e), EXIT_USAGE)


# --- CLI Commands ---

NamespaceArg = Annotated[str, typer.Argument(help="Namespace (directory under the instance).")]
NameArg = Annotated[str, typer.Argument(help="Item name inside the namespace.")]


@app.command()
def store(
    ctx: typer.Context,
    namespace: NamespaceArg,
    name: NameArg,
    value: Annotated[str, typer.Argument(help="Value to store, parsed as JSON unless --string is given.")],
    ttl: Annotated[Optional[int], typer.Option("--ttl", "-t", min=0, help="Time-to-live in seconds (0 = never expires).")] = None,
    as_string: Annotated[bool, typer.Option("--string", "-s", help="Store VALUE as a plain string.")] = False,
):
    """Store a value in the cache."""
    _check_identifiers(ctx, namespace, name)
    if as_string:
        item: Any = value
    else:
        try:
            item = json.loads(value)
        except ValueError as e:
            _fail(ctx, f"VALUE is not valid JSON ({e}). Use --string to store it as text.", EXIT_USAGE)

    ttl_secs = ttl if ttl is not None else get_default_ttl()
    cache: FileCacheService = _deps(ctx)['cache_service']
    try:
        cache.store(namespace, name, item, ttl_secs)
    except FileCacheError as e:
        logger.error(f"Failed to store '{namespace}/{name}': {e}")
        _fail(ctx, str(e), EXIT_FAILURE)
    _deps(ctx)['ui'].display_info(f"Stored '{namespace}/{name}' (ttl={ttl_secs}s)")


@app.command()
def get(ctx: typer.Context, namespace: NamespaceArg, name: NameArg):
    """Print a cached value as JSON. Exits with code 1 on a miss."""
    _check_identifiers(ctx, namespace, name)
    cache: FileCacheService = _deps(ctx)['cache_service']
    try:
        value = cache.get(namespace, name)
    except FileCacheError as e:
        logger.error(f"Failed to read '{namespace}/{name}': {e}")
        _fail(ctx, str(e), EXIT_FAILURE)

    if value is None:
        _deps(ctx)['ui'].display_warning(f"No cached value for '{namespace}/{name}'")
        raise typer.Exit(code=EXIT_MISS)
    _deps(ctx)['ui'].display_value(value)


@app.command()
def info(ctx: typer.Context, namespace: NamespaceArg, name: NameArg):
    """Show TTL and creation time of a cached item."""
    _check_identifiers(ctx, namespace, name)
    cache: FileCacheService = _deps(ctx)['cache_service']
    try:
        metadata = cache.get_metadata(namespace, name)
        now = cache.current_unixtime()
    except FileCacheError as e:
        _fail(ctx, str(e), EXIT_FAILURE)

    if metadata is None:
        _deps(ctx)['ui'].display_warning(f"No metadata for '{namespace}/{name}'")
        raise typer.Exit(code=EXIT_MISS)
    _deps(ctx)['ui'].display_metadata(namespace, name, metadata, now)


@app.command()
def delete(ctx: typer.Context, namespace: NamespaceArg, name: NameArg):
    """Delete a cached item."""
    _check_identifiers(ctx, namespace, name)
    cache: FileCacheService = _deps(ctx)['cache_service']
    try:
        removed = cache.delete(namespace, name)
    except FileCacheError as e:
        _fail(ctx, str(e), EXIT_FAILURE)

    if removed:
        _deps(ctx)['ui'].display_info(f"Deleted '{namespace}/{name}'")
    else:
        _deps(ctx)['ui'].display_warning(f"Nothing to delete for '{namespace}/{name}'")


@app.command()
def clear(
    ctx: typer.Context,
    namespace: Annotated[Optional[str], typer.Option("--namespace", "-n", help="Only clear this namespace.")] = None,
):
    """Clear one namespace, or the whole cache instance."""
    if namespace is not None:
        try:
            require_non_blank(namespace, "namespace")
        except ValueError as e:
            _fail(ctx, str(e), EXIT_USAGE)
    cache: FileCacheService = _deps(ctx)['cache_service']
    try:
        cache.clear(namespace)
    except FileCacheError as e:
        _fail(ctx, str(e), EXIT_FAILURE)
    target = f"namespace '{namespace}'" if namespace else f"instance '{cache.instance_name}'"
    _deps(ctx)['ui'].display_info(f"Cleared {target}")


@app.callback()
def main_callback(
    ctx: typer.Context,
    root: Annotated[Optional[Path], typer.Option("--root", "-r", help="Cache root directory (default from config).")] = None,
    instance: Annotated[Optional[str], typer.Option("--instance", "-i", help="Cache instance name (default from config).")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """Local file cache with per-item TTL."""
    try:
        ctx.obj = create_dependencies(root, instance, verbose)
    except ValueError as e:
        ConsoleDisplay().display_error(str(e))
        raise typer.Exit(code=EXIT_USAGE)
    except FileCacheError as e:
        logger.error(f"Failed to initialize the cache: {e}")
        ConsoleDisplay().display_error(f"Cache initialization failed: {e}")
        raise typer.Exit(code=EXIT_FAILURE)


def cli_entry_point():
    """Function to be called by the script entry point in pyproject.toml."""
    app()


if __name__ == "__main__":
    cli_entry_point()
