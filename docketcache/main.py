"""Main entry point for the docketcache application.

Sets up the Typer CLI application, performs dependency injection (Composition Root),
defines CLI commands, and delegates execution to the CacheCommandHandler.
"""

import asyncio
import logging
import sys
from typing import Any, Coroutine, Dict, Optional

import typer
from typing_extensions import Annotated

logger = logging.getLogger(__name__)

# --- Core Layer ---
from docketcache.core.command_handler import CacheCommandHandler
from docketcache.core.services.lookup_service import LookupService

# --- Infrastructure Layer ---
# Config
from docketcache.infrastructure.config.settings import (
    load_configuration, get_config, get_log_level,
    get_cleanup_interval_seconds, get_lookup_delay_seconds
)
# UI
from docketcache.infrastructure.cli.display import ConsoleDisplay
# Cache
from docketcache.infrastructure.cache.caching_service import CachingServiceImpl
from docketcache.infrastructure.cache.cleanup_scheduler import CacheCleanupScheduler
# Monitoring
from docketcache.infrastructure.monitoring.logger_setup import setup_logging, DEFAULT_LOG_FORMAT

# --- Dependency Injection Container (Manual) ---

def create_dependencies() -> Dict[str, Any]:
    """Creates and wires up all dependencies for the application.

    This acts as the Composition Root. The cache created here is the single
    process-wide instance; tests build their own instances instead.
    """
    dependencies: Dict[str, Any] = {}
    try:
        # 1. Load Configuration First
        load_configuration()
        setup_logging(
            log_level=get_log_level(),
            log_format=get_config('logging.format', DEFAULT_LOG_FORMAT),
            log_file=get_config('logging.file'),
        )
        logger.debug("Configuration and logging initialized.")

        # 2. Instantiate Infrastructure Adapters & Services
        dependencies['ui'] = ConsoleDisplay()
        dependencies['cache_service'] = CachingServiceImpl()
        dependencies['cleanup_scheduler'] = CacheCleanupScheduler(
            dependencies['cache_service'],
            interval_seconds=get_cleanup_interval_seconds(),
        )

        # 3. Instantiate Core Services
        dependencies['lookup_service'] = LookupService(delay_seconds=get_lookup_delay_seconds())

        # 4. Instantiate Command Handler
        dependencies['command_handler'] = CacheCommandHandler(
            cache_service=dependencies['cache_service'],
            lookup_service=dependencies['lookup_service'],
            ui=dependencies['ui'],
            cleanup_scheduler=dependencies['cleanup_scheduler'],
            limits={
                'max_size': dependencies['cache_service'].max_size,
                'default_ttl_ms': dependencies['cache_service'].default_ttl,
                'cleanup_interval_s': dependencies['cleanup_scheduler'].interval_seconds,
            },
        )
        logger.debug("All dependencies initialized successfully.")
        return dependencies

    except Exception as e:
        logger.error(f"Fatal Error during application initialization: {e}", exc_info=True)
        if dependencies.get('ui'):
            dependencies['ui'].display_error(f"Application Initialization Failed: {e}")
        else:
            print(f"FATAL ERROR during initialization: {e}", file=sys.stderr)
        sys.exit(1)

_dependencies: Optional[Dict[str, Any]] = None

def get_dependencies() -> Dict[str, Any]:
    """Returns the wired-up dependencies, creating them on first use."""
    global _dependencies
    if _dependencies is None:
        _dependencies = create_dependencies()
    return _dependencies

def reset_dependencies() -> None:
    """Drops the wired-up dependencies so the next command rebuilds them."""
    global _dependencies
    _dependencies = None

# --- Typer App Definition ---
app = typer.Typer(
    name="docketcache",
    help="docketcache: in-memory query-result cache with TTL expiry, FIFO eviction and hit/miss statistics.",
    add_completion=False,
)

# --- Helper for Running Async Commands ---
def run_async(coro: Coroutine[Any, Any, None]) -> None:
    """Runs a handler coroutine from a sync Typer command."""
    try:
        asyncio.run(coro)
    except Exception as e:
        logger.error(f"Error executing async command: {e}", exc_info=True)
        get_dependencies()['ui'].display_error(f"Command execution failed: {e}")
        raise typer.Exit(code=1)

# --- CLI Commands ---

@app.command()
def console():
    """Start an interactive console against a fresh cache."""
    handler: CacheCommandHandler = get_dependencies()['command_handler']
    run_async(handler.start_console())

@app.command()
def demo(
    delay: Annotated[
        Optional[float],
        typer.Option("--delay", "-d", min=0.0, help="Simulated lookup latency in seconds.")
    ] = None,
):
    """Run a scripted walk-through of cache hits, misses, fetches and clears."""
    deps = get_dependencies()
    if delay is not None:
        deps['lookup_service'].delay_seconds = delay
    handler: CacheCommandHandler = deps['command_handler']
    run_async(handler.run_demo())

@app.command()
def stats():
    """Show the configured limits and statistics of a fresh cache."""
    handler: CacheCommandHandler = get_dependencies()['command_handler']
    run_async(handler.handle_stats([]))

@app.callback(invoke_without_command=True)
def main_callback(ctx: typer.Context):
    """Main entry point. Starts the console if no command is given."""
    if ctx.invoked_subcommand is None:
        logger.info("No command invoked, starting interactive console.")
        handler: CacheCommandHandler = get_dependencies()['command_handler']
        run_async(handler.start_console())

# --- Main Execution Guard ---

def cli_entry_point():
    """Function called by the script entry point in pyproject.toml."""
    app()

if __name__ == "__main__":
    cli_entry_point()
