"""Command Handler: Orchestrates console command execution.

Receives commands from the main entry point (main.py) or from the interactive
console and delegates the work to the CacheService and LookupService,
reporting results through the UserInterface.
"""

import asyncio
import json
import logging
import shlex
import time
from typing import Any, Dict, List, Mapping, Optional, Tuple

# Core Services Imports
from docketcache.core.services.lookup_service import LookupService

# Domain Layer Imports
from docketcache.domain.interfaces.cache import CacheService
from docketcache.domain.interfaces.user_interface import UserInterface
from docketcache.domain.models.common import CacheParams, ProcessedOutput

# Infrastructure Layer Imports
from docketcache.infrastructure.cache.cleanup_scheduler import CacheCleanupScheduler

logger = logging.getLogger(__name__)

EXIT_COMMANDS = {"exit", "quit"}

HELP_TEXT = """Commands:
  get <prefix> [name=value ...]                       Look up a cached value
  set <prefix> [name=value ...] --data <json> [--ttl <ms>]  Store a value
  fetch <prefix> [name=value ...] [--ttl <ms>]        Get or run a (simulated) lookup
  clear <prefix>                                      Remove entries under a prefix
  clear-all                                           Empty the cache and reset stats
  cleanup                                             Sweep expired entries now
  stats                                               Show cache statistics
  help                                                Show this help
  exit | quit                                         Leave the console
Values are parsed as JSON when possible (id=42 is a number, id='"42"' a string)."""

class ConsoleUsageError(ValueError):
    """Raised when a console command is malformed."""

def parse_value(raw: str) -> Any:
    """Parses a JSON literal, keeping the raw text when it is not valid JSON."""
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw

def parse_arguments(tokens: List[str]) -> Tuple[str, CacheParams, Dict[str, str]]:
    """Splits command tokens into prefix, params and --options.

    Args:
        tokens: Tokens after the command name.

    Returns:
        (prefix, params, options)

    Raises:
        ConsoleUsageError: If the prefix is missing or an option has no value.
    """
    if not tokens or tokens[0].startswith("--") or "=" in tokens[0]:
        raise ConsoleUsageError("A prefix is required as the first argument.")
    prefix, rest = tokens[0], tokens[1:]
    params = CacheParams({})
    options: Dict[str, str] = {}
    i = 0
    while i < len(rest):
        token = rest[i]
        if token.startswith("--"):
            if i + 1 >= len(rest):
                raise ConsoleUsageError(f"Option '{token}' requires a value.")
            options[token[2:]] = rest[i + 1]
            i += 2
            continue
        name, sep, raw_value = token.partition("=")
        if not sep or not name:
            raise ConsoleUsageError(f"Expected name=value, got '{token}'.")
        params[name] = parse_value(raw_value)
        i += 1
    return prefix, params, options

def parse_ttl(options: Mapping[str, str]) -> Optional[int]:
    """Reads --ttl (milliseconds) from parsed options."""
    if "ttl" not in options:
        return None
    try:
        ttl = int(options["ttl"])
    except ValueError:
        raise ConsoleUsageError(f"--ttl must be an integer number of milliseconds, got '{options['ttl']}'.")
    if ttl <= 0:
        raise ConsoleUsageError("--ttl must be positive.")
    return ttl

def format_value(value: Any) -> ProcessedOutput:
    try:
        return ProcessedOutput(json.dumps(value, indent=2, ensure_ascii=False, sort_keys=True))
    except (TypeError, ValueError):
        return ProcessedOutput(repr(value))

class CacheCommandHandler:
    """Handles console commands and delegates to the cache."""

    def __init__(
        self,
        cache_service: CacheService,
        lookup_service: LookupService,
        ui: UserInterface,
        cleanup_scheduler: Optional[CacheCleanupScheduler] = None,
        limits: Optional[Mapping[str, Any]] = None,
    ):
        """Initializes the handler with the cache and its collaborators."""
        self.cache_service = cache_service
        self.lookup_service = lookup_service
        self.ui = ui
        self.cleanup_scheduler = cleanup_scheduler
        self.limits = dict(limits or {})
        self._commands = {
            "get": self.handle_get,
            "set": self.handle_set,
            "fetch": self.handle_fetch,
            "clear": self.handle_clear,
            "clear-all": self.handle_clear_all,
            "cleanup": self.handle_cleanup,
            "stats": self.handle_stats,
            "help": self.handle_help,
        }

    # --- Individual Commands ---

    async def handle_get(self, args: List[str]) -> None:
        prefix, params, _ = parse_arguments(args)
        hits_before = self.cache_service.get_stats()['hits']
        value = self.cache_service.get(prefix, params)
        key = self.cache_service.generate_key(prefix, params)
        if value is None:
            # get() returns None for a stored null too; only the hit counter tells them apart
            if self.cache_service.get_stats()['hits'] > hits_before:
                self.ui.display_info(f"Cached null: {key} (counted as a hit)")
            else:
                self.ui.display_info(f"Cache miss: {key}")
        else:
            self.ui.display_output(format_value(value), title=f"HIT {key}")

    async def handle_set(self, args: List[str]) -> None:
        prefix, params, options = parse_arguments(args)
        if "data" not in options:
            raise ConsoleUsageError("set requires --data <json>.")
        ttl = parse_ttl(options)
        self.cache_service.set(prefix, params, parse_value(options["data"]), ttl)
        key = self.cache_service.generate_key(prefix, params)
        ttl_text = f"{ttl}ms" if ttl is not None else "default TTL"
        self.ui.display_info(f"Stored {key} ({ttl_text})")

    async def handle_fetch(self, args: List[str]) -> None:
        prefix, params, options = parse_arguments(args)
        ttl = parse_ttl(options)
        calls_before = self.lookup_service.call_count
        started = time.perf_counter()
        value = await self.cache_service.get_or_fetch(
            prefix, params, lambda: self.lookup_service.lookup(prefix, params), ttl
        )
        elapsed_ms = (time.perf_counter() - started) * 1000
        source = "lookup" if self.lookup_service.call_count > calls_before else "cache"
        self.ui.display_output(format_value(value), title=f"{source} · {elapsed_ms:.1f}ms")

    async def handle_clear(self, args: List[str]) -> None:
        if len(args) != 1:
            raise ConsoleUsageError("clear takes exactly one prefix.")
        removed = self.cache_service.clear_by_prefix(args[0])
        self.ui.display_info(f"Removed {removed} entries with prefix '{args[0]}'.")

    async def handle_clear_all(self, args: List[str]) -> None:
        self.cache_service.clear_all()
        self.ui.display_info("Cache cleared and statistics reset.")

    async def handle_cleanup(self, args: List[str]) -> None:
        if self.cleanup_scheduler is not None:
            removed = self.cleanup_scheduler.run_once()
        else:
            removed = self.cache_service.cleanup()
        self.ui.display_info(f"Cleanup removed {removed} expired entries.")

    async def handle_stats(self, args: List[str]) -> None:
        self.ui.display_stats(self.cache_service.get_stats(), self.limits)

    async def handle_help(self, args: List[str]) -> None:
        self.ui.display_output(ProcessedOutput(HELP_TEXT), title="Help")

    # --- Dispatch ---

    async def handle_line(self, line: str) -> bool:
        """Executes one console line.

        Returns:
            False if the session should end, True otherwise.
        """
        try:
            tokens = shlex.split(line)
        except ValueError as e:
            self.ui.display_error(f"Could not parse command: {e}")
            return True
        if not tokens:
            return True

        command, args = tokens[0].lower(), tokens[1:]
        if command in EXIT_COMMANDS:
            return False

        handler = self._commands.get(command)
        if handler is None:
            self.ui.display_error(f"Unknown command '{command}'. Type 'help' for a list of commands.")
            return True

        logger.info(f"Handling console command '{command}'")
        try:
            await handler(args)
        except ConsoleUsageError as e:
            self.ui.display_error(str(e))
        except Exception as e:
            logger.error(f"Command '{command}' failed: {e}", exc_info=True)
            self.ui.display_error(f"Command '{command}' failed: {e}")
        return True

    async def start_console(self) -> None:
        """Runs the interactive console until the user exits."""
        logger.info("Starting interactive cache console.")
        started = time.time()
        executed = 0
        if self.cleanup_scheduler is not None:
            self.cleanup_scheduler.start()
        self.ui.display_session_header()
        try:
            while True:
                try:
                    line = await asyncio.to_thread(self.ui.get_prompt, "cache> ")
                except (EOFError, KeyboardInterrupt):
                    break
                if not await self.handle_line(line):
                    break
                if line.strip():
                    executed += 1
        finally:
            if self.cleanup_scheduler is not None:
                await self.cleanup_scheduler.stop()
            self.ui.display_session_footer(executed, time.time() - started)

    async def run_demo(self) -> None:
        """Walks through typical cache usage and shows the resulting statistics."""
        steps = [
            "set case id='\"42\"' --data '{\"title\": \"Roe v. Wade\"}' --ttl 5000",
            "get case id='\"42\"'",
            "get case id='\"43\"'",
            "fetch search q=brown",
            "fetch search q=brown",
            "set user id=7 --data '{\"name\": \"A. Counsel\"}'",
            "clear search",
            "stats",
        ]
        for step in steps:
            self.ui.display_info(f"cache> {step}")
            await self.handle_line(step)
