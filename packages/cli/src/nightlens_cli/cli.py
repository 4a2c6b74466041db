"""CLI entry point for nightlens.

Commands:
  show         — days without incident, success rate, streak and recent builds
  history      — recent nightly builds only
  watch        — show once, then keep the "next update in" countdown ticking
  clear-cache  — drop the cached snapshot so the next run fetches from GitHub
"""

from __future__ import annotations

import importlib.metadata
import logging
import sqlite3

import click
from rich.console import Console

from nightlens_cli.commands.clear import clear_cache_cmd
from nightlens_cli.commands.history import history_cmd
from nightlens_cli.commands.show import show_cmd
from nightlens_cli.commands.watch import watch_cmd

console = Console()
logger = logging.getLogger(__name__)


def _build_store(config: dict):
    """Instantiate the configured cache store from .nightlens.yml settings.

    Store selection hierarchy:
      store: sqlite → SQLiteStore (store_path or .nightlens.db), the default
      store: memory → MemoryStore (cache lives for one process only)
      store: noop   → NoOpStore  (caching disabled, always fetch)

    A SQLite file that cannot be opened is not fatal: the dashboard still
    works, it just refetches on every run.
    """
    from nightlens_store.noop import NoOpStore

    store_type = config.get("store", "sqlite")

    if store_type == "memory":
        from nightlens_store.memory import MemoryStore

        return MemoryStore()

    if store_type == "sqlite":
        from nightlens_store.sqlite import SQLiteStore

        db_path = config.get("store_path", ".nightlens.db")
        try:
            return SQLiteStore(db_path=db_path)
        except sqlite3.Error as e:
            logger.warning("Could not open cache database %s: %s", db_path, e)
            console.print(f"[yellow]Could not open cache at {db_path} ({e}). Caching disabled.[/yellow]")
            return NoOpStore()

    if store_type != "noop":
        console.print(f"[yellow]Unknown store {store_type!r}. Caching disabled.[/yellow]")
    return NoOpStore()


def _build_policy(config: dict, store):
    from nightlens_core.schedule import CachePolicy, RefreshSchedule

    try:
        schedule = RefreshSchedule(config["refresh_hours"], system_local=True)
    except (TypeError, ValueError) as e:
        raise click.UsageError(f"Invalid refresh_hours in configuration: {e}")
    return CachePolicy(store, schedule, key=config["cache_key"])


@click.group()
@click.version_option(
    version=importlib.metadata.version("nightlens"),
    prog_name="nightlens",
)
@click.option(
    "--config",
    "config_path",
    default=".nightlens.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="NIGHTLENS_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Days-without-incident dashboard for a GitHub nightly build workflow."""
    from nightlens_core.config import load_config

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    ctx.ensure_object(dict)

    try:
        config = load_config(config_path)
    except ValueError as e:
        raise click.UsageError(str(e))

    store = _build_store(config)
    ctx.obj["store"] = store
    ctx.obj["config"] = config
    ctx.obj["policy"] = _build_policy(config, store)
    ctx.call_on_close(store.close)


main.add_command(show_cmd)
main.add_command(history_cmd)
main.add_command(watch_cmd)
main.add_command(clear_cache_cmd)
