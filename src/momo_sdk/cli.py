"""Typer CLI for poking at a Momo server and inspecting plugin configuration."""

from __future__ import annotations

import asyncio
import dataclasses
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.table import Table

from .client import MomoClient
from .config import Settings
from .errors import ConfigError, MomoError
from .instrumentation import request_stats
from .plugin_config import SCHEMAS, load_plugin_config

app = typer.Typer(help="Command line access to the Momo memory service.")
console = Console()


def _build_client(plugin: str | None, container_tag: str | None) -> MomoClient:
    overrides: dict[str, Any] = {}
    if container_tag:
        overrides["default_container_tag"] = container_tag
    if plugin:
        result = load_plugin_config(plugin)  # type: ignore[arg-type]
        return MomoClient.from_plugin_config(result.config, **overrides)
    return MomoClient.from_settings(Settings.from_env(), **overrides)


def _print_timings() -> None:
    table = Table(title="requests")
    table.add_column("Endpoint")
    table.add_column("Calls", justify="right")
    table.add_column("Avg ms", justify="right")
    table.add_column("Max ms", justify="right")
    table.add_column("Errors")
    for endpoint, stats in request_stats.snapshot().items():
        errors = ", ".join(f"{code}={count}" for code, count in sorted(stats.errors.items()))
        table.add_row(
            endpoint,
            str(stats.count),
            f"{stats.avg_ms:.1f}",
            f"{stats.max_ms:.1f}",
            errors or "-",
        )
    console.print(table)


def _run(coro_factory, *, timings: bool = False) -> Any:
    async def _main() -> Any:
        return await coro_factory()

    try:
        return asyncio.run(_main())
    except MomoError as exc:
        console.print(f"[red]{exc.code}[/red]: {exc.message}")
        raise typer.Exit(code=1) from exc
    except ConfigError as exc:
        console.print(f"[red]config error[/red]: {exc}")
        raise typer.Exit(code=2) from exc
    finally:
        if timings:
            _print_timings()


def _check_plugin(plugin: str | None) -> None:
    if plugin is not None and plugin not in SCHEMAS:
        raise typer.BadParameter(f"expected one of {', '.join(sorted(SCHEMAS))}", param_hint="--plugin")


@app.command()
def health(
    plugin: Optional[str] = typer.Option(None, help="Take connection settings from a plugin config."),
    timings: bool = typer.Option(False, help="Print per-endpoint request timings."),
):
    """Check that the server is reachable."""
    _check_plugin(plugin)

    async def _check() -> Any:
        async with _build_client(plugin, None) as client:
            return await client.health.check()

    console.print(_run(_check, timings=timings))


@app.command("search")
def search_cmd(
    query_text: str = typer.Argument(..., help="Search query."),
    limit: int = typer.Option(10, min=1, max=100),
    container_tag: Optional[str] = typer.Option(None, help="Container tag to search in."),
    plugin: Optional[str] = typer.Option(None, help="Take connection settings from a plugin config."),
    timings: bool = typer.Option(False, help="Print per-endpoint request timings."),
):
    """Search documents and memories."""
    _check_plugin(plugin)

    async def _search() -> Any:
        async with _build_client(plugin, container_tag) as client:
            return await client.search.search(q=query_text, limit=limit)

    response = _run(_search, timings=timings) or {}
    results = response.get("results", []) if isinstance(response, dict) else []
    if not results:
        console.print("No results found.")
        raise typer.Exit(code=0)

    table = Table(title="search")
    table.add_column("ID")
    table.add_column("Score", justify="right")
    table.add_column("Snippet")
    for hit in results:
        text = str(hit.get("content") or "")
        snippet = text[:120].replace("\n", " ") + ("…" if len(text) > 120 else "")
        score = hit.get("score")
        table.add_row(
            str(hit.get("id")),
            f"{score:.3f}" if isinstance(score, (int, float)) else "-",
            snippet,
        )
    console.print(table)


@app.command("config")
def config_cmd(
    plugin: str = typer.Argument(..., help="Plugin name: openclaw, opencode or pi."),
    cwd: Optional[Path] = typer.Option(None, file_okay=False, help="Project directory to read .momo.jsonc from."),
    global_dir: Optional[Path] = typer.Option(None, file_okay=False, help="Override the global config directory."),
    show_secrets: bool = typer.Option(False, help="Print the API key instead of masking it."),
):
    """Show the resolved configuration of a plugin and the files it came from."""
    _check_plugin(plugin)
    try:
        result = load_plugin_config(plugin, cwd=cwd, global_config_dir=global_dir)  # type: ignore[arg-type]
    except ConfigError as exc:
        console.print(f"[red]config error[/red]: {exc}")
        raise typer.Exit(code=2) from exc

    table = Table(title=f"{plugin} config")
    table.add_column("Field")
    table.add_column("Value")
    for item in dataclasses.fields(result.config):
        value = getattr(result.config, item.name)
        if item.name == "api_key" and value and not show_secrets:
            value = "****"
        table.add_row(item.name, str(value))
    console.print(table)

    console.print(f"cwd: {result.meta.cwd}")
    console.print(f"project file: {result.meta.project_file or '-'}")
    console.print(f"global file: {result.meta.global_file or '-'}")
