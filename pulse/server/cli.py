"""Pulse CLI — scoring, rescoring, ranked queries, ingestion, config."""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from collections.abc import Iterator
from datetime import datetime, timezone
from typing import Any, get_origin

import typer
from dateutil import parser as dtparser
from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic.fields import FieldInfo
from rich import box
from rich.console import Console
from rich.table import Table

from pulse.config import PulseConfig, ScoringConfig, loadConfig
from pulse.models import Article
from pulse.scoring import scoreArticle
from pulse.service import (
    svcIngestFeeds,
    svcRescoreAll,
    svcStats,
    svcTopArticles,
)
from pulse.state import AppState, createAppState

_cli = typer.Typer(
    name="pulse",
    help="AI news importance scoring and ranking.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
_config_cli = typer.Typer(help="Read/write [bold]~/.pulse/config.json[/bold].")
_cli.add_typer(_config_cli, name="config")

_console = Console()


def _checkFormat(format: str) -> None:
    if format not in ("human", "json"):
        raise typer.BadParameter(f"Invalid format {format!r}; choose human or json")


def _parseWhen(value: str | None) -> datetime | None:
    if value is None:
        return None
    try:
        return dtparser.parse(value)
    except (ValueError, OverflowError) as e:
        raise typer.BadParameter(f"Invalid date {value!r}") from e


@contextlib.contextmanager
def _openState() -> Iterator[AppState]:
    state = createAppState(loadConfig(), check_same_thread=True)
    try:
        yield state
    finally:
        state.db.close()


@_cli.callback()
def _default(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log progress to stderr"),
) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(name)s | %(message)s",
    )


# ============================================================
# Commands
# ============================================================


@_cli.command()
def serve(
    host: str | None = typer.Option(None, "--host", help="Bind address (default: config.host)"),
    port: int | None = typer.Option(None, "--port", help="Port (default: config.port)"),
) -> None:
    """Run the REST API."""
    import uvicorn

    from pulse.server.app import createApp

    cfg = loadConfig()
    uvicorn.run(createApp(cfg), host=host or cfg.host, port=port or cfg.port)


@_cli.command()
def score(
    title: str = typer.Argument(help="Article title"),
    summary: str | None = typer.Option(None, "--summary", "-s"),
    source: str | None = typer.Option(None, "--source"),
    category: list[str] = typer.Option(
        [], "--category", "-c", help="Priority tag (business|industry|implementation|general)"
    ),
    published: str | None = typer.Option(None, "--published", help="Publication date"),
    now: str | None = typer.Option(None, "--now", help="Evaluation instant"),
    format: str = typer.Option("human", "--format", "-f", help="Output format: human|json"),
) -> None:
    """Score a single article without storing it."""
    _checkFormat(format)
    article = Article(
        title=title,
        summary=summary,
        source=source,
        categories=category,
        published_date=_parseWhen(published) or datetime.now(timezone.utc),
    )
    breakdown = scoreArticle(article, now=_parseWhen(now), config=loadConfig().scoring)
    result = {"title": article.title, "source": article.source, **breakdown.model_dump()}

    if format == "json":
        print(json.dumps(result))
        raise typer.Exit()

    t = Table(show_header=False, box=box.SIMPLE, padding=(0, 1))
    t.add_column("key", style="dim")
    t.add_column("val")
    for key, val in result.items():
        t.add_row(key, _fmtVal(round(val, 4) if isinstance(val, float) else val))
    _console.print(t)


@_cli.command()
def rescore(
    language: str | None = typer.Option(None, "--language", "-l", help="Only this partition"),
    format: str = typer.Option("human", "--format", "-f", help="Output format: human|json"),
) -> None:
    """Recompute and store importance scores for all articles."""
    _checkFormat(format)
    with _openState() as state:
        result = asyncio.run(svcRescoreAll(state, language=language))

    if format == "json":
        print(json.dumps(result))
    else:
        _console.print(
            f"[bold]Score update complete[/bold]: {result['total']} articles, "
            f"[green]{result['updated']} updated[/green], "
            f"[red]{result['failed']} errors[/red]"
        )
    if result["failed"]:
        raise typer.Exit(1)


@_cli.command()
def top(
    language: str = typer.Option("en", "--language", "-l"),
    limit: int | None = typer.Option(None, "--limit", "-n"),
    since_hours: float | None = typer.Option(None, "--since-hours"),
    format: str = typer.Option("human", "--format", "-f", help="Output format: human|json"),
) -> None:
    """Show the highest-scoring articles in a language partition."""
    _checkFormat(format)
    with _openState() as state:
        result = svcTopArticles(state, language, limit, since_hours)

    if format == "json":
        print(json.dumps(result))
        raise typer.Exit()

    t = Table(box=box.SIMPLE, padding=(0, 1))
    t.add_column("#", justify="right", style="dim")
    t.add_column("score", justify="right")
    t.add_column("published")
    t.add_column("source")
    t.add_column("title")
    for i, a in enumerate(result["articles"], 1):
        t.add_row(
            str(i),
            f"{a['importance_score']:.1f}",
            a["published_date"][:16],
            a["source"] or "",
            a["title"],
        )
    _console.print(t)


@_cli.command()
def ingest(
    format: str = typer.Option("human", "--format", "-f", help="Output format: human|json"),
) -> None:
    """Fetch configured feeds and store new articles."""
    _checkFormat(format)
    with _openState() as state:
        result = asyncio.run(svcIngestFeeds(state))

    if format == "json":
        print(json.dumps(result))
        raise typer.Exit()
    _console.print(
        f"{result['feeds']} feeds: {result['fetched']} entries, "
        f"[green]{result['inserted']} new[/green]"
    )
    for err in result["errors"]:
        _console.print(f"[red]{err['source']}[/red]: {err['error']}")


@_cli.command()
def stats(
    format: str = typer.Option("human", "--format", "-f", help="Output format: human|json"),
) -> None:
    """Article store statistics."""
    _checkFormat(format)
    with _openState() as state:
        result = svcStats(state)
    if format == "json":
        print(json.dumps(result))
        raise typer.Exit()
    for key, val in result.items():
        _console.print(f"[bold]{key}[/bold] = {_fmtVal(val)}")


# ============================================================
# Config
# ============================================================


@_config_cli.command("list")
def config_list(
    format: str = typer.Option("human", "--format", "-f", help="Output format: human|json"),
) -> None:
    """Pretty-print the current config grouped by section."""
    _checkFormat(format)
    cfg = loadConfig()

    if format == "json":
        print(json.dumps(cfg.model_dump(mode="json")))
        raise typer.Exit()

    defaults = PulseConfig()
    general = ["db_path", "host", "port", "feed_timeout_seconds"]
    _printSection("General", [(k, getattr(cfg, k), getattr(defaults, k)) for k in general])
    _printSection(
        "Scoring",
        [
            (k, getattr(cfg.scoring, k), getattr(defaults.scoring, k))
            for k in ScoringConfig.model_fields
        ],
    )
    _printSection("Feeds", [(f.name, f"{f.url} ({f.language})", None) for f in cfg.feeds])


@_config_cli.command("get")
def config_get(
    dotpath: str = typer.Argument(help="Dot-separated key, e.g. scoring.batch_size"),
    format: str = typer.Option("human", "--format", "-f", help="Output format: human|json"),
) -> None:
    """Get a single config value."""
    _checkFormat(format)
    node: Any = loadConfig().model_dump(mode="json")
    for part in dotpath.split("."):
        if isinstance(node, dict) and part in node:
            node = node[part]
        else:
            if format == "json":
                print(json.dumps({"ok": False, "error": f"Key not found: {dotpath}"}))
            else:
                _console.print(f"[red]Key not found:[/red] {dotpath}")
            raise typer.Exit(1)
    type_name = _typeName(_configField(dotpath))
    if format == "json":
        print(json.dumps({"key": dotpath, "value": node, "type": type_name}))
    else:
        type_hint = f"  [dim]({type_name})[/dim]" if type_name != "unknown" else ""
        _console.print(f"[bold]{dotpath}[/bold] = {_fmtVal(node)}{type_hint}")


@_config_cli.command("set")
def config_set(
    dotpath: str = typer.Argument(help="Dot-separated key path"),
    value: str = typer.Argument(help="Value (type-coerced via schema)"),
    format: str = typer.Option("human", "--format", "-f", help="Output format: human|json"),
) -> None:
    """Set a config value."""
    _checkFormat(format)
    from pulse import config as config_mod

    try:
        coerced = _coerce(value, _configField(dotpath))
    except ValueError as e:
        _fail(format, f"Invalid: {e}")
        raise typer.Exit(1) from e

    raw: dict = {}
    if config_mod.CONFIG_PATH.exists():
        with contextlib.suppress(json.JSONDecodeError):
            raw = json.loads(config_mod.CONFIG_PATH.read_text())

    parts = dotpath.split(".")
    node = raw
    for part in parts[:-1]:
        if part not in node or not isinstance(node[part], dict):
            node[part] = {}
        node = node[part]
    node[parts[-1]] = coerced

    try:
        PulseConfig(**raw)
    except Exception as e:
        _fail(format, f"Invalid value: {e}")
        raise typer.Exit(1) from e

    config_mod.CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
    config_mod.CONFIG_PATH.write_text(json.dumps(raw, indent=2) + "\n")
    if format == "json":
        print(json.dumps({"ok": True, "key": dotpath, "value": coerced}))
    else:
        _console.print(f"[green]Set[/green] {dotpath} = {coerced!r}")


# ============================================================
# Config CLI helpers
# ============================================================


def _fail(format: str, message: str) -> None:
    if format == "json":
        print(json.dumps({"ok": False, "error": message}))
    else:
        _console.print(f"[red]{message}[/red]")


def _fmtVal(v: Any) -> str:
    if v is None:
        return "[dim](not set)[/dim]"
    if isinstance(v, bool):
        return "true" if v else "false"
    return str(v)


def _configField(dotpath: str) -> FieldInfo | None:
    """Resolve "section.key" or "key" against PulseConfig; sections are nested models."""
    *sections, leaf = dotpath.split(".")
    model: type[BaseModel] = PulseConfig
    for name in sections:
        field = model.model_fields.get(name)
        ann = field.annotation if field else None
        is_model = get_origin(ann) is None and isinstance(ann, type) and issubclass(ann, BaseModel)
        if not is_model:
            return None
        model = ann
    return model.model_fields.get(leaf)


def _typeName(field: FieldInfo | None) -> str:
    if field is None:
        return "unknown"
    return getattr(field.annotation, "__name__", str(field.annotation))


def _coerce(value: str, field: FieldInfo | None) -> Any:
    """Parse a CLI string with the field's type; pydantic lax mode handles "25" -> 25."""
    if field is None:
        return value
    try:
        return TypeAdapter(field.annotation).validate_python(value)
    except ValidationError as e:
        msg = e.errors()[0]["msg"]
        raise ValueError(f"{value!r} is not a valid {_typeName(field)} ({msg})") from e


def _printSection(title: str, rows: list[tuple[str, Any, Any]]) -> None:
    """rows = (key, value, default); values differing from the default are highlighted."""
    t = Table(
        title=title, title_justify="left", show_header=False, box=box.SIMPLE, padding=(0, 1)
    )
    t.add_column("key", style="dim")
    t.add_column("val")
    for key, val, default in rows:
        shown = _fmtVal(val)
        changed = default is not None and val != default
        t.add_row(key, f"[yellow]{shown}[/yellow]" if changed else shown)
    _console.print(t)


def main() -> None:
    _cli()


if __name__ == "__main__":
    main()
