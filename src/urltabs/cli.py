from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from urltabs.config import ConfigError, Settings, configure_logging, load_settings
from urltabs.domain.models import Block, EndpointMask, TabDescriptor, VisibilityRule
from urltabs.editor.blocks import EditorData
from urltabs.endpoints.resolver import RequestContext
from urltabs.render.pipeline import RenderPipeline, default_transformers
from urltabs.tabs.builder import base_url, build_tab
from urltabs.visibility.evaluator import evaluate


app = typer.Typer(no_args_is_help=True, add_completion=False)

console = Console()


def _settings(ctx: typer.Context) -> Settings:
    return ctx.obj if isinstance(ctx.obj, Settings) else Settings()


def _request(ctx: typer.Context, path: str) -> RequestContext:
    return RequestContext.from_request(path, registry=_settings(ctx).registry())


@app.callback()
def main_callback(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="JSON settings file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log defaulting decisions"),
) -> None:
    configure_logging(verbose)
    try:
        ctx.obj = load_settings(config)
    except ConfigError as e:
        raise typer.BadParameter(str(e), param_hint="--config")


@app.command()
def endpoints(
    ctx: typer.Context,
    page: Optional[str] = typer.Option(None, help="Only endpoints registered for this page type (e.g. CATEGORIES)"),
) -> None:
    registry = _settings(ctx).registry()
    items = list(registry)
    if page:
        try:
            mask = EndpointMask[page.upper().removeprefix("EP_")]
        except KeyError:
            raise typer.BadParameter(f"unknown page type: {page}")
        items = registry.for_page(mask)

    table = Table(show_header=True, header_style="bold")
    table.add_column("ENDPOINT", no_wrap=True)
    table.add_column("MASK")
    for ep in items:
        table.add_row(ep.name, f"{ep.mask.name or ''} ({int(ep.mask)})")
    console.print(table)


@app.command()
def resolve(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Request path, e.g. /products/tab/shoes/"),
    endpoint: Optional[str] = typer.Option(None, help="Endpoint name (default: every registered endpoint)"),
) -> None:
    req = _request(ctx, path)
    names = [endpoint] if endpoint else req.registry.names()

    console.print(f"[bold]Path:[/bold] {req.path or '(empty)'}")
    console.print(f"[bold]Base URL:[/bold] {base_url(req)}")
    for name in names:
        value = req.resolve(name)
        if value is None:
            shown = "(absent)"
        elif value == "":
            shown = "(empty)"
        else:
            shown = value
        console.print(f"  {name:<12} {shown}")


@app.command()
def tab(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Request path"),
    kind: str = typer.Option("tab", help="tab | tab-home | tab-base"),
    endpoint: str = typer.Option("", help="Endpoint name (default: tab)"),
    slug: str = typer.Option("", help="Tab slug (free text, normalized)"),
) -> None:
    req = _request(ctx, path)
    link = build_tab(TabDescriptor(kind=kind, endpoint_name=endpoint, slug=slug), req)
    console.print(f"URL: {link.url}")
    console.print(f"Active: {'yes' if link.is_active else 'no'}")


@app.command()
def visibility(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Request path"),
    condition: str = typer.Option("always", help="always | no-endpoint | endpoint-empty | specific-tab"),
    endpoint: str = typer.Option("", help="Endpoint name (default: tab)"),
    tab_url: str = typer.Option("", "--tab-url", help="Target tab slug for specific-tab"),
) -> None:
    req = _request(ctx, path)
    rule = VisibilityRule(condition=condition, endpoint_name=endpoint, target_slug=tab_url)
    decision = evaluate(rule, req)
    console.print(f"Condition: {rule.condition}")
    console.print(f"Hidden: {'yes' if decision.hidden else 'no'}")
    console.print(f"Transition tag: {decision.transition_tag or '-'}")


@app.command()
def render(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Request path"),
    blocks_file: Path = typer.Argument(..., help="JSON file: list of parsed blocks (blockName, attrs, innerHTML)"),
    out: Optional[str] = typer.Option(None, help="Output path (default: print to stdout)"),
) -> None:
    try:
        raw = json.loads(blocks_file.read_text(encoding="utf-8"))
        blocks = [Block.model_validate(b) for b in (raw if isinstance(raw, list) else [raw])]
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        raise typer.BadParameter(f"Cannot load blocks from {blocks_file}: {e}")

    settings = _settings(ctx)
    req = _request(ctx, path)
    pipeline = RenderPipeline(req, default_transformers(settings.markup_classes()))
    html = pipeline.render_blocks(blocks)

    if out:
        out_path = Path(out).expanduser()
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(html, encoding="utf-8")
        console.print(f"[bold green]Wrote[/bold green] {len(blocks)} blocks to: {out_path}")
    else:
        typer.echo(html)


@app.command("editor-data")
def editor_data(
    ctx: typer.Context,
    current_url: str = typer.Option("", help="Canonical URL of the page being edited"),
) -> None:
    data = EditorData.from_registry(_settings(ctx).registry(), current_url)
    typer.echo(data.to_json())


def main() -> None:
    app()


if __name__ == "__main__":
    main()
