#!/usr/bin/env python3
"""
Bundle Discount CLI - run the bundle allocator against cart snapshots
"""

import json
import sys
from pathlib import Path
from typing import NoReturn, Optional

import typer
import yaml
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from bundle_discount.allocator import bundle_label, format_percentage
from bundle_discount.config import BundleDiscountConfig, load_config
from bundle_discount.constants import DISCOUNT_TITLE, ROLE_METAFIELD_KEY, ROLE_METAFIELD_NAMESPACE
from bundle_discount.errors import classify_exception
from bundle_discount.models import BundleRole
from bundle_discount.run import cart_lines_discounts_generate_run, explain_cart
from bundle_discount.utils.log_setup import configure_logging

app = typer.Typer(
    name="bundle-discount",
    help="Automatic core + patches bundle discount",
    add_completion=False,
)
console = Console(stderr=False)
err_console = Console(stderr=True)


def _read_input(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _load(config: Optional[Path], verbose: bool = False) -> BundleDiscountConfig:
    cfg = load_config(config)
    configure_logging(verbose or cfg.verbose, cfg.runtime.log_level)
    return cfg


def _fail(exc: Exception) -> NoReturn:
    error = classify_exception(exc)
    err_console.print(
        f"[bold red]Error ({error.category.value}):[/bold red] {escape(error.message)}",
        highlight=False,
        soft_wrap=True,
    )
    if error.hint:
        err_console.print(f"[dim]{escape(error.hint)}[/dim]", soft_wrap=True)
    raise typer.Exit(error.exit_code)


@app.command()
def run(
    source: str = typer.Argument("-", help="Cart input JSON file, or - for stdin"),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log aggregates and claimed lines to stderr",
    ),
    pretty: bool = typer.Option(
        False,
        "--pretty",
        help="Indent the JSON output",
    ),
):
    """
    Compute the discount operations for a cart snapshot.

    Example:
        bundle-discount run cart.json
        cat cart.json | bundle-discount run - --verbose
    """
    try:
        cfg = _load(config, verbose)
        result = cart_lines_discounts_generate_run(_read_input(source), cfg.bundle)
    except Exception as exc:
        _fail(exc)
    typer.echo(json.dumps(result, indent=2 if pretty else None))


@app.command()
def explain(
    source: str = typer.Argument("-", help="Cart input JSON file, or - for stdin"),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file",
    ),
):
    """
    Show how a cart is split into bundles, line by line.
    """
    try:
        cfg = _load(config)
        lines, summary = explain_cart(_read_input(source), cfg.bundle)
    except Exception as exc:
        _fail(exc)

    claimed: dict[str, int] = {}
    for target in summary.targets:
        claimed[target.line_id] = claimed.get(target.line_id, 0) + target.quantity

    table = Table(title="Cart lines")
    table.add_column("Line")
    table.add_column("Role")
    table.add_column("Qty", justify="right")
    table.add_column("Discounted", justify="right")
    for line in lines:
        role = line.role.value if line.role is not BundleRole.NONE else "-"
        table.add_row(line.id, role, str(line.quantity), str(claimed.get(line.id, 0)))
    console.print(table)

    percentage = format_percentage(cfg.bundle.discount_percentage)
    if summary.has_bundle:
        verdict = f"[bold green]{bundle_label(summary.bundle_count)} at {percentage}% off[/bold green]"
    else:
        verdict = "[yellow]No complete bundle[/yellow]"
    console.print(Panel.fit(
        f"Cores: {summary.core_total}  Patches: {summary.patch_total}\n{verdict}",
        border_style="cyan",
    ))


@app.command("show-config")
def show_config(
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file",
    ),
):
    """
    Print the effective configuration.
    """
    try:
        cfg = load_config(config)
    except Exception as exc:
        _fail(exc)
    console.print(f"[dim]{DISCOUNT_TITLE} - role metafield {ROLE_METAFIELD_NAMESPACE}.{ROLE_METAFIELD_KEY}[/dim]")
    typer.echo(yaml.dump(cfg.model_dump(), default_flow_style=False, sort_keys=False).rstrip())


def main():
    app()


if __name__ == "__main__":
    main()
