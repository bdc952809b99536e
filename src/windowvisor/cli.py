#!/usr/bin/env python3
"""
WindowVisor command line interface.
Parses competitor window quotes and compares them against the product catalog.
"""

import json
import logging
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .catalog import load_catalog
from .comparison import (
    FILTER_MODES, SORT_MODES, ComparisonAssembler,
    filter_comparison_items, sort_comparison_items,
)
from .config import Settings, load_settings
from .exceptions import WindowVisorError
from .formatting import format_currency, format_percentage
from .line_items import LineItemBuilder
from .models import ComparisonResult
from .parser import HeuristicQuoteTextParser, ParserRegistry
from .pricing import OfflinePriceCalculator, RemotePriceCalculator
from .quote_manager import QuoteManager
from .store import PRODUCTS_COLLECTION, InMemoryDocumentStore
from .text_extractor import TextExtractor

logger = logging.getLogger(__name__)

console = Console()


def _build_parsers(settings: Settings) -> ParserRegistry:
    builder = LineItemBuilder(confidence_score=settings.extraction_confidence)
    return ParserRegistry(default=HeuristicQuoteTextParser(builder))


def _write_json(data, output: Optional[str]):
    json_str = json.dumps(data, indent=2, ensure_ascii=False)
    if output:
        with open(output, 'w', encoding='utf-8') as f:
            f.write(json_str)
        console.print(f"[green]💾 Results saved to: {output}[/green]")
    else:
        click.echo(json_str)


def render_comparison(result: ComparisonResult, currency_code: str = 'USD', items=None):
    """Print a comparison as a rich table with a savings summary."""
    comparison = result.comparison
    items = result.items if items is None else items

    table = Table(title=f"{comparison.competitor_name} vs. catalog equivalents")
    table.add_column("#", justify="right")
    table.add_column("Competitor item")
    table.add_column("Size")
    table.add_column("Qty", justify="right")
    table.add_column("Competitor", justify="right")
    table.add_column("Equivalent")
    table.add_column("Price", justify="right")
    table.add_column("Savings", justify="right")

    for index, item in enumerate(items, 1):
        savings_style = "green" if item.savings_amount >= 0 else "red"
        equivalent = item.equivalent_product_name
        if item.pricing_fallback:
            equivalent += " [dim](base price)[/dim]"
        table.add_row(
            str(index),
            item.competitor_product_description,
            f'{item.width:g}" × {item.height:g}"',
            str(item.quantity),
            format_currency(item.competitor_price, currency_code),
            equivalent,
            format_currency(item.equivalent_price, currency_code),
            f"[{savings_style}]{format_currency(item.savings_amount, currency_code)} "
            f"({format_percentage(item.savings_percentage)})[/{savings_style}]",
        )

    console.print(table)

    verb = "Save" if comparison.savings_amount >= 0 else "Add"
    summary = (
        f"Competitor total: {format_currency(comparison.total_competitor_price, currency_code)}\n"
        f"Equivalent total: {format_currency(comparison.total_equivalent_price, currency_code)}\n"
        f"{verb} {format_currency(abs(comparison.savings_amount), currency_code)} "
        f"({format_percentage(abs(comparison.savings_percentage))})"
    )
    if result.skipped:
        summary += f"\n[yellow]Skipped {len(result.skipped)} item(s)[/yellow]"
    console.print(Panel(summary, title="Savings", border_style="blue"))


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.pass_context
def cli(ctx, verbose: bool):
    """WindowVisor - competitor window quote comparison."""
    settings = load_settings()
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, settings.log_level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    ctx.obj = settings


@cli.command()
@click.argument('document', type=click.Path(exists=True))
@click.option('--competitor', default='', help='Competitor that issued the quote')
@click.option('--output', '-o', type=click.Path(), help='Output JSON file path')
@click.pass_obj
def parse(settings: Settings, document: str, competitor: str, output: Optional[str]):
    """Extract quote number, date, total and window line items from DOCUMENT."""
    try:
        text = TextExtractor().extract_text(document)
        parsed = _build_parsers(settings).get(competitor).parse(text, competitor)
    except WindowVisorError as e:
        click.echo(f"Error parsing quote: {e}", err=True)
        raise click.Abort()

    _write_json(parsed.to_dict(), output)


@cli.command()
@click.argument('document', type=click.Path(exists=True))
@click.option('--catalog', 'catalog_path', required=True, type=click.Path(exists=True),
              help='Product catalog (JSON or CSV)')
@click.option('--competitor', default='Competitor', help='Competitor that issued the quote')
@click.option('--project', default='default', help='Project id for the comparison')
@click.option('--pricing-url', help='Pricing engine endpoint (omit to use catalog base prices)')
@click.option('--timeout', type=float, help='Pricing engine timeout in seconds')
@click.option('--filter', 'filter_mode', type=click.Choice(FILTER_MODES), default='all',
              help='Only show some of the items')
@click.option('--sort', 'sort_by', type=click.Choice(SORT_MODES), help='Item order in the table')
@click.option('--output', '-o', type=click.Path(), help='Output JSON file path')
@click.pass_obj
def compare(settings: Settings, document: str, catalog_path: str, competitor: str, project: str,
            pricing_url: Optional[str], timeout: Optional[float], filter_mode: str,
            sort_by: Optional[str], output: Optional[str]):
    """Parse DOCUMENT and compare every window against the catalog."""
    pricing_url = pricing_url or settings.pricing_url
    timeout = timeout if timeout is not None else settings.pricing_timeout

    store = InMemoryDocumentStore()
    try:
        for product in load_catalog(catalog_path):
            store.create(PRODUCTS_COLLECTION, product)

        manager = QuoteManager(store, parsers=_build_parsers(settings), currency_code=settings.currency_code)
        quote = manager.create_quote(project, competitor, document, file_name=Path(document).name)
        with console.status("Parsing quote..."):
            quote = manager.process_quote(quote.id)

        if pricing_url:
            calculator = RemotePriceCalculator(pricing_url, timeout=timeout, auth_token=settings.auth_token)
        else:
            logger.info("No pricing engine configured, using catalog base prices")
            calculator = OfflinePriceCalculator()

        with calculator:
            assembler = ComparisonAssembler(store, price_calculator=calculator, currency_code=settings.currency_code)
            with console.status("Generating comparison..."):
                result = assembler.generate_comparison(quote.id, project)
    except WindowVisorError as e:
        click.echo(f"Error comparing quote: {e}", err=True)
        raise click.Abort()

    items = sort_comparison_items(filter_comparison_items(result.items, filter_mode), sort_by)
    render_comparison(result, settings.currency_code, items)

    if output:
        data = result.to_dict()
        data['quote'] = quote.to_dict()
        _write_json(data, output)


if __name__ == '__main__':
    cli()
