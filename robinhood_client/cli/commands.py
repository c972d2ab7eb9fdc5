"""Click CLI commands for robinhood-client."""

from __future__ import annotations

from typing import Any

import click

from robinhood_client.api import RobinhoodApi
from robinhood_client.config import ClientConfig
from robinhood_client.net.errors import RobinhoodError
from robinhood_client.utils.logging import setup_logging


def _api(ctx: click.Context) -> RobinhoodApi:
    """Build a client from env config; ``ctx.obj['transport']`` overrides httpx's."""
    obj: dict[str, Any] = ctx.obj or {}
    config = ClientConfig()
    setup_logging(level=config.log_level, log_format=config.log_format)
    return RobinhoodApi(config=config, transport=obj.get("transport"))


def _fmt(value: object) -> str:
    return "-" if value is None else str(value)


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """robinhood: query the unofficial Robinhood REST service."""
    ctx.ensure_object(dict)


@cli.command()
@click.argument("symbols", nargs=-1, required=True)
@click.pass_context
def quote(ctx: click.Context, symbols: tuple[str, ...]) -> None:
    """Show the latest quote for one or more SYMBOLS."""
    with _api(ctx) as api:
        try:
            if len(symbols) == 1:
                quotes = [api.get_quote_by_ticker(symbols[0])]
            else:
                quotes = api.get_quote_list_by_tickers(symbols)
        except RobinhoodError as e:
            raise click.ClickException(f"Quote lookup failed: {e}") from e

    for symbol, q in zip(symbols, quotes):
        if q is None:
            click.echo(f"{symbol.upper():<8} not found")
            continue
        click.echo(
            f"{q.symbol:<8} last {_fmt(q.last_trade_price):>12}  "
            f"bid {_fmt(q.bid_price):>12}  ask {_fmt(q.ask_price):>12}"
        )


@cli.command()
@click.argument("symbol")
@click.pass_context
def instrument(ctx: click.Context, symbol: str) -> None:
    """Show the instrument record for SYMBOL."""
    with _api(ctx) as api:
        try:
            inst = api.get_instrument_by_ticker(symbol)
        except RobinhoodError as e:
            raise click.ClickException(f"Instrument lookup failed: {e}") from e

    click.echo(f"Symbol:     {inst.symbol}")
    click.echo(f"Name:       {_fmt(inst.name)}")
    click.echo(f"Tradeable:  {inst.tradeable}")
    click.echo(f"State:      {_fmt(inst.state)}")
    click.echo(f"Country:    {_fmt(inst.country)}")


@cli.command()
@click.argument("keyword")
@click.pass_context
def search(ctx: click.Context, keyword: str) -> None:
    """Search instruments by KEYWORD."""
    with _api(ctx) as api:
        try:
            results = api.get_instruments_by_keyword(keyword)
        except RobinhoodError as e:
            raise click.ClickException(f"Search failed: {e}") from e

    if not results:
        click.echo("No instruments found.")
        return
    for inst in results:
        click.echo(f"{inst.symbol:<8} {_fmt(inst.name)}")


@cli.command()
@click.argument("symbols", nargs=-1, required=True)
@click.pass_context
def fundamentals(ctx: click.Context, symbols: tuple[str, ...]) -> None:
    """Show fundamentals for up to 10 SYMBOLS."""
    with _api(ctx) as api:
        try:
            rows = api.get_fundamental_list(symbols)
        except RobinhoodError as e:
            raise click.ClickException(f"Fundamentals lookup failed: {e}") from e

    for symbol, f in zip(symbols, rows):
        if f is None:
            click.echo(f"{symbol.upper():<8} not found")
            continue
        click.echo(
            f"{symbol.upper():<8} open {_fmt(f.open):>12}  "
            f"52w {_fmt(f.low_52_weeks)}-{_fmt(f.high_52_weeks)}  "
            f"cap {_fmt(f.market_cap)}"
        )


@cli.command()
def config() -> None:
    """Show current configuration."""
    cfg = ClientConfig()

    click.echo("=== robinhood-client Configuration ===\n")

    click.echo(f"Log Level:        {cfg.log_level}")
    click.echo(f"Log Format:       {cfg.log_format}")
    click.echo("")

    click.echo("[Remote]")
    click.echo(f"  Base URL:       {cfg.base_url}")
    click.echo(f"  Connect (s):    {cfg.connect_timeout}")
    click.echo(f"  Read (s):       {cfg.read_timeout}")
    click.echo(f"  Token Type:     {cfg.token_type}")
    click.echo("")

    click.echo("[Credentials]")
    click.echo(f"  Username:       {cfg.username or '(not set)'}")
    click.echo(f"  Password:       {'(set)' if cfg.password else '(not set)'}")
