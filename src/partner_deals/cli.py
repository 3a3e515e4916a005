"""CLI entry point for the partner deal service."""

from __future__ import annotations

import asyncio
import logging
import sys

import click

from partner_deals.config import load_config, missing_settings
from partner_deals.errors import DealError
from partner_deals.identity.resolver import IdentityResolver
from partner_deals.money import format_money
from partner_deals.policy.arbitration import UndercutArbitrator
from partner_deals.service import build_store, run_service


def _mask(value: str) -> str:
    return "***configured***" if value else "(not set)"


@click.group()
@click.option("-c", "--config", "config_path", default=None, help="Path to config TOML file")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """partner-deals - Discord partner deal bot with claim and offer handling."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["verbose"] = verbose

    cfg = load_config(config_path)
    ctx.obj["cfg"] = cfg

    level = logging.DEBUG if verbose else getattr(logging, cfg.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


# ── Service ────────────────────────────────────────────


@cli.command()
@click.pass_context
def run(ctx: click.Context) -> None:
    """Start the Discord bot and the HTTP trigger listener."""
    cfg = ctx.obj["cfg"]
    if missing := missing_settings(cfg):
        click.echo("Error: Missing required settings: " + ", ".join(missing), err=True)
        sys.exit(1)

    click.echo(f"Starting partner deal service on port {cfg.http.port}")
    asyncio.run(run_service(cfg))


# ── Info ───────────────────────────────────────────────


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show the effective configuration."""
    cfg = ctx.obj["cfg"]
    channels = ", ".join(map(str, cfg.discord.deal_channel_ids)) or "(not set)"
    click.echo(f"Discord token:  {_mask(cfg.discord.token)}")
    click.echo(f"Deal channels:  {channels}")
    click.echo(f"Store backend:  {cfg.store.backend.value}")
    click.echo(f"Airtable key:   {_mask(cfg.store.api_key)}")
    click.echo(f"Airtable base:  {cfg.store.base_id or '(not set)'}")
    click.echo(f"DB path:        {cfg.store.db_path}")
    click.echo(f"Tables:         {cfg.store.tables.inventory} / {cfg.store.tables.partner_offers}"
               f" / {cfg.store.tables.sellers} / {cfg.store.tables.orders}")
    click.echo(f"HTTP:           {cfg.http.host}:{cfg.http.port}")
    click.echo(f"Undercut step:  {format_money(cfg.deals.undercut_step, cfg.deals.currency_symbol)}")
    click.echo(f"Automation:     {_mask(cfg.notify.automation_webhook_url)}")


@cli.command()
@click.argument("code")
@click.pass_context
def seller(ctx: click.Context, code: str) -> None:
    """Resolve a seller code against the record store."""
    cfg = ctx.obj["cfg"]

    async def _seller():
        store = build_store(cfg.store)
        await store.initialize()
        try:
            resolver = IdentityResolver(store, cfg.store.tables, cfg.deals.seller_code_prefix)
            return await resolver.resolve_seller(code, allow_prefixed=True)
        finally:
            await store.close()

    try:
        found = asyncio.run(_seller())
    except DealError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    click.echo(f"Seller:   {found.code}")
    click.echo(f"Record:   {found.record_id}")
    click.echo(f"Webhook:  {_mask(found.webhook_url or '')}")


@cli.command()
@click.argument("order_id")
@click.pass_context
def floor(ctx: click.Context, order_id: str) -> None:
    """Show the lowest offer on an order and the highest acceptable next offer."""
    cfg = ctx.obj["cfg"]
    symbol = cfg.deals.currency_symbol

    async def _floor():
        store = build_store(cfg.store)
        await store.initialize()
        try:
            arbitrator = UndercutArbitrator(store, cfg.store.tables, cfg.deals.undercut_step)
            return await arbitrator.existing_amounts(order_id)
        finally:
            await store.close()

    amounts = asyncio.run(_floor())
    click.echo(f"Order:       {order_id}")
    click.echo(f"Offers:      {len(amounts)}")
    if not amounts:
        click.echo("Lowest:      (none - any positive offer is accepted)")
        return
    lowest = min(amounts)
    click.echo(f"Lowest:      {format_money(lowest, symbol)}")
    click.echo(f"Next max:    {format_money(lowest - cfg.deals.undercut_step, symbol)}")
