#!/usr/bin/env python3
"""
Management script for PaperFX.

Usage (direct DB access):
    python manage.py db init
    python manage.py db clear
    python manage.py db status
    python manage.py accounts show
    python manage.py accounts history EMAIL
"""

import asyncio

import click
from sqlalchemy import func, select

from paperfx.database import AsyncSessionLocal, Base, engine
from paperfx.models import Account, RobotConfig, SessionToken, Trade
from paperfx.services import ledger, positions


# ============================================================================
# Direct database operations (internal)
# ============================================================================


async def _init_db():
    """Initialize the database tables."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def _clear_db():
    """Drop and recreate all tables."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


async def _count_records():
    """Count records in each table."""
    async with AsyncSessionLocal() as session:
        counts = {}
        for model, name in [
            (Account, "accounts"),
            (Trade, "trades"),
            (RobotConfig, "robot_configs"),
            (SessionToken, "session_tokens"),
        ]:
            result = await session.execute(select(func.count()).select_from(model))
            counts[name] = result.scalar_one()
        return counts


async def _db_show_accounts():
    """Accounts with their open position counts."""
    async with AsyncSessionLocal() as session:
        rows = []
        for account in await ledger.list_accounts(session):
            open_count = await positions.count_open(session, account.id)
            rows.append((account, open_count))
        return rows


async def _db_account_history(email: str):
    """Closed trades of the account registered with email."""
    async with AsyncSessionLocal() as session:
        account = await ledger.get_account_by_email(session, email)
        if account is None:
            return None
        return await positions.list_history(session, account.id)


# ============================================================================
# CLI: Main group
# ============================================================================


@click.group()
def cli():
    """PaperFX management commands."""
    pass


# ============================================================================
# CLI: db
# ============================================================================


@cli.group()
def db():
    """Direct database management (bypasses API)."""
    pass


@db.command("init")
def db_init():
    """Create missing tables."""
    asyncio.run(_init_db())
    click.echo("Database initialized.")


@db.command("clear")
@click.confirmation_option(prompt="Are you sure you want to clear all data?")
def db_clear():
    """Clear all data from the database (destructive!)."""
    click.echo("Clearing database...")
    asyncio.run(_clear_db())
    click.echo("Database cleared and tables recreated.")


@db.command("status")
def db_status():
    """Show database status and record counts."""

    async def run():
        await _init_db()
        return await _count_records()

    counts = asyncio.run(run())

    click.echo("\nDatabase Status:")
    click.echo("-" * 30)
    for table, count in counts.items():
        click.echo(f"  {table:<15} {count:>10,}")
    click.echo("-" * 30)
    click.echo(f"  {'Total':<15} {sum(counts.values()):>10,}")


# ============================================================================
# CLI: accounts
# ============================================================================


@cli.group()
def accounts():
    """Inspect accounts directly in the database."""
    pass


@accounts.command("show")
def accounts_show():
    """Show all accounts with balances."""

    async def run():
        await _init_db()
        return await _db_show_accounts()

    rows = asyncio.run(run())

    if not rows:
        click.echo("No accounts found.")
        return

    click.echo(f"\n{'Email':<32} {'Name':<20} {'Cash':>16} {'Open':>6}")
    click.echo("-" * 77)
    for account, open_count in rows:
        click.echo(
            f"{account.email:<32} {account.name:<20} "
            f"{account.cash_balance:>16} {open_count:>6}"
        )
    click.echo(f"\nTotal: {len(rows)} accounts")


@accounts.command("history")
@click.argument("email")
def accounts_history(email):
    """Show closed trades for the account registered with EMAIL."""

    async def run():
        await _init_db()
        return await _db_account_history(email)

    trades = asyncio.run(run())

    if trades is None:
        raise click.ClickException(f"No account registered with {email}")
    if not trades:
        click.echo("No closed trades.")
        return

    click.echo(f"\n{'#':>4} {'Side':<5} {'Symbol':<10} {'Volume':>10} {'Entry':>12} {'Close':>12} {'P&L':>12}")
    click.echo("-" * 71)
    for t in trades:
        click.echo(
            f"{t.close_sequence:>4} {t.side.value:<5} {t.symbol:<10} {t.volume:>10} "
            f"{t.entry_price:>12} {t.close_price:>12} {t.realized_pnl:>12}"
        )
    click.echo(f"\nTotal: {len(trades)} trades")


if __name__ == "__main__":
    cli()
