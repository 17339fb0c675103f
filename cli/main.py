# cli/main.py
import logging
import click
from ledger.sa.database import Database
from .commands.checkout import checkout
from .commands.db import db


@click.group()
@click.option('--db-url', envvar='DATABASE_URL', default=None,
              help='Database connection string (defaults to $DATABASE_URL or sqlite:///ledger.db)')
@click.option('--verbose/--no-verbose', default=False, help='Show debug logging')
@click.pass_context
def cli(ctx, db_url, verbose):
    """Library checkout ledger CLI"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )
    ctx.obj = Database(db_url)
    ctx.call_on_close(ctx.obj.dispose)


cli.add_command(checkout)
cli.add_command(db)


def main():
    """Entry point for the CLI"""
    cli()


if __name__ == '__main__':
    main()
