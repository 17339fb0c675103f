import click
from ledger.sa.database import Database


@click.group()
def db():
    """Database management commands"""
    pass


@db.command()
@click.pass_obj
def init(database: Database):
    """Create the ledger tables"""
    database.init_db()
    click.echo(f"Initialized schema at {database.engine.url.render_as_string(hide_password=True)}")
