import click

from coursegraph_backend.database import init_db


@click.command()
def init():
    """Create all tables"""
    init_db()
    click.echo("Database initialized")


@click.group()
def db():
    pass

db.add_command(init,"init")
