import logging
import click

from .db import db
from .tokens import token

@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False)
def cli(verbose):
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO)

cli.add_command(db,"db")
cli.add_command(token,"token")

if __name__ == '__main__':
    cli()
