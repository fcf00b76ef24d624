import asyncio
import click

from coursegraph_backend.database import get_session_factory
from coursegraph_backend.repositories import NotFoundError, RedisTokenRepository, UserRepository


def _require_user(user_id: int):
    with get_session_factory()() as session:
        try:
            return UserRepository(session).get_by_id(user_id)
        except NotFoundError as e:
            raise click.ClickException(str(e))


@click.command()
@click.argument("user_id", type=int)
def issue(user_id: int):
    """Issue a token for USER_ID and print its wire form"""
    _require_user(user_id)

    tokens = RedisTokenRepository()
    token_entry = asyncio.run(tokens.create_token(user_id))

    click.echo(tokens.get_authentication(token_entry))


@click.command()
@click.argument("user_id", type=int)
def revoke(user_id: int):
    """Evict the token of USER_ID"""
    asyncio.run(RedisTokenRepository().delete_token(user_id))
    click.echo(f"Token of user {user_id} revoked")


@click.group()
def token():
    pass

token.add_command(issue,"issue")
token.add_command(revoke,"revoke")
