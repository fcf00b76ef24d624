"""
Session tokens kept in the Redis cache.

The cache maps ``token:<userId>`` to the current secret of that user. The
wire form handed to clients is ``<userId>_<secret>``, so a presented token
can be checked with a single lookup and no token -> user index.
"""

import logging
import re
import secrets
import uuid
from typing import Optional

from coursegraph_backend.interface.tokens import TokenEntry
from coursegraph_backend.redis_cache import get_redis_client
from coursegraph_backend.settings import settings

logger = logging.getLogger(__name__)

TOKEN_KEY_PREFIX = "token"
TOKEN_SEPARATOR = "_"

_USER_ID_PATTERN = re.compile(r"0|[1-9][0-9]*")
_SECRET_PATTERN = re.compile(r"[0-9a-f]{32}")
_MAX_USER_ID = 2**63 - 1


class RedisTokenRepository:
    """Issues, validates and evicts user tokens"""

    def __init__(self, cache=None, expires_hour: Optional[int] = None):
        self._cache = cache
        self.expires_hour = settings.TOKEN_EXPIRES_HOUR if expires_hour is None else expires_hour

    @property
    def ttl_seconds(self) -> int:
        return self.expires_hour * 3600

    async def _get_cache(self):
        if self._cache is None:
            self._cache = await get_redis_client()
        return self._cache

    @staticmethod
    def _key(user_id: int) -> str:
        return f"{TOKEN_KEY_PREFIX}:{user_id}"

    async def create_token(self, user_id: int) -> TokenEntry:
        token = uuid.uuid4().hex
        cache = await self._get_cache()
        await cache.set(self._key(user_id), token, ttl=self.ttl_seconds)
        logger.info(f"Issued token for user {user_id}")
        return TokenEntry(user_id=user_id, token=token)

    def get_token(self, authentication: Optional[str]) -> Optional[TokenEntry]:
        """
        Parse ``<userId>_<secret>``.

        Malformed input is no authentication at all, so it yields None instead
        of raising.
        """
        if not authentication:
            return None

        parts = authentication.split(TOKEN_SEPARATOR)
        if len(parts) != 2:
            return None

        user_id_text, token = parts
        if not _USER_ID_PATTERN.fullmatch(user_id_text) or not _SECRET_PATTERN.fullmatch(token):
            return None

        user_id = int(user_id_text)
        if user_id > _MAX_USER_ID:
            return None

        return TokenEntry(user_id=user_id, token=token)

    def get_authentication(self, token_entry: TokenEntry) -> str:
        return f"{token_entry.user_id}{TOKEN_SEPARATOR}{token_entry.token}"

    async def check_token(self, token_entry: Optional[TokenEntry]) -> bool:
        """
        True if the secret is the one stored for the user.

        A successful check counts as activity and restarts the expiration.
        """
        if token_entry is None:
            return False

        cache = await self._get_cache()
        key = self._key(token_entry.user_id)
        stored = await cache.get(key)

        if stored is None:
            logger.debug(f"No token stored for user {token_entry.user_id}")
            return False

        if not secrets.compare_digest(str(stored).encode("utf-8"), token_entry.token.encode("utf-8")):
            logger.debug(f"Token mismatch for user {token_entry.user_id}")
            return False

        # Expiring a key removed in the meantime is a no-op, it cannot revive it
        await cache.expire(key, self.ttl_seconds)
        return True

    async def delete_token(self, user_id: int) -> None:
        cache = await self._get_cache()
        await cache.delete(self._key(user_id))
        logger.info(f"Revoked token of user {user_id}")
