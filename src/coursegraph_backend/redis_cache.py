from aiocache import Cache

from coursegraph_backend.settings import settings

_redis_cache = Cache(
    Cache.REDIS,
    endpoint=settings.REDIS_HOST,
    port=settings.REDIS_PORT,
    password=settings.REDIS_PASSWORD,
    pool_max_size=10,
    db=0
)

async def get_redis_client() -> Cache:
    return _redis_cache
