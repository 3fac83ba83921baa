from redis import Redis

from .config import settings

# Connection is lazy: nothing is dialled until the first command
redis_client = Redis.from_url(settings.redis_url, socket_timeout=2.0)
