from redis.client import Redis

import redis as r

from config.settings import REDIS_HOST, REDIS_PORT


def create_redis(host: str = REDIS_HOST, port: int = REDIS_PORT) -> Redis:
    return r.Redis(host=host, port=port, decode_responses=False)
