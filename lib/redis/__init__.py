from .config import create_redis
from .queue import RedisQueue, STOP_SIGNAL, queue_key
