from .errors import error_response
from .redis_cache import cache_distance, get_cached_distance, get_redis_client
