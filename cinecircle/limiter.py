
from slowapi import Limiter
from slowapi.util import get_remote_address

from .config import settings

# key_func: identify the caller by IP address
# storage_uri: shared Redis so limits hold across workers
limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=settings.REDIS_URL,
    default_limits=[settings.RATE_LIMIT_DEFAULT]
)
