"""
Shared slowapi limiter.

Routes opt in with ``@limiter.limit(...)`` and must accept a ``request``
argument.
"""
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core import config


limiter = Limiter(key_func=get_remote_address, enabled=config.RATE_LIMIT_ENABLED)
