"""
Core module - Configuration, database, cache, storage, mail and security.
"""

from jobsphere.core.config import get_settings, settings
from jobsphere.core.database import Base, close_db, get_db, init_db
from jobsphere.core.redis import close_redis, get_redis, init_redis
from jobsphere.core.security import (
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
)
from jobsphere.core.storage import close_storage, get_storage, init_storage

__all__ = [
    # Config
    "settings",
    "get_settings",
    # Database
    "Base",
    "get_db",
    "init_db",
    "close_db",
    # Redis
    "get_redis",
    "init_redis",
    "close_redis",
    # Storage
    "get_storage",
    "init_storage",
    "close_storage",
    # Security
    "hash_password",
    "verify_password",
    "create_access_token",
    "decode_token",
]
