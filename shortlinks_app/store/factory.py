"""
Factory for creating link store instances.
Simple, clean factory with singleton caching.
"""

from enum import Enum
import logging

from .strategies import LinkStore, InMemoryLinkStore, RedisLinkStore, SQLLinkStore
from shortlinks_app.config import Settings


logger = logging.getLogger(__name__)


class StoreBackend(Enum):
    """Available link store backends"""
    SQL = "sql"
    REDIS = "redis"
    MEMORY = "memory"


class StoreFactory:
    """
    Simple factory for creating link store instances.
    
    Uses Singleton Pattern - creates instance once, reuses it.
    There is no fallback between backends: the store is the only place
    links live, so a misconfigured backend must fail loudly.
    """
    
    _instance: LinkStore = None  # Single cached instance
    
    @classmethod
    def create(cls, backend: StoreBackend, settings: Settings) -> LinkStore:
        """
        Create or return cached store instance.
        
        Args:
            backend: Type of store backend (from enum)
            settings: Application settings with backend connection details
            
        Returns:
            Singleton store instance
        """
        if cls._instance is not None:
            return cls._instance
        
        if backend == StoreBackend.SQL:
            from shortlinks_app.database.connection import create_session_factory
            
            cls._instance = SQLLinkStore(create_session_factory(settings.database_url))
            logger.info("SQL link store initialized")
            
        elif backend == StoreBackend.REDIS:
            import redis.asyncio as redis
            
            # Connections are lazy: errors surface on the first store call
            redis_client = redis.from_url(
                settings.redis_url,
                decode_responses=True,
                socket_connect_timeout=2,
                socket_timeout=2,
            )
            cls._instance = RedisLinkStore(
                redis_client,
                key_prefix=settings.redis_key_prefix,
                index_key=settings.redis_index_key,
            )
            logger.info("Redis link store initialized")
            
        elif backend == StoreBackend.MEMORY:
            cls._instance = InMemoryLinkStore()
            logger.info("In-memory link store initialized")
            
        else:
            raise ValueError(f"Unknown store backend: {backend}")
        
        return cls._instance
    
    @classmethod
    async def close_instance(cls):
        """Close and forget the cached instance (shutdown and tests)"""
        if cls._instance is not None:
            await cls._instance.close()
        cls._instance = None
