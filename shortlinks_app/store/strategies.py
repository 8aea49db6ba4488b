"""
Link store strategies using Strategy Pattern.
Allows switching between different key-value backends (SQL, Redis, In-Memory).

Every backend maps a slug (key) to a destination URL (value) with upsert
semantics, and lists keys as one bounded page in lexicographic order.
Driver errors never leave a store: they are re-raised as StoreUnavailableError.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional
import logging

from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import sessionmaker

from shortlinks_app.exceptions import StoreUnavailableError
from shortlinks_app.models.link import Link


logger = logging.getLogger(__name__)


class LinkStore(ABC):
    """
    Abstract base class for link stores.
    
    This is the Strategy Pattern interface - the service layer talks to this
    contract only and never to a concrete backend.
    
    All methods are async because store operations involve I/O.
    """
    
    @abstractmethod
    async def get(self, slug: str) -> Optional[str]:
        """
        Get the destination stored for a slug.
        
        Args:
            slug: Link slug (case-sensitive)
            
        Returns:
            Destination URL or None if the slug is absent
        """
        pass
    
    @abstractmethod
    async def put(self, slug: str, url: str) -> None:
        """
        Store a destination for a slug, replacing any previous value.
        
        Args:
            slug: Link slug
            url: Destination URL
        """
        pass
    
    @abstractmethod
    async def delete(self, slug: str) -> None:
        """
        Delete a slug. Deleting an absent slug is not an error.
        
        Args:
            slug: Link slug
        """
        pass
    
    @abstractmethod
    async def list_keys(self, limit: int) -> List[str]:
        """
        List one page of slugs in the store's listing order.
        
        Args:
            limit: Maximum number of slugs returned
            
        Returns:
            Slugs, lexicographically ordered, at most `limit` of them
        """
        pass
    
    async def close(self) -> None:
        """Release backend resources (connections, pools)."""
        pass


class InMemoryLinkStore(LinkStore):
    """
    In-memory store using a Python dict.
    
    Good for development and testing. Lost on restart and not shared
    between worker processes.
    Note: Async for interface consistency, but operations are instant.
    """
    
    def __init__(self):
        self._links: Dict[str, str] = {}
    
    async def get(self, slug: str) -> Optional[str]:
        return self._links.get(slug)
    
    async def put(self, slug: str, url: str) -> None:
        self._links[slug] = url
    
    async def delete(self, slug: str) -> None:
        self._links.pop(slug, None)
    
    async def list_keys(self, limit: int) -> List[str]:
        return sorted(self._links)[:limit]


class RedisLinkStore(LinkStore):
    """
    Redis store implementation with async operations.
    
    Layout:
    - `<key_prefix><slug>` holds the destination as a plain string
    - `index_key` is a sorted set of slugs, all with score 0, so ZRANGE
      returns them in lexicographic order
    
    put/delete change the value and the index in one MULTI/EXEC pipeline.
    """
    
    def __init__(self, redis_client, key_prefix: str = "link:", index_key: str = "links:index"):
        """
        Initialize Redis store.
        
        Args:
            redis_client: redis.asyncio.Redis instance (decode_responses=True)
            key_prefix: Prefix for value keys
            index_key: Name of the sorted set holding all slugs
        """
        self.redis = redis_client
        self.key_prefix = key_prefix
        self.index_key = index_key
    
    def _key(self, slug: str) -> str:
        return f"{self.key_prefix}{slug}"
    
    async def get(self, slug: str) -> Optional[str]:
        try:
            value = await self.redis.get(self._key(slug))
        except RedisError as e:
            raise StoreUnavailableError("get", str(e)) from e
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return value
    
    async def put(self, slug: str, url: str) -> None:
        try:
            async with self.redis.pipeline(transaction=True) as pipe:
                pipe.set(self._key(slug), url)
                pipe.zadd(self.index_key, {slug: 0})
                await pipe.execute()
        except RedisError as e:
            raise StoreUnavailableError("put", str(e)) from e
    
    async def delete(self, slug: str) -> None:
        try:
            async with self.redis.pipeline(transaction=True) as pipe:
                pipe.delete(self._key(slug))
                pipe.zrem(self.index_key, slug)
                await pipe.execute()
        except RedisError as e:
            raise StoreUnavailableError("delete", str(e)) from e
    
    async def list_keys(self, limit: int) -> List[str]:
        try:
            slugs = await self.redis.zrange(self.index_key, 0, limit - 1)
        except RedisError as e:
            raise StoreUnavailableError("list", str(e)) from e
        return [s.decode("utf-8") if isinstance(s, bytes) else s for s in slugs]
    
    async def close(self) -> None:
        await self.redis.aclose()


class SQLLinkStore(LinkStore):
    """
    SQLAlchemy store backed by the `links` table.
    
    Each call opens its own short session. Queries are sync and run inside
    the async methods (DB calls are fast, mixing is fine).
    """
    
    # Dialects with INSERT ... ON CONFLICT DO UPDATE
    UPSERT_INSERTS = {
        "sqlite": sqlite.insert,
        "postgresql": postgresql.insert,
    }
    
    def __init__(self, session_factory: sessionmaker):
        """
        Initialize SQL store.
        
        Args:
            session_factory: sessionmaker bound to an engine with the links table
        """
        self.session_factory = session_factory
    
    async def get(self, slug: str) -> Optional[str]:
        try:
            with self.session_factory() as db:
                link = db.get(Link, slug)
                return link.destination if link else None
        except SQLAlchemyError as e:
            raise StoreUnavailableError("get", str(e)) from e
    
    async def put(self, slug: str, url: str) -> None:
        """
        Upsert a link in one statement.
        
        SQLite and PostgreSQL use INSERT ... ON CONFLICT DO UPDATE, so two
        writers creating the same slug at once both succeed and the last
        write wins. Other dialects fall back to Session.merge() (SELECT, then
        INSERT or UPDATE); there two concurrent first-time writes of one slug
        can collide on the primary key, and the loser gets StoreUnavailableError.
        """
        try:
            with self.session_factory.begin() as db:
                insert = self.UPSERT_INSERTS.get(db.get_bind().dialect.name)
                if insert is None:
                    db.merge(Link(slug=slug, destination=url))
                else:
                    stmt = insert(Link).values(slug=slug, destination=url)
                    db.execute(stmt.on_conflict_do_update(
                        index_elements=[Link.slug],
                        set_={"destination": stmt.excluded.destination},
                    ))
        except SQLAlchemyError as e:
            raise StoreUnavailableError("put", str(e)) from e
    
    async def delete(self, slug: str) -> None:
        try:
            with self.session_factory.begin() as db:
                db.query(Link).filter(Link.slug == slug).delete()
        except SQLAlchemyError as e:
            raise StoreUnavailableError("delete", str(e)) from e
    
    async def list_keys(self, limit: int) -> List[str]:
        try:
            with self.session_factory() as db:
                rows = db.query(Link.slug).order_by(Link.slug).limit(limit).all()
        except SQLAlchemyError as e:
            raise StoreUnavailableError("list", str(e)) from e
        return [row.slug for row in rows]
    
    async def close(self) -> None:
        engine = self.session_factory.kw.get("bind")
        if engine is not None:
            engine.dispose()
