import logging
from typing import List, Optional

from shortlinks_app.schemas.link import LinkResponse
from shortlinks_app.store.strategies import LinkStore


logger = logging.getLogger(__name__)


class LinkService:
    """
    Link Service with the store injected.
    
    All state lives in the store; the service holds no per-request data,
    so one instance can serve any number of requests.
    """
    
    def __init__(self, store: LinkStore, list_limit: int = 1000):
        """
        Initialize link service with dependencies.
        
        Args:
            store: Link store strategy
            list_limit: Page size used for list_keys
        """
        self.store = store
        self.list_limit = list_limit

    async def get_destination(self, slug: str) -> Optional[str]:
        """Destination for a slug, or None if it was never created or was deleted."""
        return await self.store.get(slug)

    async def add_link(self, slug: str, url: str) -> None:
        """Create a link or replace the destination of an existing one."""
        await self.store.put(slug, url)
        logger.info(f"Link saved: /{slug} -> {url}")

    async def delete_link(self, slug: str) -> None:
        """Delete a link. Absent slugs are ignored."""
        await self.store.delete(slug)
        logger.info(f"Link deleted: /{slug}")

    async def list_links(self) -> List[LinkResponse]:
        """
        List links with their destinations.
        
        Flow:
        1. Read one page of slugs (at most list_limit)
        2. Look up each slug's destination, one after another
        
        Only the first page is returned. A full page means there may be more
        links than shown; that is logged, not paginated.
        Slugs deleted between steps 1 and 2 are skipped.
        """
        slugs = await self.store.list_keys(self.list_limit)
        if len(slugs) >= self.list_limit:
            logger.warning(
                f"Link listing hit the page limit ({self.list_limit}); "
                "additional links are not shown"
            )
        
        links = []
        for slug in slugs:
            url = await self.store.get(slug)
            if url is None:
                continue
            links.append(LinkResponse(slug=slug, url=url))
        return links
