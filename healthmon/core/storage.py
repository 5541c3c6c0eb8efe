"""Storage category loading with polling while the provider computes them."""
import asyncio
import logging
from typing import List, Optional

from ..charts.geometry import DonutSegment, storage_segments
from ..collectors.provider import MetricProvider
from ..collectors.system_models import StorageCategories

logger = logging.getLogger(__name__)


class StorageCategoryPoller:
    """Fetches storage categories, re-requesting while the result is empty.

    An empty result means the provider is still computing in the
    background. Polling stops at the first non-empty result or after
    max_polls attempts, after which emptiness means nothing to show.
    """

    def __init__(self, provider: MetricProvider, interval: float = 2.0, max_polls: int = 30):
        self.provider = provider
        self.interval = interval
        self.max_polls = max_polls
        self.categories: Optional[StorageCategories] = None
        self.error: Optional[str] = None

    async def load(self) -> Optional[StorageCategories]:
        try:
            data = await self.provider.get_storage_categories()
        except Exception as e:
            logger.error(f"Failed to get storage categories: {e}")
            self.error = str(e)
            return None

        self.error = None
        self.categories = data

        polls = 0
        while data.is_empty and polls < self.max_polls:
            await asyncio.sleep(self.interval)
            polls += 1
            try:
                data = await self.provider.get_storage_categories()
            except Exception as e:
                logger.warning(f"Storage category poll failed: {e}")
                continue
            if not data.is_empty:
                self.categories = data

        return self.categories

    async def refresh(self) -> Optional[StorageCategories]:
        """Force the provider to recompute categories."""
        try:
            self.categories = await self.provider.refresh_storage_categories()
            self.error = None
        except Exception as e:
            logger.error(f"Failed to refresh storage categories: {e}")
            self.error = str(e)
        return self.categories

    def segments(self) -> List[DonutSegment]:
        if self.categories is None:
            return []
        return storage_segments(self.categories.categories)
