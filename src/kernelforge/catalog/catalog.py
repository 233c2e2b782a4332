# Copyright 2025 Multikernel Technologies, Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Kernel version catalog.

This module provides the VersionCatalog class, which lists the kernel releases
available for planning. A fresh cache is served without touching the network;
otherwise release metadata is fetched and cached. When fetching fails the
catalog serves the last readable cache, however old, and finally an embedded
release list, so listing never fails.
"""

import asyncio
import logging
import time
from pathlib import Path
from typing import Callable, List, Optional, Union

from ..exceptions import CacheError, CatalogError
from ..models import KernelVersion, VersionCatalogSnapshot
from ..settings import CACHE_TTL_SECONDS, default_cache_path
from .cache import read_snapshot, write_snapshot
from .fallback import fallback_versions
from .sources import HttpVersionSource, VersionSource, parse_releases

logger = logging.getLogger(__name__)


class VersionCatalog:
    """
    Lists kernel versions from cache, network or embedded data.

    Attributes:
        source: Where release metadata is fetched from
        cache_path: Location of the JSON cache file
        ttl: Seconds a cached snapshot stays fresh
        clock: Returns the current POSIX time
    """

    def __init__(self, source: Optional[VersionSource] = None,
                 cache_path: Optional[Union[str, Path]] = None,
                 ttl: float = CACHE_TTL_SECONDS,
                 clock: Callable[[], float] = time.time):
        self.source = source or HttpVersionSource()
        self.cache_path = Path(cache_path) if cache_path else default_cache_path()
        self.ttl = ttl
        self.clock = clock

    def _load_cache(self) -> Optional[VersionCatalogSnapshot]:
        try:
            return read_snapshot(self.cache_path)
        except CacheError as e:
            logger.warning("Ignoring unreadable version cache: %s", e)
            return None

    async def list_versions(self, force_refresh: bool = False) -> List[KernelVersion]:
        """
        List available kernel versions.

        Args:
            force_refresh: Skip the freshness check and always try to fetch

        Returns:
            Non-empty list of KernelVersion in source order
        """
        cached = None
        if not force_refresh:
            cached = self._load_cache()
            if cached is not None and cached.is_fresh(self.clock(), self.ttl):
                logger.debug("Serving %d versions from cache %s",
                             len(cached.versions), self.cache_path)
                return list(cached.versions)

        try:
            payload = await self.source.fetch()
            versions = parse_releases(payload)
        except (CatalogError, OSError, ValueError) as e:
            logger.warning("Failed to fetch kernel releases: %s", e)
            return self._offline_versions(cached)

        snapshot = VersionCatalogSnapshot(versions=tuple(versions), cached_at=self.clock())
        try:
            write_snapshot(self.cache_path, snapshot)
        except CacheError as e:
            logger.warning("Version list not cached: %s", e)

        return list(snapshot.versions)

    def list_versions_blocking(self, force_refresh: bool = False) -> List[KernelVersion]:
        """
        Blocking form of list_versions().

        Must not be called from inside a running event loop; use
        `await list_versions()` there instead.
        """
        return asyncio.run(self.list_versions(force_refresh))

    def _offline_versions(self, cached: Optional[VersionCatalogSnapshot]) -> List[KernelVersion]:
        if cached is None:
            cached = self._load_cache()
        if cached is not None:
            logger.info("Using cached version list from %s", self.cache_path)
            return list(cached.versions)

        logger.info("Using embedded version list")
        return fallback_versions()
