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
Remote release metadata sources.

A VersionSource returns the raw kernel.org releases.json document;
parse_releases turns it into KernelVersion entries. Individual malformed
entries degrade instead of failing the whole document.
"""

import copy
import logging
from datetime import date
from typing import Any, Dict, List, Optional

import httpx

from ..exceptions import FetchError
from ..models import Channel, KernelVersion
from ..settings import HTTP_TIMEOUT_SECONDS, releases_url
from ..version import make_kernel_version

logger = logging.getLogger(__name__)


class VersionSource:
    """Interface for anything that can produce release metadata."""

    async def fetch(self) -> Dict[str, Any]:
        """
        Fetch the release metadata document.

        Raises:
            FetchError: If the document cannot be obtained
        """
        raise NotImplementedError


class HttpVersionSource(VersionSource):
    """
    Fetches releases.json over HTTPS with httpx.

    Attributes:
        url: Release metadata URL
        timeout: Request timeout in seconds
        transport: Optional httpx transport (tests pass httpx.MockTransport)
    """

    def __init__(self, url: Optional[str] = None, timeout: float = HTTP_TIMEOUT_SECONDS,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.url = url or releases_url()
        self.timeout = timeout
        self.transport = transport

    async def fetch(self) -> Dict[str, Any]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport,
                                         follow_redirects=True) as client:
                response = await client.get(self.url)
                response.raise_for_status()
                return response.json()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise FetchError(f"Failed to fetch {self.url}: {e}") from e
        except ValueError as e:
            raise FetchError(f"Failed to parse response from {self.url}: {e}") from e


class StaticVersionSource(VersionSource):
    """
    In-memory source returning a fixed payload, or failing with a fixed error.

    Counts calls so callers can prove whether the network layer was reached.
    """

    def __init__(self, payload: Optional[Dict[str, Any]] = None,
                 error: Optional[Exception] = None):
        self.payload = payload
        self.error = error
        self.calls = 0

    async def fetch(self) -> Dict[str, Any]:
        self.calls += 1
        if self.error is not None:
            raise FetchError(str(self.error)) from self.error
        if self.payload is None:
            raise FetchError("No payload configured")
        return copy.deepcopy(self.payload)


def _released(value: Any) -> Optional[str]:
    if isinstance(value, dict):
        value = value.get('isodate')
    if not isinstance(value, str):
        return None
    try:
        date.fromisoformat(value)
    except ValueError:
        return None
    return value


def parse_releases(payload: Any) -> List[KernelVersion]:
    """
    Convert a releases.json document into KernelVersion entries.

    Expected format:
        {"releases": [{"version": "6.17.3", "moniker": "stable",
                       "released": {"isodate": "2025-10-15"}, "iseol": false}]}

    Entries without a version are skipped; every other field degrades to its
    default when absent or malformed. Duplicate versions keep the first entry.

    Raises:
        FetchError: If the document has no usable entries
    """
    if not isinstance(payload, dict) or not isinstance(payload.get('releases'), list):
        raise FetchError("Release metadata has no 'releases' list")

    versions: List[KernelVersion] = []
    seen = set()
    for entry in payload['releases']:
        if not isinstance(entry, dict):
            logger.debug("Skipping malformed release entry: %r", entry)
            continue

        raw = entry.get('version')
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            logger.debug("Skipping release entry without a version: %r", entry)
            continue

        eol = entry.get('iseol')
        version = make_kernel_version(
            raw,
            channel=Channel.from_moniker(entry.get('moniker')),
            released=_released(entry.get('released')),
            eol=eol if isinstance(eol, bool) else False,
        )
        if version.version in seen:
            continue
        seen.add(version.version)
        versions.append(version)

    if not versions:
        raise FetchError("Release metadata contains no usable entries")

    return versions
