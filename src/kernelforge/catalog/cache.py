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
On-disk version cache.

The cache is a single JSON file:

    {"versions": [{"version": "6.17.0", "channel": "stable",
                   "released": "2025-09-28", "eol": false}, ...],
     "cached_at": 1760745600.0}

Writers produce a complete temporary file in the same directory and rename
it over the cache, so readers see either the old file or the new one.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from ..exceptions import CacheError
from ..models import Channel, VersionCatalogSnapshot
from ..version import make_kernel_version


def read_snapshot(path: Union[str, Path]) -> Optional[VersionCatalogSnapshot]:
    """
    Read the cached snapshot.

    Args:
        path: Cache file location

    Returns:
        Snapshot, or None if there is no cache file

    Raises:
        CacheError: If the file cannot be read or is malformed
    """
    path = Path(path)
    if not path.exists():
        return None

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise CacheError(f"Failed to read version cache {path}: {e}") from e

    if not isinstance(data, dict):
        raise CacheError(f"Version cache {path} is not a JSON object")

    cached_at = data.get('cached_at')
    entries = data.get('versions')
    if isinstance(cached_at, bool) or not isinstance(cached_at, (int, float)):
        raise CacheError(f"Version cache {path} has no valid 'cached_at'")
    if not isinstance(entries, list):
        raise CacheError(f"Version cache {path} has no 'versions' list")

    versions = []
    try:
        for entry in entries:
            if not isinstance(entry, dict) or not entry.get('version'):
                continue
            released = entry.get('released')
            versions.append(make_kernel_version(
                entry['version'],
                channel=Channel.from_moniker(entry.get('channel')),
                released=released if isinstance(released, str) else None,
                eol=entry.get('eol') is True,
            ))
    except (TypeError, ValueError) as e:
        raise CacheError(f"Version cache {path} has a malformed entry: {e}") from e

    if not versions:
        raise CacheError(f"Version cache {path} contains no versions")

    return VersionCatalogSnapshot(versions=tuple(versions), cached_at=float(cached_at))


def write_snapshot(path: Union[str, Path], snapshot: VersionCatalogSnapshot) -> None:
    """
    Atomically replace the cache file with a snapshot.

    Args:
        path: Cache file location (parent directories are created)
        snapshot: Snapshot to persist

    Raises:
        CacheError: If the snapshot cannot be written
    """
    path = Path(path)
    tmp_path = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            f.write(json.dumps(snapshot.to_dict(), indent=2))
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
        tmp_path = None
    except (OSError, TypeError, ValueError) as e:
        raise CacheError(f"Failed to write version cache {path}: {e}") from e
    finally:
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
