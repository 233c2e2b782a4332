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
Kernel version catalog: remote discovery, local cache and offline fallback.
"""

from .catalog import VersionCatalog
from .cache import read_snapshot, write_snapshot
from .fallback import fallback_versions
from .sources import HttpVersionSource, StaticVersionSource, VersionSource, parse_releases

__all__ = [
    'VersionCatalog',
    'VersionSource',
    'HttpVersionSource',
    'StaticVersionSource',
    'parse_releases',
    'read_snapshot',
    'write_snapshot',
    'fallback_versions',
]
