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
Embedded release list used when neither the network nor the cache is usable.
"""

from typing import List, Tuple

from ..models import Channel, KernelVersion
from ..version import make_kernel_version

# (version, channel, release date, end of life)
FALLBACK_RELEASES: Tuple[Tuple[str, Channel, str, bool], ...] = (
    ("6.6.0", Channel.LONGTERM, "2023-10-29", False),
    ("6.7.0", Channel.STABLE, "2024-01-07", False),
    ("6.8.0", Channel.STABLE, "2024-03-10", False),
    ("6.9.0", Channel.STABLE, "2024-05-12", False),
    ("6.10.0", Channel.STABLE, "2024-07-14", False),
    ("6.11.0", Channel.STABLE, "2024-09-15", False),
    ("6.12.0", Channel.STABLE, "2024-11-17", False),
    ("6.13.0", Channel.MAINLINE, "2025-01-19", False),
    ("6.14.0", Channel.MAINLINE, "2025-03-23", False),
    ("6.15.0", Channel.MAINLINE, "2025-05-25", False),
    ("6.16.0", Channel.MAINLINE, "2025-07-27", False),
    ("6.17.0", Channel.MAINLINE, "2025-09-28", False),
)


def fallback_versions() -> List[KernelVersion]:
    """Get the embedded release list, oldest first."""
    return [
        make_kernel_version(version, channel=channel, released=released, eol=eol)
        for version, channel, released, eol in FALLBACK_RELEASES
    ]
