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
Performance patch compatibility table.

Compatibility is asserted data, not inferred: each Patch lists the exact
normalized kernel versions it is known to apply to. Supporting a new kernel
release means adding entries to PATCHES, never new lookup logic.
"""

from types import MappingProxyType
from typing import Dict, List, Mapping, Sequence, Tuple, Union

from .models import KernelVersion, Patch, PatchSource
from .version import normalize_version, parse_semver

PATCHES: Tuple[Patch, ...] = (
    Patch(
        name="BORE",
        source=PatchSource.EXTERNAL,
        versions=frozenset({"6.6.0"}),
        url="https://github.com/firelzrd/bore-scheduler/tree/main/patches/stable/linux-6.6-bore",
        description="Burst-Oriented Response Enhancer scheduler; lowers input latency under load",
    ),
    Patch(
        name="BORE",
        source=PatchSource.EXTERNAL,
        versions=frozenset({"6.17.0"}),
        url="https://github.com/firelzrd/bore-scheduler/tree/main/patches/stable/linux-6.17-bore",
        description="Burst-Oriented Response Enhancer scheduler, 6.17 port",
    ),
    Patch(
        name="BBRv3",
        source=PatchSource.EXTERNAL,
        versions=frozenset({"6.6.0"}),
        url="https://github.com/google/bbr/tree/v3",
        description="TCP BBR v3 congestion control",
    ),
    Patch(
        name="BBRv3",
        source=PatchSource.UPSTREAM,
        versions=frozenset({"6.17.0"}),
        description="TCP BBR v3 congestion control improvements carried in mainline",
    ),
    Patch(
        name="FUTEX2",
        source=PatchSource.UPSTREAM,
        versions=frozenset({"6.6.0", "6.17.0"}),
        description="futex_waitv() system call, upstream since 5.16",
    ),
    Patch(
        name="PREEMPT_RT",
        source=PatchSource.EXTERNAL,
        versions=frozenset({"6.6.0"}),
        url="https://cdn.kernel.org/pub/linux/kernel/projects/rt/6.6/",
        description="Real-time preemption patch set",
    ),
)


def _index(patches: Sequence[Patch]) -> Mapping[str, Tuple[Patch, ...]]:
    table: Dict[str, List[Patch]] = {}
    for patch in patches:
        for version in sorted(patch.versions):
            table.setdefault(version, []).append(patch)
    return MappingProxyType({v: tuple(p) for v, p in table.items()})


class PatchResolver:
    """
    Read-only lookups against the patch table.

    Versions are matched exactly after normalization, so "6.6" and "6.6.0"
    resolve the same row while "6.6.58" has no row of its own. A version
    without a row yields no patches.
    """

    def __init__(self, patches: Sequence[Patch] = PATCHES):
        self._table = _index(patches)

    def patches_for(self, version: Union[str, KernelVersion]) -> List[Patch]:
        """Get every patch known to apply to a version (empty if unknown)."""
        key = normalize_version(getattr(version, 'version', version))
        return list(self._table.get(key, ()))

    def external_patches(self, version: Union[str, KernelVersion]) -> List[Patch]:
        """Get the patches that have to be fetched and applied out of tree."""
        return [p for p in self.patches_for(version) if p.source is PatchSource.EXTERNAL]

    def is_available(self, version: Union[str, KernelVersion], name: str) -> bool:
        """Check whether a patch name (case-insensitive) exists for a version."""
        wanted = name.lower()
        return any(p.name.lower() == wanted for p in self.patches_for(version))

    def patches_by_feature(self, version: Union[str, KernelVersion], feature: str) -> List[Patch]:
        """Filter a version's patches by a case-insensitive name fragment."""
        fragment = feature.lower()
        return [p for p in self.patches_for(version) if fragment in p.name.lower()]

    def supported_versions(self) -> List[str]:
        """Versions that have an entry in the table."""
        return sorted(self._table, key=lambda v: (parse_semver(v) or (0, 0, 0), v))
