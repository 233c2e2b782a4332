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
Bloat-removal categories.

Each category is a named group of Kconfig symbols that are disabled together
to shrink a desktop kernel. The table is fixed; ConfigBuilder looks categories
up here and reports names it cannot find.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

LEGACY_HARDWARE: Tuple[str, ...] = (
    "CONFIG_ISA", "CONFIG_EISA", "CONFIG_MCA", "CONFIG_PARPORT",
    "CONFIG_BLK_DEV_FD", "CONFIG_IDE",
)


@dataclass(frozen=True)
class BloatCategory:
    """A named group of options disabled together."""
    name: str
    options: Tuple[str, ...]
    description: str = ""

    @property
    def slug(self) -> str:
        return self.name.lower().replace(' ', '-')


CATEGORIES: Tuple[BloatCategory, ...] = (
    BloatCategory(
        "Architecture Cleanup",
        ("CONFIG_ARM", "CONFIG_ARM64", "CONFIG_MIPS", "CONFIG_POWERPC",
         "CONFIG_RISCV", "CONFIG_S390"),
        "Foreign CPU architectures",
    ),
    BloatCategory(
        "Industrial Hardware Removal",
        ("CONFIG_INFINIBAND", "CONFIG_SCSI_FC_ATTRS", "CONFIG_CHR_DEV_ST",
         "CONFIG_ISDN"),
        "Datacenter fabrics, Fibre Channel and tape drives",
    ),
    BloatCategory(
        "Enterprise Features Removal",
        ("CONFIG_DLM", "CONFIG_GFS2_FS", "CONFIG_OCFS2_FS"),
        "Cluster locking and cluster filesystems",
    ),
    BloatCategory(
        "Embedded Systems Removal",
        ("CONFIG_SPI", "CONFIG_IIO", "CONFIG_W1"),
        "Board-level buses and sensor frameworks",
    ),
    BloatCategory(
        "Legacy Hardware Removal",
        LEGACY_HARDWARE,
        "Pre-PCI buses, parallel ports and floppy drives",
    ),
    BloatCategory(
        "Obscure Filesystems Removal",
        ("CONFIG_REISERFS_FS", "CONFIG_JFS_FS", "CONFIG_HFS_FS",
         "CONFIG_HFSPLUS_FS"),
        "Filesystems with no desktop use",
    ),
    BloatCategory(
        "Networking Protocols Cleanup",
        ("CONFIG_DECNET", "CONFIG_ATALK", "CONFIG_X25", "CONFIG_HAMRADIO"),
        "Historic network protocol families",
    ),
    BloatCategory(
        "Security Modules Cleanup",
        ("CONFIG_SECURITY_SELINUX", "CONFIG_SECURITY_APPARMOR",
         "CONFIG_SECURITY_TOMOYO"),
        "Mandatory access control modules",
    ),
    BloatCategory(
        "Sound Drivers Cleanup",
        ("CONFIG_SND_ISA", "CONFIG_SND_PCMCIA", "CONFIG_SND_FIREWIRE"),
        "ISA, PCMCIA and FireWire audio",
    ),
)

# Categories applied by the desktop/gaming profile. Security modules and
# sound stay opt-in.
DEFAULT_CATEGORIES: Tuple[str, ...] = (
    "Architecture Cleanup",
    "Industrial Hardware Removal",
    "Enterprise Features Removal",
    "Embedded Systems Removal",
    "Legacy Hardware Removal",
    "Networking Protocols Cleanup",
)


def category_names() -> List[str]:
    """Get the names of all bloat-removal categories in table order."""
    return [c.name for c in CATEGORIES]


def find_category(name: str) -> Optional[BloatCategory]:
    """
    Look up a category by display name or slug, ignoring case.

    Args:
        name: "Legacy Hardware Removal" or "legacy-hardware-removal"

    Returns:
        BloatCategory, or None if no category matches
    """
    wanted = name.strip().lower()
    for category in CATEGORIES:
        if wanted in (category.name.lower(), category.slug):
            return category
    return None
