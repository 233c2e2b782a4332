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
Kernel version string handling.

Upstream release identifiers come in several shapes ("6.17", "6.6.58",
"6.18-rc2", "v6.12"); everything inside kernelforge is keyed on a normalized
three-component form so that "6.17" and "6.17.0" are the same release.
"""

import re
from typing import Optional, Union

from .models import Channel, KernelVersion, SemVer

_LEADING_NON_NUMERIC = re.compile(r'^[^0-9]*')
_DOTTED = re.compile(r'^(\d+)(?:\.(\d+))?(?:\.(\d+))?([-+][0-9A-Za-z.\-+]*)?$')
_LTS_SUFFIX = re.compile(r'[-_.]?lts$')


def normalize_version(raw: Union[str, int, float, None]) -> str:
    """
    Normalize a raw version identifier.

    Strips any leading non-numeric prefix and pads the numeric part to three
    dotted components, keeping a pre-release suffix such as "-rc2". Strings
    that do not look like a version are returned stripped but otherwise
    unchanged so that callers can keep them.

    Args:
        raw: Version as published upstream

    Returns:
        Normalized version string
    """
    text = "" if raw is None else str(raw).strip()
    numeric = _LEADING_NON_NUMERIC.sub('', text)
    if not numeric:
        return text

    match = _DOTTED.match(numeric)
    if not match:
        return numeric

    major, minor, patch, suffix = match.groups()
    try:
        return f"{int(major)}.{int(minor or 0)}.{int(patch or 0)}{suffix or ''}"
    except ValueError:
        # Components too long for int() are kept as text
        return numeric


def parse_semver(raw: Union[str, int, float, None]) -> Optional[SemVer]:
    """
    Parse a version identifier into a (major, minor, patch) triple.

    Returns:
        SemVer, or None when the identifier is not a dotted numeric version
    """
    normalized = normalize_version(raw)
    match = _DOTTED.match(normalized)
    if not match:
        return None
    major, minor, patch, _ = match.groups()
    try:
        return SemVer(int(major), int(minor or 0), int(patch or 0))
    except ValueError:
        return None


def make_kernel_version(raw: Union[str, int, float, None],
                        channel: Channel = Channel.EOL_UNSPECIFIED,
                        released: Optional[str] = None,
                        eol: bool = False) -> KernelVersion:
    """Build a KernelVersion from a raw identifier, never rejecting it."""
    return KernelVersion(
        version=normalize_version(raw),
        semver=parse_semver(raw),
        channel=channel,
        released=released,
        eol=eol,
    )


def parse_target(text: Optional[str]) -> Optional[str]:
    """
    Parse a user-supplied build target into a normalized version.

    Accepts the shorthands people type: "6.6", "v6.17", "6.6-lts",
    "v6_6_lts", "V6.17".

    Returns:
        Normalized version (e.g. "6.6.0"), or None if the text is not a version
    """
    if not text:
        return None

    cleaned = _LTS_SUFFIX.sub('', text.strip().lower()).replace('_', '.')
    if parse_semver(cleaned) is None:
        return None
    return normalize_version(cleaned)


def version_at_least(version: Union[str, SemVer], minimum: Union[str, SemVer]) -> Optional[bool]:
    """
    Compare two versions by their parsed triples.

    Returns:
        True/False, or None when either side cannot be parsed
    """
    left = version if isinstance(version, SemVer) else parse_semver(version)
    right = minimum if isinstance(minimum, SemVer) else parse_semver(minimum)
    if left is None or right is None:
        return None
    return left >= right
