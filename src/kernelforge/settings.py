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
Default settings and well-known locations.

Values here can be overridden through environment variables so that the
planner can be pointed at a mirror or an isolated cache directory without
code changes.
"""

import os
import sys
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_RELEASES_URL = "https://www.kernel.org/releases.json"

CACHE_TTL_SECONDS = 24 * 60 * 60
HTTP_TIMEOUT_SECONDS = 10.0
PROBE_TIMEOUT_SECONDS = 5.0

# 6.6 LTS is the conservative default target
DEFAULT_TARGET_VERSION = "6.6.0"

APP_DIR_NAME = "kernelforge"
CACHE_FILE_NAME = "versions.json"


def releases_url(environ: Optional[Mapping[str, str]] = None) -> str:
    """Return the release metadata URL, honouring KERNELFORGE_RELEASES_URL."""
    env = os.environ if environ is None else environ
    return env.get("KERNELFORGE_RELEASES_URL") or DEFAULT_RELEASES_URL


def platform_cache_root(environ: Optional[Mapping[str, str]] = None,
                        platform: Optional[str] = None) -> Path:
    """
    Get the per-user cache root following the platform convention.

    Order:
    - XDG_CACHE_HOME when set (any platform)
    - %LOCALAPPDATA% on Windows
    - ~/Library/Caches on macOS
    - ~/.cache everywhere else

    Args:
        environ: Environment mapping, defaults to os.environ
        platform: Platform string, defaults to sys.platform

    Returns:
        Cache root directory (not created)
    """
    env = os.environ if environ is None else environ
    plat = sys.platform if platform is None else platform

    xdg = env.get("XDG_CACHE_HOME")
    if xdg:
        return Path(xdg)

    if plat.startswith("win"):
        local = env.get("LOCALAPPDATA")
        if local:
            return Path(local)
        return Path.home() / "AppData" / "Local"

    if plat == "darwin":
        return Path.home() / "Library" / "Caches"

    return Path.home() / ".cache"


def default_cache_path(environ: Optional[Mapping[str, str]] = None,
                       platform: Optional[str] = None) -> Path:
    """
    Get the location of the version cache file.

    KERNELFORGE_CACHE_DIR replaces the whole application directory; otherwise
    the file lives under <cache root>/kernelforge/.
    """
    env = os.environ if environ is None else environ

    override = env.get("KERNELFORGE_CACHE_DIR")
    if override:
        return Path(override) / CACHE_FILE_NAME

    return platform_cache_root(env, platform) / APP_DIR_NAME / CACHE_FILE_NAME
