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
Tests for default settings and cache locations.
"""

from pathlib import Path

from kernelforge.settings import (
    DEFAULT_RELEASES_URL, default_cache_path, platform_cache_root, releases_url,
)


class TestReleasesUrl:
    """Test release metadata URL resolution."""

    def test_default(self):
        assert releases_url({}) == DEFAULT_RELEASES_URL

    def test_override(self):
        env = {"KERNELFORGE_RELEASES_URL": "https://mirror.test/releases.json"}
        assert releases_url(env) == "https://mirror.test/releases.json"


class TestCacheLocation:
    """Test per-platform cache directory selection."""

    def test_xdg_wins_everywhere(self):
        env = {"XDG_CACHE_HOME": "/xdg"}

        assert platform_cache_root(env, "linux") == Path("/xdg")
        assert platform_cache_root(env, "darwin") == Path("/xdg")
        assert platform_cache_root(env, "win32") == Path("/xdg")

    def test_linux_default(self):
        assert platform_cache_root({}, "linux") == Path.home() / ".cache"

    def test_macos_default(self):
        assert platform_cache_root({}, "darwin") == Path.home() / "Library" / "Caches"

    def test_windows_local_app_data(self):
        env = {"LOCALAPPDATA": "C:/Users/dev/AppData/Local"}
        assert platform_cache_root(env, "win32") == Path("C:/Users/dev/AppData/Local")

    def test_cache_file_subpath(self):
        env = {"XDG_CACHE_HOME": "/xdg"}
        assert default_cache_path(env, "linux") == Path("/xdg/kernelforge/versions.json")

    def test_cache_dir_override(self):
        env = {"KERNELFORGE_CACHE_DIR": "/tmp/kf", "XDG_CACHE_HOME": "/xdg"}
        assert default_cache_path(env, "linux") == Path("/tmp/kf/versions.json")
