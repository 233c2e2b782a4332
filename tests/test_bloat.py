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
Tests for bloat-removal categories.
"""

from kernelforge.bloat import (
    CATEGORIES, DEFAULT_CATEGORIES, LEGACY_HARDWARE, category_names, find_category,
)


class TestCategories:
    """Test the category table."""

    def test_category_names(self):
        names = category_names()

        assert len(names) == 9
        assert names[0] == "Architecture Cleanup"
        assert "Legacy Hardware Removal" in names

    def test_defaults_are_known(self):
        for name in DEFAULT_CATEGORIES:
            assert find_category(name) is not None

    def test_legacy_hardware(self):
        category = find_category("Legacy Hardware Removal")
        assert category.options == LEGACY_HARDWARE
        assert "CONFIG_ISA" in category.options

    def test_options_are_kconfig_symbols(self):
        for category in CATEGORIES:
            assert category.options
            assert all(opt.startswith("CONFIG_") for opt in category.options)


class TestFindCategory:
    """Test category lookup."""

    def test_find_by_name_ignores_case(self):
        assert find_category("legacy hardware removal").name == "Legacy Hardware Removal"

    def test_find_by_slug(self):
        category = find_category("obscure-filesystems-removal")
        assert category.name == "Obscure Filesystems Removal"
        assert category.slug == "obscure-filesystems-removal"

    def test_unknown(self):
        assert find_category("Quantum Drivers") is None
