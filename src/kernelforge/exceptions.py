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
Exception classes for kernelforge planning errors.
"""


class KernelForgeError(Exception):
    """Base exception for all kernelforge errors."""


class ValidationError(KernelForgeError):
    """Raised when validation fails."""


class ConfigError(ValidationError):
    """Raised when a configuration option or preset is malformed."""


class ToolchainNotFoundError(KernelForgeError):
    """Raised when no usable compiler toolchain can be found."""


class CatalogError(KernelForgeError):
    """Base exception for version catalog failures."""


class FetchError(CatalogError):
    """Raised when remote release metadata cannot be fetched or parsed."""


class CacheError(CatalogError):
    """Raised when the version cache cannot be read or written."""
