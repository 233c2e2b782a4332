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
kernelforge: Linux kernel build planner

Discovers kernel releases, resolves performance patches, assembles Kconfig
options, detects the host compiler toolchain and produces an immutable build
plan ready to hand to make.
"""

__version__ = "0.1.0"

from .planner import BuildPlan, BuildPlanner
from .catalog import VersionCatalog, HttpVersionSource, StaticVersionSource
from .patches import PatchResolver
from .config import ConfigBuilder
from .toolchain import ToolchainDetector, SubprocessRunner
from .models import (
    Channel,
    KernelVersion,
    Patch,
    PatchSource,
    KernelConfig,
    Toolchain,
    ToolchainKind,
    LtoConfig,
)
from .exceptions import (
    KernelForgeError,
    ValidationError,
    ConfigError,
    ToolchainNotFoundError,
    CatalogError,
    FetchError,
    CacheError,
)

__all__ = [
    # Core classes
    'BuildPlanner',
    'BuildPlan',
    'VersionCatalog',
    'HttpVersionSource',
    'StaticVersionSource',
    'PatchResolver',
    'ConfigBuilder',
    'ToolchainDetector',
    'SubprocessRunner',
    # Models
    'Channel',
    'KernelVersion',
    'Patch',
    'PatchSource',
    'KernelConfig',
    'Toolchain',
    'ToolchainKind',
    'LtoConfig',
    # Exceptions
    'KernelForgeError',
    'ValidationError',
    'ConfigError',
    'ToolchainNotFoundError',
    'CatalogError',
    'FetchError',
    'CacheError',
]
