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
Build plan assembly.

BuildPlanner is the mutable, staged side: it starts from the baseline
configuration, the detected toolchain and that toolchain's default LTO mode,
and accepts overrides. finalize() produces an immutable BuildPlan; every call
returns a new value and later changes to the planner never reach it.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .config import ConfigBuilder, OptionValue, validate_options
from .exceptions import ToolchainNotFoundError
from .models import (
    KernelConfig, KernelVersion, LtoConfig, Patch, Toolchain, ToolchainKind,
)
from .patches import PatchResolver
from .toolchain import ToolchainDetector
from .version import normalize_version, parse_target

logger = logging.getLogger(__name__)


def toolchain_options(toolchain: Toolchain, lto: LtoConfig) -> Dict[str, OptionValue]:
    """Kconfig options implied by a toolchain and LTO mode."""
    options: Dict[str, OptionValue] = {"CONFIG_CC_OPTIMIZE_FOR_PERFORMANCE": True}
    if lto is LtoConfig.THIN:
        options.update({
            "CONFIG_LTO_NONE": False,
            "CONFIG_LTO_CLANG_FULL": False,
            "CONFIG_LTO_CLANG_THIN": True,
        })
    elif lto is LtoConfig.FULL:
        options.update({
            "CONFIG_LTO_NONE": False,
            "CONFIG_LTO_CLANG_THIN": False,
            "CONFIG_LTO_CLANG_FULL": True,
        })
    else:
        options.update({
            "CONFIG_LTO_CLANG_THIN": False,
            "CONFIG_LTO_CLANG_FULL": False,
            "CONFIG_LTO_NONE": True,
        })
    return options


@dataclass(frozen=True)
class BuildPlan:
    """A finalized kernel build plan."""
    version: str
    config: KernelConfig
    patches: Tuple[Patch, ...]
    toolchain: Toolchain
    lto: LtoConfig
    resolver: PatchResolver = field(default_factory=PatchResolver, compare=False, repr=False)

    def external_patches(self) -> List[Patch]:
        """Patches for this version that must be applied out of tree."""
        return self.resolver.external_patches(self.version)

    def make_command(self, parallelism: int, targets: Sequence[str] = ()) -> List[str]:
        """
        Build the make invocation for this plan.

        Args:
            parallelism: Number of parallel jobs, passed as -jN
            targets: Optional make targets appended at the end

        Returns:
            Argument list, e.g. ["make", "LLVM=1", "-j16"]

        Raises:
            ValueError: If parallelism is not a positive integer
        """
        if isinstance(parallelism, bool) or not isinstance(parallelism, int) or parallelism < 1:
            raise ValueError(f"parallelism must be a positive integer, got {parallelism!r}")

        cmd = ["make"]
        if self.toolchain.kind is ToolchainKind.CLANG:
            cmd.append("LLVM=1")
        cmd.append(f"-j{parallelism}")
        cmd.extend(targets)
        return cmd

    def validate(self) -> List[str]:
        """
        Check the plan for incompatibilities.

        Returns:
            Every problem found; an empty list means the plan is usable
        """
        errors: List[str] = []

        if len(self.config) == 0:
            errors.append("Build plan has no configuration options")

        if self.lto is not LtoConfig.NONE:
            mode = "ThinLTO" if self.lto is LtoConfig.THIN else "Full LTO"
            if self.toolchain.kind is ToolchainKind.GCC:
                errors.append(
                    f"{mode} requested with gcc {self.toolchain.version}: "
                    "kernel LTO requires clang with ld.lld"
                )
            elif self.toolchain.linker != "ld.lld":
                errors.append(
                    f"{mode} requires the ld.lld linker, toolchain uses {self.toolchain.linker}"
                )

        errors.extend(validate_options(self.version, self.config))
        errors.extend(
            f"Unknown bloat-removal category: '{name}'"
            for name in self.config.rejected_categories
        )
        return errors

    @property
    def is_valid(self) -> bool:
        return not self.validate()

    def emit(self) -> str:
        """Render the plan's configuration as .config text."""
        header = (
            "Automatically generated by kernelforge\n"
            f"Linux {self.version}, {self.toolchain.describe()}, LTO: {self.lto.value}"
        )
        return self.config.emit(header=header)

    def summary(self) -> str:
        return (
            f"Build plan for Linux {self.version}\n"
            f"  Patches: {len(self.patches)} total ({len(self.external_patches())} external)\n"
            f"  Config options: {len(self.config)}\n"
            f"  Toolchain: {self.toolchain.describe()}\n"
            f"  LTO: {self.lto.value}"
        )


class BuildPlanner:
    """
    Staged construction of a BuildPlan.

    Attributes:
        version: Normalized target version
        config: Mutable configuration, seeded with the architecture baseline
        resolver: Patch table used for the plan
    """

    def __init__(self, version: Union[str, KernelVersion],
                 detector: Optional[ToolchainDetector] = None,
                 resolver: Optional[PatchResolver] = None,
                 toolchain: Optional[Toolchain] = None,
                 arch: str = "x86_64"):
        raw = version.version if isinstance(version, KernelVersion) else version
        self.version = parse_target(raw) or normalize_version(raw)
        self.resolver = resolver or PatchResolver()
        self.config = ConfigBuilder(arch).baseline(arch)

        self._toolchain = toolchain
        self._detection_error: Optional[ToolchainNotFoundError] = None
        self._lto: Optional[LtoConfig] = None

        if toolchain is None:
            detector = detector or ToolchainDetector()
            try:
                self._toolchain = detector.detect()
            except ToolchainNotFoundError as e:
                logger.warning("Toolchain detection failed: %s", e)
                self._detection_error = e

    @property
    def toolchain(self) -> Optional[Toolchain]:
        return self._toolchain

    @property
    def lto(self) -> LtoConfig:
        """Forced LTO mode, or the toolchain's default."""
        if self._lto is not None:
            return self._lto
        if self._toolchain is None:
            return LtoConfig.NONE
        return self._toolchain.default_lto

    def force_thin_lto(self) -> "BuildPlanner":
        return self.force_lto(LtoConfig.THIN)

    def force_lto(self, mode: LtoConfig) -> "BuildPlanner":
        self._lto = LtoConfig(mode)
        return self

    def force_toolchain(self, toolchain: Toolchain) -> "BuildPlanner":
        """Use `toolchain` regardless of what detection found."""
        self._toolchain = toolchain
        self._detection_error = None
        return self

    def configure(self, callback: Callable[[ConfigBuilder], None]) -> "BuildPlanner":
        """Run a custom mutation against the plan's configuration."""
        callback(self.config)
        return self

    def set_option(self, name: str, value: OptionValue = True) -> "BuildPlanner":
        self.config.set(name, value)
        return self

    def apply_desktop_optimizations(self) -> "BuildPlanner":
        self.config.apply_desktop_optimizations()
        return self

    def apply_bloat_removal(self, categories: Union[str, Iterable[str]]) -> "BuildPlanner":
        self.config.apply_bloat_removal(categories)
        return self

    def external_patches(self) -> List[Patch]:
        return self.resolver.external_patches(self.version)

    def finalize(self) -> BuildPlan:
        """
        Freeze the current state into a BuildPlan.

        Raises:
            ToolchainNotFoundError: If no toolchain was detected or forced
        """
        if self._toolchain is None:
            reason = self._detection_error or "no toolchain detected"
            raise ToolchainNotFoundError(
                f"Cannot plan Linux {self.version}: {reason}"
            ) from self._detection_error

        lto = self.lto
        config = self.config.copy()
        config.update(toolchain_options(self._toolchain, lto))

        return BuildPlan(
            version=self.version,
            config=config.snapshot(),
            patches=tuple(self.resolver.patches_for(self.version)),
            toolchain=self._toolchain,
            lto=lto,
            resolver=self.resolver,
        )
