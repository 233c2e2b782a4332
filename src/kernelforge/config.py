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
Kernel configuration builder.

This module provides the ConfigBuilder class, an insertion-ordered accumulator
of Kconfig options with presets for an architecture baseline, desktop/gaming
tuning and bloat removal. Emission order is the order in which names were
first seen, so identical call sequences always produce identical text.
"""

import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .bloat import DEFAULT_CATEGORIES, LEGACY_HARDWARE, find_category
from .exceptions import ConfigError
from .models import ConfigOption, ConfigValue, KernelConfig, SemVer
from .version import parse_semver

_SYMBOL = re.compile(r'^CONFIG_[A-Z0-9_]+$')

OptionValue = Union[bool, int, str, None]

ARCHITECTURES: Mapping[str, Tuple[str, ...]] = {
    "x86_64": ("CONFIG_X86", "CONFIG_X86_64", "CONFIG_64BIT"),
    "arm64": ("CONFIG_ARM64", "CONFIG_64BIT"),
    "riscv64": ("CONFIG_RISCV", "CONFIG_64BIT"),
}

# Top-level symbols of every architecture family the kernel supports
ARCH_FAMILY_SYMBOLS: Tuple[str, ...] = (
    "CONFIG_X86", "CONFIG_X86_64", "CONFIG_ARM", "CONFIG_ARM64",
    "CONFIG_MIPS", "CONFIG_POWERPC", "CONFIG_PPC", "CONFIG_PPC64",
    "CONFIG_RISCV", "CONFIG_S390", "CONFIG_IA64", "CONFIG_ALPHA",
    "CONFIG_M68K", "CONFIG_MICROBLAZE", "CONFIG_NDS32", "CONFIG_ARC",
    "CONFIG_SH", "CONFIG_SPARC", "CONFIG_SPARC64", "CONFIG_HEXAGON",
)

HZ_CHOICES: Tuple[int, ...] = (100, 250, 300, 1000)
PREEMPT_MODELS: Tuple[str, ...] = (
    "CONFIG_PREEMPT_NONE", "CONFIG_PREEMPT_VOLUNTARY", "CONFIG_PREEMPT",
    "CONFIG_PREEMPT_RT",
)


@dataclass(frozen=True)
class OptionConstraint:
    """Kernel releases in which a Kconfig symbol exists."""
    name: str
    introduced: Optional[str] = None
    removed: Optional[str] = None


VERSION_CONSTRAINTS: Tuple[OptionConstraint, ...] = (
    OptionConstraint("CONFIG_LTO_CLANG_THIN", introduced="5.12.0"),
    OptionConstraint("CONFIG_LTO_CLANG_FULL", introduced="5.12.0"),
    OptionConstraint("CONFIG_DECNET", removed="6.1.0"),
    OptionConstraint("CONFIG_BCACHEFS_FS", introduced="6.7.0", removed="6.18.0"),
    OptionConstraint("CONFIG_SCHED_CLASS_EXT", introduced="6.12.0"),
    OptionConstraint("CONFIG_REISERFS_FS", removed="6.13.0"),
)


def _classify(name: str, value: OptionValue) -> ConfigOption:
    if not isinstance(name, str) or not _SYMBOL.match(name):
        raise ConfigError(f"Invalid Kconfig symbol: {name!r}")

    if value is True or value == "y":
        return ConfigOption(name, ConfigValue.ENABLED)
    if value is False or value is None or value == "n":
        return ConfigOption(name, ConfigValue.DISABLED)

    text = str(value)
    if not text or '\n' in text:
        raise ConfigError(f"Invalid value for {name}: {text!r}")
    return ConfigOption(name, ConfigValue.LITERAL, text)


def _check_version_constraints(version: SemVer, option: ConfigOption) -> List[str]:
    errors = []
    for constraint in VERSION_CONSTRAINTS:
        if constraint.name != option.name:
            continue
        if constraint.introduced and version < parse_semver(constraint.introduced):
            errors.append(
                f"{option.name} is not available before Linux {constraint.introduced} "
                f"(target is {version})"
            )
        if constraint.removed and version >= parse_semver(constraint.removed):
            errors.append(
                f"{option.name} was removed in Linux {constraint.removed} "
                f"(target is {version})"
            )
    return errors


def validate_options(version: Union[str, SemVer], options: Iterable[ConfigOption]) -> List[str]:
    """
    Cross-check options against version constraints and each other.

    Disabled options are never flagged: a "not set" line for a symbol the
    target does not know is harmless. Every problem found is returned.

    Args:
        version: Target kernel version
        options: Options to check, in emission order

    Returns:
        List of violation messages, empty when the options are consistent
    """
    errors: List[str] = []
    options = list(options)
    live = {opt.name: opt for opt in options if not opt.is_disabled}

    target = version if isinstance(version, SemVer) else parse_semver(version)
    if target is None:
        errors.append(f"Unrecognized kernel version '{version}': version constraints not checked")
    else:
        for option in options:
            if not option.is_disabled:
                errors.extend(_check_version_constraints(target, option))

    hz_enabled = [hz for hz in HZ_CHOICES
                  if f"CONFIG_HZ_{hz}" in live and live[f"CONFIG_HZ_{hz}"].kind is ConfigValue.ENABLED]
    if len(hz_enabled) > 1:
        errors.append(
            "Multiple timer frequencies enabled: "
            + ", ".join(f"CONFIG_HZ_{hz}" for hz in hz_enabled)
        )
    hz = live.get("CONFIG_HZ")
    if hz is not None and len(hz_enabled) == 1 and hz.value != str(hz_enabled[0]):
        errors.append(
            f"CONFIG_HZ={hz.value} does not match CONFIG_HZ_{hz_enabled[0]}"
        )

    models = [name for name in PREEMPT_MODELS
              if name in live and live[name].kind is ConfigValue.ENABLED]
    if len(models) > 1:
        errors.append("Multiple preemption models enabled: " + ", ".join(models))

    return errors


class ConfigBuilder:
    """
    Accumulates kernel configuration options.

    `set` and `unset` insert new names at the end and overwrite existing names
    in place, so the output never contains duplicate keys and the first-seen
    order of names survives later changes. `unset` records an explicit
    "is not set" line rather than dropping the option.

    Attributes:
        arch: Target architecture whose symbols are protected from removal
        rejected_categories: Bloat-removal category names that were not found
    """

    def __init__(self, arch: str = "x86_64"):
        if arch not in ARCHITECTURES:
            raise ConfigError(
                f"Unsupported architecture '{arch}'. "
                f"Supported: {', '.join(sorted(ARCHITECTURES))}"
            )
        self.arch = arch
        self.rejected_categories: List[str] = []
        self._options: Dict[str, ConfigOption] = {}

    def __len__(self) -> int:
        return len(self._options)

    def __contains__(self, name: object) -> bool:
        return name in self._options

    def get(self, name: str) -> Optional[ConfigOption]:
        return self._options.get(name)

    def set(self, name: str, value: OptionValue = True) -> None:
        """
        Set an option, overwriting any previous value in place.

        Args:
            name: Kconfig symbol, e.g. "CONFIG_HZ"
            value: True or "y" to enable; False, None or "n" to disable;
                   anything else is written literally ("m", 1000, '"cubic"')

        Raises:
            ConfigError: If the symbol or value is malformed
        """
        option = _classify(name, value)
        self._options[option.name] = option

    def unset(self, name: str) -> None:
        """Record an option as explicitly disabled."""
        self.set(name, False)

    def update(self, options: Mapping[str, OptionValue]) -> None:
        """Apply several options in mapping order."""
        for name, value in options.items():
            self.set(name, value)

    def emit(self, header: Optional[str] = None) -> str:
        """Render the current options as .config text."""
        return self.snapshot().emit(header)

    def snapshot(self) -> KernelConfig:
        """Freeze the current state into an immutable KernelConfig."""
        return KernelConfig(
            options=tuple(self._options.values()),
            rejected_categories=tuple(self.rejected_categories),
        )

    def copy(self) -> "ConfigBuilder":
        """Create an independent builder with the same state."""
        clone = ConfigBuilder(self.arch)
        clone._options = dict(self._options)
        clone.rejected_categories = list(self.rejected_categories)
        return clone

    def baseline(self, arch: Optional[str] = None) -> "ConfigBuilder":
        """
        Apply the single-architecture baseline.

        Enables the target architecture and module support, sets conservative
        preemption, filesystem and networking defaults, and disables every
        other architecture family and legacy buses/devices.

        Args:
            arch: Target architecture, defaults to the builder's arch

        Raises:
            ConfigError: If the architecture is not supported
        """
        arch = arch or self.arch
        if arch not in ARCHITECTURES:
            raise ConfigError(
                f"Unsupported architecture '{arch}'. "
                f"Supported: {', '.join(sorted(ARCHITECTURES))}"
            )
        self.arch = arch
        enabled = ARCHITECTURES[arch]

        for name in enabled:
            self.set(name)

        self.set("CONFIG_MODULES")
        self.set("CONFIG_MODULE_UNLOAD")
        self.set("CONFIG_SMP")

        self.set("CONFIG_PREEMPT_VOLUNTARY")
        self.set("CONFIG_HZ_300")
        self.set("CONFIG_HZ", 300)

        self.set("CONFIG_PROC_FS")
        self.set("CONFIG_SYSFS")
        self.set("CONFIG_TMPFS")
        self.set("CONFIG_EXT4_FS")
        self.set("CONFIG_VFAT_FS", "m")

        self.set("CONFIG_NET")
        self.set("CONFIG_INET")
        self.set("CONFIG_IPV6")
        self.set("CONFIG_TCP_CONG_CUBIC")
        self.set("CONFIG_DEFAULT_TCP_CONG", '"cubic"')

        for name in ARCH_FAMILY_SYMBOLS:
            if name not in enabled:
                self.unset(name)

        for name in LEGACY_HARDWARE:
            self.unset(name)

        return self

    def apply_desktop_optimizations(self) -> "ConfigBuilder":
        """Tune for interactive desktop and gaming workloads."""
        self.set("CONFIG_CC_OPTIMIZE_FOR_PERFORMANCE")

        self.set("CONFIG_HIGH_RES_TIMERS")
        self.set("CONFIG_NO_HZ_FULL")
        for hz in HZ_CHOICES:
            if hz != 1000:
                self.unset(f"CONFIG_HZ_{hz}")
        self.set("CONFIG_HZ_1000")
        self.set("CONFIG_HZ", 1000)

        for name in PREEMPT_MODELS:
            if name != "CONFIG_PREEMPT":
                self.unset(name)
        self.set("CONFIG_PREEMPT")
        self.set("CONFIG_PREEMPT_COUNT")
        self.set("CONFIG_PREEMPT_DYNAMIC")

        self.set("CONFIG_SCHED_AUTOGROUP")
        self.set("CONFIG_FUTEX")
        if self.arch == "x86_64":
            self.set("CONFIG_X86_X2APIC")
            self.set("CONFIG_X86_TSC")

        self.unset("CONFIG_EMBEDDED")

        for name in ("CONFIG_EXT4_FS", "CONFIG_BTRFS_FS", "CONFIG_XFS_FS",
                     "CONFIG_F2FS_FS", "CONFIG_VFAT_FS", "CONFIG_NTFS3_FS"):
            self.set(name)

        for name in ("CONFIG_REISERFS_FS", "CONFIG_JFS_FS", "CONFIG_HFS_FS",
                     "CONFIG_HFSPLUS_FS"):
            self.unset(name)

        return self

    def apply_bloat_removal(self, categories: Union[str, Iterable[str]]) -> "ConfigBuilder":
        """
        Disable the options of each named bloat-removal category.

        Symbols of the target architecture are never disabled. Unknown
        category names are recorded in `rejected_categories` and reported by
        `validate()`.

        Args:
            categories: Category names or slugs, applied in order
        """
        if isinstance(categories, str):
            categories = [categories]

        protected = set(ARCHITECTURES[self.arch])
        for name in categories:
            category = find_category(name)
            if category is None:
                if name not in self.rejected_categories:
                    self.rejected_categories.append(name)
                continue
            for option in category.options:
                if option not in protected:
                    self.unset(option)

        return self

    def validate(self, version: Union[str, SemVer]) -> List[str]:
        """Validate the current options for a target version."""
        errors = validate_options(version, self._options.values())
        errors.extend(
            f"Unknown bloat-removal category: '{name}'" for name in self.rejected_categories
        )
        return errors

    @classmethod
    def desktop_gaming(cls, arch: str = "x86_64") -> "ConfigBuilder":
        """Baseline, desktop tuning and the default bloat-removal categories."""
        builder = cls(arch)
        builder.baseline(arch)
        builder.apply_desktop_optimizations()
        builder.apply_bloat_removal(DEFAULT_CATEGORIES)
        return builder
