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
Data models for kernel build planning.
"""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterator, List, NamedTuple, Optional, Tuple
from enum import Enum


class Channel(Enum):
    """
    Support track of a kernel release, as published by kernel.org.

    EOL_UNSPECIFIED covers every moniker kernel.org publishes that is not one
    of the three tracked channels (linux-next, for example).
    """
    MAINLINE = "mainline"
    STABLE = "stable"
    LONGTERM = "longterm"
    EOL_UNSPECIFIED = "eol-unspecified"

    @classmethod
    def from_moniker(cls, moniker: Optional[str]) -> "Channel":
        """Classify a kernel.org moniker without guessing beyond it."""
        if isinstance(moniker, str):
            for channel in (cls.MAINLINE, cls.STABLE, cls.LONGTERM):
                if moniker.strip().lower() == channel.value:
                    return channel
        return cls.EOL_UNSPECIFIED


class SemVer(NamedTuple):
    """Parsed major.minor.patch triple."""
    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


@dataclass(frozen=True)
class KernelVersion:
    """A kernel release known to the version catalog."""
    version: str
    semver: Optional[SemVer]
    channel: Channel
    released: Optional[str] = None
    eol: bool = False

    @property
    def sort_key(self) -> Tuple[int, Tuple[int, int, int], str]:
        """Ordering key: parsed versions by triple, unparsed ones last."""
        if self.semver is None:
            return (1, (0, 0, 0), self.version)
        return (0, tuple(self.semver), self.version)

    def to_dict(self) -> Dict:
        """Serialize to the cache file entry shape."""
        return {
            'version': self.version,
            'channel': self.channel.value,
            'released': self.released,
            'eol': self.eol,
        }


@dataclass(frozen=True)
class VersionCatalogSnapshot:
    """An ordered list of kernel versions and the time it was obtained."""
    versions: Tuple[KernelVersion, ...]
    cached_at: float

    def is_fresh(self, now: float, ttl: float) -> bool:
        """Whether the snapshot may still be served at time `now`."""
        age = now - self.cached_at
        # A timestamp from the future is treated as stale
        return 0 <= age < ttl

    def to_dict(self) -> Dict:
        """Serialize to the cache file shape."""
        return {
            'versions': [v.to_dict() for v in self.versions],
            'cached_at': self.cached_at,
        }


class PatchSource(Enum):
    """Where a patch comes from."""
    UPSTREAM = "upstream"
    EXTERNAL = "external"


@dataclass(frozen=True)
class Patch:
    """A performance patch and the kernel versions it is known to apply to."""
    name: str
    source: PatchSource
    versions: FrozenSet[str]
    url: Optional[str] = None
    description: str = ""

    @property
    def is_upstream(self) -> bool:
        return self.source is PatchSource.UPSTREAM


class ConfigValue(Enum):
    """Classification of a Kconfig option value."""
    ENABLED = "enabled"
    DISABLED = "disabled"
    LITERAL = "literal"


@dataclass(frozen=True)
class ConfigOption:
    """A single Kconfig symbol and its value."""
    name: str
    kind: ConfigValue
    value: Optional[str] = None

    @property
    def is_disabled(self) -> bool:
        return self.kind is ConfigValue.DISABLED

    def render(self) -> str:
        """Render the option as a .config line."""
        if self.kind is ConfigValue.ENABLED:
            return f"{self.name}=y"
        if self.kind is ConfigValue.DISABLED:
            return f"# {self.name} is not set"
        return f"{self.name}={self.value}"


@dataclass(frozen=True)
class KernelConfig:
    """
    Frozen, insertion-ordered kernel configuration.

    Produced by ConfigBuilder.snapshot(); holds at most one option per name.
    Bloat-removal categories the builder could not resolve are carried along
    so that plan validation can report them.
    """
    options: Tuple[ConfigOption, ...] = ()
    rejected_categories: Tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.options)

    def __iter__(self) -> Iterator[ConfigOption]:
        return iter(self.options)

    def __contains__(self, name: object) -> bool:
        return any(opt.name == name for opt in self.options)

    def get(self, name: str) -> Optional[ConfigOption]:
        """Look up an option by name."""
        for opt in self.options:
            if opt.name == name:
                return opt
        return None

    def names(self) -> List[str]:
        """Option names in emission order."""
        return [opt.name for opt in self.options]

    def emit(self, header: Optional[str] = None) -> str:
        """
        Render the configuration as .config text.

        Args:
            header: Optional comment block placed before the options

        Returns:
            Newline-terminated text, one line per option
        """
        lines = []
        if header:
            lines.extend(f"# {line}".rstrip() for line in header.splitlines())
        lines.extend(opt.render() for opt in self.options)
        return "\n".join(lines) + "\n"


class ToolchainKind(Enum):
    """Compiler families the planner knows how to drive."""
    CLANG = "clang"
    GCC = "gcc"


class LtoConfig(Enum):
    """Link-time optimization mode."""
    THIN = "thin"
    FULL = "full"
    NONE = "none"


@dataclass(frozen=True)
class Toolchain:
    """A detected compiler/linker pair."""
    kind: ToolchainKind
    version: str
    linker: str
    linker_version: Optional[str] = None
    supports_thin_lto: bool = False

    @property
    def name(self) -> str:
        return self.kind.value

    @property
    def default_lto(self) -> LtoConfig:
        """ThinLTO for a full LLVM toolchain; GCC LTO is never a default."""
        if self.kind is ToolchainKind.CLANG and self.supports_thin_lto:
            return LtoConfig.THIN
        return LtoConfig.NONE

    def describe(self) -> str:
        return f"{self.name} {self.version} (linker: {self.linker})"


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a probed external command."""
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


@dataclass
class ProbeReport:
    """Record of every probe a detection attempt ran."""
    attempts: List[Tuple[str, bool]] = field(default_factory=list)

    def record(self, command: str, succeeded: bool) -> None:
        self.attempts.append((command, succeeded))

    def failed(self) -> List[str]:
        return [cmd for cmd, ok in self.attempts if not ok]
