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
Compiler toolchain detection.

Clang with ld.lld is preferred because it is the only toolchain the kernel
supports ThinLTO with; GCC is the fallback and never gets LTO by default.
Probes only run `--version` and are bounded by a timeout.
"""

import logging
import os
import re
import shutil
import subprocess
from typing import Optional, Sequence

from .exceptions import ToolchainNotFoundError
from .models import CommandResult, ProbeReport, Toolchain, ToolchainKind
from .settings import PROBE_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)

_VERSION_NUMBER = re.compile(r'(\d+\.\d+(?:\.\d+)?)')


class CommandRunner:
    """Runs a short-lived external command and reports its outcome."""

    def run(self, argv: Sequence[str]) -> CommandResult:
        raise NotImplementedError


class SubprocessRunner(CommandRunner):
    """
    CommandRunner backed by subprocess.

    Attributes:
        path: Search path replacing $PATH, or None for the process environment
        timeout: Seconds before a probe is abandoned
    """

    def __init__(self, path: Optional[str] = None, timeout: float = PROBE_TIMEOUT_SECONDS):
        self.path = path
        self.timeout = timeout

    def run(self, argv: Sequence[str]) -> CommandResult:
        executable = shutil.which(argv[0], path=self.path)
        if executable is None:
            return CommandResult(127, "", f"{argv[0]}: command not found")

        env = None
        if self.path is not None:
            env = dict(os.environ, PATH=self.path)

        try:
            result = subprocess.run(
                [executable, *argv[1:]],
                capture_output=True,
                text=True,
                timeout=self.timeout,
                env=env,
            )
        except subprocess.TimeoutExpired:
            return CommandResult(124, "", f"{argv[0]}: timed out after {self.timeout}s")
        except OSError as e:
            return CommandResult(126, "", f"{argv[0]}: {e}")

        return CommandResult(result.returncode, result.stdout, result.stderr)


def parse_version_output(output: str) -> str:
    """
    Extract the version number from `--version` output.

    Only the first line is considered, e.g.
    "clang version 17.0.6", "gcc (GCC) 13.2.1 20231011", "LLD 17.0.6".

    Returns:
        Version string, or "unknown" if none is found
    """
    lines = output.strip().splitlines()
    if not lines:
        return "unknown"
    match = _VERSION_NUMBER.search(lines[0])
    return match.group(1) if match else "unknown"


class ToolchainDetector:
    """
    Detects the best available compiler toolchain.

    Priority:
    1. clang + ld.lld (ThinLTO capable)
    2. gcc (no default LTO)
    """

    def __init__(self, runner: Optional[CommandRunner] = None):
        self.runner = runner or SubprocessRunner()
        self.last_report: Optional[ProbeReport] = None

    @classmethod
    def with_path(cls, path: str, timeout: float = PROBE_TIMEOUT_SECONDS) -> "ToolchainDetector":
        """Create a detector that only searches `path` for tools."""
        return cls(SubprocessRunner(path=path, timeout=timeout))

    def _probe(self, command: str, report: ProbeReport) -> Optional[str]:
        result = self.runner.run([command, "--version"])
        report.record(command, result.ok)
        if not result.ok:
            logger.debug("Probe %s failed (exit %d): %s", command, result.returncode,
                         result.stderr.strip())
            return None
        version = parse_version_output(result.stdout)
        logger.debug("Probe %s succeeded: %s", command, version)
        return version

    def _clang(self, report: ProbeReport) -> Optional[Toolchain]:
        clang_version = self._probe("clang", report)
        if clang_version is None:
            return None
        lld_version = self._probe("ld.lld", report)
        if lld_version is None:
            logger.info("clang found but ld.lld is missing")
            return None
        return Toolchain(
            kind=ToolchainKind.CLANG,
            version=clang_version,
            linker="ld.lld",
            linker_version=lld_version,
            supports_thin_lto=True,
        )

    def _gcc(self, report: ProbeReport) -> Optional[Toolchain]:
        gcc_version = self._probe("gcc", report)
        if gcc_version is None:
            return None
        return Toolchain(
            kind=ToolchainKind.GCC,
            version=gcc_version,
            linker="ld",
            linker_version=self._probe("ld", report),
            supports_thin_lto=False,
        )

    def detect(self) -> Toolchain:
        """
        Detect a toolchain.

        Returns:
            Toolchain for clang+lld if both respond, else for gcc

        Raises:
            ToolchainNotFoundError: If neither clang+lld nor gcc is usable
        """
        report = ProbeReport()
        self.last_report = report

        toolchain = self._clang(report) or self._gcc(report)
        if toolchain is not None:
            return toolchain

        raise ToolchainNotFoundError(
            "No suitable toolchain found (failed probes: "
            f"{', '.join(report.failed())}). Please install clang and lld, or gcc."
        )

    def detect_kind(self, kind: ToolchainKind) -> Optional[Toolchain]:
        """
        Detect one compiler family only.

        Args:
            kind: Family to look for

        Returns:
            Toolchain with the probed versions, or None if that family is not usable
        """
        report = ProbeReport()
        self.last_report = report
        if kind is ToolchainKind.CLANG:
            return self._clang(report)
        return self._gcc(report)
