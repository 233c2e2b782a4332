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
Pytest configuration and fixtures for kernelforge tests.
"""

import pytest
import sys
from pathlib import Path

# Add src to path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from kernelforge.models import CommandResult, Toolchain, ToolchainKind
from kernelforge.toolchain import CommandRunner, ToolchainDetector


CLANG_OUTPUT = "clang version 17.0.6\nTarget: x86_64-pc-linux-gnu\n"
LLD_OUTPUT = "LLD 17.0.6 (compatible with GNU linkers)\n"
GCC_OUTPUT = "gcc (GCC) 13.2.1 20231011 (Red Hat 13.2.1-4)\n"
LD_OUTPUT = "GNU ld version 2.40-14.fc39\n"


class FakeRunner(CommandRunner):
    """CommandRunner that answers from a table of canned `--version` outputs."""

    def __init__(self, outputs):
        self.outputs = dict(outputs)
        self.calls = []

    def run(self, argv):
        self.calls.append(list(argv))
        output = self.outputs.get(argv[0])
        if output is None:
            return CommandResult(127, "", f"{argv[0]}: command not found")
        return CommandResult(0, output, "")


class FakeClock:
    """Manually advanced replacement for time.time."""

    def __init__(self, now=1_760_000_000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def llvm_runner():
    """Runner for a host with clang, ld.lld and gcc installed."""
    return FakeRunner({
        "clang": CLANG_OUTPUT,
        "ld.lld": LLD_OUTPUT,
        "gcc": GCC_OUTPUT,
        "ld": LD_OUTPUT,
    })


@pytest.fixture
def gcc_runner():
    """Runner for a host with only the GNU toolchain."""
    return FakeRunner({"gcc": GCC_OUTPUT, "ld": LD_OUTPUT})


@pytest.fixture
def empty_runner():
    """Runner for a host without any compiler."""
    return FakeRunner({})


@pytest.fixture
def llvm_detector(llvm_runner):
    return ToolchainDetector(runner=llvm_runner)


@pytest.fixture
def gcc_detector(gcc_runner):
    return ToolchainDetector(runner=gcc_runner)


@pytest.fixture
def empty_detector(empty_runner):
    return ToolchainDetector(runner=empty_runner)


@pytest.fixture
def clang_toolchain():
    return Toolchain(
        kind=ToolchainKind.CLANG,
        version="17.0.6",
        linker="ld.lld",
        linker_version="17.0.6",
        supports_thin_lto=True,
    )


@pytest.fixture
def gcc_toolchain():
    return Toolchain(
        kind=ToolchainKind.GCC,
        version="13.2.1",
        linker="ld",
        linker_version="2.40",
    )


@pytest.fixture
def releases_payload():
    """A trimmed kernel.org releases.json document."""
    return {
        "latest_stable": {"version": "6.17.3"},
        "releases": [
            {
                "iseol": False,
                "version": "6.18-rc2",
                "moniker": "mainline",
                "released": {"timestamp": 1760904000, "isodate": "2025-10-19"},
            },
            {
                "iseol": False,
                "version": "6.17.3",
                "moniker": "stable",
                "released": {"timestamp": 1760515200, "isodate": "2025-10-15"},
            },
            {
                "iseol": False,
                "version": "6.12.53",
                "moniker": "longterm",
                "released": {"timestamp": 1760515200, "isodate": "2025-10-15"},
            },
            {
                "iseol": True,
                "version": "6.16.12",
                "moniker": "stable",
                "released": {"timestamp": 1759910400, "isodate": "2025-10-08"},
            },
            {
                "iseol": False,
                "version": "next-20251017",
                "moniker": "linux-next",
                "released": {"timestamp": 1760659200, "isodate": "2025-10-17"},
            },
        ],
    }


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache_file(tmp_path):
    """Location of an isolated version cache."""
    return tmp_path / "cache" / "kernelforge" / "versions.json"


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep tests away from the user's cache and from kernel.org."""
    monkeypatch.setenv("KERNELFORGE_CACHE_DIR", str(tmp_path / "default-cache"))
    monkeypatch.setenv("KERNELFORGE_RELEASES_URL", "https://releases.invalid/releases.json")
