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
Tests for kernel configuration assembly and validation.
"""

import pytest
from kernelforge.config import ConfigBuilder, validate_options
from kernelforge.exceptions import ConfigError, ValidationError
from kernelforge.models import ConfigValue


@pytest.fixture
def builder():
    return ConfigBuilder()


class TestConfigBuilder:
    """Test option accumulation and emission."""

    def test_set_and_emit(self, builder):
        builder.set("CONFIG_A")
        builder.set("CONFIG_B", "m")
        builder.set("CONFIG_C", 1000)
        builder.unset("CONFIG_D")

        assert builder.emit() == (
            "CONFIG_A=y\n"
            "CONFIG_B=m\n"
            "CONFIG_C=1000\n"
            "# CONFIG_D is not set\n"
        )

    def test_overwrite_keeps_first_position(self, builder):
        """Test that setting an existing name replaces it in place."""
        builder.set("CONFIG_A")
        builder.set("CONFIG_B")
        builder.unset("CONFIG_A")

        assert builder.snapshot().names() == ["CONFIG_A", "CONFIG_B"]
        assert builder.emit() == "# CONFIG_A is not set\nCONFIG_B=y\n"
        assert len(builder) == 2

    def test_value_classification(self, builder):
        builder.update({
            "CONFIG_ON": "y",
            "CONFIG_OFF": "n",
            "CONFIG_NONE": None,
            "CONFIG_STR": '"cubic"',
        })

        assert builder.get("CONFIG_ON").kind is ConfigValue.ENABLED
        assert builder.get("CONFIG_OFF").kind is ConfigValue.DISABLED
        assert builder.get("CONFIG_NONE").kind is ConfigValue.DISABLED
        assert builder.get("CONFIG_STR").render() == 'CONFIG_STR="cubic"'

    def test_invalid_symbol(self, builder):
        with pytest.raises(ConfigError, match="Invalid Kconfig symbol"):
            builder.set("HZ_1000")
        with pytest.raises(ConfigError):
            builder.set("CONFIG_lower")

    def test_invalid_value(self, builder):
        with pytest.raises(ConfigError, match="Invalid value"):
            builder.set("CONFIG_CMDLINE", "quiet\nsplash")
        with pytest.raises(ConfigError):
            builder.set("CONFIG_CMDLINE", "")

    def test_config_error_is_validation_error(self, builder):
        with pytest.raises(ValidationError):
            builder.set("bogus")

    def test_emit_header(self, builder):
        builder.set("CONFIG_A")

        assert builder.emit(header="Generated\nfor tests") == (
            "# Generated\n# for tests\nCONFIG_A=y\n"
        )

    def test_snapshot_is_independent(self, builder):
        builder.set("CONFIG_A")
        snapshot = builder.snapshot()
        builder.unset("CONFIG_A")
        builder.set("CONFIG_B")

        assert snapshot.emit() == "CONFIG_A=y\n"
        assert "CONFIG_B" not in snapshot

    def test_copy_is_independent(self, builder):
        builder.set("CONFIG_A")
        clone = builder.copy()
        clone.set("CONFIG_B")

        assert "CONFIG_B" in clone
        assert "CONFIG_B" not in builder

    def test_unknown_architecture(self):
        with pytest.raises(ConfigError, match="Unsupported architecture 'sparc'"):
            ConfigBuilder("sparc")


class TestBaseline:
    """Test the single-architecture baseline."""

    def test_x86_64_baseline(self, builder):
        text = builder.baseline().emit()

        assert "CONFIG_X86=y\n" in text
        assert "CONFIG_X86_64=y\n" in text
        assert "CONFIG_64BIT=y\n" in text
        assert "# CONFIG_ARM64 is not set\n" in text
        assert "# CONFIG_RISCV is not set\n" in text
        assert "# CONFIG_ISA is not set\n" in text
        assert "CONFIG_MODULES=y\n" in text
        assert "CONFIG_HZ_300=y\nCONFIG_HZ=300\n" in text
        assert "CONFIG_VFAT_FS=m\n" in text
        assert 'CONFIG_DEFAULT_TCP_CONG="cubic"\n' in text

    def test_arm64_baseline(self):
        text = ConfigBuilder("arm64").baseline().emit()

        assert "CONFIG_ARM64=y\n" in text
        assert "# CONFIG_X86 is not set\n" in text
        assert "# CONFIG_X86_64 is not set\n" in text

    def test_baseline_switches_architecture(self, builder):
        builder.baseline("riscv64")

        assert builder.arch == "riscv64"
        assert builder.get("CONFIG_RISCV").kind is ConfigValue.ENABLED

    def test_baseline_is_valid(self, builder):
        assert builder.baseline().validate("6.6.0") == []


class TestDesktopOptimizations:
    """Test desktop and gaming tuning."""

    def test_timer_and_preemption(self, builder):
        builder.baseline().apply_desktop_optimizations()

        assert builder.get("CONFIG_HZ_1000").kind is ConfigValue.ENABLED
        assert builder.get("CONFIG_HZ").value == "1000"
        assert builder.get("CONFIG_HZ_300").is_disabled
        assert builder.get("CONFIG_PREEMPT").kind is ConfigValue.ENABLED
        assert builder.get("CONFIG_PREEMPT_VOLUNTARY").is_disabled
        assert builder.get("CONFIG_CC_OPTIMIZE_FOR_PERFORMANCE").kind is ConfigValue.ENABLED

    def test_filesystems(self, builder):
        builder.baseline().apply_desktop_optimizations()

        assert builder.get("CONFIG_BTRFS_FS").kind is ConfigValue.ENABLED
        assert builder.get("CONFIG_VFAT_FS").kind is ConfigValue.ENABLED
        assert builder.get("CONFIG_REISERFS_FS").is_disabled

    def test_x86_only_options(self):
        arm = ConfigBuilder("arm64").baseline().apply_desktop_optimizations()
        x86 = ConfigBuilder("x86_64").baseline().apply_desktop_optimizations()

        assert "CONFIG_X86_TSC" not in arm
        assert "CONFIG_X86_TSC" in x86

    def test_desktop_gaming_is_valid(self):
        builder = ConfigBuilder.desktop_gaming()

        assert builder.validate("6.6.0") == []
        assert builder.validate("6.17.0") == []


class TestBloatRemoval:
    """Test category-based option removal."""

    def test_removes_category_options(self, builder):
        builder.baseline().apply_bloat_removal(["Enterprise Features Removal"])

        assert builder.get("CONFIG_DLM").is_disabled
        assert builder.get("CONFIG_GFS2_FS").is_disabled

    def test_accepts_single_name_and_slug(self, builder):
        builder.apply_bloat_removal("embedded-systems-removal")
        assert builder.get("CONFIG_SPI").is_disabled

    def test_target_architecture_is_protected(self):
        builder = ConfigBuilder("arm64").baseline()
        builder.apply_bloat_removal(["Architecture Cleanup"])

        assert builder.get("CONFIG_ARM64").kind is ConfigValue.ENABLED
        assert builder.get("CONFIG_MIPS").is_disabled

    def test_unknown_category_is_reported(self, builder):
        builder.baseline().apply_bloat_removal(["Quantum Drivers", "Quantum Drivers"])

        assert builder.rejected_categories == ["Quantum Drivers"]
        assert builder.validate("6.6.0") == ["Unknown bloat-removal category: 'Quantum Drivers'"]
        assert builder.snapshot().rejected_categories == ("Quantum Drivers",)


class TestValidateOptions:
    """Test cross-option and version validation."""

    def test_option_not_yet_available(self, builder):
        builder.set("CONFIG_SCHED_CLASS_EXT")

        assert validate_options("6.6.0", builder.snapshot()) == [
            "CONFIG_SCHED_CLASS_EXT is not available before Linux 6.12.0 (target is 6.6.0)"
        ]
        assert validate_options("6.12", builder.snapshot()) == []

    def test_option_removed(self, builder):
        builder.set("CONFIG_DECNET")

        errors = builder.validate("6.6.0")
        assert errors == ["CONFIG_DECNET was removed in Linux 6.1.0 (target is 6.6.0)"]

    def test_disabled_options_are_not_checked(self, builder):
        builder.unset("CONFIG_DECNET")
        builder.unset("CONFIG_SCHED_CLASS_EXT")

        assert builder.validate("6.6.0") == []

    def test_bounded_option(self, builder):
        builder.set("CONFIG_BCACHEFS_FS")

        assert builder.validate("6.6.0")
        assert builder.validate("6.12.0") == []
        assert builder.validate("6.18.0")

    def test_multiple_timer_frequencies(self, builder):
        builder.set("CONFIG_HZ_300")
        builder.set("CONFIG_HZ_1000")

        assert builder.validate("6.6.0") == [
            "Multiple timer frequencies enabled: CONFIG_HZ_300, CONFIG_HZ_1000"
        ]

    def test_timer_frequency_mismatch(self, builder):
        builder.set("CONFIG_HZ_1000")
        builder.set("CONFIG_HZ", 300)

        assert builder.validate("6.6.0") == ["CONFIG_HZ=300 does not match CONFIG_HZ_1000"]

    def test_multiple_preemption_models(self, builder):
        builder.set("CONFIG_PREEMPT_VOLUNTARY")
        builder.set("CONFIG_PREEMPT")

        errors = builder.validate("6.6.0")
        assert len(errors) == 1
        assert errors[0].startswith("Multiple preemption models enabled")

    def test_all_violations_reported(self, builder):
        """Test that validation collects every problem instead of stopping."""
        builder.set("CONFIG_DECNET")
        builder.set("CONFIG_HZ_100")
        builder.set("CONFIG_HZ_250")
        builder.set("CONFIG_PREEMPT_NONE")
        builder.set("CONFIG_PREEMPT_RT")

        assert len(builder.validate("6.6.0")) == 3

    def test_unrecognized_version(self, builder):
        builder.set("CONFIG_SCHED_CLASS_EXT")

        assert builder.validate("abc") == [
            "Unrecognized kernel version 'abc': version constraints not checked"
        ]
