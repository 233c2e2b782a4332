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
Build plan subcommand.

Detects the host toolchain, assembles the configuration for a target kernel
and prints the plan summary, external patches and make invocation.
"""

import os
import sys
from pathlib import Path
from typing import Optional, Tuple

import click

from ..bloat import DEFAULT_CATEGORIES
from ..config import ARCHITECTURES
from ..exceptions import KernelForgeError
from ..models import LtoConfig, Toolchain, ToolchainKind
from ..planner import BuildPlanner
from ..settings import DEFAULT_TARGET_VERSION
from ..toolchain import ToolchainDetector


def select_toolchain(detector: ToolchainDetector, detected: Optional[Toolchain],
                     kind: Optional[str]) -> Optional[Toolchain]:
    """
    Pick the toolchain requested with --toolchain.

    The requested family is looked up on the host so the plan carries its
    real version; a family that cannot be found is still honored with an
    "unknown" version. Returns None when the detected toolchain already
    matches, or when no override was requested.
    """
    if kind is None:
        return None
    wanted = ToolchainKind(kind)
    if detected is not None and detected.kind is wanted:
        return None
    found = detector.detect_kind(wanted)
    if found is not None:
        return found
    if wanted is ToolchainKind.CLANG:
        return Toolchain(ToolchainKind.CLANG, "unknown", "ld.lld", supports_thin_lto=True)
    return Toolchain(ToolchainKind.GCC, "unknown", "ld")


@click.command(name='plan')
@click.argument('version', default=DEFAULT_TARGET_VERSION)
@click.option('--arch', type=click.Choice(sorted(ARCHITECTURES)), default='x86_64',
              show_default=True, help='Target architecture')
@click.option('--toolchain', 'toolchain_kind', type=click.Choice(['clang', 'gcc']),
              help='Use this compiler family instead of the detected one')
@click.option('--thin-lto', is_flag=True, help='Force ThinLTO regardless of toolchain')
@click.option('--desktop/--no-desktop', default=True, show_default=True,
              help='Apply desktop and gaming optimizations')
@click.option('--remove', 'remove', multiple=True, metavar='CATEGORY',
              help='Bloat-removal category (repeatable, default: standard set)')
@click.option('--keep-bloat', is_flag=True, help='Skip bloat removal entirely')
@click.option('--jobs', '-j', type=click.IntRange(min=1), default=None,
              help='Parallel make jobs (default: CPU count)')
@click.option('--output-config', type=click.Path(dir_okay=False, path_type=Path),
              help='Write the generated .config to this file')
@click.pass_context
def plan(ctx, version: str, arch: str, toolchain_kind: Optional[str], thin_lto: bool,
         desktop: bool, remove: Tuple[str, ...], keep_bloat: bool, jobs: Optional[int],
         output_config: Optional[Path]):
    """Plan a kernel build for VERSION (default: 6.6.0)."""
    detector = (ctx.obj or {}).get('detector') or ToolchainDetector()

    try:
        planner = BuildPlanner(version, detector=detector, arch=arch)

        override = select_toolchain(detector, planner.toolchain, toolchain_kind)
        if override is not None:
            planner.force_toolchain(override)
        if thin_lto:
            planner.force_lto(LtoConfig.THIN)
        if desktop:
            planner.apply_desktop_optimizations()
        if not keep_bloat:
            planner.apply_bloat_removal(remove or DEFAULT_CATEGORIES)

        build_plan = planner.finalize()
    except KernelForgeError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(build_plan.summary())

    external = build_plan.external_patches()
    if external:
        click.echo("\nExternal patches:")
        for patch in external:
            click.echo(f"  {patch.name:<12} {patch.url or '-'}")

    click.echo(f"\nBuild command: {' '.join(build_plan.make_command(jobs or os.cpu_count() or 1))}")

    if output_config is not None:
        try:
            output_config.write_text(build_plan.emit(), encoding='utf-8')
        except OSError as e:
            click.echo(f"Error: cannot write {output_config}: {e}", err=True)
            sys.exit(1)
        click.echo(f"Configuration written to {output_config}")

    errors = build_plan.validate()
    if errors:
        click.echo("\nValidation failed:", err=True)
        for error in errors:
            click.echo(f"  - {error}", err=True)
        sys.exit(1)

    click.echo("\n✓ Plan is valid")
