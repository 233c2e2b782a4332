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
Informational subcommands: patch tables and bloat-removal categories.
"""

import click

from ..bloat import CATEGORIES, DEFAULT_CATEGORIES
from ..patches import PatchResolver
from ..version import parse_target


@click.command(name='patches')
@click.argument('version')
@click.option('--verbose', '-v', is_flag=True, help='Show patch URLs and descriptions')
def patches_cmd(version: str, verbose: bool):
    """Show the performance patches known for VERSION."""
    resolver = PatchResolver()
    target = parse_target(version)
    if target is None:
        raise click.BadParameter(f"'{version}' is not a kernel version", param_hint='VERSION')

    found = resolver.patches_for(target)
    if not found:
        supported = ", ".join(resolver.supported_versions())
        click.echo(f"No patches known for Linux {target} (patched versions: {supported})")
        return

    click.echo(f"Patches for Linux {target}:")
    for patch in found:
        click.echo(f"  {patch.name:<12} {patch.source.value}")
        if verbose:
            if patch.description:
                click.echo(f"      {patch.description}")
            if patch.url:
                click.echo(f"      {patch.url}")


@click.command(name='categories')
def categories():
    """List bloat-removal categories (* = removed by default)."""
    defaults = set(DEFAULT_CATEGORIES)
    for category in CATEGORIES:
        marker = '*' if category.name in defaults else ' '
        click.echo(f"{marker} {category.slug:<32} {category.description}")
