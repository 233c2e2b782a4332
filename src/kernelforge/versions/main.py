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
List kernel versions available for planning.
"""

import json
import sys

import click

from ..catalog import VersionCatalog
from ..exceptions import KernelForgeError


def format_version_table(versions) -> str:
    """Render versions as an aligned text table."""
    lines = [f"{'VERSION':<12} {'CHANNEL':<16} {'RELEASED':<12} EOL"]
    for v in versions:
        lines.append(
            f"{v.version:<12} {v.channel.value:<16} {v.released or '-':<12} "
            f"{'yes' if v.eol else 'no'}"
        )
    return "\n".join(lines)


@click.command(name='versions')
@click.option('--refresh', is_flag=True, help='Ignore the cache and fetch the release list')
@click.option('--json', 'as_json', is_flag=True, help='Print versions as JSON')
@click.option('--cache-file', type=click.Path(dir_okay=False),
              help='Version cache location (default: per-user cache directory)')
@click.pass_context
def versions(ctx, refresh: bool, as_json: bool, cache_file):
    """List kernel releases from kernel.org, the local cache or built-in data."""
    catalog = (ctx.obj or {}).get('catalog') or VersionCatalog(cache_path=cache_file)

    try:
        found = catalog.list_versions_blocking(force_refresh=refresh)
    except KernelForgeError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps([v.to_dict() for v in found], indent=2))
    else:
        click.echo(format_version_table(found))
