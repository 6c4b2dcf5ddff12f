# Copyright 2026 Firefly Software Solutions Inc.
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
"""secheaders CLI entry point."""

from __future__ import annotations

import click

from secheaders.cli.commands import (
    catalog_command,
    clear_cache_command,
    disable_csp_command,
    disable_hsts_command,
    show_command,
)
from secheaders.cli.console import print_banner


class SecHeadersCLI(click.Group):
    """Click group that shows the banner on help."""

    def format_help(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        print_banner()
        super().format_help(ctx, formatter)


@click.group(cls=SecHeadersCLI)
@click.version_option(package_name="secheaders")
def cli() -> None:
    """Compile and manage HTTP security response headers."""


cli.add_command(show_command)
cli.add_command(disable_csp_command)
cli.add_command(disable_hsts_command)
cli.add_command(clear_cache_command)
cli.add_command(catalog_command)
