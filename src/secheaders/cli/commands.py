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
"""CLI commands: inspect compiled headers and recover from bad policies."""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from pathlib import Path
from typing import Any, TypeVar

import click
import yaml  # type: ignore[import-untyped]
from rich.table import Table

from secheaders.cache.adapters.memory import InMemoryCache
from secheaders.catalog import FEATURES, SANDBOX_TOKENS, SOURCE_BASED_DIRECTIVES, SOURCE_KEYWORDS
from secheaders.cli.console import console
from secheaders.core.config import Config
from secheaders.factory import SecurityHeaders, create_security_headers
from secheaders.kernel.exceptions import SecHeadersException
from secheaders.logging.setup import configure_logging
from secheaders.web.nonce import generate_nonce

T = TypeVar("T")

_YAML_SUFFIXES = (".yaml", ".yml")

_MEMORY_CACHE_NOTICE = (
    "The memory header cache lives inside each server process. "
    "Restart running servers to apply this change."
)
_MEMORY_CACHE_CLEAR_NOTICE = (
    "The memory header cache lives inside each server process and cannot be cleared from here. "
    "Restart running servers to recompile their headers."
)
_SHARED_CACHE_NOTICE = (
    "Running servers keep the settings they started with. "
    "Restart them, then run 'secheaders clear-cache' to drop headers they cached in the meantime."
)

config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path("secheaders.yaml"),
    show_default=True,
    help="Settings file (YAML or TOML).",
)


def _load(config_path: Path, profiles: tuple[str, ...] = (), fresh: bool = False) -> SecurityHeaders:
    try:
        config = Config.from_file(config_path, active_profiles=list(profiles))
        configure_logging(config)
        return create_security_headers(config, backend=InMemoryCache() if fresh else None)
    except SecHeadersException as exc:
        raise click.ClickException(str(exc)) from exc


def _run(sh: SecurityHeaders, coro: Coroutine[Any, Any, T]) -> T:
    """Run *coro*, then close the cache backend on the same event loop."""

    async def _main() -> T:
        try:
            return await coro
        finally:
            await sh.aclose()

    return asyncio.run(_main())


def _uses_memory_cache(sh: SecurityHeaders) -> bool:
    return isinstance(sh.builder.cache.backend, InMemoryCache)


def _require_yaml(config_path: Path) -> None:
    if config_path.suffix not in _YAML_SUFFIXES:
        raise click.ClickException(f"Only YAML settings files can be edited, got '{config_path.name}'")


def _persist(config_path: Path, group: str, values: dict[str, Any]) -> None:
    """Write *values* into ``secheaders.<group>`` of a YAML settings file."""
    _require_yaml(config_path)
    data: dict[str, Any] = {}
    if config_path.exists():
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
    section = data.setdefault("secheaders", {}).setdefault(group, {})
    section.update(values)
    with open(config_path, "w") as f:
        yaml.safe_dump(data, f, sort_keys=False)


@click.command("show")
@config_option
@click.option("--profile", "profiles", multiple=True, help="Profile overlay to apply (repeatable).")
@click.option("--nonce", default=None, help="Nonce to substitute into the CSP (random by default).")
def show_command(config_path: Path, profiles: tuple[str, ...], nonce: str | None) -> None:
    """Compile and print every configured header."""
    sh = _load(config_path, profiles, fresh=True)
    headers: dict[str, str] = {}
    _run(sh, sh.builder.apply(headers, nonce or generate_nonce()))

    if not headers:
        console.print("[warning]No security headers are configured.[/warning]")
        return

    table = Table(title="Security Headers", border_style="dim", show_lines=True)
    table.add_column("Header", style="info", no_wrap=True)
    table.add_column("Value", overflow="fold")
    for name, value in headers.items():
        table.add_row(name, value)
    console.print(table)


def _disable(config_path: Path, group: str, header: str) -> None:
    """Write ``enabled: false`` to the settings file, then evict the cached headers."""
    _require_yaml(config_path)
    sh = _load(config_path)
    _persist(config_path, group, {"enabled": False})
    _run(sh, sh.service.disable_csp() if group == "csp" else sh.service.disable_hsts())

    console.print(f"[success]{header} disabled.[/success]")
    console.print(f"[warning]{_MEMORY_CACHE_NOTICE if _uses_memory_cache(sh) else _SHARED_CACHE_NOTICE}[/warning]")


@click.command("disable-csp")
@config_option
def disable_csp_command(config_path: Path) -> None:
    """Disable Content-Security-Policy."""
    _disable(config_path, "csp", "Content-Security-Policy")


@click.command("disable-hsts")
@config_option
def disable_hsts_command(config_path: Path) -> None:
    """Disable Strict-Transport-Security."""
    _disable(config_path, "hsts", "Strict-Transport-Security")


@click.command("clear-cache")
@config_option
def clear_cache_command(config_path: Path) -> None:
    """Drop every cached header so the next response recompiles it."""
    sh = _load(config_path)
    if _uses_memory_cache(sh):
        console.print(f"[warning]{_MEMORY_CACHE_CLEAR_NOTICE}[/warning]")
        return
    _run(sh, sh.builder.invalidate_all())
    console.print("[success]Header cache cleared.[/success]")


@click.command("catalog")
def catalog_command() -> None:
    """List the directives, source keywords, features and sandbox tokens understood."""
    table = Table(title="CSP Directives", border_style="dim")
    table.add_column("Directive", style="info")
    table.add_column("Kind")
    table.add_column("Setting key", style="dim")
    for descriptor in SOURCE_BASED_DIRECTIVES:
        table.add_row(descriptor.name, descriptor.kind.value, descriptor.setting_key)
    console.print(table)

    console.print("\n[info]Source keywords:[/info] " + ", ".join(SOURCE_KEYWORDS))
    console.print("[info]Sandbox tokens:[/info] " + ", ".join(SANDBOX_TOKENS))
    console.print("[info]Features:[/info] " + ", ".join(FEATURES))
