#!/usr/bin/env python3
"""Schema definition resolver - Entry point."""
import json
import logging
import sys
from dataclasses import replace

import click
from colorama import Fore, Style, init

from config import app_config
from schemadefs import __version__
from schemadefs.definitions import SchemaDefinitionHandler
from schemadefs.discovery import KubeDiscoveryClient
from schemadefs.errors import RefreshError, is_api_error

# Initialize colorama
init(autoreset=True)


def print_banner():
    """Print application banner."""
    print(f"{Fore.CYAN}{'=' * 44}")
    print(f"{Fore.CYAN}║   {Fore.WHITE}Schema Definition Resolver{Fore.CYAN}           ║")
    print(f"{Fore.CYAN}{'=' * 44}{Style.RESET_ALL}")
    print()


def build_handler(base_url=None):
    """Create a handler talking to the configured API server."""
    kube_api = app_config.kube_api
    if base_url:
        kube_api = replace(kube_api, base_url=base_url)
    return SchemaDefinitionHandler(KubeDiscoveryClient(kube_api))


def run_refresh(handler) -> bool:
    """Refresh the handler, reporting partial failures. Returns False if nothing is usable."""
    try:
        handler.refresh()
    except RefreshError as e:
        if handler.is_ready():
            click.echo(f"{Fore.YELLOW}⚠ Refresh completed with errors: {e}")
        else:
            click.echo(f"{Fore.RED}❌ Refresh failed: {e}")
            return False
    return True


@click.group()
@click.version_option(version=__version__)
@click.option("--server", help="Kubernetes API server URL (overrides KUBE_API_URL)")
@click.option("--log-level", default=None, help="Log level (overrides SCHEMA_LOG_LEVEL)")
@click.pass_context
def cli(ctx, server, log_level):
    """Resolve expanded schema definitions for Kubernetes resources."""
    logging.basicConfig(
        level=(log_level or app_config.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = {"server": server}


@cli.command()
@click.pass_context
def refresh(ctx):
    """Refresh definitions and list the schema to model mapping."""
    print_banner()

    handler = build_handler(ctx.obj["server"])
    click.echo(f"{Fore.CYAN}Connecting to {handler.client.base_url}...")
    if not run_refresh(handler):
        sys.exit(1)

    schema_to_model = handler.schema_to_model
    click.echo(f"{Fore.GREEN}✅ {len(handler.models)} models, {len(schema_to_model)} schemas\n")
    for schema_id in sorted(schema_to_model):
        click.echo(f"  {schema_id:50} → {schema_to_model[schema_id]}")


@cli.command()
@click.argument("schema_id")
@click.pass_context
def describe(ctx, schema_id):
    """Print the expanded definition for SCHEMA_ID as JSON."""
    handler = build_handler(ctx.obj["server"])
    if not run_refresh(handler):
        sys.exit(1)

    try:
        response = handler.resolve(schema_id)
    except Exception as e:
        if not is_api_error(e):
            raise
        click.echo(f"{Fore.RED}❌ {e.status_code}: {e}", err=True)
        sys.exit(1)

    click.echo(json.dumps(response.to_dict(), indent=2, sort_keys=True))


if __name__ == "__main__":
    cli()
