"""
CLI commands for Have I Been Pwned queries.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import json

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from breachwatch.config import HIBPConfig
from breachwatch.hibp.client import run_query
from breachwatch.hibp.models import (
    InvocationParameters,
    PasswordOutcome,
    QueryResult,
    ValidationType,
)

console = Console()
err_console = Console(stderr=True)

VALIDATION_TYPES = [v.value for v in ValidationType]


def build_config(api_key: str | None, api_base: str | None) -> HIBPConfig:
    """Load configuration from the environment, then apply CLI overrides."""
    config = HIBPConfig.from_env()
    if api_key:
        config.api_key = api_key
    if api_base:
        config.api_base = api_base

    errors = config.validate()
    if errors:
        raise click.UsageError("; ".join(errors))
    return config


def show_result(result: QueryResult, json_output: bool = False) -> None:
    """Write a query result to stdout, or its diagnostic to stderr."""
    if json_output:
        click.echo(json.dumps(result.to_dict(), indent=2, default=str))
        return

    if result.validation_type is ValidationType.PWNED_PASSWORDS:
        outcome = result.password_outcome
        if outcome is PasswordOutcome.PWNED:
            err_console.print(Panel(
                f"[bold red]{escape(result.message)}[/bold red]",
                title="Password Check Result",
            ))
        elif outcome is PasswordOutcome.NOT_PWNED:
            console.print(f"[green]{escape(result.message)}[/green]")
        else:
            err_console.print(f"[yellow]Warning: {escape(result.message)}[/yellow]")
        return

    if result.is_diagnostic:
        err_console.print(f"[yellow]Warning: {escape(result.message)}[/yellow]")
        return

    click.echo(json.dumps(result.data, indent=2))


def dispatch(ctx: click.Context, params: InvocationParameters, json_output: bool = False) -> None:
    """Validate parameters, run the query and show its result."""
    errors = params.validate()
    if errors:
        raise click.UsageError("; ".join(errors), ctx=ctx)

    result = run_query(params, ctx.obj["config"])
    show_result(result, json_output)


@click.group()
@click.option("--api-key", "-k", envvar="HIBP_API_KEY", help="HIBP API key")
@click.option("--api-base", envvar="BREACHWATCH_API_BASE", help="HIBP API base URL")
@click.pass_context
def hibp(ctx: click.Context, api_key: str | None, api_base: str | None) -> None:
    """Have I Been Pwned - breach lookup commands.

    Query breached accounts, breached sites, data classes, pastes and
    pwned passwords using the HIBP API (https://haveibeenpwned.com).

    Set HIBP_API_KEY to send the hibp-api-key header.
    """
    ctx.ensure_object(dict)
    ctx.obj["config"] = build_config(api_key, api_base)


# =============================================================================
# Generic query
# =============================================================================

@hibp.command("query")
@click.option(
    "--validation-type", "-t",
    type=click.Choice(VALIDATION_TYPES, case_sensitive=False),
    required=True,
    help="Query mode",
)
@click.option("--email-address", "-e", help="Account email (BreachedAccount, AllPastes)")
@click.option("--password", "-p", help="Password (PwnedPasswords)")
@click.option("--site-name", "-s", help="Breach name (SingleBreachedSite)")
@click.option("--domain", "-d", help="Domain filter (AllBreachedSites)")
@click.option("--json", "json_output", is_flag=True, help="Output the full result as JSON")
@click.pass_context
def query(
    ctx: click.Context,
    validation_type: str,
    email_address: str | None,
    password: str | None,
    site_name: str | None,
    domain: str | None,
    json_output: bool,
) -> None:
    """Run a single HIBP query selected by --validation-type.

    Example:
        breachwatch hibp query --validation-type BreachedAccount --email-address user@example.com
        breachwatch hibp query -t AllBreachedSites --domain adobe.com
    """
    params = InvocationParameters(
        validation_type=ValidationType.parse(validation_type),
        email_address=email_address,
        password=password,
        site_name=site_name,
        domain=domain,
    )
    dispatch(ctx, params, json_output)


# =============================================================================
# Per-mode shortcuts
# =============================================================================

@hibp.command("account")
@click.argument("email")
@click.option("--json", "json_output", is_flag=True, help="Output the full result as JSON")
@click.pass_context
def check_account(ctx: click.Context, email: str, json_output: bool) -> None:
    """List breaches an email address appears in.

    Example:
        breachwatch hibp account user@example.com
    """
    params = InvocationParameters(ValidationType.BREACHED_ACCOUNT, email_address=email)
    dispatch(ctx, params, json_output)


@hibp.command("breaches")
@click.option("--domain", "-d", help="Filter by domain")
@click.option("--json", "json_output", is_flag=True, help="Output the full result as JSON")
@click.pass_context
def list_breaches(ctx: click.Context, domain: str | None, json_output: bool) -> None:
    """List all breached sites.

    Example:
        breachwatch hibp breaches --domain adobe.com
    """
    params = InvocationParameters(ValidationType.ALL_BREACHED_SITES, domain=domain)
    dispatch(ctx, params, json_output)


@hibp.command("breach")
@click.argument("name")
@click.option("--json", "json_output", is_flag=True, help="Output the full result as JSON")
@click.pass_context
def show_breach(ctx: click.Context, name: str, json_output: bool) -> None:
    """Show details of a single breached site.

    Example:
        breachwatch hibp breach Adobe
    """
    params = InvocationParameters(ValidationType.SINGLE_BREACHED_SITE, site_name=name)
    dispatch(ctx, params, json_output)


@hibp.command("dataclasses")
@click.option("--json", "json_output", is_flag=True, help="Output the full result as JSON")
@click.pass_context
def list_data_classes(ctx: click.Context, json_output: bool) -> None:
    """List all data classes (types of exposed data)."""
    dispatch(ctx, InvocationParameters(ValidationType.DATA_CLASSES), json_output)


@hibp.command("pastes")
@click.argument("email")
@click.option("--json", "json_output", is_flag=True, help="Output the full result as JSON")
@click.pass_context
def check_pastes(ctx: click.Context, email: str, json_output: bool) -> None:
    """List pastes an email address appears in.

    Example:
        breachwatch hibp pastes user@example.com
    """
    params = InvocationParameters(ValidationType.ALL_PASTES, email_address=email)
    dispatch(ctx, params, json_output)


@hibp.command("password")
@click.option("--password", "-p", help="Password to check (or prompts securely)")
@click.option("--json", "json_output", is_flag=True, help="Output the full result as JSON")
@click.pass_context
def check_password(ctx: click.Context, password: str | None, json_output: bool) -> None:
    """Check whether a password appears in the Pwned Passwords corpus.

    Example:
        breachwatch hibp password
    """
    if not password:
        password = click.prompt("Password to check", hide_input=True)

    params = InvocationParameters(ValidationType.PWNED_PASSWORDS, password=password)
    dispatch(ctx, params, json_output)


# =============================================================================
# Configuration
# =============================================================================

@hibp.command("config")
@click.pass_context
def show_config(ctx: click.Context) -> None:
    """Show effective HIBP configuration."""
    settings = ctx.obj["config"].to_dict()

    table = Table(title="HIBP Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    table.add_row(
        "API Key",
        f"[green]Set ({settings['api_key']})[/green]" if settings["api_key"] else "[red]Not set[/red]",
    )
    table.add_row("API Base URL", settings["api_base"])
    table.add_row("User-Agent", settings["user_agent"])

    console.print(table)


def add_hibp_commands(main_cli):
    """Add HIBP commands to main CLI."""
    main_cli.add_command(hibp)
